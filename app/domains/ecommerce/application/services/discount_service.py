"""
Discount Service

Discount catalog, usage accounting and history. The helpers used while an
order is being placed (`get_discounts_to_apply`, `register_usage`,
`create_discount_history`, `clear_applied_discounts`) never commit: they
take part in the caller's transaction.
"""

import logging
from uuid import UUID

from app.core.domain import Err, Ok, Result, fail
from app.core.interfaces import IUnitOfWork
from app.domains.ecommerce.application.dto import CreateDiscountRequest, DiscountFilter, PageResult
from app.domains.ecommerce.application.ports import ICartRepository, IDiscountRepository, IProductRepository
from app.domains.ecommerce.domain.entities import Cart, Discount, DiscountHistory
from app.domains.ecommerce.domain.errors import CartErrors, DiscountErrors, ProductErrors

from .base import abort, rollback_on_error

logger = logging.getLogger(__name__)


class DiscountService:
    """Discount use cases over one unit of work."""

    def __init__(self, unit_of_work: IUnitOfWork):
        self._unit_of_work = unit_of_work
        self._discounts = unit_of_work.get_repository(IDiscountRepository)
        self._carts = unit_of_work.get_repository(ICartRepository)
        self._products = unit_of_work.get_repository(IProductRepository)

    # ==================== Queries ====================

    async def get_discounts(self, filters: DiscountFilter) -> Result[PageResult[Discount]]:
        discounts, total = await self._discounts.filter(
            code=filters.code.strip().upper() if filters.code else None,
            discount_type=filters.discount_type,
            is_active=filters.is_active,
            auto_apply=filters.auto_apply,
            page=filters.page,
            page_size=filters.page_size,
        )
        return Ok(PageResult(discounts, total, filters.page, filters.page_size))

    async def get_by_id(self, discount_id: UUID) -> Result[Discount]:
        discount = await self._discounts.get_by_id(discount_id)
        if discount is None:
            return fail(DiscountErrors.discount_not_found(discount_id))
        return Ok(discount)

    async def get_by_code(self, code: str) -> Result[Discount]:
        normalized = code.strip().upper()
        discount = await self._discounts.get_by_code(normalized)
        if discount is None:
            return fail(DiscountErrors.discount_not_found_by_code(normalized))
        return Ok(discount)

    async def get_history_by_order(self, order_id: UUID) -> Result[list[DiscountHistory]]:
        return Ok(await self._discounts.get_history_by_order(order_id))

    async def get_applicable_discounts(self, user_id: str) -> Result[list[Discount]]:
        """Discounts that would be applied to the user's cart at checkout."""
        cart = await self._carts.get_by_user(user_id)
        if cart is None:
            return fail(CartErrors.cart_not_found(user_id))
        return Ok(await self.get_discounts_to_apply(cart, user_id))

    async def get_discounts_to_apply(self, cart: Cart, user_id: str) -> list[Discount]:
        """
        Candidates for a cart: discounts linked to it plus matching auto-apply
        discounts. All of them stack; no best-discount-wins selection.
        """
        return await self._discounts.get_discounts_to_apply(
            cart.id,
            cart.total_amount.amount,
            user_id,
            [item.product_id for item in cart.items],
        )

    # ==================== Commands ====================

    async def create(self, request: CreateDiscountRequest) -> Result[Discount]:
        async with rollback_on_error(self._unit_of_work, "create_discount"):
            for category_id in request.categories:
                if await self._products.get_category_by_id(category_id) is None:
                    return fail(ProductErrors.category_not_found(category_id))

            created = Discount.create(
                code=request.code,
                discount_type=request.discount_type,
                fixed_amount=request.fixed_amount,
                percentage=request.percentage,
                max_uses=request.max_uses,
                min_order_amount=request.min_order_amount,
                max_uses_per_user=request.max_uses_per_user,
                valid_from=request.valid_from,
                valid_to=request.valid_to,
                auto_apply=request.auto_apply,
                categories=request.categories,
            )
            if isinstance(created, Err):
                return created

            await self._discounts.create(created.value)
            await self._unit_of_work.commit()
            logger.info(f"Discount created: {created.value.id} ({created.value.discount_type.value})")
            return created

    async def increment_usage(self, discount_id: UUID) -> Result[Discount]:
        """Count one use; the discount is deactivated once it reaches its cap."""
        async with rollback_on_error(self._unit_of_work, "increment_discount_usage"):
            discount = await self._discounts.get_by_id(discount_id)
            if discount is None:
                return fail(DiscountErrors.discount_not_found(discount_id))

            registered = await self.register_usage(discount)
            if isinstance(registered, Err):
                return await abort(self._unit_of_work, registered)

            await self._unit_of_work.commit()
            return Ok(discount)

    async def register_usage(self, discount: Discount) -> Result[None]:
        incremented = discount.increment_usage()
        if isinstance(incremented, Err):
            return incremented
        if discount.reached_max_uses:
            discount.deactivate()
            logger.info(f"Discount {discount.id} reached {discount.max_uses} uses and was deactivated")
        await self._discounts.update(discount)
        return Ok(None)

    async def deactivate(self, discount_id: UUID) -> Result[Discount]:
        async with rollback_on_error(self._unit_of_work, "deactivate_discount"):
            discount = await self._discounts.get_by_id(discount_id)
            if discount is None:
                return fail(DiscountErrors.discount_not_found(discount_id))

            discount.deactivate()
            await self._discounts.update(discount)
            await self._unit_of_work.commit()
            return Ok(discount)

    async def delete(self, discount_id: UUID) -> Result[None]:
        """Delete an unused discount; used ones can only be deactivated."""
        async with rollback_on_error(self._unit_of_work, "delete_discount"):
            discount = await self._discounts.get_by_id(discount_id)
            if discount is None:
                return fail(DiscountErrors.discount_not_found(discount_id))
            if discount.uses > 0 or await self._discounts.has_history(discount_id):
                return fail(DiscountErrors.has_history(discount_id))

            await self._discounts.delete(discount_id)
            await self._unit_of_work.commit()
            return Ok(None)

    async def create_discount_history(self, history: DiscountHistory) -> None:
        await self._discounts.create_history(history)

    async def clear_applied_discounts(self, cart_id: UUID) -> None:
        await self._discounts.clear_applied_discounts(cart_id)
