"""
Cart Service

Shopping cart use cases. A cart is created lazily the first time a user
asks for it.
"""

import logging
from uuid import UUID

from app.core.domain import Err, Money, Ok, Result, fail, first_error
from app.core.interfaces import IUnitOfWork
from app.domains.ecommerce.application.discounts import DiscountStrategyFactory
from app.domains.ecommerce.application.ports import ICartRepository, IDiscountRepository, IProductRepository
from app.domains.ecommerce.domain.entities import Cart
from app.domains.ecommerce.domain.errors import CartErrors, DiscountErrors, ProductErrors

from .base import abort, rollback_on_error

logger = logging.getLogger(__name__)


class CartService:
    """Cart use cases over one unit of work."""

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        discount_strategies: DiscountStrategyFactory,
        default_currency: str = "BRL",
    ):
        self._unit_of_work = unit_of_work
        self._carts = unit_of_work.get_repository(ICartRepository)
        self._products = unit_of_work.get_repository(IProductRepository)
        self._discounts = unit_of_work.get_repository(IDiscountRepository)
        self._discount_strategies = discount_strategies
        self._default_currency = default_currency

    async def get_cart(self, user_id: str) -> Result[Cart]:
        """Get the user's cart, creating an empty one on first access."""
        cart = await self._carts.get_by_user(user_id)
        if cart is not None:
            return Ok(cart)

        created = Cart.create(user_id, self._default_currency)
        if isinstance(created, Err):
            return created

        async with rollback_on_error(self._unit_of_work, "create_cart"):
            await self._carts.create(created.value)
            await self._unit_of_work.commit()
            logger.info(f"Cart created for user {user_id}")
            return created

    async def add_item(self, user_id: str, product_id: UUID, quantity: int) -> Result[Cart]:
        cart_result = await self.get_cart(user_id)
        if isinstance(cart_result, Err):
            return cart_result
        cart = cart_result.value

        async with rollback_on_error(self._unit_of_work, "add_cart_item"):
            product = await self._products.get_by_id(product_id)
            if product is None:
                return fail(ProductErrors.product_not_found(product_id))
            if not product.status.is_available_for_sale():
                return fail(ProductErrors.product_out_of_stock(product_id))

            existing = cart.find_item(product_id)
            requested = quantity + (existing.quantity if existing else 0)
            if not product.has_stock(requested):
                return fail(ProductErrors.product_out_of_stock(product_id))

            added = cart.add_item(product.id, quantity, product.price)
            if isinstance(added, Err):
                return added

            await self._refresh_discount(cart)
            await self._carts.update(cart)
            await self._unit_of_work.commit()
            return Ok(cart)

    async def update_item_quantity(self, user_id: str, product_id: UUID, quantity: int) -> Result[Cart]:
        async with rollback_on_error(self._unit_of_work, "update_cart_item"):
            cart = await self._carts.get_by_user(user_id)
            if cart is None:
                return fail(CartErrors.cart_not_found(user_id))

            product = await self._products.get_by_id(product_id)
            if product is None:
                return fail(ProductErrors.product_not_found(product_id))
            if not product.has_stock(quantity):
                return fail(ProductErrors.product_out_of_stock(product_id))

            updated = cart.update_item_quantity(product_id, quantity)
            if isinstance(updated, Err):
                return updated

            await self._refresh_discount(cart)
            await self._carts.update(cart)
            await self._unit_of_work.commit()
            return Ok(cart)

    async def remove_item(self, user_id: str, product_id: UUID) -> Result[Cart]:
        async with rollback_on_error(self._unit_of_work, "remove_cart_item"):
            cart = await self._carts.get_by_user(user_id)
            if cart is None:
                return fail(CartErrors.cart_not_found(user_id))

            removed = cart.remove_item(product_id)
            if isinstance(removed, Err):
                return removed

            await self._refresh_discount(cart)
            await self._carts.update(cart)
            await self._unit_of_work.commit()
            return Ok(cart)

    async def clear_cart(self, user_id: str) -> Result[None]:
        async with rollback_on_error(self._unit_of_work, "clear_cart"):
            cart = await self._carts.get_by_user(user_id)
            if cart is None:
                return fail(CartErrors.cart_not_found(user_id))

            cart.clear()
            await self._carts.update(cart)
            await self._discounts.clear_applied_discounts(cart.id)
            await self._unit_of_work.commit()
            return Ok(None)

    async def apply_coupon(self, user_id: str, code: str) -> Result[Cart]:
        """Link a coupon to the cart and refresh the cart's discounted total."""
        async with rollback_on_error(self._unit_of_work, "apply_coupon"):
            cart = await self._carts.get_by_user(user_id)
            if cart is None:
                return fail(CartErrors.cart_not_found(user_id))
            if cart.is_empty:
                return fail(CartErrors.cart_empty(user_id))

            normalized = code.strip().upper()
            discount = await self._discounts.get_by_code(normalized)
            if discount is None:
                return fail(DiscountErrors.discount_not_found_by_code(normalized))

            total = cart.total_amount
            if discount.min_order_amount > total.amount:
                return fail(DiscountErrors.min_order_not_reached(discount.min_order_amount))
            usages = await self._discounts.count_customer_usages(user_id, discount.id)
            if not discount.is_valid_for_use(total.amount, usages):
                return fail(DiscountErrors.discount_not_valid(discount.id))

            await self._discounts.apply_to_cart(cart.id, discount.id)
            refreshed = await self._calculate_cart_discount(cart)
            if isinstance(refreshed, Err):
                return await abort(self._unit_of_work, refreshed)

            cart.apply_discount(refreshed.value)
            await self._carts.update(cart)
            await self._unit_of_work.commit()
            logger.info(f"Coupon {normalized} applied to cart {cart.id}: {refreshed.value}")
            return Ok(cart)

    async def _calculate_cart_discount(self, cart: Cart) -> Result[Money]:
        candidates = await self._discounts.get_discounts_to_apply(
            cart.id,
            cart.total_amount.amount,
            cart.user_id,
            [item.product_id for item in cart.items],
        )
        total = Money.zero(cart.currency_code)
        for discount in candidates:
            strategy = self._discount_strategies.get(discount.discount_type)
            amount = await strategy.calculate_total_discount(cart.total_amount, [discount.id], cart.user_id)
            if isinstance(amount, Err):
                return amount
            total = (total + amount.value).min(cart.total_amount)
        return Ok(total)

    async def _refresh_discount(self, cart: Cart) -> None:
        """Recompute an applied discount after the cart content changed."""
        if cart.discount_amount is None:
            return
        if cart.is_empty:
            cart.discount_amount = None
            await self._discounts.clear_applied_discounts(cart.id)
            return

        refreshed = await self._calculate_cart_discount(cart)
        if isinstance(refreshed, Err):
            logger.info(f"Discount of cart {cart.id} no longer applies: {first_error(refreshed).code}")
            cart.discount_amount = None
            await self._discounts.clear_applied_discounts(cart.id)
            return
        cart.apply_discount(refreshed.value)
