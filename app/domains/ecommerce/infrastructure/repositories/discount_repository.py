"""
Discount Repository Implementation

SQLAlchemy implementation of IDiscountRepository: discounts, their
category and cart links, and the per-order discount history.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import and_, delete, func, insert, or_, select

from app.core.domain import EntityNotFoundException, Money, utc_now
from app.core.shared.logger import get_repository_logger
from app.domains.ecommerce.application.ports import IDiscountRepository
from app.domains.ecommerce.domain.entities import Discount, DiscountHistory
from app.domains.ecommerce.domain.value_objects import DiscountType
from app.domains.ecommerce.infrastructure.persistence.sqlalchemy import (
    DiscountHistoryModel,
    DiscountModel,
    discount_carts,
    discount_categories,
    product_categories,
)

from .base import SQLAlchemyRepository, rehydrate

logger = get_repository_logger("discount")


class SQLAlchemyDiscountRepository(SQLAlchemyRepository, IDiscountRepository):
    """SQLAlchemy implementation of discount repository."""

    # ==================== Discounts ====================

    async def get_by_id(self, discount_id: UUID) -> Discount | None:
        model = await self.session.get(DiscountModel, discount_id)
        return await self._to_entity(model) if model else None

    async def get_by_code(self, code: str) -> Discount | None:
        model = await self.session.scalar(select(DiscountModel).where(DiscountModel.code == code.strip().upper()))
        return await self._to_entity(model) if model else None

    async def filter(
        self,
        code: str | None = None,
        discount_type: DiscountType | None = None,
        is_active: bool | None = None,
        auto_apply: bool | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Discount], int]:
        statement = select(DiscountModel)
        if code:
            statement = statement.where(DiscountModel.code.contains(code.strip().upper()))
        if discount_type is not None:
            statement = statement.where(DiscountModel.discount_type == discount_type.value)
        if is_active is not None:
            statement = statement.where(DiscountModel.is_active.is_(is_active))
        if auto_apply is not None:
            statement = statement.where(DiscountModel.auto_apply.is_(auto_apply))
        statement = statement.order_by(DiscountModel.created_at.desc(), DiscountModel.id)

        models, total = await self._paginate(statement, page, page_size)
        return [await self._to_entity(m) for m in models], total

    async def create(self, discount: Discount) -> UUID:
        self.session.add(
            DiscountModel(
                id=discount.id,
                code=discount.code,
                discount_type=discount.discount_type.value,
                fixed_amount=discount.fixed_amount,
                percentage=discount.percentage,
                max_uses=discount.max_uses,
                uses=discount.uses,
                min_order_amount=discount.min_order_amount,
                max_uses_per_user=discount.max_uses_per_user,
                valid_from=discount.valid_from,
                valid_to=discount.valid_to,
                is_active=discount.is_active,
                auto_apply=discount.auto_apply,
                created_at=discount.created_at,
                updated_at=discount.updated_at,
            )
        )
        await self.session.flush()
        await self._replace_categories(discount.id, discount.categories)
        return discount.id

    async def update(self, discount: Discount) -> None:
        model = await self.session.get(DiscountModel, discount.id)
        if model is None:
            raise EntityNotFoundException("Discount", discount.id)

        model.code = discount.code
        model.fixed_amount = discount.fixed_amount
        model.percentage = discount.percentage
        model.max_uses = discount.max_uses
        model.uses = discount.uses
        model.min_order_amount = discount.min_order_amount
        model.max_uses_per_user = discount.max_uses_per_user
        model.valid_from = discount.valid_from
        model.valid_to = discount.valid_to
        model.is_active = discount.is_active
        model.auto_apply = discount.auto_apply
        model.updated_at = discount.updated_at
        await self.session.flush()

        if set(await self._category_ids(discount.id)) != discount.categories:
            await self._replace_categories(discount.id, discount.categories)

    async def delete(self, discount_id: UUID) -> None:
        model = await self.session.get(DiscountModel, discount_id)
        if model is None:
            return
        await self.session.execute(delete(discount_categories).where(discount_categories.c.discount_id == discount_id))
        await self.session.execute(delete(discount_carts).where(discount_carts.c.discount_id == discount_id))
        await self.session.delete(model)
        await self.session.flush()

    # ==================== Cart links ====================

    async def get_discounts_to_apply(
        self,
        cart_id: UUID,
        cart_total: Decimal,
        customer_id: str,
        product_ids: list[UUID],
    ) -> list[Discount]:
        """
        Usable discounts for a cart: the ones linked to it plus auto-apply
        discounts that are global or share a category with a cart product.

        Candidates are returned in creation order; none takes precedence.
        """
        now = utc_now()
        linked = select(discount_carts.c.discount_id).where(discount_carts.c.cart_id == cart_id)
        cart_categories = select(product_categories.c.category_id).where(
            product_categories.c.product_id.in_(product_ids)
        )
        has_categories = (
            select(discount_categories.c.discount_id)
            .where(discount_categories.c.discount_id == DiscountModel.id)
            .exists()
        )
        matches_cart = (
            select(discount_categories.c.discount_id)
            .where(
                discount_categories.c.discount_id == DiscountModel.id,
                discount_categories.c.category_id.in_(cart_categories),
            )
            .exists()
        )

        statement = (
            select(DiscountModel)
            .where(
                DiscountModel.is_active.is_(True),
                DiscountModel.valid_from <= now,
                DiscountModel.valid_to >= now,
                DiscountModel.uses < DiscountModel.max_uses,
                DiscountModel.min_order_amount <= cart_total,
                or_(
                    DiscountModel.id.in_(linked),
                    and_(DiscountModel.auto_apply.is_(True), or_(~has_categories, matches_cart)),
                ),
            )
            .order_by(DiscountModel.created_at, DiscountModel.id)
        )
        models = (await self.session.scalars(statement)).all()

        discounts = []
        for model in models:
            if await self.count_customer_usages(customer_id, model.id) < model.max_uses_per_user:
                discounts.append(await self._to_entity(model))
        logger.debug("Discount candidates resolved", cart_id=str(cart_id), count=len(discounts))
        return discounts

    async def apply_to_cart(self, cart_id: UUID, discount_id: UUID) -> None:
        exists = await self.session.scalar(
            select(func.count())
            .select_from(discount_carts)
            .where(discount_carts.c.cart_id == cart_id, discount_carts.c.discount_id == discount_id)
        )
        if not exists:
            await self.session.execute(insert(discount_carts).values(cart_id=cart_id, discount_id=discount_id))

    async def clear_applied_discounts(self, cart_id: UUID) -> None:
        await self.session.execute(delete(discount_carts).where(discount_carts.c.cart_id == cart_id))

    # ==================== History ====================

    async def count_customer_usages(self, customer_id: str, discount_id: UUID | None = None) -> int:
        statement = (
            select(func.count()).select_from(DiscountHistoryModel).where(DiscountHistoryModel.customer_id == customer_id)
        )
        if discount_id is not None:
            statement = statement.where(DiscountHistoryModel.discount_id == discount_id)
        return int(await self.session.scalar(statement) or 0)

    async def count_recent_by_customer(self, customer_id: str, since: datetime) -> int:
        return int(
            await self.session.scalar(
                select(func.count())
                .select_from(DiscountHistoryModel)
                .where(DiscountHistoryModel.customer_id == customer_id, DiscountHistoryModel.applied_at >= since)
            )
            or 0
        )

    async def create_history(self, history: DiscountHistory) -> None:
        self.session.add(
            DiscountHistoryModel(
                id=history.id,
                order_id=history.order_id,
                customer_id=history.customer_id,
                discount_id=history.discount_id,
                discount_type=history.discount_type.value,
                discount_amount=history.discount_amount.amount,
                currency_code=history.discount_amount.currency_code,
                percentage=history.percentage,
                fixed_amount=history.fixed_amount,
                coupon_code=history.coupon_code,
                applied_at=history.applied_at,
            )
        )
        await self.session.flush()

    async def get_history_by_order(self, order_id: UUID) -> list[DiscountHistory]:
        models = await self.session.scalars(
            select(DiscountHistoryModel)
            .where(DiscountHistoryModel.order_id == order_id)
            .order_by(DiscountHistoryModel.applied_at)
        )
        return [
            DiscountHistory(
                order_id=m.order_id,
                customer_id=m.customer_id,
                discount_id=m.discount_id,
                discount_type=DiscountType(m.discount_type),
                discount_amount=Money(m.currency_code, m.discount_amount),
                percentage=m.percentage,
                fixed_amount=m.fixed_amount,
                coupon_code=m.coupon_code,
                applied_at=m.applied_at,
                id=m.id,
            )
            for m in models.all()
        ]

    async def has_history(self, discount_id: UUID) -> bool:
        count = await self.session.scalar(
            select(func.count()).select_from(DiscountHistoryModel).where(DiscountHistoryModel.discount_id == discount_id)
        )
        return bool(count)

    # ==================== Mapping ====================

    async def _category_ids(self, discount_id: UUID) -> list[UUID]:
        rows = await self.session.execute(
            select(discount_categories.c.category_id).where(discount_categories.c.discount_id == discount_id)
        )
        return [row[0] for row in rows]

    async def _replace_categories(self, discount_id: UUID, category_ids: set[UUID]) -> None:
        await self.session.execute(delete(discount_categories).where(discount_categories.c.discount_id == discount_id))
        if category_ids:
            await self.session.execute(
                insert(discount_categories),
                [{"discount_id": discount_id, "category_id": category_id} for category_id in category_ids],
            )

    async def _to_entity(self, model: DiscountModel) -> Discount:
        result = Discount.from_(
            discount_id=model.id,
            code=model.code,
            discount_type=DiscountType(model.discount_type),
            fixed_amount=model.fixed_amount,
            percentage=model.percentage,
            max_uses=model.max_uses,
            uses=model.uses,
            min_order_amount=model.min_order_amount,
            max_uses_per_user=model.max_uses_per_user,
            valid_from=model.valid_from,
            valid_to=model.valid_to,
            is_active=model.is_active,
            auto_apply=model.auto_apply,
            created_at=model.created_at,
            categories=set(await self._category_ids(model.id)),
        )
        return rehydrate(result, "discount", model.id)
