"""
Cart Repository Implementation

SQLAlchemy implementation of ICartRepository.
"""

from collections.abc import Sequence

from sqlalchemy import select

from app.core.domain import EntityNotFoundException, Money
from app.domains.ecommerce.application.ports import ICartRepository
from app.domains.ecommerce.domain.entities import Cart, CartItem
from app.domains.ecommerce.infrastructure.persistence.sqlalchemy import CartItemModel, CartModel

from .base import SQLAlchemyRepository, rehydrate


class SQLAlchemyCartRepository(SQLAlchemyRepository, ICartRepository):
    """Carts and their items; items are synchronized on every update."""

    async def get_by_user(self, user_id: str) -> Cart | None:
        model = await self.session.scalar(select(CartModel).where(CartModel.user_id == user_id))
        if model is None:
            return None
        items = await self.session.scalars(
            select(CartItemModel)
            .where(CartItemModel.cart_id == model.id)
            .order_by(CartItemModel.position, CartItemModel.id)
        )
        return self._to_entity(model, items.all())

    async def create(self, cart: Cart) -> None:
        self.session.add(
            CartModel(
                id=cart.id,
                user_id=cart.user_id,
                currency_code=cart.currency_code,
                discount_amount=cart.discount_amount.amount if cart.discount_amount else None,
                created_at=cart.created_at,
                updated_at=cart.updated_at,
            )
        )
        # Parent row first so item foreign keys resolve
        await self.session.flush()
        self.session.add_all(self._item_model(cart, item, position) for position, item in enumerate(cart.items))
        await self.session.flush()

    async def update(self, cart: Cart) -> None:
        model = await self.session.get(CartModel, cart.id)
        if model is None:
            raise EntityNotFoundException("Cart", cart.id)

        model.currency_code = cart.currency_code
        model.discount_amount = cart.discount_amount.amount if cart.discount_amount else None
        model.updated_at = cart.updated_at

        existing = {
            item.id: item
            for item in (
                await self.session.scalars(select(CartItemModel).where(CartItemModel.cart_id == cart.id))
            ).all()
        }
        for position, item in enumerate(cart.items):
            item_model = existing.pop(item.id, None)
            if item_model is None:
                self.session.add(self._item_model(cart, item, position))
            else:
                item_model.position = position
                item_model.quantity = item.quantity
                item_model.unit_price = item.unit_price.amount
                item_model.currency_code = item.unit_price.currency_code
        for stale in existing.values():
            await self.session.delete(stale)
        await self.session.flush()

    @staticmethod
    def _item_model(cart: Cart, item: CartItem, position: int) -> CartItemModel:
        return CartItemModel(
            id=item.id,
            cart_id=cart.id,
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price=item.unit_price.amount,
            currency_code=item.unit_price.currency_code,
            position=position,
        )

    @staticmethod
    def _to_entity(model: CartModel, items: Sequence[CartItemModel]) -> Cart:
        result = Cart.from_(
            cart_id=model.id,
            user_id=model.user_id,
            items=[
                CartItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=Money(item.currency_code, item.unit_price),
                    id=item.id,
                )
                for item in items
            ],
            created_at=model.created_at,
            updated_at=model.updated_at,
            currency_code=model.currency_code,
            discount_amount=(
                Money(model.currency_code, model.discount_amount) if model.discount_amount is not None else None
            ),
        )
        return rehydrate(result, "cart", model.id)
