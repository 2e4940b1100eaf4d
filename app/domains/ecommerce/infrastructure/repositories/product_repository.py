"""
Product Repository Implementation

SQLAlchemy implementation of IProductRepository. Categories live in the
same repository: they have no lifecycle of their own beyond the catalog.
"""

from uuid import UUID

from sqlalchemy import delete, insert, select

from app.core.domain import EntityNotFoundException, Money
from app.core.shared.logger import get_repository_logger
from app.domains.ecommerce.application.ports import IProductRepository
from app.domains.ecommerce.domain.entities import Category, Product
from app.domains.ecommerce.domain.value_objects import ProductStatus
from app.domains.ecommerce.infrastructure.persistence.sqlalchemy import (
    CategoryModel,
    ProductModel,
    product_categories,
)

from .base import SQLAlchemyRepository, rehydrate

logger = get_repository_logger("product")


class SQLAlchemyProductRepository(SQLAlchemyRepository, IProductRepository):
    """
    SQLAlchemy implementation of product repository.

    Stock changes go through `update`, inside the caller's transaction, so
    an aborted order restores the stock on rollback.
    """

    # ==================== Products ====================

    async def get_by_id(self, product_id: UUID) -> Product | None:
        model = await self.session.get(ProductModel, product_id)
        if model is None:
            return None
        return await self._to_entity(model)

    async def list_products(self, page: int = 1, page_size: int = 20) -> tuple[list[Product], int]:
        statement = select(ProductModel).order_by(ProductModel.name, ProductModel.id)
        models, total = await self._paginate(statement, page, page_size)
        return [await self._to_entity(m) for m in models], total

    async def get_low_stock(self, threshold: int, page: int = 1, page_size: int = 20) -> tuple[list[Product], int]:
        """Products with stock at or below `threshold`, lowest stock first."""
        statement = (
            select(ProductModel)
            .where(ProductModel.stock <= threshold)
            .order_by(ProductModel.stock, ProductModel.name)
        )
        models, total = await self._paginate(statement, page, page_size)
        return [await self._to_entity(m) for m in models], total

    async def create(self, product: Product) -> UUID:
        self.session.add(
            ProductModel(
                id=product.id,
                name=product.name,
                description=product.description,
                price=product.price.amount,
                currency_code=product.price.currency_code,
                stock=product.stock,
                image_url=product.image_url,
                status=product.status.value,
                created_at=product.created_at,
                updated_at=product.updated_at,
            )
        )
        await self.session.flush()
        await self._replace_categories(product.id, product.categories)
        logger.debug("Product inserted", product_id=str(product.id))
        return product.id

    async def update(self, product: Product) -> None:
        model = await self.session.get(ProductModel, product.id)
        if model is None:
            raise EntityNotFoundException("Product", product.id)

        model.name = product.name
        model.description = product.description
        model.price = product.price.amount
        model.currency_code = product.price.currency_code
        model.stock = product.stock
        model.image_url = product.image_url
        model.status = product.status.value
        model.updated_at = product.updated_at
        await self.session.flush()

        if set(await self._category_ids(product.id)) != product.categories:
            await self._replace_categories(product.id, product.categories)

    async def delete(self, product_id: UUID) -> bool:
        model = await self.session.get(ProductModel, product_id)
        if model is None:
            return False
        await self.session.execute(delete(product_categories).where(product_categories.c.product_id == product_id))
        await self.session.delete(model)
        await self.session.flush()
        return True

    # ==================== Categories ====================

    async def get_categories(self) -> list[Category]:
        models = await self.session.scalars(select(CategoryModel).order_by(CategoryModel.name))
        return [self._category_to_entity(m) for m in models.all()]

    async def get_category_by_id(self, category_id: UUID) -> Category | None:
        model = await self.session.get(CategoryModel, category_id)
        return self._category_to_entity(model) if model else None

    async def create_category(self, category: Category) -> UUID:
        self.session.add(
            CategoryModel(
                id=category.id,
                name=category.name,
                description=category.description,
                created_at=category.created_at,
                updated_at=category.updated_at,
            )
        )
        await self.session.flush()
        return category.id

    # ==================== Mapping ====================

    async def _category_ids(self, product_id: UUID) -> list[UUID]:
        rows = await self.session.execute(
            select(product_categories.c.category_id).where(product_categories.c.product_id == product_id)
        )
        return [row[0] for row in rows]

    async def _replace_categories(self, product_id: UUID, category_ids: set[UUID]) -> None:
        await self.session.execute(delete(product_categories).where(product_categories.c.product_id == product_id))
        if category_ids:
            await self.session.execute(
                insert(product_categories),
                [{"product_id": product_id, "category_id": category_id} for category_id in category_ids],
            )

    async def _to_entity(self, model: ProductModel) -> Product:
        result = Product.from_(
            product_id=model.id,
            name=model.name,
            description=model.description,
            price=Money(model.currency_code, model.price),
            stock=model.stock,
            image_url=model.image_url,
            status=ProductStatus(model.status),
            categories=set(await self._category_ids(model.id)),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
        return rehydrate(result, "product", model.id)

    @staticmethod
    def _category_to_entity(model: CategoryModel) -> Category:
        return Category(
            id=model.id,
            name=model.name,
            description=model.description,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
