"""
Product Service

Catalog management: products, categories and stock listings.
"""

import logging
from uuid import UUID

from app.core.domain import Err, Money, Ok, Result, fail
from app.core.interfaces import IUnitOfWork
from app.domains.ecommerce.application.dto import CreateProductRequest, PageResult, UpdateProductRequest
from app.domains.ecommerce.application.ports import IProductRepository
from app.domains.ecommerce.domain.entities import Category, Product
from app.domains.ecommerce.domain.errors import CommonErrors, ProductErrors

from .base import abort, rollback_on_error

logger = logging.getLogger(__name__)


class ProductService:
    """
    Product use cases over one unit of work.

    Example:
        ```python
        service = ProductService(uow, supported_currencies=["BRL"])
        result = await service.create(CreateProductRequest(...))
        ```
    """

    def __init__(self, unit_of_work: IUnitOfWork, supported_currencies: list[str] | None = None):
        self._unit_of_work = unit_of_work
        self._products = unit_of_work.get_repository(IProductRepository)
        self._supported_currencies = [c.upper() for c in (supported_currencies or ["BRL"])]

    # ==================== Queries ====================

    async def get_products(self, page: int = 1, page_size: int = 20) -> Result[PageResult[Product]]:
        products, total = await self._products.list_products(page, page_size)
        return Ok(PageResult(products, total, page, page_size))

    async def get_by_id(self, product_id: UUID) -> Result[Product]:
        product = await self._products.get_by_id(product_id)
        if product is None:
            return fail(ProductErrors.product_not_found(product_id))
        return Ok(product)

    async def get_low_stock(self, threshold: int = 10, page: int = 1, page_size: int = 20) -> Result[PageResult[Product]]:
        products, total = await self._products.get_low_stock(threshold, page, page_size)
        return Ok(PageResult(products, total, page, page_size))

    async def get_categories(self) -> Result[list[Category]]:
        return Ok(await self._products.get_categories())

    async def get_category_by_id(self, category_id: UUID) -> Result[Category]:
        category = await self._products.get_category_by_id(category_id)
        if category is None:
            return fail(ProductErrors.category_not_found(category_id))
        return Ok(category)

    # ==================== Commands ====================

    async def create_category(self, name: str, description: str = "") -> Result[Category]:
        created = Category.create(name, description)
        if isinstance(created, Err):
            return created

        async with rollback_on_error(self._unit_of_work, "create_category"):
            await self._products.create_category(created.value)
            await self._unit_of_work.commit()
            return created

    async def create(self, request: CreateProductRequest) -> Result[Product]:
        if request.currency_code.upper() not in self._supported_currencies:
            return fail(CommonErrors.unsupported_currency(request.currency_code))

        async with rollback_on_error(self._unit_of_work, "create_product"):
            missing = await self._missing_categories(request.categories)
            if missing:
                return fail(ProductErrors.category_not_found(category_id) for category_id in missing)

            created = Product.create(
                name=request.name,
                description=request.description,
                price=Money(request.currency_code, request.price),
                stock=request.stock,
                image_url=request.image_url,
                status=request.status,
                categories=request.categories,
            )
            if isinstance(created, Err):
                return created

            await self._products.create(created.value)
            await self._unit_of_work.commit()
            logger.info(f"Product created: {created.value.id}")
            return created

    async def update(self, product_id: UUID, request: UpdateProductRequest) -> Result[Product]:
        async with rollback_on_error(self._unit_of_work, "update_product"):
            product = await self._products.get_by_id(product_id)
            if product is None:
                return fail(ProductErrors.product_not_found(product_id))

            if request.categories is not None:
                missing = await self._missing_categories(request.categories)
                if missing:
                    return fail(ProductErrors.category_not_found(category_id) for category_id in missing)

            new_price = None
            if request.price is not None:
                currency = (request.currency_code or product.price.currency_code).upper()
                if currency not in self._supported_currencies:
                    return fail(CommonErrors.unsupported_currency(currency))
                new_price = Money(currency, request.price)

            changes = [
                product.update_name(request.name),
                product.update_description(request.description),
                product.update_price(new_price),
                product.update_stock(request.stock),
                product.update_image_url(request.image_url),
                product.update_status(request.status),
                product.update_categories(request.categories),
            ]
            if any(changes):
                await self._products.update(product)
                await self._unit_of_work.commit()
                logger.info(f"Product updated: {product_id}")
            return Ok(product)

    async def delete(self, product_id: UUID) -> Result[None]:
        async with rollback_on_error(self._unit_of_work, "delete_product"):
            if not await self._products.delete(product_id):
                return await abort(self._unit_of_work, fail(ProductErrors.product_not_found(product_id)))
            await self._unit_of_work.commit()
            return Ok(None)

    async def _missing_categories(self, category_ids: set[UUID]) -> list[UUID]:
        missing = []
        for category_id in category_ids:
            if await self._products.get_category_by_id(category_id) is None:
                missing.append(category_id)
        return missing
