"""
Unit Tests for ProductService
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from app.core.domain import Money, errors_of
from app.domains.ecommerce.application.dto import CreateProductRequest, UpdateProductRequest
from app.domains.ecommerce.application.services import ProductService
from app.domains.ecommerce.domain.entities import Category
from tests.utils import ProductBuilder, assert_err, assert_field_error


@pytest.fixture
def service(uow):
    return ProductService(uow, supported_currencies=["BRL", "usd"])


def _request(**overrides) -> CreateProductRequest:
    data = {
        "name": "Teclado Mecanico",
        "description": "Teclado ABNT2 switch marrom",
        "price": Decimal("349.90"),
        "stock": 15,
        "image_url": "https://cdn.ecomify.test/products/teclado.png",
    }
    data.update(overrides)
    return CreateProductRequest(**data)


class TestCreateProduct:
    @pytest.mark.asyncio
    async def test_creates_product(self, service, uow, repositories):
        product = (await service.create(_request())).value

        assert product.price == Money.of("BRL", "349.90")
        repositories.products.create.assert_awaited_once_with(product)
        uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unsupported_currency(self, service, repositories):
        result = await service.create(_request(currency_code="EUR"))

        assert_field_error(result, "currencyCode", "ERR_CURRENCY")
        repositories.products.get_category_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_every_missing_category_is_reported(self, service, repositories):
        result = await service.create(_request(categories={uuid4(), uuid4()}))

        assert [e.code for e in errors_of(result)] == ["ERR_CATEGORY_NOT_FOUND"] * 2

    @pytest.mark.asyncio
    async def test_invalid_product(self, service, uow):
        result = await service.create(_request(stock=-1))

        assert_field_error(result, "stock")
        uow.commit.assert_not_awaited()


class TestUpdateProduct:
    @pytest.mark.asyncio
    async def test_unchanged_product_is_not_saved(self, service, uow, repositories):
        product = ProductBuilder().build()
        repositories.products.get_by_id.return_value = product

        result = await service.update(product.id, UpdateProductRequest(name=product.name))

        assert result.value is product
        repositories.products.update.assert_not_awaited()
        uow.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_price_change_keeps_currency(self, service, repositories):
        product = ProductBuilder().with_price("50.00").build()
        repositories.products.get_by_id.return_value = product

        result = await service.update(product.id, UpdateProductRequest(price=Decimal("45.00"), stock=2))

        assert result.value.price == Money.of("BRL", "45.00")
        assert product.stock == 2
        repositories.products.update.assert_awaited_once_with(product)

    @pytest.mark.asyncio
    async def test_categories_must_exist(self, service, repositories):
        product = ProductBuilder().build()
        category = Category.create("Perifericos").value
        repositories.products.get_by_id.return_value = product
        repositories.products.get_category_by_id.side_effect = lambda cid: category if cid == category.id else None

        ok = await service.update(product.id, UpdateProductRequest(categories={category.id}))
        missing = await service.update(product.id, UpdateProductRequest(categories={uuid4()}))

        assert ok.value.categories == {category.id}
        assert_err(missing, "ERR_CATEGORY_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_unknown_product(self, service):
        assert_err(await service.update(uuid4(), UpdateProductRequest(name="x")), "ERR_PRODUCT_NOT_FOUND")


class TestProductQueries:
    @pytest.mark.asyncio
    async def test_low_stock_listing(self, service, repositories):
        product = ProductBuilder().with_stock(2).build()
        repositories.products.get_low_stock.return_value = ([product], 1)

        page = (await service.get_low_stock(threshold=5)).value

        assert page.items == [product]
        repositories.products.get_low_stock.assert_awaited_once_with(5, 1, 20)

    @pytest.mark.asyncio
    async def test_product_listing(self, service, repositories):
        products = [ProductBuilder().build(), ProductBuilder().build()]
        repositories.products.list_products.return_value = (products, 12)

        page = (await service.get_products(page=3, page_size=2)).value

        assert page.items == products
        assert page.total_pages == 6
        repositories.products.list_products.assert_awaited_once_with(3, 2)

    @pytest.mark.asyncio
    async def test_delete_unknown_product(self, service, uow, repositories):
        repositories.products.delete.return_value = False

        assert_err(await service.delete(uuid4()), "ERR_PRODUCT_NOT_FOUND")
        uow.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_create_category(self, service, repositories):
        category = (await service.create_category("Monitores")).value

        repositories.products.create_category.assert_awaited_once_with(category)
