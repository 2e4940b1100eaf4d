"""
Product Entity for E-commerce Domain

Catalog products with stock control, plus the Category they belong to.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from app.core.domain import (
    AggregateRoot,
    Entity,
    Error,
    Money,
    Ok,
    Result,
    ValidationError,
    fail,
    generate_uuid,
)

from ..value_objects.order_status import ProductStatus


@dataclass(eq=False)
class Category(Entity[UUID]):
    """Product category."""

    name: str = ""
    description: str = ""

    @classmethod
    def create(cls, name: str, description: str = "") -> Result["Category"]:
        if not name or not name.strip():
            return fail(Error.validation("Name is required", "ERR_NAME_REQUIRED", "name"))
        return Ok(cls(id=generate_uuid(), name=name.strip(), description=description.strip()))


@dataclass(eq=False)
class Product(AggregateRoot[UUID]):
    """
    Product aggregate root.

    Stock never goes negative: a decrement larger than the available
    stock is refused without touching the product.
    """

    name: str = ""
    description: str = ""
    price: Money = field(default_factory=Money.zero)
    stock: int = 0
    image_url: str = ""
    status: ProductStatus = ProductStatus.ACTIVE
    categories: set[UUID] = field(default_factory=set)

    @staticmethod
    def _validate(
        product_id: UUID | None,
        name: str,
        description: str,
        price: Money,
        stock: int,
        image_url: str,
    ) -> list[ValidationError]:
        errors: list[ValidationError] = []
        if product_id is None:
            errors.append(Error.validation("Id is required", "ERR_ID_REQUIRED", "id"))
        if not name or not name.strip():
            errors.append(Error.validation("Name is required", "ERR_NAME_REQUIRED", "name"))
        if not description or not description.strip():
            errors.append(Error.validation("Description is required", "ERR_DESCRIPTION_REQUIRED", "description"))
        if not price.is_positive():
            errors.append(Error.validation("Price must be greater than 0", "ERR_PRICE_INVALID", "price"))
        if stock < 0:
            errors.append(Error.validation("Stock cannot be negative", "ERR_STOCK_INVALID", "stock"))
        if not image_url or not image_url.strip():
            errors.append(Error.validation("ImageUrl is required", "ERR_IMAGE_URL_REQUIRED", "imageUrl"))
        return errors

    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        price: Money,
        stock: int,
        image_url: str,
        status: ProductStatus = ProductStatus.ACTIVE,
        categories: set[UUID] | None = None,
    ) -> Result["Product"]:
        product_id = generate_uuid()
        errors = cls._validate(product_id, name, description, price, stock, image_url)
        if status != ProductStatus.ACTIVE:
            errors.append(Error.validation("Status must be active", "ERR_STATUS_MUST_BE_ACTIVE", "status"))
        if errors:
            return fail(errors)
        return Ok(
            cls(
                id=product_id,
                name=name.strip(),
                description=description.strip(),
                price=price,
                stock=stock,
                image_url=image_url.strip(),
                status=status,
                categories=set(categories or ()),
            )
        )

    @classmethod
    def from_(
        cls,
        product_id: UUID,
        name: str,
        description: str,
        price: Money,
        stock: int,
        image_url: str,
        status: ProductStatus,
        categories: set[UUID] | None = None,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ) -> Result["Product"]:
        errors = cls._validate(product_id, name, description, price, stock, image_url)
        if errors:
            return fail(errors)
        product = cls(
            id=product_id,
            name=name,
            description=description,
            price=price,
            stock=stock,
            image_url=image_url,
            status=status,
            categories=set(categories or ()),
        )
        if created_at is not None:
            product.created_at = created_at
        if updated_at is not None:
            product.updated_at = updated_at
        return Ok(product)

    # Stock

    def has_stock(self, quantity: int) -> bool:
        return self.stock >= quantity

    def is_available(self) -> bool:
        return self.status.is_available_for_sale() and self.stock > 0

    def decrement_stock(self, quantity: int) -> bool:
        """
        Take quantity units out of stock.

        Returns:
            False, leaving the stock untouched, when there is not enough
            stock; True otherwise.

        Raises:
            ValueError: If quantity is negative
        """
        if quantity < 0:
            raise ValueError("Quantity must be greater than 0")
        if self.stock < quantity:
            return False
        self.stock -= quantity
        self.touch()
        return True

    # Updates: each returns whether something changed

    def update_name(self, name: str | None) -> bool:
        if not name or not name.strip() or name.strip() == self.name:
            return False
        self.name = name.strip()
        self.touch()
        return True

    def update_description(self, description: str | None) -> bool:
        if not description or not description.strip() or description.strip() == self.description:
            return False
        self.description = description.strip()
        self.touch()
        return True

    def update_price(self, price: Money | None) -> bool:
        if price is None or not price.is_positive() or price == self.price:
            return False
        self.price = price
        self.touch()
        return True

    def update_stock(self, stock: int | None) -> bool:
        if stock is None or stock < 0 or stock == self.stock:
            return False
        self.stock = stock
        self.touch()
        return True

    def update_image_url(self, image_url: str | None) -> bool:
        if not image_url or not image_url.strip() or image_url.strip() == self.image_url:
            return False
        self.image_url = image_url.strip()
        self.touch()
        return True

    def update_status(self, status: ProductStatus | None) -> bool:
        if status is None or status == self.status:
            return False
        self.status = status
        self.touch()
        return True

    def update_categories(self, categories: set[UUID] | None) -> bool:
        if categories is None or set(categories) == self.categories:
            return False
        self.categories = set(categories)
        self.touch()
        return True
