"""
Discount Entity for E-commerce Domain

Fixed, percentage and coupon discounts with usage caps and a validity
window, and the immutable history record written for each application.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import UUID

from app.core.domain import (
    AggregateRoot,
    Error,
    Money,
    Ok,
    Result,
    ValidationError,
    fail,
    generate_uuid,
    utc_now,
)

from ..errors import DiscountErrors
from ..value_objects.discount_type import DiscountType

MAX_VALIDITY_AHEAD = timedelta(days=365)


def _truncate_to_minute(value: datetime) -> datetime:
    return value.replace(second=0, microsecond=0)


def _validate_fixed(fixed_amount: Decimal | None, percentage: Decimal | None) -> list[ValidationError]:
    errors = []
    if fixed_amount is None or fixed_amount <= 0:
        errors.append(Error.validation("Amount must be greater than zero", "ERR_AMT_GT_0", "fixedAmount"))
    if percentage is not None:
        errors.append(
            Error.validation("Percentage cannot be provided for fixed discount type", "ERR_PERC_INV", "percentage")
        )
    return errors


def _validate_percentage(fixed_amount: Decimal | None, percentage: Decimal | None) -> list[ValidationError]:
    errors = []
    if percentage is None or percentage <= 0 or percentage > 100:
        errors.append(Error.validation("Percentage must be between 0 and 100", "ERR_PERC_INV", "percentage"))
    if fixed_amount is not None:
        errors.append(
            Error.validation(
                "Fixed amount cannot be provided for percentage discount type", "ERR_AMT_INV", "fixedAmount"
            )
        )
    return errors


def _validate_coupon(fixed_amount: Decimal | None, percentage: Decimal | None) -> list[ValidationError]:
    errors = []
    has_fixed = fixed_amount is not None and fixed_amount > 0
    has_percentage = percentage is not None and 0 < percentage <= 100
    if not has_fixed and not has_percentage:
        message = "Either fixed amount or percentage must be provided"
        errors.append(Error.validation(message, "ERR_AMT_OR_PERC_REQ", "fixedAmount"))
        errors.append(Error.validation(message, "ERR_AMT_OR_PERC_REQ", "percentage"))
    if fixed_amount is not None and fixed_amount <= 0:
        errors.append(Error.validation("Amount must be greater than zero", "ERR_AMT_GT_0", "fixedAmount"))
    if percentage is not None and (percentage <= 0 or percentage > 100):
        errors.append(Error.validation("Percentage must be between 0 and 100", "ERR_PERC_INV", "percentage"))
    return errors


_AMOUNT_VALIDATORS = {
    DiscountType.FIXED: _validate_fixed,
    DiscountType.PERCENTAGE: _validate_percentage,
    DiscountType.COUPON: _validate_coupon,
}


def validate_discount(
    code: str | None,
    discount_type: DiscountType,
    fixed_amount: Decimal | None,
    percentage: Decimal | None,
    max_uses: int,
    min_order_amount: Decimal,
    max_uses_per_user: int,
    valid_from: datetime,
    valid_to: datetime,
    is_create: bool = True,
    now: datetime | None = None,
) -> list[ValidationError]:
    """
    Validate discount attributes.

    On creation the validity window cannot start or end in the past;
    rehydrated discounts only get the structural checks and the upper
    bound of the window.
    """
    if not isinstance(discount_type, DiscountType):
        return [Error.validation("Invalid discount type", "ERR_TYPE_INV", "discountType")]

    now = now or utc_now()
    errors: list[ValidationError] = []

    if discount_type == DiscountType.COUPON and (not code or not code.strip()):
        errors.append(Error.validation("Code is required", "ERR_CODE_REQ", "code"))

    errors.extend(_AMOUNT_VALIDATORS[discount_type](fixed_amount, percentage))

    if max_uses < 1:
        errors.append(Error.validation("Max uses must be at least 1", "ERR_MAXU", "maxUses"))
    if min_order_amount < 0:
        errors.append(Error.validation("Minimum order cannot be negative", "ERR_MIN_ORD", "minOrderAmount"))
    if max_uses_per_user < 1:
        errors.append(Error.validation("Max uses per user must be at least 1", "ERR_MAXU", "maxUsesPerUser"))

    if _truncate_to_minute(valid_from) >= _truncate_to_minute(valid_to):
        errors.append(Error.validation("Invalid validity period", "ERR_DATE_INV", "validity"))
    if is_create and valid_from < now:
        errors.append(Error.validation("Valid from date cannot be in the past", "ERR_DATE_INV", "validFrom"))
    if is_create and valid_to < now:
        errors.append(Error.validation("Valid to date cannot be in the past", "ERR_DATE_INV", "validTo"))
    if valid_from > now + MAX_VALIDITY_AHEAD:
        errors.append(
            Error.validation("Valid from date cannot be more than 365 days in the future", "ERR_DATE_INV", "validFrom")
        )
    if valid_to > now + MAX_VALIDITY_AHEAD:
        errors.append(
            Error.validation("Valid to date cannot be more than 365 days in the future", "ERR_DATE_INV", "validTo")
        )
    return errors


@dataclass(eq=False)
class Discount(AggregateRoot[UUID]):
    """
    Discount aggregate root.

    Exactly one of fixed_amount/percentage is set for Fixed and Percentage
    discounts; a Coupon needs at least one of them. Percentages are in the
    0-100 range. `uses` never goes past `max_uses`.
    """

    code: str | None = None
    discount_type: DiscountType = DiscountType.FIXED
    fixed_amount: Decimal | None = None
    percentage: Decimal | None = None
    max_uses: int = 1
    uses: int = 0
    min_order_amount: Decimal = Decimal("0")
    max_uses_per_user: int = 1
    valid_from: datetime = field(default_factory=utc_now)
    valid_to: datetime = field(default_factory=utc_now)
    is_active: bool = True
    auto_apply: bool = False
    categories: set[UUID] = field(default_factory=set)

    @classmethod
    def create(
        cls,
        code: str | None,
        discount_type: DiscountType,
        fixed_amount: Decimal | None,
        percentage: Decimal | None,
        max_uses: int,
        min_order_amount: Decimal,
        max_uses_per_user: int,
        valid_from: datetime,
        valid_to: datetime,
        auto_apply: bool = False,
        categories: set[UUID] | None = None,
        now: datetime | None = None,
    ) -> Result["Discount"]:
        errors = validate_discount(
            code,
            discount_type,
            fixed_amount,
            percentage,
            max_uses,
            min_order_amount,
            max_uses_per_user,
            valid_from,
            valid_to,
            now=now,
        )
        if errors:
            return fail(errors)
        return Ok(
            cls(
                id=generate_uuid(),
                code=code.strip().upper() if code else None,
                discount_type=discount_type,
                fixed_amount=fixed_amount,
                percentage=percentage,
                max_uses=max_uses,
                uses=0,
                min_order_amount=min_order_amount,
                max_uses_per_user=max_uses_per_user,
                valid_from=valid_from,
                valid_to=valid_to,
                is_active=True,
                auto_apply=auto_apply,
                categories=set(categories or ()),
            )
        )

    @classmethod
    def from_(
        cls,
        discount_id: UUID,
        code: str | None,
        discount_type: DiscountType,
        fixed_amount: Decimal | None,
        percentage: Decimal | None,
        max_uses: int,
        uses: int,
        min_order_amount: Decimal,
        max_uses_per_user: int,
        valid_from: datetime,
        valid_to: datetime,
        is_active: bool,
        auto_apply: bool,
        created_at: datetime,
        categories: set[UUID] | None = None,
    ) -> Result["Discount"]:
        errors = validate_discount(
            code,
            discount_type,
            fixed_amount,
            percentage,
            max_uses,
            min_order_amount,
            max_uses_per_user,
            valid_from,
            valid_to,
            is_create=False,
            now=created_at,
        )
        if uses < 0 or uses > max_uses:
            errors.append(Error.validation("Uses must be between 0 and max uses", "ERR_USES_INV", "uses"))
        if errors:
            return fail(errors)
        return Ok(
            cls(
                id=discount_id,
                code=code,
                discount_type=discount_type,
                fixed_amount=fixed_amount,
                percentage=percentage,
                max_uses=max_uses,
                uses=uses,
                min_order_amount=min_order_amount,
                max_uses_per_user=max_uses_per_user,
                valid_from=valid_from,
                valid_to=valid_to,
                is_active=is_active,
                auto_apply=auto_apply,
                categories=set(categories or ()),
                created_at=created_at,
                updated_at=created_at,
            )
        )

    @property
    def reached_max_uses(self) -> bool:
        return self.uses >= self.max_uses

    def is_valid_for_use(self, order_amount: Decimal, user_usages: int, now: datetime | None = None) -> bool:
        """Check whether the discount can be applied to an order right now."""
        now = now or utc_now()
        return (
            self.is_active
            and self.valid_from <= now <= self.valid_to
            and self.uses < self.max_uses
            and order_amount >= self.min_order_amount
            and user_usages < self.max_uses_per_user
        )

    def increment_usage(self) -> Result[None]:
        """Count one more use. Deactivation at the cap is left to the caller."""
        if self.reached_max_uses:
            return fail(DiscountErrors.max_usage_reached(self.max_uses))
        self.uses += 1
        self.touch()
        return Ok(None)

    def deactivate(self) -> None:
        self.is_active = False
        self.touch()


@dataclass(frozen=True)
class DiscountHistory:
    """Immutable record of one discount applied to one order."""

    order_id: UUID
    customer_id: str
    discount_id: UUID
    discount_type: DiscountType
    discount_amount: Money
    percentage: Decimal | None = None
    fixed_amount: Decimal | None = None
    coupon_code: str | None = None
    applied_at: datetime = field(default_factory=utc_now)
    id: UUID = field(default_factory=generate_uuid)

    @classmethod
    def record(cls, order_id: UUID, customer_id: str, discount: Discount, amount: Money) -> "DiscountHistory":
        return cls(
            order_id=order_id,
            customer_id=customer_id,
            discount_id=discount.id,
            discount_type=discount.discount_type,
            discount_amount=amount,
            percentage=discount.percentage,
            fixed_amount=discount.fixed_amount,
            coupon_code=discount.code,
        )
