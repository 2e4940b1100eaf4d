"""
E-commerce Error Factories

Business errors returned inside Err results, grouped per aggregate.
Codes are stable and safe to expose to API clients.
"""

from decimal import Decimal
from uuid import UUID

from app.core.domain import Error


class CommonErrors:
    @staticmethod
    def failure(description: str) -> Error:
        return Error.failure(description, "ERR_FAILURE")

    @staticmethod
    def unknown() -> Error:
        return Error.unexpected("An unknown error has occurred.", "ERR_UNKNOWN")

    @staticmethod
    def unsupported_currency(currency_code: str) -> Error:
        return Error.validation(f"Currency '{currency_code}' is not supported.", "ERR_CURRENCY", "currencyCode")


class CartErrors:
    @staticmethod
    def cart_not_found(user_id: str) -> Error:
        return Error.not_found(f"Cart of user with id = '{user_id}' was not found.", "ERR_CART_NOT_FOUND")

    @staticmethod
    def cart_item_not_found(product_id: UUID) -> Error:
        return Error.not_found(f"Cart item with product id = '{product_id}' was not found.", "ERR_CART_ITEM_NOT_FOUND")

    @staticmethod
    def cart_empty(user_id: str) -> Error:
        return Error.failure(f"Cart of user with id = '{user_id}' is empty.", "ERR_CART_EMPTY")


class OrderErrors:
    @staticmethod
    def order_not_found(order_id: UUID) -> Error:
        return Error.not_found(f"Order with id = '{order_id}' was not found.", "ERR_ORDER_NOT_FOUND")

    @staticmethod
    def status_transition(current: str, target: str) -> Error:
        return Error.failure(
            f"Cannot change order status from '{current}' to '{target}'.",
            "ERR_STATUS_TRANSITION",
        )

    @staticmethod
    def already_processed(order_id: UUID) -> Error:
        return Error.conflict(
            f"Order with id = '{order_id}' was already shipped or completed.",
            "ERR_ORDER_ALREADY_PROCESSED",
        )


class ProductErrors:
    @staticmethod
    def product_not_found(product_id: UUID) -> Error:
        return Error.not_found(f"Product with id = '{product_id}' was not found.", "ERR_PRODUCT_NOT_FOUND")

    @staticmethod
    def product_out_of_stock(product_id: UUID) -> Error:
        return Error.failure(f"Product with id = '{product_id}' is out of stock.", "ERR_PRODUCT_OUT_OF_STOCK")

    @staticmethod
    def category_not_found(category_id: UUID) -> Error:
        return Error.not_found(f"Category with id = '{category_id}' was not found.", "ERR_CATEGORY_NOT_FOUND")


class DiscountErrors:
    @staticmethod
    def discount_not_found(discount_id: UUID) -> Error:
        return Error.not_found(f"Discount with id = '{discount_id}' was not found.", "ERR_DISCOUNT_NOT_FOUND")

    @staticmethod
    def discount_not_found_by_code(code: str) -> Error:
        return Error.not_found(f"Discount with code = '{code}' was not found.", "ERR_DISCOUNT_NOT_FOUND")

    @staticmethod
    def discount_not_valid(discount_id: UUID) -> Error:
        return Error.failure(f"Discount with id = '{discount_id}' is not valid for use.", "ERR_DISCOUNT_INVALID")

    @staticmethod
    def min_order_not_reached(min_order_amount: Decimal) -> Error:
        return Error.failure(
            f"The minimum order amount of {min_order_amount} was not reached.",
            "ERR_MIN_ORDER_AMOUNT",
        )

    @staticmethod
    def max_usage_reached(max_uses: int) -> Error:
        return Error.conflict(f"Max usage of {max_uses} reached.", "ERR_MAX_USAGE_REACHED")

    @staticmethod
    def has_history(discount_id: UUID) -> Error:
        return Error.conflict(
            f"Discount with id = '{discount_id}' has history and cannot be deleted. "
            "We recommend deactivating it instead.",
            "ERR_DISCOUNT_HAS_HISTORY",
        )

    @staticmethod
    def too_many_discounts(max_recent: int, window_days: int) -> Error:
        return Error.failure(
            f"Customer already received {max_recent} discounts in the last {window_days} days.",
            "ERR_TOO_MANY_DISCOUNTS",
        )


class PaymentErrors:
    @staticmethod
    def invalid_payment_method(method: str) -> Error:
        return Error.failure(f"Invalid payment method: '{method}'.", "ERR_PAYMENT_METHOD")

    @staticmethod
    def payment_failed() -> Error:
        return Error.failure(
            "Payment failed. Please check your payment details and try again.",
            "ERR_PAYMENT_FAILED",
        )

    @staticmethod
    def already_processed(payment_id: UUID) -> Error:
        return Error.failure(
            f"Payment with id = '{payment_id}' has already been refunded or cancelled.",
            "ERR_PAYMENT_ALREADY_PROCESSED",
        )

    @staticmethod
    def payment_not_found(transaction_id: UUID) -> Error:
        return Error.not_found(
            f"Payment with transaction id = '{transaction_id}' was not found.",
            "ERR_PAYMENT_NOT_FOUND",
        )

    @staticmethod
    def status_transition(current: str, target: str) -> Error:
        return Error.failure(
            f"Cannot change payment status from '{current}' to '{target}'.",
            "ERR_STATUS_TRANSITION",
        )


class ShippingErrors:
    @staticmethod
    def invalid_zip_code(zip_code: str) -> Error:
        return Error.validation(f"Zip code '{zip_code}' is invalid.", "ERR_INVALID_ZIP_CODE", "zipCode")
