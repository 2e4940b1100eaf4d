"""
Lifecycle states of orders, payments and products.

The transition tables are the single source of truth for what an entity
may move to; entities consult them before mutating.
"""

from app.core.domain import StatusEnum


class OrderStatus(StatusEnum):
    CREATED = "created"
    PENDING = "pending"
    PROCESSING = "processing"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    @classmethod
    def transition_table(cls):
        return _ORDER_TRANSITIONS

    def can_be_cancelled(self) -> bool:
        """Orders can be cancelled until they leave the warehouse."""
        return self.can_transition_to(OrderStatus.CANCELLED)


_ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.CREATED: frozenset({OrderStatus.PENDING, OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.COMPLETED}),
}


class PaymentStatus(StatusEnum):
    """
    Payment record states.

    PROCESSING -> SUCCEEDED | FAILED | CANCELLED
    SUCCEEDED -> REFUND_REQUESTED | CANCELLED
    REFUND_REQUESTED -> REFUNDED

    Everything else is terminal. UNKNOWN marks an unmapped gateway status
    and is never reachable through a transition.
    """

    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REFUND_REQUESTED = "refund_requested"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @classmethod
    def transition_table(cls):
        return _PAYMENT_TRANSITIONS


_PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PROCESSING: frozenset({PaymentStatus.SUCCEEDED, PaymentStatus.FAILED, PaymentStatus.CANCELLED}),
    PaymentStatus.SUCCEEDED: frozenset({PaymentStatus.REFUND_REQUESTED, PaymentStatus.CANCELLED}),
    PaymentStatus.REFUND_REQUESTED: frozenset({PaymentStatus.REFUNDED}),
}


class ProductStatus(StatusEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"

    def is_available_for_sale(self) -> bool:
        return self == ProductStatus.ACTIVE
