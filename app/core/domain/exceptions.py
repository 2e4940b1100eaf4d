"""
Domain Exceptions

Faults that abort an operation: broken wiring, corrupted stored aggregates,
currency mixing, unreachable integrations. Insufficient stock, invalid
coupons and other expected outcomes are Result values, never exceptions.
"""

from typing import Any


class DomainException(Exception):
    """
    Base fault of the e-commerce core.

    Subclasses set `code` and `http_status`; `details` carries whatever helps
    to diagnose the fault in logs (never shown to customers in production).
    """

    code = "DOMAIN_ERROR"
    http_status = 500

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = {key: value for key, value in details.items() if value is not None}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class EntityNotFoundException(DomainException):
    """An aggregate expected to be stored is gone (e.g. updated after a concurrent delete)."""

    code = "ENTITY_NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            f"{entity_type} {entity_id} does not exist",
            entity_type=entity_type,
            entity_id=str(entity_id),
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class BusinessRuleViolationException(DomainException):
    """Stored data breaks an aggregate invariant."""

    code = "BUSINESS_RULE_VIOLATION"

    def __init__(self, rule: str, message: str | None = None):
        super().__init__(message or f"Business rule violated: {rule}", rule=rule)
        self.rule = rule


class CurrencyMismatchException(DomainException, ValueError):
    """Money arithmetic across two currencies."""

    code = "CURRENCY_MISMATCH"

    def __init__(self, left: str, right: str, operation: str = "combine"):
        super().__init__(f"Cannot {operation} {left} and {right}", left=left, right=right, operation=operation)


class InvalidOperationException(DomainException):
    """An object was used outside of its lifecycle (e.g. a unit of work that was never started)."""

    code = "INVALID_OPERATION"

    def __init__(self, operation: str, current_state: str, message: str | None = None):
        super().__init__(
            message or f"Cannot perform '{operation}' while {current_state}",
            operation=operation,
            current_state=current_state,
        )
        self.operation = operation
        self.current_state = current_state


class ConfigurationException(DomainException):
    """Wiring error: unknown strategy, duplicated gateway, unregistered repository port."""

    code = "CONFIGURATION_ERROR"

    def __init__(self, component: str, message: str):
        super().__init__(message, component=component)
        self.component = component


class IntegrationException(DomainException):
    """An external service (postal lookup, gateway) could not be reached."""

    code = "INTEGRATION_ERROR"
    http_status = 502

    def __init__(self, service: str, message: str, original_error: Exception | None = None):
        super().__init__(
            message,
            service=service,
            original_error=str(original_error) if original_error else None,
        )
        self.service = service
        self.original_error = original_error
