"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Result: Ok/Err sum type for expected business outcomes
- Exceptions: Faults that abort an operation
"""

from app.core.domain.entities import (
    AggregateRoot,
    Entity,
    generate_uuid,
    utc_now,
)
from app.core.domain.exceptions import (
    BusinessRuleViolationException,
    ConfigurationException,
    CurrencyMismatchException,
    DomainException,
    EntityNotFoundException,
    IntegrationException,
    InvalidOperationException,
)
from app.core.domain.result import (
    Err,
    Error,
    Errors,
    ErrorType,
    Ok,
    Result,
    ValidationError,
    combine,
    errors_of,
    fail,
    first_error,
)
from app.core.domain.value_objects import (
    Address,
    Money,
    StatusEnum,
    ValueObject,
    round_money,
)

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    "generate_uuid",
    "utc_now",
    # Value Objects
    "ValueObject",
    "Money",
    "Address",
    "StatusEnum",
    "round_money",
    # Result
    "Result",
    "Ok",
    "Err",
    "Error",
    "ErrorType",
    "ValidationError",
    "Errors",
    "errors_of",
    "first_error",
    "fail",
    "combine",
    # Exceptions
    "DomainException",
    "EntityNotFoundException",
    "BusinessRuleViolationException",
    "CurrencyMismatchException",
    "InvalidOperationException",
    "ConfigurationException",
    "IntegrationException",
]
