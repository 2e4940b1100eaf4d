"""
Result Type for Expected Business Outcomes

Business outcomes are kungfu results: `Ok(value)` or `Err(errors)`, where
`Err` is kungfu's `Error` container and its payload is a non-empty tuple of
the `Error` records below. Domain and application code return these for
business violations (insufficient stock, invalid discount, not found) so
the caller has to check them; exceptions are kept for faults.

The first error of an `Err` is the headline one (it decides the HTTP status).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from kungfu import Error as Err
from kungfu import Ok
from kungfu import Result as _Result


class ErrorType(str, Enum):
    """Error taxonomy, mapped to HTTP status codes at the boundary."""

    FAILURE = "failure"
    UNEXPECTED = "unexpected"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"


@dataclass(frozen=True)
class Error:
    """A single business error with a stable machine-readable code."""

    description: str
    code: str
    type: ErrorType = ErrorType.FAILURE

    @staticmethod
    def failure(description: str = "A failure has occurred.", code: str = "ERR_FAILURE") -> "Error":
        return Error(description, code, ErrorType.FAILURE)

    @staticmethod
    def unexpected(description: str = "An unexpected error has occurred.", code: str = "ERR_UNKNOWN") -> "Error":
        return Error(description, code, ErrorType.UNEXPECTED)

    @staticmethod
    def conflict(description: str, code: str) -> "Error":
        return Error(description, code, ErrorType.CONFLICT)

    @staticmethod
    def not_found(description: str, code: str) -> "Error":
        return Error(description, code, ErrorType.NOT_FOUND)

    @staticmethod
    def unauthorized(description: str, code: str) -> "Error":
        return Error(description, code, ErrorType.UNAUTHORIZED)

    @staticmethod
    def validation(description: str, code: str, field: str) -> "ValidationError":
        return ValidationError(description, code, ErrorType.VALIDATION, field)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "description": self.description, "type": self.type.value}


@dataclass(frozen=True)
class ValidationError(Error):
    """Field-level, user-correctable error."""

    type: ErrorType = ErrorType.VALIDATION
    field: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "field": self.field}


type Errors = tuple[Error, ...]
type Result[T] = _Result[T, Errors]


def fail(*errors: Error | Iterable[Error]) -> Err:
    """Build an Err from errors or iterables of errors (flattened, order kept)."""
    flat: list[Error] = []
    for item in errors:
        if isinstance(item, Error):
            flat.append(item)
        else:
            flat.extend(item)
    if not flat:
        raise ValueError("An Err needs at least one error")
    return Err(tuple(flat))


def errors_of(result: Result[Any]) -> Errors:
    """Errors carried by a result; empty for Ok."""
    match result:
        case Err(errors):
            return errors
        case _:
            return ()


def first_error(result: Err) -> Error:
    return errors_of(result)[0]


def combine(*results: Result[Any]) -> Result[None]:
    """Collect the errors of every failed result; Ok(None) when all succeeded."""
    errors = [e for r in results for e in errors_of(r)]
    return fail(errors) if errors else Ok(None)
