"""
Base Entity Classes

Entities keep their identity across state changes; two carts holding the
same items are still different carts.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar
from uuid import UUID, uuid4

TId = TypeVar("TId")


def utc_now() -> datetime:
    return datetime.now(UTC)


def generate_uuid() -> UUID:
    return uuid4()


@dataclass(eq=False)
class Entity(ABC, Generic[TId]):
    """
    Identity plus audit timestamps.

    Equality and hashing use `id` only; an entity without an id is only
    equal to itself.
    """

    id: TId | None = field(default=None)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity) or self.id is None:
            return self is other
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id)) if self.id is not None else id(self)

    def touch(self) -> None:
        """Stamp a mutation."""
        self.updated_at = utc_now()


@dataclass(eq=False)
class AggregateRoot(Entity[TId], Generic[TId]):
    """
    Consistency boundary for its child entities (cart items, order items,
    payment status history).

    Built only through `create` (new identity, validated) or `from_`
    (rehydrated from storage, re-validated); mutators return a Result for
    business violations.
    """
