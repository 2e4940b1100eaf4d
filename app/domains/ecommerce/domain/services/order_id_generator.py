"""
Order Id Generator

Human-readable order tracking references: ORD-{yyyyMMdd}-{AAA}{999}.
Not meant to be unguessable, only unlikely to collide within a day.
"""

import random
import string
from collections.abc import Callable
from datetime import datetime

from app.core.domain import utc_now


class OrderIdGenerator:
    """
    Generates order references from an injected random source.

    Example:
        ```python
        generator = OrderIdGenerator(random.Random(42))
        generator.generate()  # "ORD-20260101-KXQ504"
        ```
    """

    PREFIX = "ORD"

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._rng = rng or random.Random()
        self._clock = clock

    def generate(self) -> str:
        date_part = self._clock().strftime("%Y%m%d")
        letters = "".join(self._rng.choice(string.ascii_uppercase) for _ in range(3))
        numbers = "".join(self._rng.choice(string.digits) for _ in range(3))
        return f"{self.PREFIX}-{date_part}-{letters}{numbers}"
