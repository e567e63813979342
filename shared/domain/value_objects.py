"""
Common Value Objects

Value objects used across the booking and property domains:
- StayWindow: The check-in/check-out interval of a booking
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from shared.domain.base import ValueObject

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StayWindow(ValueObject):
    """
    Stay window value object

    Represents a booking period from check_in to check_out. Both ends are
    inclusive when windows are compared, so two stays that touch at a
    boundary are considered conflicting.
    """
    check_in: datetime
    check_out: datetime

    def __post_init__(self):
        if self.check_out <= self.check_in:
            raise ValueError("Check-out date must be after check-in date")

    def conflicts_with(self, other: 'StayWindow') -> bool:
        """
        Check if this window overlaps another one

        Closed-interval overlap: [a, b] and [c, d] conflict iff a <= d and b >= c.

        Examples:
            - Jan 1-5 conflicts with Jan 4-8 -> True
            - Jan 1-5 conflicts with Jan 5-8 -> True (shared boundary)
            - Jan 1-5 conflicts with Jan 6-8 -> False
        """
        if not isinstance(other, StayWindow):
            raise TypeError("Can only check overlap with another StayWindow")

        return self.check_in <= other.check_out and self.check_out >= other.check_in

    @property
    def days(self) -> int:
        """
        Number of whole days billed for the stay

        Any started day counts, so 1 ms past a full day is two days.
        """
        return math.ceil((self.check_out - self.check_in) / ONE_DAY)

    def price_for(self, nightly_price) -> Decimal:
        """Total price of the stay at the given price per day."""
        return Decimal(nightly_price) * self.days

    def __len__(self) -> int:
        return self.days

    def __str__(self):
        return f"{self.check_in.isoformat()} - {self.check_out.isoformat()}"

    def __repr__(self):
        return f"StayWindow({self.check_in!r}, {self.check_out!r})"
