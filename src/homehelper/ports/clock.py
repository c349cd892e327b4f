"""Clock interface."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Source of "now" in the household time zone."""

    def now(self) -> datetime:
        """Current time as a timezone-aware datetime."""
        ...
