"""Clock adapters."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Asia/Hong_Kong"


class SystemClock:
    """
    Wall clock normalized to the household time zone.

    Implements Clock protocol.
    """

    def __init__(self, tz: str | ZoneInfo = DEFAULT_TIMEZONE):
        self.tz = ZoneInfo(tz) if isinstance(tz, str) else tz

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock:
    """
    Clock that only moves when told to.

    Implements Clock protocol. Naive start values are read as UTC.
    """

    def __init__(self, start: datetime, tz: str | ZoneInfo | None = None):
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self.tz = ZoneInfo(tz) if isinstance(tz, str) else (tz or start.tzinfo)
        self._now = start.astimezone(self.tz)

    def now(self) -> datetime:
        return self._now

    def set(self, value: datetime) -> None:
        self._now = value.astimezone(self.tz)

    def advance(self, **kwargs) -> datetime:
        """Move forward by timedelta(**kwargs) and return the new time."""
        self._now = self._now + timedelta(**kwargs)
        return self._now
