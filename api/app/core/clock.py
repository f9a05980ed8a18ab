"""
Wall clock abstraction used by the practice flow and token expiry checks.
"""
from datetime import date, datetime, timezone


class Clock:
    """System clock returning naive UTC datetimes (the database stores naive UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def today(self) -> date:
        return self.now().date()


system_clock = Clock()


def utcnow() -> datetime:
    """Naive UTC now, used as default_factory on table timestamps."""
    return system_clock.now()
