"""Shared utility functions."""
from datetime import date, datetime, timezone


def today_utc() -> date:
    """Return today's date in UTC.  Default clock for the intake parser."""
    return datetime.now(timezone.utc).date()
