"""
Campus Clock
============

Booking dates and times are wall-clock values in the campus timezone.
These helpers return "now" in that timezone as naive datetimes so they
compare directly with stored booking slots.
"""

from datetime import date, datetime
from typing import Callable

import pytz

from campus_booking.config import settings

Clock = Callable[[], datetime]


def get_campus_timezone() -> pytz.BaseTzInfo:
    """Get the configured campus timezone."""
    return pytz.timezone(settings.campus_timezone)


def campus_now() -> datetime:
    """Current wall-clock time on campus (naive)."""
    return datetime.now(get_campus_timezone()).replace(tzinfo=None)


def campus_today() -> date:
    """Today's date on campus."""
    return campus_now().date()
