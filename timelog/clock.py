import calendar
from datetime import datetime

from babel import Locale, UnknownLocaleError


def now() -> datetime:
    """Current instant as an aware datetime in the host's local zone."""
    return datetime.now().astimezone()


def as_aware(dt: datetime) -> datetime:
    # naive values are taken to be host-local wall time
    if dt.tzinfo is None:
        return dt.astimezone()
    return dt


def locale_first_weekday() -> int:
    """First day of the week for the host locale (LANGUAGE/LC_ALL/LC_CTYPE/LANG).

    Monday = 0 ... Sunday = 6, the `calendar` module numbering. Falls back to
    `calendar.firstweekday()` when no usable locale is configured.
    """
    try:
        return Locale.default().first_week_day
    except (UnknownLocaleError, ValueError, TypeError):
        return calendar.firstweekday()
