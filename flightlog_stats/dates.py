"""
Date parsing for flight log date cells.

Dates arrive as text in whatever format the sheet used. Month bucketing and
day spans work in UTC: naive values are taken as UTC, aware values are
converted to it.
"""

from datetime import datetime, timezone

from dateutil import parser as dateutil_parser


ISO_FORMATS = [
    '%Y-%m-%d',             # 2024-01-15
    '%Y-%m-%d %H:%M:%S',    # 2024-01-15 08:30:00
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%d %H:%M',
    '%Y-%m-%dT%H:%M',
]

MONTH_FIRST_FORMATS = ['%m/%d/%Y', '%m/%d/%y']
DAY_FIRST_FORMATS = ['%d/%m/%Y', '%d/%m/%y']

# Two defaults that differ in year, month and day. A field that comes out
# different under each was never in the text.
_DEFAULT_A = datetime(1904, 1, 1)
_DEFAULT_B = datetime(1905, 2, 2)

OTHER_FORMATS = [
    '%d-%m-%Y',     # 15-01-2024
    '%d.%m.%Y',     # 15.01.2024
    '%Y/%m/%d',     # 2024/01/15
    '%d %b %Y',     # 15 Jan 2024
    '%b %d, %Y',    # Jan 15, 2024
    '%d-%b-%Y',     # 15-Jan-2024
    '%d-%b-%y',     # 15-Jan-24
]


def _as_utc(value):
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_date(text, dayfirst=False):
    """Parse a date cell.

    Slash dates are read month-first unless dayfirst is set.

    Args:
        text: Cell text (or a datetime, returned as-is in UTC).
        dayfirst: Read ambiguous slash dates as DD/MM.

    Returns:
        Timezone-aware UTC datetime, or None if the text is not a date.
    """
    if text is None:
        return None
    if isinstance(text, datetime):
        return _as_utc(text)

    s = str(text).strip()
    if not s:
        return None

    slash_formats = DAY_FIRST_FORMATS if dayfirst else MONTH_FIRST_FORMATS
    for fmt in ISO_FORMATS + slash_formats + OTHER_FORMATS:
        try:
            return _as_utc(datetime.strptime(s, fmt))
        except ValueError:
            continue

    # Bare numbers are not dates, even though dateutil would accept some
    if s.replace('.', '', 1).isdigit():
        return None

    # dateutil fills missing parts from its default date; text that lacks
    # the year, month or day ("Jan 15", "Monday", "10:30") is not a date
    try:
        first = dateutil_parser.parse(s, dayfirst=dayfirst, default=_DEFAULT_A)
        second = dateutil_parser.parse(s, dayfirst=dayfirst, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return _as_utc(first)


def month_key(value):
    """Return the "YYYY-MM" bucket of a UTC datetime."""
    return value.strftime('%Y-%m')
