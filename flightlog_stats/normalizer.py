"""
Turn raw flight log rows into FlightRecords.

Spreadsheet logs are filled in inconsistently, so nothing at row level is an
error: unreadable numbers become 0, missing text becomes ''. Rows without a
serial or a date are dropped.
"""

import re

from .columns import (
    FIELD_KEYS, INT, SERIAL, TOTAL_HOURS_KEY, TOTAL_TIME_KEY,
    check_required_headers, row_to_dict,
)
from .records import ColonEncoded, FlightRecord, PlainHours
from .sheet_reader import cell_to_text


_LEADING_INT = re.compile(r'^\s*\+?(\d+)')


def parse_int(val):
    """Parse the leading base-10 digits of a cell.

    "12" -> 12, "3.7" -> 3, "12 cyc" -> 12. Empty, non-numeric and negative
    values give 0.
    """
    if isinstance(val, bool):
        return 0
    if isinstance(val, int):
        return val if val >= 0 else 0
    match = _LEADING_INT.match(cell_to_text(val))
    if match:
        return int(match.group(1))
    return 0


def parse_time_string(text):
    """Split "H:MM" on the first colon into (hours, minutes)."""
    hours, _, minutes = text.partition(':')
    return parse_int(hours), parse_int(minutes)


def resolve_total_time(total_time_cell, total_hours_cell):
    """Pick the cumulative-time source for one row.

    A colon in the Total F\\H cell wins; otherwise the whole-hours column is
    used.

    Returns:
        ColonEncoded or PlainHours.
    """
    text = cell_to_text(total_time_cell)
    if ':' in text:
        hours, minutes = parse_time_string(text)
        return ColonEncoded(hours, minutes)
    return PlainHours(parse_int(total_hours_cell))


def normalize_row(values, position):
    """Build a FlightRecord from one canonical-keyed row.

    Args:
        values: Dict of canonical header key -> raw cell value.
        position: 1-based position of the row, used as the serial fallback.

    Returns:
        FlightRecord (possibly invalid; see FlightRecord.is_valid).
    """
    kwargs = {}
    for key, (field_name, rule) in FIELD_KEYS.items():
        raw = values.get(key)
        if rule == INT:
            kwargs[field_name] = parse_int(raw)
        elif rule == SERIAL:
            kwargs[field_name] = cell_to_text(raw) or str(position)
        else:
            kwargs[field_name] = cell_to_text(raw)

    total = resolve_total_time(values.get(TOTAL_TIME_KEY), values.get(TOTAL_HOURS_KEY))
    kwargs['total_flight_hours'] = total.hours
    kwargs['total_flight_minutes'] = total.minutes
    return FlightRecord(**kwargs)


def normalize_rows(headers, rows):
    """Normalize all data rows of a sheet.

    Args:
        headers: Header row as read from the sheet.
        rows: Data rows (lists of cell values by column position).

    Returns:
        List of valid FlightRecords, in input order.

    Raises:
        MissingHeadersError: If a required header is absent. No rows are
            processed in that case.
    """
    check_required_headers(headers)

    records = []
    for position, row in enumerate(rows, 1):
        record = normalize_row(row_to_dict(headers, row), position)
        if record.is_valid:
            records.append(record)
    return records
