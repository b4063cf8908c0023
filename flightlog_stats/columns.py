"""
Column layout of a flight log sheet.

Maps the sheet's header names to FlightRecord fields through a fixed table,
and checks that the headers needed for statistics are present.

Headers are matched on a canonical key: surrounding whitespace, backslashes
and whitespace runs are removed, so "Total F\\H" and "TotalFH" are the same
column. The required-header check is literal (before canonicalization).
"""

import re
from dataclasses import fields

from .errors import MissingHeadersError
from .records import FlightRecord


# Headers that must be present, as written in the sheet
REQUIRED_HEADERS = ['Date', 'From', 'To', 'Total F\\H', 'Total Cyc']

# Parse rules
TEXT = 'text'
INT = 'int'
SERIAL = 'serial'

# ============ Field table ============
# (source header, FlightRecord field, parse rule)
# Total F\H is not a plain field; see TOTAL_TIME_HEADER below.

FIELD_TABLE = [
    ('Ser', 'serial', SERIAL),
    ('Date', 'date', TEXT),
    ('From', 'from_', TEXT),
    ('To', 'to', TEXT),
    ('T\\O hrs', 'takeoff_hours', INT),
    ('T\\O min', 'takeoff_minutes', INT),
    ('Landing hrs', 'landing_hours', INT),
    ('Landing min', 'landing_minutes', INT),
    ('F\\H hrs', 'flight_hours', INT),
    ('F\\H min', 'flight_minutes', INT),
    ('Cyc.', 'cycles', INT),
    ('Total Cyc', 'total_cycles', INT),
    ('TLB #', 'tlb_number', TEXT),
    ('Last Date', 'last_date', TEXT),
    ('TOTAL HRS', 'total_hours', INT),
    ('TOTAL MIN', 'total_minutes', INT),
    ('TOTAL CYC', 'total_cycles_sum', INT),
    ('HRS/MOUNTH', 'hours_per_month', INT),
    ('CYC/MOUNTH', 'cycles_per_month', INT),
]

# "H:MM" cumulative time; falls back to the whole-hours column when it has no colon
TOTAL_TIME_HEADER = 'Total F\\H'
TOTAL_HOURS_HEADER = 'TOTAL HRS'

# Fields filled from TOTAL_TIME_HEADER / TOTAL_HOURS_HEADER rather than the table
DERIVED_FIELDS = {'total_flight_hours', 'total_flight_minutes'}


def canonical_header(header):
    """Canonical lookup key for a header cell.

    >>> canonical_header('Total F\\\\H')
    'TotalFH'
    >>> canonical_header(' Landing\\nhrs ')
    'Landinghrs'
    """
    if header is None:
        return ''
    return re.sub(r'\\|\s+', '', str(header).strip())


def _build_field_keys():
    """Resolve FIELD_TABLE to canonical keys, checking it covers FlightRecord."""
    keys = {}
    seen_fields = set()
    for header, field_name, rule in FIELD_TABLE:
        key = canonical_header(header)
        if key in keys:
            raise RuntimeError(f"Duplicate column key in field table: {key!r}")
        if field_name in seen_fields:
            raise RuntimeError(f"Field mapped twice in field table: {field_name}")
        if rule not in (TEXT, INT, SERIAL):
            raise RuntimeError(f"Unknown parse rule for {header!r}: {rule}")
        keys[key] = (field_name, rule)
        seen_fields.add(field_name)

    record_fields = {f.name for f in fields(FlightRecord)}
    unmapped = record_fields - seen_fields - DERIVED_FIELDS
    unknown = seen_fields - record_fields
    if unmapped or unknown:
        raise RuntimeError(
            f"Field table does not match FlightRecord "
            f"(unmapped: {sorted(unmapped)}, unknown: {sorted(unknown)})"
        )
    return keys


# canonical key -> (field name, parse rule)
FIELD_KEYS = _build_field_keys()
TOTAL_TIME_KEY = canonical_header(TOTAL_TIME_HEADER)
TOTAL_HOURS_KEY = canonical_header(TOTAL_HOURS_HEADER)
KNOWN_KEYS = set(FIELD_KEYS) | {TOTAL_TIME_KEY}


def find_missing_headers(headers):
    """Return required headers absent from the header row, in required order."""
    present = set(headers)
    return [h for h in REQUIRED_HEADERS if h not in present]


def check_required_headers(headers):
    """Raise MissingHeadersError unless every required header is present."""
    missing = find_missing_headers(headers)
    if missing:
        raise MissingHeadersError(missing)


def row_to_dict(headers, row):
    """Key a raw data row by canonical header.

    Cells beyond the end of a short row are left out. When two headers share
    a canonical key the later column wins, as long as the row reaches it.
    """
    values = {}
    for idx, header in enumerate(headers):
        key = canonical_header(header)
        if not key or idx >= len(row):
            continue
        values[key] = row[idx]
    return values


def print_column_report(headers):
    """Print which sheet columns were recognized.

    Args:
        headers: List of header strings from the sheet.
    """
    recognized = []
    unrecognized = []
    for header in headers:
        if not str(header or '').strip():
            continue
        if canonical_header(header) in KNOWN_KEYS:
            recognized.append(header)
        else:
            unrecognized.append(header)

    present = {canonical_header(h) for h in headers}
    absent = [h for h, _, _ in FIELD_TABLE
              if canonical_header(h) not in present and h not in REQUIRED_HEADERS]

    print(f"  Recognized {len(recognized)} columns")
    if absent:
        print(f"  Missing optional columns ({len(absent)}, will use defaults):")
        for header in absent:
            print(f"    - {header}")
    if unrecognized:
        print(f"  Unrecognized columns ({len(unrecognized)}):")
        for header in unrecognized[:20]:
            print(f"    ? '{header}'")
        if len(unrecognized) > 20:
            print(f"    ... and {len(unrecognized) - 20} more")
