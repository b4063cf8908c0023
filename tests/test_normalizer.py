from datetime import time

import pytest

from flightlog_stats.aggregator import calculate_stats
from flightlog_stats.columns import (
    FIELD_KEYS, canonical_header, check_required_headers, find_missing_headers,
    row_to_dict,
)
from flightlog_stats.errors import MissingHeadersError, ValidationError
from flightlog_stats.normalizer import (
    normalize_row, normalize_rows, parse_int, resolve_total_time,
)
from flightlog_stats.records import ColonEncoded, PlainHours

from conftest import HEADERS, make_row


class TestCanonicalHeader:
    def test_strips_backslash_and_spaces(self):
        assert canonical_header('Total F\\H') == 'TotalFH'
        assert canonical_header('T\\O hrs') == 'TOhrs'

    def test_collapses_newlines(self):
        assert canonical_header(' Landing\n hrs ') == 'Landinghrs'

    def test_none(self):
        assert canonical_header(None) == ''

    def test_field_table_keys_are_canonical(self):
        assert 'TotalCyc' in FIELD_KEYS
        assert 'TOTALCYC' in FIELD_KEYS
        assert FIELD_KEYS['TotalCyc'][0] == 'total_cycles'
        assert FIELD_KEYS['TOTALCYC'][0] == 'total_cycles_sum'


class TestParseInt:
    @pytest.mark.parametrize('raw, expected', [
        ('12', 12),
        (' 7 ', 7),
        ('3.7', 3),
        ('12 cyc', 12),
        ('+4', 4),
        ('', 0),
        (None, 0),
        ('abc', 0),
        ('-5', 0),
        (12.0, 12),
        (9, 9),
        (-3, 0),
    ])
    def test_values(self, raw, expected):
        assert parse_int(raw) == expected


class TestTotalTime:
    def test_colon_form_wins(self):
        total = resolve_total_time('3:30', '10')
        assert total == ColonEncoded(3, 30)

    def test_falls_back_to_total_hours(self):
        total = resolve_total_time('', '10')
        assert total == PlainHours(10)
        assert total.minutes == 0

    def test_plain_number_in_total_fh_is_ignored(self):
        assert resolve_total_time('7', '10') == PlainHours(10)

    def test_split_on_first_colon(self):
        assert resolve_total_time('1234:05:00', '') == ColonEncoded(1234, 5)

    def test_bad_parts_default_to_zero(self):
        assert resolve_total_time('x:15', '') == ColonEncoded(0, 15)

    def test_time_cell(self):
        assert resolve_total_time(time(3, 30), '10') == ColonEncoded(3, 30)

    def test_missing_both(self):
        assert resolve_total_time(None, None) == PlainHours(0)


class TestRequiredHeaders:
    def test_all_present(self):
        check_required_headers(HEADERS)

    def test_missing_total_cyc(self):
        headers = [h for h in HEADERS if h != 'Total Cyc']
        with pytest.raises(MissingHeadersError) as exc:
            check_required_headers(headers)
        assert exc.value.missing == ['Total Cyc']
        assert 'Total Cyc' in str(exc.value)
        assert isinstance(exc.value, ValidationError)

    def test_match_is_literal(self):
        headers = ['Date', 'From', 'To', 'Total FH', 'total cyc']
        assert find_missing_headers(headers) == ['Total F\\H', 'Total Cyc']


class TestNormalizeRow:
    def test_full_row(self):
        row = make_row('17', '2024-03-01', 'HECA', 'OLBA', '1520:45', '980',
                       **{'T\\O hrs': '8', 'T\\O min': '5', 'Landing hrs': '9',
                          'Landing min': '40', 'F\\H hrs': '1', 'F\\H min': '35',
                          'Cyc.': '1', 'TLB #': 'A-112', 'Last Date': '2024-02-28',
                          'TOTAL HRS': '1520', 'TOTAL MIN': '45', 'TOTAL CYC': '980',
                          'HRS/MOUNTH': '60', 'CYC/MOUNTH': '40'})
        record = normalize_row(row_to_dict(HEADERS, row), 1)
        assert record.serial == '17'
        assert record.route == 'HECA-OLBA'
        assert (record.takeoff_hours, record.takeoff_minutes) == (8, 5)
        assert (record.landing_hours, record.landing_minutes) == (9, 40)
        assert (record.flight_hours, record.flight_minutes) == (1, 35)
        assert record.cycles == 1
        assert (record.total_flight_hours, record.total_flight_minutes) == (1520, 45)
        assert record.total_cycles == 980
        assert record.tlb_number == 'A-112'
        assert record.last_date == '2024-02-28'
        assert (record.total_hours, record.total_minutes) == (1520, 45)
        assert record.total_cycles_sum == 980
        assert (record.hours_per_month, record.cycles_per_month) == (60, 40)

    def test_serial_falls_back_to_position(self):
        row = make_row(ser='')
        record = normalize_row(row_to_dict(HEADERS, row), 4)
        assert record.serial == '4'

    def test_invalid_numbers_default_to_zero(self):
        row = make_row(total_cyc='n/a', **{'Cyc.': 'one'})
        record = normalize_row(row_to_dict(HEADERS, row), 1)
        assert record.total_cycles == 0
        assert record.cycles == 0

    def test_to_dict_uses_export_names(self):
        record = normalize_row(row_to_dict(HEADERS, make_row()), 1)
        data = record.to_dict()
        assert data['ser'] == '1'
        assert data['from'] == 'HECA'
        assert data['totalFlightHours'] == 1
        assert data['totalFlightMinutes'] == 30


class TestNormalizeRows:
    def test_drops_rows_without_serial_and_date(self, sample_rows):
        records = normalize_rows(HEADERS, sample_rows)
        assert [r.serial for r in records] == ['1', '2', '3']
        assert all(r.route != 'HECA-LCLK' for r in records)

    def test_row_without_date_is_dropped(self):
        records = normalize_rows(HEADERS, [make_row('5', '')])
        assert records == []

    def test_text_cells_are_kept_verbatim(self):
        headers = ['Ser', 'Date', 'From', 'To', 'Total F\\H', 'Total Cyc', 'TLB #']
        records = normalize_rows(headers, [['1', '2024-01-15', ' HECA', 'OLBA ', '1:00', '1', ' A-1 ']])
        assert records[0].from_ == ' HECA'
        assert records[0].to == 'OLBA '
        assert records[0].route == ' HECA-OLBA '
        assert records[0].tlb_number == ' A-1 '

    def test_whitespace_date_row_is_kept(self):
        headers = ['Ser', 'Date', 'From', 'To', 'Total F\\H', 'Total Cyc']
        records = normalize_rows(headers, [['1', '   ', 'A', 'B', '1:00', '1'],
                                           ['2', '2024-01-15', 'A', 'B', '1:00', '1']])
        assert [r.date for r in records] == ['   ', '2024-01-15']
        stats = calculate_stats(records)
        assert stats.total_flights == 2
        assert stats.total_flight_time == '2:00'
        assert list(stats.monthly_stats) == ['2024-01']
        assert stats.monthly_stats['2024-01'].flights == 1
        assert stats.total_days == 1

    def test_short_row_uses_defaults(self):
        headers = ['Ser', 'Date', 'From', 'To', 'Total F\\H', 'Total Cyc']
        records = normalize_rows(headers, [['9', '2024-01-01', 'HECA']])
        assert len(records) == 1
        assert records[0].to == ''
        assert records[0].total_cycles == 0
        assert records[0].total_flight_hours == 0

    def test_duplicate_header_last_wins(self):
        headers = ['Date', 'From', 'To', 'Total F\\H', 'Total Cyc', 'Total  Cyc']
        records = normalize_rows(headers, [['2024-01-01', 'A', 'B', '1:00', '3', '8']])
        assert records[0].total_cycles == 8

    def test_duplicate_header_beyond_short_row(self):
        headers = ['Date', 'From', 'To', 'Total F\\H', 'Total Cyc', 'Total  Cyc']
        assert row_to_dict(headers, ['2024-01-01', 'A', 'B', '1:00', '3']) == {
            'Date': '2024-01-01', 'From': 'A', 'To': 'B', 'TotalFH': '1:00', 'TotalCyc': '3',
        }
        records = normalize_rows(headers, [['2024-01-01', 'A', 'B', '1:00', '3']])
        assert records[0].total_cycles == 3

    def test_missing_header_processes_nothing(self):
        headers = [h for h in HEADERS if h != 'Date']
        with pytest.raises(MissingHeadersError):
            normalize_rows(headers, [make_row()])

    def test_numeric_cells(self):
        headers = ['Ser', 'Date', 'From', 'To', 'Total F\\H', 'Total Cyc', 'TOTAL HRS']
        records = normalize_rows(headers, [[3.0, '2024-01-01', 'A', 'B', None, 41.0, 1200.0]])
        assert records[0].serial == '3'
        assert records[0].total_cycles == 41
        assert (records[0].total_flight_hours, records[0].total_flight_minutes) == (1200, 0)
