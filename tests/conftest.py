"""
Pytest fixtures: flight log workbooks written with openpyxl, plus a checked-in
.xls log under tests/data.
"""
import os

import pytest
from openpyxl import Workbook


HEADERS = [
    'Ser', 'Date', 'From', 'To', 'T\\O hrs', 'T\\O min', 'Landing hrs',
    'Landing min', 'F\\H hrs', 'F\\H min', 'Cyc.', 'Total F\\H', 'Total Cyc',
    'TLB #', 'Last Date', 'TOTAL HRS', 'TOTAL MIN', 'TOTAL CYC',
    'HRS/MOUNTH', 'CYC/MOUNTH',
]

# Two-leg BIFF8 log: date-formatted NUMBER cells in Date, a plain NUMBER in
# Total Cyc, a BLANK Total F\H on the second leg and no TLB # on the first.
XLS_LOG = os.path.join(os.path.dirname(__file__), 'data', 'flight_log.xls')


def make_row(ser='1', date='2024-01-15', frm='HECA', to='OLBA', total_fh='1:30',
             total_cyc='1', total_hrs='', **extra):
    """One data row aligned with HEADERS."""
    values = {
        'Ser': ser, 'Date': date, 'From': frm, 'To': to,
        'Total F\\H': total_fh, 'Total Cyc': total_cyc, 'TOTAL HRS': total_hrs,
    }
    values.update(extra)
    return [values.get(h) for h in HEADERS]


@pytest.fixture
def write_workbook(tmp_path):
    """Factory writing (headers, rows) to an .xlsx file; returns its path."""
    def _write(rows, headers=HEADERS, name='flight_log.xlsx', sheets=None):
        wb = Workbook()
        ws = wb.active
        ws.title = 'SU-BVA'
        ws.append(list(headers))
        for row in rows:
            ws.append(list(row))
        for title, sheet_rows in (sheets or {}).items():
            extra = wb.create_sheet(title)
            for row in sheet_rows:
                extra.append(list(row))
        path = tmp_path / name
        wb.save(path)
        return str(path)
    return _write


@pytest.fixture
def sample_rows():
    return [
        make_row('1', '2024-01-15', 'HECA', 'OLBA', '1:30', '1'),
        make_row('2', '2024-01-15', 'OLBA', 'HECA', '1:45', '1'),
        make_row('3', '2024-02-03', 'HECA', 'OLBA', '1:20', '1'),
        make_row('', '', 'HECA', 'LCLK', '2:00', '1'),
    ]


@pytest.fixture
def sample_workbook(write_workbook, sample_rows):
    return write_workbook(sample_rows)
