"""
Read the first sheet of an Excel flight log.

Supports .xlsx/.xlsm through openpyxl and legacy .xls through xlrd. Returns
the header row and the non-blank data rows; cell values are left as the
library returns them and converted to text with cell_to_text().
"""

import os
import zipfile
from datetime import date, datetime, time, timedelta

import xlrd
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .errors import DecodeError


SUPPORTED_EXTENSIONS = ('.xlsx', '.xlsm', '.xls')


def detect_format(file_path):
    """Detect the workbook format from the file extension.

    Returns:
        'xlsx' or 'xls'.

    Raises:
        DecodeError: If the extension is not a supported Excel format.
    """
    ext = os.path.splitext(file_path)[1].lower()
    if ext in ('.xlsx', '.xlsm'):
        return 'xlsx'
    elif ext == '.xls':
        return 'xls'
    raise DecodeError(
        f"Unsupported file type '{ext or file_path}'. "
        f"Upload an Excel file (.xlsx or .xls)."
    )


def _format_clock(total_minutes):
    return f"{total_minutes // 60}:{total_minutes % 60:02d}"


def cell_to_text(value):
    """Convert a decoded cell value to the text the normalizer parses.

    Dates become ISO text, times and durations become "H:MM", whole floats
    lose their ".0". Text is returned as it is, surrounding whitespace
    included.
    """
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'TRUE' if value else 'FALSE'
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.strftime('%Y-%m-%d')
        return value.strftime('%Y-%m-%d %H:%M:%S')
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, time):
        return _format_clock(value.hour * 60 + value.minute)
    if isinstance(value, timedelta):
        return _format_clock(int(value.total_seconds() // 60))
    return str(value)


def _is_blank_row(row):
    return all(cell is None or str(cell).strip() == '' for cell in row)


def _split_rows(all_rows, file_path):
    if not all_rows:
        raise DecodeError(f"Excel file is empty: {os.path.basename(file_path)}")

    headers = [str(cell).strip() if cell is not None else '' for cell in all_rows[0]]
    data_rows = [list(row) for row in all_rows[1:] if not _is_blank_row(row)]
    return headers, data_rows


def _read_xlsx(file_path):
    try:
        wb = load_workbook(file_path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise DecodeError(f"Cannot read workbook {os.path.basename(file_path)}: {e}") from e

    try:
        ws = wb.worksheets[0]
        all_rows = list(ws.iter_rows(values_only=True))
    finally:
        wb.close()
    return all_rows


def _xls_cell_value(cell, datemode):
    if cell.ctype == xlrd.XL_CELL_DATE:
        try:
            return xlrd.xldate.xldate_as_datetime(cell.value, datemode)
        except (xlrd.xldate.XLDateError, ValueError):
            return cell.value
    if cell.ctype == xlrd.XL_CELL_BOOLEAN:
        return bool(cell.value)
    if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK, xlrd.XL_CELL_ERROR):
        return None
    return cell.value


def _read_xls(file_path):
    try:
        book = xlrd.open_workbook(file_path, on_demand=True)
    except (xlrd.XLRDError, xlrd.compdoc.CompDocError, OSError) as e:
        raise DecodeError(f"Cannot read workbook {os.path.basename(file_path)}: {e}") from e

    try:
        sheet = book.sheet_by_index(0)
        all_rows = [
            tuple(_xls_cell_value(cell, book.datemode) for cell in sheet.row(r))
            for r in range(sheet.nrows)
        ]
    finally:
        book.release_resources()
    return all_rows


def read_workbook(file_path):
    """Read headers and data rows from the first sheet of a workbook.

    Args:
        file_path: Path to an .xlsx, .xlsm or .xls file.

    Returns:
        Tuple of (headers: list[str], rows: list[list]).

    Raises:
        DecodeError: If the file is missing, unsupported, unreadable or empty.
    """
    fmt = detect_format(file_path)
    if not os.path.exists(file_path):
        raise DecodeError(f"File not found: {file_path}")

    if fmt == 'xlsx':
        all_rows = _read_xlsx(file_path)
    else:
        all_rows = _read_xls(file_path)

    headers, data_rows = _split_rows(all_rows, file_path)
    print(f"  Read Excel: {len(data_rows)} rows, {len(headers)} columns")
    return headers, data_rows
