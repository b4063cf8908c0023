"""
Load a flight log workbook and compute its statistics.

load_flight_data() runs one upload end to end: read the sheet, check the
headers, normalize rows, aggregate. AnalysisSession keeps the latest
successful result and swaps it in one step.
"""

import os
import threading
from dataclasses import dataclass

from .aggregator import calculate_stats
from .columns import check_required_headers, print_column_report
from .errors import EmptyResultError
from .normalizer import normalize_rows
from .sheet_reader import read_workbook


@dataclass(frozen=True)
class AnalysisResult:
    source: str
    records: tuple
    stats: object


def load_flight_data(file_path, dayfirst=False):
    """Read a workbook and compute its flight statistics.

    Args:
        file_path: Path to the .xlsx/.xls flight log.
        dayfirst: Read ambiguous slash dates as DD/MM.

    Returns:
        AnalysisResult.

    Raises:
        DecodeError: The file is not a readable workbook.
        MissingHeadersError: A required column is absent.
        EmptyResultError: No row has both a serial and a date.
    """
    print(f"\nLoading flight log: {os.path.basename(file_path)}")
    print("=" * 70)

    headers, rows = read_workbook(file_path)
    check_required_headers(headers)
    print_column_report(headers)

    records = normalize_rows(headers, rows)
    dropped = len(rows) - len(records)
    print(f"  Valid records: {len(records)}")
    if dropped:
        print(f"  Rows dropped (no serial or date): {dropped}")

    if not records:
        raise EmptyResultError()

    stats = calculate_stats(records, dayfirst=dayfirst)
    return AnalysisResult(source=file_path, records=tuple(records), stats=stats)


class AnalysisSession:
    """The current dataset and its statistics.

    A failed load leaves the previous result in place. Loads are serialized,
    so a result always comes from exactly one file.
    """

    def __init__(self, dayfirst=False):
        self.dayfirst = dayfirst
        self._current = None
        self._lock = threading.Lock()

    @property
    def current(self):
        return self._current

    @property
    def records(self):
        return self._current.records if self._current else ()

    @property
    def stats(self):
        return self._current.stats if self._current else None

    def load(self, file_path):
        """Process a file and make it the current result.

        Raises:
            FlightDataError: The file was rejected; the current result is kept.
        """
        with self._lock:
            result = load_flight_data(file_path, dayfirst=self.dayfirst)
            self._current = result
        return result

    def clear(self):
        with self._lock:
            self._current = None
