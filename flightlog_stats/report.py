"""
Statistics report: console summary, JSON export and Excel export.

The exported report has a summary block plus the full monthly and route
maps. Export files are named with the date they were produced on
(flight-statistics-YYYY-MM-DD.json).
"""

import json
import os
from datetime import date

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .aggregator import format_time, minutes_of, round_half_up


# ============ Styles ============

HEADER_FONT = Font(name='Calibri', bold=True, color='FFFFFF', size=10)
HEADER_FILL = PatternFill(start_color='1F4E79', end_color='1F4E79', fill_type='solid')
TITLE_FONT = Font(name='Calibri', bold=True, size=14, color='1F4E79')
LABEL_FONT = Font(name='Calibri', bold=True, size=10)
DATA_FONT = Font(name='Calibri', size=9)
THIN_BORDER = Border(
    left=Side(style='thin', color='B4C6E7'),
    right=Side(style='thin', color='B4C6E7'),
    top=Side(style='thin', color='B4C6E7'),
    bottom=Side(style='thin', color='B4C6E7')
)

# Flight Log sheet: (header, record attribute, width)
LOG_COLUMNS = [
    ("Ser", 'serial', 7), ("Date", 'date', 12), ("From", 'from_', 8),
    ("To", 'to', 8), ("Route", 'route', 14), ("F\\H", None, 8),
    ("Cyc.", 'cycles', 7), ("Total F\\H", None, 11),
    ("Total Cyc", 'total_cycles', 10), ("TLB #", 'tlb_number', 10),
]

SUMMARY_LABELS = [
    ('Total Flight Hours', 'total_flight_time'),
    ('Total Cycles', 'total_cycles'),
    ('Total Flights', 'total_flights'),
    ('Average Flight Time', 'average_flight_time'),
    ('Most Frequent Route', 'most_frequent_route'),
    ('Average Flights Per Day', 'average_flights_per_day'),
]


def build_summary(stats):
    return {label: getattr(stats, attr) for label, attr in SUMMARY_LABELS}


def build_report(stats):
    """Build the exportable report dict for a FlightStats."""
    data = stats.to_dict()
    return {
        'summary': build_summary(stats),
        'monthlyStats': data['monthlyStats'],
        'routeStats': data['routeStats'],
    }


def export_filename(today=None, ext='json'):
    today = today or date.today()
    return f"flight-statistics-{today.isoformat()}.{ext}"


def export_json(stats, output_dir='.', today=None):
    """Write the report as indented JSON.

    Returns:
        Path of the written file.
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, export_filename(today, 'json'))
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(build_report(stats), f, indent=2, ensure_ascii=False)
    return path


def preview_records(records, limit=10):
    """First records for a table preview.

    Returns:
        Tuple of (records shown, total record count).
    """
    records = list(records)
    return records[:limit], len(records)


def top_months(stats, limit=6):
    """Most recent months first."""
    months = sorted(stats.monthly_stats.items(), key=lambda item: item[0], reverse=True)
    return months[:limit]


def top_routes(stats, limit=6):
    """Busiest routes with their average flight time.

    Returns:
        List of (route, RouteStats, average "H:MM") ordered by count; equal
        counts keep first-seen order.
    """
    routes = sorted(stats.route_stats.items(), key=lambda item: item[1].count, reverse=True)
    return [
        (route, rs, format_time(round_half_up(rs.total_time / rs.count)))
        for route, rs in routes[:limit]
    ]


def _write_header_row(ws, row, headers):
    for col_idx, hdr in enumerate(headers, 1):
        cell = ws.cell(row=row, column=col_idx, value=hdr)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)
        cell.border = THIN_BORDER


def _write_data_row(ws, row, values):
    for col_idx, val in enumerate(values, 1):
        cell = ws.cell(row=row, column=col_idx, value=val)
        cell.font = DATA_FONT
        cell.border = THIN_BORDER
        cell.alignment = Alignment(horizontal='center', vertical='center')


def export_workbook(stats, records, output_dir='.', today=None):
    """Write the report as a styled Excel workbook.

    Sheets: Summary, Monthly, Routes and Flight Log.

    Returns:
        Path of the written file.
    """
    wb = Workbook()

    # ============ SHEET 1: SUMMARY ============
    ws = wb.active
    ws.title = "Summary"
    ws.column_dimensions['A'].width = 26
    ws.column_dimensions['B'].width = 18
    ws.cell(row=1, column=1, value="Flight Statistics").font = TITLE_FONT

    for col in range(1, 3):
        ws.cell(row=3, column=col).fill = HEADER_FILL
    ws.cell(row=3, column=1, value="SUMMARY").font = HEADER_FONT

    row = 4
    for label, value in build_summary(stats).items():
        ws.cell(row=row, column=1, value=label).font = LABEL_FONT
        ws.cell(row=row, column=2, value=value).font = DATA_FONT
        ws.cell(row=row, column=1).border = THIN_BORDER
        ws.cell(row=row, column=2).border = THIN_BORDER
        row += 1
    ws.cell(row=row, column=1, value="Total Days").font = LABEL_FONT
    ws.cell(row=row, column=2, value=stats.total_days).font = DATA_FONT

    # ============ SHEET 2: MONTHLY ============
    ws = wb.create_sheet("Monthly")
    _write_header_row(ws, 1, ["Month", "Flights", "Flight Time", "Cycles"])
    for row, (month, ms) in enumerate(sorted(stats.monthly_stats.items()), 2):
        _write_data_row(ws, row, [month, ms.flights, format_time(ms.hours), ms.cycles])
    for col_letter, width in [('A', 10), ('B', 9), ('C', 12), ('D', 9)]:
        ws.column_dimensions[col_letter].width = width
    ws.freeze_panes = 'A2'

    # ============ SHEET 3: ROUTES ============
    ws = wb.create_sheet("Routes")
    _write_header_row(ws, 1, ["Route", "Flights", "Total Time", "Average"])
    for row, (route, rs, average) in enumerate(top_routes(stats, limit=None), 2):
        _write_data_row(ws, row, [route, rs.count, format_time(rs.total_time), average])
    for col_letter, width in [('A', 16), ('B', 9), ('C', 12), ('D', 10)]:
        ws.column_dimensions[col_letter].width = width
    ws.freeze_panes = 'A2'

    # ============ SHEET 4: FLIGHT LOG ============
    ws = wb.create_sheet("Flight Log")
    _write_header_row(ws, 1, [name for name, _, _ in LOG_COLUMNS])
    for col_idx, (_, _, width) in enumerate(LOG_COLUMNS, 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width
    for row, record in enumerate(records, 2):
        values = []
        for name, attr, _ in LOG_COLUMNS:
            if name == "F\\H":
                values.append(format_time(record.flight_hours * 60 + record.flight_minutes))
            elif name == "Total F\\H":
                values.append(format_time(minutes_of(record)))
            else:
                values.append(getattr(record, attr))
        _write_data_row(ws, row, values)
    ws.freeze_panes = 'A2'
    ws.auto_filter.ref = f"A1:{get_column_letter(len(LOG_COLUMNS))}1"

    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, export_filename(today, 'xlsx'))
    wb.save(path)
    return path


def print_summary(stats, records, preview_rows=10, top=6):
    """Print the statistics to the console."""
    print("\n" + "=" * 70)
    print("FLIGHT STATISTICS")
    print("=" * 70)
    for label, value in build_summary(stats).items():
        print(f"  {label:<25} {value}")
    print(f"  {'Total Days':<25} {stats.total_days}")

    if stats.monthly_stats:
        print(f"\n  Monthly breakdown (latest {top}):")
        for month, ms in top_months(stats, top):
            print(f"    {month}  {ms.flights:>4} flights  {format_time(ms.hours):>8}  "
                  f"{ms.cycles:>6} cyc")

    if stats.route_stats:
        print(f"\n  Top routes:")
        for route, rs, average in top_routes(stats, top):
            print(f"    {route:<20} {rs.count:>4} flights  avg {average}")

    if preview_rows:
        shown, total = preview_records(records, preview_rows)
        print(f"\n  Data preview:")
        print(f"    {'Ser':<6} {'Date':<12} {'From':<6} {'To':<6} {'Total F/H':>10} {'Cyc':>6}")
        for r in shown:
            print(f"    {r.serial:<6} {r.date:<12} {r.from_:<6} {r.to:<6} "
                  f"{format_time(minutes_of(r)):>10} {r.total_cycles:>6}")
        if total > len(shown):
            print(f"    Showing {len(shown)} of {total} records")
