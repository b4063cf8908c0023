#!/usr/bin/env python3
"""
Flight log statistics runner.

Reads an Excel flight log (first sheet) and reports:
1. Total and average flight time, cycles and flights
2. Most frequent route and per-route totals
3. Monthly breakdown and flights per day
4. Optionally, an exported report (JSON or Excel)

Usage:
    python run.py --input flight_log.xlsx                # Print statistics, export JSON
    python run.py --input flight_log.xls --export xlsx   # Export an Excel report
    python run.py --input flight_log.xlsx --export none  # Print only
    python run.py                                        # Uses config.ini
"""

import argparse
import os
import sys

from flightlog_stats.config import Config, EXPORT_FORMATS
from flightlog_stats.pipeline import load_flight_data
from flightlog_stats.report import export_json, export_workbook, print_summary


def run_export(config, result):
    """Write the report in the configured format, if any."""
    if config.export_format == 'none':
        return None

    print("\n" + "=" * 70)
    print(f"Exporting report ({config.export_format})")
    print("=" * 70)
    if config.export_format == 'xlsx':
        path = export_workbook(result.stats, result.records, config.output_dir)
    else:
        path = export_json(result.stats, config.output_dir)
    print(f"  Output: {path}")
    return path


def main():
    parser = argparse.ArgumentParser(
        description='Flight log statistics from an Excel workbook',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Required columns (exact header text):
  Date, From, To, Total F\\H, Total Cyc

Examples:
  python run.py --input flight_log.xlsx
  python run.py --input flight_log.xlsx --export xlsx --output-dir reports
  python run.py --input flight_log.xlsx --dayfirst       # 15/01/2024 style dates
        """,
    )
    parser.add_argument('--config', '-c', default='config.ini',
                        help='Config file path (default: config.ini)')
    parser.add_argument('--input', '-i', default=None,
                        help='Input workbook (.xlsx or .xls)')
    parser.add_argument('--export', '-e', default=None, choices=EXPORT_FORMATS,
                        help='Report export format (default: json)')
    parser.add_argument('--output-dir', '-o', default=None,
                        help='Directory for the exported report')
    parser.add_argument('--dayfirst', action='store_true', default=None,
                        help='Read ambiguous slash dates as DD/MM/YYYY')
    parser.add_argument('--preview', type=int, default=None,
                        help='Number of records to show in the preview')

    args = parser.parse_args()

    try:
        # Bad config values and rejected flight data (FlightDataError) are
        # both ValueErrors
        config = Config.from_file(args.config)
        config.override(
            input_file=args.input,
            export_format=args.export,
            output_dir=args.output_dir,
            dayfirst=args.dayfirst,
            preview_rows=args.preview,
        )

        print("Flight Log Statistics")
        print("=" * 70)
        print(f"Config: {os.path.abspath(args.config)}")
        print(f"Input: {config.input_file or '(not set)'}")

        config.validate()
        result = load_flight_data(config.input_file, dayfirst=config.dayfirst)
        print_summary(result.stats, result.records,
                      preview_rows=config.preview_rows, top=config.top)
        run_export(config, result)

    except (FileNotFoundError, ValueError) as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
