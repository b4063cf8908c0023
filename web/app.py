"""
Web API for the flight log statistics tool.

Upload an Excel flight log and get back its statistics; export the current
statistics as a JSON or Excel report.

Usage:
    python -m uvicorn web.app:app --reload
"""

import json
import os
import shutil
import sys
import tempfile
from datetime import date
from io import StringIO
from pathlib import Path

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.responses import FileResponse, JSONResponse, Response
from starlette.background import BackgroundTask

# Ensure project root is on the path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from flightlog_stats.aggregator import format_time, minutes_of
from flightlog_stats.errors import FlightDataError
from flightlog_stats.pipeline import AnalysisSession
from flightlog_stats.report import (
    build_report, build_summary, export_filename, export_workbook,
    preview_records, top_months, top_routes,
)

app = FastAPI(title="Flight Log Statistics")

ALLOWED_EXTENSIONS = ('.xlsx', '.xls')
PREVIEW_ROWS = 10
TOP_ITEMS = 6

# Current dataset; replaced as a whole by each successful upload
session = AnalysisSession(dayfirst=os.environ.get('FLIGHTLOG_DAYFIRST', '').lower() == 'true')


def _require_result():
    if session.current is None:
        raise HTTPException(404, "No flight log has been analyzed yet")
    return session.current


def _result_payload(result):
    stats = result.stats
    shown, total = preview_records(result.records, PREVIEW_ROWS)
    preview = []
    for record in shown:
        row = record.to_dict()
        row['totalFlightTime'] = format_time(minutes_of(record))
        preview.append(row)

    return {
        'stats': stats.to_dict(),
        'summary': build_summary(stats),
        'topMonths': [
            {'month': month, **ms.to_dict()}
            for month, ms in top_months(stats, TOP_ITEMS)
        ],
        'topRoutes': [
            {'route': route, **rs.to_dict(), 'averageFlightTime': average}
            for route, rs, average in top_routes(stats, TOP_ITEMS)
        ],
        'preview': preview,
        'totalRecords': total,
    }


@app.post("/api/analyze")
async def analyze(file: UploadFile = File(...)):
    """Analyze an uploaded flight log.

    On success the upload becomes the current dataset. A rejected file
    leaves the previous dataset in place.
    """
    if not file.filename:
        raise HTTPException(400, "No file uploaded")

    ext = os.path.splitext(file.filename)[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(400, f"Unsupported file type: {ext}. Upload an Excel file (.xlsx or .xls).")

    work_dir = tempfile.mkdtemp(prefix="flightlog_")
    try:
        # Save uploaded file
        upload_path = os.path.join(work_dir, os.path.basename(file.filename))
        with open(upload_path, "wb") as f:
            content = await file.read()
            f.write(content)

        # Capture stdout
        old_stdout = sys.stdout
        sys.stdout = log_capture = StringIO()
        try:
            result = session.load(upload_path)
        finally:
            sys.stdout = old_stdout

        payload = _result_payload(result)
        payload.update({'success': True, 'log': log_capture.getvalue()})
        return JSONResponse(payload)

    except FlightDataError as e:
        return JSONResponse(
            status_code=400,
            content={'success': False, 'error': str(e), 'errorType': type(e).__name__},
        )
    finally:
        shutil.rmtree(work_dir, ignore_errors=True)


@app.get("/api/stats")
async def current_stats():
    """Statistics of the current dataset."""
    result = _require_result()
    return JSONResponse(_result_payload(result))


@app.get("/api/export")
async def export_report():
    """Download the current statistics as a JSON report."""
    result = _require_result()
    body = json.dumps(build_report(result.stats), indent=2, ensure_ascii=False)
    filename = export_filename(date.today(), 'json')
    return Response(
        content=body,
        media_type="application/json",
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )


@app.get("/api/export/xlsx")
async def export_report_xlsx():
    """Download the current statistics as an Excel report."""
    result = _require_result()
    out_dir = tempfile.mkdtemp(prefix="flightlog_export_")
    path = export_workbook(result.stats, result.records, out_dir)
    return FileResponse(
        path,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        filename=os.path.basename(path),
        background=BackgroundTask(shutil.rmtree, out_dir, ignore_errors=True),
    )
