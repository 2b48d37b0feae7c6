# Overview: Flask API routes for sales reports.

# backend/kasir/routes/reports.py
"""
Sales report routes.

- /api/report/hari-ini: today, local time
- /api/report?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD: both dates inclusive
"""
from flask import Blueprint, current_app, request

from ..errors import ValidationError
from ..extensions import get_services
from ..time_utils import parse_date
from .responses import error, success

reports_bp = Blueprint("reports", __name__, url_prefix="/api/report")


@reports_bp.get("/hari-ini")
def today_report():
    try:
        report = get_services().transactions.get_today_report()
    except Exception:
        current_app.logger.exception("Failed to build today's report")
        return error("Failed to retrieve report", 500)
    return success("Success", report.to_dict())


@reports_bp.get("")
def range_report():
    raw_start = request.args.get("start_date", "")
    raw_end = request.args.get("end_date", "")
    if not raw_start.strip() or not raw_end.strip():
        return error("start_date and end_date are required", 400)

    try:
        start = parse_date(raw_start)
    except ValueError:
        return error("invalid start_date format, use YYYY-MM-DD", 400)
    try:
        end = parse_date(raw_end)
    except ValueError:
        return error("invalid end_date format, use YYYY-MM-DD", 400)

    try:
        report = get_services().transactions.get_report_by_date_range(start, end)
    except ValidationError as e:
        return error(str(e), 400)
    except Exception:
        current_app.logger.exception("Failed to build report")
        return error("Failed to retrieve report", 500)
    return success("Success", report.to_dict())
