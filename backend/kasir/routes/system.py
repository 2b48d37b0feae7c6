# backend/kasir/routes/system.py
"""Health endpoint."""

import time

from flask import Blueprint, current_app
from sqlalchemy import text

from ..extensions import db
from .responses import error, success

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """Run a trivial query and time it."""
    start_time = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        elapsed_ms = (time.time() - start_time) * 1000
        return {"status": "healthy", "latency_ms": round(elapsed_ms, 2)}
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    if not current_app.config.get("USE_DATABASE"):
        return success("API Running", {"storage": "memory"})

    database = check_database_health()
    if database["status"] != "healthy":
        return error("Database unavailable", 503, details={"database": database})
    return success("API Running", {"storage": "database", "database": database})
