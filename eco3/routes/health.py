"""
Health check routes: a cheap liveness check and a detailed report.
"""
import sys
from datetime import datetime, timezone
from typing import Any, Dict

import psutil
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..logging_config import db_logger
from ..models import Comment, Like, Post, User
from ..responses import isoformat, utc_timestamp

router = APIRouter(prefix="/api/health", tags=["health"])

STARTED_AT = datetime.now(timezone.utc)
MEMORY_WARNING_PERCENT = 90


def format_uptime() -> str:
    total = int((datetime.now(timezone.utc) - STARTED_AT).total_seconds())
    days, total = divmod(total, 86400)
    hours, total = divmod(total, 3600)
    minutes, seconds = divmod(total, 60)
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m {seconds}s"
    return f"{minutes}m {seconds}s"


def check_database(db: Session) -> Dict[str, Any]:
    """Row counts per table; any query failure marks the database unhealthy."""
    tables = {"users": User.id, "posts": Post.id, "comments": Comment.id, "likes": Like.post_id}
    try:
        counts = {name: db.query(func.count(column)).scalar() for name, column in tables.items()}
    except SQLAlchemyError as e:
        db_logger.error("Database health check failed", error=e)
        return {"status": "unhealthy", "error": str(e)}
    return {"status": "healthy", "row_counts": counts}


def check_system() -> Dict[str, Any]:
    """Host CPU and memory as seen by psutil."""
    memory = psutil.virtual_memory()
    return {
        "status": "warning" if memory.percent >= MEMORY_WARNING_PERCENT else "healthy",
        "cpu_percent": psutil.cpu_percent(interval=0.1),
        "memory_percent": memory.percent,
        "memory_available_gb": round(memory.available / 1024 ** 3, 2),
        "python_version": sys.version.split()[0],
    }


@router.get("")
def health_check():
    return {"status": "ok", "timestamp": utc_timestamp()}


@router.get("/full")
def health_full(db: Session = Depends(get_db)):
    checks = {"database": check_database(db), "system": check_system()}
    statuses = {check["status"] for check in checks.values()}

    overall = "healthy"
    if "unhealthy" in statuses:
        overall = "unhealthy"
    elif "warning" in statuses:
        overall = "degraded"

    return {
        "status": overall,
        "uptime": format_uptime(),
        "started_at": isoformat(STARTED_AT),
        "checks": checks,
        "timestamp": utc_timestamp(),
    }
