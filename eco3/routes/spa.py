"""
Single-page-app fallback for every non-API path.
"""
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

from ..config import get_settings
from ..responses import not_found

settings = get_settings()

router = APIRouter(tags=["spa"])


def resolve_static(path: str) -> Path:
    """Return the requested build file if it exists inside static_dir, else index.html."""
    root = Path(settings.static_dir).resolve()
    candidate = (root / path).resolve()
    if path and candidate.is_file() and root in candidate.parents:
        return candidate
    return root / "index.html"


@router.get("/{full_path:path}", include_in_schema=False)
def spa_fallback(full_path: str):
    if full_path == "api" or full_path.startswith("api/"):
        not_found(f"No API route for /{full_path}")

    target = resolve_static(full_path)
    if not target.is_file():
        not_found("Frontend build not found")
    return FileResponse(target)
