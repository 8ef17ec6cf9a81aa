"""Student lookup routes.

GET  /api/search?q=...  → two-phase ID/name lookup over the cached records
POST /api/search        → record count and cohort label (no personal data)
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Query

from config import settings
from errors import QueryValidationError
from services.matcher import search as match_students
from services.student_data import StudentRecord, StudentStore, get_student_store

logger = logging.getLogger(__name__)

router = APIRouter()

MIN_QUERY_LENGTH = 2
MAX_QUERY_LENGTH = 50

# Fields exposed to clients. record_id and the split name parts stay internal.
PUBLIC_FIELDS = (
    "student_id",
    "full_name",
    "birth_date",
    "hometown",
    "gender",
    "honors_rank",
    "major",
    "class_name",
    "gpa",
    "school",
    "level",
    "term",
)


def _validate_query(q: str | None) -> str:
    """Check bounds on the trimmed query; return it unchanged if valid."""
    stripped = q.strip() if q else ""
    if not stripped:
        raise QueryValidationError("Query parameter is required")
    length = len(stripped)
    if length < MIN_QUERY_LENGTH:
        raise QueryValidationError(f"Query must be at least {MIN_QUERY_LENGTH} characters")
    if length > MAX_QUERY_LENGTH:
        raise QueryValidationError("Query too long")
    return q


def _to_public(record: StudentRecord) -> dict:
    return {field: getattr(record, field) for field in PUBLIC_FIELDS}


@router.get("/api/search")
async def search_students(
    q: str | None = Query(None),
    store: StudentStore = Depends(get_student_store),
) -> dict:
    """Look up graduation records by student ID, falling back to name."""
    query = _validate_query(q)

    frame = await asyncio.to_thread(store.get_records)
    results = match_students(frame, query)

    return {
        "success": True,
        "query": query,
        "results": [_to_public(r) for r in results],
        "total": len(results),
        "total_students": len(frame),
    }


@router.post("/api/search")
async def student_stats(store: StudentStore = Depends(get_student_store)) -> dict:
    """Total record count plus the configured cohort label."""
    frame = await asyncio.to_thread(store.get_records)
    return {
        "success": True,
        "total_students": len(frame),
        "ky_hoc": settings.cohort_label,
    }
