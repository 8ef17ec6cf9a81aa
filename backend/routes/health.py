"""Health and readiness check routes."""

import asyncio
import logging

from fastapi import APIRouter, Depends

from config import settings
from errors import LookupServiceError
from services.student_data import StudentStore, get_student_store

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "graduation-lookup-api"


@router.get("/ready")
async def ready() -> dict:
    """Lightweight readiness check — no file access."""
    return {"status": "ok", "service": SERVICE_NAME, "commit": settings.git_sha}


@router.get("/health")
async def health(store: StudentStore = Depends(get_student_store)) -> dict:
    """Deep health check that loads the student data through the store."""
    result = {"status": "ok", "service": SERVICE_NAME, "commit": settings.git_sha, "data": "not_tested"}

    try:
        frame = await asyncio.to_thread(store.get_records)
        result["data"] = "loaded"
        result["total_students"] = len(frame)
    except LookupServiceError as e:
        logger.warning("Student data health check failed: %r", e.__cause__)
        result["data"] = "error"
        result["data_error"] = str(e)

    return result
