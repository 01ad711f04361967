"""Health check endpoints."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.dependencies import get_database
from database.engine import Database

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=request.app.version)


@router.get("/ready")
async def readiness_check(database: Database = Depends(get_database)):
    """Readiness check for load balancers."""
    try:
        await database.ping()
    except Exception as exc:
        logger.warning(f"Readiness check failed: {type(exc).__name__}: {exc}")
        return JSONResponse(status_code=503, content={"status": "unavailable"})
    return {"status": "ready"}
