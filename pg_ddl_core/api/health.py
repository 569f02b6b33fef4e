"""
Health and status endpoints.
"""

from fastapi import APIRouter
from pg_ddl_core.api.models import HealthResponse
from datetime import datetime

router = APIRouter()

API_VERSION = "0.2.0"


@router.get("/health", response_model=HealthResponse)
def health():
    """Get API health status"""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat(),
        version=API_VERSION
    )
