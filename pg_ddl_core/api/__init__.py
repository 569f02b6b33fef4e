"""
API module for pg-ddl-core.
"""

from .models import CompareRequest, MigrateRequest, HealthResponse
from .api import app

__all__ = [
    "CompareRequest",
    "MigrateRequest",
    "HealthResponse",
    "app"
]
