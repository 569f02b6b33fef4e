"""
Main FastAPI application for pg-ddl-core.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .health import router as health_router, API_VERSION
from .compare import router as compare_router
from .migrate import router as migrate_router
from .diff import router as diff_router
from .report import router as report_router
from .errors import not_found_handler, directory_not_found_handler, internal_error_handler
from pg_ddl_core.lib.errors import DirectoryNotFoundError

app = FastAPI(
    title="pg-ddl-core API",
    description="Compare captured PostgreSQL DDL between environments and plan migrations",
    version=API_VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router, tags=["system"])
app.include_router(compare_router, tags=["schema"])
app.include_router(diff_router, tags=["schema"])
app.include_router(report_router, tags=["schema"])
app.include_router(migrate_router, tags=["operations"])

# Add error handlers
app.add_exception_handler(DirectoryNotFoundError, directory_not_found_handler)
app.add_exception_handler(404, not_found_handler)
app.add_exception_handler(500, internal_error_handler)

# To run: uvicorn pg_ddl_core.api:app --reload --host 0.0.0.0 --port 8000
