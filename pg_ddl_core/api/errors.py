"""
Custom error handlers for the API.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from pg_ddl_core.lib.errors import DirectoryNotFoundError


async def not_found_handler(request: Request, exc):
    """Handle 404 errors"""
    return JSONResponse(
        status_code=404,
        content={"error": "Endpoint not found", "path": str(request.url.path)}
    )


async def directory_not_found_handler(request: Request, exc: DirectoryNotFoundError):
    """Handle environment directories that do not exist"""
    return JSONResponse(
        status_code=404,
        content={"error": "Directory not found", "path": exc.path}
    )


async def internal_error_handler(request: Request, exc):
    """Handle 500 errors"""
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "detail": getattr(exc, "detail", str(exc))}
    )
