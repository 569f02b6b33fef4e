"""
Comparison report endpoint.
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse, PlainTextResponse

from pg_ddl_core.api.models import ReportRequest
from pg_ddl_core.lib.compare import compare_dirs
from pg_ddl_core.lib.errors import PgDdlError
from pg_ddl_core.lib.report import format_html_report, format_markdown_report

router = APIRouter()


@router.post("/report")
def report(request: ReportRequest):
    """Render the comparison of two environments as an HTML page or markdown."""
    try:
        summary = compare_dirs(
            request.left_dir,
            request.right_dir,
            left_name=request.left_name,
            right_name=request.right_name,
            with_diff=request.with_diff,
        )
        if request.format == "markdown":
            return PlainTextResponse(format_markdown_report(summary), media_type="text/markdown")
        return HTMLResponse(format_html_report(summary))
    except PgDdlError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
