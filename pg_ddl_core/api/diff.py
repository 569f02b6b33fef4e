"""
Line diff endpoint.
"""

from fastapi import APIRouter

from pg_ddl_core.api.models import DiffRequest, DiffResponse
from pg_ddl_core.lib.diff import diff_texts

router = APIRouter()


@router.post("/diff", response_model=DiffResponse)
def diff(request: DiffRequest):
    """Diff two DDL texts; generated header comments and whitespace noise are ignored."""
    lines = diff_texts(
        request.left,
        request.right,
        left_label=request.left_label,
        right_label=request.right_label,
        context=request.context,
    )
    return DiffResponse(identical=not lines, lines=lines)
