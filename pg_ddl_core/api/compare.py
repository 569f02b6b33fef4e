"""
Environment comparison endpoints.
"""

from fastapi import APIRouter, HTTPException

from pg_ddl_core.api.models import CompareManyRequest, CompareRequest
from pg_ddl_core.lib.compare import compare_dirs, compare_many
from pg_ddl_core.lib.errors import PgDdlError

router = APIRouter()


@router.post("/compare", responses={
    200: {
        "description": "Comparison summary",
        "content": {
            "application/json": {
                "example": {
                    "left": "dev",
                    "right": "prod",
                    "total_dev": 3,
                    "total_prod": 2,
                    "only_dev": 1,
                    "only_prod": 0,
                    "modified": 1,
                    "identical": 1,
                    "items": [
                        {
                            "category": "tables",
                            "object": "public.users",
                            "status": "only_dev",
                            "left_path": "sql/dev/tables/public.users.sql",
                            "right_path": None,
                            "diff": []
                        }
                    ]
                }
            }
        }
    },
    404: {"description": "Environment directory not found"}
})
def compare(request: CompareRequest):
    """
    Compare two captured environment directories.

    Each directory holds one subdirectory per object category, with one
    .sql file per object.
    """
    try:
        summary = compare_dirs(
            request.left_dir,
            request.right_dir,
            left_name=request.left_name,
            right_name=request.right_name,
            with_diff=request.with_diff,
        )
        return summary.to_dict()
    except PgDdlError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/compare-many")
def compare_environments(request: CompareManyRequest):
    """Compare every unordered pair of environments under sql_root."""
    try:
        result = compare_many(request.sql_root, request.envs, with_diff=False)
        return result.to_dict()
    except PgDdlError:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
