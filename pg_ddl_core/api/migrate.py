"""
Migration and rollback planning endpoints.
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse, PlainTextResponse

from pg_ddl_core.api.models import MigrateRequest
from pg_ddl_core.lib.deploy import diff_plan, format_migration_sql, format_rollback_sql
from pg_ddl_core.lib.errors import PgDdlError
from pg_ddl_core.lib.rollback import plan_rollback

router = APIRouter()


def _plan(request: MigrateRequest):
    return diff_plan(
        request.left_dir,
        request.right_dir,
        left_name=request.left_name,
        right_name=request.right_name,
        with_diff=request.with_diff,
    )


@router.post("/migrate", responses={
    200: {
        "description": "Planned migration",
        "content": {
            "text/plain": {
                "example": """BEGIN;

-- Create table: public.users
CREATE TABLE public.users (id serial PRIMARY KEY);

COMMIT;"""
            },
            "application/json": {
                "example": {
                    "timestamp": "20260118_093000",
                    "left": "dev",
                    "right": "prod",
                    "summary": {"creates": 1, "drops": 0, "alters": 0},
                    "commands": [
                        {
                            "category": "tables",
                            "object": "public.users",
                            "sql": "CREATE TABLE public.users (id serial PRIMARY KEY);",
                            "priority": 420,
                            "comment": "Create table: public.users",
                            "action": "CREATE"
                        }
                    ]
                }
            }
        }
    }
})
def migrate(request: MigrateRequest):
    """
    Plan the migration that brings the right environment to the left one.

    Nothing is executed; the response is the rendered script (sql) or the
    ordered command list (json).
    """
    try:
        _, migration = _plan(request)
        if request.output_format == "sql":
            return PlainTextResponse(format_migration_sql(migration))
        return JSONResponse(migration.to_dict())
    except PgDdlError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/rollback")
def rollback(request: MigrateRequest):
    """Plan the rollback of the migration /migrate would produce for the same request."""
    try:
        summary, migration = _plan(request)
        plan = plan_rollback(summary, migration)
        if request.output_format == "sql":
            return PlainTextResponse(format_rollback_sql(plan))
        return JSONResponse(plan.to_dict())
    except PgDdlError:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
