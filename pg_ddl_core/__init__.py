"""
pg-ddl-core: schema-as-code comparison and migration planning for PostgreSQL

Compares per-environment trees of captured DDL files (one .sql file per object,
grouped by category) and plans ordered migration and rollback scripts between them.
"""

# Import core library functionality
from pg_ddl_core.lib import (
    compare_dirs,
    compare_many,
    plan,
    plan_rollback,
)

# Import CLI and API interfaces
from pg_ddl_core.cli import main
from pg_ddl_core.api import app

__version__ = "0.2.0"
__all__ = [
    # Core library exports
    "compare_dirs",
    "compare_many",
    "plan",
    "plan_rollback",

    # Interface exports
    "main",
    "app"
]
