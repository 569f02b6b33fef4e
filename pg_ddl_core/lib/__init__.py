"""
Core library functionality for PostgreSQL DDL comparison and migration planning.
"""

from pg_ddl_core.lib.compare import compare_dirs, compare_envs, compare_many
from pg_ddl_core.lib.config import RcConfig, load_rc_config, merge_with_cli_options
from pg_ddl_core.lib.deploy import check_syntax, diff_plan, format_migration_sql, format_rollback_sql
from pg_ddl_core.lib.diff import diff_lines, diff_texts
from pg_ddl_core.lib.errors import ConfigError, DirectoryNotFoundError, MigrationAborted, PgDdlError, SqlFileError
from pg_ddl_core.lib.migration import plan
from pg_ddl_core.lib.normalize import fingerprint, normalize, strip_header
from pg_ddl_core.lib.objects import DiffItem, DiffStatus, DiffSummary, Migration, MigrationCommand, Rollback
from pg_ddl_core.lib.review import interactive_review
from pg_ddl_core.lib.rollback import plan_rollback
from pg_ddl_core.lib.sorter import sort_commands

__all__ = [
    # Comparison
    "compare_dirs",
    "compare_envs",
    "compare_many",
    "fingerprint",
    "normalize",
    "strip_header",
    "diff_lines",
    "diff_texts",

    # Planning
    "plan",
    "plan_rollback",
    "sort_commands",
    "interactive_review",

    # Output
    "format_migration_sql",
    "format_rollback_sql",
    "check_syntax",
    "diff_plan",

    # Configuration
    "RcConfig",
    "load_rc_config",
    "merge_with_cli_options",

    # Data model
    "DiffItem",
    "DiffStatus",
    "DiffSummary",
    "Migration",
    "MigrationCommand",
    "Rollback",

    # Errors
    "PgDdlError",
    "DirectoryNotFoundError",
    "ConfigError",
    "MigrationAborted",
    "SqlFileError",
]
