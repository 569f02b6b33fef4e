import logging
import os
from datetime import datetime
from typing import List, Optional, Tuple, Iterable

from pglast import parse_sql
from pglast.parser import ParseError

from pg_ddl_core.lib.compare import compare_dirs
from pg_ddl_core.lib.migration import plan
from pg_ddl_core.lib.objects import DiffSummary, Migration, MigrationCommand, Rollback
from pg_ddl_core.lib.sorter import group_by_category

BANNER = "-- " + "=" * 59
SECTION = "-- " + "-" * 57


def _command_sections(commands: List[MigrationCommand]) -> List[str]:
    lines = []
    for idx, group in enumerate(group_by_category(commands)):
        if idx > 0:
            lines.append("")
        lines.append(SECTION)
        lines.append(f"-- {group['category'].upper()}")
        lines.append(SECTION)
        lines.append("")
        for cmd in group["commands"]:
            lines.append(f"-- {cmd.comment}")
            lines.append(cmd.sql)
            lines.append("")
    return lines


def format_migration_sql(migration: Migration, generated: Optional[datetime] = None) -> str:
    """Render a migration as a single transactional SQL script."""
    left = migration.left_name.upper()
    right = migration.right_name.upper()
    lines = [
        BANNER,
        f"-- Migration: {left} -> {right}",
        f"-- Generated: {(generated or datetime.now()).isoformat(timespec='seconds')}",
        BANNER,
        "",
        "-- Summary:",
        f"--   Creates: {migration.creates}",
        f"--   Drops:   {migration.drops}",
        f"--   Alters:  {migration.alters}",
        "",
        "-- IMPORTANT:",
        "--   1. Review this migration carefully before running",
        "--   2. Test on a staging environment first",
        f"--   3. Backup your {migration.right_name} database",
        "--   4. Some commands may require manual adjustment (marked with WARNING)",
        "",
        BANNER,
        "",
        "BEGIN;",
        "",
    ]

    if not migration.commands:
        lines.append(f"-- No changes needed - {left} and {right} are in sync!")
    else:
        lines.extend(_command_sections(migration.commands))

    lines.extend([
        "COMMIT;",
        "",
        BANNER,
        "-- Migration Complete",
        BANNER,
    ])
    return "\n".join(lines)


def format_rollback_sql(rollback: Rollback, generated: Optional[datetime] = None) -> str:
    """Render a rollback as a single transactional SQL script."""
    left = rollback.left_name.upper()
    right = rollback.right_name.upper()
    lines = [
        BANNER,
        f"-- ROLLBACK: {right} -> {left} (Undo Migration)",
        f"-- Generated: {(generated or datetime.now()).isoformat(timespec='seconds')}",
    ]
    if rollback.migration_file:
        lines.append(f"-- Undoes migration: {rollback.migration_file}")
    lines.extend([
        BANNER,
        "",
        "-- IMPORTANT:",
        "--   This rollback script reverses the migration above.",
        "--   Review carefully before running - especially table modifications.",
        "--   Data changes made after migration will NOT be rolled back.",
        "",
        BANNER,
        "",
        "BEGIN;",
        "",
    ])

    if not rollback.commands:
        lines.append("-- No rollback needed - migration had no changes!")
    else:
        lines.extend(_command_sections(rollback.commands))

    lines.extend([
        "COMMIT;",
        "",
        BANNER,
        "-- Rollback Complete",
        BANNER,
    ])
    return "\n".join(lines)


def _write(output_dir: str, filename: str, content: str) -> str:
    os.makedirs(output_dir, exist_ok=True)
    filepath = os.path.join(output_dir, filename)
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(content)
    logging.info(f"Wrote {filepath}")
    return filepath


def save_migration(output_dir: str, migration: Migration) -> str:
    return _write(output_dir, migration.filename, format_migration_sql(migration))


def save_rollback(output_dir: str, rollback: Rollback) -> str:
    return _write(output_dir, rollback.filename, format_rollback_sql(rollback))


def check_syntax(commands: Iterable[MigrationCommand]) -> List[Tuple[MigrationCommand, str]]:
    """
    Parse every command body with the PostgreSQL parser.

    Returns:
        (command, error message) for each command that does not parse
    """
    failures = []
    for cmd in commands:
        try:
            parse_sql(cmd.sql)
        except ParseError as e:
            logging.warning(f"{cmd.comment}: generated SQL does not parse: {e}")
            failures.append((cmd, str(e)))
    return failures


def diff_plan(
    left_dir: str,
    right_dir: str,
    *,
    left_name: str = "dev",
    right_name: str = "prod",
    verbose: bool = False,
    **kwargs
) -> Tuple[DiffSummary, Migration]:
    """
    Compare two environment directories and plan the migration between them.

    Args:
        left_dir: Source environment directory
        right_dir: Target environment directory
        left_name: Label of the source environment
        right_name: Label of the target environment
        verbose: Log counts at INFO level while planning

    Returns:
        (summary, migration)
    """
    summary = compare_dirs(left_dir, right_dir, left_name=left_name, right_name=right_name, **kwargs)
    if verbose:
        logging.info(f"Loaded {summary.total_dev} objects from {left_dir}")
        logging.info(f"Loaded {summary.total_prod} objects from {right_dir}")

    migration = plan(summary)

    if verbose:
        logging.info(f"Generated {len(migration)} migration commands")
    return summary, migration
