"""
Migration planning: turn a DiffSummary into an ordered list of DDL commands
that brings the right (target) environment in line with the left (source).
"""

import logging
from typing import Optional

from pg_ddl_core.lib.categories import (
    Action,
    Category,
    is_replaceable,
    object_keyword,
    priority_for,
    singular,
    to_category,
)
from pg_ddl_core.lib.normalize import read_sql_file, strip_header
from pg_ddl_core.lib.objects import (
    MANUAL_REVIEW_MARKER,
    DiffItem,
    DiffStatus,
    DiffSummary,
    Migration,
    MigrationCommand,
)
from pg_ddl_core.lib.sorter import sort_commands


def load_ddl(text: Optional[str], path: Optional[str]) -> str:
    """Header-stripped DDL of one side of an item, read from disk if not already loaded."""
    if text is not None:
        return text
    if path is None:
        raise ValueError("Diff item has neither DDL text nor a file path for the requested side")
    return strip_header(read_sql_file(path))


def generate_create_sql(category: str, ddl: str) -> str:
    """
    Stored DDL is emitted verbatim.

    Functions and views are captured as CREATE OR REPLACE, every other category
    as a plain CREATE.
    """
    return ddl


def generate_drop_sql(category: str, object_name: str) -> str:
    """DROP ... IF EXISTS ... CASCADE for an object, or a placeholder where that is not possible."""
    kind = to_category(category)

    if kind == Category.FUNCTIONS:
        # Argument types are not captured, so overloads sharing the name cannot be told apart
        logging.warning(f"DROP FUNCTION {object_name} has no argument types; it may hit another overload")
        return f"DROP FUNCTION IF EXISTS {object_name} CASCADE;"

    if kind == Category.TRIGGERS:
        # The owning table is not part of the object name
        logging.warning(f"DROP TRIGGER {object_name} needs the table name, emitting a placeholder")
        return f"-- DROP TRIGGER {object_name} ON <table>; -- {MANUAL_REVIEW_MARKER}: specify table name"

    return f"DROP {object_keyword(category)} IF EXISTS {object_name} CASCADE;"


def table_review_block(object_name: str, ddl: str, env_label: str) -> str:
    """Manual-review placeholder for a structurally modified table."""
    # TODO: column-level ALTER TABLE synthesis
    return "\n".join([
        f"-- {MANUAL_REVIEW_MARKER}: table modified: {object_name}",
        "-- Review the changes manually and adjust as needed",
        "-- Option 1: Manually write ALTER TABLE statements",
        "-- Option 2: Recreate table (data loss!)",
        "",
        f"-- Current {env_label} definition:",
        *[f"-- {line}" if line else "--" for line in ddl.split("\n")],
        "",
        "-- To preserve data, you may need to:",
        "-- 1. Create temporary table",
        "-- 2. Copy data",
        "-- 3. Drop old table",
        "-- 4. Recreate with new structure",
        "-- 5. Restore data",
    ])


def generate_alter_sql(category: str, object_name: str, ddl: str, env_label: str = "DEV") -> str:
    """
    SQL that replaces an existing object with the definition in `ddl`.

    Functions and views are replaced in place, tables are never rewritten
    automatically, everything else is dropped and recreated.
    """
    if is_replaceable(category):
        return generate_create_sql(category, ddl)

    if to_category(category) == Category.TABLES:
        return table_review_block(object_name, ddl, env_label)

    drop = generate_drop_sql(category, object_name)
    create = generate_create_sql(category, ddl)
    return f"{drop}\n\n{create}"


def make_command(item: DiffItem, action: Action, sql: str, comment: str) -> MigrationCommand:
    return MigrationCommand(
        category=item.category,
        object_name=item.object_name,
        sql=sql,
        priority=priority_for(item.category, action),
        comment=comment,
        action=action,
    )


def plan(summary: DiffSummary) -> Migration:
    """
    Build the forward migration for a comparison.

    Args:
        summary: Result of compare_dirs / compare_envs

    Returns:
        Migration with commands sorted by priority and create/drop/alter counts
    """
    migration = Migration(left_name=summary.left_name, right_name=summary.right_name)
    commands = []

    for item in summary.items:
        label = singular(item.category)

        if item.status == DiffStatus.ONLY_DEV:
            ddl = load_ddl(item.left_ddl, item.left_path)
            commands.append(make_command(
                item, Action.CREATE, generate_create_sql(item.category, ddl),
                f"Create {label}: {item.object_name}",
            ))
            migration.creates += 1

        elif item.status == DiffStatus.ONLY_PROD:
            commands.append(make_command(
                item, Action.DROP, generate_drop_sql(item.category, item.object_name),
                f"Drop {label}: {item.object_name}",
            ))
            migration.drops += 1

        elif item.status == DiffStatus.MODIFIED:
            ddl = load_ddl(item.left_ddl, item.left_path)
            sql = generate_alter_sql(item.category, item.object_name, ddl, summary.left_name.upper())
            commands.append(make_command(
                item, Action.ALTER, sql,
                f"Modify {label}: {item.object_name}",
            ))
            migration.alters += 1

    migration.commands = sort_commands(commands)
    logging.info(
        f"Planned migration {summary.left_name} -> {summary.right_name}: "
        f"{migration.creates} creates, {migration.drops} drops, {migration.alters} alters"
    )
    return migration
