"""
Rollback planning: the inverse of a migration, built from the same DiffSummary.

A rollback restores schema structure only. Data written after the migration
was applied is not reverted.
"""

import logging
from typing import Optional

from pg_ddl_core.lib.categories import Action, Category, is_replaceable, singular, to_category
from pg_ddl_core.lib.migration import (
    generate_create_sql,
    generate_drop_sql,
    load_ddl,
    make_command,
)
from pg_ddl_core.lib.objects import (
    MANUAL_REVIEW_MARKER,
    DiffStatus,
    DiffSummary,
    Migration,
    Rollback,
)
from pg_ddl_core.lib.sorter import sort_commands


def generate_rollback_alter_sql(category: str, object_name: str, ddl: str, env_label: str = "PROD") -> str:
    """SQL restoring the pre-migration definition of a modified object."""
    if is_replaceable(category):
        return generate_create_sql(category, ddl)

    if to_category(category) == Category.TABLES:
        return "\n".join([
            f"-- {MANUAL_REVIEW_MARKER}: table rollback: {object_name}",
            f"-- Review and adjust the following manually to restore {env_label} state",
            "-- You may need to: ALTER TABLE, DROP/ADD columns, etc.",
            "",
            f"-- Original {env_label} definition:",
            *[f"-- {line}" if line else "--" for line in ddl.split("\n")],
        ])

    drop = generate_drop_sql(category, object_name)
    create = generate_create_sql(category, ddl)
    return f"{drop}\n\n{create}"


def plan_rollback(summary: DiffSummary, migration: Optional[Migration] = None) -> Rollback:
    """
    Build the rollback for the migration planned from `summary`.

    Args:
        summary: The same comparison the forward migration was planned from
        migration: The forward migration as finally kept (e.g. after interactive
            review). When given, only objects it touches are rolled back and the
            rollback is named after it.

    Returns:
        Rollback with commands sorted by priority
    """
    rollback = Rollback(left_name=summary.left_name, right_name=summary.right_name)
    included = None
    if migration is not None:
        rollback.timestamp = migration.timestamp
        rollback.migration_file = migration.filename
        included = {cmd.key for cmd in migration.commands}

    right_label = summary.right_name.upper()
    commands = []

    for item in summary.items:
        if included is not None and item.key not in included:
            continue
        label = singular(item.category)

        if item.status == DiffStatus.ONLY_DEV:
            # Migration creates this, rollback drops it
            commands.append(make_command(
                item, Action.DROP, generate_drop_sql(item.category, item.object_name),
                f"Rollback: Drop {label} {item.object_name} (was created by migration)",
            ))

        elif item.status == DiffStatus.ONLY_PROD:
            # Migration drops this, rollback restores it from the target side
            ddl = load_ddl(item.right_ddl, item.right_path)
            commands.append(make_command(
                item, Action.CREATE, generate_create_sql(item.category, ddl),
                f"Rollback: Restore {label} {item.object_name} (was dropped by migration)",
            ))

        elif item.status == DiffStatus.MODIFIED:
            ddl = load_ddl(item.right_ddl, item.right_path)
            commands.append(make_command(
                item, Action.ALTER,
                generate_rollback_alter_sql(item.category, item.object_name, ddl, right_label),
                f"Rollback: Restore {label} {item.object_name} to {right_label} version",
            ))

    rollback.commands = sort_commands(commands)
    logging.info(f"Planned rollback with {len(rollback.commands)} commands")
    return rollback
