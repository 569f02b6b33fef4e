import logging
from typing import List, Iterable, Dict

from pg_ddl_core.lib.objects import MigrationCommand


def sort_commands(commands: Iterable[MigrationCommand]) -> List[MigrationCommand]:
    """
    Order commands ascending by priority.

    The sort is stable, so commands with equal priority keep the comparator's
    order (category, then object name).
    """
    sorted_commands = sorted(commands, key=lambda cmd: cmd.priority)
    logging.debug(
        f"Sorted {len(sorted_commands)} commands: "
        f"{[(cmd.priority, cmd.object_name) for cmd in sorted_commands]}"
    )
    return sorted_commands


def group_by_category(commands: Iterable[MigrationCommand]) -> List[Dict[str, object]]:
    """
    Split an ordered command list into consecutive runs of the same category.

    A category may appear more than once (e.g. tables created early and dropped
    late), each run keeps its position in the plan.
    """
    groups: List[Dict[str, object]] = []
    for cmd in commands:
        if not groups or groups[-1]["category"] != cmd.category:
            groups.append({"category": cmd.category, "commands": []})
        groups[-1]["commands"].append(cmd)
    return groups
