"""
Interactive review of a migration plan, one command at a time.

MigrationReview is a plain state machine fed with the reviewer's answers;
interactive_review drives it over any prompt function, so nothing here
assumes a terminal is attached.
"""

from enum import Enum
from typing import Callable, List, Optional

from pg_ddl_core.lib.categories import Action
from pg_ddl_core.lib.errors import MigrationAborted
from pg_ddl_core.lib.objects import Migration, MigrationCommand

VIEW_LINES = 20

ACTION_LABELS = {
    Action.CREATE: "CREATE",
    Action.DROP: "DROP",
    Action.ALTER: "MODIFY",
}


class ReviewState(Enum):
    REVIEWING = "reviewing"
    VIEWING = "viewing"
    APPROVED = "approved"
    SKIPPED = "skipped"
    INCLUDE_ALL = "include_all"
    ABORTED = "aborted"
    DONE = "done"


ANSWERS = {
    "y": ReviewState.APPROVED,
    "yes": ReviewState.APPROVED,
    "n": ReviewState.SKIPPED,
    "no": ReviewState.SKIPPED,
    "v": ReviewState.VIEWING,
    "view": ReviewState.VIEWING,
    "a": ReviewState.INCLUDE_ALL,
    "all": ReviewState.INCLUDE_ALL,
    "q": ReviewState.ABORTED,
    "quit": ReviewState.ABORTED,
    "abort": ReviewState.ABORTED,
}


class MigrationReview:
    """
    State machine over the ordered commands of a migration.

    `state` is REVIEWING or VIEWING while commands remain, then DONE or ABORTED.
    answer() returns the transition taken for each reply.
    """

    def __init__(self, migration: Migration):
        self.migration = migration
        self.index = 0
        self.approved: List[MigrationCommand] = []
        self.skipped = 0
        self.state = ReviewState.DONE if not migration.commands else ReviewState.REVIEWING

    @property
    def finished(self) -> bool:
        return self.state in (ReviewState.DONE, ReviewState.ABORTED)

    @property
    def current(self) -> Optional[MigrationCommand]:
        if self.finished or self.index >= len(self.migration.commands):
            return None
        return self.migration.commands[self.index]

    @property
    def remaining(self) -> int:
        return len(self.migration.commands) - self.index

    def answer(self, response: str) -> ReviewState:
        """
        Apply one answer to the current command.

        Returns:
            The transition taken; REVIEWING when the answer was not recognised
        """
        if self.finished:
            return self.state

        transition = ANSWERS.get(response.strip().lower())
        if transition is None:
            return ReviewState.REVIEWING

        if transition == ReviewState.ABORTED:
            self.state = ReviewState.ABORTED
            return transition

        if transition == ReviewState.APPROVED:
            self.approved.append(self.current)
            self.index += 1
        elif transition == ReviewState.SKIPPED:
            self.skipped += 1
            self.index += 1
        elif transition == ReviewState.INCLUDE_ALL:
            self.approved.extend(self.migration.commands[self.index:])
            self.index = len(self.migration.commands)

        if self.index >= len(self.migration.commands):
            self.state = ReviewState.DONE
        elif transition == ReviewState.VIEWING:
            self.state = ReviewState.VIEWING
        else:
            self.state = ReviewState.REVIEWING
        return transition

    def result(self) -> Migration:
        """Migration containing only the approved commands, with recomputed counts."""
        if self.state == ReviewState.ABORTED:
            raise MigrationAborted("Migration aborted.")
        commands = list(self.approved)
        return Migration(
            commands=commands,
            creates=sum(1 for cmd in commands if cmd.action == Action.CREATE),
            drops=sum(1 for cmd in commands if cmd.action == Action.DROP),
            alters=sum(1 for cmd in commands if cmd.action == Action.ALTER),
            timestamp=self.migration.timestamp,
            left_name=self.migration.left_name,
            right_name=self.migration.right_name,
        )


def interactive_review(
    migration: Migration,
    ask: Optional[Callable[[str], str]] = None,
    out: Optional[Callable[[str], None]] = None
) -> Migration:
    """
    Ask the reviewer about every command of a migration.

    Args:
        migration: Planned migration
        ask: Prompt function returning the reviewer's answer (default: input)
        out: Output function for progress and SQL previews (default: print)

    Returns:
        The filtered migration

    Raises:
        MigrationAborted: The reviewer chose to abort
    """
    ask = ask or input
    out = out or print
    review = MigrationReview(migration)
    if review.finished:
        out("No changes to review - environments are in sync!")
        return migration

    total = len(migration.commands)
    out(f"Interactive Migration Review: {total} changes to review")
    out("  [y] include  [n] skip  [v] view SQL  [a] include all  [q] abort")
    out("")

    while not review.finished:
        cmd = review.current
        out(f"[{review.index + 1}/{total}] {ACTION_LABELS[cmd.action]} [{cmd.category}] {cmd.object_name}")
        remaining = review.remaining
        while True:
            transition = review.answer(ask("  Include? [y/n/v/a/q]: "))
            if transition == ReviewState.VIEWING:
                sql_lines = cmd.sql.split("\n")
                out("")
                for line in sql_lines[:VIEW_LINES]:
                    out(f"    {line}")
                if len(sql_lines) > VIEW_LINES:
                    out(f"    ... ({len(sql_lines) - VIEW_LINES} more lines)")
                out("")
                continue
            if transition == ReviewState.REVIEWING:
                out("  Please answer y, n, v, a or q")
                continue
            if transition == ReviewState.SKIPPED:
                out("  Skipped")
            elif transition == ReviewState.INCLUDE_ALL:
                out(f"  Including all {remaining} remaining changes")
            elif transition == ReviewState.ABORTED:
                out("  Migration aborted.")
            break
        out("")

    filtered = review.result()
    out(f"Review complete: {len(filtered.commands)} included, {review.skipped} skipped")
    return filtered
