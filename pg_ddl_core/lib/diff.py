"""
Line-level diff of two DDL definitions.

The primary path aligns both sides with a dynamic-programming LCS and renders
the changes with a small context window. Inputs whose LCS table would exceed
LCS_CELL_LIMIT cells fall back to an unordered comparison of distinct lines.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from pg_ddl_core.lib.normalize import ddl_lines

LCS_CELL_LIMIT = 5_000_000
CONTEXT_LINES = 2
FALLBACK_DISPLAY_LIMIT = 30
GAP_MARKER = "  ..."


class LineTag(Enum):
    """Which side a diff entry belongs to."""
    LEFT = "left"
    RIGHT = "right"
    CONTEXT = "context"


@dataclass(frozen=True)
class DiffLine:
    """
    One entry of an edit script.

    line_number is 1-based on the entry's own side (the left side for context entries).
    """
    tag: LineTag
    line_number: int
    text: str


def _normalize_lines(lines: Sequence[str]) -> List[str]:
    return [line.rstrip() for line in lines]


def compute_diff(left_lines: Sequence[str], right_lines: Sequence[str]) -> List[DiffLine]:
    """
    Full (unwindowed) edit script between two line sequences.

    Context plus left entries reproduce the left lines in order, and context plus
    right entries reproduce the right lines. When the LCS values tie while
    backtracking, the right side is consumed first.
    """
    left = _normalize_lines(left_lines)
    right = _normalize_lines(right_lines)
    m = len(left)
    n = len(right)

    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        row = dp[i]
        prev = dp[i - 1]
        left_line = left[i - 1]
        for j in range(1, n + 1):
            if left_line == right[j - 1]:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = max(prev[j], row[j - 1])

    entries: List[DiffLine] = []
    i, j = m, n
    while i > 0 or j > 0:
        if i > 0 and j > 0 and left[i - 1] == right[j - 1]:
            entries.append(DiffLine(LineTag.CONTEXT, i, left[i - 1]))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or dp[i][j - 1] >= dp[i - 1][j]):
            entries.append(DiffLine(LineTag.RIGHT, j, right[j - 1]))
            j -= 1
        else:
            entries.append(DiffLine(LineTag.LEFT, i, left[i - 1]))
            i -= 1

    entries.reverse()
    return entries


def window(entries: Sequence[DiffLine], context: int = CONTEXT_LINES) -> List[Optional[DiffLine]]:
    """
    Keep the changed entries plus up to `context` neighbours on each side.

    Gaps between shown ranges are collapsed into a single None. The result is
    lossy: it is meant for display only.
    """
    shown = set()
    for idx, entry in enumerate(entries):
        if entry.tag != LineTag.CONTEXT:
            for c in range(max(0, idx - context), min(len(entries) - 1, idx + context) + 1):
                shown.add(c)

    result: List[Optional[DiffLine]] = []
    last_shown = -1
    for idx, entry in enumerate(entries):
        if idx not in shown:
            continue
        if last_shown >= 0 and idx - last_shown > 1:
            result.append(None)
        result.append(entry)
        last_shown = idx
    return result


def render(
    windowed: Sequence[Optional[DiffLine]],
    left_label: str = "DEV",
    right_label: str = "PROD"
) -> List[str]:
    """Render windowed entries as '- DEV  [3]: ...' / '+ PROD [3]: ...' lines."""
    width = max(len(left_label), len(right_label))
    lines = []
    for entry in windowed:
        if entry is None:
            lines.append(GAP_MARKER)
        elif entry.tag == LineTag.LEFT:
            lines.append(f"- {left_label:<{width}} [{entry.line_number}]: {entry.text}")
        elif entry.tag == LineTag.RIGHT:
            lines.append(f"+ {right_label:<{width}} [{entry.line_number}]: {entry.text}")
        else:
            lines.append(f"{' ' * (width + 3)}[{entry.line_number}]: {entry.text}")
    return lines


def simple_diff(
    left_lines: Sequence[str],
    right_lines: Sequence[str],
    left_label: str = "DEV",
    right_label: str = "PROD",
    limit: int = FALLBACK_DISPLAY_LIMIT
) -> List[str]:
    """
    Unordered fallback for very large inputs.

    Reports distinct non-blank lines that appear on one side only, ignoring
    position. A line present anywhere on both sides is not reported.
    """
    left = _normalize_lines(left_lines)
    right = _normalize_lines(right_lines)
    left_set = set(left)
    right_set = set(right)

    only_left = list(dict.fromkeys(line for line in left if line.strip() and line not in right_set))
    only_right = list(dict.fromkeys(line for line in right if line.strip() and line not in left_set))

    if not only_left and not only_right:
        if left == right:
            return []
        # Same lines, different order or multiplicity
        return [
            f"  (large object: line alignment skipped, {len(left)} x {len(right)} lines)",
            "  Lines reordered or repeated; no line exists on only one side",
        ]

    changes = [f"  (large object: line alignment skipped, {len(left)} x {len(right)} lines)"]
    if only_left:
        changes.append(f"  Lines only in {left_label}:")
        for line in only_left[:limit]:
            changes.append(f"- {left_label}: {line}")
        if len(only_left) > limit:
            changes.append(f"  ... and {len(only_left) - limit} more")

    if only_right:
        if only_left:
            changes.append("")
        changes.append(f"  Lines only in {right_label}:")
        for line in only_right[:limit]:
            changes.append(f"+ {right_label}: {line}")
        if len(only_right) > limit:
            changes.append(f"  ... and {len(only_right) - limit} more")

    return changes


def diff_lines(
    left_lines: Sequence[str],
    right_lines: Sequence[str],
    *,
    left_label: str = "DEV",
    right_label: str = "PROD",
    context: int = CONTEXT_LINES,
    max_cells: int = LCS_CELL_LIMIT
) -> List[str]:
    """
    Rendered diff of two line sequences, empty when they are identical.

    Args:
        left_lines: Lines of the source (left) definition
        right_lines: Lines of the target (right) definition
        left_label: Label for left-only lines
        right_label: Label for right-only lines
        context: Context lines kept around each change
        max_cells: Largest LCS table computed before falling back to simple_diff

    Returns:
        List of display lines
    """
    m = len(left_lines)
    n = len(right_lines)
    if m * n > max_cells:
        logging.warning(
            f"Line diff of {m}x{n} lines exceeds {max_cells} cells, using unordered fallback"
        )
        return simple_diff(left_lines, right_lines, left_label, right_label)

    entries = compute_diff(left_lines, right_lines)
    if all(entry.tag == LineTag.CONTEXT for entry in entries):
        return []
    return render(window(entries, context), left_label, right_label)


def diff_texts(left_text: str, right_text: str, **kwargs) -> List[str]:
    """Diff two .sql file contents after stripping their generated headers."""
    return diff_lines(ddl_lines(left_text), ddl_lines(right_text), **kwargs)
