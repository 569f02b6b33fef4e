"""
Human-readable reports for comparisons and migration plans.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

import markdown
from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import escape

from pg_ddl_core.lib.categories import Action
from pg_ddl_core.lib.compare import MultiEnvResult
from pg_ddl_core.lib.objects import DiffStatus, DiffSummary, Migration

RULE = "=" * 59
THIN_RULE = "-" * 59
CONSOLE_DIFF_LIMIT = 20
MARKDOWN_DIFF_LIMIT = 30
PREVIEW_LINES = 3

_templates = Environment(
    loader=FileSystemLoader(Path(__file__).parent / "templates"),
    autoescape=select_autoescape(["html"]),
)


def _now(generated: Optional[datetime]) -> str:
    return (generated or datetime.now()).isoformat(timespec="seconds")


def format_console_report(summary: DiffSummary, generated: Optional[datetime] = None) -> str:
    left = summary.left_name.upper()
    right = summary.right_name.upper()
    lines = [
        RULE,
        f"  {left} vs {right} - DDL Comparison Report",
        f"  Generated: {_now(generated)}",
        RULE,
        "",
        f"  {left} objects:  {summary.total_dev}",
        f"  {right} objects: {summary.total_prod}",
        "",
        f"  Identical:  {summary.identical}",
        f"  Modified:   {summary.modified}",
        f"  Only {left}:   {summary.only_dev}",
        f"  Only {right}:  {summary.only_prod}",
        "",
    ]

    only_left = summary.items_with_status(DiffStatus.ONLY_DEV)
    if only_left:
        lines.extend([THIN_RULE, f"  EXISTS ONLY IN {left} (not yet in {summary.right_name})", THIN_RULE])
        lines.extend(f"    [{item.category}] {item.object_name}" for item in only_left)
        lines.append("")

    only_right = summary.items_with_status(DiffStatus.ONLY_PROD)
    if only_right:
        lines.extend([THIN_RULE, f"  EXISTS ONLY IN {right} (missing in {summary.left_name})", THIN_RULE])
        lines.extend(f"    [{item.category}] {item.object_name}" for item in only_right)
        lines.append("")

    modified = summary.items_with_status(DiffStatus.MODIFIED)
    if modified:
        lines.extend([
            THIN_RULE,
            f"  MODIFIED (different between {summary.left_name} and {summary.right_name})",
            THIN_RULE,
        ])
        for item in modified:
            lines.append(f"\n    [{item.category}] {item.object_name}")
            for d in item.diff[:CONSOLE_DIFF_LIMIT]:
                lines.append(f"      {d}")
            if len(item.diff) > CONSOLE_DIFF_LIMIT:
                lines.append(f"      ... and {len(item.diff) - CONSOLE_DIFF_LIMIT} more differences")
        lines.append("")

    if summary.in_sync:
        lines.append(f"  {left} and {right} are perfectly in sync!")
        lines.append("")

    lines.append(RULE)
    return "\n".join(lines)


def format_markdown_report(
    summary: DiffSummary,
    generated: Optional[datetime] = None,
    escape_names: bool = False
) -> str:
    """
    Markdown comparison report.

    With escape_names, environment, category and object names are HTML-escaped
    so the markdown can be rendered to a page without passing raw markup through.
    """
    name = escape if escape_names else str
    left = name(summary.left_name.upper())
    right = name(summary.right_name.upper())
    lines = [
        f"# {left} vs {right} - DDL Comparison Report",
        "",
        f"Generated: {_now(generated)}",
        "",
        "## Summary",
        "",
        "| Metric | Count |",
        "|--------|-------|",
        f"| {left} objects | {summary.total_dev} |",
        f"| {right} objects | {summary.total_prod} |",
        f"| Identical | {summary.identical} |",
        f"| Modified | {summary.modified} |",
        f"| Only in {left} | {summary.only_dev} |",
        f"| Only in {right} | {summary.only_prod} |",
        "",
    ]

    for status, title in ((DiffStatus.ONLY_DEV, f"Only in {left}"), (DiffStatus.ONLY_PROD, f"Only in {right}")):
        items = summary.items_with_status(status)
        if not items:
            continue
        lines.extend([f"## {title}", "", "| Category | Object |", "|----------|--------|"])
        lines.extend(f"| {name(item.category)} | {name(item.object_name)} |" for item in items)
        lines.append("")

    modified = summary.items_with_status(DiffStatus.MODIFIED)
    if modified:
        lines.extend(["## Modified", ""])
        for item in modified:
            lines.extend([f"### [{name(item.category)}] {name(item.object_name)}", ""])
            if item.diff:
                lines.append("```diff")
                lines.extend(item.diff[:MARKDOWN_DIFF_LIMIT])
                if len(item.diff) > MARKDOWN_DIFF_LIMIT:
                    lines.append(f"... and {len(item.diff) - MARKDOWN_DIFF_LIMIT} more lines")
                lines.append("```")
            lines.append("")

    if summary.in_sync:
        lines.extend([f"## {left} and {right} are perfectly in sync!", ""])

    return "\n".join(lines)


def format_html_report(summary: DiffSummary, generated: Optional[datetime] = None) -> str:
    """Markdown report rendered to a standalone HTML page."""
    body = markdown.markdown(
        format_markdown_report(summary, generated, escape_names=True),
        extensions=["tables", "fenced_code"],
    )
    template = _templates.get_template("report.html")
    return template.render(
        title=f"DDL Diff - {summary.left_name.upper()} vs {summary.right_name.upper()}",
        in_sync=summary.in_sync,
        report_content=body,
    )


def format_multi_env_report(result: MultiEnvResult, generated: Optional[datetime] = None) -> str:
    col_width = 14
    lines = [
        RULE,
        "  Multi-Environment DDL Comparison",
        f"  Environments: {', '.join(result.envs)}",
        f"  Generated: {_now(generated)}",
        RULE,
        "",
        "".ljust(col_width) + "".join(env.rjust(col_width) for env in result.envs),
        "-" * (col_width * (len(result.envs) + 1)),
    ]

    matrix = {env: {env: "-"} for env in result.envs}
    for pair in result.pairs:
        total = pair.summary.total_differences
        label = "sync" if total == 0 else f"{total} diffs"
        matrix[pair.left][pair.right] = label
        matrix[pair.right][pair.left] = label

    for env1 in result.envs:
        lines.append(env1.ljust(col_width) + "".join(
            matrix[env1].get(env2, "").rjust(col_width) for env2 in result.envs
        ))
    lines.append("")

    for pair in result.pairs:
        s = pair.summary
        lines.extend([
            THIN_RULE,
            f"  {pair.left.upper()} vs {pair.right.upper()}",
            THIN_RULE,
            f"    {pair.left} objects: {s.total_dev}",
            f"    {pair.right} objects: {s.total_prod}",
            f"    Identical: {s.identical}",
            f"    Modified:  {s.modified}",
            f"    Only {pair.left}: {s.only_dev}",
            f"    Only {pair.right}: {s.only_prod}",
        ])
        if s.in_sync:
            lines.append("    Environments are in sync!")
        lines.append("")

    lines.append(RULE)
    return "\n".join(lines)


def _counts(migration: Migration) -> List[str]:
    return [
        "  Summary:",
        f"    Creates: {migration.creates}",
        f"    Drops:   {migration.drops}",
        f"    Alters:  {migration.alters}",
        f"    Total:   {len(migration)} commands",
        "",
    ]


def format_dry_run(migration: Migration) -> str:
    """Preview of a migration plan without writing any file."""
    in_sync = f"  {migration.left_name.upper()} and {migration.right_name.upper()} are in sync - no migration needed!"
    lines = [RULE, "  DRY RUN - Migration Preview (no files created)", RULE, ""]
    lines.extend(_counts(migration))

    if not migration.commands:
        lines.extend([in_sync, "", RULE])
        return "\n".join(lines)

    sections = (
        (Action.CREATE, "WILL CREATE:", "+"),
        (Action.ALTER, "WILL MODIFY:", "~"),
        (Action.DROP, "WILL DROP:", "-"),
    )
    for action, title, marker in sections:
        commands = [cmd for cmd in migration.commands if cmd.action == action]
        if not commands:
            continue
        lines.extend([THIN_RULE, f"  {title}", THIN_RULE])
        for cmd in commands:
            flag = "  (manual review needed)" if cmd.needs_review else ""
            lines.append(f"    {marker} [{cmd.category}] {cmd.object_name}{flag}")
        lines.append("")

    lines.extend([THIN_RULE, "  SQL Preview:", THIN_RULE, ""])
    current_category = None
    for cmd in migration.commands:
        if cmd.category != current_category:
            lines.append(f"  -- {cmd.category.upper()}")
            current_category = cmd.category
        sql_lines = cmd.sql.split("\n")
        lines.extend(f"  {line}" for line in sql_lines[:PREVIEW_LINES])
        if len(sql_lines) > PREVIEW_LINES:
            lines.append(f"  ... ({len(sql_lines) - PREVIEW_LINES} more lines)")
        lines.append("")

    lines.extend([RULE, "  To generate the actual migration file, run without --dry-run", RULE])
    return "\n".join(lines)


def format_migration_summary(migration: Migration, filepath: str, rollback_path: Optional[str] = None) -> str:
    lines = [RULE, "  Migration Plan Generated", RULE, "", f"  Migration: {filepath}"]
    if rollback_path:
        lines.append(f"  Rollback:  {rollback_path}")
    lines.append("")
    lines.extend(_counts(migration))

    if not migration.commands:
        lines.extend([
            f"  {migration.left_name.upper()} and {migration.right_name.upper()} are in sync - no migration needed!",
            "",
            RULE,
        ])
        return "\n".join(lines)

    steps = ["Review the migration file carefully"]
    if rollback_path:
        steps.append("Review the rollback file")
    steps.extend([
        "Test on staging environment",
        f"Backup {migration.right_name} database",
        f"Run: psql -d your_db -f {Path(filepath).name}",
    ])
    lines.append("  Next Steps:")
    lines.extend(f"    {idx}. {step}" for idx, step in enumerate(steps, 1))
    lines.append("")
    if rollback_path:
        lines.extend(["  To rollback:", f"       psql -d your_db -f {Path(rollback_path).name}", ""])
    lines.append(RULE)
    return "\n".join(lines)
