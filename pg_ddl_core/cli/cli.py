import argparse
import logging
import os
import sys
from datetime import datetime

from pg_ddl_core.lib.compare import compare_envs, compare_many
from pg_ddl_core.lib.config import load_rc_config, merge_with_cli_options
from pg_ddl_core.lib.deploy import check_syntax, save_migration, save_rollback
from pg_ddl_core.lib.diff import diff_texts
from pg_ddl_core.lib.errors import MigrationAborted, PgDdlError
from pg_ddl_core.lib.migration import plan
from pg_ddl_core.lib.normalize import read_sql_file
from pg_ddl_core.lib.report import (
    format_console_report,
    format_dry_run,
    format_html_report,
    format_markdown_report,
    format_migration_summary,
    format_multi_env_report,
)
from pg_ddl_core.lib.review import interactive_review
from pg_ddl_core.lib.rollback import plan_rollback


def configure_logging(verbose: int):
    # Set log level based on verbosity count
    if verbose == 0:
        log_level = logging.WARNING
    elif verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG  # Max verbosity

    logging.basicConfig(
        level=log_level,
        format='%(levelname)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def write_report(path: str, content: str) -> str:
    """Write a report file, creating its directory."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)
    return path


def _compare_kwargs(options: dict) -> dict:
    return {
        "ignore_categories": options["ignore_categories"],
        "context_lines": options["context_lines"],
    }


def run_compare(options: dict) -> int:
    summary = compare_envs(
        options["sql_dir"], options["left"], options["right"], **_compare_kwargs(options)
    )
    print(format_console_report(summary))

    if options.get("report"):
        stamp = datetime.now().strftime("%Y-%m-%d")
        reports_dir = os.path.join(options["sql_dir"], "reports")
        md_path = write_report(os.path.join(reports_dir, f"diff_{stamp}.md"), format_markdown_report(summary))
        html_path = write_report(os.path.join(reports_dir, f"diff_{stamp}.html"), format_html_report(summary))
        print(f"Report saved: {md_path}")
        print(f"HTML report saved: {html_path}")
    return 0


def run_migrate(options: dict) -> int:
    summary = compare_envs(
        options["sql_dir"], options["left"], options["right"],
        with_diff=False, **_compare_kwargs(options)
    )
    migration = plan(summary)

    for cmd, error in check_syntax(migration.commands):
        logging.warning(f"Generated SQL for {cmd.category}/{cmd.object_name} may need attention: {error}")

    if options.get("dry_run"):
        print(format_dry_run(migration))
        return 0

    if options["interactive"] and migration.commands:
        migration = interactive_review(migration)

    output_dir = options["output"] or os.path.join(options["sql_dir"], "migrations")
    migration_path = save_migration(output_dir, migration)

    rollback_path = None
    if options["with_rollback"]:
        rollback = plan_rollback(summary, migration)
        rollback_path = save_rollback(output_dir, rollback)

    print(format_migration_summary(migration, migration_path, rollback_path))
    return 0


def run_multi(options: dict) -> int:
    result = compare_many(
        options["sql_dir"], options["envs"], with_diff=False, **_compare_kwargs(options)
    )
    print(format_multi_env_report(result))
    return 0


def run_diff(options: dict) -> int:
    left_text = read_sql_file(options["file_a"])
    right_text = read_sql_file(options["file_b"])
    lines = diff_texts(
        left_text, right_text,
        left_label="A", right_label="B",
        context=options["context_lines"],
    )
    if not lines:
        print("Files are identical (ignoring headers and whitespace)")
        return 0
    print("\n".join(lines))
    return 0


COMMANDS = {
    "compare": run_compare,
    "migrate": run_migrate,
    "multi": run_multi,
    "diff": run_diff,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pg-ddl",
        description="pg-ddl: compare captured PostgreSQL DDL between environments and plan migrations"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)"
    )
    parser.add_argument(
        "--config-dir",
        help="Directory searched for .pg-ddl.json / .pg-ddl.yml (default: current directory)"
    )

    env_options = argparse.ArgumentParser(add_help=False)
    env_options.add_argument(
        "--sql-dir",
        help="Root directory with one folder per environment (default: $SQL_OUTPUT_DIR or ./sql)"
    )

    pair_options = argparse.ArgumentParser(add_help=False)
    pair_options.add_argument("--left", "--dev", dest="left", help="Source environment (default: dev)")
    pair_options.add_argument("--right", "--prod", dest="right", help="Target environment (default: prod)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    compare_parser = subparsers.add_parser(
        "compare", parents=[env_options, pair_options],
        help="Compare two environments and print a report"
    )
    compare_parser.add_argument(
        "--report",
        action="store_true",
        help="Also write markdown and HTML reports to <sql-dir>/reports"
    )

    migrate_parser = subparsers.add_parser(
        "migrate", parents=[env_options, pair_options],
        help="Plan a migration from the left environment to the right one"
    )
    migrate_parser.add_argument(
        "--output", "-o",
        help="Directory for migration files (default: <sql-dir>/migrations)"
    )
    migrate_parser.add_argument(
        "--with-rollback",
        action="store_true",
        default=None,
        help="Also write a rollback script"
    )
    migrate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Preview the migration without writing files"
    )
    migrate_parser.add_argument(
        "--interactive", "-i",
        action="store_true",
        default=None,
        help="Review each change before it is included"
    )

    multi_parser = subparsers.add_parser(
        "multi", parents=[env_options],
        help="Compare every pair of the given environments"
    )
    multi_parser.add_argument("envs", nargs="+", help="Environment names (at least two)")

    diff_parser = subparsers.add_parser("diff", help="Line diff of two .sql files")
    diff_parser.add_argument("file_a", help="First .sql file")
    diff_parser.add_argument("file_b", help="Second .sql file")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_rc_config(args.config_dir)
        options = merge_with_cli_options(config, {
            key: value for key, value in vars(args).items()
            if key not in ("verbose", "config_dir", "command")
        })
        if args.command == "multi" and len(options["envs"]) < 2:
            parser.error("multi requires at least two environments")
        return COMMANDS[args.command](options)
    except MigrationAborted:
        print("Migration aborted.")
        return 0
    except PgDdlError as e:
        logging.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
