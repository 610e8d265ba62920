"""CLI module for comparing fixture schemas against a live database.

Usage:
    fixture-check diff
    fixture-check diff -c live
    fixture-check diff -p Users -f Users,Roles -c live
    fixture-check diff --direction fixture
    fixture-check fixtures -p Users

Commands:
    diff      - Compare fixtures with their live tables (exit 1 on differences)
    fixtures  - List the fixtures available for the app or a plugin
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from fixture_check.checker import FixtureChecker
from fixture_check.config.loader import load_config
from fixture_check.factory import (
    PluginNotFoundError,
    ProfileNotFoundError,
    build_registry,
    get_connection,
    resolve_url,
    select_fixtures,
)
from fixture_check.schema.introspector import SchemaIntrospector
from fixture_check.schema.models import (
    Direction,
    MismatchReport,
    PairStatus,
    RunSummary,
)

console = Console()
err_console = Console(stderr=True)


# ============================================================================
# Output helpers
# ============================================================================


def _print_report(report: MismatchReport) -> None:
    """Print presence and attribute differences for one compared pair."""
    fixture = escape(report.fixture)

    if report.missing_from_live:
        console.print(
            f"[yellow]{fixture} has fields that are not in the live DB:[/yellow]"
        )
        for column in report.missing_from_live:
            console.print(f" * {escape(column)}")
        console.print()

    if report.missing_from_fixture:
        console.print(
            f"[yellow]Live DB has fields that are not in {fixture}[/yellow]"
        )
        for column in report.missing_from_fixture:
            console.print(f" * {escape(column)}")
        console.print()

    if report.discrepancies:
        console.print(
            f"[yellow]Found {len(report.discrepancies)} attribute mismatches:[/yellow]"
        )
        for discrepancy in report.discrepancies:
            console.print(f" * {escape(discrepancy.message)}")
        console.print()


def _print_summary(summary: RunSummary) -> None:
    """Print every pair in processing order, then the ignored list."""
    for pair in summary.pairs:
        if pair.status is PairStatus.IGNORED:
            continue

        if pair.status is PairStatus.RESOLUTION_FAILED:
            err_console.print(f"[red]{escape(pair.error or '')}[/red]")
            continue

        console.print(
            f"Comparing `{escape(pair.fixture)}` with table "
            f"`{escape(pair.table or '')}`",
            style="cyan",
        )

        if pair.status is PairStatus.INTROSPECTION_FAILED:
            err_console.print(f"[red]{escape(pair.error or '')}[/red]")
        elif pair.report is not None:
            _print_report(pair.report)

    if summary.ignored:
        console.print("Ignored fixture classes:", style="cyan")
        for ignored in summary.ignored:
            console.print(f" * {escape(ignored)}")
        console.print()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


# ============================================================================
# Command implementations
# ============================================================================


def cmd_diff(args: argparse.Namespace) -> int:
    """Compare fixtures against their live tables.

    Args:
        args: Parsed arguments with config, connection, plugin, fixtures and
            direction.

    Returns:
        0 when no differences were found, 1 on differences or setup errors.
    """
    try:
        config = load_config(args.config)
        profile = get_connection(config, args.connection)
        registry, discovered = build_registry(config, args.plugin)
    except (
        FileNotFoundError,
        ValueError,
        ProfileNotFoundError,
        PluginNotFoundError,
    ) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    fixtures = select_fixtures(discovered, args.fixtures, args.plugin)
    if not fixtures:
        console.print("[yellow]No fixtures found.[/yellow]")

    try:
        with SchemaIntrospector(
            resolve_url(profile), schema_name=profile.schema_name
        ) as introspector:
            checker = FixtureChecker(
                registry,
                introspector,
                ignore=config.ignore_classes,
                direction=Direction(args.direction),
            )
            summary = checker.run(fixtures)
    except SQLAlchemyError as e:
        # Unparseable URL or unknown dialect/driver
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    _print_summary(summary)

    if summary.issues_found:
        err_console.print(
            f"[bold red]{summary.total_differences} differences detected, "
            f"check your fixtures and DB.[/bold red]"
        )
        return 1

    return 0


def cmd_fixtures(args: argparse.Namespace) -> int:
    """List fixtures available in the app or plugin scope.

    Reads only local files -- no database calls.

    Args:
        args: Parsed arguments with config and plugin.

    Returns:
        0 on success, 1 if the config or plugin cannot be found.
    """
    try:
        config = load_config(args.config)
        registry, discovered = build_registry(config, args.plugin)
    except (FileNotFoundError, ValueError, PluginNotFoundError) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    table = Table(title="Fixtures", show_header=True, header_style="bold")
    table.add_column("Fixture")
    table.add_column("Status")

    for name in discovered:
        status = (
            "[yellow]ignored[/yellow]" if name in config.ignore_classes else "checked"
        )
        table.add_row(escape(name), status)

    console.print(table)
    console.print(f"[dim]{len(registry)} fixtures[/dim]")

    return 0


# ============================================================================
# Main entry point
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="fixture-check",
        description="Compare DB and fixture schema columns.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: ./fixture-check.toml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # diff command
    p_diff = subparsers.add_parser(
        "diff",
        help="Compare fixtures with their live tables",
    )
    p_diff.add_argument(
        "--connection",
        "-c",
        default="default",
        help="Connection to compare against.",
    )
    p_diff.add_argument(
        "--plugin",
        "-p",
        default=None,
        help="Plugin whose fixtures to check",
    )
    p_diff.add_argument(
        "--fixtures",
        "-f",
        default=None,
        help="Fixtures to use, comma-separated without the Fixture suffix (e.g., Users,Roles)",
    )
    p_diff.add_argument(
        "--direction",
        "-d",
        choices=[d.value for d in Direction],
        default=Direction.BOTH.value,
        help="Direction of diff detection: `both`, `fixture` or `db`.",
    )
    p_diff.set_defaults(func=cmd_diff)

    # fixtures command
    p_fixtures = subparsers.add_parser(
        "fixtures",
        help="List available fixtures",
    )
    p_fixtures.add_argument(
        "--plugin",
        "-p",
        default=None,
        help="Plugin whose fixtures to list",
    )
    p_fixtures.set_defaults(func=cmd_fixtures)

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
