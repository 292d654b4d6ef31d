"""
Click-based CLI for schemadiff.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .config import load_settings
from .differs import ColumnStrategy, SchemaDiffer
from .exceptions import SchemaDiffError
from .naming import CaseStrategy
from .report import diff_result_to_dict, render_diff
from .storage import resolve_snapshot, schema_hash

console = Console()
err_console = Console(stderr=True)

EXIT_WARNINGS = 2


def configure_logging(verbose: bool) -> None:
    """Route package logs through rich on stderr"""
    package_logger = logging.getLogger("schemadiff")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = RichHandler(
        console=err_console,
        rich_tracebacks=True,
        show_time=verbose,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


@click.group()
@click.version_option(version=__version__, prog_name="schemadiff")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """schemadiff CLI for comparing ORM schema snapshots"""
    configure_logging(verbose)


@cli.command()
@click.argument("old", type=click.Path(exists=True, path_type=Path))
@click.argument("new", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in ColumnStrategy]),
    help="Column rename policy (default: from settings, else rename-aware)",
)
@click.option(
    "--case",
    "case_strategy",
    type=click.Choice([s.value for s in CaseStrategy]),
    help="Identifier case folding (default: from settings, else lower)",
)
@click.option("--details", is_flag=True, help="Show change details")
@click.option("--json", "as_json", is_flag=True, help="Print the diff as JSON")
@click.option(
    "--fail-on-warnings",
    is_flag=True,
    help=f"Exit with status {EXIT_WARNINGS} when the diff has warnings",
)
@click.option("--profile", "-p", help="Settings profile (default: $SCHEMADIFF_PROFILE)")
def diff(
    old: Path,
    new: Path,
    strategy: Optional[str],
    case_strategy: Optional[str],
    details: bool,
    as_json: bool,
    fail_on_warnings: bool,
    profile: Optional[str],
) -> None:
    """Compare two schema snapshots (files or snapshot directories)"""

    try:
        settings = load_settings(Path.cwd(), profile).with_overrides(
            case_strategy=case_strategy,
            column_strategy=strategy,
            fail_on_warnings=fail_on_warnings or None,
        )

        old_schema = resolve_snapshot(old)
        new_schema = resolve_snapshot(new)

        result = SchemaDiffer.from_settings(settings).diff(old_schema, new_schema)

        if as_json:
            click.echo(json.dumps(diff_result_to_dict(result), indent=2))
        else:
            render_diff(result, console, show_details=details)

    except SchemaDiffError as e:
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        sys.exit(1)

    if settings.fail_on_warnings and result.all_warnings():
        if not as_json:
            console.print("[red]✗ Diff has warnings[/red] (--fail-on-warnings)")
        sys.exit(EXIT_WARNINGS)


@cli.command(name="hash")
@click.argument("snapshot", type=click.Path(exists=True, path_type=Path))
def hash_command(snapshot: Path) -> None:
    """Print the SHA-256 hash of a schema snapshot"""

    try:
        schema = resolve_snapshot(snapshot)
    except SchemaDiffError as e:
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        sys.exit(1)

    click.echo(schema_hash(schema))


def main() -> None:
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()
