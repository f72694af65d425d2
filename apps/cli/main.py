"""CLI application for pin-lerna."""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from pinlerna.errors import PinError
from pinlerna.listing import DEFAULT_LIST_COMMAND
from pinlerna.models import UpdateOutcome
from pinlerna.pin import pin_versions

console = Console(stderr=True)

logger = logging.getLogger("pinlerna")


def configure_logging(verbose: bool) -> None:
    """Route pinlerna log records to stderr through rich."""
    handler = RichHandler(
        console=console,
        show_time=False,
        show_level=verbose,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


app = typer.Typer(
    name="pin-lerna",
    help="pin-lerna - Pin lerna dependencies to the latest managed version",
    add_completion=False,
)


@app.command()
def pin(
    root: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=False,
        dir_okay=True,
        help="Root of the lerna mono-repository",
    ),
    command: str = typer.Option(
        DEFAULT_LIST_COMMAND,
        "--command",
        envvar="PIN_LERNA_LIST_COMMAND",
        help="Command that prints every package as JSON",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show files that would change without writing"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Pin every sibling dependency in ROOT to its current version."""

    configure_logging(verbose)
    logger.debug("Options: root=%s command=%r dry_run=%s", root, command, dry_run)

    try:
        outcomes = asyncio.run(
            pin_versions(root.resolve(), command=command, dry_run=dry_run)
        )
    except PinError as e:
        console.print(f"Error: {e}", style="red", markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(1)

    pending = [path for path, outcome in outcomes.items() if outcome is UpdateOutcome.PENDING]
    if dry_run and pending:
        logger.info("%d manifest(s) would be updated", len(pending))


if __name__ == "__main__":
    app()
