"""
Command-line interface for Biscuit.

This module provides the ``biscuit`` entry point, which snapshots the
packages installed on a system into a new TOML file.
"""

import logging
from pathlib import Path
from typing import Annotated, List, Optional

import click
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from typer.core import TyperCommand

from biscuit_py import __version__
from biscuit_py.config import BiscuitConfig
from biscuit_py.database import open_database
from biscuit_py.errors import DatabaseError, WriteError
from biscuit_py.serializer import save
from biscuit_py.snapshot import Snapshot

# Set up the consoles and logger
console = Console()
err_console = Console(stderr=True)
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
)
logger = logging.getLogger("biscuit")

# Create the Typer app
app = typer.Typer(
    help="Snapshot the packages installed on a system into a TOML file.",
    add_completion=False,
)


class SnapshotCommand(TyperCommand):
    """Command whose argument errors exit with status 1 instead of 2."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


def log_error(message: str) -> None:
    """Log an error message to both logger and console."""
    logger.error(message)
    err_console.print(f"[red]{escape(message)}[/red]")
    return None


def run(name: str, output_path: Path, root_path: Path, db_path: Path) -> None:
    """
    Snapshot the installed packages and write them to *output_path*.

    Args:
        name: Name recorded in the snapshot
        output_path: File to create; must not exist
        root_path: Root of the system to inspect
        db_path: Location of the package database

    Raises:
        DatabaseError: If the package database cannot be opened or read
        WriteError: If the snapshot file cannot be written
    """
    snapshot = Snapshot.create(name)
    logger.info(f"Reading installed packages from {db_path} (root {root_path})")
    with open_database(root_path, db_path) as db:
        for record in db.packages():
            snapshot.add_record(record.name, record.version)

    logger.info(f"Captured {len(snapshot.records)} packages")
    save(snapshot, output_path)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"Biscuit version: {__version__}")
        raise typer.Exit()


def _name_callback(value: Optional[str]) -> Optional[str]:
    if value == "":
        raise typer.BadParameter("the snapshot name must not be empty")
    return value


@app.command(
    cls=SnapshotCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
)
def snapshot(
    name: Annotated[
        str,
        typer.Option(
            "--name",
            "-n",
            metavar="NAME",
            callback=_name_callback,
            help="the name of the snapshot (required)",
        ),
    ],
    output: Annotated[
        Optional[str],
        typer.Option(
            "--output",
            "-o",
            metavar="FILE",
            help='the output filename (default = "NAME.toml")',
        ),
    ] = None,
    root_path: Annotated[
        Optional[str],
        typer.Option(
            "--root-path",
            "-r",
            metavar="PATH",
            help='the absolute path to the system root filesystem (default = "/")',
        ),
    ] = None,
    db_path: Annotated[
        Optional[str],
        typer.Option(
            "--db-path",
            "-d",
            metavar="PATH",
            help=(
                "the absolute path to the ALPM database "
                '(default = "/var/lib/pacman")'
            ),
        ),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to the configuration file.",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose output.")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the application version and exit.",
        ),
    ] = False,
) -> None:
    """
    Record the packages installed on a system into a new snapshot file.

    The output file is never overwritten.
    """
    if verbose:
        logger.setLevel(logging.DEBUG)
        logger.debug("Verbose logging enabled")

    config = BiscuitConfig.load(config_file)
    output_path = config.resolve_output_path(output, name)
    resolved_root = config.resolve_root_path(root_path)
    resolved_db = config.resolve_db_path(db_path)

    try:
        run(name, output_path, resolved_root, resolved_db)
    except DatabaseError as e:
        log_error(f"Something went wrong while reading the ALPM database: {e}")
        raise typer.Exit(1) from e
    except WriteError as e:
        log_error(
            f"Something went wrong while saving the snapshot to the file: {e}"
        )
        raise typer.Exit(1) from e

    console.print(
        f"Saved snapshot [bold]{escape(name)}[/bold] to {escape(str(output_path))}"
    )


if __name__ == "__main__":
    app()
