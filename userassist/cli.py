"""Command-line entry point for the UserAssist decoder."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer

from userassist.config import get_settings
from userassist.exceptions import UserAssistException
from userassist.models.scan import ScanResult
from userassist.services.events import ScanEvent, ScanEventType
from userassist.services.export import format_last_executed
from userassist.services.reporter import render_usage_report
from userassist.services.scan_session import ScanSession
from userassist.stores.hive import HiveStore
from userassist.utils.duration import format_duration

logger = logging.getLogger(__name__)
app = typer.Typer(help="Decode Windows UserAssist execution history from NTUSER.DAT hives.")

# Events worth showing on the console; the rest only go to the log
_ECHO_EVENTS = {
    ScanEventType.CATEGORY_MISSING,
    ScanEventType.NO_DATA_FOUND,
    ScanEventType.SCAN_CANCELLED,
    ScanEventType.SCAN_COMPLETED,
    ScanEventType.EXPORT_COMPLETED,
}


def _configure_logging(verbose: bool) -> None:
    settings = get_settings()
    level = logging.DEBUG if verbose or settings.debug else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _echo_event(event: ScanEvent) -> None:
    if event.type in _ECHO_EVENTS:
        typer.echo(event.message, err=True)


def _print_records(result: ScanResult) -> None:
    for record in result.records:
        typer.echo(
            f"{record.owner_identity}\t{record.run_count}\t"
            f"{format_last_executed(record)}\t{format_duration(record.focus_duration_ms)}\t"
            f"{record.decoded_name}"
        )


def _run(store: HiveStore, csv_path: Path | None, show_records: bool, show_report: bool) -> None:
    session = ScanSession(store)
    session.emitter.subscribe(_echo_event)

    try:
        with store:
            result = asyncio.run(session.scan())
            if show_records:
                _print_records(result)
            if show_report and result.records:
                typer.echo(render_usage_report(session.report()))
            if csv_path is not None:
                session.export_csv(csv_path)
    except UserAssistException as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def scan(
    hives: list[Path] = typer.Argument(..., help="NTUSER.DAT hive files"),
    owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Owner identity for a single hive"),
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="Write records to this CSV file"),
    report: bool = typer.Option(False, "--report/--no-report", help="Print the usage comparison"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Decode UserAssist entries from one or more hive files."""
    _configure_logging(verbose)

    if owner and len(hives) > 1:
        typer.echo("--owner can only be used with a single hive", err=True)
        raise typer.Exit(code=2)

    mapping: dict[str, Path] = {}
    for hive in hives:
        identity = owner or hive.parent.name or hive.name
        if identity in mapping:
            identity = str(hive)
        mapping[identity] = hive

    _run(HiveStore(mapping), csv_path, show_records=True, show_report=report)


@app.command()
def compare(
    users_dir: Path = typer.Argument(..., help="Directory holding user profile folders"),
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="Write records to this CSV file"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Scan every profile under a Users directory and compare usage."""
    _configure_logging(verbose)

    try:
        store = HiveStore.from_profiles_dir(users_dir)
    except UserAssistException as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e

    if not store.identities():
        typer.echo(f"No {get_settings().hive_file_name} hives found under {users_dir}", err=True)
        return

    _run(store, csv_path, show_records=False, show_report=True)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
