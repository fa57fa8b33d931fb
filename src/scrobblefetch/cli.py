"""Command line interface for scrobblefetch.

Usage:
    scrobblefetch recent --limit 5000 --format csv
    scrobblefetch top --period 1month --limit 100
    scrobblefetch update data/recent_tracks_20240101_120000.json
    scrobblefetch now-playing --output now_playing.json
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from pathlib import Path
from typing import TypeVar

import typer

from scrobblefetch.application.services import BulkFetchService, TrackSyncService
from scrobblefetch.config import Settings, get_settings, validate_settings
from scrobblefetch.domain.entities import TrackRecord
from scrobblefetch.domain.exceptions import DomainException
from scrobblefetch.domain.value_objects import Period, ResourceKind
from scrobblefetch.infrastructure.integrations import LastfmClient
from scrobblefetch.infrastructure.observability import configure_logging, set_correlation_id
from scrobblefetch.infrastructure.persistence import FileTrackStore

app = typer.Typer(
    help="Fetch Last.fm listening history in bulk.",
    no_args_is_help=True,
)
logger = logging.getLogger(__name__)

T = TypeVar("T")


class OutputFormat(str, Enum):
    JSON = "json"
    CSV = "csv"


class UpdateKind(str, Enum):
    RECENT = "recent"
    LOVED = "loved"


def _run(action: Callable[[TrackSyncService], Awaitable[T]]) -> T:
    """Validate config, wire the services and run one async action.

    Hey future me - every command goes through here so the client is ALWAYS closed and every
    DomainException turns into exit code 1 with its message on stderr (no traceback for users).
    """
    settings: Settings = get_settings()

    async def _main() -> T:
        async with LastfmClient(settings.lastfm) as client:
            fetcher = BulkFetchService(client, settings.lastfm)
            sync = TrackSyncService(fetcher, FileTrackStore(settings.storage.data_dir))
            return await action(sync)

    try:
        validate_settings(settings)
        return asyncio.run(_main())
    except DomainException as e:
        logger.debug("Command failed", exc_info=True)
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e


@app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable DEBUG logging"),
) -> None:
    """Configure logging and a correlation ID for the command."""
    settings = get_settings()
    configure_logging(
        log_level="DEBUG" if verbose else settings.observability.level,
        json_format=settings.observability.json_format,
    )
    set_correlation_id()


@app.command()
def recent(
    limit: int | None = typer.Option(None, "--limit", "-n", min=0, help="Max tracks (default: all)"),
    fmt: OutputFormat = typer.Option(OutputFormat.JSON, "--format", "-f", help="Output file format"),
) -> None:
    """Fetch recent plays and save them to a new file."""
    path = _run(lambda sync: sync.fetch_and_save(ResourceKind.RECENT_PLAYS, limit, fmt.value))
    typer.echo(path)


@app.command()
def loved(
    limit: int | None = typer.Option(None, "--limit", "-n", min=0, help="Max tracks (default: all)"),
    fmt: OutputFormat = typer.Option(OutputFormat.JSON, "--format", "-f", help="Output file format"),
) -> None:
    """Fetch loved tracks and save them to a new file."""
    path = _run(lambda sync: sync.fetch_and_save(ResourceKind.LOVED_TRACKS, limit, fmt.value))
    typer.echo(path)


@app.command()
def top(
    limit: int | None = typer.Option(None, "--limit", "-n", min=0, help="Max tracks (default: all)"),
    period: Period | None = typer.Option(None, "--period", "-p", help="Time range for the ranking"),
    fmt: OutputFormat = typer.Option(OutputFormat.JSON, "--format", "-f", help="Output file format"),
) -> None:
    """Fetch top tracks and save them to a new file."""
    path = _run(
        lambda sync: sync.fetch_and_save(
            ResourceKind.TOP_TRACKS, limit, fmt.value, period=period
        )
    )
    typer.echo(path)


@app.command()
def update(
    path: Path = typer.Argument(..., help="Previously saved .json or .csv file"),
    kind: UpdateKind = typer.Option(UpdateKind.RECENT, "--kind", "-k", help="Collection in the file"),
) -> None:
    """Append tracks newer than the file's newest record."""
    resource = ResourceKind(kind.value)
    updated = _run(lambda sync: sync.update_file(str(path), resource))
    typer.echo(updated)


@app.command("now-playing")
def now_playing(
    output: Path | None = typer.Option(None, "--output", "-o", help="Also write the track as JSON"),
) -> None:
    """Show the track currently playing."""

    async def _action(sync: TrackSyncService) -> TrackRecord | None:
        if output is not None:
            return await sync.write_now_playing(str(output))
        return await sync.now_playing()

    record = _run(_action)
    if record is None:
        typer.echo("Nothing playing right now")
        return
    typer.echo(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))


@app.command("check-config")
def check_config() -> None:
    """Validate required environment variables."""
    settings = get_settings()
    try:
        validate_settings(settings)
    except DomainException as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1) from e
    typer.echo(f"Configuration OK (user: {settings.lastfm.username})")


if __name__ == "__main__":
    app()
