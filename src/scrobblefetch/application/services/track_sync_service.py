"""Track sync service - glue between the bulk fetcher and the track store.

Hey future me - two modes live here:
- full save: fetch N (or everything), write a NEW timestamped file
- incremental update: read the newest timestamp from an EXISTING file, fetch only what is
  newer, append it. Top tracks have no timestamps, so incremental mode refuses them up front
  (before any network call), there is no "newer than" for an aggregate ranking.
"""

import json
import logging
from pathlib import Path

from scrobblefetch.application.services.bulk_fetch_service import BulkFetchService
from scrobblefetch.domain.entities import TrackRecord
from scrobblefetch.domain.exceptions import StorageError, ValidationError
from scrobblefetch.domain.ports import ITrackStore
from scrobblefetch.domain.value_objects import UNLIMITED, Period, ResourceKind, TrackLimit
from scrobblefetch.infrastructure.integrations.lastfm_resources import get_descriptor

logger = logging.getLogger(__name__)

DEFAULT_PREFIXES = {
    ResourceKind.RECENT_PLAYS: "recent_tracks",
    ResourceKind.LOVED_TRACKS: "loved_tracks",
    ResourceKind.TOP_TRACKS: "top_tracks",
}


class TrackSyncService:
    """Fetches track collections and persists them via an ITrackStore."""

    def __init__(self, fetcher: BulkFetchService, store: ITrackStore) -> None:
        self._fetcher = fetcher
        self._store = store

    async def fetch_and_save(
        self,
        kind: ResourceKind,
        limit: TrackLimit = UNLIMITED,
        fmt: str = "json",
        prefix: str | None = None,
        period: Period | None = None,
    ) -> str:
        """Fetch one collection and write it to a new file.

        Returns:
            Path of the written file
        """
        if period is not None and kind is not ResourceKind.TOP_TRACKS:
            raise ValidationError(f"period only applies to top tracks, not {kind.value}")

        if kind is ResourceKind.TOP_TRACKS:
            records = await self._fetcher.get_top_tracks(limit, period)
        else:
            records = await self._fetcher.fetch(kind, limit)

        return self._store.save(records, fmt, prefix or DEFAULT_PREFIXES[kind])

    async def update(
        self, previous_max_timestamp: int, kind: ResourceKind = ResourceKind.RECENT_PLAYS
    ) -> list[TrackRecord]:
        """Records newer than ``previous_max_timestamp``, in received order.

        Raises:
            ValidationError: Kind carries no timestamps, or the timestamp is negative
        """
        if not get_descriptor(kind).timestamped:
            raise ValidationError(
                f"Incremental update is not supported for {kind.value} tracks (no timestamps)"
            )
        if previous_max_timestamp < 0:
            raise ValidationError(
                f"previous_max_timestamp must be >= 0, got {previous_max_timestamp}"
            )

        records = await self._fetcher.fetch_since(kind, previous_max_timestamp, UNLIMITED)
        logger.info(
            "Found %d new %s track(s) since %d",
            len(records),
            kind.value,
            previous_max_timestamp,
        )
        return records

    async def update_file(
        self, path: str, kind: ResourceKind = ResourceKind.RECENT_PLAYS
    ) -> str:
        """Append everything newer than the file's newest record to the file."""
        previous = self._store.latest_timestamp(path) or 0
        records = await self.update(previous, kind)
        if not records:
            logger.info("%s is already up to date", path)
            return path
        return self._store.append(records, path)

    async def now_playing(self) -> TrackRecord | None:
        return await self._fetcher.get_now_playing()

    async def write_now_playing(self, path: str) -> TrackRecord | None:
        """Write the now-playing track as a JSON object, ``{}`` when idle."""
        record = await self.now_playing()
        payload = record.to_dict() if record is not None else {}
        target = Path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Could not write {target}: {e}", path) from e
        return record
