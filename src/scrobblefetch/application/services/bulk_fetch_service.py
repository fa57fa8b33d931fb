"""Adaptive paginated bulk fetch: probe -> plan -> execute.

Hey future me - this is THE core of the project. Last.fm caps every call at 1000 items and has no
"give me everything" switch, so a 120k-scrobble history means 120 page requests. The flow for
EVERY collection entry point (recent, loved, top, since) is the same three steps:

1. PROBE   - one limit=1 request, read @attr.total (the only authoritative count we get)
2. PLAN    - chunk_planner.plan(): minimal pages, grouped into batches of batch_width
3. EXECUTE - batches run one after another, pages INSIDE a batch run concurrently

Concurrency rules (don't break these!):
- at most batch_width requests in flight, ever
- page order and Last.fm's item order are preserved - we never reorder for speed
- first failing page aborts the operation: siblings in the same batch are allowed to finish
  (drain, not cancel), their results are thrown away, no later batch starts
- no shared mutable state between tasks: each task returns its own page, merged after the join
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import cast

from scrobblefetch.application.services import chunk_planner
from scrobblefetch.config.settings import LastfmSettings
from scrobblefetch.domain.entities import TrackRecord
from scrobblefetch.domain.ports import ILastfmTransport
from scrobblefetch.domain.value_objects import (
    UNLIMITED,
    FetchPlan,
    PageRequest,
    Period,
    ResourceKind,
    TrackLimit,
)
from scrobblefetch.infrastructure.integrations.lastfm_resources import (
    ResourceDescriptor,
    get_descriptor,
)

logger = logging.getLogger(__name__)


class BulkFetchService:
    """Fetches arbitrarily large Last.fm user collections.

    Usage:
        async with LastfmClient(settings.lastfm) as client:
            service = BulkFetchService(client, settings.lastfm)
            plays = await service.get_recent_tracks(limit=None)  # everything
            top = await service.get_top_tracks(limit=50, period=Period.MONTH)
    """

    def __init__(self, transport: ILastfmTransport, settings: LastfmSettings) -> None:
        """
        Initialize the service.

        Args:
            transport: Single-round-trip Last.fm transport
            settings: Paging limits (max_page_size, batch_width) and credentials

        Raises:
            ConfigurationError: If no API key is configured
        """
        settings.require_api_key()
        self._transport = transport
        self._max_page_size = settings.max_page_size
        self._batch_width = settings.batch_width

    # =========================================================================
    # PUBLIC ENTRY POINTS
    # =========================================================================

    async def get_recent_tracks(self, limit: TrackLimit = UNLIMITED) -> list[TrackRecord]:
        """Recent plays, newest first (a now-playing entry may lead the list)."""
        return await self.fetch(ResourceKind.RECENT_PLAYS, limit)

    async def get_loved_tracks(self, limit: TrackLimit = UNLIMITED) -> list[TrackRecord]:
        """Loved tracks, most recently loved first."""
        return await self.fetch(ResourceKind.LOVED_TRACKS, limit)

    async def get_top_tracks(
        self, limit: TrackLimit = UNLIMITED, period: Period | None = None
    ) -> list[TrackRecord]:
        """Top tracks by play count, optionally restricted to a period."""
        filters = {"period": period.api_value} if period is not None else {}
        return await self.fetch(ResourceKind.TOP_TRACKS, limit, filters)

    async def get_recent_tracks_since(
        self, timestamp: int, limit: TrackLimit = UNLIMITED
    ) -> list[TrackRecord]:
        """Recent plays strictly newer than ``timestamp``."""
        return await self.fetch_since(ResourceKind.RECENT_PLAYS, timestamp, limit)

    async def get_loved_tracks_since(
        self, timestamp: int, limit: TrackLimit = UNLIMITED
    ) -> list[TrackRecord]:
        """Loved tracks strictly newer than ``timestamp`` (filtered locally)."""
        return await self.fetch_since(ResourceKind.LOVED_TRACKS, timestamp, limit)

    async def get_now_playing(self) -> TrackRecord | None:
        """The track currently playing, or None if the user is idle.

        One limit=1 request, no probe/plan: Last.fm leaves the now-playing entry out of
        @attr.total, so a user with zero scrobbles can still be playing something.
        """
        descriptor = get_descriptor(ResourceKind.RECENT_PLAYS)
        request = PageRequest(page=1, size=1, kind=ResourceKind.RECENT_PLAYS)
        payload = await self._transport.fetch(descriptor.method, request.to_params())
        items = descriptor.decode_page(payload).items
        if not items:
            return None
        record = descriptor.normalize(items[0])
        return record if record.now_playing else None

    async def fetch_since(
        self, kind: ResourceKind, timestamp: int, limit: TrackLimit = UNLIMITED
    ) -> list[TrackRecord]:
        """Records with timestamp > ``timestamp``, in received order.

        Kinds that support the "from" filter get it server-side; the rest are fetched in full
        and filtered here. Either way the strict ">" filter is applied locally, which also drops
        the timestamp-less now-playing entry.
        """
        descriptor = get_descriptor(kind)
        filters = {"from": str(timestamp)} if descriptor.supports_since else {}
        records = await self.fetch(kind, limit, filters)
        return [
            record
            for record in records
            if record.timestamp is not None and record.timestamp > timestamp
        ]

    # =========================================================================
    # PIPELINE
    # =========================================================================

    async def fetch(
        self,
        kind: ResourceKind,
        limit: TrackLimit = UNLIMITED,
        filters: Mapping[str, str] | None = None,
    ) -> list[TrackRecord]:
        """Probe, plan and execute for one resource kind.

        Args:
            kind: Which collection to fetch
            limit: Logical item limit, None for everything
            filters: Extra query filters applied to the probe and every page

        Returns:
            min(limit, total) normalized records in page order
        """
        total = await self.probe_total(kind, filters)
        fetch_plan = chunk_planner.plan(
            total_available=total,
            requested_limit=limit,
            max_page_size=self._max_page_size,
            batch_width=self._batch_width,
            kind=kind,
            filters=filters,
        )
        logger.info(
            "Need to fetch %d %s track(s): %d page(s) in %d batch(es)",
            fetch_plan.effective_limit,
            kind.value,
            len(fetch_plan.requests),
            len(fetch_plan.batches),
        )
        return await self.execute(fetch_plan)

    async def probe_total(
        self, kind: ResourceKind, filters: Mapping[str, str] | None = None
    ) -> int:
        """One limit=1 request to learn the authoritative total item count."""
        descriptor = get_descriptor(kind)
        probe = PageRequest(page=1, size=1, kind=kind, filters=dict(filters or {}))
        payload = await self._transport.fetch(descriptor.method, probe.to_params())
        total = descriptor.decode_page(payload).total
        logger.debug("Probe %s: %d item(s) available", descriptor.method, total)
        return total

    async def execute(self, fetch_plan: FetchPlan) -> list[TrackRecord]:
        """Run the plan batch by batch and merge pages in page order.

        Raises:
            DomainException: The first error observed in a batch (no partial results)
        """
        if fetch_plan.is_empty:
            return []

        descriptor = get_descriptor(fetch_plan.requests[0].kind)
        batches = fetch_plan.batches
        records: list[TrackRecord] = []

        for index, batch in enumerate(batches, start=1):
            logger.debug(
                "Processing batch %d/%d (pages %d-%d)",
                index,
                len(batches),
                batch[0].page,
                batch[-1].page,
            )
            try:
                pages = await self._run_batch(descriptor, batch, fetch_plan.total_available)
            except Exception:
                logger.error(
                    "Batch %d/%d of %s failed, aborting fetch",
                    index,
                    len(batches),
                    descriptor.method,
                    exc_info=True,
                )
                raise
            for page_records in pages:
                records.extend(page_records)

        # Safety net: never hand back more than was planned.
        return _take_historical(records, fetch_plan.effective_limit)

    async def _run_batch(
        self,
        descriptor: ResourceDescriptor,
        batch: tuple[PageRequest, ...],
        probe_total: int,
    ) -> list[list[TrackRecord]]:
        """Fetch all pages of one batch concurrently; fail fast on the first error."""
        tasks = [
            asyncio.create_task(
                self._fetch_page(descriptor, request, probe_total),
                name=f"{descriptor.method}:page-{request.page}",
            )
            for request in batch
        ]

        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            for task in tasks:
                task.cancel()
            raise

        failed = [task for task in tasks if task in done and task.exception() is not None]
        if not failed:
            return [task.result() for task in tasks]

        # Let in-flight siblings drain, then discard whatever they produced.
        if pending:
            await asyncio.wait(pending)
            for task in pending:
                if task.exception() is not None:
                    logger.debug(
                        "Discarding error from %s: %s", task.get_name(), task.exception()
                    )

        raise cast(BaseException, failed[0].exception())

    async def _fetch_page(
        self, descriptor: ResourceDescriptor, request: PageRequest, probe_total: int
    ) -> list[TrackRecord]:
        payload = await self._transport.fetch(descriptor.method, request.to_params())
        envelope = descriptor.decode_page(payload)

        # The collection is live - a scrobble during paging shifts the total.
        if envelope.total != probe_total:
            logger.warning(
                "%s total changed during fetch: probe=%d, page %d=%d",
                descriptor.method,
                probe_total,
                request.page,
                envelope.total,
            )

        # Lenient pages may carry more than asked; trim to the planned size.
        records = [descriptor.normalize(item) for item in envelope.items]
        return _take_historical(records, request.size)


def _take_historical(records: list[TrackRecord], size: int) -> list[TrackRecord]:
    """First ``size`` historical records, plus a leading now-playing entry if present.

    Hey future me - Last.fm puts the now-playing track on TOP of page 1 without counting it in
    @attr.total or in the requested limit. Counting it against size would silently drop the
    oldest real scrobble of page 1 (and incremental updates would never see it again).
    """
    lead = records[:1] if records and records[0].now_playing else []
    return lead + records[len(lead) :][:size]
