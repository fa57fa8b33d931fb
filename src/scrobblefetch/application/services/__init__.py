"""Application services - fetch orchestration and persistence glue."""

from scrobblefetch.application.services.bulk_fetch_service import BulkFetchService
from scrobblefetch.application.services.track_sync_service import TrackSyncService

__all__ = ["BulkFetchService", "TrackSyncService"]
