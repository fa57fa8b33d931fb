"""Persistence layer for fetched track files."""

from scrobblefetch.infrastructure.persistence.track_store import (
    SUPPORTED_FORMATS,
    FileTrackStore,
)

__all__ = ["SUPPORTED_FORMATS", "FileTrackStore"]
