"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from scrobblefetch.domain.entities import TrackRecord


class ILastfmTransport(ABC):
    """Port for the single-round-trip Last.fm transport."""

    @abstractmethod
    async def fetch(self, method: str, params: Mapping[str, str]) -> dict[str, Any]:
        """
        Issue exactly one GET request for an API method.

        Args:
            method: Last.fm API method (e.g. "user.getrecenttracks")
            params: Call-specific query parameters (override base parameters)

        Returns:
            Decoded JSON payload

        Raises:
            ApiError: Upstream returned an error envelope
            DecodeError: Body is not valid JSON / not an object
            TransportError: Connection, timeout or TLS failure
        """
        pass


class ITrackStore(ABC):
    """Port for the persistence collaborator used by save and incremental mode."""

    @abstractmethod
    def save(self, records: Sequence[TrackRecord], fmt: str, prefix: str) -> str:
        """
        Write records to a new timestamped file.

        Args:
            records: Records to persist
            fmt: "json" or "csv"
            prefix: Filename prefix (e.g. "recent_tracks")

        Returns:
            Path of the written file
        """
        pass

    @abstractmethod
    def append(self, records: Sequence[TrackRecord], path: str) -> str:
        """
        Append records to an existing file (format taken from the extension).

        Returns:
            Path of the updated file
        """
        pass

    @abstractmethod
    def latest_timestamp(self, path: str) -> int | None:
        """
        Scan a persisted file for the maximum record timestamp.

        Returns:
            Max timestamp or None when no record carries one
        """
        pass


__all__ = ["ILastfmTransport", "ITrackStore"]
