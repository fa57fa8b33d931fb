"""Resource descriptors: one tagged entry per Last.fm collection kind.

Hey future me - this is the whole "which endpoint, which envelope, which normalizer" table.
Adding a fourth kind means ONE new ResourceDescriptor here plus a normalizer; the bulk
fetch pipeline never branches on the kind itself.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from scrobblefetch.domain.entities import TrackRecord
from scrobblefetch.domain.exceptions import DecodeError
from scrobblefetch.domain.value_objects import PageEnvelope, ResourceKind
from scrobblefetch.infrastructure.integrations.lastfm_normalizer import (
    normalize_loved_track,
    normalize_recent_track,
    normalize_top_track,
    parse_count,
)
from scrobblefetch.infrastructure.integrations.lastfm_schema import WireTrackPage


@dataclass(frozen=True)
class ResourceDescriptor:
    """Static description of one paged collection.

    Attributes:
        kind: Discriminant
        method: Last.fm API method
        envelope_key: Top-level key of the response payload
        normalize: Wire item -> TrackRecord
        supports_since: API accepts a "from" (UNIX timestamp) filter
        timestamped: Normalized records carry a timestamp
    """

    kind: ResourceKind
    method: str
    envelope_key: str
    normalize: Callable[[Mapping[str, Any]], TrackRecord]
    supports_since: bool = False
    timestamped: bool = True

    def decode_page(self, payload: Mapping[str, Any]) -> PageEnvelope:
        """Decode the response envelope; items stay raw until normalized.

        Raises:
            DecodeError: Missing envelope key, bad @attr block or non-numeric counts
        """
        container = payload.get(self.envelope_key)
        if not isinstance(container, Mapping):
            raise DecodeError(
                f"{self.method} response has no {self.envelope_key!r} object",
                raw_value=list(payload.keys()),
            )
        try:
            page = WireTrackPage.model_validate(container)
        except PydanticValidationError as e:
            raise DecodeError(
                f"Malformed {self.envelope_key} envelope: {e}",
                raw_value=container.get("@attr"),
            ) from e

        return PageEnvelope(
            items=page.track,
            total=parse_count(page.attr.total, "@attr.total"),
            total_pages=parse_count(page.attr.total_pages, "@attr.totalPages"),
            page=parse_count(page.attr.page, "@attr.page"),
            per_page=parse_count(page.attr.per_page, "@attr.perPage"),
            user=page.attr.user,
        )


RESOURCES: Mapping[ResourceKind, ResourceDescriptor] = MappingProxyType(
    {
        ResourceKind.RECENT_PLAYS: ResourceDescriptor(
            kind=ResourceKind.RECENT_PLAYS,
            method="user.getrecenttracks",
            envelope_key="recenttracks",
            normalize=normalize_recent_track,
            supports_since=True,
        ),
        ResourceKind.LOVED_TRACKS: ResourceDescriptor(
            kind=ResourceKind.LOVED_TRACKS,
            method="user.getlovedtracks",
            envelope_key="lovedtracks",
            normalize=normalize_loved_track,
        ),
        ResourceKind.TOP_TRACKS: ResourceDescriptor(
            kind=ResourceKind.TOP_TRACKS,
            method="user.gettoptracks",
            envelope_key="toptracks",
            normalize=normalize_top_track,
            timestamped=False,
        ),
    }
)


def get_descriptor(kind: ResourceKind) -> ResourceDescriptor:
    """Look up the descriptor for a resource kind."""
    return RESOURCES[kind]
