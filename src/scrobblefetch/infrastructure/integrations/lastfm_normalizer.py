"""Wire record -> TrackRecord normalization, one pure function per resource kind.

Hey future me - these functions are PURE. Same raw dict in, equal TrackRecord out, no state,
no I/O. The bulk fetcher calls them on every item of every page, so keep them cheap.
Every coercion failure is a DecodeError carrying the raw value - never a silent default.
"""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from scrobblefetch.domain.entities import TrackImage, TrackRecord, select_image_url
from scrobblefetch.domain.exceptions import DecodeError
from scrobblefetch.domain.value_objects import ResourceKind
from scrobblefetch.infrastructure.integrations.lastfm_schema import (
    WireImage,
    WireLovedTrack,
    WireRecentTrack,
    WireTopTrack,
)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

_FLAG_VALUES = {"0": False, "1": True}


def parse_flag(value: str, field_name: str = "flag") -> bool:
    """Coerce a Last.fm "0"/"1" string to bool.

    Raises:
        DecodeError: For anything outside {"0", "1"} (e.g. "yes", "true", "")
    """
    try:
        return _FLAG_VALUES[value.strip()]
    except (KeyError, AttributeError):
        raise DecodeError(
            f"Invalid boolean for {field_name}: {value!r} (expected '0' or '1')",
            raw_value=value,
        ) from None


def parse_count(value: str, field_name: str = "count") -> int:
    """Coerce a Last.fm numeric string to a non-negative int.

    Raises:
        DecodeError: When the value is not a parseable non-negative integer
    """
    try:
        result = int(str(value).strip())
    except (TypeError, ValueError):
        raise DecodeError(
            f"Invalid integer for {field_name}: {value!r}", raw_value=value
        ) from None
    if result < 0:
        raise DecodeError(
            f"Negative integer for {field_name}: {value!r}", raw_value=value
        )
    return result


def _validate(model: type[_ModelT], raw: Mapping[str, Any]) -> _ModelT:
    try:
        return model.model_validate(raw)
    except PydanticValidationError as e:
        raise DecodeError(
            f"Malformed {model.__name__} record: {e.error_count()} error(s): {e}",
            raw_value=dict(raw),
        ) from e


def _images(images: list[WireImage]) -> list[TrackImage]:
    return [TrackImage(size=image.size, url=image.text) for image in images]


def _optional(value: str) -> str | None:
    """Last.fm uses "" for missing ids and album names."""
    return value or None


def normalize_recent_track(raw: Mapping[str, Any]) -> TrackRecord:
    """Normalize one user.getrecenttracks item.

    The currently playing entry carries @attr.nowplaying == "true" and NO date; any other
    entry without a date is a decode error.
    """
    wire = _validate(WireRecentTrack, raw)
    now_playing = bool(wire.attr) and wire.attr.get("nowplaying") == "true"

    if wire.date is not None:
        timestamp: int | None = parse_count(wire.date.uts, "date.uts")
    elif now_playing:
        timestamp = None
    else:
        raise DecodeError(
            f"Recent track {wire.name!r} has no date and is not now playing",
            raw_value=dict(raw),
        )

    images = _images(wire.image)
    return TrackRecord(
        name=wire.name,
        artist=wire.artist.text,
        url=wire.url,
        kind=ResourceKind.RECENT_PLAYS,
        album=_optional(wire.album.text) if wire.album else None,
        images=images,
        image_url=select_image_url(images),
        now_playing=now_playing,
        timestamp=timestamp,
        mbid=_optional(wire.mbid),
        artist_mbid=_optional(wire.artist.mbid),
        streamable=parse_flag(wire.streamable, "streamable"),
    )


def normalize_loved_track(raw: Mapping[str, Any]) -> TrackRecord:
    """Normalize one user.getlovedtracks item (timestamp = when it was loved)."""
    wire = _validate(WireLovedTrack, raw)
    images = _images(wire.image)
    return TrackRecord(
        name=wire.name,
        artist=wire.artist.name,
        url=wire.url,
        kind=ResourceKind.LOVED_TRACKS,
        images=images,
        image_url=select_image_url(images),
        timestamp=parse_count(wire.date.uts, "date.uts"),
        mbid=_optional(wire.mbid),
        artist_mbid=_optional(wire.artist.mbid),
        streamable=parse_flag(wire.streamable.text, "streamable"),
    )


def normalize_top_track(raw: Mapping[str, Any]) -> TrackRecord:
    """Normalize one user.gettoptracks item (aggregate - no timestamp)."""
    wire = _validate(WireTopTrack, raw)
    images = _images(wire.image)
    rank = wire.attr.get("rank") if wire.attr else None
    return TrackRecord(
        name=wire.name,
        artist=wire.artist.name,
        url=wire.url,
        kind=ResourceKind.TOP_TRACKS,
        images=images,
        image_url=select_image_url(images),
        mbid=_optional(wire.mbid),
        artist_mbid=_optional(wire.artist.mbid),
        streamable=parse_flag(wire.streamable.text, "streamable"),
        play_count=parse_count(wire.playcount, "playcount"),
        rank=parse_count(rank, "@attr.rank") if rank is not None else None,
        duration=parse_count(wire.duration, "duration") if wire.duration else None,
    )
