"""Pydantic models for the Last.fm user.* JSON payloads.

Hey future me - Last.fm JSON is converted XML, so it's full of quirks:
- numbers AND booleans come as strings ("1234", "0"/"1") - we keep them as str here and let the
  normalizer coerce them, so a bad value produces a DecodeError naming the raw value
- text nodes live under "#text", attributes under "@attr"
- a page with exactly ONE track may come back as an object instead of a list (old XML->JSON bug)
- recent tracks use {"mbid", "#text"} for artist/album, loved/top use {"name", "url", "mbid"}
All models ignore unknown fields; Last.fm adds keys without notice.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LastfmBaseModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore", populate_by_name=True, coerce_numbers_to_str=True
    )


class LastfmErrorEnvelope(LastfmBaseModel):
    """Body of an error response: {"error": 6, "message": "User not found"}."""

    error: int
    message: str = ""


class WirePagingAttr(LastfmBaseModel):
    """The "@attr" paging block; every value is a numeric string."""

    user: str = ""
    total_pages: str = Field("0", alias="totalPages")
    page: str = "1"
    per_page: str = Field("0", alias="perPage")
    total: str


class WireTrackPage(LastfmBaseModel):
    """Inner container, e.g. payload["recenttracks"]."""

    track: list[dict[str, Any]] = Field(default_factory=list)
    attr: WirePagingAttr = Field(alias="@attr")

    @field_validator("track", mode="before")
    @classmethod
    def _wrap_single_track(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, dict):
            return [value]
        return value


class WireImage(LastfmBaseModel):
    size: str = ""
    text: str = Field("", alias="#text")


class WireDate(LastfmBaseModel):
    uts: str
    text: str = Field("", alias="#text")


class WireTextRef(LastfmBaseModel):
    """{"mbid": "...", "#text": "Display name"} - artist/album in recent tracks."""

    mbid: str = ""
    text: str = Field("", alias="#text")


class WireNamedRef(LastfmBaseModel):
    """{"name": "...", "url": "...", "mbid": "..."} - artist in loved/top tracks."""

    name: str
    url: str = ""
    mbid: str = ""


class WireStreamable(LastfmBaseModel):
    fulltrack: str = "0"
    text: str = Field("0", alias="#text")


class WireRecentTrack(LastfmBaseModel):
    name: str
    url: str = ""
    mbid: str = ""
    artist: WireTextRef
    album: WireTextRef | None = None
    image: list[WireImage] = Field(default_factory=list)
    streamable: str = "0"
    date: WireDate | None = None
    attr: dict[str, str] | None = Field(None, alias="@attr")


class WireLovedTrack(LastfmBaseModel):
    name: str
    url: str = ""
    mbid: str = ""
    artist: WireNamedRef
    image: list[WireImage] = Field(default_factory=list)
    streamable: WireStreamable = Field(default_factory=WireStreamable)
    date: WireDate


class WireTopTrack(LastfmBaseModel):
    name: str
    url: str = ""
    mbid: str = ""
    artist: WireNamedRef
    image: list[WireImage] = Field(default_factory=list)
    streamable: WireStreamable = Field(default_factory=WireStreamable)
    playcount: str = "0"
    duration: str | None = None
    attr: dict[str, str] | None = Field(None, alias="@attr")
