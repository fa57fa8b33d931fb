"""Domain entities."""

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar

from scrobblefetch.domain.value_objects import ResourceKind

# Preferred image size tags, best first. Anything else falls back to the first non-empty variant.
PREFERRED_IMAGE_SIZES: tuple[str, ...] = ("extralarge", "large")


@dataclass(frozen=True)
class TrackImage:
    """One image variant of a track (Last.fm size tag + URL)."""

    size: str
    url: str


def select_image_url(images: list[TrackImage]) -> str | None:
    """Pick the best available image URL.

    Preference: "extralarge", then "large", then the first variant with a non-empty URL.
    Last.fm sends empty "#text" for tracks without artwork, so those never win.
    """
    usable = [image for image in images if image.url]
    for size in PREFERRED_IMAGE_SIZES:
        for image in usable:
            if image.size == size:
                return image.url
    return usable[0].url if usable else None


# Hey future me, TrackRecord is THE canonical record - every resource kind (recent, loved, top)
# normalizes into this one shape so persistence never has to care where a row came from.
# timestamp is None ONLY for the "now playing" entry of recent plays; the normalizer enforces it.
# play_count/rank/duration are only filled for top tracks, album only for recent plays.
@dataclass
class TrackRecord:
    """Canonical, post-normalization representation of one track item."""

    name: str
    artist: str
    url: str
    kind: ResourceKind
    album: str | None = None
    images: list[TrackImage] = field(default_factory=list)
    image_url: str | None = None
    now_playing: bool = False
    timestamp: int | None = None
    mbid: str | None = None
    artist_mbid: str | None = None
    streamable: bool = False
    play_count: int | None = None
    rank: int | None = None
    duration: int | None = None

    # Column order for tabular (CSV) output. images are flattened to image_url there.
    CSV_FIELDS: ClassVar[tuple[str, ...]] = (
        "kind",
        "name",
        "artist",
        "album",
        "timestamp",
        "now_playing",
        "url",
        "mbid",
        "artist_mbid",
        "image_url",
        "streamable",
        "play_count",
        "rank",
        "duration",
    )

    @property
    def identifier(self) -> str:
        """Human readable "artist - track" identifier."""
        return f"{self.artist} - {self.name}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dict."""
        data = asdict(self)
        data["kind"] = self.kind.value
        return data

    def to_row(self) -> dict[str, Any]:
        """Flat row for CSV output (None becomes an empty cell)."""
        data = self.to_dict()
        return {
            name: "" if data[name] is None else data[name] for name in self.CSV_FIELDS
        }


__all__ = [
    "PREFERRED_IMAGE_SIZES",
    "TrackImage",
    "TrackRecord",
    "select_image_url",
]
