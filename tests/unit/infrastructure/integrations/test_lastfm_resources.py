"""Tests for resource descriptors and page envelope decoding."""

import pytest

from scrobblefetch.domain.exceptions import DecodeError
from scrobblefetch.domain.value_objects import ResourceKind
from scrobblefetch.infrastructure.integrations.lastfm_resources import (
    RESOURCES,
    get_descriptor,
)


class TestDescriptors:
    """Test the descriptor table."""

    def test_every_kind_has_a_descriptor(self) -> None:
        """The table covers the whole enum."""
        assert set(RESOURCES) == set(ResourceKind)

    @pytest.mark.parametrize(
        ("kind", "method", "key"),
        [
            (ResourceKind.RECENT_PLAYS, "user.getrecenttracks", "recenttracks"),
            (ResourceKind.LOVED_TRACKS, "user.getlovedtracks", "lovedtracks"),
            (ResourceKind.TOP_TRACKS, "user.gettoptracks", "toptracks"),
        ],
    )
    def test_methods_and_envelopes(self, kind: ResourceKind, method: str, key: str) -> None:
        """Each kind maps to its API method and envelope key."""
        descriptor = get_descriptor(kind)
        assert descriptor.method == method
        assert descriptor.envelope_key == key

    def test_only_recent_supports_since(self) -> None:
        """Only recent plays accept the "from" filter."""
        assert [kind for kind, d in RESOURCES.items() if d.supports_since] == [
            ResourceKind.RECENT_PLAYS
        ]

    def test_top_tracks_not_timestamped(self) -> None:
        """Top tracks are aggregates without timestamps."""
        assert get_descriptor(ResourceKind.TOP_TRACKS).timestamped is False


class TestDecodePage:
    """Test envelope decoding."""

    def test_attr_counts_coerced(self, recent_page) -> None:
        """@attr numeric strings become ints."""
        envelope = get_descriptor(ResourceKind.RECENT_PLAYS).decode_page(
            recent_page(total=2500, count=3, page=2, per_page=1000)
        )

        assert envelope.total == 2500
        assert envelope.total_pages == 3
        assert envelope.page == 2
        assert envelope.per_page == 1000
        assert envelope.user == "someone"
        assert len(envelope.items) == 3

    def test_single_track_object_wrapped(self, recent_page, recent_item) -> None:
        """A lone track object is treated as a one-item list."""
        payload = recent_page(total=1, count=0)
        payload["recenttracks"]["track"] = recent_item(0, 1)

        envelope = get_descriptor(ResourceKind.RECENT_PLAYS).decode_page(payload)

        assert len(envelope.items) == 1
        assert envelope.items[0]["name"] == "Track 0"

    def test_missing_track_key_is_empty(self) -> None:
        """Empty collections may omit "track" entirely."""
        payload = {
            "lovedtracks": {
                "@attr": {"user": "x", "totalPages": "0", "page": "1", "perPage": "50", "total": "0"}
            }
        }

        envelope = get_descriptor(ResourceKind.LOVED_TRACKS).decode_page(payload)

        assert envelope.items == []
        assert envelope.total == 0

    def test_wrong_envelope_key(self, recent_page) -> None:
        """A payload for another method is a DecodeError."""
        with pytest.raises(DecodeError):
            get_descriptor(ResourceKind.TOP_TRACKS).decode_page(recent_page(total=1, count=1))

    def test_missing_attr_block(self) -> None:
        """No @attr -> DecodeError."""
        with pytest.raises(DecodeError):
            get_descriptor(ResourceKind.RECENT_PLAYS).decode_page({"recenttracks": {"track": []}})

    def test_non_numeric_total(self, recent_page) -> None:
        """A garbage total is a DecodeError with the raw value."""
        payload = recent_page(total=1, count=1)
        payload["recenttracks"]["@attr"]["total"] = "many"

        with pytest.raises(DecodeError) as exc_info:
            get_descriptor(ResourceKind.RECENT_PLAYS).decode_page(payload)

        assert exc_info.value.raw_value == "many"
