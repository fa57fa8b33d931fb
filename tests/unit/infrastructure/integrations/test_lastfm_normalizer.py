"""Tests for Last.fm wire record normalization."""

import pytest

from scrobblefetch.domain.exceptions import DecodeError
from scrobblefetch.domain.value_objects import ResourceKind
from scrobblefetch.infrastructure.integrations.lastfm_normalizer import (
    normalize_loved_track,
    normalize_recent_track,
    normalize_top_track,
    parse_count,
    parse_flag,
)


@pytest.fixture
def loved_item() -> dict:
    """Raw user.getlovedtracks item."""
    return {
        "name": "Hurt",
        "url": "https://www.last.fm/music/Johnny+Cash/_/Hurt",
        "mbid": "",
        "artist": {
            "name": "Johnny Cash",
            "url": "https://www.last.fm/music/Johnny+Cash",
            "mbid": "d43d12a1-2dc9-4257-a2fd-0a3bb1081b86",
        },
        "image": [{"size": "large", "#text": "https://img/l.png"}],
        "streamable": {"fulltrack": "0", "#text": "1"},
        "date": {"uts": "1650000000", "#text": "15 Apr 2022, 05:20"},
    }


@pytest.fixture
def top_item() -> dict:
    """Raw user.gettoptracks item."""
    return {
        "name": "Song",
        "url": "https://www.last.fm/music/A/_/Song",
        "mbid": "abc",
        "artist": {"name": "A", "url": "", "mbid": ""},
        "image": [],
        "streamable": {"fulltrack": "0", "#text": "0"},
        "playcount": "1337",
        "duration": "0",
        "@attr": {"rank": "3"},
    }


class TestParseFlag:
    """Test "0"/"1" coercion."""

    def test_one_is_true(self) -> None:
        """ "1" -> True."""
        assert parse_flag("1") is True

    def test_zero_is_false(self) -> None:
        """ "0" -> False."""
        assert parse_flag("0") is False

    @pytest.mark.parametrize("value", ["yes", "true", "", "2"])
    def test_other_values_rejected(self, value: str) -> None:
        """Anything else is a DecodeError carrying the raw value."""
        with pytest.raises(DecodeError) as exc_info:
            parse_flag(value, "streamable")

        assert exc_info.value.raw_value == value
        assert "streamable" in exc_info.value.message


class TestParseCount:
    """Test numeric string coercion."""

    def test_numeric_string(self) -> None:
        """ "1234" -> 1234."""
        assert parse_count("1234") == 1234

    @pytest.mark.parametrize("value", ["abc", "", "1.5", None])
    def test_non_numeric_rejected(self, value) -> None:
        """Unparseable values raise DecodeError."""
        with pytest.raises(DecodeError):
            parse_count(value)

    def test_negative_rejected(self) -> None:
        """Counts are never negative."""
        with pytest.raises(DecodeError):
            parse_count("-3")


class TestNormalizeRecentTrack:
    """Test recent play normalization."""

    def test_historical_play(self, recent_item) -> None:
        """Dated entry -> timestamp, album, best image, flattened artist."""
        record = normalize_recent_track(recent_item(0, 1_700_000_000))

        assert record.kind is ResourceKind.RECENT_PLAYS
        assert record.name == "Track 0"
        assert record.artist == "Artist"
        assert record.album == "Album"
        assert record.timestamp == 1_700_000_000
        assert record.now_playing is False
        assert record.image_url == "https://img/xl.png"
        assert record.mbid is None
        assert record.streamable is False

    def test_now_playing_entry(self, recent_item) -> None:
        """nowplaying="true" with no date -> flag set, no timestamp."""
        raw = recent_item(0, 0)
        del raw["date"]
        raw["@attr"] = {"nowplaying": "true"}

        record = normalize_recent_track(raw)

        assert record.now_playing is True
        assert record.timestamp is None

    def test_nowplaying_other_value_ignored(self, recent_item) -> None:
        """Only the exact string "true" sets the flag."""
        raw = recent_item(0, 1_700_000_000)
        raw["@attr"] = {"nowplaying": "false"}

        assert normalize_recent_track(raw).now_playing is False

    def test_undated_historical_entry_rejected(self, recent_item) -> None:
        """No date and not playing -> DecodeError."""
        raw = recent_item(0, 0)
        del raw["date"]

        with pytest.raises(DecodeError):
            normalize_recent_track(raw)

    def test_missing_artist_rejected(self, recent_item) -> None:
        """Schema violations surface as DecodeError."""
        raw = recent_item(0, 1)
        del raw["artist"]

        with pytest.raises(DecodeError) as exc_info:
            normalize_recent_track(raw)

        assert exc_info.value.raw_value["name"] == "Track 0"

    def test_unknown_fields_ignored(self, recent_item) -> None:
        """Extra keys added upstream don't break decoding."""
        raw = recent_item(0, 1)
        raw["loved"] = "0"

        assert normalize_recent_track(raw).name == "Track 0"

    def test_idempotent(self, recent_item) -> None:
        """Same wire record twice -> equal records."""
        raw = recent_item(5, 1_700_000_005)
        assert normalize_recent_track(raw) == normalize_recent_track(raw)


class TestNormalizeLovedTrack:
    """Test loved track normalization."""

    def test_loved_track(self, loved_item: dict) -> None:
        """Loved date becomes the timestamp, artist name is flattened."""
        record = normalize_loved_track(loved_item)

        assert record.kind is ResourceKind.LOVED_TRACKS
        assert record.artist == "Johnny Cash"
        assert record.artist_mbid == "d43d12a1-2dc9-4257-a2fd-0a3bb1081b86"
        assert record.timestamp == 1_650_000_000
        assert record.streamable is True
        assert record.image_url == "https://img/l.png"

    def test_missing_date_rejected(self, loved_item: dict) -> None:
        """Loved tracks always carry a date."""
        del loved_item["date"]
        with pytest.raises(DecodeError):
            normalize_loved_track(loved_item)


class TestNormalizeTopTrack:
    """Test top track normalization."""

    def test_top_track(self, top_item: dict) -> None:
        """Play count, rank and duration are coerced; no timestamp."""
        record = normalize_top_track(top_item)

        assert record.kind is ResourceKind.TOP_TRACKS
        assert record.play_count == 1337
        assert record.rank == 3
        assert record.duration == 0
        assert record.timestamp is None
        assert record.image_url is None
        assert record.mbid == "abc"

    def test_bad_playcount_rejected(self, top_item: dict) -> None:
        """Non-numeric playcount -> DecodeError with the raw value."""
        top_item["playcount"] = "lots"
        with pytest.raises(DecodeError) as exc_info:
            normalize_top_track(top_item)

        assert exc_info.value.raw_value == "lots"
