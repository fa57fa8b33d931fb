"""Shared fixtures: settings and Last.fm payload builders."""

from collections.abc import Callable
from typing import Any

import pytest

from scrobblefetch.config.settings import LastfmSettings

PagePayload = dict[str, Any]


@pytest.fixture
def lastfm_settings() -> LastfmSettings:
    """Settings with credentials, the API page cap and a batch width of 5."""
    return LastfmSettings(
        _env_file=None,
        api_key="test-key",
        username="someone",
        base_url="https://ws.audioscrobbler.com/2.0/",
        max_page_size=1000,
        batch_width=5,
    )


def _recent_item(index: int, timestamp: int) -> dict[str, Any]:
    return {
        "name": f"Track {index}",
        "url": f"https://www.last.fm/music/Artist/_/Track+{index}",
        "mbid": "",
        "artist": {"mbid": "", "#text": "Artist"},
        "album": {"mbid": "", "#text": "Album"},
        "image": [
            {"size": "small", "#text": "https://img/s.png"},
            {"size": "extralarge", "#text": "https://img/xl.png"},
        ],
        "streamable": "0",
        "date": {"uts": str(timestamp), "#text": "01 Jan 2024, 00:00"},
    }


@pytest.fixture
def recent_item() -> Callable[[int, int], dict[str, Any]]:
    """Build one raw user.getrecenttracks item."""
    return _recent_item


@pytest.fixture
def recent_page() -> Callable[..., PagePayload]:
    """Build a user.getrecenttracks payload.

    recent_page(total=2500, count=3, page=1) -> envelope with 3 items and @attr.total == "2500".
    """

    def _build(
        total: int,
        count: int,
        page: int = 1,
        per_page: int = 1000,
        start: int = 0,
        first_timestamp: int = 1_700_000_000,
    ) -> PagePayload:
        items = [
            _recent_item(start + i, first_timestamp - (start + i)) for i in range(count)
        ]
        total_pages = -(-total // per_page) if per_page else 0
        return {
            "recenttracks": {
                "track": items,
                "@attr": {
                    "user": "someone",
                    "totalPages": str(total_pages),
                    "page": str(page),
                    "perPage": str(per_page),
                    "total": str(total),
                },
            }
        }

    return _build
