"""Tests for paging value objects."""

import pytest

from scrobblefetch.domain.value_objects import FetchPlan, PageRequest, Period, ResourceKind


class TestPageRequest:
    """Test query parameter rendering."""

    def test_limit_defaults_to_size(self) -> None:
        """Without a stride the request asks for exactly its size."""
        request = PageRequest(page=1, size=40, kind=ResourceKind.RECENT_PLAYS)
        assert request.to_params() == {"limit": "40", "page": "1"}

    def test_stride_overrides_size(self) -> None:
        """per_page is what goes on the wire as limit."""
        request = PageRequest(page=3, size=500, kind=ResourceKind.RECENT_PLAYS, per_page=1000)
        assert request.limit == 1000
        assert request.to_params()["limit"] == "1000"

    def test_filters_included(self) -> None:
        """Filters travel with the page parameters."""
        request = PageRequest(
            page=2, size=10, kind=ResourceKind.TOP_TRACKS, filters={"period": "7day"}
        )
        assert request.to_params() == {"period": "7day", "limit": "10", "page": "2"}

    def test_frozen(self) -> None:
        """Requests are immutable."""
        request = PageRequest(page=1, size=1, kind=ResourceKind.RECENT_PLAYS)
        with pytest.raises(AttributeError):
            request.page = 2  # type: ignore[misc]


class TestFetchPlan:
    """Test plan helpers."""

    def test_empty_plan(self) -> None:
        """A plan without requests has no batches."""
        plan = FetchPlan(requests=(), effective_limit=0, batch_width=5)
        assert plan.is_empty
        assert plan.batches == []
        assert plan.planned_items == 0


class TestPeriod:
    """Test the top-tracks period enum."""

    def test_api_values(self) -> None:
        """Values match the Last.fm period parameter."""
        assert [period.api_value for period in Period] == [
            "overall",
            "7day",
            "1month",
            "3month",
            "6month",
            "12month",
        ]
