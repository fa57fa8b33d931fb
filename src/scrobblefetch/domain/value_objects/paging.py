"""Paging value objects: page requests, fetch plans and response envelopes.

Hey future me - everything here is CALL-SCOPED. A PageRequest is created by the chunk planner,
consumed exactly once by the executor and then thrown away. Nothing in here survives between
two fetch operations, which is why these are frozen dataclasses (no accidental sharing).
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from scrobblefetch.domain.value_objects import ResourceKind

# None means "fetch everything the probe reports".
TrackLimit = int | None
UNLIMITED: TrackLimit = None


@dataclass(frozen=True)
class PageRequest:
    """One page to fetch.

    Attributes:
        page: 1-based page number
        size: Items wanted from this page (the planned, post-trim size)
        kind: Resource kind
        filters: Extra query filters ("from", "period", ...)
        per_page: Page stride sent as "limit"; defaults to size

    Hey future me - Last.fm addresses page N as items [(N-1)*limit, N*limit). The short LAST page
    of a multi-page plan must therefore still be requested with the full stride and trimmed to
    size afterwards, otherwise page 3 with limit=500 would return items 1000..1499 again.
    """

    page: int
    size: int
    kind: "ResourceKind"
    filters: Mapping[str, str] = field(default_factory=dict)
    per_page: int | None = None

    @property
    def limit(self) -> int:
        return self.per_page if self.per_page is not None else self.size

    def to_params(self) -> dict[str, str]:
        """Query parameters for this page (filters first, paging wins on conflicts)."""
        return {**self.filters, "limit": str(self.limit), "page": str(self.page)}


@dataclass(frozen=True)
class FetchPlan:
    """Ordered page requests partitioned into concurrency batches.

    Attributes:
        requests: Page requests in page order
        effective_limit: min(requested limit, total available at probe time)
        batch_width: Max number of requests in flight at once
        total_available: Probe total the plan was computed from
    """

    requests: tuple[PageRequest, ...]
    effective_limit: int
    batch_width: int
    total_available: int = 0

    @property
    def batches(self) -> list[tuple[PageRequest, ...]]:
        """Requests grouped into batches of ``batch_width``, order preserved."""
        return [
            self.requests[start : start + self.batch_width]
            for start in range(0, len(self.requests), self.batch_width)
        ]

    @property
    def is_empty(self) -> bool:
        return not self.requests

    @property
    def planned_items(self) -> int:
        return sum(request.size for request in self.requests)


@dataclass(frozen=True)
class PageEnvelope:
    """Decoded response page.

    total is authoritative for THIS response - the collection is live, so it may differ from
    the probe (user scrobbled while we were paging).
    """

    items: list[Any]
    total: int
    total_pages: int
    page: int
    per_page: int
    user: str = ""
