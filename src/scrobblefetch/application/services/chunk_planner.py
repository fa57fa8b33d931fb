"""Chunk planner: how many pages of which size, grouped into concurrency batches.

Hey future me - older revisions of this logic computed the page count with floor-division-plus-one
or float division and got the last page wrong for exact multiples of the page size (2000 items at
1000/page produced a third, EMPTY request). The rule now is plain integer ceil division, and an
evenly divisible count ends with a FULL last page, never an empty one.

Examples (max_page_size=1000):
    total=2500, limit=None  -> [1000, 1000, 500]
    total=2000, limit=None  -> [1000, 1000]
    total=5000, limit=1200  -> [1000, 200]
    total=40,   limit=None  -> [40]
    total=0                 -> []   (no request beyond the probe)
"""

from collections.abc import Mapping

from scrobblefetch.domain.exceptions import ValidationError
from scrobblefetch.domain.value_objects import (
    FetchPlan,
    PageRequest,
    ResourceKind,
    TrackLimit,
)


def effective_limit(total_available: int, requested_limit: TrackLimit) -> int:
    """min(requested, total); an unlimited request takes everything available."""
    if requested_limit is None:
        return total_available
    return min(requested_limit, total_available)


def plan(
    total_available: int,
    requested_limit: TrackLimit,
    max_page_size: int,
    batch_width: int = 5,
    kind: ResourceKind = ResourceKind.RECENT_PLAYS,
    filters: Mapping[str, str] | None = None,
) -> FetchPlan:
    """Compute the minimal ordered set of page requests.

    Args:
        total_available: Authoritative total from the probe
        requested_limit: Logical item limit, None for "all"
        max_page_size: API cap on items per call
        batch_width: Max requests in flight at once
        kind: Resource kind stamped on every request
        filters: Extra query filters copied into every request

    Returns:
        FetchPlan whose page sizes sum to the effective limit

    Raises:
        ValidationError: Negative counts or non-positive page size / batch width
    """
    if total_available < 0:
        raise ValidationError(f"total_available must be >= 0, got {total_available}")
    if requested_limit is not None and requested_limit < 0:
        raise ValidationError(f"limit must be >= 0, got {requested_limit}")
    if max_page_size < 1:
        raise ValidationError(f"max_page_size must be >= 1, got {max_page_size}")
    if batch_width < 1:
        raise ValidationError(f"batch_width must be >= 1, got {batch_width}")

    limit = effective_limit(total_available, requested_limit)
    page_filters = dict(filters or {})

    if limit == 0:
        return FetchPlan(
            requests=(),
            effective_limit=0,
            batch_width=batch_width,
            total_available=total_available,
        )

    if limit <= max_page_size:
        single = PageRequest(page=1, size=limit, kind=kind, filters=page_filters)
        return FetchPlan(
            requests=(single,),
            effective_limit=limit,
            batch_width=batch_width,
            total_available=total_available,
        )

    pages_needed = -(-limit // max_page_size)
    remainder = limit - (pages_needed - 1) * max_page_size

    requests = tuple(
        PageRequest(
            page=page,
            size=remainder if page == pages_needed else max_page_size,
            kind=kind,
            filters=page_filters,
            per_page=max_page_size,
        )
        for page in range(1, pages_needed + 1)
    )
    return FetchPlan(
        requests=requests,
        effective_limit=limit,
        batch_width=batch_width,
        total_available=total_available,
    )
