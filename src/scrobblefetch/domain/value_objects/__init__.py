"""Value objects for the domain layer."""

from enum import Enum

from scrobblefetch.domain.value_objects.paging import (
    UNLIMITED,
    FetchPlan,
    PageEnvelope,
    PageRequest,
    TrackLimit,
)


# Hey future me - these are the ONLY three collections Last.fm lets us page through per user.
# The enum value doubles as the CLI name and the "kind" column in saved CSV/JSON files, so
# don't rename values without a migration story for existing data files!
class ResourceKind(str, Enum):
    """Collection kinds exposed by the Last.fm user API."""

    RECENT_PLAYS = "recent"
    LOVED_TRACKS = "loved"
    TOP_TRACKS = "top"


class Period(str, Enum):
    """Time range filter for top tracks (Last.fm ``period`` parameter)."""

    OVERALL = "overall"
    WEEK = "7day"
    MONTH = "1month"
    THREE_MONTHS = "3month"
    SIX_MONTHS = "6month"
    TWELVE_MONTHS = "12month"

    @property
    def api_value(self) -> str:
        """Value sent as the ``period`` query parameter."""
        return self.value


__all__ = [
    "UNLIMITED",
    "FetchPlan",
    "PageEnvelope",
    "PageRequest",
    "Period",
    "ResourceKind",
    "TrackLimit",
]
