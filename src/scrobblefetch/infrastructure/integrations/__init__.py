"""External integration client implementations."""

from scrobblefetch.infrastructure.integrations.lastfm_client import LastfmClient
from scrobblefetch.infrastructure.integrations.lastfm_resources import (
    RESOURCES,
    ResourceDescriptor,
    get_descriptor,
)
from scrobblefetch.infrastructure.integrations.query_builder import QueryBuilder

__all__ = [
    "RESOURCES",
    "LastfmClient",
    "QueryBuilder",
    "ResourceDescriptor",
    "get_descriptor",
]
