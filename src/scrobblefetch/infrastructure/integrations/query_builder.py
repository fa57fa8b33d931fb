"""URL + query-string builder for Last.fm requests."""

from collections.abc import Mapping
from types import MappingProxyType
from urllib.parse import urlencode


class QueryBuilder:
    """Immutable base endpoint plus a flat string-to-string parameter set.

    with_params() never mutates - it returns a new builder whose parameters are the current ones
    overlaid by the given mapping. Same key twice means the LATER value wins; the fetch path
    relies on that to replace the default "limit"/"page" with call-specific values.

    No validation happens here, it's purely a builder.
    """

    def __init__(self, base_url: str, params: Mapping[str, str] | None = None) -> None:
        self._base_url = base_url
        self._params: dict[str, str] = dict(params or {})

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def params(self) -> Mapping[str, str]:
        """Read-only view of the merged parameters."""
        return MappingProxyType(self._params)

    def with_params(self, params: Mapping[str, str]) -> "QueryBuilder":
        """Return a new builder with ``params`` overlaid (last-write-wins)."""
        return QueryBuilder(self._base_url, {**self._params, **params})

    def build(self) -> str:
        """Fully-qualified URL with URL-encoded query parameters."""
        if not self._params:
            return self._base_url
        separator = "&" if "?" in self._base_url else "?"
        return f"{self._base_url}{separator}{urlencode(self._params)}"
