"""Last.fm HTTP client implementation."""

import logging
from collections.abc import Mapping
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from scrobblefetch.config.settings import LastfmSettings
from scrobblefetch.domain.exceptions import ApiError, DecodeError, TransportError
from scrobblefetch.domain.ports import ILastfmTransport
from scrobblefetch.infrastructure.integrations.lastfm_schema import LastfmErrorEnvelope
from scrobblefetch.infrastructure.integrations.query_builder import QueryBuilder

logger = logging.getLogger(__name__)

# Keep error excerpts short - some proxies answer with full HTML pages.
_BODY_EXCERPT = 200


class LastfmClient(ILastfmTransport):
    """HTTP transport for the Last.fm user.* API methods.

    Hey future me - ONE call to fetch() is ONE network round trip. No retries in here on purpose:
    the bulk fetcher decides what a failure means for the whole operation (fail-fast).
    """

    def __init__(self, settings: LastfmSettings) -> None:
        """
        Initialize Last.fm client.

        Args:
            settings: Last.fm configuration settings

        Raises:
            ConfigurationError: If no API key is configured (checked before any I/O)
        """
        self.settings = settings
        api_key = settings.require_api_key()
        self._query = QueryBuilder(
            settings.base_url,
            {
                "api_key": api_key,
                "format": "json",
                "user": settings.username,
            },
        )
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            # A whole batch is in flight at once, so the pool must hold at least batch_width
            # connections or the "concurrent" batch silently serializes on the pool.
            self._client = httpx.AsyncClient(
                timeout=self.settings.timeout,
                limits=httpx.Limits(
                    max_connections=max(self.settings.batch_width, 10),
                    max_keepalive_connections=self.settings.batch_width,
                ),
                headers={"User-Agent": "scrobblefetch/0.1"},
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def build_url(self, method: str, params: Mapping[str, str]) -> str:
        """Full request URL: base parameters, then the method, then call parameters."""
        return self._query.with_params({"method": method}).with_params(params).build()

    async def fetch(self, method: str, params: Mapping[str, str]) -> dict[str, Any]:
        """
        Make one GET request to the Last.fm API.

        Args:
            method: API method name
            params: Call-specific parameters (limit, page, period, from ...)

        Returns:
            Decoded JSON object

        Raises:
            TransportError: Connection/timeout/TLS failure
            ApiError: Last.fm returned an error envelope
            DecodeError: Body is not a JSON object
        """
        client = await self._get_client()
        url = self.build_url(method, params)

        logger.debug("Last.fm request %s %s", method, dict(params))

        try:
            response = await client.get(url)
        except httpx.TransportError as e:
            raise TransportError(
                f"{type(e).__name__} while calling Last.fm {method}: {e}"
            ) from e

        if not response.is_success:
            raise self._decode_error(response)

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(
                f"Last.fm {method} returned invalid JSON: {e}",
                raw_value=response.text[:_BODY_EXCERPT],
            ) from e

        if not isinstance(data, dict):
            raise DecodeError(
                f"Last.fm {method} returned {type(data).__name__}, expected an object",
                raw_value=data,
            )

        # Yo, Last.fm sometimes answers 200 with an error envelope (seen for code 8/29).
        if "error" in data:
            raise self._error_from_payload(data, response.status_code)

        return data

    def _decode_error(self, response: httpx.Response) -> ApiError | DecodeError:
        """Turn a non-2xx response into ApiError (or DecodeError if the body is garbage)."""
        try:
            payload = response.json()
        except ValueError:
            return DecodeError(
                f"Last.fm returned HTTP {response.status_code} with a non-JSON body",
                raw_value=response.text[:_BODY_EXCERPT],
            )
        if not isinstance(payload, dict):
            return DecodeError(
                f"Last.fm returned HTTP {response.status_code} with an unexpected body",
                raw_value=payload,
            )
        return self._error_from_payload(payload, response.status_code)

    def _error_from_payload(
        self, payload: dict[str, Any], status_code: int
    ) -> ApiError | DecodeError:
        try:
            envelope = LastfmErrorEnvelope.model_validate(payload)
        except PydanticValidationError as e:
            return DecodeError(
                f"Last.fm returned HTTP {status_code} with a malformed error envelope: {e}",
                raw_value=payload,
            )
        logger.debug(
            "Last.fm error envelope (HTTP %d): %d %s",
            status_code,
            envelope.error,
            envelope.message,
        )
        return ApiError(envelope.error, envelope.message)

    async def __aenter__(self) -> "LastfmClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()
