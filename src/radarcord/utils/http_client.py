"""HTTP client abstraction for the Radarcord API.

This module provides the aiohttp implementation of the HTTPClient
Protocol. Requests are sent once: there is no retry, backoff or rate
limit handling, failures propagate to the caller.
"""

import asyncio
import json
import logging
from collections.abc import Mapping
from contextlib import AbstractAsyncContextManager
from typing import Self

import aiohttp

from radarcord.types.models import Response


class AIOHTTPClient:
    """Async HTTP client backed by an aiohttp session.

    Implements the HTTPClient Protocol. The session is created lazily on
    the first request (it must be created inside a running event loop)
    or when entering the async context manager.

    Example:
        >>> async with AIOHTTPClient() as client:
        ...     response = await client.get("https://radarcord.net/api/bot/1")
    """

    def __init__(
        self,
        *,
        timeout_seconds: float | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize HTTP client.

        Args:
            timeout_seconds: Total request timeout, None keeps aiohttp's default
            session: Externally owned session to reuse (not closed by ``close``)
        """
        self._timeout_seconds: float | None = timeout_seconds
        self._session: aiohttp.ClientSession | None = session
        self._owns_session: bool = session is None
        self._logger: logging.Logger = logging.getLogger(__name__)

    async def __aenter__(self) -> Self:
        """Enter async context manager and create the aiohttp session.

        Returns:
            Self for context manager protocol
        """
        _ = self._ensure_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context manager and cleanup resources."""
        await self.close()

    @property
    def closed(self) -> bool:
        """Whether no open session is held."""
        return self._session is None or self._session.closed

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            if self._timeout_seconds is not None:
                self._session = aiohttp.ClientSession(
                    timeout=aiohttp.ClientTimeout(total=self._timeout_seconds),
                    json_serialize=json.dumps,
                )
            else:
                self._session = aiohttp.ClientSession(json_serialize=json.dumps)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def post(
        self,
        url: str,
        payload: Mapping[str, object],
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send HTTP POST request with a JSON body.

        Args:
            url: Target URL for the POST request
            payload: Request body data (will be JSON-encoded)
            headers: Extra request headers (keyword-only)

        Returns:
            HTTP response with status, body, headers and raw text

        Raises:
            TimeoutError: If request exceeds the timeout
            ValueError: If URL is malformed
            aiohttp.ClientError: For connection issues
        """
        session = self._ensure_session()
        self._logger.debug("Initiating POST request to %s", url)
        return await self._request(session.post(url, json=dict(payload), headers=dict(headers or {})), url)

    async def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send HTTP GET request.

        Args:
            url: Target URL
            headers: Extra request headers (keyword-only)

        Returns:
            HTTP response with status, body, headers and raw text

        Raises:
            TimeoutError: If request exceeds the timeout
            ValueError: If URL is malformed
            aiohttp.ClientError: For connection issues
        """
        session = self._ensure_session()
        self._logger.debug("Initiating GET request to %s", url)
        return await self._request(session.get(url, headers=dict(headers or {})), url)

    async def _request(
        self,
        request: AbstractAsyncContextManager[aiohttp.ClientResponse],
        url: str,
    ) -> Response:
        try:
            async with request as response:
                text = await response.text()

                # Parse response body as JSON, fallback to empty dict
                body: Mapping[str, object]
                try:
                    parsed: object = json.loads(text) if text else {}
                except ValueError:
                    parsed = {}
                body = parsed if isinstance(parsed, Mapping) else {"data": parsed}  # pyright: ignore[reportUnknownVariableType]

                return Response(
                    status=response.status,
                    body=body,  # pyright: ignore[reportUnknownArgumentType]
                    headers=dict(response.headers),
                    text=text,
                )
        except (TimeoutError, asyncio.TimeoutError):
            self._logger.warning("Request to %s timed out", url)
            raise
        except aiohttp.InvalidURL as exc:
            self._logger.error("Invalid URL: %s", url)
            raise ValueError(f"Malformed URL: {url}") from exc
        except aiohttp.ClientError as exc:
            self._logger.warning("Client error for %s: %s", url, exc)
            raise
