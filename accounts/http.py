"""JSON-over-HTTP helper for account type implementations.

Wraps an aiohttp session and maps transport and HTTP failures onto the
accounts.errors kinds, so every provider reports the same errors for the
same situations. No retries happen here; retry policy belongs to the caller.
"""

from __future__ import annotations

import asyncio
import codecs
import json
from typing import TYPE_CHECKING, Any

import aiohttp
from loguru import logger

from accounts.errors import (
    InvalidCredentialsError,
    TimeoutError,
    UpstreamProtocolError,
    UpstreamUnavailableError,
)

if TYPE_CHECKING:
    from accounts.config import Settings

_AUTH_STATUSES = {401, 403}
_UNAVAILABLE_STATUSES = {429}


class JsonHttpClient:
    """Async context manager owning one aiohttp session for one account fetch."""

    def __init__(self, settings: Settings, account_code: str | None = None) -> None:
        self._timeout = aiohttp.ClientTimeout(total=settings.request_timeout_seconds)
        self._user_agent = settings.http_user_agent
        self._account_code = account_code
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> JsonHttpClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={
                    "User-Agent": self._user_agent,
                    "Accept": "application/json",
                },
            )
        return self._session

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        return await self.request("GET", url, **kwargs)

    async def post_json(self, url: str, **kwargs: Any) -> Any:
        return await self.request("POST", url, **kwargs)

    async def request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Make a request and decode the JSON body.

        Raises InvalidCredentialsError on 401/403, UpstreamUnavailableError on
        connection failures, 429 and 5xx, UpstreamProtocolError on other 4xx
        statuses, non-HTTP replies or a body that is not JSON, and
        TimeoutError on timeouts.
        """
        session = await self._ensure_session()
        code = self._account_code

        try:
            async with session.request(method, url, **kwargs) as resp:
                raw = await resp.read()
                status = resp.status
                charset = resp.charset or "utf-8"
        except (asyncio.TimeoutError, aiohttp.ServerTimeoutError) as exc:
            raise TimeoutError(f"{method} {url} timed out", code=code) from exc
        except aiohttp.ClientConnectionError as exc:
            raise UpstreamUnavailableError(
                f"{method} {url} failed: {exc}", code=code
            ) from exc
        except aiohttp.ClientError as exc:
            # Bad status line, broken payload, redirect loops, invalid URLs
            raise UpstreamProtocolError(
                f"{method} {url} returned an unusable response: {exc}", code=code
            ) from exc

        try:
            codecs.lookup(charset)
        except LookupError:
            charset = "utf-8"

        preview = raw[:200].decode(charset, errors="replace") if raw else ""
        if status in _AUTH_STATUSES:
            raise InvalidCredentialsError(
                f"{method} {url} rejected credentials ({status}): {preview}", code=code
            )
        if status in _UNAVAILABLE_STATUSES or status >= 500:
            raise UpstreamUnavailableError(
                f"{method} {url} unavailable ({status}): {preview}", code=code
            )
        if status >= 400:
            raise UpstreamProtocolError(
                f"{method} {url} error ({status}): {preview}", code=code
            )

        if not raw:
            raise UpstreamProtocolError(f"{method} {url} returned an empty body", code=code)
        try:
            data = json.loads(raw.decode(charset))
        except ValueError as exc:
            # UnicodeDecodeError included
            raise UpstreamProtocolError(
                f"{method} {url} returned invalid JSON: {preview}", code=code
            ) from exc

        logger.debug(f"{method} {url} -> {status}")
        return data

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
