# -*- coding: utf-8 -*-
"""Async HTTP client with bounded retries, exponential backoff and rate-limit handling."""

from __future__ import annotations

import asyncio
import random
import uuid
import aiohttp
import structlog
from collections.abc import Awaitable
from typing import Any, Callable, Dict, Optional
from structlog.contextvars import bound_contextvars

from collection_sale_tracker.config import Settings
from collection_sale_tracker.exceptions import MarketplaceAPIError, RateLimitError


class AsyncHttpClient:
    """Async HTTP client for the marketplace API with retries and 429 handling.

    Injects Settings and optionally an aiohttp.ClientSession. If no session
    is provided, one is created and must be closed via aclose() or used
    as an async context manager.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Configuration (timeout, max_retries, backoff, api_key).
            session: Optional shared aiohttp session. If None, the client
                creates and owns a session (call aclose() when done).
            sleep: Awaitable sleep used between attempts (injected for tests).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.api.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _default_headers(self) -> Dict[str, str]:
        headers = {"accept": "*/*"}
        api_key = self._settings.api.api_key
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    def backoff_delay(self, attempt: int) -> float:
        """Delay after the given zero-based failed attempt: base, 2*base, 4*base... capped."""
        api = self._settings.api
        base = min(api.backoff_max_seconds, api.backoff_base_seconds * (2**attempt))
        if api.backoff_jitter_seconds > 0:
            base += random.uniform(0.0, api.backoff_jitter_seconds)
        return base

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Perform a GET request and return JSON. Retries on failure and on 429.

        Every attempt is bounded by the session timeout; no sleep follows the
        last attempt.

        Args:
            url: Full URL to request.
            params: Optional query parameters.

        Returns:
            Parsed JSON response (dict or list).

        Raises:
            RateLimitError: If 429 is returned on the last attempt.
            MarketplaceAPIError: If the request fails after all attempts.
        """
        params = params or {}
        request_id = uuid.uuid4().hex[:12]
        max_retries = self._settings.api.max_retries
        last_error: Optional[Exception] = None
        retry_after: Optional[float] = None

        with bound_contextvars(
            http_url=url,
            http_request_id=request_id,
            http_max_retries=max_retries,
        ):
            for attempt in range(max_retries):
                is_last = attempt == max_retries - 1
                retry_after = None
                with bound_contextvars(http_attempt=attempt + 1):
                    try:
                        session = await self._get_session()
                        async with session.get(
                            url, params=params, headers=self._default_headers()
                        ) as response:
                            if response.status == 429:
                                header = response.headers.get("Retry-After")
                                if header:
                                    try:
                                        retry_after = float(header)
                                    except ValueError:
                                        pass
                                last_error = None
                                self._logger.warning(
                                    "http_get_rate_limited",
                                    http_status_code=429,
                                    http_retry_after_seconds=retry_after,
                                )
                                if not is_last:
                                    if retry_after is not None and retry_after > 0:
                                        await self._sleep(retry_after)
                                    else:
                                        await self._sleep(self.backoff_delay(attempt))
                                continue

                            response.raise_for_status()
                            return await response.json()
                    except aiohttp.ClientResponseError as e:
                        last_error = e
                        self._logger.debug(
                            "http_get_retry",
                            error_type=type(e).__name__,
                            error_message=str(e),
                            http_status_code=getattr(e, "status", None),
                        )
                    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
                        # ValueError covers undecodable JSON bodies
                        last_error = e
                        self._logger.debug(
                            "http_get_retry",
                            error_type=type(e).__name__,
                            error_message=str(e),
                        )
                    if not is_last:
                        await self._sleep(self.backoff_delay(attempt))

            if last_error is None:
                self._logger.error(
                    "http_get_failed",
                    http_status_code=429,
                    http_attempts=max_retries,
                )
                raise RateLimitError(
                    f"GET rate limited after {max_retries} attempts: {url}",
                    url=url,
                    attempts=max_retries,
                    retry_after=retry_after,
                )

            status_code = (
                getattr(last_error, "status", None)
                if isinstance(last_error, aiohttp.ClientResponseError)
                else None
            )
            self._logger.error(
                "http_get_failed",
                http_status_code=status_code,
                http_attempts=max_retries,
                error_type=type(last_error).__name__,
                error_message=str(last_error),
            )
            raise MarketplaceAPIError(
                f"GET failed after {max_retries} attempts: {url}",
                url=url,
                status_code=status_code,
                attempts=max_retries,
                cause=last_error,
            ) from last_error
