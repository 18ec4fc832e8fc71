"""HTTP utilities providing retry/backoff semantics."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

logger = logging.getLogger(__name__)


class RetryConfig:
    def __init__(self, *, attempts: int = 3, backoff_seconds: float = 1.0) -> None:
        if attempts < 1:
            raise ValueError("At least one attempt is required.")
        self.attempts = attempts
        self.backoff_seconds = backoff_seconds


def _is_retryable(exc: httpx.HTTPError) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.TransportError)


async def request_with_retry(
    func: Callable[..., Awaitable[httpx.Response]],
    *args,
    retry_config: RetryConfig | None = None,
    **kwargs,
) -> httpx.Response:
    """Call ``func`` until it returns a 2xx response.

    Transport errors and 5xx answers are retried with linear backoff; 4xx
    answers are raised immediately as ``httpx.HTTPStatusError``.
    """
    config = retry_config or RetryConfig()
    attempt = 0

    while True:
        try:
            response = await func(*args, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPError as exc:
            attempt += 1
            if not _is_retryable(exc) or attempt >= config.attempts:
                raise
            logger.warning(
                "Request failed (attempt %s/%s): %s", attempt, config.attempts, exc
            )
            await asyncio.sleep(config.backoff_seconds * attempt)


__all__ = ["RetryConfig", "request_with_retry"]
