"""
JSON-over-HTTP GET with retry.

One request at a time, each on its own connection unless the caller passes a
client. 429 and 5xx responses are retried after a fixed backoff; any other
non-200 status fails immediately.
"""

import asyncio
import json
import logging
from typing import Any

import httpx

from cardtracker.config import (
    MAX_RETRIES,
    RATE_LIMIT_BACKOFF,
    SERVER_ERROR_BACKOFF,
    settings,
)
from cardtracker.models.failure import (
    HttpStatusError,
    MalformedResponseError,
    RetryExhaustedError,
    TransportError,
)

logger = logging.getLogger(__name__)

# Characters of an undecodable body kept on MalformedResponseError
EXCERPT_LENGTH = 200


def is_retryable(status_code: int) -> bool:
    """True for rate-limit and server-error statuses."""
    return status_code == 429 or status_code >= 500


def retry_delay(status_code: int) -> float:
    """Backoff in seconds before retrying a retryable status."""
    return RATE_LIMIT_BACKOFF if status_code == 429 else SERVER_ERROR_BACKOFF


def new_client() -> httpx.AsyncClient:
    """AsyncClient with the refresher's User-Agent and timeout."""
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.request_timeout,
    )


async def _get_once(client: httpx.AsyncClient, url: str) -> tuple[int, bytes]:
    """
    Issue one GET.

    The body is only read for 200 responses; error bodies are discarded.
    """
    async with client.stream("GET", url) as response:
        if response.status_code != 200:
            return response.status_code, b""
        body = await response.aread()
        return response.status_code, body


async def fetch_json(
    url: str,
    retries: int = MAX_RETRIES,
    client: httpx.AsyncClient | None = None,
) -> Any:
    """
    GET a URL and return its parsed JSON body.

    Args:
        url: Absolute URL to fetch
        retries: Retries remaining for 429/5xx responses
        client: Optional httpx client; a fresh one is used per call otherwise

    Returns:
        Decoded JSON value

    Raises:
        TransportError: If the request fails below HTTP
        HttpStatusError: On a non-200, non-retryable status
        RetryExhaustedError: If 429/5xx persists after all retries
        MalformedResponseError: If a 200 body is not JSON
    """
    while True:
        try:
            if client is None:
                async with new_client() as fresh:
                    status, body = await _get_once(fresh, url)
            else:
                status, body = await _get_once(client, url)
        except httpx.RequestError as e:
            raise TransportError(url, str(e) or type(e).__name__) from e

        if is_retryable(status):
            if retries <= 0:
                raise RetryExhaustedError(url, status)
            wait = retry_delay(status)
            logger.info("HTTP %d, retrying in %.0fs (%d left)", status, wait, retries - 1)
            await asyncio.sleep(wait)
            retries -= 1
            continue

        if status != 200:
            raise HttpStatusError(url, status)

        try:
            return json.loads(body)
        except ValueError as e:
            excerpt = body[:EXCERPT_LENGTH].decode("utf-8", errors="replace")
            raise MalformedResponseError(url, excerpt, str(e)) from e
