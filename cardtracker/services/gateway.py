"""
Gateway (CORS relay) adapter.

Moxfield serves no cross-origin headers, so every Moxfield request is sent to
the relay as GET {gateway}?url=<percent-encoded target>. Scryfall is called
directly.
"""

from typing import Any
from urllib.parse import quote

import httpx

from cardtracker.config import settings
from cardtracker.services.http_client import fetch_json

# Characters encodeURIComponent leaves unescaped
URI_COMPONENT_SAFE = "-_.!~*'()"


def build_gateway_url(target_url: str, gateway_url: str | None = None) -> str:
    """Relay URL that forwards to `target_url`."""
    if gateway_url is None:
        gateway_url = settings.gateway_url
    return f"{gateway_url}?url={quote(target_url, safe=URI_COMPONENT_SAFE)}"


async def fetch_proxied(
    target_url: str,
    client: httpx.AsyncClient | None = None,
    gateway_url: str | None = None,
) -> Any:
    """Fetch a JSON document through the gateway."""
    return await fetch_json(build_gateway_url(target_url, gateway_url), client=client)
