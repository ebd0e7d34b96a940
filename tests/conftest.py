import asyncio
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from cardtracker.config import settings

Responder = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    """Replace asyncio.sleep so pacing waits are recorded instead of taken."""
    sleep = AsyncMock(return_value=None)
    monkeypatch.setattr(asyncio, "sleep", sleep)
    return sleep


@pytest.fixture
def gateway_host() -> str:
    return httpx.URL(settings.gateway_url).host


@pytest.fixture
def gateway_responder() -> Callable[[dict[str, Any]], Responder]:
    """
    Build a respx side effect serving gateway requests by relayed target URL.

    Values are httpx.Response objects, JSON-able payloads (served as 200),
    or exceptions to raise. Unknown targets get a 404.
    """

    def build(routes: dict[str, Any]) -> Responder:
        def respond(request: httpx.Request) -> httpx.Response:
            target = request.url.params["url"]
            if target not in routes:
                return httpx.Response(404)
            value = routes[target]
            if isinstance(value, Exception):
                raise value
            if isinstance(value, httpx.Response):
                return value
            return httpx.Response(200, json=value)

        return respond

    return build


@pytest.fixture
def collection_item() -> Callable[..., dict[str, Any]]:
    """Factory for one collection search item."""

    def build(name: str | None, quantity: int | None = 1, **card: Any) -> dict[str, Any]:
        item: dict[str, Any] = {"card": {"name": name, **card}}
        if quantity is not None:
            item["quantity"] = quantity
        return item

    return build


@pytest.fixture
def lightning_bolt_deck() -> dict[str, Any]:
    """Deck document with four foil Alpha Lightning Bolts in the mainboard."""
    return {
        "name": "Burn",
        "mainboard": {
            "Lightning Bolt": {
                "quantity": 4,
                "card": {
                    "name": "Lightning Bolt",
                    "set": "lea",
                    "set_name": "Limited Edition Alpha",
                    "cn": "1",
                    "finishes": ["foil"],
                    "scryfall_id": "bolt-lea-1",
                },
            },
        },
        "sideboard": {},
    }
