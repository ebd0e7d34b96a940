"""Tests for walking config sources into the aggregate."""

import logging
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, call, patch

import httpx
import pytest
import respx

from cardtracker.config import SOURCE_DELAY
from cardtracker.models.card import ParsedReference, RawCardEntry, SourceKind
from cardtracker.models.failure import HttpStatusError
from cardtracker.models.source import TrackerConfig
from cardtracker.services.collector import collect_sources
from cardtracker.services.moxfield import collection_page_url, deck_url


def config(*sources: dict[str, Any], phones: dict[str, str] | None = None) -> TrackerConfig:
    return TrackerConfig.model_validate(
        {"sources": list(sources), "phoneSecretNames": phones or {}}
    )


class TestCollectSources:
    @pytest.mark.asyncio
    async def test_unparseable_url_is_skipped(
        self, no_sleep: AsyncMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        cfg = config(
            {
                "owner": "Val",
                "urls": [
                    "https://moxfield.com/users/val",
                    "https://moxfield.com/decks/d2",
                ],
            }
        )
        read = AsyncMock(return_value=[RawCardEntry(name="Opt", qty=2)])

        with (
            patch("cardtracker.services.collector.read_reference", read),
            caplog.at_level(logging.ERROR),
        ):
            agg = await collect_sources(cfg, environ={})

        read.assert_awaited_once_with(
            ParsedReference(kind=SourceKind.DECK, id="d2"), client=None
        )
        assert "Could not parse URL: https://moxfield.com/users/val" in caplog.text
        assert agg.cards["opt"].owners["Val"][0].qty == 2

    @pytest.mark.asyncio
    async def test_fetch_failure_does_not_stop_other_urls(
        self, no_sleep: AsyncMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        cfg = config(
            {
                "owner": "Val",
                "urls": [
                    "https://moxfield.com/decks/broken",
                    "https://moxfield.com/collection/c1",
                ],
            },
            {"owner": "Ana", "url": "https://moxfield.com/decks/d3"},
        )
        read = AsyncMock(
            side_effect=[
                HttpStatusError("https://gw/?url=x", 404),
                [RawCardEntry(name="Opt", qty=1)],
                [RawCardEntry(name="Shock", qty=3)],
            ]
        )

        with (
            patch("cardtracker.services.collector.read_reference", read),
            caplog.at_level(logging.ERROR),
        ):
            agg = await collect_sources(cfg, environ={})

        assert read.await_count == 3
        assert "Failed to fetch deck broken" in caplog.text
        assert agg.owners["Val"].card_count == 1
        assert agg.owners["Ana"].card_count == 3
        assert set(agg.cards) == {"opt", "shock"}

    @pytest.mark.asyncio
    async def test_pauses_after_each_fetched_url(self, no_sleep: AsyncMock) -> None:
        cfg = config(
            {
                "owner": "Val",
                "urls": [
                    "https://moxfield.com/decks/d1",
                    "not a url",
                    "https://moxfield.com/decks/d2",
                ],
            }
        )
        read = AsyncMock(return_value=[])

        with patch("cardtracker.services.collector.read_reference", read):
            await collect_sources(cfg, environ={})

        assert no_sleep.await_args_list == [call(SOURCE_DELAY), call(SOURCE_DELAY)]

    @pytest.mark.asyncio
    async def test_owner_registered_even_if_every_url_fails(self, no_sleep: AsyncMock) -> None:
        cfg = config({"owner": "Val", "urls": ["garbage"]})

        agg = await collect_sources(cfg, environ={})

        assert agg.owners["Val"].card_count == 0
        assert agg.cards == {}

    @pytest.mark.asyncio
    async def test_phone_from_named_secret(self, no_sleep: AsyncMock) -> None:
        cfg = config(
            {"owner": "Val", "urls": []},
            {"owner": "Ana", "urls": []},
            {"owner": "Bo", "urls": []},
            phones={"Val": "PHONE_VAL", "Ana": "PHONE_ANA"},
        )

        agg = await collect_sources(cfg, environ={"PHONE_VAL": "+54 9 11 1234"})

        assert agg.owners["Val"].phone == "+54 9 11 1234"
        assert agg.owners["Ana"].phone == ""
        assert agg.owners["Bo"].phone == ""

    @pytest.mark.asyncio
    async def test_cardcount_uses_raw_entry_count(self, no_sleep: AsyncMock) -> None:
        cfg = config(
            {
                "owner": "Val",
                "urls": ["https://moxfield.com/decks/d1", "https://moxfield.com/decks/d2"],
            }
        )
        read = AsyncMock(
            side_effect=[
                [RawCardEntry(name="Opt", qty=4), RawCardEntry(name="Opt", qty=4)],
                [RawCardEntry(name="OPT", qty=1)],
            ]
        )

        with patch("cardtracker.services.collector.read_reference", read):
            agg = await collect_sources(cfg, environ={})

        assert agg.owners["Val"].card_count == 3
        assert [p.qty for p in agg.cards["opt"].owners["Val"]] == [9]


class TestCollectSourcesOverHttp:
    @pytest.mark.asyncio
    @respx.mock
    async def test_single_deck_scenario(
        self,
        no_sleep: AsyncMock,
        gateway_host: str,
        gateway_responder: Callable[[dict[str, Any]], Any],
        lightning_bolt_deck: dict[str, Any],
    ) -> None:
        respx.get(host=gateway_host).mock(
            side_effect=gateway_responder({deck_url("burn1"): lightning_bolt_deck})
        )
        cfg = config({"owner": "Val", "url": "https://moxfield.com/decks/burn1"})

        agg = await collect_sources(cfg, environ={})

        printings = agg.cards["lightning bolt"].owners["Val"]
        assert len(printings) == 1
        bolt = printings[0]
        assert bolt.qty == 4
        assert bolt.set_code == "lea"
        assert bolt.is_foil is True
        assert bolt.price is None
        assert agg.owners["Val"].card_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_deck_and_collection_for_two_owners(
        self,
        no_sleep: AsyncMock,
        gateway_host: str,
        gateway_responder: Callable[[dict[str, Any]], Any],
        lightning_bolt_deck: dict[str, Any],
        collection_item: Callable[..., dict[str, Any]],
    ) -> None:
        respx.get(host=gateway_host).mock(
            side_effect=gateway_responder(
                {
                    deck_url("burn1"): lightning_bolt_deck,
                    collection_page_url("c1", 1): {
                        "totalPages": 1,
                        "data": [
                            collection_item("Lightning Bolt", 2, set="lea", finishes=["foil"]),
                            collection_item("Lightning Bolt", 1, set="m10"),
                        ],
                    },
                    collection_page_url("down", 1): httpx.Response(503),
                }
            )
        )
        cfg = config(
            {"owner": "Val", "urls": ["https://moxfield.com/decks/burn1"]},
            {
                "owner": "Ana",
                "urls": [
                    "https://moxfield.com/collection/down",
                    "https://moxfield.com/collection/c1",
                ],
            },
        )

        agg = await collect_sources(cfg, environ={})

        owners = agg.cards["lightning bolt"].owners
        assert [(p.set_code, p.is_foil, p.qty) for p in owners["Val"]] == [("lea", True, 4)]
        assert [(p.set_code, p.is_foil, p.qty) for p in owners["Ana"]] == [
            ("lea", True, 2),
            ("m10", False, 1),
        ]
        assert agg.owners["Ana"].card_count == 2
