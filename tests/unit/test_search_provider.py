"""Unit tests for the SerpAPI client and the search provider fallback."""
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from price_analyzer.domain.entities.search_offer import SearchOffer
from price_analyzer.domain.enums.search_type import SearchType
from price_analyzer.infrastructure.external_services.price_search_provider import (
    WebPriceSearchProvider,
)
from price_analyzer.infrastructure.external_services.serpapi_client import (
    SerpApiClient,
    SerpApiClientError,
)


def _serpapi(handler, api_key: str = "serp-key") -> SerpApiClient:  # type: ignore[no-untyped-def]
    return SerpApiClient(
        api_key=api_key,
        base_url="https://serpapi.example/search",
        results_limit=5,
        transport=httpx.MockTransport(handler),
    )


class TestSerpApiClient:
    @pytest.mark.asyncio
    async def test_competitor_search_uses_google_shopping(self) -> None:
        seen: dict = {}  # type: ignore[type-arg]

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(
                200,
                json={
                    "shopping_results": [
                        {
                            "title": "Apple iPhone 15 128GB",
                            "extracted_price": 84990.0,
                            "source": "DNS",
                            "link": "https://dns-shop.ru/p/1",
                        },
                        {"title": "iPhone 15", "source": "Ozon"},
                    ]
                },
            )

        offers = await _serpapi(handler).search("iPhone 15", SearchType.COMPETITOR)

        assert seen["engine"] == "google_shopping"
        assert seen["q"] == "iPhone 15"
        assert seen["gl"] == "ru"
        assert seen["hl"] == "ru"
        assert offers[0] == SearchOffer(
            title="Apple iPhone 15 128GB",
            price=84990,
            source="DNS",
            url="https://dns-shop.ru/p/1",
        )
        assert offers[1].price is None

    @pytest.mark.asyncio
    async def test_avito_search_restricts_site_and_reads_price_from_text(self) -> None:
        seen: dict = {}  # type: ignore[type-arg]

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(request.url.params)
            return httpx.Response(
                200,
                json={
                    "organic_results": [
                        {
                            "title": "iPhone 15 128 ГБ: 61 000 ₽ в Москве | Авито",
                            "link": "https://www.avito.ru/moskva/telefony/1",
                            "snippet": "Отличное состояние",
                        }
                    ]
                },
            )

        offers = await _serpapi(handler).search("iPhone 15", SearchType.AVITO)

        assert seen["engine"] == "google"
        assert seen["q"] == "iPhone 15 site:avito.ru"
        assert offers[0].price == 61000
        assert offers[0].source == "Avito"

    @pytest.mark.asyncio
    async def test_avito_null_rich_snippet_parts(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    "organic_results": [
                        {
                            "title": "MacBook Air M2 за 72 000 ₽",
                            "rich_snippet": {"top": None},
                        },
                        {
                            "title": "iPhone 15",
                            "snippet": "Цена: 58 500 ₽",
                            "rich_snippet": {"top": {"detected_extensions": None}},
                        },
                        {
                            "title": "iPad",
                            "rich_snippet": {"top": {"detected_extensions": {"price": 31000}}},
                        },
                    ]
                },
            )

        offers = await _serpapi(handler).search("MacBook Air", SearchType.AVITO)

        assert [offer.price for offer in offers] == [72000, 58500, 31000]

    @pytest.mark.asyncio
    async def test_http_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": "Invalid API key"})

        with pytest.raises(SerpApiClientError):
            await _serpapi(handler).search("iPhone 15", SearchType.COMPETITOR)

    @pytest.mark.asyncio
    async def test_error_field_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"error": "Google hasn't returned any results"})

        with pytest.raises(SerpApiClientError):
            await _serpapi(handler).search("iPhone 15", SearchType.COMPETITOR)

    @pytest.mark.asyncio
    async def test_requires_key(self) -> None:
        with pytest.raises(SerpApiClientError):
            await SerpApiClient(api_key="").search("iPhone 15", SearchType.COMPETITOR)


def _mock_serpapi(configured: bool = True) -> MagicMock:
    client = MagicMock(spec=SerpApiClient)
    client.is_configured = configured
    client.search = AsyncMock()
    return client


class TestWebPriceSearchProvider:
    @pytest.mark.asyncio
    async def test_uses_serpapi_results(self) -> None:
        offer = SearchOffer(title="iPhone 15", price=84990, source="DNS")
        serpapi = _mock_serpapi()
        serpapi.search.return_value = [offer]

        offers = await WebPriceSearchProvider(serpapi).search("iPhone 15", SearchType.COMPETITOR)

        assert offers == [offer]

    @pytest.mark.asyncio
    async def test_without_key_returns_synthetic_offers(self) -> None:
        serpapi = _mock_serpapi(configured=False)

        offers = await WebPriceSearchProvider(serpapi, results_limit=3).search(
            "iPhone 15", SearchType.COMPETITOR
        )

        serpapi.search.assert_not_called()
        assert len(offers) == 3
        assert all(offer.synthetic for offer in offers)

    @pytest.mark.asyncio
    async def test_serpapi_failure_falls_back(self) -> None:
        serpapi = _mock_serpapi()
        serpapi.search.side_effect = SerpApiClientError("boom")

        offers = await WebPriceSearchProvider(serpapi).search("iPhone 15", SearchType.AVITO)

        assert offers
        assert all(offer.synthetic and offer.source == "Avito" for offer in offers)

    @pytest.mark.asyncio
    async def test_empty_serpapi_results_fall_back(self) -> None:
        serpapi = _mock_serpapi()
        serpapi.search.return_value = []

        offers = await WebPriceSearchProvider(serpapi).search("iPhone 15", SearchType.COMPETITOR)

        assert offers and all(offer.synthetic for offer in offers)
