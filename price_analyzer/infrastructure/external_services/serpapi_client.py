"""HTTP client for SerpAPI web and shopping search."""

from typing import Any

import httpx
import structlog

from price_analyzer.config import settings
from price_analyzer.domain.entities.search_offer import SearchOffer
from price_analyzer.domain.enums.search_type import SearchType
from price_analyzer.domain.services.price_extractor import extract_min_price

logger = structlog.get_logger(__name__)


class SerpApiClientError(Exception):
    pass


def _to_price(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(round(float(value)))
    except (TypeError, ValueError):
        return None


def _shopping_offers(data: dict[str, Any], limit: int) -> list[SearchOffer]:
    offers = []
    for item in data.get("shopping_results", [])[:limit]:
        offers.append(
            SearchOffer(
                title=item.get("title", ""),
                price=_to_price(item.get("extracted_price")),
                source=item.get("source", ""),
                url=item.get("link") or item.get("product_link") or "",
                snippet=item.get("delivery") or "",
            )
        )
    return offers


def _avito_offers(data: dict[str, Any], limit: int) -> list[SearchOffer]:
    offers = []
    for item in data.get("organic_results", [])[:limit]:
        title = item.get("title", "")
        snippet = item.get("snippet", "")
        # Organic results carry no structured price; read it from the text.
        rich_top = (item.get("rich_snippet") or {}).get("top") or {}
        extensions = rich_top.get("detected_extensions") or {}
        price = _to_price(extensions.get("price")) or extract_min_price(f"{title}\n{snippet}")
        offers.append(
            SearchOffer(
                title=title,
                price=price,
                source="Avito",
                url=item.get("link", ""),
                snippet=snippet,
            )
        )
    return offers


class SerpApiClient:
    """Thin HTTP wrapper around the SerpAPI search endpoint."""

    def __init__(
        self,
        api_key: str = settings.serpapi_api_key,
        base_url: str = settings.serpapi_base_url,
        timeout: float = settings.serpapi_timeout_s,
        results_limit: int = settings.search_results_limit,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout
        self._limit = results_limit
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _params(self, query: str, search_type: SearchType) -> dict[str, Any]:
        if search_type == SearchType.AVITO:
            return {
                "engine": "google",
                "q": f"{query} site:avito.ru",
                "gl": "ru",
                "hl": "ru",
                "num": self._limit,
                "api_key": self._api_key,
            }
        return {
            "engine": "google_shopping",
            "q": query,
            "gl": "ru",
            "hl": "ru",
            "num": self._limit,
            "api_key": self._api_key,
        }

    async def search(self, query: str, search_type: SearchType) -> list[SearchOffer]:
        if not self._api_key:
            raise SerpApiClientError("SerpAPI key is not configured")

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.get(self._base_url, params=self._params(query, search_type))
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as exc:
                logger.error(
                    "serpapi_request_failed",
                    status_code=exc.response.status_code,
                    response=exc.response.text[:500],
                )
                raise SerpApiClientError(
                    f"SerpAPI returned {exc.response.status_code}"
                ) from exc
            except httpx.RequestError as exc:
                logger.error("serpapi_connection_failed", error=str(exc))
                raise SerpApiClientError(f"Failed to reach SerpAPI: {exc}") from exc
            except ValueError as exc:
                raise SerpApiClientError("SerpAPI returned invalid JSON") from exc

        if "error" in data:
            raise SerpApiClientError(f"SerpAPI error: {data['error']}")

        if search_type == SearchType.AVITO:
            offers = _avito_offers(data, self._limit)
        else:
            offers = _shopping_offers(data, self._limit)

        logger.info(
            "serpapi_search_completed",
            query=query,
            search_type=search_type.value,
            results=len(offers),
        )
        return offers
