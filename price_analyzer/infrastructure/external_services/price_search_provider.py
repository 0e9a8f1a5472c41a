import structlog

from price_analyzer.application.interfaces.service_gateways import PriceSearchProvider
from price_analyzer.domain.entities.search_offer import SearchOffer
from price_analyzer.domain.enums.search_type import SearchType
from price_analyzer.domain.services.synthetic_offers import generate_synthetic_offers
from price_analyzer.infrastructure.external_services.serpapi_client import (
    SerpApiClient,
    SerpApiClientError,
)

logger = structlog.get_logger(__name__)


class WebPriceSearchProvider(PriceSearchProvider):
    """
    SerpAPI when a key is configured, synthetic offers otherwise.

    A failing or empty SerpAPI search also falls back to synthetic offers.
    """

    def __init__(self, serpapi: SerpApiClient, results_limit: int = 5) -> None:
        self._serpapi = serpapi
        self._limit = results_limit

    async def search(self, query: str, search_type: SearchType) -> list[SearchOffer]:
        if self._serpapi.is_configured:
            try:
                offers = await self._serpapi.search(query, search_type)
            except SerpApiClientError as exc:
                logger.warning(
                    "serpapi_failed_using_synthetic_offers",
                    query=query,
                    search_type=search_type.value,
                    error=str(exc),
                )
            else:
                if offers:
                    return offers
                logger.info("serpapi_no_results_using_synthetic_offers", query=query)

        return generate_synthetic_offers(query, search_type, count=self._limit)
