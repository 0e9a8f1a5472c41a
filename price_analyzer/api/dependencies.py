"""
FastAPI dependency injection wiring.

Each dependency function returns a fully-constructed object with its
collaborators injected, keeping the route handlers thin.
"""
from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from price_analyzer.application.interfaces.product_repository import ProductRepository
from price_analyzer.application.interfaces.search_history_repository import (
    SearchHistoryRepository,
)
from price_analyzer.application.interfaces.service_gateways import LLMGateway, PriceSearchProvider
from price_analyzer.application.use_cases.check_llm_connection import CheckLLMConnection
from price_analyzer.application.use_cases.edit_product_from_command import EditProductFromCommand
from price_analyzer.application.use_cases.process_command import ProcessCommand
from price_analyzer.application.use_cases.proxy_chat_completion import ProxyChatCompletion
from price_analyzer.application.use_cases.search_product_price import SearchProductPrice
from price_analyzer.config import settings
from price_analyzer.infrastructure.database.connection import get_db_session
from price_analyzer.infrastructure.database.repositories.product_repository import (
    SqlAlchemyProductRepository,
)
from price_analyzer.infrastructure.database.repositories.search_history_repository import (
    SqlAlchemySearchHistoryRepository,
)
from price_analyzer.infrastructure.external_services.openai_client import OpenAIClient
from price_analyzer.infrastructure.external_services.price_search_provider import (
    WebPriceSearchProvider,
)
from price_analyzer.infrastructure.external_services.serpapi_client import SerpApiClient


# ---- Low-level dependencies ------------------------------------------------

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_db_session():
        yield session


def get_product_repo(session: AsyncSession = Depends(get_session)) -> ProductRepository:
    return SqlAlchemyProductRepository(session)


def get_search_history_repo(
    session: AsyncSession = Depends(get_session),
) -> SearchHistoryRepository:
    return SqlAlchemySearchHistoryRepository(session)


def get_llm_gateway() -> LLMGateway:
    return OpenAIClient()


def get_price_search_provider() -> PriceSearchProvider | None:
    if not settings.search_enabled:
        return None
    return WebPriceSearchProvider(SerpApiClient(), results_limit=settings.search_results_limit)


# ---- Use-case dependencies -------------------------------------------------

def get_search_price_use_case(
    product_repo: ProductRepository = Depends(get_product_repo),
    history_repo: SearchHistoryRepository = Depends(get_search_history_repo),
    llm: LLMGateway = Depends(get_llm_gateway),
    search_provider: PriceSearchProvider | None = Depends(get_price_search_provider),
) -> SearchProductPrice:
    return SearchProductPrice(
        product_repo,
        history_repo,
        llm,
        search_provider,
        competitor_prompt=settings.competitor_prompt,
        avito_prompt=settings.avito_prompt,
        max_tokens=settings.search_max_tokens,
        history_limit=settings.history_limit,
    )


def get_edit_product_use_case(
    product_repo: ProductRepository = Depends(get_product_repo),
    llm: LLMGateway = Depends(get_llm_gateway),
) -> EditProductFromCommand:
    return EditProductFromCommand(product_repo, llm, edit_prompt=settings.edit_prompt)


def get_process_command_use_case(
    search_price: SearchProductPrice = Depends(get_search_price_use_case),
    edit_product: EditProductFromCommand = Depends(get_edit_product_use_case),
) -> ProcessCommand:
    return ProcessCommand(search_price, edit_product)


def get_check_connection_use_case(
    llm: LLMGateway = Depends(get_llm_gateway),
) -> CheckLLMConnection:
    return CheckLLMConnection(llm)


def get_proxy_use_case(
    llm: LLMGateway = Depends(get_llm_gateway),
    search_provider: PriceSearchProvider | None = Depends(get_price_search_provider),
) -> ProxyChatCompletion:
    return ProxyChatCompletion(llm, search_provider, default_api_key=settings.openai_api_key)
