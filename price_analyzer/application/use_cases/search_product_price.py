from dataclasses import dataclass, field

import structlog

from price_analyzer.application.interfaces.product_repository import ProductRepository
from price_analyzer.application.interfaces.search_history_repository import (
    SearchHistoryEntry,
    SearchHistoryRepository,
)
from price_analyzer.application.interfaces.service_gateways import (
    ChatMessage,
    LLMGateway,
    PriceSearchProvider,
)
from price_analyzer.domain.entities.search_offer import SearchOffer
from price_analyzer.domain.enums.search_type import SearchType
from price_analyzer.domain.services.price_extractor import extract_min_price, match_product
from price_analyzer.domain.services.synthetic_offers import format_offers_for_prompt, format_price

logger = structlog.get_logger(__name__)

ANSWER_FORMAT_INSTRUCTION = (
    "В конце ответа обязательно укажи отдельной строкой: "
    '"Минимальная цена: N ₽", где N это найденная минимальная цена в рублях.'
)


@dataclass
class SearchProductPriceInput:
    product_name: str
    search_type: SearchType
    # Pins the update to this product instead of matching by name.
    product_id: str | None = None


@dataclass
class SearchProductPriceOutput:
    product_name: str
    search_type: SearchType
    answer: str
    message: str
    min_price: int | None = None
    matched_product_id: str | None = None
    product_updated: bool = False
    history_entry_id: str | None = None
    offers: list[SearchOffer] = field(default_factory=list)


def build_user_request(product_name: str, search_type: SearchType) -> str:
    if search_type == SearchType.AVITO:
        return f'Найди минимальную б/у цену на товар "{product_name}" на Avito'
    return f'Найди минимальную цену на товар "{product_name}" среди конкурентов'


class SearchProductPrice:
    """
    Use case: Ask the LLM for the lowest competitor (new) or Avito (used) price
    of a product, optionally grounded in web search results.

    When a price can be extracted and a stored product matches the name, the
    matching competitor price field is overwritten. Every search is recorded
    in the history, which is pruned to the newest `history_limit` entries.
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        history_repo: SearchHistoryRepository,
        llm: LLMGateway,
        search_provider: PriceSearchProvider | None = None,
        *,
        competitor_prompt: str,
        avito_prompt: str,
        max_tokens: int = 2000,
        history_limit: int = 100,
    ) -> None:
        self._product_repo = product_repo
        self._history_repo = history_repo
        self._llm = llm
        self._search_provider = search_provider
        self._prompts = {
            SearchType.COMPETITOR: competitor_prompt,
            SearchType.AVITO: avito_prompt,
        }
        self._max_tokens = max_tokens
        self._history_limit = history_limit

    async def execute(self, input_data: SearchProductPriceInput) -> SearchProductPriceOutput:
        product_name = input_data.product_name.strip()
        search_type = input_data.search_type

        offers: list[SearchOffer] = []
        if self._search_provider is not None:
            offers = await self._search_provider.search(product_name, search_type)

        messages = self._build_messages(product_name, search_type, offers)
        answer = await self._llm.complete(messages, max_tokens=self._max_tokens)

        min_price = extract_min_price(answer)
        if input_data.product_id is not None:
            product = await self._product_repo.get_by_id(input_data.product_id)
        else:
            product = match_product(await self._product_repo.list_all(), product_name)

        updated = False
        if min_price is not None and product is not None:
            product.apply_competitor_price(search_type, min_price)
            await self._product_repo.save(product)
            updated = True

        entry = SearchHistoryEntry(
            search_type=search_type,
            product_name=product_name,
            result=answer,
            min_price=min_price,
            matched_product_id=product.id if product else None,
        )
        await self._history_repo.save(entry)
        await self._history_repo.prune(self._history_limit)

        logger.info(
            "price_search_completed",
            product=product_name,
            search_type=search_type.value,
            min_price=min_price,
            matched_product_id=product.id if product else None,
            product_updated=updated,
            offers=len(offers),
        )

        return SearchProductPriceOutput(
            product_name=product_name,
            search_type=search_type,
            answer=answer,
            message=self._build_message(answer, search_type, min_price, product_name, updated),
            min_price=min_price,
            matched_product_id=product.id if product else None,
            product_updated=updated,
            history_entry_id=entry.id,
            offers=offers,
        )

    def _build_messages(
        self,
        product_name: str,
        search_type: SearchType,
        offers: list[SearchOffer],
    ) -> list[ChatMessage]:
        messages: list[ChatMessage] = [
            {
                "role": "system",
                "content": f"{self._prompts[search_type]}\n\n{ANSWER_FORMAT_INSTRUCTION}",
            }
        ]
        if offers:
            messages.append(
                {
                    "role": "system",
                    "content": format_offers_for_prompt(offers, product_name, search_type),
                }
            )
        messages.append({"role": "user", "content": build_user_request(product_name, search_type)})
        return messages

    @staticmethod
    def _build_message(
        answer: str,
        search_type: SearchType,
        min_price: int | None,
        product_name: str,
        updated: bool,
    ) -> str:
        if min_price is None or not updated:
            return answer

        if search_type == SearchType.AVITO:
            headline = f"Найдена минимальная б/у цена на Avito: {format_price(min_price)} ₽"
        else:
            headline = f"Найдена минимальная цена у конкурентов: {format_price(min_price)} ₽"
        return f"{headline}. Товар «{product_name}» обновлён.\n\n{answer}"
