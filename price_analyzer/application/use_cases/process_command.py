from dataclasses import dataclass

import structlog

from price_analyzer.application.use_cases.edit_product_from_command import (
    EditProductFromCommand,
    EditProductFromCommandInput,
    EditProductFromCommandOutput,
)
from price_analyzer.application.use_cases.search_product_price import (
    SearchProductPrice,
    SearchProductPriceInput,
    SearchProductPriceOutput,
)
from price_analyzer.domain.enums.command_intent import CommandIntent
from price_analyzer.domain.enums.search_type import SearchType
from price_analyzer.domain.services.command_router import parse_command

logger = structlog.get_logger(__name__)

HELP_MESSAGE = (
    "Доступные команды для работы с ценами:\n\n"
    "• «найди цену на [товар] у конкурентов» - поиск цен в интернет-магазинах\n"
    "• «найди б/у цену на [товар]» - поиск на Avito\n"
    "• «измени количество [товар] на [число]» - редактирование товара\n"
    "• «установи цену продажи [товар] [цена]» - изменение цены\n\n"
    "Система автоматически найдёт цены и обновит таблицу товаров."
)
MISSING_PRODUCT_MESSAGE = "Не удалось определить название товара из команды"

_SEARCH_TYPES = {
    CommandIntent.COMPETITOR_SEARCH: SearchType.COMPETITOR,
    CommandIntent.USED_PRICE_SEARCH: SearchType.AVITO,
}


@dataclass
class ProcessCommandInput:
    text: str


@dataclass
class ProcessCommandOutput:
    intent: CommandIntent
    message: str
    product_name: str | None = None
    is_error: bool = False
    search: SearchProductPriceOutput | None = None
    edit: EditProductFromCommandOutput | None = None


class ProcessCommand:
    """Use case: Route a free-text assistant command to a search or an edit."""

    def __init__(
        self,
        search_price: SearchProductPrice,
        edit_product: EditProductFromCommand,
    ) -> None:
        self._search_price = search_price
        self._edit_product = edit_product

    async def execute(self, input_data: ProcessCommandInput) -> ProcessCommandOutput:
        command = parse_command(input_data.text)
        logger.info(
            "assistant_command_received",
            intent=command.intent.value,
            product=command.product_name,
        )

        if command.intent in _SEARCH_TYPES:
            if not command.product_name:
                return ProcessCommandOutput(
                    intent=command.intent,
                    message=MISSING_PRODUCT_MESSAGE,
                    is_error=True,
                )

            result = await self._search_price.execute(
                SearchProductPriceInput(
                    product_name=command.product_name,
                    search_type=_SEARCH_TYPES[command.intent],
                )
            )
            return ProcessCommandOutput(
                intent=command.intent,
                message=result.message,
                product_name=command.product_name,
                search=result,
            )

        if command.intent == CommandIntent.EDIT:
            edit = await self._edit_product.execute(EditProductFromCommandInput(command=command))
            return ProcessCommandOutput(
                intent=command.intent,
                message=edit.message,
                product_name=command.product_name,
                edit=edit,
            )

        return ProcessCommandOutput(intent=command.intent, message=HELP_MESSAGE)
