import json
from dataclasses import dataclass
from decimal import Decimal

import structlog

from price_analyzer.application.interfaces.product_repository import ProductRepository
from price_analyzer.application.interfaces.service_gateways import ChatMessage, LLMGateway
from price_analyzer.domain.entities.product import Product
from price_analyzer.domain.services.command_router import ParsedCommand
from price_analyzer.domain.services.price_extractor import match_product
from price_analyzer.domain.services.synthetic_offers import format_price

logger = structlog.get_logger(__name__)

_FIELD_LABELS = {
    "quantity": "количество изменено на",
    "sale_price": "цена продажи изменена на",
}


@dataclass
class EditProductFromCommandInput:
    command: ParsedCommand


@dataclass
class EditProductFromCommandOutput:
    message: str
    product_id: str | None = None
    product_updated: bool = False
    used_llm: bool = False


def _format_amount(amount: Decimal) -> str:
    # Kopecks are shown only when present: "99 990", "1 999,50".
    whole, _, kopecks = f"{amount:.2f}".partition(".")
    text = format_price(int(whole))
    return text if kopecks == "00" else f"{text},{kopecks}"


def products_for_prompt(products: list[Product]) -> str:
    return json.dumps(
        [
            {
                "name": product.name,
                "quantity": product.quantity,
                "purchasePrice": str(product.purchase_price),
                "salePrice": str(product.sale_price),
            }
            for product in products
        ],
        ensure_ascii=False,
    )


class EditProductFromCommand:
    """
    Use case: Apply an edit command ("измени количество X на 5").

    A fully parsed command that names a stored product is applied directly.
    Anything else goes to the LLM together with the product list and the
    answer is returned as-is.
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        llm: LLMGateway,
        *,
        edit_prompt: str,
    ) -> None:
        self._product_repo = product_repo
        self._llm = llm
        self._edit_prompt = edit_prompt

    async def execute(
        self, input_data: EditProductFromCommandInput
    ) -> EditProductFromCommandOutput:
        command = input_data.command
        products = await self._product_repo.list_all()

        if command.is_direct_edit:
            product = match_product(products, command.product_name)
            if product is not None:
                product.update_fields(**{str(command.field): command.value})
                await self._product_repo.save(product)

                logger.info(
                    "product_edited_from_command",
                    product_id=product.id,
                    field=command.field,
                    value=str(command.value),
                )
                return EditProductFromCommandOutput(
                    message=self._describe_edit(product, command),
                    product_id=product.id,
                    product_updated=True,
                )

        messages: list[ChatMessage] = [
            {"role": "system", "content": self._edit_prompt},
            {
                "role": "user",
                "content": f'Команда: "{command.raw}"\nСписок товаров: {products_for_prompt(products)}',
            },
        ]
        answer = await self._llm.complete(messages)

        logger.info("edit_command_delegated_to_llm", product=command.product_name)
        return EditProductFromCommandOutput(message=answer, used_llm=True)

    @staticmethod
    def _describe_edit(product: Product, command: ParsedCommand) -> str:
        label = _FIELD_LABELS.get(command.field or "", command.field)
        if command.field == "sale_price" and command.value is not None:
            value = f"{_format_amount(Decimal(command.value))} ₽"
        else:
            value = str(command.value)
        return f"Товар «{product.name}»: {label} {value}."
