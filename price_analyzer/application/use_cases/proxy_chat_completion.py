import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from price_analyzer.application.interfaces.service_gateways import (
    ChatMessage,
    LLMGateway,
    PriceSearchProvider,
)
from price_analyzer.domain.enums.search_type import SearchType
from price_analyzer.domain.services.synthetic_offers import format_offers_for_prompt
from price_analyzer.logging_config import mask_secret

logger = structlog.get_logger(__name__)

SERVERLESS_VERSION = "2.0"


class ProxyRequestError(Exception):
    """A proxy request rejected before reaching the provider."""

    def __init__(self, code: str, message: str, status_code: int = 400) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass
class ProxyChatCompletionInput:
    messages: list[ChatMessage] = field(default_factory=list)
    api_key: str | None = None
    model: str = "gpt-4o"
    temperature: float = 0.1
    max_tokens: int = 3000
    search_query: str | None = None
    search_type: SearchType = SearchType.COMPETITOR


@dataclass
class ProxyChatCompletionOutput:
    body: dict[str, Any]


def is_structured(content: str) -> bool:
    """True when the completion text is itself a JSON document."""
    try:
        json.loads(content)
    except ValueError:
        return False
    return True


class ProxyChatCompletion:
    """
    Use case: Forward a chat-completion request on behalf of a client.

    Validates the key and messages, optionally injects web-search context,
    and returns the provider JSON enriched with `_metadata`. Provider errors
    propagate as LLMGatewayError subclasses.
    """

    def __init__(
        self,
        llm: LLMGateway,
        search_provider: PriceSearchProvider | None = None,
        *,
        default_api_key: str = "",
    ) -> None:
        self._llm = llm
        self._search_provider = search_provider
        self._default_api_key = default_api_key

    def _resolve_api_key(self, api_key: str | None) -> str:
        key = (api_key or self._default_api_key or "").strip()
        if not key:
            raise ProxyRequestError("MISSING_API_KEY", "OpenAI API key is required")
        if not key.startswith("sk-"):
            logger.warning("proxy_invalid_api_key_format", api_key=mask_secret(key, visible=10))
            raise ProxyRequestError("INVALID_API_KEY_FORMAT", 'API key must start with "sk-"')
        return key

    async def execute(self, input_data: ProxyChatCompletionInput) -> ProxyChatCompletionOutput:
        api_key = self._resolve_api_key(input_data.api_key)

        if not input_data.messages:
            raise ProxyRequestError(
                "MISSING_MESSAGES", "Messages array is required and should not be empty"
            )

        messages = list(input_data.messages)
        search_info: dict[str, Any] | None = None
        if input_data.search_query and self._search_provider is not None:
            offers = await self._search_provider.search(
                input_data.search_query, input_data.search_type
            )
            context = format_offers_for_prompt(
                offers, input_data.search_query, input_data.search_type
            )
            insert_at = 1 if messages[0].get("role") == "system" else 0
            messages.insert(insert_at, {"role": "system", "content": context})
            search_info = {
                "query": input_data.search_query,
                "type": input_data.search_type.value,
                "resultsCount": len(offers),
                "synthetic": any(offer.synthetic for offer in offers),
            }

        logger.info(
            "proxy_request_validated",
            model=input_data.model,
            temperature=input_data.temperature,
            max_tokens=input_data.max_tokens,
            messages_count=len(messages),
            api_key=mask_secret(api_key),
            search=search_info is not None,
        )

        response = await self._llm.chat_completion(
            messages,
            model=input_data.model,
            temperature=input_data.temperature,
            max_tokens=input_data.max_tokens,
            api_key=api_key,
        )

        choices = response.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content") or ""
        usage = response.get("usage") or {}

        metadata: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "processingTime": "completed",
            "isStructured": is_structured(content),
            "serverlessVersion": SERVERLESS_VERSION,
            "model": input_data.model,
            "tokensUsed": usage.get("total_tokens") or 0,
        }
        if search_info is not None:
            metadata["search"] = search_info

        logger.info(
            "proxy_request_completed",
            model=input_data.model,
            tokens_used=metadata["tokensUsed"],
            is_structured=metadata["isStructured"],
        )
        return ProxyChatCompletionOutput(body={**response, "_metadata": metadata})
