from abc import ABC, abstractmethod
from typing import Any

from price_analyzer.domain.entities.search_offer import SearchOffer
from price_analyzer.domain.enums.search_type import SearchType

ChatMessage = dict[str, str]


class LLMGatewayError(Exception):
    """Base for failures talking to the LLM provider."""

    def __init__(self, message: str, *, status_code: int = 502, code: str = "LLM_ERROR") -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "code": self.code}


class LLMGateway(ABC):
    """Port for an OpenAI-compatible chat-completions service."""

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[ChatMessage],
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        api_key: str | None = None,
    ) -> dict[str, Any]:
        """Return the raw completion JSON."""
        ...

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """Return only the text of the first choice."""
        ...


class PriceSearchProvider(ABC):
    """Port for looking up current offers for a product."""

    @abstractmethod
    async def search(self, query: str, search_type: SearchType) -> list[SearchOffer]:
        ...
