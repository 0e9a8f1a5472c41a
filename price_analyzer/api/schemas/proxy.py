from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from price_analyzer.config import settings
from price_analyzer.domain.enums.search_type import SearchType


class ChatMessageIn(BaseModel):
    role: str
    content: Any


class ProxyChatRequest(BaseModel):
    """Body of POST /api/openai. Field names follow the browser client (camelCase)."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str | None = Field(default=None, alias="apiKey")
    # Emptiness is reported as MISSING_MESSAGES, not a schema error.
    messages: list[ChatMessageIn] = Field(default_factory=list)
    model: str = settings.openai_model
    temperature: float = Field(default=settings.openai_temperature, ge=0, le=2)
    max_tokens: int = Field(default=settings.openai_max_tokens, alias="maxTokens", gt=0)
    search_query: str | None = Field(default=None, alias="searchQuery")
    search_type: SearchType = Field(default=SearchType.COMPETITOR, alias="searchType")


class ProxyErrorResponse(BaseModel):
    error: str
    code: str
    details: str | None = None
    openai_status: int | None = Field(default=None, alias="openaiStatus")
