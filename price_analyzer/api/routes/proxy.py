from typing import Any

from fastapi import APIRouter, Depends

from price_analyzer.api.dependencies import get_proxy_use_case
from price_analyzer.api.schemas.proxy import ProxyChatRequest, ProxyErrorResponse
from price_analyzer.application.use_cases.proxy_chat_completion import (
    ProxyChatCompletion,
    ProxyChatCompletionInput,
)

router = APIRouter(prefix="/api", tags=["proxy"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ProxyErrorResponse} for code in (400, 401, 429, 500, 502, 503, 504)
}


def to_use_case_input(body: ProxyChatRequest) -> ProxyChatCompletionInput:
    return ProxyChatCompletionInput(
        messages=[message.model_dump() for message in body.messages],
        api_key=body.api_key,
        model=body.model,
        temperature=body.temperature,
        max_tokens=body.max_tokens,
        search_query=body.search_query,
        search_type=body.search_type,
    )


@router.post("/openai", responses=_ERROR_RESPONSES)
async def openai_proxy(
    body: ProxyChatRequest,
    use_case: ProxyChatCompletion = Depends(get_proxy_use_case),
) -> dict[str, Any]:
    """
    Forward a chat-completion request to the LLM provider.

    Returns the provider JSON plus `_metadata`. Failures come back as
    `{error, code, details?}` with the provider status preserved.
    """
    result = await use_case.execute(to_use_case_input(body))
    return result.body
