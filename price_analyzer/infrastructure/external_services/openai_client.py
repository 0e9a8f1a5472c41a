"""HTTP client for OpenAI-compatible chat completions."""

from typing import Any

import httpx
import structlog

from price_analyzer.application.interfaces.service_gateways import (
    ChatMessage,
    LLMGateway,
    LLMGatewayError,
)
from price_analyzer.config import settings
from price_analyzer.logging_config import mask_secret

logger = structlog.get_logger(__name__)

USER_AGENT = "AI-Price-Analyzer/2.0"

# Upstream status -> (code, user-facing message)
_STATUS_ERRORS: dict[int, tuple[str, str]] = {
    401: ("INVALID_API_KEY", "Неверный API ключ OpenAI или нет доступа"),
    429: ("RATE_LIMIT_EXCEEDED", "Превышен лимит запросов OpenAI или недостаточно средств"),
    400: ("BAD_REQUEST", "Некорректный запрос к OpenAI API"),
    503: ("SERVICE_UNAVAILABLE", "Сервис OpenAI временно недоступен"),
}
_UNKNOWN_ERROR = ("UNKNOWN_OPENAI_ERROR", "Неизвестная ошибка OpenAI API")


class OpenAIClientError(LLMGatewayError):
    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        code: str,
        details: str | None = None,
        upstream_status: int | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, code=code)
        self.details = details
        # Set only when OpenAI itself answered with an error status.
        self.upstream_status = upstream_status

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.details is not None:
            body["details"] = self.details
        if self.upstream_status is not None:
            body["openaiStatus"] = self.upstream_status
        return body


def validate_api_key(api_key: str | None) -> str:
    key = (api_key or "").strip()
    if not key:
        raise OpenAIClientError(
            "OpenAI API key is required", status_code=400, code="MISSING_API_KEY"
        )
    if not key.startswith("sk-"):
        raise OpenAIClientError(
            'API key must start with "sk-"', status_code=400, code="INVALID_API_KEY_FORMAT"
        )
    return key


def _error_details(response: httpx.Response) -> str:
    try:
        error = response.json().get("error") or {}
    except ValueError:
        return response.text or "No additional details"
    if isinstance(error, dict):
        return error.get("message") or "No additional details"
    return str(error)


class OpenAIClient(LLMGateway):
    """Thin HTTP wrapper around POST /chat/completions."""

    def __init__(
        self,
        api_key: str = settings.openai_api_key,
        base_url: str = settings.openai_base_url,
        model: str = settings.openai_model,
        temperature: float = settings.openai_temperature,
        max_tokens: int = settings.openai_max_tokens,
        timeout: float = settings.openai_timeout_s,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        api_key: str | None = None,
    ) -> dict[str, Any]:
        key = validate_api_key(api_key or self._api_key)
        payload = {
            "model": model or self._model,
            "messages": messages,
            "max_tokens": max_tokens if max_tokens is not None else self._max_tokens,
            "temperature": temperature if temperature is not None else self._temperature,
            "stream": False,
            "presence_penalty": 0,
            "frequency_penalty": 0,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {key}",
            "User-Agent": USER_AGENT,
        }

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    f"{self._base_url}/chat/completions",
                    json=payload,
                    headers=headers,
                )
            except httpx.TimeoutException as exc:
                logger.error("openai_request_timeout", error=str(exc))
                raise OpenAIClientError(
                    "Превышено время ожидания ответа от OpenAI",
                    status_code=504,
                    code="TIMEOUT_ERROR",
                ) from exc
            except httpx.ConnectError as exc:
                logger.error("openai_connection_failed", error=str(exc))
                raise OpenAIClientError(
                    "Сетевая ошибка: не удается подключиться к OpenAI",
                    status_code=502,
                    code="NETWORK_ERROR",
                ) from exc
            except httpx.RequestError as exc:
                logger.error("openai_request_failed", error=str(exc))
                raise OpenAIClientError(
                    "Ошибка выполнения запроса к OpenAI API",
                    status_code=502,
                    code="FETCH_ERROR",
                ) from exc

        if response.is_error:
            code, message = _STATUS_ERRORS.get(response.status_code, _UNKNOWN_ERROR)
            details = _error_details(response)
            logger.error(
                "openai_api_error",
                status_code=response.status_code,
                code=code,
                details=details,
                api_key=mask_secret(key),
            )
            raise OpenAIClientError(
                message,
                status_code=response.status_code,
                code=code,
                details=details,
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise OpenAIClientError(
                "OpenAI вернул некорректный ответ", status_code=502, code="INVALID_RESPONSE"
            ) from exc

        usage = data.get("usage") or {}
        logger.info(
            "openai_completion_received",
            model=payload["model"],
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
            total_tokens=usage.get("total_tokens"),
        )
        return data

    async def complete(
        self,
        messages: list[ChatMessage],
        *,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        data = await self.chat_completion(
            messages, max_tokens=max_tokens, temperature=temperature
        )
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise OpenAIClientError(
                "OpenAI вернул ответ без текста", status_code=502, code="INVALID_RESPONSE"
            ) from exc
        if not isinstance(content, str):
            raise OpenAIClientError(
                "OpenAI вернул ответ без текста", status_code=502, code="INVALID_RESPONSE"
            )
        return content
