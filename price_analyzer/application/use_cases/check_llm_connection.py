from dataclasses import dataclass

import structlog

from price_analyzer.application.interfaces.service_gateways import (
    ChatMessage,
    LLMGateway,
    LLMGatewayError,
)

logger = structlog.get_logger(__name__)

PROBE_MESSAGES: list[ChatMessage] = [
    {
        "role": "system",
        "content": 'Ответь кратко "Подключение работает" если получил это сообщение.',
    },
    {"role": "user", "content": "Тест подключения к API"},
]
_SUCCESS_MARKERS = ("работает", "подключение")


@dataclass
class CheckLLMConnectionOutput:
    ok: bool
    message: str
    answer: str | None = None
    error_code: str | None = None


class CheckLLMConnection:
    """Use case: Send a tiny probe prompt and check the provider answers sensibly."""

    def __init__(self, llm: LLMGateway, *, max_tokens: int = 50) -> None:
        self._llm = llm
        self._max_tokens = max_tokens

    async def execute(self) -> CheckLLMConnectionOutput:
        try:
            answer = await self._llm.complete(PROBE_MESSAGES, max_tokens=self._max_tokens)
        except LLMGatewayError as exc:
            logger.warning("llm_connection_failed", code=exc.code, status=exc.status_code)
            return CheckLLMConnectionOutput(
                ok=False,
                message=f"Ошибка подключения: {exc.message}",
                error_code=exc.code,
            )

        lowered = answer.lower()
        if any(marker in lowered for marker in _SUCCESS_MARKERS):
            logger.info("llm_connection_ok")
            return CheckLLMConnectionOutput(
                ok=True, message="Подключение к OpenAI API успешно", answer=answer
            )

        logger.warning("llm_connection_unexpected_answer", answer=answer[:200])
        return CheckLLMConnectionOutput(
            ok=False, message="API отвечает, но ответ неожиданный", answer=answer
        )
