"""Unit tests for the OpenAI HTTP client, using httpx.MockTransport."""
import json

import httpx
import pytest

from price_analyzer.infrastructure.external_services.openai_client import (
    USER_AGENT,
    OpenAIClient,
    OpenAIClientError,
    validate_api_key,
)

MESSAGES = [{"role": "user", "content": "Тест"}]


def _completion(content: str | None = "Подключение работает") -> dict:  # type: ignore[type-arg]
    return {
        "id": "chatcmpl-1",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 3, "total_tokens": 13},
    }


def _client(handler, api_key: str = "sk-test-key") -> OpenAIClient:  # type: ignore[no-untyped-def]
    return OpenAIClient(
        api_key=api_key,
        base_url="https://llm.example/v1",
        model="gpt-4o",
        transport=httpx.MockTransport(handler),
    )


class TestValidateApiKey:
    def test_missing(self) -> None:
        with pytest.raises(OpenAIClientError) as exc_info:
            validate_api_key("")
        assert exc_info.value.code == "MISSING_API_KEY"
        assert exc_info.value.status_code == 400

    def test_wrong_prefix(self) -> None:
        with pytest.raises(OpenAIClientError) as exc_info:
            validate_api_key("pk-123")
        assert exc_info.value.code == "INVALID_API_KEY_FORMAT"

    def test_valid(self) -> None:
        assert validate_api_key(" sk-abc ") == "sk-abc"


class TestChatCompletion:
    @pytest.mark.asyncio
    async def test_sends_expected_payload_and_headers(self) -> None:
        captured: dict = {}  # type: ignore[type-arg]

        def handler(request: httpx.Request) -> httpx.Response:
            captured["url"] = str(request.url)
            captured["headers"] = request.headers
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion())

        data = await _client(handler).chat_completion(MESSAGES, max_tokens=50, temperature=0.2)

        assert data["usage"]["total_tokens"] == 13
        assert captured["url"] == "https://llm.example/v1/chat/completions"
        assert captured["headers"]["authorization"] == "Bearer sk-test-key"
        assert captured["headers"]["user-agent"] == USER_AGENT
        assert captured["body"] == {
            "model": "gpt-4o",
            "messages": MESSAGES,
            "max_tokens": 50,
            "temperature": 0.2,
            "stream": False,
            "presence_penalty": 0,
            "frequency_penalty": 0,
        }

    @pytest.mark.asyncio
    async def test_per_call_key_overrides_default(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["authorization"])
            return httpx.Response(200, json=_completion())

        await _client(handler, api_key="").chat_completion(MESSAGES, api_key="sk-client")
        assert seen == ["Bearer sk-client"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, code",
        [
            (401, "INVALID_API_KEY"),
            (429, "RATE_LIMIT_EXCEEDED"),
            (400, "BAD_REQUEST"),
            (503, "SERVICE_UNAVAILABLE"),
            (500, "UNKNOWN_OPENAI_ERROR"),
        ],
    )
    async def test_upstream_errors_are_translated(self, status: int, code: str) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, json={"error": {"message": "upstream says no"}})

        with pytest.raises(OpenAIClientError) as exc_info:
            await _client(handler).chat_completion(MESSAGES)

        assert exc_info.value.status_code == status
        assert exc_info.value.code == code
        assert exc_info.value.details == "upstream says no"
        assert exc_info.value.to_dict()["openaiStatus"] == status

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "exc, status, code",
        [
            (httpx.ConnectError("dns failure"), 502, "NETWORK_ERROR"),
            (httpx.ReadTimeout("too slow"), 504, "TIMEOUT_ERROR"),
            (httpx.RemoteProtocolError("bad frame"), 502, "FETCH_ERROR"),
        ],
    )
    async def test_transport_errors(self, exc: Exception, status: int, code: str) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise exc

        with pytest.raises(OpenAIClientError) as exc_info:
            await _client(handler).chat_completion(MESSAGES)

        assert exc_info.value.status_code == status
        assert exc_info.value.code == code

    @pytest.mark.asyncio
    async def test_missing_key_fails_before_request(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("request should not be sent")

        with pytest.raises(OpenAIClientError) as exc_info:
            await _client(handler, api_key="").chat_completion(MESSAGES)
        assert exc_info.value.code == "MISSING_API_KEY"


class TestComplete:
    @pytest.mark.asyncio
    async def test_returns_text(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_completion("Минимальная цена: 84 990 ₽"))

        assert await _client(handler).complete(MESSAGES) == "Минимальная цена: 84 990 ₽"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"choices": []}, _completion(None), {}])
    async def test_missing_content_is_invalid_response(self, body: dict) -> None:  # type: ignore[type-arg]
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=body)

        with pytest.raises(OpenAIClientError) as exc_info:
            await _client(handler).complete(MESSAGES)
        assert exc_info.value.code == "INVALID_RESPONSE"
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_non_json_body_is_invalid_response(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        with pytest.raises(OpenAIClientError) as exc_info:
            await _client(handler).complete(MESSAGES)
        assert exc_info.value.code == "INVALID_RESPONSE"
