"""Azure Functions entry point for the AI Price Analyzer proxy."""
import json
from typing import Any

import azure.functions as func
import structlog
from pydantic import ValidationError
from sqlalchemy import text

from price_analyzer.api.routes.proxy import to_use_case_input
from price_analyzer.api.schemas.proxy import ProxyChatRequest
from price_analyzer.application.interfaces.service_gateways import LLMGatewayError
from price_analyzer.application.use_cases.proxy_chat_completion import (
    ProxyChatCompletion,
    ProxyRequestError,
)
from price_analyzer.config import settings
from price_analyzer.infrastructure.database.connection import AsyncSessionLocal
from price_analyzer.infrastructure.external_services.openai_client import OpenAIClient
from price_analyzer.infrastructure.external_services.price_search_provider import (
    WebPriceSearchProvider,
)
from price_analyzer.infrastructure.external_services.serpapi_client import SerpApiClient
from price_analyzer.logging_config import configure_logging

configure_logging(settings.log_level, json_logs=True)
logger = structlog.get_logger(__name__)

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def build_proxy_use_case() -> ProxyChatCompletion:
    search_provider = (
        WebPriceSearchProvider(SerpApiClient(), results_limit=settings.search_results_limit)
        if settings.search_enabled
        else None
    )
    return ProxyChatCompletion(
        OpenAIClient(), search_provider, default_api_key=settings.openai_api_key
    )


def _json_response(body: dict[str, Any] | None, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body, ensure_ascii=False) if body is not None else "",
        status_code=status_code,
        mimetype="application/json",
        headers=CORS_HEADERS,
    )


async def handle_proxy_request(
    method: str,
    raw_body: bytes,
    use_case: ProxyChatCompletion,
) -> tuple[int, dict[str, Any] | None]:
    """
    Serverless proxy contract, independent of the hosting runtime.

    Returns (status_code, json_body); the body is None for a preflight.
    """
    method = method.upper()
    if method == "OPTIONS":
        return 200, None
    if method != "POST":
        logger.warning("proxy_method_not_allowed", method=method)
        return 405, {"error": "Only POST method allowed", "received": method}

    try:
        payload = json.loads(raw_body or b"{}")
    except ValueError:
        return 400, {"error": "Ошибка парсинга JSON в запросе", "code": "JSON_PARSE_ERROR"}

    try:
        request = ProxyChatRequest.model_validate(payload)
    except ValidationError as exc:
        return 422, {
            "error": "Некорректные параметры запроса",
            "code": "VALIDATION_ERROR",
            "details": exc.errors(include_url=False, include_context=False),
        }

    try:
        result = await use_case.execute(to_use_case_input(request))
    except ProxyRequestError as exc:
        return exc.status_code, {"error": exc.message, "code": exc.code}
    except LLMGatewayError as exc:
        return exc.status_code, exc.to_dict()
    except Exception:
        logger.exception("proxy_unhandled_error")
        return 500, {"error": "Внутренняя ошибка сервера", "code": "UNKNOWN_ERROR"}

    return 200, result.body


# ============================================================================
# OpenAI proxy
# ============================================================================

@app.route(route="openai", methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
async def openai_proxy(req: func.HttpRequest) -> func.HttpResponse:
    status_code, body = await handle_proxy_request(
        req.method, req.get_body(), build_proxy_use_case()
    )
    return _json_response(body, status_code)


# ============================================================================
# Health Check
# ============================================================================

@app.route(route="health", methods=["GET"])
async def health(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint."""
    db_status = "connected"
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:
        db_status = f"error: {exc}"

    return _json_response(
        {
            "status": "healthy" if db_status == "connected" else "degraded",
            "database": db_status,
            "llm_configured": bool(settings.openai_api_key),
            "search_configured": bool(settings.serpapi_api_key),
        }
    )
