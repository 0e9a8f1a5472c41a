"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from price_analyzer.api.routes import assistant, health, history, products, proxy
from price_analyzer.application.interfaces.service_gateways import LLMGatewayError
from price_analyzer.application.use_cases.proxy_chat_completion import ProxyRequestError
from price_analyzer.config import settings
from price_analyzer.infrastructure.database.connection import create_tables, dispose_engine
from price_analyzer.logging_config import configure_logging

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging(settings.log_level, json_logs=settings.log_json)
    logger.info(
        "price_analyzer_starting",
        llm_configured=bool(settings.openai_api_key),
        search_configured=bool(settings.serpapi_api_key),
    )
    await create_tables()
    yield
    await dispose_engine()
    logger.info("price_analyzer_stopping")


async def llm_gateway_error_handler(request: Request, exc: LLMGatewayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def proxy_request_error_handler(request: Request, exc: ProxyRequestError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    if any(error.get("type") == "json_invalid" for error in exc.errors()):
        logger.warning("request_json_parse_error", path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Ошибка парсинга JSON в запросе", "code": "JSON_PARSE_ERROR"},
        )
    return await request_validation_exception_handler(request, exc)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_request_error", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Внутренняя ошибка сервера", "code": "UNKNOWN_ERROR"},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        description="Product price tracking with LLM-assisted competitor and Avito price search.",
        version="2.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LLMGatewayError, llm_gateway_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ProxyRequestError, proxy_request_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(health.router)
    app.include_router(proxy.router)
    app.include_router(products.router)
    app.include_router(assistant.router)
    app.include_router(history.router)

    return app


app = create_app()
