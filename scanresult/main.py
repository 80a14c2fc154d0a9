"""FastAPI application entrypoint."""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated, Any

import structlog
from fastapi import Depends, FastAPI, Header, HTTPException, Request, Response, status
from pydantic import BaseModel

from scanresult import metrics
from scanresult.parsers import select_parsers
from scanresult.pipeline import ClassifyRequest, classify
from scanresult.settings import Settings, get_settings

SettingsDep = Annotated[Settings, Depends(get_settings)]

_security_logger = structlog.get_logger("security")


async def verify_api_key(
    request: Request,
    settings: SettingsDep,
    x_api_key: str | None = Header(default=None),
) -> None:
    """Simple API key gate for non-health endpoints."""
    if not settings.require_api_key:
        return
    if not settings.api_key:
        _security_logger.error(
            "auth_config_error",
            path=str(request.url.path),
            reason="api_key_not_configured",
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API key not configured",
        )
    if x_api_key != settings.api_key:
        _security_logger.warning(
            "auth_failure",
            path=str(request.url.path),
            reason="invalid_api_key",
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized",
        )


def configure_logging(log_level: str) -> None:
    numeric_level = logging.getLevelName(log_level.upper())
    if isinstance(numeric_level, str):
        numeric_level = logging.INFO
    logging.basicConfig(level=numeric_level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=True,
    )


class ParseRequestModel(BaseModel):
    text: str


class ParseResponseModel(BaseModel):
    type: str
    display: str
    fields: dict[str, Any]
    parser: str
    latency_ms: float
    version: str


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    # Fail at startup rather than on the first request.
    select_parsers(settings.parser_names)

    app = FastAPI(title="Scan Result Classifier", version=settings.version)
    app.dependency_overrides[get_settings] = lambda: settings
    parse_semaphore = asyncio.Semaphore(settings.max_concurrent_requests)

    @app.middleware("http")
    async def enforce_limits(request: Request, call_next):
        if request.url.path == "/parse":
            limit = settings.max_request_size_bytes
            content_length = request.headers.get("content-length")
            if content_length:
                try:
                    size = int(content_length)
                    if size > limit:
                        _security_logger.warning(
                            "request_rejected",
                            path=str(request.url.path),
                            reason="body_too_large",
                            size=size,
                            limit=limit,
                        )
                        return Response(
                            content="request too large",
                            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                            media_type="text/plain",
                        )
                except ValueError:
                    pass  # Ignore malformed header and fall through
        return await call_next(request)

    @app.get("/healthz", response_class=Response)
    async def healthz() -> Response:
        return Response(content="ok\n", media_type="text/plain")

    @app.post("/parse", response_model=ParseResponseModel)
    async def parse_endpoint(
        request: ParseRequestModel,
        settings: SettingsDep,
        _: None = Depends(verify_api_key),
    ) -> ParseResponseModel:
        async with parse_semaphore:
            try:
                result = await asyncio.wait_for(
                    asyncio.to_thread(
                        classify,
                        ClassifyRequest(text=request.text),
                        settings=settings,
                    ),
                    timeout=settings.request_timeout_seconds,
                )
                return ParseResponseModel(**result.asdict())
            except asyncio.TimeoutError:
                _security_logger.warning(
                    "request_timeout",
                    path="/parse",
                    timeout_seconds=settings.request_timeout_seconds,
                )
                raise HTTPException(
                    status_code=status.HTTP_408_REQUEST_TIMEOUT,
                    detail="request timeout",
                ) from None

    @app.get("/metrics")
    async def metrics_endpoint(
        settings: SettingsDep, _: None = Depends(verify_api_key)
    ) -> Response:
        if not settings.metrics_enabled:
            raise HTTPException(status_code=404, detail="metrics disabled")
        payload, content_type = metrics.render_metrics()
        return Response(content=payload, media_type=content_type)

    return app
