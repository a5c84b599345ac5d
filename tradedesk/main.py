from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from tradedesk.body_limit import RequestBodyLimitMiddleware
from tradedesk.errors import ApiError
from tradedesk.routes import accounts, admin, bots, careers, users
from tradedesk.routes._deps import error_response, trace_id_from_request
from tradedesk.runtime_profile import cors_allow_origins, max_body_bytes
from tradedesk.schemas import success_envelope
from tradedesk.store import TradeDeskStore, create_store_from_env

logger = logging.getLogger(__name__)


def create_app(
    store: TradeDeskStore | None = None,
    environ: Mapping[str, str] | None = None,
) -> FastAPI:
    app = FastAPI(title="TradeDesk API", version="0.1.0")
    app.state.store = store if store is not None else create_store_from_env(environ)
    body_limit = max_body_bytes(environ)

    app.add_middleware(RequestBodyLimitMiddleware, max_bytes=body_limit)

    allow_origins = cors_allow_origins(environ)
    if allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allow_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def add_trace_id_and_limit_body(request: Request, call_next):
        incoming_trace_id = request.headers.get("x-trace-id", "").strip()
        request.state.trace_id = incoming_trace_id or uuid.uuid4().hex
        content_length = request.headers.get("content-length", "").strip()
        if content_length.isdigit() and int(content_length) > body_limit:
            return error_response(
                request,
                code="REQ_BODY_TOO_LARGE",
                message=f"request body exceeds {body_limit} bytes",
                error_class="validation",
                retryable=False,
                status_code=413,
            )
        response = await call_next(request)
        response.headers["x-trace-id"] = request.state.trace_id
        return response

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        if exc.http_status >= 500:
            logger.error("api_error code=%s message=%s path=%s", exc.code, exc.message, request.url.path)
        return error_response(
            request,
            code=exc.code,
            message=exc.message,
            error_class=exc.error_class,
            retryable=exc.retryable,
            status_code=exc.http_status,
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return error_response(
            request,
            code="REQ_VALIDATION_FAILED",
            message="invalid payload",
            error_class="validation",
            retryable=False,
            status_code=400,
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return error_response(
                request,
                code="REQ_NOT_FOUND",
                message="resource not found",
                error_class="validation",
                retryable=False,
                status_code=404,
            )
        if exc.status_code == 413:
            return error_response(
                request,
                code="REQ_BODY_TOO_LARGE",
                message=str(exc.detail),
                error_class="validation",
                retryable=False,
                status_code=413,
            )
        return error_response(
            request,
            code="REQ_HTTP_ERROR",
            message=str(exc.detail),
            error_class="validation",
            retryable=False,
            status_code=exc.status_code,
        )

    @app.get("/healthz")
    def healthz(request: Request) -> dict[str, object]:
        return success_envelope({"status": "ok"}, trace_id_from_request(request))

    @app.get("/api/health")
    def health_api(request: Request) -> dict[str, object]:
        return success_envelope({"status": "ok"}, trace_id_from_request(request))

    app.include_router(users.router)
    app.include_router(accounts.router)
    app.include_router(bots.router)
    app.include_router(admin.router)
    app.include_router(careers.router)
    return app
