from __future__ import annotations

import uuid

from fastapi import Request
from fastapi.responses import JSONResponse

from tradedesk.schemas import error_envelope
from tradedesk.store import TradeDeskStore


def trace_id_from_request(request: Request) -> str:
    trace_id = getattr(request.state, "trace_id", None)
    if trace_id:
        return trace_id
    return uuid.uuid4().hex


def store_from_request(request: Request) -> TradeDeskStore:
    return request.app.state.store


def error_response(
    request: Request,
    *,
    code: str,
    message: str,
    error_class: str,
    retryable: bool,
    status_code: int,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_envelope(
            code=code,
            message=message,
            error_class=error_class,
            retryable=retryable,
            trace_id=trace_id_from_request(request),
        ),
    )
