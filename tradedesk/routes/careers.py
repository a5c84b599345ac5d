from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from tradedesk.routes._deps import store_from_request, trace_id_from_request
from tradedesk.schemas import CareerApplicationRequest, success_envelope
from tradedesk.store import TradeDeskStore

router = APIRouter(prefix="/api/careers", tags=["careers"])


@router.post("")
def create_career_application(
    payload: CareerApplicationRequest,
    request: Request,
    store: TradeDeskStore = Depends(store_from_request),
):
    application = store.create_career_application(payload=payload.model_dump(by_alias=True))
    return JSONResponse(status_code=201, content=success_envelope(application, trace_id_from_request(request)))
