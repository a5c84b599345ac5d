from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from tradedesk.routes._deps import store_from_request, trace_id_from_request
from tradedesk.schemas import BotAssignmentCreateRequest, success_envelope
from tradedesk.store import TradeDeskStore

router = APIRouter(prefix="/api", tags=["bots"])


@router.get("/bots/catalog")
def bot_price_catalog(request: Request, store: TradeDeskStore = Depends(store_from_request)):
    items = store.bot_price_catalog()
    return success_envelope({"items": items, "total": len(items)}, trace_id_from_request(request))


@router.post("/users/{uid}/bots")
def create_bot_assignment(
    uid: str,
    payload: BotAssignmentCreateRequest,
    request: Request,
    store: TradeDeskStore = Depends(store_from_request),
):
    assignment = store.create_bot_assignment(
        uid=uid,
        broker_account_id=payload.broker_account_id,
        bot_id=payload.bot_id,
        signed_agreement_url=payload.signed_agreement_url,
    )
    return JSONResponse(status_code=201, content=success_envelope(assignment, trace_id_from_request(request)))


@router.get("/users/{uid}/bots")
def list_user_bots(uid: str, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    items = store.list_user_bots(uid=uid)
    return success_envelope({"items": items, "total": len(items)}, trace_id_from_request(request))
