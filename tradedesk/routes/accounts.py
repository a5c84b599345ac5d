from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from tradedesk.routes._deps import store_from_request, trace_id_from_request
from tradedesk.schemas import AccountCreateRequest, success_envelope
from tradedesk.store import TradeDeskStore

router = APIRouter(prefix="/api/users/{uid}/accounts", tags=["accounts"])


@router.post("")
def create_account(
    uid: str,
    payload: AccountCreateRequest,
    request: Request,
    store: TradeDeskStore = Depends(store_from_request),
):
    account = store.create_account(
        uid=uid,
        broker=payload.broker,
        account_type=payload.account_type,
        account_number=payload.account_number,
    )
    return JSONResponse(status_code=201, content=success_envelope(account, trace_id_from_request(request)))


@router.get("")
def list_accounts(uid: str, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    items = store.list_accounts(uid=uid)
    return success_envelope({"items": items, "total": len(items)}, trace_id_from_request(request))


@router.delete("/{account_id}")
def delete_account(
    uid: str,
    account_id: int,
    request: Request,
    store: TradeDeskStore = Depends(store_from_request),
):
    store.delete_account(uid=uid, account_id=account_id)
    return success_envelope(
        {"id": account_id, "deleted": True},
        trace_id_from_request(request),
        message="Account deleted",
    )
