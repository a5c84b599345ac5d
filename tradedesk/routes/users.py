from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from tradedesk.routes._deps import store_from_request, trace_id_from_request
from tradedesk.schemas import KycSubmitRequest, UserCreateRequest, success_envelope
from tradedesk.store import TradeDeskStore

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("")
def register_user(
    payload: UserCreateRequest,
    request: Request,
    store: TradeDeskStore = Depends(store_from_request),
):
    user, created = store.register_user(uid=payload.uid, email=payload.email, name=payload.name)
    return JSONResponse(
        status_code=201 if created else 200,
        content=success_envelope(user, trace_id_from_request(request)),
    )


@router.get("/{uid}")
def get_user(uid: str, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    return success_envelope(store.get_user(uid=uid), trace_id_from_request(request))


@router.get("/{uid}/profile")
def get_user_profile(uid: str, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    return success_envelope(store.get_user_profile(uid=uid), trace_id_from_request(request))


@router.post("/{uid}/kyc")
def submit_kyc(
    uid: str,
    payload: KycSubmitRequest,
    request: Request,
    store: TradeDeskStore = Depends(store_from_request),
):
    user = store.submit_kyc(uid=uid, payload=payload.model_dump(by_alias=True))
    return success_envelope(user, trace_id_from_request(request), message="KYC submitted")
