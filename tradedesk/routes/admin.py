from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from tradedesk.routes._deps import store_from_request, trace_id_from_request
from tradedesk.schemas import AdminBotCreateRequest, AdminBotUpdateRequest, success_envelope
from tradedesk.store import TradeDeskStore

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _listing(items: list, request: Request) -> dict:
    return success_envelope({"items": items, "total": len(items)}, trace_id_from_request(request))


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.get("/users")
def list_users(request: Request, store: TradeDeskStore = Depends(store_from_request)):
    return _listing(store.list_users(), request)


@router.put("/users/{user_id}/approve")
def approve_user(user_id: int, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    return success_envelope(store.approve_user(user_id=user_id), trace_id_from_request(request), message="User approved")


@router.delete("/users/{user_id}")
def delete_user(user_id: int, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    store.delete_user(user_id=user_id)
    return success_envelope({"id": user_id, "deleted": True}, trace_id_from_request(request), message="User deleted")


# ---------------------------------------------------------------------------
# KYC review
# ---------------------------------------------------------------------------


@router.get("/kyc-requests")
def list_kyc_requests(request: Request, store: TradeDeskStore = Depends(store_from_request)):
    return _listing(store.list_kyc_requests(), request)


@router.get("/kyc-requests/{user_id}")
def get_kyc_request(user_id: int, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    return success_envelope(store.get_kyc_request(user_id=user_id), trace_id_from_request(request))


@router.put("/kyc-requests/{user_id}/approve")
def approve_kyc(user_id: int, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    return success_envelope(store.approve_kyc(user_id=user_id), trace_id_from_request(request), message="KYC approved")


@router.put("/kyc-requests/{user_id}/reject")
def reject_kyc(user_id: int, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    return success_envelope(store.reject_kyc(user_id=user_id), trace_id_from_request(request), message="KYC rejected")


# ---------------------------------------------------------------------------
# Bot catalog
# ---------------------------------------------------------------------------


@router.get("/bots")
def list_admin_bots(request: Request, store: TradeDeskStore = Depends(store_from_request)):
    return _listing(store.list_admin_bots(), request)


@router.post("/bots")
def create_admin_bot(
    payload: AdminBotCreateRequest,
    request: Request,
    store: TradeDeskStore = Depends(store_from_request),
):
    admin_bot = store.create_admin_bot(
        name=payload.name,
        price=payload.price,
        cost=payload.cost,
        subscription_fee=payload.subscription_fee,
    )
    return JSONResponse(status_code=201, content=success_envelope(admin_bot, trace_id_from_request(request)))


@router.put("/bots/{bot_id}")
def update_admin_bot(
    bot_id: int,
    payload: AdminBotUpdateRequest,
    request: Request,
    store: TradeDeskStore = Depends(store_from_request),
):
    admin_bot = store.update_admin_bot(bot_id=bot_id, changes=payload.model_dump(by_alias=True, exclude_unset=True))
    return success_envelope(admin_bot, trace_id_from_request(request))


@router.delete("/bots/{bot_id}")
def delete_admin_bot(bot_id: int, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    store.delete_admin_bot(bot_id=bot_id)
    return success_envelope({"id": bot_id, "deleted": True}, trace_id_from_request(request), message="Bot deleted")


# ---------------------------------------------------------------------------
# Bot requests
# ---------------------------------------------------------------------------


@router.get("/bot-requests")
def list_bot_requests(request: Request, store: TradeDeskStore = Depends(store_from_request)):
    return _listing(store.list_bot_requests(), request)


@router.get("/bot-requests/{request_id}")
def get_bot_request(request_id: int, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    return success_envelope(store.get_bot_request(request_id=request_id), trace_id_from_request(request))


@router.put("/bot-requests/{request_id}/approve")
def approve_bot_request(request_id: int, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    bot = store.approve_bot_request(request_id=request_id)
    return success_envelope(bot, trace_id_from_request(request), message="Bot request approved")


@router.put("/bot-requests/{request_id}/reject")
def reject_bot_request(request_id: int, request: Request, store: TradeDeskStore = Depends(store_from_request)):
    bot = store.reject_bot_request(request_id=request_id)
    return success_envelope(bot, trace_id_from_request(request), message="Bot request rejected")


# ---------------------------------------------------------------------------
# Careers
# ---------------------------------------------------------------------------


@router.get("/careers")
def list_career_applications(request: Request, store: TradeDeskStore = Depends(store_from_request)):
    return _listing(store.list_career_applications(), request)
