from fastapi import APIRouter, Depends, Query, Request, status

from app.api.schemas import (
    BarterCreate,
    BarterDetailResponse,
    BarterReasonRequest,
    BarterResponse,
    ConversationLinkRequest,
    CounterOfferCreate,
    ErrorResponse,
    UserBarterResponse,
)
from app.core.config import settings
from app.core.deps import get_barter_directory, get_barter_service
from app.core.rate_limit import limiter
from app.core.security import get_current_user_id
from app.models.barter import BarterOffer
from app.services.barter import BarterService
from app.services.directory import BarterDirectory, BarterRole
from app.services.ledger import Negotiation

_ERRORS = {
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}

router = APIRouter(prefix="/barters", tags=["barters"], responses=_ERRORS)


def _detail(svc: BarterService, barter: BarterOffer, user_id: str) -> BarterDetailResponse:
    resp = BarterDetailResponse.model_validate(barter)
    resp.available_actions = svc.available_actions(barter, user_id)
    return resp


# ---------------------------------------------------------------------------
# Offers
# ---------------------------------------------------------------------------


@router.post("", response_model=BarterDetailResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.rate_limit_barter_create)
async def create_barter(
    request: Request,
    body: BarterCreate,
    user_id: str = Depends(get_current_user_id),
    svc: BarterService = Depends(get_barter_service),
):
    result = await svc.create_barter_offer(
        requester_id=user_id,
        owner_id=body.owner_id,
        original_item_id=body.original_item_id,
        offered_items=body.offered_items,
        message=body.message,
        original_item=body.original_item,
        conversation_id=body.conversation_id,
    )
    return _detail(svc, result.unwrap(), user_id)


@router.get("", response_model=list[UserBarterResponse])
async def list_barters(
    role: BarterRole = Query(BarterRole.ALL),
    limit: int = Query(settings.barter_list_default_limit, ge=1, le=settings.barter_list_max_limit),
    user_id: str = Depends(get_current_user_id),
    directory: BarterDirectory = Depends(get_barter_directory),
):
    entries = await directory.get_user_barters(user_id, role, limit)
    results = []
    for entry in entries:
        resp = UserBarterResponse.model_validate(entry.barter)
        resp.role = entry.role.value
        results.append(resp)
    return results


@router.get("/{barter_id}", response_model=BarterDetailResponse)
async def get_barter(
    barter_id: int,
    user_id: str = Depends(get_current_user_id),
    svc: BarterService = Depends(get_barter_service),
):
    result = await svc.get_barter(barter_id, user_id)
    return _detail(svc, result.unwrap(), user_id)


@router.get("/{barter_id}/negotiations", response_model=list[Negotiation])
async def get_negotiations(
    barter_id: int,
    user_id: str = Depends(get_current_user_id),
    svc: BarterService = Depends(get_barter_service),
):
    result = await svc.get_barter(barter_id, user_id)
    return list(result.unwrap().history)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


@router.post("/{barter_id}/counter", response_model=BarterDetailResponse)
async def counter_barter(
    barter_id: int,
    body: CounterOfferCreate,
    user_id: str = Depends(get_current_user_id),
    svc: BarterService = Depends(get_barter_service),
):
    result = await svc.create_counter_offer(barter_id, user_id, body.items, body.message)
    return _detail(svc, result.unwrap(), user_id)


@router.post("/{barter_id}/accept", response_model=BarterDetailResponse)
async def accept_barter(
    barter_id: int,
    user_id: str = Depends(get_current_user_id),
    svc: BarterService = Depends(get_barter_service),
):
    result = await svc.accept_barter_offer(barter_id, user_id)
    return _detail(svc, result.unwrap(), user_id)


@router.post("/{barter_id}/reject", response_model=BarterDetailResponse)
async def reject_barter(
    barter_id: int,
    body: BarterReasonRequest | None = None,
    user_id: str = Depends(get_current_user_id),
    svc: BarterService = Depends(get_barter_service),
):
    reason = body.reason if body else None
    result = await svc.reject_barter_offer(barter_id, user_id, reason)
    return _detail(svc, result.unwrap(), user_id)


@router.post("/{barter_id}/cancel", response_model=BarterDetailResponse)
async def cancel_barter(
    barter_id: int,
    body: BarterReasonRequest | None = None,
    user_id: str = Depends(get_current_user_id),
    svc: BarterService = Depends(get_barter_service),
):
    reason = body.reason if body else None
    result = await svc.cancel_barter_offer(barter_id, user_id, reason)
    return _detail(svc, result.unwrap(), user_id)


@router.post("/{barter_id}/complete", response_model=BarterDetailResponse)
async def complete_barter(
    barter_id: int,
    user_id: str = Depends(get_current_user_id),
    svc: BarterService = Depends(get_barter_service),
):
    result = await svc.complete_barter_exchange(barter_id, user_id)
    return _detail(svc, result.unwrap(), user_id)


@router.patch("/{barter_id}/conversation", response_model=BarterResponse)
async def link_conversation(
    barter_id: int,
    body: ConversationLinkRequest,
    user_id: str = Depends(get_current_user_id),
    svc: BarterService = Depends(get_barter_service),
):
    result = await svc.link_conversation(barter_id, user_id, body.conversation_id)
    return result.unwrap()
