from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from app.services.ledger import ItemSnapshot, Negotiation, OfferedItem


# ---------------------------------------------------------------------------
# Barter requests
# ---------------------------------------------------------------------------


class BarterCreate(BaseModel):
    owner_id: str = Field(..., min_length=1, max_length=128)
    original_item_id: str = Field(..., min_length=1, max_length=128)
    original_item: ItemSnapshot | None = None
    offered_items: list[OfferedItem] = Field(default_factory=list)
    message: str | None = Field(default=None, max_length=2000)
    conversation_id: str | None = Field(default=None, max_length=128)


class CounterOfferCreate(BaseModel):
    items: list[OfferedItem] = Field(default_factory=list)
    message: str | None = Field(default=None, max_length=2000)


class BarterReasonRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=1000)


class ConversationLinkRequest(BaseModel):
    conversation_id: str = Field(..., min_length=1, max_length=128)


# ---------------------------------------------------------------------------
# Barter responses
# ---------------------------------------------------------------------------


class BarterResponse(BaseModel):
    id: int
    requester_id: str
    owner_id: str
    original_item_id: str
    original_item: ItemSnapshot | None
    status: str
    offered_items: list[OfferedItem]
    current_round: Negotiation | None
    message: str | None
    conversation_id: str | None
    version: int
    accepted_at: datetime | None = None
    accepted_by: str | None = None
    rejected_at: datetime | None = None
    rejected_by: str | None = None
    rejection_reason: str | None = None
    cancelled_at: datetime | None = None
    cancelled_by: str | None = None
    cancellation_reason: str | None = None
    completed_at: datetime | None = None
    completed_by: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class UserBarterResponse(BarterResponse):
    role: Literal["received", "sent"] | None = None


class BarterDetailResponse(BarterResponse):
    history: list[Negotiation]
    available_actions: list[str] = []


class ErrorResponse(BaseModel):
    detail: str
    code: str | None = None
