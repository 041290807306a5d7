"""Negotiation ledger: the append-only history of offer rounds.

Each round is a frozen ``Negotiation`` value. Rounds are stored on the
barter as a JSON list; ``append_entry`` always returns a new list and never
touches the entries already recorded.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from app.services.valuation import calculate_value


class NegotiationType(StrEnum):
    INITIAL_OFFER = "initial_offer"
    COUNTER_OFFER = "counter_offer"


class OfferedItem(BaseModel):
    """An item put on the table in one negotiation round."""

    model_config = ConfigDict(frozen=True)

    item_id: str | None = None
    name: str = Field(..., min_length=1, max_length=255)
    condition: str | None = None
    category: str | None = None
    estimated_value: float | None = Field(default=0, ge=0)
    description: str = ""
    image: str = ""


class ItemSnapshot(BaseModel):
    """Target listing as it looked when the barter was opened."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    image: str | None = None


class Negotiation(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_user_id: str
    to_user_id: str
    items: tuple[OfferedItem, ...]
    message: str = ""
    total_value: float
    type: NegotiationType
    timestamp: datetime
    status: str


def build_entry(
    *,
    from_user_id: str,
    to_user_id: str,
    items: Sequence[OfferedItem],
    message: str | None,
    entry_type: NegotiationType,
    status: str,
    timestamp: datetime,
) -> Negotiation:
    """Create a round, computing its total estimated value."""
    return Negotiation(
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        items=tuple(items),
        message=message or "",
        total_value=calculate_value(items),
        type=entry_type,
        timestamp=timestamp,
        status=status,
    )


def append_entry(negotiations: Iterable[dict] | None, entry: Negotiation) -> list[dict]:
    """Return a new ledger list with ``entry`` appended after the existing rounds."""
    return [*(negotiations or []), entry.model_dump(mode="json")]


def load_history(negotiations: Iterable[dict] | None) -> tuple[Negotiation, ...]:
    return tuple(Negotiation.model_validate(raw) for raw in negotiations or [])
