"""Authorization guard for barter transitions.

Flat two-party model: the requester and the owner are the only actors.
"""

from app.models.barter import BarterOffer
from app.services.barter_state_machine import BarterStatus
from app.services.errors import UnauthorizedError


def is_party(barter: BarterOffer, user_id: str) -> bool:
    return user_id in (barter.requester_id, barter.owner_id)


def other_party(barter: BarterOffer, user_id: str) -> str:
    """Return the counter-party of ``user_id`` in this barter."""
    return barter.owner_id if user_id == barter.requester_id else barter.requester_id


def ensure_party(barter: BarterOffer, user_id: str) -> None:
    if not is_party(barter, user_id):
        raise UnauthorizedError("You are not a party to this barter")


def can_cancel(barter: BarterOffer, user_id: str) -> bool:
    """Once accepted, only the requester who opened the barter may back out."""
    if barter.status == BarterStatus.ACCEPTED:
        return user_id == barter.requester_id
    return is_party(barter, user_id)


def ensure_can_cancel(barter: BarterOffer, user_id: str) -> None:
    if not can_cancel(barter, user_id):
        raise UnauthorizedError("Only the requester can cancel an accepted barter")
