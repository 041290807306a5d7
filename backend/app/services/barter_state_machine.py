"""Barter state machine: pure logic, no DB dependency.

Defines the six-status barter lifecycle, the allowed transitions and
helpers for validation and action discovery. Who may act is decided by
``app.services.authorization``; this module only knows what is legal from
each status.
"""

from enum import StrEnum

from app.services.errors import InvalidStateError


class BarterStatus(StrEnum):
    PENDING = "pending"
    COUNTER_OFFERED = "counter_offered"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class BarterAction(StrEnum):
    COUNTER = "counter"
    ACCEPT = "accept"
    REJECT = "reject"
    CANCEL = "cancel"
    COMPLETE = "complete"


# Mapping: (current_status, action) → new_status.
# Nothing leads back into PENDING; only barter creation enters it.
TRANSITIONS: dict[tuple[BarterStatus, BarterAction], BarterStatus] = {
    # Negotiation rounds
    (BarterStatus.PENDING, BarterAction.COUNTER): BarterStatus.COUNTER_OFFERED,
    (BarterStatus.COUNTER_OFFERED, BarterAction.COUNTER): BarterStatus.COUNTER_OFFERED,
    # Agreement
    (BarterStatus.PENDING, BarterAction.ACCEPT): BarterStatus.ACCEPTED,
    (BarterStatus.COUNTER_OFFERED, BarterAction.ACCEPT): BarterStatus.ACCEPTED,
    (BarterStatus.ACCEPTED, BarterAction.COMPLETE): BarterStatus.COMPLETED,
    # Rejection from any non-terminal status
    (BarterStatus.PENDING, BarterAction.REJECT): BarterStatus.REJECTED,
    (BarterStatus.COUNTER_OFFERED, BarterAction.REJECT): BarterStatus.REJECTED,
    (BarterStatus.ACCEPTED, BarterAction.REJECT): BarterStatus.REJECTED,
    # Cancellation from any non-terminal status
    (BarterStatus.PENDING, BarterAction.CANCEL): BarterStatus.CANCELLED,
    (BarterStatus.COUNTER_OFFERED, BarterAction.CANCEL): BarterStatus.CANCELLED,
    (BarterStatus.ACCEPTED, BarterAction.CANCEL): BarterStatus.CANCELLED,
}

TERMINAL_STATUSES: frozenset[BarterStatus] = frozenset({
    BarterStatus.REJECTED,
    BarterStatus.CANCELLED,
    BarterStatus.COMPLETED,
})


def is_terminal(current: str) -> bool:
    try:
        return BarterStatus(current) in TERMINAL_STATUSES
    except ValueError:
        return False


def validate_transition(current: str, action: str) -> BarterStatus:
    """Validate and return the new status for a transition.

    Raises InvalidStateError if the transition is not allowed.
    """
    try:
        key = (BarterStatus(current), BarterAction(action))
    except ValueError:
        raise InvalidStateError(current, action)

    new_status = TRANSITIONS.get(key)
    if new_status is None:
        raise InvalidStateError(current, action)
    return new_status


def get_available_actions(current: str) -> list[str]:
    """Return action names the transition table allows from ``current``."""
    try:
        current_status = BarterStatus(current)
    except ValueError:
        return []

    return [
        action.value
        for (status, action) in TRANSITIONS
        if status == current_status
    ]
