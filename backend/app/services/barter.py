"""Barter lifecycle service.

Owns every write to a barter: loads the record, checks the caller, checks
the transition table, appends negotiation rounds, saves with a version
compare-and-swap and notifies the counter-party.

Public operations return a ``BarterResult`` instead of raising for expected
domain failures; database errors still propagate.
"""

import functools
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, ParamSpec

from app.db.base import utcnow
from app.models.barter import BarterOffer
from app.services import authorization
from app.services.barter_state_machine import (
    BarterAction,
    BarterStatus,
    get_available_actions,
    validate_transition,
)
from app.services.errors import BarterError, BarterValidationError, NotFoundError
from app.services.ledger import (
    ItemSnapshot,
    NegotiationType,
    OfferedItem,
    append_entry,
    build_entry,
)
from app.services.notification import BarterEvent, BarterNotifier
from app.services.repository import BarterRepository

logger = logging.getLogger(__name__)

P = ParamSpec("P")


@dataclass(frozen=True)
class BarterResult:
    barter: BarterOffer | None = None
    error: BarterError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> BarterOffer:
        """Return the barter or raise the domain error."""
        if self.error is not None:
            raise self.error
        return self.barter


def _as_result(
    func: Callable[P, Awaitable[BarterOffer]],
) -> Callable[P, Awaitable[BarterResult]]:
    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> BarterResult:
        try:
            return BarterResult(barter=await func(*args, **kwargs))
        except BarterError as exc:
            logger.info("Barter operation %s refused: %s", func.__name__, exc.detail)
            return BarterResult(error=exc)

    return wrapper


class BarterService:
    def __init__(self, repository: BarterRepository, notifier: BarterNotifier):
        self.repository = repository
        self.notifier = notifier

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def _load(self, barter_id: int) -> BarterOffer:
        barter = await self.repository.load(barter_id)
        if barter is None:
            raise NotFoundError(barter_id)
        return barter

    @_as_result
    async def get_barter(self, barter_id: int, user_id: str) -> BarterOffer:
        """Return a barter visible to ``user_id`` (parties only)."""
        barter = await self._load(barter_id)
        authorization.ensure_party(barter, user_id)
        return barter

    def available_actions(self, barter: BarterOffer, user_id: str) -> list[str]:
        """Actions ``user_id`` may perform on ``barter`` right now."""
        if not authorization.is_party(barter, user_id):
            return []
        actions = get_available_actions(barter.status)
        if BarterAction.CANCEL in actions and not authorization.can_cancel(barter, user_id):
            actions.remove(BarterAction.CANCEL)
        return actions

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    @_as_result
    async def create_barter_offer(
        self,
        requester_id: str,
        owner_id: str,
        original_item_id: str,
        offered_items: Sequence[OfferedItem],
        message: str | None = None,
        original_item: ItemSnapshot | None = None,
        conversation_id: str | None = None,
    ) -> BarterOffer:
        if not requester_id or not owner_id or not original_item_id or not offered_items:
            raise BarterValidationError("Missing required barter fields")
        if requester_id == owner_id:
            raise BarterValidationError("You cannot barter for your own item")

        now = utcnow()
        entry = build_entry(
            from_user_id=requester_id,
            to_user_id=owner_id,
            items=offered_items,
            message=message,
            entry_type=NegotiationType.INITIAL_OFFER,
            status=BarterStatus.PENDING.value,
            timestamp=now,
        )
        barter = BarterOffer(
            requester_id=requester_id,
            owner_id=owner_id,
            original_item_id=original_item_id,
            original_item=original_item.model_dump() if original_item else None,
            status=BarterStatus.PENDING.value,
            negotiations=append_entry([], entry),
            message=message or "",
            conversation_id=conversation_id,
            version=1,
            created_at=now,
            updated_at=now,
        )
        barter = await self.repository.add(barter)
        logger.info(
            "Barter %s created by %s for item %s (value %.2f)",
            barter.id,
            requester_id,
            original_item_id,
            entry.total_value,
        )

        await self._notify(barter, owner_id, requester_id)
        return barter

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    @_as_result
    async def create_counter_offer(
        self,
        barter_id: int,
        user_id: str,
        items: Sequence[OfferedItem],
        message: str | None = None,
    ) -> BarterOffer:
        barter = await self._load(barter_id)
        authorization.ensure_party(barter, user_id)
        new_status = validate_transition(barter.status, BarterAction.COUNTER)
        if not items:
            raise BarterValidationError("A counter-offer needs at least one item")

        entry = build_entry(
            from_user_id=user_id,
            to_user_id=authorization.other_party(barter, user_id),
            items=items,
            message=message,
            entry_type=NegotiationType.COUNTER_OFFER,
            status=new_status.value,
            timestamp=utcnow(),
        )
        return await self._commit(
            barter,
            user_id,
            new_status,
            {"negotiations": append_entry(barter.negotiations, entry)},
        )

    @_as_result
    async def accept_barter_offer(self, barter_id: int, user_id: str) -> BarterOffer:
        barter = await self._load(barter_id)
        authorization.ensure_party(barter, user_id)
        new_status = validate_transition(barter.status, BarterAction.ACCEPT)
        return await self._commit(
            barter,
            user_id,
            new_status,
            {"accepted_at": utcnow(), "accepted_by": user_id},
        )

    @_as_result
    async def reject_barter_offer(
        self, barter_id: int, user_id: str, reason: str | None = None
    ) -> BarterOffer:
        barter = await self._load(barter_id)
        authorization.ensure_party(barter, user_id)
        new_status = validate_transition(barter.status, BarterAction.REJECT)
        return await self._commit(
            barter,
            user_id,
            new_status,
            {
                "rejected_at": utcnow(),
                "rejected_by": user_id,
                "rejection_reason": reason or "",
            },
        )

    @_as_result
    async def cancel_barter_offer(
        self, barter_id: int, user_id: str, reason: str | None = None
    ) -> BarterOffer:
        barter = await self._load(barter_id)
        authorization.ensure_party(barter, user_id)
        authorization.ensure_can_cancel(barter, user_id)
        new_status = validate_transition(barter.status, BarterAction.CANCEL)
        return await self._commit(
            barter,
            user_id,
            new_status,
            {
                "cancelled_at": utcnow(),
                "cancelled_by": user_id,
                "cancellation_reason": reason or "",
            },
        )

    @_as_result
    async def complete_barter_exchange(self, barter_id: int, user_id: str) -> BarterOffer:
        barter = await self._load(barter_id)
        authorization.ensure_party(barter, user_id)
        new_status = validate_transition(barter.status, BarterAction.COMPLETE)
        return await self._commit(
            barter,
            user_id,
            new_status,
            {"completed_at": utcnow(), "completed_by": user_id},
        )

    @_as_result
    async def link_conversation(
        self, barter_id: int, user_id: str, conversation_id: str
    ) -> BarterOffer:
        """Attach a messaging thread; no status change, nobody is notified."""
        barter = await self._load(barter_id)
        authorization.ensure_party(barter, user_id)
        if not conversation_id:
            raise BarterValidationError("conversation_id is required")
        return await self.repository.save(
            barter.id, {"conversation_id": conversation_id}, barter.version
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _commit(
        self,
        barter: BarterOffer,
        user_id: str,
        new_status: BarterStatus,
        changes: dict[str, Any],
    ) -> BarterOffer:
        old_status = barter.status
        updated = await self.repository.save(
            barter.id,
            {**changes, "status": new_status.value},
            barter.version,
        )
        logger.info(
            "Barter %s: %s -> %s by %s", barter.id, old_status, new_status.value, user_id
        )

        await self._notify(updated, authorization.other_party(updated, user_id), user_id)
        return updated

    async def _notify(self, barter: BarterOffer, recipient_id: str, acting_user_id: str) -> None:
        event = BarterEvent(
            barter_id=barter.id,
            item_id=barter.original_item_id,
            item_name=barter.item_snapshot.name or "the item",
            status=barter.status,
            acting_user_id=acting_user_id,
        )
        # Delivery is best-effort; the transition is already saved
        try:
            await self.notifier.notify(recipient_id, event)
        except Exception:
            logger.exception("Notifier failed for barter %s", barter.id)
