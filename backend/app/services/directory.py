"""Read path: a user's barters split by the role they play in them."""

from dataclasses import dataclass
from enum import StrEnum

from app.core.config import settings
from app.models.barter import BarterOffer
from app.services.errors import BarterValidationError
from app.services.repository import BarterRepository


class BarterRole(StrEnum):
    RECEIVED = "received"
    SENT = "sent"
    ALL = "all"


@dataclass(frozen=True)
class UserBarter:
    barter: BarterOffer
    role: BarterRole


class BarterDirectory:
    def __init__(self, repository: BarterRepository, max_limit: int | None = None):
        self.repository = repository
        self.max_limit = max_limit or settings.barter_list_max_limit

    async def get_user_barters(
        self,
        user_id: str,
        role: str = BarterRole.ALL,
        limit: int | None = None,
    ) -> list[UserBarter]:
        """Return barters where ``user_id`` is owner (received) and/or requester (sent).

        For ``all`` both sides are fetched independently, merged, sorted by
        creation time (newest first) and only then truncated to ``limit``.
        """
        try:
            role = BarterRole(role)
        except ValueError:
            raise BarterValidationError(f"Unknown barter role: {role}")
        if limit is None:
            limit = settings.barter_list_default_limit
        if limit <= 0:
            raise BarterValidationError("limit must be positive")
        limit = min(limit, self.max_limit)

        if role == BarterRole.RECEIVED:
            received = await self.repository.list_by_owner(user_id, limit)
            return [UserBarter(b, BarterRole.RECEIVED) for b in received]
        if role == BarterRole.SENT:
            sent = await self.repository.list_by_requester(user_id, limit)
            return [UserBarter(b, BarterRole.SENT) for b in sent]

        # Each side needs at most `limit` rows for the merged top `limit` to be exact
        received = await self.repository.list_by_owner(user_id, limit)
        sent = await self.repository.list_by_requester(user_id, limit)
        merged = [UserBarter(b, BarterRole.RECEIVED) for b in received] + [
            UserBarter(b, BarterRole.SENT) for b in sent
        ]
        merged.sort(key=_created_at, reverse=True)
        return merged[:limit]


def _created_at(entry: UserBarter):
    return entry.barter.created_at
