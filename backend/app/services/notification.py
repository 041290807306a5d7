"""Fire-and-forget notifications for barter events.

Every event is stored as a ``Notification`` row for the recipient and,
when a webhook is configured, pushed over HTTP (httpx). Exceptions are
caught and logged, so notifications never break the main flow.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Protocol

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from tenacity import retry, stop_after_attempt, wait_exponential

from app.core.config import settings
from app.models.notification import Notification

logger = logging.getLogger(__name__)

NOTIFICATION_TYPE = "barter_update"

_STATUS_TEMPLATES: dict[str, tuple[str, str]] = {
    "pending": (
        "New barter offer",
        "You received a barter offer for {item_name}.",
    ),
    "counter_offered": (
        "Counter-offer received",
        "A counter-offer was made in the barter for {item_name}.",
    ),
    "accepted": (
        "Barter accepted",
        "The barter for {item_name} has been accepted.",
    ),
    "rejected": (
        "Barter rejected",
        "The barter for {item_name} has been rejected.",
    ),
    "cancelled": (
        "Barter cancelled",
        'The barter for "{item_name}" has been cancelled.',
    ),
    "completed": (
        "Barter completed",
        "The barter exchange for {item_name} is complete.",
    ),
}


@dataclass(frozen=True)
class BarterEvent:
    barter_id: int
    item_id: str
    item_name: str
    status: str
    acting_user_id: str

    def as_payload(self) -> dict:
        return asdict(self)


class BarterNotifier(Protocol):
    async def notify(self, user_id: str, event: BarterEvent) -> None: ...


def render(event: BarterEvent) -> tuple[str, str]:
    """Return (title, message) for an event."""
    title, template = _STATUS_TEMPLATES.get(
        event.status, ("Barter update", "Your barter for {item_name} was updated.")
    )
    return title, template.format(item_name=event.item_name)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    reraise=True,
)
async def _post_webhook(url: str, payload: dict, timeout: float) -> None:
    """Push a notification to the configured webhook with retry."""
    async with httpx.AsyncClient(timeout=timeout) as client:
        resp = await client.post(url, json=payload)
        resp.raise_for_status()


class NotificationService:
    """Stores barter notifications and optionally pushes them to a webhook."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        webhook_url: str | None = None,
        timeout: float | None = None,
    ):
        self.session_factory = session_factory
        self.webhook_url = (
            settings.notification_webhook_url if webhook_url is None else webhook_url
        )
        self.timeout = timeout or settings.notification_timeout_seconds

    async def notify(self, user_id: str, event: BarterEvent) -> None:
        try:
            title, message = render(event)
            async with self.session_factory() as db:
                db.add(
                    Notification(
                        user_id=user_id,
                        title=title,
                        message=message,
                        type=NOTIFICATION_TYPE,
                        data=event.as_payload(),
                        is_read=False,
                    )
                )
                await db.commit()

            if self.webhook_url:
                await _post_webhook(
                    self.webhook_url,
                    {"user_id": user_id, "title": title, "message": message, **event.as_payload()},
                    self.timeout,
                )
        except Exception:
            logger.exception(
                "Failed to send barter notification for barter %s to user %s",
                event.barter_id,
                user_id,
            )
