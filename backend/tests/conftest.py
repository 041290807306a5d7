from collections.abc import AsyncGenerator, Callable
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.rate_limit import limiter
from app.main import app
from app.models.barter import BarterOffer
from app.services.barter import BarterService
from app.services.errors import ConflictError, NotFoundError
from app.services.ledger import NegotiationType, append_entry, build_entry
from app.services.notification import BarterEvent

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


class InMemoryBarterRepository:
    """BarterRepository backed by a dict, with the same CAS rules as the SQL one."""

    def __init__(self) -> None:
        self.rows: dict[int, BarterOffer] = {}
        self._next_id = 1

    async def load(self, barter_id: int) -> BarterOffer | None:
        return self.rows.get(barter_id)

    async def add(self, barter: BarterOffer) -> BarterOffer:
        barter.id = self._next_id
        self._next_id += 1
        self.rows[barter.id] = barter
        return barter

    async def save(self, barter_id: int, changes: dict, expected_version: int) -> BarterOffer:
        barter = self.rows.get(barter_id)
        if barter is None:
            raise NotFoundError(barter_id)
        if barter.version != expected_version:
            raise ConflictError(barter_id, expected_version)
        for key, value in changes.items():
            setattr(barter, key, value)
        barter.version = expected_version + 1
        return barter

    def _newest_first(self, rows) -> list[BarterOffer]:
        return sorted(rows, key=lambda b: b.created_at, reverse=True)

    async def list_by_owner(self, user_id: str, limit: int) -> list[BarterOffer]:
        return self._newest_first(b for b in self.rows.values() if b.owner_id == user_id)[:limit]

    async def list_by_requester(self, user_id: str, limit: int) -> list[BarterOffer]:
        return self._newest_first(
            b for b in self.rows.values() if b.requester_id == user_id
        )[:limit]


class RecordingNotifier:
    def __init__(self, fail: bool = False) -> None:
        self.sent: list[tuple[str, BarterEvent]] = []
        self.fail = fail

    async def notify(self, user_id: str, event: BarterEvent) -> None:
        self.sent.append((user_id, event))
        if self.fail:
            raise RuntimeError("notification backend down")


@pytest.fixture
def repo() -> InMemoryBarterRepository:
    return InMemoryBarterRepository()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def service(repo: InMemoryBarterRepository, notifier: RecordingNotifier) -> BarterService:
    return BarterService(repo, notifier)


@pytest.fixture
def make_barter(repo: InMemoryBarterRepository) -> Callable[..., BarterOffer]:
    """Insert a barter directly into the in-memory repository."""

    def _make(
        requester_id: str = "alice",
        owner_id: str = "bob",
        status: str = "pending",
        minutes: int = 0,
        value: float = 100,
    ) -> BarterOffer:
        created = BASE_TIME + timedelta(minutes=minutes)
        entry = build_entry(
            from_user_id=requester_id,
            to_user_id=owner_id,
            items=[{"name": "Guitar", "estimated_value": value}],
            message="",
            entry_type=NegotiationType.INITIAL_OFFER,
            status="pending",
            timestamp=created,
        )
        barter = BarterOffer(
            requester_id=requester_id,
            owner_id=owner_id,
            original_item_id="item-1",
            original_item={"name": "Bike", "image": None},
            status=status,
            negotiations=append_entry([], entry),
            message="",
            version=1,
            created_at=created,
            updated_at=created,
        )
        barter.id = repo._next_id
        repo._next_id += 1
        repo.rows[barter.id] = barter
        return barter

    return _make


@pytest.fixture(autouse=True)
def _disable_rate_limit():
    limiter.enabled = False
    yield
    limiter.enabled = True


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client wired to the FastAPI app (no real server)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
