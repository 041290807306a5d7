from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base
from app.services.ledger import ItemSnapshot, Negotiation, OfferedItem, load_history


class BarterOffer(Base):
    __tablename__ = "barter_offers"

    requester_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    # Target listing: live reference plus the snapshot the requester saw
    original_item_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    original_item: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), default="pending", server_default="pending"
    )
    negotiations: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    conversation_id: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # Compare-and-swap guard, bumped on every save
    version: Mapped[int] = mapped_column(Integer, default=1, server_default="1")

    accepted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    accepted_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejected_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_by: Mapped[str | None] = mapped_column(String(128), nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_by: Mapped[str | None] = mapped_column(String(128), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'counter_offered', 'accepted', "
            "'rejected', 'cancelled', 'completed')",
            name="status",
        ),
        Index("ix_barter_offers_owner_created", "owner_id", "created_at"),
        Index("ix_barter_offers_requester_created", "requester_id", "created_at"),
    )

    @property
    def history(self) -> tuple[Negotiation, ...]:
        return load_history(self.negotiations)

    @property
    def current_round(self) -> Negotiation | None:
        history = self.history
        return history[-1] if history else None

    @property
    def offered_items(self) -> tuple[OfferedItem, ...]:
        current = self.current_round
        return current.items if current else ()

    @property
    def item_snapshot(self) -> ItemSnapshot:
        return ItemSnapshot.model_validate(self.original_item or {})
