"""Bet database model."""

from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Uuid,
)
from sqlalchemy.orm import relationship

from betledger.database.base import Base
from betledger.models.base import TimestampMixin, UUIDMixin


class Bet(Base, UUIDMixin, TimestampMixin):
    """Individual bet record."""

    __tablename__ = "bets"

    # Foreign keys
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    event_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("events.id"),
        nullable=False,
        index=True,
    )

    # Bet details
    chosen_option = Column(String(10), nullable=False)
    odds = Column(Numeric(10, 3), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)

    # Settlement
    status = Column(String(10), nullable=False, default="pending")
    winnings = Column(Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    settled_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="bets", lazy="raise")
    event = relationship("Event", back_populates="bets", lazy="raise")

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "chosen_option IN ('home_win', 'draw', 'away_win')",
            name="valid_chosen_option",
        ),
        CheckConstraint(
            "status IN ('pending', 'won', 'lost')",
            name="valid_bet_status",
        ),
        CheckConstraint("amount > 0", name="positive_amount"),
        CheckConstraint("odds > 1", name="valid_bet_odds"),
        CheckConstraint(
            "(status = 'won' AND winnings > 0) OR (status != 'won' AND winnings = 0)",
            name="winnings_iff_won",
        ),
        Index("idx_bets_event_status", "event_id", "status"),
    )

    @property
    def is_settled(self) -> bool:
        return self.status != "pending"

    def __repr__(self) -> str:
        return f"<Bet {self.chosen_option} ${self.amount} @ {self.odds} ({self.status})>"
