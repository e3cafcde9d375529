"""Event database model."""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Numeric, String
from sqlalchemy.orm import relationship

from betledger.database.base import Base
from betledger.models.base import TimestampMixin, UUIDMixin


class Event(Base, UUIDMixin, TimestampMixin):
    """Sports fixture with fixed three-way odds."""

    __tablename__ = "events"

    name = Column(String(200), nullable=False)

    # Odds are fixed at creation
    odds_home_win = Column(Numeric(10, 3), nullable=False)
    odds_draw = Column(Numeric(10, 3), nullable=False)
    odds_away_win = Column(Numeric(10, 3), nullable=False)

    # Lifecycle
    status = Column(String(10), nullable=False, default="open")
    final_result = Column(String(10), nullable=True)
    closed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    bets = relationship(
        "Bet",
        back_populates="event",
        lazy="raise",
        passive_deletes=True,
    )

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "status IN ('open', 'closed')",
            name="valid_event_status",
        ),
        CheckConstraint(
            "final_result IS NULL OR final_result IN ('home_win', 'draw', 'away_win')",
            name="valid_final_result",
        ),
        CheckConstraint(
            "odds_home_win > 1 AND odds_draw > 1 AND odds_away_win > 1",
            name="valid_odds",
        ),
        Index("idx_events_status", "status"),
    )

    @property
    def odds(self) -> dict[str, Decimal]:
        return {
            "home_win": self.odds_home_win,
            "draw": self.odds_draw,
            "away_win": self.odds_away_win,
        }

    def odds_for(self, option: str) -> Decimal:
        """Current odds for an outcome key."""
        return self.odds[option]

    @property
    def is_open(self) -> bool:
        return self.status == "open"

    def __repr__(self) -> str:
        return f"<Event {self.name[:50]} ({self.status})>"
