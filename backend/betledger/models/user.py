"""User database model."""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, Numeric, String
from sqlalchemy.orm import relationship

from betledger.database.base import Base
from betledger.models.base import TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """Registered account with its betting balance."""

    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(10), nullable=False, default="player")

    # Only BalanceService writes this column
    balance = Column(
        Numeric(15, 2),
        nullable=False,
        default=Decimal("0.00"),
    )

    # Relationships
    bets = relationship(
        "Bet",
        back_populates="user",
        lazy="raise",
        passive_deletes=True,
    )

    # Constraints
    __table_args__ = (
        CheckConstraint("balance >= 0", name="balance_non_negative"),
        CheckConstraint("role IN ('admin', 'player')", name="valid_role"),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.role}, ${self.balance})>"
