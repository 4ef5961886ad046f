"""
One-time codes used by the signup and password reset flows
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import String, DateTime, Index, func
from sqlalchemy.orm import Mapped, mapped_column

from hms.models.base import Base, IntegerIDMixin


class VerificationType(str, Enum):
    """Purpose of a one-time code."""
    VERIFICATION = "verification"
    RESET = "reset"


class UserVerification(Base, IntegerIDMixin):
    """
    A one-time code sent to an email address.

    Codes are valid until ``expires_at`` and are deleted once consumed.
    """

    __tablename__ = "user_verification"
    __table_args__ = (
        Index("ix_user_verification_lookup", "email", "code", "type"),
        {"schema": "public"},
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    code: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
    )

    type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
    )

    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the code is past its expiry."""
        now = now or datetime.now(timezone.utc)
        return self.expires_at <= now

    def __repr__(self) -> str:
        return f"<UserVerification(email='{self.email}', type='{self.type}')>"
