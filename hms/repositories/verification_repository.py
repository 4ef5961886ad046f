"""
Repository for one-time verification and reset codes.
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import select, delete, and_
from sqlalchemy.ext.asyncio import AsyncSession

from hms.models.verification import UserVerification, VerificationType
from hms.repositories.base import BaseRepository


class VerificationRepository(BaseRepository[UserVerification]):
    """Stores, looks up and consumes one-time codes."""

    def __init__(self, session: AsyncSession):
        """Initialize with UserVerification model."""
        super().__init__(UserVerification, session)

    async def add_code(
        self,
        email: str,
        code: str,
        type: VerificationType,
        ttl: timedelta,
    ) -> UserVerification:
        """
        Store a new code.

        Args:
            email: Recipient email
            code: One-time code
            type: Purpose of the code
            ttl: How long the code stays valid

        Returns:
            Stored verification record
        """
        return await self.create({
            "email": email.lower(),
            "code": code,
            "type": type.value,
            "expires_at": datetime.now(timezone.utc) + ttl,
        })

    async def find_valid(
        self,
        email: str,
        code: str,
        type: VerificationType,
    ) -> UserVerification | None:
        """
        Find an unexpired code.

        Args:
            email: Recipient email
            code: Code supplied by the user
            type: Purpose of the code

        Returns:
            Matching record or None if missing or expired
        """
        query = (
            select(UserVerification)
            .where(
                and_(
                    UserVerification.email == email.lower(),
                    UserVerification.code == code.upper(),
                    UserVerification.type == type.value,
                    UserVerification.expires_at > datetime.now(timezone.utc),
                )
            )
            .order_by(UserVerification.created_at.desc())
            .limit(1)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def consume(
        self,
        email: str,
        code: str,
        type: VerificationType,
    ) -> int:
        """
        Delete a code once it has been used.

        Returns:
            Number of deleted records
        """
        query = delete(UserVerification).where(
            and_(
                UserVerification.email == email.lower(),
                UserVerification.code == code.upper(),
                UserVerification.type == type.value,
            )
        )
        result = await self.session.execute(query)
        await self.session.flush()
        return result.rowcount

    async def purge_expired(self) -> int:
        """
        Delete every expired code.

        Returns:
            Number of deleted records
        """
        query = delete(UserVerification).where(
            UserVerification.expires_at <= datetime.now(timezone.utc)
        )
        result = await self.session.execute(query)
        await self.session.flush()
        return result.rowcount
