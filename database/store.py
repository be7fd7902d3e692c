"""
UserStore — the operations the account flows run against ``users``.

Each write is independent and committed before the call returns, so a
failing commit surfaces inside the route rather than after the response
has gone out.  Writes touch a single record: the one ``find_by_email``
returns for that address.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import User

logger = logging.getLogger(__name__)


class UserStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, username: str, email: str, password_hash: str) -> User:
        """Insert a new record. The caller must have hashed the password already."""
        user = User(username=username, email=email, password_hash=password_hash)
        self.session.add(user)
        await self.session.commit()
        return user

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.email == email).order_by(User.created_at).limit(1)
        )
        return result.scalars().first()

    async def set_verification_code(self, email: str, code: Optional[int]) -> None:
        """Attach (or overwrite) the pending code; ``None`` clears it."""
        user = await self.find_by_email(email)
        if user is None:
            return
        user.verification_code = code
        await self.session.commit()

    async def clear_verification_code(self, email: str) -> None:
        await self.set_verification_code(email, None)

    async def set_password_hash(self, email: str, password_hash: str) -> bool:
        """Replace the stored hash. Returns whether a record matched."""
        user = await self.find_by_email(email)
        if user is None:
            return False
        user.password_hash = password_hash
        await self.session.commit()
        return True
