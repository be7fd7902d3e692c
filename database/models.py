"""
SQLAlchemy ORM models.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import Column, DateTime, Integer, String, Uuid
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    user_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Not unique: registration does not deduplicate addresses.
    email = Column(String(255), nullable=False, index=True)
    username = Column(String(128), nullable=False)
    password_hash = Column(String(255), nullable=False)
    verification_code = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": str(self.user_id),
            "username": self.username,
            "email": self.email,
            "password_hash": self.password_hash,
            "verification_code": self.verification_code,
        }
