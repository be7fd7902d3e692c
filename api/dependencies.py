"""
FastAPI dependencies (shared across routes).

Long-lived components are built once in ``create_app`` and parked on
``app.state``; per-request objects (store, verification service) wrap the
request's DB session.
"""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auth.password import PasswordHasher
from auth.tokens import TokenIssuer
from auth.verification import VerificationService
from database.session import get_db_session
from database.store import UserStore


def get_user_store(session: AsyncSession = Depends(get_db_session)) -> UserStore:
    return UserStore(session)


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_verification_service(
    request: Request,
    store: UserStore = Depends(get_user_store),
) -> VerificationService:
    return VerificationService(store, request.app.state.mailer)
