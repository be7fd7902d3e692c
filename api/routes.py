"""
Account API routes — register, login, and the password-reset flow.

No route prefix; every response body carries a ``message`` key.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from api.dependencies import (
    get_hasher,
    get_token_issuer,
    get_user_store,
    get_verification_service,
)
from auth.exceptions import BadRequest
from auth.password import PasswordHasher
from auth.tokens import TokenIssuer
from auth.verification import VerificationService
from database.store import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["accounts"])

BANNER = "Welcome to the password reset flow API"


# ── Request schemas ────────────────────────────────────────────────────
# Fields are optional here so that missing values reach the handler and
# get the flow's own 400 message instead of a schema error.


class RegisterRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password1: Optional[str] = None
    password2: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class SendMailRequest(BaseModel):
    email: Optional[str] = None


class VerifyRequest(BaseModel):
    email: Optional[str] = None
    vercode: Optional[Union[int, str]] = None


class ChangePasswordRequest(BaseModel):
    password1: Optional[str] = None
    password2: Optional[str] = None


# ── Endpoints ──────────────────────────────────────────────────────────


@router.get("/", response_class=PlainTextResponse)
async def index() -> str:
    return BANNER


@router.post("/register")
async def register(
    req: RegisterRequest,
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_hasher),
) -> Dict[str, Any]:
    """Register a new user. Duplicate emails are not rejected."""
    if not (req.username and req.email and req.password1 and req.password2):
        raise BadRequest("All fields are required")
    if req.password1 != req.password2:
        raise BadRequest("Passwords do not match")

    user = await store.create(
        username=req.username,
        email=req.email,
        password_hash=hasher.hash(req.password1),
    )
    logger.info("Registered user %s (%s)", user.username, user.user_id)
    return {"message": "User registered successfully"}


@router.post("/login")
async def login(
    req: LoginRequest,
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_hasher),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """Login with email + password.

    Unknown email and wrong password are reported with 200 and a message.
    """
    if not (req.email and req.password):
        raise BadRequest("Username and password are required")

    user = await store.find_by_email(req.email)
    if user is None:
        logger.info("Login for unknown email %s", req.email)
        return {"message": "User not found"}

    if not hasher.verify(req.password, user.password_hash):
        logger.info("Login with wrong password for %s", req.email)
        return {"message": "Password Incorrect"}

    logger.info("Login: %s (%s)", user.username, user.user_id)
    return {
        "message": "Successfully Logged in",
        "token": tokens.issue(user),
        "name": user.username,
    }


@router.post("/sendmail")
async def send_mail(
    req: SendMailRequest,
    verification: VerificationService = Depends(get_verification_service),
) -> Dict[str, Any]:
    """Issue a verification code and email it."""
    if not req.email:
        raise BadRequest("Email is required")
    await verification.issue(req.email)
    return {"message": "Email sent"}


@router.post("/verify")
async def verify(
    req: VerifyRequest,
    verification: VerificationService = Depends(get_verification_service),
) -> Dict[str, Any]:
    """Check a submitted code; the full record is echoed back on success."""
    user = await verification.verify(req.email, req.vercode)
    return {"message": "Verification successful", "user": user.to_dict()}


@router.post("/changepassword/{email}")
async def change_password(
    email: str,
    req: ChangePasswordRequest,
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_hasher),
) -> Dict[str, Any]:
    """Replace the password for ``email``.

    Succeeds even when no record matches.
    """
    if not (email and req.password1 and req.password2):
        raise BadRequest("Email and passwords are required")
    if req.password1 != req.password2:
        raise BadRequest("Passwords do not match")

    updated = await store.set_password_hash(email, hasher.hash(req.password1))
    if updated:
        logger.info("Password updated for %s", email)
    else:
        logger.warning("Password change for %s matched no record", email)
    return {"message": "Password updated successfully"}
