"""
Password-reset verification codes.

A user record is in one of two states:

  • ``NoCodePending`` — no code has been requested, or the last one was used.
  • ``CodePending(code)`` — a 4-digit code was issued and not yet matched.

``issue`` moves a record into ``CodePending`` (replacing any earlier code),
``verify`` moves it back to ``NoCodePending`` on the first match.  A wrong
guess leaves the pending code alone; there is no attempt counter and no
expiry.
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Union

from auth.exceptions import BadRequest, InvalidCode, MailDispatchError, UserNotFound
from database.models import User
from database.store import UserStore

logger = logging.getLogger(__name__)

CODE_MIN = 1000
CODE_MAX = 9999


@dataclass(frozen=True)
class NoCodePending:
    pass


@dataclass(frozen=True)
class CodePending:
    code: int


VerificationState = Union[NoCodePending, CodePending]


class Mailer(Protocol):
    async def send(self, to_address: str, code: int) -> None: ...


def generate_code() -> int:
    """Uniformly random integer in [CODE_MIN, CODE_MAX]."""
    return CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1)


def pending_state(user: User) -> VerificationState:
    if user.verification_code is None:
        return NoCodePending()
    return CodePending(code=user.verification_code)


class VerificationService:
    def __init__(self, store: UserStore, mailer: Mailer) -> None:
        self.store = store
        self.mailer = mailer

    async def issue(self, email: str) -> int:
        """
        Generate a code for ``email``, store it and mail it.

        If the mail relay refuses the message the previous state is put
        back before ``MailDispatchError`` propagates.
        """
        user = await self.store.find_by_email(email)
        if user is None:
            raise UserNotFound(email)

        previous = pending_state(user)
        code = generate_code()
        await self.store.set_verification_code(email, code)
        logger.info("Issued verification code for %s", email)
        logger.debug("Verification code for %s: %d", email, code)

        try:
            await self.mailer.send(email, code)
        except MailDispatchError:
            restored: Optional[int] = (
                previous.code if isinstance(previous, CodePending) else None
            )
            await self.store.set_verification_code(email, restored)
            logger.warning("Mail dispatch to %s failed; verification code withdrawn", email)
            raise

        return code

    async def verify(self, email: Optional[str], submitted: Any) -> User:
        """
        Compare ``submitted`` with the pending code for ``email``.

        Values are compared as text, so ``1234`` and ``"1234"`` match
        while ``" 1234"`` does not.
        Returns the user record on success.
        """
        if not email or not submitted:
            raise BadRequest("Email and verification code are required")

        user = await self.store.find_by_email(email)
        if user is None:
            logger.info("Verification for unknown email %s", email)
            raise UserNotFound(email)

        state = pending_state(user)
        if isinstance(state, NoCodePending):
            logger.info("Verification for %s with no pending code", email)
            raise InvalidCode()

        if str(state.code) != str(submitted):
            logger.info("Invalid verification code for %s", email)
            raise InvalidCode()

        await self.store.clear_verification_code(email)
        logger.info("Verification successful for %s", email)
        return user
