"""
Session token issuing.

Tokens are HS256 JWTs signed with ``Settings.secret_key``.  No ``exp``
claim is set and there is no revocation list, so a token stays valid
for as long as the signing key does.
"""

from __future__ import annotations

from typing import Any, Dict

import jwt

from database.models import User


class TokenIssuer:
    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    def issue(self, user: User) -> str:
        """Create a signed token identifying ``user``."""
        payload = {
            "user_id": str(user.user_id),
            "email": user.email,
            "name": user.username,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify the signature and return the claims.

        Raises ``jwt.InvalidTokenError`` on a bad or tampered token.
        """
        return dict(jwt.decode(token, self._secret, algorithms=[self._algorithm]))
