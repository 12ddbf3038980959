"""JWT issuance for authenticated accounts."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from ..domain import Account
from ..errors import ConfigurationError

TOKEN_LIFETIME = timedelta(hours=1)


class TokenIssuer:
    """Signs and verifies self-issued access tokens."""

    def __init__(
        self,
        secret_key: str | None,
        algorithm: str = "HS256",
        lifetime: timedelta = TOKEN_LIFETIME,
    ):
        if not secret_key:
            raise ConfigurationError("JWT secret is not configured (set HRGRAPH_JWT_SECRET).")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime

    def issue(self, account: Account, now: datetime | None = None) -> str:
        """Issue a token embedding the account's id, username and email."""
        now = now or datetime.now(UTC)
        payload = {
            "sub": account.id,
            "id": account.id,
            "username": account.username,
            "email": account.email,
            "iat": now,
            "exp": now + self.lifetime,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """Return the verified claims.

        Raises:
            jwt.InvalidTokenError: If the signature, expiry or claims are invalid
        """
        return jwt.decode(
            token,
            self.secret_key,
            algorithms=[self.algorithm],
            options={"require": ["sub", "exp", "iat"], "verify_exp": True, "verify_iat": True},
        )
