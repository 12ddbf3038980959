"""Account signup, login and token verification."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import jwt

from ..auth.passwords import PasswordHasher
from ..auth.tokens import TokenIssuer
from ..domain import NewAccount, PublicAccount
from ..errors import bad_request, unauthorized
from ..logging import get_logger
from ..repositories.base import AccountRepository, DuplicateKeyError
from ..validators import is_blank, is_valid_email, normalize_email, normalize_string

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."
DUPLICATE_ACCOUNT = "User with same username or email already exists."

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


class AuthService:
    """Use cases: sign up a new account, log in, verify an issued token."""

    def __init__(
        self,
        accounts: AccountRepository,
        hasher: PasswordHasher,
        tokens: TokenIssuer,
    ):
        self._accounts = accounts
        self._hasher = hasher
        self._tokens = tokens

    async def login(
        self,
        username: str | None = None,
        email: str | None = None,
        password: str | None = None,
    ) -> str:
        """
        Authenticate by username OR email and return a signed token.

        An unknown identifier and a wrong password produce the same error so
        callers cannot tell which accounts exist.
        """
        if (is_blank(username) and is_blank(email)) or not password:
            raise bad_request("Provide username or email, and password.")

        if not is_blank(email) and not is_valid_email(email.strip()):
            raise bad_request("Invalid email format.")

        account = await self._accounts.find_by_username_or_email(
            username=None if is_blank(username) else username,
            email=None if is_blank(email) else normalize_email(email),
        )
        if account is None:
            logger.info("Login failed", reason="unknown_account")
            raise unauthorized(INVALID_CREDENTIALS)

        if not await self._hasher.verify(account.password_hash, password):
            logger.info("Login failed", reason="password_mismatch", account_id=account.id)
            raise unauthorized(INVALID_CREDENTIALS)

        token = self._tokens.issue(account)
        logger.info("Login succeeded", account_id=account.id)
        return token

    async def signup(self, username: str, email: str, password: str) -> PublicAccount:
        """Create an account and return its public view (never the hash)."""
        if is_blank(username) or is_blank(email) or not password:
            raise bad_request("username, email, and password are required.")

        clean_username = normalize_string(username)
        clean_email = normalize_email(email)

        if len(clean_username) < MIN_USERNAME_LENGTH:
            raise bad_request(f"username must be at least {MIN_USERNAME_LENGTH} characters.")
        if not is_valid_email(clean_email):
            raise bad_request("Invalid email format.")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise bad_request(f"password must be at least {MIN_PASSWORD_LENGTH} characters.")

        existing = await self._accounts.find_by_username_or_email(
            username=clean_username, email=clean_email
        )
        if existing is not None:
            raise bad_request(DUPLICATE_ACCOUNT)

        password_hash = await self._hasher.hash(password)
        now = datetime.now(UTC)

        try:
            account = await self._accounts.insert(
                NewAccount(
                    username=clean_username,
                    email=clean_email,
                    password_hash=password_hash,
                    created_at=now,
                    updated_at=now,
                )
            )
        except DuplicateKeyError as e:
            # Lost a race with a concurrent signup for the same username/email
            raise bad_request(DUPLICATE_ACCOUNT) from e

        logger.info("Account created", account_id=account.id, username=account.username)
        return account.to_public()

    def verify_token(self, token: str) -> dict[str, Any]:
        """Return the claims of a token issued by ``login``."""
        if not token:
            raise unauthorized("Invalid token.")
        try:
            return self._tokens.decode(token)
        except jwt.InvalidTokenError as e:
            logger.info("Token rejected", error=str(e))
            raise unauthorized("Invalid token.") from e
