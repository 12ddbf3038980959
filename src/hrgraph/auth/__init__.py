"""Credential primitives: password hashing and token issuance."""

from .passwords import PasswordHasher
from .tokens import TOKEN_LIFETIME, TokenIssuer

__all__ = ["PasswordHasher", "TokenIssuer", "TOKEN_LIFETIME"]
