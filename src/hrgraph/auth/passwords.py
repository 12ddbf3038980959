"""Salted one-way password hashing."""

from __future__ import annotations

import asyncio

from werkzeug.security import check_password_hash, generate_password_hash


class PasswordHasher:
    """Hashes and checks passwords off the event loop (the KDF is CPU bound)."""

    def __init__(self, method: str = "scrypt", salt_length: int = 16):
        self.method = method
        self.salt_length = salt_length

    async def hash(self, password: str) -> str:
        return await asyncio.to_thread(
            generate_password_hash, password, method=self.method, salt_length=self.salt_length
        )

    async def verify(self, password_hash: str, password: str) -> bool:
        try:
            return await asyncio.to_thread(check_password_hash, password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted stored hashes
            return False
