"""Unit tests for password hashing."""

import pytest

from hrgraph.auth.passwords import PasswordHasher


class TestPasswordHasher:
    @pytest.mark.asyncio
    async def test_default_method_is_scrypt(self):
        password_hash = await PasswordHasher().hash("s3cret!")

        assert password_hash.startswith("scrypt:")
        assert await PasswordHasher().verify(password_hash, "s3cret!")

    @pytest.mark.asyncio
    async def test_hashes_are_salted(self, hasher):
        first = await hasher.hash("s3cret!")
        second = await hasher.hash("s3cret!")

        assert first != second
        assert await hasher.verify(first, "s3cret!")
        assert await hasher.verify(second, "s3cret!")

    @pytest.mark.asyncio
    async def test_wrong_password(self, hasher):
        password_hash = await hasher.hash("s3cret!")

        assert not await hasher.verify(password_hash, "S3cret!")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("stored", ["CHANGE_ME", "", "unknown$salt$digest"])
    async def test_unusable_stored_hash(self, hasher, stored):
        assert not await hasher.verify(stored, "s3cret!")
