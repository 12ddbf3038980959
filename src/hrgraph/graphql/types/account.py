"""
Account GraphQL type definitions
"""

from datetime import datetime

import strawberry

from ...domain import PublicAccount


@strawberry.type
class User:
    """Public view of an account; the password hash is never part of it."""

    id: strawberry.ID
    username: str
    email: str
    created_at: datetime

    @classmethod
    def from_domain(cls, account: PublicAccount) -> "User":
        return cls(
            id=strawberry.ID(account.id),
            username=account.username,
            email=account.email,
            created_at=account.created_at,
        )
