"""Persistence interfaces consumed by the services."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from ..domain import Account, Employee, EmployeeFilter, NewAccount, NewEmployee


class DuplicateKeyError(Exception):
    """A storage-level unique constraint rejected a write."""

    def __init__(self, field: str):
        super().__init__(f"Duplicate value for unique field '{field}'")
        self.field = field


class AccountRepository(Protocol):
    async def find_by_username_or_email(
        self, username: str | None = None, email: str | None = None
    ) -> Account | None:
        """Return an account whose username OR email matches any supplied value."""
        ...

    async def insert(self, account: NewAccount) -> Account:
        """Persist a new account.

        Raises:
            DuplicateKeyError: If the username or email is already taken
        """
        ...


class EmployeeRepository(Protocol):
    async def find_by_id(self, employee_id: str) -> Employee | None:
        """Return the employee with this id; None also for malformed ids."""
        ...

    async def find_by_email(self, email: str, exclude_id: str | None = None) -> Employee | None: ...

    async def find_many(self, employee_filter: EmployeeFilter | None = None) -> list[Employee]:
        """Return matching employees, newest first."""
        ...

    async def insert(self, employee: NewEmployee) -> Employee:
        """Persist a new employee.

        Raises:
            DuplicateKeyError: If the email is already taken
        """
        ...

    async def update(
        self, employee_id: str, changes: dict[str, Any], updated_at: datetime
    ) -> Employee | None:
        """Set only the fields in ``changes`` plus ``updated_at`` and return the stored record.

        Fields not in ``changes`` keep whatever value is stored at write time.
        Returns None if the record no longer exists.

        Raises:
            DuplicateKeyError: If the new email is already taken
        """
        ...

    async def delete(self, employee_id: str) -> bool:
        """Remove the record; False when nothing was deleted."""
        ...
