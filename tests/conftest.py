"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import Generator
from dataclasses import asdict
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import Any
from uuid import uuid4

import pytest

from hrgraph.auth.passwords import PasswordHasher
from hrgraph.auth.tokens import TokenIssuer
from hrgraph.config import get_settings
from hrgraph.domain import (
    Account,
    Employee,
    EmployeeFilter,
    Gender,
    NewAccount,
    NewEmployee,
)
from hrgraph.repositories.base import DuplicateKeyError
from hrgraph.services import Services
from hrgraph.services.auth import AuthService
from hrgraph.services.employees import EmployeeService
from hrgraph.storage.base import UploadError, UploadSink

TEST_SECRET = "test-secret-key-for-testing-only"

# Cheap KDF so the suite stays fast; production uses scrypt
FAST_HASH_METHOD = "pbkdf2:sha256:1000"


class InMemoryAccountRepository:
    """Account repository backed by a dict, enforcing the same unique keys as the tables."""

    def __init__(self) -> None:
        self.rows: dict[str, Account] = {}

    async def find_by_username_or_email(
        self, username: str | None = None, email: str | None = None
    ) -> Account | None:
        for account in self.rows.values():
            if (username and account.username == username) or (email and account.email == email):
                return account
        return None

    async def insert(self, account: NewAccount) -> Account:
        for existing in self.rows.values():
            if existing.username == account.username:
                raise DuplicateKeyError("username")
            if existing.email == account.email:
                raise DuplicateKeyError("email")
        stored = Account(id=str(uuid4()), **asdict(account))
        self.rows[stored.id] = stored
        return stored


class InMemoryEmployeeRepository:
    """Employee repository backed by a dict."""

    def __init__(self) -> None:
        self.rows: dict[str, Employee] = {}

    async def find_by_id(self, employee_id: str) -> Employee | None:
        return self.rows.get(employee_id)

    async def find_by_email(self, email: str, exclude_id: str | None = None) -> Employee | None:
        for employee in self.rows.values():
            if employee.email == email and employee.id != exclude_id:
                return employee
        return None

    async def find_many(self, employee_filter: EmployeeFilter | None = None) -> list[Employee]:
        matches = [
            e for e in self.rows.values() if employee_filter is None or employee_filter.matches(e)
        ]
        return sorted(matches, key=lambda e: e.created_at, reverse=True)

    async def insert(self, employee: NewEmployee) -> Employee:
        if any(e.email == employee.email for e in self.rows.values()):
            raise DuplicateKeyError("email")
        stored = Employee(id=str(uuid4()), **asdict(employee))
        self.rows[stored.id] = stored
        return stored

    async def update(
        self, employee_id: str, changes: dict[str, Any], updated_at: datetime
    ) -> Employee | None:
        stored = self.rows.get(employee_id)
        if stored is None:
            return None
        email = changes.get("email", stored.email)
        if any(e.email == email and e.id != employee_id for e in self.rows.values()):
            raise DuplicateKeyError("email")
        self.rows[employee_id] = stored.merged(changes, updated_at)
        return self.rows[employee_id]

    async def delete(self, employee_id: str) -> bool:
        return self.rows.pop(employee_id, None) is not None


class FakeUploadSink(UploadSink):
    """Records uploads and hands back predictable URLs."""

    def __init__(self, fail_with: str | None = None) -> None:
        self.fail_with = fail_with
        self.uploads: list[tuple[str, str]] = []
        self.closed = False

    async def upload(self, payload: str, folder: str) -> str:
        if self.fail_with:
            raise UploadError(f"Image upload failed: {self.fail_with}")
        self.uploads.append((payload, folder))
        return f"https://images.test/{folder}/photo-{len(self.uploads)}.png"

    async def aclose(self) -> None:
        self.closed = True


def make_employee(
    repo: InMemoryEmployeeRepository,
    *,
    created_at: datetime | None = None,
    **overrides: Any,
) -> Employee:
    """Store an employee directly in the repository, bypassing validation."""
    created = created_at or datetime.now(UTC)
    values: dict[str, Any] = {
        "id": str(uuid4()),
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": f"{uuid4().hex[:8]}@company.com",
        "gender": Gender.FEMALE,
        "designation": "Engineer",
        "salary": Decimal("5000"),
        "date_of_joining": date(2024, 1, 15),
        "department": "Research",
        "photo_url": "",
        "created_at": created,
        "updated_at": created,
    }
    values.update(overrides)
    employee = Employee(**values)
    repo.rows[employee.id] = employee
    return employee


@pytest.fixture
def account_repo() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def employee_repo() -> InMemoryEmployeeRepository:
    return InMemoryEmployeeRepository()


@pytest.fixture
def upload_sink() -> FakeUploadSink:
    return FakeUploadSink()


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(method=FAST_HASH_METHOD)


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def auth_service(
    account_repo: InMemoryAccountRepository, hasher: PasswordHasher, token_issuer: TokenIssuer
) -> AuthService:
    return AuthService(accounts=account_repo, hasher=hasher, tokens=token_issuer)


@pytest.fixture
def employee_service(
    employee_repo: InMemoryEmployeeRepository, upload_sink: FakeUploadSink
) -> EmployeeService:
    return EmployeeService(employee_repo, uploads=upload_sink)


@pytest.fixture
def services(auth_service: AuthService, employee_service: EmployeeService) -> Services:
    return Services(auth=auth_service, employees=employee_service)


@pytest.fixture
def employee_factory(employee_repo: InMemoryEmployeeRepository):
    """Store employees straight into the in-memory repository."""

    def factory(**overrides: Any) -> Employee:
        return make_employee(employee_repo, **overrides)

    return factory


@pytest.fixture
def seeded_employees(employee_repo: InMemoryEmployeeRepository) -> list[Employee]:
    """Three employees created one minute apart, oldest first."""
    base = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)
    return [
        make_employee(
            employee_repo,
            first_name="Grace",
            email="grace@company.com",
            designation="Senior Engineer",
            department="Platform",
            created_at=base,
        ),
        make_employee(
            employee_repo,
            first_name="Linus",
            email="linus@company.com",
            designation="Account Manager",
            department="Sales",
            created_at=base + timedelta(minutes=1),
        ),
        make_employee(
            employee_repo,
            first_name="Barbara",
            email="barbara@company.com",
            designation="Designer",
            department="Marketing",
            created_at=base + timedelta(minutes=2),
        ),
    ]


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    get_settings.cache_clear()
    yield
    os.environ.clear()
    os.environ.update(original_env)
    get_settings.cache_clear()
