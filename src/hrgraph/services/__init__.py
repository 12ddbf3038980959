"""Operation-resolution services and their wiring."""

from __future__ import annotations

from dataclasses import dataclass

from ..auth.passwords import PasswordHasher
from ..auth.tokens import TokenIssuer
from ..config import Settings
from ..repositories.sql import SessionScope, SqlAccountRepository, SqlEmployeeRepository
from ..storage.factory import create_upload_sink
from .auth import AuthService
from .employees import EmployeeService


@dataclass(frozen=True)
class Services:
    auth: AuthService
    employees: EmployeeService

    async def aclose(self) -> None:
        await self.employees.aclose()


def build_services(settings: Settings, session_scope: SessionScope | None = None) -> Services:
    """Wire the services from settings once at startup.

    Raises:
        ConfigurationError: If the JWT secret is missing or the image host is
            only partially configured
    """
    account_repo = SqlAccountRepository(session_scope) if session_scope else SqlAccountRepository()
    employee_repo = (
        SqlEmployeeRepository(session_scope) if session_scope else SqlEmployeeRepository()
    )

    return Services(
        auth=AuthService(
            accounts=account_repo,
            hasher=PasswordHasher(),
            tokens=TokenIssuer(settings.jwt_secret, algorithm=settings.jwt_algorithm),
        ),
        employees=EmployeeService(employee_repo, uploads=create_upload_sink(settings)),
    )


__all__ = ["AuthService", "EmployeeService", "Services", "build_services"]
