"""Async SQLAlchemy implementations of the repositories."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.connection import get_async_session
from ..dbmodels import Accounts, Employees
from ..domain import (
    Account,
    ByDepartment,
    ByDesignation,
    ByEither,
    Employee,
    EmployeeFilter,
    Gender,
    NewAccount,
    NewEmployee,
)
from ..logging import get_logger
from .base import DuplicateKeyError

logger = get_logger(__name__)

SessionScope = Callable[[], AbstractAsyncContextManager[AsyncSession]]

# Unique constraint name -> (qualified column, domain field), see hrgraph.dbmodels.
# PostgreSQL reports the constraint name, SQLite the qualified column.
_UNIQUE_CONSTRAINTS = {
    "accounts_username_key": ("accounts.username", "username"),
    "accounts_email_key": ("accounts.email", "email"),
    "employees_email_key": ("employees.email", "email"),
}


def _duplicate_key_error(error: IntegrityError) -> DuplicateKeyError | None:
    detail = str(error.orig)
    for constraint, (column, field) in _UNIQUE_CONSTRAINTS.items():
        if constraint in detail or column in detail:
            return DuplicateKeyError(field)
    return None


def _parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contains(column, term: str) -> ColumnElement[bool]:
    return column.ilike(f"%{_escape_like(term)}%", escape="\\")


def build_search_clause(employee_filter: EmployeeFilter) -> ColumnElement[bool]:
    """Translate a filter variant into a case-insensitive substring predicate."""
    if isinstance(employee_filter, ByDesignation):
        return _contains(Employees.designation, employee_filter.designation)
    if isinstance(employee_filter, ByDepartment):
        return _contains(Employees.department, employee_filter.department)
    if isinstance(employee_filter, ByEither):
        return or_(
            _contains(Employees.designation, employee_filter.designation),
            _contains(Employees.department, employee_filter.department),
        )
    raise TypeError(f"Unsupported employee filter: {employee_filter!r}")


def employee_column_values(changes: dict[str, Any]) -> dict[str, Any]:
    """Map domain field values onto ``employees`` column values."""
    values = dict(changes)
    if "gender" in values:
        gender = values["gender"]
        values["gender"] = gender.value if gender else None
    return values


def _to_account(row: Accounts) -> Account:
    return Account(
        id=str(row.id),
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _to_employee(row: Employees) -> Employee:
    return Employee(
        id=str(row.id),
        first_name=row.first_name,
        last_name=row.last_name,
        email=row.email,
        gender=Gender(row.gender) if row.gender else None,
        designation=row.designation,
        salary=Decimal(row.salary),
        date_of_joining=row.date_of_joining,
        department=row.department,
        photo_url=row.photo_url or "",
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


async def _flush(session: AsyncSession) -> None:
    try:
        await session.flush()
    except IntegrityError as e:
        duplicate = _duplicate_key_error(e)
        if duplicate is None:
            raise
        raise duplicate from e


class SqlAccountRepository:
    """Accounts stored in the ``accounts`` table."""

    def __init__(self, session_scope: SessionScope = get_async_session):
        self._session_scope = session_scope

    async def find_by_username_or_email(
        self, username: str | None = None, email: str | None = None
    ) -> Account | None:
        conditions = []
        if username:
            conditions.append(Accounts.username == username)
        if email:
            conditions.append(Accounts.email == email)
        if not conditions:
            return None

        async with self._session_scope() as session:
            stmt = select(Accounts).where(or_(*conditions)).limit(1)
            result = await session.execute(stmt)
            row = result.scalar_one_or_none()
            return _to_account(row) if row else None

    async def insert(self, account: NewAccount) -> Account:
        async with self._session_scope() as session:
            row = Accounts(
                username=account.username,
                email=account.email,
                password_hash=account.password_hash,
                created_at=account.created_at,
                updated_at=account.updated_at,
            )
            session.add(row)
            await _flush(session)
            await session.refresh(row)
            return _to_account(row)


class SqlEmployeeRepository:
    """Employees stored in the ``employees`` table."""

    def __init__(self, session_scope: SessionScope = get_async_session):
        self._session_scope = session_scope

    async def find_by_id(self, employee_id: str) -> Employee | None:
        uuid = _parse_uuid(employee_id)
        if uuid is None:
            return None

        async with self._session_scope() as session:
            row = await session.get(Employees, uuid)
            return _to_employee(row) if row else None

    async def find_by_email(self, email: str, exclude_id: str | None = None) -> Employee | None:
        async with self._session_scope() as session:
            stmt = select(Employees).where(Employees.email == email)
            if exclude_id is not None:
                excluded = _parse_uuid(exclude_id)
                if excluded is not None:
                    stmt = stmt.where(Employees.id != excluded)
            result = await session.execute(stmt.limit(1))
            row = result.scalar_one_or_none()
            return _to_employee(row) if row else None

    async def find_many(self, employee_filter: EmployeeFilter | None = None) -> list[Employee]:
        async with self._session_scope() as session:
            stmt = select(Employees)
            if employee_filter is not None:
                stmt = stmt.where(build_search_clause(employee_filter))
            stmt = stmt.order_by(Employees.created_at.desc())

            result = await session.execute(stmt)
            return [_to_employee(row) for row in result.scalars().all()]

    async def insert(self, employee: NewEmployee) -> Employee:
        async with self._session_scope() as session:
            row = Employees(
                **employee_column_values(
                    {
                        "first_name": employee.first_name,
                        "last_name": employee.last_name,
                        "email": employee.email,
                        "gender": employee.gender,
                        "designation": employee.designation,
                        "salary": employee.salary,
                        "date_of_joining": employee.date_of_joining,
                        "department": employee.department,
                        "photo_url": employee.photo_url,
                        "created_at": employee.created_at,
                        "updated_at": employee.updated_at,
                    }
                )
            )
            session.add(row)
            await _flush(session)
            # Return what the column types actually stored
            await session.refresh(row)
            return _to_employee(row)

    async def update(
        self, employee_id: str, changes: dict[str, Any], updated_at: datetime
    ) -> Employee | None:
        uuid = _parse_uuid(employee_id)
        if uuid is None:
            return None

        stmt = (
            update(Employees)
            .where(Employees.id == uuid)
            .values(**employee_column_values(changes), updated_at=updated_at)
            .returning(Employees)
        )

        async with self._session_scope() as session:
            try:
                result = await session.execute(stmt)
            except IntegrityError as e:
                duplicate = _duplicate_key_error(e)
                if duplicate is None:
                    raise
                raise duplicate from e
            row = result.scalar_one_or_none()
            return _to_employee(row) if row else None

    async def delete(self, employee_id: str) -> bool:
        uuid = _parse_uuid(employee_id)
        if uuid is None:
            return False

        async with self._session_scope() as session:
            result = await session.execute(delete(Employees).where(Employees.id == uuid))
            deleted = (result.rowcount or 0) > 0
            logger.debug("Employee row delete executed", employee_id=employee_id, deleted=deleted)
            return deleted
