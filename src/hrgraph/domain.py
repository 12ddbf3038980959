"""
Immutable entity snapshots and the value types passed between layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Final


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


# Marks a field that was not supplied at all (distinct from None or "")
UNSET: Final[Any] = object()


# Accounts


@dataclass(frozen=True)
class NewAccount:
    username: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Account:
    id: str
    username: str
    email: str
    password_hash: str = field(repr=False)
    created_at: datetime
    updated_at: datetime

    def to_public(self) -> PublicAccount:
        return PublicAccount(
            id=self.id,
            username=self.username,
            email=self.email,
            created_at=self.created_at,
        )


@dataclass(frozen=True)
class PublicAccount:
    """Account view that is safe to hand to callers."""

    id: str
    username: str
    email: str
    created_at: datetime


# Employees


@dataclass(frozen=True)
class NewEmployee:
    first_name: str
    last_name: str
    email: str
    gender: Gender | None
    designation: str
    salary: Decimal
    date_of_joining: date
    department: str
    photo_url: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Employee:
    id: str
    first_name: str
    last_name: str
    email: str
    gender: Gender | None
    designation: str
    salary: Decimal
    date_of_joining: date
    department: str
    photo_url: str
    created_at: datetime
    updated_at: datetime

    def merged(self, changes: dict[str, Any], updated_at: datetime) -> Employee:
        """Return a new snapshot with ``changes`` applied and ``updated_at`` refreshed."""
        return replace(self, **changes, updated_at=updated_at)


@dataclass(frozen=True)
class EmployeeInput:
    """Raw create-employee arguments as received from the caller."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    gender: str | None = None
    designation: str | None = None
    salary: Any = None
    date_of_joining: Any = None
    department: str | None = None
    photo: str | None = None


@dataclass(frozen=True)
class EmployeePatch:
    """Raw update-employee arguments; a field left as UNSET was not supplied."""

    first_name: Any = UNSET
    last_name: Any = UNSET
    email: Any = UNSET
    gender: Any = UNSET
    designation: Any = UNSET
    salary: Any = UNSET
    date_of_joining: Any = UNSET
    department: Any = UNSET
    photo: Any = UNSET

    def supplied(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}


# Search filters


def _contains(haystack: str, needle: str) -> bool:
    return needle.casefold() in haystack.casefold()


@dataclass(frozen=True)
class ByDesignation:
    designation: str

    def matches(self, employee: Employee) -> bool:
        return _contains(employee.designation, self.designation)


@dataclass(frozen=True)
class ByDepartment:
    department: str

    def matches(self, employee: Employee) -> bool:
        return _contains(employee.department, self.department)


@dataclass(frozen=True)
class ByEither:
    """Union of a designation match and a department match."""

    designation: str
    department: str

    def matches(self, employee: Employee) -> bool:
        return _contains(employee.designation, self.designation) or _contains(
            employee.department, self.department
        )


EmployeeFilter = ByDesignation | ByDepartment | ByEither


def build_employee_filter(
    designation: str | None = None, department: str | None = None
) -> EmployeeFilter | None:
    """Pick the filter variant for the supplied terms; None when neither is given."""
    if designation and department:
        return ByEither(designation=designation, department=department)
    if designation:
        return ByDesignation(designation=designation)
    if department:
        return ByDepartment(department=department)
    return None
