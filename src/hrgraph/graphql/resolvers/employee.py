from __future__ import annotations

from typing import TYPE_CHECKING, Any

import strawberry

from ...domain import UNSET, EmployeeInput, EmployeePatch
from ..errors import translate_errors
from .auth import get_services

if TYPE_CHECKING:
    from ..types.employee import Employee


def _to_type(record) -> Employee:
    from ..types.employee import Employee as EmployeeType

    return EmployeeType.from_domain(record)


def _presence(value: Any) -> Any:
    """Map strawberry's "argument omitted" marker onto the domain one."""
    return UNSET if value is strawberry.UNSET else value


# Query resolvers
@translate_errors
async def resolve_all_employees(info: strawberry.Info) -> list[Employee]:
    records = await get_services(info).employees.list_all()
    return [_to_type(record) for record in records]


@translate_errors
async def resolve_employee_by_id(info: strawberry.Info, id: str) -> Employee:
    return _to_type(await get_services(info).employees.get_by_id(id))


@translate_errors
async def search_employees(
    info: strawberry.Info, designation: str | None, department: str | None
) -> list[Employee]:
    records = await get_services(info).employees.search(
        designation=designation, department=department
    )
    return [_to_type(record) for record in records]


# Mutation resolvers
@translate_errors
async def add_employee(
    info: strawberry.Info,
    *,
    first_name: str,
    last_name: str,
    email: str,
    gender: str | None,
    designation: str,
    salary: float,
    date_of_joining: str,
    department: str,
    employee_photo: str | None,
) -> Employee:
    record = await get_services(info).employees.create(
        EmployeeInput(
            first_name=first_name,
            last_name=last_name,
            email=email,
            gender=gender,
            designation=designation,
            salary=salary,
            date_of_joining=date_of_joining,
            department=department,
            photo=employee_photo,
        )
    )
    return _to_type(record)


@translate_errors
async def update_employee(info: strawberry.Info, id: str, **fields: Any) -> Employee:
    patch = EmployeePatch(
        first_name=_presence(fields.get("first_name", strawberry.UNSET)),
        last_name=_presence(fields.get("last_name", strawberry.UNSET)),
        email=_presence(fields.get("email", strawberry.UNSET)),
        gender=_presence(fields.get("gender", strawberry.UNSET)),
        designation=_presence(fields.get("designation", strawberry.UNSET)),
        salary=_presence(fields.get("salary", strawberry.UNSET)),
        date_of_joining=_presence(fields.get("date_of_joining", strawberry.UNSET)),
        department=_presence(fields.get("department", strawberry.UNSET)),
        photo=_presence(fields.get("employee_photo", strawberry.UNSET)),
    )
    return _to_type(await get_services(info).employees.update(id, patch))


@translate_errors
async def delete_employee(info: strawberry.Info, id: str) -> str:
    return await get_services(info).employees.delete(id)
