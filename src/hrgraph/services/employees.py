"""Employee record use cases."""

from __future__ import annotations

from dataclasses import asdict
from datetime import UTC, datetime
from typing import Any

from ..domain import Employee, EmployeeInput, EmployeePatch, NewEmployee, build_employee_filter
from ..errors import ConfigurationError, bad_request, internal, not_found
from ..logging import get_logger
from ..repositories.base import DuplicateKeyError, EmployeeRepository
from ..storage.base import UploadError, UploadSink
from ..validators import (
    is_blank,
    normalize_string,
    parse_date,
    parse_email,
    parse_gender,
    parse_salary,
    require_fields,
)

logger = get_logger(__name__)

EMPLOYEE_PHOTO_FOLDER = "employees"
DELETED_MESSAGE = "Employee deleted successfully"

REQUIRED_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "designation",
    "salary",
    "date_of_joining",
    "department",
)
TEXT_FIELDS = ("first_name", "last_name", "designation", "department")


class EmployeeService:
    """Create, read, update, delete and search employee records."""

    def __init__(self, employees: EmployeeRepository, uploads: UploadSink | None = None):
        self._employees = employees
        self._uploads = uploads

    # Queries

    async def list_all(self) -> list[Employee]:
        return await self._employees.find_many()

    async def get_by_id(self, employee_id: str | None) -> Employee:
        if is_blank(employee_id):
            raise bad_request("Employee id is required.")

        employee = await self._employees.find_by_id(employee_id)
        if employee is None:
            raise not_found("Employee not found.")
        return employee

    async def search(
        self, designation: str | None = None, department: str | None = None
    ) -> list[Employee]:
        """
        Case-insensitive substring search.

        When both terms are given the result is the union of the two matches,
        not the intersection.
        """
        employee_filter = build_employee_filter(
            designation=None if is_blank(designation) else designation.strip(),
            department=None if is_blank(department) else department.strip(),
        )
        if employee_filter is None:
            raise bad_request("Provide designation or department to search.")

        return await self._employees.find_many(employee_filter)

    # Mutations

    async def create(self, fields: EmployeeInput) -> Employee:
        values = asdict(fields)
        require_fields(
            values,
            REQUIRED_FIELDS,
            "first_name, last_name, email, designation, salary, date_of_joining, "
            "department are required.",
        )

        email = parse_email(fields.email, "Invalid employee email format.")
        gender = parse_gender(fields.gender)
        salary = parse_salary(fields.salary)
        date_of_joining = parse_date(fields.date_of_joining)

        if await self._employees.find_by_email(email) is not None:
            raise bad_request("Employee email already exists.")

        photo_url = ""
        if fields.photo:
            photo_url = await self._upload_photo(fields.photo)

        now = datetime.now(UTC)
        try:
            employee = await self._employees.insert(
                NewEmployee(
                    first_name=normalize_string(fields.first_name),
                    last_name=normalize_string(fields.last_name),
                    email=email,
                    gender=gender,
                    designation=normalize_string(fields.designation),
                    salary=salary,
                    date_of_joining=date_of_joining,
                    department=normalize_string(fields.department),
                    photo_url=photo_url,
                    created_at=now,
                    updated_at=now,
                )
            )
        except DuplicateKeyError as e:
            raise bad_request("Employee email already exists.") from e

        logger.info("Employee created", employee_id=employee.id, with_image=bool(photo_url))
        return employee

    async def update(self, employee_id: str | None, patch: EmployeePatch) -> Employee:
        """
        Apply only the fields present in ``patch``; everything else keeps its value.

        A supplied empty gender clears it. A supplied photo replaces the old one.
        """
        current = await self.get_by_id(employee_id)
        supplied = patch.supplied()
        changes: dict[str, Any] = {}

        if "email" in supplied:
            email = parse_email(supplied["email"] or "", "Invalid employee email format.")
            if await self._employees.find_by_email(email, exclude_id=current.id) is not None:
                raise bad_request("Another employee already uses this email.")
            changes["email"] = email

        for name in TEXT_FIELDS:
            if name in supplied:
                if is_blank(supplied[name]):
                    raise bad_request(f"{name} cannot be empty.")
                changes[name] = normalize_string(supplied[name])

        if "gender" in supplied:
            changes["gender"] = parse_gender(supplied["gender"])

        if "salary" in supplied:
            changes["salary"] = parse_salary(supplied["salary"])

        if "date_of_joining" in supplied:
            changes["date_of_joining"] = parse_date(supplied["date_of_joining"])

        if supplied.get("photo"):
            changes["photo_url"] = await self._upload_photo(supplied["photo"])

        try:
            updated = await self._employees.update(current.id, changes, datetime.now(UTC))
        except DuplicateKeyError as e:
            raise bad_request("Another employee already uses this email.") from e
        if updated is None:
            raise not_found("Employee not found.")

        logger.info("Employee updated", employee_id=updated.id, fields=sorted(changes))
        return updated

    async def delete(self, employee_id: str | None) -> str:
        employee = await self.get_by_id(employee_id)

        if not await self._employees.delete(employee.id):
            raise not_found("Employee not found.")

        logger.info("Employee deleted", employee_id=employee.id)
        return DELETED_MESSAGE

    async def aclose(self) -> None:
        if self._uploads is not None:
            await self._uploads.aclose()

    async def _upload_photo(self, payload: str) -> str:
        if self._uploads is None:
            raise ConfigurationError("Image upload is not configured.")
        try:
            return await self._uploads.upload(payload, folder=EMPLOYEE_PHOTO_FOLDER)
        except UploadError as e:
            raise internal(str(e)) from e
