"""
Employee GraphQL type definitions
"""

from datetime import date, datetime

import strawberry

from ...domain import Employee as EmployeeRecord


@strawberry.type
class Employee:
    """Employee type for GraphQL API."""

    id: strawberry.ID
    first_name: str
    last_name: str
    email: str
    gender: str | None
    designation: str
    salary: float
    date_of_joining: date
    department: str
    employee_photo: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, employee: EmployeeRecord) -> "Employee":
        return cls(
            id=strawberry.ID(employee.id),
            first_name=employee.first_name,
            last_name=employee.last_name,
            email=employee.email,
            gender=employee.gender.value if employee.gender else None,
            designation=employee.designation,
            salary=float(employee.salary),
            date_of_joining=employee.date_of_joining,
            department=employee.department,
            employee_photo=employee.photo_url,
            created_at=employee.created_at,
            updated_at=employee.updated_at,
        )
