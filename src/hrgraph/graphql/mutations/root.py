"""
Root GraphQL mutation definitions
"""

import strawberry

from ..types.account import User
from ..types.employee import Employee


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Account mutations
    @strawberry.mutation
    async def signup(self, info: strawberry.Info, username: str, email: str, password: str) -> User:
        """Create a new account."""
        from ..resolvers.auth import signup

        return await signup(info, username, email, password)

    # Employee mutations
    @strawberry.mutation(name="addEmployee")
    async def add_employee(
        self,
        info: strawberry.Info,
        first_name: str,
        last_name: str,
        email: str,
        designation: str,
        salary: float,
        date_of_joining: str,
        department: str,
        gender: str | None = None,
        employee_photo: str | None = None,
    ) -> Employee:
        """Add a new employee; ``employee_photo`` is an inline base64 data URL."""
        from ..resolvers.employee import add_employee

        return await add_employee(
            info,
            first_name=first_name,
            last_name=last_name,
            email=email,
            gender=gender,
            designation=designation,
            salary=salary,
            date_of_joining=date_of_joining,
            department=department,
            employee_photo=employee_photo,
        )

    @strawberry.mutation(name="updateEmployee")
    async def update_employee(
        self,
        info: strawberry.Info,
        id: strawberry.ID,
        first_name: str | None = strawberry.UNSET,
        last_name: str | None = strawberry.UNSET,
        email: str | None = strawberry.UNSET,
        gender: str | None = strawberry.UNSET,
        designation: str | None = strawberry.UNSET,
        salary: float | None = strawberry.UNSET,
        date_of_joining: str | None = strawberry.UNSET,
        department: str | None = strawberry.UNSET,
        employee_photo: str | None = strawberry.UNSET,
    ) -> Employee:
        """Update only the fields that are supplied."""
        from ..resolvers.employee import update_employee

        return await update_employee(
            info,
            id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            gender=gender,
            designation=designation,
            salary=salary,
            date_of_joining=date_of_joining,
            department=department,
            employee_photo=employee_photo,
        )

    @strawberry.mutation(name="deleteEmployee")
    async def delete_employee(self, info: strawberry.Info, id: strawberry.ID) -> str:
        """Delete an employee."""
        from ..resolvers.employee import delete_employee

        return await delete_employee(info, id)
