"""
Root GraphQL query definitions
"""

import strawberry

from ..types.employee import Employee


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def login(
        self,
        info: strawberry.Info,
        password: str,
        username: str | None = None,
        email: str | None = None,
    ) -> str:
        """Log in with username or email and receive a signed token valid for one hour."""
        from ..resolvers.auth import login

        return await login(info, username, email, password)

    @strawberry.field(name="getAllEmployees")
    async def get_all_employees(self, info: strawberry.Info) -> list[Employee]:
        """Get all employees, newest first."""
        from ..resolvers.employee import resolve_all_employees

        return await resolve_all_employees(info)

    @strawberry.field(name="getEmployeeById")
    async def get_employee_by_id(self, info: strawberry.Info, id: strawberry.ID) -> Employee:
        """Get an employee by ID."""
        from ..resolvers.employee import resolve_employee_by_id

        return await resolve_employee_by_id(info, id)

    @strawberry.field(name="searchEmployee")
    async def search_employee(
        self,
        info: strawberry.Info,
        designation: str | None = None,
        department: str | None = None,
    ) -> list[Employee]:
        """Search employees by designation or department (either may match)."""
        from ..resolvers.employee import search_employees

        return await search_employees(info, designation, department)
