"""
GraphQL schema and its FastAPI router
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import validate_schema as gql_validate_schema
from strawberry.fastapi import GraphQLRouter
from strawberry.schema.config import StrawberryConfig

from ..logging import get_logger
from ..services import Services
from .mutations.root import Mutation
from .queries.root import Query

logger = get_logger(__name__)

# Operation, argument and field names are exposed exactly as declared
schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    config=StrawberryConfig(auto_camel_case=False),
)


class SchemaValidationError(Exception):
    """The assembled schema is not a valid GraphQL schema."""


def validate_schema() -> None:
    """Check the assembled schema so a broken build stops startup.

    Raises:
        SchemaValidationError: With every problem graphql-core reports
    """
    problems = [str(error) for error in gql_validate_schema(schema._schema)]
    if problems:
        logger.error("GraphQL schema validation failed", problems=problems)
        raise SchemaValidationError("; ".join(problems))
    logger.info("GraphQL schema validation successful")


def create_graphql_router(services: Services) -> GraphQLRouter[dict[str, Any], None]:
    """Mount the schema at ``/graphql`` with ``services`` in every request context."""

    async def get_context(request: Request) -> dict[str, Any]:
        return {"request": request, "services": services}

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql",
        context_getter=get_context,
    )
