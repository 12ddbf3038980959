"""
Translation of service failures into GraphQL errors.

The error kind travels to clients as ``extensions.code``.
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from graphql import GraphQLError

from ..errors import ErrorKind, ServiceError
from ..logging import get_logger

logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")

INTERNAL_MESSAGE = "Internal server error."


def to_graphql_error(error: ServiceError) -> GraphQLError:
    return GraphQLError(error.message, extensions={"code": error.kind.value})


def translate_errors(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    """Wrap a resolver so every failure leaves it as a single tagged GraphQL error."""

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return await func(*args, **kwargs)
        except ServiceError as e:
            if e.kind is ErrorKind.INTERNAL:
                logger.error("Operation failed", operation=func.__name__, error=e.message)
            raise to_graphql_error(e) from e
        except Exception as e:
            logger.exception("Unhandled error in operation", operation=func.__name__)
            raise GraphQLError(
                INTERNAL_MESSAGE, extensions={"code": ErrorKind.INTERNAL.value}
            ) from e

    return wrapper
