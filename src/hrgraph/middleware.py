"""
Middleware for request context and logging
"""

import json
import re
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .errors import ServiceError
from .logging import REDACTED, clear_request_context, get_logger, redact, set_request_context

logger = get_logger(__name__)

GRAPHQL_PATH = "/graphql"

# GraphQL GET parameters that may carry credentials or inline images
GRAPHQL_PAYLOAD_PARAMS = ("query", "variables", "extensions")

_NAMED_OPERATION = re.compile(r"\b(query|mutation)\s+(\w+)")
_FIRST_FIELD = re.compile(r"\{\s*(\w+)")


def sanitize_query_params(params: dict[str, Any], path: str = "") -> dict[str, Any] | None:
    """Query parameters safe to log, or None when there are none."""
    if not params:
        return None
    sanitized = redact(params)
    if path == GRAPHQL_PATH:
        for key in GRAPHQL_PAYLOAD_PARAMS:
            if key in sanitized:
                sanitized[key] = REDACTED
    return sanitized


def operation_name_from_query(query: str) -> str | None:
    """Best-effort operation name from a raw GraphQL document.

    Mutations are prefixed with ``mutation:``; anonymous operations are named
    after their first root field.
    """
    if not query:
        return None
    if "__schema" in query or "IntrospectionQuery" in query:
        return "__introspection"

    named = _NAMED_OPERATION.search(query)
    if named:
        kind, name = named.groups()
        return f"mutation:{name}" if kind == "mutation" else name

    field = _FIRST_FIELD.search(query)
    if field is None:
        return "unnamed_operation"
    return f"mutation:{field.group(1)}" if query.lstrip().startswith("mutation") else field.group(1)


def _operation_name(payload: dict[str, Any]) -> str | None:
    name = payload.get("operationName")
    if isinstance(name, str) and name:
        return name
    query = payload.get("query")
    return operation_name_from_query(query) if isinstance(query, str) else None


async def extract_graphql_operation_name(request: Request) -> str | None:
    if request.url.path != GRAPHQL_PATH:
        return None

    if request.method == "GET":
        return _operation_name(dict(request.query_params))

    if request.method == "POST":
        body = await request.body()
        if not body:
            return None
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        return _operation_name(payload) if isinstance(payload, dict) else None

    return None


def extract_account_id_from_request(request: Request) -> str | None:
    """Account id from a valid bearer token; anonymous callers give None."""
    scheme, _, token = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None

    services = getattr(request.app.state, "services", None)
    if services is None:
        return None

    try:
        claims = services.auth.verify_token(token.strip())
    except ServiceError:
        return None
    return claims.get("id")


class LoggingContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id and the caller's account to every log line of a request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        set_request_context(account_id=extract_account_id_from_request(request))
        path = request.url.path

        try:
            operation = await extract_graphql_operation_name(request)
            logger.info(
                "Request started",
                method=request.method,
                path=path,
                query_params=sanitize_query_params(dict(request.query_params), path),
                graphql_operation=operation,
                user_agent=request.headers.get("user-agent"),
                remote_addr=request.client.host if request.client else None,
            )

            response = await call_next(request)

            logger.info(
                "Request completed",
                method=request.method,
                path=path,
                graphql_operation=operation,
                status_code=response.status_code,
            )
            return response

        except Exception as e:
            logger.error("Request failed", method=request.method, path=path, error=str(e))
            raise

        finally:
            clear_request_context()
