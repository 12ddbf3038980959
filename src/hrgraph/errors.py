"""Tagged errors shared by the services and the GraphQL layer."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-readable failure category carried to the transport layer."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"


class ServiceError(Exception):
    """An operation failure carrying both a kind and a human-readable message."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.value}, {self.message!r})"


class ConfigurationError(ServiceError):
    """Required process configuration is missing or inconsistent."""

    def __init__(self, message: str):
        super().__init__(ErrorKind.INTERNAL, message)


def bad_request(message: str) -> ServiceError:
    return ServiceError(ErrorKind.BAD_REQUEST, message)


def unauthorized(message: str) -> ServiceError:
    return ServiceError(ErrorKind.UNAUTHORIZED, message)


def not_found(message: str) -> ServiceError:
    return ServiceError(ErrorKind.NOT_FOUND, message)


def internal(message: str) -> ServiceError:
    return ServiceError(ErrorKind.INTERNAL, message)
