"""Persistence for accounts and employees."""

from .base import AccountRepository, DuplicateKeyError, EmployeeRepository
from .sql import SqlAccountRepository, SqlEmployeeRepository, build_search_clause

__all__ = [
    "AccountRepository",
    "EmployeeRepository",
    "DuplicateKeyError",
    "SqlAccountRepository",
    "SqlEmployeeRepository",
    "build_search_clause",
]
