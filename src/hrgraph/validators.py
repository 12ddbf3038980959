"""
Input validation and normalization.

Every ``parse_*`` function returns a normalized value or raises a BAD_REQUEST
``ServiceError``. None of them touch storage.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import EmailStr, TypeAdapter, ValidationError

from .domain import Gender
from .errors import bad_request

MIN_SALARY = Decimal(1000)
# Bounds of the Numeric(12, 2) salary column
MAX_SALARY = Decimal("9999999999.99")
CENT = Decimal("0.01")

_email_adapter: TypeAdapter[str] = TypeAdapter(EmailStr)


def normalize_string(value: str) -> str:
    return value.strip()


def normalize_email(value: str) -> str:
    return value.strip().lower()


def is_valid_email(value: str) -> bool:
    """True only for a bare address; the ``Name <addr@host>`` form is rejected."""
    if not value:
        return False
    try:
        address = _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return address.lower() == value.lower()


def is_valid_gender(value: str) -> bool:
    return value in {g.value for g in Gender}


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(values: Mapping[str, Any], names: Iterable[str], message: str) -> None:
    """Raise BAD_REQUEST with ``message`` when any of ``names`` is missing or blank."""
    if any(is_blank(values.get(name)) for name in names):
        raise bad_request(message)


def parse_email(value: str, message: str = "Invalid email format.") -> str:
    email = normalize_email(value)
    if not is_valid_email(email):
        raise bad_request(message)
    return email


def parse_gender(value: str | None) -> Gender | None:
    """Empty means "no gender"; anything else must be one of the enumeration values."""
    if value is None or value == "":
        return None
    if not isinstance(value, str) or not is_valid_gender(value):
        raise bad_request("gender must be Male, Female, or Other.")
    return Gender(value)


def parse_salary(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise bad_request("salary must be a number.")

    try:
        if isinstance(value, Decimal):
            salary = value
        elif isinstance(value, int):
            salary = Decimal(value)
        elif isinstance(value, (float, str)):
            salary = Decimal(str(value).strip())
        else:
            raise bad_request("salary must be a number.")
    except InvalidOperation as e:
        raise bad_request("salary must be a number.") from e

    if not salary.is_finite():
        raise bad_request("salary must be a number.")
    if salary < MIN_SALARY:
        raise bad_request("salary must be >= 1000.")
    if salary > MAX_SALARY:
        raise bad_request(f"salary must be <= {MAX_SALARY}.")
    if salary != salary.quantize(CENT):
        raise bad_request("salary must have at most 2 decimal places.")
    return salary.quantize(CENT)


def parse_date(value: Any) -> date:
    """Accept a date, a datetime (date part kept) or an ISO 8601 date/date-time string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
    raise bad_request("date_of_joining must be a valid date string.")
