"""
Input validation helpers for the payroll domain.

Pure parsing of the external string interface into typed values. Every
helper raises a typed ValidationError (or EmployeeNotFoundError for ids)
and never touches the model, so commands can validate all their inputs
before the first mutation.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from payroll_kernel.domain.values import EmployeeKind, PaymentMethod
from payroll_kernel.exceptions import (
    DateRangeError,
    EmployeeNotFoundError,
    InvalidBooleanError,
    InvalidDateError,
    InvalidEmployeeTypeError,
    InvalidPaymentMethodError,
    NegativeValueError,
    NonPositiveValueError,
    NotNumericError,
    RequiredFieldError,
    ValueOutOfRangeError,
)

_DATE_PATTERN = re.compile(r"^([0-9]{1,2})/([0-9]{1,2})/([0-9]{4})$")
_ID_PATTERN = re.compile(r"^[0-9]+$")

# Largest adjusted exponent accepted for any amount, rate or hour count.
MAX_MAGNITUDE_EXPONENT = 12


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require_text(field: str, value: Any) -> str:
    """Return value unchanged if it is non-blank text."""
    if is_blank(value):
        raise RequiredFieldError(field)
    return str(value)


def parse_decimal(field: str, value: Any, *, positive: bool = False) -> Decimal:
    """
    Parse a locale-tolerant number.

    Accepts Decimal/int directly, or text using either ',' or '.' as the
    decimal separator.

    Raises:
        RequiredFieldError: value is blank.
        NotNumericError: value does not parse or is not finite.
        ValueOutOfRangeError: value is 10**13 or more.
        NegativeValueError: value < 0 (when positive is False).
        NonPositiveValueError: value <= 0 (when positive is True).
    """
    if is_blank(value):
        raise RequiredFieldError(field)
    if isinstance(value, bool):
        raise NotNumericError(field, value)
    if isinstance(value, (Decimal, int)):
        number = Decimal(value)
    else:
        text = str(value).strip().replace(",", ".")
        try:
            number = Decimal(text)
        except InvalidOperation as e:
            raise NotNumericError(field, value) from e
    if not number.is_finite():
        raise NotNumericError(field, value)

    if positive and number <= 0:
        raise NonPositiveValueError(field, number)
    if number < 0:
        raise NegativeValueError(field, number)
    if number.adjusted() > MAX_MAGNITUDE_EXPONENT:
        raise ValueOutOfRangeError(field, value, Decimal(10) ** (MAX_MAGNITUDE_EXPONENT + 1))
    return number


def parse_date(field: str, value: Any) -> date:
    """Parse a strict d/M/yyyy date, rejecting days not on the calendar."""
    if isinstance(value, date):
        return value
    if is_blank(value):
        raise InvalidDateError(field, value)
    match = _DATE_PATTERN.match(str(value).strip())
    if match is None:
        raise InvalidDateError(field, value)
    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDateError(field, value) from e


def parse_date_range(start: Any, end: Any) -> tuple[date, date]:
    """Parse a [start, end) pair; start may equal end but not follow it."""
    start_date = parse_date("start date", start)
    end_date = parse_date("end date", end)
    if start_date > end_date:
        raise DateRangeError(start_date, end_date)
    return start_date, end_date


def parse_bool(field: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = "" if value is None else str(value).strip().lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise InvalidBooleanError(field, value)


def parse_employee_id(value: Any) -> int:
    """Parse an employee id. Blank or malformed ids are reported as not found."""
    if isinstance(value, bool):
        raise EmployeeNotFoundError(value)
    if isinstance(value, int):
        return value
    if is_blank(value):
        raise EmployeeNotFoundError(value)
    text = str(value).strip()
    if not _ID_PATTERN.match(text):
        raise EmployeeNotFoundError(value)
    return int(text)


def parse_kind(value: Any) -> EmployeeKind:
    if isinstance(value, EmployeeKind):
        return value
    text = "" if value is None else str(value).strip().lower()
    for kind in EmployeeKind:
        if kind.value == text:
            return kind
    raise InvalidEmployeeTypeError(value)


def parse_payment_method(value: Any) -> PaymentMethod:
    if isinstance(value, PaymentMethod):
        return value
    text = "" if value is None else str(value).strip().lower()
    for method in PaymentMethod:
        if method.value.lower() == text:
            return method
    raise InvalidPaymentMethodError(value)
