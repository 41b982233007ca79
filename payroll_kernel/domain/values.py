"""
Values -- Small immutable domain value types and monetary rounding.

Responsibility:
    Employee variant discriminant, payment method descriptors and the two
    rounding policies used by payroll: round-down for intermediate salary
    and commission terms, round-half-up for reported net pay.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - All monetary values are Decimal, never float.
    - floor2() and round_money() are the only sanctioned rounding helpers.
      The two policies are deliberately distinct and must not be merged.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from enum import Enum

ZERO = Decimal("0")
CENT = Decimal("0.01")


def floor2(value: Decimal) -> Decimal:
    """Round down to 2 decimal places (intermediate base/commission terms)."""
    return value.quantize(CENT, rounding=ROUND_FLOOR)


def round_money(value: Decimal) -> Decimal:
    """Round half-up to 2 decimal places (externally reported amounts)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """Render a monetary amount with 2 places and a comma separator."""
    return f"{round_money(value):.2f}".replace(".", ",")


def format_hours(value: Decimal) -> str:
    """Render an hour count: integral values bare, others up to 2 places."""
    if value == value.to_integral_value():
        return str(int(value))
    text = f"{value.quantize(CENT, rounding=ROUND_HALF_UP):.2f}".rstrip("0")
    return text.rstrip(".").replace(".", ",")


class EmployeeKind(Enum):
    """Employee variant discriminant. Values are the external type names."""

    HOURLY = "horista"
    SALARIED = "assalariado"
    COMMISSIONED = "comissionado"


class PaymentMethod(Enum):
    """How an employee receives pay. Values are the external names."""

    CASH = "emMaos"
    MAIL = "correios"
    BANK = "banco"


@dataclass(frozen=True)
class BankAccount:
    """Bank deposit details, required when the payment method is BANK."""

    bank: str
    branch: str
    account: str
