"""
Read-only queries over a PayrollState.

Attribute reads use the external attribute names and return strings, with
amounts rendered as ``"1,00"``. Range totals cover ``[start, end)``: the
start date is included and the end date is not.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from decimal import Decimal
from typing import Any

from payroll_kernel.domain.employee import CommissionedTerms, Employee, HourlyTerms
from payroll_kernel.domain.state import PayrollState
from payroll_kernel.domain.validation import parse_date_range, require_text
from payroll_kernel.domain.values import (
    ZERO,
    EmployeeKind,
    PaymentMethod,
    format_amount,
)
from payroll_kernel.exceptions import (
    EmployeeNameNotFoundError,
    NotPaidByBankError,
    NotUnionMemberError,
    UnknownAttributeError,
    WrongEmployeeTypeError,
)


def _commission(employee: Employee) -> str:
    if not isinstance(employee.terms, CommissionedTerms):
        raise WrongEmployeeTypeError(
            employee.id, EmployeeKind.COMMISSIONED.value, employee.kind.value
        )
    return format_amount(employee.terms.commission_rate)


def _union(employee: Employee):
    if employee.union is None:
        raise NotUnionMemberError(employee.id)
    return employee.union


def _bank(employee: Employee):
    if employee.payment_method is not PaymentMethod.BANK or employee.bank_account is None:
        raise NotPaidByBankError(employee.id)
    return employee.bank_account


_ATTRIBUTE_READERS: dict[str, Callable[[Employee], str]] = {
    "nome": lambda e: e.name,
    "endereco": lambda e: e.address,
    "tipo": lambda e: e.kind.value,
    "salario": lambda e: format_amount(e.base_rate),
    "comissao": _commission,
    "sindicalizado": lambda e: "true" if e.is_union_member else "false",
    "idsindicato": lambda e: _union(e).member_id,
    "taxasindical": lambda e: format_amount(_union(e).daily_due),
    "metodopagamento": lambda e: e.payment_method.value,
    "banco": lambda e: _bank(e).bank,
    "agencia": lambda e: _bank(e).branch,
    "contacorrente": lambda e: _bank(e).account,
    "agendapagamento": lambda e: e.schedule,
}


def get_attribute(state: PayrollState, employee_id: Any, attribute: Any) -> str:
    employee = state.get(employee_id)
    key = "" if attribute is None else str(attribute).strip().lower()
    reader = _ATTRIBUTE_READERS.get(key)
    if reader is None:
        raise UnknownAttributeError(attribute)
    return reader(employee)


def find_employee_by_name(state: PayrollState, fragment: Any, index: int = 1) -> int:
    """Id of the ``index``-th (1-based) employee whose name contains ``fragment``."""
    fragment = require_text("name", fragment)
    matches = [e.id for e in sorted(state, key=lambda e: e.id) if fragment in e.name]
    if index < 1 or index > len(matches):
        raise EmployeeNameNotFoundError(fragment, index)
    return matches[index - 1]


def employee_count(state: PayrollState) -> int:
    return len(state)


# ---------------------------------------------------------------------------
# Range totals
# ---------------------------------------------------------------------------


def _hourly_cards(state: PayrollState, employee_id: Any, start: Any, end: Any):
    employee = state.get_of_kind(employee_id, EmployeeKind.HOURLY)
    first, last = parse_date_range(start, end)
    return list(_in_range(employee.terms, first, last))


def _in_range(terms: HourlyTerms, first: date, last: date):
    return (terms.timecards[d] for d in sorted(terms.timecards) if first <= d < last)


def hours_worked(state: PayrollState, employee_id: Any, start: Any, end: Any) -> Decimal:
    return sum((c.hours for c in _hourly_cards(state, employee_id, start, end)), ZERO)


def normal_hours_worked(state: PayrollState, employee_id: Any, start: Any, end: Any) -> Decimal:
    threshold = state.policy.overtime_threshold_hours
    return sum(
        (min(c.hours, threshold) for c in _hourly_cards(state, employee_id, start, end)),
        ZERO,
    )


def overtime_hours_worked(state: PayrollState, employee_id: Any, start: Any, end: Any) -> Decimal:
    threshold = state.policy.overtime_threshold_hours
    return sum(
        (max(c.hours - threshold, ZERO) for c in _hourly_cards(state, employee_id, start, end)),
        ZERO,
    )


def sales_total(state: PayrollState, employee_id: Any, start: Any, end: Any) -> Decimal:
    employee = state.get_of_kind(employee_id, EmployeeKind.COMMISSIONED)
    first, last = parse_date_range(start, end)
    return sum((s.amount for s in employee.terms.sales if first <= s.sale_date < last), ZERO)


def service_charges_total(state: PayrollState, employee_id: Any, start: Any, end: Any) -> Decimal:
    employee = state.get(employee_id)
    membership = _union(employee)
    first, last = parse_date_range(start, end)
    return sum(
        (c.amount for c in membership.service_charges if first <= c.charge_date < last),
        ZERO,
    )
