"""
payroll_kernel.services.employee_service -- Employee record mutations.

Responsibility:
    Every state-changing domain operation on employees: hiring, removal,
    attribute and type changes, union membership, payment method and
    schedule, and posting/removing timecards, sales and service charges.

Architecture position:
    Services -- called by ``Command.apply`` inside the command engine.
    Operates on a ``PayrollState`` passed in explicitly; holds no state.

Invariants enforced:
    - Validate-then-mutate: every input is parsed and every conflict is
      checked before the first write, so a raised error leaves the state
      untouched even without the engine's snapshot backstop.
    - A type change builds a new ``Employee`` with the same id, name,
      address, payment method and union membership; variant history
      (timecards or sales) is discarded and the schedule resets to the
      new variant's default.
    - Union member ids are unique among active memberships.

Failure modes:
    - ``ValidationError`` subclasses for malformed input.
    - ``DomainConflictError`` subclasses for missing employees, wrong
      variants or duplicate union ids.
    - ``ScheduleError`` subclasses for unknown or invalid schedules.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import Any
from uuid import UUID

from payroll_kernel.domain.employee import (
    CommissionedTerms,
    Employee,
    HourlyTerms,
    SalariedTerms,
    SalesReceipt,
    ServiceCharge,
    TimeCard,
    UnionMembership,
)
from payroll_kernel.domain.schedule import PaymentSchedule
from payroll_kernel.domain.state import PayrollState
from payroll_kernel.domain.validation import (
    is_blank,
    parse_bool,
    parse_date,
    parse_decimal,
    parse_kind,
    parse_payment_method,
    require_text,
)
from payroll_kernel.domain.values import BankAccount, EmployeeKind, PaymentMethod
from payroll_kernel.exceptions import (
    DuplicateUnionMemberError,
    PostingNotFoundError,
    RequiredFieldError,
    TypeNotApplicableError,
    UnknownAttributeError,
    WrongEmployeeTypeError,
)
from payroll_kernel.logging_config import get_logger

logger = get_logger("services.employee")


# ---------------------------------------------------------------------------
# Hiring and removal
# ---------------------------------------------------------------------------


def _build_terms(
    kind: EmployeeKind, base: Decimal, commission: Decimal | None
) -> HourlyTerms | SalariedTerms | CommissionedTerms:
    if kind is EmployeeKind.HOURLY:
        return HourlyTerms(hourly_rate=base)
    if kind is EmployeeKind.COMMISSIONED:
        return CommissionedTerms(monthly_salary=base, commission_rate=commission)
    return SalariedTerms(monthly_salary=base)


def create_employee(
    state: PayrollState,
    name: Any,
    address: Any,
    kind: Any,
    base: Any,
    commission: Any = None,
) -> Employee:
    """
    Hire an employee and return the new record.

    ``base`` is the hourly rate for hourly employees and the monthly
    salary otherwise. ``commission`` is required for commissioned
    employees and rejected for the other variants.
    """
    name = require_text("name", name)
    address = require_text("address", address)
    kind = parse_kind(kind)
    if kind is EmployeeKind.COMMISSIONED and commission is None:
        raise TypeNotApplicableError(kind.value, "commission rate is required")
    if kind is not EmployeeKind.COMMISSIONED and commission is not None:
        raise TypeNotApplicableError(kind.value, "only commissioned employees take a commission")
    amount = parse_decimal("salary", base)
    rate = parse_decimal("commission", commission) if commission is not None else None

    employee = Employee(
        id=state.issue_id(),
        name=name,
        address=address,
        kind=kind,
        terms=_build_terms(kind, amount, rate),
        schedule=state.default_schedule(kind),
    )
    state.employees[employee.id] = employee
    logger.info(
        "employee_created",
        extra={"employee_id": employee.id, "kind": kind.value, "schedule": employee.schedule},
    )
    return employee


def remove_employee(state: PayrollState, employee_id: Any) -> Employee:
    employee = state.get(employee_id)
    del state.employees[employee.id]
    logger.info("employee_removed", extra={"employee_id": employee.id})
    return employee


# ---------------------------------------------------------------------------
# Timecards, sales and service charges
# ---------------------------------------------------------------------------


def post_timecard(state: PayrollState, employee_id: Any, work_date: Any, hours: Any) -> TimeCard:
    """Record hours for a date. Posting the same date again replaces the hours."""
    employee = state.get_of_kind(employee_id, EmployeeKind.HOURLY)
    card = TimeCard(
        work_date=parse_date("date", work_date),
        hours=parse_decimal("hours", hours, positive=True),
    )
    previous = employee.terms.post(card)
    logger.debug(
        "timecard_posted",
        extra={
            "employee_id": employee.id,
            "work_date": card.work_date,
            "hours": str(card.hours),
            "replaced": previous is not None,
        },
    )
    return card


def remove_timecard(state: PayrollState, employee_id: Any, work_date: Any) -> TimeCard:
    employee = state.get_of_kind(employee_id, EmployeeKind.HOURLY)
    day = parse_date("date", work_date)
    card = employee.terms.timecards.pop(day, None)
    if card is None:
        raise PostingNotFoundError(employee.id, "timecard", day)
    return card


def post_sale(state: PayrollState, employee_id: Any, sale_date: Any, amount: Any) -> SalesReceipt:
    employee = state.get_of_kind(employee_id, EmployeeKind.COMMISSIONED)
    receipt = SalesReceipt(
        sale_date=parse_date("date", sale_date),
        amount=parse_decimal("amount", amount, positive=True),
    )
    employee.terms.sales.append(receipt)
    logger.debug(
        "sale_posted",
        extra={"employee_id": employee.id, "receipt_id": receipt.receipt_id},
    )
    return receipt


def remove_sale(state: PayrollState, employee_id: Any, receipt_id: UUID) -> SalesReceipt:
    employee = state.get_of_kind(employee_id, EmployeeKind.COMMISSIONED)
    receipt = employee.terms.remove_sale(receipt_id)
    if receipt is None:
        raise PostingNotFoundError(employee.id, "sales receipt", receipt_id)
    return receipt


def post_service_charge(
    state: PayrollState, member_id: Any, charge_date: Any, amount: Any
) -> ServiceCharge:
    member_id = require_text("union member id", member_id)
    employee = state.get_member(member_id)
    charge = ServiceCharge(
        charge_date=parse_date("date", charge_date),
        amount=parse_decimal("amount", amount, positive=True),
    )
    employee.union.add_charge(charge)
    logger.debug(
        "service_charge_posted",
        extra={"employee_id": employee.id, "member_id": member_id, "charge_id": charge.charge_id},
    )
    return charge


def remove_service_charge(state: PayrollState, member_id: Any, charge_id: UUID) -> ServiceCharge:
    employee = state.get_member(require_text("union member id", member_id))
    charge = employee.union.remove_charge(charge_id)
    if charge is None:
        raise PostingNotFoundError(employee.id, "service charge", charge_id)
    return charge


# ---------------------------------------------------------------------------
# Variant change
# ---------------------------------------------------------------------------


def change_type(
    state: PayrollState, employee_id: Any, kind: Any, amount: Any = None
) -> Employee:
    """
    Move an employee to another variant.

    ``amount`` is the new hourly rate (to hourly), the new monthly salary
    (to salaried) or the commission rate (to commissioned). When omitted,
    the base carries forward from the pre-change rate; a commissioned
    target then needs an existing commission rate.

    Changing to the same variant updates that rate in place and keeps the
    variant's history.
    """
    employee = state.get(employee_id)
    kind = parse_kind(kind)
    field_name = "commission" if kind is EmployeeKind.COMMISSIONED else "salary"
    value = None if is_blank(amount) else parse_decimal(field_name, amount)

    if kind is employee.kind:
        if value is not None:
            _set_variant_rate(employee, value)
        return employee

    base = employee.base_rate
    if kind is EmployeeKind.COMMISSIONED:
        if value is None:
            raise RequiredFieldError("commission")
        terms = CommissionedTerms(monthly_salary=base, commission_rate=value)
    else:
        terms = _build_terms(kind, value if value is not None else base, None)

    replacement = Employee(
        id=employee.id,
        name=employee.name,
        address=employee.address,
        kind=kind,
        terms=terms,
        schedule=state.default_schedule(kind),
        payment_method=employee.payment_method,
        bank_account=employee.bank_account,
        union=employee.union,
    )
    state.employees[employee.id] = replacement
    logger.info(
        "employee_type_changed",
        extra={
            "employee_id": employee.id,
            "from_kind": employee.kind.value,
            "to_kind": kind.value,
        },
    )
    return replacement


def _set_variant_rate(employee: Employee, value: Decimal) -> None:
    terms = employee.terms
    if isinstance(terms, HourlyTerms):
        terms.hourly_rate = value
    elif isinstance(terms, CommissionedTerms):
        terms.commission_rate = value
    else:
        terms.monthly_salary = value


# ---------------------------------------------------------------------------
# Union membership, payment method and schedule
# ---------------------------------------------------------------------------


def set_union_membership(
    state: PayrollState, employee_id: Any, member_id: Any, daily_due: Any
) -> UnionMembership:
    """
    Make the employee a union member, or update an existing membership.

    Updating keeps the member's charges and settlement history.
    """
    employee = state.get(employee_id)
    member_id = require_text("union member id", member_id)
    due = parse_decimal("union fee", daily_due)
    holder = state.find_member(member_id)
    if holder is not None and holder.id != employee.id:
        raise DuplicateUnionMemberError(member_id, holder.id)

    if employee.union is None:
        employee.union = UnionMembership(member_id=member_id, daily_due=due)
    else:
        employee.union.member_id = member_id
        employee.union.daily_due = due
    logger.info(
        "union_membership_set",
        extra={"employee_id": employee.id, "member_id": member_id, "daily_due": str(due)},
    )
    return employee.union


def clear_union_membership(state: PayrollState, employee_id: Any) -> UnionMembership | None:
    employee = state.get(employee_id)
    previous, employee.union = employee.union, None
    if previous is not None:
        logger.info(
            "union_membership_cleared",
            extra={"employee_id": employee.id, "member_id": previous.member_id},
        )
    return previous


def set_payment_method(
    state: PayrollState,
    employee_id: Any,
    method: Any,
    bank: Any = None,
    branch: Any = None,
    account: Any = None,
) -> Employee:
    employee = state.get(employee_id)
    method = parse_payment_method(method)
    account_details = None
    if method is PaymentMethod.BANK:
        account_details = BankAccount(
            bank=require_text("bank", bank),
            branch=require_text("branch", branch),
            account=require_text("account", account),
        )
    employee.payment_method = method
    employee.bank_account = account_details
    logger.info(
        "payment_method_set",
        extra={"employee_id": employee.id, "method": method.value},
    )
    return employee


def set_schedule(state: PayrollState, employee_id: Any, descriptor: Any) -> PaymentSchedule:
    employee = state.get(employee_id)
    schedule = state.resolve_schedule(descriptor)
    employee.schedule = schedule.text
    logger.info(
        "payment_schedule_assigned",
        extra={"employee_id": employee.id, "schedule": schedule.text},
    )
    return schedule


def declare_schedule(state: PayrollState, descriptor: Any) -> PaymentSchedule:
    schedule = state.register_schedule(descriptor)
    logger.info("payment_schedule_declared", extra={"schedule": schedule.text})
    return schedule


def reset(state: PayrollState) -> None:
    """Remove every employee and declared schedule. Ids keep counting up."""
    removed = len(state.employees)
    state.employees = {}
    state.schedules = state.builtin_schedules()
    logger.info("payroll_state_reset", extra={"employees_removed": removed})


# ---------------------------------------------------------------------------
# Attribute dispatch
# ---------------------------------------------------------------------------


def _need(extra: Sequence[Any], count: int, fields: Sequence[str]) -> list[Any]:
    values = list(extra[:count])
    for i, field_name in enumerate(fields):
        if i >= len(values) or is_blank(values[i]):
            raise RequiredFieldError(field_name)
    return values


def _change_name(state, employee, value, extra):
    employee.name = require_text("name", value)


def _change_address(state, employee, value, extra):
    employee.address = require_text("address", value)


def _change_kind(state, employee, value, extra):
    change_type(state, employee.id, value, extra[0] if extra else None)


def _change_salary(state, employee, value, extra):
    amount = parse_decimal("salary", value)
    if isinstance(employee.terms, HourlyTerms):
        employee.terms.hourly_rate = amount
    else:
        employee.terms.monthly_salary = amount


def _change_commission(state, employee, value, extra):
    if not isinstance(employee.terms, CommissionedTerms):
        raise WrongEmployeeTypeError(
            employee.id, EmployeeKind.COMMISSIONED.value, employee.kind.value
        )
    employee.terms.commission_rate = parse_decimal("commission", value)


def _change_union(state, employee, value, extra):
    if parse_bool("union member", value):
        member_id, daily_due = _need(extra, 2, ("union member id", "union fee"))
        set_union_membership(state, employee.id, member_id, daily_due)
    else:
        clear_union_membership(state, employee.id)


def _change_payment_method(state, employee, value, extra):
    method = parse_payment_method(value)
    if method is PaymentMethod.BANK:
        bank, branch, account = _need(extra, 3, ("bank", "branch", "account"))
        set_payment_method(state, employee.id, method, bank, branch, account)
    else:
        set_payment_method(state, employee.id, method)


def _change_schedule(state, employee, value, extra):
    set_schedule(state, employee.id, value)


_ATTRIBUTE_HANDLERS: dict[str, Callable[..., None]] = {
    "nome": _change_name,
    "endereco": _change_address,
    "tipo": _change_kind,
    "salario": _change_salary,
    "comissao": _change_commission,
    "sindicalizado": _change_union,
    "metodopagamento": _change_payment_method,
    "agendapagamento": _change_schedule,
}


def change_attribute(
    state: PayrollState, employee_id: Any, attribute: Any, value: Any, *extra: Any
) -> Employee:
    """
    Change one attribute by its external name (case-insensitive).

    Attributes taking more than one value read the rest from ``extra``:
    ``tipo`` (optional base), ``sindicalizado`` true (member id, daily
    fee) and ``metodoPagamento`` banco (bank, branch, account).
    """
    employee = state.get(employee_id)
    key = "" if attribute is None else str(attribute).strip().lower()
    handler = _ATTRIBUTE_HANDLERS.get(key)
    if handler is None:
        raise UnknownAttributeError(attribute)
    handler(state, employee, value, extra)
    return state.employees[employee.id]
