"""
Payroll Computation Engine (``payroll_engines.computation``).

Responsibility
--------------
Turns an employee and a resolved pay period into gross pay, union
deductions and net pay.

* Hourly gross = sum over period timecards of
  ``min(h, T) * rate + max(h - T, 0) * rate * M`` (T = overtime threshold,
  M = overtime multiplier from the policy), rounded half-up.
* Salaried gross = monthly salary, or ``floor2(monthly * 12 * N / 52)``
  on an N-weekly schedule.
* Commissioned gross = apportioned base + ``floor2(rate * sales)``. The
  base is ``floor2(monthly * 12 * N / 52)`` on an N-weekly schedule (the
  built-in biweekly rule is N=2, i.e. ``monthly * 12 / 26``) and the full
  monthly salary on a monthly one.
* Union deductions, non-hourly = ``daily_due * period days`` + service
  charges dated in the period.
* Union deductions, hourly = carried debt + ``daily_due * days`` +
  service charges, over the window from the day after the last union
  settlement through the payday (the whole period if never settled).
* Net = ``max(gross - deductions, 0)`` rounded half-up. An hourly
  shortfall becomes the member's new accumulated debt.

Architecture position
---------------------
**Engines layer** -- pure functional core. Reads the employee, never
mutates it. Union settlement is applied later by the run orchestrator.

Invariants enforced
-------------------
* Decimal-only arithmetic.
* Base and commission terms round DOWN (``floor2``); reported gross and
  net round HALF-UP (``round_money``).
* Re-computing the last settled payday uses the pre-settlement baseline,
  so results are identical across re-runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import TYPE_CHECKING

from payroll_engines.scheduling import PayPeriod
from payroll_engines.tracer import traced_engine
from payroll_kernel.domain.employee import (
    CommissionedTerms,
    Employee,
    HourlyTerms,
    TimeCard,
    UnionMembership,
    period_days,
)
from payroll_kernel.domain.values import ZERO, EmployeeKind, floor2, round_money

if TYPE_CHECKING:
    from payroll_config.schema import PayrollPolicy

WEEKS_PER_YEAR = Decimal("52")
MONTHS_PER_YEAR = Decimal("12")


@dataclass(frozen=True)
class HourlyBreakdown:
    normal_hours: Decimal
    overtime_hours: Decimal
    gross: Decimal


@dataclass(frozen=True)
class UnionDeduction:
    """Union charges for one pay period."""

    carried_debt: Decimal
    dues: Decimal
    service_charges: Decimal
    days: int

    @property
    def total(self) -> Decimal:
        return self.carried_debt + self.dues + self.service_charges


NO_UNION = UnionDeduction(ZERO, ZERO, ZERO, 0)


@dataclass(frozen=True)
class PayComputation:
    """Everything the run needs to report and settle one employee."""

    employee_id: int
    kind: EmployeeKind
    period: PayPeriod
    normal_hours: Decimal
    overtime_hours: Decimal
    sales_total: Decimal
    base_pay: Decimal
    commission: Decimal
    gross: Decimal
    union: UnionDeduction
    net: Decimal
    shortfall: Decimal

    @property
    def deductions(self) -> Decimal:
        return self.union.total


# ---------------------------------------------------------------------------
# Gross pay terms
# ---------------------------------------------------------------------------


def split_hours(hours: Decimal, threshold: Decimal) -> tuple[Decimal, Decimal]:
    """Split a day's hours into (normal, overtime) at ``threshold``."""
    return min(hours, threshold), max(hours - threshold, ZERO)


def hourly_pay(
    cards: list[TimeCard],
    rate: Decimal,
    threshold: Decimal,
    multiplier: Decimal,
) -> HourlyBreakdown:
    """
    Gross pay for a set of timecards. Overtime is computed per day.

    Postconditions:
        - ``gross`` is rounded half-up to 2 places.
    """
    normal = overtime = ZERO
    raw = ZERO
    for card in cards:
        day_normal, day_overtime = split_hours(card.hours, threshold)
        normal += day_normal
        overtime += day_overtime
        raw += day_normal * rate + day_overtime * rate * multiplier
    return HourlyBreakdown(normal, overtime, round_money(raw))


def apportioned_salary(monthly_salary: Decimal, weeks: int | None) -> Decimal:
    """Salary owed for one period: full month, or N weeks of a year's pay."""
    if weeks is None:
        return monthly_salary
    return floor2(monthly_salary * MONTHS_PER_YEAR * weeks / WEEKS_PER_YEAR)


def commission_for(rate: Decimal, sales_total: Decimal) -> Decimal:
    return floor2(rate * sales_total)


# ---------------------------------------------------------------------------
# Union deductions
# ---------------------------------------------------------------------------


def period_union_deduction(membership: UnionMembership, period: PayPeriod) -> UnionDeduction:
    """Dues for every day of the period plus charges dated in it."""
    return UnionDeduction(
        carried_debt=ZERO,
        dues=membership.daily_due * period.days,
        service_charges=membership.charges_between(period.start, period.end),
        days=period.days,
    )


def settlement_union_deduction(
    membership: UnionMembership, period: PayPeriod
) -> UnionDeduction:
    """
    Hourly union deduction: debt carried from the last settlement plus
    dues and charges for the days since it.

    A payday before the last settlement lies in an already settled range
    and carries no union deduction.
    """
    payday = period.payday
    if membership.last_paid_date is not None and payday < membership.last_paid_date:
        return NO_UNION

    debt, paid_through = membership.settlement_baseline(payday)
    window_start = period.start if paid_through is None else paid_through + timedelta(days=1)
    days = period_days(window_start, payday)
    return UnionDeduction(
        carried_debt=debt,
        dues=membership.daily_due * days,
        service_charges=membership.charges_between(window_start, payday) if days else ZERO,
        days=days,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


@traced_engine("payroll_computation", "1.0")
def compute_pay(employee: Employee, period: PayPeriod, policy: PayrollPolicy) -> PayComputation:
    """
    Compute one employee's pay for ``period``.

    Preconditions:
        - ``period`` was resolved for ``employee`` by the scheduling engine.
    Postconditions:
        - ``net >= 0``; ``shortfall > 0`` only for hourly union members.
        - ``employee`` is not modified.
    """
    normal = overtime = sales_total = base_pay = commission = ZERO
    terms = employee.terms

    if isinstance(terms, HourlyTerms):
        breakdown = hourly_pay(
            terms.cards_between(period.start, period.end),
            terms.hourly_rate,
            policy.overtime_threshold_hours,
            policy.overtime_multiplier,
        )
        normal, overtime, gross = (
            breakdown.normal_hours,
            breakdown.overtime_hours,
            breakdown.gross,
        )
    elif isinstance(terms, CommissionedTerms):
        base_pay = apportioned_salary(terms.monthly_salary, period.weeks)
        sales_total = terms.sales_between(period.start, period.end)
        commission = commission_for(terms.commission_rate, sales_total)
        gross = base_pay + commission
    else:
        base_pay = apportioned_salary(terms.monthly_salary, period.weeks)
        gross = base_pay

    union = NO_UNION
    if employee.union is not None:
        if employee.kind is EmployeeKind.HOURLY:
            union = settlement_union_deduction(employee.union, period)
        else:
            union = period_union_deduction(employee.union, period)

    balance = gross - union.total
    shortfall = ZERO
    if balance < 0 and employee.kind is EmployeeKind.HOURLY and employee.union is not None:
        shortfall = -balance

    return PayComputation(
        employee_id=employee.id,
        kind=employee.kind,
        period=period,
        normal_hours=normal,
        overtime_hours=overtime,
        sales_total=sales_total,
        base_pay=base_pay,
        commission=commission,
        gross=gross,
        union=union,
        net=round_money(max(balance, ZERO)),
        shortfall=shortfall,
    )
