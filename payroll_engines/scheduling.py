"""
Payroll Scheduling Engine (``payroll_engines.scheduling``).

Responsibility
--------------
Decides whether a date is a payday for an employee and, if so, which
pay period it closes.

* Built-in rules (used when every employee keeps its variant's default
  schedule):

  - Hourly: every Friday; period Saturday..Friday.
  - Commissioned: Fridays an even number of weeks from the biweekly
    anchor; period of 14 days ending on the payday.
  - Salaried: last business day of the month; period from the 1st.

* Declared schedules (used for every employee as soon as any employee
  has a non-default schedule):

  - ``mensal $``: last business day; period starts the day after the
    previous month's last business day.
  - ``mensal N``: day N; period starts the day after day N of the
    previous month.
  - ``semanal N D``: every N weeks on ISO weekday D, anchored at the
    first D on or after the employee's reference date; period is the
    7*N days ending on the payday.

Architecture position
---------------------
**Engines layer** -- pure functional core. ZERO I/O, ZERO clock reads.
Dates are always explicit parameters.

Invariants enforced
-------------------
* Deterministic: same employee, date and policy give the same period.
* ``PayPeriod.start <= PayPeriod.end`` and ``end`` is the payday.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING

from payroll_kernel.domain.employee import Employee
from payroll_kernel.domain.schedule import PaymentSchedule, ScheduleCadence
from payroll_kernel.domain.values import EmployeeKind

if TYPE_CHECKING:
    from payroll_config.schema import PayrollPolicy

FRIDAY = 4  # date.weekday()


@dataclass(frozen=True)
class PayPeriod:
    """Inclusive date range closed by a payday.

    ``weeks`` is the cadence in weeks for weekly schedules and ``None``
    for monthly ones; it selects the salary apportionment formula.
    """

    start: date
    end: date
    weeks: int | None = None

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"Period start {self.start} after end {self.end}")

    @property
    def payday(self) -> date:
        return self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------


def is_business_day(d: date) -> bool:
    return d.weekday() < 5


def last_business_day(year: int, month: int) -> date:
    """Last calendar day of the month, walked back over weekends."""
    d = date(year, month, calendar.monthrange(year, month)[1])
    while not is_business_day(d):
        d -= timedelta(days=1)
    return d


def previous_month(d: date) -> tuple[int, int]:
    if d.month == 1:
        return d.year - 1, 12
    return d.year, d.month - 1


def first_weekday_on_or_after(reference: date, iso_weekday: int) -> date:
    offset = (iso_weekday - reference.isoweekday()) % 7
    return reference + timedelta(days=offset)


# ---------------------------------------------------------------------------
# Built-in rules
# ---------------------------------------------------------------------------


def is_biweekly_friday(d: date, anchor: date) -> bool:
    return d.weekday() == FRIDAY and ((d - anchor).days // 7) % 2 == 0


def default_pay_period(
    kind: EmployeeKind, payday: date, biweekly_anchor: date
) -> PayPeriod | None:
    """Pay period under the built-in rule for ``kind``, or None if not a payday."""
    if kind is EmployeeKind.HOURLY:
        if payday.weekday() != FRIDAY:
            return None
        return PayPeriod(payday - timedelta(days=6), payday, weeks=1)

    if kind is EmployeeKind.COMMISSIONED:
        if not is_biweekly_friday(payday, biweekly_anchor):
            return None
        return PayPeriod(payday - timedelta(days=13), payday, weeks=2)

    if payday != last_business_day(payday.year, payday.month):
        return None
    return PayPeriod(payday.replace(day=1), payday)


# ---------------------------------------------------------------------------
# Declared schedules
# ---------------------------------------------------------------------------


def schedule_pay_period(
    schedule: PaymentSchedule, payday: date, reference: date
) -> PayPeriod | None:
    """
    Pay period under a declared schedule, or None if ``payday`` is not one.

    ``reference`` anchors weekly series; it is ignored for monthly ones.
    """
    if schedule.cadence is ScheduleCadence.MONTHLY_LAST_BUSINESS_DAY:
        if payday != last_business_day(payday.year, payday.month):
            return None
        year, month = previous_month(payday)
        start = last_business_day(year, month) + timedelta(days=1)
        return PayPeriod(start, payday)

    if schedule.cadence is ScheduleCadence.MONTHLY_DAY:
        if payday.day != schedule.day:
            return None
        year, month = previous_month(payday)
        start = date(year, month, schedule.day) + timedelta(days=1)
        return PayPeriod(start, payday)

    if payday.isoweekday() != schedule.day:
        return None
    first = first_weekday_on_or_after(reference, schedule.day)
    if payday < first:
        return None
    span = 7 * schedule.interval_weeks
    if (payday - first).days % span != 0:
        return None
    return PayPeriod(payday - timedelta(days=span - 1), payday, weeks=schedule.interval_weeks)


# ---------------------------------------------------------------------------
# Per-employee resolution
# ---------------------------------------------------------------------------


def uses_declared_schedules(employees: Iterable[Employee], policy: PayrollPolicy) -> bool:
    """True when any employee's schedule differs from its variant's default."""
    return any(
        e.schedule != policy.default_schedule(e.kind.value) for e in employees
    )


def pay_period_for(
    employee: Employee,
    payday: date,
    policy: PayrollPolicy,
    schedules: Mapping[str, PaymentSchedule],
    declared: bool,
) -> PayPeriod | None:
    """
    Resolve the pay period ``payday`` closes for ``employee``.

    Args:
        employee: The employee being evaluated.
        payday: The run date.
        policy: Active payroll policy (anchor and reference dates).
        schedules: Registered schedules keyed by canonical descriptor.
        declared: Evaluate through declared schedules instead of the
            built-in rules (see ``uses_declared_schedules``).
    """
    if not declared:
        return default_pay_period(employee.kind, payday, policy.biweekly_anchor)

    schedule = schedules.get(employee.schedule)
    if schedule is None:
        schedule = policy.parse_schedule(employee.schedule)
    reference = employee.hire_reference(policy.schedule_reference)
    return schedule_pay_period(schedule, payday, reference)
