"""
Tests for the payroll scheduling engine.

2005-01-01 is a Saturday, so every Friday of January 2005 falls on the
7th, 14th, 21st and 28th; the biweekly anchor is 2005-01-14.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from payroll_config import PayrollPolicy
from payroll_engines.scheduling import (
    PayPeriod,
    default_pay_period,
    first_weekday_on_or_after,
    last_business_day,
    pay_period_for,
    schedule_pay_period,
    uses_declared_schedules,
)
from payroll_kernel.domain.employee import (
    Employee,
    HourlyTerms,
    SalariedTerms,
    TimeCard,
)
from payroll_kernel.domain.schedule import PaymentSchedule
from payroll_kernel.domain.values import EmployeeKind

ANCHOR = date(2005, 1, 14)
POLICY = PayrollPolicy()


# ---------------------------------------------------------------------------
# Calendar helpers
# ---------------------------------------------------------------------------


class TestCalendar:

    @pytest.mark.parametrize(
        "year,month,expected",
        [
            (2005, 1, date(2005, 1, 31)),  # Monday
            (2005, 4, date(2005, 4, 29)),  # 30th is Saturday
            (2005, 7, date(2005, 7, 29)),  # 31st is Sunday
            (2004, 12, date(2004, 12, 31)),
        ],
    )
    def test_last_business_day(self, year, month, expected):
        assert last_business_day(year, month) == expected

    def test_first_weekday_on_or_after(self):
        assert first_weekday_on_or_after(date(2005, 1, 8), 5) == date(2005, 1, 14)
        assert first_weekday_on_or_after(date(2005, 1, 14), 5) == date(2005, 1, 14)

    def test_period_rejects_reversed(self):
        with pytest.raises(ValueError):
            PayPeriod(date(2005, 1, 8), date(2005, 1, 7))


# ---------------------------------------------------------------------------
# Built-in rules
# ---------------------------------------------------------------------------


class TestDefaultRules:

    def test_hourly_pays_fridays(self):
        period = default_pay_period(EmployeeKind.HOURLY, date(2005, 1, 7), ANCHOR)
        assert period == PayPeriod(date(2005, 1, 1), date(2005, 1, 7), weeks=1)
        assert period.days == 7

    def test_hourly_not_on_thursday(self):
        assert default_pay_period(EmployeeKind.HOURLY, date(2005, 1, 6), ANCHOR) is None

    @pytest.mark.parametrize(
        "payday,paid",
        [
            (date(2004, 12, 31), True),
            (date(2005, 1, 7), False),
            (date(2005, 1, 14), True),
            (date(2005, 1, 21), False),
            (date(2005, 1, 28), True),
        ],
    )
    def test_commissioned_every_other_friday(self, payday, paid):
        period = default_pay_period(EmployeeKind.COMMISSIONED, payday, ANCHOR)
        assert (period is not None) is paid

    def test_commissioned_period_is_14_days(self):
        period = default_pay_period(EmployeeKind.COMMISSIONED, date(2005, 1, 28), ANCHOR)
        assert period.start == date(2005, 1, 15)
        assert period.weeks == 2

    def test_salaried_last_business_day(self):
        period = default_pay_period(EmployeeKind.SALARIED, date(2005, 4, 29), ANCHOR)
        assert period == PayPeriod(date(2005, 4, 1), date(2005, 4, 29))
        assert period.weeks is None

    def test_salaried_not_on_weekend_month_end(self):
        assert default_pay_period(EmployeeKind.SALARIED, date(2005, 4, 30), ANCHOR) is None


# ---------------------------------------------------------------------------
# Declared schedules
# ---------------------------------------------------------------------------


class TestDeclaredSchedules:

    def test_monthly_last_business_day(self):
        schedule = PaymentSchedule.parse("mensal $")
        period = schedule_pay_period(schedule, date(2005, 5, 31), ANCHOR)
        assert period.start == date(2005, 4, 30)
        assert schedule_pay_period(schedule, date(2005, 5, 30), ANCHOR) is None

    def test_monthly_last_business_day_crosses_year(self):
        schedule = PaymentSchedule.parse("mensal $")
        period = schedule_pay_period(schedule, date(2005, 1, 31), ANCHOR)
        assert period.start == date(2005, 1, 1)

    def test_monthly_day(self):
        schedule = PaymentSchedule.parse("mensal 10")
        period = schedule_pay_period(schedule, date(2005, 2, 10), ANCHOR)
        assert period == PayPeriod(date(2005, 1, 11), date(2005, 2, 10))
        assert schedule_pay_period(schedule, date(2005, 2, 11), ANCHOR) is None

    def test_every_other_wednesday_from_hire(self):
        schedule = PaymentSchedule.parse("semanal 2 3")
        hire = date(2005, 1, 5)  # Wednesday
        paydays = [
            d
            for d in (hire + timedelta(days=i) for i in range(35))
            if schedule_pay_period(schedule, d, hire) is not None
        ]
        assert paydays == [date(2005, 1, 5), date(2005, 1, 19), date(2005, 2, 2)]

    def test_series_starts_at_first_weekday_after_hire(self):
        schedule = PaymentSchedule.parse("semanal 2 3")
        hire = date(2005, 1, 6)  # Thursday
        assert schedule_pay_period(schedule, date(2005, 1, 5), hire) is None
        assert schedule_pay_period(schedule, date(2005, 1, 12), hire) is not None
        assert schedule_pay_period(schedule, date(2005, 1, 19), hire) is None

    def test_weekly_period_length(self):
        schedule = PaymentSchedule.parse("semanal 2 3")
        period = schedule_pay_period(schedule, date(2005, 1, 19), date(2005, 1, 5))
        assert period.days == 14
        assert period.weeks == 2

    def test_biweekly_default_matches_builtin(self):
        schedule = PaymentSchedule.parse("semanal 2 5")
        reference = POLICY.schedule_reference
        for offset in range(0, 90):
            d = date(2005, 1, 1) + timedelta(days=offset)
            declared = schedule_pay_period(schedule, d, reference)
            builtin = default_pay_period(EmployeeKind.COMMISSIONED, d, ANCHOR)
            assert declared == builtin


# ---------------------------------------------------------------------------
# Per-employee resolution
# ---------------------------------------------------------------------------


def _employee(kind, terms, schedule, emp_id=1):
    return Employee(id=emp_id, name="X", address="Y", kind=kind, terms=terms, schedule=schedule)


class TestResolution:

    def test_all_defaults_use_builtin_rules(self):
        employees = [
            _employee(EmployeeKind.HOURLY, HourlyTerms(Decimal("10")), "semanal 5"),
            _employee(EmployeeKind.SALARIED, SalariedTerms(Decimal("1000")), "mensal $", 2),
        ]
        assert uses_declared_schedules(employees, POLICY) is False

    def test_any_custom_switches_path(self):
        employees = [
            _employee(EmployeeKind.HOURLY, HourlyTerms(Decimal("10")), "semanal 5"),
            _employee(EmployeeKind.SALARIED, SalariedTerms(Decimal("1000")), "semanal 5", 2),
        ]
        assert uses_declared_schedules(employees, POLICY) is True

    def test_hourly_declared_path_anchors_on_first_timecard(self):
        employee = _employee(EmployeeKind.HOURLY, HourlyTerms(Decimal("10")), "semanal 5")
        employee.terms.post(TimeCard(date(2005, 1, 10), Decimal("8")))
        schedules = {"semanal 5": PaymentSchedule.parse("semanal 5")}

        assert pay_period_for(employee, date(2005, 1, 7), POLICY, schedules, True) is None
        assert pay_period_for(employee, date(2005, 1, 14), POLICY, schedules, True) is not None
        assert pay_period_for(employee, date(2005, 1, 7), POLICY, schedules, False) is not None
