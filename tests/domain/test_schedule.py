"""Tests for payment schedule descriptors and registration."""

import pytest

from payroll_config import PayrollPolicy
from payroll_kernel.domain.schedule import PaymentSchedule, ScheduleCadence
from payroll_kernel.domain.state import PayrollState
from payroll_kernel.exceptions import (
    DuplicateScheduleError,
    InvalidScheduleDescriptorError,
    ScheduleNotAvailableError,
)


class TestParse:

    def test_last_business_day(self):
        schedule = PaymentSchedule.parse("mensal $")
        assert schedule.cadence is ScheduleCadence.MONTHLY_LAST_BUSINESS_DAY
        assert schedule.text == "mensal $"

    def test_month_day(self):
        schedule = PaymentSchedule.parse("mensal 15")
        assert schedule.cadence is ScheduleCadence.MONTHLY_DAY
        assert schedule.day == 15

    def test_weekly_default_interval(self):
        schedule = PaymentSchedule.parse("semanal 5")
        assert (schedule.interval_weeks, schedule.day) == (1, 5)

    def test_weekly_interval(self):
        schedule = PaymentSchedule.parse("semanal 2 3")
        assert (schedule.interval_weeks, schedule.day) == (2, 3)
        assert schedule.text == "semanal 2 3"

    def test_canonical_weekly_form(self):
        assert PaymentSchedule.parse("semanal 1 5") == PaymentSchedule.parse("semanal 5")
        assert PaymentSchedule.parse("semanal 1 5").text == "semanal 5"

    @pytest.mark.parametrize(
        "descriptor",
        [
            "",
            "mensal",
            "mensal 0",
            "mensal 29",
            "mensal x",
            "semanal",
            "semanal 0",
            "semanal 8",
            "semanal 0 5",
            "semanal 53 5",
            "semanal 1 2 3",
            "diario 1",
            "mensal -1",
            "mensal \u00b2",
            "semanal \u00b2 5",
            "semanal 2 \u0665",
        ],
    )
    def test_invalid(self, descriptor):
        with pytest.raises(InvalidScheduleDescriptorError):
            PaymentSchedule.parse(descriptor)

    def test_limits_are_parameters(self):
        with pytest.raises(InvalidScheduleDescriptorError):
            PaymentSchedule.parse("mensal 20", max_month_day=15)


class TestRegistry:

    def _state(self) -> PayrollState:
        return PayrollState.initial(PayrollPolicy())

    def test_builtins_registered(self):
        assert set(self._state().schedules) == {"semanal 5", "mensal $", "semanal 2 5"}

    def test_register_custom(self):
        state = self._state()
        schedule = state.register_schedule("semanal 2 3")
        assert state.resolve_schedule("semanal 2 3") is schedule

    def test_duplicate_rejected(self):
        state = self._state()
        with pytest.raises(DuplicateScheduleError):
            state.register_schedule("semanal 1 5")

    def test_unregistered_not_available(self):
        with pytest.raises(ScheduleNotAvailableError):
            self._state().resolve_schedule("mensal 1")
