"""
Payroll Policy Schema.

The frozen runtime artifact produced from a YAML policy file. Field
defaults reproduce ``sets/default.yaml`` so a ``PayrollPolicy()`` built
in code behaves exactly like the shipped configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from payroll_kernel.domain.schedule import PaymentSchedule
from payroll_kernel.exceptions import ScheduleError
from payroll_kernel.logging_config import get_logger

logger = get_logger("config.schema")

EMPLOYEE_KIND_NAMES = ("horista", "assalariado", "comissionado")


@dataclass(frozen=True)
class PayrollPolicy:
    """
    Tunable payroll rules.

    Validation happens in ``__post_init__``; any inconsistency raises
    ``ValueError`` so a bad policy never reaches the engines.
    """

    config_id: str = "default"
    version: int = 1

    overtime_threshold_hours: Decimal = Decimal("8")
    overtime_multiplier: Decimal = Decimal("1.5")

    biweekly_anchor: date = date(2005, 1, 14)
    schedule_reference: date = date(2005, 1, 8)

    builtin_schedules: tuple[str, ...] = ("semanal 5", "mensal $", "semanal 2 5")
    default_schedules: tuple[tuple[str, str], ...] = (
        ("horista", "semanal 5"),
        ("assalariado", "mensal $"),
        ("comissionado", "semanal 2 5"),
    )

    max_month_day: int = 28
    max_week_interval: int = 52

    checksum: str = ""

    def __post_init__(self):
        if self.overtime_threshold_hours <= 0:
            raise ValueError("overtime_threshold_hours must be positive")
        if self.overtime_multiplier < 1:
            raise ValueError("overtime_multiplier must be at least 1")
        if not 1 <= self.max_month_day <= 28:
            raise ValueError("max_month_day must be between 1 and 28")
        if self.max_week_interval < 1:
            raise ValueError("max_week_interval must be positive")

        builtins = set()
        for descriptor in self.builtin_schedules:
            builtins.add(self._canonical(descriptor))
        if len(builtins) != len(self.builtin_schedules):
            raise ValueError("builtin_schedules contains duplicates")

        defaults = dict(self.default_schedules)
        missing = set(EMPLOYEE_KIND_NAMES) - set(defaults)
        if missing:
            raise ValueError(f"default_schedules missing kinds: {sorted(missing)}")
        unknown = set(defaults) - set(EMPLOYEE_KIND_NAMES)
        if unknown:
            raise ValueError(f"default_schedules has unknown kinds: {sorted(unknown)}")
        for kind, descriptor in defaults.items():
            if self._canonical(descriptor) not in builtins:
                raise ValueError(
                    f"default schedule {descriptor!r} for {kind} is not a built-in schedule"
                )

        logger.debug(
            "payroll_policy_initialized",
            extra={
                "config_id": self.config_id,
                "overtime_threshold_hours": str(self.overtime_threshold_hours),
                "overtime_multiplier": str(self.overtime_multiplier),
                "builtin_schedules": list(self.builtin_schedules),
            },
        )

    def _canonical(self, descriptor: str) -> str:
        try:
            return self.parse_schedule(descriptor).text
        except ScheduleError as e:
            raise ValueError(f"Invalid schedule in policy: {e}") from e

    def parse_schedule(self, descriptor: str) -> PaymentSchedule:
        """Parse a descriptor under this policy's range limits."""
        return PaymentSchedule.parse(
            descriptor,
            max_month_day=self.max_month_day,
            max_week_interval=self.max_week_interval,
        )

    def default_schedule(self, kind_name: str) -> str:
        """Canonical default schedule for an employee kind (external name)."""
        return self.parse_schedule(dict(self.default_schedules)[kind_name]).text
