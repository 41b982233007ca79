"""
Payment schedule descriptors.

A schedule is a tiny grammar value:

    mensal $        last business day of every month
    mensal N        day N of every month (1 <= N <= max_month_day)
    semanal D       every week on ISO weekday D (1=Monday .. 7=Sunday)
    semanal N D     every N weeks on ISO weekday D

Descriptors are parsed into a canonical form ("semanal 1 5" and
"semanal 5" are the same schedule) and registered by that canonical text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from payroll_kernel.exceptions import InvalidScheduleDescriptorError

MONTHLY_KEYWORD = "mensal"
WEEKLY_KEYWORD = "semanal"
LAST_BUSINESS_DAY_TOKEN = "$"

_WHOLE_NUMBER = re.compile(r"^[0-9]+$")


class ScheduleCadence(Enum):
    MONTHLY_LAST_BUSINESS_DAY = "monthly:lastBusinessDay"
    MONTHLY_DAY = "monthly:day"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class PaymentSchedule:
    """A parsed payment schedule descriptor."""

    cadence: ScheduleCadence
    day: int | None = None  # day of month (MONTHLY_DAY) or ISO weekday (WEEKLY)
    interval_weeks: int = 1

    @property
    def text(self) -> str:
        """Canonical external descriptor."""
        if self.cadence is ScheduleCadence.MONTHLY_LAST_BUSINESS_DAY:
            return f"{MONTHLY_KEYWORD} {LAST_BUSINESS_DAY_TOKEN}"
        if self.cadence is ScheduleCadence.MONTHLY_DAY:
            return f"{MONTHLY_KEYWORD} {self.day}"
        if self.interval_weeks == 1:
            return f"{WEEKLY_KEYWORD} {self.day}"
        return f"{WEEKLY_KEYWORD} {self.interval_weeks} {self.day}"

    def __str__(self) -> str:
        return self.text

    @classmethod
    def parse(
        cls,
        descriptor: str,
        *,
        max_month_day: int = 28,
        max_week_interval: int = 52,
    ) -> PaymentSchedule:
        """
        Parse an external descriptor.

        Raises:
            InvalidScheduleDescriptorError: on unknown keywords, wrong token
                counts, non-integer numbers or out-of-range values.
        """
        if descriptor is None or not str(descriptor).strip():
            raise InvalidScheduleDescriptorError(descriptor, "descriptor is blank")
        tokens = str(descriptor).split()
        keyword, args = tokens[0].lower(), tokens[1:]

        if keyword == MONTHLY_KEYWORD:
            if len(args) != 1:
                raise InvalidScheduleDescriptorError(
                    descriptor, "monthly schedules take exactly one argument"
                )
            if args[0] == LAST_BUSINESS_DAY_TOKEN:
                return cls(ScheduleCadence.MONTHLY_LAST_BUSINESS_DAY)
            day = _parse_int(descriptor, args[0])
            if not 1 <= day <= max_month_day:
                raise InvalidScheduleDescriptorError(
                    descriptor, f"day of month must be between 1 and {max_month_day}"
                )
            return cls(ScheduleCadence.MONTHLY_DAY, day=day)

        if keyword == WEEKLY_KEYWORD:
            if len(args) == 1:
                interval, weekday = 1, _parse_int(descriptor, args[0])
            elif len(args) == 2:
                interval = _parse_int(descriptor, args[0])
                weekday = _parse_int(descriptor, args[1])
            else:
                raise InvalidScheduleDescriptorError(
                    descriptor, "weekly schedules take one or two arguments"
                )
            if not 1 <= interval <= max_week_interval:
                raise InvalidScheduleDescriptorError(
                    descriptor,
                    f"week interval must be between 1 and {max_week_interval}",
                )
            if not 1 <= weekday <= 7:
                raise InvalidScheduleDescriptorError(
                    descriptor, "weekday must be between 1 and 7"
                )
            return cls(ScheduleCadence.WEEKLY, day=weekday, interval_weeks=interval)

        raise InvalidScheduleDescriptorError(
            descriptor, f"unknown schedule keyword {tokens[0]!r}"
        )


def _parse_int(descriptor: str, token: str) -> int:
    if not _WHOLE_NUMBER.match(token):
        raise InvalidScheduleDescriptorError(
            descriptor, f"{token!r} is not a whole number"
        )
    return int(token)
