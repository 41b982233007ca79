"""
Module: payroll_engines
Responsibility:
    Pure payroll engines: payday and pay-period resolution
    (``scheduling``) and gross/deduction/net computation
    (``computation``).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import ``payroll_kernel.domain`` (and sibling engine modules).
    MUST NOT import ``payroll_kernel.services``.

Invariants enforced:
    - Purity: no clock reads; the payday is always a parameter.
    - Decimal-only arithmetic.
    - Determinism: identical inputs always produce identical outputs.
"""

from payroll_engines.computation import (
    PayComputation,
    UnionDeduction,
    apportioned_salary,
    commission_for,
    compute_pay,
    hourly_pay,
)
from payroll_engines.scheduling import (
    PayPeriod,
    default_pay_period,
    last_business_day,
    pay_period_for,
    schedule_pay_period,
    uses_declared_schedules,
)

__all__ = [
    "PayComputation",
    "PayPeriod",
    "UnionDeduction",
    "apportioned_salary",
    "commission_for",
    "compute_pay",
    "default_pay_period",
    "hourly_pay",
    "last_business_day",
    "pay_period_for",
    "schedule_pay_period",
    "uses_declared_schedules",
]
