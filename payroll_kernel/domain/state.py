"""
PayrollState -- the in-memory arena of employee records.

Responsibility:
    Owns every employee by id, the monotonic id counter and the registry
    of payment schedules (built-ins plus user-declared). Provides lookups
    that raise typed errors; mutations are performed by services.

Invariants enforced:
    - Ids are issued by ``issue_id()`` only and are never reused.
    - Each union member id is held by at most one employee.
    - Registered schedules are keyed by canonical descriptor text.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from payroll_kernel.domain.employee import Employee
from payroll_kernel.domain.schedule import PaymentSchedule
from payroll_kernel.domain.validation import parse_employee_id
from payroll_kernel.domain.values import EmployeeKind
from payroll_kernel.exceptions import (
    DuplicateScheduleError,
    EmployeeNotFoundError,
    ScheduleNotAvailableError,
    UnionMemberNotFoundError,
    WrongEmployeeTypeError,
)

if TYPE_CHECKING:
    from payroll_config.schema import PayrollPolicy


@dataclass
class PayrollState:
    """Mutable aggregate root. ``policy`` is configuration, not state."""

    policy: PayrollPolicy
    employees: dict[int, Employee] = field(default_factory=dict)
    last_id: int = 0
    schedules: dict[str, PaymentSchedule] = field(default_factory=dict)

    @classmethod
    def initial(cls, policy: PayrollPolicy) -> PayrollState:
        state = cls(policy=policy)
        state.schedules = state.builtin_schedules()
        return state

    def builtin_schedules(self) -> dict[str, PaymentSchedule]:
        parsed = (self.policy.parse_schedule(d) for d in self.policy.builtin_schedules)
        return {s.text: s for s in parsed}

    # -- employees ---------------------------------------------------------

    def issue_id(self) -> int:
        self.last_id += 1
        return self.last_id

    def get(self, employee_id: Any) -> Employee:
        emp_id = parse_employee_id(employee_id)
        employee = self.employees.get(emp_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    def get_of_kind(self, employee_id: Any, kind: EmployeeKind) -> Employee:
        employee = self.get(employee_id)
        if employee.kind is not kind:
            raise WrongEmployeeTypeError(employee.id, kind.value, employee.kind.value)
        return employee

    def __iter__(self) -> Iterator[Employee]:
        return iter(self.employees.values())

    def __len__(self) -> int:
        return len(self.employees)

    # -- union -------------------------------------------------------------

    def find_member(self, member_id: str) -> Employee | None:
        for employee in self.employees.values():
            if employee.union is not None and employee.union.member_id == member_id:
                return employee
        return None

    def get_member(self, member_id: str) -> Employee:
        employee = self.find_member(member_id)
        if employee is None:
            raise UnionMemberNotFoundError(member_id)
        return employee

    # -- schedules ---------------------------------------------------------

    def resolve_schedule(self, descriptor: str) -> PaymentSchedule:
        """Parse ``descriptor`` and require it to be registered."""
        schedule = self.policy.parse_schedule(descriptor)
        registered = self.schedules.get(schedule.text)
        if registered is None:
            raise ScheduleNotAvailableError(schedule.text)
        return registered

    def register_schedule(self, descriptor: str) -> PaymentSchedule:
        schedule = self.policy.parse_schedule(descriptor)
        if schedule.text in self.schedules:
            raise DuplicateScheduleError(schedule.text)
        self.schedules[schedule.text] = schedule
        return schedule

    def default_schedule(self, kind: EmployeeKind) -> str:
        return self.policy.default_schedule(kind.value)
