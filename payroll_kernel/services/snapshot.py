"""
Snapshot store -- deep, immutable copies of PayrollState.

Responsibility:
    ``take_snapshot`` captures every employee record (with its payload,
    timecards, sales, union membership and charges), the id counter and
    the registered schedules. ``restore_snapshot`` writes a snapshot back
    into a live state.

Invariants enforced:
    - A snapshot never aliases the live model: records are cloned on
      capture AND again on restore, so restoring the same snapshot twice
      yields two independent states.
    - Employee insertion order is preserved across capture and restore.
    - The policy is configuration and is never part of a snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass

from payroll_kernel.domain.employee import Employee
from payroll_kernel.domain.schedule import PaymentSchedule
from payroll_kernel.domain.state import PayrollState


@dataclass(frozen=True)
class StateSnapshot:
    employees: tuple[Employee, ...]
    last_id: int
    schedules: tuple[PaymentSchedule, ...]

    @property
    def employee_count(self) -> int:
        return len(self.employees)


def take_snapshot(state: PayrollState) -> StateSnapshot:
    return StateSnapshot(
        employees=tuple(e.clone() for e in state.employees.values()),
        last_id=state.last_id,
        schedules=tuple(state.schedules.values()),
    )


def restore_snapshot(state: PayrollState, snapshot: StateSnapshot) -> None:
    state.employees = {e.id: e.clone() for e in snapshot.employees}
    state.last_id = snapshot.last_id
    state.schedules = {s.text: s for s in snapshot.schedules}
