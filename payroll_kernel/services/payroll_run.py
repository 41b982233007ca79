"""
payroll_kernel.services.payroll_run -- Payroll run orchestrator.

Responsibility:
    Runs payroll for a date in two passes over every employee.

    1. Compute pass (read-only): resolve each employee's pay period,
       compute pay and assemble a ``PayrollRun`` with one group per
       variant, rows sorted by name, group totals and grand totals.
    2. Advance pass: record the union settlement (new accumulated debt
       and last paid date) for every paid hourly union member, skipping
       members already settled through that date.

Architecture position:
    Services -- orchestrates ``payroll_engines.scheduling`` and
    ``payroll_engines.computation`` over a ``PayrollState``. The advance
    pass is the only mutation and runs inside ``RunPayrollCommand``, so it
    is undoable like any other command.

Invariants enforced:
    - The compute pass never mutates state; ``total_payroll`` is a pure
      dry run built on it.
    - Re-running the last settled date reproduces the same run and does
      not charge union dues twice.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from payroll_engines.computation import PayComputation, compute_pay
from payroll_engines.scheduling import pay_period_for, uses_declared_schedules
from payroll_kernel.domain.state import PayrollState
from payroll_kernel.domain.values import ZERO, EmployeeKind, round_money
from payroll_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.payroll_run")

GROUP_ORDER = (EmployeeKind.HOURLY, EmployeeKind.SALARIED, EmployeeKind.COMMISSIONED)


@dataclass(frozen=True)
class PayLine:
    """One employee's row in a payroll run."""

    employee_id: int
    name: str
    kind: EmployeeKind
    payment_description: str
    normal_hours: Decimal
    overtime_hours: Decimal
    sales_total: Decimal
    commission: Decimal
    base_pay: Decimal
    gross: Decimal
    deductions: Decimal
    net: Decimal

    @classmethod
    def from_computation(cls, name: str, payment: str, c: PayComputation) -> PayLine:
        # A paid row always satisfies gross - deductions == net.
        if c.net > 0:
            deductions = round_money(c.gross) - c.net
        else:
            deductions = round_money(c.deductions)
        return cls(
            employee_id=c.employee_id,
            name=name,
            kind=c.kind,
            payment_description=payment,
            normal_hours=c.normal_hours,
            overtime_hours=c.overtime_hours,
            sales_total=c.sales_total,
            commission=c.commission,
            base_pay=c.base_pay,
            gross=c.gross,
            deductions=deductions,
            net=c.net,
        )


@dataclass(frozen=True)
class PayGroup:
    kind: EmployeeKind
    lines: tuple[PayLine, ...]

    @property
    def total_gross(self) -> Decimal:
        return sum((line.gross for line in self.lines), ZERO)

    @property
    def total_deductions(self) -> Decimal:
        return sum((line.deductions for line in self.lines), ZERO)

    @property
    def total_net(self) -> Decimal:
        return sum((line.net for line in self.lines), ZERO)

    @property
    def total_normal_hours(self) -> Decimal:
        return sum((line.normal_hours for line in self.lines), ZERO)

    @property
    def total_overtime_hours(self) -> Decimal:
        return sum((line.overtime_hours for line in self.lines), ZERO)

    @property
    def total_sales(self) -> Decimal:
        return sum((line.sales_total for line in self.lines), ZERO)


@dataclass(frozen=True)
class PayrollRun:
    """Auditable result of a payroll run for one date."""

    run_date: date
    declared_schedules: bool
    groups: tuple[PayGroup, ...]

    def group(self, kind: EmployeeKind) -> PayGroup:
        for g in self.groups:
            if g.kind is kind:
                return g
        raise KeyError(kind)

    @property
    def lines(self) -> tuple[PayLine, ...]:
        return tuple(line for g in self.groups for line in g.lines)

    @property
    def total_gross(self) -> Decimal:
        return sum((g.total_gross for g in self.groups), ZERO)

    @property
    def total_deductions(self) -> Decimal:
        return sum((g.total_deductions for g in self.groups), ZERO)

    @property
    def total_net(self) -> Decimal:
        return sum((g.total_net for g in self.groups), ZERO)


def compute_payroll(
    state: PayrollState, run_date: date
) -> tuple[PayrollRun, list[PayComputation]]:
    """
    Compute pass. Returns the run and the raw computations for settlement.

    Postconditions:
        - ``state`` is unchanged.
    """
    policy = state.policy
    declared = uses_declared_schedules(state, policy)
    computations: list[PayComputation] = []
    lines: dict[EmployeeKind, list[PayLine]] = {kind: [] for kind in GROUP_ORDER}

    with LogContext.bind(run_date=run_date.isoformat()):
        for employee in state:
            period = pay_period_for(employee, run_date, policy, state.schedules, declared)
            if period is None:
                continue
            with LogContext.bind(employee_id=str(employee.id)):
                computation = compute_pay(employee, period, policy)
            computations.append(computation)
            lines[employee.kind].append(
                PayLine.from_computation(
                    employee.name, employee.payment_description(), computation
                )
            )

    groups = tuple(
        PayGroup(kind, tuple(sorted(lines[kind], key=lambda line: (line.name, line.employee_id))))
        for kind in GROUP_ORDER
    )
    run = PayrollRun(run_date=run_date, declared_schedules=declared, groups=groups)
    logger.debug(
        "payroll_computed",
        extra={
            "run_date": run_date.isoformat(),
            "declared_schedules": declared,
            "employees_paid": len(computations),
            "total_net": str(run.total_net),
        },
    )
    return run, computations


def advance_union_state(state: PayrollState, computations: list[PayComputation]) -> int:
    """
    Advance pass. Settles the union account of each paid hourly member.

    Returns:
        Number of memberships settled.
    """
    settled = 0
    for c in computations:
        if c.kind is not EmployeeKind.HOURLY:
            continue
        employee = state.employees.get(c.employee_id)
        if employee is None or employee.union is None:
            continue
        if employee.union.settle(c.period.payday, c.shortfall):
            settled += 1
    return settled


def run_payroll(state: PayrollState, run_date: date) -> PayrollRun:
    """Both passes. Call through ``RunPayrollCommand`` to keep it undoable."""
    with LogContext.bind(run_date=run_date.isoformat()):
        run, computations = compute_payroll(state, run_date)
        settled = advance_union_state(state, computations)
        logger.info(
            "payroll_run_completed",
            extra={
                "employees_paid": len(run.lines),
                "union_settlements": settled,
                "total_gross": str(run.total_gross),
                "total_deductions": str(run.total_deductions),
                "total_net": str(run.total_net),
            },
        )
    return run


def total_payroll(state: PayrollState, run_date: date) -> Decimal:
    """Grand net total for ``run_date`` without advancing any state."""
    run, _ = compute_payroll(state, run_date)
    return run.total_net
