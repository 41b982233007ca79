"""
payroll_kernel.services.payroll_system -- PayrollSystem facade.

Responsibility:
    The single object callers own. Exposes the command surface (every
    mutation goes through the ``CommandEngine`` and is undoable) and the
    read-only queries. Replaces any process-wide singleton: two
    ``PayrollSystem`` instances never share state.

Architecture position:
    Services -- top of the kernel. Obtains its ``PayrollPolicy`` from
    ``payroll_config.get_active_config()`` unless one is injected.

Invariants enforced:
    - After ``shutdown()`` every command, undo and redo raises
      ``SystemClosedError``; queries keep answering.
    - A payroll report is written only after the run command has been
      committed, so a report I/O error never rolls back the run.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any
from uuid import UUID, uuid4

from payroll_config import PayrollPolicy, get_active_config
from payroll_kernel.domain.state import PayrollState
from payroll_kernel.domain.validation import parse_date
from payroll_kernel.exceptions import SystemClosedError
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_kernel.services import employee_queries, payroll_run
from payroll_kernel.services.command_engine import CommandEngine
from payroll_kernel.services.commands import (
    ChangeAttributeCommand,
    ChangeTypeCommand,
    Command,
    CreateEmployeeCommand,
    DeclareScheduleCommand,
    PostSaleCommand,
    PostServiceChargeCommand,
    PostTimecardCommand,
    RemoveEmployeeCommand,
    RemoveSaleCommand,
    RemoveServiceChargeCommand,
    RemoveTimecardCommand,
    ResetSystemCommand,
    RunPayrollCommand,
    SetBankPaymentCommand,
    SetUnionMembershipCommand,
)
from payroll_kernel.services.payroll_run import PayrollRun
from payroll_kernel.services.report_writer import write_report

logger = get_logger("services.payroll_system")


class PayrollSystem:
    """
    Explicitly owned payroll system.

    Usage:
        system = PayrollSystem()
        emp_id = system.create_employee("Ana", "Rua A", "horista", "10,00")
        system.post_timecard(emp_id, "3/1/2005", "8")
        run = system.run_payroll("7/1/2005")
    """

    def __init__(self, policy: PayrollPolicy | None = None):
        self._policy = policy if policy is not None else get_active_config()
        self._state = PayrollState.initial(self._policy)
        self._engine = CommandEngine(self._state)
        self._closed = False

    @property
    def policy(self) -> PayrollPolicy:
        return self._policy

    @property
    def state(self) -> PayrollState:
        return self._state

    @property
    def engine(self) -> CommandEngine:
        return self._engine

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _require_open(self, operation: str) -> None:
        if self._closed:
            raise SystemClosedError(operation)

    def execute(self, command: Command) -> Any:
        self._require_open(command.name)
        return self._engine.execute(command)

    # -- commands ----------------------------------------------------------

    def create_employee(
        self, name: Any, address: Any, kind: Any, salary: Any, commission: Any = None
    ) -> int:
        return self.execute(CreateEmployeeCommand(name, address, kind, salary, commission))

    def remove_employee(self, employee_id: Any) -> None:
        self.execute(RemoveEmployeeCommand(employee_id))

    def post_timecard(self, employee_id: Any, work_date: Any, hours: Any) -> None:
        self.execute(PostTimecardCommand(employee_id, work_date, hours))

    def remove_timecard(self, employee_id: Any, work_date: Any) -> None:
        self.execute(RemoveTimecardCommand(employee_id, work_date))

    def post_sale(self, employee_id: Any, sale_date: Any, amount: Any) -> UUID:
        return self.execute(PostSaleCommand(employee_id, sale_date, amount))

    def remove_sale(self, employee_id: Any, receipt_id: UUID) -> None:
        self.execute(RemoveSaleCommand(employee_id, receipt_id))

    def post_service_charge(self, member_id: Any, charge_date: Any, amount: Any) -> UUID:
        return self.execute(PostServiceChargeCommand(member_id, charge_date, amount))

    def remove_service_charge(self, member_id: Any, charge_id: UUID) -> None:
        self.execute(RemoveServiceChargeCommand(member_id, charge_id))

    def change_attribute(self, employee_id: Any, attribute: Any, value: Any, *extra: Any) -> None:
        self.execute(ChangeAttributeCommand(employee_id, attribute, value, tuple(extra)))

    def change_type(self, employee_id: Any, kind: Any, amount: Any = None) -> None:
        self.execute(ChangeTypeCommand(employee_id, kind, amount))

    def set_union_membership(self, employee_id: Any, member_id: Any, daily_due: Any) -> None:
        self.execute(SetUnionMembershipCommand(employee_id, True, member_id, daily_due))

    def clear_union_membership(self, employee_id: Any) -> None:
        self.execute(SetUnionMembershipCommand(employee_id, False))

    def set_bank_payment(self, employee_id: Any, bank: Any, branch: Any, account: Any) -> None:
        self.execute(SetBankPaymentCommand(employee_id, bank, branch, account))

    def declare_schedule(self, descriptor: Any) -> str:
        return self.execute(DeclareScheduleCommand(descriptor))

    def run_payroll(self, run_date: Any, output_path: Any = None) -> PayrollRun:
        """
        Run payroll for ``run_date`` and optionally write the report.

        The run is committed before the report is written. Both share one
        ``correlation_id`` in the log.
        """
        with LogContext.bind(correlation_id=str(uuid4())):
            run = self.execute(RunPayrollCommand(run_date))
            if output_path is not None:
                write_report(run, output_path)
        return run

    def reset(self) -> None:
        self.execute(ResetSystemCommand())

    def undo(self) -> str:
        self._require_open("undo")
        return self._engine.undo().name

    def redo(self) -> str:
        self._require_open("redo")
        return self._engine.redo().name

    def shutdown(self) -> None:
        if not self._closed:
            self._closed = True
            logger.info(
                "payroll_system_shutdown",
                extra={"employee_count": len(self._state), "undo_depth": self._engine.undo_depth},
            )

    # -- queries -----------------------------------------------------------

    def get_attribute(self, employee_id: Any, attribute: Any) -> str:
        return employee_queries.get_attribute(self._state, employee_id, attribute)

    def find_employee_by_name(self, fragment: Any, index: int = 1) -> int:
        return employee_queries.find_employee_by_name(self._state, fragment, index)

    def employee_count(self) -> int:
        return employee_queries.employee_count(self._state)

    def hours_worked(self, employee_id: Any, start: Any, end: Any) -> Decimal:
        return employee_queries.hours_worked(self._state, employee_id, start, end)

    def normal_hours_worked(self, employee_id: Any, start: Any, end: Any) -> Decimal:
        return employee_queries.normal_hours_worked(self._state, employee_id, start, end)

    def overtime_hours_worked(self, employee_id: Any, start: Any, end: Any) -> Decimal:
        return employee_queries.overtime_hours_worked(self._state, employee_id, start, end)

    def sales_total(self, employee_id: Any, start: Any, end: Any) -> Decimal:
        return employee_queries.sales_total(self._state, employee_id, start, end)

    def service_charges_total(self, employee_id: Any, start: Any, end: Any) -> Decimal:
        return employee_queries.service_charges_total(self._state, employee_id, start, end)

    def preview_payroll(self, run_date: Any) -> PayrollRun:
        """Compute pass only; state is not advanced."""
        run, _ = payroll_run.compute_payroll(self._state, parse_date("date", run_date))
        return run

    def total_payroll(self, run_date: Any) -> Decimal:
        return payroll_run.total_payroll(self._state, parse_date("date", run_date))

    def write_report(self, run: PayrollRun, path: Any) -> Path:
        return write_report(run, path)