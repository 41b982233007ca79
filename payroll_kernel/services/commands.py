"""
payroll_kernel.services.commands -- Undoable payroll mutations.

Responsibility:
    One ``Command`` value per state-changing operation. A command captures
    its raw inputs at construction and performs its whole effect in
    ``apply(state)``; it never records its own inverse. The
    ``CommandEngine`` snapshots around ``apply`` to make every command
    atomic and undoable.

Architecture position:
    Services -- commands delegate to ``employee_service`` (record
    mutations) and ``payroll_run`` (payroll runs). They hold no reference
    to a live state between invocations, so redo re-uses the stored
    after-snapshot instead of calling ``apply`` again.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar
from uuid import UUID

from payroll_kernel.domain.state import PayrollState
from payroll_kernel.domain.validation import parse_date
from payroll_kernel.services import employee_service
from payroll_kernel.services.payroll_run import PayrollRun, run_payroll


class Command(ABC):
    """A single undoable mutation of a PayrollState."""

    name: ClassVar[str] = "command"

    @abstractmethod
    def apply(self, state: PayrollState) -> Any:
        """Perform the effect. Raise before mutating on invalid input."""

    @property
    def employee_ref(self) -> str | None:
        """Employee id for log context, when the command targets one."""
        ref = getattr(self, "employee_id", None)
        return None if ref is None else str(ref)


@dataclass(frozen=True)
class CreateEmployeeCommand(Command):
    name: ClassVar[str] = "create_employee"

    employee_name: Any
    address: Any
    kind: Any
    base: Any
    commission: Any = None

    def apply(self, state: PayrollState) -> int:
        employee = employee_service.create_employee(
            state, self.employee_name, self.address, self.kind, self.base, self.commission
        )
        return employee.id


@dataclass(frozen=True)
class RemoveEmployeeCommand(Command):
    name: ClassVar[str] = "remove_employee"

    employee_id: Any

    def apply(self, state: PayrollState) -> None:
        employee_service.remove_employee(state, self.employee_id)


@dataclass(frozen=True)
class PostTimecardCommand(Command):
    name: ClassVar[str] = "post_timecard"

    employee_id: Any
    work_date: Any
    hours: Any

    def apply(self, state: PayrollState) -> None:
        employee_service.post_timecard(state, self.employee_id, self.work_date, self.hours)


@dataclass(frozen=True)
class RemoveTimecardCommand(Command):
    name: ClassVar[str] = "remove_timecard"

    employee_id: Any
    work_date: Any

    def apply(self, state: PayrollState) -> None:
        employee_service.remove_timecard(state, self.employee_id, self.work_date)


@dataclass(frozen=True)
class PostSaleCommand(Command):
    name: ClassVar[str] = "post_sale"

    employee_id: Any
    sale_date: Any
    amount: Any

    def apply(self, state: PayrollState) -> UUID:
        receipt = employee_service.post_sale(state, self.employee_id, self.sale_date, self.amount)
        return receipt.receipt_id


@dataclass(frozen=True)
class RemoveSaleCommand(Command):
    name: ClassVar[str] = "remove_sale"

    employee_id: Any
    receipt_id: UUID

    def apply(self, state: PayrollState) -> None:
        employee_service.remove_sale(state, self.employee_id, self.receipt_id)


@dataclass(frozen=True)
class PostServiceChargeCommand(Command):
    name: ClassVar[str] = "post_service_charge"

    member_id: Any
    charge_date: Any
    amount: Any

    def apply(self, state: PayrollState) -> UUID:
        charge = employee_service.post_service_charge(
            state, self.member_id, self.charge_date, self.amount
        )
        return charge.charge_id


@dataclass(frozen=True)
class RemoveServiceChargeCommand(Command):
    name: ClassVar[str] = "remove_service_charge"

    member_id: Any
    charge_id: UUID

    def apply(self, state: PayrollState) -> None:
        employee_service.remove_service_charge(state, self.member_id, self.charge_id)


@dataclass(frozen=True)
class ChangeAttributeCommand(Command):
    name: ClassVar[str] = "change_attribute"

    employee_id: Any
    attribute: Any
    value: Any
    extra: tuple[Any, ...] = ()

    def apply(self, state: PayrollState) -> None:
        employee_service.change_attribute(
            state, self.employee_id, self.attribute, self.value, *self.extra
        )


@dataclass(frozen=True)
class ChangeTypeCommand(Command):
    name: ClassVar[str] = "change_type"

    employee_id: Any
    kind: Any
    amount: Any = None

    def apply(self, state: PayrollState) -> None:
        employee_service.change_type(state, self.employee_id, self.kind, self.amount)


@dataclass(frozen=True)
class SetUnionMembershipCommand(Command):
    """Join the union (``member`` True) or leave it (``member`` False)."""

    name: ClassVar[str] = "set_union_membership"

    employee_id: Any
    member: bool
    member_id: Any = None
    daily_due: Any = None

    def apply(self, state: PayrollState) -> None:
        if self.member:
            employee_service.set_union_membership(
                state, self.employee_id, self.member_id, self.daily_due
            )
        else:
            employee_service.clear_union_membership(state, self.employee_id)


@dataclass(frozen=True)
class SetBankPaymentCommand(Command):
    name: ClassVar[str] = "set_bank_payment"

    employee_id: Any
    bank: Any
    branch: Any
    account: Any

    def apply(self, state: PayrollState) -> None:
        employee_service.set_payment_method(
            state, self.employee_id, "banco", self.bank, self.branch, self.account
        )


@dataclass(frozen=True)
class DeclareScheduleCommand(Command):
    name: ClassVar[str] = "declare_schedule"

    descriptor: Any

    def apply(self, state: PayrollState) -> str:
        return employee_service.declare_schedule(state, self.descriptor).text


@dataclass(frozen=True)
class RunPayrollCommand(Command):
    name: ClassVar[str] = "run_payroll"

    run_date: Any

    def apply(self, state: PayrollState) -> PayrollRun:
        return run_payroll(state, parse_date("date", self.run_date))


@dataclass(frozen=True)
class ResetSystemCommand(Command):
    name: ClassVar[str] = "reset_system"

    def apply(self, state: PayrollState) -> None:
        employee_service.reset(state)
