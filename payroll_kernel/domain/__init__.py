"""
Payroll kernel domain layer.

Pure data and rules: no I/O, no logging handlers, no configuration files.
"""

from payroll_kernel.domain.employee import (
    CommissionedTerms,
    Employee,
    HourlyTerms,
    SalariedTerms,
    SalesReceipt,
    ServiceCharge,
    TimeCard,
    UnionMembership,
)
from payroll_kernel.domain.schedule import PaymentSchedule, ScheduleCadence
from payroll_kernel.domain.state import PayrollState
from payroll_kernel.domain.values import (
    BankAccount,
    EmployeeKind,
    PaymentMethod,
    floor2,
    format_amount,
    format_hours,
    round_money,
)

__all__ = [
    "BankAccount",
    "CommissionedTerms",
    "Employee",
    "EmployeeKind",
    "HourlyTerms",
    "PaymentMethod",
    "PaymentSchedule",
    "PayrollState",
    "SalariedTerms",
    "SalesReceipt",
    "ScheduleCadence",
    "ServiceCharge",
    "TimeCard",
    "UnionMembership",
    "floor2",
    "format_amount",
    "format_hours",
    "round_money",
]
