"""Services for the payroll kernel (command engine, runs, facade)."""

from payroll_kernel.services.command_engine import CommandEngine, HistoryEntry
from payroll_kernel.services.payroll_run import PayGroup, PayLine, PayrollRun
from payroll_kernel.services.payroll_system import PayrollSystem
from payroll_kernel.services.snapshot import StateSnapshot, restore_snapshot, take_snapshot

__all__ = [
    "CommandEngine",
    "HistoryEntry",
    "PayGroup",
    "PayLine",
    "PayrollRun",
    "PayrollSystem",
    "StateSnapshot",
    "restore_snapshot",
    "take_snapshot",
]
