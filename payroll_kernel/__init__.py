"""
Payroll Kernel

An in-memory payroll engine with:
- Hourly, salaried and commissioned employees
- Union membership, dues and service charges
- Snapshot-based undo/redo over every mutation
- Fixed and user-declared payment schedules
- Exact decimal arithmetic with explicit rounding
"""

__version__ = "0.1.0"
