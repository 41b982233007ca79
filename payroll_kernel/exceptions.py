"""
Typed Exception Hierarchy for the Payroll Kernel.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from PayrollKernelError:

    PayrollKernelError (base)
    |
    +-- ValidationError
    |   +-- RequiredFieldError
    |   +-- NotNumericError
    |   +-- NegativeValueError
    |   +-- NonPositiveValueError
    |   +-- ValueOutOfRangeError
    |   +-- InvalidDateError
    |   +-- DateRangeError
    |   +-- InvalidBooleanError
    |   +-- InvalidEmployeeTypeError
    |   +-- InvalidPaymentMethodError
    |
    +-- DomainConflictError
    |   +-- EmployeeNotFoundError
    |   +-- WrongEmployeeTypeError
    |   +-- TypeNotApplicableError
    |   +-- NotUnionMemberError
    |   +-- NotPaidByBankError
    |   +-- DuplicateUnionMemberError
    |   +-- UnionMemberNotFoundError
    |   +-- UnknownAttributeError
    |   +-- EmployeeNameNotFoundError
    |   +-- PostingNotFoundError
    |
    +-- ScheduleError
    |   +-- InvalidScheduleDescriptorError
    |   +-- DuplicateScheduleError
    |   +-- ScheduleNotAvailableError
    |
    +-- HistoryError
    |   +-- NothingToUndoError
    |   +-- NothingToRedoError
    |
    +-- SystemClosedError
    |
    +-- ReportError
        +-- InvalidReportPathError
        +-- ReportWriteError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Validation      | FIELD_REQUIRED              | Required text/number left blank
                | NOT_NUMERIC                 | Number field does not parse
                | NEGATIVE_VALUE              | Field must be >= 0
                | NON_POSITIVE_VALUE          | Field must be > 0 (hours, amounts)
                | VALUE_OUT_OF_RANGE          | Magnitude beyond what a payroll field holds
                | INVALID_DATE                | Not d/M/yyyy or not on the calendar
                | INVALID_DATE_RANGE          | Range start after range end
                | INVALID_BOOLEAN             | Expected "true" or "false"
                | INVALID_EMPLOYEE_TYPE       | Unknown employee type name
                | INVALID_PAYMENT_METHOD      | Unknown payment method name
----------------|-----------------------------|-----------------------------------------
Domain          | EMPLOYEE_NOT_FOUND          | Unknown, blank or malformed id
                | WRONG_EMPLOYEE_TYPE         | e.g. posting a sale for an hourly worker
                | TYPE_NOT_APPLICABLE         | Constructor arguments do not fit the type
                | NOT_UNION_MEMBER            | Union query on a non-member
                | NOT_PAID_BY_BANK            | Bank query on a non-bank payee
                | DUPLICATE_UNION_MEMBER      | Member id already used by someone else
                | UNION_MEMBER_NOT_FOUND      | No active membership with that id
                | UNKNOWN_ATTRIBUTE           | Attribute name not recognised
                | EMPLOYEE_NAME_NOT_FOUND     | Name search index out of range
                | POSTING_NOT_FOUND           | No timecard, sale or charge with that key
----------------|-----------------------------|-----------------------------------------
Schedule        | INVALID_SCHEDULE            | Descriptor does not parse / out of range
                | DUPLICATE_SCHEDULE          | Descriptor already registered
                | SCHEDULE_NOT_AVAILABLE      | Descriptor not registered
----------------|-----------------------------|-----------------------------------------
History         | NOTHING_TO_UNDO             | Undo with an empty undo stack
                | NOTHING_TO_REDO             | Redo with an empty redo stack
----------------|-----------------------------|-----------------------------------------
Lifecycle       | SYSTEM_CLOSED               | Command issued after shutdown()
----------------|-----------------------------|-----------------------------------------
Report          | INVALID_REPORT_PATH         | Blank output path
                | REPORT_WRITE_FAILED         | OS error while writing the report

===============================================================================
HANDLING PATTERNS
===============================================================================

1. CATCH SPECIFIC EXCEPTIONS:

    try:
        system.post_sale(emp_id, "3/1/2005", "100,00")
    except WrongEmployeeTypeError as e:
        show(f"Employee {e.employee_id} is not {e.expected}")

2. CATCH BY CATEGORY:

    except ValidationError as e:
        return {"error": e.code, "field": e.field}

3. HISTORY ERRORS ARE REPORTED, NEVER SILENT:

    try:
        system.undo()
    except NothingToUndoError:
        ...

All validation and domain errors are raised before the model is touched.
"""

from __future__ import annotations

from datetime import date
from typing import Any


class PayrollKernelError(Exception):
    """
    Base exception for all payroll kernel errors.

    All subclasses have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "PAYROLL_KERNEL_ERROR"


# =============================================================================
# Input validation
# =============================================================================


class ValidationError(PayrollKernelError):
    """Base exception for malformed or out-of-range input."""

    code: str = "VALIDATION_ERROR"


class RequiredFieldError(ValidationError):
    """A required field was missing or blank."""

    code: str = "FIELD_REQUIRED"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} is required")


class NotNumericError(ValidationError):
    """A numeric field could not be parsed."""

    code: str = "NOT_NUMERIC"

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"{field} must be numeric, got {value!r}")


class NegativeValueError(ValidationError):
    """A numeric field must be zero or greater."""

    code: str = "NEGATIVE_VALUE"

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"{field} must be non-negative, got {value}")


class NonPositiveValueError(ValidationError):
    """A numeric field must be strictly greater than zero."""

    code: str = "NON_POSITIVE_VALUE"

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"{field} must be positive, got {value}")


class ValueOutOfRangeError(ValidationError):
    """A numeric field is too large for any payroll amount or hour count."""

    code: str = "VALUE_OUT_OF_RANGE"

    def __init__(self, field: str, value: Any, limit: Any):
        self.field = field
        self.value = value
        self.limit = limit
        super().__init__(f"{field} must be below {limit}, got {value}")


class InvalidDateError(ValidationError):
    """A date string is malformed or names a day that does not exist."""

    code: str = "INVALID_DATE"

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"{field} is not a valid d/M/yyyy date: {value!r}")


class DateRangeError(ValidationError):
    """Range start falls after range end."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, start: date, end: date):
        self.start = start
        self.end = end
        super().__init__(f"Start date {start} is after end date {end}")


class InvalidBooleanError(ValidationError):
    """Expected the literal 'true' or 'false'."""

    code: str = "INVALID_BOOLEAN"

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"{field} must be true or false, got {value!r}")


class InvalidEmployeeTypeError(ValidationError):
    """Employee type name is not one of the supported variants."""

    code: str = "INVALID_EMPLOYEE_TYPE"

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid employee type: {value!r}")


class InvalidPaymentMethodError(ValidationError):
    """Payment method name is not recognised."""

    code: str = "INVALID_PAYMENT_METHOD"

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Invalid payment method: {value!r}")


# =============================================================================
# Domain conflicts
# =============================================================================


class DomainConflictError(PayrollKernelError):
    """Base exception for requests that conflict with the current model."""

    code: str = "DOMAIN_CONFLICT"


class EmployeeNotFoundError(DomainConflictError):
    """Employee id is unknown, blank or malformed."""

    code: str = "EMPLOYEE_NOT_FOUND"

    def __init__(self, employee_id: Any):
        self.employee_id = employee_id
        super().__init__(f"Employee not found: {employee_id!r}")


class WrongEmployeeTypeError(DomainConflictError):
    """Operation requires a different employee variant."""

    code: str = "WRONG_EMPLOYEE_TYPE"

    def __init__(self, employee_id: int, expected: str, actual: str):
        self.employee_id = employee_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Employee {employee_id} is {actual}, operation requires {expected}"
        )


class TypeNotApplicableError(DomainConflictError):
    """Arguments supplied do not fit the requested employee type."""

    code: str = "TYPE_NOT_APPLICABLE"

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Type {kind} not applicable: {reason}")


class NotUnionMemberError(DomainConflictError):
    """Employee has no union membership."""

    code: str = "NOT_UNION_MEMBER"

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} is not a union member")


class NotPaidByBankError(DomainConflictError):
    """Bank details requested for an employee not paid by bank deposit."""

    code: str = "NOT_PAID_BY_BANK"

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} is not paid by bank deposit")


class DuplicateUnionMemberError(DomainConflictError):
    """Union member id is already held by another employee."""

    code: str = "DUPLICATE_UNION_MEMBER"

    def __init__(self, member_id: str, holder_id: int):
        self.member_id = member_id
        self.holder_id = holder_id
        super().__init__(
            f"Union member id {member_id!r} already belongs to employee {holder_id}"
        )


class UnionMemberNotFoundError(DomainConflictError):
    """No active union membership with the given member id."""

    code: str = "UNION_MEMBER_NOT_FOUND"

    def __init__(self, member_id: str):
        self.member_id = member_id
        super().__init__(f"Union member not found: {member_id!r}")


class UnknownAttributeError(DomainConflictError):
    """Attribute name is not recognised."""

    code: str = "UNKNOWN_ATTRIBUTE"

    def __init__(self, attribute: Any):
        self.attribute = attribute
        super().__init__(f"Unknown attribute: {attribute!r}")


class EmployeeNameNotFoundError(DomainConflictError):
    """No employee at the requested position for a name search."""

    code: str = "EMPLOYEE_NAME_NOT_FOUND"

    def __init__(self, name: str, index: int):
        self.name = name
        self.index = index
        super().__init__(f"No employee #{index} with name containing {name!r}")


class PostingNotFoundError(DomainConflictError):
    """No timecard, sales receipt or service charge matches the removal key."""

    code: str = "POSTING_NOT_FOUND"

    def __init__(self, employee_id: int, posting: str, key: Any):
        self.employee_id = employee_id
        self.posting = posting
        self.key = key
        super().__init__(f"Employee {employee_id} has no {posting} {key}")


# =============================================================================
# Payment schedules
# =============================================================================


class ScheduleError(PayrollKernelError):
    """Base exception for payment schedule errors."""

    code: str = "SCHEDULE_ERROR"


class InvalidScheduleDescriptorError(ScheduleError):
    """Schedule descriptor does not parse or has out-of-range numbers."""

    code: str = "INVALID_SCHEDULE"

    def __init__(self, descriptor: Any, reason: str):
        self.descriptor = descriptor
        self.reason = reason
        super().__init__(f"Invalid payment schedule {descriptor!r}: {reason}")


class DuplicateScheduleError(ScheduleError):
    """Schedule descriptor is already registered."""

    code: str = "DUPLICATE_SCHEDULE"

    def __init__(self, descriptor: str):
        self.descriptor = descriptor
        super().__init__(f"Payment schedule already exists: {descriptor!r}")


class ScheduleNotAvailableError(ScheduleError):
    """Schedule descriptor has not been registered."""

    code: str = "SCHEDULE_NOT_AVAILABLE"

    def __init__(self, descriptor: str):
        self.descriptor = descriptor
        super().__init__(f"Payment schedule not available: {descriptor!r}")


# =============================================================================
# History
# =============================================================================


class HistoryError(PayrollKernelError):
    """Base exception for undo/redo history errors."""

    code: str = "HISTORY_ERROR"


class NothingToUndoError(HistoryError):
    """Undo requested with an empty undo stack."""

    code: str = "NOTHING_TO_UNDO"

    def __init__(self) -> None:
        super().__init__("Nothing to undo")


class NothingToRedoError(HistoryError):
    """Redo requested with an empty redo stack."""

    code: str = "NOTHING_TO_REDO"

    def __init__(self) -> None:
        super().__init__("Nothing to redo")


# =============================================================================
# Lifecycle
# =============================================================================


class SystemClosedError(PayrollKernelError):
    """Command issued after the system was shut down."""

    code: str = "SYSTEM_CLOSED"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Cannot run {operation}: system has been shut down")


# =============================================================================
# Reports
# =============================================================================


class ReportError(PayrollKernelError):
    """Base exception for payroll report output errors."""

    code: str = "REPORT_ERROR"


class InvalidReportPathError(ReportError):
    """Report output path is blank."""

    code: str = "INVALID_REPORT_PATH"

    def __init__(self, path: Any):
        self.path = path
        super().__init__(f"Invalid report output path: {path!r}")


class ReportWriteError(ReportError):
    """The report could not be written to disk."""

    code: str = "REPORT_WRITE_FAILED"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Could not write report to {path}: {reason}")
