"""Unit tests for input parsing (payroll_kernel/domain/validation.py)."""

from datetime import date
from decimal import Decimal

import pytest

from payroll_kernel.domain.validation import (
    parse_bool,
    parse_date,
    parse_date_range,
    parse_decimal,
    parse_employee_id,
    parse_kind,
    parse_payment_method,
    require_text,
)
from payroll_kernel.domain.values import EmployeeKind, PaymentMethod
from payroll_kernel.exceptions import (
    DateRangeError,
    EmployeeNotFoundError,
    InvalidBooleanError,
    InvalidDateError,
    InvalidEmployeeTypeError,
    InvalidPaymentMethodError,
    NegativeValueError,
    NonPositiveValueError,
    NotNumericError,
    RequiredFieldError,
    ValidationError,
    ValueOutOfRangeError,
)


class TestRequireText:

    def test_returns_value(self):
        assert require_text("name", "Ana") == "Ana"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_rejected(self, value):
        with pytest.raises(RequiredFieldError) as exc_info:
            require_text("name", value)
        assert exc_info.value.field == "name"


class TestParseDecimal:

    @pytest.mark.parametrize(
        "text,expected",
        [("10,50", Decimal("10.50")), ("10.50", Decimal("10.50")), ("0", Decimal("0"))],
    )
    def test_either_separator(self, text, expected):
        assert parse_decimal("salary", text) == expected

    def test_decimal_and_int_pass_through(self):
        assert parse_decimal("salary", Decimal("3.5")) == Decimal("3.5")
        assert parse_decimal("salary", 7) == Decimal("7")

    def test_blank_is_required(self):
        with pytest.raises(RequiredFieldError):
            parse_decimal("salary", "")

    @pytest.mark.parametrize("value", ["abc", "1,2,3", "NaN", "Infinity", True])
    def test_not_numeric(self, value):
        with pytest.raises(NotNumericError):
            parse_decimal("salary", value)

    def test_negative_rejected(self):
        with pytest.raises(NegativeValueError):
            parse_decimal("salary", "-1")

    def test_zero_rejected_when_positive(self):
        with pytest.raises(NonPositiveValueError):
            parse_decimal("hours", "0", positive=True)

    @pytest.mark.parametrize("value", ["1e999999", "10000000000000", Decimal("1E+13")])
    def test_magnitude_out_of_range(self, value):
        with pytest.raises(ValueOutOfRangeError) as exc_info:
            parse_decimal("hours", value, positive=True)
        assert exc_info.value.limit == Decimal("1E+13")

    def test_largest_accepted_magnitude(self):
        assert parse_decimal("salary", "9999999999999,99") == Decimal("9999999999999.99")

    def test_all_are_validation_errors(self):
        with pytest.raises(ValidationError):
            parse_decimal("salary", "x")


class TestParseDate:

    def test_strict_format(self):
        assert parse_date("date", "1/1/2005") == date(2005, 1, 1)
        assert parse_date("date", "31/12/2005") == date(2005, 12, 31)

    @pytest.mark.parametrize(
        "value",
        ["30/2/2005", "2005-01-01", "1/13/2005", "", None, "1/1/05", "\u0661/1/2005"],
    )
    def test_invalid(self, value):
        with pytest.raises(InvalidDateError):
            parse_date("date", value)

    def test_date_passes_through(self):
        assert parse_date("date", date(2005, 1, 7)) == date(2005, 1, 7)

    def test_range_rejects_reversed(self):
        with pytest.raises(DateRangeError):
            parse_date_range("2/1/2005", "1/1/2005")

    def test_range_allows_equal(self):
        assert parse_date_range("1/1/2005", "1/1/2005") == (date(2005, 1, 1), date(2005, 1, 1))


class TestParseMisc:

    def test_bool(self):
        assert parse_bool("union", "true") is True
        assert parse_bool("union", "FALSE") is False
        with pytest.raises(InvalidBooleanError):
            parse_bool("union", "sim")

    @pytest.mark.parametrize(
        "value", ["", None, "abc", "-1", True, "\u00b2", "1\u00b2", "\u0661"]
    )
    def test_bad_employee_id_is_not_found(self, value):
        with pytest.raises(EmployeeNotFoundError):
            parse_employee_id(value)

    def test_employee_id(self):
        assert parse_employee_id("12") == 12
        assert parse_employee_id(3) == 3

    def test_kind_case_insensitive(self):
        assert parse_kind("Horista") is EmployeeKind.HOURLY
        with pytest.raises(InvalidEmployeeTypeError):
            parse_kind("estagiario")

    def test_payment_method_case_insensitive(self):
        assert parse_payment_method("EMMAOS") is PaymentMethod.CASH
        assert parse_payment_method("banco") is PaymentMethod.BANK
        with pytest.raises(InvalidPaymentMethodError):
            parse_payment_method("pix")
