"""
Pytest fixtures for the payroll kernel test suite.

Provides:
- Structured logging configured at DEBUG for every test session
- A fresh PayrollSystem built from the shipped default policy
- Employee builders for the three variants
- Log capture as parsed JSON dicts
"""

import json
import logging
from io import StringIO

import pytest

from payroll_config import PayrollPolicy, get_active_config
from payroll_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from payroll_kernel.services.payroll_system import PayrollSystem


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture payroll_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, system):
            system.create_employee(...)
            logs = captured_logs()
            assert any(r["message"] == "command_executed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("payroll_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Payroll fixtures
# =============================================================================


@pytest.fixture(scope="session")
def policy() -> PayrollPolicy:
    """The shipped default policy, loaded from YAML once per session."""
    return get_active_config()


@pytest.fixture
def system(policy) -> PayrollSystem:
    return PayrollSystem(policy=policy)


@pytest.fixture
def hourly(system):
    """Builder: hire an hourly employee and return the id."""

    def _hire(name="Joao", address="Rua A, 1", rate="10,00"):
        return system.create_employee(name, address, "horista", rate)

    return _hire


@pytest.fixture
def salaried(system):
    """Builder: hire a salaried employee and return the id."""

    def _hire(name="Maria", address="Rua B, 2", salary="2000,00"):
        return system.create_employee(name, address, "assalariado", salary)

    return _hire


@pytest.fixture
def commissioned(system):
    """Builder: hire a commissioned employee and return the id."""

    def _hire(name="Pedro", address="Rua C, 3", salary="3000,00", rate="0,10"):
        return system.create_employee(name, address, "comissionado", salary, rate)

    return _hire
