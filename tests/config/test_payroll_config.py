"""
Tests for payroll configuration loading.

Verifies:
- the shipped default policy
- PAYROLL_CONFIG_TRACE on every load
- custom policy files and their validation
"""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
import yaml

from payroll_config import PayrollPolicy, get_active_config
from payroll_config.loader import compute_checksum, load_policy, parse_decimal

DEFAULT_DOC = {
    "config_id": "test",
    "version": 2,
    "overtime": {"threshold_hours": "6", "multiplier": "2"},
    "calendar": {"biweekly_anchor": "2005-01-14", "schedule_reference": "2005-01-08"},
    "schedules": {
        "builtin": ["semanal 5", "mensal $", "semanal 2 5"],
        "defaults": {
            "horista": "semanal 5",
            "assalariado": "mensal $",
            "comissionado": "semanal 2 5",
        },
        "limits": {"max_month_day": 28, "max_week_interval": 52},
    },
}


def _write(tmp_path: Path, doc: dict, name: str = "policy.yaml") -> Path:
    path = tmp_path / name
    path.write_text(yaml.safe_dump(doc), encoding="utf-8")
    return path


def _variant(**sections) -> dict:
    doc = yaml.safe_load(yaml.safe_dump(DEFAULT_DOC))
    doc.update(sections)
    return doc


class TestDefaultPolicy:

    def test_shipped_values(self):
        policy = get_active_config()
        assert policy.config_id == "default"
        assert policy.overtime_threshold_hours == Decimal("8")
        assert policy.overtime_multiplier == Decimal("1.5")
        assert policy.biweekly_anchor == date(2005, 1, 14)
        assert policy.schedule_reference == date(2005, 1, 8)
        assert policy.default_schedule("comissionado") == "semanal 2 5"
        assert len(policy.checksum) == 64

    def test_matches_dataclass_defaults(self):
        loaded = get_active_config()
        built = PayrollPolicy()
        assert loaded.overtime_threshold_hours == built.overtime_threshold_hours
        assert loaded.builtin_schedules == built.builtin_schedules
        assert dict(loaded.default_schedules) == dict(built.default_schedules)

    def test_trace_logged(self, captured_logs):
        policy = get_active_config()
        traces = [r for r in captured_logs() if r["message"] == "PAYROLL_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["logger"] == "payroll_kernel.config"
        assert traces[0]["checksum"] == policy.checksum
        assert traces[0]["config_version"] == 1


class TestCustomPolicy:

    def test_load_custom_file(self, tmp_path):
        policy = get_active_config(_write(tmp_path, DEFAULT_DOC))
        assert policy.config_id == "test"
        assert policy.version == 2
        assert policy.overtime_threshold_hours == Decimal("6")

    def test_checksum_tracks_content(self, tmp_path):
        a = load_policy(_write(tmp_path, DEFAULT_DOC, "a.yaml"))
        b = load_policy(_write(tmp_path, DEFAULT_DOC, "b.yaml"))
        c = load_policy(
            _write(tmp_path, _variant(overtime={"threshold_hours": "7", "multiplier": "2"}), "c.yaml")
        )
        assert a.checksum == b.checksum
        assert a.checksum != c.checksum

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "nope.yaml")

    def test_missing_section(self, tmp_path):
        doc = _variant()
        del doc["overtime"]
        with pytest.raises(KeyError):
            load_policy(_write(tmp_path, doc))

    @pytest.mark.parametrize(
        "sections",
        [
            {"overtime": {"threshold_hours": 8.0, "multiplier": "1.5"}},
            {"overtime": {"threshold_hours": "0", "multiplier": "1.5"}},
            {"overtime": {"threshold_hours": "8", "multiplier": "0.5"}},
            {"calendar": {"biweekly_anchor": "14/01/2005", "schedule_reference": "2005-01-08"}},
        ],
    )
    def test_bad_values(self, tmp_path, sections):
        with pytest.raises(ValueError):
            load_policy(_write(tmp_path, _variant(**sections)))

    def test_default_must_be_builtin(self, tmp_path):
        schedules = dict(DEFAULT_DOC["schedules"])
        schedules["defaults"] = {**schedules["defaults"], "horista": "mensal 10"}
        with pytest.raises(ValueError, match="not a built-in"):
            load_policy(_write(tmp_path, _variant(schedules=schedules)))

    def test_invalid_builtin(self, tmp_path):
        schedules = dict(DEFAULT_DOC["schedules"])
        schedules["builtin"] = ["semanal 5", "mensal $", "semanal 2 5", "quinzenal"]
        with pytest.raises(ValueError, match="Invalid schedule"):
            load_policy(_write(tmp_path, _variant(schedules=schedules)))

    def test_policy_drives_system(self, tmp_path):
        from payroll_kernel.services.payroll_system import PayrollSystem

        system = PayrollSystem(policy=get_active_config(_write(tmp_path, DEFAULT_DOC)))
        emp_id = system.create_employee("Ana", "Rua A", "horista", "10")
        system.post_timecard(emp_id, "3/1/2005", "8")
        assert system.overtime_hours_worked(emp_id, "1/1/2005", "8/1/2005") == Decimal("2")
        assert system.total_payroll("7/1/2005") == Decimal("100.00")


class TestParsing:

    def test_decimal_rejects_float(self):
        with pytest.raises(ValueError):
            parse_decimal(1.5)

    def test_decimal_accepts_int_and_text(self):
        assert parse_decimal(8) == Decimal("8")
        assert parse_decimal("1.5") == Decimal("1.5")

    def test_checksum_is_order_independent(self):
        assert compute_checksum({"a": 1, "b": 2}) == compute_checksum({"b": 2, "a": 1})
