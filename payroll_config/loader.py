"""
Configuration Loader (``payroll_config.loader``).

Responsibility
--------------
Loads a YAML policy file and parses it into a frozen
``payroll_config.schema.PayrollPolicy``. Runtime callers go through
``payroll_config.get_active_config()`` instead of calling this directly.

Invariants enforced
-------------------
* Parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; no silent defaults for required sections.
* Monetary and hour quantities are parsed to ``Decimal`` from their
  string form, never through ``float``.
* ``compute_checksum`` is deterministic over the parsed document.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Invalid dates or numbers  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from payroll_config.schema import PayrollPolicy


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_date(value: Any) -> date:
    """Parse a date from YAML (ISO string or date object)."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ValueError(f"Cannot parse date from {value!r}")


def parse_decimal(value: Any) -> Decimal:
    """Parse a Decimal from YAML. Floats are rejected to avoid binary drift."""
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError(f"Quote decimal values in YAML, got {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Cannot parse decimal from {value!r}") from e


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_policy(data: dict[str, Any]) -> PayrollPolicy:
    """
    Parse a ``PayrollPolicy`` from a loaded YAML document.

    Raises:
        KeyError: if a required section is missing.
        ValueError: if a value is malformed or the policy is inconsistent.
    """
    overtime = data["overtime"]
    calendar = data["calendar"]
    schedules = data["schedules"]
    limits = schedules.get("limits", {})

    return PayrollPolicy(
        config_id=str(data.get("config_id", "default")),
        version=int(data.get("version", 1)),
        overtime_threshold_hours=parse_decimal(overtime["threshold_hours"]),
        overtime_multiplier=parse_decimal(overtime["multiplier"]),
        biweekly_anchor=parse_date(calendar["biweekly_anchor"]),
        schedule_reference=parse_date(calendar["schedule_reference"]),
        builtin_schedules=tuple(str(s) for s in schedules["builtin"]),
        default_schedules=tuple(
            (str(kind), str(descriptor))
            for kind, descriptor in schedules["defaults"].items()
        ),
        max_month_day=int(limits.get("max_month_day", 28)),
        max_week_interval=int(limits.get("max_week_interval", 52)),
        checksum=compute_checksum(data),
    )


def load_policy(path: Path) -> PayrollPolicy:
    """Load and parse a policy file."""
    return parse_policy(load_yaml_file(path))
