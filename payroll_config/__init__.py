"""
payroll_config -- single public entrypoint for payroll configuration.

Responsibility:
    Provides the ONLY way to obtain payroll policy at runtime through
    ``get_active_config()``. Returns a frozen ``PayrollPolicy``: overtime
    threshold and multiplier, biweekly anchor, schedule reference date,
    built-in and default payment schedules, and descriptor range limits.

Architecture position:
    Configuration -- YAML-driven policy, validated at load time. This
    package sits above ``payroll_kernel.domain`` and below
    ``payroll_kernel.services``. The kernel domain and the engines never
    read configuration files; they receive a ``PayrollPolicy`` value.

Failure modes:
    - ``FileNotFoundError`` -- the requested policy file does not exist.
    - ``KeyError`` -- a required section is missing.
    - ``ValueError`` -- a value is malformed or the policy is inconsistent.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``PAYROLL_CONFIG_TRACE`` log entry with the config id, version and
    checksum, tying every payroll run to the policy that governed it.
"""

from __future__ import annotations

import logging
from pathlib import Path

from payroll_config.loader import load_policy
from payroll_config.schema import PayrollPolicy

_logger = logging.getLogger("payroll_kernel.config")

_DEFAULT_CONFIG_FILE = Path(__file__).parent / "sets" / "default.yaml"


def get_active_config(config_path: Path | None = None) -> PayrollPolicy:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a policy YAML file. Defaults to
            ``payroll_config/sets/default.yaml``.

    Returns:
        PayrollPolicy -- the frozen runtime policy.

    Raises:
        FileNotFoundError: If the policy file does not exist.
        KeyError: If a required section is missing.
        ValueError: If validation fails.
    """
    path = Path(config_path) if config_path is not None else _DEFAULT_CONFIG_FILE
    policy = load_policy(path)

    _logger.info(
        "PAYROLL_CONFIG_TRACE",
        extra={
            "trace_type": "PAYROLL_CONFIG_TRACE",
            "config_id": policy.config_id,
            "config_version": policy.version,
            "checksum": policy.checksum,
            "source": str(path),
        },
    )
    return policy


__all__ = ["PayrollPolicy", "get_active_config"]
