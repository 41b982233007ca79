"""
payroll_engines.tracer -- Engine invocation tracer emitting PAYROLL_ENGINE_TRACE.

Responsibility:
    ``@traced_engine`` wraps a pure engine function with a structured
    trace record: engine name, engine version, a short fingerprint of the
    positional arguments' ``repr`` and duration in milliseconds.

Architecture position:
    Engines -- infrastructure support for the pure calculation layer.
    Emits a log record only; inputs are never mutated. Uses its own
    logger name under ``payroll_kernel.engines`` so it needs no kernel
    logging imports.
"""

from __future__ import annotations

import functools
import hashlib
import logging
import time
from collections.abc import Callable
from typing import Any

_logger = logging.getLogger("payroll_kernel.engines.tracer")


def compute_input_fingerprint(args: tuple[Any, ...]) -> str:
    """16-hex-char SHA-256 prefix over the ``repr`` of each argument."""
    canonical = "|".join(repr(a) for a in args)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(engine_name: str, engine_version: str) -> Callable:
    """Decorator that emits PAYROLL_ENGINE_TRACE at DEBUG level."""

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            t0 = time.monotonic()
            result = func(*args, **kwargs)
            duration_ms = round((time.monotonic() - t0) * 1000, 2)

            if _logger.isEnabledFor(logging.DEBUG):
                _logger.debug(
                    "PAYROLL_ENGINE_TRACE",
                    extra={
                        "trace_type": "PAYROLL_ENGINE_TRACE",
                        "engine_name": engine_name,
                        "engine_version": engine_version,
                        "input_fingerprint": compute_input_fingerprint(args),
                        "duration_ms": duration_ms,
                    },
                )
            return result

        wrapper.engine_name = engine_name  # type: ignore[attr-defined]
        wrapper.engine_version = engine_version  # type: ignore[attr-defined]
        return wrapper

    return decorator
