"""
payroll_kernel.services.command_engine -- Atomic execute / undo / redo.

Responsibility:
    Executes ``Command`` values against a ``PayrollState`` with
    all-or-nothing semantics and keeps the undo and redo history.

Architecture position:
    Services -- the only caller of ``Command.apply``. The facade
    (``PayrollSystem``) owns one engine per state.

Invariants enforced:
    - Atomicity: a snapshot is taken before ``apply``; if ``apply`` raises,
      the snapshot is restored and the ORIGINAL exception propagates.
    - History: a successful execute pushes (before, after) onto the undo
      stack and clears the redo stack. ``undo`` restores ``before`` and
      moves the entry to the redo stack; ``redo`` restores ``after`` and
      moves it back.
    - Failed commands leave no history entry.

Failure modes:
    - Any exception from ``apply`` (after rollback).
    - ``NothingToUndoError`` / ``NothingToRedoError`` on empty stacks.

Audit relevance:
    Every execution, undo, redo and failure is logged with the command
    name and a per-execution ``command_id`` bound into ``LogContext``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID, uuid4

from payroll_kernel.domain.state import PayrollState
from payroll_kernel.exceptions import NothingToRedoError, NothingToUndoError
from payroll_kernel.logging_config import LogContext, get_logger
from payroll_kernel.services.commands import Command
from payroll_kernel.services.snapshot import StateSnapshot, restore_snapshot, take_snapshot

logger = get_logger("services.command_engine")


@dataclass(frozen=True)
class HistoryEntry:
    command: Command
    before: StateSnapshot
    after: StateSnapshot
    command_id: UUID = field(default_factory=uuid4)


class CommandEngine:
    """Snapshot-based transactional executor over one PayrollState."""

    def __init__(self, state: PayrollState):
        self._state = state
        self._undo: list[HistoryEntry] = []
        self._redo: list[HistoryEntry] = []

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def execute(self, command: Command) -> Any:
        """Apply ``command`` atomically and record it for undo."""
        command_id = uuid4()
        with LogContext.bind(
            command_id=str(command_id),
            command_name=command.name,
            employee_id=command.employee_ref,
        ):
            before = take_snapshot(self._state)
            try:
                result = command.apply(self._state)
            except Exception as exc:
                restore_snapshot(self._state, before)
                logger.warning(
                    "command_failed",
                    extra={
                        "command": command.name,
                        "error_code": getattr(exc, "code", type(exc).__name__),
                        "error": str(exc),
                    },
                )
                raise

            after = take_snapshot(self._state)
            self._undo.append(HistoryEntry(command, before, after, command_id))
            self._redo.clear()
            logger.info(
                "command_executed",
                extra={"command": command.name, "undo_depth": len(self._undo)},
            )
            return result

    def undo(self) -> Command:
        if not self._undo:
            raise NothingToUndoError()
        entry = self._undo.pop()
        restore_snapshot(self._state, entry.before)
        self._redo.append(entry)
        logger.info(
            "command_undone",
            extra={
                "command": entry.command.name,
                "undone_command_id": entry.command_id,
                "employee_count": entry.before.employee_count,
            },
        )
        return entry.command

    def redo(self) -> Command:
        if not self._redo:
            raise NothingToRedoError()
        entry = self._redo.pop()
        restore_snapshot(self._state, entry.after)
        self._undo.append(entry)
        logger.info(
            "command_redone",
            extra={
                "command": entry.command.name,
                "redone_command_id": entry.command_id,
                "employee_count": entry.after.employee_count,
            },
        )
        return entry.command

    def clear_history(self) -> None:
        self._undo.clear()
        self._redo.clear()
