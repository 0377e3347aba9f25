"""
Undo/redo ledger.

Keeps an undo stack and a redo stack of applied operations. Undoing moves an
entry to the redo stack only when its inverse succeeds; a failed undo or redo
leaves both stacks as they were.
"""

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Optional, Callable, Tuple

from ..store.base import RecordStore
from ..store.locks import RecordLockRegistry
from .effects import UndoEffect, undo_effect, redo_effect

logger = logging.getLogger(__name__)


class LedgerStatus(Enum):
    """Outcome of an undo or redo request."""
    DONE = "done"
    NOTHING_TO_UNDO = "nothing_to_undo"
    NOTHING_TO_REDO = "nothing_to_redo"
    FAILED = "failed"


@dataclass(slots=True)
class LedgerResult:
    """Result of an undo or redo request."""
    status: LedgerStatus
    description: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == LedgerStatus.DONE

    def __str__(self) -> str:
        if self.status == LedgerStatus.DONE:
            return f"Done: {self.description}"
        if self.status == LedgerStatus.FAILED:
            return f"Failed: {self.description} ({self.error})"
        return self.status.value.replace('_', ' ').capitalize()


@dataclass(slots=True)
class LedgerEntry:
    """One undoable operation."""
    description: str
    undo_fn: Callable[[], bool]
    redo_fn: Callable[[], bool]
    effect: Optional[UndoEffect] = None
    record_ids: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'description': self.description,
            'effect': self.effect.to_dict() if self.effect is not None else None,
            'record_ids': list(self.record_ids),
        }


class UndoLedger:
    """
    Undo and redo stacks of applied operations.

    Undo and redo run one at a time, while holding the write locks of the
    affected records. The stacks stay available to register() while an
    undo or redo is talking to the store.
    """

    def __init__(self, store: RecordStore, locks: Optional[RecordLockRegistry] = None):
        """Initialize the ledger.

        Args:
            store: Store that default inverse and forward operations run against
            locks: Per-record lock registry shared with the other writers
        """
        self.store = store
        self.locks = locks or RecordLockRegistry()
        self._lock = threading.RLock()
        # Serializes undo and redo; registration only needs _lock
        self._history_lock = threading.Lock()
        self._generation = 0
        self._undo_stack: List[LedgerEntry] = []
        self._redo_stack: List[LedgerEntry] = []

    def register(
        self,
        effect: UndoEffect,
        description: Optional[str] = None,
        undo_fn: Optional[Callable[[], bool]] = None,
        redo_fn: Optional[Callable[[], bool]] = None,
    ) -> LedgerEntry:
        """
        Register an applied effect. Clears the redo stack.

        Args:
            effect: What the operation changed
            description: Text for undo/redo menus (defaults to effect.describe())
            undo_fn: Overrides the effect's inverse operation
            redo_fn: Overrides the effect's forward operation

        Returns:
            The new ledger entry
        """
        entry = LedgerEntry(
            description=description or effect.describe(),
            undo_fn=undo_fn or (lambda: undo_effect(effect, self.store)),
            redo_fn=redo_fn or (lambda: redo_effect(effect, self.store)),
            effect=effect,
            record_ids=tuple(effect.record_ids),
        )
        self._push(entry)
        return entry

    def register_operation(
        self,
        description: str,
        undo_fn: Callable[[], bool],
        redo_fn: Callable[[], bool],
        record_ids: Tuple[str, ...] = (),
    ) -> LedgerEntry:
        """Register an operation that has no effect value. Clears the redo stack."""
        entry = LedgerEntry(
            description=description,
            undo_fn=undo_fn,
            redo_fn=redo_fn,
            record_ids=tuple(record_ids),
        )
        self._push(entry)
        return entry

    def _push(self, entry: LedgerEntry) -> None:
        with self._lock:
            self._undo_stack.append(entry)
            self._redo_stack.clear()
            self._generation += 1
        logger.debug(f"Registered undoable operation: {entry.description}")

    def undo(self) -> LedgerResult:
        """Undo the most recent operation."""
        with self._history_lock:
            with self._lock:
                if not self._undo_stack:
                    return LedgerResult(LedgerStatus.NOTHING_TO_UNDO)
                entry = self._undo_stack[-1]
                generation = self._generation

            # The stack lock is not held during the store call
            result = self._run(entry, entry.undo_fn, "undo")
            if result.success:
                with self._lock:
                    _remove(self._undo_stack, entry)
                    # A registration during the undo discarded the redo history
                    if generation == self._generation:
                        self._redo_stack.append(entry)
            return result

    def redo(self) -> LedgerResult:
        """Redo the most recently undone operation."""
        with self._history_lock:
            with self._lock:
                if not self._redo_stack:
                    return LedgerResult(LedgerStatus.NOTHING_TO_REDO)
                entry = self._redo_stack[-1]

            result = self._run(entry, entry.redo_fn, "redo")
            if result.success:
                with self._lock:
                    _remove(self._redo_stack, entry)
                    self._undo_stack.append(entry)
            return result

    def _run(self, entry: LedgerEntry, operation: Callable[[], bool], verb: str) -> LedgerResult:
        try:
            with self.locks.hold(*entry.record_ids):
                succeeded = operation()
        except Exception as e:
            logger.error(f"Failed to {verb} '{entry.description}': {e}", exc_info=True)
            return LedgerResult(LedgerStatus.FAILED, entry.description, str(e))

        if not succeeded:
            logger.warning(f"Store refused to {verb} '{entry.description}'")
            return LedgerResult(LedgerStatus.FAILED, entry.description, f"Store refused to {verb}")

        logger.info(f"{verb.capitalize()}: {entry.description}")
        return LedgerResult(LedgerStatus.DONE, entry.description)

    @property
    def can_undo(self) -> bool:
        with self._lock:
            return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        with self._lock:
            return bool(self._redo_stack)

    @property
    def undo_description(self) -> Optional[str]:
        with self._lock:
            return self._undo_stack[-1].description if self._undo_stack else None

    @property
    def redo_description(self) -> Optional[str]:
        with self._lock:
            return self._redo_stack[-1].description if self._redo_stack else None

    def clear(self) -> None:
        """Forget every registered operation."""
        with self._lock:
            self._undo_stack.clear()
            self._redo_stack.clear()
            self._generation += 1

    def to_dict(self) -> Dict[str, Any]:
        """Serialize both stacks, oldest entry first."""
        with self._lock:
            return {
                'undo': [entry.to_dict() for entry in self._undo_stack],
                'redo': [entry.to_dict() for entry in self._redo_stack],
            }


def _remove(stack: List[LedgerEntry], entry: LedgerEntry) -> None:
    """Remove `entry` by identity if it is still on the stack."""
    for index in range(len(stack) - 1, -1, -1):
        if stack[index] is entry:
            del stack[index]
            return
