"""Undoable effects and the undo/redo ledger."""

from .effects import (
    AddedPhone,
    AddedEmail,
    AddedToGroup,
    Archived,
    UpdatedName,
    MergedRecords,
    UndoEffect,
    undo_effect,
    redo_effect,
)
from .ledger import LedgerStatus, LedgerResult, LedgerEntry, UndoLedger

__all__ = [
    'AddedPhone',
    'AddedEmail',
    'AddedToGroup',
    'Archived',
    'UpdatedName',
    'MergedRecords',
    'UndoEffect',
    'undo_effect',
    'redo_effect',
    'LedgerStatus',
    'LedgerResult',
    'LedgerEntry',
    'UndoLedger',
]
