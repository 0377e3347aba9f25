"""Record store interface, in-memory implementation and write locks."""

from .base import RecordStore
from .locks import RecordLockRegistry
from .memory import InMemoryRecordStore

__all__ = ['RecordStore', 'RecordLockRegistry', 'InMemoryRecordStore']
