"""
Activity log for organizer operations.

Keeps a bounded, in-memory history of remediation actions, merges, undos and
redos for display and reporting.
"""

import threading
from collections import deque
from dataclasses import dataclass, asdict, field
from datetime import datetime
from enum import Enum
from typing import List, Dict, Any, Optional, Iterable


class ActivityType(Enum):
    """Types of logged activity."""
    HEALTH_ACTION = "health_action"
    MERGE = "merge"
    UNDO = "undo"
    REDO = "redo"


@dataclass
class ActivityEntry:
    """Single activity log entry."""
    kind: str = ""
    title: str = ""
    detail: Optional[str] = None
    record_ids: List[str] = field(default_factory=list)
    timestamp: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ActivityEntry':
        """Create from dictionary."""
        return cls(**data)


class ActivityLog:
    """Bounded history of organizer activity, most recent last.

    Once `max_entries` is reached the oldest entries are dropped.
    """

    def __init__(self, max_entries: int = 200):
        self._lock = threading.Lock()
        self._entries = deque(maxlen=max_entries)

    def __len__(self) -> int:
        return len(self._entries)

    def log(
        self,
        kind: ActivityType,
        title: str,
        record_ids: Iterable[str] = (),
        detail: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ActivityEntry:
        """
        Record an activity.

        Args:
            kind: Type of activity
            title: Short description
            record_ids: Records the activity touched
            detail: Optional longer description
            metadata: Additional metadata

        Returns:
            The stored entry
        """
        entry = ActivityEntry(
            kind=kind.value,
            title=title,
            detail=detail,
            record_ids=list(record_ids),
            timestamp=datetime.now().isoformat(),
            metadata=metadata,
        )
        with self._lock:
            self._entries.append(entry)
        return entry

    def get_recent(self, limit: int = 100) -> List[ActivityEntry]:
        """Get the most recent entries, newest first."""
        with self._lock:
            entries = list(self._entries)
        return list(reversed(entries))[:limit]

    def get_record_history(self, record_id: str) -> List[ActivityEntry]:
        """Get every entry that touched a record, oldest first."""
        with self._lock:
            return [entry for entry in self._entries if record_id in entry.record_ids]

    def export_report(self) -> Dict[str, Any]:
        """Export the log grouped by activity type."""
        with self._lock:
            entries = list(self._entries)

        by_kind: Dict[str, List[Dict[str, Any]]] = {}
        for entry in entries:
            by_kind.setdefault(entry.kind, []).append(entry.to_dict())

        return {
            'total_entries': len(entries),
            'by_kind': {kind: len(items) for kind, items in by_kind.items()},
            'entries': by_kind,
        }

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
