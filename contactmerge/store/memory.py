"""In-memory record store."""

import logging
import threading
from typing import List, Dict, Optional, Sequence, Iterable

from ..core.record import Record, NameComponents

logger = logging.getLogger(__name__)


class InMemoryRecordStore:
    """Record store backed by dictionaries.

    Records keep their insertion order. Group memberships are stored by
    group name; archiving a record adds it to the archive group.
    """

    def __init__(self, records: Iterable[Record] = (), archive_group: str = "Archive"):
        """Initialize the store.

        Args:
            records: Initial records
            archive_group: Group that archived records are added to
        """
        self.archive_group = archive_group
        self._lock = threading.RLock()
        self._records: Dict[str, Record] = {}
        self._groups: Dict[str, List[str]] = {}
        for record in records:
            if record.id in self._records:
                raise ValueError(f"Duplicate record id: {record.id}")
            self._records[record.id] = record

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._records

    def get(self, record_id: str) -> Optional[Record]:
        """Get a record by id."""
        with self._lock:
            return self._records.get(record_id)

    def group_members(self, group_name: str) -> List[str]:
        """Ids of existing records in a group, in the order they were added."""
        with self._lock:
            return [rid for rid in self._groups.get(group_name, []) if rid in self._records]

    def is_archived(self, record_id: str) -> bool:
        return self.is_member(record_id, self.archive_group)

    # Reads

    def fetch_all(self) -> List[Record]:
        with self._lock:
            return list(self._records.values())

    def fetch_name_components(self, record_id: str) -> Optional[NameComponents]:
        with self._lock:
            record = self._records.get(record_id)
        if record is None:
            return None
        return NameComponents.from_full_name(record.full_name)

    def is_member(self, record_id: str, group_name: str) -> bool:
        with self._lock:
            return record_id in self._records and record_id in self._groups.get(group_name, [])

    # Mutations

    def _replace(self, record_id: str, **changes) -> bool:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                logger.warning(f"Record {record_id} not found")
                return False
            self._records[record_id] = record.with_changes(**changes)
            return True

    def add_phone(self, record_id: str, phone_number: str) -> bool:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                return False
            return self._replace(record_id, phone_numbers=record.phone_numbers + (phone_number,))

    def remove_phone(self, record_id: str, phone_number: str) -> bool:
        with self._lock:
            record = self._records.get(record_id)
            if record is None or phone_number not in record.phone_numbers:
                return False
            return self._replace(record_id, phone_numbers=_without_last(record.phone_numbers, phone_number))

    def add_email(self, record_id: str, email_address: str) -> bool:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                return False
            return self._replace(record_id, email_addresses=record.email_addresses + (email_address,))

    def remove_email(self, record_id: str, email_address: str) -> bool:
        with self._lock:
            record = self._records.get(record_id)
            if record is None or email_address not in record.email_addresses:
                return False
            return self._replace(record_id, email_addresses=_without_last(record.email_addresses, email_address))

    def add_to_group(self, record_id: str, group_name: str) -> bool:
        with self._lock:
            if record_id not in self._records:
                return False
            members = self._groups.setdefault(group_name, [])
            if record_id not in members:
                members.append(record_id)
            return True

    def remove_from_group(self, record_id: str, group_name: str) -> bool:
        with self._lock:
            members = self._groups.get(group_name, [])
            if record_id not in members:
                return False
            members.remove(record_id)
            return True

    def archive(self, record_id: str) -> bool:
        return self.add_to_group(record_id, self.archive_group)

    def update_name(self, record_id: str, full_name: str) -> bool:
        return self._replace(record_id, full_name=full_name.strip())

    def apply_merge(self, merged: Record, removed_ids: Sequence[str]) -> bool:
        with self._lock:
            missing = [rid for rid in [merged.id, *removed_ids] if rid not in self._records]
            if missing:
                logger.warning(f"Cannot merge, records not found: {', '.join(missing)}")
                return False
            self._records[merged.id] = merged
            for record_id in removed_ids:
                if record_id != merged.id:
                    del self._records[record_id]
            return True

    def restore_records(self, records: Sequence[Record]) -> bool:
        with self._lock:
            for record in records:
                self._records[record.id] = record
            return True


def _without_last(values: tuple, value: str) -> tuple:
    """Remove the last occurrence of value from a tuple."""
    index = len(values) - 1 - values[::-1].index(value)
    return values[:index] + values[index + 1:]
