"""Interface of the record store the organizer reads from and writes to."""

from typing import List, Optional, Protocol, Sequence, runtime_checkable

from ..core.record import Record, NameComponents


@runtime_checkable
class RecordStore(Protocol):
    """
    Record store collaborator.

    Every mutation is addressed by record id and returns True on success.
    Implementations own blocking I/O; the organizer serializes writes per
    record id before calling in.
    """

    def fetch_all(self) -> List[Record]:
        ...

    def add_phone(self, record_id: str, phone_number: str) -> bool:
        ...

    def remove_phone(self, record_id: str, phone_number: str) -> bool:
        ...

    def add_email(self, record_id: str, email_address: str) -> bool:
        ...

    def remove_email(self, record_id: str, email_address: str) -> bool:
        ...

    def is_member(self, record_id: str, group_name: str) -> bool:
        ...

    def add_to_group(self, record_id: str, group_name: str) -> bool:
        ...

    def remove_from_group(self, record_id: str, group_name: str) -> bool:
        ...

    def archive(self, record_id: str) -> bool:
        ...

    def update_name(self, record_id: str, full_name: str) -> bool:
        ...

    def fetch_name_components(self, record_id: str) -> Optional[NameComponents]:
        ...

    def apply_merge(self, merged: Record, removed_ids: Sequence[str]) -> bool:
        """Replace `merged.id` with `merged` and delete `removed_ids`."""
        ...

    def restore_records(self, records: Sequence[Record]) -> bool:
        """Put the given records back exactly as they are, recreating deleted ones."""
        ...
