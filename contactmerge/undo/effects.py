"""
Undoable effects.

Each effect records exactly what a successful mutation changed, with enough
detail to invert it. `undo_effect` and `redo_effect` apply the inverse and
forward operations against a record store.
"""

from dataclasses import dataclass
from typing import Tuple, Dict, Any, Union

from ..core.record import Record, NameComponents
from ..store.base import RecordStore


@dataclass(frozen=True, slots=True)
class AddedPhone:
    """A phone number was added to a record."""
    record_id: str
    value: str

    kind = "added_phone"

    @property
    def record_ids(self) -> Tuple[str, ...]:
        return (self.record_id,)

    def describe(self) -> str:
        return f"Add phone {self.value}"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'record_id': self.record_id, 'value': self.value}


@dataclass(frozen=True, slots=True)
class AddedEmail:
    """An email address was added to a record."""
    record_id: str
    value: str

    kind = "added_email"

    @property
    def record_ids(self) -> Tuple[str, ...]:
        return (self.record_id,)

    def describe(self) -> str:
        return f"Add email {self.value}"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'record_id': self.record_id, 'value': self.value}


@dataclass(frozen=True, slots=True)
class AddedToGroup:
    """A record was added to a named group.

    `was_member` is True when the record was already in the group, in which
    case undoing leaves the membership in place.
    """
    record_id: str
    group_name: str
    was_member: bool = False

    kind = "added_to_group"

    @property
    def record_ids(self) -> Tuple[str, ...]:
        return (self.record_id,)

    def describe(self) -> str:
        return f"Add to {self.group_name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'record_id': self.record_id,
            'group_name': self.group_name,
            'was_member': self.was_member,
        }


@dataclass(frozen=True, slots=True)
class Archived:
    """A record was moved to the archive group."""
    record_id: str
    archive_group: str
    was_member: bool = False

    kind = "archived"

    @property
    def record_ids(self) -> Tuple[str, ...]:
        return (self.record_id,)

    def describe(self) -> str:
        return "Archive contact"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'record_id': self.record_id,
            'archive_group': self.archive_group,
            'was_member': self.was_member,
        }


@dataclass(frozen=True, slots=True)
class UpdatedName:
    """A record's name was replaced; `previous` holds the old components."""
    record_id: str
    previous: NameComponents
    new_value: str

    kind = "updated_name"

    @property
    def record_ids(self) -> Tuple[str, ...]:
        return (self.record_id,)

    def describe(self) -> str:
        return f"Update name to {self.new_value}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'record_id': self.record_id,
            'previous': {'given': self.previous.given, 'family': self.previous.family},
            'new_value': self.new_value,
        }


@dataclass(frozen=True, slots=True)
class MergedRecords:
    """A duplicate group was merged into `destination_id`.

    Attributes:
        destination_id: Id of the surviving record
        originals: Every member record as it was before the merge
        merged: The surviving record after the merge
    """
    destination_id: str
    originals: Tuple[Record, ...]
    merged: Record

    kind = "merged_records"

    def __post_init__(self):
        object.__setattr__(self, 'originals', tuple(self.originals))

    @property
    def record_ids(self) -> Tuple[str, ...]:
        return tuple(record.id for record in self.originals)

    @property
    def removed_ids(self) -> Tuple[str, ...]:
        return tuple(rid for rid in self.record_ids if rid != self.destination_id)

    def describe(self) -> str:
        return f"Merge {len(self.originals)} contacts"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'destination_id': self.destination_id,
            'originals': [record.to_dict() for record in self.originals],
            'merged': self.merged.to_dict(),
        }


UndoEffect = Union[AddedPhone, AddedEmail, AddedToGroup, Archived, UpdatedName, MergedRecords]


def undo_effect(effect: UndoEffect, store: RecordStore) -> bool:
    """
    Invert an effect against the store.

    Returns:
        The store's success flag
    """
    if isinstance(effect, AddedPhone):
        return store.remove_phone(effect.record_id, effect.value)
    if isinstance(effect, AddedEmail):
        return store.remove_email(effect.record_id, effect.value)
    if isinstance(effect, (AddedToGroup, Archived)) and effect.was_member:
        # Membership predates the action
        return True
    if isinstance(effect, AddedToGroup):
        return store.remove_from_group(effect.record_id, effect.group_name)
    if isinstance(effect, Archived):
        return store.remove_from_group(effect.record_id, effect.archive_group)
    if isinstance(effect, UpdatedName):
        return store.update_name(effect.record_id, effect.previous.full_name)
    if isinstance(effect, MergedRecords):
        return store.restore_records(effect.originals)
    raise TypeError(f"Unknown effect: {effect!r}")


def redo_effect(effect: UndoEffect, store: RecordStore) -> bool:
    """
    Re-apply an effect against the store.

    Returns:
        The store's success flag
    """
    if isinstance(effect, AddedPhone):
        return store.add_phone(effect.record_id, effect.value)
    if isinstance(effect, AddedEmail):
        return store.add_email(effect.record_id, effect.value)
    if isinstance(effect, AddedToGroup):
        return store.add_to_group(effect.record_id, effect.group_name)
    if isinstance(effect, Archived):
        return store.archive(effect.record_id)
    if isinstance(effect, UpdatedName):
        return store.update_name(effect.record_id, effect.new_value)
    if isinstance(effect, MergedRecords):
        return store.apply_merge(effect.merged, effect.removed_ids)
    raise TypeError(f"Unknown effect: {effect!r}")
