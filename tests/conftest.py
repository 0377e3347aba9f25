"""
Shared fixtures for contactmerge tests.
"""

import pytest

from contactmerge.core.record import Record
from contactmerge.store.memory import InMemoryRecordStore


class RecordingStore(InMemoryRecordStore):
    """In-memory store that records every mutation call.

    Methods named in `refuse` return False without changing anything;
    methods named in `explode` raise RuntimeError.
    """

    MUTATIONS = (
        'add_phone', 'remove_phone', 'add_email', 'remove_email',
        'add_to_group', 'remove_from_group', 'archive', 'update_name',
        'fetch_name_components', 'apply_merge', 'restore_records',
    )

    def __init__(self, records=(), archive_group="Archive"):
        super().__init__(records, archive_group)
        self.calls = []
        self.refuse = set()
        self.explode = set()

    def __getattribute__(self, name):
        attribute = super().__getattribute__(name)
        if name not in RecordingStore.MUTATIONS:
            return attribute

        def recorded(*args):
            self.calls.append((name, args))
            if name in self.explode:
                raise RuntimeError(f"{name} exploded")
            if name in self.refuse:
                return None if name == 'fetch_name_components' else False
            return attribute(*args)

        return recorded

    def call_names(self):
        return [name for name, _ in self.calls]


@pytest.fixture
def alice_records():
    """Two records for the same person with different contact details."""
    return [
        Record(
            id="A",
            full_name="Alice Example",
            organization="Acme",
            phone_numbers=["111-1111"],
            email_addresses=["alice@x.com"],
        ),
        Record(
            id="B",
            full_name="Alice Example",
            phone_numbers=["222-2222"],
            email_addresses=["alice@work.com"],
            has_image=True,
        ),
    ]


@pytest.fixture
def store(alice_records):
    """Recording store holding the Alice records plus two unrelated contacts."""
    return RecordingStore(alice_records + [
        Record(id="C", full_name="Bob Builder", phone_numbers=["333-3333"]),
        Record(id="D", full_name=""),
    ])
