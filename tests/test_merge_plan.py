"""
Tests for merge planning.
"""

from datetime import datetime

import pytest

from contactmerge.core.record import Record
from contactmerge.matching import DuplicateGroup, MatchType, DuplicateMatcher
from contactmerge.merge import MergePlan, MergePlanBuilder, MergeValueOption, build_plan


def make_group(*records):
    return DuplicateGroup(records=records, match_type=MatchType.EXACT_NAME, confidence=1.0)


class TestBuildPlan:
    """Tests for MergePlanBuilder."""

    def test_alice_example(self, alice_records):
        """Test the plan for two Alice records."""
        group = DuplicateMatcher().find_duplicates(alice_records)[0]

        plan = build_plan(group)

        assert plan.preferred_name_id == "A"
        assert plan.preferred_organization_id == "A"
        assert plan.preferred_photo_id == "B"
        assert set(plan.selected_phone_numbers) == {"111-1111", "222-2222"}
        assert set(plan.selected_email_addresses) == {"alice@x.com", "alice@work.com"}

    def test_values_keep_owners_and_order(self):
        """Test that shared values collapse into one option with every owner."""
        group = make_group(
            Record(id="1", phone_numbers=["5", "7", "5"]),
            Record(id="2", phone_numbers=["7", "8"]),
        )

        plan = MergePlanBuilder().build_plan(group)

        assert plan.phone_options == (
            MergeValueOption("5", ("1",)),
            MergeValueOption("7", ("1", "2")),
            MergeValueOption("8", ("2",)),
        )

    def test_values_are_case_sensitive(self):
        """Test that emails differing in case stay separate."""
        group = make_group(
            Record(id="1", email_addresses=["Ann@x.com"]),
            Record(id="2", email_addresses=["ann@x.com"]),
        )
        assert len(build_plan(group).email_options) == 2

    def test_superset_of_member_values(self):
        """Test no member value is dropped and the name source is a member."""
        group = make_group(
            Record(id="1", phone_numbers=["1"], email_addresses=["a"]),
            Record(id="2", phone_numbers=["2", "3"]),
            Record(id="3", email_addresses=["a", "b"], organization="Acme"),
        )

        plan = build_plan(group)

        for record in group.records:
            assert set(record.phone_numbers) <= set(plan.selected_phone_numbers)
            assert set(record.email_addresses) <= set(plan.selected_email_addresses)
        assert plan.preferred_name_id in group.record_ids
        assert plan.validate() == []

    def test_organization_falls_back_to_first_member_with_one(self):
        """Test organization source when the name source has none."""
        group = make_group(
            Record(id="1", phone_numbers=["1", "2"]),
            Record(id="2", organization="Acme"),
            Record(id="3", organization="Initech"),
        )

        plan = build_plan(group)

        assert plan.preferred_name_id == "1"
        assert plan.preferred_organization_id == "2"
        assert plan.preferred_photo_id is None

    def test_build_does_not_mutate_group(self, alice_records):
        """Test that building leaves the group records untouched."""
        group = make_group(*alice_records)
        before = [r.to_dict() for r in group.records]

        build_plan(group)

        assert [r.to_dict() for r in group.records] == before


class TestMergePlan:
    """Tests for MergePlan choices and validation."""

    def setup_method(self):
        self.group = make_group(
            Record(id="1", full_name="Ann Lee", phone_numbers=["1"], created_at=datetime(2021, 5, 1)),
            Record(id="2", full_name="Ann M Lee", organization="Acme", has_image=True,
                   created_at=datetime(2019, 3, 1)),
        )
        self.plan = build_plan(self.group)

    def test_choose_sources(self):
        """Test choosing different source records."""
        plan = self.plan.choose(name_id="2", organization_id=None)

        assert plan.preferred_name_id == "2"
        assert plan.preferred_organization_id is None
        assert plan.preferred_photo_id == "2"
        assert self.plan.preferred_name_id == "1"

    def test_choose_non_member_rejected(self):
        """Test that choosing an outside record raises."""
        with pytest.raises(ValueError):
            self.plan.choose(name_id="99")

    def test_photo_source_needs_image(self):
        """Test that the photo must come from a record with an image."""
        with pytest.raises(ValueError):
            self.plan.choose(photo_id="1")

    def test_dropped_value_rejected(self):
        """Test that a plan losing a member value is invalid."""
        with pytest.raises(ValueError):
            MergePlan(
                group=self.group,
                preferred_name_id="1",
                preferred_organization_id=None,
                preferred_photo_id=None,
                phone_options=(),
                email_options=(),
            )

    def test_merged_record(self):
        """Test the merged record takes fields from the chosen sources."""
        merged = self.plan.choose(name_id="2").merged_record(destination_id="1")

        assert merged.id == "1"
        assert merged.full_name == "Ann M Lee"
        assert merged.organization == "Acme"
        assert merged.phone_numbers == ("1",)
        assert merged.has_image is True
        assert merged.created_at == datetime(2019, 3, 1)

    def test_merged_record_default_destination(self):
        """Test the destination defaults to the name source."""
        assert self.plan.merged_record().id == self.plan.preferred_name_id

    def test_merged_record_bad_destination(self):
        """Test that the destination must be a member."""
        with pytest.raises(ValueError):
            self.plan.merged_record(destination_id="99")
