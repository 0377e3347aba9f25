"""
Tests for the remediation catalog and executor.
"""

import pytest

from contactmerge.actions import (
    ActionType,
    HealthIssueAction,
    HealthIssueActionCatalog,
    HealthIssueActionExecutor,
)
from contactmerge.config import OrganizerConfig
from contactmerge.core.record import NameComponents
from contactmerge.quality import DataQualityIssue, IssueType, Severity
from contactmerge.undo import AddedPhone, AddedEmail, AddedToGroup, Archived, UpdatedName


def make_issue(issue_type, contact_id="C", severity=Severity.MEDIUM):
    return DataQualityIssue(
        contact_id=contact_id,
        contact_name="Bob Builder",
        issue_type=issue_type,
        description="test",
        severity=severity,
    )


class TestCatalog:
    """Tests for HealthIssueActionCatalog."""

    def setup_method(self):
        self.catalog = HealthIssueActionCatalog()

    def describe(self, issue_type):
        return [(a.action_type, a.group_name) for a in self.catalog.actions_for(make_issue(issue_type))]

    def test_missing_phone(self):
        """Test actions for a missing phone."""
        assert self.describe(IssueType.MISSING_PHONE) == [
            (ActionType.ADD_PHONE, None),
            (ActionType.ADD_TO_GROUP, "Follow Up"),
            (ActionType.ADD_TO_GROUP, "Reviewed"),
        ]

    def test_missing_email(self):
        """Test actions for a missing email."""
        assert self.describe(IssueType.MISSING_EMAIL) == [
            (ActionType.ADD_EMAIL, None),
            (ActionType.ADD_TO_GROUP, "Email Follow-Up"),
            (ActionType.ADD_TO_GROUP, "Reviewed"),
        ]

    def test_no_contact_info(self):
        """Test actions for a record without contact details."""
        assert self.describe(IssueType.NO_CONTACT_INFO) == [
            (ActionType.ADD_TO_GROUP, "Follow Up"),
            (ActionType.ARCHIVE, None),
            (ActionType.ADD_TO_GROUP, "Reviewed"),
        ]

    def test_missing_name(self):
        """Test actions for a missing name."""
        assert self.describe(IssueType.MISSING_NAME) == [
            (ActionType.UPDATE_NAME, None),
            (ActionType.ADD_TO_GROUP, "General Follow-Up"),
            (ActionType.ADD_TO_GROUP, "Reviewed"),
        ]

    def test_suggestion_and_incomplete(self):
        """Test actions for suggestions and incomplete data."""
        expected = [
            (ActionType.ADD_TO_GROUP, "General Follow-Up"),
            (ActionType.ADD_TO_GROUP, "Reviewed"),
        ]
        assert self.describe(IssueType.SUGGESTION) == expected
        assert self.describe(IssueType.INCOMPLETE_DATA) == expected

    def test_every_list_ends_with_mark_reviewed(self):
        """Test the last action is always Mark as Reviewed."""
        for issue_type in IssueType:
            actions = self.catalog.actions_for(make_issue(issue_type))
            assert actions[-1].title == "Mark as Reviewed"

    def test_requires_input(self):
        """Test which actions need free-text input."""
        actions = self.catalog.actions_for(make_issue(IssueType.MISSING_PHONE))
        assert actions[0].requires_input
        assert actions[0].input_prompt
        assert not actions[1].requires_input

    def test_group_names_from_config(self):
        """Test group names come from the configuration."""
        catalog = HealthIssueActionCatalog(OrganizerConfig(reviewed_group="Done"))
        assert catalog.actions_for(make_issue(IssueType.SUGGESTION))[-1].group_name == "Done"

    def test_group_action_needs_group(self):
        """Test add-to-group actions must name a group."""
        with pytest.raises(ValueError):
            HealthIssueAction(title="Bad", action_type=ActionType.ADD_TO_GROUP)


class TestExecutor:
    """Tests for HealthIssueActionExecutor."""

    def setup_method(self):
        self.catalog = HealthIssueActionCatalog()

    def action(self, issue_type, index=0):
        return self.catalog.actions_for(make_issue(issue_type))[index]

    def test_add_phone_trims_input(self, store):
        """Test adding a phone with surrounding whitespace."""
        executor = HealthIssueActionExecutor(store)

        result = executor.execute(self.action(IssueType.MISSING_PHONE), make_issue(IssueType.MISSING_PHONE),
                                  "  555-0000 ")

        assert result.success
        assert result.effect == AddedPhone("C", "555-0000")
        assert store.get("C").phone_numbers == ("333-3333", "555-0000")

    def test_empty_input_makes_no_store_call(self, store):
        """Test required input must be non-empty."""
        executor = HealthIssueActionExecutor(store)

        for value in (None, "", "   "):
            result = executor.execute(self.action(IssueType.MISSING_EMAIL), make_issue(IssueType.MISSING_EMAIL),
                                      value)
            assert not result.success
            assert result.effect is None

        assert store.calls == []

    def test_add_email(self, store):
        """Test adding an email."""
        result = HealthIssueActionExecutor(store).execute(
            self.action(IssueType.MISSING_EMAIL), make_issue(IssueType.MISSING_EMAIL), "bob@x.com")

        assert result.effect == AddedEmail("C", "bob@x.com")

    def test_add_to_group(self, store):
        """Test adding to a follow-up group."""
        result = HealthIssueActionExecutor(store).execute(
            self.action(IssueType.MISSING_PHONE, 1), make_issue(IssueType.MISSING_PHONE))

        assert result.effect == AddedToGroup("C", "Follow Up")
        assert store.group_members("Follow Up") == ["C"]

    def test_archive(self, store):
        """Test archiving a record."""
        result = HealthIssueActionExecutor(store).execute(
            self.action(IssueType.NO_CONTACT_INFO, 1), make_issue(IssueType.NO_CONTACT_INFO, "D"))

        assert result.effect == Archived("D", "Archive")
        assert store.is_archived("D")

    def test_update_name_captures_previous(self, store):
        """Test the name update records the previous components."""
        result = HealthIssueActionExecutor(store).execute(
            self.action(IssueType.MISSING_NAME), make_issue(IssueType.MISSING_NAME), "Robert Builder")

        assert result.effect == UpdatedName("C", NameComponents("Bob", "Builder"), "Robert Builder")
        assert store.call_names() == ['fetch_name_components', 'update_name']

    def test_update_name_without_components(self, store):
        """Test the name update fails when the current name cannot be read."""
        store.refuse.add('fetch_name_components')

        result = HealthIssueActionExecutor(store).execute(
            self.action(IssueType.MISSING_NAME), make_issue(IssueType.MISSING_NAME), "Robert")

        assert not result.success
        assert 'update_name' not in store.call_names()

    def test_store_refusal(self, store):
        """Test a refused change gives a failure without an effect."""
        store.refuse.add('add_phone')

        result = HealthIssueActionExecutor(store).execute(
            self.action(IssueType.MISSING_PHONE), make_issue(IssueType.MISSING_PHONE), "555")

        assert not result.success
        assert result.effect is None
        assert result.errors

    def test_store_exception(self, store):
        """Test a raising store gives a failure result."""
        store.explode.add('add_to_group')

        result = HealthIssueActionExecutor(store).execute(
            self.action(IssueType.SUGGESTION), make_issue(IssueType.SUGGESTION))

        assert not result.success
        assert "exploded" in result.errors[0]

    def test_bulk_counts_successes(self, store):
        """Test bulk execution continues past failures."""
        issues = [
            make_issue(IssueType.SUGGESTION, "A"),
            make_issue(IssueType.SUGGESTION, "missing"),
            make_issue(IssueType.SUGGESTION, "B"),
        ]

        bulk = HealthIssueActionExecutor(store).execute_bulk(self.action(IssueType.SUGGESTION), issues)

        assert bulk.success_count == 2
        assert bulk.failure_count == 1
        assert [r.success for r in bulk.results] == [True, False, True]
        assert bulk.effects == [
            AddedToGroup("A", "General Follow-Up"),
            AddedToGroup("B", "General Follow-Up"),
        ]
