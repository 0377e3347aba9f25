"""
Tests for data quality analysis.
"""

import random

import pytest

from contactmerge.config import OrganizerConfig
from contactmerge.core.record import Record
from contactmerge.matching import DuplicateMatcher
from contactmerge.quality import (
    DataQualityAnalyzer,
    DataQualityIssue,
    IssueType,
    Severity,
    statistics,
)


def make_issue(severity, issue_type=IssueType.MISSING_EMAIL):
    return DataQualityIssue(
        contact_id="1",
        contact_name="Ann",
        issue_type=issue_type,
        description="test",
        severity=severity,
    )


class TestAnalyze:
    """Tests for DataQualityAnalyzer.analyze."""

    def setup_method(self):
        self.analyzer = DataQualityAnalyzer()

    def issue_types(self, record):
        return {(i.issue_type, i.severity) for i in self.analyzer.analyze([record])}

    def test_empty_record(self):
        """Test an empty name with no contact details."""
        assert self.issue_types(Record(id="1")) == {
            (IssueType.MISSING_NAME, Severity.HIGH),
            (IssueType.NO_CONTACT_INFO, Severity.HIGH),
        }

    def test_placeholder_name(self):
        """Test the placeholder name counts as missing."""
        issues = self.analyzer.analyze([Record(id="1", full_name="No Name", phone_numbers=["1"],
                                               email_addresses=["e"], organization="Acme")])
        assert [i.issue_type for i in issues] == [IssueType.MISSING_NAME]

    def test_missing_phone(self):
        """Test an email without a phone."""
        assert self.issue_types(Record(id="1", full_name="Ann", email_addresses=["e"])) == {
            (IssueType.MISSING_PHONE, Severity.MEDIUM),
        }

    def test_missing_email(self):
        """Test a phone without an email."""
        assert self.issue_types(Record(id="1", full_name="Ann", phone_numbers=["1"])) == {
            (IssueType.MISSING_EMAIL, Severity.LOW),
        }

    def test_organization_suggestion(self):
        """Test a complete record without an organization."""
        issues = self.analyzer.analyze([Record(id="1", full_name="Ann", phone_numbers=["1"],
                                               email_addresses=["e"])])
        assert len(issues) == 1
        assert issues[0].severity == Severity.SUGGESTION
        assert issues[0].description == "Contact might benefit from organization info"

    def test_complete_record(self):
        """Test a complete record has no issues."""
        record = Record(id="1", full_name="Ann", organization="Acme", phone_numbers=["1"],
                        email_addresses=["e"])
        assert self.analyzer.analyze([record]) == []

    def test_sorted_by_severity_and_stable(self):
        """Test worst issues come first and records keep their order."""
        issues = self.analyzer.analyze([
            Record(id="1", full_name="Ann", phone_numbers=["1"]),
            Record(id="2", full_name="Bob", email_addresses=["e"]),
            Record(id="3", full_name="Cy", phone_numbers=["2"]),
            Record(id="4"),
        ])

        assert [i.severity.rank for i in issues] == sorted(i.severity.rank for i in issues)
        assert [i.contact_id for i in issues] == ["4", "4", "2", "1", "3"]

    def test_at_most_two_non_suggestion_issues(self):
        """Test no record gets more than two non-suggestion issues."""
        rng = random.Random(7)
        records = [
            Record(
                id=str(i),
                full_name=rng.choice(["", "No Name", "Ann"]),
                organization=rng.choice([None, "Acme"]),
                phone_numbers=["1"] * rng.randint(0, 1),
                email_addresses=["e"] * rng.randint(0, 1),
            )
            for i in range(50)
        ]

        issues = self.analyzer.analyze(records)

        for record in records:
            found = [i for i in issues
                     if i.contact_id == record.id and i.severity != Severity.SUGGESTION]
            assert len(found) <= 2


class TestSummarize:
    """Tests for DataQualityAnalyzer.summarize and the health score."""

    def setup_method(self):
        self.analyzer = DataQualityAnalyzer()

    def test_no_issues(self):
        """Test an empty issue list scores 100."""
        assert self.analyzer.summarize([]).health_score == 100.0

    def test_one_high(self):
        """Test one high issue costs 10 points."""
        assert self.analyzer.summarize([make_issue(Severity.HIGH)]).health_score == 90.0

    def test_low_penalty_capped(self):
        """Test twenty low issues cost at most 5 points."""
        summary = self.analyzer.summarize([make_issue(Severity.LOW)] * 20)
        assert summary.health_score == 95.0

    def test_suggestions_are_free(self):
        """Test suggestions do not reduce the score."""
        summary = self.analyzer.summarize([make_issue(Severity.SUGGESTION, IssueType.SUGGESTION)] * 3)
        assert summary.total_issues == 3
        assert summary.health_score == 100.0

    def test_floor_at_zero(self):
        """Test the score never drops below zero."""
        assert self.analyzer.summarize([make_issue(Severity.HIGH)] * 11).health_score == 0.0

    def test_mixed_counts(self):
        """Test counts per severity and per type."""
        summary = self.analyzer.summarize([
            make_issue(Severity.HIGH, IssueType.MISSING_NAME),
            make_issue(Severity.MEDIUM, IssueType.MISSING_PHONE),
            make_issue(Severity.MEDIUM, IssueType.MISSING_PHONE),
            make_issue(Severity.LOW),
        ])

        assert summary.high_severity_count == 1
        assert summary.medium_severity_count == 2
        assert summary.type_count(IssueType.MISSING_PHONE) == 2
        assert summary.type_count(IssueType.NO_CONTACT_INFO) == 0
        assert summary.health_score == pytest.approx(100 - 10 - 6 - 0.5)

    def test_custom_penalties(self):
        """Test penalties come from the configuration."""
        analyzer = DataQualityAnalyzer(OrganizerConfig(high_severity_penalty=25.0))
        assert analyzer.summarize([make_issue(Severity.HIGH)]).health_score == 75.0


class TestStatistics:
    """Tests for record-set statistics."""

    def test_statistics(self, alice_records):
        """Test counts over records, issues and groups."""
        records = alice_records + [Record(id="C", full_name="Bob", phone_numbers=["3"])]
        issues = DataQualityAnalyzer().analyze(records)
        groups = DuplicateMatcher().find_duplicates(records)

        stats = statistics(records, issues, groups)

        assert stats.total_contacts == 3
        assert stats.with_phone == 3
        assert stats.with_email == 2
        assert stats.with_both == 2
        assert stats.with_organization == 1
        assert stats.with_photo == 1
        assert stats.duplicate_groups == 1
        assert stats.low_severity_issues == 1
        assert stats.suggestions == 1
        assert stats.data_quality_score == 99.5

    def test_empty(self):
        """Test statistics of an empty record set."""
        stats = statistics([], [])
        assert stats.total_contacts == 0
        assert stats.data_quality_score == 100.0
        assert stats.to_dict()['total_contacts'] == 0
