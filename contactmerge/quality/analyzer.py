"""
Data quality analysis for contact records.

Flags records with missing names or missing contact channels and rolls the
findings up into a severity-weighted health score.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Iterable

from ..config import OrganizerConfig
from ..core.record import Record

logger = logging.getLogger(__name__)


class IssueType(Enum):
    """Kinds of data quality findings."""
    MISSING_NAME = "missing_name"
    MISSING_PHONE = "missing_phone"
    MISSING_EMAIL = "missing_email"
    NO_CONTACT_INFO = "no_contact_info"
    INCOMPLETE_DATA = "incomplete_data"
    SUGGESTION = "suggestion"


class Severity(Enum):
    """Issue severity, worst first."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    SUGGESTION = "suggestion"

    @property
    def rank(self) -> int:
        """Sort rank: 0 for high up to 3 for suggestion."""
        return _SEVERITY_RANK[self]

    def __str__(self) -> str:
        return self.value.capitalize()


_SEVERITY_RANK = {
    Severity.HIGH: 0,
    Severity.MEDIUM: 1,
    Severity.LOW: 2,
    Severity.SUGGESTION: 3,
}


@dataclass(frozen=True, slots=True)
class DataQualityIssue:
    """A single finding about one record."""
    contact_id: str
    contact_name: str
    issue_type: IssueType
    description: str
    severity: Severity

    def __str__(self) -> str:
        return f"[{self.severity}] {self.contact_name or '(no name)'}: {self.description}"


@dataclass(slots=True)
class DataQualitySummary:
    """Issue counts and the derived health score."""
    total_issues: int = 0
    by_severity: Dict[Severity, int] = field(default_factory=dict)
    by_type: Dict[IssueType, int] = field(default_factory=dict)
    config: OrganizerConfig = field(default_factory=OrganizerConfig, repr=False, compare=False)

    def severity_count(self, severity: Severity) -> int:
        return self.by_severity.get(severity, 0)

    def type_count(self, issue_type: IssueType) -> int:
        return self.by_type.get(issue_type, 0)

    @property
    def high_severity_count(self) -> int:
        return self.severity_count(Severity.HIGH)

    @property
    def medium_severity_count(self) -> int:
        return self.severity_count(Severity.MEDIUM)

    @property
    def low_severity_count(self) -> int:
        return self.severity_count(Severity.LOW)

    @property
    def suggestion_count(self) -> int:
        return self.severity_count(Severity.SUGGESTION)

    @property
    def health_score(self) -> float:
        """
        Health score from 0 to 100.

        Penalties:
        - High severity: 10 points each
        - Medium severity: 3 points each
        - Low severity: 0.5 points each, at most 5 points in total
        - Suggestions: none
        """
        if self.total_issues == 0:
            return 100.0
        return health_score(
            self.high_severity_count,
            self.medium_severity_count,
            self.low_severity_count,
            self.config,
        )

    def __str__(self) -> str:
        """Human-readable summary."""
        return (
            f"Health Score: {self.health_score:.1f}\n"
            f"  Total issues: {self.total_issues}\n"
            f"  High: {self.high_severity_count}\n"
            f"  Medium: {self.medium_severity_count}\n"
            f"  Low: {self.low_severity_count}\n"
            f"  Suggestions: {self.suggestion_count}"
        )


def health_score(high: int, medium: int, low: int, config: Optional[OrganizerConfig] = None) -> float:
    """Apply the severity penalties to 100, with a floor of 0."""
    config = config or OrganizerConfig()
    high_penalty = high * config.high_severity_penalty
    medium_penalty = medium * config.medium_severity_penalty
    low_penalty = min(low * config.low_severity_penalty, config.low_severity_penalty_cap)
    return max(0.0, 100.0 - (high_penalty + medium_penalty + low_penalty))


class DataQualityAnalyzer:
    """
    Inspects records for completeness issues.

    Rules (evaluated independently for each record):
    1. Empty or placeholder name - missing name (high)
    2. No phone and no email - no contact info (high)
    3. No phone but an email - missing phone (medium)
    4. No email but a phone - missing email (low)
    5. No organization but phone and email - suggestion
    """

    def __init__(self, config: Optional[OrganizerConfig] = None):
        self.config = config or OrganizerConfig()

    def analyze(self, records: Iterable[Record]) -> List[DataQualityIssue]:
        """
        Find data quality issues across a record set.

        Args:
            records: Records to inspect (not retained)

        Returns:
            Issues sorted worst severity first; records keep their relative order
        """
        issues: List[DataQualityIssue] = []
        count = 0
        for record in records:
            count += 1
            issues.extend(self.check_record(record))

        issues.sort(key=lambda issue: issue.severity.rank)
        logger.debug(f"Quality scan: {count} records, {len(issues)} issues")
        return issues

    def check_record(self, record: Record) -> List[DataQualityIssue]:
        """Return every issue found on a single record."""
        issues = []

        def issue(issue_type: IssueType, description: str, severity: Severity) -> None:
            issues.append(DataQualityIssue(
                contact_id=record.id,
                contact_name=record.full_name,
                issue_type=issue_type,
                description=description,
                severity=severity,
            ))

        name = record.full_name.strip()
        if not name or name == self.config.placeholder_name:
            issue(IssueType.MISSING_NAME, "Contact has no name", Severity.HIGH)

        if not record.has_phone and not record.has_email:
            issue(IssueType.NO_CONTACT_INFO, "Contact has no phone number or email address", Severity.HIGH)

        if not record.has_phone and record.has_email:
            issue(IssueType.MISSING_PHONE, "Contact has no phone number", Severity.MEDIUM)

        if not record.has_email and record.has_phone:
            issue(IssueType.MISSING_EMAIL, "Contact has no email address", Severity.LOW)

        if record.organization is None and record.has_phone and record.has_email:
            issue(IssueType.SUGGESTION, "Contact might benefit from organization info", Severity.SUGGESTION)

        return issues

    def summarize(self, issues: Iterable[DataQualityIssue]) -> DataQualitySummary:
        """
        Count issues per severity and per type.

        Args:
            issues: Issues returned by analyze()

        Returns:
            DataQualitySummary with the derived health score
        """
        summary = DataQualitySummary(config=self.config)
        for found in issues:
            summary.total_issues += 1
            summary.by_severity[found.severity] = summary.by_severity.get(found.severity, 0) + 1
            summary.by_type[found.issue_type] = summary.by_type.get(found.issue_type, 0) + 1
        return summary
