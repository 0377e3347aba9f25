"""
Record-set statistics for reporting.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence, Optional

from ..config import OrganizerConfig
from ..core.record import Record
from ..matching.matcher import DuplicateGroup
from .analyzer import DataQualityIssue, Severity, health_score


@dataclass(frozen=True, slots=True)
class ContactStatistics:
    """Counts over a record set and its analysis results."""
    total_contacts: int = 0
    with_phone: int = 0
    with_email: int = 0
    with_both: int = 0
    with_organization: int = 0
    with_photo: int = 0
    duplicate_groups: int = 0
    high_severity_issues: int = 0
    medium_severity_issues: int = 0
    low_severity_issues: int = 0
    suggestions: int = 0
    data_quality_score: float = 100.0

    @property
    def total_issues(self) -> int:
        return (self.high_severity_issues + self.medium_severity_issues
                + self.low_severity_issues + self.suggestions)

    def to_dict(self) -> dict:
        return {
            'total_contacts': self.total_contacts,
            'with_phone': self.with_phone,
            'with_email': self.with_email,
            'with_both': self.with_both,
            'with_organization': self.with_organization,
            'with_photo': self.with_photo,
            'duplicate_groups': self.duplicate_groups,
            'high_severity_issues': self.high_severity_issues,
            'medium_severity_issues': self.medium_severity_issues,
            'low_severity_issues': self.low_severity_issues,
            'suggestions': self.suggestions,
            'data_quality_score': self.data_quality_score,
        }


def statistics(
    records: Iterable[Record],
    issues: Iterable[DataQualityIssue],
    groups: Sequence[DuplicateGroup] = (),
    config: Optional[OrganizerConfig] = None,
) -> ContactStatistics:
    """
    Compute statistics for a record set.

    Args:
        records: The analyzed records
        issues: Issues found for those records
        groups: Duplicate groups found for those records

    Returns:
        ContactStatistics; the quality score uses the health score penalties
    """
    total = phone = email = both = org = photo = 0
    for record in records:
        total += 1
        phone += record.has_phone
        email += record.has_email
        both += record.has_phone and record.has_email
        org += record.organization is not None
        photo += record.has_image

    counts = {severity: 0 for severity in Severity}
    for issue in issues:
        counts[issue.severity] += 1

    if sum(counts.values()) == 0:
        score = 100.0
    else:
        score = health_score(counts[Severity.HIGH], counts[Severity.MEDIUM], counts[Severity.LOW], config)

    return ContactStatistics(
        total_contacts=total,
        with_phone=phone,
        with_email=email,
        with_both=both,
        with_organization=org,
        with_photo=photo,
        duplicate_groups=len(groups),
        high_severity_issues=counts[Severity.HIGH],
        medium_severity_issues=counts[Severity.MEDIUM],
        low_severity_issues=counts[Severity.LOW],
        suggestions=counts[Severity.SUGGESTION],
        data_quality_score=score,
    )
