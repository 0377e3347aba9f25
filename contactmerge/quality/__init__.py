"""Data quality scoring."""

from .analyzer import (
    IssueType,
    Severity,
    DataQualityIssue,
    DataQualitySummary,
    DataQualityAnalyzer,
    health_score,
)
from .statistics import ContactStatistics, statistics

__all__ = [
    'IssueType',
    'Severity',
    'DataQualityIssue',
    'DataQualitySummary',
    'DataQualityAnalyzer',
    'health_score',
    'ContactStatistics',
    'statistics',
]
