"""
Duplicate detection matching engine.

This module provides the similarity kernel (edit distance, name similarity)
and the matcher that groups duplicate contact records.
"""

from .similarity import edit_distance, name_similarity, normalize_name, shares_any
from .matcher import (
    DuplicateMatcher,
    DuplicateGroup,
    DuplicateAnalysis,
    MatchType,
    PairMatch,
    analyze_duplicates,
)

__all__ = [
    'edit_distance',
    'name_similarity',
    'normalize_name',
    'shares_any',
    'DuplicateMatcher',
    'DuplicateGroup',
    'DuplicateAnalysis',
    'MatchType',
    'PairMatch',
    'analyze_duplicates',
]
