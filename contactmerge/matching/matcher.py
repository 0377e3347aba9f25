"""
Duplicate matching engine.

Pairs records into duplicate groups by exact name, shared phone number,
shared email address, and fuzzy name similarity.
"""

import logging
import time
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Sequence, Tuple, Iterable

from ..config import OrganizerConfig
from ..core.record import Record
from .similarity import name_similarity, normalize_name, shares_any

logger = logging.getLogger(__name__)


class MatchType(Enum):
    """Why a set of records was considered duplicates."""
    EXACT_NAME = "exact_name"
    SIMILAR_NAME = "similar_name"
    SAME_PHONE = "same_phone"
    SAME_EMAIL = "same_email"
    MULTIPLE_CRITERIA = "multiple_criteria"


@dataclass(frozen=True, slots=True)
class PairMatch:
    """Classification of a single pair of records."""
    match_type: MatchType
    confidence: float


@dataclass(frozen=True)
class DuplicateGroup:
    """A set of two or more records judged to be the same contact."""
    records: Tuple[Record, ...]
    match_type: MatchType
    confidence: float
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        object.__setattr__(self, 'records', tuple(self.records))
        if len(self.records) < 2:
            raise ValueError(f"A duplicate group needs at least 2 records, got {len(self.records)}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be within [0, 1], got {self.confidence}")

    def __len__(self) -> int:
        return len(self.records)

    def __str__(self) -> str:
        """Human-readable description."""
        names = ', '.join(str(r) for r in self.records)
        return f"{self.match_type.value} ({self.confidence:.0%}): {names}"

    @property
    def record_ids(self) -> List[str]:
        return [r.id for r in self.records]

    @property
    def primary_record(self) -> Record:
        """Most complete record; ties go to the earliest member."""
        primary = self.records[0]
        for record in self.records[1:]:
            if record.completeness > primary.completeness:
                primary = record
        return primary

    @property
    def is_high_confidence(self) -> bool:
        """True if confidence > 0.9."""
        return self.confidence > 0.9

    @property
    def is_medium_confidence(self) -> bool:
        """True if 0.7 < confidence <= 0.9."""
        return 0.7 < self.confidence <= 0.9

    @property
    def is_low_confidence(self) -> bool:
        """True if confidence <= 0.7."""
        return self.confidence <= 0.7


@dataclass(slots=True)
class DuplicateAnalysis:
    """Aggregate counts over a list of duplicate groups."""
    total_groups: int = 0
    total_duplicate_records: int = 0
    high_confidence_groups: int = 0
    medium_confidence_groups: int = 0
    low_confidence_groups: int = 0
    groups_by_type: Dict[MatchType, int] = field(default_factory=dict)

    def count(self, match_type: MatchType) -> int:
        return self.groups_by_type.get(match_type, 0)


class _CandidateIndex:
    """
    Hash buckets used to find the records a seed could possibly match.

    Exact-name, phone and email candidates come from equality buckets.
    Similar-name candidates come from name-length buckets: two names whose
    lengths differ by d cannot have an edit distance below d, so lengths
    outside the window can never pass the similarity threshold.
    """

    def __init__(self, records: Sequence[Record], matcher: 'DuplicateMatcher'):
        self.records = records
        self.matcher = matcher
        self.by_name: Dict[str, List[int]] = defaultdict(list)
        self.by_phone: Dict[str, List[int]] = defaultdict(list)
        self.by_email: Dict[str, List[int]] = defaultdict(list)
        self.by_length: Dict[int, List[int]] = defaultdict(list)

        for position, record in enumerate(records):
            if matcher.is_named(record):
                self.by_name[record.full_name.lower()].append(position)
                self.by_length[len(normalize_name(record.full_name))].append(position)
            for phone in set(record.phone_numbers):
                self.by_phone[phone].append(position)
            for email in set(record.email_addresses):
                self.by_email[email].append(position)

    def candidates(self, position: int) -> List[int]:
        """Positions after `position` that share at least one bucket with it."""
        record = self.records[position]
        found = set()

        if self.matcher.is_named(record):
            found.update(self.by_name[record.full_name.lower()])
            length = len(normalize_name(record.full_name))
            threshold = self.matcher.config.min_similarity_threshold
            for other_length, positions in self.by_length.items():
                # Upper bound of name_similarity for these two lengths
                bound = 1.0 - abs(length - other_length) / max(length, other_length)
                if bound > threshold:
                    found.update(positions)

        for phone in set(record.phone_numbers):
            found.update(self.by_phone[phone])
        for email in set(record.email_addresses):
            found.update(self.by_email[email])

        return sorted(p for p in found if p > position)


class DuplicateMatcher:
    """
    Finds groups of duplicate records.

    Pair rules, in priority order (first match wins):
    1. Case-insensitive exact name - 1.0 (multiple criteria if a phone
       or email is shared as well)
    2. Shared phone number - 0.95
    3. Shared email address - 0.95
    4. Name similarity > 0.85 with the same organization - similarity
    5. Name similarity > 0.90 - similarity
    """

    def __init__(self, config: Optional[OrganizerConfig] = None):
        """
        Initialize the matcher.

        Args:
            config: Thresholds and confidences to use
        """
        self.config = config or OrganizerConfig()

    def is_named(self, record: Record) -> bool:
        """False for blank names and the placeholder name."""
        name = normalize_name(record.full_name)
        return bool(name) and name != self.config.placeholder_name.lower()

    def classify_pair(self, record1: Record, record2: Record) -> Optional[PairMatch]:
        """
        Classify a pair of records.

        Args:
            record1: First record
            record2: Second record

        Returns:
            PairMatch, or None if the records are not duplicates
        """
        config = self.config
        both_named = self.is_named(record1) and self.is_named(record2)

        if both_named and record1.full_name.lower() == record2.full_name.lower():
            if (shares_any(record1.phone_numbers, record2.phone_numbers) or
                    shares_any(record1.email_addresses, record2.email_addresses)):
                return PairMatch(MatchType.MULTIPLE_CRITERIA, config.exact_name_confidence)
            return PairMatch(MatchType.EXACT_NAME, config.exact_name_confidence)

        if shares_any(record1.phone_numbers, record2.phone_numbers):
            return PairMatch(MatchType.SAME_PHONE, config.shared_channel_confidence)

        if shares_any(record1.email_addresses, record2.email_addresses):
            return PairMatch(MatchType.SAME_EMAIL, config.shared_channel_confidence)

        if not both_named:
            return None

        similarity = name_similarity(record1.full_name, record2.full_name)
        if similarity > config.similar_name_with_org_threshold:
            has_shared_org = (
                record1.organization is not None and
                record1.organization == record2.organization
            )
            if has_shared_org:
                return PairMatch(MatchType.SIMILAR_NAME, similarity)

        if similarity > config.similar_name_threshold:
            return PairMatch(MatchType.SIMILAR_NAME, similarity)

        return None

    def find_duplicates(self, records: Iterable[Record]) -> List[DuplicateGroup]:
        """
        Find duplicate groups in a record set.

        Each record not yet grouped seeds a group made of the later,
        ungrouped records that match it. The group reports the strongest
        match observed.

        Args:
            records: Records to analyze (not retained)

        Returns:
            Duplicate groups sorted by confidence (highest first)
        """
        records = list(records)
        if len(records) < 2:
            return []

        start_time = time.perf_counter()
        index = _CandidateIndex(records, self)
        processed = set()
        groups: List[DuplicateGroup] = []
        comparisons = 0

        for position, seed in enumerate(records):
            if position in processed:
                continue

            members = [seed]
            best: Optional[PairMatch] = None

            for other_position in index.candidates(position):
                if other_position in processed:
                    continue
                comparisons += 1
                match = self.classify_pair(seed, records[other_position])
                if match is None:
                    continue
                members.append(records[other_position])
                processed.add(other_position)
                best = self._stronger(best, match)

            if best is not None:
                processed.add(position)
                groups.append(DuplicateGroup(
                    records=tuple(members),
                    match_type=best.match_type,
                    confidence=best.confidence,
                ))

        # list.sort is stable, so equal confidences keep discovery order
        groups.sort(key=lambda g: g.confidence, reverse=True)

        elapsed = time.perf_counter() - start_time
        logger.debug(
            f"Duplicate scan: {len(records)} records, {comparisons} comparisons, "
            f"{len(groups)} groups in {elapsed * 1000:.1f} ms"
        )
        return groups

    @staticmethod
    def _stronger(current: Optional[PairMatch], candidate: PairMatch) -> PairMatch:
        """Highest confidence wins; on a tie multiple-criteria beats the rest."""
        if current is None:
            return candidate
        if candidate.confidence > current.confidence:
            return candidate
        if (candidate.confidence == current.confidence and
                candidate.match_type is MatchType.MULTIPLE_CRITERIA and
                current.match_type is not MatchType.MULTIPLE_CRITERIA):
            return candidate
        return current


def analyze_duplicates(groups: Iterable[DuplicateGroup]) -> DuplicateAnalysis:
    """
    Summarize a list of duplicate groups.

    Args:
        groups: Groups returned by DuplicateMatcher.find_duplicates

    Returns:
        DuplicateAnalysis with totals and per-type counts
    """
    analysis = DuplicateAnalysis()

    for group in groups:
        analysis.total_groups += 1
        analysis.total_duplicate_records += len(group)
        if group.is_high_confidence:
            analysis.high_confidence_groups += 1
        elif group.is_medium_confidence:
            analysis.medium_confidence_groups += 1
        else:
            analysis.low_confidence_groups += 1
        analysis.groups_by_type[group.match_type] = analysis.groups_by_type.get(group.match_type, 0) + 1

    return analysis
