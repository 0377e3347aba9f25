"""
Contact organizer facade.

Wires the matcher, quality scorer, merge planner, remediation executor and
undo ledger around a single record store.
"""

import logging
import threading
import time
from concurrent.futures import Executor, Future
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Tuple, Iterable

from .config import OrganizerConfig
from .core.record import Record
from .matching.matcher import DuplicateMatcher, DuplicateGroup, DuplicateAnalysis, analyze_duplicates
from .merge.plan import MergePlan, MergePlanBuilder
from .merge.merger import RecordMerger, MergeResult
from .quality.analyzer import DataQualityAnalyzer, DataQualityIssue, DataQualitySummary
from .quality.statistics import ContactStatistics, statistics
from .actions.catalog import HealthIssueAction, HealthIssueActionCatalog
from .actions.executor import HealthIssueActionExecutor, ActionResult, BulkActionResult
from .store.base import RecordStore
from .store.locks import RecordLockRegistry
from .undo.ledger import UndoLedger, LedgerResult
from .utils.activity_log import ActivityLog, ActivityType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisSnapshot:
    """Results of one analysis run over the store's records.

    `stale` is True once a mutation has been applied after the records
    were read; callers should refresh before acting on it.
    """
    records: Tuple[Record, ...]
    issues: Tuple[DataQualityIssue, ...]
    summary: DataQualitySummary
    groups: Tuple[DuplicateGroup, ...]
    duplicate_analysis: DuplicateAnalysis
    statistics: ContactStatistics
    created_at: datetime
    stale: bool = False

    @property
    def health_score(self) -> float:
        return self.summary.health_score


class ContactOrganizer:
    """
    Finds duplicates and data quality issues and applies fixes.

    Every applied mutation is registered with the undo ledger, recorded in
    the activity log and marks the current snapshot stale.
    """

    def __init__(
        self,
        store: RecordStore,
        config: Optional[OrganizerConfig] = None,
        locks: Optional[RecordLockRegistry] = None,
    ):
        """
        Initialize the organizer.

        Args:
            store: Record store to analyze and modify
            config: Thresholds, penalties and group names
            locks: Per-record lock registry (created if not given)
        """
        self.store = store
        self.config = config or OrganizerConfig()
        self.locks = locks or RecordLockRegistry()

        self.matcher = DuplicateMatcher(self.config)
        self.analyzer = DataQualityAnalyzer(self.config)
        self.plan_builder = MergePlanBuilder()
        self.catalog = HealthIssueActionCatalog(self.config)
        self.executor = HealthIssueActionExecutor(store, self.locks, self.config)
        self.merger = RecordMerger(store, self.locks)
        self.ledger = UndoLedger(store, self.locks)
        self.activity = ActivityLog(self.config.activity_log_size)

        self._snapshot_lock = threading.Lock()
        self._snapshot: Optional[AnalysisSnapshot] = None
        self._generation = 0

    # Analysis

    @property
    def snapshot(self) -> Optional[AnalysisSnapshot]:
        """The most recently published analysis, or None before the first refresh."""
        return self._snapshot

    def refresh(self) -> AnalysisSnapshot:
        """
        Re-read the store, analyze it and publish the result.

        Returns:
            The new snapshot
        """
        with self._snapshot_lock:
            generation = self._generation

        start = time.perf_counter()
        records = tuple(self.store.fetch_all())
        issues = tuple(self.analyzer.analyze(records))
        groups = tuple(self.matcher.find_duplicates(records))
        snapshot = AnalysisSnapshot(
            records=records,
            issues=issues,
            summary=self.analyzer.summarize(issues),
            groups=groups,
            duplicate_analysis=analyze_duplicates(groups),
            statistics=statistics(records, issues, groups, self.config),
            created_at=datetime.now(),
        )

        with self._snapshot_lock:
            # A mutation landed while we were analyzing
            if generation != self._generation:
                snapshot = replace(snapshot, stale=True)
            self._snapshot = snapshot

        logger.debug(
            f"Analyzed {len(records)} records in {time.perf_counter() - start:.3f}s: "
            f"{len(issues)} issues, {len(groups)} duplicate groups"
        )
        return snapshot

    def refresh_in_background(self, executor: Executor) -> 'Future[AnalysisSnapshot]':
        """Run refresh() on an executor; the snapshot is published when it completes."""
        return executor.submit(self.refresh)

    def mark_stale(self) -> None:
        """Flag the current snapshot as out of date."""
        with self._snapshot_lock:
            self._generation += 1
            if self._snapshot is not None and not self._snapshot.stale:
                self._snapshot = replace(self._snapshot, stale=True)

    # Remediation

    def actions_for(self, issue: DataQualityIssue) -> List[HealthIssueAction]:
        return self.catalog.actions_for(issue)

    def perform(
        self,
        action: HealthIssueAction,
        issue: DataQualityIssue,
        input_value: Optional[str] = None,
    ) -> ActionResult:
        """Execute an action and register it for undo."""
        result = self.executor.execute(action, issue, input_value)
        if result.success:
            self.ledger.register(result.effect)
            self.activity.log(
                ActivityType.HEALTH_ACTION,
                action.title,
                result.effect.record_ids,
                detail=result.effect.describe(),
            )
            self.mark_stale()
        return result

    def perform_bulk(
        self,
        action: HealthIssueAction,
        issues: Iterable[DataQualityIssue],
        input_value: Optional[str] = None,
    ) -> BulkActionResult:
        """Execute an action for several issues; each applied effect is undone separately."""
        bulk = self.executor.execute_bulk(action, issues, input_value)
        for effect in bulk.effects:
            self.ledger.register(effect)
        if bulk.effects:
            self.activity.log(
                ActivityType.HEALTH_ACTION,
                action.title,
                [rid for effect in bulk.effects for rid in effect.record_ids],
                detail=str(bulk),
                metadata={'success_count': bulk.success_count, 'total': len(bulk.results)},
            )
            self.mark_stale()
        return bulk

    # Merging

    def build_plan(self, group: DuplicateGroup) -> MergePlan:
        return self.plan_builder.build_plan(group)

    def merge(self, plan: MergePlan, destination_id: Optional[str] = None) -> MergeResult:
        """Apply a merge plan and register it for undo."""
        result = self.merger.execute(plan, destination_id)
        if result.success:
            self.ledger.register(result.effect)
            self.activity.log(
                ActivityType.MERGE,
                result.effect.describe(),
                result.effect.record_ids,
                detail=str(result),
                metadata={'destination_id': result.merged_record_id},
            )
            self.mark_stale()
        return result

    # Undo / redo

    def undo(self) -> LedgerResult:
        result = self.ledger.undo()
        if result.success:
            self.activity.log(ActivityType.UNDO, f"Undo {result.description}")
            self.mark_stale()
        return result

    def redo(self) -> LedgerResult:
        result = self.ledger.redo()
        if result.success:
            self.activity.log(ActivityType.REDO, f"Redo {result.description}")
            self.mark_stale()
        return result
