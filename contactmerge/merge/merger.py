"""
Applies merge plans to the record store.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..store.base import RecordStore
from ..store.locks import RecordLockRegistry
from ..undo.effects import MergedRecords
from .plan import MergePlan

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Result of a merge operation."""
    success: bool
    merged_record_id: Optional[str] = None
    removed_record_ids: Tuple[str, ...] = ()
    effect: Optional[MergedRecords] = None
    errors: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        """Human-readable result."""
        if self.success:
            return (
                f"Merged {len(self.removed_record_ids)} records "
                f"into {self.merged_record_id}"
            )
        return f"Merge failed: {', '.join(self.errors)}"


class RecordMerger:
    """
    Merges a duplicate group into one surviving record.

    Merge process:
    1. Validate the plan and the destination
    2. Compute the merged record from the plan
    3. Hold the write locks of every member
    4. Replace the destination and delete the other members in one store call
    """

    def __init__(self, store: RecordStore, locks: Optional[RecordLockRegistry] = None):
        """
        Initialize the merger.

        Args:
            store: Record store to merge in
            locks: Per-record lock registry shared with the other writers
        """
        self.store = store
        self.locks = locks or RecordLockRegistry()

    def execute(self, plan: MergePlan, destination_id: Optional[str] = None) -> MergeResult:
        """
        Merge the plan's group.

        Args:
            plan: Merge plan to apply
            destination_id: Member whose id survives (defaults to the name source)

        Returns:
            MergeResult carrying a MergedRecords effect on success
        """
        errors = []
        if len(plan.group) < 2:
            errors.append("A merge needs at least two records")
        errors.extend(plan.validate())

        destination_id = destination_id or plan.preferred_name_id
        if destination_id not in plan.member_ids:
            errors.append(f"Destination {destination_id!r} is not in the group")

        if errors:
            logger.warning(f"Rejected merge plan: {'; '.join(errors)}")
            return MergeResult(success=False, errors=errors)

        merged = plan.merged_record(destination_id)
        removed_ids = tuple(rid for rid in plan.member_ids if rid != destination_id)

        try:
            with self.locks.hold(*plan.member_ids):
                succeeded = self.store.apply_merge(merged, removed_ids)
        except Exception as e:
            logger.error(f"Merge into {destination_id} failed: {e}", exc_info=True)
            return MergeResult(success=False, errors=[str(e)])

        if not succeeded:
            logger.warning(f"Store refused merge into {destination_id}")
            return MergeResult(success=False, errors=["Store refused the merge"])

        effect = MergedRecords(
            destination_id=destination_id,
            originals=plan.group.records,
            merged=merged,
        )
        logger.info(f"Merged {len(removed_ids)} records into {destination_id}")
        return MergeResult(
            success=True,
            merged_record_id=destination_id,
            removed_record_ids=removed_ids,
            effect=effect,
        )
