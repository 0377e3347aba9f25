"""
Executes remediation actions against the record store.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Iterable

from ..config import OrganizerConfig
from ..quality.analyzer import DataQualityIssue
from ..store.base import RecordStore
from ..store.locks import RecordLockRegistry
from ..undo.effects import (
    UndoEffect,
    AddedPhone,
    AddedEmail,
    AddedToGroup,
    Archived,
    UpdatedName,
)
from .catalog import HealthIssueAction, ActionType

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Result of executing one action."""
    success: bool
    contact_id: Optional[str] = None
    effect: Optional[UndoEffect] = None
    errors: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        """Human-readable result."""
        if self.success:
            return f"{self.effect.describe()} on {self.contact_id}"
        return f"Failed on {self.contact_id}: {'; '.join(self.errors)}"


@dataclass
class BulkActionResult:
    """Result of executing one action against several issues."""
    success_count: int = 0
    results: List[ActionResult] = field(default_factory=list)
    effects: List[UndoEffect] = field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.results) - self.success_count

    @property
    def success(self) -> bool:
        return self.failure_count == 0

    def __str__(self) -> str:
        return f"{self.success_count} of {len(self.results)} succeeded"


class HealthIssueActionExecutor:
    """
    Applies catalog actions to the record an issue refers to.

    Input is trimmed and validated before the store is touched. Successful
    actions return the effect needed to undo them.
    """

    def __init__(
        self,
        store: RecordStore,
        locks: Optional[RecordLockRegistry] = None,
        config: Optional[OrganizerConfig] = None,
    ):
        self.store = store
        self.locks = locks or RecordLockRegistry()
        self.config = config or OrganizerConfig()

    def execute(
        self,
        action: HealthIssueAction,
        issue: DataQualityIssue,
        input_value: Optional[str] = None,
    ) -> ActionResult:
        """
        Execute an action for an issue.

        Args:
            action: Catalog action to run
            issue: Issue whose contact is the target
            input_value: Free-text input for actions that require it

        Returns:
            ActionResult carrying the effect on success
        """
        contact_id = issue.contact_id
        value = (input_value or '').strip()

        if action.requires_input and not value:
            logger.warning(f"{action.title}: empty input for {contact_id}")
            return ActionResult(success=False, contact_id=contact_id, errors=["Input is required"])

        try:
            with self.locks.hold(contact_id):
                return self._apply(action, contact_id, value)
        except Exception as e:
            logger.error(f"{action.title} failed for {contact_id}: {e}", exc_info=True)
            return ActionResult(success=False, contact_id=contact_id, errors=[str(e)])

    def _apply(self, action: HealthIssueAction, contact_id: str, value: str) -> ActionResult:
        action_type = action.action_type

        if action_type == ActionType.ADD_PHONE:
            succeeded = self.store.add_phone(contact_id, value)
            effect = AddedPhone(contact_id, value)
        elif action_type == ActionType.ADD_EMAIL:
            succeeded = self.store.add_email(contact_id, value)
            effect = AddedEmail(contact_id, value)
        elif action_type == ActionType.ADD_TO_GROUP:
            was_member = self.store.is_member(contact_id, action.group_name)
            succeeded = self.store.add_to_group(contact_id, action.group_name)
            effect = AddedToGroup(contact_id, action.group_name, was_member)
        elif action_type == ActionType.ARCHIVE:
            was_member = self.store.is_member(contact_id, self.config.archive_group)
            succeeded = self.store.archive(contact_id)
            effect = Archived(contact_id, self.config.archive_group, was_member)
        elif action_type == ActionType.UPDATE_NAME:
            previous = self.store.fetch_name_components(contact_id)
            if previous is None:
                logger.warning(f"No name components for {contact_id}")
                return ActionResult(
                    success=False,
                    contact_id=contact_id,
                    errors=["Could not read the current name"],
                )
            succeeded = self.store.update_name(contact_id, value)
            effect = UpdatedName(contact_id, previous, value)
        else:
            raise ValueError(f"Unsupported action type: {action_type}")

        if not succeeded:
            logger.warning(f"Store refused '{action.title}' for {contact_id}")
            return ActionResult(success=False, contact_id=contact_id, errors=["Store refused the change"])

        logger.info(f"{effect.describe()} on {contact_id}")
        return ActionResult(success=True, contact_id=contact_id, effect=effect)

    def execute_bulk(
        self,
        action: HealthIssueAction,
        issues: Iterable[DataQualityIssue],
        input_value: Optional[str] = None,
    ) -> BulkActionResult:
        """
        Execute one action for several issues, one after another.

        A failure does not stop the remaining issues.

        Returns:
            BulkActionResult with per-issue results and the applied effects in order
        """
        bulk = BulkActionResult()
        for issue in issues:
            result = self.execute(action, issue, input_value)
            bulk.results.append(result)
            if result.success:
                bulk.success_count += 1
                bulk.effects.append(result.effect)

        logger.info(f"{action.title}: {bulk}")
        return bulk
