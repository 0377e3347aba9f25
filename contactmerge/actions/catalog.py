"""
Remediation actions for data quality issues.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..config import OrganizerConfig
from ..quality.analyzer import DataQualityIssue, IssueType


class ActionType(Enum):
    """Kinds of remediation."""
    ADD_PHONE = "add_phone"
    ADD_EMAIL = "add_email"
    ADD_TO_GROUP = "add_to_group"
    ARCHIVE = "archive"
    UPDATE_NAME = "update_name"


_INPUT_ACTIONS = {ActionType.ADD_PHONE, ActionType.ADD_EMAIL, ActionType.UPDATE_NAME}


@dataclass(frozen=True, slots=True)
class HealthIssueAction:
    """A remediation offered for an issue.

    Attributes:
        title: Menu title
        action_type: What the action does
        group_name: Target group for ADD_TO_GROUP actions
        input_prompt: Prompt shown when free-text input is required
        input_placeholder: Example value for the input field
    """
    title: str
    action_type: ActionType
    group_name: Optional[str] = None
    input_prompt: Optional[str] = None
    input_placeholder: Optional[str] = None

    def __post_init__(self):
        if self.action_type == ActionType.ADD_TO_GROUP and not self.group_name:
            raise ValueError("Add-to-group actions need a group name")

    @property
    def requires_input(self) -> bool:
        return self.action_type in _INPUT_ACTIONS

    def __str__(self) -> str:
        return self.title


class HealthIssueActionCatalog:
    """
    Maps each issue type to the actions that remediate it.

    Every list ends with "Mark as Reviewed".
    """

    def __init__(self, config: Optional[OrganizerConfig] = None):
        self.config = config or OrganizerConfig()

    @property
    def mark_reviewed_action(self) -> HealthIssueAction:
        return HealthIssueAction(
            title="Mark as Reviewed",
            action_type=ActionType.ADD_TO_GROUP,
            group_name=self.config.reviewed_group,
        )

    def _group_action(self, title: str, group_name: str) -> HealthIssueAction:
        return HealthIssueAction(title=title, action_type=ActionType.ADD_TO_GROUP, group_name=group_name)

    def actions_for(self, issue: DataQualityIssue) -> List[HealthIssueAction]:
        """
        List the remediation actions for an issue.

        Args:
            issue: Issue to remediate

        Returns:
            Actions in menu order, ending with "Mark as Reviewed"
        """
        config = self.config
        issue_type = issue.issue_type

        if issue_type == IssueType.MISSING_PHONE:
            actions = [
                HealthIssueAction(
                    title="Add Phone Number",
                    action_type=ActionType.ADD_PHONE,
                    input_prompt="Enter phone number",
                    input_placeholder="(555) 123-4567",
                ),
                self._group_action("Add to Follow Up", config.phone_follow_up_group),
            ]
        elif issue_type == IssueType.MISSING_EMAIL:
            actions = [
                HealthIssueAction(
                    title="Add Email Address",
                    action_type=ActionType.ADD_EMAIL,
                    input_prompt="Enter email address",
                    input_placeholder="name@example.com",
                ),
                self._group_action("Add to Email Follow-Up", config.email_follow_up_group),
            ]
        elif issue_type == IssueType.NO_CONTACT_INFO:
            actions = [
                self._group_action("Add to Follow Up", config.phone_follow_up_group),
                HealthIssueAction(title="Archive Contact", action_type=ActionType.ARCHIVE),
            ]
        elif issue_type == IssueType.MISSING_NAME:
            actions = [
                HealthIssueAction(
                    title="Add Name",
                    action_type=ActionType.UPDATE_NAME,
                    input_prompt="Enter full name",
                    input_placeholder="Jane Doe",
                ),
                self._group_action("Add to General Follow-Up", config.general_follow_up_group),
            ]
        else:
            # incomplete data and suggestions
            actions = [self._group_action("Add to General Follow-Up", config.general_follow_up_group)]

        actions.append(self.mark_reviewed_action)
        return actions
