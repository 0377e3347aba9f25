"""Remediation actions for data quality issues."""

from .catalog import ActionType, HealthIssueAction, HealthIssueActionCatalog
from .executor import ActionResult, BulkActionResult, HealthIssueActionExecutor

__all__ = [
    'ActionType',
    'HealthIssueAction',
    'HealthIssueActionCatalog',
    'ActionResult',
    'BulkActionResult',
    'HealthIssueActionExecutor',
]
