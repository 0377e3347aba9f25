"""
Record merging system.

Builds merge plans for duplicate groups and applies them to the store.
"""

from .plan import MergePlan, MergePlanBuilder, MergeValueOption, build_plan
from .merger import RecordMerger, MergeResult

__all__ = [
    'MergePlan',
    'MergePlanBuilder',
    'MergeValueOption',
    'build_plan',
    'RecordMerger',
    'MergeResult',
]
