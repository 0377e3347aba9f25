"""contactmerge - find duplicate contacts, score data quality and apply undoable fixes."""

__version__ = "0.1.0"

from .config import OrganizerConfig
from .core.record import Record, NameComponents
from .matching.matcher import DuplicateMatcher, DuplicateGroup, MatchType
from .merge.plan import MergePlan, build_plan
from .quality.analyzer import DataQualityAnalyzer, DataQualityIssue, DataQualitySummary
from .store.memory import InMemoryRecordStore
from .undo.ledger import UndoLedger
from .organizer import ContactOrganizer, AnalysisSnapshot

__all__ = [
    'OrganizerConfig',
    'Record',
    'NameComponents',
    'DuplicateMatcher',
    'DuplicateGroup',
    'MatchType',
    'MergePlan',
    'build_plan',
    'DataQualityAnalyzer',
    'DataQualityIssue',
    'DataQualitySummary',
    'InMemoryRecordStore',
    'UndoLedger',
    'ContactOrganizer',
    'AnalysisSnapshot',
]
