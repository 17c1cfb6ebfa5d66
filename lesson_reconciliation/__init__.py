"""
Lesson reconciliation engine.

Compares a school's internal lesson records with its externally
maintained roster and aligns internal records with roster values.

Usage:
    >>> from lesson_reconciliation import LessonComparisonService
    >>> from lesson_reconciliation.sources.lesson_store import JsonLessonStore
    >>> from lesson_reconciliation.sources.roster import CsvRosterSource
    >>>
    >>> store = JsonLessonStore(Path("data/lessons.json"))
    >>> service = LessonComparisonService(store, CsvRosterSource(Path("data/rosters")), store, store)
    >>> result = await service.compare("school-1")
"""

from .models.comparison import ComparisonResult, MatchedPair, MismatchedPair
from .models.lesson import ExternalLesson, InternalLesson, LessonUpdate, NamedRef
from .models.result import Result, ResultStatus
from .reconciliation.matcher import match_lessons
from .reconciliation.service import LessonComparisonService

__all__ = [
    "ComparisonResult",
    "MatchedPair",
    "MismatchedPair",
    "ExternalLesson",
    "InternalLesson",
    "LessonUpdate",
    "NamedRef",
    "Result",
    "ResultStatus",
    "match_lessons",
    "LessonComparisonService",
]

__version__ = "0.1.0"
