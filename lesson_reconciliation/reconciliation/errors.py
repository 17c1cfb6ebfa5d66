"""
Reconciliation error types.

These are carried inside failed Results; none of them escapes
LessonComparisonService.
"""


class ReconciliationError(Exception):
    """Base exception for reconciliation errors."""

    pass


class SourceFetchError(ReconciliationError):
    """Raised when a lesson source cannot be read."""

    pass


class UnresolvedNameError(ReconciliationError):
    """Raised when a roster name has no counterpart in the school."""

    kind = "Name"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'{self.kind} "{name}" from roster not found in school.')


class UnresolvedTeacherError(UnresolvedNameError):
    """Raised when a roster teacher is not an active teacher of the school."""

    kind = "Teacher"


class UnresolvedSubjectError(UnresolvedNameError):
    """Raised when a roster subject is not a subject of the school."""

    kind = "Subject"


class SchedulingConflictError(ReconciliationError):
    """Raised when alignment would collide with another lesson."""

    pass


class LessonWriteError(ReconciliationError):
    """Raised when the store rejects a write-back."""

    pass


class InvalidStartTimeError(ReconciliationError):
    """Raised when a stored lesson start time is not HH:MM."""

    def __init__(self, lesson_id: str, value: str):
        self.lesson_id = lesson_id
        self.value = value
        super().__init__(f'Lesson {lesson_id} has unreadable start time "{value}".')


class InvalidStartDateError(ReconciliationError):
    """Raised when a roster start date is in no recognized date format."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f'Start date "{value}" from roster is not a recognized date.')
