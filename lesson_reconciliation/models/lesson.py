"""
Lesson data models.

Both sources are mapped onto these canonical records at their boundary
(roster parsing, store row mapping). Matching code only ever sees these
types, never the raw spreadsheet or storage field names.
"""

from dataclasses import dataclass, replace
from typing import Optional


# Day-of-week index used by the scheduling grid (0 = Monday)
WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


@dataclass(frozen=True)
class ExternalLesson:
    """
    Lesson as described by the externally maintained roster.

    Attributes:
        student_name: Student name as typed in the roster
        duration: Lesson duration in minutes
        teacher_name: Teacher name as typed in the roster
        subject_name: Subject name as typed in the roster
        start_date: Free-text start date (format not validated)
        row: Spreadsheet row number, for operator reference

    Examples:
        >>> lesson = ExternalLesson(
        ...     student_name="Alice Smith",
        ...     duration=30,
        ...     teacher_name="Ms. Lee",
        ...     subject_name="Piano",
        ...     start_date="02/09/2024",
        ...     row=2
        ... )
    """

    student_name: str
    duration: int
    teacher_name: str
    subject_name: str
    start_date: str = ""
    row: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "student_name": self.student_name,
            "duration": self.duration,
            "teacher_name": self.teacher_name,
            "subject_name": self.subject_name,
            "start_date": self.start_date,
            "row": self.row,
        }


@dataclass(frozen=True)
class InternalLesson:
    """
    Lesson as stored by the scheduling application.

    Attributes:
        id: Store identifier
        student_name: Student name
        duration: Lesson duration in minutes
        teacher_id: Assigned teacher identifier (None when unassigned)
        teacher_name: Resolved teacher name (None when unassigned/unknown)
        day: Day-of-week index 0-4 (None when not placed on the grid)
        start_time: "HH:MM" (None when not placed on the grid)
        subject_id: Subject identifier
        subject_name: Resolved subject name
        start_date: ISO start date (None when open)
        end_date: ISO end date (None when open)
    """

    id: str
    student_name: str
    duration: int
    subject_id: str = ""
    subject_name: str = ""
    teacher_id: Optional[str] = None
    teacher_name: Optional[str] = None
    day: Optional[int] = None
    start_time: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @property
    def is_scheduled(self) -> bool:
        """Whether the lesson occupies a teacher's grid slot."""
        return bool(self.teacher_id) and self.day is not None and bool(self.start_time)

    @property
    def day_name(self) -> str:
        if self.day is None or not 0 <= self.day < len(WEEKDAY_NAMES):
            return "Unscheduled"
        return WEEKDAY_NAMES[self.day]

    def with_changes(self, **changes) -> 'InternalLesson':
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "student_name": self.student_name,
            "duration": self.duration,
            "teacher_id": self.teacher_id,
            "teacher_name": self.teacher_name,
            "day": self.day,
            "start_time": self.start_time,
            "subject_id": self.subject_id,
            "subject_name": self.subject_name,
            "start_date": self.start_date,
            "end_date": self.end_date,
        }


@dataclass(frozen=True)
class NamedRef:
    """Identifier/name pair returned by identity resolution."""

    id: str
    name: str


@dataclass(frozen=True)
class LessonUpdate:
    """
    Field set written back onto an internal lesson during alignment.

    Day-of-week, start time and end date are deliberately absent: the
    alignment write path never moves a lesson on the grid.
    """

    student_name: str
    duration: int
    teacher_id: str
    subject_id: str
    start_date: Optional[str]

    @classmethod
    def from_external(
        cls,
        external: ExternalLesson,
        teacher: NamedRef,
        subject: NamedRef,
        start_date: Optional[str]
    ) -> 'LessonUpdate':
        """Build the update; ``start_date`` must already be ISO or None."""
        return cls(
            student_name=external.student_name,
            duration=external.duration,
            teacher_id=teacher.id,
            subject_id=subject.id,
            start_date=start_date,
        )
