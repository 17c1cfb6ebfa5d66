"""
Abstract interfaces for the record stores the engine talks to.

The engine depends on these abstractions only, so stores can be swapped
(JSON file, database, hosted backend) and mocked in tests. All methods
are coroutines; implementations raise ReconciliationError subclasses
(or any exception, which the service wraps) on failure.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.lesson import ExternalLesson, InternalLesson, LessonUpdate, NamedRef


class InternalLessonSource(ABC):
    """Source of the school's authoritative lesson records."""

    @abstractmethod
    async def fetch_lessons(self, school_id: str) -> List[InternalLesson]:
        """
        Return every internal lesson of a school, in store order.

        Args:
            school_id: School identifier

        Returns:
            Internal lessons with teacher and subject names resolved
        """
        pass


class ExternalRosterSource(ABC):
    """Source of the independently maintained roster."""

    @abstractmethod
    async def fetch_roster(self, school_id: str) -> List[ExternalLesson]:
        """
        Return every roster lesson of a school, in roster order.

        Args:
            school_id: School identifier

        Returns:
            Roster lessons (row numbers set when known)
        """
        pass


class IdentityResolver(ABC):
    """Resolves free-text roster names to school-scoped identifiers."""

    @abstractmethod
    async def find_teacher(self, school_id: str, name: str) -> Optional[NamedRef]:
        """
        Find an active teacher of the school by case-insensitive name.

        Returns:
            The first matching teacher, or None
        """
        pass

    @abstractmethod
    async def find_subject(self, school_id: str, name: str) -> Optional[NamedRef]:
        """
        Find a subject of the school by case-insensitive name.

        Returns:
            The first matching subject, or None
        """
        pass


class LessonStore(ABC):
    """Schedule queries and write-back used by conflict checks and alignment."""

    @abstractmethod
    async def lessons_for_teacher_on_day(
        self,
        school_id: str,
        teacher_id: str,
        day: int,
        exclude_lesson_id: Optional[str] = None
    ) -> List[InternalLesson]:
        """Return the teacher's lessons on a weekday, minus one lesson."""
        pass

    @abstractmethod
    async def lessons_for_student_in_slot(
        self,
        school_id: str,
        student_name: str,
        day: int,
        start_time: str,
        exclude_lesson_id: Optional[str] = None
    ) -> List[InternalLesson]:
        """Return the student's lessons starting at the same day and time."""
        pass

    @abstractmethod
    async def update_lesson(self, lesson_id: str, update: LessonUpdate) -> InternalLesson:
        """
        Write the alignment field set onto a lesson.

        Day-of-week, start time and end date are never touched.

        Returns:
            The updated lesson as stored

        Raises:
            LessonWriteError: If the lesson cannot be updated
        """
        pass
