"""
Alignment: overwrite an internal lesson with its roster counterpart.
"""

import logging
from datetime import date
from typing import Optional

from ..models.lesson import ExternalLesson, InternalLesson, LessonUpdate
from ..models.result import Result
from ..utils.logger import mask_student_name
from .conflict_checker import resolve_targets
from .errors import InvalidStartDateError, LessonWriteError, SchedulingConflictError
from .interfaces import IdentityResolver, LessonStore
from .normalizer import is_parsable_date, normalize_date


logger = logging.getLogger(__name__)


def _as_date(value: Optional[str], open_end: date) -> date:
    """Parse a lesson boundary; an unset or unreadable boundary is open."""
    normalized = normalize_date(value)
    if normalized is None:
        return open_end
    try:
        return date.fromisoformat(normalized)
    except ValueError:
        return open_end


def date_ranges_overlap(
    start_a: Optional[str],
    end_a: Optional[str],
    start_b: Optional[str],
    end_b: Optional[str]
) -> bool:
    """
    Inclusive overlap of two lesson date ranges.

    A missing start is open towards the past, a missing end is open
    towards the future.
    """
    return (
        _as_date(start_a, date.min) <= _as_date(end_b, date.max)
        and _as_date(end_a, date.max) >= _as_date(start_b, date.min)
    )


class AlignmentExecutor:
    """
    Writes roster values onto an internal lesson.

    Student name, duration, teacher, subject and start date come from the
    roster lesson; day, start time and end date stay as stored. Run the
    ConflictChecker first: the executor only guards against the same
    student being booked twice in one slot.

    Examples:
        >>> executor = AlignmentExecutor(resolver=store, store=store)
        >>> result = await executor.align(internal, external, "school-1")
        >>> if result.is_success:
        ...     print(result.value.teacher_name)
    """

    def __init__(self, resolver: IdentityResolver, store: LessonStore):
        self.resolver = resolver
        self.store = store

    async def align(
        self,
        internal: InternalLesson,
        external: ExternalLesson,
        school_id: str
    ) -> Result[InternalLesson]:
        """
        Align one mismatched pair.

        Args:
            internal: Stored lesson to overwrite
            external: Roster lesson providing the values
            school_id: School both lessons belong to

        Returns:
            Result with the updated lesson, or a failure describing the
            unresolved name, the unreadable start date, the blocking
            overlap or the write error
        """
        targets = await resolve_targets(self.resolver, school_id, external)
        if targets.is_failure:
            return Result.failure(targets.message, targets.error)

        if not is_parsable_date(external.start_date):
            return Result.from_error(InvalidStartDateError(external.start_date.strip()))

        teacher = targets.value.teacher
        subject = targets.value.subject
        update = LessonUpdate.from_external(
            external, teacher, subject, normalize_date(external.start_date)
        )

        overlap = await self._check_student_overlap(internal, update, school_id)
        if overlap.is_failure:
            return Result.failure(overlap.message, overlap.error)

        try:
            stored = await self.store.update_lesson(internal.id, update)
        except LessonWriteError as e:
            return Result.from_error(e)
        except Exception as e:
            error = LessonWriteError(f"Error updating lesson: {e}")
            return Result.from_error(error)

        updated = stored.with_changes(teacher_name=teacher.name, subject_name=subject.name)

        logger.info(
            f"Lesson {updated.id} aligned with roster row {external.row} "
            f"({mask_student_name(updated.student_name)})"
        )
        return Result.success(updated, "Lesson successfully aligned with roster data")

    async def _check_student_overlap(
        self,
        internal: InternalLesson,
        update: LessonUpdate,
        school_id: str
    ) -> Result[None]:
        """Refuse a write that books the student twice in the same slot."""
        if internal.day is None or not internal.start_time:
            return Result.success(None)

        try:
            same_slot = await self.store.lessons_for_student_in_slot(
                school_id,
                update.student_name,
                internal.day,
                internal.start_time,
                exclude_lesson_id=internal.id,
            )
        except Exception as e:
            # A failed lookup does not block alignment
            logger.warning(f"Could not check student overlap for lesson {internal.id}: {e}")
            return Result.success(None)

        for other in same_slot:
            if date_ranges_overlap(update.start_date, internal.end_date, other.start_date, other.end_date):
                error = SchedulingConflictError(
                    f"Cannot align lesson: Overlapping lesson found: {other.student_name} "
                    f"on {other.day_name} at {other.start_time} "
                    f"({other.start_date or 'open'} - {other.end_date or 'open'}). "
                    f"This would create overlapping lessons for the same student."
                )
                logger.warning(
                    f"Alignment of lesson {internal.id} blocked: same slot as lesson {other.id}"
                )
                return Result.from_error(error)

        return Result.success(None)
