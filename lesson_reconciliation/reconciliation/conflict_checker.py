"""
Scheduling conflict check run before a mismatched pair is aligned.
"""

import logging
from dataclasses import dataclass

from ..models.lesson import ExternalLesson, InternalLesson, NamedRef
from ..models.result import Result
from .errors import (
    InvalidStartTimeError,
    SchedulingConflictError,
    SourceFetchError,
    UnresolvedSubjectError,
    UnresolvedTeacherError,
)
from .interfaces import IdentityResolver, LessonStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlignmentTargets:
    """Teacher and subject an external lesson resolves to."""

    teacher: NamedRef
    subject: NamedRef


def to_minutes(start_time: str) -> int:
    """
    Convert "HH:MM" (or "HH:MM:SS") to minutes after midnight.

    Raises:
        ValueError: If the text is not a clock time

    Examples:
        >>> to_minutes("09:30")
        570
    """
    parts = str(start_time).strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Not a clock time: {start_time!r}")

    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Not a clock time: {start_time!r}")
    return hours * 60 + minutes


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open interval overlap: touching intervals do not overlap."""
    return start_a < end_b and end_a > start_b


async def resolve_targets(
    resolver: IdentityResolver,
    school_id: str,
    external: ExternalLesson
) -> Result[AlignmentTargets]:
    """
    Resolve the roster teacher and subject names within a school.

    Returns:
        Result with the resolved targets, or a failure naming the
        unresolved value (UnresolvedTeacherError/UnresolvedSubjectError)
        or the lookup error (SourceFetchError)
    """
    try:
        teacher = await resolver.find_teacher(school_id, external.teacher_name)
    except Exception as e:
        error = SourceFetchError(f"Error finding teachers: {e}")
        return Result.from_error(error)

    if teacher is None:
        return Result.from_error(UnresolvedTeacherError(external.teacher_name))

    try:
        subject = await resolver.find_subject(school_id, external.subject_name)
    except Exception as e:
        error = SourceFetchError(f"Error finding subject: {e}")
        return Result.from_error(error)

    if subject is None:
        return Result.from_error(UnresolvedSubjectError(external.subject_name))

    return Result.success(AlignmentTargets(teacher=teacher, subject=subject))


class ConflictChecker:
    """
    Decides whether aligning a lesson with its roster counterpart is safe.

    Only the current teacher's schedule is inspected. When alignment moves
    the lesson to another teacher the check passes without looking at the
    new teacher's day.

    Examples:
        >>> checker = ConflictChecker(resolver=store, store=store)
        >>> result = await checker.check(internal, external, "school-1")
        >>> if result.is_failure:
        ...     print(result.message)
    """

    def __init__(self, resolver: IdentityResolver, store: LessonStore):
        self.resolver = resolver
        self.store = store

    async def check(
        self,
        internal: InternalLesson,
        external: ExternalLesson,
        school_id: str
    ) -> Result[None]:
        """
        Check a mismatched pair for alignment conflicts.

        Args:
            internal: Stored lesson that would be overwritten
            external: Roster lesson providing the new values
            school_id: School both lessons belong to

        Returns:
            Success when alignment is safe; failure when a name cannot be
            resolved, the schedule cannot be read, or the new duration
            would collide with another lesson of the same teacher
        """
        targets = await resolve_targets(self.resolver, school_id, external)
        if targets.is_failure:
            return Result.failure(targets.message, targets.error)

        teacher = targets.value.teacher

        if not internal.is_scheduled:
            return Result.success(None, "Lesson is not scheduled; no conflicts possible")

        if internal.teacher_id != teacher.id:
            logger.debug(
                f"Lesson {internal.id} moves from teacher {internal.teacher_id} "
                f"to {teacher.id}; skipping overlap check"
            )
            return Result.success(None, "Teacher changes; no conflict with existing schedule")

        if int(internal.duration) == int(external.duration):
            return Result.success(None, "Duration unchanged; no conflicts")

        collision = await self._find_collision(internal, external.duration, teacher, school_id)
        if collision.is_failure:
            return collision

        return Result.success(None, "No conflicts found")

    async def _find_collision(
        self,
        internal: InternalLesson,
        new_duration: int,
        teacher: NamedRef,
        school_id: str
    ) -> Result[None]:
        try:
            start = to_minutes(internal.start_time)
        except ValueError:
            return Result.from_error(InvalidStartTimeError(internal.id, internal.start_time))
        end = start + int(new_duration)

        try:
            others = await self.store.lessons_for_teacher_on_day(
                school_id, teacher.id, internal.day, exclude_lesson_id=internal.id
            )
        except Exception as e:
            error = SourceFetchError(f"Error checking conflicts: {e}")
            return Result.from_error(error)

        for other in others:
            if not other.start_time:
                continue

            try:
                other_start = to_minutes(other.start_time)
            except ValueError:
                logger.warning(
                    f"Lesson {other.id} has unreadable start time {other.start_time!r}; "
                    f"left out of the overlap check"
                )
                continue
            other_end = other_start + int(other.duration)

            if intervals_overlap(start, end, other_start, other_end):
                error = SchedulingConflictError(
                    f"Changing duration to {new_duration} minutes would overlap "
                    f"with {other.student_name}'s lesson."
                )
                logger.warning(
                    f"Alignment of lesson {internal.id} blocked: overlaps lesson {other.id} "
                    f"on {internal.day_name} at {other.start_time}"
                )
                return Result.from_error(error)

        return Result.success(None)
