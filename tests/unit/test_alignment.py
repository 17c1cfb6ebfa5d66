"""
Unit tests for aligning internal lessons with roster data.
"""

from unittest.mock import AsyncMock

import pytest

from lesson_reconciliation.models.lesson import InternalLesson
from lesson_reconciliation.reconciliation.alignment import (
    AlignmentExecutor,
    date_ranges_overlap,
)
from lesson_reconciliation.reconciliation.errors import (
    InvalidStartDateError,
    LessonWriteError,
    SchedulingConflictError,
    UnresolvedTeacherError,
)
from lesson_reconciliation.sources.lesson_store import JsonLessonStore


SCHOOL_ID = "school-1"


class TestDateRangesOverlap:
    """Test cases for lesson date range overlap."""

    def test_disjoint_ranges(self):
        """Test ranges that end before the other starts."""
        assert not date_ranges_overlap("2024-01-01", "2024-06-30", "2024-09-01", None)

    def test_shared_boundary_day_overlaps(self):
        """Test ranges are inclusive of their end day."""
        assert date_ranges_overlap("2024-01-01", "2024-09-01", "2024-09-01", None)

    def test_open_ranges_overlap(self):
        """Test fully open ranges always overlap."""
        assert date_ranges_overlap(None, None, None, None)

    def test_mixed_formats(self):
        """Test roster-style dates are normalized before comparing."""
        assert not date_ranges_overlap("01/10/2024", None, None, "2024-09-30")


class TestAlignmentExecutor:
    """Test cases for AlignmentExecutor.align."""

    @pytest.fixture
    def executor(self, store):
        return AlignmentExecutor(resolver=store, store=store)

    @pytest.fixture
    def alice(self, make_internal):
        return make_internal(id="lesson-1", start_date="2024-09-02")

    @pytest.mark.asyncio
    async def test_writes_roster_fields(self, executor, store, alice, make_external):
        """Test roster values are written and returned with resolved names."""
        external = make_external(
            student_name="Alice Smith-Jones",
            duration=45,
            teacher_name="mr. park",
            subject_name="violin",
            start_date="2024-09-09",
        )

        result = await executor.align(alice, external, SCHOOL_ID)

        assert result.is_success
        assert result.message == "Lesson successfully aligned with roster data"
        updated = result.value
        assert isinstance(updated, InternalLesson)
        assert updated.student_name == "Alice Smith-Jones"
        assert updated.duration == 45
        assert updated.teacher_id == "t-park"
        assert updated.teacher_name == "Mr. Park"
        assert updated.subject_id == "s-violin"
        assert updated.subject_name == "Violin"
        assert updated.start_date == "2024-09-09"

    @pytest.mark.asyncio
    async def test_grid_position_untouched(self, executor, store, alice, make_external):
        """Test day, start time and end date keep their stored values."""
        result = await executor.align(alice, make_external(duration=45), SCHOOL_ID)

        stored = {lesson.id: lesson for lesson in await store.fetch_lessons(SCHOOL_ID)}
        assert stored["lesson-1"].duration == 45
        assert stored["lesson-1"].day == 0
        assert stored["lesson-1"].start_time == "09:00"
        assert stored["lesson-1"].end_date is None
        assert result.value == stored["lesson-1"]

    @pytest.mark.asyncio
    async def test_unset_start_date_written_as_none(self, executor, store, alice, make_external):
        """Test an empty roster start date clears the stored one."""
        result = await executor.align(alice, make_external(start_date=""), SCHOOL_ID)

        assert result.value.start_date is None

    @pytest.mark.asyncio
    async def test_day_first_start_date_stored_as_iso(self, executor, store, alice, make_external):
        """Test a roster date like 02/09/2024 is written as 2024-09-02."""
        result = await executor.align(alice, make_external(start_date="02/09/2024"), SCHOOL_ID)

        assert result.value.start_date == "2024-09-02"
        stored = {lesson.id: lesson for lesson in await store.fetch_lessons(SCHOOL_ID)}
        assert stored["lesson-1"].start_date == "2024-09-02"

    @pytest.mark.asyncio
    async def test_unreadable_start_date_not_written(self, executor, store, alice, make_external):
        """Test a free-text roster date is refused before anything is written."""
        result = await executor.align(
            alice, make_external(start_date=" Sept ", duration=45), SCHOOL_ID
        )

        assert result.is_failure
        assert isinstance(result.error, InvalidStartDateError)
        assert result.message == 'Start date "Sept" from roster is not a recognized date.'
        stored = {lesson.id: lesson for lesson in await store.fetch_lessons(SCHOOL_ID)}
        assert stored["lesson-1"].duration == 30
        assert stored["lesson-1"].start_date == "2024-09-02"

    @pytest.mark.asyncio
    async def test_unresolved_teacher_leaves_store_unchanged(self, executor, store, alice, make_external):
        """Test nothing is written when the teacher cannot be resolved."""
        result = await executor.align(alice, make_external(teacher_name="Mrs. Gone", duration=60), SCHOOL_ID)

        assert result.is_failure
        assert isinstance(result.error, UnresolvedTeacherError)
        assert result.message == 'Teacher "Mrs. Gone" from roster not found in school.'
        stored = {lesson.id: lesson for lesson in await store.fetch_lessons(SCHOOL_ID)}
        assert stored["lesson-1"].duration == 30

    @pytest.mark.asyncio
    async def test_missing_lesson(self, executor, make_internal, make_external):
        """Test aligning a lesson the store does not hold."""
        ghost = make_internal(id="lesson-404", day=None, start_time=None)

        result = await executor.align(ghost, make_external(), SCHOOL_ID)

        assert result.is_failure
        assert isinstance(result.error, LessonWriteError)
        assert result.message == "Lesson lesson-404 not found"

    @pytest.mark.asyncio
    async def test_write_error_wrapped(self, store, alice, make_external):
        """Test unexpected store errors become a write failure."""
        writer = AsyncMock()
        writer.lessons_for_student_in_slot.return_value = []
        writer.update_lesson.side_effect = RuntimeError("disk full")
        executor = AlignmentExecutor(resolver=store, store=writer)

        result = await executor.align(alice, make_external(), SCHOOL_ID)

        assert isinstance(result.error, LessonWriteError)
        assert result.message == "Error updating lesson: disk full"

    @pytest.mark.asyncio
    async def test_same_student_same_slot_blocked(self, school_data, make_internal, make_external):
        """Test renaming onto a student already booked in the slot is refused."""
        school_data["lessons"].append({
            "id": "lesson-6", "school_id": SCHOOL_ID, "student_name": "Bob Jones",
            "duration_minutes": 30, "teacher_id": "t-park", "day_of_week": 0,
            "start_time": "09:00", "subject_id": "s-violin",
            "start_date": "2024-01-01", "end_date": None,
        })
        store = JsonLessonStore.from_data(school_data)
        executor = AlignmentExecutor(resolver=store, store=store)

        result = await executor.align(
            make_internal(id="lesson-1"),
            make_external(student_name="Bob Jones", start_date="2024-09-02"),
            SCHOOL_ID,
        )

        assert result.is_failure
        assert isinstance(result.error, SchedulingConflictError)
        assert result.message.startswith(
            "Cannot align lesson: Overlapping lesson found: Bob Jones on Monday at 09:00"
        )

    @pytest.mark.asyncio
    async def test_same_slot_in_other_term_allowed(self, school_data, make_internal, make_external):
        """Test a same-slot lesson that ended earlier does not block."""
        school_data["lessons"].append({
            "id": "lesson-6", "school_id": SCHOOL_ID, "student_name": "Bob Jones",
            "duration_minutes": 30, "teacher_id": "t-park", "day_of_week": 0,
            "start_time": "09:00", "subject_id": "s-violin",
            "start_date": "2024-01-01", "end_date": "2024-06-30",
        })
        store = JsonLessonStore.from_data(school_data)
        executor = AlignmentExecutor(resolver=store, store=store)

        result = await executor.align(
            make_internal(id="lesson-1"),
            make_external(student_name="Bob Jones", start_date="2024-09-02"),
            SCHOOL_ID,
        )

        assert result.is_success

    @pytest.mark.asyncio
    async def test_slot_lookup_error_does_not_block(self, store, alice, make_external):
        """Test a failing same-slot lookup still lets the write through."""
        writer = AsyncMock()
        writer.lessons_for_student_in_slot.side_effect = RuntimeError("timeout")
        writer.update_lesson.return_value = alice
        executor = AlignmentExecutor(resolver=store, store=writer)

        result = await executor.align(alice, make_external(), SCHOOL_ID)

        assert result.is_success
        writer.update_lesson.assert_awaited_once()
