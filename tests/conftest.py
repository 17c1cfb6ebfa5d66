"""Pytest configuration and shared fixtures.

Provides lesson builders and a small in-memory school used by the
reconciliation and store tests.
"""

from datetime import date

import pytest

from lesson_reconciliation.models.lesson import ExternalLesson, InternalLesson
from lesson_reconciliation.sources.lesson_store import JsonLessonStore


SCHOOL_ID = "school-1"
TODAY = date(2024, 10, 1)


def build_internal(**overrides) -> InternalLesson:
    """Build an internal lesson; defaults describe Alice's piano lesson."""
    fields = {
        "id": "lesson-1",
        "student_name": "Alice Smith",
        "duration": 30,
        "teacher_id": "t-lee",
        "teacher_name": "Ms. Lee",
        "day": 0,
        "start_time": "09:00",
        "subject_id": "s-piano",
        "subject_name": "Piano",
        "start_date": None,
        "end_date": None,
    }
    fields.update(overrides)
    return InternalLesson(**fields)


def build_external(**overrides) -> ExternalLesson:
    """Build a roster lesson; defaults mirror build_internal()."""
    fields = {
        "student_name": "Alice Smith",
        "duration": 30,
        "teacher_name": "Ms. Lee",
        "subject_name": "Piano",
        "start_date": "",
        "row": 2,
    }
    fields.update(overrides)
    return ExternalLesson(**fields)


@pytest.fixture
def make_internal():
    return build_internal


@pytest.fixture
def make_external():
    return build_external


@pytest.fixture
def school_data():
    """Storage document for one school plus a neighbouring school."""
    return {
        "teachers": [
            {"id": "t-lee", "school_id": SCHOOL_ID, "name": "Ms. Lee", "is_active": True},
            {"id": "t-park", "school_id": SCHOOL_ID, "name": "Mr. Park", "is_active": True},
            {"id": "t-gone", "school_id": SCHOOL_ID, "name": "Mrs. Gone", "is_active": False},
            {"id": "t-lee-2", "school_id": "school-2", "name": "Ms. Lee", "is_active": True},
        ],
        "subjects": [
            {"id": "s-piano", "school_id": SCHOOL_ID, "name": "Piano"},
            {"id": "s-violin", "school_id": SCHOOL_ID, "name": "Violin"},
            {"id": "s-drums", "school_id": "school-2", "name": "Drums"},
        ],
        "lessons": [
            {
                "id": "lesson-1", "school_id": SCHOOL_ID, "student_name": "Alice Smith",
                "duration_minutes": 30, "teacher_id": "t-lee", "day_of_week": 0,
                "start_time": "09:00", "subject_id": "s-piano",
                "start_date": "2024-09-02", "end_date": None,
            },
            {
                "id": "lesson-2", "school_id": SCHOOL_ID, "student_name": "Bob Jones",
                "duration_minutes": 30, "teacher_id": "t-lee", "day_of_week": 0,
                "start_time": "09:30", "subject_id": "s-piano",
                "start_date": "2024-09-02", "end_date": None,
            },
            {
                "id": "lesson-3", "school_id": SCHOOL_ID, "student_name": "Carol Diaz",
                "duration_minutes": 45, "teacher_id": "t-park", "day_of_week": 1,
                "start_time": "10:00", "subject_id": "s-violin",
                "start_date": None, "end_date": None,
            },
            {
                "id": "lesson-4", "school_id": SCHOOL_ID, "student_name": "Dan Old",
                "duration_minutes": 30, "teacher_id": "t-lee", "day_of_week": 2,
                "start_time": "13:00", "subject_id": "s-piano",
                "start_date": "2023-09-01", "end_date": "2024-06-30",
            },
            {
                "id": "lesson-5", "school_id": SCHOOL_ID, "student_name": "Eve Stone",
                "duration_minutes": 30, "teacher_id": None, "day_of_week": None,
                "start_time": None, "subject_id": "s-violin",
                "start_date": None, "end_date": None,
            },
            {
                "id": "lesson-9", "school_id": "school-2", "student_name": "Zed Other",
                "duration_minutes": 60, "teacher_id": "t-lee-2", "day_of_week": 0,
                "start_time": "09:00", "subject_id": "s-drums",
                "start_date": None, "end_date": None,
            },
        ],
    }


@pytest.fixture
def store(school_data):
    """In-memory store over school_data with a fixed 'today'."""
    return JsonLessonStore.from_data(school_data, today=TODAY)
