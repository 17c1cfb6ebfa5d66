"""
JSON-file backed lesson store.

Holds teachers, subjects and lessons in the storage representation
(snake_case rows, ``duration_minutes``, ``day_of_week``) and maps them to
the canonical InternalLesson at this boundary only.

File layout::

    {
      "teachers": [{"id": ..., "school_id": ..., "name": ..., "is_active": true}],
      "subjects": [{"id": ..., "school_id": ..., "name": ...}],
      "lessons":  [{"id": ..., "school_id": ..., "student_name": ...,
                    "duration_minutes": 30, "teacher_id": ..., "day_of_week": 0,
                    "start_time": "09:00", "subject_id": ...,
                    "start_date": "2024-09-02", "end_date": null}]
    }
"""

import asyncio
import copy
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models.lesson import InternalLesson, LessonUpdate, NamedRef
from ..reconciliation.errors import LessonWriteError, SourceFetchError
from ..reconciliation.interfaces import (
    IdentityResolver,
    InternalLessonSource,
    LessonStore,
)
from ..reconciliation.normalizer import normalize_label, normalize_name
from ..utils.file_utils import load_json, save_json


logger = logging.getLogger(__name__)


UNKNOWN_SUBJECT = "Unknown Subject"


def parse_stored_duration(value: Any, lesson_id: Any) -> int:
    """
    Read a stored duration as whole minutes.

    A missing duration is 0. An unreadable one is also 0 (logged), so the
    lesson still takes part in the comparison and shows a duration mismatch.
    """
    if value is None or value == "":
        return 0
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Unparsable duration {value!r} on lesson {lesson_id}")
        return 0


def lesson_from_row(
    row: Dict[str, Any],
    teacher_names: Dict[str, str],
    subject_names: Dict[str, str]
) -> InternalLesson:
    """
    Map a stored lesson row to an InternalLesson.

    Args:
        row: Lesson row in storage representation
        teacher_names: Teacher id -> name for the school
        subject_names: Subject id -> name for the school

    Returns:
        InternalLesson with resolved teacher and subject names
    """
    teacher_id = row.get("teacher_id") or None
    subject_id = row.get("subject_id") or ""

    return InternalLesson(
        id=str(row["id"]),
        student_name=(row.get("student_name") or "").strip(),
        duration=parse_stored_duration(row.get("duration_minutes"), row.get("id")),
        teacher_id=teacher_id,
        teacher_name=teacher_names.get(teacher_id) if teacher_id else None,
        day=row.get("day_of_week"),
        start_time=row.get("start_time") or None,
        subject_id=subject_id,
        subject_name=subject_names.get(subject_id, UNKNOWN_SUBJECT),
        start_date=row.get("start_date") or None,
        end_date=row.get("end_date") or None,
    )


def is_active_row(row: Dict[str, Any], today: date) -> bool:
    """A lesson is active while its end date is unset or not in the past."""
    end_date = row.get("end_date")
    if not end_date:
        return True
    try:
        return date.fromisoformat(str(end_date)) >= today
    except ValueError:
        logger.warning(f"Lesson {row.get('id')} has unreadable end_date {end_date!r}")
        return True


class JsonLessonStore(InternalLessonSource, IdentityResolver, LessonStore):
    """
    Lesson store kept in a JSON document.

    The document is re-read on every call, so each comparison sees the
    current file. File reads and writes run in a worker thread. Writes are persisted back to the file; a store built
    with ``from_data`` keeps its document in memory only.

    Examples:
        >>> store = JsonLessonStore(Path("data/lessons.json"))
        >>> lessons = await store.fetch_lessons("school-1")
    """

    def __init__(
        self,
        path: Optional[Path] = None,
        active_only: bool = True,
        today: Optional[date] = None
    ):
        self.path = Path(path) if path is not None else None
        self.active_only = active_only
        self._today = today
        self._data: Optional[Dict[str, Any]] = None

    @classmethod
    def from_data(
        cls,
        data: Dict[str, Any],
        active_only: bool = True,
        today: Optional[date] = None
    ) -> 'JsonLessonStore':
        """Create an in-memory store from an already loaded document."""
        store = cls(path=None, active_only=active_only, today=today)
        store._data = copy.deepcopy(data)
        return store

    @property
    def today(self) -> date:
        return self._today or date.today()

    def _load(self) -> Dict[str, Any]:
        if self.path is None:
            return self._data or {}

        data = load_json(self.path)
        if data is None:
            raise SourceFetchError(f"Could not load lesson store {self.path}")
        return data

    async def _read(self) -> Dict[str, Any]:
        return await asyncio.to_thread(self._load)

    def _save(self, data: Dict[str, Any]):
        if self.path is None:
            self._data = data
            return

        if not save_json(data, self.path):
            raise LessonWriteError(f"Could not write lesson store {self.path}")

    @staticmethod
    def _school_rows(data: Dict[str, Any], key: str, school_id: str) -> List[Dict[str, Any]]:
        return [row for row in data.get(key, []) if row.get("school_id") == school_id]

    def _name_maps(self, data: Dict[str, Any], school_id: str):
        teacher_names = {
            row["id"]: row["name"]
            for row in self._school_rows(data, "teachers", school_id)
            if row.get("is_active", True)
        }
        subject_names = {
            row["id"]: row["name"]
            for row in self._school_rows(data, "subjects", school_id)
        }
        return teacher_names, subject_names

    def _lessons(self, data: Dict[str, Any], school_id: str) -> List[InternalLesson]:
        teacher_names, subject_names = self._name_maps(data, school_id)
        return [
            lesson_from_row(row, teacher_names, subject_names)
            for row in self._school_rows(data, "lessons", school_id)
        ]

    async def fetch_lessons(self, school_id: str) -> List[InternalLesson]:
        data = await self._read()
        teacher_names, subject_names = self._name_maps(data, school_id)

        rows = self._school_rows(data, "lessons", school_id)
        if self.active_only:
            today = self.today
            rows = [row for row in rows if is_active_row(row, today)]

        lessons = [lesson_from_row(row, teacher_names, subject_names) for row in rows]
        logger.info(f"Retrieved {len(lessons)} lessons for school {school_id}")
        return lessons

    async def find_teacher(self, school_id: str, name: str) -> Optional[NamedRef]:
        wanted = normalize_label(name)
        if not wanted:
            return None

        data = await self._read()
        for row in self._school_rows(data, "teachers", school_id):
            if row.get("is_active", True) and normalize_label(row.get("name")) == wanted:
                return NamedRef(id=row["id"], name=row["name"])
        return None

    async def find_subject(self, school_id: str, name: str) -> Optional[NamedRef]:
        wanted = normalize_label(name)
        if not wanted:
            return None

        data = await self._read()
        for row in self._school_rows(data, "subjects", school_id):
            if normalize_label(row.get("name")) == wanted:
                return NamedRef(id=row["id"], name=row["name"])
        return None

    async def lessons_for_teacher_on_day(
        self,
        school_id: str,
        teacher_id: str,
        day: int,
        exclude_lesson_id: Optional[str] = None
    ) -> List[InternalLesson]:
        data = await self._read()
        return [
            lesson for lesson in self._lessons(data, school_id)
            if lesson.teacher_id == teacher_id
            and lesson.day == day
            and lesson.id != exclude_lesson_id
        ]

    async def lessons_for_student_in_slot(
        self,
        school_id: str,
        student_name: str,
        day: int,
        start_time: str,
        exclude_lesson_id: Optional[str] = None
    ) -> List[InternalLesson]:
        wanted = normalize_name(student_name)
        data = await self._read()
        return [
            lesson for lesson in self._lessons(data, school_id)
            if normalize_name(lesson.student_name) == wanted
            and lesson.day == day
            and lesson.start_time == start_time
            and lesson.id != exclude_lesson_id
        ]

    async def update_lesson(self, lesson_id: str, update: LessonUpdate) -> InternalLesson:
        return await asyncio.to_thread(self._write_update, lesson_id, update)

    def _write_update(self, lesson_id: str, update: LessonUpdate) -> InternalLesson:
        try:
            data = self._load()
        except SourceFetchError as e:
            raise LessonWriteError(str(e)) from e

        row = next(
            (row for row in data.get("lessons", []) if str(row.get("id")) == lesson_id),
            None
        )
        if row is None:
            raise LessonWriteError(f"Lesson {lesson_id} not found")

        row.update({
            "student_name": update.student_name,
            "duration_minutes": update.duration,
            "teacher_id": update.teacher_id,
            "subject_id": update.subject_id,
            "start_date": update.start_date,
        })
        self._save(data)

        teacher_names, subject_names = self._name_maps(data, row.get("school_id"))
        return lesson_from_row(row, teacher_names, subject_names)
