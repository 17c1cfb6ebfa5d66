"""
Spreadsheet roster source.

The roster is a human-edited sheet exported as CSV, one file per school.
The first row is a header; columns are positional:

    student name | duration | teacher | start date | subject
"""

import asyncio
import logging
from pathlib import Path
from typing import List

import pandas as pd

from ..models.lesson import ExternalLesson
from ..reconciliation.errors import SourceFetchError
from ..reconciliation.interfaces import ExternalRosterSource


logger = logging.getLogger(__name__)


ROSTER_COLUMNS = ["student_name", "duration", "teacher_name", "start_date", "subject_name"]

# Data row 0 sits on spreadsheet row 2, below the header
FIRST_DATA_ROW = 2


def parse_duration(value, row: int) -> int:
    """
    Parse a duration cell as whole minutes.

    Unparsable cells become 0 (logged), which then shows up as a duration
    mismatch rather than aborting the comparison.
    """
    text = str(value).strip()
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        logger.warning(f"Unparsable duration {text!r} in roster row {row}")
        return 0


def parse_roster_frame(df: pd.DataFrame) -> List[ExternalLesson]:
    """
    Map a roster DataFrame to ExternalLesson records.

    Args:
        df: Sheet contents read with the header row as column names

    Returns:
        Roster lessons in sheet order, fully blank rows dropped

    Examples:
        >>> df = pd.DataFrame([["Alice Smith", "30", "Ms. Lee", "02/09/2024", "Piano"]])
        >>> parse_roster_frame(df)[0].row
        2
    """
    frame = df.iloc[:, :len(ROSTER_COLUMNS)].copy()
    for missing in range(frame.shape[1], len(ROSTER_COLUMNS)):
        frame[f"_missing_{missing}"] = ""
    frame.columns = ROSTER_COLUMNS
    frame = frame.fillna("").astype(str).apply(lambda column: column.str.strip())

    lessons = []
    for position, values in enumerate(frame.itertuples(index=False)):
        row = position + FIRST_DATA_ROW
        if not any(values):
            continue

        lesson = ExternalLesson(
            student_name=values.student_name,
            duration=parse_duration(values.duration, row) if values.duration else 0,
            teacher_name=values.teacher_name,
            subject_name=values.subject_name,
            start_date=values.start_date,
            row=row,
        )
        if not lesson.student_name:
            logger.warning(f"Missing student name in roster row {row}")
        if not lesson.subject_name:
            logger.warning(f"Missing subject in roster row {row}")
        lessons.append(lesson)

    return lessons


class CsvRosterSource(ExternalRosterSource):
    """
    Reads ``<roster_dir>/<school_id>.csv``.

    Examples:
        >>> source = CsvRosterSource(Path("data/rosters"))
        >>> lessons = await source.fetch_roster("school-1")
    """

    def __init__(self, roster_dir: Path):
        self.roster_dir = Path(roster_dir)

    def path_for(self, school_id: str) -> Path:
        return self.roster_dir / f"{school_id}.csv"

    async def fetch_roster(self, school_id: str) -> List[ExternalLesson]:
        return await asyncio.to_thread(self.read_roster, school_id)

    def read_roster(self, school_id: str) -> List[ExternalLesson]:
        """Blocking read of one school's roster file."""
        path = self.path_for(school_id)
        if not path.exists():
            raise SourceFetchError(f"Roster not found for school {school_id}: {path}")

        try:
            df = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")
        except (OSError, ValueError) as e:
            raise SourceFetchError(f"Could not read roster {path}: {e}") from e

        lessons = parse_roster_frame(df)
        logger.info(f"Loaded {len(lessons)} roster lessons from {path}")
        return lessons
