"""
Lesson comparison service.

Entry point of the reconciliation engine: fetches both sources
concurrently, runs the round matcher, and exposes the per-pair conflict
check and alignment operations.
"""

import asyncio
import logging
from typing import Optional

from ..models.comparison import ComparisonResult
from ..models.lesson import ExternalLesson, InternalLesson
from ..models.result import Result
from .alignment import AlignmentExecutor
from .conflict_checker import ConflictChecker
from .errors import SourceFetchError
from .interfaces import (
    ExternalRosterSource,
    IdentityResolver,
    InternalLessonSource,
    LessonStore,
)
from .matcher import match_lessons


logger = logging.getLogger(__name__)


class LessonComparisonService:
    """
    Compares a school's internal lessons with its external roster.

    The service keeps no state between calls; every comparison works on
    freshly fetched records, so an abandoned call needs no cleanup.

    Attributes:
        lesson_source: Source of internal lessons
        roster_source: Source of roster lessons
        resolver: Teacher/subject name resolution
        store: Schedule queries and write-back

    Examples:
        >>> store = JsonLessonStore(Path("data/lessons.json"))
        >>> service = LessonComparisonService(
        ...     lesson_source=store,
        ...     roster_source=CsvRosterSource(Path("data/rosters")),
        ...     resolver=store,
        ...     store=store
        ... )
        >>> result = await service.compare("school-1")
        >>> result.unwrap().summary()
    """

    def __init__(
        self,
        lesson_source: InternalLessonSource,
        roster_source: ExternalRosterSource,
        resolver: Optional[IdentityResolver] = None,
        store: Optional[LessonStore] = None,
    ):
        self.lesson_source = lesson_source
        self.roster_source = roster_source
        self.resolver = resolver
        self.store = store

    async def compare(self, school_id: str) -> Result[ComparisonResult]:
        """
        Run a full comparison for one school.

        Both sources are fetched concurrently; matching starts once both
        have completed. If either fetch fails the comparison is aborted
        and no partial result is returned.

        Args:
            school_id: School identifier

        Returns:
            Result with the ComparisonResult, or a failure carrying
            SourceFetchError
        """
        logger.info(f"Comparing lessons for school {school_id}")

        internal_result, roster_result = await asyncio.gather(
            self._fetch_internal(school_id),
            self._fetch_roster(school_id),
        )

        for fetched in (internal_result, roster_result):
            if fetched.is_failure:
                logger.error(f"Comparison aborted: {fetched.message}")
                return Result.failure(fetched.message, fetched.error)

        internal = internal_result.value
        external = roster_result.value

        logger.info(
            f"Retrieved {len(internal)} internal lessons and {len(external)} roster lessons"
        )
        if not internal:
            logger.warning(f"No internal lessons found for school {school_id}")
        if not external:
            logger.warning(f"No roster lessons found for school {school_id}")

        comparison = match_lessons(internal, external)
        return Result.success(comparison, "Comparison completed")

    async def check_conflict(
        self,
        internal: InternalLesson,
        external: ExternalLesson,
        school_id: str
    ) -> Result[None]:
        """Check whether aligning the pair would collide with the schedule."""
        return await ConflictChecker(self._require_resolver(), self._require_store()).check(
            internal, external, school_id
        )

    async def align(
        self,
        internal: InternalLesson,
        external: ExternalLesson,
        school_id: str
    ) -> Result[InternalLesson]:
        """Overwrite the internal lesson with the roster values."""
        return await AlignmentExecutor(self._require_resolver(), self._require_store()).align(
            internal, external, school_id
        )

    async def _fetch_internal(self, school_id: str) -> Result[list]:
        try:
            lessons = await self.lesson_source.fetch_lessons(school_id)
        except Exception as e:
            error = SourceFetchError(f"Failed to fetch internal lessons: {e}")
            return Result.from_error(error)
        return Result.success(list(lessons))

    async def _fetch_roster(self, school_id: str) -> Result[list]:
        try:
            lessons = await self.roster_source.fetch_roster(school_id)
        except Exception as e:
            error = SourceFetchError(f"Failed to fetch roster lessons: {e}")
            return Result.from_error(error)
        return Result.success(list(lessons))

    def _require_resolver(self) -> IdentityResolver:
        if self.resolver is None:
            raise ValueError("LessonComparisonService was created without an IdentityResolver")
        return self.resolver

    def _require_store(self) -> LessonStore:
        if self.store is None:
            raise ValueError("LessonComparisonService was created without a LessonStore")
        return self.store
