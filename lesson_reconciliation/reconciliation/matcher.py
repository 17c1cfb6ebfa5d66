"""
Greedy round matcher.

Pairs internal lessons with roster lessons in two rounds (exact, then
partial) and classifies whatever is left as missing on the other side.

The matcher is greedy and order-dependent: internal lessons are visited
in their original order, and an earlier internal lesson wins a contested
roster lesson even when a later one would have been a closer fit.
"""

import logging
from typing import Callable, List, Tuple

from ..models.comparison import ComparisonResult, MatchedPair, MismatchedPair
from ..models.lesson import ExternalLesson, InternalLesson
from ..utils.logger import mask_student_name
from ..validation.lesson_validator import (
    ExternalLessonValidator,
    InternalLessonValidator,
)
from .differences import find_differences
from .predicates import is_exact_match, is_partial_match
from .tie_breaker import break_tie


logger = logging.getLogger(__name__)


MatchPredicate = Callable[[InternalLesson, ExternalLesson], bool]


def filter_valid_internal(lessons: List[InternalLesson]) -> List[InternalLesson]:
    """Drop internal lessons without a usable student identity."""
    validator = InternalLessonValidator()
    valid = []
    for lesson in lessons:
        result = validator.validate(lesson)
        if not result.is_valid:
            logger.info(f"Excluding invalid internal lesson: {'; '.join(result.errors)}")
            continue
        for warning in result.warnings:
            logger.debug(warning)
        valid.append(lesson)
    return valid


def filter_valid_external(lessons: List[ExternalLesson]) -> List[ExternalLesson]:
    """Drop roster lessons without a usable student identity."""
    validator = ExternalLessonValidator()
    valid = []
    for lesson in lessons:
        result = validator.validate(lesson)
        if not result.is_valid:
            logger.info(f"Excluding invalid roster lesson: {'; '.join(result.errors)}")
            continue
        for warning in result.warnings:
            logger.debug(warning)
        valid.append(lesson)
    return valid


def _run_round(
    internal: List[InternalLesson],
    external: List[ExternalLesson],
    predicate: MatchPredicate,
) -> Tuple[List[Tuple[InternalLesson, ExternalLesson]], List[InternalLesson], List[ExternalLesson]]:
    """
    Pair lessons with one predicate.

    Returns:
        (pairs in internal order, unpaired internal, unpaired external);
        both unpaired lists keep their input order
    """
    pairs = []
    unpaired_internal = []
    remaining = list(external)

    for lesson in internal:
        candidates = [candidate for candidate in remaining if predicate(lesson, candidate)]
        if not candidates:
            unpaired_internal.append(lesson)
            continue

        if len(candidates) > 1:
            logger.debug(
                f"{len(candidates)} roster candidates for "
                f"{mask_student_name(lesson.student_name)} (lesson {lesson.id})"
            )

        chosen = break_tie(lesson, candidates)
        # Remove by identity: roster rows may be equal field-for-field
        remaining = [candidate for candidate in remaining if candidate is not chosen]
        pairs.append((lesson, chosen))

    return pairs, unpaired_internal, remaining


def match_lessons(
    internal: List[InternalLesson],
    external: List[ExternalLesson],
) -> ComparisonResult:
    """
    Classify every valid lesson of both sources into one bucket.

    Round 1 pairs exact matches (matched or mismatched by their
    differences). Round 2 pairs partial matches among the leftovers and
    always files them as mismatched. Remaining roster lessons become
    missing_in_internal and remaining internal lessons missing_in_external.

    Invalid records (no usable student identity) are excluded up front.

    Args:
        internal: Internal lessons in store order
        external: Roster lessons in roster order

    Returns:
        ComparisonResult partitioning all valid records
    """
    valid_internal = filter_valid_internal(internal)
    valid_external = filter_valid_external(external)

    logger.info(
        f"Valid lessons: {len(valid_internal)}/{len(internal)} internal, "
        f"{len(valid_external)}/{len(external)} roster"
    )

    result = ComparisonResult()

    exact_pairs, internal_left, external_left = _run_round(
        valid_internal, valid_external, is_exact_match
    )
    for internal_lesson, external_lesson in exact_pairs:
        differences = find_differences(internal_lesson, external_lesson)
        if differences:
            result.mismatched.append(
                MismatchedPair(internal_lesson, external_lesson, differences)
            )
        else:
            result.matched.append(MatchedPair(internal_lesson, external_lesson))

    partial_pairs, internal_left, external_left = _run_round(
        internal_left, external_left, is_partial_match
    )
    for internal_lesson, external_lesson in partial_pairs:
        differences = find_differences(internal_lesson, external_lesson)
        if not differences:
            # Both subjects empty: equal as text, but never an exact match
            logger.warning(
                f"Partial match for lesson {internal_lesson.id} reported no differences"
            )
        result.mismatched.append(
            MismatchedPair(internal_lesson, external_lesson, differences)
        )

    result.missing_in_internal.extend(external_left)
    result.missing_in_external.extend(internal_left)

    logger.info(f"Comparison summary: {result.summary()}")
    return result
