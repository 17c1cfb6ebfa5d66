"""
Deterministic choice among several predicate-satisfying candidates.
"""

import logging
from typing import List

from ..models.lesson import ExternalLesson, InternalLesson
from .normalizer import DATE_UNSET, normalize_date, normalize_label


logger = logging.getLogger(__name__)


def break_tie(anchor: InternalLesson, candidates: List[ExternalLesson]) -> ExternalLesson:
    """
    Pick one external candidate for ``anchor``.

    1. When the anchor has a teacher, narrow to candidates with the same
       teacher (case-insensitive). A single survivor wins; several
       survivors become the pool for the next step; none leaves the pool
       unchanged.
    2. Narrow the pool to candidates whose normalized start date equals
       the anchor's (both set). The first survivor wins.
    3. Otherwise the first candidate of the pool wins.

    The pool always keeps the enumeration order of ``candidates``, so the
    outcome depends on list order when candidates are indistinguishable.

    Args:
        anchor: Internal lesson being matched
        candidates: Non-empty list of external candidates

    Returns:
        The chosen candidate

    Raises:
        ValueError: If ``candidates`` is empty
    """
    if not candidates:
        raise ValueError("break_tie requires at least one candidate")

    if len(candidates) == 1:
        return candidates[0]

    pool = candidates

    teacher = normalize_label(anchor.teacher_name)
    if teacher:
        same_teacher = [c for c in pool if normalize_label(c.teacher_name) == teacher]
        if len(same_teacher) == 1:
            return same_teacher[0]
        if same_teacher:
            pool = same_teacher

    anchor_date = normalize_date(anchor.start_date)
    if anchor_date is not DATE_UNSET:
        same_date = [
            c for c in pool
            if normalize_date(c.start_date) == anchor_date
        ]
        if same_date:
            return same_date[0]

    logger.debug(
        f"Tie-break for lesson {anchor.id} fell back to enumeration order "
        f"({len(pool)} candidates)"
    )
    return pool[0]
