"""
Match predicates between one internal and one external lesson.

Student-name equality is necessary for both predicates and never
sufficient on its own.
"""

from ..models.lesson import ExternalLesson, InternalLesson
from .normalizer import normalize_label, normalize_name


def same_student(internal: InternalLesson, external: ExternalLesson) -> bool:
    """Normalized student names are equal and non-empty."""
    name = normalize_name(internal.student_name)
    return bool(name) and name == normalize_name(external.student_name)


def same_duration(internal: InternalLesson, external: ExternalLesson) -> bool:
    return int(internal.duration) == int(external.duration)


def same_subject(internal: InternalLesson, external: ExternalLesson) -> bool:
    """Case-insensitive subject equality; an empty subject never matches."""
    internal_subject = normalize_label(internal.subject_name)
    external_subject = normalize_label(external.subject_name)
    return bool(internal_subject) and internal_subject == external_subject


def is_exact_match(internal: InternalLesson, external: ExternalLesson) -> bool:
    """Same student, same duration and same subject."""
    return (
        same_student(internal, external)
        and same_duration(internal, external)
        and same_subject(internal, external)
    )


def is_partial_match(internal: InternalLesson, external: ExternalLesson) -> bool:
    """Same student, and same duration or same subject."""
    return same_student(internal, external) and (
        same_duration(internal, external) or same_subject(internal, external)
    )
