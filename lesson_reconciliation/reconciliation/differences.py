"""
Field-by-field differences between a paired internal and external lesson.
"""

from typing import List

from ..models.lesson import ExternalLesson, InternalLesson
from .normalizer import normalize_date, normalize_label


UNASSIGNED_TEACHER = "Unassigned"
DATE_NOT_SET = "Not set"


def _describe(field_label: str, internal_value, external_value) -> str:
    return (
        f'{field_label} mismatch: "{internal_value}" in internal '
        f'vs "{external_value}" in external'
    )


def find_differences(internal: InternalLesson, external: ExternalLesson) -> List[str]:
    """
    Describe every differing field, in a fixed order.

    Order: student name, duration, subject, teacher, start date. An
    internal lesson without a teacher compares as "Unassigned"; start
    dates are compared after normalization.

    Returns:
        One message per differing field; empty when the pair agrees

    Examples:
        >>> find_differences(internal, external)
        ['Duration mismatch: "30" in internal vs "45" in external']
    """
    differences = []

    if normalize_label(internal.student_name) != normalize_label(external.student_name):
        differences.append(
            _describe("Student name", internal.student_name, external.student_name)
        )

    if int(internal.duration) != int(external.duration):
        differences.append(_describe("Duration", internal.duration, external.duration))

    if normalize_label(internal.subject_name) != normalize_label(external.subject_name):
        differences.append(
            _describe("Subject", internal.subject_name, external.subject_name)
        )

    internal_teacher = internal.teacher_name or UNASSIGNED_TEACHER
    if normalize_label(internal_teacher) != normalize_label(external.teacher_name):
        differences.append(
            _describe("Teacher", internal_teacher, external.teacher_name)
        )

    if normalize_date(internal.start_date) != normalize_date(external.start_date):
        differences.append(
            _describe(
                "Start date",
                internal.start_date or DATE_NOT_SET,
                external.start_date or DATE_NOT_SET,
            )
        )

    return differences
