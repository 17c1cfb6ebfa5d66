"""
Lesson record validators.

A record is excluded from comparison only when it has no usable
student-name identity. Everything else is reported as a warning.
"""

from ..models.lesson import ExternalLesson, InternalLesson
from .validators import ValidationResult, Validator


class ExternalLessonValidator(Validator):
    """
    Validator for roster lessons.

    Examples:
        >>> validator = ExternalLessonValidator()
        >>> result = validator.validate(ExternalLesson("", 30, "Ms. Lee", "Piano"))
        >>> result.is_valid
        False
    """

    def validate(self, data: ExternalLesson) -> ValidationResult:
        record = f"roster row {data.row}" if data.row is not None else "roster lesson"
        result = ValidationResult(record)

        result.check(self.validate_identity(data.student_name), fatal=True)
        if not result.is_valid:
            return result

        result.check(self.validate_not_blank(data.subject_name, "subject"))
        result.check(self.validate_not_blank(data.teacher_name, "teacher"))
        result.check(self.validate_positive_number(data.duration, "duration"))
        result.check(self.validate_date_format(data.start_date))
        return result


class InternalLessonValidator(Validator):
    """Validator for stored lessons. A missing teacher is normal (unassigned)."""

    def validate(self, data: InternalLesson) -> ValidationResult:
        result = ValidationResult(f"lesson {data.id}")

        result.check(self.validate_identity(data.student_name), fatal=True)
        if not result.is_valid:
            return result

        result.check(self.validate_not_blank(data.subject_name, "subject"))
        result.check(self.validate_positive_number(data.duration, "duration"))
        result.check(self.validate_date_format(data.start_date))
        return result
