"""
Validation framework with Strategy pattern.

This module provides:
- ValidationResult for consistent validation reporting
- Abstract Validator interface with reusable field checks
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

from ..reconciliation.normalizer import has_identity, is_parsable_date


@dataclass
class ValidationResult:
    """
    Outcome of validating one lesson record.

    Errors exclude the record from comparison; warnings are only logged.
    Every message is suffixed with the record label so log lines can be
    traced back to a roster row or stored lesson.

    Attributes:
        record: Where the record came from (e.g. "roster row 4")
        errors: Problems that make the record unusable
        warnings: Problems that are reported but do not exclude it

    Examples:
        >>> result = ValidationResult("roster row 4")
        >>> result.check("Missing subject")
        >>> result.warnings
        ['Missing subject (roster row 4)']
    """

    record: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """A record is valid until an error is added."""
        return not self.errors

    def _label(self, message: str) -> str:
        return f"{message} ({self.record})" if self.record else message

    def add_error(self, message: str) -> 'ValidationResult':
        self.errors.append(self._label(message))
        return self

    def add_warning(self, message: str) -> 'ValidationResult':
        self.warnings.append(self._label(message))
        return self

    def check(self, message: Optional[str], fatal: bool = False):
        """File a helper's message, if there is one, as an error or warning."""
        if not message:
            return
        if fatal:
            self.add_error(message)
        else:
            self.add_warning(message)

    def get_summary(self) -> str:
        """
        Get validation summary.

        Returns:
            Human-readable summary of validation results
        """
        if self.is_valid and not self.warnings:
            return "Validation passed"

        parts = []
        if self.errors:
            parts.append(f"Errors ({len(self.errors)}):")
            parts.extend(f"  - {error}" for error in self.errors)
        if self.warnings:
            parts.append(f"Warnings ({len(self.warnings)}):")
            parts.extend(f"  - {warning}" for warning in self.warnings)
        return "\n".join(parts)


class Validator(ABC):
    """
    Abstract base class for record validators.

    Subclasses implement validate(); the helpers return an error message
    or None so each subclass decides whether a problem is an error or a
    warning.
    """

    @abstractmethod
    def validate(self, data: Any) -> ValidationResult:
        """
        Validate a record.

        Args:
            data: Record to validate

        Returns:
            ValidationResult with errors and warnings
        """
        pass

    def validate_identity(
        self,
        name: Optional[str],
        field_name: str = "student_name"
    ) -> Optional[str]:
        """
        Validate that a name survives normalization.

        Returns:
            Error message if unusable, None if usable
        """
        if not has_identity(name):
            return f"Missing usable {field_name}: {name!r}"
        return None

    def validate_date_format(
        self,
        date_str: Optional[str],
        field_name: str = "start_date"
    ) -> Optional[str]:
        """
        Validate that a date is empty or in a recognized format
        (YYYY-MM-DD, DD/MM/YYYY or MM/DD/YYYY).

        Returns:
            Error message if unrecognized, None otherwise
        """
        if not is_parsable_date(date_str):
            return (
                f"Unrecognized {field_name} format: {date_str} "
                f"(expected YYYY-MM-DD, DD/MM/YYYY or MM/DD/YYYY)"
            )
        return None

    def validate_positive_number(
        self,
        value: Any,
        field_name: str
    ) -> Optional[str]:
        """
        Validate that value is a positive number.

        Returns:
            Error message if invalid, None if valid
        """
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return f"{field_name} must be a number, got {type(value).__name__}"

        if value <= 0:
            return f"{field_name} must be positive, got {value}"

        return None

    def validate_not_blank(
        self,
        value: Optional[str],
        field_name: str
    ) -> Optional[str]:
        """
        Validate that a text field has content.

        Returns:
            Error message if blank, None otherwise
        """
        if value is None or not str(value).strip():
            return f"Missing {field_name}"
        return None
