"""
Result<T> pattern for reconciliation operations.

Conflict checks, alignments and whole comparisons report their outcome
as a Result so that callers (the CLI, an operator UI) never have to
catch exceptions at the reconciliation boundary.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar


T = TypeVar('T')
U = TypeVar('U')


class ResultStatus(Enum):
    """Status of a Result."""
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class Result(Generic[T]):
    """
    Outcome of an operation that may succeed or fail.

    A failure always carries a human-readable message; when the failure
    was caused by a typed reconciliation error, that exception is kept in
    ``error`` so callers can branch on its class.

    Attributes:
        status: SUCCESS or FAILURE
        value: The produced value (None on failure)
        error: The exception behind a failure, if any
        message: Description of the outcome

    Examples:
        >>> result = Result.success(updated_lesson, "Lesson aligned")
        >>> if result.is_success:
        ...     print(result.value.teacher_name)

        >>> result = Result.failure('Teacher "Ms. Lee" not found')
        >>> result.is_failure
        True
    """

    status: ResultStatus
    value: Optional[T] = None
    error: Optional[Exception] = None
    message: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Check if the result represents success."""
        return self.status == ResultStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        """Check if the result represents failure."""
        return self.status == ResultStatus.FAILURE

    @classmethod
    def success(cls, value: T, message: Optional[str] = None) -> 'Result[T]':
        """
        Create a successful result.

        Args:
            value: The result value
            message: Optional success message

        Returns:
            Result instance with SUCCESS status
        """
        return cls(status=ResultStatus.SUCCESS, value=value, message=message)

    @classmethod
    def failure(
        cls,
        message: str,
        error: Optional[Exception] = None
    ) -> 'Result[T]':
        """
        Create a failure result.

        Args:
            message: Description of what went wrong
            error: Optional exception that caused the failure

        Returns:
            Result instance with FAILURE status
        """
        return cls(status=ResultStatus.FAILURE, message=message, error=error)

    @classmethod
    def from_error(cls, error: Exception) -> 'Result[T]':
        """Create a failure whose message is the exception text."""
        return cls.failure(str(error), error)

    def unwrap(self) -> T:
        """
        Return the value of a successful result.

        Raises:
            ValueError: If the result is a failure
        """
        if self.is_failure:
            raise ValueError(f"Cannot unwrap failure result: {self.message}")
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Return the value, or ``default`` for a failure."""
        return self.value if self.is_success else default

    def map(self, func: Callable[[T], U]) -> 'Result[U]':
        """
        Apply ``func`` to the success value.

        Failures pass through untouched. An exception raised by ``func``
        turns into a failure.
        """
        if self.is_failure:
            return Result.failure(self.message, self.error)

        try:
            return Result.success(func(self.value), self.message)
        except Exception as e:
            return Result.failure(str(e), e)
