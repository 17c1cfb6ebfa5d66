"""
Unit tests for Result<T> pattern.
"""

import pytest

from lesson_reconciliation.models.result import Result, ResultStatus
from lesson_reconciliation.reconciliation.errors import UnresolvedTeacherError


class TestResult:
    """Test cases for Result class."""

    def test_success_creation(self):
        """Test creating a successful result."""
        result = Result.success(42, "Comparison completed")

        assert result.is_success
        assert not result.is_failure
        assert result.status == ResultStatus.SUCCESS
        assert result.value == 42
        assert result.message == "Comparison completed"
        assert result.error is None

    def test_failure_creation(self):
        """Test creating a failure result."""
        error = ValueError("Invalid input")
        result = Result.failure("Operation failed", error)

        assert result.is_failure
        assert result.status == ResultStatus.FAILURE
        assert result.value is None
        assert result.message == "Operation failed"
        assert result.error == error

    def test_from_error(self):
        """Test a failure built from a typed error keeps its text."""
        error = UnresolvedTeacherError("Ms. Lee")
        result = Result.from_error(error)

        assert result.is_failure
        assert result.error is error
        assert result.message == 'Teacher "Ms. Lee" from roster not found in school.'

    def test_success_with_none_value(self):
        """Test None is a valid success value."""
        result = Result.success(None, "No conflicts found")

        assert result.is_success
        assert result.value is None

    def test_unwrap_success(self):
        """Test unwrapping successful result."""
        assert Result.success("data").unwrap() == "data"

    def test_unwrap_failure_raises(self):
        """Test unwrapping failure raises exception."""
        result = Result.failure("Error occurred")

        with pytest.raises(ValueError, match="Cannot unwrap failure result"):
            result.unwrap()

    def test_unwrap_or(self):
        """Test unwrap_or for both outcomes."""
        assert Result.success(42).unwrap_or(0) == 42
        assert Result.failure("Error").unwrap_or(0) == 0

    def test_map_success(self):
        """Test mapping over successful result."""
        mapped = Result.success(5, "done").map(lambda x: x * 2)

        assert mapped.is_success
        assert mapped.value == 10
        assert mapped.message == "done"

    def test_map_failure(self):
        """Test mapping over failure returns the failure."""
        error = RuntimeError("boom")
        mapped = Result.failure("Error", error).map(lambda x: x * 2)

        assert mapped.is_failure
        assert mapped.message == "Error"
        assert mapped.error is error

    def test_map_with_exception(self):
        """Test mapping with function that raises exception."""
        mapped = Result.success(5).map(lambda x: 1 / 0)

        assert mapped.is_failure
        assert isinstance(mapped.error, ZeroDivisionError)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
