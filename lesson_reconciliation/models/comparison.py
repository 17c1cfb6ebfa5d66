"""
Comparison result models.

A ComparisonResult partitions every valid record of both sources into
four disjoint buckets.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from .lesson import ExternalLesson, InternalLesson


# Bump when the report layout produced by to_dict() changes
REPORT_SCHEMA_VERSION = "1.0"

MISMATCH_COLUMNS = ["lesson_id", "roster_row", "student_name", "differences"]


@dataclass(frozen=True)
class MatchedPair:
    """Internal/external pair with no field differences."""

    internal: InternalLesson
    external: ExternalLesson


@dataclass(frozen=True)
class MismatchedPair:
    """Internal/external pair with one or more field differences."""

    internal: InternalLesson
    external: ExternalLesson
    differences: List[str] = field(default_factory=list)


@dataclass
class ComparisonResult:
    """
    Outcome of comparing one school's internal lessons against its roster.

    Attributes:
        matched: Pairs with zero differences
        mismatched: Pairs with differences (or paired by partial match)
        missing_in_internal: Roster lessons with no internal counterpart
        missing_in_external: Internal lessons with no roster counterpart

    Examples:
        >>> result = ComparisonResult()
        >>> result.summary()
        {'matched': 0, 'mismatched': 0, 'missing_in_internal': 0, 'missing_in_external': 0}
    """

    matched: List[MatchedPair] = field(default_factory=list)
    mismatched: List[MismatchedPair] = field(default_factory=list)
    missing_in_internal: List[ExternalLesson] = field(default_factory=list)
    missing_in_external: List[InternalLesson] = field(default_factory=list)

    def summary(self) -> Dict[str, int]:
        """Count of entries per bucket."""
        return {
            "matched": len(self.matched),
            "mismatched": len(self.mismatched),
            "missing_in_internal": len(self.missing_in_internal),
            "missing_in_external": len(self.missing_in_external),
        }

    @property
    def has_discrepancies(self) -> bool:
        return bool(self.mismatched or self.missing_in_internal or self.missing_in_external)

    def to_dict(self, school_id: str = "") -> Dict[str, Any]:
        """
        Serialize for a JSON report.

        Args:
            school_id: School the comparison ran for

        Returns:
            Dictionary with schema version, summary and all four buckets
        """
        return {
            "schema_version": REPORT_SCHEMA_VERSION,
            "school_id": school_id,
            "generated_at": datetime.now().isoformat(),
            "summary": self.summary(),
            "matched": [
                {"internal": pair.internal.to_dict(), "external": pair.external.to_dict()}
                for pair in self.matched
            ],
            "mismatched": [
                {
                    "internal": pair.internal.to_dict(),
                    "external": pair.external.to_dict(),
                    "differences": list(pair.differences),
                }
                for pair in self.mismatched
            ],
            "missing_in_internal": [lesson.to_dict() for lesson in self.missing_in_internal],
            "missing_in_external": [lesson.to_dict() for lesson in self.missing_in_external],
        }

    def mismatch_rows(self) -> List[Dict[str, Any]]:
        """Flatten mismatched pairs into one row per pair (for CSV export)."""
        return [
            {
                "lesson_id": pair.internal.id,
                "roster_row": pair.external.row,
                "student_name": pair.internal.student_name,
                "differences": "; ".join(pair.differences),
            }
            for pair in self.mismatched
        ]
