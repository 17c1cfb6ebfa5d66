"""
Field normalization for identity comparison.

Normalized values are only ever compared, never displayed. All helpers
are pure functions.
"""

import logging
import re
import unicodedata
from datetime import datetime
from typing import Optional


logger = logging.getLogger(__name__)


# Normalized value of an empty/absent date; distinct from every dated value
DATE_UNSET = None

_ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')
_SLASHED_DATE = re.compile(r'^\d{1,2}/\d{1,2}/\d{4}$')
_NON_WORD = re.compile(r'[^\w\s]')
_WHITESPACE = re.compile(r'\s+')

# Tried in order: day-first wins over month-first when both are valid
_SLASHED_FORMATS = ("%d/%m/%Y", "%m/%d/%Y")


def normalize_name(name: Optional[str]) -> str:
    """
    Canonicalize a student name for identity comparison.

    Lowercases, strips diacritics and punctuation, collapses whitespace.

    Examples:
        >>> normalize_name("  José  O'Neil ")
        'jose oneil'
        >>> normalize_name(None)
        ''
    """
    if not name:
        return ""

    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned = _NON_WORD.sub("", stripped.lower())
    # \w keeps underscores; they carry no identity either
    cleaned = cleaned.replace("_", " ")
    return _WHITESPACE.sub(" ", cleaned).strip()


def has_identity(name: Optional[str]) -> bool:
    """Whether a student name survives normalization."""
    return bool(normalize_name(name))


def normalize_date(value: Optional[str]) -> Optional[str]:
    """
    Convert a textual date to ISO ``YYYY-MM-DD``.

    Accepts ISO, day-first ``DD/MM/YYYY`` and month-first ``MM/DD/YYYY``.
    A value that matches none of them is returned unchanged (trimmed) and
    a warning is logged; it is not an error.

    Args:
        value: Raw date text

    Returns:
        ISO date, the original text when unparsable, or DATE_UNSET

    Examples:
        >>> normalize_date("02/09/2024")
        '2024-09-02'
        >>> normalize_date("12/25/2024")
        '2024-12-25'
        >>> normalize_date("") is DATE_UNSET
        True
    """
    if value is None:
        return DATE_UNSET

    trimmed = str(value).strip()
    if not trimmed:
        return DATE_UNSET

    parsed = _parse_date(trimmed)
    if parsed is None:
        logger.warning(f"Could not parse date: {trimmed!r}")
        return trimmed

    return parsed.strftime("%Y-%m-%d")


def is_parsable_date(value: Optional[str]) -> bool:
    """Whether ``value`` is empty or in one of the recognized formats."""
    if value is None or not str(value).strip():
        return True
    return _parse_date(str(value).strip()) is not None


def _parse_date(text: str) -> Optional[datetime]:
    if _ISO_DATE.match(text):
        formats = ("%Y-%m-%d",)
    elif _SLASHED_DATE.match(text):
        formats = _SLASHED_FORMATS
    else:
        return None

    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def normalize_label(value: Optional[str]) -> str:
    """Case-insensitive form of a subject or teacher label."""
    return (value or "").strip().lower()
