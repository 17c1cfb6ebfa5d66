"""
File helpers for the lesson store document and reconciliation reports.

JSON writes go through a temporary file in the target directory so an
interrupted alignment never leaves a half-written lesson store behind.
"""

import json
import logging
import os
import re
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd


logger = logging.getLogger(__name__)


def save_json(data: Dict[str, Any], filepath: Path) -> bool:
    """
    Write a JSON document, replacing any previous file atomically.

    Args:
        data: Document to write
        filepath: Destination file

    Returns:
        True if the document was written, False otherwise

    Examples:
        >>> save_json(result.to_dict("school-1"), Path("output/report.json"))
        True
    """
    filepath = Path(filepath)
    tmp_name = None
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with tempfile.NamedTemporaryFile(
            'w', encoding='utf-8', dir=filepath.parent,
            prefix=f".{filepath.name}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name
            json.dump(data, tmp, ensure_ascii=False, indent=2)

        os.replace(tmp_name, filepath)
        logger.debug(f"Wrote {filepath}")
        return True

    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Failed to write JSON file {filepath}: {e}", exc_info=True)
        if tmp_name and os.path.exists(tmp_name):
            os.remove(tmp_name)
        return False


def load_json(filepath: Path) -> Optional[Dict[str, Any]]:
    """
    Read a JSON document whose top level is an object.

    Returns:
        The document, or None when the file is missing, malformed or not
        an object
    """
    filepath = Path(filepath)
    if not filepath.exists():
        logger.warning(f"JSON file not found: {filepath}")
        return None

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {filepath}: {e}")
        return None
    except OSError as e:
        logger.error(f"Failed to read JSON file {filepath}: {e}", exc_info=True)
        return None

    if not isinstance(data, dict):
        logger.error(f"Expected a JSON object in {filepath}, got {type(data).__name__}")
        return None

    return data


def save_csv(
    rows: List[Dict[str, Any]],
    filepath: Path,
    columns: Optional[List[str]] = None
) -> bool:
    """
    Export flat records as CSV.

    Args:
        rows: Records to export
        filepath: Destination file
        columns: Column order; also gives the header when ``rows`` is empty

    Returns:
        True if the file was written, False otherwise
    """
    filepath = Path(filepath)
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        pd.DataFrame(rows, columns=columns).to_csv(filepath, index=False, encoding='utf-8')
        logger.debug(f"Wrote {len(rows)} rows to {filepath}")
        return True

    except OSError as e:
        logger.error(f"Failed to write CSV file {filepath}: {e}", exc_info=True)
        return False


def report_filename(
    kind: str,
    school_id: str,
    extension: str,
    now: Optional[datetime] = None
) -> str:
    """
    Build a timestamped report file name for one school.

    Characters that are unsafe in file names are replaced in the school id.

    Examples:
        >>> report_filename("mismatches", "school/1", "csv", datetime(2024, 9, 2, 8, 30))
        'mismatches_school_1_20240902_083000.csv'
    """
    safe_school = re.sub(r'[^A-Za-z0-9._-]+', '_', school_id).strip('_') or "school"
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"{kind}_{safe_school}_{timestamp}.{extension}"
