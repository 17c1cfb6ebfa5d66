"""
Logging utilities with privacy features.

This module provides logging setup with:
- Configurable log levels and output destinations
- Log rotation for file handlers
- Masking of student names and roster-service credentials
- Structured log format
"""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


def mask_student_name(name: Optional[str]) -> str:
    """
    Mask a student name for safe logging.

    Keeps the first letter of every word.

    Args:
        name: Student name to mask

    Returns:
        Masked name (e.g., "A*** S***")

    Examples:
        >>> mask_student_name("Alice Smith")
        'A*** S***'
        >>> mask_student_name("")
        '***'
    """
    words = (name or "").split()
    if not words:
        return "***"
    return " ".join(word[0] + "***" for word in words)


class SensitiveDataFilter(logging.Filter):
    """
    Logging filter that masks credentials before output.

    Roster services are reached with API keys, tokens and service-account
    keys; any ``key=``/``token=``/``password=`` fragment that ends up in a
    log message is masked.
    """

    _PATTERN = re.compile(
        r'((?:api[_-]?key|private[_-]?key|token|secret|password|pwd)["\']?\s*[:=]\s*)["\']?[^"\'\s,]+',
        flags=re.IGNORECASE
    )

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Mask credentials in the log record.

        Returns:
            Always True (allows all records through after masking)
        """
        record.msg = self._PATTERN.sub(r'\1********', str(record.msg))
        return True


def setup_logger(
    name: str = "lesson_reconciliation",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and configure a logger instance.

    Args:
        name: Logger name (default: "lesson_reconciliation")
        level: Logging level (default: logging.INFO)
        log_file: Optional path to log file for file output

    Returns:
        Configured logger instance

    Examples:
        >>> logger = setup_logger()
        >>> logger.info("Comparison started")

        >>> logger = setup_logger(
        ...     level=logging.DEBUG,
        ...     log_file="output/logs/reconciliation.log"
        ... )
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers
    if logger.handlers:
        logger.setLevel(level)
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    sensitive_filter = SensitiveDataFilter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(sensitive_filter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(sensitive_filter)
        logger.addHandler(file_handler)

    return logger
