"""
Configuration management with environment variables.

This module provides centralized configuration for the reconciliation
command-line tool with validation and type safety.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Config:
    """
    Application configuration manager.

    Loads configuration from environment variables (and a ``.env`` file
    when present) and provides validated access to the values.

    Attributes:
        school_id: Default school to reconcile
        lessons_path: JSON file backing the internal lesson store
        roster_dir: Directory holding one ``<school_id>.csv`` roster per school
        active_only: Only compare lessons that have not ended
        output_dir: Output directory for reports and logs
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Examples:
        >>> config = Config()
        >>> if config.validate():
        ...     print(f"Reconciling school: {config.school_id}")
    """

    def __init__(self):
        """Initialize configuration by loading environment variables."""
        load_dotenv()

        self._school_id = os.getenv("RECON_SCHOOL_ID")
        self._lessons_path = Path(os.getenv("RECON_LESSONS_PATH", "data/lessons.json"))
        self._roster_dir = Path(os.getenv("RECON_ROSTER_DIR", "data/rosters"))
        self._active_only = _env_flag("RECON_ACTIVE_ONLY", "true")

        self._output_dir = Path(os.getenv("OUTPUT_DIR", "output"))
        self._log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def school_id(self) -> Optional[str]:
        """Get the default school identifier (may be overridden on the CLI)."""
        return self._school_id

    @property
    def lessons_path(self) -> Path:
        """Get the internal lesson store file."""
        return self._lessons_path

    @property
    def roster_dir(self) -> Path:
        """Get the roster directory."""
        return self._roster_dir

    @property
    def active_only(self) -> bool:
        """Get whether ended lessons are left out of comparisons."""
        return self._active_only

    @property
    def output_dir(self) -> Path:
        """Get output directory path."""
        return self._output_dir

    @property
    def report_dir(self) -> Path:
        """Get the directory reconciliation reports are written to."""
        return self._output_dir / "reconciliation"

    @property
    def log_level(self) -> str:
        """Get logging level."""
        return self._log_level

    def validate(self) -> bool:
        """
        Validate configuration values.

        Returns:
            True if all configuration is valid

        Raises:
            ValueError: If validation fails (lists every problem)
        """
        errors = []

        if not self._lessons_path.exists():
            errors.append(f"RECON_LESSONS_PATH does not exist: {self._lessons_path}")
        elif self._lessons_path.suffix.lower() != ".json":
            errors.append("RECON_LESSONS_PATH must point to a .json file")

        if not self._roster_dir.is_dir():
            errors.append(f"RECON_ROSTER_DIR is not a directory: {self._roster_dir}")

        if self._log_level not in VALID_LOG_LEVELS:
            errors.append(
                f"LOG_LEVEL must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )

        if errors:
            error_msg = "Configuration validation failed:\n  - " + "\n  - ".join(errors)
            raise ValueError(error_msg)

        return True

    def override(
        self,
        school_id: Optional[str] = None,
        lessons_path: Optional[str] = None,
        roster_dir: Optional[str] = None,
    ) -> 'Config':
        """Apply command-line overrides in place and return self."""
        if school_id:
            self._school_id = school_id
        if lessons_path:
            self._lessons_path = Path(lessons_path)
        if roster_dir:
            self._roster_dir = Path(roster_dir)
        return self

    def create_output_directories(self):
        """Create output directories if they don't exist."""
        for directory in (self.report_dir, self.output_dir / "logs"):
            directory.mkdir(parents=True, exist_ok=True)


# Singleton instance
config = Config()
