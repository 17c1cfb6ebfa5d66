#!/usr/bin/env python3
"""
Lesson Reconciliation Script.

Compares a school's stored lessons with its roster spreadsheet, saves a
report, and optionally aligns mismatched lessons with the roster.

Usage:
    python run_reconciliation.py --school SCHOOL_ID [--align] [--yes] [--dry-run]

Examples:
    # Compare and save a report
    python run_reconciliation.py --school school-1

    # Walk mismatched lessons and align them after confirmation
    python run_reconciliation.py --school school-1 --align

    # Check every mismatched lesson for conflicts without writing
    python run_reconciliation.py --school school-1 --align --dry-run

    # Use settings from the environment
    export RECON_SCHOOL_ID="school-1"
    python run_reconciliation.py
"""

import argparse
import asyncio
import logging
import sys
from typing import List

from lesson_reconciliation.models.comparison import (
    MISMATCH_COLUMNS,
    ComparisonResult,
    MismatchedPair,
)
from lesson_reconciliation.reconciliation.service import LessonComparisonService
from lesson_reconciliation.sources.lesson_store import JsonLessonStore
from lesson_reconciliation.sources.roster import CsvRosterSource
from lesson_reconciliation.utils.config import config
from lesson_reconciliation.utils.file_utils import report_filename, save_csv, save_json
from lesson_reconciliation.utils.logger import setup_logger


def parse_arguments():
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Reconcile stored lessons with the roster spreadsheet",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        "--school",
        help="School identifier (overrides RECON_SCHOOL_ID env var)"
    )

    parser.add_argument(
        "--lessons",
        help="Lesson store JSON file (overrides RECON_LESSONS_PATH env var)"
    )

    parser.add_argument(
        "--roster-dir",
        help="Roster CSV directory (overrides RECON_ROSTER_DIR env var)"
    )

    parser.add_argument(
        "--align",
        action="store_true",
        help="Offer to align each mismatched lesson with the roster"
    )

    parser.add_argument(
        "--yes",
        action="store_true",
        help="Align without asking for confirmation"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Run conflict checks only, never write"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: LOG_LEVEL env var or INFO)"
    )

    return parser.parse_args()


def display_summary(comparison: ComparisonResult):
    """
    Display bucket counts and the mismatched lessons.

    Args:
        comparison: Result of the comparison
    """
    summary = comparison.summary()

    print("\n" + "=" * 60)
    print("RECONCILIATION SUMMARY")
    print("=" * 60)
    print(f"Matched:                  {summary['matched']}")
    print(f"Mismatched:               {summary['mismatched']}")
    print(f"Missing in internal:      {summary['missing_in_internal']}")
    print(f"Missing in roster:        {summary['missing_in_external']}")
    print("=" * 60)

    if comparison.mismatched:
        print("\nMismatched lessons:")
        print("-" * 60)
        for idx, pair in enumerate(comparison.mismatched, 1):
            print(f"{idx:2d}. {pair.internal.student_name} (row {pair.external.row})")
            for difference in pair.differences:
                print(f"      - {difference}")
        print("-" * 60)


def confirm_alignment(pair: MismatchedPair) -> bool:
    """
    Ask the operator to confirm one alignment.

    Returns:
        True if the operator confirms
    """
    response = input(
        f"Align {pair.internal.student_name} with roster row {pair.external.row}? (y/n): "
    ).strip().lower()
    return response in ['y', 'yes']


def save_report(school_id: str, comparison: ComparisonResult) -> None:
    """
    Save the JSON report and the CSV of mismatches.

    Args:
        school_id: School the comparison ran for
        comparison: Result of the comparison
    """
    config.create_output_directories()
    report_dir = config.report_dir

    json_path = report_dir / report_filename("reconciliation", school_id, "json")
    if save_json(comparison.to_dict(school_id), json_path):
        print(f"\nReport saved to: {json_path}")

    if comparison.mismatched:
        csv_path = report_dir / report_filename("mismatches", school_id, "csv")
        if save_csv(comparison.mismatch_rows(), csv_path, MISMATCH_COLUMNS):
            print(f"Mismatches saved to: {csv_path}")


async def align_mismatches(
    service: LessonComparisonService,
    school_id: str,
    mismatched: List[MismatchedPair],
    assume_yes: bool,
    dry_run: bool,
    logger: logging.Logger
) -> int:
    """
    Conflict-check and align mismatched pairs one by one.

    Returns:
        Number of pairs that could not be aligned
    """
    failures = 0

    for idx, pair in enumerate(mismatched, 1):
        print(f"\n  [{idx}/{len(mismatched)}] {pair.internal.student_name}")

        check = await service.check_conflict(pair.internal, pair.external, school_id)
        if check.is_failure:
            failures += 1
            print(f"      ✗ Blocked: {check.message}")
            continue

        if dry_run:
            print("      ✓ No conflicts (dry run, not aligned)")
            continue

        if not assume_yes and not confirm_alignment(pair):
            print("      - Skipped")
            continue

        aligned = await service.align(pair.internal, pair.external, school_id)
        if aligned.is_success:
            print("      ✓ Aligned")
        else:
            failures += 1
            print(f"      ✗ Failed: {aligned.message}")
            logger.error(f"Failed to align lesson {pair.internal.id}: {aligned.message}")

    return failures


async def run(args, logger: logging.Logger) -> int:
    """Run one reconciliation; returns the process exit code."""
    config.override(
        school_id=args.school,
        lessons_path=args.lessons,
        roster_dir=args.roster_dir
    )
    config.validate()

    school_id = config.school_id
    if not school_id:
        print("ERROR: School is required. Use --school or set RECON_SCHOOL_ID")
        return 1

    store = JsonLessonStore(config.lessons_path, active_only=config.active_only)
    service = LessonComparisonService(
        lesson_source=store,
        roster_source=CsvRosterSource(config.roster_dir),
        resolver=store,
        store=store
    )

    print(f"\n[1/3] Comparing lessons for {school_id}...")
    result = await service.compare(school_id)
    if result.is_failure:
        logger.error(f"Comparison failed: {result.message}")
        print(f"ERROR: {result.message}")
        return 1

    comparison = result.value
    display_summary(comparison)

    print("\n[2/3] Saving report...")
    save_report(school_id, comparison)

    failures = 0
    if args.align and comparison.mismatched:
        mode_label = "DRY RUN - Checking" if args.dry_run else "Aligning"
        print(f"\n[3/3] {mode_label} {len(comparison.mismatched)} mismatched lessons...")
        failures = await align_mismatches(
            service,
            school_id,
            comparison.mismatched,
            assume_yes=args.yes,
            dry_run=args.dry_run,
            logger=logger
        )
    else:
        print("\n[3/3] Skipping alignment")

    print("\n" + "=" * 60)
    print("EXECUTION COMPLETE")
    print("=" * 60)

    return 0 if not failures else 1


def main():
    """Main execution function."""
    args = parse_arguments()

    logger = setup_logger(
        "lesson_reconciliation",
        level=getattr(logging, args.log_level or config.log_level, logging.INFO),
        log_file=str(config.output_dir / "logs" / "reconciliation.log")
    )

    try:
        return asyncio.run(run(args, logger))

    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        logger.info("Interrupted by user")
        return 130

    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        print(f"\nERROR: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
