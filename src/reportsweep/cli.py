#!/usr/bin/env python3
"""
reportsweep CLI: command line interface for duplicate report detection and removal.
Runs the same engine as embedding services, with console-based interaction.
Dry run by default: nothing is deleted unless --delete is given.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import signal
import sys
import time
from pathlib import Path
from typing import List, NoReturn, Optional

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from reportsweep.aliases import (
    ENV_API_KEY, ENV_OWNER, ENV_URL, EPILOG_TEXT, STORE_CHOICES, STORE_HELP_TEXT)
from reportsweep.commands import CleanupCommand
from reportsweep.core.errors import ReportSweepError
from reportsweep.core.interfaces import ReportStore
from reportsweep.core.models import CleanupParams, CleanupResult, DuplicateGroup, ScanParams
from reportsweep.services.file_store import JsonDirectoryReportStore
from reportsweep.services.rest_store import RestReportStore
from reportsweep.utils.convert_utils import ConvertUtils


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self._stop_requested: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="reportsweep",
            description="reportsweep: find duplicate reports and keep only the newest copy",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Store selection
        parser.add_argument(
            "--store", "-s",
            choices=STORE_CHOICES,
            default="dir",
            type=str,
            help=STORE_HELP_TEXT
        )
        parser.add_argument(
            "--path", "-p",
            type=str,
            metavar='',
            help="Root directory of a 'dir' store"
        )
        parser.add_argument(
            "--url", "-u",
            type=str,
            metavar='',
            help=f"Base URL of a 'rest' store. Default: ${ENV_URL}"
        )
        parser.add_argument(
            "--table",
            default="audit_reports",
            type=str,
            metavar='',
            help="Table name of a 'rest' store. Default: audit_reports"
        )
        parser.add_argument(
            "--owner", "-o",
            type=str,
            metavar='',
            help=f"Owner whose reports are scanned. Default: ${ENV_OWNER}"
        )

        # Scan options
        parser.add_argument(
            "--tolerance", "-t",
            default="15m",
            type=str,
            metavar='',
            help="Maximum creation-time distance between duplicates (e.g., 90s, 15m, 1h). Default: 15m"
        )
        parser.add_argument(
            "--legacy-fingerprint",
            action="store_true",
            help="Compare answers in stored key order instead of sorting keys first"
        )

        # Cleanup options
        parser.add_argument(
            "--batch-size", "-b",
            default=10,
            type=int,
            metavar='',
            help="Deletes issued concurrently per batch. Default: 10"
        )
        parser.add_argument(
            "--pause",
            default="50ms",
            type=str,
            metavar='',
            help="Pause between batches (e.g., 50ms, 1s). Default: 50ms"
        )

        # Actions
        parser.add_argument(
            "--delete",
            action="store_true",
            help="Keep the newest report per duplicate group and delete the rest. "
                 "Always shows preview before deletion for safety."
        )

        # Output options
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt when used with --delete (for automation/scripts)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics, progress and debug logging"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.force and not args.delete:
            self.error_exit("--force can only be used with --delete")

        # Prevent interactive confirmation in non-TTY environments
        if args.delete and not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        if args.store == "dir":
            if not args.path:
                self.error_exit("--path is required for the 'dir' store")
            root_path = Path(args.path).expanduser().resolve()
            if not root_path.exists():
                self.error_exit(f"Directory not found: {args.path}")
            if not root_path.is_dir():
                self.error_exit(f"Path is not a directory: {args.path}")
        elif args.store == "rest":
            if not (args.url or os.environ.get(ENV_URL)):
                self.error_exit(f"--url or ${ENV_URL} is required for the 'rest' store")
            if not os.environ.get(ENV_API_KEY):
                self.error_exit(f"${ENV_API_KEY} environment variable is required for the 'rest' store")
            if not (args.owner or os.environ.get(ENV_OWNER)):
                self.error_exit(f"--owner or ${ENV_OWNER} is required for the 'rest' store")

        if not ConvertUtils.is_valid_duration_format(args.tolerance):
            self.error_exit(f"Invalid tolerance format: {args.tolerance}")
        if not ConvertUtils.is_valid_duration_format(args.pause):
            self.error_exit(f"Invalid pause format: {args.pause}")
        if args.batch_size < 1:
            self.error_exit("Batch size must be at least 1")

    def create_params(self, args: argparse.Namespace) -> tuple[ScanParams, CleanupParams]:
        """Create scan and cleanup parameters from CLI arguments."""
        try:
            scan_params = ScanParams.from_human_readable(
                tolerance_str=args.tolerance,
                owner_scope=args.owner or os.environ.get(ENV_OWNER),
                canonical_answers=not args.legacy_fingerprint,
            )
            cleanup_params = CleanupParams.from_human_readable(
                batch_size=args.batch_size,
                pause_str=args.pause,
            )
            return scan_params, cleanup_params
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    @staticmethod
    def create_store(args: argparse.Namespace) -> ReportStore:
        """Build the report store selected on the command line."""
        if args.store == "rest":
            return RestReportStore(
                base_url=args.url or os.environ.get(ENV_URL, ""),
                api_key=os.environ.get(ENV_API_KEY, ""),
                table=args.table,
            )
        return JsonDirectoryReportStore(str(Path(args.path).expanduser().resolve()))

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
            sys.stderr.flush()
        else:
            sys.stderr.write(f"\r  [{stage}] {current} reports processed...")
            sys.stderr.flush()

    def stopped_flag(self) -> bool:
        """True once Ctrl+C was pressed during cleanup."""
        return self._stop_requested

    def _request_stop(self, signum, frame) -> None:
        if self._stop_requested:
            raise KeyboardInterrupt
        self._stop_requested = True
        sys.stderr.write("\n⚠️  Stopping after the current batch (press Ctrl+C again to abort)\n")

    def output_results(self, groups: List[DuplicateGroup]) -> None:
        """Output duplicate groups as plain text in scan order."""
        if self.quiet:
            return

        if not groups:
            print("No duplicate groups found.")
            return

        total_reports = sum(g.size for g in groups)
        print(f"\nFound {len(groups)} duplicate groups ({total_reports} reports)")

        for idx, group in enumerate(groups, 1):
            print(f"\n📁 Group {idx} | \"{group.keep.title}\" | Reports: {group.size}")
            for report in group.reports:
                print(f"   {report.id} [{ConvertUtils.timestamp_to_human(report.created_at)}]")

        print("\nDry run: nothing was deleted. Use --delete to remove duplicates.")

    def execute_cleanup(self, command: CleanupCommand, groups: List[DuplicateGroup], force: bool = False) -> Optional[CleanupResult]:
        """Keep the newest report per group, delete the rest. Always shows preview before deletion."""
        if not groups:
            if not self.quiet:
                print("No duplicate groups found.")
            return None

        decisions = command.plan(groups)
        delete_count = sum(len(d.remove) for d in decisions)

        # Always show deletion preview before action (safety first)
        print()
        for idx, decision in enumerate(decisions, 1):
            print(f"📁 Group {idx} | \"{decision.keep.title}\" | Reports: {len(decision.remove) + 1}")
            print("-" * 60)
            print(f"   [KEEP] {decision.keep.id}")
            print(f"          Created: {ConvertUtils.timestamp_to_human(decision.keep.created_at)} (newest)")
            for report in decision.remove:
                print(f"   [DEL]  {report.id}")
                print(f"          Created: {ConvertUtils.timestamp_to_human(report.created_at)}")
            print()

        print("=" * 60)
        print(f"Summary: Keep newest report per group ({len(decisions)} reports kept, {delete_count} reports deleted)")
        print()

        if force:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding with deletion...")
        else:
            # Safety check: confirm we're still in interactive mode
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Lost interactive terminal during operation. "
                    "Use --force to proceed in non-interactive environments."
                )

            response = input(f"Are you sure you want to delete {delete_count} reports? [y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                print("Deletion cancelled by user.")
                return None

        print(f"\nDeleting {delete_count} reports...")
        previous_handler = signal.getsignal(signal.SIGINT)
        signal.signal(signal.SIGINT, self._request_stop)
        try:
            result = command.cleanup(
                groups,
                stopped_flag=self.stopped_flag,
                progress_callback=self.progress_callback if self.verbose else None
            )
        finally:
            signal.signal(signal.SIGINT, previous_handler)

        if self.verbose:
            sys.stderr.write("\n")

        self.report_result(result)
        return result

    def report_result(self, result: CleanupResult) -> None:
        if result.cancelled:
            print(f"\n⚠️  Cleanup stopped: {len(result.skipped_ids)} reports were not attempted. "
                  f"Scan again to see what remains.")

        if result.failed_ids:
            print(f"\n⚠️  Partial success: {result.deleted_count}/{result.requested_count} reports deleted.")
            print(f"Failed to delete {result.failed_count} report(s):")
            for report_id in result.failed_ids[:5]:  # Show first 5 errors
                print(f"  • {report_id}: {result.errors.get(report_id, 'unknown error')}")
            if len(result.failed_ids) > 5:
                print(f"  ...and {len(result.failed_ids) - 5} more reports")
        elif not result.cancelled:
            print(f"✅ Successfully deleted {result.deleted_count} reports.")

        if not self.quiet:
            print()
            print(result.print_summary())

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet

        if self.verbose:
            logging.getLogger("reportsweep").setLevel(logging.DEBUG)

        self.validate_args(args)
        scan_params, cleanup_params = self.create_params(args)

        try:
            store = self.create_store(args)
        except (ValueError, ReportSweepError) as e:
            self.error_exit(f"Cannot open store: {e}")

        command = CleanupCommand(store, scan_params=scan_params, cleanup_params=cleanup_params)

        if not self.quiet:
            owner = scan_params.owner_scope or "all owners"
            print(f"Scanning reports of {owner} "
                  f"(tolerance: {ConvertUtils.timedelta_to_human(scan_params.tolerance)})")

        try:
            groups, stats = command.scan(
                progress_callback=self.progress_callback if self.verbose else None
            )
        except ReportSweepError as e:
            self.error_exit(f"Scan failed: {e}")

        if self.verbose:
            sys.stderr.write("\n")
            print(stats.print_summary())

        if args.delete:
            self.execute_cleanup(command, groups, force=args.force)
        else:
            self.output_results(groups)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
