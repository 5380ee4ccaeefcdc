#!/usr/bin/env python3
"""
hardlinker CLI — replace duplicate files in a directory tree with hardlinks.
Thin shell around DeduplicationCommand: parses arguments, prints the report,
and picks the exit code.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import os
import signal
import sys
import time
from pathlib import Path
from typing import Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import send2trash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("send2trash")

try:
    import xxhash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from hardlinker.commands import DeduplicationCommand
from hardlinker.core.errors import DeduplicationError
from hardlinker.core.models import DeduplicationParams, Report
from hardlinker.utils.convert_utils import ConvertUtils
from hardlinker.aliases import (
    MIN_SIZE_HELP_TEXT, PREFILTER_HELP_TEXT, TRASH_HELP_TEXT, EPILOG_TEXT
)


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
            prog="hardlinker",
            description="hardlinker — replace identical files with hardlinks",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--input", "-i",
            required=True,
            type=str,
            help="Directory tree to deduplicate"
        )

        # Filtering options
        parser.add_argument(
            "--min-size", "-m",
            default="0",
            type=str,
            metavar='',
            help=MIN_SIZE_HELP_TEXT
        )
        parser.add_argument(
            "--excluded-dirs", '-e',
            nargs="+",
            default=[],
            type=str,
            metavar='',
            dest="excluded_dirs",
            help="Excluded/ignored directories (space separated)"
        )
        parser.add_argument(
            "--no-prefilter",
            action="store_false",
            dest="prefilter",
            help=PREFILTER_HELP_TEXT
        )

        # Actions
        parser.add_argument(
            "--dry-run", "-n",
            action="store_true",
            dest="dry_run",
            help="Report what would be linked without changing anything"
        )
        parser.add_argument(
            "--trash",
            action="store_true",
            help=TRASH_HELP_TEXT
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics, progress and log messages"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.quiet and args.verbose:
            self.error_exit("--quiet and --verbose cannot be used together")

        root_path = Path(args.input)
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.input}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.input}")

        if not ConvertUtils.is_valid_size_format(args.min_size):
            self.error_exit(f"Invalid size format: {args.min_size}")

        for excl_dir in args.excluded_dirs:
            excl_path = Path(excl_dir)
            if not excl_path.exists():
                self.warning(f"Excluded directory not found: {excl_dir}")
            elif not excl_path.is_dir():
                self.warning(f"Excluded path is not a directory: {excl_dir}")

    def create_params(self, args: argparse.Namespace) -> DeduplicationParams:
        """Create DeduplicationParams from CLI arguments."""
        try:
            return DeduplicationParams.from_human_readable(
                root_dir=str(Path(args.input).resolve()),
                min_size_str=args.min_size,
                excluded_dirs=[str(Path(d.strip()).resolve()) for d in args.excluded_dirs],
                prefilter=args.prefilter,
                dry_run=args.dry_run,
                use_trash=args.trash,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def stopped_flag(self) -> bool:
        """Checked between files; set by the first Ctrl+C."""
        return self._stop_requested

    def _handle_sigint(self, signum, frame) -> None:
        if self._stop_requested:
            raise KeyboardInterrupt
        self._stop_requested = True
        self.warning("Stopping after the current file (press Ctrl+C again to abort)")

    def run_deduplication(self, params: DeduplicationParams) -> Report:
        """Execute the deduplication workflow."""
        command = DeduplicationCommand()
        try:
            report = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag
            )
        except DeduplicationError as e:
            self.error_exit(str(e))

        if self.verbose:
            sys.stderr.write("\n")
            print("\n" + report.stats.print_summary())

        return report

    def output_results(self, report: Report, dry_run: bool = False) -> None:
        """Print merges, failures and a one-line summary."""
        if not self.quiet:
            for outcome in report.merged:
                print(f"   {outcome.describe()}")
            if self.verbose:
                for outcome in report.skipped:
                    print(f"   {outcome.describe()}")

        for outcome in report.failures:
            self.warning(outcome.describe())

        if self.quiet:
            return

        verb = "would be linked" if dry_run else "linked"
        reclaimed = ConvertUtils.bytes_to_human(report.bytes_reclaimed)
        print(
            f"\nScanned {report.files_scanned} files: {len(report.merged)} {verb}, "
            f"{len(report.failures)} failed, {reclaimed} reclaimed"
        )
        if report.cancelled:
            print("⚠️  Run was stopped early; remaining files were not processed.")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> int:
        """Main entry point. Returns the process exit code."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger().setLevel(logging.INFO)

        self.validate_args(args)
        params = self.create_params(args)

        if not self.quiet:
            mode = " (dry run)" if params.dry_run else ""
            print(f"Deduplicating directory: {params.root_dir}{mode}")

        previous_handler = signal.signal(signal.SIGINT, self._handle_sigint)
        try:
            report = self.run_deduplication(params)
        finally:
            signal.signal(signal.SIGINT, previous_handler)

        self.output_results(report, dry_run=params.dry_run)

        if self.verbose:
            elapsed = time.time() - self.start_time
            print(f"\n✅ Completed in {elapsed:.2f} seconds")

        if report.cancelled:
            return 130
        return 1 if report.has_failures else 0


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        sys.exit(app.run())
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
