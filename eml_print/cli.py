"""Command-line interface for eml-print."""

import argparse
import logging
import os
import sys
import time
from dataclasses import replace
from typing import Optional

from . import __version__
from .config import ConversionConfig, PAGE_SIZES
from .converter import convert_path, create_skipped_files_report
from .utils import setup_logging

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog='eml-print',
        description='Convert EML email files to PDF through headless Chromium',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s message.eml                    Write to ./output/ beside the message
  %(prog)s message.eml out/message.pdf    Write to an explicit file
  %(prog)s ~/emails                       Convert every .eml under ~/emails
  %(prog)s ~/emails ~/pdfs --report       Also write a report of skipped files
        """
    )

    parser.add_argument(
        'input',
        nargs='?',
        metavar='INPUT',
        help='EML file or folder containing EML files'
    )

    parser.add_argument(
        'output',
        nargs='?',
        metavar='OUTPUT',
        help='Output PDF file or folder (default: output/ beside the input)'
    )

    parser.add_argument(
        '--page-size',
        choices=PAGE_SIZES,
        help='PDF page size (default: a4)'
    )

    parser.add_argument(
        '--timeout',
        type=float,
        metavar='SECONDS',
        help='Render timeout per message (default: 60)'
    )

    parser.add_argument(
        '--restart-every',
        type=int,
        metavar='N',
        help='Relaunch the browser after N conversions (default: 50)'
    )

    parser.add_argument(
        '--timezone',
        metavar='TZ',
        help='Timezone used in output filenames (default: Australia/Brisbane)'
    )

    parser.add_argument(
        '--config',
        metavar='FILE',
        help='JSON file with conversion settings'
    )

    parser.add_argument(
        '--report',
        action='store_true',
        help='Write Skipped_Files_Report.pdf when files fail to convert'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Suppress all output except errors'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def build_config(args: argparse.Namespace) -> ConversionConfig:
    """Load the config file, if any, and apply command line overrides."""
    config = ConversionConfig.load(args.config) if args.config else ConversionConfig()

    overrides = {
        'page_size': args.page_size,
        'render_timeout': args.timeout,
        'restart_every': args.restart_every,
        'timezone': args.timezone,
    }
    return replace(config, **{k: v for k, v in overrides.items() if v is not None})


def print_progress(current: int, total: int, filename: str, start_time: float, width: int = 40) -> None:
    """Print a terminal progress bar."""
    if total == 0:
        return

    percent = current / total
    filled = int(width * percent)
    bar = '=' * filled + '-' * (width - filled)

    # Calculate ETA
    elapsed = time.time() - start_time
    if current > 0:
        eta = (elapsed / current) * (total - current)
        eta_str = f"ETA: {int(eta)}s"
    else:
        eta_str = "ETA: --"

    # Truncate filename for display
    display_name = filename[:30] + '...' if len(filename) > 30 else filename.ljust(33)

    print(f'\r[{bar}] {current}/{total} {display_name} {eta_str}', end='', flush=True)


def run_cli(args: argparse.Namespace) -> int:
    """
    Run the CLI conversion.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if not args.input:
        print("Usage: eml-print <file.eml|directory> [output]", file=sys.stderr)
        return 1

    if not os.path.exists(args.input):
        logger.error(f"Input does not exist: {args.input}")
        return 1

    config = build_config(args)
    start_time = time.time()
    show_progress = os.path.isdir(args.input) and not args.quiet

    def progress_callback(current: int, total: int, filename: str) -> bool:
        if show_progress:
            print_progress(current, total, filename, start_time)
        return True  # Continue processing

    try:
        result = convert_path(
            args.input,
            args.output,
            config=config,
            progress_callback=progress_callback
        )
    except KeyboardInterrupt:
        print("\n\nConversion cancelled by user.", file=sys.stderr)
        return 1

    # Clear progress line
    if show_progress:
        print()

    if result.total_files == 0:
        logger.warning(f"No EML files found in {args.input}")
        return 0

    if args.report and result.failed > 0:
        result.report_path = create_skipped_files_report(result.results, result.output_folder)

    if not args.quiet:
        elapsed = time.time() - start_time
        print(f"Converted {result.successful} of {result.total_files} file(s) "
              f"in {elapsed:.1f}s -> {result.output_folder}")
        if result.report_path:
            print(f"See {result.report_path} for details on failed conversions.")

    if args.verbose:
        # Print details of failed files
        failed = [r for r in result.results if not r.success]
        if failed:
            print("\nFailed files:")
            for r in failed:
                print(f"  - {r.source_file}: {r.error_message}")

    # Per-file failures in a batch do not change the exit code
    return 0


def main(args: Optional[list] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        args: Optional list of arguments (uses sys.argv if not provided)

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    setup_logging(verbose=parsed_args.verbose, quiet=parsed_args.quiet)

    try:
        return run_cli(parsed_args)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=parsed_args.verbose)
        return 1


if __name__ == '__main__':
    sys.exit(main())
