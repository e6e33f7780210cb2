"""Command line entry point for safelink-unwrap."""

import argparse
import logging
import os
import signal
import sys

from . import __version__
from .core.config import (
    DEFAULT_MAX_BACKOFF,
    DEFAULT_MAX_RETRIES,
    DEFAULT_POLL_INTERVAL,
    MonitorConfig,
)
from .core.discovery import count_markdown_files
from .core.monitor import EXIT_FATAL, EXIT_OK, ClipboardMonitor, MonitorPhase
from .core.rewriter import rewrite
from .exceptions import ConfigurationError

EXIT_USAGE = 2

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'

logger = logging.getLogger(__name__)


def redirector_spec(value):
    """Parse a SUFFIX=KEY redirector family argument."""
    suffix, sep, key = value.partition("=")
    if not sep or not suffix.strip() or not key.strip():
        raise argparse.ArgumentTypeError(f"expected SUFFIX=KEY, got '{value}'")
    return suffix.strip(), key.strip()


def get_parser():
    """Get argument parser"""
    parser = argparse.ArgumentParser(
        prog="safelink-unwrap",
        description="Rewrite Safe Links style redirector URLs on the clipboard "
                    "back to their original destinations.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('--interval', type=float, default=DEFAULT_POLL_INTERVAL,
                        help='Seconds between clipboard checks')
    parser.add_argument('--max-backoff', type=float, default=DEFAULT_MAX_BACKOFF,
                        help='Upper bound in seconds for the retry delay after errors')
    parser.add_argument('--max-retries', type=int, default=DEFAULT_MAX_RETRIES,
                        help='Consecutive clipboard errors tolerated before exiting '
                             '(-1 never exits)')
    parser.add_argument('--redirector', type=redirector_spec, action='append', default=[],
                        metavar='SUFFIX=KEY',
                        help='Extra redirector domain suffix and the query key '
                             'holding the destination (repeatable)')
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument('--once', action='store_true',
                      help='Rewrite the clipboard once and exit')
    mode.add_argument('--stdin', action='store_true',
                      help='Rewrite standard input to standard output instead '
                           'of using the clipboard')
    parser.add_argument('--scan-dir', default=os.curdir,
                        help='Directory searched for markdown files at startup')
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('-v', '--verbose', action='store_true',
                           help='Enable debug logging')
    verbosity.add_argument('-q', '--quiet', action='store_true',
                           help='Only log warnings and errors')
    parser.add_argument('--log-file',
                        help='Also write log messages to this file')
    return parser


def parse_arguments(args=None):
    """Parse command line arguments"""
    parser = get_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.interval <= 0:
        parser.error("--interval must be positive")
    if parsed_args.max_retries < -1:
        parser.error("--max-retries must be -1 or greater")

    return parsed_args


def build_config(args):
    """Build the monitor configuration from parsed arguments."""
    max_retries = None if args.max_retries == -1 else args.max_retries
    config = MonitorConfig(
        poll_interval=args.interval,
        max_backoff=args.max_backoff,
        max_retries=max_retries,
    )
    if args.redirector:
        config = config.with_redirectors(args.redirector)
    return config


def setup_logging(verbose=False, quiet=False, log_file=None):
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING

    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=handlers,
        force=True,
    )


def install_signal_handlers(monitor):
    """Stop the monitor cleanly on SIGINT and SIGTERM."""
    def handle_signal(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}, shutting down")
        monitor.stop()

    signal.signal(signal.SIGINT, handle_signal)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, handle_signal)


def log_markdown_inventory(root):
    """Log how many markdown files live under ``root``."""
    count = count_markdown_files(root)
    logger.info(f"Found {count} markdown file(s) under {os.path.abspath(root)}")
    return count


def run_filter(config, stdin=None, stdout=None):
    """Rewrite a text stream instead of the clipboard."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stdout.write(rewrite(stdin.read(), config))
    stdout.flush()
    return EXIT_OK


def run_once(monitor):
    phase = monitor.tick()
    if phase in (MonitorPhase.BACKOFF, MonitorPhase.FAILED):
        return EXIT_FATAL
    return EXIT_OK


def main(argv=None):
    """Main entry point"""
    args = parse_arguments(argv)
    setup_logging(args.verbose, args.quiet, args.log_file)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_USAGE

    if args.stdin:
        return run_filter(config)

    log_markdown_inventory(args.scan_dir)

    monitor = ClipboardMonitor(config)
    if args.once:
        return run_once(monitor)

    install_signal_handlers(monitor)
    exit_code = monitor.run()
    if exit_code == EXIT_FATAL:
        logger.error("Clipboard is persistently inaccessible, exiting")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
