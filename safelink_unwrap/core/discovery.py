"""Markdown file discovery for the startup diagnostic."""

import fnmatch
import logging
import os

logger = logging.getLogger(__name__)

MARKDOWN_PATTERN = "*.md"


def _log_walk_error(error):
    logger.warning(f"Skipping unreadable path {error.filename}: {error.strerror or error}")


def count_markdown_files(root="."):
    """Count markdown files below ``root``.

    Best effort: unreadable directories are logged and skipped, and the
    count reached so far is returned if the walk itself fails.
    """
    count = 0
    try:
        for _dirpath, _dirnames, filenames in os.walk(root, onerror=_log_walk_error):
            count += len(fnmatch.filter(filenames, MARKDOWN_PATTERN))
    except OSError as e:
        logger.warning(f"Markdown discovery under {root} stopped early: {e}")
    return count
