"""Clipboard monitoring loop with exponential backoff."""

import logging
import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ..exceptions import ClipboardAccessError, ClipboardEmptyError
from .clipboard import ClipboardManager
from .config import MonitorConfig
from .rewriter import rewrite_with_stats

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1


class MonitorPhase(Enum):
    """Enum for the phase a monitor iteration is in or ended in"""
    IDLE = auto()       # Waiting for the next poll
    READING = auto()    # Reading the clipboard
    UNCHANGED = auto()  # Nothing new to process
    REWRITING = auto()  # Unwrapping links in new content
    WRITING = auto()    # Writing the rewritten content back
    BACKOFF = auto()    # Last read or write failed
    STOPPED = auto()    # Cancelled from outside
    FAILED = auto()     # Retry limit exceeded


@dataclass
class MonitorState:
    """Mutable loop state, owned by a single ClipboardMonitor."""
    backoff: float
    last_seen: Optional[str] = None
    error_count: int = 0
    phase: MonitorPhase = MonitorPhase.IDLE


class ClipboardMonitor:
    """Polls the clipboard and unwraps redirector links in place.

    Each iteration reads the clipboard, rewrites new content and writes it
    back, then sleeps for the current backoff. Failed reads and writes
    double the backoff up to ``max_backoff``; more than ``max_retries``
    consecutive failures end the loop with EXIT_FATAL.
    """

    def __init__(self, config=None, clipboard=None, stop_event=None):
        self.config = config or MonitorConfig()
        self.clipboard = clipboard or ClipboardManager()
        self._stop_event = stop_event or threading.Event()
        self.state = MonitorState(backoff=self.config.poll_interval)
        self.total_unwrapped = 0

    @property
    def stopped(self):
        return self._stop_event.is_set()

    def stop(self):
        """Request the loop to end at the next iteration boundary."""
        self._stop_event.set()

    def run(self):
        """Run until stopped or the retry limit is exceeded.

        Returns:
            int: EXIT_OK after stop(), EXIT_FATAL after too many failures.
        """
        logger.info(
            f"Monitoring clipboard every {self.config.poll_interval:g}s "
            f"(max backoff {self.config.max_backoff:g}s)"
        )
        while not self.stopped:
            phase = self.tick()
            if phase is MonitorPhase.FAILED:
                return EXIT_FATAL
            self._stop_event.wait(self.state.backoff)

        self.state.phase = MonitorPhase.STOPPED
        logger.info(f"Monitor stopped after unwrapping {self.total_unwrapped} link(s)")
        return EXIT_OK

    def tick(self):
        """Run one read/rewrite/write cycle without sleeping.

        Returns:
            MonitorPhase: The phase the iteration ended in.
        """
        state = self.state
        state.phase = MonitorPhase.READING
        try:
            content = self.clipboard.read()
        except ClipboardEmptyError:
            logger.debug("Clipboard holds no text")
            return self._set_phase(MonitorPhase.UNCHANGED)
        except ClipboardAccessError as e:
            return self._record_failure("read", e)

        if not self._is_new(content):
            return self._set_phase(MonitorPhase.UNCHANGED)

        state.phase = MonitorPhase.REWRITING
        rewritten, stats = rewrite_with_stats(content, self.config)

        state.phase = MonitorPhase.WRITING
        try:
            self.clipboard.write(rewritten)
        except ClipboardAccessError as e:
            # last_seen stays put so the same content is retried next time.
            return self._record_failure("write", e)

        state.error_count = 0
        state.last_seen = content
        state.backoff = self.config.poll_interval
        if stats.total:
            self.total_unwrapped += stats.total
            logger.info(
                f"Unwrapped {stats.total} link(s) "
                f"({stats.markdown} markdown, {stats.bare} bare)"
            )
        if stats.skipped:
            logger.debug(f"Left {stats.skipped} redirector link(s) without a destination unchanged")
        return self._set_phase(MonitorPhase.IDLE)

    def _is_new(self, content):
        if content == self.state.last_seen:
            return False
        if not content.strip():
            logger.debug("Ignoring blank clipboard content")
            return False
        if len(content) > self.config.max_content_size:
            logger.debug(
                f"Ignoring clipboard content of {len(content)} characters "
                f"(limit {self.config.max_content_size})"
            )
            return False
        return True

    def _record_failure(self, operation, error):
        state = self.state
        state.error_count += 1
        max_retries = self.config.max_retries
        if max_retries is not None and state.error_count > max_retries:
            logger.critical(
                f"Giving up after {state.error_count} consecutive clipboard failures. "
                f"Last {operation} error: {error}"
            )
            return self._set_phase(MonitorPhase.FAILED)

        state.backoff = min(state.backoff * 2, self.config.max_backoff)
        limit = "unlimited" if max_retries is None else max_retries
        message = (
            f"Clipboard {operation} failed ({state.error_count}/{limit}): {error}. "
            f"Retrying in {state.backoff:g}s"
        )
        if operation == "write":
            logger.error(message)
        else:
            logger.warning(message)
        return self._set_phase(MonitorPhase.BACKOFF)

    def _set_phase(self, phase):
        self.state.phase = phase
        return phase
