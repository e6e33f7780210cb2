"""Unwraps Safe Links style redirector URLs on the clipboard."""

__version__ = "0.1.0"

from .core import (
    DEFAULT_REDIRECTORS,
    ClipboardManager,
    ClipboardMonitor,
    MonitorConfig,
    MonitorPhase,
    is_redirector,
    rewrite,
    unwrap,
)
from .exceptions import (
    ClipboardAccessError,
    ClipboardEmptyError,
    ClipboardError,
    ConfigurationError,
    UnwrapError,
)
