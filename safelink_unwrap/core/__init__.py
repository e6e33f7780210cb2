"""Link unwrapping engine and clipboard monitor."""

from .classifier import is_redirector, unwrap
from .clipboard import ClipboardManager
from .config import DEFAULT_REDIRECTORS, MonitorConfig
from .discovery import count_markdown_files
from .monitor import ClipboardMonitor, MonitorPhase, MonitorState
from .rewriter import UnwrapStats, rewrite, rewrite_with_stats
