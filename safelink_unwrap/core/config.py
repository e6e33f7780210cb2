"""Monitor configuration."""

import math
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Tuple

from ..exceptions import ConfigurationError

DEFAULT_POLL_INTERVAL = 1.0  # seconds
DEFAULT_MAX_BACKOFF = 30.0  # seconds
DEFAULT_MAX_RETRIES = 10
MAX_CONTENT_SIZE = 1_000_000  # characters

# Ordered: the first suffix a host ends with decides the query key.
DEFAULT_REDIRECTORS = {
    ".safelinks.protection.outlook.com": "url",
    ".safelink.emails.azure.net": "destination",
}


@dataclass(frozen=True)
class MonitorConfig:
    """Immutable settings shared by the classifier, rewriter and monitor."""
    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_backoff: float = DEFAULT_MAX_BACKOFF
    max_retries: Optional[int] = DEFAULT_MAX_RETRIES  # None never gives up
    redirectors: Tuple[Tuple[str, str], ...] = field(
        default_factory=lambda: tuple(DEFAULT_REDIRECTORS.items())
    )
    max_content_size: int = MAX_CONTENT_SIZE

    def __post_init__(self):
        for name in ("poll_interval", "max_backoff"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ConfigurationError(f"{name.replace('_', ' ').capitalize()} must be finite, got {value}")
        if self.poll_interval <= 0:
            raise ConfigurationError(f"Poll interval must be positive, got {self.poll_interval}")
        if self.max_backoff < self.poll_interval:
            raise ConfigurationError(
                f"Maximum backoff ({self.max_backoff}) must not be below "
                f"the poll interval ({self.poll_interval})"
            )
        if self.max_retries is not None and self.max_retries < 0:
            raise ConfigurationError(f"Maximum retries must not be negative, got {self.max_retries}")
        if self.max_content_size <= 0:
            raise ConfigurationError(f"Maximum content size must be positive, got {self.max_content_size}")

        redirectors = self.redirectors
        if isinstance(redirectors, dict):
            redirectors = redirectors.items()
        normalized = []
        for suffix, key in redirectors:
            if not suffix or not suffix.strip():
                raise ConfigurationError("Redirector domain suffix must not be empty")
            if not key or not key.strip():
                raise ConfigurationError(f"Query key for redirector '{suffix}' must not be empty")
            normalized.append((suffix.strip().lower(), key.strip()))
        # Frozen dataclass: bypass __setattr__ to store the normalized tuple.
        object.__setattr__(self, "redirectors", tuple(normalized))

    def with_redirectors(self, extra: Iterable[Tuple[str, str]]) -> "MonitorConfig":
        """Return a copy with additional redirector families appended."""
        return replace(self, redirectors=self.redirectors + tuple(extra))
