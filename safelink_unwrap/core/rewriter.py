"""Rewrites redirector URLs found in free text."""

import re
from dataclasses import dataclass
from typing import Tuple

from .classifier import is_redirector, unwrap
from .config import MonitorConfig

# [link text](http...) with both spans lazy so several links on one line
# are matched separately.
MARKDOWN_LINK = re.compile(r"\[(?P<linktext>.*?)\]\((?P<url>http.*?)\)")

# Stops at whitespace or a closing parenthesis, like the lazy span would when
# followed by one.
BARE_URL = re.compile(r"https?://[^\s)]+")


@dataclass
class UnwrapStats:
    """Counts of links unwrapped by a single rewrite.

    ``skipped`` counts redirector URLs left as found because they carry no
    usable destination.
    """
    markdown: int = 0
    bare: int = 0
    skipped: int = 0

    @property
    def total(self):
        return self.markdown + self.bare


def rewrite_with_stats(text: str, config: MonitorConfig) -> Tuple[str, UnwrapStats]:
    """Unwrap markdown links first, then bare URLs, and count the changes."""
    stats = UnwrapStats()

    def replace_markdown(match):
        linktext = match.group("linktext")
        url = match.group("url")
        if linktext is None or url is None:
            return match.group(0)
        destination = unwrap(url, config)
        if destination is None:
            return match.group(0)
        stats.markdown += 1
        return f"[{linktext}]({destination})"

    def replace_bare(match):
        url = match.group(0)
        destination = unwrap(url, config)
        if destination is None:
            # Redirector URLs inside markdown links are seen again here.
            if is_redirector(url, config):
                stats.skipped += 1
            return url
        stats.bare += 1
        return destination

    text = MARKDOWN_LINK.sub(replace_markdown, text)
    # Destinations from the first pass are plain URLs and are left alone here.
    text = BARE_URL.sub(replace_bare, text)
    return text, stats


def rewrite(text: str, config: MonitorConfig) -> str:
    """Return ``text`` with every recognised redirector URL unwrapped.

    Never raises; URLs that cannot be parsed are left exactly as found.
    """
    return rewrite_with_stats(text, config)[0]
