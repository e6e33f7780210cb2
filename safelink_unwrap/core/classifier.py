"""Recognition of wrapped redirector URLs.

A redirector URL is an absolute URL whose host ends with one of the
configured domain suffixes. The original destination travels in a query
parameter whose name depends on the redirector family, e.g.
``https://eur01.safelinks.protection.outlook.com/?url=https%3A%2F%2Fexample.com``.

Nothing in this module raises: anything that cannot be parsed is reported as
"not a redirector" so callers leave the text untouched.
"""

import ipaddress
import re
from typing import Optional
from urllib.parse import parse_qsl, urlsplit

from .config import MonitorConfig

# Letters, digits, hyphens and underscores only, after IDNA encoding.
HOST_LABEL = re.compile(r"[a-z0-9_-]+")


def _domain_host(uri: str) -> Optional[str]:
    """Return the normalized domain name of ``uri``, or None.

    None covers unparseable URIs, relative references, IP literals and
    hosts that are not valid domain names.
    """
    try:
        parts = urlsplit(uri)
        # Accessing the port validates it.
        parts.port
    except ValueError:
        return None

    if not parts.scheme or not parts.netloc:
        return None

    host = parts.hostname
    if not host:
        return None

    try:
        ipaddress.ip_address(host)
        return None
    except ValueError:
        pass

    try:
        host = host.encode("idna").decode("ascii").lower()
    except UnicodeError:
        return None

    # A single trailing dot marks a fully qualified name.
    labels = host[:-1].split(".") if host.endswith(".") else host.split(".")
    if not all(HOST_LABEL.fullmatch(label) for label in labels):
        return None

    return host


def matching_key(uri: str, config: MonitorConfig) -> Optional[str]:
    """Return the query key of the first redirector family matching ``uri``."""
    host = _domain_host(uri)
    if host is None:
        return None
    for suffix, key in config.redirectors:
        if host.endswith(suffix):
            return key
    return None


def is_redirector(uri: str, config: MonitorConfig) -> bool:
    return matching_key(uri, config) is not None


def unwrap(uri: str, config: MonitorConfig) -> Optional[str]:
    """Extract the destination wrapped by a redirector URL.

    Args:
        uri: Candidate URL exactly as found in the text.
        config: Supplies the redirector families.

    Returns:
        The decoded destination, or None when ``uri`` is not a redirector
        URL or carries no usable destination parameter. The destination is
        not unwrapped again even if it is itself a redirector URL.
    """
    key = matching_key(uri, config)
    if key is None:
        return None

    query = urlsplit(uri).query
    # Repeated keys: the last occurrence wins. Blank values are dropped.
    params = dict(parse_qsl(query))
    destination = params.get(key)
    if not destination:
        return None
    return destination
