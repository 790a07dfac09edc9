"""URL parsing and canonicalization helpers."""

from __future__ import annotations

import re
from typing import Any, Optional
from urllib.parse import SplitResult, urlsplit

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")
_INVALID_HOST_RE = re.compile(r"[\s<>\"'{}|\\^`%/?#@]")
_REPEATED_SLASH_RE = re.compile(r"/{2,}")


def _strict_parse(value: str) -> Optional[SplitResult]:
    if not _SCHEME_RE.match(value):
        return None
    try:
        parts = urlsplit(value)
        # Accessing the port validates it.
        parts.port
    except ValueError:
        return None
    hostname = parts.hostname
    if not hostname or _INVALID_HOST_RE.search(hostname):
        return None
    if any(not label for label in hostname.split(".")[:-1]):
        return None
    return parts


def safe_parse_url(raw_url: Any) -> Optional[SplitResult]:
    """Parse ``raw_url`` leniently, returning ``None`` rather than raising.

    Strings without a scheme (``acme.com/path``) are retried with an
    ``https://`` prefix.
    """

    if not raw_url or not isinstance(raw_url, str):
        return None
    trimmed = raw_url.strip()
    if not trimmed:
        return None
    parsed = _strict_parse(trimmed)
    if parsed is None:
        parsed = _strict_parse(f"https://{trimmed}")
    return parsed


def normalize_hostname(hostname: str) -> str:
    """Lower-case the hostname and strip a single leading ``www.``."""

    host = (hostname or "").strip().lower()
    if host.startswith("www."):
        host = host[4:]
    return host


def normalize_path(path: str) -> str:
    """Collapse repeated slashes and drop trailing slashes (except for ``/``)."""

    clean = _REPEATED_SLASH_RE.sub("/", path or "/")
    if clean == "/":
        return "/"
    return clean.rstrip("/") or "/"


def get_domain_root(hostname: str) -> str:
    """Return the last two labels of ``hostname``.

    This is a naive registrable-domain approximation: ``example.co.uk`` and
    ``shop.co.uk`` share the root ``co.uk``.
    """

    parts = [part for part in hostname.lower().split(".") if part]
    return ".".join(parts[-2:])
