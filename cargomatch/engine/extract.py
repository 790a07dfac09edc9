"""Build a ``PageContext`` from raw page HTML."""

from __future__ import annotations

from typing import Dict, Optional

from bs4 import BeautifulSoup, FeatureNotFound  # type: ignore

from .types import PageContext
from .urlnorm import safe_parse_url

# Meta tags collected from the page, keyed by their ``name``/``property`` value.
META_KEYS = ("description", "title", "og:title", "og:description")


def _meta_content(soup: BeautifulSoup, key: str) -> Optional[str]:
    tag = soup.find("meta", attrs={"name": key}) or soup.find("meta", attrs={"property": key})
    if tag is None:
        return None
    content = (tag.get("content") or "").strip()
    return content or None


def page_context_from_html(url: str, html: str) -> PageContext:
    """Return the page context a browser would report for ``html`` at ``url``."""

    try:
        soup = BeautifulSoup(html or "", "lxml")
    except FeatureNotFound:
        soup = BeautifulSoup(html or "", "html.parser")

    title = soup.title.get_text(strip=True) if soup.title else ""
    meta: Dict[str, str] = {}
    for key in META_KEYS:
        content = _meta_content(soup, key)
        if content:
            meta[key] = content

    parsed = safe_parse_url(url)
    hostname = (parsed.hostname or "") if parsed else ""
    return PageContext(url=url, hostname=hostname.lower(), title=title, meta=meta)
