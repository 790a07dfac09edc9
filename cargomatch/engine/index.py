"""Coordinator for the page matching pipeline."""

from __future__ import annotations

import logging
from typing import List, Sequence

from .config import EngineConfig, load_config
from .ecommerce import is_known_ecommerce_host
from .page_context import match_entries_by_page_context
from .relations import expand_related_entries
from .types import EntityType, Entry, EntryKey, EntryMatch, MatchType, PageContext
from .url_matching import match_entries_by_url
from .urlnorm import safe_parse_url

logger = logging.getLogger(__name__)


def match_by_url(
    entries: Sequence[Entry],
    url: str,
    config: EngineConfig | None = None,
) -> List[Entry]:
    """Return URL-matched entries expanded with everything related to them."""

    engine_config = config or load_config(None)
    url_matches = match_entries_by_url(entries, url, engine_config.url_seed_limit, engine_config)
    return expand_related_entries(entries, [match.entry for match in url_matches])


def match_by_page_context(
    entries: Sequence[Entry],
    context: PageContext,
    config: EngineConfig | None = None,
) -> List[Entry]:
    """Return the entries relevant to the page described by ``context``."""

    engine_config = config or load_config(None)
    url_matches = match_entries_by_url(entries, context.url, engine_config.url_seed_limit, engine_config)
    text_matches = match_entries_by_page_context(entries, context, engine_config.meta_seed_limit, engine_config)
    logger.debug(
        "Page %s: %d URL seed(s), %d text seed(s)",
        context.url,
        len(url_matches),
        len(text_matches),
    )

    if not url_matches:
        if not _is_ecommerce_page(context, engine_config):
            return []
        return expand_related_entries(entries, text_matches)

    return expand_related_entries(entries, prioritize_seeds(url_matches, text_matches))


def prioritize_seeds(url_matches: Sequence[EntryMatch], text_matches: Sequence[Entry]) -> List[Entry]:
    """Order seeds from most to least specific, without duplicates.

    Exact non-company URL matches come first. When the URL only identified a
    company, products named on the page are promoted ahead of it.
    """

    url_entries = [match.entry for match in url_matches]
    exact_specific = [
        match.entry
        for match in url_matches
        if match.match_type is MatchType.EXACT
        and match.entry.entity_type is not EntityType.COMPANY
        and match.entry.website
    ]
    promoted: List[Entry] = []
    if any(entry.entity_type is EntityType.COMPANY for entry in url_entries):
        promoted = [entry for entry in text_matches if entry.entity_type is not EntityType.COMPANY]

    seeds: List[Entry] = []
    seen: set[EntryKey] = set()
    for entry in [*exact_specific, *promoted, *text_matches, *url_entries]:
        if entry.key in seen:
            continue
        seen.add(entry.key)
        seeds.append(entry)
    return seeds


def _is_ecommerce_page(context: PageContext, config: EngineConfig) -> bool:
    hostname = context.hostname
    if not hostname:
        parsed = safe_parse_url(context.url)
        hostname = (parsed.hostname or "") if parsed else ""
    return is_known_ecommerce_host(hostname, config.ecommerce_domain_family_map)
