"""Matching of dataset entries against page title and meta text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from .config import EngineConfig, load_config
from .text import contains_whole_phrase, normalize, tokenize
from .types import EntityType, Entry, PageContext

# (config weight key, meta tag name); the page <title> is weighted as "title".
META_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("meta_title", "title"),
    ("description", "description"),
    ("og_title", "og:title"),
    ("og_description", "og:description"),
)


@dataclass(frozen=True)
class TextMatch:
    entry: Entry
    score: float


def normalized_context_fields(context: PageContext) -> Dict[str, str]:
    """Return the five normalized text fields of ``context`` keyed by weight name."""

    meta = context.meta or {}
    fields = {"title": normalize(context.title)}
    for weight_key, meta_key in META_FIELDS:
        fields[weight_key] = normalize(meta.get(meta_key))
    return fields


def phrase_score(haystack: str, needle: str) -> int:
    """Return the needle's word count when it occurs as a whole phrase, else 0."""

    if not haystack or not needle:
        return 0
    if not contains_whole_phrase(haystack, needle):
        return 0
    return max(1, len(tokenize(needle)))


def _rank_matches(matches: List[TextMatch], limit: int) -> List[Entry]:
    matches.sort(
        key=lambda match: (
            -match.score,
            match.entry.entity_type.value,
            match.entry.page_name,
            match.entry.page_id,
        )
    )
    ranked: List[Entry] = []
    seen = set()
    for match in matches:
        if len(ranked) >= limit:
            break
        if match.entry.key in seen:
            continue
        seen.add(match.entry.key)
        ranked.append(match.entry)
    return ranked


def match_entries_by_page_context(
    entries: Sequence[Entry],
    context: PageContext,
    limit: int = 5,
    config: EngineConfig | None = None,
) -> List[Entry]:
    """Return entries whose name appears as a whole phrase in the page metadata.

    Incidents are never matched directly; they are only reachable through
    relation expansion.
    """

    engine_config = config or load_config(None)
    fields = normalized_context_fields(context)
    if not " ".join(fields.values()).strip():
        return []

    denylist = engine_config.marketplace_brand_denylist
    min_length = engine_config.min_entity_name_length
    matches: List[TextMatch] = []

    for entry in entries:
        if entry.entity_type is EntityType.INCIDENT:
            continue
        name = normalize(entry.page_name)
        if len(name) < min_length or name in denylist:
            continue

        hits = {key: phrase_score(text, name) for key, text in fields.items()}
        if not any(hits.values()):
            continue

        score = sum(engine_config.page_context_weight(key) * hit for key, hit in hits.items())
        score += engine_config.type_boost(entry.entity_type) + len(name)
        matches.append(TextMatch(entry=entry, score=score))

    return _rank_matches(matches, max(limit, 0))
