"""Incident ordering and grouping of a match result for display."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Set

from .config import EngineConfig, load_config
from .text import normalize, normalize_reference_set
from .types import EntityType, Entry

_FALLBACK_DATE_FORMATS = ("%Y-%m", "%Y", "%Y/%m/%d", "%B %d, %Y", "%d %B %Y")


@dataclass(frozen=True)
class IncidentFocus:
    """Names of the record the user is looking at, used to rank incidents."""

    company_names: Set[str] = field(default_factory=set)
    product_names: Set[str] = field(default_factory=set)
    product_line_names: Set[str] = field(default_factory=set)


@dataclass(frozen=True)
class MatchSummary:
    top_match: Optional[Entry]
    company_match: Optional[Entry]
    incidents: List[Entry]
    visible_incidents: List[Entry]
    products: List[Entry]
    product_lines: List[Entry]
    hidden_related_count: int


def primary_status(entry: Entry) -> str:
    """Return the first listed status of an incident, or an empty string."""

    if not isinstance(entry.status, str):
        return ""
    statuses = [value.strip() for value in entry.status.split(",") if value.strip()]
    return statuses[0] if statuses else ""


def is_active_incident(entry: Entry) -> bool:
    return primary_status(entry).lower() == "active"


def parse_start_date(entry: Entry) -> datetime | None:
    """Parse an incident start date; ``None`` when absent or unparseable."""

    value = entry.start_date
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
        for date_format in _FALLBACK_DATE_FORMATS:
            try:
                parsed = datetime.strptime(value, date_format)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _add_name(target: Set[str], value: object) -> None:
    name = normalize(value) if isinstance(value, str) else ""
    if name:
        target.add(name)


def incident_focus(top_match: Entry | None, company_match: Entry | None = None) -> IncidentFocus:
    focus = IncidentFocus()
    if top_match is not None:
        if top_match.entity_type is EntityType.COMPANY:
            _add_name(focus.company_names, top_match.page_name)
        elif top_match.entity_type is EntityType.PRODUCT:
            _add_name(focus.product_names, top_match.page_name)
        elif top_match.entity_type is EntityType.PRODUCT_LINE:
            _add_name(focus.product_line_names, top_match.page_name)
        focus.company_names.update(normalize_reference_set(top_match.company))
        focus.product_names.update(normalize_reference_set(top_match.product))
        focus.product_line_names.update(normalize_reference_set(top_match.product_line))
    if company_match is not None:
        _add_name(focus.company_names, company_match.page_name)
    return focus


def incident_relevance_tier(incident: Entry, focus: IncidentFocus) -> int:
    """0 for a product or product-line hit, 1 for a company hit, 2 otherwise."""

    if normalize_reference_set(incident.product) & focus.product_names:
        return 0
    if normalize_reference_set(incident.product_line) & focus.product_line_names:
        return 0
    if normalize_reference_set(incident.company) & focus.company_names:
        return 1
    return 2


def sort_incidents(incidents: Sequence[Entry], focus: IncidentFocus) -> List[Entry]:
    """Order incidents by relevance tier, active status, then newest start date.

    Unparseable start dates sort as the earliest possible date.
    """

    def sort_key(item):
        index, incident = item
        started = parse_start_date(incident)
        timestamp = started.timestamp() if started else float("-inf")
        return (
            incident_relevance_tier(incident, focus),
            0 if is_active_incident(incident) else 1,
            -timestamp,
            index,
        )

    return [incident for _, incident in sorted(enumerate(incidents), key=sort_key)]


def summarize_matches(matches: Sequence[Entry], config: EngineConfig | None = None) -> MatchSummary:
    """Split an expanded match list into the top match and grouped related records."""

    engine_config = config or load_config(None)
    top_match = matches[0] if matches else None
    company_match = next((item for item in matches if item.entity_type is EntityType.COMPANY), None)
    related = [item for item in matches if top_match is None or item.key != top_match.key]

    incidents = sort_incidents(
        [item for item in related if item.entity_type is EntityType.INCIDENT],
        incident_focus(top_match, company_match),
    )
    products = [item for item in related if item.entity_type is EntityType.PRODUCT]
    product_lines = [item for item in related if item.entity_type is EntityType.PRODUCT_LINE]

    limit = engine_config.visible_incident_limit
    hidden = max(len(incidents) - limit, 0) + len(products) + len(product_lines)
    return MatchSummary(
        top_match=top_match,
        company_match=company_match,
        incidents=incidents,
        visible_incidents=incidents[:limit],
        products=products,
        product_lines=product_lines,
        hidden_related_count=hidden,
    )


def badge_text(count: int) -> str:
    return "3+" if count > 3 else str(count)
