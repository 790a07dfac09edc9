"""Typed data structures shared by the matching engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class EntityType(str, Enum):
    """Closed set of dataset record kinds."""

    COMPANY = "Company"
    INCIDENT = "Incident"
    PRODUCT = "Product"
    PRODUCT_LINE = "ProductLine"


class MatchType(str, Enum):
    """Relationship between a visited URL and a candidate website."""

    EXACT = "exact"
    PARTIAL = "partial"
    SUBDOMAIN = "subdomain"


EntryKey = Tuple[EntityType, str]


@dataclass(frozen=True)
class Entry:
    """One dataset record.

    ``company``, ``product`` and ``product_line`` hold free-text references to
    other records by name and may contain several names separated by ``,``,
    ``;`` or ``|``. They are typed loosely because the upstream dataset is.
    """

    entity_type: EntityType
    page_id: str
    page_name: str
    website: Optional[str] = None
    description: Optional[str] = None
    company: Any = None
    product: Any = None
    product_line: Any = None
    status: Any = None
    start_date: Any = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def key(self) -> EntryKey:
        page_id = str(self.page_id or "").strip()
        if not page_id:
            page_id = f"{self.entity_type.value}:{self.page_name}"
        return (self.entity_type, page_id)


@dataclass(frozen=True)
class PageContext:
    """Metadata describing the page currently being viewed."""

    url: str
    hostname: str = ""
    title: Optional[str] = None
    meta: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class UrlMatchDetail:
    """Classification of one (visited URL, candidate URL) pair."""

    match_type: MatchType
    matched_path: Optional[str]
    visited_host: str
    candidate_host: str
    ecommerce_family_alias: bool = False


@dataclass(frozen=True)
class EntryMatch:
    """A dataset entry matched by URL, with its score and explanation."""

    entry: Entry
    match_type: MatchType
    matched_path: Optional[str]
    score: int
    reasons: List[str] = field(default_factory=list)
