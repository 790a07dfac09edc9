"""Transitive expansion of matched entries across name-based relations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Set

from .text import normalize, normalize_reference_set
from .types import EntityType, Entry, EntryKey

TYPE_PRIORITY = {
    EntityType.COMPANY: 0,
    EntityType.PRODUCT: 1,
    EntityType.PRODUCT_LINE: 2,
    EntityType.INCIDENT: 3,
}


@dataclass
class KnownNames:
    """Company, product and product-line names reached so far."""

    companies: Set[str] = field(default_factory=set)
    products: Set[str] = field(default_factory=set)
    product_lines: Set[str] = field(default_factory=set)

    def absorb(self, signals: "RelationSignals") -> None:
        self.companies |= signals.company_names | signals.company_refs
        self.products |= signals.product_names | signals.product_refs
        self.product_lines |= signals.product_line_names | signals.product_line_refs


@dataclass(frozen=True)
class RelationSignals:
    """Normalized names an entry owns and references."""

    entity_type: EntityType
    company_names: Set[str]
    product_names: Set[str]
    product_line_names: Set[str]
    company_refs: Set[str]
    product_refs: Set[str]
    product_line_refs: Set[str]


def relation_signals(entry: Entry) -> RelationSignals:
    own_name = normalize(entry.page_name)
    own = {own_name} if own_name else set()
    return RelationSignals(
        entity_type=entry.entity_type,
        company_names=own if entry.entity_type is EntityType.COMPANY else set(),
        product_names=own if entry.entity_type is EntityType.PRODUCT else set(),
        product_line_names=own if entry.entity_type is EntityType.PRODUCT_LINE else set(),
        company_refs=normalize_reference_set(entry.company),
        product_refs=normalize_reference_set(entry.product),
        product_line_refs=normalize_reference_set(entry.product_line),
    )


def _company_related(signals: RelationSignals, known: KnownNames) -> bool:
    return bool(signals.company_names & known.companies)


def _product_line_related(signals: RelationSignals, known: KnownNames) -> bool:
    return bool(
        signals.product_line_names & known.product_lines
        or signals.company_refs & known.companies
    )


def _product_related(signals: RelationSignals, known: KnownNames) -> bool:
    return bool(
        signals.product_names & known.products
        or signals.company_refs & known.companies
        or signals.product_line_refs & known.product_lines
    )


def _incident_related(signals: RelationSignals, known: KnownNames) -> bool:
    return bool(
        signals.company_refs & known.companies
        or signals.product_refs & known.products
        or signals.product_line_refs & known.product_lines
    )


_INCLUSION_RULES: Dict[EntityType, Callable[[RelationSignals, KnownNames], bool]] = {
    EntityType.COMPANY: _company_related,
    EntityType.PRODUCT_LINE: _product_line_related,
    EntityType.PRODUCT: _product_related,
    EntityType.INCIDENT: _incident_related,
}


def is_related(signals: RelationSignals, known: KnownNames) -> bool:
    """Return True when the entry's signals touch any already-known name."""

    return _INCLUSION_RULES[signals.entity_type](signals, known)


def _related_sort_key(entry: Entry):
    return (TYPE_PRIORITY[entry.entity_type], entry.page_name, entry.page_id)


def expand_related_entries(
    all_entries: Sequence[Entry],
    seed_entries: Sequence[Entry],
) -> List[Entry]:
    """Return the seeds followed by every entry transitively related to them.

    The known-name sets only ever grow and are bounded by the names present
    in ``all_entries``, so the loop reaches a fixed point.
    """

    if not seed_entries:
        return []

    known = KnownNames()
    seeds: List[Entry] = []
    selected: Set[EntryKey] = set()
    for seed in seed_entries:
        if seed.key in selected:
            continue
        selected.add(seed.key)
        seeds.append(seed)
        known.absorb(relation_signals(seed))

    pending = [(entry, relation_signals(entry)) for entry in all_entries if entry.key not in selected]
    discovered: List[Entry] = []
    changed = True
    while changed:
        changed = False
        remaining = []
        for entry, signals in pending:
            if entry.key in selected:
                continue
            if not is_related(signals, known):
                remaining.append((entry, signals))
                continue
            selected.add(entry.key)
            discovered.append(entry)
            known.absorb(signals)
            changed = True
        pending = remaining

    discovered.sort(key=_related_sort_key)
    return seeds + discovered
