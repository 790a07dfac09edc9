"""Configuration helpers for the matching engine."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from .ecommerce import DEFAULT_DOMAIN_FAMILIES
from .text import normalize
from .types import EntityType, MatchType

# Config keys for the per-type page-context boosts.
_TYPE_BOOST_KEYS = {
    EntityType.COMPANY: "company",
    EntityType.PRODUCT_LINE: "product_line",
    EntityType.PRODUCT: "product",
}

URL_PRIORITY_SCALE = 1000

# Mappings replaced wholesale by overrides instead of merged key by key.
REPLACED_KEYS = frozenset({"ecommerce_domain_family_map"})


@dataclass(frozen=True)
class EngineConfig:
    """Typed wrapper around the engine configuration dictionary."""

    raw: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def with_overrides(self, overrides: Mapping[str, Any]) -> "EngineConfig":
        """Return a new configuration with ``overrides`` merged on top."""

        data = copy.deepcopy(self.raw)
        merge_into(data, dict(overrides))
        return EngineConfig(data)

    @property
    def subdomain_matching(self) -> bool:
        return bool(self.raw.get("enable_subdomain_matching", False))

    @property
    def ecommerce_alias_matching(self) -> bool:
        return bool(self.raw.get("enable_ecommerce_family_alias_matching", True))

    @property
    def url_seed_limit(self) -> int:
        return int(self.raw.get("url_seed_limit", 3))

    @property
    def meta_seed_limit(self) -> int:
        return int(self.raw.get("meta_seed_limit", 5))

    @property
    def min_entity_name_length(self) -> int:
        return int(self.raw.get("page_context_min_entity_name_length", 3))

    @property
    def marketplace_brand_denylist(self) -> frozenset[str]:
        denylist = self.raw.get("marketplace_brand_denylist", [])
        return frozenset(normalize(token) for token in denylist)

    @property
    def ecommerce_domain_family_map(self) -> Dict[str, str]:
        return self.raw.get("ecommerce_domain_family_map", {})

    @property
    def specific_path_domains(self) -> List[str]:
        return list(self.raw.get("specific_path_domains", []))

    @property
    def visible_incident_limit(self) -> int:
        return int(self.raw.get("visible_incident_limit", 4))

    def url_priority(self, match_type: MatchType) -> int:
        priorities = self.raw.get("url_match_priority", {})
        return int(priorities.get(match_type.value, 0)) * URL_PRIORITY_SCALE

    def page_context_weight(self, field_name: str) -> float:
        weights = self.raw.get("page_context_weights", {})
        return weights.get(field_name, 0)

    def type_boost(self, entity_type: EntityType) -> float:
        key = _TYPE_BOOST_KEYS.get(entity_type)
        if key is None:
            return 0
        return self.raw.get("page_context_type_boosts", {}).get(key, 0)


DEFAULTS: Dict[str, Any] = {
    "enable_subdomain_matching": False,
    "enable_ecommerce_family_alias_matching": True,
    "url_seed_limit": 3,
    "meta_seed_limit": 5,
    "url_match_priority": {
        "exact": 3,
        "partial": 2,
        "subdomain": 1,
    },
    "page_context_weights": {
        "title": 10,
        "meta_title": 9,
        "description": 6,
        "og_title": 9,
        "og_description": 6,
    },
    "page_context_type_boosts": {
        "company": 3,
        "product_line": 4,
        "product": 4,
    },
    "page_context_min_entity_name_length": 3,
    "marketplace_brand_denylist": ["amazon", "ebay"],
    "ecommerce_domain_family_map": dict(DEFAULT_DOMAIN_FAMILIES),
    "specific_path_domains": ["github.com"],
    "visible_incident_limit": 4,
}


def load_config(
    path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> EngineConfig:
    """Load configuration from YAML, merging with defaults."""

    data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as stream:
            user = yaml.safe_load(stream) or {}
        merge_into(data, user)

    if overrides:
        merge_into(data, dict(overrides))

    return EngineConfig(data)


def merge_into(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Recursively merge override into base dict."""

    for key, value in override.items():
        if key in REPLACED_KEYS:
            base[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_into(base[key], value)
        else:
            base[key] = value
