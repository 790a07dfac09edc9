"""Engine configuration loading tests."""

from __future__ import annotations

from cargomatch.engine.config import DEFAULTS, load_config
from cargomatch.engine.types import EntityType, MatchType


def test_defaults(engine_config):
    assert not engine_config.subdomain_matching
    assert engine_config.ecommerce_alias_matching
    assert engine_config.url_seed_limit == 3
    assert engine_config.meta_seed_limit == 5
    assert engine_config.url_priority(MatchType.EXACT) == 3000
    assert engine_config.url_priority(MatchType.SUBDOMAIN) == 1000
    assert engine_config.type_boost(EntityType.PRODUCT_LINE) == 4
    assert engine_config.type_boost(EntityType.INCIDENT) == 0
    assert engine_config.marketplace_brand_denylist == frozenset({"amazon", "ebay"})
    assert engine_config.specific_path_domains == ["github.com"]


def test_yaml_overrides_merge_with_defaults(tmp_path):
    path = tmp_path / "engine.yaml"
    path.write_text(
        "enable_subdomain_matching: true\n"
        "page_context_weights:\n"
        "  title: 20\n"
        "ecommerce_domain_family_map:\n"
        "  shop.test: testshop\n",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.subdomain_matching
    assert config.page_context_weight("title") == 20
    assert config.page_context_weight("description") == 6
    assert config.ecommerce_domain_family_map == {"shop.test": "testshop"}


def test_missing_file_and_empty_yaml_use_defaults(tmp_path):
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")

    assert load_config(tmp_path / "absent.yaml").raw == DEFAULTS
    assert load_config(empty).raw == DEFAULTS


def test_with_overrides_returns_new_config(engine_config):
    changed = engine_config.with_overrides({"url_match_priority": {"partial": 5}})

    assert changed.url_priority(MatchType.PARTIAL) == 5000
    assert changed.url_priority(MatchType.EXACT) == 3000
    assert engine_config.url_priority(MatchType.PARTIAL) == 2000
