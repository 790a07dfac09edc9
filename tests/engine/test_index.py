"""End-to-end matching pipeline tests."""

from __future__ import annotations

from cargomatch.engine.index import match_by_page_context, match_by_url, prioritize_seeds
from cargomatch.engine.types import EntityType, EntryMatch, MatchType, PageContext

from .conftest import make_entry

AIRPODS_TITLE = "Apple AirPods 4 Wireless Earbuds : Amazon.com.au: Electronics"


def airpods_dataset():
    return [
        make_entry(EntityType.COMPANY, "Apple", website="https://www.apple.com/"),
        make_entry(EntityType.PRODUCT_LINE, "AirPods", company="Apple", website="https://www.apple.com/airpods/"),
        make_entry(EntityType.INCIDENT, "Earbud Data Exposure", company="Apple", product_line="AirPods"),
        make_entry(EntityType.COMPANY, "Unrelated Co", website="https://unrelated.example/"),
    ]


def airpods_context():
    return PageContext(
        url="https://www.amazon.com.au/Apple-AirPods-4/dp/B0DGHYDZR9",
        hostname="www.amazon.com.au",
        title=AIRPODS_TITLE,
        meta={"description": AIRPODS_TITLE},
    )


def test_match_by_url_returns_acme_tree(relation_fixture, engine_config):
    results = match_by_url(relation_fixture, "https://acme.com/security", engine_config)
    names = {entry.page_name for entry in results}
    assert names == {"Acme", "Acme Home", "Acme Cam", "Acme Breach 2025"}
    assert "OtherCorp" not in names


def test_unmatched_non_marketplace_page_returns_nothing(relation_fixture, engine_config):
    context = PageContext(
        url="https://news.example/acme-cam-review",
        hostname="news.example",
        title="Acme Cam review",
    )
    assert match_by_page_context(relation_fixture, context, engine_config) == []


def test_marketplace_listing_matches_by_text(engine_config):
    results = match_by_page_context(airpods_dataset(), airpods_context(), engine_config)
    names = [entry.page_name for entry in results]
    assert set(names) == {"AirPods", "Apple", "Earbud Data Exposure"}
    assert names[-1] == "Earbud Data Exposure"


def test_marketplace_listing_with_marketplace_company_entry(engine_config):
    entries = [*airpods_dataset(), make_entry(EntityType.COMPANY, "Amazon", website="https://www.amazon.com/")]
    results = match_by_page_context(entries, airpods_context(), engine_config)
    names = [entry.page_name for entry in results]
    # The marketplace's own record arrives via the family alias; the product line is promoted ahead of it.
    assert names[0] == "AirPods"
    assert {"Apple", "AirPods", "Earbud Data Exposure", "Amazon"} <= set(names)


def test_marketplace_alias_disabled_still_falls_back_to_text(engine_config):
    config = engine_config.with_overrides({"enable_ecommerce_family_alias_matching": False})
    entries = [*airpods_dataset(), make_entry(EntityType.COMPANY, "Amazon", website="https://www.amazon.com/")]
    names = {entry.page_name for entry in match_by_page_context(entries, airpods_context(), config)}
    assert names == {"Apple", "AirPods", "Earbud Data Exposure"}


def test_hostname_falls_back_to_url(engine_config):
    context = PageContext(url="https://www.amazon.com.au/dp/X", title=AIRPODS_TITLE)
    names = {entry.page_name for entry in match_by_page_context(airpods_dataset(), context, engine_config)}
    assert "AirPods" in names


def test_company_site_promotes_named_product(relation_fixture, engine_config):
    context = PageContext(
        url="https://acme.com/shop",
        hostname="acme.com",
        title="Buy the Acme Cam today",
    )
    results = match_by_page_context(relation_fixture, context, engine_config)
    assert [entry.page_name for entry in results[:2]] == ["Acme Cam", "Acme"]


def test_prioritize_seeds_orders_and_dedupes():
    company = make_entry(EntityType.COMPANY, "Acme", website="https://acme.com/")
    product = make_entry(EntityType.PRODUCT, "Acme Cam", website="https://acme.com/cam")
    line = make_entry(EntityType.PRODUCT_LINE, "Acme Home")
    url_matches = [
        EntryMatch(product, MatchType.EXACT, "/cam", 3000),
        EntryMatch(company, MatchType.PARTIAL, "/", 2001),
    ]

    seeds = prioritize_seeds(url_matches, [company, line, product])

    assert seeds == [product, line, company]


def test_prioritize_seeds_without_company_keeps_text_order():
    line = make_entry(EntityType.PRODUCT_LINE, "Acme Home", website="https://acme.com/home")
    other = make_entry(EntityType.COMPANY, "Globex")
    url_matches = [EntryMatch(line, MatchType.PARTIAL, "/home", 2005)]

    assert prioritize_seeds(url_matches, [other]) == [other, line]


def test_oversized_entity_in_title_does_not_break_matching(relation_fixture, engine_config):
    context = PageContext(url="https://acme.com/", title="Acme &#" + "1" * 5000 + ";")
    names = {entry.page_name for entry in match_by_page_context(relation_fixture, context, engine_config)}
    assert "Acme" in names
