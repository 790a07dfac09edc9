"""Relation closure tests."""

from __future__ import annotations

from cargomatch.engine.relations import KnownNames, expand_related_entries, is_related, relation_signals
from cargomatch.engine.types import EntityType

from .conftest import make_entry


def keys(entries):
    return {entry.key for entry in entries}


def test_no_seeds_means_no_results(relation_fixture):
    assert expand_related_entries(relation_fixture, []) == []


def test_company_seed_reaches_whole_tree(relation_fixture):
    acme = relation_fixture[0]
    expanded = expand_related_entries(relation_fixture, [acme])
    assert [entry.page_name for entry in expanded] == [
        "Acme",
        "Acme Cam",
        "Acme Home",
        "Acme Breach 2025",
    ]


def test_incident_seed_reaches_referenced_records(relation_fixture):
    incident = relation_fixture[3]
    expanded = expand_related_entries(relation_fixture, [incident])
    assert expanded[0] is incident
    assert {entry.page_name for entry in expanded} == {"Acme Breach 2025", "Acme", "Acme Home", "Acme Cam"}


def test_every_entry_expands_idempotently(relation_fixture):
    for entry in relation_fixture:
        expanded = expand_related_entries(relation_fixture, [entry])
        assert entry.key in keys(expanded)
        again = expand_related_entries(relation_fixture, expanded)
        assert keys(again) == keys(expanded)


def test_expansion_contains_seeds(relation_fixture):
    seeds = [relation_fixture[4], relation_fixture[2]]
    expanded = expand_related_entries(relation_fixture, seeds)
    assert keys(seeds) <= keys(expanded)
    assert expanded[:2] == seeds


def test_duplicate_seeds_are_collapsed(relation_fixture):
    other = relation_fixture[4]
    assert expand_related_entries(relation_fixture, [other, other]) == [other]


def test_transitive_chain_through_product_line():
    company = make_entry(EntityType.COMPANY, "Globex")
    product_line = make_entry(EntityType.PRODUCT_LINE, "Globex Cloud", company="Globex")
    product = make_entry(EntityType.PRODUCT, "Cloud Drive", product_line="Globex Cloud")
    incident = make_entry(EntityType.INCIDENT, "Drive Outage", product="Cloud Drive")
    entries = [incident, product, product_line, company]

    expanded = expand_related_entries(entries, [company])

    assert [entry.page_name for entry in expanded] == ["Globex", "Cloud Drive", "Globex Cloud", "Drive Outage"]


def test_seed_references_join_known_names():
    product = make_entry(EntityType.PRODUCT, "Widget", company="Initech; Initrode")
    initrode = make_entry(EntityType.COMPANY, "Initrode")
    unrelated = make_entry(EntityType.COMPANY, "Hooli")

    expanded = expand_related_entries([product, initrode, unrelated], [product])

    assert [entry.page_name for entry in expanded] == ["Widget", "Initrode"]


def test_company_is_not_reached_through_its_own_references():
    subsidiary = make_entry(EntityType.COMPANY, "Sub Co", company="Parent Co")
    parent = make_entry(EntityType.COMPANY, "Parent Co")
    known = KnownNames(companies={"parent co"})
    assert not is_related(relation_signals(subsidiary), known)
    assert is_related(relation_signals(parent), known)


def test_malformed_references_are_ignored():
    product = make_entry(EntityType.PRODUCT, "Gizmo", company=["Acme"])
    signals = relation_signals(product)
    assert signals.company_refs == set()
    assert signals.product_names == {"gizmo"}
