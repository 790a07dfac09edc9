"""Marketplace domain registry tests."""

from __future__ import annotations

from cargomatch.engine.ecommerce import (
    DEFAULT_DOMAIN_FAMILIES,
    get_ecommerce_family,
    is_domain_or_subdomain,
    is_known_ecommerce_host,
)


def test_known_ecommerce_hosts():
    assert is_known_ecommerce_host("smile.amazon.co.uk")
    assert is_known_ecommerce_host("www.amazon.com.au")
    assert is_known_ecommerce_host("ebay.de")
    assert not is_known_ecommerce_host("shop.example.com")
    assert not is_known_ecommerce_host("")


def test_family_lookup():
    assert get_ecommerce_family("www.amazon.de") == "amazon"
    assert get_ecommerce_family("m.ebay.co.uk") == "ebay"
    assert get_ecommerce_family("notamazon.com") is None


def test_domain_or_subdomain_requires_label_boundary():
    assert is_domain_or_subdomain("a.b.example.com", "example.com")
    assert is_domain_or_subdomain("www.example.com", "example.com")
    assert not is_domain_or_subdomain("badexample.com", "example.com")


def test_registry_is_overridable():
    families = {"shop.test": "testshop"}
    assert get_ecommerce_family("eu.shop.test", families) == "testshop"
    assert get_ecommerce_family("amazon.com", families) is None
    assert is_known_ecommerce_host("amazon.com", {}) is False


def test_default_domains_cover_both_families():
    assert DEFAULT_DOMAIN_FAMILIES["amazon.co.jp"] == "amazon"
    assert DEFAULT_DOMAIN_FAMILIES["ebay.com"] == "ebay"
