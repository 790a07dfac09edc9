"""URL parsing and canonicalization tests."""

from __future__ import annotations

import pytest

from cargomatch.engine.urlnorm import get_domain_root, normalize_hostname, normalize_path, safe_parse_url


def test_safe_parse_url_accepts_full_urls():
    parsed = safe_parse_url("https://www.Example.com/path?q=1")
    assert parsed is not None
    assert parsed.hostname == "www.example.com"
    assert parsed.path == "/path"


def test_safe_parse_url_retries_without_scheme():
    parsed = safe_parse_url("acme.com/security")
    assert parsed is not None
    assert parsed.scheme == "https"
    assert parsed.hostname == "acme.com"
    assert parsed.path == "/security"


@pytest.mark.parametrize("raw", [None, "", "   ", "not a url", "<script>", 17])
def test_safe_parse_url_rejects_garbage(raw):
    assert safe_parse_url(raw) is None


def test_normalize_hostname_strips_single_www():
    assert normalize_hostname("WWW.Ally.com") == "ally.com"
    assert normalize_hostname("www.www.ally.com") == "www.ally.com"
    assert normalize_hostname("invest.ally.com") == "invest.ally.com"


def test_normalize_path():
    assert normalize_path("") == "/"
    assert normalize_path("/") == "/"
    assert normalize_path("//a//b///") == "/a/b"
    assert normalize_path("/Org/Repo/") == "/Org/Repo"


def test_get_domain_root_is_last_two_labels():
    assert get_domain_root("shop.acme.com") == "acme.com"
    assert get_domain_root("acme.com") == "acme.com"
    assert get_domain_root("amazon.co.uk") == "co.uk"
