"""Registry of marketplace domains treated as aliases of each other."""

from __future__ import annotations

from typing import Mapping, Optional

from .urlnorm import normalize_hostname

_AMAZON_TLDS = (
    "com",
    "ca",
    "com.mx",
    "com.br",
    "co.uk",
    "de",
    "fr",
    "it",
    "es",
    "nl",
    "se",
    "pl",
    "com.be",
    "com.tr",
    "eg",
    "sa",
    "ae",
    "in",
    "sg",
    "com.au",
    "co.jp",
)

_EBAY_TLDS = (
    "com",
    "ca",
    "com.mx",
    "com.br",
    "co.uk",
    "de",
    "fr",
    "it",
    "es",
    "nl",
    "be",
    "pl",
    "ie",
    "at",
    "ch",
    "com.au",
    "com.hk",
    "ph",
    "my",
    "sg",
)

DEFAULT_DOMAIN_FAMILIES: dict[str, str] = {
    **{f"amazon.{tld}": "amazon" for tld in _AMAZON_TLDS},
    **{f"ebay.{tld}": "ebay" for tld in _EBAY_TLDS},
}


def is_domain_or_subdomain(hostname: str, domain: str) -> bool:
    """Return True when ``hostname`` is ``domain`` or one of its subdomains."""

    host = normalize_hostname(hostname)
    target = normalize_hostname(domain)
    if not host or not target:
        return False
    return host == target or host.endswith(f".{target}")


def get_ecommerce_family(
    hostname: str,
    family_map: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Return the marketplace family of ``hostname`` or ``None``."""

    families = DEFAULT_DOMAIN_FAMILIES if family_map is None else family_map
    host = normalize_hostname(hostname)
    for domain, family in families.items():
        if is_domain_or_subdomain(host, domain):
            return family
    return None


def is_known_ecommerce_host(
    hostname: str,
    family_map: Optional[Mapping[str, str]] = None,
) -> bool:
    return get_ecommerce_family(hostname, family_map) is not None
