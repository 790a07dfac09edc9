"""URL-based matching of dataset entries against the visited page."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import SplitResult

from .config import EngineConfig, load_config
from .ecommerce import get_ecommerce_family, is_domain_or_subdomain
from .types import Entry, EntryMatch, MatchType, UrlMatchDetail
from .urlnorm import get_domain_root, normalize_hostname, normalize_path, safe_parse_url


def classify_url_match(
    visited: SplitResult,
    candidate: SplitResult,
    config: EngineConfig | None = None,
) -> Optional[UrlMatchDetail]:
    """Classify how ``visited`` relates to a candidate record's website.

    Returns ``None`` when the two URLs are unrelated.
    """

    engine_config = config or load_config(None)
    visited_host = normalize_hostname(visited.hostname or "")
    candidate_host = normalize_hostname(candidate.hostname or "")
    visited_path = normalize_path(visited.path)
    candidate_path = normalize_path(candidate.path)

    if visited_host == candidate_host:
        if visited_path == candidate_path:
            return UrlMatchDetail(MatchType.EXACT, candidate_path, visited_host, candidate_host)
        prefix = "/" if candidate_path == "/" else f"{candidate_path}/"
        if visited_path.startswith(prefix):
            # Bare-domain websites across a www. prefix rank as subdomain matches when enabled.
            if (
                candidate_path == "/"
                and engine_config.subdomain_matching
                and (visited.hostname or "").lower() != (candidate.hostname or "").lower()
            ):
                return UrlMatchDetail(MatchType.SUBDOMAIN, candidate_path, visited_host, candidate_host)
            return UrlMatchDetail(MatchType.PARTIAL, candidate_path, visited_host, candidate_host)

    if engine_config.subdomain_matching:
        if visited_host != candidate_host and get_domain_root(visited_host) == get_domain_root(candidate_host):
            return UrlMatchDetail(MatchType.SUBDOMAIN, None, visited_host, candidate_host)

    if engine_config.ecommerce_alias_matching:
        families = engine_config.ecommerce_domain_family_map
        visited_family = get_ecommerce_family(visited_host, families)
        candidate_family = get_ecommerce_family(candidate_host, families)
        if visited_family and visited_family == candidate_family:
            return UrlMatchDetail(
                MatchType.SUBDOMAIN,
                None,
                visited_host,
                candidate_host,
                ecommerce_family_alias=True,
            )

    return None


def score_url_match(detail: UrlMatchDetail, config: EngineConfig | None = None) -> int:
    """Score a match: tier priority, plus matched-path length for partial matches."""

    engine_config = config or load_config(None)
    base = engine_config.url_priority(detail.match_type)
    if detail.match_type is MatchType.PARTIAL:
        return base + len(detail.matched_path or "")
    return base


def match_reasons(detail: UrlMatchDetail) -> List[str]:
    if detail.match_type is MatchType.EXACT:
        return ["host_equal", "path_equal"]
    if detail.match_type is MatchType.PARTIAL:
        return ["host_equal", "path_prefix"]
    if detail.ecommerce_family_alias:
        return ["ecommerce_family_alias", "subdomain_match"]
    return ["root_domain_equal", "subdomain_match"]


def _is_path_match(detail: UrlMatchDetail) -> bool:
    # Same-host matches carry a matched path; cross-host subdomain and alias matches do not.
    return bool(detail.matched_path)


def _prune_shallow_path_matches(
    matches: Sequence[Tuple[Entry, UrlMatchDetail]],
    specific_path_domains: Sequence[str],
) -> List[Tuple[Entry, UrlMatchDetail]]:
    """Drop path matches shallower than the deepest one on the same host.

    Only hosts under ``specific_path_domains`` are pruned, so that a
    repository page on a code host is not outranked by the code host's own
    company record.
    """

    def is_specific(host: str) -> bool:
        return any(is_domain_or_subdomain(host, domain) for domain in specific_path_domains)

    deepest: Dict[str, int] = {}
    for _, detail in matches:
        if not _is_path_match(detail) or not is_specific(detail.candidate_host):
            continue
        length = len(detail.matched_path or "")
        if length > deepest.get(detail.candidate_host, 0):
            deepest[detail.candidate_host] = length

    kept = []
    for entry, detail in matches:
        if _is_path_match(detail) and detail.candidate_host in deepest:
            if len(detail.matched_path or "") < deepest[detail.candidate_host]:
                continue
        kept.append((entry, detail))
    return kept


def match_entries_by_url(
    entries: Sequence[Entry],
    visited_url: str,
    limit: int = 3,
    config: EngineConfig | None = None,
) -> List[EntryMatch]:
    """Return the best URL matches for ``visited_url``, highest score first."""

    engine_config = config or load_config(None)
    visited = safe_parse_url(visited_url)
    if visited is None:
        return []

    classified: List[Tuple[Entry, UrlMatchDetail]] = []
    for entry in entries:
        candidate = safe_parse_url(entry.website)
        if candidate is None:
            continue
        detail = classify_url_match(visited, candidate, engine_config)
        if detail is None:
            continue
        classified.append((entry, detail))

    pruned = _prune_shallow_path_matches(classified, engine_config.specific_path_domains)
    matches = [
        EntryMatch(
            entry=entry,
            match_type=detail.match_type,
            matched_path=detail.matched_path,
            score=score_url_match(detail, engine_config),
            reasons=match_reasons(detail),
        )
        for entry, detail in pruned
    ]
    matches.sort(key=lambda match: (-match.score, match.entry.page_name, match.entry.page_id))
    return matches[: max(limit, 0)]
