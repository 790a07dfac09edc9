"""Shared text utilities for the matching engine."""

from __future__ import annotations

import re
from typing import Any, List, Optional, Set

_ENTITY_RE = re.compile(r"&(#\d+|#[xX][0-9a-fA-F]+|[a-zA-Z]+);")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")
_REFERENCE_SPLIT_RE = re.compile(r"[,;|]")

NAMED_ENTITIES = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "nbsp": " ",
}


def _decode_entity(match: re.Match[str]) -> str:
    entity = match.group(1)
    if not entity.startswith("#"):
        return NAMED_ENTITIES.get(entity, match.group(0))
    try:
        if entity[:2] in ("#x", "#X"):
            code_point = int(entity[2:], 16)
        else:
            code_point = int(entity[1:])
        return chr(code_point)
    except (ValueError, OverflowError):
        # Out-of-range code points and digit strings past the int conversion limit.
        return match.group(0)


def decode_html_entities(text: str) -> str:
    """Decode the small set of HTML entities found in scraped metadata.

    Named ``amp``, ``lt``, ``gt``, ``quot``, ``apos`` and ``nbsp`` are
    supported, as are decimal and hexadecimal character references. Anything
    else is left untouched.
    """

    return _ENTITY_RE.sub(_decode_entity, text)


def normalize(text: Optional[str]) -> str:
    """Return a lower-cased, punctuation-free, single-spaced form of ``text``."""

    if not text or not isinstance(text, str):
        return ""
    lowered = decode_html_entities(text).lower()
    return _NON_ALNUM_RE.sub(" ", lowered).strip()


def tokenize(text: str) -> List[str]:
    """Split already-normalized text into tokens."""

    return [token for token in text.split(" ") if token]


def contains_whole_phrase(haystack: str, needle: str) -> bool:
    """Return True when the needle's tokens appear contiguously in the haystack."""

    haystack_tokens = tokenize(haystack)
    needle_tokens = tokenize(needle)
    if not haystack_tokens or not needle_tokens:
        return False
    width = len(needle_tokens)
    if width > len(haystack_tokens):
        return False
    for start in range(len(haystack_tokens) - width + 1):
        if haystack_tokens[start : start + width] == needle_tokens:
            return True
    return False


def split_references(value: Any) -> List[str]:
    """Split a free-text reference field into its trimmed, non-empty names."""

    if not isinstance(value, str):
        return []
    pieces = (piece.strip() for piece in _REFERENCE_SPLIT_RE.split(value))
    return [piece for piece in pieces if piece]


def normalize_reference_set(value: Any) -> Set[str]:
    """Return the normalized names referenced by a free-text field."""

    names = (normalize(piece) for piece in split_references(value))
    return {name for name in names if name}
