"""Accent-insensitive, typo-tolerant professor search."""
from __future__ import annotations

import re
import unicodedata
from typing import Any, Iterable, List, Sequence

from ..config import MAX_EDIT_DISTANCE

_DISALLOWED = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")

SEARCH_FIELDS = ("name", "university", "department")

COMMON_ABBREVIATIONS = {
    "ing": "ingeniería",
    "eco": "economía",
    "adm": "administración",
    "ucab": "universidad católica andrés bello",
    "unimet": "universidad metropolitana",
    "usb": "universidad simón bolívar",
    "ucv": "universidad central de venezuela",
    "uneg": "universidad de oriente",
    "ula": "universidad de los andes",
    "unefa": "universidad nacional experimental de la fuerza armada",
}

COMMON_CORRECTIONS = {
    "ingenieria": "ingeniería",
    "economia": "economía",
    "administracion": "administración",
    "matematicas": "matemáticas",
    "fisica": "física",
    "quimica": "química",
    "electronica": "electrónica",
    "computacion": "computación",
    "programacion": "programación",
    "estadistica": "estadística",
}


def normalize_text(text: str | None) -> str:
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    cleaned = _DISALLOWED.sub("", stripped)
    return _WHITESPACE.sub(" ", cleaned).strip()


def expand_abbreviation(text: str) -> str:
    return COMMON_ABBREVIATIONS.get(normalize_text(text), text)


def apply_correction(text: str) -> str:
    return COMMON_CORRECTIONS.get(normalize_text(text), text)


def levenshtein_distance(a: str, b: str) -> int:
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            substitution = previous[j - 1] + (char_a != char_b)
            current.append(min(previous[j] + 1, current[j - 1] + 1, substitution))
        previous = current
    return previous[-1]


def _value(item: Any, name: str) -> str:
    if isinstance(item, dict):
        return item.get(name) or ""
    return getattr(item, name, None) or ""


def _normalized_fields(item: Any) -> List[str]:
    return [normalize_text(_value(item, name)) for name in SEARCH_FIELDS]


def _match_tiers(indexed: List[tuple], needle: str) -> List[Any]:
    results = [p for p, fields in indexed if needle in fields]
    if results:
        return results

    results = [p for p, fields in indexed if any(needle in value for value in fields)]
    if results:
        return results

    return [
        p
        for p, fields in indexed
        if any(levenshtein_distance(value, needle) <= MAX_EDIT_DISTANCE for value in fields)
    ]


def filter_professors(professors: Sequence[Any], query: str | None) -> List[Any]:
    """Return professors matching ``query``.

    Matching runs in tiers and stops at the first tier with results: exact
    match on a normalised field, then substring, then edit distance. Only when
    the plain query finds nobody is a known abbreviation (``ucab``) retried as
    its expansion.
    """

    if not query or not normalize_text(query):
        return list(professors)

    needle = normalize_text(query)
    indexed = [(professor, _normalized_fields(professor)) for professor in professors]

    results = _match_tiers(indexed, needle)
    expanded = normalize_text(expand_abbreviation(query))
    if not results and expanded != needle:
        results = _match_tiers(indexed, expanded)
    return results


def get_suggestions(query: str | None, options: Iterable[str]) -> List[str]:
    needle = normalize_text(query)
    if not needle:
        return []

    normalized = [(option, normalize_text(option)) for option in options]
    exact = [opt for opt, value in normalized if value == needle]
    prefix = [opt for opt, value in normalized if value.startswith(needle)]
    contains = [opt for opt, value in normalized if needle in value]
    similar = [
        opt
        for opt, value in normalized
        if levenshtein_distance(value, needle) <= MAX_EDIT_DISTANCE
    ]
    return list(dict.fromkeys(exact + prefix + contains + similar))
