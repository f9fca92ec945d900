"""Fuzzy matching used to filter dashboard rows.

A pattern is split on whitespace into atoms, and every atom must match.
An atom is fuzzy by default: its characters must appear in order in the
haystack. These prefixes and suffixes change how an atom matches:

* ``'text`` matches a substring
* ``^text`` matches a prefix
* ``text$`` matches a suffix
* ``^text$`` matches the whole haystack
* ``!text`` must not appear as a substring

Case is smart: an atom holding an upper-case letter matches case-sensitively,
otherwise case is ignored. Accents are stripped from the haystack unless the
atom itself carries them.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from enum import Enum

_SCORE_MATCH = 16
_GAP_START = 3
_GAP_EXTENSION = 1
_BONUS_BOUNDARY = 8
_BONUS_CAMEL = 7
_BONUS_CONSECUTIVE = 4
_FIRST_CHAR_MULTIPLIER = 2
_NEG_INF = -(1 << 30)


class _Kind(Enum):
    FUZZY = "fuzzy"
    SUBSTRING = "substring"
    PREFIX = "prefix"
    SUFFIX = "suffix"
    EXACT = "exact"


@dataclass(frozen=True)
class _Atom:
    needle: str
    kind: _Kind
    negative: bool
    case_sensitive: bool
    normalize: bool


def _strip_accent(char: str) -> str:
    decomposed = unicodedata.normalize("NFKD", char)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base[:1] if base else char


def _normalize(text: str) -> str:
    return "".join(_strip_accent(c) for c in text)


def _parse_atom(raw: str) -> _Atom | None:
    negative = raw.startswith("!")
    if negative:
        raw = raw[1:]
    kind = _Kind.SUBSTRING if negative else _Kind.FUZZY
    if raw.startswith("^"):
        kind = _Kind.PREFIX
        raw = raw[1:]
    elif raw.startswith("'"):
        kind = _Kind.SUBSTRING
        raw = raw[1:]
    if raw.endswith("$") and not raw.endswith("\\$"):
        kind = _Kind.EXACT if kind is _Kind.PREFIX else _Kind.SUFFIX
        raw = raw[:-1]
    raw = raw.replace("\\$", "$")
    if not raw:
        return None
    return _Atom(
        needle=raw,
        kind=kind,
        negative=negative,
        case_sensitive=any(c.isupper() for c in raw),
        normalize=_normalize(raw) == raw,
    )


def _bonus(prev: str | None, cur: str) -> int:
    if not cur.isalnum():
        return 0
    if prev is None or not prev.isalnum():
        return _BONUS_BOUNDARY
    if prev.islower() and cur.isupper():
        return _BONUS_CAMEL
    if not prev.isdigit() and cur.isdigit():
        return _BONUS_CAMEL
    return 0


def _bonuses(text: str) -> list[int]:
    prevs: list[str | None] = [None, *text[:-1]]
    return [_bonus(p, c) for p, c in zip(prevs, text)]


def _run_score(bonuses: list[int], start: int, length: int) -> int:
    first = _SCORE_MATCH + bonuses[start] * _FIRST_CHAR_MULTIPLIER
    rest = sum(
        _SCORE_MATCH + max(bonuses[i], _BONUS_CONSECUTIVE)
        for i in range(start + 1, start + length)
    )
    return first + rest


def _substring_score(needle: str, hay: str, bonuses: list[int]) -> int | None:
    best: int | None = None
    pos = hay.find(needle)
    while pos >= 0:
        score = _run_score(bonuses, pos, len(needle))
        best = score if best is None else max(best, score)
        pos = hay.find(needle, pos + 1)
    return best


def _is_subsequence(needle: str, hay: str) -> bool:
    chars = iter(hay)
    return all(c in chars for c in needle)


def _fuzzy_score(needle: str, hay: str, bonuses: list[int]) -> int | None:
    if not _is_subsequence(needle, hay):
        return None
    first = needle[0]
    row = [
        _SCORE_MATCH + bonuses[i] * _FIRST_CHAR_MULTIPLIER if c == first else _NEG_INF
        for i, c in enumerate(hay)
    ]
    for target in needle[1:]:
        new_row = [_NEG_INF] * len(hay)
        gap_best = _NEG_INF
        for i, char in enumerate(hay):
            if i >= 2:
                gap_best = max(gap_best - _GAP_EXTENSION, row[i - 2] - _GAP_START)
            if char != target or i == 0:
                continue
            candidates = []
            if row[i - 1] > _NEG_INF:
                candidates.append(
                    row[i - 1] + _SCORE_MATCH + max(bonuses[i], _BONUS_CONSECUTIVE)
                )
            if gap_best > _NEG_INF // 2:
                candidates.append(gap_best + _SCORE_MATCH + bonuses[i])
            if candidates:
                new_row[i] = max(candidates)
        row = new_row
    best = max(row)
    return best if best > _NEG_INF // 2 else None


def _atom_score(atom: _Atom, haystack: str) -> int | None:
    hay = _normalize(haystack) if atom.normalize else haystack
    needle = atom.needle
    if not atom.case_sensitive:
        hay = hay.lower()
        needle = needle.lower()
    if len(needle) > len(hay):
        return None
    bonuses = _bonuses(hay)
    if atom.kind is _Kind.FUZZY:
        return _fuzzy_score(needle, hay, bonuses)
    if atom.kind is _Kind.SUBSTRING:
        return _substring_score(needle, hay, bonuses)
    if atom.kind is _Kind.PREFIX:
        return _run_score(bonuses, 0, len(needle)) if hay.startswith(needle) else None
    if atom.kind is _Kind.SUFFIX:
        start = len(hay) - len(needle)
        return _run_score(bonuses, start, len(needle)) if hay.endswith(needle) else None
    return _run_score(bonuses, 0, len(needle)) if hay == needle else None


def fuzzy_score(pattern: str, haystack: str) -> int | None:
    """Score ``haystack`` against ``pattern``; None when it does not match.

    Higher scores mean better matches. A pattern with no atoms matches
    everything with a score of 0.
    """
    total = 0
    for raw in pattern.split():
        atom = _parse_atom(raw)
        if atom is None:
            continue
        score = _atom_score(atom, haystack)
        if atom.negative:
            if score is not None:
                return None
            continue
        if score is None:
            return None
        total += score
    return total