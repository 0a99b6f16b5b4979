"""Canonical forms for legislator names and constituencies."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple
import re

_WHITESPACE = re.compile(r"\s+")
_APOSTROPHES = re.compile(r"[‘’`]")
_PARENTHESISED = re.compile(r"\([^()]*\)")
_PUNCTUATION = re.compile(r"[.,@-]")

HONORIFIC_PREFIXES = (
    "yang amat berhormat",
    "yang berhormat",
    "yab",
    "yb",
    "tan sri",
    "toh puan",
    "tun",
    "dato' sri",
    "dato' seri",
    "datuk sri",
    "datuk seri",
    "dato'",
    "dato",
    "datuk",
    "seri",
    "sri",
    "tuan",
    "puan",
    "dr",
    "ir",
    "ts",
    "haji",
    "hajjah",
)
LINEAGE_CONNECTORS = ("bin", "binti", "a/l", "a/p")

_PREFIX_PATTERN = re.compile(
    r"^(?:" + "|".join(re.escape(prefix) for prefix in HONORIFIC_PREFIXES) + r")(?:\s+|$)"
)
_CONNECTOR_PATTERN = re.compile(
    r"\s+(?:" + "|".join(re.escape(connector) for connector in LINEAGE_CONNECTORS) + r")(?=\s)"
)


def _normalize_once(name: str) -> str:
    value = _APOSTROPHES.sub("'", name.lower())
    value = _PUNCTUATION.sub(" ", _PARENTHESISED.sub(" ", value))
    value = _WHITESPACE.sub(" ", value).strip()
    while True:
        stripped = _PREFIX_PATTERN.sub("", value, count=1)
        if stripped == value:
            break
        value = stripped
    value = _CONNECTOR_PATTERN.sub("", value)
    return _WHITESPACE.sub(" ", value).strip()


def normalize_name(name: str) -> str:
    """Lowercase ``name`` and drop honorifics, bracketed asides, punctuation
    and lineage connectors.

    ``normalize_name(normalize_name(x)) == normalize_name(x)`` holds for any
    input.
    """

    value = _normalize_once(name)
    while True:
        again = _normalize_once(value)
        if again == value:
            return value
        value = again


def normalize_constituency(constituency: str) -> str:
    return _WHITESPACE.sub(" ", constituency.lower()).strip()


_TITLES = (
    r"(?i:Yang\s+Amat\s+Berhormat|Yang\s+Berhormat|YAB|YB|Tan\s+Sri|Toh\s+Puan|Tun|Dato['’]?|Datuk"
    r"|Seri|Sri|Tuan|Puan|Haji|Hajjah|Dr\.?|Ir\.|Ts\.)"
)
_TITLE_RUN = rf"(?:{_TITLES}\s+)"
_NUMBERING = r"(?:(?:\d+\.|(?i:Soalan|Question)\s+\d+[.:])[ \t]*)?"
_NAME = r"(?P<name>[A-Z][^\[\]():\n\d]*?)"
# Names outside a title run have no opening delimiter, so they are limited to capitalised words.
_NAME_WORDS = r"(?P<name>[A-Z][A-Za-z'’@./-]*(?:[ \t]+(?:[A-Z][A-Za-z'’@./-]*|bin|binti|a/l|a/p|di))*)"
_BRACKET = r"\s*\[(?P<constituency>[^\[\]\n]+)\]"
_SPEAKER_CUE = r"(?=\s*:|\s+(?i:minta|bertanya|meminta))"

_BRACKET_AT_LINE_START = rf"^[ \t]*{_NUMBERING}(?P<header>{_TITLE_RUN}*{_NAME_WORDS}{_BRACKET})"
_BRACKET_AFTER_TITLE = rf"\b(?P<header>{_TITLE_RUN}+{_NAME}{_BRACKET})"
_BRACKET_UNTITLED = rf"\b(?P<header>{_NAME_WORDS}{_BRACKET}){_SPEAKER_CUE}"
_PARENTHESISED_FORM = rf"\b(?P<header>{_TITLE_RUN}+{_NAME_WORDS}(?:\s*\((?P<constituency>[^()\n]+)\))?)"

_BRACKET_SPONSORS = tuple(
    re.compile(pattern, re.MULTILINE)
    for pattern in (_BRACKET_AT_LINE_START, _BRACKET_AFTER_TITLE, _BRACKET_UNTITLED)
)
_BRACKET_SPONSORS_CUED = tuple(
    re.compile(pattern, re.MULTILINE)
    for pattern in (_BRACKET_AT_LINE_START + _SPEAKER_CUE, _BRACKET_AFTER_TITLE + _SPEAKER_CUE, _BRACKET_UNTITLED)
)
_PAREN_SPONSOR = re.compile(_PARENTHESISED_FORM, re.MULTILINE)
_PAREN_SPONSOR_CUED = re.compile(_PARENTHESISED_FORM + _SPEAKER_CUE, re.MULTILINE)

_LEADING_TITLES = re.compile(rf"^{_TITLE_RUN}+")
_OFFICE = re.compile(
    r"^(?:Timbalan\s+)?(?:Perdana\s+)?Menteri\b|^Ketua\s+Menteri\b|^Setiausaha\s+Parlimen\b", re.IGNORECASE
)


@dataclass(slots=True, frozen=True)
class SponsorMatch:
    """A ``name [constituency]`` pair lifted from an entry block."""

    name: str
    constituency: Optional[str]
    raw: str


def _sponsor_from(match: re.Match[str]) -> Optional[SponsorMatch]:
    name = _LEADING_TITLES.sub("", " ".join(match.group("name").split())).strip(" ,.-")
    if not name:
        return None
    constituency = match.group("constituency")
    if constituency is not None:
        constituency = " ".join(constituency.split()) or None
    if constituency and _OFFICE.match(name):
        # "Menteri Kewangan [Name]" carries the holder in brackets.
        name, constituency = constituency, None
    return SponsorMatch(name=name, constituency=constituency, raw=match.group("header").strip())


def _first_sponsor(pattern: re.Pattern[str], text: str) -> Optional[Tuple[int, SponsorMatch]]:
    for match in pattern.finditer(text):
        sponsor = _sponsor_from(match)
        if sponsor is not None:
            return match.start("header"), sponsor
    return None


def extract_sponsor(text: str, *, require_cue: bool = False) -> Optional[SponsorMatch]:
    """Find the sponsor named in ``text``.

    Bracketed ``Name [Constituency]`` headers come first and the earliest one
    wins, whether it opens a line (after an optional question number),
    follows a run of titles, or stands untitled before a colon or request
    verb. The parenthesised form is the fallback. With ``require_cue`` every
    form must be followed by a colon or a request verb such as ``minta``.
    """

    bracket_patterns = _BRACKET_SPONSORS_CUED if require_cue else _BRACKET_SPONSORS
    found = [hit for hit in (_first_sponsor(pattern, text) for pattern in bracket_patterns) if hit is not None]
    if found:
        return min(found, key=lambda hit: hit[0])[1]
    hit = _first_sponsor(_PAREN_SPONSOR_CUED if require_cue else _PAREN_SPONSOR, text)
    return hit[1] if hit else None


__all__ = [
    "HONORIFIC_PREFIXES",
    "LINEAGE_CONNECTORS",
    "SponsorMatch",
    "extract_sponsor",
    "normalize_constituency",
    "normalize_name",
]
