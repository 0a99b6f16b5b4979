"""Utilities for splitting a transcript into speaker turns."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple
import logging
import re

from ..core.types import (
    Resolved,
    SpeakingSlot,
    SpeechInstance,
    UnresolvedReference,
)
from ..resolution.resolver import SpeakerResolver, alias_key

LOGGER = logging.getLogger(__name__)

_TITLES = (
    r"(?:Yang\s+Berhormat|Y\.Bhg\.|Datuk\s+Seri|Dato['’]\s+Sri|Dato['’]\s+Seri|Tan\s+Sri|Toh\s+Puan"
    r"|Datuk|Dato['’]?|Tuan|Puan|YB|Dr\.?|Senator|Kapten|Ir\.|Ts\.)"
)

# Header forms in priority order; each is anchored at the start of a line.
_BRACKET_HEADER = re.compile(
    r"[ \t]*(?:\d+\.\s+)?(?P<outer>[A-Z][^\[\]\n:]{1,120}?)\s*\[(?P<inner>[^\[\]\n]{2,120})\]\s*:"
)
_PAREN_HEADER = re.compile(
    rf"[ \t]*(?:\d+\.\s+)?(?P<name>{_TITLES}\s+[^()\[\]:\n]+?)\s*\((?P<constituency>[^()\n]+)\)\s*:"
)
_TITLE_HEADER = re.compile(rf"[ \t]*(?P<name>{_TITLES}\s+[^()\[\]:\n]{{3,80}}?)\s*:")

_PRESIDING_OFFICER = re.compile(r"yang\s+di-pertua|pengerusi|\bspeaker\b", re.IGNORECASE)
_ROLE_KEYWORDS = (
    r"(?:Timbalan\s+)?Perdana\s+Menteri",
    r"(?:Timbalan\s+)?Menteri(?:\s+Besar)?",
    r"Ketua\s+Menteri",
    r"Setiausaha\s+Parlimen",
)
_ROLE_PATTERN = re.compile(rf"^(?:{'|'.join(_ROLE_KEYWORDS)})\b", re.IGNORECASE)
_NON_CONSTITUENCY = re.compile(
    r"^(?:tuan|puan|datuk|dato['’]?|senator|dr\.?|yang)\b|\b(?:menteri|timbalan)\b", re.IGNORECASE
)
_STAGE_DIRECTIONS = re.compile(
    r"\[[^\[\]\n]*?(?:riuh|tepuk|ketawa|gelak|disampuk|mencelah|bangun|membaca|dibacakan|bacaan)[^\[\]\n]*\]",
    re.IGNORECASE,
)
_TIME_MARKER = re.compile(r"■\s*\d{3,4}")
_NOT_A_NAME = re.compile(r"\b(?:minta|meminta|bertanya|menyatakan|hadir)\b", re.IGNORECASE)
_MULTISPACE = re.compile(r"[ \t]{2,}")
_BLANK_LINES = re.compile(r"\n\s*\n(?:\s*\n)+")

EMPTY_SPEECH = "(No speech content captured)"


@dataclass(slots=True)
class _Header:
    position: int
    length: int
    line_number: int
    raw: str
    name: Optional[str]
    constituency: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_presiding_officer(self) -> bool:
        return self.name is None


@dataclass(slots=True)
class SpeakerExtraction:
    """Speaker turns of one transcript."""

    instances: List[SpeechInstance] = field(default_factory=list)
    speakers: List[SpeakingSlot] = field(default_factory=list)
    unresolved: List[UnresolvedReference] = field(default_factory=list)

    @property
    def unresolved_names(self) -> List[str]:
        return [reference.display_name for reference in self.unresolved]

    def instances_for(self, legislator_id: str) -> List[SpeechInstance]:
        return [instance for instance in self.instances if instance.legislator_id == legislator_id]


def _clean(value: str) -> str:
    return " ".join(value.split()).strip(" :-,")


def _split_role(outer: str, inner: str) -> Tuple[str, Optional[str], Optional[str]]:
    """Return ``(name, constituency, role)`` for a ``outer [inner]:`` header."""

    if _ROLE_PATTERN.match(outer):
        return inner, None, outer
    if _NON_CONSTITUENCY.search(inner):
        return outer, None, None
    return outer, inner, None


def _match_header(line: str) -> Optional[Tuple[re.Match[str], Optional[str], Optional[str], Optional[str]]]:
    match = _BRACKET_HEADER.match(line)
    if match and not _STAGE_DIRECTIONS.search(match.group(0)):
        name, constituency, role = _split_role(_clean(match.group("outer")), _clean(match.group("inner")))
        return match, name, constituency, role
    match = _PAREN_HEADER.match(line)
    if match and not _NOT_A_NAME.search(match.group("name")):
        constituency = _clean(match.group("constituency"))
        if _NON_CONSTITUENCY.search(constituency):
            return match, _clean(match.group("name")), None, constituency
        return match, _clean(match.group("name")), constituency, None
    match = _TITLE_HEADER.match(line)
    if match and not _NOT_A_NAME.search(match.group("name")):
        return match, _clean(match.group("name")), None, None
    return None


def iter_headers(text: str) -> Iterator[_Header]:
    """Yield every speaker header in ``text``, presiding officers included."""

    offset = 0
    for line_number, line in enumerate(text.split("\n"), start=1):
        found = _match_header(line)
        if found:
            match, name, constituency, role = found
            raw = match.group(0)
            leading = len(raw) - len(raw.lstrip())
            header = _Header(
                position=offset + leading,
                length=len(raw) - leading,
                line_number=line_number,
                raw=raw.strip(),
                name=name,
                constituency=constituency,
                role=role,
            )
            if _PRESIDING_OFFICER.search(raw):
                header.name = None
                yield header
            elif header.name:
                yield header
        offset += len(line) + 1


def clean_speech(raw_text: str) -> str:
    text = _STAGE_DIRECTIONS.sub("", raw_text)
    text = _TIME_MARKER.sub("", text)
    text = _MULTISPACE.sub(" ", text)
    text = "\n".join(line.rstrip() for line in text.split("\n"))
    return _BLANK_LINES.sub("\n\n", text).strip()


def _context(text: str, header: _Header, width: int) -> str:
    start = max(0, header.position - width)
    end = min(len(text), header.position + header.length + width)
    return " ".join(text[start:end].split())


def extract_speakers(text: str, resolver: SpeakerResolver, *, context_chars: int = 160) -> SpeakerExtraction:
    """Resolve every speaker turn in ``text``.

    Turns by presiding officers are skipped but still end the previous
    speech. Distinct resolved speakers are ordered by first appearance and
    every distinct unresolved ``(name, constituency)`` pair is reported once.
    """

    headers = list(iter_headers(text))
    extraction = SpeakerExtraction()
    slots: Dict[str, SpeakingSlot] = {}
    unresolved_seen: Dict[Tuple[str, Optional[str]], UnresolvedReference] = {}
    instance_counts: Dict[str, int] = {}

    for index, header in enumerate(headers):
        if header.is_presiding_officer:
            continue
        assert header.name is not None
        end = headers[index + 1].position if index + 1 < len(headers) else len(text)
        speech = clean_speech(text[header.position + header.length : end]) or EMPTY_SPEECH
        outcome = resolver.resolve(header.name, header.constituency)

        if isinstance(outcome, Resolved):
            counter_key = outcome.legislator_id
            if outcome.legislator_id not in slots:
                legislator = resolver.roster.require(outcome.legislator_id)
                slots[outcome.legislator_id] = SpeakingSlot(
                    legislator_id=legislator.id,
                    legislator_name=legislator.canonical_name,
                    constituency=legislator.constituency,
                    speaking_order=len(slots) + 1,
                )
        else:
            key = alias_key(outcome.extracted_name, outcome.extracted_constituency)
            counter_key = f"unresolved:{key}"
            if key not in unresolved_seen:
                unresolved_seen[key] = UnresolvedReference(
                    outcome=outcome,
                    raw_header_text=header.raw,
                    speaking_order=len(slots) + 1,
                    source="speech",
                )
        instance_counts[counter_key] = instance_counts.get(counter_key, 0) + 1

        extraction.instances.append(
            SpeechInstance(
                position=header.position,
                line_number=header.line_number,
                captured_header=header.raw,
                speaker_name=header.name,
                context=_context(text, header, context_chars),
                text=speech,
                outcome=outcome,
                constituency=header.constituency,
                role=header.role,
                instance_number=instance_counts[counter_key],
            )
        )

    extraction.speakers = sorted(slots.values(), key=lambda slot: slot.speaking_order)
    extraction.unresolved = list(unresolved_seen.values())
    LOGGER.info(
        "Extracted %s speech instances from %s distinct speakers (%s unresolved)",
        len(extraction.instances),
        len(extraction.speakers),
        len(extraction.unresolved),
    )
    if not extraction.instances:
        LOGGER.warning("No speaker turns detected")
    return extraction


__all__ = [
    "EMPTY_SPEECH",
    "SpeakerExtraction",
    "clean_speech",
    "extract_speakers",
    "iter_headers",
]
