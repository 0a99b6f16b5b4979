"""Locating named sections inside a normalized transcript."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Pattern, Sequence, Tuple
import logging
import re

LOGGER = logging.getLogger(__name__)

DEFAULT_WINDOW = 10000

# A blank line followed by a line opening with three capitals is a new heading.
NEXT_HEADING_PATTERN = re.compile(r"\n\s*\n\s*[A-Z]{3}")


class BoundaryTier(str, Enum):
    """Which signal closed a section."""

    EXPLICIT_MARKER = "explicit_marker"
    NEXT_HEADING = "next_heading"
    LENGTH_CAP = "length_cap"


@dataclass(slots=True, frozen=True)
class SectionBounds:
    """Offsets of a located section; ``start`` is just past the marker."""

    marker_start: int
    start: int
    end: int
    tier: BoundaryTier

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


def find_section_end(
    text: str,
    start: int,
    *,
    end_markers: Sequence[Pattern[str]] = (),
    use_heading: bool = True,
    window: Optional[int] = DEFAULT_WINDOW,
) -> Tuple[int, BoundaryTier]:
    """Return the end offset of the section starting at ``start``.

    Tiers are tried in order and a later tier is only consulted when every
    earlier one found nothing: the earliest explicit ``end_markers`` match,
    then the generic all-caps heading heuristic, then a hard window.
    """

    explicit: Optional[int] = None
    for marker in end_markers:
        match = marker.search(text, start)
        if match and (explicit is None or match.start() < explicit):
            explicit = match.start()
    if explicit is not None:
        return explicit, BoundaryTier.EXPLICIT_MARKER

    if use_heading:
        heading = NEXT_HEADING_PATTERN.search(text, start)
        if heading:
            return heading.start(), BoundaryTier.NEXT_HEADING

    if window is None:
        return len(text), BoundaryTier.LENGTH_CAP
    return min(start + window, len(text)), BoundaryTier.LENGTH_CAP


def locate_section(
    text: str,
    start_marker: Pattern[str],
    *,
    end_markers: Sequence[Pattern[str]] = (),
    use_heading: bool = True,
    window: Optional[int] = DEFAULT_WINDOW,
    search_from: int = 0,
) -> Optional[SectionBounds]:
    """Find the first section introduced by ``start_marker``.

    Returns ``None`` when the marker does not occur at or after
    ``search_from``.
    """

    match = start_marker.search(text, search_from)
    if match is None:
        return None
    end, tier = find_section_end(
        text,
        match.end(),
        end_markers=end_markers,
        use_heading=use_heading,
        window=window,
    )
    LOGGER.debug("Section %r closed at %s via %s", start_marker.pattern, end, tier.value)
    return SectionBounds(marker_start=match.start(), start=match.end(), end=end, tier=tier)


class SectionType(str, Enum):
    QUESTIONS_MINISTER = "questions_minister"
    QUESTIONS_ORAL = "questions_oral"
    QUESTIONS_WRITTEN = "questions_written"
    BILL = "bill"
    MOTION = "motion"


QUESTION_SECTION_TYPES = (
    SectionType.QUESTIONS_ORAL,
    SectionType.QUESTIONS_WRITTEN,
    SectionType.QUESTIONS_MINISTER,
)

_SECTION_MARKERS: Tuple[Tuple[SectionType, Pattern[str], str], ...] = (
    (
        SectionType.QUESTIONS_MINISTER,
        re.compile(r"^[ \t]*WAKTU\s+PERTANYAAN[- ]PERTANYAAN\s+MENTERI", re.MULTILINE),
        "WAKTU PERTANYAAN-PERTANYAAN MENTERI",
    ),
    (
        SectionType.QUESTIONS_ORAL,
        re.compile(r"^[ \t]*PERTANYAAN[- ]PERTANYAAN\s+BAGI\s+JAWAB\s+LISAN", re.MULTILINE),
        "PERTANYAAN-PERTANYAAN BAGI JAWAB LISAN",
    ),
    (
        SectionType.QUESTIONS_WRITTEN,
        re.compile(r"^[ \t]*PERTANYAAN[- ]PERTANYAAN\s+BAGI\s+JAWAB\s+BERTULIS", re.MULTILINE),
        "PERTANYAAN-PERTANYAAN BAGI JAWAB BERTULIS",
    ),
    (
        SectionType.BILL,
        re.compile(r"^[ \t]*RANG\s+UNDANG[- ]UNDANG\b", re.MULTILINE),
        "RANG UNDANG-UNDANG",
    ),
    (
        SectionType.MOTION,
        re.compile(r"^[ \t]*USUL(?::|[ \t]*$)", re.MULTILINE),
        "USUL",
    ),
)

SECTION_MARKER_PATTERNS: Tuple[Pattern[str], ...] = tuple(pattern for _, pattern, _ in _SECTION_MARKERS)


@dataclass(slots=True)
class HansardSection:
    type: SectionType
    title: str
    content: str
    start: int
    end: int
    tier: BoundaryTier


def split_sections(text: str, *, min_length: int = 100) -> List[HansardSection]:
    """Split ``text`` into question, bill and motion sections.

    Every heading opens a section that runs to the next heading of any kind,
    or to the end of the document. ``content`` keeps the heading line.
    Sections whose body is shorter than ``min_length`` are dropped.
    """

    openings: List[Tuple[int, SectionType, str, Pattern[str]]] = []
    for section_type, pattern, title in _SECTION_MARKERS:
        for match in pattern.finditer(text):
            openings.append((match.start(), section_type, title, pattern))
    openings.sort(key=lambda item: item[0])

    sections: List[HansardSection] = []
    for position, section_type, title, pattern in openings:
        bounds = locate_section(
            text,
            pattern,
            end_markers=SECTION_MARKER_PATTERNS,
            use_heading=False,
            window=None,
            search_from=position,
        )
        if bounds is None:  # pragma: no cover - the opening was just matched
            continue
        if len(bounds.slice(text).strip()) < min_length:
            continue
        content = text[bounds.marker_start : bounds.end].strip()
        sections.append(
            HansardSection(
                type=section_type,
                title=title,
                content=content,
                start=bounds.start,
                end=bounds.end,
                tier=bounds.tier,
            )
        )

    LOGGER.info("Found %s distinct sections", len(sections))
    for section in sections:
        LOGGER.debug("Section %s (%s): %s chars", section.title, section.type.value, len(section.content))
    return sections


def sections_of(sections: Iterable[HansardSection], *types: SectionType) -> List[HansardSection]:
    wanted = set(types)
    return [section for section in sections if section.type in wanted]


__all__ = [
    "BoundaryTier",
    "DEFAULT_WINDOW",
    "HansardSection",
    "NEXT_HEADING_PATTERN",
    "QUESTION_SECTION_TYPES",
    "SECTION_MARKER_PATTERNS",
    "SectionBounds",
    "SectionType",
    "find_section_end",
    "locate_section",
    "sections_of",
]
