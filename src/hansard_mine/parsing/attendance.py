"""Roll-call extraction: who attended a sitting and who did not."""
from __future__ import annotations

from typing import List, Optional, Pattern, Sequence
import logging
import re

from ..core.types import AttendanceEntry, AttendanceResult, AttendanceStatus, Legislator
from ..resolution.names import normalize_constituency, normalize_name
from .sections import DEFAULT_WINDOW, SECTION_MARKER_PATTERNS, locate_section

LOGGER = logging.getLogger(__name__)

PRESENT_MARKER = re.compile(r"Ahli[-\s]Ahli\s+Yang\s+Hadir\s*:?", re.IGNORECASE)
ABSENT_MARKER = re.compile(r"Ahli[-\s]Ahli\s+Yang\s+Tidak\s+Hadir(?!\s+Di\s+Bawah)\s*:?", re.IGNORECASE)
PROCEDURAL_ABSENCE_MARKER = re.compile(
    r"Ahli[-\s]Ahli\s+Yang\s+Tidak\s+Hadir\s+Di\s+Bawah\s+Peraturan\s+Mesyuarat\s+91\s*:?",
    re.IGNORECASE,
)
SENATOR_MARKER = re.compile(r"Senator\s+Yang\s+Turut\s+Hadir\s*:?", re.IGNORECASE)
_ABSENTEE_HEAD = re.compile(r"Ahli[-\s]Ahli\s+Yang\s+Tidak\s+Hadir", re.IGNORECASE)

NUMBERED_ENTRY_PATTERN = re.compile(r"^[ \t]*(\d+)\.\s+", re.MULTILINE)
_GROUP_PATTERN = re.compile(r"\(([^()]*)\)|\[([^\[\]]*)\]")
_NON_CONSTITUENCY_WORDS = ("menteri", "timbalan", "yang di-pertua", "pengerusi", "speaker")
_TITLE_GROUP = re.compile(r"^(?:dr|ir|ts|hj|haji|hajah|hajjah|kapten|prof|datuk|dato['’]?|tan\s+sri)\.?$", re.IGNORECASE)
_PARTY_TAG = re.compile(r"\s+[–-]\s*[A-Z][A-Za-z+]*$")


def _constituency_of(entry_text: str) -> Optional[str]:
    constituency: Optional[str] = None
    for match in _GROUP_PATTERN.finditer(entry_text):
        candidate = " ".join((match.group(1) or match.group(2) or "").split())
        lowered = candidate.lower()
        if (
            len(candidate) <= 2
            or _TITLE_GROUP.match(candidate)
            or any(word in lowered for word in _NON_CONSTITUENCY_WORDS)
        ):
            continue
        constituency = candidate
    return constituency


def _name_of(entry_text: str) -> str:
    without_groups = _GROUP_PATTERN.sub(" ", entry_text)
    if "," in without_groups:
        without_groups = without_groups.split(",", 1)[1]
    return _PARTY_TAG.sub("", " ".join(without_groups.split())).strip(" ,.;")


def parse_entries(section_text: str) -> List[AttendanceEntry]:
    """Split a roll-call section into its numbered entries."""

    matches = list(NUMBERED_ENTRY_PATTERN.finditer(section_text))
    entries: List[AttendanceEntry] = []
    for index, match in enumerate(matches):
        end = matches[index + 1].start() if index + 1 < len(matches) else len(section_text)
        entry_text = " ".join(section_text[match.end() : end].split())
        entries.append(
            AttendanceEntry(
                number=int(match.group(1)),
                text=entry_text,
                name=_name_of(entry_text),
                constituency=_constituency_of(entry_text),
            )
        )
    return entries


def _section_entries(
    text: str,
    marker: Pattern[str],
    end_markers: Sequence[Pattern[str]],
    window: int,
) -> List[AttendanceEntry]:
    bounds = locate_section(text, marker, end_markers=end_markers, window=window)
    if bounds is None:
        return []
    LOGGER.debug("Roll-call section %r bounded by %s", marker.pattern, bounds.tier.value)
    return parse_entries(bounds.slice(text))


def extract_attendance(
    text: str,
    *,
    section_window: int = DEFAULT_WINDOW,
    present_window: int = 20000,
    expected_seats: Optional[int] = 222,
) -> AttendanceResult:
    """Extract present, absent and procedurally absent members from ``text``.

    Entries without a constituency (the presiding officer) are kept in the
    name lists but do not count towards the constituency totals.
    """

    present = _section_entries(
        text,
        PRESENT_MARKER,
        (_ABSENTEE_HEAD, SENATOR_MARKER),
        present_window,
    )

    absent: List[AttendanceEntry] = []
    procedural: List[AttendanceEntry] = []
    absentee_bounds = locate_section(
        text,
        _ABSENTEE_HEAD,
        end_markers=(SENATOR_MARKER, PRESENT_MARKER, *SECTION_MARKER_PATTERNS),
        window=section_window,
    )
    if absentee_bounds is not None:
        region = text[absentee_bounds.marker_start : absentee_bounds.end]
        absent = _section_entries(region, ABSENT_MARKER, (PROCEDURAL_ABSENCE_MARKER,), section_window)
        procedural = _section_entries(region, PROCEDURAL_ABSENCE_MARKER, (SENATOR_MARKER,), section_window)

    result = AttendanceResult(
        present_names=[entry.name for entry in present if entry.name],
        absent_names=[entry.name for entry in absent + procedural if entry.name],
        procedurally_absent_names=[entry.name for entry in procedural if entry.name],
        present_constituency_count=sum(1 for entry in present if entry.has_constituency),
        absent_constituency_count=sum(1 for entry in absent if entry.has_constituency),
        procedurally_absent_constituency_count=sum(1 for entry in procedural if entry.has_constituency),
        present_entries=present,
        absent_entries=absent,
        procedurally_absent_entries=procedural,
    )

    total = result.total_constituency_count
    LOGGER.info(
        "Attendance: %s present, %s absent, %s absent under Rule 91",
        result.present_constituency_count,
        result.absent_constituency_count,
        result.procedurally_absent_constituency_count,
    )
    if expected_seats and total and total != expected_seats:
        LOGGER.warning("Constituency count discrepancy: %s counted, %s expected", total, expected_seats)
    return result


def _entry_matches(entry: AttendanceEntry, legislator: Legislator) -> bool:
    if entry.constituency:
        return normalize_constituency(entry.constituency) == normalize_constituency(legislator.constituency)
    name = normalize_name(entry.name)
    return bool(name) and name == normalize_name(legislator.canonical_name)


def classify_attendance(result: AttendanceResult, legislator: Legislator) -> AttendanceStatus:
    """Return whether ``legislator`` was listed as present or absent."""

    if any(_entry_matches(entry, legislator) for entry in result.present_entries):
        return AttendanceStatus.PRESENT
    absentees = result.absent_entries + result.procedurally_absent_entries
    if any(_entry_matches(entry, legislator) for entry in absentees):
        return AttendanceStatus.ABSENT
    return AttendanceStatus.UNKNOWN


__all__ = [
    "ABSENT_MARKER",
    "NUMBERED_ENTRY_PATTERN",
    "PRESENT_MARKER",
    "PROCEDURAL_ABSENCE_MARKER",
    "SENATOR_MARKER",
    "classify_attendance",
    "extract_attendance",
    "parse_entries",
]
