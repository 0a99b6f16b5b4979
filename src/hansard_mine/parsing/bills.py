"""Parsing bill and motion blocks."""
from __future__ import annotations

from typing import Callable, List, Optional, Pattern, Sequence, Tuple
import logging
import re

from ..core.types import EntryStatus, EntryType, ParsedBillOrMotion
from ..resolution.resolver import SpeakerResolver
from .blocks import BILL_START_PATTERNS, DEFAULT_MIN_BLOCK_LENGTH, MOTION_START_PATTERNS, split_blocks
from .sponsors import resolve_sponsor

LOGGER = logging.getLogger(__name__)

UNTITLED_BILL = "Untitled Bill"
UNTITLED_MOTION = "Motion"
DESCRIPTION_CHARS = 1000
MAX_MOTION_TITLE_CHARS = 200

# Checked in order; the first category with a keyword hit wins.
STATUS_KEYWORDS: Tuple[Tuple[EntryStatus, Pattern[str]], ...] = (
    (EntryStatus.PASSED, re.compile(r"\b(?:diluluskan|approved|passed)\b", re.IGNORECASE)),
    (EntryStatus.REJECTED, re.compile(r"\b(?:ditolak|rejected)\b", re.IGNORECASE)),
    (
        EntryStatus.UNDER_DISCUSSION,
        re.compile(r"\b(?:dibincangkan|under\s+discussion|jawatankuasa|committee)\b", re.IGNORECASE),
    ),
)

_BILL_TITLE = re.compile(r"Rang\s+Undang[- ]undang\s+([^\n]+)", re.IGNORECASE)
_BILL_NUMBER = re.compile(r"(?:Rang\s+Undang[- ]undang|Bill|R\.U\.)\s+(\d+)", re.IGNORECASE)
_MOTION_TITLE = re.compile(r"\b(?:mencadangkan|mengusulkan|usul)[\s:]+([^\n]+)", re.IGNORECASE)
_SECONDED_BY = re.compile(r"\b(?:disokong\s+oleh|seconded\s+by)\s+([^\n.]+)", re.IGNORECASE)
_SECONDER_SPLIT = re.compile(r"\s*(?:,|\bdan\b|\band\b)\s*", re.IGNORECASE)


def classify_status(block: str) -> EntryStatus:
    for status, pattern in STATUS_KEYWORDS:
        if pattern.search(block):
            return status
    return EntryStatus.PROPOSED


def _co_sponsors(block: str) -> List[str]:
    match = _SECONDED_BY.search(block)
    if not match:
        return []
    names = (" ".join(part.split()) for part in _SECONDER_SPLIT.split(match.group(1)))
    return [name for name in names if name]


def _bill_or_motion(
    block: str,
    entry_type: EntryType,
    title: str,
    resolver: SpeakerResolver,
    *,
    bill_number: Optional[str],
    max_raw_chars: int,
) -> ParsedBillOrMotion:
    sponsor = resolve_sponsor(block, resolver)
    return ParsedBillOrMotion(
        title=title,
        type=entry_type,
        description=block[:DESCRIPTION_CHARS].strip(),
        status=classify_status(block),
        raw_text=block[:max_raw_chars],
        sponsor_name=sponsor.match.name if sponsor else None,
        sponsor_constituency=sponsor.match.constituency if sponsor else None,
        resolved_legislator_id=sponsor.legislator_id if sponsor else None,
        co_sponsors=_co_sponsors(block),
        bill_number=bill_number,
        outcome=sponsor.outcome if sponsor else None,
    )


def parse_bill_block(block: str, resolver: SpeakerResolver, *, max_raw_chars: int = 3000) -> ParsedBillOrMotion:
    if not block.strip():
        raise ValueError("Empty bill block")
    title_match = _BILL_TITLE.search(block)
    number_match = _BILL_NUMBER.search(block)
    return _bill_or_motion(
        block,
        EntryType.BILL,
        " ".join(title_match.group(1).split()) if title_match else UNTITLED_BILL,
        resolver,
        bill_number=number_match.group(1) if number_match else None,
        max_raw_chars=max_raw_chars,
    )


def parse_motion_block(block: str, resolver: SpeakerResolver, *, max_raw_chars: int = 3000) -> ParsedBillOrMotion:
    if not block.strip():
        raise ValueError("Empty motion block")
    title_match = _MOTION_TITLE.search(block)
    title = " ".join(title_match.group(1).split())[:MAX_MOTION_TITLE_CHARS] if title_match else ""
    return _bill_or_motion(
        block,
        EntryType.MOTION,
        title or UNTITLED_MOTION,
        resolver,
        bill_number=None,
        max_raw_chars=max_raw_chars,
    )


def _parse_blocks(
    content: str,
    patterns: Sequence[Pattern[str]],
    parse_block: Callable[..., ParsedBillOrMotion],
    label: str,
    resolver: SpeakerResolver,
    min_block_length: int,
    max_raw_chars: int,
) -> List[ParsedBillOrMotion]:
    blocks = split_blocks(content, patterns, min_length=min_block_length)
    entries: List[ParsedBillOrMotion] = []
    for index, block in enumerate(blocks):
        try:
            entries.append(parse_block(block, resolver, max_raw_chars=max_raw_chars))
        except Exception:
            LOGGER.exception("Skipping %s block %s of %s", label, index + 1, len(blocks))
    LOGGER.info("Parsed %s %ss from %s blocks", len(entries), label, len(blocks))
    return entries


def parse_bills(
    section_content: str,
    resolver: SpeakerResolver,
    *,
    min_block_length: int = DEFAULT_MIN_BLOCK_LENGTH,
    max_raw_chars: int = 3000,
) -> List[ParsedBillOrMotion]:
    return _parse_blocks(
        section_content, BILL_START_PATTERNS, parse_bill_block, "bill", resolver, min_block_length, max_raw_chars
    )


def parse_motions(
    section_content: str,
    resolver: SpeakerResolver,
    *,
    min_block_length: int = DEFAULT_MIN_BLOCK_LENGTH,
    max_raw_chars: int = 3000,
) -> List[ParsedBillOrMotion]:
    return _parse_blocks(
        section_content, MOTION_START_PATTERNS, parse_motion_block, "motion", resolver, min_block_length, max_raw_chars
    )


__all__ = [
    "STATUS_KEYWORDS",
    "classify_status",
    "parse_bill_block",
    "parse_bills",
    "parse_motion_block",
    "parse_motions",
]
