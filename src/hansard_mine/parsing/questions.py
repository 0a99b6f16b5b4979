"""Parsing question blocks from the oral, written and minister question sections."""
from __future__ import annotations

from typing import List, Optional
import logging
import re

from ..core.types import UNKNOWN_MINISTRY, AnswerStatus, ParsedQuestion, QuestionType
from ..resolution.resolver import SpeakerResolver
from .blocks import DEFAULT_MIN_BLOCK_LENGTH, QUESTION_START_PATTERNS, split_blocks
from .sponsors import resolve_sponsor

LOGGER = logging.getLogger(__name__)

GENERAL_QUESTION_TOPIC = "General Question"

_QUESTION_NUMBER = re.compile(r"^\s*(?:(?:Soalan|Question)\s+)?(\d+)[.:]", re.IGNORECASE)
_MINISTRY = re.compile(r"\b(?:Menteri|Minister|Kementerian)\s+([^:\n.\[(]+)", re.IGNORECASE)
_MINISTRY_TAIL = re.compile(
    r"\s+(?:menyatakan|adakah|apakah|bahawa|mengenai|tentang|berapa|sama\s+ada|to\s+state)\b.*$",
    re.IGNORECASE,
)
_ANSWER_LABEL = re.compile(
    r"\b(?:Jawapan|Answer)\b|^[ \t]*(?:Timbalan\s+)?Menteri\b[^\n:]*:",
    re.IGNORECASE | re.MULTILINE,
)
_REQUEST_CUE = re.compile(r"\b(?:meminta|minta|bertanya)\b", re.IGNORECASE)
_SENTENCE_END = re.compile(r"[.!?]")
_WHITESPACE = re.compile(r"\s+")


def _ministry_of(block: str) -> str:
    match = _MINISTRY.search(block)
    if not match:
        return UNKNOWN_MINISTRY
    ministry = _MINISTRY_TAIL.sub("", " ".join(match.group(1).split())).strip(" ,;-")
    return ministry[:120] or UNKNOWN_MINISTRY


def extract_topic(question_text: str) -> str:
    """First sentence of ``question_text``, at most ten words and 100 characters."""

    first_sentence = _SENTENCE_END.split(question_text, maxsplit=1)[0]
    words = first_sentence.split()[:10]
    return " ".join(words)[:100] or GENERAL_QUESTION_TOPIC


def parse_question_block(
    block: str,
    question_type: QuestionType,
    resolver: SpeakerResolver,
    *,
    max_question_chars: int = 2000,
    max_answer_chars: int = 5000,
    max_raw_chars: int = 3000,
) -> ParsedQuestion:
    """Extract the typed fields of one question block."""

    if not block.strip():
        raise ValueError("Empty question block")

    number_match = _QUESTION_NUMBER.match(block)
    question_number = number_match.group(1) if number_match else None

    answer_match = None
    cue = _REQUEST_CUE.search(block)
    if cue:
        answer_match = _ANSWER_LABEL.search(block, cue.end())
        question_end = answer_match.start() if answer_match else len(block)
        question_text = block[cue.start() : question_end]
    else:
        answer_match = _ANSWER_LABEL.search(block)
        question_text = block[: answer_match.start()] if answer_match else block[:500]
    question_text = _WHITESPACE.sub(" ", question_text).strip()

    answer_text: Optional[str] = None
    if answer_match:
        answer_text = block[answer_match.start() :].strip()[:max_answer_chars] or None

    if answer_text:
        answer_status = AnswerStatus.ANSWERED
    elif cue:
        answer_status = AnswerStatus.PENDING
    else:
        answer_status = AnswerStatus.UNKNOWN

    sponsor = resolve_sponsor(block, resolver, require_cue=True)

    return ParsedQuestion(
        ministry=_ministry_of(block),
        question_text=question_text[:max_question_chars],
        topic=extract_topic(question_text),
        answer_status=answer_status,
        question_type=question_type,
        raw_text=block[:max_raw_chars],
        question_number=question_number,
        sponsor_name=sponsor.match.name if sponsor else None,
        sponsor_constituency=sponsor.match.constituency if sponsor else None,
        resolved_legislator_id=sponsor.legislator_id if sponsor else None,
        answer_text=answer_text,
        outcome=sponsor.outcome if sponsor else None,
    )


def parse_questions(
    section_content: str,
    question_type: QuestionType,
    resolver: SpeakerResolver,
    *,
    min_block_length: int = DEFAULT_MIN_BLOCK_LENGTH,
    max_question_chars: int = 2000,
    max_answer_chars: int = 5000,
    max_raw_chars: int = 3000,
) -> List[ParsedQuestion]:
    """Split ``section_content`` into blocks and parse each into a question.

    A block that fails to parse is logged and skipped.
    """

    blocks = split_blocks(section_content, QUESTION_START_PATTERNS, min_length=min_block_length)
    LOGGER.debug("Parsing %s question blocks (type: %s)", len(blocks), question_type.value)
    questions: List[ParsedQuestion] = []
    for index, block in enumerate(blocks):
        try:
            questions.append(
                parse_question_block(
                    block,
                    question_type,
                    resolver,
                    max_question_chars=max_question_chars,
                    max_answer_chars=max_answer_chars,
                    max_raw_chars=max_raw_chars,
                )
            )
        except Exception:
            LOGGER.exception("Skipping question block %s of %s", index + 1, len(blocks))
    matched = sum(1 for question in questions if question.resolved_legislator_id)
    LOGGER.info(
        "Parsed %s %s questions (%s with a resolved sponsor)", len(questions), question_type.value, matched
    )
    return questions


__all__ = [
    "GENERAL_QUESTION_TOPIC",
    "extract_topic",
    "parse_question_block",
    "parse_questions",
]
