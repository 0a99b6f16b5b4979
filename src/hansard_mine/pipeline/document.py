"""Parsing one transcript end to end."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import logging

from ..config import ParserConfig
from ..core.errors import InputValidationError
from ..core.types import (
    AttendanceResult,
    ParsedBillOrMotion,
    ParsedQuestion,
    QuestionType,
    SessionMetadata,
    Unresolved,
    UnresolvedReference,
)
from ..parsing.attendance import extract_attendance
from ..parsing.bills import parse_bills, parse_motions
from ..parsing.questions import parse_questions
from ..parsing.sections import HansardSection, SectionType, split_sections
from ..parsing.speakers import SpeakerExtraction, extract_speakers
from ..parsing.text import extract_metadata, extract_topics, normalize_text
from ..resolution.resolver import SpeakerResolver, alias_key

LOGGER = logging.getLogger(__name__)

QUESTION_TYPES: Dict[SectionType, QuestionType] = {
    SectionType.QUESTIONS_ORAL: QuestionType.ORAL,
    SectionType.QUESTIONS_WRITTEN: QuestionType.WRITTEN,
    SectionType.QUESTIONS_MINISTER: QuestionType.MINISTER,
}


@dataclass(slots=True)
class ParsedDocument:
    """Everything extracted from a single transcript."""

    text: str
    metadata: SessionMetadata
    attendance: AttendanceResult
    speakers: SpeakerExtraction
    sections: List[HansardSection] = field(default_factory=list)
    questions: List[ParsedQuestion] = field(default_factory=list)
    bills: List[ParsedBillOrMotion] = field(default_factory=list)
    motions: List[ParsedBillOrMotion] = field(default_factory=list)
    topics: List[str] = field(default_factory=list)
    document_id: Optional[str] = None

    def unresolved_references(self) -> List[UnresolvedReference]:
        """Unresolved speakers and sponsors, one per distinct name and constituency."""

        references: Dict[Tuple[str, Optional[str]], UnresolvedReference] = {}
        for reference in self.speakers.unresolved:
            references.setdefault(
                alias_key(reference.outcome.extracted_name, reference.outcome.extracted_constituency), reference
            )
        entries: List[Tuple[str, ParsedQuestion | ParsedBillOrMotion]] = [
            ("question", question) for question in self.questions
        ]
        entries.extend(("bill", bill) for bill in self.bills)
        entries.extend(("motion", motion) for motion in self.motions)
        for source, entry in entries:
            if not isinstance(entry.outcome, Unresolved):
                continue
            key = alias_key(entry.outcome.extracted_name, entry.outcome.extracted_constituency)
            references.setdefault(
                key,
                UnresolvedReference(
                    outcome=entry.outcome,
                    raw_header_text=entry.raw_text.split("\n", 1)[0],
                    source=source,
                ),
            )
        return list(references.values())


def validate_text(text: object) -> str:
    """Reject input that cannot be a plain-text transcript."""

    if not isinstance(text, str):
        raise InputValidationError(f"Document text must be str, got {type(text).__name__}")
    if "\x00" in text:
        raise InputValidationError("Document text contains NUL bytes")
    if not text.strip():
        raise InputValidationError("Document text is empty")
    return text


def parse_document(
    raw_text: str,
    resolver: SpeakerResolver,
    *,
    config: Optional[ParserConfig] = None,
    filename: Optional[str] = None,
    document_id: Optional[str] = None,
) -> ParsedDocument:
    """Run every extractor over ``raw_text``.

    Only :class:`~hansard_mine.core.errors.InputValidationError` escapes;
    missing fields become sentinels and failing blocks are skipped.
    """

    config = config or ParserConfig()
    text = normalize_text(validate_text(raw_text))
    metadata = extract_metadata(text, filename)
    attendance = extract_attendance(
        text,
        section_window=config.section_window,
        present_window=config.attendance_window,
        expected_seats=config.expected_seats,
    )
    sections = split_sections(text)

    questions: List[ParsedQuestion] = []
    bills: List[ParsedBillOrMotion] = []
    motions: List[ParsedBillOrMotion] = []
    for section in sections:
        if section.type in QUESTION_TYPES:
            questions.extend(
                parse_questions(
                    section.content,
                    QUESTION_TYPES[section.type],
                    resolver,
                    min_block_length=config.min_block_length,
                    max_question_chars=config.max_question_chars,
                    max_answer_chars=config.max_answer_chars,
                    max_raw_chars=config.max_raw_chars,
                )
            )
        elif section.type is SectionType.BILL:
            bills.extend(
                parse_bills(
                    section.content,
                    resolver,
                    min_block_length=config.min_block_length,
                    max_raw_chars=config.max_raw_chars,
                )
            )
        elif section.type is SectionType.MOTION:
            motions.extend(
                parse_motions(
                    section.content,
                    resolver,
                    min_block_length=config.min_block_length,
                    max_raw_chars=config.max_raw_chars,
                )
            )

    speakers = extract_speakers(text, resolver, context_chars=config.context_chars)
    document = ParsedDocument(
        text=text,
        metadata=metadata,
        attendance=attendance,
        speakers=speakers,
        sections=sections,
        questions=questions,
        bills=bills,
        motions=motions,
        topics=extract_topics(text),
        document_id=document_id,
    )
    LOGGER.info(
        "Parsed %s: %s questions, %s bills, %s motions, %s speakers",
        document_id or filename or "document",
        len(questions),
        len(bills),
        len(motions),
        len(speakers.speakers),
    )
    return document


__all__ = ["ParsedDocument", "QUESTION_TYPES", "parse_document", "validate_text"]
