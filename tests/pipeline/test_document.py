from __future__ import annotations

from datetime import date

import pytest

from hansard_mine.core.errors import InputValidationError
from hansard_mine.core.types import AnswerStatus, Confidence, EntryStatus, QuestionType, Resolved
from hansard_mine.parsing.sections import BoundaryTier, SectionType
from hansard_mine.pipeline import parse_document, validate_text


@pytest.fixture()
def document(transcript_text, resolver):
    return parse_document(transcript_text, resolver, filename="DR-17112025.txt", document_id="DR-17112025")


def test_metadata_and_attendance(document):
    assert document.document_id == "DR-17112025"
    assert document.metadata.session_number == "67"
    assert document.metadata.session_date == "17 November 2025"
    assert document.metadata.parsed_date == date(2025, 11, 17)
    assert document.metadata.parliament_term == "KELIMA BELAS"
    assert document.metadata.sitting == "KEEMPAT"

    attendance = document.attendance
    assert attendance.present_constituency_count == 170
    assert attendance.absent_constituency_count == 42
    assert attendance.procedurally_absent_constituency_count == 10
    assert len(attendance.present_names) == 171
    assert len(attendance.absent_names) == 52


def test_topics_and_sections(document):
    assert document.topics == [
        "JAWAPAN-JAWAPAN LISAN BAGI PERTANYAAN-PERTANYAAN",
        "PEMBENTANGAN RANG UNDANG-UNDANG",
        "USUL-USUL",
    ]
    assert [section.type for section in document.sections] == [
        SectionType.QUESTIONS_ORAL,
        SectionType.BILL,
        SectionType.MOTION,
    ]
    assert document.sections[-1].tier is BoundaryTier.LENGTH_CAP


def test_questions(document):
    assert len(document.questions) == 4
    first = document.questions[0]
    assert first.question_number == "1"
    assert first.question_type is QuestionType.ORAL
    assert first.ministry == "Kewangan"
    assert first.answer_status is AnswerStatus.ANSWERED
    assert first.sponsor_constituency == "Pasir Mas"
    assert first.resolved_legislator_id == "P022"
    assert first.outcome == Resolved("P022", Confidence.HIGH)
    assert "P043" in {question.resolved_legislator_id for question in document.questions}


def test_bills_and_motions(document):
    (bill,) = document.bills
    assert bill.title == "Perbekalan 2026"
    assert bill.status is EntryStatus.PASSED
    assert bill.sponsor_name == "Dato' Seri Anwar Ibrahim"
    assert bill.outcome == Resolved("P063", Confidence.LOW)

    (motion,) = document.motions
    assert motion.resolved_legislator_id == "P043"
    assert motion.co_sponsors == ["Tuan Hannah Yeoh", "Tuan Fahmi Fadzil"]


def test_speakers_and_unresolved_references(document):
    assert [slot.legislator_id for slot in document.speakers.speakers] == ["P049", "P022", "P043", "P063"]
    assert len(document.speakers.instances) == 7

    (reference,) = document.unresolved_references()
    assert reference.display_name == "Tuan Ahmad Zulkifli (Kuala Tidak Wujud)"
    assert reference.speaking_order == 4
    assert reference.source == "speech"


def test_validate_text():
    assert validate_text("DR.17.11.2025") == "DR.17.11.2025"
    for bad in ("", "  \n", "a\x00b", 17, None):
        with pytest.raises(InputValidationError):
            validate_text(bad)
