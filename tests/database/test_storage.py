from __future__ import annotations

from datetime import date

import pytest

from hansard_mine.core.errors import SpeakerAlreadyMappedError, UnmatchedSpeakerNotFoundError
from hansard_mine.core.types import AttendanceResult, FailureReason, Legislator, SessionMetadata
from hansard_mine.database import create_storage


def _attendance(present: int, absent: int = 0, procedural: int = 0) -> AttendanceResult:
    return AttendanceResult(
        present_constituency_count=present,
        absent_constituency_count=absent,
        procedurally_absent_constituency_count=procedural,
    )


def _queue(storage, name: str = "Tuan Ahmad Zulkifli", document_id: str = "DR-17112025"):
    return storage.add_unmatched_speaker(
        document_id,
        extracted_name=name,
        extracted_constituency="Kuala Tidak Wujud",
        failure_reason=FailureReason.NO_NAME_MATCH,
        raw_header_text=f"{name} [Kuala Tidak Wujud]:",
        suggested_legislator_ids=["P139"],
        speaking_order=4,
    )


def test_list_records_returns_newest_sitting_first(tmp_path):
    database_url = f"sqlite:///{(tmp_path / 'overview.db').as_posix()}"
    storage = create_storage(database_url)

    storage.upsert_record(
        "DR-12122023",
        SessionMetadata(session_number="40", session_date="12 Disember 2023", parsed_date=date(2023, 12, 12)),
        _attendance(200, 22),
        speaker_count=12,
    )
    storage.upsert_record(
        "DR-05052024",
        SessionMetadata(session_number="10", session_date="5 Mei 2024", parsed_date=date(2024, 5, 5)),
        _attendance(180, 30, 12),
        speaker_count=20,
        topics=["USUL-USUL"],
    )
    storage.upsert_record("DR-UNDATED", SessionMetadata(), _attendance(0))

    overview = storage.list_records()
    assert [record.identifier for record in overview] == ["DR-05052024", "DR-12122023", "DR-UNDATED"]
    assert overview[0].present_count == 180
    assert overview[0].procedurally_absent_count == 12
    assert overview[0].speaker_count == 20
    assert overview[2].session_number == "Unknown"
    assert len(storage.list_records(limit=1)) == 1
    storage.dispose()


def test_upsert_record_replaces_counts(storage):
    metadata = SessionMetadata(session_number="67", parsed_date=date(2025, 11, 17))
    storage.upsert_record("DR-17112025", metadata, _attendance(100), unmatched_count=3)
    storage.upsert_record("DR-17112025", metadata, _attendance(170, 42, 10), unmatched_count=1)

    records = storage.list_records()
    assert len(records) == 1
    assert records[0].present_count == 170
    assert records[0].unmatched_count == 1


def test_roster_round_trip_keeps_order(storage, legislators):
    roster = storage.load_roster()

    assert [legislator.id for legislator in roster] == [legislator.id for legislator in legislators]
    assert roster.require("P043") == Legislator("P043", "Lim Guan Eng", "Bagan", "PH")

    assert storage.replace_legislators([Legislator("Z1", "Zainal", "Zon")]) == 1
    assert [legislator.id for legislator in storage.load_roster()] == ["Z1"]


def test_unmatched_speaker_round_trip(storage):
    created = _queue(storage)

    fetched = storage.get_unmatched_speaker(created.id)
    assert fetched.extracted_name == "Tuan Ahmad Zulkifli"
    assert fetched.failure_reason is FailureReason.NO_NAME_MATCH
    assert fetched.suggested_legislator_ids == ["P139"]
    assert fetched.speaking_order == 4
    assert fetched.is_mapped is False
    assert fetched.created_at is not None

    _queue(storage, name="Puan Entah", document_id="DR-18112025")
    assert len(storage.list_unmatched_speakers()) == 2
    assert [speaker.extracted_name for speaker in storage.list_unmatched_speakers(document_id="DR-18112025")] == [
        "Puan Entah"
    ]


def test_missing_unmatched_speaker(storage):
    with pytest.raises(UnmatchedSpeakerNotFoundError):
        storage.get_unmatched_speaker(404)
    with pytest.raises(UnmatchedSpeakerNotFoundError):
        storage.update_suggestions(404, ["P001"])
    with pytest.raises(UnmatchedSpeakerNotFoundError):
        storage.mark_mapped(404, "P001")


def test_mark_mapped_is_applied_once(storage):
    created = _queue(storage)

    mapping = storage.mark_mapped(created.id, "P139", confidence=0.9, notes="Jasin", mapped_by="editor")

    assert mapping.unmatched_speaker_id == created.id
    assert mapping.legislator_id == "P139"
    assert mapping.confidence == pytest.approx(0.9)
    assert mapping.mapped_by == "editor"
    assert mapping.created_at is not None

    with pytest.raises(SpeakerAlreadyMappedError):
        storage.mark_mapped(created.id, "P043")
    with pytest.raises(SpeakerAlreadyMappedError):
        storage.update_suggestions(created.id, ["P043"])

    speaker = storage.get_unmatched_speaker(created.id)
    assert speaker.is_mapped is True
    assert speaker.mapped_legislator_id == "P139"
    assert len(storage.list_speaker_mappings(unmatched_speaker_id=created.id)) == 1
    assert storage.list_unmatched_speakers(unmapped_only=True) == []


def test_confirmed_aliases(storage):
    first = _queue(storage)
    _queue(storage, name="Puan Entah")
    storage.mark_mapped(first.id, "P139")

    assert storage.confirmed_aliases() == [("Tuan Ahmad Zulkifli", "Kuala Tidak Wujud", "P139")]


def test_update_suggestions(storage):
    created = _queue(storage)

    updated = storage.update_suggestions(created.id, ["P001", "P002"])

    assert updated.suggested_legislator_ids == ["P001", "P002"]
    assert storage.get_unmatched_speaker(created.id).suggested_legislator_ids == ["P001", "P002"]
