from __future__ import annotations

from threading import Barrier, Thread
from typing import List

import pytest

from hansard_mine.core.errors import (
    SpeakerAlreadyMappedError,
    UnknownLegislatorError,
    UnmatchedSpeakerNotFoundError,
)
from hansard_mine.core.types import Confidence, FailureReason, Resolved, Unresolved, UnresolvedReference
from hansard_mine.escalation import EscalationManager
from hansard_mine.resolution import SpeakerResolver


def _reference(name: str, constituency, reason=FailureReason.NO_NAME_MATCH, candidates=()) -> UnresolvedReference:
    return UnresolvedReference(
        outcome=Unresolved(name, constituency, reason, tuple(candidates)),
        raw_header_text=f"{name} [{constituency}]:" if constituency else f"{name}:",
        speaking_order=2,
    )


@pytest.fixture()
def manager(storage):
    return EscalationManager(storage, storage.load_roster(), suggestion_limit=3)


def test_record_unresolved_deduplicates(manager):
    references = [
        _reference("Tuan Ahmad Zulkifli", "Kuala Tidak Wujud"),
        _reference("Ahmad Zulkifli", "kuala tidak wujud"),
        _reference("Dato' Fadhli", None, FailureReason.AMBIGUOUS, ("P022", "P047")),
    ]

    created = manager.record_unresolved("DR-17112025", references)
    again = manager.record_unresolved("DR-17112025", references)

    assert [speaker.extracted_name for speaker in created] == ["Tuan Ahmad Zulkifli", "Dato' Fadhli"]
    assert again == []
    assert len(manager.list_unmatched(document_id="DR-17112025")) == 2
    assert manager.record_unresolved("DR-18112025", references[:1])[0].source_document_id == "DR-18112025"


def test_initial_suggestions(manager):
    ambiguous, unknown = manager.record_unresolved(
        "DR-17112025",
        [
            _reference("Dato' Fadhli", None, FailureReason.AMBIGUOUS, ("P022", "P047")),
            _reference("Tuan Lim", "Bagan", FailureReason.AMBIGUOUS, ()),
        ],
    )

    assert ambiguous.suggested_legislator_ids == ["P022", "P047"]
    assert ambiguous.failure_reason is FailureReason.AMBIGUOUS
    assert unknown.suggested_legislator_ids[0] == "P043"
    assert len(unknown.suggested_legislator_ids) == 3


def test_suggest_updates_stored_suggestions(manager, storage):
    (speaker,) = manager.record_unresolved("DR-17112025", [_reference("Ahmad Fadhli", "Pasir Mas")])

    suggestions = manager.suggest(speaker.id, limit=2)

    assert [suggestion.legislator_id for suggestion in suggestions][0] == "P022"
    assert len(suggestions) == 2
    assert storage.get_unmatched_speaker(speaker.id).suggested_legislator_ids == [
        suggestion.legislator_id for suggestion in suggestions
    ]


def test_suggest_unknown_speaker(manager):
    with pytest.raises(UnmatchedSpeakerNotFoundError):
        manager.suggest(9999)


def test_confirm_mapping_once(manager):
    (speaker,) = manager.record_unresolved("DR-17112025", [_reference("Tuan Ahmad Zulkifli", "Kuala Tidak Wujud")])

    mapping = manager.confirm_mapping(speaker.id, "P139", notes="Jasin", mapped_by="editor")

    assert mapping.legislator_id == "P139"
    with pytest.raises(SpeakerAlreadyMappedError):
        manager.confirm_mapping(speaker.id, "P139")
    assert manager.list_unmatched(unmapped_only=True) == []
    # suggestions can still be ranked for a mapped speaker
    assert manager.suggest(speaker.id)


def test_confirm_mapping_rejects_unknown_legislator(manager):
    (speaker,) = manager.record_unresolved("DR-17112025", [_reference("Tuan Ahmad Zulkifli", "Kuala Tidak Wujud")])

    with pytest.raises(UnknownLegislatorError):
        manager.confirm_mapping(speaker.id, "P999")

    assert manager.list_unmatched(unmapped_only=True)[0].id == speaker.id


def test_concurrent_confirmations_map_once(manager, storage):
    (speaker,) = manager.record_unresolved("DR-17112025", [_reference("Tuan Ahmad Zulkifli", "Kuala Tidak Wujud")])
    barrier = Barrier(4)
    outcomes: List[object] = []

    def confirm(legislator_id: str) -> None:
        barrier.wait()
        try:
            outcomes.append(manager.confirm_mapping(speaker.id, legislator_id))
        except SpeakerAlreadyMappedError as exc:
            outcomes.append(exc)

    threads = [Thread(target=confirm, args=(legislator_id,)) for legislator_id in ("P139", "P043", "P022", "P117")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    errors = [outcome for outcome in outcomes if isinstance(outcome, SpeakerAlreadyMappedError)]
    assert len(outcomes) == 4
    assert len(errors) == 3
    assert len(storage.list_speaker_mappings(unmatched_speaker_id=speaker.id)) == 1


def test_confirmed_aliases_feed_the_resolver(manager, roster):
    (speaker,) = manager.record_unresolved("DR-17112025", [_reference("Tuan Ahmad Zulkifli", "Kuala Tidak Wujud")])
    manager.confirm_mapping(speaker.id, "P139")

    resolver = SpeakerResolver(roster=roster, aliases=manager.confirmed_aliases())

    assert resolver.resolve("Ahmad Zulkifli", "Kuala Tidak Wujud") == Resolved("P139", Confidence.CONFIRMED)
