"""Escalation queue for speakers that automatic resolution could not map."""
from __future__ import annotations

from threading import Lock
from typing import Dict, Iterable, List, Optional
import logging

from ..core.types import SpeakerMapping, Suggestion, UnmatchedSpeaker, UnresolvedReference
from ..database import Storage
from ..resolution.resolver import AliasKey, Roster, alias_key, build_aliases
from ..resolution.suggestions import rank_suggestions

LOGGER = logging.getLogger(__name__)


class EscalationManager:
    """Persist unresolved references and turn human confirmations into mappings.

    Confirmation is serialised per unmatched speaker id in-process and
    guarded by a conditional update in storage, so an already mapped
    speaker can never be mapped again.
    """

    def __init__(self, storage: Storage, roster: Roster, *, suggestion_limit: int = 5) -> None:
        self._storage = storage
        self._roster = roster
        self._suggestion_limit = suggestion_limit
        self._locks: Dict[int, Lock] = {}
        self._locks_guard = Lock()

    @property
    def roster(self) -> Roster:
        return self._roster

    def record_unresolved(
        self, document_id: str, references: Iterable[UnresolvedReference]
    ) -> List[UnmatchedSpeaker]:
        """Store each distinct unresolved pair of ``document_id`` once.

        Pairs already queued for the document are skipped. Returns the newly
        created records.
        """

        seen = {
            alias_key(existing.extracted_name, existing.extracted_constituency)
            for existing in self._storage.list_unmatched_speakers(document_id=document_id)
        }
        created: List[UnmatchedSpeaker] = []
        for reference in references:
            outcome = reference.outcome
            key = alias_key(outcome.extracted_name, outcome.extracted_constituency)
            if key in seen:
                continue
            seen.add(key)
            suggested = list(outcome.candidate_ids) or [
                suggestion.legislator_id
                for suggestion in rank_suggestions(
                    outcome.extracted_name,
                    outcome.extracted_constituency,
                    self._roster,
                    limit=self._suggestion_limit,
                )
            ]
            created.append(
                self._storage.add_unmatched_speaker(
                    document_id,
                    extracted_name=outcome.extracted_name,
                    extracted_constituency=outcome.extracted_constituency,
                    failure_reason=outcome.failure_reason,
                    raw_header_text=reference.raw_header_text,
                    suggested_legislator_ids=suggested[: self._suggestion_limit],
                    speaking_order=reference.speaking_order,
                )
            )
        if created:
            LOGGER.info("Escalated %s unmatched speakers for %s", len(created), document_id)
        return created

    def list_unmatched(
        self, *, document_id: Optional[str] = None, unmapped_only: bool = False
    ) -> List[UnmatchedSpeaker]:
        return self._storage.list_unmatched_speakers(document_id=document_id, unmapped_only=unmapped_only)

    def suggest(self, unmatched_speaker_id: int, *, limit: Optional[int] = None) -> List[Suggestion]:
        """Rank candidates for one unmatched speaker.

        The ranked ids are stored on the record unless it is already mapped.
        """

        speaker = self._storage.get_unmatched_speaker(unmatched_speaker_id)
        suggestions = rank_suggestions(
            speaker.extracted_name,
            speaker.extracted_constituency,
            self._roster,
            limit=limit or self._suggestion_limit,
        )
        if not speaker.is_mapped:
            self._storage.update_suggestions(
                unmatched_speaker_id, [suggestion.legislator_id for suggestion in suggestions]
            )
        return suggestions

    def confirm_mapping(
        self,
        unmatched_speaker_id: int,
        legislator_id: str,
        *,
        confidence: float = 1.0,
        notes: Optional[str] = None,
        mapped_by: Optional[str] = None,
    ) -> SpeakerMapping:
        """Map an unmatched speaker to ``legislator_id`` exactly once."""

        self._roster.require(legislator_id)
        with self._lock_for(unmatched_speaker_id):
            mapping = self._storage.mark_mapped(
                unmatched_speaker_id,
                legislator_id,
                confidence=confidence,
                notes=notes,
                mapped_by=mapped_by,
            )
        LOGGER.info("Mapped unmatched speaker %s to %s", unmatched_speaker_id, legislator_id)
        return mapping

    def confirmed_aliases(self) -> Dict[AliasKey, str]:
        return build_aliases(self._storage.confirmed_aliases())

    def _lock_for(self, unmatched_speaker_id: int) -> Lock:
        with self._locks_guard:
            lock = self._locks.get(unmatched_speaker_id)
            if lock is None:
                lock = self._locks[unmatched_speaker_id] = Lock()
            return lock


__all__ = ["EscalationManager"]
