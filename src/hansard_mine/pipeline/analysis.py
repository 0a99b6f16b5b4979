"""Per-legislator analysis of one transcript."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence
import logging

from ..config import ParserConfig, ResolverConfig
from ..core.types import (
    AttendanceStatus,
    Legislator,
    SessionMetadata,
    SpeakingSlot,
    SpeechInstance,
)
from ..database.storage import RecordOverview
from ..parsing.attendance import classify_attendance
from ..resolution.names import normalize_constituency
from ..resolution.resolver import AliasKey, Roster, SpeakerResolver
from .document import ParsedDocument, parse_document, validate_text

LOGGER = logging.getLogger(__name__)

TOP_SPEAKER_LIMIT = 10


@dataclass(slots=True, frozen=True)
class SpeakerCount:
    legislator_id: str
    legislator_name: str
    speech_count: int


@dataclass(slots=True)
class SessionStats:
    total_unique_speakers: int
    attended: int
    absent: int
    procedurally_absent: int
    unmatched_speakers: int
    unmatched_speaker_names: List[str] = field(default_factory=list)
    attended_and_spoke: int = 0
    attended_silent: int = 0
    speaking_rate: float = 0.0
    total_speech_instances: int = 0
    top_speakers: List[SpeakerCount] = field(default_factory=list)


@dataclass(slots=True)
class LegislatorAnalysis:
    """Stable result of analysing one document for one legislator."""

    legislator: Legislator
    metadata: SessionMetadata
    attendance_status: AttendanceStatus
    speaking_slots: List[SpeakingSlot]
    speech_instances: List[SpeechInstance]
    session_stats: SessionStats
    document_id: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "document_id": self.document_id,
            "legislator": {
                "id": self.legislator.id,
                "name": self.legislator.canonical_name,
                "constituency": self.legislator.constituency,
                "party": self.legislator.party,
            },
            "metadata": {
                "session_number": self.metadata.session_number,
                "session_date": self.metadata.session_date,
                "parliament_term": self.metadata.parliament_term,
                "sitting": self.metadata.sitting,
            },
            "attendance_status": self.attendance_status.value,
            "unique_speakers": {
                "count": len(self.speaking_slots),
                "speakers": [
                    {
                        "legislator_id": slot.legislator_id,
                        "name": slot.legislator_name,
                        "constituency": slot.constituency,
                        "speaking_order": slot.speaking_order,
                    }
                    for slot in self.speaking_slots
                ],
            },
            "speech_instances": {
                "count": len(self.speech_instances),
                "instances": [
                    {
                        "position": instance.position,
                        "line_number": instance.line_number,
                        "captured_name": instance.captured_header,
                        "context": instance.context,
                        "speaking_order": instance.instance_number,
                        "constituency": instance.constituency,
                        "speech_text": instance.text,
                    }
                    for instance in self.speech_instances
                ],
            },
            "session_stats": {
                "total_unique_speakers": self.session_stats.total_unique_speakers,
                "attended": self.session_stats.attended,
                "absent": self.session_stats.absent,
                "procedurally_absent": self.session_stats.procedurally_absent,
                "unmatched_speakers": self.session_stats.unmatched_speakers,
                "unmatched_speaker_names": list(self.session_stats.unmatched_speaker_names),
                "attended_and_spoke": self.session_stats.attended_and_spoke,
                "attended_silent": self.session_stats.attended_silent,
                "speaking_rate": self.session_stats.speaking_rate,
                "total_speech_instances": self.session_stats.total_speech_instances,
                "top_speakers": [
                    {
                        "legislator_id": speaker.legislator_id,
                        "name": speaker.legislator_name,
                        "speech_count": speaker.speech_count,
                    }
                    for speaker in self.session_stats.top_speakers
                ],
            },
        }


def session_stats(document: ParsedDocument) -> SessionStats:
    """Aggregate speaker and attendance figures for one sitting."""

    attendance = document.attendance
    attended = {
        normalize_constituency(entry.constituency)
        for entry in attendance.present_entries
        if entry.constituency
    }
    spoke = {normalize_constituency(slot.constituency) for slot in document.speakers.speakers}
    attended_and_spoke = len(attended & spoke)
    counts = Counter(
        instance.legislator_id for instance in document.speakers.instances if instance.legislator_id is not None
    )
    # Slots are in first-appearance order, which breaks count ties.
    ranked = sorted(document.speakers.speakers, key=lambda slot: -counts[slot.legislator_id])
    return SessionStats(
        total_unique_speakers=len(document.speakers.speakers),
        attended=attendance.present_constituency_count,
        absent=attendance.absent_constituency_count,
        procedurally_absent=attendance.procedurally_absent_constituency_count,
        unmatched_speakers=len(document.speakers.unresolved),
        unmatched_speaker_names=document.speakers.unresolved_names,
        attended_and_spoke=attended_and_spoke,
        attended_silent=len(attended - spoke),
        speaking_rate=round(attended_and_spoke / len(attended), 4) if attended else 0.0,
        total_speech_instances=len(document.speakers.instances),
        top_speakers=[
            SpeakerCount(slot.legislator_id, slot.legislator_name, counts[slot.legislator_id])
            for slot in ranked[:TOP_SPEAKER_LIMIT]
        ],
    )


@dataclass(slots=True)
class RecordsSummary:
    """Figures across several stored transcripts."""

    documents: int
    total_speakers: int
    total_speeches: int
    total_questions: int
    total_unmatched: int
    average_present: float
    average_absent: float
    average_speakers: float
    first_date: Optional[date] = None
    last_date: Optional[date] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "documents": self.documents,
            "total_speakers": self.total_speakers,
            "total_speeches": self.total_speeches,
            "total_questions": self.total_questions,
            "total_unmatched": self.total_unmatched,
            "average_present": self.average_present,
            "average_absent": self.average_absent,
            "average_speakers": self.average_speakers,
            "first_date": self.first_date.isoformat() if self.first_date else None,
            "last_date": self.last_date.isoformat() if self.last_date else None,
        }


def aggregate_records(records: Sequence[RecordOverview]) -> RecordsSummary:
    """Summarise stored transcripts, e.g. the result of ``Storage.list_records``."""

    if not records:
        return RecordsSummary(0, 0, 0, 0, 0, 0.0, 0.0, 0.0)
    count = len(records)
    dates = sorted(record.parsed_date for record in records if record.parsed_date is not None)
    return RecordsSummary(
        documents=count,
        total_speakers=sum(record.speaker_count for record in records),
        total_speeches=sum(record.speech_count for record in records),
        total_questions=sum(record.question_count for record in records),
        total_unmatched=sum(record.unmatched_count for record in records),
        average_present=round(sum(record.present_count for record in records) / count, 2),
        average_absent=round(sum(record.absent_count for record in records) / count, 2),
        average_speakers=round(sum(record.speaker_count for record in records) / count, 2),
        first_date=dates[0] if dates else None,
        last_date=dates[-1] if dates else None,
    )


class HansardAnalyzer:
    """Parse documents against a fixed roster snapshot."""

    def __init__(
        self,
        roster: Roster,
        *,
        aliases: Optional[Mapping[AliasKey, str]] = None,
        parser_config: Optional[ParserConfig] = None,
        resolver_config: Optional[ResolverConfig] = None,
    ) -> None:
        resolver_config = resolver_config or ResolverConfig()
        self._roster = roster
        self._config = parser_config or ParserConfig()
        self._resolver = SpeakerResolver(
            roster=roster,
            aliases=dict(aliases or {}),
            min_name_length=resolver_config.min_name_length,
        )

    @property
    def resolver(self) -> SpeakerResolver:
        return self._resolver

    def parse(
        self, text: str, *, document_id: Optional[str] = None, filename: Optional[str] = None
    ) -> ParsedDocument:
        return parse_document(
            text, self._resolver, config=self._config, filename=filename, document_id=document_id
        )

    def analyze(
        self,
        text: str,
        legislator_id: str,
        *,
        document_id: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> LegislatorAnalysis:
        """Analyse ``text`` for one legislator.

        Raises :class:`~hansard_mine.core.errors.InputValidationError` before
        any parsing when the text is unusable or the legislator is unknown.
        """

        validate_text(text)
        legislator = self._roster.require(legislator_id)
        document = self.parse(text, document_id=document_id, filename=filename)
        return self.analyze_parsed(document, legislator)

    def analyze_parsed(self, document: ParsedDocument, legislator: Legislator) -> LegislatorAnalysis:
        slots = [slot for slot in document.speakers.speakers if slot.legislator_id == legislator.id]
        instances = document.speakers.instances_for(legislator.id)
        LOGGER.info(
            "%s: %s speaking slots and %s speech instances",
            legislator.canonical_name,
            len(slots),
            len(instances),
        )
        return LegislatorAnalysis(
            legislator=legislator,
            metadata=document.metadata,
            attendance_status=classify_attendance(document.attendance, legislator),
            speaking_slots=slots,
            speech_instances=instances,
            session_stats=session_stats(document),
            document_id=document.document_id,
        )


__all__ = [
    "HansardAnalyzer",
    "LegislatorAnalysis",
    "RecordsSummary",
    "SessionStats",
    "SpeakerCount",
    "aggregate_records",
    "session_stats",
]
