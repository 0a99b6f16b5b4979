"""Typed domain objects for the Hansard parsing engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Tuple, Union

UNKNOWN = "Unknown"
UNKNOWN_MINISTRY = "Unknown Ministry"


@dataclass(slots=True, frozen=True)
class SessionMetadata:
    """Header fields of one sitting; missing values carry :data:`UNKNOWN`."""

    session_number: str = UNKNOWN
    session_date: str = UNKNOWN
    parliament_term: str = UNKNOWN
    sitting: str = UNKNOWN
    parsed_date: Optional[date] = None


@dataclass(slots=True, frozen=True)
class Legislator:
    """Read-only roster entry."""

    id: str
    canonical_name: str
    constituency: str
    party: Optional[str] = None


@dataclass(slots=True)
class AttendanceEntry:
    """One numbered line of a roll-call section."""

    number: int
    text: str
    name: str
    constituency: Optional[str] = None

    @property
    def has_constituency(self) -> bool:
        return self.constituency is not None


@dataclass(slots=True)
class AttendanceResult:
    present_names: List[str] = field(default_factory=list)
    absent_names: List[str] = field(default_factory=list)
    procedurally_absent_names: List[str] = field(default_factory=list)
    present_constituency_count: int = 0
    absent_constituency_count: int = 0
    procedurally_absent_constituency_count: int = 0
    present_entries: List[AttendanceEntry] = field(default_factory=list)
    absent_entries: List[AttendanceEntry] = field(default_factory=list)
    procedurally_absent_entries: List[AttendanceEntry] = field(default_factory=list)

    @property
    def total_constituency_count(self) -> int:
        return (
            self.present_constituency_count
            + self.absent_constituency_count
            + self.procedurally_absent_constituency_count
        )


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    UNKNOWN = "unknown"


class Confidence(str, Enum):
    CONFIRMED = "confirmed"
    HIGH = "high"
    LOW = "low"


class FailureReason(str, Enum):
    """Why automatic resolution gave up on a name."""

    NO_CONSTITUENCY = "no_constituency"
    NO_NAME_MATCH = "no_name_match"
    AMBIGUOUS = "ambiguous"


@dataclass(slots=True, frozen=True)
class Resolved:
    legislator_id: str
    confidence: Confidence


@dataclass(slots=True, frozen=True)
class Unresolved:
    extracted_name: str
    extracted_constituency: Optional[str]
    failure_reason: FailureReason
    candidate_ids: Tuple[str, ...] = ()


ResolutionOutcome = Union[Resolved, Unresolved]


class QuestionType(str, Enum):
    ORAL = "oral"
    WRITTEN = "written"
    MINISTER = "minister"


class AnswerStatus(str, Enum):
    ANSWERED = "answered"
    PENDING = "pending"
    UNKNOWN = "unknown"


class EntryType(str, Enum):
    BILL = "bill"
    MOTION = "motion"


class EntryStatus(str, Enum):
    PROPOSED = "proposed"
    UNDER_DISCUSSION = "underDiscussion"
    PASSED = "passed"
    REJECTED = "rejected"


@dataclass(slots=True)
class ParsedQuestion:
    ministry: str
    question_text: str
    topic: str
    answer_status: AnswerStatus
    question_type: QuestionType
    raw_text: str
    question_number: Optional[str] = None
    sponsor_name: Optional[str] = None
    sponsor_constituency: Optional[str] = None
    resolved_legislator_id: Optional[str] = None
    answer_text: Optional[str] = None
    outcome: Optional[ResolutionOutcome] = None


@dataclass(slots=True)
class ParsedBillOrMotion:
    title: str
    type: EntryType
    description: str
    status: EntryStatus
    raw_text: str
    sponsor_name: Optional[str] = None
    sponsor_constituency: Optional[str] = None
    resolved_legislator_id: Optional[str] = None
    co_sponsors: List[str] = field(default_factory=list)
    bill_number: Optional[str] = None
    outcome: Optional[ResolutionOutcome] = None


@dataclass(slots=True)
class SpeechInstance:
    """A single speaker turn within a transcript."""

    position: int
    line_number: int
    captured_header: str
    speaker_name: str
    context: str
    text: str
    outcome: ResolutionOutcome
    constituency: Optional[str] = None
    role: Optional[str] = None
    instance_number: int = 1

    @property
    def legislator_id(self) -> Optional[str]:
        if isinstance(self.outcome, Resolved):
            return self.outcome.legislator_id
        return None


@dataclass(slots=True, frozen=True)
class SpeakingSlot:
    """First appearance of a distinct resolved speaker."""

    legislator_id: str
    legislator_name: str
    constituency: str
    speaking_order: int


@dataclass(slots=True)
class UnresolvedReference:
    """An unresolved sponsor/speaker awaiting escalation."""

    outcome: Unresolved
    raw_header_text: str
    speaking_order: Optional[int] = None
    source: str = "speech"

    @property
    def display_name(self) -> str:
        if self.outcome.extracted_constituency:
            return f"{self.outcome.extracted_name} ({self.outcome.extracted_constituency})"
        return self.outcome.extracted_name


@dataclass(slots=True)
class UnmatchedSpeaker:
    id: int
    source_document_id: str
    extracted_name: str
    failure_reason: FailureReason
    raw_header_text: str
    extracted_constituency: Optional[str] = None
    suggested_legislator_ids: List[str] = field(default_factory=list)
    speaking_order: Optional[int] = None
    is_mapped: bool = False
    mapped_legislator_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(slots=True, frozen=True)
class SpeakerMapping:
    id: int
    unmatched_speaker_id: int
    legislator_id: str
    confidence: float
    notes: Optional[str]
    created_at: datetime
    mapped_by: Optional[str] = None


@dataclass(slots=True, frozen=True)
class Suggestion:
    legislator_id: str
    legislator_name: str
    constituency: str
    party: Optional[str]
    score: float
    reason: str


__all__ = [
    "AnswerStatus",
    "AttendanceEntry",
    "AttendanceResult",
    "AttendanceStatus",
    "Confidence",
    "EntryStatus",
    "EntryType",
    "FailureReason",
    "Legislator",
    "ParsedBillOrMotion",
    "ParsedQuestion",
    "QuestionType",
    "Resolved",
    "ResolutionOutcome",
    "SessionMetadata",
    "SpeakerMapping",
    "SpeakingSlot",
    "SpeechInstance",
    "Suggestion",
    "UNKNOWN",
    "UNKNOWN_MINISTRY",
    "UnmatchedSpeaker",
    "Unresolved",
    "UnresolvedReference",
]
