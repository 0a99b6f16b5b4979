"""Core domain types."""
from __future__ import annotations

from .errors import (
    HansardError,
    InputValidationError,
    SpeakerAlreadyMappedError,
    UnknownLegislatorError,
    UnmatchedSpeakerNotFoundError,
)
from .types import (
    UNKNOWN,
    UNKNOWN_MINISTRY,
    AnswerStatus,
    AttendanceEntry,
    AttendanceResult,
    AttendanceStatus,
    Confidence,
    EntryStatus,
    EntryType,
    FailureReason,
    Legislator,
    ParsedBillOrMotion,
    ParsedQuestion,
    QuestionType,
    Resolved,
    ResolutionOutcome,
    SessionMetadata,
    SpeakerMapping,
    SpeakingSlot,
    SpeechInstance,
    Suggestion,
    UnmatchedSpeaker,
    Unresolved,
    UnresolvedReference,
)

__all__ = [
    "AnswerStatus",
    "AttendanceEntry",
    "AttendanceResult",
    "AttendanceStatus",
    "Confidence",
    "EntryStatus",
    "EntryType",
    "FailureReason",
    "HansardError",
    "InputValidationError",
    "Legislator",
    "ParsedBillOrMotion",
    "ParsedQuestion",
    "QuestionType",
    "Resolved",
    "ResolutionOutcome",
    "SessionMetadata",
    "SpeakerAlreadyMappedError",
    "SpeakerMapping",
    "SpeakingSlot",
    "SpeechInstance",
    "Suggestion",
    "UNKNOWN",
    "UNKNOWN_MINISTRY",
    "UnknownLegislatorError",
    "UnmatchedSpeaker",
    "UnmatchedSpeakerNotFoundError",
    "Unresolved",
    "UnresolvedReference",
]
