"""Exception hierarchy shared by the parsing engine and its adapters."""
from __future__ import annotations


class HansardError(RuntimeError):
    """Base class for errors raised by :mod:`hansard_mine`."""


class InputValidationError(HansardError, ValueError):
    """Raised when a caller-supplied document or identifier is unusable."""


class UnknownLegislatorError(InputValidationError):
    """Raised when a legislator id is not part of the roster snapshot."""

    def __init__(self, legislator_id: str) -> None:
        super().__init__(f"Legislator {legislator_id!r} is not in the roster")
        self.legislator_id = legislator_id


class UnmatchedSpeakerNotFoundError(HansardError, LookupError):
    """Raised when an escalation record does not exist."""

    def __init__(self, unmatched_speaker_id: int) -> None:
        super().__init__(f"Unmatched speaker {unmatched_speaker_id} not found")
        self.unmatched_speaker_id = unmatched_speaker_id


class SpeakerAlreadyMappedError(HansardError):
    """Raised when confirming a mapping for a speaker that is already mapped."""

    def __init__(self, unmatched_speaker_id: int) -> None:
        super().__init__(f"Unmatched speaker {unmatched_speaker_id} is already mapped")
        self.unmatched_speaker_id = unmatched_speaker_id


__all__ = [
    "HansardError",
    "InputValidationError",
    "SpeakerAlreadyMappedError",
    "UnknownLegislatorError",
    "UnmatchedSpeakerNotFoundError",
]
