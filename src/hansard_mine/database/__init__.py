"""Database integration components."""
from __future__ import annotations

from .models import Base, HansardRecord, LegislatorModel, SpeakerMappingModel, UnmatchedSpeakerModel
from .storage import RecordOverview, Storage, create_storage

__all__ = [
    "Base",
    "HansardRecord",
    "LegislatorModel",
    "RecordOverview",
    "SpeakerMappingModel",
    "Storage",
    "UnmatchedSpeakerModel",
    "create_storage",
]
