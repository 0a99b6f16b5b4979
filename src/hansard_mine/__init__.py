"""Parsing and speaker resolution for Malaysian Hansard transcripts."""
from __future__ import annotations

from .clients import DirectorySource, DocumentSourceError, load_roster_file
from .config import AppConfig, ParserConfig, ResolverConfig, StorageConfig, load_config
from .core import (
    HansardError,
    InputValidationError,
    Legislator,
    Resolved,
    SpeakerAlreadyMappedError,
    UnknownLegislatorError,
    UnmatchedSpeakerNotFoundError,
    Unresolved,
)
from .database import Storage, create_storage
from .escalation import EscalationManager
from .pipeline import HansardAnalyzer, ImportPipeline, LegislatorAnalysis, PipelineEvent, parse_document
from .resolution import Roster, SpeakerResolver, normalize_name, rank_suggestions
from .runtime import PipelineResources, create_pipeline

__all__ = [
    "AppConfig",
    "DirectorySource",
    "DocumentSourceError",
    "EscalationManager",
    "HansardAnalyzer",
    "HansardError",
    "ImportPipeline",
    "InputValidationError",
    "Legislator",
    "LegislatorAnalysis",
    "ParserConfig",
    "PipelineEvent",
    "PipelineResources",
    "Resolved",
    "ResolverConfig",
    "Roster",
    "SpeakerAlreadyMappedError",
    "SpeakerResolver",
    "Storage",
    "StorageConfig",
    "UnknownLegislatorError",
    "UnmatchedSpeakerNotFoundError",
    "Unresolved",
    "create_pipeline",
    "create_storage",
    "load_config",
    "load_roster_file",
    "normalize_name",
    "parse_document",
    "rank_suggestions",
]
