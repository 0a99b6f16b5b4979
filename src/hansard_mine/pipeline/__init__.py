"""Pipeline orchestration for Hansard transcripts."""
from __future__ import annotations

from .analysis import (
    HansardAnalyzer,
    LegislatorAnalysis,
    RecordsSummary,
    SessionStats,
    SpeakerCount,
    aggregate_records,
    session_stats,
)
from .document import ParsedDocument, parse_document, validate_text
from .import_pipeline import ImportPipeline, PipelineEvent

__all__ = [
    "HansardAnalyzer",
    "ImportPipeline",
    "LegislatorAnalysis",
    "ParsedDocument",
    "PipelineEvent",
    "RecordsSummary",
    "SessionStats",
    "SpeakerCount",
    "aggregate_records",
    "parse_document",
    "session_stats",
    "validate_text",
]
