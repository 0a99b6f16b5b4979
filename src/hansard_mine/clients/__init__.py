"""Document and roster sources."""
from __future__ import annotations

from .files import DirectorySource, DocumentSourceError, TranscriptDocument, load_roster_file

__all__ = ["DirectorySource", "DocumentSourceError", "TranscriptDocument", "load_roster_file"]
