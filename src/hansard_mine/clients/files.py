"""File-system sources for transcripts and rosters."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Sequence
import json
import logging

from ..core.errors import HansardError
from ..core.types import Legislator

LOGGER = logging.getLogger(__name__)


class DocumentSourceError(HansardError):
    """Raised when a transcript cannot be read as text."""


@dataclass(slots=True, frozen=True)
class TranscriptDocument:
    identifier: str
    filename: str
    text: str


class DirectorySource:
    """Serve already extracted ``*.txt`` transcripts from a directory."""

    def __init__(self, directory: Path, *, patterns: Sequence[str] = ("*.txt",), encoding: str = "utf8") -> None:
        self._directory = Path(directory)
        self._patterns = tuple(patterns)
        self._encoding = encoding

    def iter_documents(self) -> Iterator[str]:
        """Iterate over document identifiers in file name order."""

        if not self._directory.is_dir():
            raise DocumentSourceError(f"{self._directory} is not a directory")
        paths = sorted({path for pattern in self._patterns for path in self._directory.glob(pattern)})
        for path in paths:
            if path.is_file():
                yield path.stem

    def fetch(self, identifier: str) -> TranscriptDocument:
        path = self._path_for(identifier)
        try:
            text = path.read_text(encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentSourceError(f"Cannot read transcript {path.name}: {exc}") from exc
        return TranscriptDocument(identifier=identifier, filename=path.name, text=text)

    def _path_for(self, identifier: str) -> Path:
        for pattern in self._patterns:
            suffix = pattern.lstrip("*")
            candidate = self._directory / f"{identifier}{suffix}"
            if candidate.is_file():
                return candidate
        raise DocumentSourceError(f"Transcript {identifier} not found in {self._directory}")


def load_roster_file(path: Path) -> List[Legislator]:
    """Read a JSON list of legislators.

    Each item needs ``id``, ``name`` (or ``canonical_name``) and
    ``constituency``; ``party`` is optional.
    """

    with Path(path).open("r", encoding="utf8") as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        data = data.get("legislators", [])
    legislators: List[Legislator] = []
    for index, item in enumerate(data):
        try:
            legislators.append(
                Legislator(
                    id=str(item["id"]),
                    canonical_name=str(item.get("canonical_name") or item["name"]),
                    constituency=str(item["constituency"]),
                    party=item.get("party"),
                )
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Invalid roster entry at index {index}: {item!r}") from exc
    LOGGER.info("Loaded %s legislators from %s", len(legislators), path)
    return legislators


__all__ = ["DirectorySource", "DocumentSourceError", "TranscriptDocument", "load_roster_file"]
