"""Batch import of transcripts with progress notifications."""
from __future__ import annotations

from dataclasses import dataclass
from threading import Event
from typing import Callable, Literal, Optional
import logging

from ..clients import DirectorySource, DocumentSourceError
from ..config import ParserConfig, ResolverConfig
from ..core.errors import InputValidationError
from ..database import Storage
from ..escalation import EscalationManager
from .analysis import HansardAnalyzer

LOGGER = logging.getLogger(__name__)

PipelineEventKind = Literal[
    "start",
    "document",
    "parsed",
    "stored",
    "escalated",
    "progress",
    "skipped",
    "finished",
    "cancelled",
    "error",
]


@dataclass(slots=True)
class PipelineEvent:
    """Fine grained progress notification emitted by :class:`ImportPipeline`."""

    kind: PipelineEventKind
    processed: int
    document_id: str | None = None
    message: str | None = None
    speech_count: int | None = None
    unmatched_count: int | None = None


ProgressCallback = Callable[[PipelineEvent], None]


class ImportPipeline:
    """Parse transcripts, persist their records and escalate unresolved speakers.

    The roster and confirmed aliases are snapshotted once per run.
    Cancellation is honoured between documents only.
    """

    def __init__(
        self,
        *,
        source: DirectorySource,
        storage: Storage,
        parser_config: Optional[ParserConfig] = None,
        resolver_config: Optional[ResolverConfig] = None,
    ) -> None:
        self._source = source
        self._storage = storage
        self._parser_config = parser_config or ParserConfig()
        self._resolver_config = resolver_config or ResolverConfig()

    def run(
        self,
        *,
        limit: Optional[int] = None,
        progress_callback: Optional[ProgressCallback] = None,
        cancel_event: Optional[Event] = None,
    ) -> int:
        """Run the pipeline end-to-end and return the number of imported documents."""

        processed = 0
        cancelled = False
        had_error = False
        current_id: str | None = None
        self._notify(
            progress_callback,
            PipelineEvent(kind="start", processed=processed, message="Pipeline run started"),
        )
        try:
            roster = self._storage.load_roster()
            escalation = EscalationManager(
                self._storage, roster, suggestion_limit=self._resolver_config.suggestion_limit
            )
            analyzer = HansardAnalyzer(
                roster,
                aliases=escalation.confirmed_aliases(),
                parser_config=self._parser_config,
                resolver_config=self._resolver_config,
            )
            LOGGER.info("Roster snapshot holds %s legislators", len(roster))
            for identifier in self._source.iter_documents():
                if limit is not None and processed >= limit:
                    break
                if cancel_event and cancel_event.is_set():
                    cancelled = True
                    break
                current_id = identifier
                LOGGER.info("Processing transcript %s", identifier)
                self._notify(
                    progress_callback,
                    PipelineEvent(
                        kind="document",
                        processed=processed,
                        document_id=identifier,
                        message=f"Processing transcript {identifier}",
                    ),
                )
                try:
                    transcript = self._source.fetch(identifier)
                    document = analyzer.parse(
                        transcript.text, document_id=identifier, filename=transcript.filename
                    )
                except (DocumentSourceError, InputValidationError) as exc:
                    LOGGER.warning("Skipping transcript %s: %s", identifier, exc)
                    self._notify(
                        progress_callback,
                        PipelineEvent(kind="skipped", processed=processed, document_id=identifier, message=str(exc)),
                    )
                    continue
                references = document.unresolved_references()
                speech_count = len(document.speakers.instances)
                self._notify(
                    progress_callback,
                    PipelineEvent(
                        kind="parsed",
                        processed=processed,
                        document_id=identifier,
                        message=f"Parsed {speech_count} speech instances",
                        speech_count=speech_count,
                        unmatched_count=len(references),
                    ),
                )
                self._storage.upsert_record(
                    identifier,
                    document.metadata,
                    document.attendance,
                    speaker_count=len(document.speakers.speakers),
                    speech_count=speech_count,
                    question_count=len(document.questions),
                    bill_count=len(document.bills),
                    motion_count=len(document.motions),
                    unmatched_count=len(references),
                    topics=document.topics,
                )
                self._notify(
                    progress_callback,
                    PipelineEvent(
                        kind="stored",
                        processed=processed,
                        document_id=identifier,
                        message="Persisted transcript record",
                        speech_count=speech_count,
                    ),
                )
                created = escalation.record_unresolved(identifier, references)
                if created:
                    self._notify(
                        progress_callback,
                        PipelineEvent(
                            kind="escalated",
                            processed=processed,
                            document_id=identifier,
                            message=f"Queued {len(created)} unmatched speakers",
                            unmatched_count=len(created),
                        ),
                    )
                processed += 1
                self._notify(
                    progress_callback,
                    PipelineEvent(
                        kind="progress",
                        processed=processed,
                        document_id=identifier,
                        message=f"Completed transcript {identifier}",
                        speech_count=speech_count,
                    ),
                )
            if cancel_event and cancel_event.is_set():
                cancelled = True
        except Exception as exc:
            had_error = True
            LOGGER.exception("Import pipeline failed: %s", exc)
            self._notify(
                progress_callback,
                PipelineEvent(kind="error", processed=processed, document_id=current_id, message=str(exc)),
            )
            raise
        finally:
            if cancelled:
                self._notify(
                    progress_callback,
                    PipelineEvent(
                        kind="cancelled",
                        processed=processed,
                        document_id=current_id,
                        message="Pipeline run cancelled",
                    ),
                )
            elif not had_error:
                self._notify(
                    progress_callback,
                    PipelineEvent(
                        kind="finished",
                        processed=processed,
                        document_id=current_id,
                        message="Pipeline run finished",
                    ),
                )
        return processed

    @staticmethod
    def _notify(callback: Optional[ProgressCallback], event: PipelineEvent) -> None:
        if callback:
            callback(event)


__all__ = ["ImportPipeline", "PipelineEvent"]
