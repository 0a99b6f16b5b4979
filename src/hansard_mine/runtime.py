"""Application level helpers for assembling pipeline dependencies."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .clients import DirectorySource
from .config import AppConfig
from .database import Storage, create_storage
from .escalation import EscalationManager
from .pipeline import HansardAnalyzer, ImportPipeline


@dataclass(slots=True)
class PipelineResources:
    """Container bundling the objects needed to run the pipeline."""

    pipeline: ImportPipeline
    source: DirectorySource
    storage: Storage
    owns_storage: bool = True

    def close(self) -> None:
        if self.owns_storage:
            self.storage.dispose()


def open_storage(config: AppConfig) -> Storage:
    return create_storage(config.storage.database_url, echo=config.storage.echo_sql)


def create_pipeline(
    config: AppConfig,
    directory: Path,
    *,
    storage: Storage | None = None,
) -> PipelineResources:
    owns_storage = storage is None
    storage_instance = storage or open_storage(config)
    source = DirectorySource(directory)
    pipeline = ImportPipeline(
        source=source,
        storage=storage_instance,
        parser_config=config.parser,
        resolver_config=config.resolver,
    )
    return PipelineResources(
        pipeline=pipeline,
        source=source,
        storage=storage_instance,
        owns_storage=owns_storage,
    )


def create_escalation(config: AppConfig, storage: Storage) -> EscalationManager:
    """Escalation manager bound to the current roster snapshot."""

    return EscalationManager(storage, storage.load_roster(), suggestion_limit=config.resolver.suggestion_limit)


def create_analyzer(config: AppConfig, storage: Storage) -> HansardAnalyzer:
    """Analyzer over the stored roster, aware of every confirmed mapping."""

    escalation = create_escalation(config, storage)
    return HansardAnalyzer(
        escalation.roster,
        aliases=escalation.confirmed_aliases(),
        parser_config=config.parser,
        resolver_config=config.resolver,
    )


__all__ = ["PipelineResources", "create_analyzer", "create_escalation", "create_pipeline", "open_storage"]
