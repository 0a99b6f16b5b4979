"""Persistence helpers built on SQLAlchemy."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from sqlalchemy import create_engine, delete, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ..core.errors import SpeakerAlreadyMappedError, UnmatchedSpeakerNotFoundError
from ..core.types import (
    AttendanceResult,
    FailureReason,
    Legislator,
    SessionMetadata,
    SpeakerMapping,
    UnmatchedSpeaker,
)
from ..resolution.resolver import Roster
from .models import Base, HansardRecord, LegislatorModel, SpeakerMappingModel, UnmatchedSpeakerModel


@dataclass(slots=True)
class RecordOverview:
    """Lightweight representation of a persisted transcript."""

    identifier: str
    session_number: str
    session_date: str
    parsed_date: date | None
    parliament_term: str
    present_count: int
    absent_count: int
    procedurally_absent_count: int
    speaker_count: int
    unmatched_count: int
    speech_count: int
    question_count: int
    updated_at: datetime | None


def _to_unmatched(model: UnmatchedSpeakerModel) -> UnmatchedSpeaker:
    return UnmatchedSpeaker(
        id=model.id,
        source_document_id=model.source_document_id,
        extracted_name=model.extracted_name,
        failure_reason=FailureReason(model.failure_reason),
        raw_header_text=model.raw_header_text,
        extracted_constituency=model.extracted_constituency,
        suggested_legislator_ids=list(model.suggested_legislator_ids or []),
        speaking_order=model.speaking_order,
        is_mapped=model.is_mapped,
        mapped_legislator_id=model.mapped_legislator_id,
        created_at=model.created_at,
    )


def _to_mapping(model: SpeakerMappingModel) -> SpeakerMapping:
    return SpeakerMapping(
        id=model.id,
        unmatched_speaker_id=model.unmatched_speaker_id,
        legislator_id=model.legislator_id,
        confidence=model.confidence,
        notes=model.notes,
        created_at=model.created_at,
        mapped_by=model.mapped_by,
    )


class Storage:
    """Wrapper around SQLAlchemy to store rosters, records and escalations."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @contextmanager
    def session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ensure_schema(self) -> None:
        Base.metadata.create_all(self._engine)

    def dispose(self) -> None:
        """Dispose the underlying SQLAlchemy engine."""

        self._engine.dispose()

    # Roster

    def replace_legislators(self, legislators: Sequence[Legislator]) -> int:
        with self.session() as session:
            session.execute(delete(LegislatorModel))
            for position, legislator in enumerate(legislators):
                session.add(
                    LegislatorModel(
                        id=legislator.id,
                        position=position,
                        canonical_name=legislator.canonical_name,
                        constituency=legislator.constituency,
                        party=legislator.party,
                    )
                )
            session.flush()
            return len(legislators)

    def load_roster(self) -> Roster:
        """Return an immutable snapshot of the roster in stored order."""

        with self.session() as session:
            stmt = select(LegislatorModel).order_by(LegislatorModel.position, LegislatorModel.id)
            return Roster(
                Legislator(
                    id=row.id,
                    canonical_name=row.canonical_name,
                    constituency=row.constituency,
                    party=row.party,
                )
                for row in session.scalars(stmt)
            )

    # Parsed records

    def upsert_record(
        self,
        document_id: str,
        metadata: SessionMetadata,
        attendance: AttendanceResult,
        *,
        speaker_count: int = 0,
        speech_count: int = 0,
        question_count: int = 0,
        bill_count: int = 0,
        motion_count: int = 0,
        unmatched_count: int = 0,
        topics: Optional[List[str]] = None,
    ) -> None:
        with self.session() as session:
            record = session.get(HansardRecord, document_id)
            if record is None:
                record = HansardRecord(id=document_id)
                session.add(record)
            record.session_number = metadata.session_number
            record.session_date = metadata.session_date
            record.parsed_date = metadata.parsed_date
            record.parliament_term = metadata.parliament_term
            record.sitting = metadata.sitting
            record.present_count = attendance.present_constituency_count
            record.absent_count = attendance.absent_constituency_count
            record.procedurally_absent_count = attendance.procedurally_absent_constituency_count
            record.speaker_count = speaker_count
            record.speech_count = speech_count
            record.question_count = question_count
            record.bill_count = bill_count
            record.motion_count = motion_count
            record.unmatched_count = unmatched_count
            record.topics = list(topics or [])

    def list_records(self, limit: int = 25) -> list[RecordOverview]:
        """Return the latest stored transcripts, newest sitting first."""

        with self.session() as session:
            stmt = (
                select(HansardRecord)
                .order_by(
                    HansardRecord.parsed_date.desc().nullslast(),
                    HansardRecord.updated_at.desc().nullslast(),
                    HansardRecord.id.desc(),
                )
                .limit(limit)
            )
            return [
                RecordOverview(
                    identifier=row.id,
                    session_number=row.session_number,
                    session_date=row.session_date,
                    parsed_date=row.parsed_date,
                    parliament_term=row.parliament_term,
                    present_count=row.present_count,
                    absent_count=row.absent_count,
                    procedurally_absent_count=row.procedurally_absent_count,
                    speaker_count=row.speaker_count,
                    unmatched_count=row.unmatched_count,
                    speech_count=row.speech_count,
                    question_count=row.question_count,
                    updated_at=row.updated_at,
                )
                for row in session.scalars(stmt)
            ]

    # Escalation queue

    def add_unmatched_speaker(
        self,
        document_id: str,
        *,
        extracted_name: str,
        extracted_constituency: Optional[str],
        failure_reason: FailureReason,
        raw_header_text: str,
        suggested_legislator_ids: Iterable[str] = (),
        speaking_order: Optional[int] = None,
    ) -> UnmatchedSpeaker:
        with self.session() as session:
            model = UnmatchedSpeakerModel(
                source_document_id=document_id,
                extracted_name=extracted_name,
                extracted_constituency=extracted_constituency,
                failure_reason=failure_reason.value,
                raw_header_text=raw_header_text,
                suggested_legislator_ids=list(suggested_legislator_ids),
                speaking_order=speaking_order,
                is_mapped=False,
            )
            session.add(model)
            session.flush()
            session.refresh(model)
            return _to_unmatched(model)

    def get_unmatched_speaker(self, unmatched_speaker_id: int) -> UnmatchedSpeaker:
        with self.session() as session:
            model = session.get(UnmatchedSpeakerModel, unmatched_speaker_id)
            if model is None:
                raise UnmatchedSpeakerNotFoundError(unmatched_speaker_id)
            return _to_unmatched(model)

    def list_unmatched_speakers(
        self,
        *,
        document_id: Optional[str] = None,
        unmapped_only: bool = False,
    ) -> list[UnmatchedSpeaker]:
        with self.session() as session:
            stmt = select(UnmatchedSpeakerModel)
            if document_id is not None:
                stmt = stmt.where(UnmatchedSpeakerModel.source_document_id == document_id)
            if unmapped_only:
                stmt = stmt.where(UnmatchedSpeakerModel.is_mapped.is_(False))
            stmt = stmt.order_by(UnmatchedSpeakerModel.id)
            return [_to_unmatched(model) for model in session.scalars(stmt)]

    def update_suggestions(self, unmatched_speaker_id: int, legislator_ids: Sequence[str]) -> UnmatchedSpeaker:
        with self.session() as session:
            model = session.get(UnmatchedSpeakerModel, unmatched_speaker_id)
            if model is None:
                raise UnmatchedSpeakerNotFoundError(unmatched_speaker_id)
            if model.is_mapped:
                raise SpeakerAlreadyMappedError(unmatched_speaker_id)
            model.suggested_legislator_ids = list(legislator_ids)
            session.flush()
            return _to_unmatched(model)

    def mark_mapped(
        self,
        unmatched_speaker_id: int,
        legislator_id: str,
        *,
        confidence: float = 1.0,
        notes: Optional[str] = None,
        mapped_by: Optional[str] = None,
    ) -> SpeakerMapping:
        """Flip the speaker to mapped and append the mapping in one transaction.

        The update only applies while ``is_mapped`` is still false, so a
        second confirmation affects no rows and raises
        :class:`~hansard_mine.core.errors.SpeakerAlreadyMappedError`.
        """

        with self.session() as session:
            result = session.execute(
                update(UnmatchedSpeakerModel)
                .where(
                    UnmatchedSpeakerModel.id == unmatched_speaker_id,
                    UnmatchedSpeakerModel.is_mapped.is_(False),
                )
                .values(is_mapped=True, mapped_legislator_id=legislator_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                if session.get(UnmatchedSpeakerModel, unmatched_speaker_id) is None:
                    raise UnmatchedSpeakerNotFoundError(unmatched_speaker_id)
                raise SpeakerAlreadyMappedError(unmatched_speaker_id)
            mapping = SpeakerMappingModel(
                unmatched_speaker_id=unmatched_speaker_id,
                legislator_id=legislator_id,
                confidence=confidence,
                notes=notes,
                mapped_by=mapped_by,
            )
            session.add(mapping)
            session.flush()
            session.refresh(mapping)
            return _to_mapping(mapping)

    def list_speaker_mappings(self, *, unmatched_speaker_id: Optional[int] = None) -> list[SpeakerMapping]:
        with self.session() as session:
            stmt = select(SpeakerMappingModel).order_by(SpeakerMappingModel.id)
            if unmatched_speaker_id is not None:
                stmt = stmt.where(SpeakerMappingModel.unmatched_speaker_id == unmatched_speaker_id)
            return [_to_mapping(model) for model in session.scalars(stmt)]

    def confirmed_aliases(self) -> list[Tuple[str, Optional[str], str]]:
        """Return ``(extracted name, constituency, legislator id)`` for every mapping."""

        with self.session() as session:
            stmt = (
                select(
                    UnmatchedSpeakerModel.extracted_name,
                    UnmatchedSpeakerModel.extracted_constituency,
                    SpeakerMappingModel.legislator_id,
                )
                .join(SpeakerMappingModel, SpeakerMappingModel.unmatched_speaker_id == UnmatchedSpeakerModel.id)
                .order_by(SpeakerMappingModel.id)
            )
            return [(row[0], row[1], row[2]) for row in session.execute(stmt).all()]


def create_storage(database_url: str, *, echo: bool = False) -> Storage:
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(database_url, echo=echo, future=True, connect_args=connect_args)
    storage = Storage(engine)
    storage.ensure_schema()
    return storage


__all__ = ["RecordOverview", "Storage", "create_storage"]
