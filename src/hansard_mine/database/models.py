"""SQLAlchemy models for rosters, parsed records and the escalation queue."""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, Date, DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Declarative SQLAlchemy base class."""


class LegislatorModel(Base):
    """Roster entry; position keeps the roster order stable."""

    __tablename__ = "legislators"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, index=True)
    canonical_name: Mapped[str] = mapped_column(String(256))
    constituency: Mapped[str] = mapped_column(String(128), index=True)
    party: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)


class HansardRecord(Base):
    """One parsed transcript."""

    __tablename__ = "hansard_records"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    session_number: Mapped[str] = mapped_column(String(32))
    session_date: Mapped[str] = mapped_column(String(64))
    parsed_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    parliament_term: Mapped[str] = mapped_column(String(128))
    sitting: Mapped[str] = mapped_column(String(128))
    present_count: Mapped[int] = mapped_column(Integer, default=0)
    absent_count: Mapped[int] = mapped_column(Integer, default=0)
    procedurally_absent_count: Mapped[int] = mapped_column(Integer, default=0)
    speaker_count: Mapped[int] = mapped_column(Integer, default=0)
    speech_count: Mapped[int] = mapped_column(Integer, default=0)
    question_count: Mapped[int] = mapped_column(Integer, default=0)
    bill_count: Mapped[int] = mapped_column(Integer, default=0)
    motion_count: Mapped[int] = mapped_column(Integer, default=0)
    unmatched_count: Mapped[int] = mapped_column(Integer, default=0)
    topics: Mapped[List[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )


class UnmatchedSpeakerModel(Base):
    """Escalated resolution failure awaiting human review."""

    __tablename__ = "unmatched_speakers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_document_id: Mapped[str] = mapped_column(String(128), index=True)
    extracted_name: Mapped[str] = mapped_column(String(256))
    extracted_constituency: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    failure_reason: Mapped[str] = mapped_column(String(32))
    raw_header_text: Mapped[str] = mapped_column(Text)
    suggested_legislator_ids: Mapped[List[str]] = mapped_column(JSON, default=list)
    speaking_order: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_mapped: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    mapped_legislator_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("legislators.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    mappings: Mapped[List["SpeakerMappingModel"]] = relationship(back_populates="unmatched_speaker")


class SpeakerMappingModel(Base):
    """Append-only record of a human-confirmed mapping."""

    __tablename__ = "speaker_mappings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    unmatched_speaker_id: Mapped[int] = mapped_column(Integer, ForeignKey("unmatched_speakers.id"), index=True)
    legislator_id: Mapped[str] = mapped_column(String(64), ForeignKey("legislators.id"))
    confidence: Mapped[float] = mapped_column(Float, default=1.0)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    mapped_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    unmatched_speaker: Mapped[UnmatchedSpeakerModel] = relationship(back_populates="mappings")


__all__ = [
    "Base",
    "HansardRecord",
    "LegislatorModel",
    "SpeakerMappingModel",
    "UnmatchedSpeakerModel",
]
