"""Resolve extracted speaker names to roster legislators."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple
import logging

from ..core.errors import UnknownLegislatorError
from ..core.types import Confidence, FailureReason, Legislator, Resolved, ResolutionOutcome, Unresolved
from .names import normalize_constituency, normalize_name

LOGGER = logging.getLogger(__name__)

AliasKey = Tuple[str, Optional[str]]


def alias_key(name: str, constituency: Optional[str]) -> AliasKey:
    return normalize_name(name), normalize_constituency(constituency) if constituency else None


@dataclass(slots=True, frozen=True)
class _RosterEntry:
    legislator: Legislator
    name: str
    constituency: str


class Roster:
    """Immutable snapshot of the legislator roster taken at parse start."""

    __slots__ = ("_entries", "_by_id")

    def __init__(self, legislators: Iterable[Legislator]) -> None:
        entries = tuple(
            _RosterEntry(
                legislator=legislator,
                name=normalize_name(legislator.canonical_name),
                constituency=normalize_constituency(legislator.constituency),
            )
            for legislator in legislators
        )
        self._entries: Tuple[_RosterEntry, ...] = entries
        self._by_id: Mapping[str, Legislator] = MappingProxyType(
            {entry.legislator.id: entry.legislator for entry in entries}
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Legislator]:
        return (entry.legislator for entry in self._entries)

    def __contains__(self, legislator_id: object) -> bool:
        return legislator_id in self._by_id

    def get(self, legislator_id: str) -> Optional[Legislator]:
        return self._by_id.get(legislator_id)

    def require(self, legislator_id: str) -> Legislator:
        legislator = self._by_id.get(legislator_id)
        if legislator is None:
            raise UnknownLegislatorError(legislator_id)
        return legislator

    def normalized(self) -> Tuple[Tuple[Legislator, str, str], ...]:
        """Return ``(legislator, normalized name, normalized constituency)`` triples."""

        return tuple((entry.legislator, entry.name, entry.constituency) for entry in self._entries)

    def by_constituency(self, constituency: str) -> Optional[Legislator]:
        wanted = normalize_constituency(constituency)
        for entry in self._entries:
            if entry.constituency == wanted:
                return entry.legislator
        return None


@dataclass(slots=True)
class SpeakerResolver:
    """Match ``name [constituency]`` pairs against a :class:`Roster`.

    Resolution order:

    0. confirmed aliases from earlier human mappings;
    1. constituency match whose canonical name contains the extracted name
       (high confidence);
    2. a name-only substring match in either direction, accepted only when
       exactly one legislator qualifies (low confidence);
    3. otherwise :class:`~hansard_mine.core.types.Unresolved`.
    """

    roster: Roster
    aliases: Mapping[AliasKey, str] = field(default_factory=dict)
    min_name_length: int = 3

    def resolve(self, name: str, constituency: Optional[str] = None) -> ResolutionOutcome:
        extracted_constituency = constituency.strip() if constituency and constituency.strip() else None
        normalized_name = normalize_name(name)

        alias = self._alias_for(name, extracted_constituency)
        if alias is not None:
            return Resolved(legislator_id=alias, confidence=Confidence.CONFIRMED)

        if len(normalized_name) < self.min_name_length:
            return self._unresolved(name, extracted_constituency, FailureReason.NO_NAME_MATCH)

        if extracted_constituency:
            wanted = normalize_constituency(extracted_constituency)
            for legislator, legislator_name, legislator_constituency in self.roster.normalized():
                if legislator_constituency == wanted and normalized_name in legislator_name:
                    return Resolved(legislator_id=legislator.id, confidence=Confidence.HIGH)

        candidates = [
            legislator.id
            for legislator, legislator_name, _ in self.roster.normalized()
            if legislator_name and (normalized_name in legislator_name or legislator_name in normalized_name)
        ]
        if len(candidates) == 1:
            LOGGER.debug("Name-only match for %r -> %s", name, candidates[0])
            return Resolved(legislator_id=candidates[0], confidence=Confidence.LOW)
        if len(candidates) > 1:
            return self._unresolved(
                name, extracted_constituency, FailureReason.AMBIGUOUS, candidate_ids=tuple(candidates)
            )
        reason = FailureReason.NO_NAME_MATCH if extracted_constituency else FailureReason.NO_CONSTITUENCY
        return self._unresolved(name, extracted_constituency, reason)

    def _alias_for(self, name: str, constituency: Optional[str]) -> Optional[str]:
        if not self.aliases:
            return None
        key = alias_key(name, constituency)
        legislator_id = self.aliases.get(key)
        if legislator_id is None and key[1] is not None:
            legislator_id = self.aliases.get((key[0], None))
        if legislator_id is not None and legislator_id in self.roster:
            return legislator_id
        return None

    @staticmethod
    def _unresolved(
        name: str,
        constituency: Optional[str],
        reason: FailureReason,
        *,
        candidate_ids: Tuple[str, ...] = (),
    ) -> Unresolved:
        LOGGER.debug("Could not resolve %r [%s]: %s", name, constituency or "-", reason.value)
        return Unresolved(
            extracted_name=name.strip(),
            extracted_constituency=constituency,
            failure_reason=reason,
            candidate_ids=candidate_ids,
        )


def build_aliases(pairs: Iterable[Tuple[str, Optional[str], str]]) -> Dict[AliasKey, str]:
    """Turn ``(name, constituency, legislator_id)`` triples into resolver aliases."""

    aliases: Dict[AliasKey, str] = {}
    for name, constituency, legislator_id in pairs:
        aliases[alias_key(name, constituency)] = legislator_id
    return aliases


__all__ = ["AliasKey", "Roster", "SpeakerResolver", "alias_key", "build_aliases"]
