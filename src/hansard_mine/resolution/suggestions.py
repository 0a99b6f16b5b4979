"""Ranking roster legislators as candidates for an unresolved name."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from rapidfuzz import fuzz

from ..core.types import Legislator, Suggestion
from .names import normalize_constituency, normalize_name
from .resolver import Roster

EXACT_NAME_SCORE = 1.0
FUZZY_NAME_SCORE = 0.5
PARTIAL_NAME_SCORE = 0.2
CONSTITUENCY_BOOST = 0.4
MIN_NAME_SIMILARITY = 70


@dataclass(slots=True, frozen=True)
class CandidateScore:
    score: float
    reason: str


def score_candidate(name: str, constituency: Optional[str], legislator: Legislator) -> Optional[CandidateScore]:
    """Score how well ``legislator`` fits an extracted name and constituency.

    An exact normalized name match scores highest. Otherwise the
    word-order-insensitive similarity of the two names is scaled onto
    :data:`FUZZY_NAME_SCORE` once it reaches :data:`MIN_NAME_SIMILARITY`
    percent, and a bare substring match scores lowest. A matching
    constituency adds :data:`CONSTITUENCY_BOOST`. Returns ``None`` when
    nothing matches.
    """

    extracted = normalize_name(name)
    canonical = normalize_name(legislator.canonical_name)
    name_score = 0.0
    reasons: List[str] = []

    if extracted and extracted == canonical:
        name_score = EXACT_NAME_SCORE
        reasons.append("Exact name match")
    elif extracted and canonical:
        similarity = fuzz.token_sort_ratio(extracted, canonical, score_cutoff=MIN_NAME_SIMILARITY)
        if similarity:
            name_score = round(FUZZY_NAME_SCORE * similarity / 100, 4)
            reasons.append(f"Name similarity {similarity:.0f}%")
        elif extracted in canonical or canonical in extracted:
            name_score = PARTIAL_NAME_SCORE
            reasons.append("Partial name match")

    score = name_score
    if constituency and normalize_constituency(constituency) == normalize_constituency(legislator.constituency):
        score += CONSTITUENCY_BOOST
        reasons.append(f"Constituency matches ({legislator.constituency})")

    if score <= 0:
        return None
    return CandidateScore(score=round(score, 4), reason="; ".join(reasons))


def rank_suggestions(
    name: str,
    constituency: Optional[str],
    roster: Roster,
    *,
    limit: int = 5,
) -> List[Suggestion]:
    """Return the ``limit`` best candidates, ties kept in roster order."""

    scored = []
    for index, legislator in enumerate(roster):
        candidate = score_candidate(name, constituency, legislator)
        if candidate is not None:
            scored.append((candidate.score, index, legislator, candidate.reason))
    scored.sort(key=lambda item: (-item[0], item[1]))
    return [
        Suggestion(
            legislator_id=legislator.id,
            legislator_name=legislator.canonical_name,
            constituency=legislator.constituency,
            party=legislator.party,
            score=score,
            reason=reason,
        )
        for score, _, legislator, reason in scored[:limit]
    ]


__all__ = [
    "CONSTITUENCY_BOOST",
    "CandidateScore",
    "EXACT_NAME_SCORE",
    "FUZZY_NAME_SCORE",
    "MIN_NAME_SIMILARITY",
    "PARTIAL_NAME_SCORE",
    "rank_suggestions",
    "score_candidate",
]
