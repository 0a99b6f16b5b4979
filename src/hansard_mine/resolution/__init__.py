"""Name normalization, speaker resolution and candidate ranking."""
from __future__ import annotations

from .names import SponsorMatch, extract_sponsor, normalize_constituency, normalize_name
from .resolver import Roster, SpeakerResolver, alias_key, build_aliases
from .suggestions import CandidateScore, rank_suggestions, score_candidate

__all__ = [
    "CandidateScore",
    "Roster",
    "SpeakerResolver",
    "SponsorMatch",
    "alias_key",
    "build_aliases",
    "extract_sponsor",
    "normalize_constituency",
    "normalize_name",
    "rank_suggestions",
    "score_candidate",
]
