"""Sponsor extraction and resolution shared by the entry parsers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.types import Resolved, ResolutionOutcome
from ..resolution.names import SponsorMatch, extract_sponsor
from ..resolution.resolver import SpeakerResolver


@dataclass(slots=True, frozen=True)
class SponsorResolution:
    match: SponsorMatch
    outcome: ResolutionOutcome

    @property
    def legislator_id(self) -> Optional[str]:
        if isinstance(self.outcome, Resolved):
            return self.outcome.legislator_id
        return None


def resolve_sponsor(
    block: str,
    resolver: SpeakerResolver,
    *,
    require_cue: bool = False,
) -> Optional[SponsorResolution]:
    """Extract the sponsor named in ``block`` and resolve it against the roster.

    Returns ``None`` when no sponsor pattern matches.
    """

    match = extract_sponsor(block, require_cue=require_cue)
    if match is None:
        return None
    return SponsorResolution(match=match, outcome=resolver.resolve(match.name, match.constituency))


__all__ = ["SponsorResolution", "resolve_sponsor"]
