from __future__ import annotations

import pytest

from hansard_mine.core.types import Legislator
from hansard_mine.resolution.suggestions import (
    CONSTITUENCY_BOOST,
    EXACT_NAME_SCORE,
    PARTIAL_NAME_SCORE,
    rank_suggestions,
    score_candidate,
)

HANNAH = Legislator("P117", "Hannah Yeoh", "Segambut", "PH")
FADHLI = Legislator("P022", "Ahmad Fadhli Shaari", "Pasir Mas", "PN")


def test_exact_name_and_constituency():
    candidate = score_candidate("Yang Berhormat Puan Hannah Yeoh", "Segambut", HANNAH)

    assert candidate is not None
    assert candidate.score == pytest.approx(EXACT_NAME_SCORE + CONSTITUENCY_BOOST)
    assert candidate.reason == "Exact name match; Constituency matches (Segambut)"


def test_similar_name_scales_with_similarity():
    candidate = score_candidate("Ahmad Fadhli", None, FADHLI)

    assert candidate is not None
    assert candidate.score == pytest.approx(0.3871)
    assert candidate.reason == "Name similarity 77%"


def test_misspelt_name_still_scores_by_similarity():
    candidate = score_candidate("Ahmad Fadli Shari", None, Legislator("P022", "Ahmad Fadhli bin Shaari", "Pasir Mas"))

    assert candidate is not None
    assert candidate.score == pytest.approx(0.4722)
    assert candidate.reason == "Name similarity 94%"


def test_short_fragment_falls_back_to_partial_match(roster):
    for legislator_id in ("P022", "P047"):
        candidate = score_candidate("Fadhli", None, roster.require(legislator_id))

        assert candidate is not None
        assert candidate.score == pytest.approx(PARTIAL_NAME_SCORE)
        assert candidate.reason == "Partial name match"


def test_partial_name_match():
    candidate = score_candidate("Fadhli", None, FADHLI)

    assert candidate is not None
    assert candidate.score == pytest.approx(PARTIAL_NAME_SCORE)


def test_constituency_alone_still_scores():
    candidate = score_candidate("Orang Lain", "segambut", HANNAH)

    assert candidate is not None
    assert candidate.score == pytest.approx(CONSTITUENCY_BOOST)


def test_no_match_returns_none():
    assert score_candidate("Zzz Qqq", None, HANNAH) is None
    assert score_candidate("", "Bagan", HANNAH) is None


def test_rank_suggestions_orders_by_score(roster):
    suggestions = rank_suggestions("Ahmad Fadhli", "Pasir Mas", roster)

    assert suggestions[0].legislator_id == "P022"
    assert suggestions[0].legislator_name == "Ahmad Fadhli Shaari"
    assert suggestions[0].party == "PN"
    assert suggestions[0].score == pytest.approx(0.7871)
    assert len(suggestions) <= 5
    scores = [suggestion.score for suggestion in suggestions]
    assert scores == sorted(scores, reverse=True)


def test_rank_suggestions_breaks_ties_by_roster_order(roster):
    suggestions = rank_suggestions("Fadhli", None, roster)

    assert [suggestion.legislator_id for suggestion in suggestions] == ["P022", "P047"]


def test_rank_suggestions_respects_limit(roster):
    assert len(rank_suggestions("Lim", None, roster, limit=2)) == 2
    assert rank_suggestions("Zzz Qqq", None, roster) == []
