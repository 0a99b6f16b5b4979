from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from hansard_mine.clients import load_roster_file
from hansard_mine.core.types import Legislator
from hansard_mine.database import create_storage
from hansard_mine.resolution import Roster, SpeakerResolver

FIXTURES = Path(__file__).parent / "fixtures"
TRANSCRIPT = FIXTURES / "DR-17112025.txt"


@pytest.fixture(scope="session")
def legislators() -> List[Legislator]:
    return load_roster_file(FIXTURES / "roster.json")


@pytest.fixture(scope="session")
def roster(legislators) -> Roster:
    return Roster(legislators)


@pytest.fixture()
def resolver(roster) -> SpeakerResolver:
    return SpeakerResolver(roster=roster)


@pytest.fixture(scope="session")
def transcript_text() -> str:
    return TRANSCRIPT.read_text(encoding="utf8")


@pytest.fixture()
def storage(tmp_path, legislators):
    database_url = f"sqlite:///{(tmp_path / 'hansard.db').as_posix()}"
    instance = create_storage(database_url)
    instance.replace_legislators(legislators)
    yield instance
    instance.dispose()
