import json

import pytest

from hansard_mine.clients import DirectorySource, DocumentSourceError, load_roster_file


def test_iter_documents_in_name_order(tmp_path):
    (tmp_path / "DR-18112025.txt").write_text("kedua", encoding="utf8")
    (tmp_path / "DR-17112025.txt").write_text("pertama", encoding="utf8")
    (tmp_path / "notes.md").write_text("bukan transkrip", encoding="utf8")
    (tmp_path / "folder.txt").mkdir()
    source = DirectorySource(tmp_path)

    assert list(source.iter_documents()) == ["DR-17112025", "DR-18112025"]

    document = source.fetch("DR-17112025")
    assert document.filename == "DR-17112025.txt"
    assert document.text == "pertama"


def test_custom_patterns(tmp_path):
    (tmp_path / "DR-17112025.hansard").write_text("teks", encoding="utf8")
    source = DirectorySource(tmp_path, patterns=("*.hansard",))

    assert list(source.iter_documents()) == ["DR-17112025"]
    assert source.fetch("DR-17112025").filename == "DR-17112025.hansard"


def test_missing_directory_raises(tmp_path):
    source = DirectorySource(tmp_path / "tiada")

    with pytest.raises(DocumentSourceError):
        list(source.iter_documents())


def test_fetch_errors(tmp_path):
    (tmp_path / "binary.txt").write_bytes(b"\xff\xfe\xfa")
    source = DirectorySource(tmp_path)

    with pytest.raises(DocumentSourceError):
        source.fetch("binary")
    with pytest.raises(DocumentSourceError):
        source.fetch("tiada")


def test_load_roster_file_accepts_list_and_mapping(tmp_path):
    as_list = tmp_path / "list.json"
    as_list.write_text(
        json.dumps([{"id": "P043", "name": "Lim Guan Eng", "constituency": "Bagan", "party": "PH"}]),
        encoding="utf8",
    )
    as_mapping = tmp_path / "mapping.json"
    as_mapping.write_text(
        json.dumps({"legislators": [{"id": 117, "canonical_name": "Hannah Yeoh", "constituency": "Segambut"}]}),
        encoding="utf8",
    )

    (lim,) = load_roster_file(as_list)
    (hannah,) = load_roster_file(as_mapping)

    assert (lim.id, lim.canonical_name, lim.constituency, lim.party) == ("P043", "Lim Guan Eng", "Bagan", "PH")
    assert (hannah.id, hannah.canonical_name, hannah.party) == ("117", "Hannah Yeoh", None)


def test_load_roster_file_rejects_incomplete_entries(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text(json.dumps([{"id": "P001", "name": "Tanpa Kawasan"}]), encoding="utf8")

    with pytest.raises(ValueError, match="index 0"):
        load_roster_file(path)


def test_fixture_roster_has_every_seat(legislators):
    assert len(legislators) == 222
    assert len({legislator.constituency for legislator in legislators}) == 222
