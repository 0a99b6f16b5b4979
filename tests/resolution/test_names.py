from __future__ import annotations

import pytest

from hansard_mine.resolution.names import extract_sponsor, normalize_constituency, normalize_name


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Tuan Haji Ahmad Fadhli bin Shaari", "ahmad fadhli shaari"),
        ("Yang Berhormat Dato' Seri Anwar Ibrahim", "anwar ibrahim"),
        ("Dato’ Sri  Tiong King Sing", "tiong king sing"),
        ("Puan Noraini binti Ahmad", "noraini ahmad"),
        ("Tuan M. Kulasegaran a/l Murugeson", "m kulasegaran murugeson"),
        ("Dr. Dr. Tuan Lee", "lee"),
        ("   ", ""),
    ],
)
def test_normalize_name(raw, expected):
    assert normalize_name(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "Yang Berhormat Tuan Yang Berhormat Haji Ahmad",
        "Tan Sri Dato' Haji Mahiaddin bin Md Yassin",
        "TUAN  LIM   GUAN ENG",
        "Puan Hajjah Dato Datuk",
        "bin Ahmad",
    ],
)
def test_normalize_name_is_idempotent(raw):
    once = normalize_name(raw)

    assert normalize_name(once) == once


def test_normalize_constituency():
    assert normalize_constituency("  Bagan   Datuk ") == "bagan datuk"


def test_bracket_sponsor():
    match = extract_sponsor("1. Tuan Lim Guan Eng [Bagan] minta Menteri Kewangan menyatakan")

    assert match is not None
    assert (match.name, match.constituency) == ("Lim Guan Eng", "Bagan")
    assert match.raw == "Tuan Lim Guan Eng [Bagan]"


def test_parenthesised_sponsor():
    match = extract_sponsor("Soalan daripada Puan Hannah Yeoh (Segambut) mengenai perumahan.")

    assert match is not None
    assert (match.name, match.constituency) == ("Hannah Yeoh", "Segambut")


def test_office_holder_in_brackets_is_the_sponsor():
    match = extract_sponsor("Menteri Kewangan [Dato' Seri Anwar Ibrahim]: Saya mohon mencadangkan")

    assert match is not None
    assert match.name == "Dato' Seri Anwar Ibrahim"
    assert match.constituency is None


def test_cue_is_required_when_requested():
    text = "Kenyataan ini dipersetujui oleh Tuan Lim Guan Eng [Bagan] semalam."

    assert extract_sponsor(text, require_cue=True) is None
    assert extract_sponsor(text) is not None
    cued = extract_sponsor("Tuan Lim Guan Eng [Bagan]: Terima kasih.", require_cue=True)
    assert cued is not None and cued.constituency == "Bagan"


def test_no_sponsor():
    assert extract_sponsor("rang undang-undang ini dibaca kali kedua") is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Tan Sri Dato' (Dr.) Johari bin Abdul", "johari abdul"),
        ("Datuk Seri Haji Ahmad Fadhli", "ahmad fadhli"),
        ("Yang Amat Berhormat Tun Mahathir", "mahathir"),
        ("Tuan Lim Guan Eng.", "lim guan eng"),
        ("Ahmad Fadhli bin Shaari.", "ahmad fadhli shaari"),
        ("Puan Teresa Kok, Seputeh", "teresa kok seputeh"),
    ],
)
def test_normalize_name_strips_compound_titles_and_punctuation(raw, expected):
    assert normalize_name(raw) == expected


@pytest.mark.parametrize(
    "text",
    [
        "Dato' Sri Ahmad Fadhli [Pasir Mas] minta Menteri Kewangan menyatakan",
        "Datuk Seri Haji Ahmad Fadhli [Pasir Mas] minta Menteri Kewangan menyatakan",
        "1. Ahmad Fadhli [Pasir Mas]: minta Menteri Kewangan menyatakan",
        "Soalan 1: Ahmad Fadhli [Pasir Mas]: minta Menteri Kewangan menyatakan",
        "Pertanyaan oleh Ahmad Fadhli [Pasir Mas]: minta Menteri Kewangan menyatakan",
        "oleh Ahmad Fadhli [Pasir Mas]: minta Menteri Kewangan menyatakan",
    ],
)
def test_sponsor_header_variants(text):
    match = extract_sponsor(text, require_cue=True)

    assert match is not None
    assert (match.name, match.constituency) == ("Ahmad Fadhli", "Pasir Mas")


def test_earliest_bracket_header_wins():
    text = (
        "1. Tuan Lim Guan Eng [Bagan] minta Menteri Kewangan menyatakan\n"
        "Timbalan Menteri Kewangan [Tuan Lim Hui Ying]: Terima kasih."
    )

    match = extract_sponsor(text, require_cue=True)

    assert match is not None
    assert match.name == "Lim Guan Eng"


def test_narrative_line_does_not_swallow_the_sponsor():
    match = extract_sponsor("Kenyataan ini dipersetujui oleh Tuan Lim Guan Eng [Bagan] semalam.")

    assert match is not None
    assert match.name == "Lim Guan Eng"
