from __future__ import annotations

import logging

from hansard_mine.core.types import AttendanceStatus, Legislator
from hansard_mine.parsing.attendance import (
    classify_attendance,
    extract_attendance,
    parse_entries,
)
from hansard_mine.parsing.text import normalize_text

SMALL_ROLL_CALL = """KEHADIRAN

Ahli-Ahli Yang Hadir:

1. Yang Berhormat Tuan Yang di-Pertua, Tan Sri Dato' (Dr.) Johari bin Abdul
2. Yang Berhormat Tuan Lim Guan Eng (Bagan) – PH
3. Yang Berhormat Timbalan Menteri Kewangan, Tuan Lim Hui Ying (Tanjong) – PH

Ahli-Ahli Yang Tidak Hadir:

1. Yang Berhormat Tuan Ahmad Zahid Hamidi (Bagan Datuk) – BN

Ahli-Ahli Yang Tidak Hadir Di Bawah Peraturan Mesyuarat 91:

1. Yang Berhormat Puan Hannah Yeoh (Segambut) – PH

Senator Yang Turut Hadir:

1. Senator Tuan Haji Zamri bin Yusof
"""


def test_transcript_roll_call_counts(transcript_text):
    result = extract_attendance(normalize_text(transcript_text))

    assert result.present_constituency_count == 170
    assert result.absent_constituency_count == 42
    assert result.procedurally_absent_constituency_count == 10
    assert result.total_constituency_count == 222


def test_presiding_officer_is_listed_but_not_counted(transcript_text):
    result = extract_attendance(normalize_text(transcript_text))

    speaker = result.present_entries[0]
    assert speaker.constituency is None
    assert speaker.name == "Tan Sri Dato' Johari bin Abdul"
    assert len(result.present_names) == 171
    assert len(result.absent_names) == 52
    assert len(result.procedurally_absent_names) == 10


def test_entries_keep_constituency_and_strip_party(transcript_text):
    result = extract_attendance(normalize_text(transcript_text))
    by_constituency = {entry.constituency: entry for entry in result.present_entries}

    assert by_constituency["Tambun"].name == "Dato' Seri Anwar Ibrahim"
    assert by_constituency["Pasir Mas"].name == "Yang Berhormat Tuan Haji Ahmad Fadhli bin Shaari"
    assert by_constituency["Padang Besar"].name == "Yang Berhormat Dato' Rushdan Rusmi"
    assert "Senator Tuan Haji Zamri bin Yusof" not in result.present_names


def test_small_roll_call():
    result = extract_attendance(SMALL_ROLL_CALL)

    assert result.present_constituency_count == 2
    assert result.absent_constituency_count == 1
    assert result.procedurally_absent_constituency_count == 1
    assert [entry.constituency for entry in result.absent_entries] == ["Bagan Datuk"]
    assert result.procedurally_absent_names == ["Yang Berhormat Puan Hannah Yeoh"]


def test_count_mismatch_is_logged(caplog):
    with caplog.at_level(logging.WARNING):
        extract_attendance(SMALL_ROLL_CALL, expected_seats=222)

    assert "discrepancy" in caplog.text


def test_missing_roll_call_yields_empty_result():
    result = extract_attendance("Tiada senarai kehadiran.")

    assert result.total_constituency_count == 0
    assert result.present_names == []


def test_parse_entries_joins_wrapped_lines():
    entries = parse_entries(
        "\n1. Yang Berhormat Tuan Haji Ahmad Fadhli bin Shaari\n      (Pasir Mas) – PN\n2. Yang Berhormat Tuan Zakri Hassan (Kangar) – PN\n"
    )

    assert [entry.number for entry in entries] == [1, 2]
    assert entries[0].constituency == "Pasir Mas"
    assert entries[1].name == "Yang Berhormat Tuan Zakri Hassan"


def test_classify_attendance():
    result = extract_attendance(SMALL_ROLL_CALL)

    assert classify_attendance(result, Legislator("P043", "Lim Guan Eng", "Bagan")) is AttendanceStatus.PRESENT
    assert classify_attendance(result, Legislator("P075", "Ahmad Zahid Hamidi", "Bagan Datuk")) is AttendanceStatus.ABSENT
    assert classify_attendance(result, Legislator("P117", "Hannah Yeoh", "Segambut")) is AttendanceStatus.ABSENT
    assert classify_attendance(result, Legislator("P121", "Fahmi Fadzil", "Lembah Pantai")) is AttendanceStatus.UNKNOWN
