"""Tests for letterhead detection"""
from letter_extractor.letterhead import (
    content_after_letterhead,
    find_letterhead_end,
    is_letterhead_line,
)


def test_keyword_and_contact_lines_are_letterhead():
    assert is_letterhead_line("PEMERINTAH KOTA PALEMBANG")
    assert is_letterhead_line("Dinas Kearsipan")
    assert is_letterhead_line("Jl. Merdeka No. 1")
    assert is_letterhead_line("Telp. (0711) 350100 Fax (0711) 350101")
    assert is_letterhead_line("website: arsip.example.go.id")
    assert is_letterhead_line("Kode Pos 30129")


def test_short_uppercase_heading_is_letterhead():
    assert is_letterhead_line("SEKRETARIAT DAERAH")


def test_ordinary_lines_are_not_letterhead():
    assert not is_letterhead_line("Palembang, 5 Januari 2024")
    assert not is_letterhead_line("Nomor : 123/ABC/2024")
    assert not is_letterhead_line("SINGKAT")  # uppercase but too short
    assert not is_letterhead_line("SATU DUA TIGA EMPAT LIMA ENAM TUJUH")  # too many words


def test_offset_counts_leading_letterhead_lines(sample_letter_text):
    assert find_letterhead_end(sample_letter_text) == 3


def test_offset_is_zero_without_letterhead():
    assert find_letterhead_end("Nomor : 1/2024\nHal : Data") == 0


def test_offset_is_bounded_by_scan_limit():
    text = "\n".join(["PEMERINTAH PROVINSI"] * 20)
    assert find_letterhead_end(text) == 15
    assert find_letterhead_end(text, scan_limit=4) == 4


def test_offset_never_exceeds_line_count():
    assert find_letterhead_end("DINAS KEARSIPAN\nBADAN ARSIP") == 2
    assert find_letterhead_end("") == 0


def test_content_after_letterhead_keeps_blank_lines(sample_letter_text):
    content = content_after_letterhead(sample_letter_text)
    assert content.startswith("Palembang, 5 Januari 2024\nNomor")
    assert "\n\nDengan hormat," in content
    assert "PEMERINTAH" not in content


def test_content_after_letterhead_ignores_blank_lines_in_header():
    text = "PEMERINTAH KOTA\n\nDINAS PENDIDIKAN\nNomor : 7/2024"
    assert content_after_letterhead(text) == "Nomor : 7/2024"
