"""Tests for field normalization."""

import pytest

from rdstext.pipeline.normalizer import FieldNormalizer, decode_entity_layers

from conftest import make_config


@pytest.fixture
def normalizer():
    return FieldNormalizer(make_config())


@pytest.fixture
def ascii_normalizer():
    return FieldNormalizer(make_config(ascii_safe_enabled=True))


@pytest.fixture
def latin_normalizer():
    return FieldNormalizer(make_config(transliteration_enabled=True))


class TestInvisibleAndEntities:

    def test_invisible_characters_removed(self, normalizer):
        text = "Daft" + chr(0x200B) + " Punk" + chr(0x00AD) + chr(0xFEFF)
        assert normalizer.normalize(text) == "Daft Punk"

    def test_spacing_controls_become_spaces(self, normalizer):
        assert normalizer.normalize("Daft\tPunk\r\nLive") == "Daft Punk Live"

    def test_entities_decoded(self, normalizer):
        assert normalizer.normalize("Simon &amp; Garfunkel") == "Simon & Garfunkel"
        assert normalizer.normalize("Guns N&#39; Roses") == "Guns N' Roses"

    def test_double_encoded_entities(self):
        assert decode_entity_layers("&amp;amp;") == "&"

    def test_unknown_entity_kept(self, normalizer):
        assert normalizer.normalize("R&foo; B") == "R&foo; B"

    def test_empty_input(self, normalizer):
        assert normalizer.normalize("") == ""
        assert normalizer.normalize(chr(0x200B)) == ""


class TestSymbols:

    def test_fullwidth_forms(self, normalizer):
        fullwidth = "".join(chr(ord(ch) + 0xFEE0) for ch in "ABC")
        assert normalizer.normalize(fullwidth + chr(0x3000) + "1") == "ABC 1"

    def test_quotes_dashes_ellipsis(self, normalizer):
        assert normalizer.normalize("Don" + chr(0x2019) + "t") == "Don't"
        assert normalizer.normalize("A " + chr(0x2014) + " B") == "A - B"
        assert normalizer.normalize("Wait" + chr(0x2026)) == "Wait..."

    def test_units_and_currency(self, normalizer):
        assert normalizer.normalize("25" + chr(0x00B0) + "C") == "25 C"
        assert normalizer.normalize("10k" + chr(0x03A9)) == "10 kOhm"
        assert normalizer.normalize(chr(0x00A3) + "5") == "GBP 5"

    def test_non_breaking_space(self, normalizer):
        assert normalizer.normalize("Daft" + chr(0x00A0) + "Punk") == "Daft Punk"


class TestNoiseTags:

    def test_bitrate_tag_removed(self, normalizer):
        assert normalizer.normalize("Song [320kbps]") == "Song"

    def test_url_tag_removed(self, normalizer):
        assert normalizer.normalize("Song [www.example.com]") == "Song"

    def test_meaningful_bracket_kept(self, normalizer):
        assert normalizer.normalize("Song (Radio Edit)") == "Song (Radio Edit)"

    def test_field_of_only_noise_tags_becomes_empty(self, normalizer):
        assert normalizer.normalize("[320kbps]") == ""
        assert normalizer.normalize("[MP3] {VirtualDJ}") == ""


class TestRepertoire:

    def test_unicode_keeps_other_scripts(self, normalizer):
        assert normalizer.normalize("Παόλα") == "Παόλα"
        assert normalizer.normalize("Björk") == "Björk"

    def test_ascii_folds_latin(self, ascii_normalizer):
        assert ascii_normalizer.normalize("Björk") == "Bjork"
        assert ascii_normalizer.normalize("Straße") == "Strasse"
        assert ascii_normalizer.normalize("Sigur Rós") == "Sigur Ros"

    def test_ascii_transliterates(self, ascii_normalizer):
        assert ascii_normalizer.normalize("Кино") == "Kino"

    def test_ascii_output_is_printable(self, ascii_normalizer):
        result = ascii_normalizer.normalize("東京 Tokyo " + chr(0x1F600))
        assert result == "Tokyo"
        assert all(0x20 <= ord(ch) <= 0x7E for ch in result)

    def test_latin_drops_cjk(self, latin_normalizer):
        assert latin_normalizer.normalize("東京") == ""
        assert latin_normalizer.normalize("Björk 東京") == "Björk"

    def test_latin_transliterates_greek(self, latin_normalizer):
        assert latin_normalizer.normalize("Τώρα Πια") == "Tora Pia"
