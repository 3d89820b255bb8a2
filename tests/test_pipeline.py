"""End-to-end tests for the RDS text pipeline."""

import random
import re

import pytest

from rdstext.models.schemas import Degradation, OutputBundle
from rdstext.pipeline.composer import RT_PLUS_ARTIST, RT_PLUS_END, RT_PLUS_TITLE
from rdstext.pipeline.orchestrator import RdsTextPipeline
from rdstext.text.charmaps import is_invisible
from rdstext.text.keys import utf16_len

from conftest import US, make_config, record

ALL_STARS = "Diana Ross, Michael Jackson, Stevie Wonder, Smokey Robinson, Marvin Gaye"
LIBERATION = "Liberation Agitato / A Brand New Day / Liberation Ballet"

CORPUS = [
    record("Queen", "Bohemian Rhapsody"),
    record("Björk", "Jóga"),
    record("Artist", "Song (Live @Wembley 2010)"),
    f"A{US}B{US}C",
    record(ALL_STARS, LIBERATION),
    record("Παόλα", "Τώρα Πια"),
    record("Calvin Harris & Dua Lipa", "One Kiss (feat. Dua Lipa)"),
    record("Nirvana (UK)", "Smells Like Teen Spirit"),
    record("Simon &amp; Garfunkel", "The Boxer [320kbps]"),
    chr(0xFEFF) + record("Daft Punk", "One More Time") + chr(0x200B),
    "This is a very long title-only record without any delimiter that keeps going on and on",
    record("Artist", "Song " + chr(0x1F600) * 2),
    record("Electric Light Orchestra (ELO)", "Mr. Blue Sky (2012 Version)"),
    record(
        "DJ Khaled feat. Justin Bieber, Quavo, Chance the Rapper & Lil Wayne",
        "I'm the One (Remix) [Explicit]",
    ),
    record("Motörhead", "Ace of Spades (Live)"),
    record("Кино", "Группа крови"),
    record("Queen", "Bohemian Rhapsody (Live @ Wembley, 1986) / We Will Rock You"),
    record("Queen", "One (Live @ Wembley, 1986) / Two"),
    record("[320kbps]", "Song"),
    record("Artist", "[MP3]"),
    record("[320kbps]", "Song - Radio Edit"),
    record("[MP3]", "[320kbps]"),
    "",
    "   ",
    "A" * 200,
]

# Fragments combined at random to widen the property checks
MIX_ARTISTS = [
    "Queen", "Björk", "Кино", "Nirvana (UK)", "Simon &amp; Garfunkel", "[320kbps]", "Calvin Harris & Dua Lipa",
]
MIX_TITLES = ["Bohemian Rhapsody", "Jóga", "Группа крови", "Smells Like Teen Spirit", "One Kiss"]
MIX_TAILS = [
    "", " (Live)", " [320kbps]", " (Live @ Wembley, 1986) / Encore", " (2012 Remaster)", " - Radio Edit",
]

PRINTABLE_ASCII = re.compile(r"^[\x20-\x7E]*$")


def split_rt_plus(rt_plus, joiner=" - "):
    """Recover (artist, title) from an RT+ payload."""
    middle = f"{RT_PLUS_END}{joiner}{RT_PLUS_TITLE}"
    if rt_plus.startswith(RT_PLUS_ARTIST) and middle in rt_plus:
        artist, title = rt_plus[len(RT_PLUS_ARTIST):-len(RT_PLUS_END)].split(middle, 1)
        return artist, title
    if rt_plus.startswith(RT_PLUS_ARTIST):
        return rt_plus[len(RT_PLUS_ARTIST):-len(RT_PLUS_END)], ""
    return "", rt_plus[len(RT_PLUS_TITLE):-len(RT_PLUS_END)]


class TestScenarios:

    def test_simple_record(self, pipeline):
        bundle = pipeline.process(record("Queen", "Bohemian Rhapsody"))
        assert bundle.rt == "Queen - Bohemian Rhapsody"
        assert bundle.rt_plus == r"\+arQueen\- - \+tiBohemian Rhapsody\-"
        assert bundle.prefix == "Now playing: "

    def test_ascii_safe_folds_diacritics(self, ascii_pipeline):
        assert ascii_pipeline.process(record("Björk", "Jóga")).rt == "Bjork - Joga"

    def test_live_tail_stripped(self, pipeline):
        assert pipeline.process(record("Artist", "Song (Live @Wembley 2010)")).rt == "Artist - Song"

    def test_ambiguous_delimiters_are_title_only(self, pipeline):
        result = pipeline.process_detailed(f"A{US}B{US}C")
        assert result.parsed.artist == ""
        assert result.parsed.title == f"A{US}B{US}C"
        assert result.bundle.rt == f"A{US}B{US}C"
        assert result.bundle.rt_plus == RT_PLUS_TITLE + f"A{US}B{US}C" + RT_PLUS_END
        assert result.degradations == [Degradation.PARSE_AMBIGUOUS]

    def test_long_artist_list(self, pipeline):
        rt = pipeline.process(record(ALL_STARS, LIBERATION)).rt
        assert utf16_len(rt) <= 64
        assert rt.startswith("Diana Ross")
        assert rt.endswith("...")
        assert "Liberation Agitato" in rt
        assert rt == "Diana Ross... - Liberation Agitato / A Brand New Day..."

    def test_greek_with_transliteration(self, translit_pipeline):
        assert translit_pipeline.process(record("Παόλα", "Τώρα Πια")).rt == "Paola - Tora Pia"

    def test_greek_without_transliteration(self, pipeline):
        rt = pipeline.process(record("Παόλα", "Τώρα Πια")).rt
        assert rt == "Παόλα - Τώρα Πια"
        assert not any(is_invisible(ch) for ch in rt)


class TestDegradations:

    def test_invalid_record(self, pipeline):
        result = pipeline.process_detailed(f"Just Words{US}")
        assert result.bundle == OutputBundle()
        assert Degradation.INVALID_RECORD in result.degradations

    def test_empty_input(self, pipeline):
        assert pipeline.process("").is_empty
        assert pipeline.process(None).is_empty

    def test_field_filtered_away(self, translit_pipeline):
        result = translit_pipeline.process_detailed(record("Queen", "東京"))
        assert result.bundle.rt == "Queen"
        assert result.bundle.rt_plus == r"\+arQueen\-"
        assert Degradation.EMPTY_AFTER_FILTER in result.degradations

    def test_noise_only_artist_falls_back_to_title(self, pipeline):
        result = pipeline.process_detailed(record("[320kbps]", "Song"))
        assert result.bundle.rt == "Song"
        assert result.bundle.rt_plus == r"\+tiSong\-"
        assert Degradation.EMPTY_AFTER_FILTER in result.degradations

    def test_noise_only_title_falls_back_to_artist(self, pipeline):
        assert pipeline.process(record("Artist", "[MP3]")).rt == "Artist"

    def test_title_tails_stripped_when_artist_filtered_away(self, pipeline):
        assert pipeline.process(record("[320kbps]", "Song - Radio Edit")).rt == "Song"

    def test_bracketed_venue_keeps_following_title(self, pipeline):
        bundle = pipeline.process(record("Queen", "One (Live @ Wembley, 1986) / Two"))
        assert bundle.rt == "Queen - One (Live @ Wembley, 1986) / Two"

    def test_budget_exhausted(self):
        pipeline = RdsTextPipeline(make_config(max_len=3))
        result = pipeline.process_detailed(record("ABBA", "SOS"))
        assert result.bundle.rt == "ABB"
        assert result.bundle.rt_plus == r"\+arABB\-"
        assert result.degradations == [Degradation.BUDGET_EXHAUSTED]

    def test_unexpected_error_yields_empty_bundle(self, pipeline, monkeypatch):
        def boom(artist, title):
            raise RuntimeError("boom")

        monkeypatch.setattr(pipeline.truncator, "fit", boom)
        result = pipeline.process_detailed(record("Queen", "Bohemian Rhapsody"))
        assert result.bundle.is_empty
        assert result.error == "boom"

    def test_detailed_fields(self, pipeline):
        result = pipeline.process_detailed(record("Calvin Harris & Dua Lipa", "One Kiss (feat. Dua Lipa)"))
        assert result.artist == "Calvin Harris & Dua Lipa"
        assert result.title == "One Kiss"
        assert result.fitted.strategy == "exact"
        assert result.processing_time_ms >= 0


class TestConfiguration:

    def test_tab_delimiter(self):
        pipeline = RdsTextPipeline(make_config(delimiter="\t"))
        assert pipeline.process("Queen\tBohemian Rhapsody").rt == "Queen - Bohemian Rhapsody"

    def test_custom_joiner(self):
        pipeline = RdsTextPipeline(make_config(joiner=" / "))
        bundle = pipeline.process(record("Queen", "Bohemian Rhapsody"))
        assert bundle.rt == "Queen / Bohemian Rhapsody"
        assert bundle.rt_plus == r"\+arQueen\- / \+tiBohemian Rhapsody\-"

    def test_prefix_language(self):
        pipeline = RdsTextPipeline(make_config(), prefix_language="de")
        assert pipeline.process(record("Queen", "Song")).prefix == "Jetzt läuft: "

    def test_unknown_prefix_language(self):
        pipeline = RdsTextPipeline(make_config(), prefix_language="xx")
        assert pipeline.process(record("Queen", "Song")).prefix == "Now playing: "


class TestProperties:

    @pytest.mark.parametrize("raw", CORPUS)
    def test_length_limit(self, pipeline, ascii_pipeline, raw):
        for active in (pipeline, ascii_pipeline):
            assert utf16_len(active.process(raw).rt) <= 64

    @pytest.mark.parametrize("raw", CORPUS)
    def test_deterministic(self, raw):
        first = RdsTextPipeline(make_config()).process(raw)
        second = RdsTextPipeline(make_config()).process(raw)
        assert first == second

    @pytest.mark.parametrize("raw", CORPUS)
    def test_idempotent(self, pipeline, ascii_pipeline, raw):
        for active in (pipeline, ascii_pipeline):
            rt = active.process(raw).rt
            assert active.process(rt).rt == rt

    def test_idempotent_over_mixed_records(self, pipeline, ascii_pipeline):
        rng = random.Random(1986)
        for _ in range(200):
            raw = record(rng.choice(MIX_ARTISTS), rng.choice(MIX_TITLES) + rng.choice(MIX_TAILS))
            for active in (pipeline, ascii_pipeline):
                rt = active.process(raw).rt
                assert utf16_len(rt) <= 64
                assert active.process(rt).rt == rt, raw

    @pytest.mark.parametrize("raw", CORPUS)
    def test_rt_plus_reconstructs_rt(self, pipeline, raw):
        bundle = pipeline.process(raw)
        if bundle.is_empty:
            assert bundle.rt_plus == ""
            return
        artist, title = split_rt_plus(bundle.rt_plus)
        assert " - ".join(part for part in (artist, title) if part) == bundle.rt

    @pytest.mark.parametrize("raw", CORPUS)
    def test_ascii_mode_outputs_printable_ascii(self, ascii_pipeline, raw):
        bundle = ascii_pipeline.process(raw)
        for text in (bundle.prefix, bundle.rt, bundle.rt_plus):
            assert PRINTABLE_ASCII.match(text)

    @pytest.mark.parametrize("raw", CORPUS)
    def test_no_control_or_invisible_characters(self, pipeline, raw):
        bundle = pipeline.process(raw)
        for text in (bundle.prefix, bundle.rt, bundle.rt_plus):
            assert not any(is_invisible(ch) for ch in text)


class TestConcurrency:

    def test_process_many_preserves_order(self, pipeline):
        records = CORPUS * 5
        sequential = [pipeline.process(raw) for raw in records]
        parallel = [result.bundle for result in pipeline.process_many(records, max_workers=8)]
        assert parallel == sequential

    def test_pipeline_shared_across_threads(self, pipeline):
        results = pipeline.process_many([record("Queen", "Bohemian Rhapsody")] * 50, max_workers=4)
        assert {result.bundle.rt for result in results} == {"Queen - Bohemian Rhapsody"}
