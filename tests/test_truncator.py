"""Tests for the adaptive truncation cascade."""

from rdstext.pipeline.truncator import (
    HARD_CUT, AdaptiveTruncator, Attempt, TruncationStrategy,
    combine, credit_spans, first_credit, word_cut
)
from rdstext.text.keys import utf16_len

ALL_STARS = "Diana Ross, Michael Jackson, Stevie Wonder, Smokey Robinson, Marvin Gaye"
LIBERATION = "Liberation Agitato / A Brand New Day / Liberation Ballet"


class TestHelpers:

    def test_combine(self):
        assert combine("Queen", "Song") == "Queen - Song"
        assert combine("", "Song") == "Song"
        assert combine("Queen", "") == "Queen"

    def test_word_cut(self):
        assert word_cut("Hello big world", 9) == "Hello big"
        assert word_cut("Hello big world", 8) == "Hello"
        assert word_cut("Supercalifragilistic", 5) == ""
        assert word_cut("Short", 10) == "Short"

    def test_credit_spans(self):
        artist = "Diana Ross, Michael Jackson"
        assert [artist[s:e] for s, e in credit_spans(artist)] == ["Diana Ross", "Michael Jackson"]
        assert first_credit(artist) == ("Diana Ross", True)
        assert first_credit("Queen") == ("Queen", False)
        assert first_credit("A feat. B") == ("A", True)


class TestCascade:

    def test_exact_fit(self):
        fitted = AdaptiveTruncator().fit("Queen", "Bohemian Rhapsody")
        assert fitted.text == "Queen - Bohemian Rhapsody"
        assert fitted.strategy == "exact"
        assert (fitted.artist, fitted.title) == ("Queen", "Bohemian Rhapsody")

    def test_compact_feat(self):
        fitted = AdaptiveTruncator(max_len=14).fit("A feat. B", "Song")
        assert fitted.text == "A & B - Song"
        assert fitted.strategy == "compact_feat"

    def test_strip_title_feat(self):
        fitted = AdaptiveTruncator(max_len=13).fit("Artist", "Song (feat. Someone)")
        assert fitted.text == "Artist - Song"
        assert fitted.strategy == "strip_title_feat"

    def test_strip_version(self):
        fitted = AdaptiveTruncator(max_len=13).fit("Artist", "Song (Radio Edit)")
        assert fitted.text == "Artist - Song"
        assert fitted.strategy == "strip_version_tail"

    def test_strip_low_priority(self):
        fitted = AdaptiveTruncator(max_len=13).fit("Artist", "Song (Acoustic)")
        assert fitted.text == "Artist - Song"
        assert fitted.strategy == "strip_low_priority_suffix"

    def test_acronym_artist_replaced_by_phrase(self):
        fitted = AdaptiveTruncator(max_len=40).fit("T.S.O.P. (The Sound Of Philadelphia)", "Theme")
        assert fitted.text == "The Sound Of Philadelphia - Theme"
        assert fitted.strategy == "strip_trailing_brackets"

    def test_acronym_replacement_keeps_title_bracket_when_it_fits(self):
        fitted = AdaptiveTruncator(max_len=45).fit("T.S.O.P. (The Sound Of Philadelphia)", "TSOP (Part 1)")
        assert fitted.text == "The Sound Of Philadelphia - TSOP (Part 1)"
        assert fitted.strategy == "strip_trailing_brackets"

    def test_acronym_replacement_still_drops_title_bracket_when_needed(self):
        fitted = AdaptiveTruncator(max_len=35).fit("T.S.O.P. (The Sound Of Philadelphia)", "TSOP (Part 1)")
        assert fitted.text == "The Sound Of Philadelphia - TSOP"
        assert fitted.strategy == "strip_trailing_brackets"

    def test_preserve_title_cuts_artist_list(self):
        fitted = AdaptiveTruncator().fit("Diana Ross, Michael Jackson, Stevie Wonder", "Ease On Down the Road")
        assert fitted.text == "Diana Ross, Michael Jackson, Stevie... - Ease On Down the Road"
        assert fitted.strategy == "preserve_title"
        assert fitted.title == "Ease On Down the Road"

    def test_preserve_title_falls_back_to_whole_credits(self):
        title = "Let Me Talk About The Things I Could Not Do"
        fitted = AdaptiveTruncator().fit("Earth Wind Fire, Someone Else", title)
        assert fitted.text == f"Earth Wind Fire... - {title}"
        assert utf16_len(fitted.text) == 64

    def test_cut_title_after_first_artist(self):
        fitted = AdaptiveTruncator().fit(ALL_STARS, LIBERATION)
        assert fitted.text == "Diana Ross... - Liberation Agitato / A Brand New Day..."
        assert fitted.strategy == "cut_title"
        assert fitted.artist == "Diana Ross..."

    def test_cut_title_drops_dangling_fragment(self):
        fitted = AdaptiveTruncator(max_len=30).fit("", "Alpha Beta Gamma / Delta Epsilon Zeta")
        assert fitted.text == "Alpha Beta Gamma..."
        assert fitted.strategy == "cut_title"

    def test_ellipsize_combined(self):
        fitted = AdaptiveTruncator(max_len=10).fit("Verylongname", "Song")
        assert fitted.text == "Verylon..."
        assert fitted.strategy == "ellipsize"
        assert fitted.artist == "Verylon..."
        assert not fitted.has_title

    def test_hard_cut_when_no_room_for_ellipsis(self):
        fitted = AdaptiveTruncator(max_len=3).fit("ABBA", "SOS")
        assert fitted.text == "ABB"
        assert fitted.strategy == HARD_CUT

    def test_fields_without_alnum_are_dropped(self):
        assert AdaptiveTruncator().fit("!!!", "???").text == ""
        assert AdaptiveTruncator().fit("---", "Song").text == "Song"

    def test_custom_strategies(self):
        never = TruncationStrategy("never", lambda artist, title, budget, joiner: Attempt(artist, title))
        fitted = AdaptiveTruncator(max_len=10, strategies=[never]).fit("Verylongname", "Song")
        assert fitted.strategy == "ellipsize"

    def test_results_never_exceed_budget(self):
        truncator = AdaptiveTruncator()
        cases = [
            (ALL_STARS, LIBERATION),
            ("A" * 200, "B" * 200),
            ("", "Word " * 40),
            ("Name, " * 30, "Title " * 30),
            ("Artist", chr(0x1F600) * 40 + " Song"),
        ]
        for artist, title in cases:
            assert utf16_len(truncator.fit(artist, title).text) <= 64
