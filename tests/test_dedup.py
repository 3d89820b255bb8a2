"""Tests for artist suffix and guest de-duplication."""

import pytest

from rdstext.pipeline.dedup import DedupResolver, artist_key_set, find_feat_tail
from rdstext.text.regions import RegionCatalog


@pytest.fixture
def resolver():
    return DedupResolver()


class TestRegionSuffix:

    @pytest.mark.parametrize("artist,expected", [
        ("Nirvana (UK)", "Nirvana"),
        ("Nirvana (Germany)", "Nirvana"),
        ("Sugar - Sweden", "Sugar"),
        ("Bush (Band)", "Bush (Band)"),
        ("Nirvana (uk)", "Nirvana (uk)"),
    ])
    def test_strip_region_suffix(self, resolver, artist, expected):
        assert resolver.strip_region_suffix(artist) == expected

    def test_region_only_artist_kept(self, resolver):
        assert resolver.strip_region_suffix("(UK)") == "(UK)"

    def test_injected_catalog(self):
        catalog = RegionCatalog.from_tables({"XL": "Atlantis"})
        resolver = DedupResolver(catalog)
        assert resolver.strip_region_suffix("Band (Atlantis)") == "Band"
        assert resolver.strip_region_suffix("Nirvana (UK)") == "Nirvana (UK)"


class TestAcronymSuffix:

    @pytest.mark.parametrize("artist,expected", [
        ("Electric Light Orchestra (ELO)", "Electric Light Orchestra"),
        ("Orchestral Manoeuvres in the Dark (OMD)", "Orchestral Manoeuvres in the Dark"),
        ("Earth, Wind & Fire (EWF)", "Earth, Wind & Fire"),
        ("Nick Cave & The Bad Seeds (BS)", "Nick Cave & The Bad Seeds"),
        ("Prince (TAFKAP)", "Prince (TAFKAP)"),
        ("Electric Light Orchestra (XYZ)", "Electric Light Orchestra (XYZ)"),
    ])
    def test_strip_acronym_suffix(self, resolver, artist, expected):
        assert resolver.strip_acronym_suffix(artist) == expected


class TestCommaDuplicates:

    def test_repeated_lead_collapsed(self, resolver):
        assert resolver.collapse_comma_duplicates("Queen, Queen, David Bowie") == "Queen, David Bowie"
        assert resolver.collapse_comma_duplicates("A, A") == "A"

    def test_distinct_credits_kept(self, resolver):
        assert resolver.collapse_comma_duplicates("Queen, David Bowie") == "Queen, David Bowie"


class TestCreditedGuests:

    def test_find_feat_tail(self):
        title = "One Kiss (feat. Dua Lipa)"
        start, end, guests = find_feat_tail(title)
        assert title[start:end] == "(feat. Dua Lipa)"
        assert guests == "Dua Lipa"
        assert find_feat_tail("Song feat. Guest")[2] == "Guest"
        assert find_feat_tail("Song (Radio Edit)") is None

    def test_artist_key_set(self):
        assert {"a feat b", "a", "b"} <= artist_key_set("A feat. B")

    def test_credited_guest_removed(self, resolver):
        assert resolver.remove_credited_guests("Calvin Harris & Dua Lipa", "One Kiss (feat. Dua Lipa)") == "One Kiss"
        assert resolver.remove_credited_guests("A feat. B", "Song feat. B") == "Song"
        assert resolver.remove_credited_guests("A & B", "Song (with B)") == "Song"

    def test_any_uncredited_guest_keeps_tail(self, resolver):
        title = "One Kiss (feat. Dua Lipa & Rihanna)"
        assert resolver.remove_credited_guests("Calvin Harris & Dua Lipa", title) == title

    def test_qualifier_on_artist_credit(self, resolver):
        title = "Song (feat. Damon Albarn)"
        assert resolver.remove_credited_guests("Damon Albarn of Blur & Gorillaz", title) == "Song"

    def test_resolve(self, resolver):
        assert resolver.resolve("Bob Marley & The Wailers (UK)", "Is This Love (feat. The Wailers)") == (
            "Bob Marley & The Wailers", "Is This Love"
        )
        assert resolver.resolve("", "Song (feat. Guest)") == ("", "Song (feat. Guest)")
