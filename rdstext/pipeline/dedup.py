"""
Stage 4: identity and dedup resolution.

Removes information the listener already has: region and acronym
suffixes on the artist, repeated credits, and "feat." guests in the title
who are already credited as artists.
"""

import logging
import re
from typing import Optional, Set, Tuple

from rdstext.text.keys import credit_keys, has_alnum, name_key, split_credits
from rdstext.text.noise_tags import remove_span, trailing_group
from rdstext.text.regions import RegionCatalog, default_catalog

logger = logging.getLogger(__name__)

ACRONYM_RE = re.compile(r"^[A-Za-z]{2,6}$")
ACRONYM_STOP_WORDS = frozenset({
    "of", "the", "and", "&", "a", "an", "de", "la", "le", "der", "die", "das",
    "y", "e", "et", "und", "for", "in",
})
_WORD_RE = re.compile(r"[^\W_]+|&")
_AMPERSAND_RE = re.compile(r"\s+&\s+")
_DASH_REGION_RE = re.compile(r"^(?P<name>.+?)\s+-\s+(?P<region>[^-]+)$")

FEAT_BRACKET_RE = re.compile(r"^(?:feat\.?|ft\.?|featuring|with)\s+(?P<guests>.+)$", re.IGNORECASE)
FEAT_INLINE_RE = re.compile(
    r"\s+(?:feat\.?|ft\.?|featuring)\s+(?P<guests>[^()\[\]{}]+)$", re.IGNORECASE
)

# "A, A, A, B" needs one collapse per repeat
MAX_COMMA_COLLAPSES = 8


def artist_key_set(artist: str) -> Set[str]:
    """Keys of the whole artist field and of every credited name in it."""
    keys = credit_keys(artist)
    for credit in split_credits(artist):
        keys |= credit_keys(credit)
    return keys


def find_feat_tail(title: str) -> Optional[Tuple[int, int, str]]:
    """
    Locate a trailing feat./with construct in *title*.

    Returns:
        (start, end, guest list) or None
    """
    group = trailing_group(title)
    if group:
        match = FEAT_BRACKET_RE.match(group.inner.strip())
        if match:
            return group.start, group.end, match.group("guests")
    match = FEAT_INLINE_RE.search(title)
    if match:
        return match.start(), len(title), match.group("guests")
    return None


def _initials(words) -> str:
    return "".join(word[0] for word in words if word != "&").upper()


def _is_acronym_of(acronym: str, name: str) -> bool:
    words = _WORD_RE.findall(name)
    if len(words) < 2:
        return False
    target = acronym.upper()
    if _initials(words) == target:
        return True
    content = [word for word in words if word.lower() not in ACRONYM_STOP_WORDS]
    return len(content) >= 2 and _initials(content) == target


class DedupResolver:
    """Stage 4: drop redundant artist suffixes and already-credited guests."""

    def __init__(self, catalog: Optional[RegionCatalog] = None):
        self._catalog = catalog

    @property
    def catalog(self) -> RegionCatalog:
        return self._catalog or default_catalog()

    def resolve(self, artist: str, title: str) -> Tuple[str, str]:
        """
        Resolve one artist/title pair.

        Args:
            artist: Normalized artist (may be empty)
            title: Normalized, tail-stripped title

        Returns:
            (artist, title) with redundant parts removed
        """
        if artist:
            artist = self.strip_region_suffix(artist)
            artist = self.strip_acronym_suffix(artist)
            artist = self.collapse_comma_duplicates(artist)
            if title:
                title = self.remove_credited_guests(artist, title)
        return artist, title

    def strip_region_suffix(self, artist: str) -> str:
        """'Nirvana (UK)' -> 'Nirvana', 'Sugar - Sweden' -> 'Sugar'."""
        group = trailing_group(artist)
        if group and self.catalog.match(group.inner):
            stripped = remove_span(artist, group.start, group.end)
            if has_alnum(stripped):
                logger.debug(f"Stripped region suffix: {artist!r} -> {stripped!r}")
                return stripped
        match = _DASH_REGION_RE.match(artist)
        if match and self.catalog.match(match.group("region")):
            stripped = match.group("name").strip()
            if has_alnum(stripped):
                logger.debug(f"Stripped region suffix: {artist!r} -> {stripped!r}")
                return stripped
        return artist

    def strip_acronym_suffix(self, artist: str) -> str:
        """
        'Electric Light Orchestra (ELO)' -> 'Electric Light Orchestra'.

        For 'A & B (ABBR)' only the last &-segment is compared with the
        acronym.
        """
        group = trailing_group(artist)
        if not group:
            return artist
        acronym = group.inner.strip()
        if not ACRONYM_RE.match(acronym):
            return artist
        name = artist[:group.start].strip()
        candidate = _AMPERSAND_RE.split(name)[-1]
        if _is_acronym_of(acronym, name) or (candidate != name and _is_acronym_of(acronym, candidate)):
            stripped = remove_span(artist, group.start, group.end)
            if has_alnum(stripped):
                logger.debug(f"Stripped acronym suffix: {artist!r} -> {stripped!r}")
                return stripped
        return artist

    def collapse_comma_duplicates(self, artist: str) -> str:
        """'A, A, B' -> 'A, B'."""
        for _ in range(MAX_COMMA_COLLAPSES):
            if ", " not in artist:
                break
            first, remainder = artist.split(", ", 1)
            first_key = name_key(first)
            credits = split_credits(remainder)
            lead_key = name_key(credits[0]) if credits else ""
            if not first_key or first_key not in (name_key(remainder), lead_key):
                break
            logger.debug(f"Collapsed duplicate credit: {artist!r} -> {remainder!r}")
            artist = remainder
        return artist

    def remove_credited_guests(self, artist: str, title: str) -> str:
        """
        Drop a title feat./with tail when every guest is already credited.

        A single uncredited guest keeps the whole tail.
        """
        tail = find_feat_tail(title)
        if not tail:
            return title
        start, end, guest_list = tail
        guests = split_credits(guest_list)
        if not guests:
            return title
        known = artist_key_set(artist)
        if all(credit_keys(guest) & known for guest in guests):
            stripped = remove_span(title, start, end)
            if has_alnum(stripped):
                logger.debug(f"Removed credited guests: {title!r} -> {stripped!r}")
                return stripped
        return title
