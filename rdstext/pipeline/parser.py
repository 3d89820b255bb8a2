"""
Stage 1: split a raw playout record into artist and title.

The rule is deliberately conservative: only a record with exactly one
delimiter is split. Anything else becomes a title-only record.
"""

import logging
import re
from typing import Optional, Tuple

from rdstext.models.schemas import ParsedFields
from rdstext.text.noise_tags import find_bracket_groups

logger = logging.getLogger(__name__)

BOM = "\uFEFF"

# Unwrapping "[...]" wrappers is repeated at most this many times
MAX_UNWRAP_DEPTH = 4

_FILENAME_BRACKET_RE = re.compile(r"^\[(?P<artist>[^\[\]]+)\]\s*(?P<title>.+)$")
_FILENAME_DASH = " - "
_TRACK_NUMBER_RE = re.compile(r"^\d{1,3}$")


class FieldParser:
    """Stage 1: parse the raw record using the configured delimiter."""

    def __init__(self, delimiter: str):
        if not delimiter:
            raise ValueError("Delimiter must not be empty")
        self.delimiter = delimiter

    def parse(self, raw: str) -> ParsedFields:
        """
        Parse a raw record into artist and title.

        Args:
            raw: Raw text from the playout tool

        Returns:
            ParsedFields; ``title`` is empty when the record is invalid
        """
        text = self._strip_edges(raw or "")
        text = self._unwrap(text)

        count = text.count(self.delimiter)
        if count != 1:
            logger.debug(f"Delimiter found {count} times, treating record as title-only")
            return ParsedFields(artist="", title=text, ambiguous=True)

        artist, title = (part.strip() for part in text.split(self.delimiter, 1))

        if artist and not title:
            reparsed = parse_filename_style(artist)
            if reparsed:
                logger.debug(f"Re-parsed filename-style artist field: {artist!r}")
                artist, title = reparsed
        elif title and _TRACK_NUMBER_RE.match(artist):
            reparsed = parse_filename_style(title)
            if reparsed:
                logger.debug(f"Replaced track number {artist!r} using filename-style title")
                artist, title = reparsed

        return ParsedFields(artist=artist, title=title)

    def _strip_edges(self, text: str) -> str:
        text = text.lstrip(BOM)
        edge_chars = "".join(ch for ch in " \r\n\t" + BOM if ch not in self.delimiter)
        return text.strip(edge_chars)

    def _unwrap(self, text: str) -> str:
        """Keep only a bracketed payload when it alone carries the delimiter."""
        for _ in range(MAX_UNWRAP_DEPTH):
            carriers = [g for g in find_bracket_groups(text) if self.delimiter in g.inner]
            if len(carriers) != 1:
                break
            group = carriers[0]
            outside = text[:group.start] + text[group.end:]
            if self.delimiter in outside:
                break
            logger.debug(f"Unwrapping bracketed payload from {text!r}")
            text = group.inner.strip()
        return text


def parse_filename_style(text: str) -> Optional[Tuple[str, str]]:
    """
    Parse "[Artist] Title" or "Artist - Title".

    Returns None unless both parts are non-empty. The dash form must
    contain exactly one " - " so that titles with their own dashes are not
    guessed at.
    """
    text = (text or "").strip()
    match = _FILENAME_BRACKET_RE.match(text)
    if match:
        artist, title = match.group("artist").strip(), match.group("title").strip()
        if artist and title:
            return artist, title
    if text.count(_FILENAME_DASH) == 1:
        artist, title = (part.strip() for part in text.split(_FILENAME_DASH))
        if artist and title:
            return artist, title
    return None
