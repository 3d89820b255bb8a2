"""
Bracket tokenizer and the "always remove" noise-tag classifier.

Noise tags are bracketed tokens added by encoders, rippers, DJ software
and release groups, e.g. "[320kbps]", "(LAME 3.99)", "{VirtualDJ}",
"[www.example.com]". They never carry information a listener needs.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from rdstext.text.keys import collapse_spaces

logger = logging.getLogger(__name__)

BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}"}
CLOSERS = {close: open_ for open_, close in BRACKET_PAIRS.items()}

# Upper bound on strip passes; removing one tag can expose another
MAX_STRIP_PASSES = 8


@dataclass(frozen=True)
class BracketGroup:
    """A balanced top-level bracket group inside a string."""

    start: int
    end: int
    opener: str
    inner: str

    @property
    def closer(self) -> str:
        return BRACKET_PAIRS[self.opener]


def find_bracket_groups(text: str) -> List[BracketGroup]:
    """
    Tokenize *text* into balanced top-level bracket groups.

    Nested groups belong to their outermost group. A closer that does not
    match the innermost open bracket is treated as plain text, and groups
    left open at the end of the string are ignored.
    """
    groups = []
    stack = []
    for index, ch in enumerate(text or ""):
        if ch in BRACKET_PAIRS:
            stack.append((ch, index))
        elif ch in CLOSERS:
            if stack and stack[-1][0] == CLOSERS[ch]:
                opener, start = stack.pop()
                if not stack:
                    groups.append(BracketGroup(start, index + 1, opener, text[start + 1:index]))
    return groups


def trailing_group(text: str) -> Optional[BracketGroup]:
    """The top-level bracket group that ends the string, if any."""
    stripped = (text or "").rstrip()
    groups = find_bracket_groups(stripped)
    if groups and groups[-1].end == len(stripped):
        return groups[-1]
    return None


def has_open_bracket(text: str) -> bool:
    """True when *text* ends with a bracket still open."""
    stack = []
    for ch in text or "":
        if ch in BRACKET_PAIRS:
            stack.append(ch)
        elif ch in CLOSERS and stack and stack[-1] == CLOSERS[ch]:
            stack.pop()
    return bool(stack)


def remove_span(text: str, start: int, end: int) -> str:
    """Cut text[start:end] out and tidy the whitespace around the cut."""
    return collapse_spaces(f"{text[:start]} {text[end:]}")


# ── Classifier ─────────────────────────────────────────────────────────

_NOISE_TOKEN_RE = re.compile(
    r"(?:"
    # containers and codecs
    r"mp3|flac|aac|m4a|ogg|opus|wav|wma|alac|aiff?|ape|wv|mp4|webm|"
    # bitrates, bit depths, sample rates
    r"\d{2,4}\s?(?:k|kb|kbps|kbit|kbit/s|kb/s)|vbr|cbr|abr|"
    r"\d{2}[-]?bits?|\d{2}(?:[.,]\d)?\s?khz|(?:16|24)[-/](?:44|48|88|96|192)|"
    r"hq|lossless|hi-?res|"
    # encoders and rippers
    r"lame(?:\s?\d[\d.]*)?|ffmpeg|eac|xld|foobar(?:2000)?|dbpoweramp|itunes|cdex|"
    r"audiograbber|(?:cd|web|vinyl|tape)-?rip|rip|"
    # DJ software and record pools
    r"virtual-?dj|vdj|serato|traktor|rekordbox|djay|mixxx|djcity|zipdj|"
    # scene markers
    r"scene|web|proper|retail|promo|cdm|cds|cdr|vls"
    r")",
    re.IGNORECASE,
)

_NOISE_PHRASE_RE = re.compile(
    r"(?:"
    r"exact audio copy|virtual dj(?: pro)?|djay pro|promo only|dj promo|"
    r"(?:ripped|encoded|uploaded|tagged) (?:by|with) \S+(?: \S+)?|"
    r"free (?:download|dl)|"
    r"(?:https?://)?(?:www\.)?[a-z0-9-]+(?:\.[a-z0-9-]+)*\."
    r"(?:com|net|org|ru|info|fm|me|to|cc|biz|io|club|pro|de|nl|uk)(?:/\S*)?"
    r")",
    re.IGNORECASE,
)

_TOKEN_SPLIT_RE = re.compile(r"[\s,/|+_@]+")
# "320 kbps" and "LAME 3.99" are one token each
_JOIN_UNITS_RE = re.compile(r"(\d|\blame)\s+(kbps|kbit/s|kbit|kb/s|kb|k|khz|bits?|\d)\b", re.IGNORECASE)


def is_noise_tag(inner: str) -> bool:
    """
    True when a bracket's inner text is entirely encoder/ripper/DJ/scene noise.

    Example:
        >>> is_noise_tag("320kbps MP3")
        True
        >>> is_noise_tag("Radio Edit")
        False
    """
    normalized = collapse_spaces(inner).lower()
    if not normalized:
        return False
    if _NOISE_PHRASE_RE.fullmatch(normalized):
        return True
    normalized = _JOIN_UNITS_RE.sub(r"\1\2", normalized)
    tokens = [token for token in _TOKEN_SPLIT_RE.split(normalized) if token]
    return bool(tokens) and all(_NOISE_TOKEN_RE.fullmatch(token) for token in tokens)


def strip_noise_tags(text: str) -> str:
    """
    Remove every bracket group classified as noise, to a bounded fixed point.

    A field made only of noise tags comes back empty.
    """
    if not text:
        return ""
    current = text
    for _ in range(MAX_STRIP_PASSES):
        groups = [g for g in find_bracket_groups(current) if is_noise_tag(g.inner)]
        if not groups:
            break
        for group in reversed(groups):
            logger.debug(f"Removing noise tag {group.opener}{group.inner}{group.closer}")
            current = current[:group.start] + " " + current[group.end:]
        current = collapse_spaces(current)
    return current
