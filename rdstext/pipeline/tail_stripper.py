"""
Stage 3: remove descriptive tails from the title.

Tails come in two shapes: a trailing bracket group ("Song (Radio Edit)")
and a dash suffix ("Song - Radio Edit"). Each rule is applied only when it
changes the text and still leaves letters or digits behind.

A title-only record keeps its first " - " untouched, because that dash is
most likely the artist/title joiner of an unparsed record.
"""

import logging
import re
from typing import Callable, List, Optional, Tuple

from rdstext.text.keys import has_alnum, name_key
from rdstext.text.noise_tags import BRACKET_PAIRS, CLOSERS, has_open_bracket, remove_span, trailing_group

logger = logging.getLogger(__name__)

DASH = " - "

# Passes over the full rule list; one rule can expose a tail for an earlier one
MAX_PASSES = 4


def _dash_tail(body: str) -> str:
    return r"\s+-\s+(?:" + body + r")$"


def _strip_bracket_tail(text: str, pattern: "re.Pattern") -> str:
    group = trailing_group(text)
    if group and pattern.search(group.inner.strip()):
        return remove_span(text, group.start, group.end)
    return text


def _cut_allowed(text: str, start: int) -> bool:
    # A cut never lands inside a bracket group
    return not has_open_bracket(text[:start])


def _strip_dash_tail(text: str, pattern: "re.Pattern") -> str:
    match = pattern.search(text)
    if match and _cut_allowed(text, match.start()):
        return text[:match.start()].rstrip()
    return text


# ── Soundtrack / theme ─────────────────────────────────────────────────

_SOUNDTRACK_INNER_RE = re.compile(
    r"^(?:from|theme from|music from|taken from)\s+(?:the\s+)?"
    r"(?:[\"'].+|(?:motion picture|film|movie|musical|series|tv series|video game)\b.*)"
    r"|^(?:from the )?(?:original )?(?:motion picture |movie |film |tv |television )?soundtrack\b.*"
    r"|^o\.?s\.?t\.?$"
    r"|\b(?:o\.?s\.?t\.?|original (?:motion picture |movie |film )?soundtrack)$",
    re.IGNORECASE,
)
_SOUNDTRACK_DASH_RE = re.compile(
    _dash_tail(
        r"(?:from|theme from|music from)\s+[\"'].+"
        r"|(?:original )?(?:motion picture )?soundtrack(?:\s+version)?"
        r"|o\.?s\.?t\.?"
    ),
    re.IGNORECASE,
)


def strip_soundtrack_tail(text: str) -> str:
    text = _strip_bracket_tail(text, _SOUNDTRACK_INNER_RE)
    return _strip_dash_tail(text, _SOUNDTRACK_DASH_RE)


# ── Language tags ──────────────────────────────────────────────────────

_LANGUAGES = (
    r"english|dutch|german|french|spanish|italian|portuguese|swedish|norwegian|danish|"
    r"finnish|icelandic|polish|czech|slovak|hungarian|romanian|croatian|serbian|"
    r"russian|ukrainian|greek|turkish|japanese|korean|chinese|mandarin|cantonese|hindi|"
    r"arabic|hebrew|latin|nederlands|nederlandse|deutsch|deutsche|francais|français|"
    r"francaise|française|espanol|español|espanola|española|italiano|italiana|"
    r"portugues|português|svenska|norsk|dansk|suomi|polski|ellinika"
)
_VERSION_WORDS = r"version|versie|versione|versión|versao|versão|fassung|mix"
_LANGUAGE_INNER_RE = re.compile(
    r"^(?:in\s+)?(?:" + _LANGUAGES + r")(?:\s+(?:" + _VERSION_WORDS + r"|language))?$"
    r"|^(?:" + _VERSION_WORDS + r")\s+(?:en\s+|in\s+|em\s+|auf\s+)?(?:" + _LANGUAGES + r")$",
    re.IGNORECASE,
)
_LANGUAGE_DASH_RE = re.compile(
    _dash_tail(r"(?:" + _LANGUAGES + r")\s+(?:" + _VERSION_WORDS + r")"),
    re.IGNORECASE,
)


def strip_language_tail(text: str) -> str:
    text = _strip_bracket_tail(text, _LANGUAGE_INNER_RE)
    return _strip_dash_tail(text, _LANGUAGE_DASH_RE)


# ── Remaster ───────────────────────────────────────────────────────────

_REMASTER_WORD = (
    r"(?:digital(?:ly)?\s+)?re-?master(?:ed|s|izado|izada|izados|isé|isee|ise|isée|"
    r"izzato|izzata|isiert|iseret|oitu|izat|izovaný|izovano)?"
)
_REMASTER_INNER_RE = re.compile(r"\b" + _REMASTER_WORD + r"\b", re.IGNORECASE)
_REMASTER_DASH_RE = re.compile(
    _dash_tail(r"(?:(?:19|20)\d{2}\s+(?:-\s+)?)?(?:\w+\s+)?" + _REMASTER_WORD + r"\b.*"),
    re.IGNORECASE,
)


def strip_remaster_tail(text: str) -> str:
    text = _strip_bracket_tail(text, _REMASTER_INNER_RE)
    return _strip_dash_tail(text, _REMASTER_DASH_RE)


# ── Edition whitelist ──────────────────────────────────────────────────

_WHITELIST = (
    r"(?:super |limited |special |expanded |anniversary )?deluxe(?: edition| version)?"
    r"|bonus(?: track)?|explicit(?: version)?|clean(?: version)?|dirty(?: version)?"
)
_WHITELIST_INNER_RE = re.compile(r"^(?:" + _WHITELIST + r")$", re.IGNORECASE)
_WHITELIST_DASH_RE = re.compile(_dash_tail(_WHITELIST), re.IGNORECASE)


def strip_whitelist_tail(text: str) -> str:
    text = _strip_bracket_tail(text, _WHITELIST_INNER_RE)
    return _strip_dash_tail(text, _WHITELIST_DASH_RE)


# ── Live ───────────────────────────────────────────────────────────────

_LIVE_WORDS = r"live|en vivo|ao vivo|recorded live|live recording"
_LIVE_INNER_RE = re.compile(r"^(?:" + _LIVE_WORDS + r")\b", re.IGNORECASE)
_LIVE_DASH_RE = re.compile(_dash_tail(r"(?:" + _LIVE_WORDS + r")\b.*"), re.IGNORECASE)


def strip_live_tail(text: str) -> str:
    """Live recordings are always reduced to the plain song title."""
    text = _strip_bracket_tail(text, _LIVE_INNER_RE)
    return _strip_dash_tail(text, _LIVE_DASH_RE)


# ── Trailing separators ────────────────────────────────────────────────

# "." is not listed so that a trailing ellipsis survives
TRAILING_SEPARATORS = " -/|:;,~"


def strip_trailing_separators(text: str) -> str:
    return text.rstrip(TRAILING_SEPARATORS)


# ── Live location ──────────────────────────────────────────────────────

_VENUE_CONTEXT_RE = re.compile(
    r"(?:^|\s)at\s|@"
    r"|\b(?:arena|stadium|hall|theatre|theater|club|festival|fest|garden|gardens|palace|"
    r"bowl|center|centre|academy|forum|dome|opera|pavilion|amphitheatre|amphitheater|"
    r"ballroom|studios?)\b",
    re.IGNORECASE,
)
_LOCATION_EVIDENCE_RE = re.compile(r"\b(?:19|20)\d{2}\b|,|/")
_AT_SUFFIX_RE = re.compile(r"\s+(?:-\s+)?@\s*\S.*$")


def _is_bare_at_suffix(text: str, match: Optional["re.Match"]) -> bool:
    """An "@ Venue" tail outside any bracket and free of bracket characters."""
    if not match or not _cut_allowed(text, match.start()):
        return False
    return not any(ch in BRACKET_PAIRS or ch in CLOSERS for ch in match.group(0))


def _is_live_location(inner: str) -> bool:
    return bool(_VENUE_CONTEXT_RE.search(inner) and _LOCATION_EVIDENCE_RE.search(inner))


def strip_live_location_tail(text: str) -> str:
    """Strip "(at Venue, City)" or "@ Venue 2010" when the tail looks like a location."""
    group = trailing_group(text)
    if group and _is_live_location(group.inner):
        return remove_span(text, group.start, group.end)
    match = _AT_SUFFIX_RE.search(text)
    if _is_bare_at_suffix(text, match) and _LOCATION_EVIDENCE_RE.search(match.group(0)):
        return text[:match.start()].rstrip()
    return text


# ── Audio format ───────────────────────────────────────────────────────

_FORMAT = r"(?:(?:19|20)\d{2}\s+)?(?:mono|stereo)(?:\s+(?:version|mix|mixdown|single version))?"
_FORMAT_INNER_RE = re.compile(r"^" + _FORMAT + r"$", re.IGNORECASE)
_FORMAT_DASH_RE = re.compile(_dash_tail(_FORMAT), re.IGNORECASE)


def strip_audio_format_tail(text: str) -> str:
    text = _strip_bracket_tail(text, _FORMAT_INNER_RE)
    return _strip_dash_tail(text, _FORMAT_DASH_RE)


# ── Version / mix ──────────────────────────────────────────────────────

_VERSION_TAIL = (
    r"\b(?:edit|re-?edit|remix|remixed|rmx|mix|instrumental|dub|rework|bootleg|vip|"
    r"mash-?up|acapella|a cappella)\b"
    r"|\b(?:radio|single|album|extended|short|long|original|club|video|dance|"
    r"7\"|12\"|7 inch|12 inch)\s+version\b"
)
_VERSION_INNER_RE = re.compile(_VERSION_TAIL, re.IGNORECASE)
_VERSION_DASH_RE = re.compile(r"\s+-\s+(?P<tail>[^-]+)$")


def strip_version_tail(text: str) -> str:
    """Strip one trailing remix/edit/version tail."""
    stripped = _strip_bracket_tail(text, _VERSION_INNER_RE)
    if stripped != text:
        return stripped
    match = _VERSION_DASH_RE.search(text)
    if match and _cut_allowed(text, match.start()) and _VERSION_INNER_RE.search(match.group("tail")):
        return text[:match.start()].rstrip()
    return text


# ── Low-priority suffixes ──────────────────────────────────────────────

_LOW_PRIORITY = (
    r"acoustic(?:\s+version)?|sessions?|live session|bbc session|unplugged|demo(?:\s+version)?|"
    r"stripped(?:\s+back)?|piano version"
)
_LOW_PRIORITY_DASH_RE = re.compile(_dash_tail(r"(?:" + _LOW_PRIORITY + r")\b.*"), re.IGNORECASE)
_LOW_PRIORITY_INNER_RE = re.compile(
    r"\b(?:" + _LOW_PRIORITY + r")\b|^(?:live|recorded|@)", re.IGNORECASE
)
_AGGRESSIVE_DASH_RE = re.compile(_dash_tail(r"(?:@|live\b|recorded\b).*"), re.IGNORECASE)
_BARE_AT_RE = re.compile(r"\s+@\s*\S.*$")


def _strip_bare_at_suffix(text: str) -> str:
    match = _BARE_AT_RE.search(text)
    if _is_bare_at_suffix(text, match):
        return text[:match.start()].rstrip()
    return text


def strip_low_priority_suffix(text: str, aggressive: bool = False) -> str:
    """
    Strip an acoustic/session/unplugged style dash suffix.

    With ``aggressive`` the bracket form and "@ Venue" or "- Live ..."
    suffixes are removed as well; the truncator uses that under length
    pressure.
    """
    stripped = _strip_dash_tail(text, _LOW_PRIORITY_DASH_RE)
    if stripped != text or not aggressive:
        return stripped
    for strip in (
        lambda value: _strip_bracket_tail(value, _LOW_PRIORITY_INNER_RE),
        lambda value: _strip_dash_tail(value, _AGGRESSIVE_DASH_RE),
        _strip_bare_at_suffix,
    ):
        stripped = strip(text)
        if stripped != text:
            return stripped
    return text


# ── Duplicate title ────────────────────────────────────────────────────

def _key_without_qualifier(text: str) -> str:
    group = trailing_group(text)
    if group:
        text = text[:group.start]
    return name_key(text)


def collapse_duplicate_title(text: str) -> str:
    """'Song - Song (Remix)' -> 'Song'."""
    if text.count(DASH) != 1:
        return text
    left, right = text.split(DASH)
    left_key = _key_without_qualifier(left)
    if left_key and left_key == _key_without_qualifier(right):
        return left.strip()
    return text


# ── Stage ──────────────────────────────────────────────────────────────

TAIL_RULES: List[Tuple[str, Callable[[str], str]]] = [
    ("soundtrack", strip_soundtrack_tail),
    ("language", strip_language_tail),
    ("remaster", strip_remaster_tail),
    ("whitelist", strip_whitelist_tail),
    ("live", strip_live_tail),
    ("trailing_separators", strip_trailing_separators),
    ("live_location", strip_live_location_tail),
    ("audio_format", strip_audio_format_tail),
    ("version", strip_version_tail),
    ("low_priority", strip_low_priority_suffix),
    ("duplicate_title", collapse_duplicate_title),
]


class TitleTailStripper:
    """Stage 3: strip descriptive tails from a title."""

    def __init__(self, rules: Optional[List[Tuple[str, Callable[[str], str]]]] = None):
        self.rules = rules if rules is not None else TAIL_RULES

    def strip(self, title: str, artist_present: bool = True) -> str:
        """
        Strip tails from *title*.

        Args:
            title: Normalized title
            artist_present: False for a title-only record; the part before
                its first " - " is then left alone

        Returns:
            The stripped title, never blank unless the input was blank
        """
        if not title:
            return ""
        if not artist_present and DASH in title:
            head, body = title.split(DASH, 1)
            stripped = self._strip_body(body)
            return f"{head}{DASH}{stripped}" if stripped else title
        return self._strip_body(title)

    def _strip_body(self, text: str) -> str:
        for _ in range(MAX_PASSES):
            before = text
            for name, rule in self.rules:
                candidate = rule(text)
                if candidate != text and has_alnum(candidate):
                    logger.debug(f"Tail rule {name}: {text!r} -> {candidate!r}")
                    text = candidate
            if text == before:
                break
        return text
