"""
Stage 5: fit artist and title into the RadioText length budget.

Shortening is an ordered cascade of named strategies. Each strategy gets
the (possibly already reduced) fields and the budget, and either returns a
candidate that fits or hands reduced fields on to the next strategy.
Lengths are UTF-16 code units throughout.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional, Tuple

from rdstext.models.schemas import DEFAULT_JOINER, DEFAULT_MAX_LEN, FittedText
from rdstext.pipeline.dedup import FEAT_INLINE_RE, find_feat_tail
from rdstext.pipeline.tail_stripper import strip_low_priority_suffix, strip_version_tail
from rdstext.text.keys import cut_to_units, has_alnum, trim_trailing_punct, utf16_len
from rdstext.text.noise_tags import remove_span, trailing_group

logger = logging.getLogger(__name__)

ELLIPSIS = "..."

# Artist separators used when squeezing the artist down to whole credits
TRUNCATION_CREDIT_RE = re.compile(
    r",\s+|\s+&\s+|\s+/\s+|\s*;\s*|\s+(?:feat\.?|ft\.?|featuring|x|vs\.?)\s+",
    re.IGNORECASE,
)
_ARTIST_FEAT_RE = re.compile(r"\s+\(?(?:feat\.?|ft\.?|featuring)\s+(?P<guests>[^()]+)\)?$", re.IGNORECASE)
_COMPACT_FEAT_RE = re.compile(r"^&\s+.+$")
_ACRONYM_HEAD_RE = re.compile(r"^[A-Z0-9][A-Z0-9.&'\-]{1,11}$")
# A dash or slash followed by a short word fragment right before the cut
_DANGLING_FRAGMENT_RE = re.compile(r"\s*[-/]\s*[^\W_]{1,6}$")

MAX_VERSION_STRIPS = 3
# Below this many title units a cut title is not worth showing
MIN_TITLE_BUDGET = 4
# Word cuts shorter than this fall back to a hard character cut
MIN_WORD_CUT = 3

HARD_CUT = "hard_cut"


class Attempt(NamedTuple):
    """Outcome of one strategy."""

    artist: str
    title: str
    # (visible artist, visible title) when the strategy produced a candidate
    shown: Optional[Tuple[str, str]] = None


@dataclass(frozen=True)
class TruncationStrategy:
    """A named shortening step: (artist, title, budget, joiner) -> Attempt."""

    name: str
    attempt: Callable[[str, str, int, str], Attempt]


def combine(artist: str, title: str, joiner: str = DEFAULT_JOINER) -> str:
    """Artist + joiner + title, or whichever field is present."""
    if artist and title:
        return f"{artist}{joiner}{title}"
    return artist or title


def word_cut(text: str, limit: int) -> str:
    """Longest prefix within *limit* units that ends on a word boundary."""
    if utf16_len(text) <= limit:
        return text
    prefix = cut_to_units(text, limit)
    if text[len(prefix):len(prefix) + 1] == " ":
        return prefix.rstrip()
    boundary = prefix.rfind(" ")
    if boundary <= 0:
        return ""
    return prefix[:boundary].rstrip()


def credit_spans(artist: str) -> List[Tuple[int, int]]:
    """(start, end) of every credited name in *artist*, separators excluded."""
    spans = []
    start = 0
    for match in TRUNCATION_CREDIT_RE.finditer(artist):
        if match.start() > start:
            spans.append((start, match.start()))
        start = match.end()
    if start < len(artist):
        spans.append((start, len(artist)))
    return spans


def first_credit(artist: str) -> Tuple[str, bool]:
    """The first credited name and whether more credits follow."""
    spans = credit_spans(artist)
    if not spans:
        return artist, False
    start, end = spans[0]
    return artist[start:end].strip(), len(spans) > 1


def _ellipsize(text: str) -> str:
    return f"{text}{ELLIPSIS}"


def _trim_fragment(text: str) -> str:
    text = trim_trailing_punct(text)
    trimmed = trim_trailing_punct(_DANGLING_FRAGMENT_RE.sub("", text))
    return trimmed if has_alnum(trimmed) else text


# ── Strategies ─────────────────────────────────────────────────────────

def exact(artist: str, title: str, budget: int, joiner: str) -> Attempt:
    return Attempt(artist, title, (artist, title))


def compact_feat(artist: str, title: str, budget: int, joiner: str) -> Attempt:
    """'A feat. B' -> 'A & B'; title '(feat. B)' -> '(& B)' when that is shorter."""
    match = _ARTIST_FEAT_RE.search(artist)
    if match:
        artist = f"{artist[:match.start()]} & {match.group('guests').strip()}"
    tail = find_feat_tail(title)
    if tail:
        start, end, guests = tail
        compacted = f"{title[:start].rstrip()} (& {guests.strip()})"
        if utf16_len(compacted) < utf16_len(title):
            title = compacted
    return Attempt(artist, title, (artist, title))


def strip_title_feat(artist: str, title: str, budget: int, joiner: str) -> Attempt:
    group = trailing_group(title)
    stripped = title
    if group and (_COMPACT_FEAT_RE.match(group.inner.strip()) or find_feat_tail(title)):
        stripped = remove_span(title, group.start, group.end)
    else:
        match = FEAT_INLINE_RE.search(title)
        if match:
            stripped = title[:match.start()].rstrip()
    if stripped != title and has_alnum(stripped):
        title = stripped
    return Attempt(artist, title, (artist, title))


def strip_version(artist: str, title: str, budget: int, joiner: str) -> Attempt:
    for _ in range(MAX_VERSION_STRIPS):
        stripped = strip_version_tail(title)
        if stripped == title or not has_alnum(stripped):
            break
        title = stripped
    return Attempt(artist, title, (artist, title))


def strip_low_priority(artist: str, title: str, budget: int, joiner: str) -> Attempt:
    stripped = strip_low_priority_suffix(title, aggressive=True)
    if has_alnum(stripped):
        title = stripped
    return Attempt(artist, title, (artist, title))


def _strip_trailing_bracket(text: str) -> str:
    group = trailing_group(text)
    if not group:
        return text
    stripped = remove_span(text, group.start, group.end)
    return stripped if has_alnum(stripped) else text


def strip_trailing_brackets(artist: str, title: str, budget: int, joiner: str) -> Attempt:
    """
    Drop a trailing bracket group from both fields.

    An all-caps acronym artist followed by a descriptive phrase is replaced
    by the phrase: 'T.S.O.P. (The Sound Of Philadelphia)'. The title keeps
    its bracket when that replacement alone makes the text fit.
    """
    group = trailing_group(artist)
    if group:
        head = artist[:group.start].strip()
        phrase = group.inner.strip()
        if _ACRONYM_HEAD_RE.match(head) and len(phrase.split()) > 1 and has_alnum(phrase):
            artist = phrase
            if utf16_len(combine(artist, title, joiner)) <= budget:
                return Attempt(artist, title, (artist, title))
        else:
            artist = _strip_trailing_bracket(artist)
    title = _strip_trailing_bracket(title)
    return Attempt(artist, title, (artist, title))


def _squeeze_artist(artist: str, limit: int) -> Optional[str]:
    spans = credit_spans(artist)
    if not spans:
        return None
    first_end = spans[0][1]

    cut = word_cut(artist, limit - len(ELLIPSIS))
    if len(cut) >= first_end:
        candidate = _ellipsize(trim_trailing_punct(cut))
        if utf16_len(candidate) <= limit:
            return candidate

    for count in range(len(spans) - 1, 0, -1):
        candidate = _ellipsize(artist[:spans[count - 1][1]].rstrip())
        if utf16_len(candidate) <= limit:
            return candidate

    name, more = first_credit(artist)
    candidate = _ellipsize(name) if more else name
    if utf16_len(candidate) <= limit:
        return candidate
    return None


def preserve_title(artist: str, title: str, budget: int, joiner: str) -> Attempt:
    """Keep the title whole and shrink the artist into what is left."""
    if not artist or not title:
        return Attempt(artist, title)
    available = budget - utf16_len(joiner) - utf16_len(title)
    if available <= len(ELLIPSIS):
        return Attempt(artist, title)
    squeezed = _squeeze_artist(artist, available)
    if not squeezed:
        return Attempt(artist, title)
    return Attempt(artist, title, (squeezed, title))


def cut_title(artist: str, title: str, budget: int, joiner: str) -> Attempt:
    """Fix the first artist, then word-cut the title into the rest."""
    if not title:
        return Attempt(artist, title)
    head = ""
    if artist:
        name, more = first_credit(artist)
        head = _ellipsize(name) if more else name
    used = utf16_len(head) + (utf16_len(joiner) if head else 0)
    title_budget = budget - used
    if title_budget < MIN_TITLE_BUDGET:
        return Attempt(artist, title)
    if utf16_len(title) <= title_budget:
        return Attempt(artist, title, (head, title))
    cut = _trim_fragment(word_cut(title, title_budget - len(ELLIPSIS)))
    if not has_alnum(cut):
        return Attempt(artist, title)
    return Attempt(artist, title, (head, _ellipsize(cut)))


DEFAULT_STRATEGIES: List[TruncationStrategy] = [
    TruncationStrategy("exact", exact),
    TruncationStrategy("compact_feat", compact_feat),
    TruncationStrategy("strip_title_feat", strip_title_feat),
    TruncationStrategy("strip_version_tail", strip_version),
    TruncationStrategy("strip_low_priority_suffix", strip_low_priority),
    TruncationStrategy("strip_trailing_brackets", strip_trailing_brackets),
    TruncationStrategy("preserve_title", preserve_title),
    TruncationStrategy("cut_title", cut_title),
]


class AdaptiveTruncator:
    """Stage 5: run the strategy cascade until one candidate fits."""

    def __init__(
        self,
        max_len: int = DEFAULT_MAX_LEN,
        joiner: str = DEFAULT_JOINER,
        strategies: Optional[List[TruncationStrategy]] = None
    ):
        self.max_len = max_len
        self.joiner = joiner
        self.strategies = strategies if strategies is not None else DEFAULT_STRATEGIES

    def fit(self, artist: str, title: str) -> FittedText:
        """
        Fit artist and title into ``max_len`` units.

        Args:
            artist: Artist after dedup (may be empty)
            title: Title after tail stripping and dedup (may be empty)

        Returns:
            FittedText; its text is empty when nothing printable survives
        """
        if not has_alnum(artist):
            artist = ""
        if not has_alnum(title):
            title = ""
        if not artist and not title:
            return FittedText()

        for strategy in self.strategies:
            attempt = strategy.attempt(artist, title, self.max_len, self.joiner)
            artist, title = attempt.artist, attempt.title
            if attempt.shown is None:
                continue
            shown_artist, shown_title = attempt.shown
            text = combine(shown_artist, shown_title, self.joiner)
            if text and utf16_len(text) <= self.max_len:
                logger.debug(f"Truncation strategy {strategy.name} won: {text!r}")
                return self._result(text, shown_artist, shown_title, strategy.name)

        return self._ellipsize_combined(artist, title)

    def _ellipsize_combined(self, artist: str, title: str) -> FittedText:
        """Last resort: cut the combined string at a word boundary and add '...'."""
        combined = combine(artist, title, self.joiner)
        limit = self.max_len - len(ELLIPSIS)
        if limit < 1:
            text = trim_trailing_punct(cut_to_units(combined, self.max_len))
            logger.info(f"Budget of {self.max_len} too small for an ellipsis, hard cut to {text!r}")
            return self._split_result(text, artist, title, HARD_CUT)

        cut = trim_trailing_punct(word_cut(combined, limit))
        if utf16_len(cut) < MIN_WORD_CUT:
            cut = trim_trailing_punct(cut_to_units(combined, limit))
        text = _ellipsize(cut) if has_alnum(cut) else ""
        logger.debug(f"Truncation strategy ellipsize: {text!r}")
        return self._split_result(text, artist, title, "ellipsize")

    def _split_result(self, text: str, artist: str, title: str, strategy: str) -> FittedText:
        if artist and title:
            head = f"{artist}{self.joiner}"
            if text.startswith(head) and len(text) > len(head):
                return self._result(text, artist, text[len(head):], strategy)
            return self._result(text, text, "", strategy)
        if artist:
            return self._result(text, text, "", strategy)
        return self._result(text, "", text, strategy)

    def _result(self, text: str, artist: str, title: str, strategy: str) -> FittedText:
        if not has_alnum(text):
            return FittedText(strategy=strategy)
        return FittedText(text=text, artist=artist, title=title, strategy=strategy)
