"""
Stage 6: build the broadcast strings from the fitted text.
"""

import logging
from typing import Optional

from rdstext.models.schemas import FittedText, NormalizationConfig, OutputBundle, PrefixEntry
from rdstext.text.charmaps import filter_repertoire
from rdstext.text.keys import collapse_spaces, cut_to_units, has_alnum, utf16_len
from rdstext.text.prefixes import lookup_prefix
from rdstext.text.transliteration import transliterate

logger = logging.getLogger(__name__)

RT_PLUS_ARTIST = r"\+ar"
RT_PLUS_TITLE = r"\+ti"
RT_PLUS_END = r"\-"


def format_rt_plus(artist: str, title: str, joiner: str) -> str:
    """Tag the artist and title spans for RT+ receivers."""
    if artist and title:
        return f"{RT_PLUS_ARTIST}{artist}{RT_PLUS_END}{joiner}{RT_PLUS_TITLE}{title}{RT_PLUS_END}"
    if artist:
        return f"{RT_PLUS_ARTIST}{artist}{RT_PLUS_END}"
    if title:
        return f"{RT_PLUS_TITLE}{title}{RT_PLUS_END}"
    return ""


class OutputComposer:
    """Stage 6: produce RT, RT+ and the localized prefix."""

    def __init__(self, config: NormalizationConfig, prefix: Optional[PrefixEntry] = None):
        self.config = config
        self.prefix_entry = prefix or lookup_prefix("en")

    def compose(self, fitted: FittedText) -> OutputBundle:
        rt = self.compose_rt(fitted.text)
        if not rt:
            return OutputBundle()
        return OutputBundle(
            prefix=self.compose_prefix(),
            rt=rt,
            rt_plus=self.compose_rt_plus(rt, fitted),
        )

    def compose_rt(self, text: str) -> str:
        """Final guard: hard length cut and repertoire re-filter."""
        if utf16_len(text) > self.config.max_len:
            logger.debug(f"Hard-cutting RT over {self.config.max_len} units: {text!r}")
            text = cut_to_units(text, self.config.max_len)
        text = collapse_spaces(filter_repertoire(text, self.config.repertoire))
        return text if has_alnum(text) else ""

    def compose_rt_plus(self, rt: str, fitted: FittedText) -> str:
        """
        Re-split the visible RT once on the joiner and tag both halves.

        Only a fitted result that kept both fields is split; otherwise the
        whole RT is tagged as whichever field survived.
        """
        joiner = self.config.joiner
        if fitted.has_artist and fitted.has_title and joiner in rt:
            artist, title = rt.split(joiner, 1)
            return format_rt_plus(artist, title, joiner)
        if fitted.has_artist and not fitted.has_title:
            return format_rt_plus(rt, "", joiner)
        return format_rt_plus("", rt, joiner)

    def compose_prefix(self) -> str:
        """
        Localized "now playing" text with exactly one trailing space.

        The ASCII fallback is used in ascii-safe mode and whenever the
        native text has no letters left after filtering.
        """
        entry = self.prefix_entry
        text = entry.ascii_fallback if self.config.ascii_safe_enabled else entry.native
        if self.config.transliterate:
            text = transliterate(text)
        text = collapse_spaces(filter_repertoire(text, self.config.repertoire))
        if not has_alnum(text):
            logger.debug(f"Prefix {entry.native!r} did not survive filtering, using ASCII fallback")
            text = collapse_spaces(filter_repertoire(entry.ascii_fallback, self.config.repertoire))
        return f"{text.rstrip()} "
