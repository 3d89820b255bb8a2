"""
Stage 2: per-field cleanup.

Every step is a pure ``str -> str`` transform. The order matters: the
noise-tag scan expects symbols to be normalized already, and the
repertoire filter expects transliteration to have run.
"""

import logging
from typing import Callable, List, Tuple

from rdstext.models.schemas import NormalizationConfig
from rdstext.text.charmaps import (
    decode_entities, filter_repertoire, normalize_fullwidth, replace_symbols, strip_invisible
)
from rdstext.text.keys import collapse_spaces
from rdstext.text.noise_tags import strip_noise_tags
from rdstext.text.transliteration import transliterate

logger = logging.getLogger(__name__)

# "&amp;amp;" is common in scraped metadata; decode at most this many layers
MAX_ENTITY_LAYERS = 3


def decode_entity_layers(text: str) -> str:
    """Decode HTML entities, including double-encoded ones, to a bounded depth."""
    for _ in range(MAX_ENTITY_LAYERS):
        decoded = decode_entities(text)
        if decoded == text:
            break
        text = decoded
    return text


class FieldNormalizer:
    """Stage 2: clean one artist or title field."""

    def __init__(self, config: NormalizationConfig):
        self.config = config
        self.steps = self._build_steps()

    def _build_steps(self) -> List[Tuple[str, Callable[[str], str]]]:
        repertoire = self.config.repertoire
        steps = [
            ("strip_invisible", strip_invisible),
            ("decode_entities", decode_entity_layers),
            ("normalize_fullwidth", normalize_fullwidth),
            ("replace_symbols", replace_symbols),
            ("strip_noise_tags", strip_noise_tags),
        ]
        if self.config.transliterate:
            steps.append(("transliterate", transliterate))
        steps.extend([
            ("collapse_spaces", collapse_spaces),
            ("filter_repertoire", lambda text: filter_repertoire(text, repertoire)),
            ("collapse_spaces", collapse_spaces),
            ("strip_noise_tags", strip_noise_tags),
        ])
        return steps

    def normalize(self, text: str) -> str:
        """
        Run the full cleanup sequence on one field.

        Returns an empty string when nothing printable survives.
        """
        if not text:
            return ""
        for name, step in self.steps:
            cleaned = step(text)
            if cleaned != text:
                logger.debug(f"Normalizer {name}: {text!r} -> {cleaned!r}")
            text = cleaned
            if not text:
                break
        return text
