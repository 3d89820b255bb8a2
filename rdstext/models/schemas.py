"""
Pydantic schemas for the RadioText pipeline.

These models define the values passed between pipeline stages and the
immutable configuration every stage receives.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


UNIT_SEPARATOR_SYMBOL = "␟"
DEFAULT_MAX_LEN = 64
DEFAULT_JOINER = " - "


class DelimiterKey(str, Enum):
    """Which separator the playout tool writes between artist and title."""

    UNIT = "unit"
    TAB = "tab"
    CUSTOM = "custom"


class Repertoire(str, Enum):
    """Character repertoire the output is restricted to."""

    UNICODE = "unicode"
    LATIN = "latin"
    ASCII = "ascii"


class Degradation(str, Enum):
    """Graceful fallbacks taken while processing a record (never raised)."""

    PARSE_AMBIGUOUS = "parse_ambiguous"
    INVALID_RECORD = "invalid_record"
    EMPTY_AFTER_FILTER = "empty_after_filter"
    BUDGET_EXHAUSTED = "budget_exhausted"


def resolve_delimiter(key: DelimiterKey, custom: Optional[str] = None) -> str:
    """
    Turn a delimiter key into the literal separator string.

    Args:
        key: Configured delimiter key
        custom: Custom delimiter, used only for ``DelimiterKey.CUSTOM``

    Returns:
        The separator string

    Raises:
        ValueError: If a custom delimiter is missing or longer than 5 characters
    """
    key = DelimiterKey(key)
    if key is DelimiterKey.UNIT:
        return UNIT_SEPARATOR_SYMBOL
    if key is DelimiterKey.TAB:
        return "\t"
    if not custom or len(custom) > 5:
        raise ValueError("Custom delimiter must be 1-5 characters long")
    return custom


class NormalizationConfig(BaseModel):
    """Immutable per-call configuration consumed by every pipeline stage."""

    model_config = ConfigDict(frozen=True)

    transliteration_enabled: bool = Field(
        default=False,
        description="Map Cyrillic/Greek letters to Latin and restrict output to Latin scripts"
    )
    ascii_safe_enabled: bool = Field(
        default=False,
        description="Restrict every output to printable ASCII (implies transliteration)"
    )
    delimiter: str = Field(
        default=UNIT_SEPARATOR_SYMBOL,
        description="Separator between artist and title in the raw record",
        min_length=1, max_length=5
    )
    max_len: int = Field(
        default=DEFAULT_MAX_LEN,
        description="Hard RadioText limit in UTF-16 code units",
        ge=1
    )
    joiner: str = Field(
        default=DEFAULT_JOINER,
        description="Visible separator between artist and title in RT"
    )

    @field_validator('joiner')
    @classmethod
    def joiner_not_blank(cls, v):
        """The joiner is used to re-split RT for RT+, so it must be visible."""
        if not v or not v.strip():
            raise ValueError("Joiner must contain a visible character")
        return v

    @property
    def repertoire(self) -> Repertoire:
        if self.ascii_safe_enabled:
            return Repertoire.ASCII
        if self.transliteration_enabled:
            return Repertoire.LATIN
        return Repertoire.UNICODE

    @property
    def transliterate(self) -> bool:
        return self.transliteration_enabled or self.ascii_safe_enabled


class ParsedFields(BaseModel):
    """Artist and title split out of a raw record."""

    model_config = ConfigDict(frozen=True)

    artist: str = Field(default="", description="Performing artist (may be empty)")
    title: str = Field(default="", description="Song title")
    ambiguous: bool = Field(
        default=False,
        description="True when the delimiter count was not exactly one"
    )

    @field_validator('artist', 'title')
    @classmethod
    def strip_whitespace(cls, v):
        """Strip leading/trailing whitespace from text fields."""
        return v.strip() if v else ""

    @property
    def is_valid(self) -> bool:
        return bool(self.title)


class FittedText(BaseModel):
    """Length-fitted visible text plus which fields survived the fitting."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    artist: str = ""
    title: str = ""
    strategy: Optional[str] = None

    @property
    def has_artist(self) -> bool:
        return bool(self.artist)

    @property
    def has_title(self) -> bool:
        return bool(self.title)


class OutputBundle(BaseModel):
    """The three broadcast strings produced for one raw record."""

    model_config = ConfigDict(frozen=True)

    prefix: str = Field(default="", description="Localized 'now playing' text, trailing space")
    rt: str = Field(default="", description="RadioText line")
    rt_plus: str = Field(default="", description="RT+ tagged artist/title payload")

    @property
    def is_empty(self) -> bool:
        return not self.rt


class PrefixEntry(BaseModel):
    """One row of the localized prefix catalog."""

    model_config = ConfigDict(frozen=True)

    native: str
    ascii_fallback: str

    @model_validator(mode='after')
    def fallback_is_ascii(self):
        if not all(0x20 <= ord(ch) <= 0x7E for ch in self.ascii_fallback):
            raise ValueError(f"ASCII fallback is not printable ASCII: {self.ascii_fallback!r}")
        return self


class ProcessingResult(BaseModel):
    """Detailed result of running one record through the pipeline."""

    raw: str
    parsed: ParsedFields = Field(default_factory=ParsedFields)
    artist: str = Field(default="", description="Artist after normalization and dedup")
    title: str = Field(default="", description="Title after normalization, tail stripping and dedup")
    fitted: FittedText = Field(default_factory=FittedText)
    bundle: OutputBundle = Field(default_factory=OutputBundle)
    degradations: List[Degradation] = Field(default_factory=list)
    processing_time_ms: float = 0.0
    error: Optional[str] = None
