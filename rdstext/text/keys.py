"""
Length measurement, cutting and comparison keys shared by all stages.

RadioText budgets are counted in UTF-16 code units, so a supplementary-plane
character (emoji, rare CJK) costs two units. Cuts never split such a
character in half.
"""

import re
import unicodedata

WHITESPACE_RE = re.compile(r"\s+")

# Credit separators used to split an artist field or a feat. guest list
CREDIT_SPLIT_RE = re.compile(
    r"\s*(?:,|&|/|;|\+|\band\b|\bfeat\.?(?=\s|$)|\bft\.?(?=\s|$)|\bfeaturing\b)\s*",
    re.IGNORECASE,
)

# Trailing "of Band" / "from Band" qualifier on a credited name
QUALIFIER_RE = re.compile(r"\s+(?:of|from)\s+.+$", re.IGNORECASE)

TRAILING_PUNCT = " \t-–/\\|:;,.~+&*_=("


def utf16_len(text: str) -> int:
    """Length of *text* in UTF-16 code units."""
    if not text:
        return 0
    return len(text) + sum(1 for ch in text if ord(ch) > 0xFFFF)


def cut_to_units(text: str, limit: int) -> str:
    """Longest prefix of *text* that fits in *limit* UTF-16 code units."""
    if limit <= 0 or not text:
        return ""
    used = 0
    for index, ch in enumerate(text):
        used += 2 if ord(ch) > 0xFFFF else 1
        if used > limit:
            return text[:index]
    return text


def collapse_spaces(text: str) -> str:
    """Normalise whitespace runs to single spaces and trim."""
    if not text:
        return ""
    return WHITESPACE_RE.sub(" ", text).strip()


def has_alnum(text: str) -> bool:
    """True when *text* carries at least one letter or digit."""
    return any(ch.isalnum() for ch in text or "")


def strip_combining(text: str) -> str:
    """Decompose *text* and drop combining marks."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def name_key(text: str) -> str:
    """
    Comparison key for artist and title names.

    Lower-cases, decomposes, strips combining marks and collapses every
    run of non letter/digit characters to a single space.

    Example:
        >>> name_key("Beyoncé & JAY-Z")
        'beyonce jay z'
    """
    if not text:
        return ""
    folded = strip_combining(text.lower())
    spaced = "".join(ch if ch.isalnum() else " " for ch in folded)
    return collapse_spaces(spaced)


def split_credits(text: str) -> list:
    """Split an artist field or guest list into credited names."""
    if not text:
        return []
    return [part.strip() for part in CREDIT_SPLIT_RE.split(text) if part and part.strip()]


def credit_keys(name: str) -> set:
    """Keys for one credited name, with and without an of/from qualifier."""
    keys = set()
    full = name_key(name)
    if full:
        keys.add(full)
    bare = name_key(QUALIFIER_RE.sub("", name))
    if bare:
        keys.add(bare)
    return keys


def trim_trailing_punct(text: str) -> str:
    """Drop trailing separators and punctuation that would dangle before '...'."""
    return text.rstrip(TRAILING_PUNCT)
