"""
Static code-point tables and the character-level transforms built on them.

Every table here is a fixed mapping of code point to replacement string;
nothing is derived at runtime from locale data.
"""

import re
import unicodedata
from typing import Dict

from rdstext.models.schemas import Repertoire
from rdstext.text.keys import strip_combining

# ── Invisible and control characters ───────────────────────────────────

# Control characters that separate words: replaced by a space
SPACING_CONTROLS = frozenset("\t\n\r\x0b\x0c\x85\u2028\u2029")

# Invisible characters removed outright (checked in addition to category Cf)
INVISIBLE_CHARS = frozenset(
    [
        "\u00AD",  # SOFT HYPHEN
        "\u034F",  # COMBINING GRAPHEME JOINER
        "\u061C",  # ARABIC LETTER MARK
        "\u115F",  # HANGUL CHOSEONG FILLER
        "\u1160",  # HANGUL JUNGSEONG FILLER
        "\u180E",  # MONGOLIAN VOWEL SEPARATOR
        "\u200B",  # ZERO WIDTH SPACE
        "\u200C",  # ZERO WIDTH NON-JOINER
        "\u200D",  # ZERO WIDTH JOINER
        "\u200E",  # LEFT-TO-RIGHT MARK
        "\u200F",  # RIGHT-TO-LEFT MARK
        "\u2060",  # WORD JOINER
        "\u3164",  # HANGUL FILLER
        "\uFE0E",  # VARIATION SELECTOR-15
        "\uFE0F",  # VARIATION SELECTOR-16
        "\uFEFF",  # BOM / ZERO WIDTH NO-BREAK SPACE
        "\uFFA0",  # HALFWIDTH HANGUL FILLER
        "\uFFFC",  # OBJECT REPLACEMENT CHARACTER
    ]
)


def is_invisible(ch: str) -> bool:
    """True for control, format and zero-width characters."""
    if ch in INVISIBLE_CHARS:
        return True
    category = unicodedata.category(ch)
    return category in ("Cc", "Cf", "Cs", "Co", "Cn") and ch not in SPACING_CONTROLS


def strip_invisible(text: str) -> str:
    """Remove control/invisible characters; spacing controls become spaces."""
    if not text:
        return ""
    result = []
    for ch in text:
        if ch in SPACING_CONTROLS:
            result.append(" ")
        elif not is_invisible(ch):
            result.append(ch)
    return "".join(result)


# ── HTML entities ──────────────────────────────────────────────────────

NAMED_ENTITIES = {
    "amp": "&",
    "quot": '"',
    "apos": "'",
    "lt": "<",
    "gt": ">",
    "nbsp": " ",
}

_ENTITY_RE = re.compile(r"&(?:#(\d{1,7})|#[xX]([0-9a-fA-F]{1,6})|([a-zA-Z]{2,6}));")


def _decode_entity(match: "re.Match") -> str:
    decimal, hexadecimal, name = match.groups()
    if name is not None:
        return NAMED_ENTITIES.get(name.lower(), match.group(0))
    code_point = int(decimal) if decimal is not None else int(hexadecimal, 16)
    if code_point == 0 or code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
        return match.group(0)
    return chr(code_point)


def decode_entities(text: str) -> str:
    """Decode the small set of named entities plus numeric references."""
    if not text or "&" not in text:
        return text or ""
    return _ENTITY_RE.sub(_decode_entity, text)


# ── Fullwidth forms ────────────────────────────────────────────────────

FULLWIDTH_OFFSET = 0xFEE0
IDEOGRAPHIC_SPACE = "\u3000"


def normalize_fullwidth(text: str) -> str:
    """Map U+FF01-FF5E and the ideographic space to plain ASCII."""
    if not text:
        return ""
    result = []
    for ch in text:
        code_point = ord(ch)
        if 0xFF01 <= code_point <= 0xFF5E:
            result.append(chr(code_point - FULLWIDTH_OFFSET))
        elif ch == IDEOGRAPHIC_SPACE:
            result.append(" ")
        else:
            result.append(ch)
    return "".join(result)


# ── Symbol replacement table ───────────────────────────────────────────

SYMBOL_REPLACEMENTS: Dict[str, str] = {
    # Quotes
    "‘": "'", "’": "'", "‚": "'", "‛": "'",
    "′": "'", "ʼ": "'", "`": "'", "´": "'",
    "“": '"', "”": '"', "„": '"', "‟": '"',
    "″": '"',
    # Dashes and minus signs
    "‐": "-", "‑": "-", "‒": "-", "–": "-",
    "—": "-", "―": "-", "−": "-", "﹘": "-",
    "﹣": "-", "⸺": "-", "⸻": "-",
    # Ellipsis
    "…": "...",
    # Spaces
    "\u00A0": " ", "\u2000": " ", "\u2001": " ", "\u2002": " ",
    "\u2003": " ", "\u2004": " ", "\u2005": " ", "\u2006": " ",
    "\u2007": " ", "\u2008": " ", "\u2009": " ", "\u200A": " ",
    "\u202F": " ", "\u205F": " ",
    # Bullets and middle dots
    "\u2022": " ", "\u00B7": " ", "\u2219": " ", "\u2027": " ",
    "\u30FB": " ", "\u25CF": " ",
}

CURRENCY_SPELLOUTS: Dict[str, str] = {
    "£": "GBP",
    "€": "EUR",
    "¥": "JPY",
    "₽": "RUB",
    "₹": "INR",
    "₩": "KRW",
    "₺": "TRY",
    "₴": "UAH",
    "₪": "ILS",
    "₱": "PHP",
    "฿": "THB",
    "₣": "FRF",
    "₤": "ITL",
    "¢": "ct",
    "₿": "BTC",
}

_DEGREE_RE = re.compile(r"°\s?([CF])\b")
# Digit, optional SI prefix, then OHM SIGN or GREEK CAPITAL OMEGA
_OHM_RE = re.compile(r"(\d)\s?([kMGmu\u00B5\u03BC]?)[\u2126\u03A9]")
_CURRENCY_RE = re.compile("[" + "".join(CURRENCY_SPELLOUTS) + "]")
_SYMBOL_TRANSLATION = str.maketrans(SYMBOL_REPLACEMENTS)


def _ohm(match: "re.Match") -> str:
    digit, si_prefix = match.groups()
    if si_prefix in ("µ", "μ"):
        si_prefix = "u"
    return f"{digit} {si_prefix}Ohm"


def _currency(match: "re.Match") -> str:
    text = match.string
    start, end = match.span()
    code = CURRENCY_SPELLOUTS[match.group(0)]
    before = " " if start > 0 and text[start - 1].isalnum() else ""
    after = " " if end < len(text) and text[end].isalnum() else ""
    return f"{before}{code}{after}"


def replace_symbols(text: str) -> str:
    """Apply the unit, currency and punctuation replacement tables."""
    if not text:
        return ""
    text = _DEGREE_RE.sub(r" \1", text)
    text = _OHM_RE.sub(_ohm, text)
    text = _CURRENCY_RE.sub(_currency, text)
    return text.translate(_SYMBOL_TRANSLATION)


# ── Repertoire filtering ───────────────────────────────────────────────

# Latin letters and signs that do not decompose to ASCII
ASCII_FOLDING: Dict[str, str] = {
    "ß": "ss", "ẞ": "SS",
    "æ": "ae", "Æ": "AE",
    "œ": "oe", "Œ": "OE",
    "ø": "o", "Ø": "O",
    "ł": "l", "Ł": "L",
    "đ": "d", "Đ": "D",
    "ð": "d", "Ð": "D",
    "þ": "th", "Þ": "Th",
    "ı": "i", "İ": "I",
    "ħ": "h", "Ħ": "H",
    "ŧ": "t", "Ŧ": "T",
    "ĸ": "k",
    "ŀ": "l", "Ŀ": "L",
    "ŉ": "n",
    "ŋ": "ng", "Ŋ": "NG",
    "ſ": "s",
    "ĳ": "ij", "Ĳ": "IJ",
    "©": "(C)", "®": "(R)", "™": "TM",
    "½": "1/2", "¼": "1/4", "¾": "3/4",
    "×": "x", "÷": "/",
    "«": '"', "»": '"', "‹": "'", "›": "'",
    "¡": "!", "¿": "?",
}

_ASCII_FOLD_TRANSLATION = str.maketrans(ASCII_FOLDING)


def _in_latin_range(ch: str) -> bool:
    # ASCII + Latin-1 Supplement + Latin Extended-A
    return ord(ch) <= 0x017F


def _printable_ascii(ch: str) -> bool:
    return 0x20 <= ord(ch) <= 0x7E


def filter_repertoire(text: str, repertoire: Repertoire) -> str:
    """
    Restrict *text* to the configured character repertoire.

    Args:
        text: Field text, already transliterated if required
        repertoire: Target repertoire

    Returns:
        Text containing only characters from the repertoire. Control and
        invisible characters are always removed.
    """
    if not text:
        return ""
    text = strip_invisible(text)
    if repertoire is Repertoire.UNICODE:
        return text

    text = unicodedata.normalize("NFC", text)
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    if repertoire is Repertoire.LATIN:
        return "".join(ch for ch in text if _in_latin_range(ch) and not is_invisible(ch))

    text = strip_combining(text.translate(_ASCII_FOLD_TRANSLATION))
    # NFKD can expose letters that have a folding entry of their own
    text = text.translate(_ASCII_FOLD_TRANSLATION)
    return "".join(ch for ch in text if _printable_ascii(ch))
