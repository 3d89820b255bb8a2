"""
Cyrillic and Greek to Latin transliteration.

The tables map lower-case letters only; upper-case input is mapped through
its lower-case form and re-capitalised. Multi-letter results are fully
upper-cased inside all-caps words ("ЩИТ" -> "SHCHIT") and capitalised
otherwise ("Щит" -> "Shchit").
"""

import re
from typing import Dict, Tuple

from rdstext.text.lazy import LazyTable

CYRILLIC: Dict[str, str] = {
    # Russian
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e",
    "ё": "yo", "ж": "zh", "з": "z", "и": "i", "й": "y", "к": "k",
    "л": "l", "м": "m", "н": "n", "о": "o", "п": "p", "р": "r",
    "с": "s", "т": "t", "у": "u", "ф": "f", "х": "kh", "ц": "ts",
    "ч": "ch", "ш": "sh", "щ": "shch", "ъ": "", "ы": "y", "ь": "",
    "э": "e", "ю": "yu", "я": "ya",
    # Ukrainian and Belarusian
    "є": "ye", "і": "i", "ї": "yi", "ґ": "g", "ў": "u",
    # Serbian and Macedonian
    "ђ": "dj", "ј": "j", "љ": "lj", "њ": "nj", "ћ": "c", "џ": "dz",
    "ѓ": "gj", "ќ": "kj", "ѕ": "dz",
    # Precomposed accented vowels
    "ѐ": "e", "ѝ": "i",
}

GREEK: Dict[str, str] = {
    "α": "a", "β": "v", "γ": "g", "δ": "d", "ε": "e", "ζ": "z",
    "η": "i", "θ": "th", "ι": "i", "κ": "k", "λ": "l", "μ": "m",
    "ν": "n", "ξ": "x", "ο": "o", "π": "p", "ρ": "r", "σ": "s",
    "ς": "s", "τ": "t", "υ": "y", "φ": "f", "χ": "ch", "ψ": "ps",
    "ω": "o",
    # Precomposed accented vowels (tonos, dialytika)
    "ά": "a", "έ": "e", "ή": "i", "ί": "i", "ό": "o", "ύ": "y",
    "ώ": "o", "ϊ": "i", "ϋ": "y", "ΐ": "i", "ΰ": "y",
}

# Applied before single letters; keys are lower-case
GREEK_DIGRAPHS: Dict[str, str] = {
    "αι": "ai", "αί": "ai",
    "ει": "ei", "εί": "ei",
    "οι": "oi", "οί": "oi",
    "ου": "ou", "ού": "ou",
    "αυ": "av", "αύ": "av",
    "ευ": "ev", "εύ": "ev",
    "ηυ": "iv", "ηύ": "iv",
    "μπ": "mp",
    "ντ": "nt",
    "γκ": "gk",
    "γγ": "ng",
    "τσ": "ts",
    "τζ": "tz",
}


def _build() -> Tuple["re.Pattern", Dict[str, str]]:
    letters = dict(CYRILLIC)
    letters.update(GREEK)
    digraph_re = re.compile(
        "|".join(re.escape(key) for key in sorted(GREEK_DIGRAPHS, key=len, reverse=True)),
        re.IGNORECASE,
    )
    return digraph_re, letters


_TABLES = LazyTable("transliteration", _build)


def _match_case(source: str, replacement: str, upper_context: bool) -> str:
    if not replacement or not source[:1].isupper():
        return replacement
    if len(replacement) > 1 and upper_context:
        return replacement.upper()
    return replacement[0].upper() + replacement[1:]


def _is_upper_context(text: str, start: int, end: int) -> bool:
    following = text[end:end + 1]
    if following.isalpha():
        return following.isupper()
    preceding = text[start - 1:start] if start > 0 else ""
    return preceding.isalpha() and preceding.isupper()


def transliterate(text: str) -> str:
    """
    Map Cyrillic and Greek letters in *text* to Latin letters.

    Characters of any other script pass through unchanged.

    Example:
        >>> transliterate("Παόλα")
        'Paola'
    """
    if not text:
        return ""
    digraph_re, letters = _TABLES.get()
    if not any(ch.lower() in letters for ch in text):
        return text

    pieces = []
    index = 0
    length = len(text)
    while index < length:
        match = digraph_re.match(text, index)
        if match:
            source = match.group(0)
            replacement = GREEK_DIGRAPHS[source.lower()]
            upper = _is_upper_context(text, index, match.end())
            pieces.append(_match_case(source, replacement, upper))
            index = match.end()
            continue
        ch = text[index]
        replacement = letters.get(ch.lower())
        if replacement is None:
            pieces.append(ch)
        else:
            upper = _is_upper_context(text, index, index + 1)
            pieces.append(_match_case(ch, replacement, upper))
        index += 1
    return "".join(pieces)
