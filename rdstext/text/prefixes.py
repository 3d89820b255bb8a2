"""
Default catalog of localized "now playing" prefixes.

Each entry holds the native text and a printable-ASCII fallback. The
catalog is plain data; callers may inject their own mapping instead.
"""

from typing import Dict, Mapping

from rdstext.models.schemas import PrefixEntry

DEFAULT_LANGUAGE = "en"

_CATALOG_ROWS = (
    ("en", "Now playing:", "Now playing:"),
    ("de", "Jetzt läuft:", "Jetzt laeuft:"),
    ("fr", "En ce moment :", "En ce moment :"),
    ("es", "Sonando ahora:", "Sonando ahora:"),
    ("it", "In onda ora:", "In onda ora:"),
    ("pt", "A tocar agora:", "A tocar agora:"),
    ("nl", "Nu op de radio:", "Nu op de radio:"),
    ("sv", "Spelas nu:", "Spelas nu:"),
    ("no", "Spilles nå:", "Spilles naa:"),
    ("da", "Spiller nu:", "Spiller nu:"),
    ("fi", "Nyt soi:", "Nyt soi:"),
    ("is", "Í spilun:", "I spilun:"),
    ("pl", "Teraz gramy:", "Teraz gramy:"),
    ("cs", "Právě hraje:", "Prave hraje:"),
    ("sk", "Práve hrá:", "Prave hra:"),
    ("hu", "Most szól:", "Most szol:"),
    ("ro", "Acum rulează:", "Acum ruleaza:"),
    ("hr", "Sada svira:", "Sada svira:"),
    ("sl", "Zdaj igra:", "Zdaj igra:"),
    ("sr", "Сада свира:", "Sada svira:"),
    ("bg", "Сега звучи:", "Sega zvuchi:"),
    ("ru", "Сейчас играет:", "Seychas igraet:"),
    ("uk", "Зараз грає:", "Zaraz graye:"),
    ("el", "Παίζει τώρα:", "Paizei tora:"),
    ("tr", "Şimdi çalıyor:", "Simdi caliyor:"),
    ("et", "Praegu mängib:", "Praegu mangib:"),
    ("lv", "Tagad skan:", "Tagad skan:"),
    ("lt", "Dabar groja:", "Dabar groja:"),
    ("ja", "再生中:", "Now playing:"),
)

DEFAULT_PREFIXES: Dict[str, PrefixEntry] = {
    code: PrefixEntry(native=native, ascii_fallback=fallback)
    for code, native, fallback in _CATALOG_ROWS
}


def lookup_prefix(language: str, catalog: Mapping[str, PrefixEntry] = DEFAULT_PREFIXES) -> PrefixEntry:
    """Entry for *language*, falling back to English for unknown codes."""
    code = (language or "").strip().lower()
    entry = catalog.get(code)
    if entry is None:
        entry = catalog.get(DEFAULT_LANGUAGE) or DEFAULT_PREFIXES[DEFAULT_LANGUAGE]
    return entry
