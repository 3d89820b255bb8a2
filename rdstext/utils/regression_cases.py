"""
Loader for the regression case file.

Each case is one line of the form::

    [@ascii] [@translit] raw record => expected RT

Blank lines and lines starting with '#' are ignored. The raw record uses
the default delimiter; an expected RT of ``<empty>`` means no output.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from rdstext.models.schemas import NormalizationConfig

CASE_RE = re.compile(r"^(?P<flags>(?:@\w+\s+)*)(?P<raw>.+?)\s+=>\s*(?P<expected>.*)$")
EMPTY_MARKER = "<empty>"
KNOWN_FLAGS = {"@ascii", "@translit"}


@dataclass(frozen=True)
class RegressionCase:
    line_number: int
    raw: str
    expected: str
    ascii_safe: bool = False
    transliterate: bool = False

    def config(self) -> NormalizationConfig:
        return NormalizationConfig(
            ascii_safe_enabled=self.ascii_safe,
            transliteration_enabled=self.transliterate,
        )

    @property
    def label(self) -> str:
        flags = [name for name, on in (("ascii", self.ascii_safe), ("translit", self.transliterate)) if on]
        suffix = f" [{', '.join(flags)}]" if flags else ""
        return f"line {self.line_number}{suffix}"


def parse_case(line: str, line_number: int = 0) -> Optional[RegressionCase]:
    """Parse a test case line."""
    line = line.strip()
    if not line or line.startswith('#'):
        return None
    m = CASE_RE.match(line)
    if not m:
        return None
    flags = set(m.group("flags").split())
    unknown = flags - KNOWN_FLAGS
    if unknown:
        raise ValueError(f"Unknown case flags on line {line_number}: {sorted(unknown)}")
    expected = m.group("expected").strip()
    return RegressionCase(
        line_number=line_number,
        raw=m.group("raw").strip(),
        expected="" if expected == EMPTY_MARKER else expected,
        ascii_safe="@ascii" in flags,
        transliterate="@translit" in flags,
    )


def load_cases(path: Path) -> List[RegressionCase]:
    cases = []
    with open(path, 'r', encoding='utf-8') as f:
        for line_number, line in enumerate(f, 1):
            case = parse_case(line, line_number)
            if case:
                cases.append(case)
    return cases
