"""
Text primitives shared by skill matching, role detection and scoring.
"""

import math
import re
from functools import lru_cache
from typing import Iterable, Optional

# Terms this short are only matched as whole tokens ("js", "sql", "go")
SHORT_TERM_LENGTH = 3

BOUNDARY = "boundary"
SUBSTRING = "substring"

# Characters that carry meaning inside skill names survive normalization
_DISALLOWED_RE = re.compile(r"[^\w\s.+#/&-]")
_SPACE_RE = re.compile(r"\s+")
_TOKEN_RE = re.compile(r"[a-z0-9]+")

_SUFFIXES = (
    "izations", "isations", "ization", "isation", "izing", "ising",
    "ations", "ation", "ments", "ment", "ings", "ing",
    "ized", "ised", "izes", "ises", "ize", "ise",
    "ers", "er", "ed", "es", "s",
)


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, drop stray punctuation and collapse whitespace."""
    if not text:
        return ""
    text = _DISALLOWED_RE.sub(" ", str(text).lower())
    return _SPACE_RE.sub(" ", text).strip()


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (66.5 -> 67)."""
    return int(math.floor(value + 0.5))


def stem(word: str) -> str:
    """Strip one common English suffix, keeping at least three characters."""
    for suffix in _SUFFIXES:
        if word.endswith(suffix) and len(word) - len(suffix) >= 3:
            return word[: -len(suffix)]
    return word


def token_stems(text: str) -> set[str]:
    """Stems of every alphanumeric token in already-normalized text."""
    return {stem(token) for token in _TOKEN_RE.findall(text)}


@lru_cache(maxsize=2048)
def _boundary_pattern(term: str) -> re.Pattern:
    # A dot only ends a token when no word character follows it, so
    # "js" is not found inside "node.js" and "sql." still counts.
    return re.compile(r"(?<![\w.+#])" + re.escape(term) + r"(?![\w+#]|\.\w)")


def is_glued(needle: str, term: str) -> bool:
    """True when ``needle`` occurs in ``term`` attached to more letters or digits."""
    start = term.find(needle)
    while start != -1:
        end = start + len(needle)
        if (start > 0 and term[start - 1].isalnum()) or (end < len(term) and term[end].isalnum()):
            return True
        start = term.find(needle, start + 1)
    return False


def mask_terms(text: str, terms: Iterable[str]) -> str:
    """Blank out every occurrence of ``terms`` in ``text``."""
    for term in terms:
        if term in text:
            text = text.replace(term, " ")
    return text


def search_term(text: str, term: str, shadows: Iterable[str] = ()) -> Optional[str]:
    """
    Look for ``term`` in normalized ``text``.

    ``shadows`` are longer known terms containing ``term`` (``javascript`` for
    ``java``); they are masked before searching.

    Returns:
        BOUNDARY for a whole-token match, SUBSTRING for a plain substring
        match, None when the term is absent
    """
    if not text or not term:
        return None

    text = mask_terms(text, shadows)
    if term not in text:
        return None

    if _boundary_pattern(term).search(text):
        return BOUNDARY
    if len(term) <= SHORT_TERM_LENGTH:
        return None
    return SUBSTRING
