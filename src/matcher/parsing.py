"""
Parsing of the free-text "required skills" field into an ordered skill list.
"""

import re
from typing import Optional, Sequence, Union

from .text import normalize_text

SkillInput = Union[str, Sequence[str], None]

_DELIMITER_RE = re.compile(r"[,;|\n\r•·]+")
# A dash splits only as a list marker: line-leading or surrounded by spaces
_LIST_DASH_RE = re.compile(r"(?:^|(?<=\s))[-–—]+(?=\s|$)", re.MULTILINE)
_NUMBERING_RE = re.compile(r"^\s*\d+\s*[:.)](?!\d)\s*")
_DURATION_RE = re.compile(r"\d+(?:\.\d+)?\+?(?:\s*(?:years?|yrs?))?(?:\s+of\s+experience)?")
_LEADING_CONNECTOR_RE = re.compile(r"^(?:and|or|&)\s+")
_TRAILING_PUNCT_RE = re.compile(r"[\s.:!?-]+$")
_LEADING_PUNCT_RE = re.compile(r"^[\s:!?-]+")

STOP_PHRASES = frozenset({
    "and", "or", "with", "using", "including", "such as", "like", "etc",
    "year", "years", "experience", "knowledge", "familiar", "proficient",
    "expert", "beginner", "intermediate", "advanced", "skills", "required",
    "preferred", "plus", "nice to have",
})


def _clean_token(token: str) -> Optional[str]:
    token = _NUMBERING_RE.sub("", token)
    # Same normalization as the resume text, so literal occurrences match
    token = normalize_text(token)
    token = _LEADING_CONNECTOR_RE.sub("", token)
    token = _TRAILING_PUNCT_RE.sub("", token)
    token = _LEADING_PUNCT_RE.sub("", token)

    if len(token) <= 1 or token in STOP_PHRASES or _DURATION_RE.fullmatch(token):
        return None
    return token


def split_skills(text: str) -> list[str]:
    """Split one free-text blob on list delimiters, cleaning every token."""
    text = _LIST_DASH_RE.sub(",", text)
    tokens = (_clean_token(t) for t in _DELIMITER_RE.split(text))
    return [t for t in tokens if t]


def parse_required_skills(required_skills: SkillInput) -> list[str]:
    """
    Turn a required-skills field into an ordered, de-duplicated skill list.

    Accepts a delimited string, a list of strings (elements are split the
    same way, which also handles a single element holding a whole list) or
    None.
    """
    if not required_skills:
        return []

    if isinstance(required_skills, str):
        chunks = [required_skills]
    else:
        chunks = [str(item) for item in required_skills if item]

    skills: list[str] = []
    for chunk in chunks:
        for skill in split_skills(chunk):
            if skill not in skills:
                skills.append(skill)
    return skills
