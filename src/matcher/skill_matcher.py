"""
Skill matching between resume text and a job's required skills.

Each required skill is looked up with a fixed priority of strategies and the
first strategy that finds it decides its confidence:

1. the skill, its canonical name and listed synonyms (substring, with a
   higher confidence for a whole-word hit)
2. compound phrases: every significant word of a multi-word skill present
3. abbreviations (ml, k8s, js)
4. known typos and spacing variants (phyton, power-bi, nodejs)
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Optional

from loguru import logger

from .parsing import SkillInput, parse_required_skills
from .roles import detect_role, technical_fit
from .tables import SkillTables, get_skill_tables
from .text import BOUNDARY, normalize_text, round_half_up, search_term, stem, token_stems

EMPTY_SKILLS_SCORE = 75
MIN_SKILLS_SCORE = 20
MAX_SKILLS_SCORE = 95

# Confidence per strategy
CANONICAL_BOUNDARY = 0.95
CANONICAL_SUBSTRING = 0.90
SYNONYM_BOUNDARY = 0.90
SYNONYM_SUBSTRING = 0.85
COMPOUND = 0.75
ABBREVIATION = 0.65
FUZZY = 0.55

# Dropped from multi-word skills before the compound check
CONNECTOR_WORDS = frozenset({
    "using", "for", "with", "and", "in", "of", "the", "to", "on", "via", "or", "an",
})

_WORD_SPLIT_RE = re.compile(r"[\s/]+")
_INNER_DOT_RE = re.compile(r"(?<=\w)\.(?=\w)")


@dataclass(frozen=True)
class MatchResult:
    """Outcome of looking up one required skill."""

    skill: str
    found: bool
    confidence: float = 0.0
    matched_variant: Optional[str] = None
    strategy: Optional[str] = None  # exact | synonym | compound | abbreviation | fuzzy


@dataclass(frozen=True)
class SkillsAnalysis:
    """Aggregate result of matching every required skill."""

    overall_score: int
    matched_skills: list[str]
    missing_skills: list[str]
    technical_fit: int
    role: str
    results: list[MatchResult] = field(default_factory=list)
    confidence_bonus: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def spelling_variants(skill: str) -> tuple[str, ...]:
    """Spacing, dash and dot variants of a skill name (node.js -> nodejs, node js)."""
    candidates = [
        skill.replace(" ", ""),
        skill.replace(" ", "-"),
        skill.replace("-", " "),
        skill.replace("-", ""),
        _INNER_DOT_RE.sub("", skill),
        _INNER_DOT_RE.sub(" ", skill),
    ]
    variants: list[str] = []
    for candidate in candidates:
        if len(candidate) > 1 and candidate != skill and candidate not in variants:
            variants.append(candidate)
    return tuple(variants)


class SkillMatcher:
    """Matches required skills against resume text using static skill tables."""

    def __init__(self, tables: Optional[SkillTables] = None):
        self.tables = tables or get_skill_tables()

    def match(
        self,
        resume_text: str,
        required_skills: SkillInput,
        job_title: str = "",
        job_description: str = "",
    ) -> SkillsAnalysis:
        """
        Match required skills against a resume.

        Args:
            resume_text: Plain resume text
            required_skills: Delimited string or list of skills
            job_title: Used with the description to pick the technical-fit role
            job_description: Free-text job description

        Returns:
            SkillsAnalysis; never raises for any string input
        """
        text = normalize_text(resume_text)
        skills = parse_required_skills(required_skills)
        role = detect_role(job_title, job_description, self.tables)
        fit = technical_fit(text, role, self.tables)

        if not skills:
            logger.debug("No required skills to match, using default score")
            return SkillsAnalysis(
                overall_score=EMPTY_SKILLS_SCORE,
                matched_skills=[],
                missing_skills=[],
                technical_fit=fit,
                role=role,
            )

        stems = token_stems(text)
        results = [self._match_normalized(text, stems, skill) for skill in skills]
        matched = [r.skill for r in results if r.found]
        missing = [r.skill for r in results if not r.found]

        percentage = len(matched) / len(skills) * 100
        score = min(MAX_SKILLS_SCORE, max(MIN_SKILLS_SCORE, round_half_up(percentage)))

        confidences = [r.confidence for r in results if r.found]
        bonus = round_half_up(sum(confidences) / len(confidences) * 5) if confidences else 0

        logger.debug(
            f"Skills matched {len(matched)}/{len(skills)} (score {score}, "
            f"role {role}, technical fit {fit})"
        )
        return SkillsAnalysis(
            overall_score=score,
            matched_skills=matched,
            missing_skills=missing,
            technical_fit=fit,
            role=role,
            results=results,
            confidence_bonus=bonus,
        )

    def match_skill(self, resume_text: str, skill: str) -> MatchResult:
        """Look up a single, already-parsed skill in a resume."""
        text = normalize_text(resume_text)
        return self._match_normalized(text, token_stems(text), normalize_text(skill))

    def _own_terms(self, skill: str) -> set[str]:
        tables = self.tables
        terms = set(tables.synonyms(skill))
        terms.update(tables.abbreviations_for(skill))
        terms.update(tables.fuzzy_for(skill))
        terms.update(spelling_variants(skill))
        return terms

    def _match_normalized(self, text: str, stems: set[str], skill: str) -> MatchResult:
        if not text or not skill:
            return MatchResult(skill=skill, found=False)

        own = self._own_terms(skill)
        canonical = {skill, self.tables.canonical(skill)}

        # Synonym stage: the best hit among all listed spellings
        best: Optional[MatchResult] = None
        for term in self.tables.synonyms(skill):
            kind = self.tables.locate(text, term, own)
            if kind is None:
                continue
            if term in canonical:
                confidence = CANONICAL_BOUNDARY if kind == BOUNDARY else CANONICAL_SUBSTRING
                strategy = "exact"
            else:
                confidence = SYNONYM_BOUNDARY if kind == BOUNDARY else SYNONYM_SUBSTRING
                strategy = "synonym"
            if best is None or confidence > best.confidence:
                best = MatchResult(skill, True, confidence, term, strategy)
        if best is not None:
            return best

        if self._compound_match(text, stems, skill):
            return MatchResult(skill, True, COMPOUND, skill, "compound")

        for term in self.tables.abbreviations_for(skill):
            if self.tables.locate(text, term, own):
                return MatchResult(skill, True, ABBREVIATION, term, "abbreviation")

        for term in self.tables.fuzzy_for(skill) + spelling_variants(skill):
            if self.tables.locate(text, term, own):
                return MatchResult(skill, True, FUZZY, term, "fuzzy")

        return MatchResult(skill=skill, found=False)

    def _compound_match(self, text: str, stems: set[str], skill: str) -> bool:
        words = [
            w for w in _WORD_SPLIT_RE.split(skill)
            if len(w) > 2 and w not in CONNECTOR_WORDS
        ]
        if len(words) < 2:
            return False
        return all(search_term(text, w) or stem(w) in stems for w in words)
