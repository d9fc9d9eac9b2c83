"""
Experience and education scoring, plus composition of the overall score.
"""

import re
from typing import Optional

from shared.models import FitLevel, Recommendation

from .text import normalize_text, round_half_up, search_term

MAX_SUB_SCORE = 95

# One weighting scheme for every backend, in percent
WEIGHTS = {
    "skills": 40,
    "experience": 30,
    "technical_fit": 20,
    "education": 10,
}

# Score thresholds shared by the recommendation and fit-level labels
HIGHLY_RECOMMENDED_SCORE = 85
RECOMMENDED_SCORE = 75
CONSIDER_SCORE = 65

_YEARS_RE = re.compile(r"\b(\d{1,2}(?:\.\d+)?)\s*\+?\s*(?:years?|yrs?)\b", re.IGNORECASE)
_PROJECT_RE = re.compile(r"\bprojects?\b", re.IGNORECASE)

# (level, keywords), highest level first
EDUCATION_LEVELS: list[tuple[int, tuple[str, ...]]] = [
    (5, ("phd", "ph.d", "doctorate", "doctoral")),
    (4, ("master s", "masters", "master of", "m.tech", "mtech", "m.sc", "msc", "mba", "mca", "m.s.", "m.e.")),
    (3, ("bachelor", "bachelors", "b.tech", "btech", "b.sc", "bsc", "b.e.", "bca", "b.s.", "undergraduate")),
    (2, ("associate degree", "associate s degree", "diploma")),
    (1, ("high school", "secondary school", "hsc", "12th grade")),
]

RELEVANT_FIELDS = (
    "computer science", "information technology", "software engineering",
    "data science", "computer engineering", "engineering", "mathematics",
    "statistics", "electronics",
)


def extract_years_of_experience(resume_text: str) -> float:
    """Largest "N years" / "N+ yrs" figure mentioned in the text, 0 if none."""
    if not resume_text:
        return 0
    values = [float(m) for m in _YEARS_RE.findall(resume_text)]
    return max(values, default=0)


def count_projects(resume_text: str) -> int:
    if not resume_text:
        return 0
    return len(_PROJECT_RE.findall(resume_text))


def score_experience(
    resume_text: str,
    min_years: Optional[float] = None,
    max_years: Optional[float] = None,
) -> int:
    """
    Score 0..95 for years of experience against the job's range.

    Freshers are credited for projects instead of years.
    """
    years = extract_years_of_experience(resume_text)
    projects = count_projects(resume_text)
    minimum = min_years or 0

    if years < 2 and projects:
        return min(85, 60 + projects * 10)
    if years == 0:
        return 60 if minimum == 0 else 40
    if years >= minimum:
        if max_years is not None and years > max_years + 2:
            return 75
        return 90
    return max(40, min(MAX_SUB_SCORE, round_half_up(years / minimum * 70)))


def detect_education_level(text: str) -> int:
    """Highest education level mentioned, 0 when none."""
    text = normalize_text(text)
    if not text:
        return 0
    for level, keywords in EDUCATION_LEVELS:
        if any(search_term(text, keyword) for keyword in keywords):
            return level
    # An unqualified degree counts as a bachelor's
    if search_term(text, "degree"):
        return 3
    return 0


def score_education(resume_text: str, required_education: str = "") -> int:
    """Score 0..95 for the resume's education against a free-text requirement."""
    candidate_level = detect_education_level(resume_text)
    required_level = detect_education_level(required_education)

    if not required_level:
        score = 85 if candidate_level else 65
    elif candidate_level >= required_level:
        score = 90
    elif candidate_level == required_level - 1:
        score = 70
    elif candidate_level:
        score = 50
    else:
        score = 40

    text = normalize_text(resume_text)
    if any(field in text for field in RELEVANT_FIELDS):
        score += 5
    return min(MAX_SUB_SCORE, score)


def compose_overall_score(
    skills: int,
    experience: int,
    technical_fit: int,
    education: int,
    confidence_bonus: int = 0,
) -> int:
    """Weighted overall score plus the skills confidence bonus, capped at 100."""
    weighted = (
        skills * WEIGHTS["skills"]
        + experience * WEIGHTS["experience"]
        + technical_fit * WEIGHTS["technical_fit"]
        + education * WEIGHTS["education"]
    )
    return max(0, min(100, round_half_up(weighted / 100) + confidence_bonus))


def recommendation_for(score: int) -> Recommendation:
    if score >= HIGHLY_RECOMMENDED_SCORE:
        return Recommendation.HIGHLY_RECOMMENDED
    if score >= RECOMMENDED_SCORE:
        return Recommendation.RECOMMENDED
    if score >= CONSIDER_SCORE:
        return Recommendation.CONSIDER
    return Recommendation.NOT_RECOMMENDED


def fit_level_for(score: int) -> FitLevel:
    if score >= HIGHLY_RECOMMENDED_SCORE:
        return FitLevel.EXCELLENT
    if score >= RECOMMENDED_SCORE:
        return FitLevel.GOOD
    if score >= CONSIDER_SCORE:
        return FitLevel.FAIR
    return FitLevel.POOR
