"""
Matcher - keyword-based skill matching for resume screening.

Decides which required skills a resume shows, with a confidence per skill,
and scores technical fit, experience and education without any network call.
"""

from .parsing import parse_required_skills
from .roles import detect_role, technical_fit
from .scoring import (
    compose_overall_score,
    fit_level_for,
    recommendation_for,
    score_education,
    score_experience,
)
from .skill_matcher import MatchResult, SkillMatcher, SkillsAnalysis
from .tables import SkillTables, get_skill_tables, load_skill_tables

__all__ = [
    "MatchResult",
    "SkillMatcher",
    "SkillsAnalysis",
    "SkillTables",
    "compose_overall_score",
    "detect_role",
    "fit_level_for",
    "get_skill_tables",
    "load_skill_tables",
    "parse_required_skills",
    "recommendation_for",
    "score_education",
    "score_experience",
    "technical_fit",
]
