"""
Role detection from the job title/description and technical-fit scoring.
"""

from typing import Iterable, Optional

from .tables import SkillTables, get_skill_tables
from .text import BOUNDARY, normalize_text, round_half_up, search_term

MAX_TECHNICAL_FIT = 95


def detect_role(
    job_title: str = "",
    job_description: str = "",
    tables: Optional[SkillTables] = None,
) -> str:
    """
    Pick the role bucket for a job.

    The role rules are checked in order and the first rule with a trigger
    present (as a whole word) wins; without any trigger the default role
    is returned.
    """
    tables = tables or get_skill_tables()
    text = normalize_text(f"{job_title or ''} {job_description or ''}")
    if not text:
        return tables.default_role

    for rule in tables.role_rules:
        if any(search_term(text, trigger) == BOUNDARY for trigger in rule.triggers):
            return rule.role
    return tables.default_role


def keyword_coverage(text: str, keywords: Iterable[str], tables: SkillTables) -> float:
    """Fraction of ``keywords`` present in normalized ``text``, variants included."""
    keywords = tuple(keywords)
    if not keywords:
        return 0.0

    found = 0
    for keyword in keywords:
        terms = tables.synonyms(keyword)
        if any(tables.locate(text, term, terms) for term in terms):
            found += 1
    return found / len(keywords)


def technical_fit(
    resume_text: str,
    role: str,
    tables: Optional[SkillTables] = None,
) -> int:
    """
    Score 0..95 for how well the resume covers the role's core keywords.

    When the role's own bucket has no hit, the best other bucket still earns
    partial credit, so 0 means no known keyword appears at all.
    """
    tables = tables or get_skill_tables()
    text = normalize_text(resume_text)
    if not text:
        return 0

    keywords = tables.role_keywords.get(role) or tables.role_keywords.get(tables.default_role, ())
    coverage = keyword_coverage(text, keywords, tables)
    if coverage > 0:
        return min(MAX_TECHNICAL_FIT, round_half_up(coverage * 100))

    best_other = max(
        (
            keyword_coverage(text, other_keywords, tables)
            for other_role, other_keywords in tables.role_keywords.items()
            if other_role != role
        ),
        default=0.0,
    )
    if best_other <= 0:
        return 0
    return max(1, round_half_up(best_other * 50))
