"""
Heuristic candidate-profile extraction from plain resume text.
"""

import re

from matcher.scoring import EDUCATION_LEVELS, count_projects, extract_years_of_experience
from matcher.skill_matcher import SkillMatcher
from matcher.text import normalize_text, search_term
from shared.models import CandidateProfile

_EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_PHONE_RE = re.compile(r"(?:\+?\d{1,3}[\s-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}|(?:\+91[\s-]?)?[6-9]\d{9}")
_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z\s.'-]+$")

# Lines that are section headings rather than a name
_HEADINGS = {
    "resume", "curriculum vitae", "cv", "objective", "summary", "profile",
    "contact", "education", "experience", "skills", "projects",
}

_CERTIFICATION_RE = re.compile(r"\b(certified|certification|certificate)\b", re.IGNORECASE)

MAX_LINE_ITEMS = 5


def _extract_name(lines: list[str]) -> str:
    for line in lines[:5]:
        if "@" in line or "+" in line or not 3 < len(line) < 50:
            continue
        if line.lower().strip(" :") in _HEADINGS:
            continue
        if _NAME_RE.match(line):
            return line.strip()
    return ""


def _matching_lines(lines: list[str], keywords: tuple[str, ...]) -> list[str]:
    found: list[str] = []
    for line in lines:
        normalized = normalize_text(line)
        if any(search_term(normalized, k) for k in keywords) and line not in found:
            found.append(line[:120])
        if len(found) >= MAX_LINE_ITEMS:
            break
    return found


def parse_candidate_profile(resume_text: str, matcher: SkillMatcher) -> CandidateProfile:
    """
    Pull contact details, categorized skills, education and certifications out
    of a resume.

    Skill categories come from the matcher's tables, so the same variants and
    abbreviations that drive skill matching apply here.
    """
    text = resume_text or ""
    lines = [line.strip() for line in text.splitlines() if line.strip()]

    email = _EMAIL_RE.search(text)
    phone = _PHONE_RE.search(text)

    technical_skills: dict[str, list[str]] = {}
    for category, skills in matcher.tables.profile_categories.items():
        technical_skills[category] = [
            skill for skill in skills
            if matcher.match_skill(text, skill).found
        ]

    degree_keywords = tuple(k for _, keywords in EDUCATION_LEVELS for k in keywords)
    education = _matching_lines(lines, degree_keywords)
    certifications = [
        line[:120] for line in lines if _CERTIFICATION_RE.search(line)
    ][:MAX_LINE_ITEMS]

    return CandidateProfile(
        name=_extract_name(lines),
        email=email.group(0) if email else "",
        phone=phone.group(0).strip() if phone else "",
        technical_skills=technical_skills,
        education=education,
        certifications=certifications,
        total_experience_years=extract_years_of_experience(text),
        project_count=count_projects(text),
    )
