"""
Local resume analysis: keyword matching and rule-based scoring, no network.
"""

from typing import Optional

from loguru import logger

from matcher.scoring import (
    compose_overall_score,
    extract_years_of_experience,
    recommendation_for,
    score_education,
    score_experience,
)
from matcher.skill_matcher import SkillMatcher, SkillsAnalysis
from matcher.tables import get_skill_tables
from shared.config import Settings, get_settings
from shared.models import CandidateProfile, JobDescription, Recommendation, ResumeAnalysis

from .profile import parse_candidate_profile

NEXT_STEPS = {
    Recommendation.HIGHLY_RECOMMENDED: "Fast-track to a technical interview",
    Recommendation.RECOMMENDED: "Schedule a technical interview",
    Recommendation.CONSIDER: "Run a short screening call to probe the gaps",
    Recommendation.NOT_RECOMMENDED: "Keep on file for better-matched roles",
}


def build_strengths(
    skills: SkillsAnalysis,
    experience: int,
    education: int,
    profile: CandidateProfile,
) -> list[str]:
    strengths = []
    total = len(skills.matched_skills) + len(skills.missing_skills)
    if skills.matched_skills and skills.overall_score >= 70:
        strengths.append(f"Strong match on required skills: {', '.join(skills.matched_skills[:5])}")
    elif skills.matched_skills:
        strengths.append(f"Shows {len(skills.matched_skills)} of {total} required skills")
    if experience >= 85:
        strengths.append("Experience level fits the role's requirements")
    elif profile.project_count and not profile.total_experience_years:
        strengths.append(f"Hands-on project work ({profile.project_count} project mentions)")
    if skills.technical_fit >= 70:
        strengths.append(f"Solid {skills.role} technical foundation")
    if education >= 85:
        strengths.append("Relevant educational background")
    if profile.certifications:
        strengths.append("Holds professional certifications")
    return strengths


def build_weaknesses(skills: SkillsAnalysis, experience: int, education: int) -> list[str]:
    weaknesses = []
    if skills.missing_skills:
        weaknesses.append(f"Missing required skills: {', '.join(skills.missing_skills[:5])}")
    if experience < 60:
        weaknesses.append("Experience below the role's requirement")
    if skills.technical_fit < 50:
        weaknesses.append(f"Limited {skills.role} technical depth")
    if education < 60:
        weaknesses.append("Education does not meet the stated requirement")
    return weaknesses


def build_recommendations(skills: SkillsAnalysis, recommendation: Recommendation) -> list[str]:
    recommendations = [f"Assess proficiency in {skill}" for skill in skills.missing_skills[:3]]
    recommendations.append(NEXT_STEPS[recommendation])
    return recommendations


def experience_gaps(resume_text: str, job: JobDescription) -> list[str]:
    if not job.min_experience:
        return []
    years = extract_years_of_experience(resume_text)
    if years >= job.min_experience:
        return []
    return [f"{years:g} years of experience against {job.min_experience:g} required"]


class LocalAnalyzer:
    """Analyzes resumes with the keyword matcher and rule-based scores."""

    name = "local"
    supports_ranking = False

    def __init__(
        self,
        settings: Optional[Settings] = None,
        matcher: Optional[SkillMatcher] = None,
    ):
        self.settings = settings or get_settings()
        self.matcher = matcher or SkillMatcher(get_skill_tables(self.settings.skills_table_path))

    def evaluate(
        self,
        resume_text: str,
        job: JobDescription,
        file_name: str = "",
    ) -> ResumeAnalysis:
        """Analyze one resume synchronously."""
        skills = self.matcher.match(
            resume_text,
            job.required_skills,
            job_title=job.title,
            job_description=job.description,
        )
        experience = score_experience(resume_text, job.min_experience, job.max_experience)
        education = score_education(resume_text, job.education)
        profile = parse_candidate_profile(resume_text, self.matcher)

        overall = compose_overall_score(
            skills.overall_score,
            experience,
            skills.technical_fit,
            education,
            skills.confidence_bonus,
        )
        recommendation = recommendation_for(overall)
        total = len(skills.matched_skills) + len(skills.missing_skills)

        logger.debug(f"Local analysis of {file_name or 'resume'}: {overall} ({recommendation.value})")
        return ResumeAnalysis(
            file_name=file_name,
            overall_score=overall,
            skills_match=skills.overall_score,
            experience_match=experience,
            education_match=education,
            technical_fit=skills.technical_fit,
            confidence_bonus=skills.confidence_bonus,
            detected_role=skills.role,
            matched_skills=skills.matched_skills,
            missing_skills=skills.missing_skills,
            strengths=build_strengths(skills, experience, education, profile),
            weaknesses=build_weaknesses(skills, experience, education),
            recommendations=build_recommendations(skills, recommendation),
            experience_gaps=experience_gaps(resume_text, job),
            ai_insights=(
                f"Keyword analysis found {len(skills.matched_skills)} of {total} required skills; "
                f"{skills.role} technical fit {skills.technical_fit}%."
            ),
            recommendation=recommendation,
            backend=self.name,
            profile=profile,
        )

    async def analyze(
        self,
        resume_text: str,
        job: JobDescription,
        file_name: str = "",
    ) -> ResumeAnalysis:
        """Analyze one resume; async so every backend shares one interface."""
        return self.evaluate(resume_text, job, file_name)
