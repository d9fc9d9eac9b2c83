"""
Detailed candidate reports built from a resume analysis.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from matcher.parsing import parse_required_skills
from matcher.scoring import fit_level_for, recommendation_for
from shared.models import (
    BatchAnalysisResult,
    FitLevel,
    JobDescription,
    Recommendation,
    ResumeAnalysis,
)

RECOMMENDATION_TEXT = {
    Recommendation.HIGHLY_RECOMMENDED: "Highly Recommended - Strong candidate for immediate interview",
    Recommendation.RECOMMENDED: "Recommended - Good fit with minor gaps",
    Recommendation.CONSIDER: "Consider - Potential fit, needs further evaluation",
    Recommendation.NOT_RECOMMENDED: "Not Recommended - Significant gaps in requirements",
}


class ScoreDetail(BaseModel):
    """One scored dimension with a short explanation."""

    label: str
    score: Optional[int] = None
    details: str = ""


class SkillPresence(BaseModel):
    skill: str
    required: bool = True
    present: bool = False


class CandidateReport(BaseModel):
    """Everything shown in a per-candidate report."""

    # Candidate
    candidate_name: str = Field(default="Name not specified")
    email: str = Field(default="Email not provided")
    phone: str = Field(default="Phone not provided")
    file_name: str = Field(default="")

    # Job
    job_title: str = Field(default="")
    department: str = Field(default="Not specified")
    analysis_date: datetime = Field(default_factory=lambda: datetime.now())

    # Overall assessment
    overall_score: int
    recommendation: Recommendation
    recommendation_text: str
    fit_level: FitLevel
    summary: str

    detailed_scores: list[ScoreDetail] = Field(default_factory=list)
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)

    # Chart data
    score_breakdown: dict[str, int] = Field(default_factory=dict)
    skills_comparison: list[SkillPresence] = Field(default_factory=list)

    backend: str = Field(default="local")
    error: Optional[str] = Field(default=None)


def _experience_details(analysis: ResumeAnalysis, job: JobDescription) -> str:
    years = analysis.profile.total_experience_years if analysis.profile else 0
    if job.min_experience is None and job.max_experience is None:
        required = "no stated requirement"
    else:
        low = f"{job.min_experience:g}" if job.min_experience is not None else "0"
        high = f"{job.max_experience:g}" if job.max_experience is not None else "+"
        required = f"{low}-{high} years required"
    if years:
        return f"{years:g} years of experience mentioned ({required})."
    if analysis.profile and analysis.profile.project_count:
        return f"No stated years; {analysis.profile.project_count} project mention(s) ({required})."
    return f"No years of experience stated ({required})."


def _education_details(analysis: ResumeAnalysis, job: JobDescription) -> str:
    entries = analysis.profile.education if analysis.profile else []
    certifications = analysis.profile.certifications if analysis.profile else []
    requirement = f" Requirement: {job.education}." if job.education else ""
    return (
        f"{len(entries)} educational qualification(s) with "
        f"{len(certifications)} professional certification(s).{requirement}"
    )


def _next_steps(analysis: ResumeAnalysis) -> list[str]:
    if analysis.overall_score >= 75:
        steps = [
            "Schedule technical interview to assess practical skills",
            "Conduct behavioral interview to evaluate cultural fit",
        ]
    elif analysis.overall_score >= 65:
        steps = [
            "Consider for phone screening to clarify experience",
            "Assess willingness to develop missing skills",
        ]
    else:
        steps = [
            "Provide feedback on areas for improvement",
            "Consider for future opportunities after skill development",
        ]
    if analysis.missing_skills:
        steps.append(f"Evaluate proficiency in: {', '.join(analysis.missing_skills[:2])}")
    return steps


def _summary(analysis: ResumeAnalysis, job: JobDescription, name: str, fit: FitLevel) -> str:
    matched = len(analysis.matched_skills)
    total = matched + len(analysis.missing_skills)
    skills = f" and shows {matched} of {total} required skills" if total else ""
    return (
        f"{name} is a {fit.value.lower()} fit for the {job.title or 'open'} role "
        f"with an overall score of {analysis.overall_score}/100{skills}."
    )


def build_candidate_report(analysis: ResumeAnalysis, job: JobDescription) -> CandidateReport:
    """Build the detailed report for one analysed resume."""
    profile = analysis.profile
    name = (profile.name if profile else "") or "Name not specified"
    recommendation = recommendation_for(analysis.overall_score)
    fit = fit_level_for(analysis.overall_score)

    matched = len(analysis.matched_skills)
    total = matched + len(analysis.missing_skills)
    detailed = [
        ScoreDetail(
            label="Skills Match",
            score=analysis.skills_match,
            details=f"Matched {matched} of {total} required skills." if total else "No required skills listed.",
        ),
        ScoreDetail(
            label="Experience",
            score=analysis.experience_match,
            details=_experience_details(analysis, job),
        ),
        ScoreDetail(
            label="Education",
            score=analysis.education_match,
            details=_education_details(analysis, job),
        ),
        ScoreDetail(
            label="Technical Fit",
            score=analysis.technical_fit,
            details=f"Coverage of core {analysis.detected_role or 'role'} technologies.",
        ),
    ]
    if analysis.communication_score is not None:
        detailed.append(ScoreDetail(label="Communication", score=analysis.communication_score))
    if analysis.leadership_potential is not None:
        detailed.append(ScoreDetail(label="Leadership", score=analysis.leadership_potential))
    if analysis.cultural_fit is not None:
        detailed.append(ScoreDetail(label="Cultural Fit", score=analysis.cultural_fit))

    matched_set = set(analysis.matched_skills)
    comparison = [
        SkillPresence(skill=skill, present=skill in matched_set)
        for skill in parse_required_skills(job.required_skills)
    ]

    return CandidateReport(
        candidate_name=name,
        email=(profile.email if profile else "") or "Email not provided",
        phone=(profile.phone if profile else "") or "Phone not provided",
        file_name=analysis.file_name,
        job_title=job.title,
        department=job.department or "Not specified",
        overall_score=analysis.overall_score,
        recommendation=recommendation,
        recommendation_text=RECOMMENDATION_TEXT[recommendation],
        fit_level=fit,
        summary=_summary(analysis, job, name, fit),
        detailed_scores=detailed,
        matched_skills=analysis.matched_skills,
        missing_skills=analysis.missing_skills,
        strengths=analysis.strengths,
        weaknesses=analysis.weaknesses,
        recommendations=analysis.recommendations,
        next_steps=_next_steps(analysis),
        score_breakdown={d.label: d.score for d in detailed if d.score is not None},
        skills_comparison=comparison,
        backend=analysis.backend,
        error=analysis.error,
    )


def _bullets(items: list[str], empty: str = "None noted") -> str:
    if not items:
        return f"- {empty}"
    return "\n".join(f"- {item}" for item in items)


def report_to_markdown(report: CandidateReport) -> str:
    """Render a candidate report as Markdown."""
    score_rows = "\n".join(
        f"| {d.label} | {d.score if d.score is not None else '-'} | {d.details} |"
        for d in report.detailed_scores
    )
    skill_rows = "\n".join(
        f"| {s.skill} | {'yes' if s.present else 'no'} |"
        for s in report.skills_comparison
    ) or "| - | - |"
    error = f"\n> Processing error: {report.error}\n" if report.error else ""

    return f"""# Resume Analysis Report: {report.candidate_name}

- **File:** {report.file_name}
- **Email:** {report.email}
- **Phone:** {report.phone}
- **Position:** {report.job_title or 'Not specified'} ({report.department})
- **Analysis date:** {report.analysis_date:%B %d, %Y}
- **Backend:** {report.backend}
{error}
## Overall Assessment

**Score:** {report.overall_score}/100 ({report.fit_level.value} fit)

**{report.recommendation_text}**

{report.summary}

## Detailed Scores

| Dimension | Score | Details |
|-----------|-------|---------|
{score_rows}

## Skills

| Required skill | Present |
|----------------|---------|
{skill_rows}

## Strengths

{_bullets(report.strengths)}

## Areas of Concern

{_bullets(report.weaknesses)}

## Recommendations

{_bullets(report.recommendations)}

## Next Steps

{_bullets(report.next_steps)}
"""


def batch_to_markdown(batch: BatchAnalysisResult) -> str:
    """Render the ranking and summary of a batch run as Markdown."""
    summary = batch.summary
    entries = {r.file_name: r for r in batch.ranking.rankings}
    rows = []
    for position, analysis in enumerate(batch.ranked_results(), start=1):
        entry = entries.get(analysis.file_name)
        rank = entry.rank if entry else position
        strengths = "; ".join(analysis.strengths[:2]) or "-"
        rows.append(
            f"| {rank} | {analysis.file_name} | {analysis.overall_score} | "
            f"{analysis.recommendation.value} | {strengths} |"
        )
    table = "\n".join(rows) or "| - | - | - | - | - |"

    return f"""# Screening Summary: {batch.job.title or 'Job'}

| Candidates | Average | Top | Recommended | Failed | Time (ms) |
|------------|---------|-----|-------------|--------|-----------|
| {summary.total_candidates} | {summary.average_score} | {summary.top_score} | {summary.recommended_count} | {summary.failed_count} | {summary.processing_time_ms} |

- **Analysis method:** {summary.analysis_method or '-'}
- **Backends used:** {', '.join(summary.backends_used) or '-'}
- **Ranking:** {batch.ranking.method}

## Ranking

| Rank | Candidate | Score | Recommendation | Strengths |
|------|-----------|-------|----------------|-----------|
{table}

{batch.ranking.summary}
"""
