"""
Pydantic models for job descriptions, candidate analyses and rankings.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Recommendation(str, Enum):
    """Hiring recommendation derived from the overall score."""

    HIGHLY_RECOMMENDED = "Highly Recommended"  # >= 85
    RECOMMENDED = "Recommended"  # >= 75
    CONSIDER = "Consider"  # >= 65
    NOT_RECOMMENDED = "Not Recommended"


class FitLevel(str, Enum):
    """Coarse fit label used in reports."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class JobDescription(BaseModel):
    """Job the resumes are screened against.

    Accepts both snake_case and the camelCase keys used by exported job forms.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(default="", alias="jobTitle")
    department: str = Field(default="")
    experience_level: str = Field(default="", alias="experienceLevel")
    min_experience: Optional[float] = Field(default=None, alias="minExperience")
    max_experience: Optional[float] = Field(default=None, alias="maxExperience")
    required_skills: Union[str, list[str]] = Field(default="", alias="requiredSkills")
    preferred_skills: Union[str, list[str]] = Field(default="", alias="preferredSkills")
    education: str = Field(default="", description="Education requirement, free text")
    description: str = Field(default="", alias="jobDescription")
    responsibilities: str = Field(default="")

    @field_validator("min_experience", "max_experience", mode="before")
    @classmethod
    def _blank_as_none(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return value

    @field_validator("required_skills", "preferred_skills", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value


class CandidateProfile(BaseModel):
    """Structured facts pulled out of a resume."""

    name: str = Field(default="")
    email: str = Field(default="")
    phone: str = Field(default="")
    technical_skills: dict[str, list[str]] = Field(default_factory=dict)
    education: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    total_experience_years: float = Field(default=0)
    project_count: int = Field(default=0)

    @property
    def all_skills(self) -> list[str]:
        seen: list[str] = []
        for skills in self.technical_skills.values():
            for skill in skills:
                if skill not in seen:
                    seen.append(skill)
        return seen

    def to_context_string(self) -> str:
        """Compact text summary used in LLM prompts."""
        lines = [f"Name: {self.name or 'Unknown'}"]
        if self.total_experience_years:
            lines.append(f"Experience: {self.total_experience_years:g} years")
        elif self.project_count:
            lines.append(f"Experience: fresher with {self.project_count} project(s)")
        for category, skills in self.technical_skills.items():
            if skills:
                lines.append(f"{category.title()}: {', '.join(skills)}")
        if self.education:
            lines.append(f"Education: {'; '.join(self.education)}")
        if self.certifications:
            lines.append(f"Certifications: {'; '.join(self.certifications)}")
        return "\n".join(lines)


class ResumeAnalysis(BaseModel):
    """Result of screening one resume against one job."""

    file_name: str = Field(default="")
    overall_score: int = Field(..., ge=0, le=100)
    skills_match: int = Field(default=0)
    experience_match: int = Field(default=0)
    education_match: int = Field(default=0)
    technical_fit: int = Field(default=0)

    # Only provided by LLM backends
    communication_score: Optional[int] = Field(default=None)
    leadership_potential: Optional[int] = Field(default=None)
    cultural_fit: Optional[int] = Field(default=None)

    confidence_bonus: int = Field(default=0)
    detected_role: str = Field(default="")
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)

    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    experience_gaps: list[str] = Field(default_factory=list)
    improvement_areas: list[str] = Field(default_factory=list)
    ai_insights: str = Field(default="")

    recommendation: Recommendation = Field(default=Recommendation.NOT_RECOMMENDED)
    backend: str = Field(default="local", description="Backend that produced the analysis")
    profile: Optional[CandidateProfile] = Field(default=None)
    error: Optional[str] = Field(default=None)

    @property
    def failed(self) -> bool:
        return self.error is not None


class CandidateRanking(BaseModel):
    """Position of one candidate in a comparative ranking."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    file_name: str = Field(..., alias="fileName")
    rank: int = Field(..., ge=1)
    score: Optional[int] = Field(default=None, alias="overallScore")
    reasoning: str = Field(default="")
    key_strengths: list[str] = Field(default_factory=list, alias="keyStrengths")
    key_concerns: list[str] = Field(default_factory=list, alias="keyConcerns")
    recommendation: str = Field(default="")


class ComparativeRanking(BaseModel):
    """Ranking of every candidate in a batch."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    rankings: list[CandidateRanking] = Field(default_factory=list)
    summary: str = Field(default="")
    method: str = Field(default="fallback", description="llm | fallback")


class BatchSummary(BaseModel):
    """Aggregate numbers for a batch run."""

    total_candidates: int = 0
    average_score: int = 0
    top_score: int = 0
    recommended_count: int = 0
    failed_count: int = 0
    processing_time_ms: int = 0
    analysis_method: str = ""
    backends_used: list[str] = Field(default_factory=list)


class BatchAnalysisResult(BaseModel):
    """Everything produced by one batch screening run."""

    job: JobDescription
    results: list[ResumeAnalysis] = Field(default_factory=list)
    ranking: ComparativeRanking = Field(default_factory=ComparativeRanking)
    summary: BatchSummary = Field(default_factory=BatchSummary)

    def ranked_results(self) -> list[ResumeAnalysis]:
        """Analyses in ranking order; unranked ones follow by score."""
        order = {r.file_name: r.rank for r in self.ranking.rankings}
        return sorted(
            self.results,
            key=lambda a: (order.get(a.file_name, len(order) + 1), -a.overall_score),
        )
