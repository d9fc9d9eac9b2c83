# Shared module for common utilities, models, and configuration
from .config import Settings, get_settings
from .llm_json import extract_json_object, parse_llm_json
from .models import (
    BatchAnalysisResult,
    BatchSummary,
    CandidateProfile,
    CandidateRanking,
    ComparativeRanking,
    FitLevel,
    JobDescription,
    Recommendation,
    ResumeAnalysis,
)

__all__ = [
    "Settings",
    "get_settings",
    "extract_json_object",
    "parse_llm_json",
    "BatchAnalysisResult",
    "BatchSummary",
    "CandidateProfile",
    "CandidateRanking",
    "ComparativeRanking",
    "FitLevel",
    "JobDescription",
    "Recommendation",
    "ResumeAnalysis",
]
