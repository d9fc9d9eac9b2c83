"""
Analyzer - resume analysis backends.

The backend is chosen once, when the analyzer is created:
  auto   -> Gemini if a key is configured, else OpenAI, else local
  gemini -> Gemini (local when no key is configured)
  openai -> OpenAI (local when no key is configured)
  local  -> keyword matching only
"""

from typing import Optional, Union

from loguru import logger

from shared.config import BACKENDS, Settings, get_settings

from .llm import GeminiAnalyzer, LLMAnalyzer, LLMAssessment, LLMError, OpenAIAnalyzer
from .local import LocalAnalyzer
from .profile import parse_candidate_profile

Analyzer = Union[LocalAnalyzer, LLMAnalyzer]


def resolve_backend(settings: Settings) -> str:
    """Map the configured backend choice to the backend that can actually run."""
    choice = settings.analysis_backend.lower().strip()
    if choice not in BACKENDS:
        raise ValueError(f"Unknown analysis backend {settings.analysis_backend!r}, expected one of {BACKENDS}")

    if choice == "auto":
        if settings.gemini_available:
            return "gemini"
        if settings.openai_available:
            return "openai"
        return "local"

    if choice == "gemini" and not settings.gemini_available:
        logger.warning("Gemini backend requested but GEMINI_API_KEY is not set, using local analysis")
        return "local"
    if choice == "openai" and not settings.openai_available:
        logger.warning("OpenAI backend requested but OPENAI_API_KEY is not set, using local analysis")
        return "local"
    return choice


def create_analyzer(settings: Optional[Settings] = None) -> Analyzer:
    """Create the analyzer for the configured backend."""
    settings = settings or get_settings()
    backend = resolve_backend(settings)
    logger.info(f"Using {backend} analysis backend")

    if backend == "gemini":
        return GeminiAnalyzer(settings)
    if backend == "openai":
        return OpenAIAnalyzer(settings)
    return LocalAnalyzer(settings)


__all__ = [
    "Analyzer",
    "GeminiAnalyzer",
    "LLMAnalyzer",
    "LLMAssessment",
    "LLMError",
    "LocalAnalyzer",
    "OpenAIAnalyzer",
    "create_analyzer",
    "parse_candidate_profile",
    "resolve_backend",
]
