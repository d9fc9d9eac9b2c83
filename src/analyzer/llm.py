"""
LLM-backed resume analysis using Google Gemini or OpenAI.

Skills are always matched locally; the model contributes the qualitative
scores and narrative. Any failure falls back to the local analysis.
"""

import asyncio
from typing import Optional, TypeVar

from google import genai
from google.genai import types
from loguru import logger
from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field, field_validator

from matcher.scoring import compose_overall_score, recommendation_for
from shared.config import Settings, get_settings
from shared.llm_json import parse_llm_json
from shared.models import JobDescription, ResumeAnalysis

from .local import LocalAnalyzer
from .prompts import ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt

T = TypeVar("T", bound=BaseModel)


class LLMError(Exception):
    """Raised when an LLM call fails after all retries."""


class LLMAssessment(BaseModel):
    """Qualitative assessment returned by the model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    experience_match: int = Field(default=70, alias="experienceMatch")
    education_match: int = Field(default=75, alias="educationMatch")
    technical_fit: int = Field(default=70, alias="technicalFit")
    communication_score: int = Field(default=75, alias="communicationScore")
    leadership_potential: int = Field(default=70, alias="leadershipPotential")
    cultural_fit: int = Field(default=80, alias="culturalFit")
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    improvement_areas: list[str] = Field(default_factory=list, alias="improvementAreas")
    ai_insights: str = Field(default="", alias="aiInsights")

    @field_validator(
        "experience_match",
        "education_match",
        "technical_fit",
        "communication_score",
        "leadership_potential",
        "cultural_fit",
        mode="before",
    )
    @classmethod
    def _clamp_score(cls, value):
        try:
            return max(0, min(100, round(float(value))))
        except (TypeError, ValueError):
            raise ValueError(f"not a score: {value!r}")


class LLMAnalyzer:
    """Base class for analyzers that consult an LLM."""

    name = "llm"
    supports_ranking = True

    def __init__(
        self,
        settings: Optional[Settings] = None,
        local: Optional[LocalAnalyzer] = None,
    ):
        self.settings = settings or get_settings()
        self.local = local or LocalAnalyzer(self.settings)

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        raise NotImplementedError

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Call the model with a timeout, retrying with exponential backoff."""
        attempts = self.settings.llm_max_retries + 1
        last_error: Optional[Exception] = None

        for attempt in range(attempts):
            try:
                return await asyncio.wait_for(
                    self._complete(system_prompt, user_prompt),
                    timeout=self.settings.llm_timeout_seconds,
                )
            except Exception as e:
                last_error = e
                logger.warning(f"{self.name} call attempt {attempt + 1}/{attempts} failed: {e!r}")
                if attempt + 1 < attempts:
                    await asyncio.sleep(self.settings.llm_retry_base_delay * 2 ** attempt)

        raise LLMError(f"{self.name} call failed after {attempts} attempts") from last_error

    async def ask(self, system_prompt: str, user_prompt: str, model: type[T]) -> Optional[T]:
        """
        Ask the model for JSON matching ``model``.

        Returns:
            The parsed reply, or None when the call or the parse failed
        """
        try:
            reply = await self.complete(system_prompt, user_prompt)
        except LLMError as e:
            logger.error(f"{e}: {e.__cause__!r}")
            return None
        return parse_llm_json(reply, model)

    async def analyze(
        self,
        resume_text: str,
        job: JobDescription,
        file_name: str = "",
    ) -> ResumeAnalysis:
        """Analyze one resume, falling back to the local analysis on failure."""
        local = self.local.evaluate(resume_text, job, file_name)
        prompt = build_analysis_prompt(resume_text, job, local)

        assessment = await self.ask(ANALYSIS_SYSTEM_PROMPT, prompt, LLMAssessment)
        if assessment is None:
            logger.warning(f"Using local analysis for {file_name or 'resume'} ({self.name} unavailable)")
            return local

        return self._merge(local, assessment)

    def _merge(self, local: ResumeAnalysis, assessment: LLMAssessment) -> ResumeAnalysis:
        overall = compose_overall_score(
            local.skills_match,
            assessment.experience_match,
            assessment.technical_fit,
            assessment.education_match,
            local.confidence_bonus,
        )
        recommendation = recommendation_for(overall)
        logger.debug(f"{self.name} analysis of {local.file_name or 'resume'}: {overall}")

        return local.model_copy(
            update={
                "overall_score": overall,
                "experience_match": assessment.experience_match,
                "education_match": assessment.education_match,
                "technical_fit": assessment.technical_fit,
                "communication_score": assessment.communication_score,
                "leadership_potential": assessment.leadership_potential,
                "cultural_fit": assessment.cultural_fit,
                "strengths": assessment.strengths or local.strengths,
                "weaknesses": assessment.weaknesses or local.weaknesses,
                "recommendations": assessment.recommendations or local.recommendations,
                "improvement_areas": assessment.improvement_areas,
                "ai_insights": assessment.ai_insights or local.ai_insights,
                "recommendation": recommendation,
                "backend": self.name,
            }
        )


class GeminiAnalyzer(LLMAnalyzer):
    """Resume analysis with Google Gemini."""

    name = "gemini"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        local: Optional[LocalAnalyzer] = None,
    ):
        super().__init__(settings, local)
        self._client: Optional[genai.Client] = None

    @property
    def client(self) -> genai.Client:
        """Get or create Gemini client."""
        if self._client is None:
            self._client = genai.Client(
                api_key=self.settings.gemini_api_key.get_secret_value()
            )
        return self._client

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        response = await self.client.aio.models.generate_content(
            model=self.settings.gemini_model,
            contents=user_prompt,
            config=types.GenerateContentConfig(
                system_instruction=system_prompt,
                temperature=self.settings.llm_temperature,
                max_output_tokens=self.settings.llm_max_tokens,
                response_mime_type="application/json",
            ),
        )
        return response.text or ""


class OpenAIAnalyzer(LLMAnalyzer):
    """Resume analysis with OpenAI chat completions."""

    name = "openai"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        local: Optional[LocalAnalyzer] = None,
    ):
        super().__init__(settings, local)
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        """Get or create OpenAI client."""
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.openai_api_key.get_secret_value()
            )
        return self._client

    async def _complete(self, system_prompt: str, user_prompt: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.settings.openai_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.settings.llm_temperature,
            max_tokens=self.settings.llm_max_tokens,
            response_format={"type": "json_object"},  # Force JSON response
        )
        return response.choices[0].message.content or ""
