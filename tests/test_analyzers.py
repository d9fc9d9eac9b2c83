"""
Unit tests for the local and LLM analyzers and backend selection.
"""

import asyncio
import unittest
from types import SimpleNamespace

from pydantic import SecretStr

from analyzer import (
    GeminiAnalyzer,
    LLMAnalyzer,
    LocalAnalyzer,
    OpenAIAnalyzer,
    create_analyzer,
    parse_candidate_profile,
    resolve_backend,
)
from matcher.scoring import compose_overall_score
from matcher.skill_matcher import SkillMatcher
from shared.models import Recommendation

from .sample_data import ASSESSMENT_REPLY, FRONTEND_JOB, STRONG_RESUME, make_settings


class StubAnalyzer(LLMAnalyzer):
    """LLM analyzer answering from a list of canned replies."""

    name = "stub"

    def __init__(self, replies, settings):
        super().__init__(settings)
        self.replies = list(replies)
        self.prompts = []

    async def _complete(self, system_prompt, user_prompt):
        self.prompts.append(user_prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class SlowAnalyzer(LLMAnalyzer):
    name = "slow"

    async def _complete(self, system_prompt, user_prompt):
        await asyncio.sleep(1)
        return ASSESSMENT_REPLY


class TestCandidateProfile(unittest.TestCase):

    def test_profile_fields(self):
        profile = parse_candidate_profile(STRONG_RESUME, SkillMatcher())

        self.assertEqual(profile.name, "Jane Doe")
        self.assertEqual(profile.email, "jane.doe@example.com")
        self.assertIn("555", profile.phone)
        self.assertEqual(profile.total_experience_years, 4)
        self.assertEqual(profile.education, ["B.Sc. in Computer Science"])
        self.assertEqual(profile.certifications, ["AWS Certified Cloud Practitioner"])

    def test_skill_categories(self):
        profile = parse_candidate_profile(STRONG_RESUME, SkillMatcher())

        self.assertIn("javascript", profile.technical_skills["languages"])
        self.assertNotIn("java", profile.technical_skills["languages"])
        self.assertIn("react", profile.technical_skills["frameworks"])
        self.assertIn("git", profile.technical_skills["tools"])
        self.assertIn("react", profile.all_skills)

    def test_context_string(self):
        context = parse_candidate_profile(STRONG_RESUME, SkillMatcher()).to_context_string()
        self.assertIn("Name: Jane Doe", context)
        self.assertIn("Experience: 4 years", context)

    def test_empty_resume(self):
        profile = parse_candidate_profile("", SkillMatcher())
        self.assertEqual(profile.name, "")
        self.assertEqual(profile.all_skills, [])


class TestLocalAnalyzer(unittest.TestCase):

    def setUp(self):
        self.analyzer = LocalAnalyzer(make_settings())

    def test_strong_candidate(self):
        analysis = self.analyzer.evaluate(STRONG_RESUME, FRONTEND_JOB, "jane.txt")

        self.assertEqual(analysis.file_name, "jane.txt")
        self.assertEqual(analysis.matched_skills, ["javascript", "react", "css"])
        self.assertEqual(analysis.missing_skills, [])
        self.assertEqual(analysis.skills_match, 95)
        self.assertEqual(analysis.experience_match, 90)
        self.assertEqual(analysis.education_match, 95)
        self.assertEqual(analysis.technical_fit, 60)
        self.assertEqual(analysis.detected_role, "frontend")
        self.assertEqual(analysis.overall_score, compose_overall_score(95, 90, 60, 95, 5))
        self.assertEqual(analysis.recommendation, Recommendation.HIGHLY_RECOMMENDED)
        self.assertEqual(analysis.backend, "local")
        self.assertIsNone(analysis.communication_score)
        self.assertTrue(analysis.strengths)

    def test_experience_gap(self):
        job = FRONTEND_JOB.model_copy(update={"min_experience": 6})
        analysis = self.analyzer.evaluate(STRONG_RESUME, job)
        self.assertEqual(analysis.experience_gaps, ["4 years of experience against 6 required"])

    def test_missing_skills_drive_recommendations(self):
        job = FRONTEND_JOB.model_copy(update={"required_skills": "Angular, Vue"})
        analysis = self.analyzer.evaluate(STRONG_RESUME, job)

        self.assertEqual(analysis.missing_skills, ["angular", "vue"])
        self.assertIn("Assess proficiency in angular", analysis.recommendations)
        self.assertTrue(any("Missing required skills" in w for w in analysis.weaknesses))


class TestLLMAnalyzer(unittest.IsolatedAsyncioTestCase):

    async def test_merges_llm_scores_with_local_skills(self):
        analyzer = StubAnalyzer([ASSESSMENT_REPLY], make_settings())
        analysis = await analyzer.analyze(STRONG_RESUME, FRONTEND_JOB, "jane.txt")

        self.assertEqual(analysis.backend, "stub")
        self.assertEqual(analysis.skills_match, 95)
        self.assertEqual(analysis.experience_match, 80)
        self.assertEqual(analysis.technical_fit, 90)
        self.assertEqual(analysis.communication_score, 85)
        self.assertEqual(analysis.overall_score, compose_overall_score(95, 80, 90, 70, 5))
        self.assertEqual(analysis.strengths, ["Clear project ownership"])
        self.assertEqual(analysis.ai_insights, "Solid frontend profile.")
        self.assertIn("Matched skills: javascript, react, css", analyzer.prompts[0])

    async def test_unparseable_reply_falls_back_to_local(self):
        analyzer = StubAnalyzer(["I am not JSON"], make_settings())
        analysis = await analyzer.analyze(STRONG_RESUME, FRONTEND_JOB)

        self.assertEqual(analysis.backend, "local")
        self.assertIsNone(analysis.communication_score)

    async def test_retries_then_succeeds(self):
        analyzer = StubAnalyzer(
            [RuntimeError("rate limited"), ASSESSMENT_REPLY],
            make_settings(llm_max_retries=1),
        )
        analysis = await analyzer.analyze(STRONG_RESUME, FRONTEND_JOB)

        self.assertEqual(analysis.backend, "stub")
        self.assertEqual(len(analyzer.prompts), 2)

    async def test_errors_fall_back_to_local(self):
        analyzer = StubAnalyzer(
            [RuntimeError("down"), RuntimeError("still down")],
            make_settings(llm_max_retries=1),
        )
        analysis = await analyzer.analyze(STRONG_RESUME, FRONTEND_JOB)

        self.assertEqual(analysis.backend, "local")
        self.assertEqual(len(analyzer.prompts), 2)

    async def test_timeout_falls_back_to_local(self):
        analyzer = SlowAnalyzer(make_settings(llm_timeout_seconds=0.01))
        analysis = await analyzer.analyze(STRONG_RESUME, FRONTEND_JOB)
        self.assertEqual(analysis.backend, "local")


class TestOpenAIAnalyzer(unittest.IsolatedAsyncioTestCase):

    async def test_uses_configured_model(self):
        calls = []

        async def create(**kwargs):
            calls.append(kwargs)
            message = SimpleNamespace(content=ASSESSMENT_REPLY)
            return SimpleNamespace(choices=[SimpleNamespace(message=message)])

        analyzer = OpenAIAnalyzer(make_settings(openai_model="gpt-4o"))
        analyzer._client = SimpleNamespace(
            chat=SimpleNamespace(completions=SimpleNamespace(create=create))
        )
        analysis = await analyzer.analyze(STRONG_RESUME, FRONTEND_JOB)

        self.assertEqual(analysis.backend, "openai")
        self.assertEqual(calls[0]["model"], "gpt-4o")


class TestBackendSelection(unittest.TestCase):

    def test_auto_without_keys(self):
        self.assertEqual(resolve_backend(make_settings(analysis_backend="auto")), "local")

    def test_auto_prefers_gemini(self):
        settings = make_settings(
            analysis_backend="auto",
            gemini_api_key=SecretStr("gemini-key"),
            openai_api_key=SecretStr("openai-key"),
        )
        self.assertEqual(resolve_backend(settings), "gemini")

    def test_auto_uses_openai(self):
        settings = make_settings(analysis_backend="auto", openai_api_key=SecretStr("openai-key"))
        self.assertEqual(resolve_backend(settings), "openai")

    def test_placeholder_key_is_not_configured(self):
        settings = make_settings(
            analysis_backend="auto",
            gemini_api_key=SecretStr("your_gemini_api_key_here"),
        )
        self.assertFalse(settings.gemini_available)
        self.assertEqual(resolve_backend(settings), "local")

    def test_explicit_backend_without_key(self):
        self.assertEqual(resolve_backend(make_settings(analysis_backend="gemini")), "local")
        self.assertEqual(resolve_backend(make_settings(analysis_backend="openai")), "local")

    def test_unknown_backend(self):
        with self.assertRaises(ValueError):
            resolve_backend(make_settings(analysis_backend="watson"))

    def test_create_analyzer(self):
        """Clients are created lazily, so no network access happens here."""
        gemini = create_analyzer(
            make_settings(analysis_backend="gemini", gemini_api_key=SecretStr("gemini-key"))
        )
        openai = create_analyzer(
            make_settings(analysis_backend="openai", openai_api_key=SecretStr("openai-key"))
        )
        local = create_analyzer(make_settings())

        self.assertIsInstance(gemini, GeminiAnalyzer)
        self.assertIsInstance(openai, OpenAIAnalyzer)
        self.assertIsInstance(local, LocalAnalyzer)
        self.assertTrue(gemini.supports_ranking)
        self.assertFalse(local.supports_ranking)


if __name__ == "__main__":
    unittest.main()
