"""
Unit tests for batch screening, ranking and input loading.
"""

import json
import tempfile
import unittest
from pathlib import Path

from analyzer import LocalAnalyzer
from pipeline.batch import BatchScreener, failed_analysis, unique_file_names
from pipeline.inputs import extract_text, load_job_description
from ranker.ranking import CandidateRanker, fallback_ranking
from shared.models import CandidateRanking, ComparativeRanking

from .sample_data import ASSESSMENT_REPLY, FRONTEND_JOB, STRONG_RESUME, WEAK_RESUME, make_settings
from .test_analyzers import StubAnalyzer

RANKING_REPLY = json.dumps({
    "rankings": [
        {"fileName": "weak.txt", "rank": 1, "overallScore": 60, "reasoning": "Better culture fit"},
        {"fileName": "strong.txt", "rank": 2, "overallScore": 90, "reasoning": "Strong skills"},
    ],
    "summary": "Both candidates are viable.",
})

JOB_YAML = """
jobTitle: Data Analyst
requiredSkills:
  - Python
  - SQL
minExperience: ""
maxExperience: 4
education: Bachelor's degree
"""


class BatchTestCase(unittest.IsolatedAsyncioTestCase):
    """Writes a strong, a weak and an unreadable resume to a temp directory."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        root = Path(self.tmp.name)
        self.strong = root / "strong.txt"
        self.weak = root / "weak.txt"
        self.broken = root / "broken.docx"
        self.strong.write_text(STRONG_RESUME, encoding="utf-8")
        self.weak.write_text(WEAK_RESUME, encoding="utf-8")
        self.broken.write_text("not a supported format", encoding="utf-8")

    def tearDown(self):
        self.tmp.cleanup()


class TestBatchScreener(BatchTestCase):

    async def test_local_batch(self):
        settings = make_settings()
        screener = BatchScreener(LocalAnalyzer(settings), settings)
        calls = []

        batch = await screener.process_batch(
            [self.strong, self.weak, self.broken],
            FRONTEND_JOB,
            progress=lambda fraction, message: calls.append((fraction, message)),
        )

        self.assertEqual(len(batch.results), 3)
        self.assertEqual(batch.ranking.method, "fallback")
        self.assertEqual(
            [a.file_name for a in batch.ranked_results()],
            ["strong.txt", "weak.txt", "broken.docx"],
        )

        broken = batch.ranked_results()[-1]
        self.assertTrue(broken.failed)
        self.assertEqual(broken.overall_score, 50)
        self.assertEqual(broken.backend, "none")

        summary = batch.summary
        strong = batch.ranked_results()[0]
        self.assertEqual(summary.total_candidates, 3)
        self.assertEqual(summary.failed_count, 1)
        self.assertEqual(summary.recommended_count, 1)
        self.assertEqual(summary.top_score, strong.overall_score)
        self.assertEqual(summary.backends_used, ["local"])
        self.assertEqual(summary.analysis_method, "local")

        self.assertEqual(calls[0], (0.0, "Analyzing strong.txt"))
        self.assertEqual(calls[-2], (0.9, "Ranking candidates"))
        self.assertEqual(calls[-1][0], 1.0)

    async def test_weak_candidate_is_not_recommended(self):
        settings = make_settings()
        screener = BatchScreener(LocalAnalyzer(settings), settings)
        analysis = await screener.screen_resume(self.weak, FRONTEND_JOB)

        self.assertEqual(analysis.file_name, "weak.txt")
        self.assertEqual(analysis.skills_match, 20)
        self.assertLess(analysis.overall_score, 65)

    async def test_llm_ranking(self):
        settings = make_settings()
        analyzer = StubAnalyzer([ASSESSMENT_REPLY, ASSESSMENT_REPLY, RANKING_REPLY], settings)
        batch = await BatchScreener(analyzer, settings).process_batch(
            [self.strong, self.weak], FRONTEND_JOB
        )

        self.assertEqual(batch.ranking.method, "llm")
        self.assertEqual(batch.ranking.summary, "Both candidates are viable.")

        first = batch.ranked_results()[0]
        self.assertEqual(first.file_name, "weak.txt")
        self.assertIn("Comparative ranking #1: Better culture fit", first.ai_insights)
        self.assertEqual(batch.summary.analysis_method, "stub + comparative ranking")

    async def test_failed_llm_ranking_falls_back_to_scores(self):
        settings = make_settings()
        analyzer = StubAnalyzer([ASSESSMENT_REPLY, ASSESSMENT_REPLY, "no ranking today"], settings)
        batch = await BatchScreener(analyzer, settings).process_batch(
            [self.strong, self.weak], FRONTEND_JOB
        )

        self.assertEqual(batch.ranking.method, "fallback")
        self.assertEqual(batch.ranked_results()[0].file_name, "strong.txt")

    async def test_ranking_disabled(self):
        settings = make_settings(enable_comparative_ranking=False)
        analyzer = StubAnalyzer([ASSESSMENT_REPLY, ASSESSMENT_REPLY], settings)
        batch = await BatchScreener(analyzer, settings).process_batch(
            [self.strong, self.weak], FRONTEND_JOB
        )

        self.assertEqual(batch.ranking.method, "fallback")
        self.assertEqual(analyzer.replies, [])


class TestRanking(unittest.TestCase):

    def test_fallback_ranking_order(self):
        analyses = [
            failed_analysis("broken.pdf", "unreadable"),
            failed_analysis("low.pdf", "unused").model_copy(update={"error": None, "overall_score": 40}),
            failed_analysis("high.pdf", "unused").model_copy(update={"error": None, "overall_score": 88}),
        ]
        ranking = fallback_ranking(analyses)

        self.assertEqual(
            [(r.file_name, r.rank) for r in ranking.rankings],
            [("high.pdf", 1), ("low.pdf", 2), ("broken.pdf", 3)],
        )
        self.assertEqual(ranking.method, "fallback")

    def test_apply_overrides_only_large_disagreements(self):
        analyses = [
            failed_analysis("a.pdf", "x").model_copy(update={"error": None, "overall_score": 70}),
            failed_analysis("b.pdf", "x").model_copy(update={"error": None, "overall_score": 70}),
        ]
        ranking = ComparativeRanking(
            method="llm",
            rankings=[
                CandidateRanking(file_name="a.pdf", rank=1, score=90, key_strengths=["Leadership"]),
                CandidateRanking(file_name="b.pdf", rank=2, score=75),
            ],
        )
        a, b = CandidateRanker.apply(analyses, ranking)

        self.assertEqual(a.overall_score, 90)
        self.assertIn("Leadership", a.strengths)
        self.assertEqual(b.overall_score, 70)

    def test_unique_file_names(self):
        names = unique_file_names([Path("a/cv.pdf"), Path("b/cv.pdf"), Path("c/other.txt")])
        self.assertEqual(names, ["cv.pdf", "cv (2).pdf", "other.txt"])


class TestInputs(BatchTestCase):

    def test_extract_text(self):
        self.assertIn("Jane Doe", extract_text(self.strong))
        with self.assertRaises(ValueError):
            extract_text(self.broken)

    def test_load_job_description_yaml(self):
        path = Path(self.tmp.name) / "job.yaml"
        path.write_text(JOB_YAML, encoding="utf-8")
        job = load_job_description(path)

        self.assertEqual(job.title, "Data Analyst")
        self.assertEqual(job.required_skills, ["Python", "SQL"])
        self.assertIsNone(job.min_experience)
        self.assertEqual(job.max_experience, 4)

    def test_load_job_description_json(self):
        path = Path(self.tmp.name) / "job.json"
        path.write_text(json.dumps({"title": "QA Engineer", "required_skills": "Selenium"}))
        job = load_job_description(path)
        self.assertEqual(job.title, "QA Engineer")

    def test_job_description_must_be_a_mapping(self):
        path = Path(self.tmp.name) / "job.json"
        path.write_text("[1, 2]")
        with self.assertRaises(ValueError):
            load_job_description(path)


if __name__ == "__main__":
    unittest.main()
