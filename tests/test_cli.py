"""
Unit tests for the command line entry points.
"""

import json
import sys
import unittest
from pathlib import Path

from click.testing import CliRunner
from loguru import logger

from matcher.main import main as skill_match
from pipeline.main import main as screen_resumes
from shared.config import get_settings

from .sample_data import STRONG_RESUME, WEAK_RESUME

# Keep logs off stdout and keys out of the run
CLI_ENV = {
    "LOG_LEVEL": "ERROR",
    "ANALYSIS_BACKEND": "local",
    "GEMINI_API_KEY": "",
    "OPENAI_API_KEY": "",
}

JOB_YAML = """
title: Frontend Developer
required_skills: JavaScript, React, CSS
min_experience: 2
max_experience: 5
education: Bachelor's degree in Computer Science
"""


class CliTestCase(unittest.TestCase):

    def setUp(self):
        get_settings.cache_clear()
        self.runner = CliRunner()

    def tearDown(self):
        get_settings.cache_clear()
        # The commands point loguru at the runner's captured stderr
        logger.remove()
        logger.add(sys.stderr, level="WARNING")


class TestSkillMatchCommand(CliTestCase):

    def test_match(self):
        with self.runner.isolated_filesystem():
            Path("resume.txt").write_text(
                "5 years experience with React and Node.js development", encoding="utf-8"
            )
            result = self.runner.invoke(
                skill_match,
                ["resume.txt", "--skills", "JavaScript, React, Node.js"],
                env=CLI_ENV,
            )

        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.stdout)
        self.assertEqual(data["matched_skills"], ["react", "node.js"])
        self.assertEqual(data["missing_skills"], ["javascript"])
        self.assertEqual(data["overall_score"], 67)
        self.assertNotIn("results", data)

    def test_details(self):
        with self.runner.isolated_filesystem():
            Path("resume.txt").write_text("Kubernetes on k8s", encoding="utf-8")
            result = self.runner.invoke(
                skill_match,
                ["resume.txt", "-s", "Kubernetes", "--title", "DevOps Engineer", "--details"],
                env=CLI_ENV,
            )

        self.assertEqual(result.exit_code, 0, result.output)
        data = json.loads(result.stdout)
        self.assertEqual(data["role"], "devops")
        self.assertEqual(data["results"][0]["strategy"], "exact")

    def test_unsupported_file(self):
        with self.runner.isolated_filesystem():
            Path("resume.docx").write_text("binary", encoding="utf-8")
            result = self.runner.invoke(skill_match, ["resume.docx", "-s", "Python"], env=CLI_ENV)

        self.assertEqual(result.exit_code, 1)


class TestScreenResumesCommand(CliTestCase):

    def test_screen_directory(self):
        with self.runner.isolated_filesystem():
            Path("resumes").mkdir()
            Path("resumes/jane.txt").write_text(STRONG_RESUME, encoding="utf-8")
            Path("resumes/john.txt").write_text(WEAK_RESUME, encoding="utf-8")
            Path("job.yaml").write_text(JOB_YAML, encoding="utf-8")

            result = self.runner.invoke(
                screen_resumes,
                ["resumes", "--job", "job.yaml", "--backend", "local",
                 "--output-dir", "out", "--format", "markdown"],
                env=CLI_ENV,
            )
            written = sorted(p.name for p in Path("out").iterdir())

        self.assertEqual(result.exit_code, 0, result.output)
        lines = result.stdout.strip().splitlines()
        self.assertTrue(lines[0].endswith("jane.txt"))
        self.assertIn("Candidates: 2", lines[-1])
        self.assertIn("Method: local", lines[-1])
        self.assertEqual(written, ["report_jane_txt.md", "report_john_txt.md", "summary.md"])

    def test_no_reports(self):
        with self.runner.isolated_filesystem():
            Path("jane.txt").write_text(STRONG_RESUME, encoding="utf-8")
            Path("job.yaml").write_text(JOB_YAML, encoding="utf-8")

            result = self.runner.invoke(
                screen_resumes,
                ["jane.txt", "--job", "job.yaml", "--no-reports", "--output-dir", "out"],
                env=CLI_ENV,
            )
            out_exists = Path("out").exists()

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertFalse(out_exists)

    def test_empty_directory(self):
        with self.runner.isolated_filesystem():
            Path("resumes").mkdir()
            Path("job.yaml").write_text(JOB_YAML, encoding="utf-8")
            result = self.runner.invoke(
                screen_resumes, ["resumes", "--job", "job.yaml"], env=CLI_ENV
            )

        self.assertEqual(result.exit_code, 2)


if __name__ == "__main__":
    unittest.main()
