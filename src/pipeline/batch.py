"""
Batch screening - analyze every resume against one job, then rank the pool.

Resumes are processed one at a time; a resume that cannot be read or analyzed
gets a placeholder analysis and the batch carries on.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Sequence

from loguru import logger

from analyzer import Analyzer, create_analyzer
from matcher.scoring import recommendation_for
from ranker.ranking import CandidateRanker
from shared.config import Settings, get_settings
from shared.models import (
    BatchAnalysisResult,
    BatchSummary,
    ComparativeRanking,
    JobDescription,
    ResumeAnalysis,
)

from .inputs import extract_text

# Called with (fraction complete 0..1, status message)
ProgressCallback = Callable[[float, str], None]

FAILED_ANALYSIS_SCORE = 50


@dataclass
class BatchStats:
    """Statistics for a batch run."""
    resumes_total: int = 0
    resumes_analyzed: int = 0
    resumes_failed: int = 0
    start_time: float = field(default_factory=time.time)

    @property
    def duration_seconds(self) -> float:
        return time.time() - self.start_time

    def __str__(self) -> str:
        return (
            f"Resumes: {self.resumes_total}, Analyzed: {self.resumes_analyzed}, "
            f"Failed: {self.resumes_failed}, Duration: {self.duration_seconds:.1f}s"
        )


def failed_analysis(file_name: str, error: str) -> ResumeAnalysis:
    """Placeholder analysis for a resume that could not be processed."""
    return ResumeAnalysis(
        file_name=file_name,
        overall_score=FAILED_ANALYSIS_SCORE,
        skills_match=FAILED_ANALYSIS_SCORE,
        experience_match=FAILED_ANALYSIS_SCORE,
        education_match=FAILED_ANALYSIS_SCORE,
        technical_fit=FAILED_ANALYSIS_SCORE,
        weaknesses=["Resume could not be processed"],
        recommendations=["Request the resume again as PDF or plain text"],
        ai_insights=f"Processing failed: {error}",
        recommendation=recommendation_for(FAILED_ANALYSIS_SCORE),
        backend="none",
        error=error,
    )


def unique_file_names(paths: Sequence[Path]) -> list[str]:
    """File names used as candidate ids; repeated names get a counter."""
    counts: dict[str, int] = {}
    names = []
    for path in paths:
        counts[path.name] = counts.get(path.name, 0) + 1
        count = counts[path.name]
        names.append(path.name if count == 1 else f"{path.stem} ({count}){path.suffix}")
    return names


def summarize(
    results: list[ResumeAnalysis],
    ranking: ComparativeRanking,
    analyzer_name: str,
    duration_seconds: float,
    recommend_threshold: int,
) -> BatchSummary:
    analyzed = [r for r in results if not r.failed]
    scores = [r.overall_score for r in analyzed]

    method = analyzer_name
    if ranking.method == "llm":
        method += " + comparative ranking"

    return BatchSummary(
        total_candidates=len(results),
        average_score=round(sum(scores) / len(scores)) if scores else 0,
        top_score=max(scores, default=0),
        recommended_count=sum(1 for s in scores if s >= recommend_threshold),
        failed_count=len(results) - len(analyzed),
        processing_time_ms=round(duration_seconds * 1000),
        analysis_method=method,
        backends_used=sorted({r.backend for r in analyzed}),
    )


class BatchScreener:
    """Screens a batch of resumes against one job description."""

    def __init__(
        self,
        analyzer: Optional[Analyzer] = None,
        settings: Optional[Settings] = None,
        ranker: Optional[CandidateRanker] = None,
    ):
        self.settings = settings or get_settings()
        self.analyzer = analyzer or create_analyzer(self.settings)
        self.ranker = ranker or CandidateRanker(self.analyzer, self.settings)

    async def screen_resume(
        self,
        path: Path,
        job: JobDescription,
        file_name: Optional[str] = None,
    ) -> ResumeAnalysis:
        """Extract and analyze a single resume file."""
        file_name = file_name or path.name
        resume_text = extract_text(path)
        if not resume_text.strip():
            logger.warning(f"No text extracted from {file_name}")
        return await self.analyzer.analyze(resume_text, job, file_name)

    async def process_batch(
        self,
        resume_paths: Sequence[Path],
        job: JobDescription,
        progress: Optional[ProgressCallback] = None,
    ) -> BatchAnalysisResult:
        """
        Screen every resume, rank the candidates and summarize the run.

        Args:
            resume_paths: Resume files (PDF or text)
            job: Job to screen against
            progress: Optional callback receiving (fraction, message)

        Returns:
            BatchAnalysisResult with analyses, ranking and summary
        """
        stats = BatchStats(resumes_total=len(resume_paths))
        names = unique_file_names(resume_paths)
        results: list[ResumeAnalysis] = []

        logger.info(f"Screening {stats.resumes_total} resume(s) for {job.title or 'job'}")

        for index, (path, name) in enumerate(zip(resume_paths, names)):
            if progress:
                progress(0.9 * index / stats.resumes_total, f"Analyzing {name}")
            try:
                analysis = await self.screen_resume(path, job, name)
                stats.resumes_analyzed += 1
                logger.info(f"{name}: {analysis.overall_score} ({analysis.recommendation.value})")
            except Exception as e:
                logger.error(f"Failed to process {name}: {e}")
                stats.resumes_failed += 1
                analysis = failed_analysis(name, str(e))
            results.append(analysis)

        if progress:
            progress(0.9, "Ranking candidates")
        ranking = await self.ranker.rank(results, job)
        results = self.ranker.apply(results, ranking)

        summary = summarize(
            results,
            ranking,
            self.analyzer.name,
            stats.duration_seconds,
            self.settings.recommend_threshold,
        )
        if progress:
            progress(1.0, "Screening complete")

        logger.info(f"Batch complete: {stats}")
        return BatchAnalysisResult(job=job, results=results, ranking=ranking, summary=summary)
