"""
Comparative ranking of screened candidates.

An LLM backend ranks the whole pool in one call; otherwise, or when that call
fails, candidates are ordered by overall score.
"""

from typing import Optional

from loguru import logger

from analyzer import Analyzer
from analyzer.prompts import RANKING_SYSTEM_PROMPT, build_ranking_prompt
from matcher.scoring import recommendation_for
from shared.config import Settings, get_settings
from shared.models import (
    CandidateRanking,
    ComparativeRanking,
    JobDescription,
    Recommendation,
    ResumeAnalysis,
)

# An LLM score replaces the analysis score only when they disagree by more
SCORE_OVERRIDE_DELTA = 10


def fallback_ranking(analyses: list[ResumeAnalysis]) -> ComparativeRanking:
    """Rank candidates by overall score, failed analyses last."""
    ordered = sorted(
        analyses,
        key=lambda a: (a.failed, -a.overall_score, a.file_name),
    )
    rankings = [
        CandidateRanking(
            file_name=a.file_name,
            rank=position,
            score=a.overall_score,
            reasoning=f"Ranked by overall score ({a.overall_score})",
            key_strengths=a.strengths[:3],
            key_concerns=a.weaknesses[:3],
            recommendation=a.recommendation.value,
        )
        for position, a in enumerate(ordered, start=1)
    ]

    recommended = sum(
        1 for a in analyses
        if a.recommendation in (Recommendation.HIGHLY_RECOMMENDED, Recommendation.RECOMMENDED)
    )
    summary = f"{len(analyses)} candidate(s) ranked by score; {recommended} recommended."
    return ComparativeRanking(rankings=rankings, summary=summary, method="fallback")


def _normalize_llm_ranking(
    ranking: ComparativeRanking,
    analyses: list[ResumeAnalysis],
) -> Optional[ComparativeRanking]:
    """Keep only known candidates, append any the model skipped, renumber ranks."""
    known = {a.file_name: a for a in analyses}
    entries: list[CandidateRanking] = []
    seen: set[str] = set()

    for entry in sorted(ranking.rankings, key=lambda r: r.rank):
        if entry.file_name in known and entry.file_name not in seen:
            entries.append(entry)
            seen.add(entry.file_name)

    if not entries:
        return None

    skipped = [a for a in analyses if a.file_name not in seen]
    if skipped:
        logger.warning(f"LLM ranking skipped {len(skipped)} candidate(s), appending by score")
        for entry in fallback_ranking(skipped).rankings:
            entries.append(entry)

    renumbered = [
        entry.model_copy(update={"rank": position})
        for position, entry in enumerate(entries, start=1)
    ]
    return ComparativeRanking(rankings=renumbered, summary=ranking.summary, method="llm")


class CandidateRanker:
    """Ranks a batch of analyses, using the analyzer's LLM when it has one."""

    def __init__(
        self,
        analyzer: Analyzer,
        settings: Optional[Settings] = None,
    ):
        self.analyzer = analyzer
        self.settings = settings or get_settings()

    @property
    def llm_enabled(self) -> bool:
        return self.settings.enable_comparative_ranking and self.analyzer.supports_ranking

    async def rank(
        self,
        analyses: list[ResumeAnalysis],
        job: JobDescription,
    ) -> ComparativeRanking:
        """
        Rank all candidates.

        Returns:
            LLM ranking when enabled and successful, else the score ranking
        """
        candidates = [a for a in analyses if not a.failed]
        if not self.llm_enabled or len(candidates) < 2:
            return fallback_ranking(analyses)

        logger.info(f"Requesting comparative ranking of {len(candidates)} candidates")
        prompt = build_ranking_prompt(candidates, job)
        reply = await self.analyzer.ask(RANKING_SYSTEM_PROMPT, prompt, ComparativeRanking)

        ranking = _normalize_llm_ranking(reply, analyses) if reply else None
        if ranking is None:
            logger.warning("Comparative ranking unavailable, ranking by score")
            return fallback_ranking(analyses)
        return ranking

    @staticmethod
    def apply(
        analyses: list[ResumeAnalysis],
        ranking: ComparativeRanking,
    ) -> list[ResumeAnalysis]:
        """
        Fold an LLM ranking back into the analyses.

        Scores are replaced only on a large disagreement; reasoning is appended
        to the insights and strengths/concerns are merged.
        """
        if ranking.method != "llm":
            return analyses

        entries = {r.file_name: r for r in ranking.rankings}
        updated = []
        for analysis in analyses:
            entry = entries.get(analysis.file_name)
            if entry is None or analysis.failed:
                updated.append(analysis)
                continue

            changes: dict = {}
            if entry.score is not None and abs(entry.score - analysis.overall_score) > SCORE_OVERRIDE_DELTA:
                score = max(0, min(100, entry.score))
                changes["overall_score"] = score
                changes["recommendation"] = recommendation_for(score)
            if entry.reasoning:
                changes["ai_insights"] = (
                    f"{analysis.ai_insights}\n\nComparative ranking #{entry.rank}: {entry.reasoning}"
                ).strip()
            changes["strengths"] = _merge_unique(analysis.strengths, entry.key_strengths)
            changes["weaknesses"] = _merge_unique(analysis.weaknesses, entry.key_concerns)
            updated.append(analysis.model_copy(update=changes))
        return updated


def _merge_unique(first: list[str], second: list[str]) -> list[str]:
    merged = list(first)
    for item in second:
        if item not in merged:
            merged.append(item)
    return merged
