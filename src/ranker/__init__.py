"""
Ranker - comparative ranking of screened candidates.
"""

from .ranking import CandidateRanker, fallback_ranking

__all__ = ["CandidateRanker", "fallback_ranking"]
