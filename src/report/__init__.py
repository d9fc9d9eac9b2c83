"""
Report - detailed candidate reports and batch summaries.
"""

from .builder import CandidateReport, build_candidate_report, report_to_markdown
from .writer import ReportWriter

__all__ = ["CandidateReport", "ReportWriter", "build_candidate_report", "report_to_markdown"]
