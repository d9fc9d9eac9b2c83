"""
Screening Pipeline - batch resume screening.
Extract → Analyze → Rank → Summarize for every resume of a job.
"""

from .batch import BatchScreener
from .inputs import extract_text, load_job_description

__all__ = ["BatchScreener", "extract_text", "load_job_description"]
