"""
Input loading: resume text extraction and job description files.
"""

import json
from pathlib import Path

import yaml
from loguru import logger
from pypdf import PdfReader

from shared.models import JobDescription

TEXT_SUFFIXES = {".txt", ".text", ".md"}
SUPPORTED_SUFFIXES = TEXT_SUFFIXES | {".pdf"}


def extract_pdf_text(path: Path) -> str:
    """Extract the text of every page of a PDF."""
    reader = PdfReader(path)
    pages = [page.extract_text() or "" for page in reader.pages]
    logger.debug(f"Extracted {len(pages)} page(s) from {path.name}")
    return "\n".join(pages)


def extract_text(path: Path) -> str:
    """
    Read a resume as plain text.

    Raises:
        ValueError: unsupported file type
        OSError: the file cannot be read
    """
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        return extract_pdf_text(path)
    if suffix in TEXT_SUFFIXES:
        return path.read_text(encoding="utf-8", errors="ignore")
    raise ValueError(
        f"Unsupported resume format {suffix or '(none)'!r}, "
        f"expected one of {', '.join(sorted(SUPPORTED_SUFFIXES))}"
    )


def load_job_description(path: Path) -> JobDescription:
    """Load a job description from a YAML or JSON file."""
    with open(path, encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Job description in {path} must be a mapping")

    job = JobDescription.model_validate(data)
    logger.info(f"Loaded job description: {job.title or path.name}")
    return job
