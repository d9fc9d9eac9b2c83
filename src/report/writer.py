"""
Report output as JSON, Markdown and standalone HTML files.
"""

from html import escape
from pathlib import Path
from typing import Iterable, Optional

import markdown
from loguru import logger

from shared.models import BatchAnalysisResult

from .builder import (
    CandidateReport,
    batch_to_markdown,
    build_candidate_report,
    report_to_markdown,
)

FORMATS = ("json", "markdown", "html")

# Clean, printable CSS for HTML reports
REPORT_CSS = """
body {
    font-family: 'Segoe UI', 'Helvetica Neue', Helvetica, Arial, sans-serif;
    font-size: 11pt;
    line-height: 1.5;
    color: #333;
    max-width: 960px;
    margin: 2em auto;
    padding: 0 1.5em;
}

h1 {
    font-size: 22pt;
    font-weight: 600;
    color: #1a1a1a;
    border-bottom: 2px solid #667eea;
    padding-bottom: 0.2em;
}

h2 {
    font-size: 14pt;
    font-weight: 600;
    color: #667eea;
    margin-top: 1.4em;
    text-transform: uppercase;
    letter-spacing: 0.05em;
}

table {
    border-collapse: collapse;
    width: 100%;
    margin: 0.8em 0;
}

th, td {
    border: 1px solid #e2e2e2;
    padding: 0.4em 0.6em;
    text-align: left;
}

th {
    background: #f5f5ff;
}

blockquote {
    border-left: 4px solid #dc3545;
    margin: 1em 0;
    padding: 0.2em 1em;
    color: #a12;
}

ul {
    margin-left: 1.5em;
}
"""


def markdown_to_html(content: str, title: str) -> str:
    """Convert Markdown to a standalone HTML document."""
    html_content = markdown.markdown(
        content,
        extensions=["tables", "fenced_code"],
    )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>{escape(title)}</title>
    <style>{REPORT_CSS}</style>
</head>
<body>
{html_content}
</body>
</html>"""


def safe_filename(name: str) -> str:
    return "".join(c if c.isalnum() or c in "-_" else "_" for c in name).strip("_") or "report"


class ReportWriter:
    """Writes candidate and batch reports to an output directory."""

    def __init__(self, output_dir: Optional[Path] = None):
        self.output_dir = output_dir or Path("./reports")
        self.output_dir.mkdir(parents=True, exist_ok=True)
        # stem -> source name it was issued for
        self._stems: dict[str, str] = {}

    def _unique_stem(self, name: str) -> str:
        """Sanitized report stem, suffixed when another name already sanitized to it."""
        base = f"report_{safe_filename(name)}"
        stem, n = base, 1
        while self._stems.get(stem, name) != name:
            n += 1
            stem = f"{base}_{n}"
        self._stems[stem] = name
        return stem

    def _write(self, filename: str, content: str) -> Path:
        output_path = self.output_dir / filename
        output_path.write_text(content, encoding="utf-8")
        logger.debug(f"Wrote report: {output_path}")
        return output_path

    def write_candidate_report(
        self,
        report: CandidateReport,
        formats: Iterable[str] = FORMATS,
    ) -> list[Path]:
        """
        Write one candidate report in each requested format.

        Returns:
            Paths of the written files
        """
        stem = self._unique_stem(report.file_name or report.candidate_name)
        content = report_to_markdown(report)
        paths = []

        for fmt in formats:
            if fmt == "json":
                paths.append(self._write(f"{stem}.json", report.model_dump_json(indent=2)))
            elif fmt == "markdown":
                paths.append(self._write(f"{stem}.md", content))
            elif fmt == "html":
                html = markdown_to_html(content, f"Resume Analysis Report - {report.candidate_name}")
                paths.append(self._write(f"{stem}.html", html))
            else:
                raise ValueError(f"Unknown report format {fmt!r}, expected one of {FORMATS}")

        return paths

    def write_batch(
        self,
        batch: BatchAnalysisResult,
        formats: Iterable[str] = FORMATS,
    ) -> list[Path]:
        """Write the batch summary and a report per candidate."""
        formats = tuple(formats)
        unknown = [fmt for fmt in formats if fmt not in FORMATS]
        if unknown:
            raise ValueError(f"Unknown report format(s) {unknown}, expected one of {FORMATS}")
        paths = []

        for analysis in batch.ranked_results():
            report = build_candidate_report(analysis, batch.job)
            paths.extend(self.write_candidate_report(report, formats))

        content = batch_to_markdown(batch)
        for fmt in formats:
            if fmt == "json":
                paths.append(self._write("summary.json", batch.model_dump_json(indent=2)))
            elif fmt == "markdown":
                paths.append(self._write("summary.md", content))
            elif fmt == "html":
                title = f"Screening Summary - {batch.job.title or 'Job'}"
                paths.append(self._write("summary.html", markdown_to_html(content, title)))

        logger.info(f"Wrote {len(paths)} report file(s) to {self.output_dir}")
        return paths
