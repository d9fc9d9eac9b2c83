"""
Resume Screener - Main entry point.
Screens resumes against a job description, ranks them and writes reports.
"""

import asyncio
from pathlib import Path
from typing import Optional

import click
from loguru import logger

from analyzer import create_analyzer
from report.writer import FORMATS, ReportWriter
from shared.config import BACKENDS, Settings, get_settings
from shared.log import setup_logging
from shared.models import BatchAnalysisResult

from .batch import BatchScreener
from .inputs import SUPPORTED_SUFFIXES, load_job_description


def collect_resumes(paths: tuple[Path, ...]) -> list[Path]:
    """Expand directories into the supported resume files they contain."""
    resumes: list[Path] = []
    for path in paths:
        if path.is_dir():
            resumes.extend(
                sorted(p for p in path.iterdir() if p.suffix.lower() in SUPPORTED_SUFFIXES)
            )
        else:
            resumes.append(path)
    return resumes


async def screen_resumes(
    job_path: Path,
    resume_paths: list[Path],
    settings: Settings,
    output_dir: Optional[Path] = None,
    formats: tuple[str, ...] = ("json", "html"),
) -> BatchAnalysisResult:
    """
    Screen resumes against a job and write reports.

    Args:
        job_path: Job description YAML/JSON
        resume_paths: Resume files
        settings: Settings with the backend already chosen
        output_dir: Report directory (no reports when formats is empty)
        formats: Report formats to write

    Returns:
        BatchAnalysisResult for the run
    """
    job = load_job_description(job_path)
    screener = BatchScreener(create_analyzer(settings), settings)

    def progress(fraction: float, message: str) -> None:
        logger.info(f"[{fraction:4.0%}] {message}")

    batch = await screener.process_batch(resume_paths, job, progress=progress)

    if formats:
        writer = ReportWriter(output_dir or settings.report_output_dir)
        writer.write_batch(batch, formats)

    return batch


@click.command()
@click.argument(
    "resumes",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--job",
    "-j",
    "job_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Job description file (YAML or JSON)",
)
@click.option(
    "--backend",
    "-b",
    type=click.Choice(BACKENDS),
    default=None,
    help="Analysis backend (default: ANALYSIS_BACKEND setting)",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for reports (default: REPORT_OUTPUT_DIR setting)",
)
@click.option(
    "--format",
    "-f",
    "formats",
    type=click.Choice(FORMATS),
    multiple=True,
    default=("json", "html"),
    help="Report format, repeatable",
)
@click.option(
    "--no-reports",
    is_flag=True,
    help="Only print the ranking",
)
@click.option(
    "--no-ranking",
    is_flag=True,
    help="Rank by score instead of asking the LLM to compare candidates",
)
def main(
    resumes: tuple[Path, ...],
    job_path: Path,
    backend: Optional[str],
    output_dir: Optional[Path],
    formats: tuple[str, ...],
    no_reports: bool,
    no_ranking: bool,
):
    """Resume Screener - Scores and ranks resumes for a job."""
    settings = get_settings()
    setup_logging(settings)

    updates: dict = {}
    if backend:
        updates["analysis_backend"] = backend
    if no_ranking:
        updates["enable_comparative_ranking"] = False
    if updates:
        settings = settings.model_copy(update=updates)

    resume_paths = collect_resumes(resumes)
    if not resume_paths:
        raise click.UsageError("No resume files found")

    try:
        batch = asyncio.run(
            screen_resumes(
                job_path,
                resume_paths,
                settings,
                output_dir=output_dir,
                formats=() if no_reports else formats,
            )
        )
    except (OSError, ValueError) as e:
        raise click.ClickException(str(e))

    for analysis in batch.ranked_results():
        status = f"  ERROR: {analysis.error}" if analysis.failed else ""
        click.echo(
            f"{analysis.overall_score:>3}  {analysis.recommendation.value:<18}  "
            f"{analysis.file_name}{status}"
        )

    summary = batch.summary
    click.echo(
        f"Candidates: {summary.total_candidates}, Average: {summary.average_score}, "
        f"Top: {summary.top_score}, Recommended: {summary.recommended_count}, "
        f"Method: {summary.analysis_method}"
    )


if __name__ == "__main__":
    main()
