"""
Skill Match - Main entry point.
Matches one resume against a list of required skills, offline.
"""

import json
from pathlib import Path
from typing import Optional

import click
from loguru import logger

from pipeline.inputs import extract_text
from shared.config import get_settings
from shared.log import setup_logging

from .skill_matcher import SkillMatcher
from .tables import get_skill_tables


@click.command()
@click.argument(
    "resume",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--skills",
    "-s",
    required=True,
    help="Required skills, comma/semicolon/newline separated",
)
@click.option("--title", "-t", default="", help="Job title, used for role detection")
@click.option("--description", "-d", default="", help="Job description text")
@click.option(
    "--details",
    is_flag=True,
    help="Include per-skill match details",
)
def main(
    resume: Path,
    skills: str,
    title: str,
    description: str,
    details: bool,
):
    """Skill Match - Checks which required skills a resume shows."""
    settings = get_settings()
    setup_logging(settings)

    try:
        resume_text = extract_text(resume)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Could not read {resume}: {e}")

    tables_path: Optional[Path] = settings.skills_table_path
    matcher = SkillMatcher(get_skill_tables(tables_path))
    analysis = matcher.match(resume_text, skills, job_title=title, job_description=description)
    logger.info(
        f"{resume.name}: {len(analysis.matched_skills)} matched, "
        f"{len(analysis.missing_skills)} missing"
    )

    output = analysis.to_dict()
    if not details:
        output.pop("results")
    click.echo(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
