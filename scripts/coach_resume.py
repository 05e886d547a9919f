#!/usr/bin/env python3
"""
Resume Coaching CLI

Asks an LLM provider (LLM_PROVIDER / LLM_MODEL, see .env) for resume feedback.

Commands:
    analyze         - ATS score, summary feedback and improvement tips
    ats-check       - Keyword match against an optional job description
    review          - Staged review (content, ats, format, impact) with a final score
    cover-letter    - Draft a cover letter for a job description
    import-linkedin - Turn a LinkedIn profile PDF into a resume file

Examples:\n

    coach_resume.py analyze data/ada.yaml

    coach_resume.py cover-letter data/ada.yaml data/jobs/acme.md --company Acme

    coach_resume.py import-linkedin Profile.pdf data/imported.yaml
"""

from pathlib import Path
from typing import Optional

import typer
from omegaconf import OmegaConf
from typing_extensions import Annotated

from texfolio.contexts.coaching import CoachResponseError, ResumeCoach
from texfolio.contexts.coaching.logger import setup_coaching_logger
from texfolio.contexts.resumes import InvalidResumeError, LinkedInImportError, ResumeDocument
from texfolio.contexts.resumes.linkedin import import_linkedin_pdf
from texfolio.utils.llm import get_provider

app = typer.Typer(
    help="LLM feedback on resumes",
    add_completion=False,
    invoke_without_command=True,
)

ProviderOption = Annotated[
    Optional[str],
    typer.Option("--provider", help="LLM provider: 'anthropic' or 'openai' (default: LLM_PROVIDER)"),
]
ModelOption = Annotated[
    Optional[str],
    typer.Option("--model", "-m", help="Model name (default: LLM_MODEL or the provider default)"),
]


def build_coach(provider_name: Optional[str], model: Optional[str]) -> ResumeCoach:
    try:
        provider = get_provider(provider_name, model)
    except ValueError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    setup_coaching_logger(None, provider=provider.name)
    return ResumeCoach(provider)


def load_resume(resume_file: Path) -> ResumeDocument:
    try:
        return ResumeDocument.from_yaml(resume_file)
    except InvalidResumeError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("analyze")
def analyze_command(
    resume_file: Annotated[Path, typer.Argument(help="Resume file (.yaml or .json)", exists=True)],
    provider_name: ProviderOption = None,
    model: ModelOption = None,
):
    """Score a resume for ATS readiness and list improvements."""
    resume = load_resume(resume_file)
    coach = build_coach(provider_name, model)

    try:
        analysis = coach.analyze(resume)
    except CoachResponseError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    color = typer.colors.GREEN if analysis.ats_score >= 70 else typer.colors.YELLOW
    typer.secho(f"\nATS score: {analysis.ats_score}/100", fg=color, bold=True)
    if analysis.summary_feedback:
        typer.echo(f"\n{analysis.summary_feedback}")
    if analysis.improvements:
        typer.echo("\nImprovements:")
        for item in analysis.improvements:
            typer.echo(f"  - [{item['section']}] {item['tip']}")
    typer.echo("")


@app.command("cover-letter")
def cover_letter_command(
    resume_file: Annotated[Path, typer.Argument(help="Resume file (.yaml or .json)", exists=True)],
    job_file: Annotated[Path, typer.Argument(help="Job description (plain text or Markdown)", exists=True)],
    job_title: Annotated[Optional[str], typer.Option("--title", help="Job title")] = None,
    company: Annotated[Optional[str], typer.Option("--company", help="Company name")] = None,
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Write the letter here instead of stdout")
    ] = None,
    provider_name: ProviderOption = None,
    model: ModelOption = None,
):
    """Draft a Markdown cover letter for a job description."""
    resume = load_resume(resume_file)
    job_description = job_file.read_text(encoding="utf-8")
    coach = build_coach(provider_name, model)

    try:
        letter = coach.cover_letter(resume, job_description, job_title=job_title, company=company)
    except (ValueError, CoachResponseError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if output:
        output.write_text(letter + "\n", encoding="utf-8")
        typer.secho(f"✓ Cover letter written to {output}", fg=typer.colors.GREEN)
    else:
        typer.echo(letter)


@app.command("ats-check")
def ats_check_command(
    resume_file: Annotated[Path, typer.Argument(help="Resume file (.yaml or .json)", exists=True)],
    job_file: Annotated[
        Optional[Path], typer.Option("--job", "-j", help="Job description to match keywords against", exists=True)
    ] = None,
    provider_name: ProviderOption = None,
    model: ModelOption = None,
):
    """Score a resume for applicant tracking systems and list missing keywords."""
    resume = load_resume(resume_file)
    job_description = job_file.read_text(encoding="utf-8") if job_file else None
    coach = build_coach(provider_name, model)

    try:
        check = coach.ats_check(resume, job_description)
    except CoachResponseError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    color = typer.colors.GREEN if check.ats_score >= 70 else typer.colors.YELLOW
    typer.secho(f"\nATS score: {check.ats_score}/100", fg=color, bold=True)
    if check.matched_keywords:
        typer.echo(f"Matched: {', '.join(check.matched_keywords)}")
    if check.missing_keywords:
        typer.secho(f"Missing: {', '.join(check.missing_keywords)}", fg=typer.colors.YELLOW)
    for suggestion in check.suggestions:
        typer.echo(f"  - {suggestion}")
    typer.echo("")


@app.command("review")
def review_command(
    resume_file: Annotated[Path, typer.Argument(help="Resume file (.yaml or .json)", exists=True)],
    job_file: Annotated[
        Optional[Path], typer.Option("--job", "-j", help="Job description for the ATS stage", exists=True)
    ] = None,
    quick: Annotated[bool, typer.Option("--quick", "-q", help="Only the score and top recommendations")] = False,
    provider_name: ProviderOption = None,
    model: ModelOption = None,
):
    """Run the staged review and print the weighted score with recommendations."""
    resume = load_resume(resume_file)
    job_description = job_file.read_text(encoding="utf-8") if job_file else None
    coach = build_coach(provider_name, model)

    report = coach.coach(resume, job_description)

    typer.secho(f"\nScore: {report.final_score}/100", bold=True)
    if quick:
        recommendations = report.quick_score()["topRecommendations"]
    else:
        for name, result in report.stages.items():
            typer.echo(f"  {name:<8} {result.score:>3}")
        recommendations = report.recommendations
    if recommendations:
        typer.echo("\nRecommendations:")
        for item in recommendations:
            typer.echo(f"  - {item}")
    typer.echo("")


@app.command("import-linkedin")
def import_linkedin_command(
    pdf_file: Annotated[Path, typer.Argument(help="LinkedIn 'Save to PDF' export", exists=True)],
    output: Annotated[Path, typer.Argument(help="Resume file to write (.yaml)")],
    provider_name: ProviderOption = None,
    model: ModelOption = None,
):
    """Convert a LinkedIn profile PDF into a resume file."""
    coach = build_coach(provider_name, model)

    try:
        resume = import_linkedin_pdf(pdf_file, coach.provider)
    except (LinkedInImportError, InvalidResumeError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output.write_text(OmegaConf.to_yaml(OmegaConf.create(resume.to_dict())), encoding="utf-8")
    typer.secho(f"✓ Imported {resume.personal_info.full_name} to {output}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
