#!/usr/bin/env python3
"""
Resume Rendering CLI

Renders resume files (YAML or JSON, API-shaped) to PDF with the bundled LaTeX
templates, and maintains the render work directory.

Commands:
    render    - Render a resume file to PDF
    templates - List available template ids
    sweep     - Delete stale outputs from the work directory
    events    - Show recent render events

Examples:\n

    render_resume.py render data/ada.yaml                      # Render with the resume's template

    render_resume.py render data/ada.yaml --template premium   # Override the template

    render_resume.py render data/ada.json -o out/ada.pdf -v    # Custom output, verbose logging

    render_resume.py sweep --max-age-hours 6                   # Remove outputs older than 6h
"""

import asyncio
import shutil
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from texfolio.contexts.rendering import RenderConfig, RenderError, ResumeRenderer, sweep_outputs
from texfolio.contexts.rendering.logger import setup_rendering_logger
from texfolio.contexts.resumes import InvalidResumeError, ResumeDocument
from texfolio.contexts.resumes.service import pdf_filename
from texfolio.contexts.templating import TemplateNotFoundError, TemplateRenderError, TemplateStore
from texfolio.utils.event_logging import RENDER_EVENT_TYPES, get_recent_events
from texfolio.utils.timestamp import now

app = typer.Typer(
    help="Render resumes to PDF with LaTeX templates",
    add_completion=False,
    invoke_without_command=True,
)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="YAML render config layered over the environment"),
]


def load_config(config_path: Optional[Path]) -> RenderConfig:
    if config_path is None:
        return RenderConfig.from_env()
    return RenderConfig.from_yaml(config_path)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("render")
def render_command(
    resume_file: Annotated[
        Path,
        typer.Argument(help="Resume file (.yaml, .yml or .json)", exists=True, dir_okay=False),
    ],
    template_id: Annotated[
        Optional[str],
        typer.Option("--template", "-t", help="Template id (default: the resume's templateId)"),
    ] = None,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Where to put the PDF (default: <Full_Name>_Resume.pdf)"),
    ] = None,
    config_path: ConfigOption = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Write a DEBUG log with compiler output"),
    ] = False,
):
    """
    Render a resume file to PDF.

    Examples:\n

        $ render_resume.py render data/ada.yaml

        $ render_resume.py render data/ada.yaml --template faangpath -o ada.pdf
    """
    config = load_config(config_path)

    log_dir = config.work_dir / "logs" / f"render_{now()}" if verbose else None
    log_file = setup_rendering_logger(log_dir, latex_compiler=config.latex_compiler)

    try:
        resume = ResumeDocument.from_yaml(resume_file)
    except InvalidResumeError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if template_id:
        resume = replace(resume, template_id=template_id)

    typer.secho(f"\nRendering: {resume_file}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Template: {resume.template_id}")
    typer.echo("")

    renderer = ResumeRenderer(config)
    try:
        pdf_path = asyncio.run(renderer.render(resume))
    except (TemplateNotFoundError, TemplateRenderError, RenderError) as e:
        typer.secho("✗ Rendering failed", fg=typer.colors.RED, bold=True)
        typer.secho(f"{e}\n", fg=typer.colors.RED, err=True)
        if log_file:
            typer.echo(f"  Log: {log_file}")
        raise typer.Exit(code=1)

    destination = output or Path(pdf_filename(resume))
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(pdf_path), destination)

    typer.secho("✓ Rendering succeeded", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  PDF: {destination}")
    if log_file:
        typer.echo(f"  Log: {log_file}")
    typer.echo("")


@app.command("templates")
def templates_command(config_path: ConfigOption = None):
    """List the template ids available for rendering."""
    config = load_config(config_path)
    store = TemplateStore(config.templates_path)

    template_ids = store.available()
    if not template_ids:
        typer.secho(f"No templates found in {store.templates_path}", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)

    for template_id in template_ids:
        marker = " (default)" if template_id == store.default_template_id else ""
        typer.echo(f"  {template_id}{marker}")


@app.command("sweep")
def sweep_command(
    max_age_hours: Annotated[
        float,
        typer.Option("--max-age-hours", help="Delete outputs older than this many hours", min=0),
    ] = 24.0,
    config_path: ConfigOption = None,
):
    """
    Delete stale PDFs and leftover job files from the work directory.

    Examples:\n

        $ render_resume.py sweep                      # Older than a day

        $ render_resume.py sweep --max-age-hours 0    # Everything
    """
    config = load_config(config_path)
    setup_rendering_logger(None, latex_compiler=config.latex_compiler)

    deleted = sweep_outputs(config.work_dir, max_age_s=max_age_hours * 3600)
    typer.secho(f"Deleted {len(deleted)} files from {config.work_dir}", fg=typer.colors.GREEN)


@app.command("events")
def events_command(
    n: Annotated[int, typer.Option("--num", "-n", help="Number of recent events to show")] = 10,
    event_type: Annotated[
        Optional[str],
        typer.Option("--event-type", "-e", help=f"One of {sorted(RENDER_EVENT_TYPES)}"),
    ] = None,
    config_path: ConfigOption = None,
):
    """Show the last n render events (requires TEXFOLIO_EVENTS_FILE)."""
    config = load_config(config_path)
    if config.events_file is None:
        typer.secho("No events file configured (set TEXFOLIO_EVENTS_FILE)", fg=typer.colors.YELLOW)
        raise typer.Exit(code=1)

    for event in get_recent_events(config.events_file, n=n, event_type=event_type):
        timestamp = event.get("timestamp", "")
        kind = event.get("event_type", "")
        color = typer.colors.RED if kind == "render_failed" else None
        typer.secho(f"{timestamp}  {kind:<17} {event.get('job_id', '')}", fg=color)


if __name__ == "__main__":
    app()
