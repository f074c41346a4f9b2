"""Typer application for webpub.

Commands mirror the original build file targets:

- `build`: wasm-pack release build.
- `publish`: copy artifacts and static assets into the destination working
  copy, commit, push.
- `all`: alias of `build`; it never publishes.

Plus `setup` (stores the destination in the user config) and `doctor`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from adapters.json_exporter import export_report_json
from cli import doctor
from cli.errors import EXIT_CONFIG, handle_cli_errors
from cli.ui_components import (
    build_artifacts_table,
    build_report_table,
    format_stage_finished,
    format_stage_started,
    print_banner,
)
from core.config import ENV_PREFIX, AppSettings, write_user_env_vars
from core.domain.models import PipelineReport
from core.services.artifacts import resolve_artifact_set
from core.services.publication_pipeline import PipelineHooks, PublicationPipeline

app = typer.Typer(
    name="webpub",
    no_args_is_help=True,
    help="Build the wasm viewer with wasm-pack and publish it to a git working copy.",
    add_completion=False,
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

ProjectDirOption = typer.Option(
    None,
    "--project-dir",
    "-p",
    help="Crate directory holding Cargo.toml and the static assets.",
)
TimeoutOption = typer.Option(
    None,
    "--timeout",
    min=0.1,
    help="Timeout per external command, in seconds.",
)
ReportOption = typer.Option(
    None,
    "--report",
    help="Write the pipeline report as JSON to this path.",
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=_err_console,
                rich_tracebacks=True,
                show_path=verbose,
                log_time_format="[%Y-%m-%d %H:%M:%S]",
            )
        ],
    )


def _load_settings(**overrides: Any) -> AppSettings:
    """Build settings; CLI flags win over env vars and .env files."""

    return AppSettings(**{k: v for k, v in overrides.items() if v is not None})


def _console_hooks(console: Console) -> PipelineHooks:
    return PipelineHooks(
        stage_started=lambda stage: console.print(format_stage_started(stage)),
        stage_finished=lambda report: console.print(format_stage_finished(report)),
        warning=lambda message: console.print(f"[yellow]Warning:[/yellow] {message}"),
    )


def _is_verbose(ctx: typer.Context) -> bool:
    return bool((ctx.obj or {}).get("verbose", False))


def _run_pipeline(
    ctx: typer.Context,
    action: Callable[[PublicationPipeline], PipelineReport],
    *,
    report_path: Path | None,
    **overrides: Any,
) -> None:
    debug = _is_verbose(ctx)
    pipeline: PublicationPipeline | None = None
    try:
        with handle_cli_errors(debug=debug):
            settings = _load_settings(**overrides)
            pipeline = PublicationPipeline(settings, hooks=_console_hooks(_console))
            report = action(pipeline)
    finally:
        if report_path is not None and pipeline is not None and pipeline.last_report is not None:
            export_report_json(report=pipeline.last_report, output_path=report_path)
            logger.info("Report written to %s", report_path)

    _console.print(build_report_table(report))


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging and full tracebacks."),
) -> None:
    """Configure logging shared by every command."""

    _configure_logging(verbose)
    ctx.obj = {"verbose": verbose}


@app.command()
def build(
    ctx: typer.Context,
    project_dir: Optional[Path] = ProjectDirOption,
    timeout: Optional[float] = TimeoutOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """Compile the crate with `wasm-pack build -t no-modules --release`."""

    _run_pipeline(
        ctx,
        lambda pipeline: pipeline.build(),
        report_path=report,
        project_dir=project_dir,
        command_timeout_seconds=timeout,
    )


@app.command(name="all")
def all_targets(
    ctx: typer.Context,
    project_dir: Optional[Path] = ProjectDirOption,
    timeout: Optional[float] = TimeoutOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """Default target: build only (does not publish)."""

    _run_pipeline(
        ctx,
        lambda pipeline: pipeline.all(),
        report_path=report,
        project_dir=project_dir,
        command_timeout_seconds=timeout,
    )


@app.command()
def publish(
    ctx: typer.Context,
    destination: Optional[Path] = typer.Option(
        None,
        "--destination",
        "-d",
        help=f"Destination working copy (default: {ENV_PREFIX}DESTINATION_DIR).",
    ),
    project_dir: Optional[Path] = ProjectDirOption,
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be copied and run, change nothing."),
    timeout: Optional[float] = TimeoutOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """Copy the build artifacts and static assets, then commit and push."""

    if dry_run:
        with handle_cli_errors(debug=_is_verbose(ctx)):
            settings = _load_settings(destination_dir=destination, project_dir=project_dir)
        _console.print(build_artifacts_table(resolve_artifact_set(settings), settings.destination_dir))

    _run_pipeline(
        ctx,
        lambda pipeline: pipeline.publish(dry_run=dry_run),
        report_path=report,
        destination_dir=destination,
        project_dir=project_dir,
        command_timeout_seconds=timeout,
    )


@app.command()
def setup(
    banner: bool = typer.Option(True, "--banner/--no-banner", help="Show the welcome banner."),
) -> None:
    """Interactive setup: store the destination working copy in the user config .env."""

    if banner:
        print_banner(_console)

    raw = typer.prompt("Destination working copy").strip()
    if not raw:
        raise typer.BadParameter("destination is required")

    destination = Path(raw).expanduser().resolve()
    if not destination.is_dir():
        _err_console.print(f"[red]Not a directory:[/red] {destination}")
        raise typer.Exit(EXIT_CONFIG)

    env_path = write_user_env_vars({f"{ENV_PREFIX}DESTINATION_DIR": str(destination)})
    _console.print(f"[green]Saved destination to:[/green] {env_path}")


def run() -> None:
    app()
