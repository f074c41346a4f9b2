"""Rich UI components for the CLI.

Kept apart from the commands so tables and panels can be reused by
`build`, `publish` and `doctor`.
"""

from __future__ import annotations

from pathlib import Path

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Artifact, PipelineReport, StageReport
from core.domain.policies import Stage, StageStatus

_STATUS_STYLES: dict[StageStatus, str] = {
    StageStatus.OK: "green",
    StageStatus.FAILED: "bold red",
    StageStatus.SKIPPED: "yellow",
    StageStatus.PLANNED: "cyan",
}


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in quiet/non-interactive modes)."""

    title = Text("webpub", style="bold cyan")
    subtitle = Text("wasm-pack build • copy • commit • push", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def format_stage_started(stage: Stage) -> str:
    return f"[cyan]>[/cyan] {stage.label()}"


def format_stage_finished(report: StageReport) -> str:
    style = _STATUS_STYLES[report.status]
    line = f"[{style}]{report.status.value}[/{style}] {report.stage.label()}"
    if report.status is not StageStatus.FAILED and report.detail:
        line += f" [dim]{escape(report.detail)}[/dim]"
    return line


def build_artifacts_table(artifacts: list[Artifact], destination: Path | None) -> Table:
    table = Table(title="Artifact set")
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Source", style="white")
    table.add_column("Target", style="magenta")
    table.add_column("Present", style="green")
    for artifact in artifacts:
        target = artifact.destination_path(destination) if destination else artifact.target
        present = "yes" if artifact.source.is_file() else "[red]missing[/red]"
        table.add_row(artifact.kind.value, str(artifact.source), str(target), present)
    return table


def build_report_table(report: PipelineReport) -> Table:
    title = f"webpub {report.target}"
    if report.dry_run:
        title += " (dry run)"
    table = Table(title=title)
    table.add_column("Stage", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Details", style="dim")
    for stage in report.stages:
        style = _STATUS_STYLES[stage.status]
        details = stage.detail
        if stage.files and stage.stage is Stage.COPY:
            details = "\n".join([details, *(str(f) for f in stage.files)])
        table.add_row(stage.stage.label(), f"[{style}]{stage.status.value}[/{style}]", escape(details))
    if report.commit_sha:
        table.caption = f"HEAD {report.commit_sha[:12]}"
    return table
