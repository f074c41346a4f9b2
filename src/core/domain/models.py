"""Domain models (Pydantic v2).

These models describe *what* the pipeline moves around (files, command
outcomes, stage results), not *how* it is done. They carry no subprocess or
filesystem logic so the CLI, the JSON exporter and the tests can share them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field

from core.domain.policies import ArtifactKind, Stage, StageStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Artifact(BaseModel):
    """A single file of the artifact set."""

    source: Path = Field(
        ...,
        description="Location of the file in the project (build output or project root).",
    )
    target: Path = Field(
        ...,
        description="Path relative to the destination working copy.",
    )
    kind: ArtifactKind = Field(
        ...,
        description="Build output or static asset.",
    )

    def destination_path(self, destination: Path) -> Path:
        return destination / self.target


class CommandResult(BaseModel):
    """Outcome of one external process invocation."""

    argv: list[str] = Field(..., min_length=1)
    cwd: Path | None = None
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = Field(default=0.0, ge=0.0)

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.argv)

    def stderr_tail(self, lines: int = 10) -> str:
        """Last lines of stderr (falls back to stdout when stderr is empty)."""

        text = self.stderr.strip() or self.stdout.strip()
        return "\n".join(text.splitlines()[-lines:])


class StageReport(BaseModel):
    """Result of a pipeline stage."""

    stage: Stage
    status: StageStatus
    detail: str = ""
    commands: list[CommandResult] = Field(default_factory=list)
    files: list[Path] = Field(
        default_factory=list,
        description="Destination-relative paths written by the stage.",
    )


class PipelineReport(BaseModel):
    """Aggregate of a pipeline invocation (build, publish or all)."""

    target: str = Field(..., min_length=1)
    destination: Path | None = None
    dry_run: bool = False
    started_at: datetime = Field(default_factory=_utcnow)
    finished_at: datetime | None = None
    stages: list[StageReport] = Field(default_factory=list)
    commit_sha: str | None = Field(
        default=None,
        description="HEAD of the destination after the commit stage (publish only).",
    )

    @property
    def ok(self) -> bool:
        return all(s.status is not StageStatus.FAILED for s in self.stages)

    def stage(self, stage: Stage) -> StageReport | None:
        for report in self.stages:
            if report.stage is stage:
                return report
        return None
