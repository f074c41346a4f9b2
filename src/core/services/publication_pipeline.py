"""Publication pipeline orchestration.

Sequences the external tools behind the three entry points:

- `build`: wasm-pack in release mode, then a check that both outputs exist.
- `publish`: copy the artifact set into the destination working copy,
  commit every change there, push the current branch.
- `all`: `build` only. It never reaches the commit or push stages.

Each invocation is a one-shot linear sequence. The first failure aborts the
remaining stages and propagates; nothing is rolled back. UI concerns
(progress, warnings) go through `PipelineHooks` so the core prints nothing.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator

from adapters.file_copier import check_sources, copy_artifacts
from adapters.git_client import GitClient
from adapters.process_runner import SubprocessRunner
from adapters.wasm_pack import WasmPackBuilder
from core.config import AppSettings
from core.domain.models import PipelineReport, StageReport
from core.domain.policies import EmptyCommitPolicy, Stage, StageStatus
from core.errors import (
    CommitFailure,
    ConfigurationError,
    DestinationError,
    PublishError,
    StageFailure,
)
from core.interfaces.runner import CommandRunner
from core.services.artifacts import expected_build_outputs, resolve_artifact_set

logger = logging.getLogger(__name__)


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (progress, warnings)."""

    stage_started: Callable[[Stage], None] | None = None
    stage_finished: Callable[[StageReport], None] | None = None
    warning: Callable[[str], None] | None = None


class PublicationPipeline:
    """Build and publish entry points over a shared configuration."""

    def __init__(
        self,
        settings: AppSettings,
        runner: CommandRunner | None = None,
        hooks: PipelineHooks | None = None,
    ) -> None:
        self._settings = settings
        self._runner = runner or SubprocessRunner(settings.command_timeout_seconds)
        self._hooks = hooks or PipelineHooks()
        self.last_report: PipelineReport | None = None

    @property
    def settings(self) -> AppSettings:
        return self._settings

    # Entry points

    def build(self) -> PipelineReport:
        return self._run_build(target="build")

    def all(self) -> PipelineReport:
        """Aggregate target: builds, never publishes."""

        return self._run_build(target="all")

    def publish(self, *, dry_run: bool = False) -> PipelineReport:
        destination = self._require_destination()
        git = self.git_client(destination)
        if not git.is_work_tree():
            raise DestinationError(f"destination is not a git working copy: {destination}")

        report = self._new_report("publish", destination=destination, dry_run=dry_run)
        artifacts = resolve_artifact_set(self._settings)
        message = self._settings.commit_message

        with self._stage(report, Stage.COPY) as stage:
            if dry_run:
                check_sources(artifacts)
                stage.status = StageStatus.PLANNED
                stage.files = [a.target for a in artifacts]
                stage.detail = f"would copy {len(artifacts)} files into {destination}"
            else:
                stage.files = copy_artifacts(artifacts, destination)
                stage.detail = f"copied {len(stage.files)} files into {destination}"

        with self._stage(report, Stage.COMMIT) as stage:
            if dry_run:
                stage.status = StageStatus.PLANNED
                stage.detail = " && ".join(
                    [
                        " ".join(git.command("add", "--all")),
                        " ".join(git.command("commit", "-m", message)),
                    ]
                )
            else:
                self._commit(git, stage, message)
                report.commit_sha = git.head_sha()

        with self._stage(report, Stage.PUSH) as stage:
            if dry_run:
                stage.status = StageStatus.PLANNED
                stage.detail = " ".join(git.command("push"))
            else:
                result = git.push()
                stage.commands.append(result)
                stage.detail = f"pushed {git.current_branch() or 'HEAD'}"

        return self._finish(report)

    # Helpers

    def git_client(self, destination: Path) -> GitClient:
        return GitClient(
            self._runner,
            destination,
            git_bin=self._settings.git_bin,
            timeout=self._settings.command_timeout_seconds,
        )

    def _run_build(self, *, target: str) -> PipelineReport:
        report = self._new_report(target)
        builder = WasmPackBuilder(self._settings, self._runner)
        with self._stage(report, Stage.BUILD) as stage:
            result = builder.build()
            stage.commands.append(result)
            stage.files = [
                Path(self._settings.out_dir_name) / p.name
                for p in expected_build_outputs(self._settings)
            ]
            stage.detail = f"built {self._settings.crate_name} in {result.duration_seconds:.1f}s"
        return self._finish(report)

    def _commit(self, git: GitClient, stage: StageReport, message: str) -> None:
        stage.commands.append(git.stage_all())

        allow_empty = False
        if not git.has_changes():
            policy = self._settings.empty_commit_policy
            if policy is EmptyCommitPolicy.FAIL:
                raise CommitFailure(f"nothing to commit in {git.repo}")
            if policy is EmptyCommitPolicy.SKIP:
                warning = f"nothing to commit in {git.repo}; skipping commit"
                logger.warning(warning)
                if self._hooks.warning:
                    self._hooks.warning(warning)
                stage.status = StageStatus.SKIPPED
                stage.detail = "nothing to commit"
                return
            allow_empty = True

        stage.commands.append(git.commit(message, allow_empty=allow_empty))
        stage.detail = f"committed {message!r}"

    def _require_destination(self) -> Path:
        destination = self._settings.destination_dir
        if destination is None:
            raise ConfigurationError(
                "no destination configured; pass --destination or set WEBPUB_DESTINATION_DIR"
            )
        if not destination.is_dir():
            raise DestinationError(f"destination does not exist: {destination}")
        return destination

    def _new_report(
        self,
        target: str,
        *,
        destination: Path | None = None,
        dry_run: bool = False,
    ) -> PipelineReport:
        report = PipelineReport(target=target, destination=destination, dry_run=dry_run)
        self.last_report = report
        logger.debug("Starting %s", target)
        return report

    def _finish(self, report: PipelineReport) -> PipelineReport:
        report.finished_at = datetime.now(timezone.utc)
        return report

    @contextmanager
    def _stage(self, report: PipelineReport, stage: Stage) -> Iterator[StageReport]:
        logger.info("%s...", stage.label())
        if self._hooks.stage_started:
            self._hooks.stage_started(stage)

        stage_report = StageReport(stage=stage, status=StageStatus.OK)
        report.stages.append(stage_report)
        try:
            yield stage_report
        except PublishError as exc:
            if exc.stage is None:
                exc.stage = stage
            stage_report.status = StageStatus.FAILED
            stage_report.detail = str(exc)
            if isinstance(exc, StageFailure) and exc.result is not None:
                stage_report.commands.append(exc.result)
            self._finish(report)
            if self._hooks.stage_finished:
                self._hooks.stage_finished(stage_report)
            raise

        if self._hooks.stage_finished:
            self._hooks.stage_finished(stage_report)

