"""Error taxonomy of the publication pipeline.

One class per stage so callers (and the CLI exit-code mapping) can tell
which step failed without parsing messages.
"""

from __future__ import annotations

from pathlib import Path

from core.domain.models import CommandResult
from core.domain.policies import Stage


class PublishError(RuntimeError):
    """Base error for the pipeline."""

    stage: Stage | None = None

    def __init__(self, message: str, *, stage: Stage | None = None) -> None:
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class ConfigurationError(PublishError):
    """Raised when a required setting is missing or invalid."""


class DestinationError(PublishError):
    """Raised when the destination is missing or not a working copy."""


class ToolNotFoundError(PublishError):
    """Raised when an external executable is missing from ``PATH`` or cannot be executed."""

    def __init__(
        self,
        tool: str,
        *,
        reason: str = "is not available on PATH",
        stage: Stage | None = None,
    ) -> None:
        super().__init__(f"{tool} {reason}", stage=stage)
        self.tool = tool


class CommandTimeoutError(PublishError):
    """Raised when an external command exceeds the configured timeout."""

    def __init__(self, argv: list[str], timeout: float, *, stage: Stage | None = None) -> None:
        super().__init__(
            f"{' '.join(argv)} did not finish within {timeout:g}s",
            stage=stage,
        )
        self.argv = argv
        self.timeout = timeout


class StageFailure(PublishError):
    """A stage failed; carries the failing command when there is one."""

    def __init__(
        self,
        message: str,
        *,
        result: CommandResult | None = None,
        files: list[Path] | None = None,
    ) -> None:
        if result is not None:
            tail = result.stderr_tail()
            message = f"{message}: `{result.command_line}` exited with {result.returncode}"
            if tail:
                message = f"{message}\n{tail}"
        super().__init__(message)
        self.result = result
        self.files = list(files or [])

    @property
    def exit_code(self) -> int:
        if self.result is not None and self.result.returncode > 0:
            return self.result.returncode
        return 1


class BuildFailure(StageFailure):
    stage = Stage.BUILD


class CopyFailure(StageFailure):
    stage = Stage.COPY


class CommitFailure(StageFailure):
    stage = Stage.COMMIT


class PushFailure(StageFailure):
    stage = Stage.PUSH


__all__ = [
    "BuildFailure",
    "CommandTimeoutError",
    "CommitFailure",
    "ConfigurationError",
    "CopyFailure",
    "DestinationError",
    "PublishError",
    "PushFailure",
    "StageFailure",
    "ToolNotFoundError",
]
