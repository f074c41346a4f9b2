"""Contract for running external processes.

The pipeline shells out to wasm-pack and git; everything it needs from the
operating system goes through this Protocol, so tests can swap in a
recording fake without touching `subprocess`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import CommandResult


@runtime_checkable
class CommandRunner(Protocol):
    """Minimal contract for an external-process runner.

    Design rules:
    - `run` blocks until the process exits (or the timeout elapses).
    - A non-zero exit is *not* an exception: callers inspect the result.
    - A missing or non-executable program raises `ToolNotFoundError`; a
      timeout raises `CommandTimeoutError`; any other OS error starting the
      process raises `PublishError`.
    """

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        ...
