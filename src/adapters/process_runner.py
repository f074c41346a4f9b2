"""Blocking subprocess runner.

Standardizes how external tools are invoked: captured text output, optional
timeout, and debug logging of every command line.
"""

from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path
from typing import Sequence

from core.domain.models import CommandResult
from core.errors import CommandTimeoutError, PublishError, ToolNotFoundError
from core.interfaces.runner import CommandRunner

logger = logging.getLogger(__name__)


class SubprocessRunner(CommandRunner):
    """Runs commands with `subprocess.run` and returns a `CommandResult`."""

    def __init__(self, default_timeout: float | None = None) -> None:
        self._default_timeout = default_timeout

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        command = [str(part) for part in argv]
        effective_timeout = timeout if timeout is not None else self._default_timeout
        logger.debug("Running %s (cwd=%s)", " ".join(command), cwd or ".")

        started = time.monotonic()
        try:
            completed = subprocess.run(
                command,
                cwd=str(cwd) if cwd is not None else None,
                capture_output=True,
                text=True,
                check=False,
                timeout=effective_timeout,
            )
        except FileNotFoundError as exc:
            raise ToolNotFoundError(command[0]) from exc
        except PermissionError as exc:
            raise ToolNotFoundError(command[0], reason="is not executable") from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandTimeoutError(command, effective_timeout or 0.0) from exc
        except OSError as exc:
            raise PublishError(f"could not run {' '.join(command)}: {exc}") from exc

        result = CommandResult(
            argv=command,
            cwd=cwd,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            duration_seconds=time.monotonic() - started,
        )
        logger.debug(
            "%s exited with %s after %.2fs",
            command[0],
            result.returncode,
            result.duration_seconds,
        )
        return result
