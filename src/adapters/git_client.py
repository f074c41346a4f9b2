"""Git wrapper for the destination working copy.

All commands run as `git -C <repo> ...` through a `CommandRunner`. Query
helpers return None or False instead of raising, except `has_changes`,
whose answer decides whether to commit. The stage operations (`stage_all`,
`commit`, `push`) raise the matching stage failure.
"""

from __future__ import annotations

import logging
from pathlib import Path

from core.domain.models import CommandResult
from core.domain.policies import Stage
from core.errors import CommitFailure, PushFailure, ToolNotFoundError
from core.interfaces.runner import CommandRunner

logger = logging.getLogger(__name__)


class GitClient:
    """Runs git against one working copy."""

    def __init__(
        self,
        runner: CommandRunner,
        repo: Path,
        *,
        git_bin: str = "git",
        timeout: float | None = None,
    ) -> None:
        self._runner = runner
        self._repo = repo
        self._git_bin = git_bin
        self._timeout = timeout

    @property
    def repo(self) -> Path:
        return self._repo

    def command(self, *args: str) -> list[str]:
        return [self._git_bin, "-C", str(self._repo), *args]

    def _run(self, *args: str, stage: Stage | None = None) -> CommandResult:
        try:
            return self._runner.run(self.command(*args), timeout=self._timeout)
        except ToolNotFoundError as exc:
            exc.stage = stage
            raise

    def _query(self, *args: str) -> str | None:
        result = self._run(*args)
        if not result.ok:
            return None
        value = result.stdout.strip()
        return value or None

    # Inspection

    def is_work_tree(self) -> bool:
        return self._query("rev-parse", "--is-inside-work-tree") == "true"

    def has_changes(self) -> bool:
        """True when `git status --porcelain` reports anything.

        A failing status is a commit failure, never "clean".
        """

        result = self._run("status", "--porcelain", stage=Stage.COMMIT)
        if not result.ok:
            raise CommitFailure("could not inspect working copy", result=result)
        return bool(result.stdout.strip())

    def head_sha(self) -> str | None:
        return self._query("rev-parse", "HEAD")

    def current_branch(self) -> str | None:
        branch = self._query("rev-parse", "--abbrev-ref", "HEAD")
        if branch == "HEAD":
            return None
        return branch

    def upstream(self) -> str | None:
        return self._query("rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}")

    def identity(self) -> tuple[str | None, str | None]:
        return self._query("config", "user.name"), self._query("config", "user.email")

    # Stage operations

    def stage_all(self) -> CommandResult:
        result = self._run("add", "--all", stage=Stage.COMMIT)
        if not result.ok:
            raise CommitFailure("could not stage changes", result=result)
        return result

    def commit(self, message: str, *, allow_empty: bool = False) -> CommandResult:
        args = ["commit", "-m", message]
        if allow_empty:
            args.append("--allow-empty")
        result = self._run(*args, stage=Stage.COMMIT)
        if not result.ok:
            raise CommitFailure("commit failed", result=result)
        logger.info("Committed %r in %s", message, self._repo)
        return result

    def push(self) -> CommandResult:
        result = self._run("push", stage=Stage.PUSH)
        if not result.ok:
            raise PushFailure("push failed", result=result)
        logger.info("Pushed %s", self._repo)
        return result
