"""Build stage: wasm-pack invocation."""

from __future__ import annotations

import logging

from core.config import AppSettings
from core.domain.models import CommandResult
from core.domain.policies import Stage
from core.errors import BuildFailure, ConfigurationError, ToolNotFoundError
from core.interfaces.runner import CommandRunner
from core.services.artifacts import expected_build_outputs

logger = logging.getLogger(__name__)


class WasmPackBuilder:
    """Compile the crate with wasm-pack and check its outputs."""

    def __init__(self, settings: AppSettings, runner: CommandRunner) -> None:
        self._settings = settings
        self._runner = runner

    def command(self) -> list[str]:
        settings = self._settings
        argv = [settings.wasm_pack_bin, "build", "-t", settings.build_target]
        if settings.release:
            argv.append("--release")
        if settings.out_dir_name != "pkg":
            argv.extend(["--out-dir", settings.out_dir_name])
        return argv

    def build(self) -> CommandResult:
        """Run the build; raise `BuildFailure` on non-zero exit or missing outputs."""

        project_dir = self._settings.project_dir
        if not project_dir.is_dir():
            raise ConfigurationError(
                f"project directory does not exist: {project_dir}",
                stage=Stage.BUILD,
            )

        logger.info("Building %s (%s)", self._settings.crate_name, self._settings.build_target)
        try:
            result = self._runner.run(
                self.command(),
                cwd=project_dir,
                timeout=self._settings.command_timeout_seconds,
            )
        except ToolNotFoundError as exc:
            exc.stage = Stage.BUILD
            raise
        if not result.ok:
            raise BuildFailure("wasm-pack build failed", result=result)

        missing = [p for p in expected_build_outputs(self._settings) if not p.is_file()]
        if missing:
            names = ", ".join(str(p) for p in missing)
            raise BuildFailure(f"wasm-pack succeeded but did not produce: {names}", files=missing)
        return result
