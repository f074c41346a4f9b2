from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest

from core.config import AppSettings
from core.domain.models import CommandResult

STATIC_ASSETS = ("index.html", "style.css", "index.js")
BUILD_OUTPUTS = ("svg_web.js", "svg_web_bg.wasm")

Handler = Callable[[list[str], Optional[Path]], Optional[tuple[int, str, str]]]


class FakeRunner:
    """Records every command; answers through an optional handler."""

    def __init__(self, handler: Handler | None = None) -> None:
        self.calls: list[list[str]] = []
        self.timeouts: list[float | None] = []
        self._handler = handler

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        command = [str(part) for part in argv]
        self.calls.append(command)
        self.timeouts.append(timeout)
        outcome = self._handler(command, cwd) if self._handler else None
        returncode, stdout, stderr = outcome or (0, "", "")
        return CommandResult(
            argv=command,
            cwd=cwd,
            returncode=returncode,
            stdout=stdout,
            stderr=stderr,
        )

    def git_subcommands(self) -> list[str]:
        return [call[3] for call in self.calls if call[:2] == ["git", "-C"]]


def write_build_outputs(project_dir: Path) -> None:
    out_dir = project_dir / "pkg"
    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / "svg_web.js").write_text("// loader\n", encoding="utf-8")
    (out_dir / "svg_web_bg.wasm").write_bytes(b"\x00asm\x01\x00\x00\x00")


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.upper().startswith("WEBPUB_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    (root / "Cargo.toml").write_text('[package]\nname = "svg_web"\n', encoding="utf-8")
    (root / "index.html").write_text("<!doctype html>\n<script src='pkg/svg_web.js'></script>\n", encoding="utf-8")
    (root / "style.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (root / "index.js").write_text("wasm_bindgen('pkg/svg_web_bg.wasm');\n", encoding="utf-8")
    return root


@pytest.fixture
def destination_dir(tmp_path: Path) -> Path:
    root = tmp_path / "destination"
    root.mkdir()
    return root


@pytest.fixture
def settings(project_dir: Path, destination_dir: Path) -> AppSettings:
    return AppSettings(
        _env_file=None,
        project_dir=project_dir,
        destination_dir=destination_dir,
    )


def make_handler(
    *,
    changes: bool = True,
    failures: dict[str, tuple[int, str]] | None = None,
    build_outputs: bool = True,
) -> Handler:
    """Fake answers for wasm-pack and `git -C <repo> ...` commands.

    `failures` maps a git subcommand (or "wasm-pack") to (exit code, stderr).
    """

    failures = failures or {}

    def handler(argv: list[str], cwd: Optional[Path]):
        if argv[0] == "wasm-pack":
            if "wasm-pack" in failures:
                code, stderr = failures["wasm-pack"]
                return code, "", stderr
            if build_outputs and cwd is not None:
                write_build_outputs(cwd)
            return None

        args = argv[3:]
        sub = args[0]
        if sub in failures:
            code, stderr = failures[sub]
            return code, "", stderr
        if args == ["rev-parse", "--is-inside-work-tree"]:
            return 0, "true\n", ""
        if args == ["rev-parse", "HEAD"]:
            return 0, "0123456789abcdef0123456789abcdef01234567\n", ""
        if args == ["rev-parse", "--abbrev-ref", "HEAD"]:
            return 0, "main\n", ""
        if sub == "status":
            return 0, ("M  index.html\n" if changes else ""), ""
        return None

    return handler
