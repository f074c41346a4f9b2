"""Core configuration.

Centralizes environment variables (pydantic-settings) so the CLI and the
adapters read the same contract. The destination path used to be a
constant baked into the build file; here it is a setting that can come from
the environment, a `.env` file, or a CLI flag.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.policies import EmptyCommitPolicy


ENV_PREFIX = "WEBPUB_"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "webpub"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "webpub"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "webpub"
    return Path.home() / ".config" / "webpub"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Write or update variables in the user's global .env."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# webpub user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Settings for the publication pipeline.

    Sources, in order of precedence: init kwargs (CLI flags), `WEBPUB_*`
    environment variables, `./.env`, then the user config `.env`.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    destination_dir: Path | None = Field(
        default=None,
        description="Working copy that receives the published files.",
    )
    project_dir: Path = Field(
        default=Path("."),
        description="Directory holding the crate and the static assets.",
    )
    out_dir_name: str = Field(
        default="pkg",
        min_length=1,
        description="wasm-pack output directory, also the artifact subdirectory in the destination.",
    )
    crate_name: str = Field(
        default="svg_web",
        min_length=1,
        description="Crate name; build artifacts are <crate>.js and <crate>_bg.wasm.",
    )
    static_assets: list[str] = Field(
        default_factory=lambda: ["index.html", "style.css", "index.js"],
        description="Files copied from the project root into the destination root.",
    )

    build_target: str = Field(
        default="no-modules",
        min_length=1,
        description="wasm-pack --target value.",
    )
    release: bool = Field(
        default=True,
        description="Build in release mode.",
    )
    wasm_pack_bin: str = Field(default="wasm-pack", min_length=1)
    git_bin: str = Field(default="git", min_length=1)

    commit_message: str = Field(
        default="update",
        min_length=1,
        description="Literal commit message used by publish.",
    )
    command_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout per external command (seconds). None blocks until the tool exits.",
    )
    empty_commit_policy: EmptyCommitPolicy = Field(
        default=EmptyCommitPolicy.SKIP,
        description="What publish does when the working copy has nothing to commit.",
    )

    @property
    def build_output_dir(self) -> Path:
        return self.project_dir / self.out_dir_name
