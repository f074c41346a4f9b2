from __future__ import annotations

import pytest
from rich.console import Console
from typer.testing import CliRunner

from cli import main as cli_main
from conftest import FakeRunner, make_handler, write_build_outputs

UPSTREAM_ARGS = ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"]


def _doctor_handler(*, upstream: str | None = "origin/main", name: str | None = "Publisher", **kwargs):
    base = make_handler(**kwargs)

    def handler(argv, cwd):
        if argv[1:] == ["--version"]:
            return 0, f"{argv[0]} 1.0.0\n", ""
        args = argv[3:]
        if args == UPSTREAM_ARGS:
            return (0, f"{upstream}\n", "") if upstream else (128, "", "fatal: no upstream configured")
        if args == ["config", "user.name"]:
            return (0, f"{name}\n", "") if name else (1, "", "")
        if args == ["config", "user.email"]:
            return 0, "publisher@example.com\n", ""
        return base(argv, cwd)

    return handler


@pytest.fixture
def doctor(monkeypatch, tmp_path, project_dir, destination_dir):
    """Point `webpub doctor run` at the fixtures and return a runner setter."""

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("WEBPUB_PROJECT_DIR", str(project_dir))
    monkeypatch.setenv("WEBPUB_DESTINATION_DIR", str(destination_dir))
    monkeypatch.setattr("cli.doctor._console", Console(width=200))

    def use(handler) -> FakeRunner:
        fake = FakeRunner(handler)
        monkeypatch.setattr("cli.doctor.SubprocessRunner", lambda: fake)
        return fake

    return use


def test_doctor_reports_ready_working_copy(doctor, project_dir):
    write_build_outputs(project_dir)
    fake = doctor(_doctor_handler())

    result = CliRunner().invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "wasm-pack 1.0.0" in result.output
    assert "origin/main" in result.output
    assert "Publisher <publisher@example.com>" in result.output
    assert "Note:" not in result.output
    # Diagnostics only inspect the working copy.
    assert not {"add", "commit", "push"} & set(fake.git_subcommands())


def test_doctor_flags_missing_upstream_and_identity(doctor):
    doctor(_doctor_handler(upstream=None, name=None))

    result = CliRunner().invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "No upstream branch" in result.output
    assert "user.name/user.email not set" in result.output
    assert "run `webpub build`" in result.output
    assert "Note:" in result.output


def test_doctor_reports_unreadable_status(doctor, project_dir):
    write_build_outputs(project_dir)
    doctor(_doctor_handler(failures={"status": (128, "fatal: index file corrupt")}))

    result = CliRunner().invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "could not inspect working copy" in result.output
    assert "Note:" in result.output


def test_doctor_skips_destination_without_git(doctor):
    def handler(argv, cwd):
        if argv == ["git", "--version"]:
            return 127, "", "git: command not found"
        return 0, "wasm-pack 1.0.0\n", ""

    fake = doctor(handler)

    result = CliRunner().invoke(cli_main.app, ["doctor", "run"])

    assert result.exit_code == 0, result.output
    assert "git unavailable" in result.output
    assert fake.git_subcommands() == []
