"""Doctor command for environment diagnostics."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from adapters.git_client import GitClient
from adapters.process_runner import SubprocessRunner
from core.config import AppSettings, get_user_env_file
from core.domain.policies import ArtifactKind
from core.errors import PublishError
from core.services.artifacts import resolve_artifact_set

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_version(runner: SubprocessRunner, binary: str) -> tuple[bool, str]:
    try:
        result = runner.run([binary, "--version"], timeout=10)
    except PublishError as exc:
        return False, str(exc)
    if not result.ok:
        return False, result.stderr_tail(1) or f"exit {result.returncode}"
    return True, result.stdout.strip().splitlines()[0] if result.stdout.strip() else "OK"


def _check_destination(settings: AppSettings, runner: SubprocessRunner, table: Table) -> bool:
    destination = settings.destination_dir
    if destination is None:
        table.add_row("Destination", "FAIL", "Not configured -> run `webpub setup` or set WEBPUB_DESTINATION_DIR")
        return False
    if not destination.is_dir():
        table.add_row("Destination", "FAIL", f"{destination} does not exist")
        return False
    table.add_row("Destination", "OK", str(destination))

    git = GitClient(runner, destination, git_bin=settings.git_bin, timeout=10)
    try:
        if not git.is_work_tree():
            table.add_row("Working copy", "FAIL", "Not a git working copy")
            return False
        table.add_row("Working copy", "OK", git.current_branch() or "detached HEAD")

        upstream = git.upstream()
        table.add_row(
            "Upstream",
            "OK" if upstream else "FAIL",
            upstream or "No upstream branch -> `git push` will be rejected",
        )
        name, email = git.identity()
        table.add_row(
            "Commit identity",
            "OK" if name and email else "FAIL",
            f"{name} <{email}>" if name and email else "user.name/user.email not set",
        )
        table.add_row(
            "Pending changes",
            "INFO",
            "yes" if git.has_changes() else "clean",
        )
    except PublishError as exc:
        table.add_row("Working copy", "FAIL", str(exc))
        return False
    return upstream is not None and bool(name and email)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()
    runner = SubprocessRunner()

    table = Table(title="webpub doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Tools
    ok_wasm, detail_wasm = _check_version(runner, settings.wasm_pack_bin)
    table.add_row("wasm-pack", "OK" if ok_wasm else "FAIL", detail_wasm)
    ok_git, detail_git = _check_version(runner, settings.git_bin)
    table.add_row("git", "OK" if ok_git else "FAIL", detail_git)

    # Project
    project_dir = settings.project_dir
    has_manifest = (project_dir / "Cargo.toml").is_file()
    table.add_row(
        "Project",
        "OK" if has_manifest else "FAIL",
        str(project_dir.resolve()) if has_manifest else f"No Cargo.toml in {project_dir}",
    )

    artifacts = resolve_artifact_set(settings)
    for kind in (ArtifactKind.BUILD, ArtifactKind.STATIC):
        group = [a for a in artifacts if a.kind is kind]
        missing = [a.source.name for a in group if not a.source.is_file()]
        hint = " -> run `webpub build`" if kind is ArtifactKind.BUILD else ""
        table.add_row(
            f"{kind.value.capitalize()} files",
            "MISSING" if missing else "OK",
            (", ".join(missing) + hint) if missing else f"{len(group)} present",
        )

    # Destination
    if ok_git:
        ok_dest = _check_destination(settings, runner, table)
    else:
        table.add_row("Destination", "SKIPPED", "git unavailable")
        ok_dest = False

    table.add_row("User config", "INFO", str(get_user_env_file()))

    _console.print(table)

    if not ok_dest:
        _console.print(
            "\n[yellow]Note:[/yellow] `webpub publish` needs a configured working copy with an upstream and a commit identity."
        )
