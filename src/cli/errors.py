"""CLI error handling: pipeline errors to rich messages and exit codes."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from core.errors import (
    CommandTimeoutError,
    ConfigurationError,
    DestinationError,
    PublishError,
    StageFailure,
    ToolNotFoundError,
)

# Usage/configuration problems, as opposed to a tool failing.
EXIT_CONFIG = 2

console = Console(stderr=True)


def _stage_label(exc: Exception) -> str:
    stage = getattr(exc, "stage", None)
    return stage.label() if stage is not None else "Pipeline"


@contextmanager
def handle_cli_errors(*, debug: bool = False) -> Generator[None, None, None]:
    """Turn pipeline errors into a readable message and a process exit code.

    Args:
        debug: If True, re-raise so the full traceback is shown.

    """
    try:
        yield
    except (KeyboardInterrupt, SystemExit, typer.Exit):
        raise
    except ValidationError as e:
        if debug:
            raise
        console.print(f"[bold red]Invalid configuration:[/bold red] {escape(str(e))}")
        raise typer.Exit(EXIT_CONFIG) from e
    except ConfigurationError as e:
        if debug:
            raise
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        raise typer.Exit(EXIT_CONFIG) from e
    except DestinationError as e:
        if debug:
            raise
        console.print(f"[bold red]Destination error:[/bold red] {escape(str(e))}")
        raise typer.Exit(EXIT_CONFIG) from e
    except ToolNotFoundError as e:
        if debug:
            raise
        console.print(f"[bold red]{_stage_label(e)} failed:[/bold red] {escape(str(e))}")
        console.print("Install it or point webpub at it with WEBPUB_WASM_PACK_BIN / WEBPUB_GIT_BIN.")
        raise typer.Exit(EXIT_CONFIG) from e
    except CommandTimeoutError as e:
        if debug:
            raise
        console.print(f"[bold red]{_stage_label(e)} timed out:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except StageFailure as e:
        if debug:
            raise
        console.print(f"[bold red]{_stage_label(e)} failed:[/bold red] {escape(str(e))}")
        raise typer.Exit(e.exit_code) from e
    except PublishError as e:
        if debug:
            raise
        console.print(f"[bold red]{_stage_label(e)} failed:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e
