"""Run webpub from a source checkout.

`python main.py publish --dry-run` behaves like the installed `webpub`
script; `src/` is put on `sys.path` first so no editable install is needed.
"""

from __future__ import annotations

import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"


def main() -> None:
    if str(SRC_DIR) not in sys.path:
        sys.path.insert(0, str(SRC_DIR))

    # Tool stderr is relayed verbatim; cp1252 consoles cannot encode all of it.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")

    from cli.main import app  # noqa: PLC0415

    app(prog_name="webpub")


if __name__ == "__main__":
    main()
