"""Copy stage: materialize the artifact set into the destination.

Every source is checked before the first copy, so a missing file aborts the
stage with the destination untouched. Each file is then written to a
temporary sibling and moved into place with `os.replace`, so a reader of
the destination never sees a half-written file. Files copied before a later
failure stay in place.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Sequence

from core.domain.models import Artifact
from core.errors import CopyFailure
from core.services.artifacts import missing_sources

logger = logging.getLogger(__name__)


def check_sources(artifacts: Sequence[Artifact]) -> None:
    missing = missing_sources(artifacts)
    if missing:
        names = ", ".join(str(p) for p in missing)
        raise CopyFailure(f"missing source files: {names}", files=missing)


def _atomic_copy(source: Path, destination: Path) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{destination.name}.", dir=destination.parent)
    os.close(fd)
    tmp_path = Path(tmp_name)
    try:
        shutil.copy2(source, tmp_path)
        os.replace(tmp_path, destination)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def copy_artifacts(artifacts: Sequence[Artifact], destination: Path) -> list[Path]:
    """Copy `artifacts` into `destination` in order; return the written targets."""

    check_sources(artifacts)

    written: list[Path] = []
    for artifact in artifacts:
        target = artifact.destination_path(destination)
        try:
            _atomic_copy(artifact.source, target)
        except OSError as exc:
            raise CopyFailure(
                f"could not copy {artifact.source} to {target}: {exc.strerror or exc}",
                files=[artifact.source],
            ) from exc
        logger.debug("Copied %s -> %s", artifact.source, target)
        written.append(artifact.target)
    return written
