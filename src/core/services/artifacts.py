"""Artifact-set resolution.

The artifact set is fixed by configuration: the two wasm-pack outputs go to
`<destination>/<out_dir>/`, the static assets to the destination root.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from core.config import AppSettings
from core.domain.models import Artifact
from core.domain.policies import ArtifactKind


def build_artifact_names(crate_name: str) -> tuple[str, str]:
    """File names wasm-pack writes for a crate: the loader and the payload."""

    return f"{crate_name}.js", f"{crate_name}_bg.wasm"


def expected_build_outputs(settings: AppSettings) -> list[Path]:
    out_dir = settings.build_output_dir
    return [out_dir / name for name in build_artifact_names(settings.crate_name)]


def resolve_artifact_set(settings: AppSettings) -> list[Artifact]:
    """Ordered artifact set: build outputs first, then static assets."""

    artifacts: list[Artifact] = []
    for source in expected_build_outputs(settings):
        artifacts.append(
            Artifact(
                source=source,
                target=Path(settings.out_dir_name) / source.name,
                kind=ArtifactKind.BUILD,
            )
        )
    for name in settings.static_assets:
        artifacts.append(
            Artifact(
                source=settings.project_dir / name,
                target=Path(name),
                kind=ArtifactKind.STATIC,
            )
        )
    return artifacts


def missing_sources(artifacts: Iterable[Artifact]) -> list[Path]:
    return [a.source for a in artifacts if not a.source.is_file()]
