"""Enumerations shared by the pipeline, the adapters and the CLI.

Kept in the domain layer so every layer can import them without creating
circular imports with the adapters.
"""

from __future__ import annotations

from enum import Enum


class Stage(str, Enum):
    """Steps of the publication pipeline, in execution order."""

    BUILD = "build"
    COPY = "copy"
    COMMIT = "commit"
    PUSH = "push"

    def label(self) -> str:
        return self.value.capitalize()


class StageStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"
    PLANNED = "planned"


class ArtifactKind(str, Enum):
    """Where an artifact comes from: the build output or the project root."""

    BUILD = "build"
    STATIC = "static"


class EmptyCommitPolicy(str, Enum):
    """Behavior of publish when the destination has nothing to commit.

    - `skip`: record the commit as skipped and still push.
    - `allow`: create an empty commit.
    - `fail`: abort with a commit failure.
    """

    SKIP = "skip"
    ALLOW = "allow"
    FAIL = "fail"
