# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Publish a transformed archive by replacing the original or attaching it."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .archive import DESCRIPTOR_FILENAME, TransformResult
from .config.models import DEFAULT_CLASSIFIER
from .console import info
from .errors import OutputError, PublicationError

ARTIFACT_TYPE: Final[str] = "jar"
ARTIFACT_LEDGER: Final[str] = "artifacts.json"


@dataclass(frozen=True, slots=True)
class AttachedArtifact:
    """Secondary build output registered under a classifier."""

    artifact_type: str
    classifier: str
    path: Path


@dataclass(slots=True)
class ArtifactRegistry:
    """Collect secondary artifacts produced during one invocation."""

    artifacts: list[AttachedArtifact] = field(default_factory=list)

    def attach(self, artifact_type: str, classifier: str, path: Path) -> AttachedArtifact:
        """Register ``path`` as an artifact of ``artifact_type`` under ``classifier``."""

        artifact = AttachedArtifact(artifact_type=artifact_type, classifier=classifier, path=path)
        self.artifacts.append(artifact)
        return artifact

    def write_ledger(self, directory: Path) -> Path:
        """Write the attached artifacts to ``artifacts.json`` in ``directory``.

        Existing entries for other classifiers are kept so the calling build
        can collect every secondary output from one file.

        Raises:
            OutputError: If the ledger cannot be read or written.
        """

        ledger = directory / ARTIFACT_LEDGER
        try:
            existing = json.loads(ledger.read_text(encoding="utf-8")) if ledger.is_file() else []
        except (OSError, ValueError) as exc:
            raise OutputError(f"Could not read artifact ledger {ledger}: {exc}") from exc
        if not isinstance(existing, list):
            existing = []
        records = {
            (entry["type"], entry["classifier"]): entry
            for entry in existing
            if isinstance(entry, dict) and "type" in entry and "classifier" in entry
        }
        for artifact in self.artifacts:
            records[(artifact.artifact_type, artifact.classifier)] = {
                "type": artifact.artifact_type,
                "classifier": artifact.classifier,
                "path": str(artifact.path),
            }
        try:
            ledger.write_text(json.dumps(list(records.values()), indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise OutputError(f"Could not write artifact ledger {ledger}: {exc}") from exc
        return ledger


@dataclass(frozen=True, slots=True)
class PublicationResult:
    """Where the transformed archive ended up."""

    path: Path
    replaced: bool
    artifact: AttachedArtifact | None = None


def effective_classifier(classifier: str | None) -> str:
    """Return ``classifier`` or the default when it is ``None`` or blank."""

    if classifier is None or not classifier.strip():
        return DEFAULT_CLASSIFIER
    return classifier.strip()


def publish(
    result: TransformResult,
    *,
    source: Path,
    replace: bool,
    classifier: str | None,
    registry: ArtifactRegistry,
    use_emoji: bool = True,
) -> PublicationResult:
    """Swap the transformed archive over ``source`` or attach it.

    Args:
        result: Outcome of :func:`modulemaker.archive.transform`.
        source: Original archive that is replaced when ``replace`` is set.
        replace: Replace ``source`` instead of attaching a secondary artifact.
        classifier: Artifact classifier; blank values use ``modularized``.
        registry: Registry receiving the attached artifact.
        use_emoji: Emoji preference for console output.

    Returns:
        PublicationResult: Final archive location.

    Raises:
        PublicationError: If deleting ``source`` or renaming the transformed
            archive fails. The transformed archive is left on disk.
    """

    if replace:
        try:
            source.unlink()
            result.output.rename(source)
        except OSError as exc:
            raise PublicationError(f"Could not replace source jar: {source}") from exc
        info(f"Injected {DESCRIPTOR_FILENAME} into {source}", use_emoji=use_emoji)
        return PublicationResult(path=source, replaced=True)

    artifact = registry.attach(ARTIFACT_TYPE, effective_classifier(classifier), result.output)
    info(f"Attached artifact with {DESCRIPTOR_FILENAME} as {result.output}", use_emoji=use_emoji)
    return PublicationResult(path=result.output, replaced=False, artifact=artifact)


__all__ = [
    "ARTIFACT_LEDGER",
    "ArtifactRegistry",
    "AttachedArtifact",
    "PublicationResult",
    "effective_classifier",
    "publish",
]
