# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""End-to-end goals: write a descriptor file or inject it into an archive."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .archive import DESCRIPTOR_FILENAME, TransformResult, descriptor_entry_name, transform
from .config.models import MINIMUM_JAVA_VERSION, ModuleConfig, ModuleMakerConfig
from .console import ok
from .declaration import ModuleDeclaration, build_declaration
from .descriptor import encode
from .errors import ConfigurationError, OutputError
from .publication import ArtifactRegistry, PublicationResult, effective_classifier, publish
from .timestamps import (
    ResolvedTimestamp,
    TimestampCapability,
    resolve_output_timestamp,
    select_stamper,
)


@dataclass(frozen=True, slots=True)
class InjectionOutcome:
    """Summary of an ``inject-module`` run."""

    declaration: ModuleDeclaration
    timestamp: ResolvedTimestamp
    transform: TransformResult
    publication: PublicationResult


def check_java_version(java_version: int) -> None:
    """Reject Java releases that cannot load module descriptors.

    Raises:
        ConfigurationError: If ``java_version`` is below 9.
    """

    if java_version < MINIMUM_JAVA_VERSION:
        raise ConfigurationError(f"Invalid Java version for module-info: {java_version}")


def build_descriptor(config: ModuleConfig) -> tuple[ModuleDeclaration, bytes]:
    """Validate ``config`` and encode the resulting declaration."""

    check_java_version(config.java_version)
    declaration = build_declaration(config)
    return declaration, encode(declaration)


def make_module(
    config: ModuleMakerConfig,
    *,
    output_directory: Path | None = None,
    use_emoji: bool = True,
) -> Path:
    """Write ``module-info.class`` below the class output directory.

    Args:
        config: Loaded configuration.
        output_directory: Override for ``build.output_directory``.
        use_emoji: Emoji preference for console output.

    Returns:
        Path: Location of the written descriptor.

    Raises:
        ConfigurationError: If the declaration is invalid.
        DuplicateDeclarationError: If a category repeats an identifier.
        OutputError: If the directory or file cannot be written.
    """

    declaration, data = build_descriptor(config.module)
    directory = output_directory or config.build.output_directory
    target = directory / descriptor_entry_name(declaration.java_version, declaration.multirelease)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputError(f"Could not read or create module directory: {target.parent}") from exc
    try:
        target.write_bytes(data)
    except OSError as exc:
        raise OutputError(f"Cannot write to {directory}") from exc
    ok(f"Added {DESCRIPTOR_FILENAME} to {directory}", use_emoji=use_emoji)
    return target


def resolve_archive_paths(config: ModuleMakerConfig) -> tuple[Path, Path]:
    """Return the source archive and the transformed archive locations.

    The source defaults to ``<directory>/<final_name>.jar``; the output is
    always ``<directory>/<final_name>-<classifier>.jar``.

    Raises:
        ConfigurationError: If neither a final name nor a source archive is set.
    """

    build = config.build
    source = config.inject.source
    final_name = build.final_name or (source.stem if source is not None else None)
    if not final_name:
        raise ConfigurationError("Either build.final_name or inject.source must be configured")
    if source is None:
        source = build.directory / f"{final_name}.jar"
    classifier = effective_classifier(config.inject.classifier)
    return source, build.directory / f"{final_name}-{classifier}.jar"


def inject_module(
    config: ModuleMakerConfig,
    *,
    registry: ArtifactRegistry | None = None,
    capability: TimestampCapability | None = None,
    use_emoji: bool = True,
) -> InjectionOutcome:
    """Inject ``module-info.class`` into the configured archive and publish it.

    Args:
        config: Loaded configuration.
        registry: Registry receiving attached artifacts; a fresh one by default.
        capability: Timestamp capability; detected when ``None``.
        use_emoji: Emoji preference for console output.

    Returns:
        InjectionOutcome: Declaration, timestamp, transform and publication
        results.

    Raises:
        ConfigurationError: If configuration is invalid.
        DuplicateDeclarationError: If a category repeats an identifier.
        ArchiveError: If the archive cannot be read or written.
        PublicationError: If the original archive cannot be replaced.
        OutputError: If the artifact ledger cannot be written.
    """

    declaration, data = build_descriptor(config.module)
    source, target = resolve_archive_paths(config)
    inject = config.inject
    timestamp = resolve_output_timestamp(inject.output_timestamp)
    if not inject.extended_timestamps:
        capability = TimestampCapability.BASIC
    result = transform(
        source,
        target,
        data,
        entry_name=descriptor_entry_name(declaration.java_version, declaration.multirelease),
        multirelease=declaration.multirelease,
        create_directory_markers=inject.create_multirelease_folder_entry,
        stamper=select_stamper(timestamp, capability),
        use_emoji=use_emoji,
    )
    registry = registry if registry is not None else ArtifactRegistry()
    publication = publish(
        result,
        source=source,
        replace=inject.replace,
        classifier=inject.classifier,
        registry=registry,
        use_emoji=use_emoji,
    )
    if publication.artifact is not None:
        registry.write_ledger(target.parent)
    return InjectionOutcome(
        declaration=declaration,
        timestamp=timestamp,
        transform=result,
        publication=publication,
    )


__all__ = [
    "InjectionOutcome",
    "build_descriptor",
    "check_java_version",
    "inject_module",
    "make_module",
    "resolve_archive_paths",
]
