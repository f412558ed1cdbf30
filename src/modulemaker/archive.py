# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rewrite a JAR archive entry by entry while injecting a module descriptor."""

from __future__ import annotations

import copy
import logging
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .console import warn
from .errors import ArchiveError
from .timestamps import EntryStamper

LOGGER = logging.getLogger(__name__)

DESCRIPTOR_FILENAME: Final[str] = "module-info.class"
META_INF_DIRECTORY: Final[str] = "META-INF/"
MANIFEST_NAME: Final[str] = "META-INF/MANIFEST.MF"
VERSIONS_DIRECTORY: Final[str] = "META-INF/versions/"
_HEADER_NAMES: Final[frozenset[str]] = frozenset({META_INF_DIRECTORY.upper(), MANIFEST_NAME.upper()})


@dataclass(frozen=True, slots=True)
class TransformResult:
    """Outcome of rewriting an archive.

    Attributes:
        output: Path of the rewritten archive.
        had_preexisting: ``True`` when the source already held a descriptor at
            the target entry name, which was discarded.
        created_directories: Synthetic directory entries added to the output.
    """

    output: Path
    had_preexisting: bool = False
    created_directories: tuple[str, ...] = ()


def descriptor_entry_name(java_version: int, multirelease: bool) -> str:
    """Return the archive path of the descriptor for ``java_version``."""

    if multirelease:
        return f"{VERSIONS_DIRECTORY}{java_version}/{DESCRIPTOR_FILENAME}"
    return DESCRIPTOR_FILENAME


def ancestor_directories(entry_name: str) -> tuple[str, ...]:
    """Return the directory entries leading to ``entry_name``, parent first.

    Example:
        ``META-INF/versions/17/module-info.class`` yields ``META-INF/``,
        ``META-INF/versions/`` and ``META-INF/versions/17/``.
    """

    parts = entry_name.split("/")[:-1]
    return tuple("/".join(parts[: depth + 1]) + "/" for depth in range(len(parts)))


def _is_header_entry(name: str) -> bool:
    return name.upper() in _HEADER_NAMES


def transform(
    source: Path,
    target: Path,
    descriptor: bytes,
    *,
    entry_name: str,
    multirelease: bool,
    create_directory_markers: bool,
    stamper: EntryStamper,
    use_emoji: bool = True,
) -> TransformResult:
    """Copy ``source`` into ``target`` and add ``descriptor`` at ``entry_name``.

    Header records (``META-INF/`` and the manifest) are written first, the
    manifest restamped through ``stamper``. Every other entry is copied with
    its original metadata except a pre-existing entry at ``entry_name``,
    which is dropped with a warning. The descriptor is appended after all
    copied entries, followed by any missing ancestor directories of a
    multi-release descriptor.

    Args:
        source: Existing archive to read.
        target: Archive to create or truncate.
        descriptor: Encoded ``module-info.class`` bytes.
        entry_name: Archive path for the descriptor.
        multirelease: ``True`` when the descriptor lives below ``META-INF/versions``.
        create_directory_markers: Add missing directory entries for a
            multi-release descriptor.
        stamper: Timestamp policy for every entry written by this function.
        use_emoji: Emoji preference for the warning about a replaced descriptor.

    Returns:
        TransformResult: Output location and what was changed.

    Raises:
        ArchiveError: If the source is missing or unreadable, is the target
            itself, or the target cannot be written. Partial output is left
            in place.
    """

    if not source.is_file():
        raise ArchiveError(f"Could not locate source jar: {source}")
    if target.resolve() == source.resolve():
        raise ArchiveError(f"Source and target jar are the same file: {source}")
    pending = list(ancestor_directories(entry_name)) if multirelease and create_directory_markers else []
    had_preexisting = False
    try:
        with zipfile.ZipFile(source) as reader, zipfile.ZipFile(target, "w") as writer:
            entries = reader.infolist()
            headers = [info for info in entries if _is_header_entry(info.filename)]
            body = [info for info in entries if not _is_header_entry(info.filename)]
            for info in (*headers, *body):
                if info.filename == entry_name:
                    warn(f"Ignoring preexisting {DESCRIPTOR_FILENAME} in {source}", use_emoji=use_emoji)
                    had_preexisting = True
                    continue
                if info.filename in pending:
                    pending.remove(info.filename)
                    LOGGER.debug("Discovered multi-version jar file location: %s", info.filename)
                if info.filename.upper() == MANIFEST_NAME.upper():
                    writer.writestr(stamper.entry(info.filename), reader.read(info))
                    continue
                _copy_entry(reader, writer, info)
            writer.writestr(stamper.entry(entry_name), descriptor)
            for directory in pending:
                writer.writestr(stamper.entry(directory), b"")
    except (OSError, RuntimeError, zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
        raise ArchiveError(f"Could not write or read artifact: {exc}") from exc
    return TransformResult(
        output=target,
        had_preexisting=had_preexisting,
        created_directories=tuple(pending),
    )


def _copy_entry(reader: zipfile.ZipFile, writer: zipfile.ZipFile, info: zipfile.ZipInfo) -> None:
    """Copy one entry with its original name, timestamp and attributes."""

    data = reader.read(info)
    writer.writestr(copy.copy(info), data)


__all__ = [
    "DESCRIPTOR_FILENAME",
    "MANIFEST_NAME",
    "TransformResult",
    "VERSIONS_DIRECTORY",
    "ancestor_directories",
    "descriptor_entry_name",
    "transform",
]
