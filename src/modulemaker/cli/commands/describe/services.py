# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Locate and read module descriptors from class files or archives."""

from __future__ import annotations

import re
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ....archive import DESCRIPTOR_FILENAME, VERSIONS_DIRECTORY
from ....descriptor import ModuleDescriptor, decode
from ....errors import ArchiveError

_VERSIONED_DESCRIPTOR: Final[re.Pattern[str]] = re.compile(
    rf"{re.escape(VERSIONS_DIRECTORY)}(\d+)/{re.escape(DESCRIPTOR_FILENAME)}"
)


@dataclass(frozen=True, slots=True)
class LoadedDescriptor:
    """Descriptor together with where it was read from."""

    path: Path
    entry: str | None
    descriptor: ModuleDescriptor


def select_descriptor_entry(names: list[str]) -> str | None:
    """Return the root descriptor entry, else the highest versioned one."""

    if DESCRIPTOR_FILENAME in names:
        return DESCRIPTOR_FILENAME
    versioned = [
        (int(match.group(1)), name) for name in names if (match := _VERSIONED_DESCRIPTOR.fullmatch(name))
    ]
    if not versioned:
        return None
    return max(versioned)[1]


def load_descriptor(path: Path, *, entry: str | None = None) -> LoadedDescriptor:
    """Read and decode a descriptor from ``path``.

    Args:
        path: A ``module-info.class`` file or a JAR archive.
        entry: Archive entry to read; chosen automatically when ``None``.

    Returns:
        LoadedDescriptor: Decoded descriptor and its origin.

    Raises:
        ArchiveError: If the file or entry cannot be read.
        EncodingError: If the bytes are not a module descriptor.
    """

    if not path.is_file():
        raise ArchiveError(f"No such file: {path}")
    if not zipfile.is_zipfile(path):
        if entry is not None:
            raise ArchiveError(f"{path} is not an archive; --entry does not apply")
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ArchiveError(f"Could not read {path}: {exc}") from exc
        return LoadedDescriptor(path=path, entry=None, descriptor=decode(data))
    try:
        with zipfile.ZipFile(path) as archive:
            selected = entry if entry is not None else select_descriptor_entry(archive.namelist())
            payload = archive.read(selected) if selected is not None else None
    except KeyError as exc:
        raise ArchiveError(f"No entry {entry} in {path}") from exc
    except (OSError, RuntimeError, zipfile.BadZipFile) as exc:
        raise ArchiveError(f"Could not read {path}: {exc}") from exc
    if selected is None or payload is None:
        raise ArchiveError(f"No {DESCRIPTOR_FILENAME} found in {path}")
    return LoadedDescriptor(path=path, entry=selected, descriptor=decode(payload))


__all__ = ["LoadedDescriptor", "load_descriptor", "select_descriptor_entry"]
