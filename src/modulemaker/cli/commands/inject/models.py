# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Archive and publication options for the inject-module command."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer

SourceOption = Annotated[
    Path | None,
    typer.Option("--source", "-s", help="Archive to inject into; defaults to <build-dir>/<final-name>.jar."),
]
BuildDirectoryOption = Annotated[
    Path | None,
    typer.Option("--build-dir", help="Directory holding the build archives."),
]
FinalNameOption = Annotated[
    str | None,
    typer.Option("--final-name", help="Base name of the build archive."),
]
ClassifierOption = Annotated[
    str | None,
    typer.Option("--classifier", help="Classifier of the attached archive."),
]
ReplaceOption = Annotated[
    bool | None,
    typer.Option(
        "--replace/--attach",
        help="Replace the source archive or attach a classified copy.",
        show_default=False,
    ),
]
FolderEntryOption = Annotated[
    bool | None,
    typer.Option(
        "--folder-entries/--no-folder-entries",
        help="Add directory entries leading to a multi-release descriptor.",
        show_default=False,
    ),
]
OutputTimestampOption = Annotated[
    str | None,
    typer.Option("--output-timestamp", help="Epoch milliseconds or ISO-8601 instant with offset."),
]
ExtendedTimestampsOption = Annotated[
    bool | None,
    typer.Option(
        "--extended-timestamps/--basic-timestamps",
        help="Record creation and access times alongside the modification time.",
        show_default=False,
    ),
]


@dataclass(slots=True)
class InjectOptions:
    """Archive options collected from the command line."""

    source: Path | None = None
    build_directory: Path | None = None
    final_name: str | None = None
    classifier: str | None = None
    replace: bool | None = None
    folder_entries: bool | None = None
    output_timestamp: str | None = None
    extended_timestamps: bool | None = None

    def to_overrides(self) -> dict[str, Any]:
        """Return supplied options as ``inject`` and ``build`` override fragments."""

        inject = {
            key: value
            for key, value in (
                ("source", self.source),
                ("classifier", self.classifier),
                ("replace", self.replace),
                ("create_multirelease_folder_entry", self.folder_entries),
                ("output_timestamp", self.output_timestamp),
                ("extended_timestamps", self.extended_timestamps),
            )
            if value is not None
        }
        build = {
            key: value
            for key, value in (("directory", self.build_directory), ("final_name", self.final_name))
            if value is not None
        }
        overrides: dict[str, Any] = {}
        if inject:
            overrides["inject"] = inject
        if build:
            overrides["build"] = build
        return overrides


__all__ = ["InjectOptions"]
