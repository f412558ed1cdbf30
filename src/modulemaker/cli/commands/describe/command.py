# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command printing the directives of an existing module descriptor."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ....console import section
from ....errors import ModuleMakerError
from ...core.options import DebugOption, EmojiOption
from ...core.shared import build_cli_logger, exit_with_error
from .rendering import build_descriptor_table, render_json
from .services import load_descriptor

PathArgument = Annotated[Path, typer.Argument(help="module-info.class file or JAR archive.")]
EntryOption = Annotated[
    str | None,
    typer.Option("--entry", "-e", help="Archive entry holding the descriptor."),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Print the descriptor as JSON.")]


def describe_command(
    path: PathArgument,
    entry: EntryOption = None,
    as_json: JsonOption = False,
    emoji: EmojiOption = True,
    debug: DebugOption = False,
) -> None:
    """Decode and print a module descriptor."""

    logger = build_cli_logger(emoji=emoji, debug=debug)
    try:
        loaded = load_descriptor(path, entry=entry)
    except ModuleMakerError as exc:
        raise exit_with_error(exc, logger=logger) from exc
    if as_json:
        logger.echo(render_json(loaded.descriptor))
        return
    origin = f"{loaded.path}!/{loaded.entry}" if loaded.entry else str(loaded.path)
    section(origin, use_color=not logger.console.no_color)
    logger.console.print(build_descriptor_table(loaded.descriptor))


__all__ = ["describe_command"]
