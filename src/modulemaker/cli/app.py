# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the module-maker commands."""

from __future__ import annotations

import typer

from .commands import register_commands

app = typer.Typer(
    name="modulemaker",
    help="Generate module-info.class descriptors and inject them into JAR archives.",
    no_args_is_help=True,
)
register_commands(app)

__all__ = ["app"]
