# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""inject-module CLI command package."""

from __future__ import annotations

import typer

from ...core.shared import register_command
from .command import inject_module_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the inject-module command with ``app``."""

    register_command(app, inject_module_command, name="inject-module")
