# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""make-module CLI command package."""

from __future__ import annotations

import typer

from ...core.shared import register_command
from .command import make_module_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the make-module command with ``app``."""

    register_command(app, make_module_command, name="make-module")
