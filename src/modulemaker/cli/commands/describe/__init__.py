# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""describe CLI command package."""

from __future__ import annotations

import typer

from ...core.shared import register_command
from .command import describe_command

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """Register the describe command with ``app``."""

    register_command(app, describe_command, name="describe")
