# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command registry."""

from __future__ import annotations

import typer

from . import describe, inject, make

__all__ = ["register_commands"]


def register_commands(app: typer.Typer) -> None:
    """Register the built-in commands on ``app``."""

    make.register(app)
    inject.register(app)
    describe.register(app)
