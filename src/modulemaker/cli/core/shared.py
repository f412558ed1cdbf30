# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors)."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final

import typer
from rich.console import Console
from rich.text import Text

from ...console import fail as console_fail
from ...errors import ModuleMakerError

PACKAGE_LOGGER_NAME: Final[str] = "modulemaker"


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code

    @classmethod
    def from_error(cls, error: ModuleMakerError) -> CLIError:
        """Return a CLI error carrying the message of ``error``."""

        return cls(str(error))


@dataclass(slots=True)
class CLILogger:
    """Report command failures and opt-in debug lines."""

    console: Console
    use_emoji: bool
    debug_enabled: bool = False

    def fail(self, message: str) -> None:
        console_fail(message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout using Typer's echo helper."""

        typer.echo(message)

    def debug(self, message: str) -> None:
        """Emit a debug message when debug logging is enabled."""

        if self.debug_enabled:
            text = Text("[debug] ", style="bold cyan")
            text.append(message, style="dim")
            self.console.print(text)


def build_cli_logger(*, emoji: bool, debug: bool = False, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided emoji preference.

    Args:
        emoji: Whether log output may include emoji glyphs.
        debug: Whether debug logging should be enabled.
        no_color: Whether terminal colour output should be disabled.

    Returns:
        CLILogger: Logger instance bound to a dedicated Rich console.
    """

    if debug:
        enable_debug_logging()
    console = Console(no_color=no_color, highlight=False)
    return CLILogger(console=console, use_emoji=emoji, debug_enabled=debug)


def enable_debug_logging() -> None:
    """Stream debug records from the package loggers to stderr."""

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    if getattr(logger, "_modulemaker_debug_configured", False):
        return
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    setattr(logger, "_modulemaker_debug_configured", True)


def register_command(app: typer.Typer, command: Callable[..., Any], *, name: str) -> None:
    """Register ``command`` on ``app`` under ``name``."""

    app.command(name=name)(command)


def exit_with_error(error: ModuleMakerError, *, logger: CLILogger) -> typer.Exit:
    """Report ``error`` and return the ``typer.Exit`` the command should raise."""

    cli_error = CLIError.from_error(error)
    logger.fail(str(cli_error))
    return typer.Exit(code=cli_error.exit_code)


__all__ = [
    "CLIError",
    "CLILogger",
    "build_cli_logger",
    "enable_debug_logging",
    "exit_with_error",
    "register_command",
]
