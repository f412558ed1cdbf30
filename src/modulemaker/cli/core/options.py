# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Typer option aliases shared by the module-maker commands."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any, Final

import typer

from .shared import CLIError

PAIR_SEPARATOR: Final[str] = "="

RootOption = Annotated[
    Path,
    typer.Option(
        "--root",
        "-r",
        help="Project root containing pyproject.toml.",
        show_default=False,
    ),
]
ConfigFileOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Standalone TOML configuration file."),
]
EmojiOption = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji in output.")]
DebugOption = Annotated[bool, typer.Option("--debug", help="Emit debug logging to stderr.")]
NameOption = Annotated[str | None, typer.Option("--name", help="Module name.")]
VersionOption = Annotated[str | None, typer.Option("--version", help="Module version string.")]
JavaVersionOption = Annotated[
    int | None,
    typer.Option("--java-version", help="Java release targeted by the descriptor (9 or later)."),
]
MultireleaseOption = Annotated[
    bool | None,
    typer.Option(
        "--multirelease/--no-multirelease",
        help="Place the descriptor under META-INF/versions/<java-version>/.",
        show_default=False,
    ),
]
PackagesOption = Annotated[
    str | None,
    typer.Option("--packages", help="Comma-separated packages contained in the module."),
]
RequiresOption = Annotated[
    str | None,
    typer.Option("--requires", help="Comma-separated required modules."),
]
StaticRequiresOption = Annotated[
    str | None,
    typer.Option("--static-requires", help="Comma-separated compile-time-only required modules."),
]
ExportsOption = Annotated[
    str | None,
    typer.Option("--exports", help="Comma-separated exported packages."),
]
OpensOption = Annotated[
    str | None,
    typer.Option("--opens", help="Comma-separated packages opened for reflection."),
]
QualifiedExportOption = Annotated[
    list[str] | None,
    typer.Option("--qualified-export", help="PACKAGES=MODULES pair; repeatable."),
]
QualifiedOpenOption = Annotated[
    list[str] | None,
    typer.Option("--qualified-open", help="PACKAGES=MODULES pair; repeatable."),
]
MainClassOption = Annotated[str | None, typer.Option("--main-class", help="Main class of the module.")]
UsesOption = Annotated[
    str | None,
    typer.Option("--uses", help="Comma-separated services consumed by the module."),
]
ProvideOption = Annotated[
    list[str] | None,
    typer.Option("--provide", help="SERVICES=PROVIDERS pair; repeatable."),
]
ProfileOption = Annotated[
    str | None,
    typer.Option("--profile", help="Validation profile: current or legacy."),
]


@dataclass(slots=True)
class ModuleOptions:
    """Module declaration values collected from the command line."""

    name: str | None = None
    version: str | None = None
    java_version: int | None = None
    multirelease: bool | None = None
    packages: str | None = None
    requires: str | None = None
    static_requires: str | None = None
    exports: str | None = None
    opens: str | None = None
    qualified_exports: Sequence[str] = ()
    qualified_opens: Sequence[str] = ()
    main_class: str | None = None
    uses: str | None = None
    provides: Sequence[str] = ()
    profile: str | None = None

    def to_overrides(self) -> dict[str, Any]:
        """Return the options that were supplied as a ``module`` override fragment.

        Raises:
            CLIError: If a pair option is not of the form ``LEFT=RIGHT``.
        """

        overrides: dict[str, Any] = {
            key: value
            for key, value in (
                ("name", self.name),
                ("version", self.version),
                ("java_version", self.java_version),
                ("multirelease", self.multirelease),
                ("packages", self.packages),
                ("requires", self.requires),
                ("static_requires", self.static_requires),
                ("exports", self.exports),
                ("opens", self.opens),
                ("main_class", self.main_class),
                ("uses", self.uses),
                ("profile", self.profile),
            )
            if value is not None
        }
        if self.qualified_exports:
            overrides["qualified_exports"] = parse_pairs(
                self.qualified_exports, option="--qualified-export", keys=("packages", "modules")
            )
        if self.qualified_opens:
            overrides["qualified_opens"] = parse_pairs(
                self.qualified_opens, option="--qualified-open", keys=("packages", "modules")
            )
        if self.provides:
            overrides["provides"] = parse_pairs(self.provides, option="--provide", keys=("services", "providers"))
        return {"module": overrides} if overrides else {}


def parse_pairs(values: Sequence[str], *, option: str, keys: tuple[str, str]) -> list[dict[str, str]]:
    """Split ``LEFT=RIGHT`` option values into mappings keyed by ``keys``.

    Args:
        values: Raw option values.
        option: Option name used in error messages.
        keys: Mapping keys for the left and right side.

    Returns:
        list[dict[str, str]]: One mapping per value.

    Raises:
        CLIError: If a value lacks the separator, with exit code 2.
    """

    pairs: list[dict[str, str]] = []
    for value in values:
        left, separator, right = value.partition(PAIR_SEPARATOR)
        if not separator:
            raise CLIError(f"{option} expects LEFT{PAIR_SEPARATOR}RIGHT, got {value!r}", exit_code=2)
        pairs.append({keys[0]: left.strip(), keys[1]: right.strip()})
    return pairs


__all__ = [
    "ConfigFileOption",
    "DebugOption",
    "EmojiOption",
    "ModuleOptions",
    "RootOption",
    "parse_pairs",
]
