# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command writing ``module-info.class`` into the class output directory."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ....config import load_config
from ....errors import ModuleMakerError
from ....goals import make_module
from ...core.options import (
    ConfigFileOption,
    DebugOption,
    EmojiOption,
    ExportsOption,
    JavaVersionOption,
    MainClassOption,
    ModuleOptions,
    MultireleaseOption,
    NameOption,
    OpensOption,
    PackagesOption,
    ProfileOption,
    ProvideOption,
    QualifiedExportOption,
    QualifiedOpenOption,
    RequiresOption,
    RootOption,
    StaticRequiresOption,
    UsesOption,
    VersionOption,
)
from ...core.shared import CLIError, build_cli_logger, exit_with_error

OutputDirectoryOption = Annotated[
    Path | None,
    typer.Option("--output-directory", "-o", help="Directory receiving module-info.class."),
]


def make_module_command(
    root: RootOption = Path("."),
    config_file: ConfigFileOption = None,
    output_directory: OutputDirectoryOption = None,
    name: NameOption = None,
    version: VersionOption = None,
    java_version: JavaVersionOption = None,
    multirelease: MultireleaseOption = None,
    packages: PackagesOption = None,
    requires: RequiresOption = None,
    static_requires: StaticRequiresOption = None,
    exports: ExportsOption = None,
    opens: OpensOption = None,
    qualified_export: QualifiedExportOption = None,
    qualified_open: QualifiedOpenOption = None,
    main_class: MainClassOption = None,
    uses: UsesOption = None,
    provide: ProvideOption = None,
    profile: ProfileOption = None,
    emoji: EmojiOption = True,
    debug: DebugOption = False,
) -> None:
    """Generate module-info.class from the module declaration."""

    logger = build_cli_logger(emoji=emoji, debug=debug)
    module_options = ModuleOptions(
        name=name,
        version=version,
        java_version=java_version,
        multirelease=multirelease,
        packages=packages,
        requires=requires,
        static_requires=static_requires,
        exports=exports,
        opens=opens,
        qualified_exports=qualified_export or (),
        qualified_opens=qualified_open or (),
        main_class=main_class,
        uses=uses,
        provides=provide or (),
        profile=profile,
    )
    root = root.resolve()
    try:
        overrides = module_options.to_overrides()
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    logger.debug(f"Loading configuration below {root}")
    try:
        config = load_config(root, config_file=config_file, overrides=overrides)
        if output_directory is not None and not output_directory.is_absolute():
            output_directory = root / output_directory
        target = make_module(config, output_directory=output_directory, use_emoji=emoji)
    except ModuleMakerError as exc:
        raise exit_with_error(exc, logger=logger) from exc
    logger.debug(f"Descriptor written to {target}")


__all__ = ["make_module_command"]
