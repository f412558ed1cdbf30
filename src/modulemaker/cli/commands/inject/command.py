# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command injecting ``module-info.class`` into a JAR archive."""

from __future__ import annotations

from pathlib import Path

import typer

from ....config import load_config
from ....errors import ModuleMakerError
from ....goals import inject_module
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
from .models import (
    BuildDirectoryOption,
    ClassifierOption,
    ExtendedTimestampsOption,
    FinalNameOption,
    FolderEntryOption,
    InjectOptions,
    OutputTimestampOption,
    ReplaceOption,
    SourceOption,
)


def inject_module_command(
    root: RootOption = Path("."),
    config_file: ConfigFileOption = None,
    source: SourceOption = None,
    build_directory: BuildDirectoryOption = None,
    final_name: FinalNameOption = None,
    classifier: ClassifierOption = None,
    replace: ReplaceOption = None,
    folder_entries: FolderEntryOption = None,
    output_timestamp: OutputTimestampOption = None,
    extended_timestamps: ExtendedTimestampsOption = None,
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
    """Inject module-info.class into the build archive."""

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
    inject_options = InjectOptions(
        source=source,
        build_directory=build_directory,
        final_name=final_name,
        classifier=classifier,
        replace=replace,
        folder_entries=folder_entries,
        output_timestamp=output_timestamp,
        extended_timestamps=extended_timestamps,
    )
    root = root.resolve()
    try:
        overrides = {**module_options.to_overrides(), **inject_options.to_overrides()}
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    try:
        config = load_config(root, config_file=config_file, overrides=overrides)
        outcome = inject_module(config, use_emoji=emoji)
    except ModuleMakerError as exc:
        raise exit_with_error(exc, logger=logger) from exc
    if outcome.transform.created_directories:
        logger.debug(f"Created directory entries: {', '.join(outcome.transform.created_directories)}")
    if outcome.timestamp.is_explicit:
        logger.debug(f"Entries stamped at epoch second {outcome.timestamp.epoch_seconds}")


__all__ = ["inject_module_command"]
