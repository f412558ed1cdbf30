# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for module descriptor generation and injection."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

MINIMUM_JAVA_VERSION: Final[int] = 9
DEFAULT_CLASSIFIER: Final[str] = "modularized"
DEFAULT_BUILD_DIRECTORY: Final[Path] = Path("target")
DEFAULT_OUTPUT_DIRECTORY: Final[Path] = Path("target/classes")

ProfileName = Literal["current", "legacy"]


class QualifiedPackageConfig(BaseModel):
    """Describe packages exported or opened to an explicit set of modules."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    packages: str
    modules: str


class ProvideConfig(BaseModel):
    """Describe services and the providers implementing them."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    services: str
    providers: str


class ModuleConfig(BaseModel):
    """Module declaration values as supplied by the caller."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, populate_by_name=True)

    name: str | None = None
    version: str | None = None
    java_version: int = Field(
        default=MINIMUM_JAVA_VERSION,
        validation_alias=AliasChoices("java_version", "java-version"),
    )
    multirelease: bool = False
    packages: str | None = None
    requires: str | None = None
    static_requires: str | None = Field(
        default=None,
        validation_alias=AliasChoices("static_requires", "static-requires"),
    )
    exports: str | None = None
    opens: str | None = None
    qualified_exports: list[QualifiedPackageConfig] = Field(
        default_factory=list,
        validation_alias=AliasChoices("qualified_exports", "qualified-exports"),
    )
    qualified_opens: list[QualifiedPackageConfig] = Field(
        default_factory=list,
        validation_alias=AliasChoices("qualified_opens", "qualified-opens"),
    )
    main_class: str | None = Field(
        default=None,
        validation_alias=AliasChoices("main_class", "main-class"),
    )
    uses: str | None = None
    provides: list[ProvideConfig] = Field(default_factory=list)
    profile: ProfileName = "current"


class InjectConfig(BaseModel):
    """Options controlling archive injection and publication."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, populate_by_name=True)

    source: Path | None = None
    classifier: str | None = DEFAULT_CLASSIFIER
    replace: bool = True
    create_multirelease_folder_entry: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "create_multirelease_folder_entry",
            "create-multirelease-folder-entry",
        ),
    )
    output_timestamp: str | None = Field(
        default=None,
        validation_alias=AliasChoices("output_timestamp", "output-timestamp"),
    )
    extended_timestamps: bool = Field(
        default=True,
        validation_alias=AliasChoices("extended_timestamps", "extended-timestamps"),
    )


class BuildConfig(BaseModel):
    """Build layout supplied by the invoking build tool."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, populate_by_name=True)

    directory: Path = DEFAULT_BUILD_DIRECTORY
    final_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("final_name", "final-name"),
    )
    output_directory: Path = Field(
        default=DEFAULT_OUTPUT_DIRECTORY,
        validation_alias=AliasChoices("output_directory", "output-directory"),
    )


class ModuleMakerConfig(BaseModel):
    """Top-level configuration composed of module, inject and build sections."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    module: ModuleConfig = Field(default_factory=ModuleConfig)
    inject: InjectConfig = Field(default_factory=InjectConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible mapping of the configuration."""

        return self.model_dump(mode="json")


__all__ = [
    "BuildConfig",
    "DEFAULT_BUILD_DIRECTORY",
    "DEFAULT_CLASSIFIER",
    "DEFAULT_OUTPUT_DIRECTORY",
    "InjectConfig",
    "MINIMUM_JAVA_VERSION",
    "ModuleConfig",
    "ModuleMakerConfig",
    "ProfileName",
    "ProvideConfig",
    "QualifiedPackageConfig",
]
