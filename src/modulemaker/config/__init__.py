# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders."""

from __future__ import annotations

from .loader import OUTPUT_TIMESTAMP_ENV, load_config
from .models import (
    DEFAULT_CLASSIFIER,
    MINIMUM_JAVA_VERSION,
    BuildConfig,
    InjectConfig,
    ModuleConfig,
    ModuleMakerConfig,
    ProvideConfig,
    QualifiedPackageConfig,
)

__all__ = [
    "BuildConfig",
    "DEFAULT_CLASSIFIER",
    "InjectConfig",
    "MINIMUM_JAVA_VERSION",
    "ModuleConfig",
    "ModuleMakerConfig",
    "OUTPUT_TIMESTAMP_ENV",
    "ProvideConfig",
    "QualifiedPackageConfig",
    "load_config",
]
