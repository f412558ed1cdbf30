# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Binary ``module-info.class`` encoding and decoding."""

from __future__ import annotations

from .decoder import ModuleDescriptor, PackageVisibility, Requirement, ServiceProvider, decode
from .encoder import ACC_MANDATED, ACC_MODULE, ACC_STATIC_PHASE, class_file_version, encode

__all__ = [
    "ACC_MANDATED",
    "ACC_MODULE",
    "ACC_STATIC_PHASE",
    "ModuleDescriptor",
    "PackageVisibility",
    "Requirement",
    "ServiceProvider",
    "class_file_version",
    "decode",
    "encode",
]
