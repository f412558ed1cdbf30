# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised while building and injecting module descriptors."""

from __future__ import annotations


class ModuleMakerError(RuntimeError):
    """Base class for failures that abort a single module-maker invocation."""


class ConfigurationError(ModuleMakerError):
    """Raised when configuration input is missing or invalid."""


class DuplicateDeclarationError(ModuleMakerError):
    """Raised when an identifier is declared twice within one category."""

    def __init__(self, category: str, identifier: str) -> None:
        """Create the error for ``identifier`` repeated within ``category``.

        Args:
            category: Declaration category such as ``package`` or ``export``.
            identifier: Trimmed identifier that was seen twice.
        """

        super().__init__(f"Duplicate {category}: {identifier}")
        self.category = category
        self.identifier = identifier


class EncodingError(ModuleMakerError):
    """Raised when a descriptor cannot be encoded or decoded."""


class ArchiveError(ModuleMakerError):
    """Raised when reading the source archive or writing the target archive fails."""


class PublicationError(ModuleMakerError):
    """Raised when the transformed archive cannot replace the original."""


class OutputError(ModuleMakerError):
    """Raised when a descriptor file cannot be written below the output directory."""


__all__ = (
    "ArchiveError",
    "ConfigurationError",
    "DuplicateDeclarationError",
    "EncodingError",
    "ModuleMakerError",
    "OutputError",
    "PublicationError",
)
