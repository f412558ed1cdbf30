# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Normalisation and duplicate detection for comma-separated declaration lists.

Every helper in this module is a pure function: callers thread an immutable
accumulator (``frozenset``) through consecutive calls whenever two lists share
a namespace, for example plain and qualified exports.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Final

from .errors import DuplicateDeclarationError

NameTransform = Callable[[str], str]

NAME_SEPARATOR: Final[str] = ","


class DeclarationCategory(str, Enum):
    """Enumerate the declaration categories reported in duplicate errors."""

    PACKAGE = "package"
    REQUIRE = "require"
    EXPORT = "export"
    OPEN = "open"
    MODULE = "module"
    USE = "use"
    SERVICE = "service"
    PROVIDER = "provider"


def to_internal_name(name: str) -> str:
    """Return ``name`` in the slash-separated form used inside class files."""

    return name.replace(".", "/")


def keep_name(name: str) -> str:
    """Return ``name`` unchanged."""

    return name


@dataclass(frozen=True, slots=True)
class ValidationProfile:
    """Describe how one historical variant of the tool validates declarations.

    Attributes:
        name: Profile identifier as accepted in configuration.
        convert_packages: Convert ``packages`` entries from dotted to slash form.
        compare_normalized: Detect duplicates on the converted form instead of
            the trimmed input.
        require_packages: Reject declarations without a package list.
    """

    name: str
    convert_packages: bool
    compare_normalized: bool
    require_packages: bool

    def package_transform(self) -> NameTransform:
        """Return the transform applied to entries of the ``packages`` list."""

        return to_internal_name if self.convert_packages else keep_name


CURRENT_PROFILE: Final[ValidationProfile] = ValidationProfile(
    name="current",
    convert_packages=True,
    compare_normalized=False,
    require_packages=False,
)
LEGACY_PROFILE: Final[ValidationProfile] = ValidationProfile(
    name="legacy",
    convert_packages=False,
    compare_normalized=True,
    require_packages=True,
)

PROFILES: Final[dict[str, ValidationProfile]] = {
    CURRENT_PROFILE.name: CURRENT_PROFILE,
    LEGACY_PROFILE.name: LEGACY_PROFILE,
}


def split_names(raw: str | None) -> tuple[str, ...]:
    """Split a comma-separated declaration into trimmed, non-empty tokens.

    Args:
        raw: Comma-separated identifiers, or ``None`` to declare nothing.

    Returns:
        tuple[str, ...]: Trimmed identifiers in declaration order.
    """

    if raw is None:
        return ()
    tokens = (token.strip() for token in raw.split(NAME_SEPARATOR))
    return tuple(token for token in tokens if token)


def accumulate(
    names: Iterable[str],
    seen: frozenset[str],
    *,
    category: DeclarationCategory,
    transform: NameTransform = keep_name,
    compare_normalized: bool = False,
) -> tuple[tuple[str, ...], frozenset[str]]:
    """Validate ``names`` against ``seen`` and return the transformed output.

    Args:
        names: Trimmed identifiers in declaration order.
        seen: Comparison keys already declared in the same namespace.
        category: Category reported when a duplicate is found.
        transform: Conversion applied to each emitted identifier.
        compare_normalized: Compare transformed identifiers rather than the
            trimmed input.

    Returns:
        tuple[tuple[str, ...], frozenset[str]]: Transformed identifiers and the
        accumulator extended with their comparison keys.

    Raises:
        DuplicateDeclarationError: If an identifier repeats within ``seen``
            or within ``names`` itself.
    """

    emitted: list[str] = []
    keys = set(seen)
    for name in names:
        converted = transform(name)
        key = converted if compare_normalized else name
        if key in keys:
            raise DuplicateDeclarationError(category.value, name)
        keys.add(key)
        emitted.append(converted)
    return tuple(emitted), frozenset(keys)


def validate_names(
    raw: str | None,
    *,
    category: DeclarationCategory,
    transform: NameTransform = keep_name,
    compare_normalized: bool = False,
    seen: frozenset[str] = frozenset(),
) -> tuple[tuple[str, ...], frozenset[str]]:
    """Split ``raw`` and validate the resulting identifiers in one step.

    Args:
        raw: Comma-separated identifiers, or ``None``.
        category: Category reported when a duplicate is found.
        transform: Conversion applied to each emitted identifier.
        compare_normalized: Compare transformed identifiers rather than the
            trimmed input.
        seen: Accumulator carried over from a category sharing the namespace.

    Returns:
        tuple[tuple[str, ...], frozenset[str]]: Transformed identifiers and the
        extended accumulator.
    """

    return accumulate(
        split_names(raw),
        seen,
        category=category,
        transform=transform,
        compare_normalized=compare_normalized,
    )


__all__ = [
    "CURRENT_PROFILE",
    "DeclarationCategory",
    "LEGACY_PROFILE",
    "NAME_SEPARATOR",
    "PROFILES",
    "ValidationProfile",
    "accumulate",
    "keep_name",
    "split_names",
    "to_internal_name",
    "validate_names",
]
