# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Validated, immutable module declarations built from configuration."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from .config.models import MINIMUM_JAVA_VERSION, ModuleConfig, ProvideConfig, QualifiedPackageConfig
from .errors import ConfigurationError
from .names import (
    PROFILES,
    DeclarationCategory,
    ValidationProfile,
    accumulate,
    split_names,
    to_internal_name,
    validate_names,
)

BASE_MODULE: Final[str] = "java.base"


@dataclass(frozen=True, slots=True)
class QualifiedPackage:
    """Packages exported or opened only to the listed modules."""

    packages: tuple[str, ...]
    modules: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Provision:
    """Service types paired with the implementation types providing them."""

    services: tuple[str, ...]
    providers: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ModuleDeclaration:
    """Describe a module exactly as it will be encoded.

    Package, class and service names are stored in slash-separated internal
    form; module names keep their dotted form.
    """

    name: str
    version: str | None = None
    java_version: int = MINIMUM_JAVA_VERSION
    multirelease: bool = False
    packages: tuple[str, ...] = ()
    requires: tuple[str, ...] = ()
    static_requires: tuple[str, ...] = ()
    exports: tuple[str, ...] = ()
    qualified_exports: tuple[QualifiedPackage, ...] = ()
    opens: tuple[str, ...] = ()
    qualified_opens: tuple[QualifiedPackage, ...] = ()
    main_class: str | None = None
    uses: tuple[str, ...] = ()
    provides: tuple[Provision, ...] = ()

    @property
    def declares_base_module(self) -> bool:
        """Return ``True`` when ``java.base`` is required explicitly."""

        return BASE_MODULE in self.requires or BASE_MODULE in self.static_requires


def resolve_profile(name: str) -> ValidationProfile:
    """Return the validation profile registered under ``name``.

    Raises:
        ConfigurationError: If ``name`` is not a known profile.
    """

    try:
        return PROFILES[name]
    except KeyError as exc:
        raise ConfigurationError(f"Unknown validation profile: {name}") from exc


def build_declaration(config: ModuleConfig, profile: ValidationProfile | None = None) -> ModuleDeclaration:
    """Validate ``config`` and return the immutable declaration it describes.

    Args:
        config: Module section of the loaded configuration.
        profile: Validation profile; defaults to the one named in ``config``.

    Returns:
        ModuleDeclaration: Deduplicated declaration ready for encoding.

    Raises:
        ConfigurationError: If the module name is missing, the package list is
            missing under a profile that requires it, or a qualified list has
            no target modules.
        DuplicateDeclarationError: If any category repeats an identifier.
    """

    profile = profile or resolve_profile(config.profile)
    name = (config.name or "").strip()
    if not name:
        raise ConfigurationError("A module name is required")
    if profile.require_packages and not split_names(config.packages):
        raise ConfigurationError(f"The '{profile.name}' profile requires a package list")
    normalized = profile.compare_normalized

    packages, _ = validate_names(
        config.packages,
        category=DeclarationCategory.PACKAGE,
        transform=profile.package_transform(),
        compare_normalized=normalized,
    )
    requires, seen_requires = validate_names(config.requires, category=DeclarationCategory.REQUIRE)
    static_requires, _ = validate_names(
        config.static_requires,
        category=DeclarationCategory.REQUIRE,
        seen=seen_requires,
    )
    exports, qualified_exports = _visibility(
        config.exports,
        config.qualified_exports,
        category=DeclarationCategory.EXPORT,
        compare_normalized=normalized,
    )
    opens, qualified_opens = _visibility(
        config.opens,
        config.qualified_opens,
        category=DeclarationCategory.OPEN,
        compare_normalized=normalized,
    )
    uses, _ = validate_names(
        config.uses,
        category=DeclarationCategory.USE,
        transform=to_internal_name,
        compare_normalized=normalized,
    )
    main_class = config.main_class.strip() if config.main_class else ""
    return ModuleDeclaration(
        name=name,
        version=(config.version or "").strip() or None,
        java_version=config.java_version,
        multirelease=config.multirelease,
        packages=packages,
        requires=requires,
        static_requires=static_requires,
        exports=exports,
        qualified_exports=qualified_exports,
        opens=opens,
        qualified_opens=qualified_opens,
        main_class=to_internal_name(main_class) if main_class else None,
        uses=uses,
        provides=_provisions(config.provides, compare_normalized=normalized),
    )


def _visibility(
    plain: str | None,
    qualified: Sequence[QualifiedPackageConfig],
    *,
    category: DeclarationCategory,
    compare_normalized: bool,
) -> tuple[tuple[str, ...], tuple[QualifiedPackage, ...]]:
    """Validate plain and qualified exports (or opens) sharing one namespace."""

    packages, seen = validate_names(
        plain,
        category=category,
        transform=to_internal_name,
        compare_normalized=compare_normalized,
    )
    resolved: list[QualifiedPackage] = []
    for entry in qualified:
        modules = _target_modules(entry.modules, context=f"qualified {category.value}")
        targets, seen = validate_names(
            entry.packages,
            category=category,
            transform=to_internal_name,
            compare_normalized=compare_normalized,
            seen=seen,
        )
        resolved.append(QualifiedPackage(packages=targets, modules=modules))
    return packages, tuple(resolved)


def _target_modules(raw: str, *, context: str) -> tuple[str, ...]:
    modules, _ = validate_names(raw, category=DeclarationCategory.MODULE)
    if not modules:
        raise ConfigurationError(f"A {context} must name at least one module")
    return modules


def _provisions(provides: Sequence[ProvideConfig], *, compare_normalized: bool) -> tuple[Provision, ...]:
    resolved: list[Provision] = []
    seen_services: frozenset[str] = frozenset()
    for provide in provides:
        providers, _ = accumulate(
            split_names(provide.providers),
            frozenset(),
            category=DeclarationCategory.PROVIDER,
            transform=to_internal_name,
            compare_normalized=compare_normalized,
        )
        if not providers:
            raise ConfigurationError("A service provision must name at least one provider")
        services, seen_services = accumulate(
            split_names(provide.services),
            seen_services,
            category=DeclarationCategory.SERVICE,
            transform=to_internal_name,
            compare_normalized=compare_normalized,
        )
        resolved.append(Provision(services=services, providers=providers))
    return tuple(resolved)


__all__ = [
    "BASE_MODULE",
    "ModuleDeclaration",
    "Provision",
    "QualifiedPackage",
    "build_declaration",
    "resolve_profile",
]
