# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Encode module declarations into ``module-info.class`` bytes.

The layout follows the order in which ASM's ``ClassWriter`` visits a module:
header, module block, packages, requires, exports, opens, main class, uses,
provides, then the ``Module``, ``ModulePackages`` and ``ModuleMainClass``
attributes. Constants are pooled in that same visiting order so the output is
byte-for-byte reproducible.
"""

from __future__ import annotations

import struct
from collections.abc import Sequence
from typing import Final

from ..config.models import MINIMUM_JAVA_VERSION
from ..declaration import BASE_MODULE, ModuleDeclaration, QualifiedPackage
from ..errors import EncodingError
from .constant_pool import ConstantPool

CLASS_MAGIC: Final[int] = 0xCAFEBABE
BASE_CLASS_VERSION: Final[int] = 44
MODULE_INFO_NAME: Final[str] = "module-info"

ACC_MODULE: Final[int] = 0x8000
ACC_STATIC_PHASE: Final[int] = 0x0040
ACC_MANDATED: Final[int] = 0x8000

MODULE_ATTRIBUTE: Final[str] = "Module"
MODULE_PACKAGES_ATTRIBUTE: Final[str] = "ModulePackages"
MODULE_MAIN_CLASS_ATTRIBUTE: Final[str] = "ModuleMainClass"


def class_file_version(java_version: int) -> int:
    """Return the class-file major version targeting ``java_version``."""

    return BASE_CLASS_VERSION + java_version


def encode(declaration: ModuleDeclaration, java_version: int | None = None) -> bytes:
    """Return the ``module-info.class`` bytes describing ``declaration``.

    Args:
        declaration: Validated module declaration.
        java_version: Target Java release; defaults to the declaration's own.

    Returns:
        bytes: Complete class file.

    Raises:
        EncodingError: If ``java_version`` predates module support or a
            constant does not fit the class-file limits.
    """

    target = declaration.java_version if java_version is None else java_version
    if target < MINIMUM_JAVA_VERSION:
        raise EncodingError(f"Invalid Java version for module-info: {target}")

    pool = ConstantPool()
    this_class = pool.class_ref(MODULE_INFO_NAME)
    module = _ModuleBody(pool, declaration)
    attributes = module.attributes()

    out = bytearray()
    out += struct.pack(">IHH", CLASS_MAGIC, 0, class_file_version(target))
    out += pool.to_bytes()
    out += struct.pack(">HHHHHH", ACC_MODULE, this_class, 0, 0, 0, 0)
    out += struct.pack(">H", len(attributes))
    for attribute in attributes:
        out += attribute
    return bytes(out)


class _ModuleBody:
    """Accumulate the module attribute tables while registering constants."""

    def __init__(self, pool: ConstantPool, declaration: ModuleDeclaration) -> None:
        self._pool = pool
        self._name_index = pool.module_ref(declaration.name)
        self._version_index = pool.utf8(declaration.version) if declaration.version is not None else 0
        self._packages = [pool.package_ref(name) for name in declaration.packages]
        self._requires = bytearray()
        self._requires_count = 0
        self._exports = bytearray()
        self._exports_count = 0
        self._opens = bytearray()
        self._opens_count = 0
        self._uses: list[int] = []
        self._provides = bytearray()
        self._provides_count = 0

        for module in declaration.requires:
            self._require(module, 0)
        for module in declaration.static_requires:
            self._require(module, ACC_STATIC_PHASE)
        if not declaration.declares_base_module:
            self._require(BASE_MODULE, ACC_MANDATED)
        self._exports_count = self._visibility(self._exports, declaration.exports, declaration.qualified_exports)
        self._opens_count = self._visibility(self._opens, declaration.opens, declaration.qualified_opens)
        self._main_class_index = pool.class_ref(declaration.main_class) if declaration.main_class else 0
        self._uses = [pool.class_ref(service) for service in declaration.uses]
        for provision in declaration.provides:
            for service in provision.services:
                self._provide(service, provision.providers)

    def _require(self, module: str, flags: int) -> None:
        self._requires += struct.pack(">HHH", self._pool.module_ref(module), flags, 0)
        self._requires_count += 1

    def _visibility(
        self,
        table: bytearray,
        plain: Sequence[str],
        qualified: Sequence[QualifiedPackage],
    ) -> int:
        count = 0
        for package in plain:
            table += struct.pack(">HHH", self._pool.package_ref(package), 0, 0)
            count += 1
        for entry in qualified:
            for package in entry.packages:
                table += struct.pack(">HHH", self._pool.package_ref(package), 0, len(entry.modules))
                for module in entry.modules:
                    table += struct.pack(">H", self._pool.module_ref(module))
                count += 1
        return count

    def _provide(self, service: str, providers: Sequence[str]) -> None:
        self._provides += struct.pack(">HH", self._pool.class_ref(service), len(providers))
        for provider in providers:
            self._provides += struct.pack(">H", self._pool.class_ref(provider))
        self._provides_count += 1

    def attributes(self) -> list[bytes]:
        """Return the serialised module attributes, registering their names."""

        body = bytearray()
        body += struct.pack(">HHH", self._name_index, 0, self._version_index)
        body += struct.pack(">H", self._requires_count) + self._requires
        body += struct.pack(">H", self._exports_count) + self._exports
        body += struct.pack(">H", self._opens_count) + self._opens
        body += struct.pack(f">H{len(self._uses)}H", len(self._uses), *self._uses)
        body += struct.pack(">H", self._provides_count) + self._provides

        attributes = [_attribute(self._pool.utf8(MODULE_ATTRIBUTE), bytes(body))]
        if self._packages:
            payload = struct.pack(f">H{len(self._packages)}H", len(self._packages), *self._packages)
            attributes.append(_attribute(self._pool.utf8(MODULE_PACKAGES_ATTRIBUTE), payload))
        if self._main_class_index:
            payload = struct.pack(">H", self._main_class_index)
            attributes.append(_attribute(self._pool.utf8(MODULE_MAIN_CLASS_ATTRIBUTE), payload))
        return attributes


def _attribute(name_index: int, payload: bytes) -> bytes:
    return struct.pack(">HI", name_index, len(payload)) + payload


__all__ = [
    "ACC_MANDATED",
    "ACC_MODULE",
    "ACC_STATIC_PHASE",
    "BASE_CLASS_VERSION",
    "CLASS_MAGIC",
    "MODULE_INFO_NAME",
    "class_file_version",
    "encode",
]
