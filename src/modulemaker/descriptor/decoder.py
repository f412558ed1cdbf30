# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decode ``module-info.class`` files into plain data structures."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Final

from ..errors import EncodingError
from .constant_pool import ConstantTag, decode_modified_utf8
from .encoder import (
    ACC_MANDATED,
    ACC_STATIC_PHASE,
    BASE_CLASS_VERSION,
    CLASS_MAGIC,
    MODULE_ATTRIBUTE,
    MODULE_MAIN_CLASS_ATTRIBUTE,
    MODULE_PACKAGES_ATTRIBUTE,
)

# payload sizes of the fixed-width constant kinds
_CONSTANT_SIZES: Final[dict[int, int]] = {
    ConstantTag.INTEGER: 4,
    ConstantTag.FLOAT: 4,
    ConstantTag.LONG: 8,
    ConstantTag.DOUBLE: 8,
    ConstantTag.CLASS: 2,
    ConstantTag.STRING: 2,
    ConstantTag.FIELD_REF: 4,
    ConstantTag.METHOD_REF: 4,
    ConstantTag.INTERFACE_METHOD_REF: 4,
    ConstantTag.NAME_AND_TYPE: 4,
    ConstantTag.METHOD_HANDLE: 3,
    ConstantTag.METHOD_TYPE: 2,
    ConstantTag.DYNAMIC: 4,
    ConstantTag.INVOKE_DYNAMIC: 4,
    ConstantTag.MODULE: 2,
    ConstantTag.PACKAGE: 2,
}
_WIDE_CONSTANTS: Final[frozenset[int]] = frozenset({ConstantTag.LONG, ConstantTag.DOUBLE})


@dataclass(frozen=True, slots=True)
class Requirement:
    """A ``requires`` directive."""

    module: str
    flags: int
    version: str | None = None

    @property
    def is_static(self) -> bool:
        return bool(self.flags & ACC_STATIC_PHASE)

    @property
    def is_mandated(self) -> bool:
        return bool(self.flags & ACC_MANDATED)


@dataclass(frozen=True, slots=True)
class PackageVisibility:
    """An ``exports`` or ``opens`` directive; empty ``targets`` means unqualified."""

    package: str
    flags: int
    targets: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ServiceProvider:
    """A ``provides`` directive."""

    service: str
    providers: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ModuleDescriptor:
    """Decoded contents of a module descriptor."""

    major_version: int
    name: str
    flags: int
    version: str | None
    requires: tuple[Requirement, ...]
    exports: tuple[PackageVisibility, ...]
    opens: tuple[PackageVisibility, ...]
    uses: tuple[str, ...]
    provides: tuple[ServiceProvider, ...]
    packages: tuple[str, ...] = ()
    main_class: str | None = None

    @property
    def java_version(self) -> int:
        """Return the Java release targeted by the class-file version."""

        return self.major_version - BASE_CLASS_VERSION


class _Reader:
    """Big-endian cursor over class-file bytes."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self.offset = 0

    def read(self, size: int) -> bytes:
        end = self.offset + size
        if end > len(self._data):
            raise EncodingError("Truncated class file")
        chunk = self._data[self.offset : end]
        self.offset = end
        return chunk

    def u1(self) -> int:
        return self.read(1)[0]

    def u2(self) -> int:
        return int(struct.unpack(">H", self.read(2))[0])

    def u4(self) -> int:
        return int(struct.unpack(">I", self.read(4))[0])


class _Pool:
    """Read-only view of a parsed constant pool."""

    def __init__(self, reader: _Reader) -> None:
        count = reader.u2()
        self._entries: dict[int, tuple[int, object]] = {}
        index = 1
        while index < count:
            tag = reader.u1()
            if tag == ConstantTag.UTF8:
                self._entries[index] = (tag, decode_modified_utf8(reader.read(reader.u2())))
            elif tag in (ConstantTag.CLASS, ConstantTag.MODULE, ConstantTag.PACKAGE):
                self._entries[index] = (tag, reader.u2())
            elif tag in _CONSTANT_SIZES:
                reader.read(_CONSTANT_SIZES[tag])
                self._entries[index] = (tag, None)
            else:
                raise EncodingError(f"Unknown constant pool tag {tag} at index {index}")
            index += 2 if tag in _WIDE_CONSTANTS else 1

    def utf8(self, index: int) -> str:
        tag, value = self._entry(index)
        if tag != ConstantTag.UTF8 or not isinstance(value, str):
            raise EncodingError(f"Constant {index} is not a UTF-8 entry")
        return value

    def optional_utf8(self, index: int) -> str | None:
        return self.utf8(index) if index else None

    def named(self, index: int, expected: ConstantTag) -> str:
        tag, value = self._entry(index)
        if tag != expected or not isinstance(value, int):
            raise EncodingError(f"Constant {index} is not a {expected.name.lower()} entry")
        return self.utf8(value)

    def _entry(self, index: int) -> tuple[int, object]:
        try:
            return self._entries[index]
        except KeyError as exc:
            raise EncodingError(f"Invalid constant pool index {index}") from exc


def decode(data: bytes) -> ModuleDescriptor:
    """Parse ``data`` as a ``module-info.class`` file.

    Args:
        data: Raw class-file bytes.

    Returns:
        ModuleDescriptor: Decoded module directives.

    Raises:
        EncodingError: If ``data`` is not a well-formed module descriptor.
    """

    reader = _Reader(data)
    if reader.u4() != CLASS_MAGIC:
        raise EncodingError("Not a class file: bad magic number")
    reader.u2()
    major_version = reader.u2()
    pool = _Pool(reader)
    reader.u2()  # access flags
    reader.u2()  # this_class
    reader.u2()  # super_class
    reader.read(2 * reader.u2())
    for _ in range(2):
        for _member in range(reader.u2()):
            reader.read(6)
            _skip_attributes(reader)

    module: _ModuleAttribute | None = None
    packages: tuple[str, ...] = ()
    main_class: str | None = None
    for _ in range(reader.u2()):
        name = pool.utf8(reader.u2())
        payload = _Reader(reader.read(reader.u4()))
        if name == MODULE_ATTRIBUTE:
            module = _read_module(payload, pool)
        elif name == MODULE_PACKAGES_ATTRIBUTE:
            packages = tuple(pool.named(payload.u2(), ConstantTag.PACKAGE) for _ in range(payload.u2()))
        elif name == MODULE_MAIN_CLASS_ATTRIBUTE:
            main_class = pool.named(payload.u2(), ConstantTag.CLASS)
    if module is None:
        raise EncodingError("Class file has no Module attribute")
    return ModuleDescriptor(
        major_version=major_version,
        name=module.name,
        flags=module.flags,
        version=module.version,
        requires=module.requires,
        exports=module.exports,
        opens=module.opens,
        uses=module.uses,
        provides=module.provides,
        packages=packages,
        main_class=main_class,
    )


@dataclass(frozen=True, slots=True)
class _ModuleAttribute:
    name: str
    flags: int
    version: str | None
    requires: tuple[Requirement, ...]
    exports: tuple[PackageVisibility, ...]
    opens: tuple[PackageVisibility, ...]
    uses: tuple[str, ...]
    provides: tuple[ServiceProvider, ...]


def _read_module(reader: _Reader, pool: _Pool) -> _ModuleAttribute:
    name = pool.named(reader.u2(), ConstantTag.MODULE)
    flags = reader.u2()
    version = pool.optional_utf8(reader.u2())
    requires = tuple(
        Requirement(
            module=pool.named(reader.u2(), ConstantTag.MODULE),
            flags=reader.u2(),
            version=pool.optional_utf8(reader.u2()),
        )
        for _ in range(reader.u2())
    )
    exports = _read_visibility(reader, pool)
    opens = _read_visibility(reader, pool)
    uses = tuple(pool.named(reader.u2(), ConstantTag.CLASS) for _ in range(reader.u2()))
    provides: list[ServiceProvider] = []
    for _ in range(reader.u2()):
        service = pool.named(reader.u2(), ConstantTag.CLASS)
        providers = tuple(pool.named(reader.u2(), ConstantTag.CLASS) for _ in range(reader.u2()))
        provides.append(ServiceProvider(service=service, providers=providers))
    return _ModuleAttribute(
        name=name,
        flags=flags,
        version=version,
        requires=requires,
        exports=exports,
        opens=opens,
        uses=uses,
        provides=tuple(provides),
    )


def _read_visibility(reader: _Reader, pool: _Pool) -> tuple[PackageVisibility, ...]:
    entries: list[PackageVisibility] = []
    for _ in range(reader.u2()):
        package = pool.named(reader.u2(), ConstantTag.PACKAGE)
        flags = reader.u2()
        targets = tuple(pool.named(reader.u2(), ConstantTag.MODULE) for _ in range(reader.u2()))
        entries.append(PackageVisibility(package=package, flags=flags, targets=targets))
    return tuple(entries)


def _skip_attributes(reader: _Reader) -> None:
    for _ in range(reader.u2()):
        reader.u2()
        reader.read(reader.u4())


__all__ = [
    "ModuleDescriptor",
    "PackageVisibility",
    "Requirement",
    "ServiceProvider",
    "decode",
]
