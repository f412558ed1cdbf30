# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Class-file constant pool construction and modified UTF-8 codec."""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import Final

from ..errors import EncodingError

MAX_UTF8_LENGTH: Final[int] = 0xFFFF
MAX_POOL_SIZE: Final[int] = 0xFFFF


class ConstantTag(IntEnum):
    """Constant pool tags defined by the class-file format."""

    UTF8 = 1
    INTEGER = 3
    FLOAT = 4
    LONG = 5
    DOUBLE = 6
    CLASS = 7
    STRING = 8
    FIELD_REF = 9
    METHOD_REF = 10
    INTERFACE_METHOD_REF = 11
    NAME_AND_TYPE = 12
    METHOD_HANDLE = 15
    METHOD_TYPE = 16
    DYNAMIC = 17
    INVOKE_DYNAMIC = 18
    MODULE = 19
    PACKAGE = 20


def encode_modified_utf8(value: str) -> bytes:
    """Encode ``value`` using the class-file flavour of UTF-8.

    NUL is written as two bytes and supplementary characters as a pair of
    three-byte surrogates.

    Raises:
        EncodingError: If the encoded form exceeds 65535 bytes.
    """

    out = bytearray()
    for char in value:
        code = ord(char)
        if 0 < code < 0x80:
            out.append(code)
        elif code < 0x800:
            out += bytes((0xC0 | (code >> 6), 0x80 | (code & 0x3F)))
        elif code < 0x10000:
            out += _three_byte(code)
        else:
            code -= 0x10000
            out += _three_byte(0xD800 | (code >> 10))
            out += _three_byte(0xDC00 | (code & 0x3FF))
    if len(out) > MAX_UTF8_LENGTH:
        raise EncodingError(f"Constant too long for the class-file format: {value[:40]}...")
    return bytes(out)


def _three_byte(code: int) -> bytes:
    return bytes((0xE0 | (code >> 12), 0x80 | ((code >> 6) & 0x3F), 0x80 | (code & 0x3F)))


def decode_modified_utf8(data: bytes) -> str:
    """Decode class-file modified UTF-8 back into a Python string.

    Raises:
        EncodingError: If ``data`` is not well-formed.
    """

    units: list[int] = []
    index = 0
    length = len(data)
    try:
        while index < length:
            byte = data[index]
            if byte < 0x80:
                units.append(byte)
                index += 1
            elif byte & 0xE0 == 0xC0:
                units.append(((byte & 0x1F) << 6) | (data[index + 1] & 0x3F))
                index += 2
            elif byte & 0xF0 == 0xE0:
                units.append(((byte & 0x0F) << 12) | ((data[index + 1] & 0x3F) << 6) | (data[index + 2] & 0x3F))
                index += 3
            else:
                raise EncodingError(f"Malformed modified UTF-8 byte 0x{byte:02x}")
    except IndexError as exc:
        raise EncodingError("Truncated modified UTF-8 sequence") from exc
    return struct.pack(f">{len(units)}H", *units).decode("utf-16-be", errors="surrogatepass")


class ConstantPool:
    """Deduplicating constant pool ordered by first use.

    Reference constants (class, module, package) add their UTF-8 payload before
    themselves, so a new class name occupies two consecutive slots.
    """

    def __init__(self) -> None:
        self._entries: list[bytes] = []
        self._indexes: dict[tuple[ConstantTag, str], int] = {}

    @property
    def count(self) -> int:
        """Return the ``constant_pool_count`` value (entries plus one)."""

        return len(self._entries) + 1

    def utf8(self, value: str) -> int:
        """Return the index of the UTF-8 constant for ``value``."""

        key = (ConstantTag.UTF8, value)
        if key not in self._indexes:
            encoded = encode_modified_utf8(value)
            self._append(key, struct.pack(">BH", ConstantTag.UTF8, len(encoded)) + encoded)
        return self._indexes[key]

    def class_ref(self, internal_name: str) -> int:
        """Return the index of the class constant for ``internal_name``."""

        return self._reference(ConstantTag.CLASS, internal_name)

    def module_ref(self, name: str) -> int:
        """Return the index of the module constant for ``name``."""

        return self._reference(ConstantTag.MODULE, name)

    def package_ref(self, internal_name: str) -> int:
        """Return the index of the package constant for ``internal_name``."""

        return self._reference(ConstantTag.PACKAGE, internal_name)

    def to_bytes(self) -> bytes:
        """Return the serialised pool including its leading count."""

        return struct.pack(">H", self.count) + b"".join(self._entries)

    def _reference(self, tag: ConstantTag, value: str) -> int:
        key = (tag, value)
        if key not in self._indexes:
            name_index = self.utf8(value)
            self._append(key, struct.pack(">BH", tag, name_index))
        return self._indexes[key]

    def _append(self, key: tuple[ConstantTag, str], payload: bytes) -> None:
        if self.count >= MAX_POOL_SIZE:
            raise EncodingError("Too many constants for a single class file")
        self._entries.append(payload)
        self._indexes[key] = len(self._entries)


__all__ = [
    "ConstantPool",
    "ConstantTag",
    "decode_modified_utf8",
    "encode_modified_utf8",
]
