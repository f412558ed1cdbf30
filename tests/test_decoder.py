# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

from __future__ import annotations

import pytest

from modulemaker.declaration import ModuleDeclaration
from modulemaker.descriptor import decode, encode
from modulemaker.errors import EncodingError


def test_decode_rejects_bad_magic() -> None:
    with pytest.raises(EncodingError, match="bad magic"):
        decode(b"\x00\x00\x00\x00\x00\x00\x00\x35")


def test_decode_rejects_truncated_input() -> None:
    data = encode(ModuleDeclaration(name="m"))

    with pytest.raises(EncodingError, match="Truncated"):
        decode(data[:-3])


def test_decode_requires_module_attribute() -> None:
    header = bytes.fromhex("cafebabe00000035")
    pool = bytes.fromhex("0003" "01000161" "070001")
    body = bytes.fromhex("8000" "0002" "0000" "0000" "0000" "0000" "0000")

    with pytest.raises(EncodingError, match="no Module attribute"):
        decode(header + pool + body)


def test_decode_rejects_unknown_constant_tags() -> None:
    with pytest.raises(EncodingError, match="Unknown constant pool tag 2"):
        decode(bytes.fromhex("cafebabe00000035" "0002" "02"))
