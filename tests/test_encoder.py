# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

from __future__ import annotations

import struct

import pytest

from modulemaker.declaration import ModuleDeclaration, Provision, QualifiedPackage
from modulemaker.descriptor import ACC_MANDATED, ACC_STATIC_PHASE, class_file_version, decode, encode
from modulemaker.descriptor.constant_pool import (
    ConstantPool,
    ConstantTag,
    decode_modified_utf8,
    encode_modified_utf8,
)
from modulemaker.errors import EncodingError

EXAMPLE = ModuleDeclaration(
    name="com.example.app",
    java_version=11,
    packages=("com/example/app",),
    requires=("java.base",),
    exports=("com/example/app",),
    main_class="com/example/app/Main",
)


def _pool_strings(data: bytes) -> list[tuple[int, object]]:
    count = struct.unpack_from(">H", data, 8)[0]
    offset = 10
    entries: list[tuple[int, object]] = []
    for _ in range(count - 1):
        tag = data[offset]
        if tag == ConstantTag.UTF8:
            length = struct.unpack_from(">H", data, offset + 1)[0]
            entries.append((tag, data[offset + 3 : offset + 3 + length].decode()))
            offset += 3 + length
        else:
            entries.append((tag, struct.unpack_from(">H", data, offset + 1)[0]))
            offset += 3
    return entries


def test_class_file_version_adds_base() -> None:
    assert class_file_version(9) == 53
    assert class_file_version(11) == 55
    assert class_file_version(21) == 65


def test_example_header_and_constant_order() -> None:
    data = encode(EXAMPLE)

    assert data[:8] == bytes.fromhex("cafebabe00000037")
    assert _pool_strings(data) == [
        (ConstantTag.UTF8, "module-info"),
        (ConstantTag.CLASS, 1),
        (ConstantTag.UTF8, "com.example.app"),
        (ConstantTag.MODULE, 3),
        (ConstantTag.UTF8, "com/example/app"),
        (ConstantTag.PACKAGE, 5),
        (ConstantTag.UTF8, "java.base"),
        (ConstantTag.MODULE, 7),
        (ConstantTag.UTF8, "com/example/app/Main"),
        (ConstantTag.CLASS, 9),
        (ConstantTag.UTF8, "Module"),
        (ConstantTag.UTF8, "ModulePackages"),
        (ConstantTag.UTF8, "ModuleMainClass"),
    ]


def test_example_decodes_to_declared_directives() -> None:
    descriptor = decode(encode(EXAMPLE))

    assert descriptor.major_version == 55
    assert descriptor.java_version == 11
    assert descriptor.name == "com.example.app"
    assert [(item.module, item.flags) for item in descriptor.requires] == [("java.base", 0)]
    assert [(item.package, item.targets) for item in descriptor.exports] == [("com/example/app", ())]
    assert descriptor.packages == ("com/example/app",)
    assert descriptor.main_class == "com/example/app/Main"


def test_body_after_pool_has_module_flags_and_no_members() -> None:
    data = encode(ModuleDeclaration(name="m"))
    pool = ConstantPool()
    pool.class_ref("module-info")
    pool.module_ref("m")
    pool.module_ref("java.base")
    pool.utf8("Module")
    offset = 8 + len(pool.to_bytes())

    access, this_class, super_class, interfaces, fields, methods, attributes = struct.unpack_from(
        ">HHHHHHH", data, offset
    )

    assert (access, this_class, super_class) == (0x8000, 2, 0)
    assert (interfaces, fields, methods) == (0, 0, 0)
    assert attributes == 1


def test_implicit_base_module_is_mandated() -> None:
    descriptor = decode(encode(ModuleDeclaration(name="m", requires=("java.sql",))))

    assert [(item.module, item.flags) for item in descriptor.requires] == [
        ("java.sql", 0),
        ("java.base", ACC_MANDATED),
    ]
    assert descriptor.requires[1].is_mandated


def test_explicit_base_module_is_not_duplicated() -> None:
    descriptor = decode(encode(ModuleDeclaration(name="m", static_requires=("java.base",))))

    assert [(item.module, item.flags) for item in descriptor.requires] == [("java.base", ACC_STATIC_PHASE)]


def test_round_trip_preserves_every_directive() -> None:
    declaration = ModuleDeclaration(
        name="org.acme.store",
        version="2.3.1",
        java_version=17,
        packages=("org/acme/store", "org/acme/store/model", "org/acme/store/spi"),
        requires=("java.sql", "java.logging"),
        static_requires=("org.jetbrains.annotations",),
        exports=("org/acme/store",),
        qualified_exports=(
            QualifiedPackage(packages=("org/acme/store/spi",), modules=("org.acme.plugin", "org.acme.test")),
        ),
        opens=("org/acme/store",),
        qualified_opens=(
            QualifiedPackage(packages=("org/acme/store/model",), modules=("com.fasterxml.jackson.databind",)),
        ),
        main_class="org/acme/store/Cli",
        uses=("org/acme/store/spi/Backend",),
        provides=(
            Provision(
                services=("org/acme/store/spi/Backend", "java/sql/Driver"),
                providers=("org/acme/store/MemoryBackend", "org/acme/store/FileBackend"),
            ),
        ),
    )

    descriptor = decode(encode(declaration))

    assert descriptor.version == "2.3.1"
    assert descriptor.java_version == 17
    assert descriptor.packages == declaration.packages
    assert [item.module for item in descriptor.requires] == [
        "java.sql",
        "java.logging",
        "org.jetbrains.annotations",
        "java.base",
    ]
    assert descriptor.requires[2].is_static
    assert [(item.package, item.targets) for item in descriptor.exports] == [
        ("org/acme/store", ()),
        ("org/acme/store/spi", ("org.acme.plugin", "org.acme.test")),
    ]
    assert [(item.package, item.targets) for item in descriptor.opens] == [
        ("org/acme/store", ()),
        ("org/acme/store/model", ("com.fasterxml.jackson.databind",)),
    ]
    assert descriptor.uses == ("org/acme/store/spi/Backend",)
    assert [(item.service, item.providers) for item in descriptor.provides] == [
        ("org/acme/store/spi/Backend", ("org/acme/store/MemoryBackend", "org/acme/store/FileBackend")),
        ("java/sql/Driver", ("org/acme/store/MemoryBackend", "org/acme/store/FileBackend")),
    ]
    assert descriptor.main_class == "org/acme/store/Cli"


def test_encoding_is_deterministic() -> None:
    assert encode(EXAMPLE) == encode(EXAMPLE)


def test_no_optional_attributes_without_packages_or_main_class() -> None:
    descriptor = decode(encode(ModuleDeclaration(name="m")))

    assert descriptor.packages == ()
    assert descriptor.main_class is None
    assert descriptor.version is None


def test_java_version_override_and_minimum() -> None:
    assert decode(encode(EXAMPLE, java_version=21)).major_version == 65

    with pytest.raises(EncodingError, match="Invalid Java version for module-info: 8"):
        encode(EXAMPLE, java_version=8)


def test_modified_utf8_encodes_nul_and_supplementary_characters() -> None:
    assert encode_modified_utf8("a\x00b") == b"a\xc0\x80b"
    assert encode_modified_utf8("\U0001f600") == bytes.fromhex("eda0bdedb880")
    assert decode_modified_utf8(b"a\xc0\x80b") == "a\x00b"
    assert decode_modified_utf8(bytes.fromhex("eda0bdedb880")) == "\U0001f600"


def test_modified_utf8_rejects_oversized_constants() -> None:
    with pytest.raises(EncodingError, match="Constant too long"):
        encode_modified_utf8("x" * 0x10000)


def test_constant_pool_deduplicates_by_tag_and_value() -> None:
    pool = ConstantPool()

    first = pool.package_ref("a/b")
    again = pool.package_ref("a/b")
    as_class = pool.class_ref("a/b")

    assert first == again == 2
    assert as_class == 3
    assert pool.count == 4
