# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import zipfile
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

JarFactory = Callable[..., Path]


@pytest.fixture
def make_jar(tmp_path: Path) -> JarFactory:
    """Return a factory writing a JAR with the given entries in order."""

    def _make(entries: Mapping[str, bytes], name: str = "app-1.0.jar") -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as archive:
            for entry_name, data in entries.items():
                info = zipfile.ZipInfo(entry_name, date_time=(2020, 5, 17, 12, 30, 10))
                info.compress_type = zipfile.ZIP_STORED if entry_name.endswith("/") else zipfile.ZIP_DEFLATED
                archive.writestr(info, data)
        return path

    return _make


@pytest.fixture
def simple_jar_entries() -> dict[str, bytes]:
    return {
        "META-INF/": b"",
        "META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\r\nCreated-By: test\r\n\r\n",
        "com/": b"",
        "com/example/": b"",
        "com/example/app/": b"",
        "com/example/app/Main.class": b"\xca\xfe\xba\xbe fake class",
        "com/example/app/messages.properties": b"greeting=hello\n",
    }
