# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

from __future__ import annotations

import json
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from modulemaker.config import BuildConfig, InjectConfig, ModuleConfig, ModuleMakerConfig
from modulemaker.descriptor import decode
from modulemaker.errors import ArchiveError, ConfigurationError, DuplicateDeclarationError, OutputError
from modulemaker.goals import inject_module, make_module, resolve_archive_paths
from modulemaker.publication import ArtifactRegistry
from modulemaker.timestamps import TimestampCapability, ntfs_extra_field

JarFactory = Callable[..., Path]


def _config(tmp_path: Path, **module: object) -> ModuleMakerConfig:
    return ModuleMakerConfig(
        module=ModuleConfig(name="com.example.app", **module),
        build=BuildConfig(directory=tmp_path, final_name="app-1.0", output_directory=tmp_path / "classes"),
    )


def test_make_module_writes_descriptor(tmp_path: Path) -> None:
    config = _config(tmp_path, java_version=11, exports="com.example.app")

    target = make_module(config, use_emoji=False)

    assert target == tmp_path / "classes" / "module-info.class"
    descriptor = decode(target.read_bytes())
    assert descriptor.major_version == 55
    assert descriptor.exports[0].package == "com/example/app"


def test_make_module_multirelease_location(tmp_path: Path) -> None:
    config = _config(tmp_path, java_version=17, multirelease=True)

    target = make_module(config, output_directory=tmp_path / "other", use_emoji=False)

    assert target == tmp_path / "other" / "META-INF" / "versions" / "17" / "module-info.class"
    assert target.is_file()


def test_make_module_rejects_old_java(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Invalid Java version for module-info: 8"):
        make_module(_config(tmp_path, java_version=8), use_emoji=False)


def test_make_module_reports_unwritable_directory(tmp_path: Path) -> None:
    blocker = tmp_path / "classes"
    blocker.write_text("a file where a directory should be", encoding="utf-8")

    with pytest.raises(OutputError, match="Could not read or create module directory"):
        make_module(_config(tmp_path), use_emoji=False)


def test_make_module_propagates_duplicates(tmp_path: Path) -> None:
    with pytest.raises(DuplicateDeclarationError):
        make_module(_config(tmp_path, uses="a.S, a.S"), use_emoji=False)


def test_resolve_archive_paths(tmp_path: Path) -> None:
    config = _config(tmp_path)

    assert resolve_archive_paths(config) == (tmp_path / "app-1.0.jar", tmp_path / "app-1.0-modularized.jar")

    config.inject = InjectConfig(source=tmp_path / "libs" / "lib.jar", classifier="mod")
    config.build = BuildConfig(directory=tmp_path)
    assert resolve_archive_paths(config) == (tmp_path / "libs" / "lib.jar", tmp_path / "lib-mod.jar")


def test_resolve_archive_paths_requires_a_name(tmp_path: Path) -> None:
    config = ModuleMakerConfig(build=BuildConfig(directory=tmp_path))

    with pytest.raises(ConfigurationError, match="final_name"):
        resolve_archive_paths(config)


def test_inject_module_replaces_source(
    tmp_path: Path,
    make_jar: JarFactory,
    simple_jar_entries: dict[str, bytes],
) -> None:
    source = make_jar(simple_jar_entries)
    config = _config(tmp_path, java_version=11, packages="com.example.app", main_class="com.example.app.Main")
    config.inject = InjectConfig(output_timestamp="2024-01-01T00:00:00Z")

    outcome = inject_module(config, capability=TimestampCapability.EXTENDED, use_emoji=False)

    assert outcome.publication.replaced
    assert outcome.timestamp.epoch_seconds == 1_704_067_200
    assert not (tmp_path / "app-1.0-modularized.jar").exists()
    with zipfile.ZipFile(source) as archive:
        info = archive.getinfo("module-info.class")
        descriptor = decode(archive.read(info))
        assert archive.read("com/example/app/messages.properties") == b"greeting=hello\n"
    assert info.date_time == (2024, 1, 1, 0, 0, 0)
    assert ntfs_extra_field(1_704_067_200) in info.extra
    assert descriptor.main_class == "com/example/app/Main"


def test_inject_module_attaches_and_writes_ledger(
    tmp_path: Path,
    make_jar: JarFactory,
    simple_jar_entries: dict[str, bytes],
) -> None:
    source = make_jar(simple_jar_entries)
    config = _config(tmp_path, java_version=17, multirelease=True)
    config.inject = InjectConfig(replace=False, classifier="jpms", extended_timestamps=False, output_timestamp="0")
    registry = ArtifactRegistry()

    outcome = inject_module(config, registry=registry, use_emoji=False)

    target = tmp_path / "app-1.0-jpms.jar"
    assert outcome.publication.path == target
    assert outcome.transform.created_directories == ("META-INF/versions/", "META-INF/versions/17/")
    assert source.exists()
    with zipfile.ZipFile(target) as archive:
        info = archive.getinfo("META-INF/versions/17/module-info.class")
    assert info.extra == b""
    ledger = json.loads((tmp_path / "artifacts.json").read_text(encoding="utf-8"))
    assert ledger == [{"type": "jar", "classifier": "jpms", "path": str(target)}]


def test_inject_module_refuses_to_overwrite_its_source(
    tmp_path: Path,
    make_jar: JarFactory,
    simple_jar_entries: dict[str, bytes],
) -> None:
    source = make_jar(simple_jar_entries, name="app-1.0-modularized.jar")
    config = _config(tmp_path)
    config.inject = InjectConfig(source=source)

    with pytest.raises(ArchiveError, match="same file"):
        inject_module(config, use_emoji=False)

    with zipfile.ZipFile(source) as archive:
        assert archive.namelist() == list(simple_jar_entries)
