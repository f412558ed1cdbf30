# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

from __future__ import annotations

import json
import zipfile
from collections.abc import Callable
from pathlib import Path

from typer.testing import CliRunner

from modulemaker.cli.app import app
from modulemaker.descriptor import decode

JarFactory = Callable[..., Path]


def test_make_module_command_writes_descriptor(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "make-module",
            "--root",
            str(tmp_path),
            "--name",
            "com.example.app",
            "--java-version",
            "11",
            "--exports",
            "com.example.app",
            "--qualified-open",
            "com.example.app.model=com.fasterxml.jackson.databind",
            "--provide",
            "com.example.spi.Codec=com.example.app.JsonCodec",
            "--no-emoji",
        ],
    )

    assert result.exit_code == 0, result.output
    descriptor = decode((tmp_path / "target" / "classes" / "module-info.class").read_bytes())
    assert descriptor.name == "com.example.app"
    assert descriptor.opens[0].targets == ("com.fasterxml.jackson.databind",)
    assert descriptor.provides[0].service == "com/example/spi/Codec"
    assert "Added module-info.class" in result.output


def test_make_module_command_reports_duplicates(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["make-module", "--root", str(tmp_path), "--name", "m", "--requires", "java.sql,java.sql", "--no-emoji"],
    )

    assert result.exit_code == 1
    assert "Duplicate require: java.sql" in result.output


def test_make_module_command_rejects_malformed_pairs(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["make-module", "--root", str(tmp_path), "--name", "m", "--provide", "a.Service", "--no-emoji"],
    )

    assert result.exit_code == 2
    assert "--provide expects LEFT=RIGHT" in result.output


def test_make_module_command_reads_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[tool.modulemaker.module]\nname = "from.config"\njava-version = 21\n',
        encoding="utf-8",
    )
    runner = CliRunner()

    result = runner.invoke(app, ["make-module", "--root", str(tmp_path), "--no-emoji"])

    assert result.exit_code == 0, result.output
    descriptor = decode((tmp_path / "target" / "classes" / "module-info.class").read_bytes())
    assert descriptor.name == "from.config"
    assert descriptor.java_version == 21


def test_inject_module_command_attaches_archive(
    tmp_path: Path,
    make_jar: JarFactory,
    simple_jar_entries: dict[str, bytes],
) -> None:
    build_dir = tmp_path / "target"
    build_dir.mkdir()
    make_jar(simple_jar_entries, name="target/app-1.0.jar")
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "inject-module",
            "--root",
            str(tmp_path),
            "--final-name",
            "app-1.0",
            "--attach",
            "--name",
            "com.example.app",
            "--output-timestamp",
            "2024-01-01T00:00:00Z",
            "--no-emoji",
        ],
    )

    assert result.exit_code == 0, result.output
    target = build_dir / "app-1.0-modularized.jar"
    with zipfile.ZipFile(target) as archive:
        assert archive.getinfo("module-info.class").date_time == (2024, 1, 1, 0, 0, 0)
    assert (build_dir / "app-1.0.jar").exists()
    assert (build_dir / "artifacts.json").is_file()


def test_inject_module_command_reports_missing_archive(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["inject-module", "--root", str(tmp_path), "--final-name", "nothing", "--name", "m", "--no-emoji"],
    )

    assert result.exit_code == 1
    assert "Could not locate source jar" in result.output


def test_describe_command_prints_json(
    tmp_path: Path,
    make_jar: JarFactory,
    simple_jar_entries: dict[str, bytes],
) -> None:
    runner = CliRunner()
    made = runner.invoke(
        app,
        [
            "make-module",
            "--root",
            str(tmp_path),
            "--name",
            "com.example.app",
            "--java-version",
            "17",
            "--multirelease",
            "--requires",
            "java.sql",
            "--no-emoji",
        ],
    )
    assert made.exit_code == 0, made.output
    descriptor_path = tmp_path / "target" / "classes" / "META-INF" / "versions" / "17" / "module-info.class"
    descriptor_bytes = descriptor_path.read_bytes()
    jar = make_jar({**simple_jar_entries, "META-INF/versions/17/module-info.class": descriptor_bytes})

    result = runner.invoke(app, ["describe", str(jar), "--json", "--no-emoji"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["name"] == "com.example.app"
    assert payload["java_version"] == 17
    assert [item["module"] for item in payload["requires"]] == ["java.sql", "java.base"]
    assert payload["requires"][1]["mandated"] is True


def test_describe_command_renders_table(tmp_path: Path) -> None:
    runner = CliRunner()
    runner.invoke(app, ["make-module", "--root", str(tmp_path), "--name", "demo.module", "--no-emoji"])

    result = runner.invoke(app, ["describe", str(tmp_path / "target" / "classes" / "module-info.class")])

    assert result.exit_code == 0, result.output
    assert "demo.module" in result.output
    assert "java.base (mandated)" in result.output


def test_describe_command_without_descriptor(
    make_jar: JarFactory,
    simple_jar_entries: dict[str, bytes],
) -> None:
    runner = CliRunner()
    jar = make_jar(simple_jar_entries)

    result = runner.invoke(app, ["describe", str(jar), "--no-emoji"])

    assert result.exit_code == 1
    assert "No module-info.class found" in result.output
