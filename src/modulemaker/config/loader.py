# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Concrete configuration sources (defaults, TOML, pyproject, environment)."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Mapping, MutableMapping, Sequence
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from ..errors import ConfigurationError
from .models import ModuleMakerConfig

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "modulemaker"
OUTPUT_TIMESTAMP_ENV: Final[str] = "MODULEMAKER_OUTPUT_TIMESTAMP"

_ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


class DefaultConfigSource:
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return ModuleMakerConfig().to_dict()

    def describe(self) -> str:
        return "Built-in defaults"


class TomlConfigSource:
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, env: Mapping[str, str] | None = None) -> None:
        self._path = path
        self.name = str(path)
        self._env = os.environ if env is None else env

    def load(self) -> Mapping[str, Any]:
        document = self._read_document()
        return _expand_env(document, self._env)

    def _read_document(self) -> dict[str, Any]:
        if not self._path.is_file():
            raise ConfigurationError(f"Configuration file not found: {self._path}")
        try:
            with self._path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid TOML in {self._path}: {exc}") from exc
        except OSError as exc:
            raise ConfigurationError(f"Could not read {self._path}: {exc}") from exc
        if not isinstance(data, MutableMapping):
            raise ConfigurationError(f"Configuration at {self._path} must be a table")
        return dict(data)

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.modulemaker]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        if not self._path.is_file():
            return {}
        data = self._read_document()
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, Mapping):
            return {}
        return _expand_env(dict(section), self._env)

    def describe(self) -> str:
        return f"pyproject.toml ({self.name})"


class EnvironmentConfigSource:
    """Expose the reproducible-build timestamp supplied through the environment."""

    name = "environment"

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env = os.environ if env is None else env

    def load(self) -> Mapping[str, Any]:
        value = self._env.get(OUTPUT_TIMESTAMP_ENV)
        if not value:
            return {}
        return {"inject": {"output_timestamp": value}}

    def describe(self) -> str:
        return f"environment ({OUTPUT_TIMESTAMP_ENV})"


def load_config(
    root: Path,
    *,
    config_file: Path | None = None,
    env: Mapping[str, str] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ModuleMakerConfig:
    """Return the merged configuration for the project rooted at ``root``.

    Sources are applied in order: built-in defaults, the environment, the
    TOML document (``config_file`` or ``[tool.modulemaker]`` in
    ``pyproject.toml``), then explicit ``overrides``. Relative build paths are
    anchored at ``root``.

    Args:
        root: Project root used to locate ``pyproject.toml``.
        config_file: Optional standalone TOML file replacing ``pyproject.toml``.
        env: Environment mapping; defaults to :data:`os.environ`.
        overrides: Nested mapping applied last, typically from CLI options.

    Returns:
        ModuleMakerConfig: Validated configuration.

    Raises:
        ConfigurationError: If a source cannot be read or validation fails.
    """

    file_source: TomlConfigSource
    if config_file is not None:
        file_source = TomlConfigSource(config_file, env=env)
    else:
        file_source = PyProjectConfigSource(root / PYPROJECT_FILENAME, env=env)
    sources: Sequence[DefaultConfigSource | EnvironmentConfigSource | TomlConfigSource] = (
        DefaultConfigSource(),
        EnvironmentConfigSource(env),
        file_source,
    )
    merged: dict[str, Any] = {}
    for source in sources:
        merged = _deep_merge(merged, _canonical_keys(source.load()))
    if overrides:
        merged = _deep_merge(merged, _canonical_keys(overrides))
    try:
        config = ModuleMakerConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
    return _anchor_paths(config, root)


def _anchor_paths(config: ModuleMakerConfig, root: Path) -> ModuleMakerConfig:
    build = config.build
    updates: dict[str, Path] = {}
    if not build.directory.is_absolute():
        updates["directory"] = root / build.directory
    if not build.output_directory.is_absolute():
        updates["output_directory"] = root / build.output_directory
    if updates:
        config.build = build.model_copy(update=updates)
    source = config.inject.source
    if source is not None and not source.is_absolute():
        config.inject = config.inject.model_copy(update={"source": root / source})
    return config


def _canonical_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``data`` with hyphenated keys rewritten to their snake_case form."""

    result: dict[str, Any] = {}
    for key, value in data.items():
        canonical = key.replace("-", "_")
        if isinstance(value, Mapping):
            value = _canonical_keys(value)
        result[canonical] = value
    return result


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _expand_env(data: Mapping[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    return {key: _expand_env_value(value, env) for key, value in data.items()}


def _expand_env_value(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _expand_env_string(value, env)
    if isinstance(value, Mapping):
        return {k: _expand_env_value(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_value(v, env) for v in value]
    return value


def _expand_env_string(value: str, env: Mapping[str, str]) -> str:
    def _replace(match: re.Match[str]) -> str:
        key = match.group(1) or match.group(2)
        if key is None:
            return match.group(0)
        return env.get(key, match.group(0))

    return _ENV_VAR_PATTERN.sub(_replace, value)


__all__ = [
    "DefaultConfigSource",
    "EnvironmentConfigSource",
    "OUTPUT_TIMESTAMP_ENV",
    "PYPROJECT_FILENAME",
    "PYPROJECT_SECTION_KEY",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "load_config",
]
