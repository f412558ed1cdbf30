# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rich rendering for decoded module descriptors."""

from __future__ import annotations

import json
from typing import Any

from rich import box
from rich.table import Table

from ....descriptor import ModuleDescriptor, PackageVisibility, Requirement


def _requirement_label(requirement: Requirement) -> str:
    modifiers = [
        label
        for flag, label in ((requirement.is_static, "static"), (requirement.is_mandated, "mandated"))
        if flag
    ]
    suffix = f" ({', '.join(modifiers)})" if modifiers else ""
    return f"{requirement.module}{suffix}"


def _visibility_label(entry: PackageVisibility) -> str:
    if not entry.targets:
        return entry.package
    return f"{entry.package} to {', '.join(entry.targets)}"


def build_descriptor_table(descriptor: ModuleDescriptor) -> Table:
    """Return a two-column table listing every directive of ``descriptor``."""

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Directive", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_row("module", descriptor.name)
    table.add_row("version", descriptor.version or "-")
    table.add_row("java", f"{descriptor.java_version} (class file {descriptor.major_version}.0)")
    rows: list[tuple[str, str]] = [
        *(("requires", _requirement_label(item)) for item in descriptor.requires),
        *(("exports", _visibility_label(item)) for item in descriptor.exports),
        *(("opens", _visibility_label(item)) for item in descriptor.opens),
        *(("uses", item) for item in descriptor.uses),
        *(("provides", f"{item.service} with {', '.join(item.providers)}") for item in descriptor.provides),
        *(("package", item) for item in descriptor.packages),
    ]
    for directive, value in rows:
        table.add_row(directive, value)
    if descriptor.main_class:
        table.add_row("main-class", descriptor.main_class)
    return table


def descriptor_payload(descriptor: ModuleDescriptor) -> dict[str, Any]:
    """Return a JSON-compatible mapping for ``descriptor``."""

    return {
        "name": descriptor.name,
        "version": descriptor.version,
        "java_version": descriptor.java_version,
        "requires": [
            {"module": item.module, "static": item.is_static, "mandated": item.is_mandated}
            for item in descriptor.requires
        ],
        "exports": [{"package": item.package, "to": list(item.targets)} for item in descriptor.exports],
        "opens": [{"package": item.package, "to": list(item.targets)} for item in descriptor.opens],
        "uses": list(descriptor.uses),
        "provides": [{"service": item.service, "with": list(item.providers)} for item in descriptor.provides],
        "packages": list(descriptor.packages),
        "main_class": descriptor.main_class,
    }


def render_json(descriptor: ModuleDescriptor) -> str:
    return json.dumps(descriptor_payload(descriptor), indent=2)


__all__ = ["build_descriptor_table", "descriptor_payload", "render_json"]
