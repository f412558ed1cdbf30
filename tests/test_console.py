# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

from __future__ import annotations

import pytest

from modulemaker.console import console_for, fail, info, ok, section, warn


def test_status_lines_without_emoji_are_plain(capsys: pytest.CaptureFixture[str]) -> None:
    info("one", use_emoji=False)
    ok("two", use_emoji=False)
    warn("three", use_emoji=False)
    fail("four", use_emoji=False)

    assert capsys.readouterr().out.splitlines() == ["one", "two", "three", "four"]


def test_status_lines_with_emoji_carry_a_glyph(capsys: pytest.CaptureFixture[str]) -> None:
    ok("done", use_emoji=True)

    assert capsys.readouterr().out.startswith("✅ done")


def test_section_without_terminal_is_a_dashed_heading(capsys: pytest.CaptureFixture[str]) -> None:
    section("module-info.class", use_color=True)

    assert capsys.readouterr().out == "\n--- module-info.class ---\n"


def test_consoles_are_shared_and_colourless_off_terminal() -> None:
    first = console_for(use_emoji=False, use_color=True)

    assert first is console_for(use_emoji=False)
    assert first.no_color
