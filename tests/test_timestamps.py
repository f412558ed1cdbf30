# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

from __future__ import annotations

import struct
import zipfile

import pytest

from modulemaker.timestamps import (
    NO_TIMESTAMP,
    BasicTimestamping,
    DefaultTimestamping,
    ExtendedTimestamping,
    ResolvedTimestamp,
    TimestampCapability,
    dos_date_time,
    ntfs_extra_field,
    detect_timestamp_capability,
    resolve_output_timestamp,
    select_stamper,
)


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_absent_timestamp_uses_writer_default(raw: str | None) -> None:
    assert resolve_output_timestamp(raw) is NO_TIMESTAMP
    assert not NO_TIMESTAMP.is_explicit


def test_epoch_milliseconds_truncate_to_seconds() -> None:
    assert resolve_output_timestamp("1704067200999") == ResolvedTimestamp(1_704_067_200)
    assert resolve_output_timestamp("0") == ResolvedTimestamp(0)


def test_negative_epoch_is_out_of_range() -> None:
    assert resolve_output_timestamp("-1500") is NO_TIMESTAMP


def test_iso_instants_with_offsets_are_normalized_to_utc() -> None:
    assert resolve_output_timestamp("2024-01-01T00:00:00Z").epoch_seconds == 1_704_067_200
    assert resolve_output_timestamp("2024-01-01T02:00:00.750+02:00").epoch_seconds == 1_704_067_200


@pytest.mark.parametrize(
    "raw",
    [
        "2024-01-01T00:00:00",
        "yesterday",
        "x",
        "2024-13-45T00:00:00Z",
        "9999-12-31T23:59:59-01:00",
        "0001-01-01T00:00:00+01:00",
    ],
)
def test_unusable_values_fall_back_to_no_timestamp(raw: str) -> None:
    assert resolve_output_timestamp(raw) is NO_TIMESTAMP


def test_timestamp_beyond_year_9999_is_rejected() -> None:
    assert resolve_output_timestamp(str(253_402_300_800 * 1000)) is NO_TIMESTAMP


def test_dos_date_time_is_utc_and_clamped() -> None:
    assert dos_date_time(1_704_067_200) == (2024, 1, 1, 0, 0, 0)
    assert dos_date_time(0) == (1980, 1, 1, 0, 0, 0)
    assert dos_date_time(253_402_300_799) == (2107, 12, 31, 23, 59, 58)


def test_ntfs_extra_field_layout() -> None:
    extra = ntfs_extra_field(0)

    tag, size, _reserved, attribute, attribute_size, mtime, atime, ctime = struct.unpack("<HHIHHQQQ", extra)
    assert (tag, size, attribute, attribute_size) == (0x000A, 32, 0x0001, 24)
    assert mtime == atime == ctime == 116_444_736_000_000_000
    assert len(extra) == 36


def test_detection_reports_extended_capability() -> None:
    assert detect_timestamp_capability() is TimestampCapability.EXTENDED


def test_select_stamper_follows_timestamp_and_capability() -> None:
    explicit = ResolvedTimestamp(1_704_067_200)

    assert isinstance(select_stamper(NO_TIMESTAMP), DefaultTimestamping)
    assert select_stamper(explicit, TimestampCapability.BASIC) == BasicTimestamping(1_704_067_200)
    assert select_stamper(explicit, TimestampCapability.EXTENDED) == ExtendedTimestamping(1_704_067_200)


def test_basic_stamper_sets_only_dos_time() -> None:
    entry = BasicTimestamping(1_704_067_200).entry("module-info.class")

    assert entry.date_time == (2024, 1, 1, 0, 0, 0)
    assert entry.extra == b""
    assert entry.compress_type == zipfile.ZIP_DEFLATED


def test_extended_stamper_adds_ntfs_times() -> None:
    entry = ExtendedTimestamping(1_704_067_200).entry("META-INF/versions/")

    assert entry.date_time == (2024, 1, 1, 0, 0, 0)
    assert entry.extra == ntfs_extra_field(1_704_067_200)
    assert entry.compress_type == zipfile.ZIP_STORED
    assert entry.is_dir()
