# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Reproducible-build timestamps for archive entries written by module-maker.

A raw output timestamp is either absent, a count of epoch milliseconds, or an
ISO-8601 instant with an explicit offset. Once resolved, a stamper produces
the :class:`zipfile.ZipInfo` for every injected entry. Extended stamping adds
an NTFS extra field carrying creation, access and modification times on top of
the DOS modification time; basic stamping sets the DOS time only.
"""

from __future__ import annotations

import re
import struct
import time
import zipfile
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Final, TypeAlias

MILLIS_PER_SECOND: Final[int] = 1000
# 9999-12-31T23:59:59Z
MAX_EPOCH_SECONDS: Final[int] = 253_402_300_799
DOS_EPOCH: Final[tuple[int, int, int, int, int, int]] = (1980, 1, 1, 0, 0, 0)
DOS_LATEST: Final[tuple[int, int, int, int, int, int]] = (2107, 12, 31, 23, 59, 58)
DIRECTORY_ATTRIBUTES: Final[int] = (0o40755 << 16) | 0x10

NTFS_EXTRA_TAG: Final[int] = 0x000A
NTFS_TIMES_ATTRIBUTE: Final[int] = 0x0001
# 100ns intervals between 1601-01-01 and 1970-01-01
NTFS_EPOCH_OFFSET: Final[int] = 116_444_736_000_000_000
NTFS_TICKS_PER_SECOND: Final[int] = 10_000_000
_NTFS_EXTRA: Final[struct.Struct] = struct.Struct("<HHIHHQQQ")

_INTEGER_PATTERN: Final[re.Pattern[str]] = re.compile(r"[+-]?\d+")


@dataclass(frozen=True, slots=True)
class ResolvedTimestamp:
    """Outcome of resolving a raw output timestamp.

    Attributes:
        epoch_seconds: Whole seconds since the Unix epoch, or ``None`` when
            entries should carry the archive writer's default time.
    """

    epoch_seconds: int | None = None

    @property
    def is_explicit(self) -> bool:
        return self.epoch_seconds is not None


NO_TIMESTAMP: Final[ResolvedTimestamp] = ResolvedTimestamp()


def resolve_output_timestamp(raw: str | None) -> ResolvedTimestamp:
    """Resolve ``raw`` into whole epoch seconds.

    Args:
        raw: ``None``/empty, epoch milliseconds, or an ISO-8601 timestamp with
            an explicit UTC offset.

    Returns:
        ResolvedTimestamp: Resolved seconds, or :data:`NO_TIMESTAMP` when the
        value is absent, unparseable, or out of range.
    """

    if raw is None:
        return NO_TIMESTAMP
    value = raw.strip()
    if not value:
        return NO_TIMESTAMP
    if _INTEGER_PATTERN.fullmatch(value):
        seconds: int | None = _millis_to_seconds(int(value))
    elif len(value) < 2:
        seconds = None
    else:
        seconds = _parse_instant(value)
    if seconds is None or not 0 <= seconds <= MAX_EPOCH_SECONDS:
        return NO_TIMESTAMP
    return ResolvedTimestamp(epoch_seconds=seconds)


def _millis_to_seconds(millis: int) -> int:
    """Convert ``millis`` to seconds, truncating toward zero."""

    seconds = abs(millis) // MILLIS_PER_SECOND
    return seconds if millis >= 0 else -seconds


def _parse_instant(value: str) -> int | None:
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    try:
        normalized = parsed.astimezone(timezone.utc).replace(microsecond=0)
    except OverflowError:
        return None
    return int(normalized.timestamp())


class TimestampCapability(str, Enum):
    """Timestamp metadata the archive writer can record."""

    BASIC = "basic"
    EXTENDED = "extended"


def ntfs_extra_field(epoch_seconds: int) -> bytes:
    """Return an NTFS extra field stamping all three file times.

    Args:
        epoch_seconds: Non-negative seconds since the Unix epoch.

    Returns:
        bytes: Extra field with modification, access and creation times.
    """

    ticks = NTFS_EPOCH_OFFSET + epoch_seconds * NTFS_TICKS_PER_SECOND
    return _NTFS_EXTRA.pack(NTFS_EXTRA_TAG, 32, 0, NTFS_TIMES_ATTRIBUTE, 24, ticks, ticks, ticks)


def detect_timestamp_capability() -> TimestampCapability:
    """Return whether entries can carry extended timestamp fields.

    Building a throwaway entry with an NTFS extra field must succeed; any failure
    means only the DOS modification time is available.
    """

    try:
        entry = zipfile.ZipInfo("capability")
        entry.extra = ntfs_extra_field(0)
    except (AttributeError, TypeError, OverflowError, struct.error):
        return TimestampCapability.BASIC
    return TimestampCapability.EXTENDED


def dos_date_time(epoch_seconds: int) -> tuple[int, int, int, int, int, int]:
    """Return the UTC DOS date/time for ``epoch_seconds``, clamped to the DOS range."""

    stamp = time.gmtime(epoch_seconds)[:6]
    if stamp < DOS_EPOCH:
        return DOS_EPOCH
    if stamp > DOS_LATEST:
        return DOS_LATEST
    return (stamp[0], stamp[1], stamp[2], stamp[3], stamp[4], stamp[5])


def _new_entry(name: str, date_time: tuple[int, int, int, int, int, int]) -> zipfile.ZipInfo:
    entry = zipfile.ZipInfo(name, date_time=date_time)
    if name.endswith("/"):
        entry.compress_type = zipfile.ZIP_STORED
        entry.external_attr = DIRECTORY_ATTRIBUTES
    else:
        entry.compress_type = zipfile.ZIP_DEFLATED
    return entry


@dataclass(frozen=True, slots=True)
class DefaultTimestamping:
    """Stamp entries with the current local time, as the archive writer would."""

    def entry(self, name: str) -> zipfile.ZipInfo:
        now = time.localtime(time.time())[:6]
        return _new_entry(name, max(DOS_EPOCH, (now[0], now[1], now[2], now[3], now[4], now[5])))


@dataclass(frozen=True, slots=True)
class BasicTimestamping:
    """Stamp only the DOS modification time."""

    epoch_seconds: int

    def entry(self, name: str) -> zipfile.ZipInfo:
        return _new_entry(name, dos_date_time(self.epoch_seconds))


@dataclass(frozen=True, slots=True)
class ExtendedTimestamping:
    """Stamp the DOS time plus creation, access and modification times."""

    epoch_seconds: int

    def entry(self, name: str) -> zipfile.ZipInfo:
        entry = _new_entry(name, dos_date_time(self.epoch_seconds))
        entry.extra = ntfs_extra_field(self.epoch_seconds)
        return entry


EntryStamper: TypeAlias = DefaultTimestamping | BasicTimestamping | ExtendedTimestamping


def select_stamper(
    timestamp: ResolvedTimestamp,
    capability: TimestampCapability | None = None,
) -> EntryStamper:
    """Return the stamper matching ``timestamp`` and the writer's capability.

    Args:
        timestamp: Resolved output timestamp.
        capability: Detected capability; detected on demand when ``None``.

    Returns:
        EntryStamper: Stamper used for every injected entry.
    """

    if timestamp.epoch_seconds is None:
        return DefaultTimestamping()
    if capability is None:
        capability = detect_timestamp_capability()
    if capability is TimestampCapability.EXTENDED:
        return ExtendedTimestamping(timestamp.epoch_seconds)
    return BasicTimestamping(timestamp.epoch_seconds)


__all__ = [
    "BasicTimestamping",
    "DefaultTimestamping",
    "EntryStamper",
    "ExtendedTimestamping",
    "NO_TIMESTAMP",
    "ResolvedTimestamp",
    "TimestampCapability",
    "dos_date_time",
    "ntfs_extra_field",
    "detect_timestamp_capability",
    "resolve_output_timestamp",
    "select_stamper",
]
