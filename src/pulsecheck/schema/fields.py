# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Scalar field types that need custom decoding or encoding."""

from __future__ import annotations

import re
from dataclasses import field
from typing import Any

from ..errors import ValidationError

REDACTED = "<secret>"

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")
_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


class Secret(str):
    """A string that never shows its value in reprs or serialized configs."""

    def __repr__(self) -> str:
        return REDACTED


def parse_duration(value: Any) -> float:
    """
    Parse a Go-style duration ("5s", "1m30s", "250ms") into seconds.

    Bare numbers are taken as seconds.
    """
    if isinstance(value, bool):
        raise ValidationError(f'invalid duration "{value}"')
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValidationError(f'invalid duration "{value}"')
        return float(value)
    if not isinstance(value, str):
        raise ValidationError(f'invalid duration "{value}"')

    text = value.strip()
    if text in {"", "0"}:
        return 0.0

    total = 0.0
    pos = 0
    for match in _DURATION_PART_RE.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text) or pos == 0:
        raise ValidationError(f'invalid duration "{value}"')
    return total


def format_duration(seconds: float) -> str:
    if seconds <= 0:
        return "0s"
    if seconds < 1:
        return f"{seconds * 1000:g}ms"
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    out = ""
    if hours:
        out += f"{int(hours)}h"
    if minutes:
        out += f"{int(minutes)}m"
    if secs or not out:
        out += f"{secs:g}s"
    return out


def duration_field(default: float = 0.0) -> Any:
    """Dataclass field holding seconds, written as a duration string in YAML."""
    return field(default=default, metadata={"decode": parse_duration, "encode": format_duration})


__all__ = ["REDACTED", "Secret", "duration_field", "format_duration", "parse_duration"]
