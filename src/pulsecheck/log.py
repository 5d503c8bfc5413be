# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging helpers for PulseCheck."""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping
from typing import Any

DEFAULT_LOG_LEVEL = os.getenv("PULSECHECK_LOG_LEVEL", "WARNING").upper()


def setup_logging(level: str | None = None) -> None:
    """Configure standard logging for CLI/library use."""
    effective_level = (level or DEFAULT_LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, effective_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


class ProbeLogAdapter(logging.LoggerAdapter):
    """Prefix probe log lines with the module and target being probed."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = self.extra or {}
        return f"[module={extra.get('module', '-')} target={extra.get('target', '-')}] {msg}", kwargs


def probe_logger(name: str, *, module: str | None = None, target: str | None = None) -> ProbeLogAdapter:
    return ProbeLogAdapter(logging.getLogger(name), {"module": module or "-", "target": target or "-"})


__all__ = ["ProbeLogAdapter", "probe_logger", "setup_logging"]
