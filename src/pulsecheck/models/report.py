# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Result of one probe invocation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from prometheus_client import CollectorRegistry, generate_latest


@dataclass
class ProbeReport:
    """
    Outcome of a single probe plus the registry holding its metrics.

    The registry belongs to this report only; it is never shared with, or
    merged into, another probe's registry.
    """

    module: str
    target: str
    prober: str
    success: bool
    duration: float
    registry: CollectorRegistry = field(repr=False)

    def sample(self, name: str, labels: dict[str, str] | None = None) -> float | None:
        return self.registry.get_sample_value(name, labels)

    def render(self) -> str:
        """Prometheus text exposition of the probe's metrics."""
        return generate_latest(self.registry).decode("utf-8")

    def to_dict(self) -> dict[str, Any]:
        return {
            "module": self.module,
            "target": self.target,
            "prober": self.prober,
            "success": self.success,
            "duration_seconds": self.duration,
        }
