# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Shared contract for protocol probers.

A prober runs its phases strictly in sequence under one deadline, publishes
a duration per completed phase and a protocol status code, and reports a
single boolean. Metrics go into a registry that belongs to one invocation.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Gauge
from prometheus_client.registry import Collector

from ..schema.types import Module

# Transport timeouts must stay positive; zero would switch sockets to non-blocking.
MIN_TRANSPORT_TIMEOUT = 0.001

ProbeLogger = logging.Logger | logging.LoggerAdapter


@dataclass(frozen=True)
class Deadline:
    """Absolute point on the monotonic clock that bounds a whole probe."""

    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> "Deadline":
        return cls(time.monotonic() + seconds)

    def remaining(self) -> float:
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0

    def timeout(self) -> float:
        """Time left, usable as a socket/client timeout."""
        return max(self.remaining(), MIN_TRANSPORT_TIMEOUT)


class Prober(ABC):
    name: str = "base"

    @abstractmethod
    def probe(
        self,
        target: str,
        module: Module,
        deadline: Deadline,
        registry: CollectorRegistry,
        *,
        log: ProbeLogger | None = None,
    ) -> bool: ...

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"{self.__class__.__name__}(name={self.name!r})"


def register_metrics(registry: CollectorRegistry, *collectors: Collector, log: ProbeLogger) -> None:
    """Register collectors before any value is set; failures are logged, never raised."""
    for collector in collectors:
        try:
            registry.register(collector)
        except ValueError as exc:
            log.error("Error registering metric: %s", exc)


def phase_gauge(subsystem: str, name: str, documentation: str) -> Gauge:
    """Unregistered per-phase duration gauge; children appear only for phases that ran."""
    return Gauge(name, documentation, ["phase"], namespace="probe", subsystem=subsystem, registry=None)


@contextmanager
def timed_phase(durations: Gauge, phase: str) -> Iterator[None]:
    """Record the phase duration whether the body succeeds or raises."""
    start = time.perf_counter()
    try:
        yield
    finally:
        durations.labels(phase=phase).set(time.perf_counter() - start)


def record_status(
    status: Gauge,
    exc: BaseException,
    extract: Callable[[BaseException], int | None],
) -> int | None:
    """Publish the protocol code carried by ``exc``; leave the gauge alone when there is none."""
    code = extract(exc)
    if code is not None:
        status.set(code)
    return code


__all__ = [
    "Deadline",
    "MIN_TRANSPORT_TIMEOUT",
    "Prober",
    "phase_gauge",
    "record_status",
    "register_metrics",
    "timed_phase",
]
