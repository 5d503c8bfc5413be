# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level PulseCheck facade: module lookup, deadline, dispatch, metrics."""

from __future__ import annotations

import time
from collections.abc import Mapping
from pathlib import Path

from prometheus_client import CollectorRegistry, Gauge

from .config import ProbeSettings, load_probe_settings
from .errors import UnknownModuleError
from .log import probe_logger
from .models import ProbeReport
from .probers.base import Deadline, Prober, register_metrics
from .probers.registry import default_probers, get_prober
from .schema import Config, Module, SafeConfig


class ProbeEngine:
    """
    Entry point for whatever serves probe requests.

    Each call to ``probe`` builds a fresh registry and deadline; the only state
    shared between concurrent calls is the read-only active configuration.
    """

    def __init__(
        self,
        config: SafeConfig | None = None,
        *,
        settings: ProbeSettings | None = None,
        probers: Mapping[str, Prober] | None = None,
    ):
        self.settings = settings or load_probe_settings()
        self.config = config or SafeConfig()
        self.probers = dict(probers) if probers is not None else default_probers(self.settings)

    def reload(self, path: str | Path | None = None) -> Config:
        return self.config.reload(path or self.settings.config_file)

    def resolve_timeout(self, module: Module, requested: float | None = None) -> float:
        """Module timeout, capped by the caller's budget minus the safety offset."""
        budget = requested if requested is not None and requested > 0 else self.settings.default_timeout
        budget -= self.settings.timeout_offset
        if 0 < module.timeout < budget:
            budget = module.timeout
        return max(budget, self.settings.min_timeout)

    def probe(self, target: str, module_name: str, *, timeout: float | None = None) -> ProbeReport:
        """
        Probe ``target`` with the named module.

        Raises UnknownModuleError / UnknownProberError for requests that cannot
        be dispatched; any failure inside the prober is reported as success=False.
        """
        module = self.config.current().modules.get(module_name)
        if module is None:
            raise UnknownModuleError(module_name)
        prober = get_prober(module.protocol, self.probers)

        log = probe_logger(__name__, module=module_name, target=target)
        deadline = Deadline.after(self.resolve_timeout(module, timeout))
        registry = CollectorRegistry()
        probe_success = Gauge("probe_success", "Displays whether or not the probe was a success", registry=None)
        probe_duration = Gauge(
            "probe_duration_seconds",
            "Returns how long the probe took to complete in seconds",
            registry=None,
        )
        register_metrics(registry, probe_success, probe_duration, log=log)

        log.info("Beginning probe with %s prober (timeout %.3fs)", prober.name, deadline.remaining())
        start = time.perf_counter()
        try:
            success = prober.probe(target, module, deadline, registry, log=log)
        except Exception:  # noqa: BLE001
            log.exception("Prober %s raised an unexpected error", prober.name)
            success = False
        duration = time.perf_counter() - start

        probe_duration.set(duration)
        probe_success.set(1 if success else 0)
        if success:
            log.info("Probe succeeded in %.3fs", duration)
        else:
            log.error("Probe failed after %.3fs", duration)

        return ProbeReport(
            module=module_name,
            target=target,
            prober=prober.name,
            success=success,
            duration=duration,
            registry=registry,
        )


__all__ = ["ProbeEngine"]
