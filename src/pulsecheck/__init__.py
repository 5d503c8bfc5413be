# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
PulseCheck package entrypoint.

PulseCheck loads a strictly validated YAML document of named probe modules
and runs protocol probers (LDAP, HTTP) against targets, publishing per-phase
durations and protocol status codes into a fresh Prometheus registry for each
invocation. Transports are injectable so probers can be exercised offline.
"""

from .config import ProbeSettings, load_probe_settings
from .errors import (
    ConfigError,
    ConfigLoadError,
    ErrorCategory,
    PlatformCapabilityError,
    UnknownFieldsError,
    UnknownModuleError,
    UnknownProberError,
    ValidationError,
)
from .log import setup_logging
from .models import ProbeReport
from .probers import Deadline, HTTPProber, LDAPProber, Prober, get_prober
from .runtime import ProbeEngine
from .schema import Config, Module, SafeConfig, dump_config, load_config
from .version import __version__

__all__ = [
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "Deadline",
    "ErrorCategory",
    "HTTPProber",
    "LDAPProber",
    "Module",
    "PlatformCapabilityError",
    "ProbeEngine",
    "ProbeReport",
    "ProbeSettings",
    "Prober",
    "SafeConfig",
    "UnknownFieldsError",
    "UnknownModuleError",
    "UnknownProberError",
    "ValidationError",
    "dump_config",
    "get_prober",
    "load_config",
    "load_probe_settings",
    "setup_logging",
    "__version__",
]
