# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Process-level settings for PulseCheck (not the probe module document)."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_USER_AGENT = f"PulseCheck/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass
class ProbeSettings:
    """Defaults applied around every probe invocation."""

    config_file: str = "pulsecheck.yml"
    default_timeout: float = 10.0
    timeout_offset: float = 0.5
    min_timeout: float = 0.1
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_env(cls) -> "ProbeSettings":
        """Create settings from environment variables (evaluated at call time)."""
        default_timeout = _float_env("PULSECHECK_DEFAULT_TIMEOUT", cls.default_timeout)
        if default_timeout <= 0:
            default_timeout = cls.default_timeout
        timeout_offset = _float_env("PULSECHECK_TIMEOUT_OFFSET", cls.timeout_offset)
        if timeout_offset < 0:
            timeout_offset = cls.timeout_offset
        return cls(
            config_file=_str_env("PULSECHECK_CONFIG_FILE", cls.config_file),
            default_timeout=default_timeout,
            timeout_offset=timeout_offset,
            user_agent=_str_env("PULSECHECK_USER_AGENT", cls.user_agent),
        )


def load_probe_settings() -> ProbeSettings:
    """Load probe settings from environment with sensible defaults."""
    return ProbeSettings.from_env()
