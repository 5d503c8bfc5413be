# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Read, decode and dump probe configuration documents."""

from __future__ import annotations

from pathlib import Path

import yaml

from ..errors import ConfigError, ConfigLoadError
from .decode import StrictDecoder, encode
from .types import Config
from .validators import VALIDATORS

_DECODER = StrictDecoder(VALIDATORS)


def load_config(data: bytes | str) -> Config:
    """Decode and validate a YAML document; never returns a partially valid result."""
    try:
        raw = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise ConfigError(f"yaml: {exc}") from exc
    return _DECODER.decode(Config, raw)


def read_config_file(path: str | Path) -> Config:
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ConfigLoadError(ConfigLoadError.READ, exc) from exc
    try:
        return load_config(data)
    except ConfigError as exc:
        raise ConfigLoadError(ConfigLoadError.PARSE, exc) from exc


def dump_config(config: Config) -> str:
    """Serialize a config for display. Secrets are always redacted."""
    return yaml.safe_dump(encode(config), sort_keys=False, default_flow_style=False)


__all__ = ["dump_config", "load_config", "read_config_file"]
