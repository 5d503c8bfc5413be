# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Target parsing shared by probers."""

from __future__ import annotations

from typing import NamedTuple
from urllib.parse import urlsplit


class TargetAddress(NamedTuple):
    host: str
    port: int | None
    scheme: str = ""


def parse_target(target: str) -> TargetAddress:
    """
    Split ``host``, ``host:port``, ``[v6]:port`` or ``scheme://host:port``.

    Raises ValueError when the host is missing or the port is not a number.
    """
    raw = (target or "").strip()
    if "://" in raw:
        parts = urlsplit(raw)
        host = parts.hostname or ""
        port = parts.port
        scheme = parts.scheme.lower()
    else:
        scheme = ""
        if raw.startswith("["):
            host, _, rest = raw[1:].partition("]")
            port_text = rest[1:] if rest.startswith(":") else ""
        elif raw.count(":") == 1:
            host, _, port_text = raw.partition(":")
        else:
            # Bare host or unbracketed IPv6 literal.
            host, port_text = raw, ""
        try:
            port = int(port_text) if port_text else None
        except ValueError:
            raise ValueError(f"invalid port in target {target!r}") from None
    if not host:
        raise ValueError(f"missing host in target {target!r}")
    if port is not None and not 0 < port < 65536:
        raise ValueError(f"invalid port in target {target!r}")
    return TargetAddress(host=host, port=port, scheme=scheme)


__all__ = ["TargetAddress", "parse_target"]
