# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Protocol name to prober mapping."""

from __future__ import annotations

from collections.abc import Mapping

from ..config import ProbeSettings
from ..errors import UnknownProberError
from .base import Prober
from .http import HTTPProber
from .ldap import LDAPProber


def default_probers(settings: ProbeSettings | None = None) -> dict[str, Prober]:
    probers: list[Prober] = [HTTPProber(settings=settings), LDAPProber()]
    return {prober.name: prober for prober in probers}


PROBER_NAMES = ("http", "ldap")


def get_prober(name: str, probers: Mapping[str, Prober] | None = None) -> Prober:
    """Look up a prober; without a table, defaults are built from the current environment."""
    table = default_probers() if probers is None else probers
    try:
        return table[name]
    except KeyError:
        raise UnknownProberError(name) from None


__all__ = ["PROBER_NAMES", "default_probers", "get_prober"]
