# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Protocol prober exports."""

from .base import Deadline, Prober, phase_gauge, record_status, register_metrics, timed_phase
from .http import HTTPProber, PhaseTrace, build_ssl_context
from .ldap import LDAPProber
from .ldap_client import Ldap3Connection, LdapConnection, LdapDialer, default_ldap_dialer, ldap_result_code
from .registry import PROBER_NAMES, default_probers, get_prober
from .utils import TargetAddress, parse_target

__all__ = [
    "Deadline",
    "HTTPProber",
    "LDAPProber",
    "Ldap3Connection",
    "LdapConnection",
    "LdapDialer",
    "PROBER_NAMES",
    "PhaseTrace",
    "Prober",
    "TargetAddress",
    "build_ssl_context",
    "default_ldap_dialer",
    "default_probers",
    "get_prober",
    "ldap_result_code",
    "parse_target",
    "phase_gauge",
    "record_status",
    "register_metrics",
    "timed_phase",
]
