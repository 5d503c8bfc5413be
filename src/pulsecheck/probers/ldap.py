# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""LDAP prober: connect, simple bind, then an optional paged search."""

from __future__ import annotations

import logging
import time

from ldap3 import ALL_ATTRIBUTES
from prometheus_client import CollectorRegistry, Gauge

from ..errors import categorize_exception
from ..schema.types import Module
from ..schema.validators import DEFAULT_LDAP_SCOPE, LDAP_SCOPES
from .base import Deadline, ProbeLogger, Prober, phase_gauge, record_status, register_metrics, timed_phase
from .ldap_client import LdapConnection, LdapDialer, default_ldap_dialer, ldap_result_code

logger = logging.getLogger(__name__)

SEARCH_PAGE_SIZE = 100
MATCH_ALL_FILTER = "(objectClass=*)"


class LDAPProber(Prober):
    name = "ldap"

    def __init__(self, dialer: LdapDialer | None = None):
        self.dialer = dialer or default_ldap_dialer

    def probe(
        self,
        target: str,
        module: Module,
        deadline: Deadline,
        registry: CollectorRegistry,
        *,
        log: ProbeLogger | None = None,
    ) -> bool:
        log = log or logger
        status_code = Gauge(
            "status_code",
            "The status-code returned by LDAP server",
            namespace="probe",
            subsystem="ldap",
            registry=None,
        )
        durations = phase_gauge("ldap", "duration", "The duration it took for different phase of probing")
        result_count = Gauge(
            "result_count",
            "The number of entries returned by LDAP server",
            namespace="probe",
            subsystem="ldap",
            registry=None,
        )
        register_metrics(registry, status_code, durations, result_count, log=log)

        connect_start = time.perf_counter()
        try:
            conn = self.dialer(target, deadline.timeout())
        except Exception as exc:  # noqa: BLE001
            log.error("Error dialing LDAP (%s): %s", categorize_exception(exc).value, exc)
            return False

        try:
            durations.labels(phase="connect").set(time.perf_counter() - connect_start)
            log.info("Successfully connected")
            try:
                conn.set_timeout(deadline.timeout())
            except Exception as exc:  # noqa: BLE001
                log.error("Error setting LDAP timeout (%s): %s", categorize_exception(exc).value, exc)
                return False
            return self._bind_and_search(conn, module, durations, status_code, result_count, log)
        finally:
            conn.close()

    def _bind_and_search(
        self,
        conn: LdapConnection,
        module: Module,
        durations: Gauge,
        status_code: Gauge,
        result_count: Gauge,
        log: ProbeLogger,
    ) -> bool:
        bind = module.ldap.bind_simple
        try:
            with timed_phase(durations, "bind"):
                conn.simple_bind(bind.username, bind.password)
        except Exception as exc:  # noqa: BLE001
            record_status(status_code, exc, ldap_result_code)
            log.error("Error during bind (%s): %s", categorize_exception(exc).value, exc)
            return False
        status_code.set(0)

        query = module.ldap.query
        if query.dn == "":
            return True

        try:
            with timed_phase(durations, "search"):
                entries = conn.paged_search(
                    query.dn,
                    LDAP_SCOPES[query.scope or DEFAULT_LDAP_SCOPE],
                    query.filter or MATCH_ALL_FILTER,
                    list(query.attributes) or [ALL_ATTRIBUTES],
                    SEARCH_PAGE_SIZE,
                )
        except Exception as exc:  # noqa: BLE001
            record_status(status_code, exc, ldap_result_code)
            log.error("Error during search (%s): %s", categorize_exception(exc).value, exc)
            return False

        result_count.set(len(entries))
        log.info("Search returned %d entries", len(entries))
        return True


__all__ = ["LDAPProber", "MATCH_ALL_FILTER", "SEARCH_PAGE_SIZE"]
