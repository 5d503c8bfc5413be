# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""LDAP connection abstraction and the ldap3-backed implementation."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import suppress
from typing import Any, Protocol

from ldap3 import ANONYMOUS, AUTO_BIND_NONE, DEREF_NEVER, NONE, SIMPLE, Connection, Server
from ldap3.core.exceptions import LDAPException, LDAPOperationResult

from .utils import parse_target

LDAP_PORT = 389
LDAPS_PORT = 636


class LdapConnection(Protocol):
    """Operations the LDAP prober needs from an open connection."""

    def set_timeout(self, seconds: float) -> None: ...

    def simple_bind(self, username: str, password: str) -> None: ...

    def paged_search(
        self,
        base_dn: str,
        scope: str,
        search_filter: str,
        attributes: list[str],
        page_size: int,
    ) -> list[dict[str, Any]]: ...

    def close(self) -> None: ...


# Opens a connection to ``target`` within ``timeout`` seconds.
LdapDialer = Callable[[str, float], LdapConnection]


def ldap_result_code(exc: BaseException) -> int | None:
    """Result code of a typed LDAP protocol error; None for transport failures."""
    if isinstance(exc, LDAPOperationResult) and exc.result is not None:
        return int(exc.result)
    return None


class Ldap3Connection:
    """LdapConnection over a synchronous ldap3 Connection."""

    def __init__(self, connection: Connection):
        self._conn = connection

    @classmethod
    def dial(cls, target: str, timeout: float) -> "Ldap3Connection":
        address = parse_target(target)
        use_ssl = address.scheme == "ldaps"
        server = Server(
            address.host,
            port=address.port or (LDAPS_PORT if use_ssl else LDAP_PORT),
            use_ssl=use_ssl,
            get_info=NONE,
            connect_timeout=timeout,
        )
        connection = Connection(
            server,
            auto_bind=AUTO_BIND_NONE,
            raise_exceptions=True,
            read_only=True,
        )
        connection.open(read_server_info=False)
        return cls(connection)

    def set_timeout(self, seconds: float) -> None:
        self._conn.receive_timeout = seconds
        sock = getattr(self._conn, "socket", None)
        if sock is not None:
            sock.settimeout(seconds)

    def simple_bind(self, username: str, password: str) -> None:
        # An empty password is an unauthenticated bind; the name is still sent.
        self._conn.user = username or None
        self._conn.password = password or None
        self._conn.authentication = SIMPLE if password else ANONYMOUS
        if not self._conn.bind(read_server_info=False):
            result = self._conn.result or {}
            raise LDAPOperationResult(
                result=result.get("result"),
                description=result.get("description"),
                message=result.get("message"),
            )

    def paged_search(
        self,
        base_dn: str,
        scope: str,
        search_filter: str,
        attributes: list[str],
        page_size: int,
    ) -> list[dict[str, Any]]:
        responses = self._conn.extend.standard.paged_search(
            search_base=base_dn,
            search_filter=search_filter,
            search_scope=scope,
            dereference_aliases=DEREF_NEVER,
            attributes=attributes,
            paged_size=page_size,
            generator=False,
        )
        return [entry for entry in responses if entry.get("type") == "searchResEntry"]

    def close(self) -> None:
        with suppress(LDAPException, OSError):
            self._conn.unbind()


def default_ldap_dialer(target: str, timeout: float) -> LdapConnection:
    return Ldap3Connection.dial(target, timeout)


__all__ = [
    "LDAPS_PORT",
    "LDAP_PORT",
    "Ldap3Connection",
    "LdapConnection",
    "LdapDialer",
    "default_ldap_dialer",
    "ldap_result_code",
]
