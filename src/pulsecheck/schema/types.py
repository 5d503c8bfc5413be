# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Typed probe module definitions.

Every class here is decoded strictly: a YAML key with no matching field is an
error. ``context_name`` is the label used in those error messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .fields import Secret, duration_field

PROTOCOLS = ("http", "tcp", "icmp", "dns", "ldap")


def is_zero(value: object) -> bool:
    """True when a dataclass block equals its default (i.e. was not configured)."""
    return value == type(value)()


@dataclass(frozen=True)
class TLSConfig:
    context_name: ClassVar[str] = "tls config"

    ca_file: str = ""
    cert_file: str = ""
    key_file: str = ""
    server_name: str = ""
    insecure_skip_verify: bool = False


@dataclass(frozen=True)
class BasicAuth:
    context_name: ClassVar[str] = "basic auth"

    username: str = ""
    password: Secret = Secret("")
    password_file: str = ""


@dataclass(frozen=True)
class HTTPProbe:
    context_name: ClassVar[str] = "http probe"

    # Defaults to 2xx.
    valid_status_codes: list[int] = field(default_factory=list)
    valid_http_versions: list[str] = field(default_factory=list)
    preferred_ip_protocol: str = ""
    no_follow_redirects: bool = False
    fail_if_ssl: bool = False
    fail_if_not_ssl: bool = False
    method: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    fail_if_matches_regexp: list[str] = field(default_factory=list)
    fail_if_not_matches_regexp: list[str] = field(default_factory=list)
    body: str = ""
    # HTTP client options, written inline in the http block.
    basic_auth: BasicAuth = field(default_factory=BasicAuth)
    bearer_token: Secret = Secret("")
    bearer_token_file: str = ""
    proxy_url: str = ""
    tls_config: TLSConfig = field(default_factory=TLSConfig)


@dataclass(frozen=True)
class QueryResponse:
    context_name: ClassVar[str] = "query response"

    expect: str = ""
    send: str = ""
    starttls: bool = False


@dataclass(frozen=True)
class TCPProbe:
    context_name: ClassVar[str] = "tcp probe"

    preferred_ip_protocol: str = ""
    query_response: list[QueryResponse] = field(default_factory=list)
    tls: bool = False
    tls_config: TLSConfig = field(default_factory=TLSConfig)


@dataclass(frozen=True)
class ICMPProbe:
    context_name: ClassVar[str] = "icmp probe"

    preferred_ip_protocol: str = ""  # Defaults to "ip6".
    payload_size: int = 0
    dont_fragment: bool = False


@dataclass(frozen=True)
class DNSRRValidator:
    context_name: ClassVar[str] = "dns rr validator"

    fail_if_matches_regexp: list[str] = field(default_factory=list)
    fail_if_not_matches_regexp: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class DNSProbe:
    context_name: ClassVar[str] = "dns probe"

    preferred_ip_protocol: str = ""
    transport_protocol: str = ""
    query_name: str = ""
    query_type: str = ""  # Defaults to ANY.
    valid_rcodes: list[str] = field(default_factory=list)  # Defaults to NOERROR.
    validate_answer_rrs: DNSRRValidator = field(default_factory=DNSRRValidator)
    validate_authority_rrs: DNSRRValidator = field(default_factory=DNSRRValidator)
    validate_additional_rrs: DNSRRValidator = field(default_factory=DNSRRValidator)


@dataclass(frozen=True)
class LDAPBind:
    context_name: ClassVar[str] = "ldap bind"

    username: str = ""
    password: Secret = Secret("")


@dataclass(frozen=True)
class LDAPQuery:
    context_name: ClassVar[str] = "ldap query"

    dn: str = ""
    filter: str = ""  # Empty means "(objectClass=*)".
    scope: str = ""
    attributes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class LDAPProbe:
    context_name: ClassVar[str] = "ldap probe"

    bind_simple: LDAPBind = field(default_factory=LDAPBind)
    query: LDAPQuery = field(default_factory=LDAPQuery)


@dataclass(frozen=True)
class Module:
    context_name: ClassVar[str] = "module"

    prober: str = ""
    timeout: float = duration_field()
    http: HTTPProbe = field(default_factory=HTTPProbe)
    tcp: TCPProbe = field(default_factory=TCPProbe)
    icmp: ICMPProbe = field(default_factory=ICMPProbe)
    dns: DNSProbe = field(default_factory=DNSProbe)
    ldap: LDAPProbe = field(default_factory=LDAPProbe)

    def configured_protocols(self) -> list[str]:
        return [name for name in PROTOCOLS if not is_zero(getattr(self, name))]

    @property
    def protocol(self) -> str:
        """Dispatch key: the explicit prober, else the configured protocol block."""
        if self.prober:
            return self.prober
        configured = self.configured_protocols()
        return configured[0] if configured else ""


@dataclass(frozen=True)
class Config:
    context_name: ClassVar[str] = "config"

    modules: dict[str, Module] = field(default_factory=dict)


__all__ = [
    "BasicAuth",
    "Config",
    "DNSProbe",
    "DNSRRValidator",
    "HTTPProbe",
    "ICMPProbe",
    "LDAPBind",
    "LDAPProbe",
    "LDAPQuery",
    "Module",
    "PROTOCOLS",
    "QueryResponse",
    "TCPProbe",
    "TLSConfig",
    "is_zero",
]
