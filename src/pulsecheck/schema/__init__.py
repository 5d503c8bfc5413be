# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe module schema: strict decoding, validation and the config holder."""

from .decode import StrictDecoder, encode
from .fields import REDACTED, Secret, format_duration, parse_duration
from .loader import dump_config, load_config, read_config_file
from .safe_config import ReadWriteLock, SafeConfig
from .types import (
    PROTOCOLS,
    BasicAuth,
    Config,
    DNSProbe,
    DNSRRValidator,
    HTTPProbe,
    ICMPProbe,
    LDAPBind,
    LDAPProbe,
    LDAPQuery,
    Module,
    QueryResponse,
    TCPProbe,
    TLSConfig,
)
from .validators import DEFAULT_LDAP_SCOPE, LDAP_SCOPES, VALIDATORS

__all__ = [
    "BasicAuth",
    "Config",
    "DEFAULT_LDAP_SCOPE",
    "DNSProbe",
    "DNSRRValidator",
    "HTTPProbe",
    "ICMPProbe",
    "LDAPBind",
    "LDAPProbe",
    "LDAPQuery",
    "LDAP_SCOPES",
    "Module",
    "PROTOCOLS",
    "QueryResponse",
    "REDACTED",
    "ReadWriteLock",
    "SafeConfig",
    "Secret",
    "StrictDecoder",
    "TCPProbe",
    "TLSConfig",
    "VALIDATORS",
    "dump_config",
    "encode",
    "format_duration",
    "load_config",
    "parse_duration",
    "read_config_file",
]
