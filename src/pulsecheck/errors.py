# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl as ssl_module
from collections.abc import Iterable
from enum import Enum

import httpx
from ldap3.core.exceptions import LDAPCommunicationError, LDAPOperationResult


class ConfigError(Exception):
    """Base class for every configuration failure."""


class ValidationError(ConfigError):
    """A decoded block violates a structural or semantic rule."""


class UnknownFieldsError(ValidationError):
    def __init__(self, context: str, fields: Iterable[str]):
        self.context = context
        self.fields = [str(name) for name in fields]
        super().__init__(f"unknown fields in {context}: {', '.join(self.fields)}")


class PlatformCapabilityError(ConfigError):
    """The configuration asks for something this platform cannot do."""


class ConfigLoadError(ConfigError):
    """A reload attempt failed; the previous configuration stays active."""

    READ = "Error reading config file"
    PARSE = "Error parsing config file"

    def __init__(self, stage: str, cause: BaseException):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage}: {cause}")


class UnknownModuleError(LookupError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown module {name!r}")


class UnknownProberError(LookupError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown prober {name!r}")


class ErrorCategory(str, Enum):
    TIMEOUT = "TIMEOUT"
    SSL_ERROR = "SSL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DNS_ERROR = "DNS_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    NONE = "NONE"


def categorize_exception(exc: BaseException | None) -> ErrorCategory:
    """
    Map transport/protocol exceptions raised during a probe to ErrorCategory.

    Categories are only used for log lines; they never feed a status metric.
    """
    if exc is None:
        return ErrorCategory.NONE

    if isinstance(exc, (httpx.TimeoutException, socket.timeout, TimeoutError)):
        return ErrorCategory.TIMEOUT

    if isinstance(exc, LDAPOperationResult):
        return ErrorCategory.PROTOCOL_ERROR

    if isinstance(exc, socket.gaierror):
        return ErrorCategory.DNS_ERROR

    if isinstance(exc, (ssl_module.SSLError, ssl_module.CertificateError)):
        return ErrorCategory.SSL_ERROR

    if isinstance(exc, LDAPCommunicationError):
        # ldap3 wraps socket timeouts in its own communication errors.
        if "timed out" in str(exc).lower():
            return ErrorCategory.TIMEOUT
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (httpx.ConnectError, httpx.NetworkError, httpx.ProxyError, httpx.RemoteProtocolError)):
        return ErrorCategory.CONNECTION_ERROR

    if isinstance(exc, (ConnectionError, ConnectionRefusedError, ConnectionResetError)):
        return ErrorCategory.CONNECTION_ERROR

    return ErrorCategory.UNKNOWN_ERROR


__all__ = [
    "ConfigError",
    "ConfigLoadError",
    "ErrorCategory",
    "PlatformCapabilityError",
    "UnknownFieldsError",
    "UnknownModuleError",
    "UnknownProberError",
    "ValidationError",
    "categorize_exception",
]
