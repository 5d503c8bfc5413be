# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
import socket
import ssl

import httpx
import pytest
from ldap3.core.exceptions import LDAPOperationResult, LDAPSocketOpenError, LDAPSocketReceiveError

from pulsecheck import config
from pulsecheck.config import DEFAULT_USER_AGENT, ProbeSettings
from pulsecheck.errors import (
    ConfigError,
    ConfigLoadError,
    ErrorCategory,
    UnknownFieldsError,
    ValidationError,
    categorize_exception,
)
from pulsecheck.log import probe_logger, setup_logging


def test_probe_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("PULSECHECK_CONFIG_FILE", "/etc/pulsecheck/modules.yml")
    monkeypatch.setenv("PULSECHECK_DEFAULT_TIMEOUT", "4.5")
    monkeypatch.setenv("PULSECHECK_TIMEOUT_OFFSET", "0.25")
    monkeypatch.setenv("PULSECHECK_USER_AGENT", "CustomAgent/1.0")

    settings = config.load_probe_settings()

    assert settings.config_file == "/etc/pulsecheck/modules.yml"
    assert settings.default_timeout == 4.5
    assert settings.timeout_offset == 0.25
    assert settings.user_agent == "CustomAgent/1.0"


def test_probe_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("PULSECHECK_DEFAULT_TIMEOUT", "soon")
    monkeypatch.setenv("PULSECHECK_TIMEOUT_OFFSET", "-1")
    monkeypatch.setenv("PULSECHECK_USER_AGENT", "   ")
    monkeypatch.delenv("PULSECHECK_CONFIG_FILE", raising=False)

    settings = config.load_probe_settings()

    assert settings.default_timeout == ProbeSettings.default_timeout
    assert settings.timeout_offset == ProbeSettings.timeout_offset
    assert settings.user_agent == DEFAULT_USER_AGENT
    assert settings.config_file == "pulsecheck.yml"


def test_zero_default_timeout_is_rejected(monkeypatch):
    monkeypatch.setenv("PULSECHECK_DEFAULT_TIMEOUT", "0")
    assert config.load_probe_settings().default_timeout == ProbeSettings.default_timeout


def test_error_hierarchy():
    unknown = UnknownFieldsError("ldap query", ["base", "size"])
    assert isinstance(unknown, ValidationError)
    assert isinstance(unknown, ConfigError)
    assert str(unknown) == "unknown fields in ldap query: base, size"

    cause = ValidationError("DN is required to query LDAP")
    wrapped = ConfigLoadError(ConfigLoadError.PARSE, cause)
    assert str(wrapped) == "Error parsing config file: DN is required to query LDAP"
    assert wrapped.cause is cause
    assert wrapped.stage == ConfigLoadError.PARSE


@pytest.mark.parametrize(
    ("exc", "category"),
    [
        (None, ErrorCategory.NONE),
        (httpx.ReadTimeout("slow"), ErrorCategory.TIMEOUT),
        (socket.timeout("timed out"), ErrorCategory.TIMEOUT),
        (LDAPSocketReceiveError("socket receive error: timed out"), ErrorCategory.TIMEOUT),
        (LDAPSocketOpenError("unable to open socket"), ErrorCategory.CONNECTION_ERROR),
        (LDAPOperationResult(result=49, description="invalidCredentials"), ErrorCategory.PROTOCOL_ERROR),
        (socket.gaierror("Name or service not known"), ErrorCategory.DNS_ERROR),
        (ssl.SSLError("bad handshake"), ErrorCategory.SSL_ERROR),
        (httpx.ConnectError("refused"), ErrorCategory.CONNECTION_ERROR),
        (ConnectionRefusedError(), ErrorCategory.CONNECTION_ERROR),
        (ValueError("other"), ErrorCategory.UNKNOWN_ERROR),
    ],
)
def test_categorize_exception(exc, category):
    assert categorize_exception(exc) == category


def test_probe_logger_prefixes_context(caplog):
    log = probe_logger("pulsecheck.test", module="ldap_bind", target="ldap:389")

    with caplog.at_level(logging.INFO, logger="pulsecheck.test"):
        log.info("Successfully connected")

    assert "[module=ldap_bind target=ldap:389] Successfully connected" in caplog.text


def test_setup_logging_accepts_unknown_level():
    setup_logging("not-a-level")
    setup_logging("debug")
