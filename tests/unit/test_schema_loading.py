# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from pathlib import Path

import pytest

from pulsecheck.errors import ConfigLoadError, UnknownFieldsError, ValidationError
from pulsecheck.schema import LDAP_SCOPES, SafeConfig, dump_config, load_config
from pulsecheck.schema.types import Config

TESTDATA = Path(__file__).resolve().parent.parent / "testdata"
PARSE_PREFIX = "Error parsing config file: "


def test_load_good_config():
    holder = SafeConfig()
    config = holder.reload(TESTDATA / "pulsecheck-good.yml")

    assert holder.current() is config
    assert set(config.modules) == {
        "http_2xx",
        "tcp_connect",
        "icmp_ping",
        "dns_soa",
        "ldap_bind",
        "ldap_search",
        "ldap_default_scope",
    }
    search = config.modules["ldap_search"]
    assert search.timeout == 90.0
    assert search.ldap.query.scope == "sub"
    assert search.ldap.query.attributes == ["uid", "mail"]
    assert search.protocol == "ldap"
    assert config.modules["http_2xx"].http.valid_status_codes == [200, 204]
    assert config.modules["tcp_connect"].tcp.query_response[1].send == "QUIT"


def test_ldap_scope_defaults_to_one():
    config = SafeConfig.from_file(TESTDATA / "pulsecheck-good.yml").current()
    module = config.modules["ldap_default_scope"]

    assert module.ldap.query.scope == "one"
    assert module.ldap.query.scope in LDAP_SCOPES
    # No explicit prober: the configured block decides.
    assert module.protocol == "ldap"


def test_bind_only_module_has_empty_query():
    config = SafeConfig.from_file(TESTDATA / "pulsecheck-good.yml").current()
    module = config.modules["ldap_bind"]

    assert module.ldap.query.dn == ""
    assert module.ldap.query.scope == ""


@pytest.mark.parametrize(
    ("config_file", "expected_error"),
    [
        ("pulsecheck-bad.yml", "unknown fields in dns probe: invalid_extra_field"),
        ("invalid-dns-module.yml", "Query name must be set for DNS module"),
        ("ldap/no_dn.yml", "DN is required to query LDAP"),
        ("ldap/bad_dn.yml", "Invalid DN detected: uid,dc=bar"),
        ("ldap/bad_bind_dn.yml", "Invalid DN detected: monitor"),
        ("ldap/bad_scope.yml", "Unknown scope type: foo"),
        ("ldap/bad_filter.yml", "Invalid filter detected: not=working)"),
    ],
)
def test_load_bad_configs(config_file, expected_error):
    holder = SafeConfig()
    with pytest.raises(ConfigLoadError) as excinfo:
        holder.reload(TESTDATA / config_file)

    assert str(excinfo.value) == PARSE_PREFIX + expected_error
    assert isinstance(excinfo.value.cause, ValidationError)


def test_failed_reload_keeps_previous_config():
    holder = SafeConfig()
    good = holder.reload(TESTDATA / "pulsecheck-good.yml")

    with pytest.raises(ConfigLoadError):
        holder.reload(TESTDATA / "ldap/bad_scope.yml")

    assert holder.current() is good


def test_missing_file_reports_read_error(tmp_path):
    holder = SafeConfig()
    with pytest.raises(ConfigLoadError) as excinfo:
        holder.reload(tmp_path / "missing.yml")

    assert str(excinfo.value).startswith("Error reading config file: ")
    assert isinstance(excinfo.value.cause, OSError)
    assert holder.current() == Config()


def test_malformed_yaml_is_a_parse_error(tmp_path):
    path = tmp_path / "broken.yml"
    path.write_text("modules: [unterminated\n", encoding="utf-8")

    with pytest.raises(ConfigLoadError) as excinfo:
        SafeConfig().reload(path)

    assert str(excinfo.value).startswith(PARSE_PREFIX + "yaml: ")


def test_hide_config_secrets():
    config = SafeConfig.from_file(TESTDATA / "pulsecheck-good.yml").current()

    dumped = dump_config(config)
    assert "mysecret" not in dumped
    assert "ldapsecret" not in dumped
    assert "<secret>" in dumped
    assert "ldapsecret" not in repr(config)
    assert "mysecret" not in repr(config)

    # Redacted output is still a valid document.
    reloaded = load_config(dumped)
    assert reloaded.modules["ldap_search"].ldap.bind_simple.username == "cn=monitor,dc=example,dc=org"
    assert reloaded.modules["ldap_search"].timeout == 90.0


def test_secret_value_is_still_usable():
    config = SafeConfig.from_file(TESTDATA / "pulsecheck-good.yml").current()
    password = config.modules["ldap_bind"].ldap.bind_simple.password

    assert password == "ldapsecret"
    assert repr(password) == "<secret>"


def test_unknown_top_level_field():
    with pytest.raises(UnknownFieldsError) as excinfo:
        load_config("modules: {}\nglobal: {}\n")

    assert str(excinfo.value) == "unknown fields in config: global"
    assert excinfo.value.context == "config"
    assert excinfo.value.fields == ["global"]


def test_empty_document_is_an_empty_config():
    assert load_config("") == Config()
