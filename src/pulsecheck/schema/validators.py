# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Semantic checks run right after a block has been structurally decoded."""

from __future__ import annotations

import re
import sys
from dataclasses import replace
from typing import Any

from ldap3 import BASE, LEVEL, SUBTREE
from ldap3.core.exceptions import LDAPException
from ldap3.operation.search import parse_filter
from ldap3.utils.dn import parse_dn

from ..errors import PlatformCapabilityError, ValidationError
from .types import DNSProbe, DNSRRValidator, HTTPProbe, ICMPProbe, LDAPBind, LDAPQuery, Module

# Scope keywords accepted in an LDAP query block.
LDAP_SCOPES = {"base": BASE, "one": LEVEL, "sub": SUBTREE}
DEFAULT_LDAP_SCOPE = "one"


def dont_fragment_supported() -> bool:
    return sys.platform != "win32"


def is_valid_dn(value: str) -> bool:
    try:
        parse_dn(value)
    except LDAPException:
        return False
    return True


def is_valid_filter(value: str) -> bool:
    try:
        parse_filter(value, None, True, True, None, False)
    except LDAPException:
        return False
    return True


def _check_regexps(patterns: list[str]) -> None:
    for pattern in patterns:
        try:
            re.compile(pattern)
        except re.error as exc:
            raise ValidationError(f'Could not compile regular expression "{pattern}": {exc}') from exc


def validate_module(module: Module) -> Module:
    configured = module.configured_protocols()
    if len(configured) > 1:
        raise ValidationError(f"only one protocol may be configured per module, got: {', '.join(configured)}")
    return module


def validate_http_probe(probe: HTTPProbe) -> HTTPProbe:
    _check_regexps(probe.fail_if_matches_regexp)
    _check_regexps(probe.fail_if_not_matches_regexp)
    return probe


def validate_dns_probe(probe: DNSProbe) -> DNSProbe:
    if probe.query_name == "":
        raise ValidationError("Query name must be set for DNS module")
    return probe


def validate_dns_rr_validator(validator: DNSRRValidator) -> DNSRRValidator:
    _check_regexps(validator.fail_if_matches_regexp)
    _check_regexps(validator.fail_if_not_matches_regexp)
    return validator


def validate_icmp_probe(probe: ICMPProbe) -> ICMPProbe:
    if probe.dont_fragment and not dont_fragment_supported():
        raise PlatformCapabilityError('"dont_fragment" is not supported on windows platforms')
    return probe


def validate_ldap_bind(bind: LDAPBind) -> LDAPBind:
    # An empty username is an anonymous bind.
    if bind.username and not is_valid_dn(bind.username):
        raise ValidationError(f"Invalid DN detected: {bind.username}")
    return bind


def validate_ldap_query(query: LDAPQuery) -> LDAPQuery:
    if query.filter != "" and not is_valid_filter(query.filter):
        raise ValidationError(f"Invalid filter detected: {query.filter}")

    if query.dn == "":
        raise ValidationError("DN is required to query LDAP")

    if not is_valid_dn(query.dn):
        raise ValidationError(f"Invalid DN detected: {query.dn}")

    if query.scope not in LDAP_SCOPES:
        if query.scope != "":
            raise ValidationError(f"Unknown scope type: {query.scope}")
        query = replace(query, scope=DEFAULT_LDAP_SCOPE)
    return query


VALIDATORS: dict[type, Any] = {
    Module: validate_module,
    HTTPProbe: validate_http_probe,
    DNSProbe: validate_dns_probe,
    DNSRRValidator: validate_dns_rr_validator,
    ICMPProbe: validate_icmp_probe,
    LDAPBind: validate_ldap_bind,
    LDAPQuery: validate_ldap_query,
}


__all__ = [
    "DEFAULT_LDAP_SCOPE",
    "LDAP_SCOPES",
    "VALIDATORS",
    "dont_fragment_supported",
    "is_valid_dn",
    "is_valid_filter",
]
