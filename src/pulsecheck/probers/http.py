# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP prober built on httpx, timed through httpcore trace events."""

from __future__ import annotations

import logging
import re
import ssl
import time
from pathlib import Path
from typing import Any

import httpx
from prometheus_client import CollectorRegistry, Gauge

from ..config import ProbeSettings, load_probe_settings
from ..errors import categorize_exception
from ..schema.types import HTTPProbe, Module, TLSConfig, is_zero
from .base import Deadline, ProbeLogger, Prober, phase_gauge, register_metrics

logger = logging.getLogger(__name__)

_HTTP_VERSIONS = {"HTTP/0.9": 0.9, "HTTP/1.0": 1.0, "HTTP/1.1": 1.1, "HTTP/2": 2.0, "HTTP/3": 3.0}

# httpcore trace event prefix -> phase label.
_PHASE_STARTS = {
    "connection.connect_tcp": "connect",
    "connection.start_tls": "tls",
    "http11.send_request_headers": "processing",
    "http11.receive_response_body": "transfer",
}
_PHASE_ENDS = {
    "connection.connect_tcp": "connect",
    "connection.start_tls": "tls",
    "http11.receive_response_headers": "processing",
    "http11.receive_response_body": "transfer",
}
# A failed connect has no meaningful duration.
_RECORD_ON_FAILURE = {"tls", "processing", "transfer"}


class PhaseTrace:
    """
    httpcore ``trace`` extension callback.

    Durations of repeated phases (redirects) are summed. Only phases that
    finished, or failed after starting past connect, end up in ``durations``.
    """

    def __init__(self) -> None:
        self._started: dict[str, float] = {}
        self.durations: dict[str, float] = {}

    def __call__(self, event_name: str, info: dict[str, Any]) -> None:  # noqa: ARG002
        prefix, _, suffix = event_name.rpartition(".")
        now = time.perf_counter()
        if suffix == "started" and prefix in _PHASE_STARTS:
            self._started[_PHASE_STARTS[prefix]] = now
            return
        if suffix not in {"complete", "failed"} or prefix not in _PHASE_ENDS:
            return
        phase = _PHASE_ENDS[prefix]
        if suffix == "failed" and phase not in _RECORD_ON_FAILURE:
            return
        start = self._started.pop(phase, None)
        if start is not None:
            self.durations[phase] = self.durations.get(phase, 0.0) + (now - start)

    def publish(self, gauge: Gauge) -> None:
        for phase, seconds in self.durations.items():
            gauge.labels(phase=phase).set(seconds)


def build_ssl_context(tls: TLSConfig) -> ssl.SSLContext:
    context = ssl.create_default_context(cafile=tls.ca_file or None)
    if tls.cert_file:
        context.load_cert_chain(tls.cert_file, tls.key_file or None)
    if tls.insecure_skip_verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def _read_secret_file(path: str) -> str:
    return Path(path).read_text(encoding="utf-8").strip()


def _status_is_valid(config: HTTPProbe, status: int) -> bool:
    if config.valid_status_codes:
        return status in config.valid_status_codes
    return 200 <= status < 300


def _matches_regexps(config: HTTPProbe, body: str, log: ProbeLogger) -> bool:
    for pattern in config.fail_if_matches_regexp:
        if re.search(pattern, body):
            log.error("Body matched regular expression %r", pattern)
            return False
    for pattern in config.fail_if_not_matches_regexp:
        if not re.search(pattern, body):
            log.error("Body did not match regular expression %r", pattern)
            return False
    return True


class HTTPProber(Prober):
    name = "http"

    def __init__(self, transport: httpx.BaseTransport | None = None, settings: ProbeSettings | None = None):
        self.transport = transport
        self.settings = settings or load_probe_settings()

    def _build_client(self, config: HTTPProbe, deadline: Deadline) -> httpx.Client:
        verify: ssl.SSLContext | bool = True
        if not is_zero(config.tls_config):
            verify = build_ssl_context(config.tls_config)

        auth: httpx.BasicAuth | None = None
        if config.basic_auth.username:
            password = str(config.basic_auth.password)
            if config.basic_auth.password_file:
                password = _read_secret_file(config.basic_auth.password_file)
            auth = httpx.BasicAuth(config.basic_auth.username, password)

        headers = httpx.Headers(config.headers)
        if "user-agent" not in headers:
            headers["User-Agent"] = self.settings.user_agent
        token = str(config.bearer_token)
        if config.bearer_token_file:
            token = _read_secret_file(config.bearer_token_file)
        if token:
            headers["Authorization"] = f"Bearer {token}"

        return httpx.Client(
            transport=self.transport,
            verify=verify,
            follow_redirects=not config.no_follow_redirects,
            timeout=deadline.timeout(),
            auth=auth,
            headers=headers,
            proxy=config.proxy_url or None,
        )

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
        config = module.http

        status_code = Gauge("probe_http_status_code", "Response HTTP status code", registry=None)
        durations = phase_gauge("http", "duration_seconds", "Duration of http request by phase, summed over all redirects")
        content_length = Gauge("probe_http_content_length", "Length of http content response", registry=None)
        http_version = Gauge("probe_http_version", "Returns the version of HTTP of the probe response", registry=None)
        is_ssl = Gauge("probe_http_ssl", "Indicates if SSL was used for the final redirect", registry=None)
        redirects = Gauge("probe_http_redirects", "The number of redirects", registry=None)
        failed_due_to_regex = Gauge("probe_failed_due_to_regex", "Indicates if probe failed due to regex", registry=None)
        register_metrics(
            registry,
            status_code,
            durations,
            content_length,
            http_version,
            is_ssl,
            redirects,
            failed_due_to_regex,
            log=log,
        )

        url = target if "://" in target else f"http://{target}"
        try:
            client = self._build_client(config, deadline)
        except (OSError, ssl.SSLError, ValueError) as exc:
            log.error("Error creating HTTP client: %s", exc)
            return False

        trace = PhaseTrace()
        extensions: dict[str, Any] = {"trace": trace}
        if config.tls_config.server_name:
            extensions["sni_hostname"] = config.tls_config.server_name

        try:
            with client:
                response = client.request(
                    config.method or "GET",
                    url,
                    content=config.body.encode("utf-8") if config.body else None,
                    extensions=extensions,
                )
        except httpx.HTTPError as exc:
            trace.publish(durations)
            log.error("Error for HTTP request to %s (%s): %s", url, categorize_exception(exc).value, exc)
            return False

        trace.publish(durations)
        log.info("Received HTTP response with status code %d", response.status_code)
        status_code.set(response.status_code)
        content_length.set(len(response.content))
        redirects.set(len(response.history))
        http_version.set(_HTTP_VERSIONS.get(response.http_version, 0))
        used_ssl = response.url.scheme == "https"
        is_ssl.set(1 if used_ssl else 0)

        if not _status_is_valid(config, response.status_code):
            log.info("Invalid HTTP response status code %d", response.status_code)
            return False
        if config.valid_http_versions and response.http_version not in config.valid_http_versions:
            log.error("Invalid HTTP version number %s", response.http_version)
            return False
        if config.fail_if_ssl and used_ssl:
            log.error("Final request was over SSL")
            return False
        if config.fail_if_not_ssl and not used_ssl:
            log.error("Final request was not over SSL")
            return False
        if config.fail_if_matches_regexp or config.fail_if_not_matches_regexp:
            if not _matches_regexps(config, response.text, log):
                failed_due_to_regex.set(1)
                return False
            failed_due_to_regex.set(0)
        return True


__all__ = ["HTTPProber", "PhaseTrace", "build_ssl_context"]
