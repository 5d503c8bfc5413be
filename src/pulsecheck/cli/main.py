# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""PulseCheck CLI."""

from __future__ import annotations

import argparse
import json
import sys

from ..config import ProbeSettings, load_probe_settings
from ..errors import ConfigError, UnknownModuleError, UnknownProberError
from ..log import setup_logging
from ..runtime import ProbeEngine
from ..schema import dump_config

EXIT_OK = 0
EXIT_PROBE_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PulseCheck configuration-driven network prober")
    parser.add_argument("--config", help="Probe module configuration file (default: $PULSECHECK_CONFIG_FILE)")
    parser.add_argument("--log-level", help="Logging level (default: $PULSECHECK_LOG_LEVEL or WARNING)")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("check", help="Validate the configuration file and exit")
    commands.add_parser("dump", help="Print the loaded configuration with secrets redacted")

    probe = commands.add_parser("probe", help="Probe one target with one module and print its metrics")
    probe.add_argument("--module", required=True, help="Module name from the configuration file")
    probe.add_argument("--target", required=True, help="Target address (host:port or URL)")
    probe.add_argument("--timeout", type=float, help="Overall probe budget in seconds")
    probe.add_argument("--json", action="store_true", help="Print a JSON summary instead of metrics")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: ProbeSettings = load_probe_settings()
    if args.config:
        settings.config_file = args.config

    engine = ProbeEngine(settings=settings)
    try:
        config = engine.reload()
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.command == "check":
        print(f"Config file {settings.config_file} is valid ({len(config.modules)} modules)")
        return EXIT_OK

    if args.command == "dump":
        sys.stdout.write(dump_config(config))
        return EXIT_OK

    try:
        report = engine.probe(args.target, args.module, timeout=args.timeout)
    except (UnknownModuleError, UnknownProberError) as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.json:
        json.dump(report.to_dict(), sys.stdout, indent=2, sort_keys=True)
        sys.stdout.write("\n")
    else:
        sys.stdout.write(report.render())
    return EXIT_OK if report.success else EXIT_PROBE_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
