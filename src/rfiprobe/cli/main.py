# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""rfiprobe CLI."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Any

from ..config import ErrorPolicy, HttpSettings, ScanSettings, load_http_settings, load_scan_settings
from ..errors import InvalidTargetError, TransportError
from ..http import create_default_http_client
from ..log import setup_logging
from ..models import ScanReport, ScanStatus
from ..rfi.evasion import Evasion
from ..runtime import RFIProbe

logger = logging.getLogger(__name__)

EXIT_NOT_VULNERABLE = 0
EXIT_VULNERABLE = 1
EXIT_ERROR = 2
EXIT_INCONCLUSIVE = 3

_STATUS_EXIT_CODES = {
    ScanStatus.NOT_VULNERABLE: EXIT_NOT_VULNERABLE,
    ScanStatus.VULNERABLE: EXIT_VULNERABLE,
    ScanStatus.INCONCLUSIVE: EXIT_INCONCLUSIVE,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="rfiprobe Remote File Inclusion (RFI) scanner")
    parser.add_argument("url", help="Target URL to scan, including its query string")
    parser.add_argument("--param", help="Only test this query parameter (default: every parameter in the URL)")
    parser.add_argument(
        "--evasion",
        choices=[e.value for e in Evasion],
        help="Only use this evasion technique (default: none, null_byte, double_encode in that order)",
    )
    parser.add_argument("--test-script", help="URL of the RFI test script to include")
    parser.add_argument("--method", choices=["GET", "POST"], type=str.upper, help="HTTP method for inclusion requests")
    parser.add_argument(
        "--first",
        action="store_true",
        help="Stop at the first vulnerable parameter instead of testing every parameter",
    )
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Record unreachable trials and keep scanning instead of aborting",
    )
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of human-friendly summary",
    )
    parser.add_argument("--log-level", help="Logging level (default: RFIPROBE_LOG_LEVEL or WARNING)")
    return parser


def _scan_settings_from_args(args: argparse.Namespace) -> ScanSettings:
    settings = load_scan_settings()
    overrides: dict[str, Any] = {}
    if args.test_script:
        overrides["test_script"] = args.test_script
    if args.method:
        overrides["method"] = args.method
    if args.continue_on_error:
        overrides["error_policy"] = ErrorPolicy.CONTINUE
    return replace(settings, **overrides) if overrides else settings


def _http_settings_from_args(args: argparse.Namespace) -> HttpSettings:
    settings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False
    if args.timeout is not None:
        settings.timeout = args.timeout
    return settings


def _print_json(data: dict[str, Any] | Any) -> None:
    payload = data.to_dict() if hasattr(data, "to_dict") else data
    json.dump(payload, sys.stdout, indent=2, sort_keys=True)
    sys.stdout.write("\n")


def _pretty_print(report: ScanReport) -> None:
    print(f"[rfiprobe] Status: {report.status.value}")
    print(f"Target: {report.target}")
    print(f"Trials: {report.trials}")
    if report.findings:
        print("Findings:")
        for rfi in report.findings:
            print(f"- param={rfi.param} evasion={rfi.evasion.value}")
            print(f"  {rfi.inclusion_url}")
    if report.errors:
        print(f"Skipped trials ({len(report.errors)}):")
        for error in report.errors:
            print(f"- param={error.param} evasion={error.evasion.value}: {error.category.value} ({error.message})")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    scan_settings = _scan_settings_from_args(args)
    http_client = create_default_http_client(_http_settings_from_args(args))

    try:
        with RFIProbe(http_client=http_client, scan_settings=scan_settings) as probe:
            report = probe.run(args.url, param=args.param, evasion=args.evasion, first=args.first)
    except InvalidTargetError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR
    except TransportError as exc:
        print(f"error: {exc.reason}: {exc}", file=sys.stderr)
        logger.debug("Scan aborted on %s", exc.url)
        return EXIT_ERROR

    if args.json:
        _print_json(report)
    else:
        _pretty_print(report)

    return _STATUS_EXIT_CODES[report.status]


if __name__ == "__main__":
    raise SystemExit(main())
