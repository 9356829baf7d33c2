# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
rfiprobe package entrypoint.

This package probes web applications for Remote File Inclusion (RFI): one
query parameter at a time is pointed at a tripwire script, and the response
is checked for the marker that script prints when executed. HTTP behavior is
abstracted behind an injectable client interface, and domain objects are
modeled with typed dataclasses.
"""

from .config import ErrorPolicy, HttpSettings, ScanSettings, load_http_settings, load_scan_settings
from .errors import ErrorCategory, InvalidTargetError, RFIProbeError, TransportError
from .http import (
    HttpClient,
    HttpRequest,
    HttpResponse,
    HttpxClient,
    StubHttpClient,
    create_default_http_client,
)
from .log import setup_logging
from .models import ScanReport, ScanStatus, TrialError
from .rfi import RFI, VULN_RESPONSE_STRING, Evasion, RFIScanner, build_inclusion_url
from .runtime import RFIProbe, first_rfi, has_rfi, rfi_scan
from .version import __version__

__all__ = [
    "RFI",
    "VULN_RESPONSE_STRING",
    "ErrorCategory",
    "ErrorPolicy",
    "Evasion",
    "HttpClient",
    "HttpRequest",
    "HttpResponse",
    "HttpSettings",
    "HttpxClient",
    "InvalidTargetError",
    "RFIProbe",
    "RFIProbeError",
    "RFIScanner",
    "ScanReport",
    "ScanSettings",
    "ScanStatus",
    "StubHttpClient",
    "TransportError",
    "TrialError",
    "build_inclusion_url",
    "create_default_http_client",
    "first_rfi",
    "has_rfi",
    "load_http_settings",
    "load_scan_settings",
    "rfi_scan",
    "setup_logging",
    "__version__",
]
