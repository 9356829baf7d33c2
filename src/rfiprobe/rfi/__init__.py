# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Remote File Inclusion probing: URL rewriting, detection and scanning."""

from .evasion import DEFAULT_EVASIONS, Evasion, parse_evasion
from .probe import RFI, VULN_RESPONSE_STRING, build_inclusion_url
from .scanner import RFIScanner

__all__ = [
    "DEFAULT_EVASIONS",
    "Evasion",
    "RFI",
    "RFIScanner",
    "VULN_RESPONSE_STRING",
    "build_inclusion_url",
    "parse_evasion",
]
