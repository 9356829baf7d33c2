# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for rfiprobe."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from .version import __version__

DEFAULT_USER_AGENT = f"rfiprobe/{__version__} (Remote File Inclusion scanner)"

# Default URL of the Remote File Inclusion (RFI) test script.
DEFAULT_TEST_SCRIPT = "https://raw.githubusercontent.com/ronin-rb/ronin-vuln-rfi/main/data/test.php"


class ErrorPolicy(str, Enum):
    """What a scan does when a single trial cannot reach the target."""

    FAIL_FAST = "fail_fast"
    CONTINUE = "continue"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _error_policy_env(name: str, default: ErrorPolicy) -> ErrorPolicy:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return ErrorPolicy(value.strip().lower())
    except ValueError:
        return default


@dataclass
class HttpSettings:
    """HTTP client defaults."""

    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = False
    verify_ssl: bool = True
    max_body_bytes: int = 16 * 1024 * 1024

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("RFIPROBE_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes <= 0:
            max_body_bytes = cls.max_body_bytes
        return cls(
            timeout=_float_env("RFIPROBE_HTTP_TIMEOUT", cls.timeout),
            user_agent=os.getenv("RFIPROBE_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("RFIPROBE_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("RFIPROBE_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


@dataclass(frozen=True)
class ScanSettings:
    """
    Scan-wide defaults threaded through the scanner and every probe it builds.

    `test_script` is the tripwire used when a probe does not override it.
    """

    test_script: str = DEFAULT_TEST_SCRIPT
    error_policy: ErrorPolicy = ErrorPolicy.FAIL_FAST
    method: str = "GET"

    @classmethod
    def from_env(cls) -> "ScanSettings":
        return cls(
            test_script=os.getenv("RFIPROBE_TEST_SCRIPT", cls.test_script),
            error_policy=_error_policy_env("RFIPROBE_ERROR_POLICY", cls.error_policy),
            method=os.getenv("RFIPROBE_HTTP_METHOD", cls.method).upper(),
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


def load_scan_settings() -> ScanSettings:
    """Load scan settings from environment with sensible defaults."""
    return ScanSettings.from_env()
