# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""High-level rfiprobe facade."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import suppress
from dataclasses import replace
from typing import Any

from .config import ErrorPolicy, HttpSettings, ScanSettings, load_http_settings, load_scan_settings
from .http.client import HttpClient, create_default_http_client
from .models import ScanReport
from .rfi.evasion import Evasion
from .rfi.probe import RFI
from .rfi.scanner import RFIScanner


class RFIProbe:
    """
    Convenience wrapper that owns one HTTP client and reuses it for every trial.

    Use it as a context manager so the client's connection pool is closed.
    """

    def __init__(
        self,
        http_client: HttpClient | None = None,
        *,
        http_settings: HttpSettings | None = None,
        scan_settings: ScanSettings | None = None,
    ):
        self.http_settings = http_settings or load_http_settings()
        self.scan_settings = scan_settings or load_scan_settings()
        self.http_client = http_client or create_default_http_client(self.http_settings)
        self.scanner = RFIScanner(self.http_client, self.scan_settings)

    def probe(self, url: str, param: Any, *, evasion: Evasion | str | None = None, test_script: str | None = None) -> RFI:
        """Build a single probe bound to this instance's client."""
        return RFI(
            url,
            param,
            evasion=evasion,
            test_script=test_script or self.scan_settings.test_script,
            method=self.scan_settings.method,
            http_client=self.http_client,
        )

    def find(self, url: str, *, param: Any = None, evasion: Evasion | str | None = None, **request_kwargs: Any) -> RFI | None:
        return self.scanner.test(url, param=param, evasion=evasion, **request_kwargs)

    def find_all(
        self,
        url: str,
        *,
        evasion: Evasion | str | None = None,
        callback: Callable[[RFI], None] | None = None,
        **request_kwargs: Any,
    ) -> list[RFI]:
        return self.scanner.test_all_params(url, evasion=evasion, callback=callback, **request_kwargs)

    def scan(self, url: str, *, param: Any = None, evasion: Evasion | str | None = None, **request_kwargs: Any) -> Iterator[RFI]:
        return self.scanner.scan(url, param=param, evasion=evasion, **request_kwargs)

    def run(self, url: str, **kwargs: Any) -> ScanReport:
        return self.scanner.run(url, **kwargs)

    def close(self) -> None:
        with suppress(Exception):
            if hasattr(self.http_client, "close"):
                self.http_client.close()

    def __enter__(self) -> RFIProbe:
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:  # noqa: ANN001
        self.close()


def rfi_scan(url: str, *, http_client: HttpClient | None = None, **kwargs: Any) -> ScanReport:
    """Scan every query parameter of `url` and return the report."""
    with RFIProbe(http_client) as probe:
        return probe.run(url, **kwargs)


def first_rfi(url: str, *, http_client: HttpClient | None = None, **kwargs: Any) -> RFI | None:
    """
    Return the first RFI vulnerability found in `url`, if any.

    Always fails fast: an unreachable target raises TransportError rather than
    returning None, whatever RFIPROBE_ERROR_POLICY says.
    """
    settings = replace(load_scan_settings(), error_policy=ErrorPolicy.FAIL_FAST)
    with RFIProbe(http_client, scan_settings=settings) as probe:
        return probe.find(url, **kwargs)


def has_rfi(url: str, *, http_client: HttpClient | None = None, **kwargs: Any) -> bool:
    return first_rfi(url, http_client=http_client, **kwargs) is not None


__all__ = ["RFIProbe", "first_rfi", "has_rfi", "rfi_scan"]
