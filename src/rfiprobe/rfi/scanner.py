# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Drive RFI probes over a target's (evasion, parameter) combinations.

Trial order is a contract: evasions form the outer loop in the order
none -> null_byte -> double_encode, and query parameters form the inner loop
in the order they appear in the URL. When several combinations are
vulnerable, find-first reports the earliest one in that order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any
from urllib.parse import urlunsplit

from ..config import ErrorPolicy, ScanSettings, load_scan_settings
from ..errors import TransportError
from ..http.client import HttpClient
from ..http.url import parse_target_url, query_keys
from ..models.report import ScanReport, TrialError
from .evasion import DEFAULT_EVASIONS, Evasion, parse_evasion
from .probe import RFI

logger = logging.getLogger(__name__)


class RFIScanner:
    """Runs RFI trials against targets, sharing one HttpClient across all of them."""

    def __init__(self, http_client: HttpClient, settings: ScanSettings | None = None):
        self.http_client = http_client
        self.settings = settings or load_scan_settings()

    def trials(
        self,
        url: str,
        *,
        param: Any = None,
        evasion: Evasion | str | None = None,
    ) -> Iterator[RFI]:
        """
        Lazily build one probe per combination.

        The URL is validated before the iterator is returned, so a malformed
        target fails before any request is sent.
        """
        target = parse_target_url(url)
        target_url = urlunsplit(target)
        params = [str(param)] if param is not None else query_keys(target.query)
        evasions = (parse_evasion(evasion),) if evasion is not None else DEFAULT_EVASIONS
        if not params:
            logger.warning("No query parameters to test in %s", target_url)
        return self._iter_trials(target_url, params, evasions)

    def _iter_trials(self, url: str, params: list[str], evasions: tuple[Evasion, ...]) -> Iterator[RFI]:
        for evasion in evasions:
            for param in params:
                yield RFI(
                    url,
                    param,
                    evasion=evasion,
                    test_script=self.settings.test_script,
                    method=self.settings.method,
                    http_client=self.http_client,
                )

    def _check(self, rfi: RFI, report: ScanReport | None, request_kwargs: dict[str, Any]) -> bool:
        if report is not None:
            report.trials += 1
        try:
            return rfi.is_vulnerable(**request_kwargs)
        except TransportError as exc:
            if self.settings.error_policy is ErrorPolicy.FAIL_FAST:
                raise
            logger.warning("Skipping param=%s evasion=%s: %s (%s)", rfi.param, rfi.evasion.value, exc, exc.reason)
            if report is not None:
                report.errors.append(
                    TrialError(
                        param=rfi.param,
                        evasion=rfi.evasion,
                        category=exc.category,
                        message=str(exc),
                        url=exc.url,
                    )
                )
            return False

    def scan(
        self,
        url: str,
        *,
        param: Any = None,
        evasion: Evasion | str | None = None,
        report: ScanReport | None = None,
        **request_kwargs: Any,
    ) -> Iterator[RFI]:
        """Yield every confirmed probe; stop iterating to stop sending requests."""
        trials = self.trials(url, param=param, evasion=evasion)
        return self._scan(trials, report, request_kwargs)

    def _scan(self, trials: Iterator[RFI], report: ScanReport | None, request_kwargs: dict[str, Any]) -> Iterator[RFI]:
        for rfi in trials:
            if self._check(rfi, report, request_kwargs):
                logger.info("RFI confirmed: param=%s evasion=%s url=%s", rfi.param, rfi.evasion.value, rfi.url)
                yield rfi

    def test(
        self,
        url: str,
        *,
        param: Any = None,
        evasion: Evasion | str | None = None,
        report: ScanReport | None = None,
        **request_kwargs: Any,
    ) -> RFI | None:
        """Return the first vulnerable combination, or None."""
        return next(self.scan(url, param=param, evasion=evasion, report=report, **request_kwargs), None)

    def test_all_params(
        self,
        url: str,
        *,
        evasion: Evasion | str | None = None,
        callback: Callable[[RFI], None] | None = None,
        report: ScanReport | None = None,
        **request_kwargs: Any,
    ) -> list[RFI]:
        """
        Find the first vulnerable evasion for each query parameter.

        `callback` is called with each finding as soon as it is confirmed.
        """
        target = parse_target_url(url)
        vulns: list[RFI] = []
        for param in query_keys(target.query):
            rfi = self.test(url, param=param, evasion=evasion, report=report, **request_kwargs)
            if rfi is None:
                continue
            if callback is not None:
                callback(rfi)
            vulns.append(rfi)
        return vulns

    find = test
    find_all = test_all_params

    def run(
        self,
        url: str,
        *,
        param: Any = None,
        evasion: Evasion | str | None = None,
        first: bool = False,
        callback: Callable[[RFI], None] | None = None,
        **request_kwargs: Any,
    ) -> ScanReport:
        """Scan a target and collect findings plus any skipped trials into a report."""
        report = ScanReport(target=urlunsplit(parse_target_url(url)))
        if first or param is not None:
            rfi = self.test(url, param=param, evasion=evasion, report=report, **request_kwargs)
            if rfi is not None:
                if callback is not None:
                    callback(rfi)
                report.findings.append(rfi)
        else:
            report.findings.extend(
                self.test_all_params(url, evasion=evasion, callback=callback, report=report, **request_kwargs)
            )
        logger.info("Scan of %s finished: %s after %d trial(s)", report.target, report.status.value, report.trials)
        return report


__all__ = ["RFIScanner"]
