# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
A single Remote File Inclusion (RFI) trial.

An `RFI` pins one (url, param, evasion) combination. It can build the
inclusion URL for any script, perform the inclusion request, and decide
whether the tripwire script was executed by the target. An `RFI` whose
`is_vulnerable()` returned True is the finding itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import SplitResult, urlsplit, urlunsplit

import httpx

from ..config import DEFAULT_TEST_SCRIPT
from ..errors import ErrorCategory, TransportError, categorize_exception
from ..http.client import HttpClient
from ..http.models import HttpRequest
from ..http.url import merge_query, parse_target_url, set_query_param
from .evasion import Evasion, parse_evasion

logger = logging.getLogger(__name__)

# Printed by the test script when a vulnerable target includes and runs it.
VULN_RESPONSE_STRING = 'Remote File Inclusion (RFI) Detected: eval("1 + 1") = 2'


def build_inclusion_url(
    url: str | SplitResult,
    param: Any,
    script_url: str,
    evasion: Evasion | str | None = None,
) -> str:
    """
    Rewrite `url` so that `param` references `script_url`.

    Query parameters carried by `script_url` are hoisted into the outer query
    and stripped from the reference. The evasion is applied to what remains,
    and the parameter is assigned last so it always overwrites any prior value.
    """
    target = url if isinstance(url, SplitResult) else parse_target_url(url)
    script = urlsplit(str(script_url))

    query = merge_query(target.query, script.query)
    reference = parse_evasion(evasion).apply(urlunsplit(script._replace(query="")))
    query = set_query_param(query, str(param), reference)
    return urlunsplit(target._replace(query=query))


@dataclass(frozen=True)
class RFI:
    """One (url, param, evasion) probe against a target."""

    url: str
    param: str
    evasion: Evasion = Evasion.NONE
    test_script: str = DEFAULT_TEST_SCRIPT
    method: str = "GET"
    http_client: HttpClient | None = field(default=None, repr=False, compare=False)

    VULN_RESPONSE_STRING = VULN_RESPONSE_STRING

    def __post_init__(self) -> None:
        parts = parse_target_url(self.url)
        object.__setattr__(self, "url", urlunsplit(parts))
        object.__setattr__(self, "param", str(self.param))
        object.__setattr__(self, "evasion", parse_evasion(self.evasion))
        object.__setattr__(self, "test_script", str(self.test_script or DEFAULT_TEST_SCRIPT))
        object.__setattr__(self, "method", str(self.method or "GET").upper())

    def url_for(self, script_url: str) -> str:
        """Build the URL that makes the target include `script_url`."""
        return build_inclusion_url(self.url, self.param, script_url, self.evasion)

    @property
    def inclusion_url(self) -> str:
        return self.url_for(self.test_script)

    def include(
        self,
        script_url: str,
        *,
        method: str | None = None,
        headers: dict[str, str] | None = None,
        body: str | bytes | None = None,
    ) -> str:
        """
        Perform the inclusion request and return the response body.

        Exactly one request is sent. Status codes are not interpreted; a
        transport failure raises TransportError.
        """
        if self.http_client is None:
            raise RuntimeError("No HttpClient configured for this probe")

        url = self.url_for(script_url)
        request = HttpRequest(url=url, method=(method or self.method).upper(), headers=headers, body=body)
        try:
            response = self.http_client.request(request)
        except (httpx.HTTPError, OSError) as exc:
            raise TransportError(str(exc), url=url, category=categorize_exception(exc)) from exc

        if response.transport_failed:
            category = response.error_category
            if category is ErrorCategory.NONE:
                category = ErrorCategory.UNKNOWN_ERROR
            raise TransportError(
                response.error_message or "Request failed without a response",
                url=url,
                category=category,
            )
        return response.text

    def is_vulnerable(self, **request_kwargs: Any) -> bool:
        """Include the test script and look for its marker in the response."""
        body = self.include(self.test_script, **request_kwargs)
        vulnerable = VULN_RESPONSE_STRING in body
        logger.debug("param=%s evasion=%s vulnerable=%s", self.param, self.evasion.value, vulnerable)
        return vulnerable

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "param": self.param,
            "evasion": self.evasion.value,
            "test_script": self.test_script,
            "inclusion_url": self.inclusion_url,
        }


__all__ = ["RFI", "VULN_RESPONSE_STRING", "build_inclusion_url"]
