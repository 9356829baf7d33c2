# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport seam for the inclusion request sent by each RFI trial."""

from typing import Protocol

from ..config import HttpSettings, load_http_settings
from .models import HttpRequest, HttpResponse


class HttpClient(Protocol):
    """
    Sends one rewritten target URL and returns its response.

    A scan shares a single client across every (param, evasion) trial.
    Implementations report unreachable targets as a response with ok=False
    and no status code.
    """

    def request(self, request: HttpRequest) -> HttpResponse: ...

    def close(self) -> None:  # pragma: no cover
        ...


def create_default_http_client(settings: HttpSettings | None = None) -> HttpClient:
    """Build the httpx transport used for inclusion requests, configured from RFIPROBE_HTTP_* settings."""
    from .httpx_client import HttpxClient

    return HttpxClient(settings or load_http_settings())
