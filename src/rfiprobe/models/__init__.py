# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for rfiprobe."""

from ..http.models import Headers, HttpRequest, HttpResponse
from .report import ScanReport, ScanStatus, TrialError

__all__ = [
    "Headers",
    "HttpRequest",
    "HttpResponse",
    "ScanReport",
    "ScanStatus",
    "TrialError",
]
