# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclasses for scan reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..errors import ErrorCategory, error_category_to_reason

if TYPE_CHECKING:
    from ..rfi.evasion import Evasion
    from ..rfi.probe import RFI


class ScanStatus(str, Enum):
    VULNERABLE = "VULNERABLE"
    NOT_VULNERABLE = "NOT_VULNERABLE"
    INCONCLUSIVE = "INCONCLUSIVE"


@dataclass
class TrialError:
    """A trial skipped because the inclusion request never got a response."""

    param: str
    evasion: Evasion
    category: ErrorCategory
    message: str
    url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "param": self.param,
            "evasion": self.evasion.value,
            "category": self.category.value,
            "reason": error_category_to_reason(self.category),
            "message": self.message,
            "url": self.url,
        }


@dataclass
class ScanReport:
    """Findings and skipped trials for one target."""

    target: str
    findings: list[RFI] = field(default_factory=list)
    errors: list[TrialError] = field(default_factory=list)
    trials: int = 0

    @property
    def status(self) -> ScanStatus:
        # Unreachable trials must not read as "not vulnerable".
        if self.findings:
            return ScanStatus.VULNERABLE
        if self.errors:
            return ScanStatus.INCONCLUSIVE
        return ScanStatus.NOT_VULNERABLE

    @property
    def vulnerable(self) -> bool:
        return self.status is ScanStatus.VULNERABLE

    def to_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "status": self.status.value,
            "trials": self.trials,
            "findings": [finding.to_dict() for finding in self.findings],
            "errors": [error.to_dict() for error in self.errors],
        }
