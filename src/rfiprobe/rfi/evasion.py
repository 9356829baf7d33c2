# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Filter-evasion techniques applied to the included script reference."""

from __future__ import annotations

from enum import Enum

from ..http.url import encode_query_value


class Evasion(str, Enum):
    NONE = "none"
    # Appends a NUL byte (sent as %00) so the suffix a vulnerable PHP include
    # appends, e.g. ".php", is truncated on older interpreters.
    NULL_BYTE = "null_byte"
    # Encodes the reference once more than the query encoder does, for filters
    # that decode a single time before checking.
    DOUBLE_ENCODE = "double_encode"

    def apply(self, script_url: str) -> str:
        if self is Evasion.NULL_BYTE:
            return f"{script_url}\0"
        if self is Evasion.DOUBLE_ENCODE:
            return encode_query_value(script_url)
        return script_url


# Order in which a scan tries evasions when none is requested.
DEFAULT_EVASIONS: tuple[Evasion, ...] = (Evasion.NONE, Evasion.NULL_BYTE, Evasion.DOUBLE_ENCODE)


def parse_evasion(value: Evasion | str | None) -> Evasion:
    """Coerce user input into an Evasion; None means no evasion."""
    if value is None:
        return Evasion.NONE
    if isinstance(value, Evasion):
        return value
    try:
        return Evasion(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(e.value for e in Evasion)
        raise ValueError(f"Unknown evasion {value!r} (expected one of: {choices})") from exc


__all__ = ["DEFAULT_EVASIONS", "Evasion", "parse_evasion"]
