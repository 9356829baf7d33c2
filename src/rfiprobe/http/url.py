# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Query-string helpers.

Queries are handled as ordered lists of raw `key=value` segments so that
parameters we do not touch are written back exactly as they arrived. Only the
values we assign are encoded, with `quote_plus` and no safe characters.
"""

from __future__ import annotations

from urllib.parse import SplitResult, quote_plus, unquote_plus, urlsplit

from ..errors import InvalidTargetError

# (decoded key, raw key, raw value or None for a bare `key` segment)
QueryParam = tuple[str, str, str | None]

ALLOWED_SCHEMES = {"http", "https"}


def encode_query_value(value: str) -> str:
    """Percent-encode an arbitrary string for use as a query key or value."""
    return quote_plus(str(value), safe="")


def parse_target_url(url: str) -> SplitResult:
    """Split an http(s) URL, raising InvalidTargetError when it cannot be probed."""
    raw = str(url or "").strip()
    try:
        parts = urlsplit(raw)
    except ValueError as exc:
        raise InvalidTargetError(f"Invalid URL {raw!r}: {exc}") from exc
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidTargetError(f"Invalid URL {raw!r}: expected an http or https URL")
    if not parts.hostname:
        raise InvalidTargetError(f"Invalid URL {raw!r}: missing host")
    return parts


def parse_query(query: str) -> list[QueryParam]:
    params: list[QueryParam] = []
    for segment in (query or "").split("&"):
        if not segment:
            continue
        raw_key, sep, raw_value = segment.partition("=")
        params.append((unquote_plus(raw_key), raw_key, raw_value if sep else None))
    return params


def build_query(params: list[QueryParam]) -> str:
    return "&".join(raw_key if raw_value is None else f"{raw_key}={raw_value}" for _, raw_key, raw_value in params)


def query_keys(query: str) -> list[str]:
    """Return the decoded parameter names in first-seen order, without duplicates."""
    return list(dict.fromkeys(key for key, _, _ in parse_query(query)))


def _assign(params: list[QueryParam], key: str, raw_value: str | None) -> list[QueryParam]:
    """Overwrite the first occurrence of `key` and drop the rest, or append it."""
    result: list[QueryParam] = []
    assigned = False
    for existing_key, raw_key, existing_value in params:
        if existing_key != key:
            result.append((existing_key, raw_key, existing_value))
            continue
        if not assigned:
            result.append((key, raw_key, raw_value))
            assigned = True
    if not assigned:
        result.append((key, encode_query_value(key), raw_value))
    return result


def set_query_param(query: str, key: str, value: str) -> str:
    return build_query(_assign(parse_query(query), str(key), encode_query_value(value)))


def merge_query(query: str, other: str) -> str:
    """Merge the parameters of `other` into `query`; values from `other` win."""
    params = parse_query(query)
    for key, _, raw_value in parse_query(other):
        params = _assign(params, key, raw_value)
    return build_query(params)


__all__ = [
    "ALLOWED_SCHEMES",
    "QueryParam",
    "build_query",
    "encode_query_value",
    "merge_query",
    "parse_query",
    "parse_target_url",
    "query_keys",
    "set_query_param",
]
