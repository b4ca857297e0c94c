r"""Unit tests for HttpManager."""

from __future__ import annotations

import json
import logging
import threading
from typing import TYPE_CHECKING
from unittest.mock import Mock

import pytest

from httpmanager import (
    CancellationToken,
    ClientConfig,
    ErrorKind,
    HttpManager,
    HttpMethod,
    HttpRequestError,
    HttpResponse,
    RequestBuilder,
)
from httpmanager.transport import HttpxTransport
from tests.helpers import (
    TEST_URL,
    StubTransport,
    make_httpx_transport,
    network_error,
    timeout_error,
)

if TYPE_CHECKING:
    from collections.abc import Generator

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "User-Agent": "TestApp/1.0",
}


@pytest.fixture
def stub() -> StubTransport:
    return StubTransport()


@pytest.fixture
def manager(stub: StubTransport) -> Generator[HttpManager, None, None]:
    with HttpManager(ClientConfig(user_agent="TestApp/1.0"), transport=stub) as manager:
        yield manager


@pytest.fixture
def echo_manager(mock_handler: Mock) -> Generator[HttpManager, None, None]:
    config = ClientConfig(user_agent="TestApp/1.0")
    with HttpManager(config, transport=make_httpx_transport(mock_handler, config)) as manager:
        yield manager


#################################
#     Tests for HttpManager     #
#################################


def test_http_manager_default_config() -> None:
    with HttpManager() as manager:
        assert manager.config == ClientConfig()
        assert isinstance(manager.transport, HttpxTransport)
        assert manager.transport.config is manager.config


def test_http_manager_default_headers() -> None:
    with HttpManager(ClientConfig(user_agent="TestApp/1.0")) as manager:
        assert manager.default_headers == DEFAULT_HEADERS


def test_http_manager_repr(manager: HttpManager) -> None:
    assert repr(manager).startswith("HttpManager(config=ClientConfig(")


def test_http_manager_get(manager: HttpManager, stub: StubTransport) -> None:
    response = manager.get(TEST_URL)
    assert response.status_code == 200
    assert response.body == "ok"
    request = stub.requests[0]
    assert request.method == HttpMethod.GET
    assert request.url == TEST_URL
    assert dict(request.headers) == DEFAULT_HEADERS
    assert request.body is None
    assert request.timeout == ClientConfig().read_timeout
    assert request.follow_redirects


def test_http_manager_get_caller_headers_win(manager: HttpManager, stub: StubTransport) -> None:
    manager.add_default_header("X-Custom", "default")
    manager.get(TEST_URL, {"X-Custom": "call", "Accept": "text/plain"})
    headers = stub.requests[0].headers
    assert headers["X-Custom"] == "call"
    assert headers["Accept"] == "text/plain"
    assert headers["User-Agent"] == "TestApp/1.0"
    assert manager.default_headers["X-Custom"] == "default"


@pytest.mark.parametrize(
    ("method_name", "method"),
    [
        ("get", HttpMethod.GET),
        ("delete", HttpMethod.DELETE),
        ("head", HttpMethod.HEAD),
        ("options", HttpMethod.OPTIONS),
    ],
)
def test_http_manager_methods_without_body(
    manager: HttpManager, stub: StubTransport, method_name: str, method: HttpMethod
) -> None:
    getattr(manager, method_name)(TEST_URL, {"X-A": "1"})
    assert stub.requests[0].method == method
    assert stub.requests[0].headers["X-A"] == "1"


@pytest.mark.parametrize(
    ("method_name", "method"),
    [("post", HttpMethod.POST), ("put", HttpMethod.PUT), ("patch", HttpMethod.PATCH)],
)
def test_http_manager_methods_with_body(
    manager: HttpManager, stub: StubTransport, method_name: str, method: HttpMethod
) -> None:
    getattr(manager, method_name)(TEST_URL, '{"a":1}', {"X-A": "1"})
    request = stub.requests[0]
    assert request.method == method
    assert request.body == '{"a":1}'
    assert request.headers["X-A"] == "1"


def test_http_manager_post_serializes_object(manager: HttpManager, stub: StubTransport) -> None:
    manager.post(TEST_URL, {"name": "John Doe", "email": "john@example.com"})
    assert json.loads(stub.requests[0].body) == {"name": "John Doe", "email": "john@example.com"}


def test_http_manager_request_string_method(manager: HttpManager, stub: StubTransport) -> None:
    manager.request("put", TEST_URL, body="x")
    assert stub.requests[0].method == HttpMethod.PUT


def test_http_manager_execute(manager: HttpManager, stub: StubTransport) -> None:
    request = (
        RequestBuilder()
        .url(TEST_URL)
        .method(HttpMethod.POST)
        .body('{"a":1}')
        .header("X-Test", "v")
        .timeout(5.0)
        .follow_redirects(False)
        .build()
    )
    manager.execute(request)
    sent = stub.requests[0]
    assert sent.method == HttpMethod.POST
    assert sent.body == '{"a":1}'
    assert sent.timeout == 5.0
    assert not sent.follow_redirects
    assert dict(sent.headers) == {**DEFAULT_HEADERS, "X-Test": "v"}
    # The caller's request is left untouched
    assert dict(request.headers) == {"X-Test": "v"}


def test_http_manager_execute_string_method(manager: HttpManager, stub: StubTransport) -> None:
    manager.execute(RequestBuilder().url(TEST_URL).method("delete").build())
    assert stub.requests[0].method == HttpMethod.DELETE


@pytest.mark.parametrize("status_code", [201, 404, 500, 503])
def test_http_manager_returns_error_status(status_code: int, mock_sleep: Mock) -> None:
    stub = StubTransport([HttpResponse(status_code=status_code)])
    with HttpManager(transport=stub) as manager:
        response = manager.get(TEST_URL)
    assert response.status_code == status_code
    assert stub.call_count == 1
    mock_sleep.assert_not_called()


def test_http_manager_stamps_elapsed_time() -> None:
    stub = StubTransport([HttpResponse(status_code=200, elapsed_ms=999)])
    with HttpManager(transport=stub) as manager:
        response = manager.get(TEST_URL)
    assert 0 <= response.elapsed_ms < 999


###########################################
#     Tests for default header store      #
###########################################


def test_http_manager_add_default_header(manager: HttpManager, stub: StubTransport) -> None:
    manager.add_default_header("X-API-Key", "your-api-key")
    manager.get(TEST_URL)
    manager.get(TEST_URL)
    assert all(request.headers["X-API-Key"] == "your-api-key" for request in stub.requests)


def test_http_manager_remove_default_header(manager: HttpManager, stub: StubTransport) -> None:
    manager.add_default_header("X-API-Key", "your-api-key")
    manager.remove_default_header("X-API-Key")
    manager.remove_default_header("X-Missing")
    manager.get(TEST_URL)
    assert "X-API-Key" not in stub.requests[0].headers


def test_http_manager_clear_default_headers(manager: HttpManager) -> None:
    manager.add_default_header("X-API-Key", "your-api-key")
    manager.remove_default_header("Accept")
    manager.clear_default_headers()
    assert manager.default_headers == DEFAULT_HEADERS


def test_http_manager_default_headers_is_snapshot(manager: HttpManager) -> None:
    manager.default_headers["X-Other"] = "1"
    assert "X-Other" not in manager.default_headers


def test_http_manager_concurrent_header_updates(manager: HttpManager, stub: StubTransport) -> None:
    def worker(index: int) -> None:
        for i in range(20):
            manager.add_default_header(f"X-Worker-{index}", str(i))
            manager.get(TEST_URL)

    threads = [threading.Thread(target=worker, args=(index,)) for index in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert stub.call_count == 80
    assert all(
        request.headers["User-Agent"] == "TestApp/1.0" for request in stub.requests
    )


######################################
#     Tests for send_api_request     #
######################################


def test_http_manager_send_api_request_with_token(
    manager: HttpManager, stub: StubTransport
) -> None:
    manager.send_api_request(TEST_URL, "POST", {"name": "John"}, "abc123")
    request = stub.requests[0]
    assert request.method == HttpMethod.POST
    assert request.headers["Authorization"] == "Bearer abc123"
    assert json.loads(request.body) == {"name": "John"}


@pytest.mark.parametrize("token", [None, ""])
def test_http_manager_send_api_request_without_token(
    manager: HttpManager, stub: StubTransport, token: str | None
) -> None:
    manager.send_api_request(TEST_URL, HttpMethod.GET, token=token)
    assert "Authorization" not in stub.requests[0].headers


def test_http_manager_send_api_request_extra_headers(
    manager: HttpManager, stub: StubTransport
) -> None:
    manager.send_api_request(TEST_URL, "GET", token="t", headers={"X-Trace": "1"})
    headers = stub.requests[0].headers
    assert headers["X-Trace"] == "1"
    assert headers["Authorization"] == "Bearer t"


#####################################
#     Tests for retry behaviour     #
#####################################


def test_http_manager_retries_transient_failures() -> None:
    stub = StubTransport([network_error(), timeout_error(), HttpResponse(status_code=200)])
    config = ClientConfig(max_retries=3, retry_delay=0.01)
    with HttpManager(config, transport=stub) as manager:
        response = manager.get(TEST_URL)
    assert response.status_code == 200
    assert stub.call_count == 3
    # Two delays of 10ms are included in the elapsed time
    assert response.elapsed_ms >= 20


def test_http_manager_retry_exhausted(
    mock_sleep: Mock, caplog: pytest.LogCaptureFixture
) -> None:
    stub = StubTransport([network_error()])
    with HttpManager(ClientConfig(max_retries=2), transport=stub) as manager:
        with caplog.at_level(logging.ERROR, logger="httpmanager"):
            with pytest.raises(HttpRequestError) as exc_info:
                manager.get(TEST_URL)
    error = exc_info.value
    assert error.kind == ErrorKind.RETRY_EXHAUSTED
    assert error.attempts == 2
    assert error.cause.kind == ErrorKind.NETWORK
    assert stub.call_count == 2
    assert mock_sleep.call_count == 1
    assert any(
        record.message == f"HTTP request failed for URL: {TEST_URL}" for record in caplog.records
    )


def test_http_manager_retry_disabled(mock_sleep: Mock) -> None:
    stub = StubTransport([timeout_error()])
    with HttpManager(ClientConfig(enable_retry=False), transport=stub) as manager:
        with pytest.raises(HttpRequestError) as exc_info:
            manager.get(TEST_URL)
    assert exc_info.value.attempts == 1
    assert stub.call_count == 1
    mock_sleep.assert_not_called()


def test_http_manager_unreachable_host(mock_sleep: Mock) -> None:
    config = ClientConfig(max_retries=2, connect_timeout=2.0, read_timeout=2.0)
    with HttpManager(config) as manager:
        with pytest.raises(HttpRequestError) as exc_info:
            manager.get("http://127.0.0.1:1/unreachable")
    assert exc_info.value.kind == ErrorKind.RETRY_EXHAUSTED
    assert exc_info.value.attempts == 2
    assert exc_info.value.cause.kind in (ErrorKind.NETWORK, ErrorKind.TIMEOUT)


def test_http_manager_unsupported_method(manager: HttpManager, stub: StubTransport) -> None:
    with pytest.raises(HttpRequestError) as exc_info:
        manager.request("TRACE", TEST_URL)
    assert exc_info.value.kind == ErrorKind.UNSUPPORTED_METHOD
    assert stub.call_count == 0


def test_http_manager_cancelled(manager: HttpManager, stub: StubTransport) -> None:
    token = CancellationToken()
    token.cancel()
    with pytest.raises(HttpRequestError) as exc_info:
        manager.get(TEST_URL, cancel_token=token)
    assert exc_info.value.kind == ErrorKind.CANCELLED
    assert stub.call_count == 0


def test_http_manager_cancelled_during_attempt() -> None:
    token = CancellationToken()

    def send(request: object) -> HttpResponse:
        token.cancel()
        return HttpResponse(status_code=200)

    transport = Mock(spec=HttpxTransport, send=Mock(side_effect=send))
    with HttpManager(transport=transport) as manager:
        with pytest.raises(HttpRequestError) as exc_info:
            manager.get(TEST_URL, cancel_token=token)
    assert exc_info.value.kind == ErrorKind.CANCELLED
    assert exc_info.value.attempts == 1
    assert transport.send.call_count == 1


################################
#     Tests for validation     #
################################


@pytest.mark.parametrize("url", ["", "   "])
def test_http_manager_empty_url(manager: HttpManager, stub: StubTransport, url: str) -> None:
    with pytest.raises(ValueError, match="url must be a non-empty string"):
        manager.get(url)
    assert stub.call_count == 0


def test_http_manager_invalid_request_timeout(manager: HttpManager) -> None:
    with pytest.raises(ValueError, match="timeout must be > 0"):
        manager.execute(RequestBuilder().url(TEST_URL).timeout(0).build())


@pytest.mark.parametrize(
    "headers", [{"X-Name": "Zoë ✓"}, {"X-Naïve": "value"}], ids=["value", "name"]
)
def test_http_manager_non_ascii_header(
    manager: HttpManager, stub: StubTransport, headers: dict[str, str]
) -> None:
    with pytest.raises(ValueError, match="must contain only ASCII characters"):
        manager.get(TEST_URL, headers)
    assert stub.call_count == 0


def test_http_manager_non_ascii_default_header(manager: HttpManager, stub: StubTransport) -> None:
    manager.add_default_header("X-Name", "Zoë")
    with pytest.raises(ValueError, match="header 'X-Name' must contain only ASCII characters"):
        manager.post(TEST_URL, "{}")
    assert stub.call_count == 0


def test_http_manager_echo_non_ascii_header(echo_manager: HttpManager, mock_handler: Mock) -> None:
    with pytest.raises(ValueError, match="must contain only ASCII characters"):
        echo_manager.get(TEST_URL, {"X-Name": "Zoë ✓"})
    mock_handler.assert_not_called()


#############################
#     Tests for closing     #
#############################


def test_http_manager_close(stub: StubTransport) -> None:
    manager = HttpManager(transport=stub)
    manager.close()
    assert manager.is_closed
    assert stub.is_closed


def test_http_manager_close_is_idempotent() -> None:
    transport = Mock(spec=HttpxTransport)
    manager = HttpManager(transport=transport)
    manager.close()
    manager.close()
    transport.close.assert_called_once_with()


def test_http_manager_use_after_close(stub: StubTransport) -> None:
    manager = HttpManager(transport=stub)
    manager.close()
    with pytest.raises(RuntimeError, match="HttpManager is closed"):
        manager.get(TEST_URL)
    assert stub.call_count == 0


def test_http_manager_context_manager_closes(stub: StubTransport) -> None:
    with HttpManager(transport=stub) as manager:
        assert not manager.is_closed
    assert manager.is_closed
    assert stub.is_closed


####################################################
#     Tests with an httpx.MockTransport backend    #
####################################################


def test_http_manager_echo_post_round_trip(echo_manager: HttpManager) -> None:
    response = echo_manager.post(TEST_URL, {"name": "John Doe"})
    assert response.is_success()
    echo = response.json()
    assert echo["method"] == "POST"
    assert json.loads(echo["body"]) == {"name": "John Doe"}
    assert echo["headers"]["content-type"] == "application/json"
    assert echo["headers"]["accept"] == "application/json"
    assert echo["headers"]["user-agent"] == "TestApp/1.0"


def test_http_manager_echo_execute_with_header(echo_manager: HttpManager) -> None:
    request = (
        RequestBuilder()
        .url(TEST_URL)
        .method(HttpMethod.POST)
        .body('{"a":1}')
        .header("X-Test", "v")
        .build()
    )
    response = echo_manager.execute(request)
    assert response.status_code == 200
    echo = response.json()
    assert echo["body"] == '{"a":1}'
    assert echo["headers"]["x-test"] == "v"


def test_http_manager_echo_api_key(echo_manager: HttpManager) -> None:
    echo_manager.add_default_header("X-API-Key", "your-api-key")
    echo = echo_manager.get(TEST_URL).json()
    assert echo["headers"]["x-api-key"] == "your-api-key"


def test_http_manager_echo_bearer_token(echo_manager: HttpManager) -> None:
    echo = echo_manager.send_api_request(TEST_URL, "GET", token="secret").json()
    assert echo["headers"]["authorization"] == "Bearer secret"


def test_http_manager_echo_response_headers(echo_manager: HttpManager) -> None:
    response = echo_manager.get(TEST_URL)
    assert response.get_header("x-echo") == "1"
    assert response.get_header("Content-Type") == "application/json"
