from __future__ import annotations

import http.server
import logging
import socket
import socketserver
import threading
from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest

from batctl.core.errors import (
    RemoteError,
    RequestBuildError,
    ResponseReadError,
    TransportConnectError,
    TransportSendError,
    TransportTimeoutError,
    UnsupportedMethodError,
)
from batctl.transports.unix_http import UnixHTTPClient

needs_unix_sockets = pytest.mark.skipif(
    not hasattr(socket, "AF_UNIX"), reason="Unix domain sockets unavailable"
)


class CountingFactory:
    """Transport factory that records every dial and every request seen."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handler = handler
        self.dials = 0
        self.requests: list[httpx.Request] = []

    def __call__(self) -> httpx.BaseTransport:
        self.dials += 1
        return httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> tuple[UnixHTTPClient, CountingFactory]:
    factory = CountingFactory(handler)
    return UnixHTTPClient("/run/test.sock", transport_factory=factory), factory


def _ok(body: bytes) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(200, content=body)


@pytest.mark.parametrize("method", ["GET", "POST", "PUT", "DELETE"])
def test_success_returns_body(method: str) -> None:
    client, factory = _client(_ok(b"80"))

    assert client.send(method, "/limit", b"60") == b"80"
    assert factory.dials == 1
    assert factory.requests[0].method == method
    assert factory.requests[0].url.path == "/limit"


def test_helpers_map_to_methods() -> None:
    client, factory = _client(_ok(b"ok"))

    assert client.get("/charging") == b"ok"
    assert client.post("/charging", b"1") == b"ok"
    assert client.put("/charging", b"0") == b"ok"
    assert client.delete("/charging") == b"ok"

    assert [r.method for r in factory.requests] == ["GET", "POST", "PUT", "DELETE"]
    assert factory.dials == 4


def test_put_sends_octet_stream_body() -> None:
    client, factory = _client(_ok(b""))

    client.put("/limit", b"\x00\x50")

    request = factory.requests[0]
    assert request.content == b"\x00\x50"
    assert request.headers["content-type"] == "application/octet-stream"


def test_string_body_is_utf8_encoded() -> None:
    client, factory = _client(_ok(b""))

    client.post("/limit", "80")

    assert factory.requests[0].content == b"80"


@pytest.mark.parametrize("method", ["GET", "DELETE"])
def test_bodyless_methods_send_no_content(method: str) -> None:
    client, factory = _client(_ok(b""))

    client.send(method, "/limit", b"ignored")

    assert factory.requests[0].content == b""
    assert "content-type" not in factory.requests[0].headers


@pytest.mark.parametrize("status", [300, 400, 403, 404, 500, 503])
def test_non_2xx_status_raises_remote_error(status: int) -> None:
    client, _ = _client(lambda request: httpx.Response(status, content=b"limit out of range"))

    with pytest.raises(RemoteError) as exc:
        client.put("/limit", b"120")

    assert str(status) in str(exc.value)
    assert "limit out of range" in str(exc.value)
    assert exc.value.status_code == status
    assert exc.value.body == "limit out of range"


def test_unsupported_method_fails_before_dialing() -> None:
    client, factory = _client(_ok(b""))

    with pytest.raises(UnsupportedMethodError):
        client.send("PATCH", "/limit", b"80")

    assert factory.dials == 0


def test_relative_path_fails_before_dialing() -> None:
    client, factory = _client(_ok(b""))

    with pytest.raises(RequestBuildError):
        client.get("limit")

    assert factory.dials == 0


@pytest.mark.parametrize("path", ["//charging", "//limit/extra", "/limit?verbose=1"])
def test_path_is_sent_verbatim(path: str) -> None:
    client, factory = _client(_ok(b""))

    client.put(path, b"80")

    url = factory.requests[0].url
    assert url.host == "unix"
    assert url.raw_path == path.encode("ascii")


@pytest.mark.parametrize("body", [5, None, 1.5, ["80"]])
def test_non_bytes_body_fails_before_dialing(body: object) -> None:
    client, factory = _client(_ok(b""))

    with pytest.raises(RequestBuildError):
        client.put("/limit", body)  # type: ignore[arg-type]

    assert factory.dials == 0


def test_bytearray_body_is_accepted() -> None:
    client, factory = _client(_ok(b""))

    client.put("/limit", bytearray(b"80"))

    assert factory.requests[0].content == b"80"


def test_connect_failure_has_actionable_hint() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, _ = _client(refuse)

    with pytest.raises(TransportConnectError) as exc:
        client.get("/charging")

    assert "Is the daemon running?" in str(exc.value)


def test_send_failure_is_transport_send_error() -> None:
    def broken_pipe(request: httpx.Request) -> httpx.Response:
        raise httpx.WriteError("broken pipe", request=request)

    client, _ = _client(broken_pipe)

    with pytest.raises(TransportSendError):
        client.put("/charging", b"0")


def test_timeout_is_reported_separately() -> None:
    def stall(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client, _ = _client(stall)

    with pytest.raises(TransportTimeoutError):
        client.get("/charging")


class _BrokenStream(httpx.SyncByteStream):
    def __iter__(self) -> Iterator[bytes]:
        raise httpx.ReadError("connection reset while reading body")


def test_unreadable_body_is_read_error() -> None:
    client, _ = _client(lambda request: httpx.Response(200, stream=_BrokenStream()))

    with pytest.raises(ResponseReadError):
        client.get("/charging")


def test_injected_logger_traces_request_and_response(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("batctl.test.transport")
    factory = CountingFactory(_ok(b"80"))
    client = UnixHTTPClient("/run/test.sock", transport_factory=factory, logger=logger)

    with caplog.at_level(logging.DEBUG, logger="batctl.test.transport"):
        client.get("/limit")

    messages = [record.getMessage() for record in caplog.records]
    assert any("GET /limit" in m and "/run/test.sock" in m for m in messages)
    assert any("got response: 200" in m for m in messages)


class _DaemonHandler(http.server.BaseHTTPRequestHandler):
    def do_GET(self) -> None:
        self._reply(200, b"enabled")

    def do_PUT(self) -> None:
        data = self.rfile.read(int(self.headers.get("Content-Length", 0)))
        if data == b"bad":
            self._reply(400, b"invalid value")
            return
        self._reply(200, data)

    def _reply(self, code: int, body: bytes) -> None:
        self.send_response(code)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args: object) -> None:
        pass


@pytest.fixture
def daemon_socket(tmp_path: Path) -> Iterator[str]:
    path = str(tmp_path / "d.sock")
    server = socketserver.ThreadingUnixStreamServer(path, _DaemonHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield path
    finally:
        server.shutdown()
        server.server_close()


@needs_unix_sockets
def test_get_over_real_socket(daemon_socket: str) -> None:
    client = UnixHTTPClient(daemon_socket)

    assert client.get("/charging") == b"enabled"


@needs_unix_sockets
def test_put_over_real_socket(daemon_socket: str) -> None:
    client = UnixHTTPClient(daemon_socket)

    assert client.put("/limit", b"80") == b"80"
    with pytest.raises(RemoteError) as exc:
        client.put("/limit", b"bad")
    assert "400" in str(exc.value)
    assert "invalid value" in str(exc.value)


@needs_unix_sockets
def test_missing_socket_is_connect_error(tmp_path: Path) -> None:
    client = UnixHTTPClient(str(tmp_path / "missing.sock"))

    with pytest.raises(TransportConnectError):
        client.get("/charging")
