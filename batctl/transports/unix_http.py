"""HTTP over a Unix domain socket, one connection per request."""

from __future__ import annotations

import logging

import httpx

from batctl.core.errors import (
    RemoteError,
    RequestBuildError,
    ResponseReadError,
    TransportConnectError,
    TransportSendError,
    TransportTimeoutError,
    UnsupportedMethodError,
)
from batctl.core.model import BODYLESS_METHODS, SUPPORTED_METHODS, Request, Response
from batctl.transports.base import TransportFactory, uds_transport_factory

# Host part is ignored by the socket transport. Paths are appended to it
# verbatim; a leading "//" stays part of the path.
_BASE_URL = "http://unix"
_CONNECT_HINT = "do you have adequate permissions? Is the daemon running?"


class UnixHTTPClient:
    """Synchronous client for the privileged daemon's HTTP API.

    Every call dials the socket, performs exactly one request/response
    exchange and closes the connection again, so one instance can be shared
    between threads without locking. Non-2xx answers are raised as
    `RemoteError`; nothing is retried.
    """

    def __init__(
        self,
        socket_path: str,
        *,
        transport_factory: TransportFactory | None = None,
        timeout_s: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.socket_path = socket_path
        self._transport_factory = transport_factory or uds_transport_factory(socket_path)
        self._timeout = httpx.Timeout(timeout_s)
        self._log = logger or logging.getLogger(__name__)

    def get(self, path: str) -> bytes:
        return self.send("GET", path)

    def post(self, path: str, body: bytes | str) -> bytes:
        return self.send("POST", path, body)

    def put(self, path: str, body: bytes | str) -> bytes:
        return self.send("PUT", path, body)

    def delete(self, path: str) -> bytes:
        return self.send("DELETE", path)

    def send(self, method: str, path: str, body: bytes | str = b"") -> bytes:
        request = _make_request(method, path, body)
        self._log.debug(
            "sending %s %s with data %r to %s",
            request.method,
            request.path,
            request.body,
            self.socket_path,
        )

        response = self._exchange(request)
        self._log.debug("got response: %d %r", response.status_code, response.body)

        if not response.ok:
            raise RemoteError(
                response.status_code,
                response.body.decode("utf-8", errors="replace"),
            )
        return response.body

    def _exchange(self, request: Request) -> Response:
        with httpx.Client(
            transport=self._transport_factory(),
            timeout=self._timeout,
        ) as client:
            url = _BASE_URL + request.path
            try:
                if request.method in BODYLESS_METHODS:
                    http_request = client.build_request(request.method, url)
                else:
                    http_request = client.build_request(
                        request.method,
                        url,
                        content=request.body,
                        headers={"Content-Type": "application/octet-stream"},
                    )
            except (httpx.InvalidURL, TypeError, ValueError) as exc:
                raise RequestBuildError(f"failed to create request: {exc}") from exc

            try:
                http_response = client.send(http_request, stream=True)
            except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
                self._log.error("failed to connect to unix socket, %s", _CONNECT_HINT)
                raise TransportConnectError(
                    f"failed to connect to {self.socket_path}, {_CONNECT_HINT} ({exc})"
                ) from exc
            except httpx.TimeoutException as exc:
                raise TransportTimeoutError(f"request to {self.socket_path} timed out: {exc}") from exc
            except httpx.TransportError as exc:
                raise TransportSendError(f"failed to send request: {exc}") from exc

            try:
                content = http_response.read()
            except httpx.HTTPError as exc:
                raise ResponseReadError(f"failed to read response body: {exc}") from exc
            finally:
                http_response.close()

        return Response(status_code=http_response.status_code, body=content)


def _make_request(method: str, path: str, body: bytes | str) -> Request:
    normalized = method.upper()
    if normalized not in SUPPORTED_METHODS:
        raise UnsupportedMethodError(f"unknown method: {method}")
    if not path.startswith("/"):
        raise RequestBuildError(f"failed to create request: path '{path}' must start with '/'")
    if not isinstance(body, (bytes, bytearray, memoryview, str)):
        raise RequestBuildError(
            f"failed to create request: body must be bytes or str, not {type(body).__name__}"
        )
    if normalized in BODYLESS_METHODS:
        return Request(method=normalized, path=path)
    payload = body.encode("utf-8") if isinstance(body, str) else bytes(body)
    return Request(method=normalized, path=path, body=payload)
