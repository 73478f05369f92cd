"""Transport factory interfaces."""

from __future__ import annotations

from collections.abc import Callable

import httpx

TransportFactory = Callable[[], httpx.BaseTransport]


def uds_transport_factory(socket_path: str) -> TransportFactory:
    """Return a factory dialing a fresh Unix domain socket connection per call."""

    def _factory() -> httpx.BaseTransport:
        return httpx.HTTPTransport(uds=socket_path, retries=0)

    return _factory
