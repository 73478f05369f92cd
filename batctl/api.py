"""Stable public API for building tooling on top of batctl.

This module is the supported integration surface for third-party callers:
the daemon client, the SMC charging layer, their data records and errors.
Avoid importing from private/internal modules unless intentionally depending
on non-stable internals.
"""

from __future__ import annotations

from batctl.core.config import load_settings
from batctl.core.errors import (
    BatctlError,
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    HardwareIOError,
    HardwareUnavailableError,
    KeyNotFoundError,
    LengthMismatchError,
    RemoteError,
    RequestBuildError,
    ResponseReadError,
    SMCError,
    TransportConnectError,
    TransportError,
    TransportSendError,
    TransportTimeoutError,
    UnsupportedMethodError,
)
from batctl.core.model import Request, Response, Settings
from batctl.smc.connection import SMCConnection
from batctl.smc.driver import SMCDriver
from batctl.smc.keys import ACPresence, AdapterInhibit, ChargeInhibit, Key
from batctl.transports.unix_http import UnixHTTPClient

__all__ = [
    "BatctlError",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "TransportError",
    "UnsupportedMethodError",
    "RequestBuildError",
    "TransportConnectError",
    "TransportSendError",
    "TransportTimeoutError",
    "ResponseReadError",
    "RemoteError",
    "SMCError",
    "HardwareUnavailableError",
    "KeyNotFoundError",
    "HardwareIOError",
    "LengthMismatchError",
    "Request",
    "Response",
    "Settings",
    "load_settings",
    "UnixHTTPClient",
    "SMCConnection",
    "SMCDriver",
    "Key",
    "ChargeInhibit",
    "AdapterInhibit",
    "ACPresence",
    "connect",
]


def connect(socket_path: str | None = None, *, timeout_s: float | None = None) -> UnixHTTPClient:
    """Return a daemon client for `socket_path`, or the configured socket.

    The config file is only consulted when no socket path is given.
    """
    if socket_path is not None:
        return UnixHTTPClient(socket_path, timeout_s=timeout_s)
    settings = load_settings()
    return UnixHTTPClient(
        settings.socket_path,
        timeout_s=timeout_s if timeout_s is not None else settings.timeout_s,
    )
