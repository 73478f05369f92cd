"""Domain-specific errors for batctl."""

from __future__ import annotations


class BatctlError(Exception):
    """Base error for batctl."""


class ConfigError(BatctlError):
    """Base configuration error."""


class ConfigLoadError(ConfigError):
    """Raised when a configuration file cannot be read."""


class ConfigValidationError(ConfigError):
    """Raised when a configuration file does not conform to schema."""


class TransportError(BatctlError):
    """Base transport error."""


class UnsupportedMethodError(TransportError):
    """Raised for HTTP methods the daemon client does not speak."""


class RequestBuildError(TransportError):
    """Raised when a request object cannot be constructed."""


class TransportConnectError(TransportError):
    """Raised when the daemon socket cannot be reached."""


class TransportSendError(TransportError):
    """Raised when sending a request or receiving its response fails."""


class TransportTimeoutError(TransportError):
    """Raised when a caller-configured timeout expires."""


class ResponseReadError(TransportError):
    """Raised when the response body cannot be read."""


class RemoteError(TransportError):
    """Raised when the daemon answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"got {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class SMCError(BatctlError):
    """Base SMC error."""


class HardwareUnavailableError(SMCError):
    """Raised when the SMC cannot be opened."""


class KeyNotFoundError(SMCError):
    """Raised when the SMC does not know a key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"SMC key '{key}' not found")
        self.key = key


class HardwareIOError(SMCError):
    """Raised on lower-level SMC read/write failures."""


class LengthMismatchError(SMCError):
    """Raised when an SMC payload does not have the expected length."""

    def __init__(self, key: str, got: int, want: int) -> None:
        super().__init__(f"incorrect data length for '{key}': {got}!={want}")
        self.key = key
        self.got = got
        self.want = want
