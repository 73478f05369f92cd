"""Core data models shared by the transport client, config and CLI."""

from __future__ import annotations

from dataclasses import dataclass

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")
BODYLESS_METHODS = frozenset({"GET", "DELETE"})


@dataclass(frozen=True)
class Request:
    method: str
    path: str
    body: bytes = b""


@dataclass(frozen=True)
class Response:
    status_code: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code <= 299


@dataclass(frozen=True)
class Settings:
    socket_path: str
    log_level: str = "WARNING"
    timeout_s: float | None = None
