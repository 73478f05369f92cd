"""SMC driver interface."""

from __future__ import annotations

from typing import Protocol


class SMCDriver(Protocol):
    """Low-level key/value access to the System Management Controller.

    Implementations raise `OSError` when the controller cannot be reached or
    an I/O call fails, and `KeyError` for keys the controller does not know.
    """

    def open(self) -> None:
        """Open the controller connection."""

    def close(self) -> None:
        """Release the controller connection."""

    def read(self, key: str) -> bytes:
        """Return the raw payload stored under `key`."""

    def write(self, key: str, value: str) -> None:
        """Write a hex-encoded payload to `key`."""
