"""Charging control on top of raw SMC key access."""

from __future__ import annotations

import logging

from batctl.core.errors import (
    HardwareIOError,
    HardwareUnavailableError,
    KeyNotFoundError,
    LengthMismatchError,
    SMCError,
)
from batctl.smc.driver import SMCDriver
from batctl.smc.keys import ACPresence, AdapterInhibit, ChargeInhibit, Key, to_hex


class SMCConnection:
    """Semantic battery operations over an `SMCDriver`.

    The caller owns the lifecycle: the driver may arrive already open, or be
    opened through `open()`. Any number of reads and writes follow, then
    `close()`, which always reaches the driver once. Nothing is retried. A
    single instance must not be used from several threads at once unless the
    driver serializes calls.
    """

    def __init__(self, driver: SMCDriver, *, logger: logging.Logger | None = None) -> None:
        self._driver = driver
        self._log = logger or logging.getLogger(__name__)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self) -> None:
        try:
            self._driver.open()
        except OSError as exc:
            raise HardwareUnavailableError(f"could not open SMC connection: {exc}") from exc
        self._closed = False

    def close(self) -> None:
        if self._closed:
            return
        try:
            self._driver.close()
        except OSError as exc:
            raise HardwareIOError(f"could not close SMC connection: {exc}") from exc
        finally:
            self._closed = True

    def read(self, key: str) -> bytes:
        self._log.debug("trying to read %s", key)
        try:
            value = bytes(self._driver.read(key))
        except KeyError as exc:
            raise KeyNotFoundError(str(key)) from exc
        except OSError as exc:
            raise HardwareIOError(f"failed to read {key}: {exc}") from exc
        self._log.debug("read %s succeed, value=%r", key, value)
        return value

    def write(self, key: str, value: str) -> None:
        self._log.debug("trying to write %s to %s", value, key)
        try:
            self._driver.write(key, value)
        except KeyError as exc:
            raise KeyNotFoundError(str(key)) from exc
        except OSError as exc:
            raise HardwareIOError(f"failed to write {value} to {key}: {exc}") from exc
        self._log.debug("write %s to %s succeed", value, key)

    def is_charging_enabled(self) -> bool:
        return self._read_flag(Key.CHARGE_INHIBIT_A, ChargeInhibit.ALLOWED)

    def enable_charging(self) -> None:
        """Clear both charge-inhibit keys, then re-enable the adapter.

        Not transactional: when a later write fails, the earlier ones stay
        applied and the failing write's error is raised.
        """
        self._write_sequence(
            (Key.CHARGE_INHIBIT_A, ChargeInhibit.ALLOWED),
            (Key.CHARGE_INHIBIT_B, ChargeInhibit.ALLOWED),
        )
        self.enable_adapter()

    def disable_charging(self) -> None:
        """Set both charge-inhibit keys. Not transactional, see `enable_charging`."""
        self._write_sequence(
            (Key.CHARGE_INHIBIT_A, ChargeInhibit.INHIBITED),
            (Key.CHARGE_INHIBIT_B, ChargeInhibit.INHIBITED),
        )

    def is_adapter_enabled(self) -> bool:
        return self._read_flag(Key.ADAPTER_INHIBIT, AdapterInhibit.ENABLED)

    def enable_adapter(self) -> None:
        self.write(Key.ADAPTER_INHIBIT, to_hex(AdapterInhibit.ENABLED))

    def disable_adapter(self) -> None:
        self.write(Key.ADAPTER_INHIBIT, to_hex(AdapterInhibit.DISABLED))

    def get_battery_charge(self) -> int:
        value = self.read(Key.BATTERY_CHARGE)
        if len(value) != 1:
            raise LengthMismatchError(Key.BATTERY_CHARGE, got=len(value), want=1)
        return value[0]

    def is_plugged_in(self) -> bool:
        return self._read_flag(Key.AC_PRESENCE, ACPresence.PLUGGED_IN)

    def _read_flag(self, key: Key, expected: int) -> bool:
        value = self.read(key)
        ret = len(value) == 1 and value[0] == expected
        self._log.debug("%s == %s: %s", key, to_hex(expected), ret)
        return ret

    def _write_sequence(self, *steps: tuple[Key, int]) -> None:
        written: list[str] = []
        for key, value in steps:
            try:
                self.write(key, to_hex(value))
            except SMCError:
                if written:
                    self._log.debug(
                        "write to %s failed after %s were applied; no rollback",
                        key,
                        ", ".join(written),
                    )
                raise
            written.append(str(key))
