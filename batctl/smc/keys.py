"""SMC key names and the byte conventions of the keys batctl interprets."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Key(StrEnum):
    CHARGE_INHIBIT_A = "CH0B"
    CHARGE_INHIBIT_B = "CH0C"
    ADAPTER_INHIBIT = "CH0I"
    # Apple Silicon name; Intel machines expose the charge as BBIF.
    BATTERY_CHARGE = "BUIC"
    AC_PRESENCE = "AC-W"


class ChargeInhibit(IntEnum):
    ALLOWED = 0x00
    INHIBITED = 0x02


class AdapterInhibit(IntEnum):
    ENABLED = 0x00
    DISABLED = 0x01


class ACPresence(IntEnum):
    PLUGGED_IN = 0x01


def to_hex(value: int) -> str:
    """Encode a one-byte value the way the driver expects it on write."""
    return f"{value:02x}"
