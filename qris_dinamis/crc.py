"""CRC16-CCITT (FALSE variant) checksum for QRIS payloads."""
from __future__ import annotations

from .errors import ChecksumMismatchError

CRC16_POLY = 0x1021
CRC16_INIT = 0xFFFF
CRC_VALUE_LENGTH = 4


def crc16(data: str) -> str:
    """Compute CRC16-CCITT (0x1021, init 0xFFFF) as four upper-case hex digits."""

    checksum = CRC16_INIT
    for byte in data.encode("utf-8"):
        checksum ^= byte << 8
        for _ in range(8):
            if checksum & 0x8000:
                checksum = (checksum << 1) ^ CRC16_POLY
            else:
                checksum <<= 1
            checksum &= 0xFFFF
    return f"{checksum:04X}"


def verify(payload: str) -> bool:
    """Return True when the trailing four characters are the CRC of the rest."""

    if not isinstance(payload, str) or len(payload) < CRC_VALUE_LENGTH:
        return False
    body, expected = payload[:-CRC_VALUE_LENGTH], payload[-CRC_VALUE_LENGTH:]
    return crc16(body) == expected.upper()


def ensure_valid_checksum(payload: str) -> None:
    if not verify(payload):
        found = payload[-CRC_VALUE_LENGTH:] if isinstance(payload, str) else ""
        raise ChecksumMismatchError(f"Checksum {found!r} does not match payload content")
