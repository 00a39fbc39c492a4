"""Structural checks for QRIS payloads."""
from __future__ import annotations

import re

from .errors import FormatError, MissingFieldError
from .tlv import TLVItem, find_items, tokenize

TAG_PAYLOAD_FORMAT = "00"
TAG_INITIATION = "01"
TAG_AMOUNT = "54"
TAG_FEE_INDICATOR = "55"
TAG_FEE_FIXED = "56"
TAG_FEE_PERCENT = "57"
TAG_COUNTRY = "58"
TAG_MERCHANT_NAME = "59"
TAG_MERCHANT_CITY = "60"
TAG_POSTAL_CODE = "61"
TAG_CRC = "63"

PAYLOAD_FORMAT_PREFIX = "000201"
COUNTRY_CODE = "ID"
COUNTRY_MARKER = f"{TAG_COUNTRY}02{COUNTRY_CODE}"

REQUIRED_TAGS = (TAG_PAYLOAD_FORMAT, TAG_INITIATION, TAG_COUNTRY, TAG_MERCHANT_NAME, TAG_MERCHANT_CITY, TAG_CRC)

_CRC_VALUE = re.compile(r"[0-9A-Fa-f]{4}")


def validate_structure(payload: str, *, require_initiation: bool = True) -> list[TLVItem]:
    """Tokenize ``payload`` and check the top-level record set.

    Returns the parsed records. Raises FormatError for malformed TLV or a
    misplaced checksum record and MissingFieldError when a required record
    is absent (or, for the country code, repeated).
    """

    items = list(tokenize(payload))
    if not items:
        raise FormatError("Payload is empty")

    if items[0].tag != TAG_PAYLOAD_FORMAT or items[0].value != "01":
        raise FormatError("Payload format indicator 000201 must be the first record")

    crc_items = find_items(items, TAG_CRC)
    if not crc_items:
        raise MissingFieldError("Checksum record (tag 63) is missing")
    last = items[-1]
    if len(crc_items) > 1 or last.tag != TAG_CRC:
        raise FormatError("Checksum record (tag 63) must appear once, as the last record")
    if not _CRC_VALUE.fullmatch(last.value):
        raise FormatError("Checksum record (tag 63) must carry exactly four hex digits")

    required = [tag for tag in REQUIRED_TAGS if require_initiation or tag != TAG_INITIATION]
    present = {item.tag for item in items}
    missing = [tag for tag in required if tag not in present]
    if missing:
        raise MissingFieldError(f"Required record(s) missing: {', '.join(missing)}")

    country = find_items(items, TAG_COUNTRY)
    if len(country) != 1:
        raise MissingFieldError(f"Expected exactly one country code record, found {len(country)}")
    if country[0].value != COUNTRY_CODE:
        raise MissingFieldError(f"Country code must be {COUNTRY_CODE!r}, got {country[0].value!r}")

    return items


def is_valid(payload: object, strict: bool = False) -> bool:
    """Report whether ``payload`` looks like a QRIS string. Never raises."""

    if not isinstance(payload, str) or not payload:
        return False
    candidate = payload.strip()
    if not strict:
        return candidate.startswith(PAYLOAD_FORMAT_PREFIX) and candidate.count(COUNTRY_MARKER) == 1
    try:
        validate_structure(candidate)
    except (FormatError, MissingFieldError):
        return False
    return True
