"""Read-only helpers that describe a QRIS payload for display."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .crc import verify
from .errors import FormatError
from .tlv import TLVItem, tokenize
from .validator import (
    TAG_AMOUNT,
    TAG_INITIATION,
    TAG_MERCHANT_CITY,
    TAG_MERCHANT_NAME,
    TAG_POSTAL_CODE,
)

UNKNOWN = "Unknown"

TAG_MCC = "52"
TAG_CURRENCY = "53"

_INITIATION_KINDS: dict[str, Literal["static", "dynamic"]] = {"11": "static", "12": "dynamic"}


@dataclass(frozen=True)
class MerchantInfo:
    merchant_name: str = UNKNOWN
    city: str = UNKNOWN


@dataclass(frozen=True)
class PayloadSummary:
    merchant_name: str | None
    city: str | None
    postal_code: str | None
    merchant_category_code: str | None
    currency: str | None
    initiation: Literal["static", "dynamic"] | None
    amount: int | None
    checksum_valid: bool


def _first_values(items: list[TLVItem]) -> dict[str, str]:
    values: dict[str, str] = {}
    for item in items:
        values.setdefault(item.tag, item.value)
    return values


def extract_merchant_info(payload: str) -> MerchantInfo:
    """Return merchant name and city, falling back to "Unknown" on any problem."""

    if not isinstance(payload, str):
        return MerchantInfo()
    try:
        values = _first_values(list(tokenize(payload.strip())))
    except FormatError:
        return MerchantInfo()
    return MerchantInfo(
        merchant_name=values.get(TAG_MERCHANT_NAME) or UNKNOWN,
        city=values.get(TAG_MERCHANT_CITY) or UNKNOWN,
    )


def summarize(payload: str) -> PayloadSummary:
    candidate = payload.strip()
    values = _first_values(list(tokenize(candidate)))
    raw_amount = values.get(TAG_AMOUNT)
    return PayloadSummary(
        merchant_name=values.get(TAG_MERCHANT_NAME),
        city=values.get(TAG_MERCHANT_CITY),
        postal_code=values.get(TAG_POSTAL_CODE),
        merchant_category_code=values.get(TAG_MCC),
        currency=values.get(TAG_CURRENCY),
        initiation=_INITIATION_KINDS.get(values.get(TAG_INITIATION, "")),
        amount=int(raw_amount) if raw_amount and raw_amount.isdecimal() else None,
        checksum_valid=verify(candidate),
    )
