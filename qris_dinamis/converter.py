"""Static to dynamic QRIS conversion."""
from __future__ import annotations

import enum
from dataclasses import dataclass

from .crc import crc16, ensure_valid_checksum
from .errors import InvalidAmountError
from .tlv import TLVItem, build_tlv
from .validator import (
    TAG_AMOUNT,
    TAG_COUNTRY,
    TAG_CRC,
    TAG_FEE_FIXED,
    TAG_FEE_INDICATOR,
    TAG_FEE_PERCENT,
    TAG_INITIATION,
    validate_structure,
)

INITIATION_STATIC = "11"
INITIATION_DYNAMIC = "12"

# EMV caps the transaction amount (tag 54) at 13 characters.
MAX_AMOUNT_DIGITS = 13

_FEE_TAGS = frozenset({TAG_FEE_INDICATOR, TAG_FEE_FIXED, TAG_FEE_PERCENT})


class FeeKind(str, enum.Enum):
    RUPIAH = "rupiah"
    PERCENT = "percent"


# Tip indicator value and the record carrying the fee, per fee kind.
_FEE_LAYOUT: dict[FeeKind, tuple[str, str]] = {
    FeeKind.RUPIAH: ("02", TAG_FEE_FIXED),
    FeeKind.PERCENT: ("03", TAG_FEE_PERCENT),
}


@dataclass(frozen=True)
class FeeOptions:
    kind: FeeKind
    value: int


def _check_positive_int(value: object, label: str) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(f"{label} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise InvalidAmountError(f"{label} must be greater than zero, got {value}")
    digits = str(value)
    if len(digits) > MAX_AMOUNT_DIGITS:
        raise InvalidAmountError(f"{label} exceeds {MAX_AMOUNT_DIGITS} digits")
    return digits


def build_amount_item(amount: int) -> TLVItem:
    return TLVItem(tag=TAG_AMOUNT, value=_check_positive_int(amount, "Amount"))


def build_fee_items(fee: FeeOptions) -> list[TLVItem]:
    """Return the tip indicator record followed by the fee value record."""

    try:
        kind = FeeKind(fee.kind)
    except ValueError:
        raise InvalidAmountError(f"Unknown fee kind {fee.kind!r}") from None
    indicator, value_tag = _FEE_LAYOUT[kind]
    return [
        TLVItem(tag=TAG_FEE_INDICATOR, value=indicator),
        TLVItem(tag=value_tag, value=_check_positive_int(fee.value, "Fee")),
    ]


def convert(
    static_payload: str,
    amount: int,
    fee: FeeOptions | None = None,
    *,
    verify_checksum: bool = False,
) -> str:
    """Bind ``amount`` (and optionally a fee) to a static QRIS payload.

    The payload is walked record by record, so marker-like text inside
    other fields (a merchant called "5802ID", say) is never touched. The
    point-of-initiation record is switched from static (11) to dynamic (12)
    when present; a payload without it is converted anyway. An amount
    already in the payload is replaced, while existing tip or fee records
    (55-57) are kept unless a new ``fee`` is given. The checksum is
    recomputed over the reassembled string, including the ``6304`` header.
    """

    amount_item = build_amount_item(amount)
    fee_items = build_fee_items(fee) if fee is not None else []

    candidate = static_payload.strip()
    items = validate_structure(candidate, require_initiation=False)
    if verify_checksum:
        ensure_valid_checksum(candidate)

    dropped = {TAG_CRC, TAG_AMOUNT} | (_FEE_TAGS if fee_items else frozenset())
    records: list[TLVItem] = []
    for item in items:
        if item.tag in dropped:
            continue
        if item.tag == TAG_INITIATION and item.value == INITIATION_STATIC:
            item = TLVItem(tag=TAG_INITIATION, value=INITIATION_DYNAMIC)
        records.append(item)

    # validate_structure guarantees a single 5802ID record.
    split_at = next(idx for idx, item in enumerate(records) if item.tag == TAG_COUNTRY)
    prefix, suffix = records[:split_at], records[split_at:]
    body = build_tlv([*prefix, amount_item, *fee_items, *suffix]) + f"{TAG_CRC}04"
    return body + crc16(body)
