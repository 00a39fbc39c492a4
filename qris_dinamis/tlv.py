"""Utility helpers to build and parse EMV-style TLV payloads."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from .errors import FormatError

HEADER_LENGTH = 4
MAX_VALUE_LENGTH = 99

_TWO_DIGITS = re.compile(r"[0-9]{2}")


@dataclass(frozen=True)
class TLVItem:
    tag: str
    value: str

    @property
    def length(self) -> str:
        return f"{len(self.value):02d}"

    def serialize(self) -> str:
        if not _TWO_DIGITS.fullmatch(self.tag):
            raise FormatError(f"Tag {self.tag!r} is not a two digit identifier")
        if len(self.value) > MAX_VALUE_LENGTH:
            raise FormatError(f"Value of tag {self.tag} exceeds {MAX_VALUE_LENGTH} characters")
        return f"{self.tag}{self.length}{self.value}"


def build_tlv(items: Iterable[TLVItem]) -> str:
    """Serialize iterable of TLV items into EMV string."""

    return "".join(item.serialize() for item in items)


def tokenize(payload: str) -> Iterator[TLVItem]:
    """Yield TLV items left to right, raising FormatError on malformed input.

    The generator holds no state beyond its cursor; calling it again on the
    same string restarts from the beginning. Nested templates (tags 26-51,
    62, ...) are returned as opaque values and can be fed back into
    ``tokenize`` when their sub-fields are needed.
    """

    idx = 0
    total = len(payload)
    while idx < total:
        if idx + HEADER_LENGTH > total:
            raise FormatError(f"Truncated TLV header at offset {idx}")
        tag = payload[idx : idx + 2]
        raw_length = payload[idx + 2 : idx + 4]
        if not _TWO_DIGITS.fullmatch(tag):
            raise FormatError(f"Non-numeric tag {tag!r} at offset {idx}")
        if not _TWO_DIGITS.fullmatch(raw_length):
            raise FormatError(f"Non-numeric length {raw_length!r} for tag {tag} at offset {idx}")
        value_start = idx + HEADER_LENGTH
        value_end = value_start + int(raw_length)
        if value_end > total:
            raise FormatError(f"Value of tag {tag} declares {raw_length} characters but payload ends early")
        yield TLVItem(tag=tag, value=payload[value_start:value_end])
        idx = value_end


def find_items(items: Iterable[TLVItem], tag: str) -> list[TLVItem]:
    return [item for item in items if item.tag == tag]
