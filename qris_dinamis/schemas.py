"""Pydantic schemas for API contracts."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .converter import FeeKind


class PayloadRequest(BaseModel):
    payload: str = Field(min_length=1, max_length=512, description="Decoded QRIS string")


class FeeRequest(BaseModel):
    kind: FeeKind
    value: int = Field(ge=1)


class ConvertRequest(BaseModel):
    payload: str | None = Field(
        default=None,
        max_length=512,
        description="Static QRIS string; the stored payload is used when omitted",
    )
    amount: int = Field(ge=1, description="Amount in whole rupiah")
    fee: FeeRequest | None = None
    render: bool = Field(default=False, description="Include a PNG rendering of the result")


class ConvertResponse(BaseModel):
    payload: str
    crc: str
    merchant_name: str
    city: str
    qr_png_base64: str | None = None


class ValidateResponse(BaseModel):
    valid: bool
    strict_valid: bool
    checksum_valid: bool


class InspectResponse(BaseModel):
    merchant_name: str | None
    city: str | None
    postal_code: str | None
    merchant_category_code: str | None
    currency: str | None
    initiation: Literal["static", "dynamic"] | None
    amount: int | None
    checksum_valid: bool


class StaticPayloadResponse(BaseModel):
    payload: str
    merchant_name: str
    city: str
