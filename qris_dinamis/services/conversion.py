"""Dynamic QRIS generation service."""
from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import settings
from ..converter import FeeOptions, convert
from ..crc import CRC_VALUE_LENGTH
from ..errors import ConversionError, MissingFieldError
from ..merchant import MerchantInfo, extract_merchant_info
from ..monitoring import record_conversion
from ..renderer import render_qr_payload
from .storage import StaticPayloadRepository

logger = logging.getLogger("qris_dinamis.conversion")


@dataclass(slots=True)
class ConversionResult:
    payload: str
    crc: str
    merchant: MerchantInfo
    qr_png_base64: str | None = None


class QrisConverter:
    def __init__(self, repository: StaticPayloadRepository, *, verify_checksum: bool | None = None):
        self.repository = repository
        self.verify_checksum = settings.verify_incoming_checksum if verify_checksum is None else verify_checksum

    async def generate(
        self,
        *,
        amount: int,
        fee: FeeOptions | None = None,
        payload: str | None = None,
        render: bool = False,
    ) -> ConversionResult:
        static_payload = payload if payload is not None else await self.repository.load()
        if not static_payload:
            record_conversion(MissingFieldError.default_code)
            raise MissingFieldError("No static payload given and none stored")

        try:
            dynamic = convert(static_payload, amount, fee, verify_checksum=self.verify_checksum)
        except ConversionError as exc:
            record_conversion(exc.code)
            logger.info("conversion rejected", extra={"code": exc.code, "reason": exc.message})
            raise

        merchant = extract_merchant_info(dynamic)
        record_conversion("ok")
        logger.info(
            "dynamic payload generated",
            extra={
                "amount": amount,
                "fee_kind": getattr(fee.kind, "value", fee.kind) if fee else None,
                "merchant_name": merchant.merchant_name,
                "stored_payload": payload is None,
            },
        )

        qr_png_base64 = None
        if render:
            qr_png_base64 = render_qr_payload(dynamic, title=settings.qr_title)["png_base64"]

        return ConversionResult(
            payload=dynamic,
            crc=dynamic[-CRC_VALUE_LENGTH:],
            merchant=merchant,
            qr_png_base64=qr_png_base64,
        )
