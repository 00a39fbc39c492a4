"""Shared error definitions for the codec and the service layer."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class ServiceError(Exception):
    code: str
    message: str
    status_code: int = 400

    def __str__(self) -> str:  # noqa: D401 override
        return f"{self.code}: {self.message}"


class ConversionError(ServiceError):
    """Base class for deterministic payload problems raised by the codec."""

    default_code = "ERR_CONVERSION"
    default_message = "QRIS conversion failed"

    def __init__(self, message: str | None = None) -> None:
        ServiceError.__init__(self, code=self.default_code, message=message or self.default_message, status_code=422)


class FormatError(ConversionError):
    default_code = "ERR_FORMAT"
    default_message = "Payload is not well-formed TLV"


class MissingFieldError(ConversionError):
    default_code = "ERR_MISSING_FIELD"
    default_message = "Required QRIS field is missing or duplicated"


class InvalidAmountError(ConversionError):
    default_code = "ERR_INVALID_AMOUNT"
    default_message = "Amount must be a positive integer"


class ChecksumMismatchError(ConversionError):
    default_code = "ERR_CHECKSUM_MISMATCH"
    default_message = "Payload checksum does not match its content"


def err_not_found(message: str | None = None) -> ServiceError:
    return ServiceError(code="ERR_NOT_FOUND", message=message or "Resource not found", status_code=404)
