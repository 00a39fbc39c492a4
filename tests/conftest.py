import pytest

from qris_dinamis.crc import crc16
from qris_dinamis.tlv import TLVItem, build_tlv

MERCHANT_ACCOUNT = build_tlv(
    [
        TLVItem("00", "ID.CO.QRIS.WWW"),
        TLVItem("01", "936008990000000001"),
        TLVItem("02", "ID1020000000001"),
        TLVItem("03", "UMI"),
    ]
)
NATIONAL_MERCHANT = build_tlv(
    [
        TLVItem("00", "ID.CO.QRIS.WWW"),
        TLVItem("02", "ID1020000000001"),
        TLVItem("03", "UMI"),
    ]
)


def static_items(merchant_name="WARUNG BU SRI"):
    return [
        TLVItem("00", "01"),
        TLVItem("01", "11"),
        TLVItem("26", MERCHANT_ACCOUNT),
        TLVItem("51", NATIONAL_MERCHANT),
        TLVItem("52", "5812"),
        TLVItem("53", "360"),
        TLVItem("58", "ID"),
        TLVItem("59", merchant_name),
        TLVItem("60", "JAKARTA PUSAT"),
        TLVItem("61", "10110"),
        TLVItem("62", build_tlv([TLVItem("07", "A01")])),
    ]


def with_checksum(items):
    body = build_tlv(items) + "6304"
    return body + crc16(body)


@pytest.fixture
def make_items():
    return static_items


@pytest.fixture
def make_payload():
    return with_checksum


@pytest.fixture
def static_payload():
    return with_checksum(static_items())
