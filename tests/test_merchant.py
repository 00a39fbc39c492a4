import pytest

from qris_dinamis.converter import convert
from qris_dinamis.errors import FormatError
from qris_dinamis.merchant import MerchantInfo, extract_merchant_info, summarize


def test_extract_merchant_info(static_payload):
    assert extract_merchant_info(static_payload) == MerchantInfo(merchant_name="WARUNG BU SRI", city="JAKARTA PUSAT")


def test_extract_uses_declared_length_not_next_marker(make_items, make_payload):
    payload = make_payload(make_items(merchant_name="KOPI 60 61 SENJA"))
    assert extract_merchant_info(payload).merchant_name == "KOPI 60 61 SENJA"


def test_missing_city_defaults_to_unknown(make_items, make_payload):
    payload = make_payload([item for item in make_items() if item.tag != "60"])
    info = extract_merchant_info(payload)
    assert info.merchant_name == "WARUNG BU SRI"
    assert info.city == "Unknown"


@pytest.mark.parametrize("payload", ["0002", "not a qris", None, b"000201010211", 12345])
def test_unparseable_input_defaults_to_unknown(payload):
    assert extract_merchant_info(payload) == MerchantInfo(merchant_name="Unknown", city="Unknown")


def test_summarize_static_payload(static_payload):
    summary = summarize(static_payload)
    assert summary.initiation == "static"
    assert summary.amount is None
    assert summary.currency == "360"
    assert summary.merchant_category_code == "5812"
    assert summary.postal_code == "10110"
    assert summary.checksum_valid


def test_summarize_dynamic_payload(static_payload):
    summary = summarize(convert(static_payload, 25000))
    assert summary.initiation == "dynamic"
    assert summary.amount == 25000
    assert summary.checksum_valid


def test_summarize_raises_on_malformed_payload():
    with pytest.raises(FormatError):
        summarize("0002")


def test_bytes_payload_defaults_to_unknown(static_payload):
    assert extract_merchant_info(static_payload.encode()) == MerchantInfo()
