import pytest

from qris_dinamis.errors import FormatError, MissingFieldError
from qris_dinamis.tlv import TLVItem, build_tlv
from qris_dinamis.validator import is_valid, validate_structure


def test_static_payload_is_valid_in_both_modes(static_payload):
    assert is_valid(static_payload)
    assert is_valid(static_payload, strict=True)


def test_surrounding_whitespace_is_ignored(static_payload):
    assert is_valid(f"  {static_payload}\n", strict=True)


@pytest.mark.parametrize("payload", [None, 123, "", "hello", "010211000201" + "5802ID"])
def test_is_valid_rejects_non_qris_input(payload):
    assert not is_valid(payload)
    assert not is_valid(payload, strict=True)


def test_lenient_mode_requires_single_country_marker(static_payload):
    assert not is_valid(static_payload + "5802ID")


def test_lenient_mode_does_not_tokenize():
    assert is_valid("000201" + "garbage" + "5802ID")
    assert not is_valid("000201" + "garbage" + "5802ID", strict=True)


def test_validate_structure_returns_records(static_payload):
    items = validate_structure(static_payload)
    assert items[0] == TLVItem("00", "01")
    assert items[-1].tag == "63"


def test_missing_merchant_name_is_reported(make_items, make_payload):
    payload = make_payload([item for item in make_items() if item.tag != "59"])
    with pytest.raises(MissingFieldError) as excinfo:
        validate_structure(payload)
    assert "59" in excinfo.value.message
    assert not is_valid(payload, strict=True)


def test_missing_initiation_only_tolerated_on_request(make_items, make_payload):
    payload = make_payload([item for item in make_items() if item.tag != "01"])
    with pytest.raises(MissingFieldError):
        validate_structure(payload)
    assert validate_structure(payload, require_initiation=False)


def test_duplicate_country_code_is_missing_field(make_items, make_payload):
    items = make_items()
    items.insert(7, TLVItem("58", "ID"))
    with pytest.raises(MissingFieldError):
        validate_structure(make_payload(items))


def test_missing_checksum_record(make_items):
    with pytest.raises(MissingFieldError):
        validate_structure(build_tlv(make_items()))


def test_checksum_must_be_last(make_items):
    payload = build_tlv(make_items() + [TLVItem("63", "ABCD"), TLVItem("64", "X")])
    with pytest.raises(FormatError):
        validate_structure(payload)


def test_checksum_must_be_hex(make_items):
    payload = build_tlv(make_items() + [TLVItem("63", "WXYZ")])
    with pytest.raises(FormatError):
        validate_structure(payload)


def test_payload_format_indicator_must_lead(make_items, make_payload):
    items = make_items()
    items[0], items[1] = items[1], items[0]
    with pytest.raises(FormatError):
        validate_structure(make_payload(items))


def test_truncated_payload_is_format_error(static_payload):
    with pytest.raises(FormatError):
        validate_structure(static_payload[:-6])


def test_strict_mode_rejects_foreign_country_code(make_items, make_payload):
    payload = make_payload([TLVItem("58", "MY") if item.tag == "58" else item for item in make_items()])

    assert not is_valid(payload)
    assert not is_valid(payload, strict=True)
    with pytest.raises(MissingFieldError) as excinfo:
        validate_structure(payload)
    assert "MY" in excinfo.value.message
