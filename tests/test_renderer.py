import base64

from PIL import Image

from qris_dinamis.converter import convert
from qris_dinamis.renderer import format_rupiah, generate_qr_image, payload_caption, render_qr_payload


def test_render_returns_png_bytes_and_base64(static_payload):
    rendered = render_qr_payload(convert(static_payload, 10000), title="warung")

    assert rendered["png_bytes"].startswith(b"\x89PNG")
    assert base64.b64decode(rendered["png_base64"]) == rendered["png_bytes"]
    assert rendered["caption"] == "WARUNG BU SRI - Rp10.000"


def test_caption_for_static_payload_has_no_amount(static_payload):
    assert payload_caption(static_payload) == "WARUNG BU SRI"


def test_caption_for_malformed_payload_is_omitted():
    assert payload_caption("0002") is None
    assert render_qr_payload("0002")["caption"] is None


def test_format_rupiah_uses_dot_grouping():
    assert format_rupiah(1500) == "Rp1.500"
    assert format_rupiah(1250000) == "Rp1.250.000"
    assert format_rupiah(7) == "Rp7"


def test_image_leaves_room_for_label(static_payload):
    image = generate_qr_image(static_payload)

    assert isinstance(image, Image.Image)
    assert image.height > image.width


def test_caption_adds_a_label_line(static_payload):
    plain = generate_qr_image(static_payload)
    captioned = generate_qr_image(static_payload, caption="WARUNG BU SRI - Rp10.000")

    assert captioned.width == plain.width
    assert captioned.height > plain.height
