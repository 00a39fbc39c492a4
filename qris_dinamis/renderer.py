"""QR image renderer for dynamic QRIS payloads."""
from __future__ import annotations

import base64
import io
from typing import Any

import qrcode
from PIL import Image, ImageDraw, ImageFont

from .errors import FormatError
from .merchant import summarize

LINE_HEIGHT = 20
LABEL_PADDING = 10


def format_rupiah(amount: int) -> str:
    return "Rp" + f"{amount:,}".replace(",", ".")


def payload_caption(payload: str) -> str | None:
    """Merchant name and bound amount, e.g. "WARUNG BU SRI - Rp10.000"."""

    try:
        summary = summarize(payload)
    except FormatError:
        return None
    parts = [summary.merchant_name] if summary.merchant_name else []
    if summary.amount is not None:
        parts.append(format_rupiah(summary.amount))
    return " - ".join(parts) or None


def generate_qr_image(data: str, title: str = "QRIS", caption: str | None = None) -> Image.Image:
    """Generate QR image with a framed label of one or two lines underneath."""

    qr = qrcode.QRCode(version=None, error_correction=qrcode.constants.ERROR_CORRECT_M, box_size=10, border=4)
    qr.add_data(data)
    qr.make(fit=True)

    qr_img = qr.make_image(fill_color="black", back_color="white").convert("RGBA")
    width, height = qr_img.size

    lines = [title.upper()]
    if caption:
        lines.append(caption)
    margin = 40
    label_top = margin + height
    label_height = LABEL_PADDING * 2 + LINE_HEIGHT * len(lines)
    canvas_width = width + margin * 2
    canvas = Image.new("RGBA", (canvas_width, label_top + label_height + margin), color="#F5F7FA")
    canvas.paste(qr_img, (margin, margin))

    draw = ImageDraw.Draw(canvas)
    font = ImageFont.load_default()
    draw.rectangle(
        [(margin // 2, label_top), (canvas_width - margin // 2, label_top + label_height)],
        fill="#FFFFFF",
    )
    for row, text in enumerate(lines):
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        text_x = (canvas_width - (right - left)) // 2
        text_y = label_top + LABEL_PADDING + row * LINE_HEIGHT + (LINE_HEIGHT - (bottom - top)) // 2
        draw.text((text_x, text_y), text, fill="#1F2937" if row == 0 else "#4B5563", font=font)

    return canvas


def qr_image_to_png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def render_qr_payload(payload: str, title: str = "QRIS") -> dict[str, Any]:
    """Render payload into PNG bytes and base64, captioned with its merchant and amount."""

    caption = payload_caption(payload)
    png_bytes = qr_image_to_png_bytes(generate_qr_image(payload, title=title, caption=caption))
    return {
        "png_bytes": png_bytes,
        "png_base64": base64.b64encode(png_bytes).decode("ascii"),
        "caption": caption,
    }
