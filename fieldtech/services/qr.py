"""QR code rendering for the customer review link."""

from __future__ import annotations

import base64
import io

import qrcode
from PIL import Image

QR_SIZE_PX = 256


def qr_data_url(url: str, size: int = QR_SIZE_PX) -> str:
    """Render `url` as a PNG QR code and return it as a data URL."""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=1,
    )
    qr.add_data(url)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white").get_image()
    img = img.convert("RGB").resize((size, size), Image.Resampling.NEAREST)

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    encoded = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
