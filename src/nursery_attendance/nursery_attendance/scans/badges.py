from __future__ import annotations

import io
from typing import BinaryIO

import qrcode
from PIL import Image

from ..core.exceptions import InvalidCodeFormat


def render_badge_png(payload: str, *, box_size: int = 10, border: int = 2) -> bytes:
    """Render a badge payload as a PNG QR code."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_badge_image(stream: BinaryIO) -> str:
    """Return the first QR payload found in an uploaded image."""
    try:
        img = Image.open(stream).convert("RGB")
    except (OSError, ValueError) as e:
        raise InvalidCodeFormat("Unreadable image") from e

    # pyzbar loads the native zbar library at import time
    from pyzbar.pyzbar import decode as pyzbar_decode

    decoded = pyzbar_decode(img)
    if not decoded:
        raise InvalidCodeFormat("No QR code found in image")
    return decoded[0].data.decode("utf-8").strip()
