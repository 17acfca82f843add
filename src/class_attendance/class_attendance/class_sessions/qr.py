from __future__ import annotations

import io
import secrets
from typing import IO, Optional

import qrcode
from PIL import Image, UnidentifiedImageError

from ..core.constants import QR_PAYLOAD_BYTES
from ..core.exceptions import ValidationError


def generate_payload() -> str:
    """Fresh opaque payload for a class session."""
    return secrets.token_urlsafe(QR_PAYLOAD_BYTES)


def render_png(payload: str) -> bytes:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def decode_image(stream: IO[bytes]) -> Optional[str]:
    """Return the text of the first QR symbol found in an image, if any.

    Raises ValidationError when the upload is not an image or the symbol is not UTF-8 text.
    """
    try:
        img = Image.open(stream).convert("RGB")
    except UnidentifiedImageError:
        raise ValidationError("La imagen no es válida")

    # pyzbar loads the native zbar library on import
    from pyzbar.pyzbar import decode as pyzbar_decode

    decoded = pyzbar_decode(img)
    if not decoded:
        return None
    try:
        return decoded[0].data.decode("utf-8")
    except UnicodeDecodeError:
        raise ValidationError("La imagen no es válida")
