from __future__ import annotations

import base64
from io import BytesIO
from urllib.parse import quote

import qrcode
from qrcode.constants import ERROR_CORRECT_M

PREVIEW_VERIFY_URL = "https://example.com/verify"


def verification_url(base_url: str, team_id: str) -> str:
    """Public link encoded in a certificate's verification code."""

    base = (base_url or "").rstrip("/")
    return f"{base}/#/verify?id={quote(str(team_id or ''), safe='')}"


def qr_png_bytes(payload: str) -> bytes:
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=10, border=1)
    qr.add_data(payload)
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white")
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def qr_data_url(payload: str) -> str:
    encoded = base64.b64encode(qr_png_bytes(payload)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
