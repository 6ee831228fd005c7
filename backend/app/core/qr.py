"""
QR code rendering for guest links.

The image is returned as a PNG data URL so clients can drop it straight
into an ``<img src>`` or offer it for download without another request.
"""

import base64
import io

import qrcode

PNG_DATA_URL_PREFIX = "data:image/png;base64,"


def render_qr_png(data: str, box_size: int = 10, border: int = 4) -> bytes:
    """Encode ``data`` as a black-on-white QR code and return PNG bytes."""
    qr = qrcode.QRCode(version=1, box_size=box_size, border=border)
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def render_qr_data_url(data: str) -> str:
    encoded = base64.b64encode(render_qr_png(data)).decode("ascii")
    return f"{PNG_DATA_URL_PREFIX}{encoded}"
