"""
QR code generator for ticket orders.
Generates labelled QR PNGs that the gate camera can read back.
"""

import io
import qrcode
from PIL import Image, ImageDraw, ImageFont


FONT_CANDIDATES = [
    "/System/Library/Fonts/Helvetica.ttc",           # macOS
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",  # Debian/Ubuntu
    "/usr/share/fonts/TTF/DejaVuSans.ttf",           # Arch
]


def _load_font(size: int):
    for font_path in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError:
            continue
    return ImageFont.load_default()


def render_ticket_qr(ticket_order_id: str, label: str = None) -> Image.Image:
    """QR image of the raw ticket order id with a caption underneath"""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=12,
        border=2,
    )
    qr.add_data(ticket_order_id)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white").convert("RGB")

    label_text = label or ticket_order_id
    width, height = img.size
    final = Image.new("RGB", (width, height + 60), "white")
    final.paste(img, (0, 0))

    draw = ImageDraw.Draw(final)
    font = _load_font(24)
    bbox = draw.textbbox((0, 0), label_text, font=font)
    text_w = bbox[2] - bbox[0]
    draw.text(((width - text_w) / 2, height + 15), label_text, fill="black", font=font)
    return final


def generate_ticket_qr(ticket_order_id: str, label: str = None) -> bytes:
    """PNG bytes of the ticket QR, ready to send as a photo"""
    buffer = io.BytesIO()
    render_ticket_qr(ticket_order_id, label).save(buffer, format="PNG")
    return buffer.getvalue()
