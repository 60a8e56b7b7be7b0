"""
Still-image barcode decoding for ticket photos sent by operators.
"""

import io
import logging
from typing import List

from PIL import Image, ImageOps, UnidentifiedImageError

from core.domain.errors import CameraError, CameraErrorKind
from infrastructure.camera.barcode_decoder import pyzbar

logger = logging.getLogger(__name__)


def decode_image(data: bytes) -> List[str]:
    """Every barcode payload found in the picture, in reading order"""
    if pyzbar is None:
        raise CameraError(CameraErrorKind.UNSUPPORTED, "zbar not available")

    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"[IMAGE_DECODER] Unreadable image: {e}")
        return []

    gray = ImageOps.grayscale(image)
    payloads = []
    for symbol in pyzbar.decode(gray):
        text = symbol.data.decode("utf-8", errors="replace").strip()
        if text and text not in payloads:
            payloads.append(text)
    return payloads
