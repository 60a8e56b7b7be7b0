from infrastructure.camera.barcode_decoder import (
    CameraBarcodeSource,
    CAMERA_DEPS_AVAILABLE,
    list_video_devices,
    select_device,
)
from infrastructure.camera.image_decoder import decode_image

__all__ = [
    "CameraBarcodeSource",
    "CAMERA_DEPS_AVAILABLE",
    "list_video_devices",
    "select_device",
    "decode_image",
]
