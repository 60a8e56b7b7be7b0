"""
Camera barcode source - OpenCV capture + pyzbar decoding for the gate station.

Frames are read and decoded in worker threads; decoded text is exposed as an
async stream. stop() is the single cancellation point: it ends the stream and
releases the capture device at the OS level.
"""

import asyncio
import logging
import os
import re
import threading
from pathlib import Path
from typing import AsyncIterator, Callable, List, Optional, Sequence, Tuple

from core.domain.constants import CAMERA_RESOLUTION, REAR_CAMERA_HINTS, VIDEO4LINUX_ROOT
from core.domain.errors import CameraError, CameraErrorKind
from core.domain.models import CameraDevice
from core.interfaces.camera import IBarcodeSource

# Camera capability is optional: a station without OpenCV or the zbar shared
# library still runs in manual mode.
try:
    import cv2
except ImportError:
    cv2 = None

try:
    from pyzbar import pyzbar
except ImportError:
    pyzbar = None

CAMERA_DEPS_AVAILABLE = cv2 is not None and pyzbar is not None

logger = logging.getLogger(__name__)

# Consecutive failed reads before the device is considered gone
MAX_FAILED_READS = 50


def list_video_devices(root: str = VIDEO4LINUX_ROOT) -> List[CameraDevice]:
    """Enumerate V4L2 capture devices with their driver-reported labels"""
    base = Path(root)
    if not base.is_dir():
        return []

    devices = []
    for entry in base.iterdir():
        match = re.fullmatch(r"video(\d+)", entry.name)
        if not match:
            continue
        name_file = entry / "name"
        label = name_file.read_text(encoding="utf-8").strip() if name_file.exists() else ""
        devices.append(CameraDevice(index=int(match.group(1)), label=label))
    return sorted(devices, key=lambda d: d.index)


def select_device(
    devices: Sequence[CameraDevice],
    preferred_index: Optional[int] = None,
) -> Optional[CameraDevice]:
    """Pick the configured device, else a rear-facing one, else the first"""
    if preferred_index is not None:
        for device in devices:
            if device.index == preferred_index:
                return device
        # Configured index may exist without a sysfs entry (e.g. non-Linux)
        return CameraDevice(index=preferred_index, label="")

    if not devices:
        return None

    for device in devices:
        label = device.label.lower()
        if any(hint in label for hint in REAR_CAMERA_HINTS):
            return device
    return devices[0]


def classify_open_failure(index: int, dev_root: str = "/dev") -> CameraError:
    """Map a device that refused to open onto an operator-facing error"""
    path = os.path.join(dev_root, f"video{index}")
    if not os.path.exists(path):
        return CameraError(CameraErrorKind.NOT_FOUND, f"{path} does not exist")
    if not os.access(path, os.R_OK | os.W_OK):
        return CameraError(CameraErrorKind.PERMISSION_DENIED, f"no access to {path}")
    return CameraError(CameraErrorKind.BUSY, f"cannot open {path}")


def open_capture(index: int, resolution: Tuple[int, int] = CAMERA_RESOLUTION):
    capture = cv2.VideoCapture(index)
    capture.set(cv2.CAP_PROP_FRAME_WIDTH, resolution[0])
    capture.set(cv2.CAP_PROP_FRAME_HEIGHT, resolution[1])
    return capture


class FrameDecoder:
    """pyzbar over grayscale frames; an empty list means nothing in this frame"""

    def decode(self, frame) -> List[str]:
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
        return [
            symbol.data.decode("utf-8", errors="replace").strip()
            for symbol in pyzbar.decode(gray)
        ]


class CameraBarcodeSource(IBarcodeSource):
    """Continuous decoder bound to one local camera"""

    def __init__(
        self,
        device_index: Optional[int] = None,
        frame_interval: float = 0.05,
        resolution: Tuple[int, int] = CAMERA_RESOLUTION,
        capture_factory: Optional[Callable] = None,
        decoder_factory: Optional[Callable] = None,
        device_lister: Callable[[], List[CameraDevice]] = list_video_devices,
    ):
        self.device_index = device_index
        self.frame_interval = frame_interval
        self.resolution = resolution
        self._supported = CAMERA_DEPS_AVAILABLE if capture_factory is None else True
        self._capture_factory = capture_factory or open_capture
        self._decoder_factory = decoder_factory or FrameDecoder
        self._device_lister = device_lister

        self._decoder = self._decoder_factory()
        self._capture = None
        self._lock = threading.Lock()
        self._stopped = True
        self.device: Optional[CameraDevice] = None

    @property
    def supported(self) -> bool:
        return self._supported

    @property
    def active_tracks(self) -> int:
        return 0 if self._capture is None else 1

    async def start(self) -> AsyncIterator[str]:
        if not self.supported:
            raise CameraError(CameraErrorKind.UNSUPPORTED, "OpenCV or zbar not available")
        if self._capture is not None:
            raise CameraError(CameraErrorKind.BUSY, "camera already in use")

        device = select_device(self._device_lister(), self.device_index)
        if device is None:
            raise CameraError(CameraErrorKind.NOT_FOUND, "no video devices")

        loop = asyncio.get_running_loop()
        capture = await loop.run_in_executor(None, self._capture_factory, device.index, self.resolution)
        if capture is None or not capture.isOpened():
            if capture is not None:
                capture.release()
            raise classify_open_failure(device.index)

        with self._lock:
            self._capture = capture
        self._stopped = False
        self.device = device
        logger.info(f"[CAMERA] Started on device {device.index} ({device.label or 'no label'})")
        return self._decode_loop()

    async def _decode_loop(self) -> AsyncIterator[str]:
        loop = asyncio.get_running_loop()
        failed_reads = 0
        try:
            while not self._stopped:
                frame = await loop.run_in_executor(None, self._read_frame)
                if self._stopped:
                    break
                if frame is None:
                    failed_reads += 1
                    if failed_reads >= MAX_FAILED_READS:
                        raise CameraError(CameraErrorKind.UNKNOWN, "camera stopped delivering frames")
                    await asyncio.sleep(self.frame_interval)
                    continue
                failed_reads = 0

                try:
                    payloads = await loop.run_in_executor(None, self._decoder.decode, frame)
                except Exception as e:
                    logger.debug(f"[CAMERA] Frame decode error (non-critical): {e}")
                    payloads = []

                for payload in payloads:
                    if self._stopped:
                        break
                    if payload:
                        yield payload

                await asyncio.sleep(self.frame_interval)
        finally:
            await self.stop()

    def _read_frame(self):
        with self._lock:
            if self._capture is None:
                return None
            ok, frame = self._capture.read()
        return frame if ok else None

    def _release(self) -> bool:
        with self._lock:
            capture, self._capture = self._capture, None
        if capture is None:
            return False
        capture.release()
        return True

    async def stop(self):
        self._stopped = True
        loop = asyncio.get_running_loop()
        released = await loop.run_in_executor(None, self._release)
        if released:
            # Fresh decoder so nothing holds on to the dead stream
            self._decoder = self._decoder_factory()
            logger.info("[CAMERA] Stopped, device released")
