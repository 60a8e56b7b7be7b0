"""
Barcode source interface - abstraction over whatever turns camera frames into text.
Capability is polymorphic: a source may be camera-capable or not.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator


class IBarcodeSource(ABC):
    """Interface for a continuous barcode decoder bound to one camera"""

    @property
    @abstractmethod
    def supported(self) -> bool:
        """False when this platform cannot capture video at all"""
        pass

    @property
    @abstractmethod
    def active_tracks(self) -> int:
        """Number of open capture streams (0 once released)"""
        pass

    @abstractmethod
    async def start(self) -> AsyncIterator[str]:
        """
        Open the device and return the stream of decoded payloads.
        Raises CameraError when the device cannot be acquired.
        The stream ends once stop() is called.
        """
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Stop decoding and release the device at the OS level"""
        pass
