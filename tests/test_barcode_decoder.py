"""Unit tests for camera discovery, the camera barcode source and photo decoding."""

import io
import os
from types import SimpleNamespace

import pytest
from PIL import Image

from core.domain.errors import CameraError, CameraErrorKind
from core.domain.models import CameraDevice
from infrastructure.camera import barcode_decoder, image_decoder
from infrastructure.camera.barcode_decoder import (
    CameraBarcodeSource,
    classify_open_failure,
    list_video_devices,
    select_device,
)


class FakeCapture:
    """cv2.VideoCapture stand-in; each frame is the list of payloads it contains."""

    def __init__(self, frames=None, opened: bool = True):
        self.frames = list(frames or [])
        self.opened = opened
        self.released = False

    def isOpened(self) -> bool:
        return self.opened

    def read(self):
        if self.frames:
            return True, self.frames.pop(0)
        return False, None

    def release(self):
        self.released = True


class PassThroughDecoder:
    def decode(self, frame):
        return frame


def make_source(capture: FakeCapture, devices=None, **kwargs) -> CameraBarcodeSource:
    if devices is None:
        devices = [CameraDevice(index=0, label="Integrated Camera")]
    return CameraBarcodeSource(
        frame_interval=0,
        capture_factory=lambda index, resolution: capture,
        decoder_factory=PassThroughDecoder,
        device_lister=lambda: devices,
        **kwargs,
    )


class TestSelectDevice:
    """Tests for camera device selection."""

    def test_prefers_rear_camera(self) -> None:
        devices = [
            CameraDevice(index=0, label="Front Camera"),
            CameraDevice(index=2, label="Back Camera"),
        ]
        assert select_device(devices).index == 2

    def test_environment_label_counts_as_rear(self) -> None:
        devices = [
            CameraDevice(index=0, label="user facing"),
            CameraDevice(index=1, label="Camera (Environment)"),
        ]
        assert select_device(devices).index == 1

    def test_falls_back_to_first_device(self) -> None:
        devices = [CameraDevice(index=3, label="USB Cam"), CameraDevice(index=4, label="Other")]
        assert select_device(devices).index == 3

    def test_configured_index_wins(self) -> None:
        devices = [CameraDevice(index=0, label="Rear"), CameraDevice(index=1, label="Front")]
        assert select_device(devices, preferred_index=1).label == "Front"

    def test_configured_index_without_listing(self) -> None:
        assert select_device([], preferred_index=5).index == 5

    def test_no_devices(self) -> None:
        assert select_device([]) is None


class TestListVideoDevices:
    """Tests for sysfs device enumeration."""

    def test_reads_labels_sorted_by_index(self, tmp_path) -> None:
        for name, label in [("video2", "USB Rear Cam\n"), ("video0", "Integrated Camera\n")]:
            (tmp_path / name).mkdir()
            (tmp_path / name / "name").write_text(label, encoding="utf-8")
        (tmp_path / "video10").mkdir()
        (tmp_path / "vbi0").mkdir()

        devices = list_video_devices(str(tmp_path))

        assert [d.index for d in devices] == [0, 2, 10]
        assert devices[1].label == "USB Rear Cam"
        assert devices[2].label == ""

    def test_missing_root(self, tmp_path) -> None:
        assert list_video_devices(str(tmp_path / "nope")) == []


class TestClassifyOpenFailure:
    """Tests for mapping open failures onto error kinds."""

    def test_missing_node_is_not_found(self, tmp_path) -> None:
        error = classify_open_failure(7, dev_root=str(tmp_path))
        assert error.kind == CameraErrorKind.NOT_FOUND

    def test_accessible_node_is_busy(self, tmp_path) -> None:
        (tmp_path / "video0").touch()
        error = classify_open_failure(0, dev_root=str(tmp_path))
        assert error.kind == CameraErrorKind.BUSY

    @pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores file modes")
    def test_unreadable_node_is_permission_denied(self, tmp_path) -> None:
        node = tmp_path / "video0"
        node.touch()
        node.chmod(0)
        error = classify_open_failure(0, dev_root=str(tmp_path))
        assert error.kind == CameraErrorKind.PERMISSION_DENIED


class TestCameraBarcodeSource:
    """Tests for the continuous camera decoder."""

    async def test_yields_decoded_payloads(self) -> None:
        capture = FakeCapture(frames=[["TKT-001"], [], ["", "TKT-002"]])
        source = make_source(capture)

        stream = await source.start()
        assert source.active_tracks == 1

        payloads = []
        async for payload in stream:
            payloads.append(payload)
            if len(payloads) == 2:
                break
        await source.stop()
        await stream.aclose()

        assert payloads == ["TKT-001", "TKT-002"]
        assert capture.released is True
        assert source.active_tracks == 0

    async def test_selects_rear_device(self) -> None:
        source = make_source(
            FakeCapture(),
            devices=[CameraDevice(index=0, label="Front"), CameraDevice(index=2, label="Rear")],
        )
        stream = await source.start()
        assert source.device.index == 2
        await source.stop()
        await stream.aclose()

    async def test_second_start_is_busy(self) -> None:
        source = make_source(FakeCapture())
        stream = await source.start()

        with pytest.raises(CameraError) as exc_info:
            await source.start()
        assert exc_info.value.kind == CameraErrorKind.BUSY

        await source.stop()
        await stream.aclose()

    async def test_no_devices_is_not_found(self) -> None:
        source = make_source(FakeCapture(), devices=[])
        with pytest.raises(CameraError) as exc_info:
            await source.start()
        assert exc_info.value.kind == CameraErrorKind.NOT_FOUND

    async def test_device_that_will_not_open(self) -> None:
        capture = FakeCapture(opened=False)
        source = make_source(capture, devices=[], device_index=97)

        with pytest.raises(CameraError) as exc_info:
            await source.start()

        assert exc_info.value.kind == CameraErrorKind.NOT_FOUND
        assert capture.released is True
        assert source.active_tracks == 0

    async def test_dead_stream_raises_and_releases(self) -> None:
        capture = FakeCapture(frames=[])
        source = make_source(capture)
        stream = await source.start()

        with pytest.raises(CameraError) as exc_info:
            async for _ in stream:
                pass

        assert exc_info.value.kind == CameraErrorKind.UNKNOWN
        assert capture.released is True

    async def test_unsupported_without_camera_libraries(self, monkeypatch) -> None:
        monkeypatch.setattr(barcode_decoder, "CAMERA_DEPS_AVAILABLE", False)
        source = CameraBarcodeSource()

        assert source.supported is False
        with pytest.raises(CameraError) as exc_info:
            await source.start()
        assert exc_info.value.kind == CameraErrorKind.UNSUPPORTED

    async def test_stop_without_start(self) -> None:
        source = make_source(FakeCapture())
        await source.stop()
        assert source.active_tracks == 0


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (16, 16), "white").save(buffer, format="PNG")
    return buffer.getvalue()


class TestDecodeImage:
    """Tests for still-photo decoding."""

    def test_payloads_deduplicated_in_order(self, monkeypatch) -> None:
        symbols = [SimpleNamespace(data=d) for d in (b"TKT-001", b" TKT-002 ", b"TKT-001", b"")]
        monkeypatch.setattr(image_decoder, "pyzbar", SimpleNamespace(decode=lambda image: symbols))

        assert image_decoder.decode_image(_png_bytes()) == ["TKT-001", "TKT-002"]

    def test_unreadable_image(self, monkeypatch) -> None:
        monkeypatch.setattr(image_decoder, "pyzbar", SimpleNamespace(decode=lambda image: []))
        assert image_decoder.decode_image(b"not an image") == []

    def test_without_zbar(self, monkeypatch) -> None:
        monkeypatch.setattr(image_decoder, "pyzbar", None)
        with pytest.raises(CameraError) as exc_info:
            image_decoder.decode_image(_png_bytes())
        assert exc_info.value.kind == CameraErrorKind.UNSUPPORTED
