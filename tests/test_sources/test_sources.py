"""Tests for frame sources."""

import cv2
import numpy as np
import pytest

from camsnap.core import CaptureError, FacingMode, Frame
from camsnap.sources import FrameSource, ImageFileSource, WebcamSource
from camsnap.sources import webcam as webcam_module


class FakeCapture:
    """Stand-in for cv2.VideoCapture."""

    opened_devices = []

    def __init__(self, device, image=None, opens=True):
        self.device = device
        self._image = image
        self._opens = opens
        self.props = {}
        self.released = False
        FakeCapture.opened_devices.append(device)

    def isOpened(self):
        return self._opens and not self.released

    def set(self, prop, value):
        self.props[prop] = value
        return True

    def get(self, prop):
        return self.props.get(prop, 0)

    def read(self):
        if self._image is None:
            return False, None
        return True, self._image.copy()

    def release(self):
        self.released = True


@pytest.fixture
def fake_cv2(monkeypatch, bgr_image):
    FakeCapture.opened_devices = []

    def factory(device):
        return FakeCapture(device, image=bgr_image)

    monkeypatch.setattr(webcam_module.cv2, "VideoCapture", factory)
    return FakeCapture


class TestImageFileSource:
    def test_reads_rgba(self, tmp_path, bgr_image):
        path = tmp_path / "shot.png"
        assert cv2.imwrite(str(path), bgr_image)

        with ImageFileSource(path) as src:
            assert src.is_open
            assert not src.is_live
            assert src.resolution == (10, 8)
            frame = src.read()

        assert isinstance(frame, Frame)
        assert frame.as_array()[0, 3].tolist() == [195, 100, 60, 255]
        assert not src.is_open

    def test_read_returns_fresh_copies(self, tmp_path, bgr_image):
        path = tmp_path / "shot.png"
        cv2.imwrite(str(path), bgr_image)
        with ImageFileSource(path) as src:
            first = src.read()
            first.pixels[:] = 0
            assert src.read().pixels.any()

    def test_iterates_once(self, tmp_path, bgr_image):
        path = tmp_path / "shot.png"
        cv2.imwrite(str(path), bgr_image)
        with ImageFileSource(path) as src:
            assert len(list(src)) == 1

    def test_alpha_png(self, tmp_path):
        bgra = np.zeros((2, 3, 4), dtype=np.uint8)
        bgra[..., 3] = 128
        path = tmp_path / "alpha.png"
        cv2.imwrite(str(path), bgra)
        with ImageFileSource(path) as src:
            assert set(src.read().as_array()[..., 3].ravel().tolist()) == {128}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ImageFileSource(tmp_path / "nope.png").open()

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "junk.png"
        path.write_bytes(b"not an image")
        with pytest.raises(CaptureError):
            ImageFileSource(path).open()

    def test_read_before_open(self, tmp_path):
        assert ImageFileSource(tmp_path / "x.png").read() is None


class TestWebcamSource:
    def test_open_read_close(self, fake_cv2):
        src = WebcamSource(device=2, width=640, height=480)
        src.open()
        assert src.is_open and src.is_live
        assert src.resolution == (640, 480)
        frame = src.read()
        assert frame.size == (10, 8)
        assert frame.as_array()[0, 0].tolist() == [255, 100, 0, 255]
        src.close()
        assert not src.is_open
        assert src.read() is None

    def test_open_failure(self, monkeypatch):
        monkeypatch.setattr(
            webcam_module.cv2, "VideoCapture",
            lambda device: FakeCapture(device, opens=False),
        )
        with pytest.raises(CaptureError):
            WebcamSource(0).open()

    def test_failed_read_returns_none(self, monkeypatch):
        monkeypatch.setattr(
            webcam_module.cv2, "VideoCapture",
            lambda device: FakeCapture(device, image=None),
        )
        with WebcamSource(0) as src:
            assert src.read() is None

    def test_set_facing_mode_reopens_other_device(self, fake_cv2):
        src = WebcamSource(
            device=0,
            devices={FacingMode.USER: 0, FacingMode.ENVIRONMENT: 1},
        )
        with src:
            src.set_facing_mode(FacingMode.ENVIRONMENT)
            assert src.is_open
            assert src.facing_mode is FacingMode.ENVIRONMENT
        assert fake_cv2.opened_devices == [0, 1]

    def test_set_facing_mode_same_mode_noop(self, fake_cv2):
        with WebcamSource(0) as src:
            src.set_facing_mode(FacingMode.USER)
        assert fake_cv2.opened_devices == [0]

    def test_is_frame_source(self):
        assert issubclass(WebcamSource, FrameSource)
        assert issubclass(ImageFileSource, FrameSource)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
