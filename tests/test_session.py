"""Tests for the capture session and PNG export."""

import cv2
import numpy as np
import pytest
from pydantic import ValidationError

from camsnap.core import (
    AspectRatio, CaptureError, CropRect, ExportError, FacingMode, FilterKind, Frame,
    InvalidRatio, UnknownFilter,
)
from camsnap.export import encode_png, export_capture, export_filename, save_png
from camsnap.pipeline import apply_filter
from camsnap.session import CaptureSession, CaptureSettings
from camsnap.sources import FrameSource


class MemorySource(FrameSource):
    """Frame source that serves a fixed frame from memory."""

    def __init__(self, frame=None):
        self._frame = frame
        self._open = False
        self.facing_changes = []

    def open(self):
        self._open = True

    def close(self):
        self._open = False

    def read(self):
        if not self._open or self._frame is None:
            return None
        return self._frame.copy()

    def set_facing_mode(self, facing_mode):
        self.facing_changes.append(facing_mode)

    @property
    def resolution(self):
        return self._frame.size if self._frame else (0, 0)

    @property
    def is_live(self):
        return True

    @property
    def is_open(self):
        return self._open


class TestCaptureSettings:
    def test_defaults(self):
        settings = CaptureSettings()
        assert settings.aspect_ratio == AspectRatio(4, 5)
        assert settings.filter_kind is FilterKind.NONE
        assert settings.facing_mode is FacingMode.USER
        assert settings.mirror is False

    def test_mirror_independent_of_camera(self):
        assert CaptureSettings(facing_mode="environment").mirror is False
        assert CaptureSettings(facing_mode="environment", mirror=True).mirror is True

    def test_identifiers_normalized(self):
        settings = CaptureSettings(ratio="1:1", filter=" custom-js ")
        assert settings.ratio == "1-1"
        assert settings.filter == "custom-js"

    def test_invalid_identifiers(self):
        with pytest.raises(ValidationError):
            CaptureSettings(ratio="0-5")
        with pytest.raises(ValidationError):
            CaptureSettings(filter="blur")


class TestCaptureSession:
    def test_capture_crops_and_filters(self, frame_factory):
        source_frame = frame_factory(40, 20, seed=7)
        session = CaptureSession(
            MemorySource(source_frame),
            CaptureSettings(ratio="1-1", filter="custom-js", facing_mode="environment"),
        )
        result = session.capture()

        assert result.crop == CropRect(x=10, y=0, width=20, height=20)
        assert result.source_size == (40, 20)
        expected = 255 - source_frame.as_array()[:, 10:30, :3]
        assert np.array_equal(result.frame.as_array()[..., :3], expected)
        assert np.array_equal(
            result.frame.as_array()[..., 3], source_frame.as_array()[:, 10:30, 3]
        )

    def test_front_camera_capture_not_mirrored(self, frame_factory):
        source_frame = frame_factory(30, 30, seed=8)
        session = CaptureSession(MemorySource(source_frame), CaptureSettings(ratio="1-1"))
        result = session.capture()
        assert result.frame.tobytes() == source_frame.tobytes()

    def test_mirror_opt_in(self, frame_factory):
        source_frame = frame_factory(30, 30, seed=8)
        session = CaptureSession(
            MemorySource(source_frame), CaptureSettings(ratio="1-1", mirror=True)
        )
        result = session.capture()
        assert np.array_equal(result.frame.as_array(), source_frame.as_array()[:, ::-1])

    def test_matches_pipeline(self, frame_factory):
        source_frame = frame_factory(64, 36, seed=9)
        session = CaptureSession(MemorySource(source_frame))
        session.set_ratio("9-16")
        session.set_filter(FilterKind.SEPIA)
        result = session.capture()

        rows, cols = result.crop.slices()
        region = Frame.from_array(source_frame.as_array()[rows, cols].copy())
        expected = apply_filter(region, FilterKind.SEPIA)
        assert result.frame.tobytes() == expected.tobytes()
        assert result.settings.filter == "sepia"

    def test_result_settings_are_snapshot(self, small_frame):
        session = CaptureSession(MemorySource(small_frame))
        result = session.capture()
        session.set_filter("vintage")
        assert result.settings.filter == "none"

    def test_opens_source_on_capture(self, small_frame):
        source = MemorySource(small_frame)
        CaptureSession(source).capture()
        assert source.is_open

    def test_no_frame(self):
        with CaptureSession(MemorySource(None)) as session:
            with pytest.raises(CaptureError):
                session.capture()

    def test_set_invalid_selection(self, small_frame):
        session = CaptureSession(MemorySource(small_frame))
        with pytest.raises(InvalidRatio):
            session.set_ratio((3, 0))
        with pytest.raises(UnknownFilter):
            session.set_filter("blur")
        assert session.settings.ratio == "4-5"
        assert session.settings.filter == "none"

    def test_flip_camera(self, small_frame):
        source = MemorySource(small_frame)
        session = CaptureSession(source)
        assert session.flip_camera() is FacingMode.ENVIRONMENT
        assert session.settings.mirror is False
        assert session.flip_camera() is FacingMode.USER
        assert source.facing_changes == [FacingMode.ENVIRONMENT, FacingMode.USER]

    def test_settings_not_shared(self, small_frame):
        settings = CaptureSettings()
        session = CaptureSession(MemorySource(small_frame), settings)
        session.set_filter("sepia")
        assert settings.filter == "none"


class TestExport:
    def test_filename(self):
        assert export_filename("sepia") == "photo-filtered-sepia.png"
        assert export_filename(FilterKind.INVERT) == "photo-filtered-custom-js.png"
        assert export_filename("none", "snap_{filter}.png") == "snap_none.png"

    def test_png_is_lossless(self, small_frame, tmp_path):
        path = save_png(small_frame, tmp_path / "nested" / "out.png")
        assert path.exists()
        decoded = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
        assert Frame.from_bgr(decoded).tobytes() == small_frame.tobytes()

    def test_encode_png_signature(self, small_frame):
        assert encode_png(small_frame).startswith(b"\x89PNG")

    def test_export_capture(self, small_frame, tmp_path):
        path = export_capture(small_frame, "grayscale", tmp_path)
        assert path == tmp_path / "photo-filtered-grayscale.png"
        assert path.exists()

    def test_write_failure(self, small_frame, tmp_path):
        target = tmp_path / "taken"
        target.mkdir()
        with pytest.raises(ExportError):
            save_png(small_frame, target)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
