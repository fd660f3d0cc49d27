"""Webcam frame source using OpenCV VideoCapture."""

import logging
from typing import Dict, Optional

import cv2

from camsnap.core import CaptureError, FacingMode, Frame
from camsnap.sources.base import FrameSource

logger = logging.getLogger(__name__)


class WebcamSource(FrameSource):
    """Live frame source from a webcam / USB camera.

    Args:
        device: Device index (default ``0``) or a V4L2 device path
            such as ``"/dev/video0"``.  Used when ``devices`` has no entry
            for the current facing mode.
        width: Requested frame width.  The camera may pick another size.
        height: Requested frame height.
        facing_mode: Which camera to start with.
        devices: Optional mapping of facing mode to device, used by
            :meth:`set_facing_mode` on machines with front and rear cameras.
    """

    def __init__(
        self,
        device: int | str = 0,
        width: Optional[int] = 1920,
        height: Optional[int] = 1080,
        facing_mode: FacingMode = FacingMode.USER,
        devices: Optional[Dict[FacingMode, int | str]] = None,
    ):
        self._default_device = device
        self._req_width = width
        self._req_height = height
        self._facing_mode = facing_mode
        self._devices = dict(devices or {})

        self._cap: Optional[cv2.VideoCapture] = None

    @property
    def device(self) -> int | str:
        return self._devices.get(self._facing_mode, self._default_device)

    @property
    def facing_mode(self) -> FacingMode:
        return self._facing_mode

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        if self._cap is not None:
            return
        self._cap = cv2.VideoCapture(self.device)
        if not self._cap.isOpened():
            self._cap = None
            raise CaptureError(f"Could not open webcam device: {self.device}")

        if self._req_width is not None:
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._req_width)
        if self._req_height is not None:
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._req_height)

        actual_w, actual_h = self.resolution
        logger.info(
            "WebcamSource opened: device=%s facing=%s  %dx%d",
            self.device, self._facing_mode.value, actual_w, actual_h,
        )

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("WebcamSource closed (device=%s)", self.device)

    def read(self) -> Optional[Frame]:
        if self._cap is None:
            return None
        ret, image = self._cap.read()
        if not ret or image is None:
            logger.warning("WebcamSource read failed (device=%s)", self.device)
            return None
        return Frame.from_bgr(image)

    def set_facing_mode(self, facing_mode: FacingMode) -> None:
        """Stop the current stream and restart it on the other camera."""
        if facing_mode is self._facing_mode:
            return
        was_open = self.is_open
        self.close()
        self._facing_mode = facing_mode
        if was_open:
            self.open()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def resolution(self) -> tuple[int, int]:
        if self._cap is not None:
            w = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
            h = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
            return (w, h)
        return (self._req_width or 0, self._req_height or 0)

    @property
    def is_live(self) -> bool:
        return True

    @property
    def is_open(self) -> bool:
        return self._cap is not None and self._cap.isOpened()
