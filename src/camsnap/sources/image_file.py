"""Still image frame source."""

import logging
from pathlib import Path
from typing import Optional

import cv2
import numpy as np

from camsnap.core import CaptureError, Frame
from camsnap.sources.base import FrameSource

logger = logging.getLogger(__name__)


class ImageFileSource(FrameSource):
    """One-shot frame source backed by an image file on disk.

    The image is decoded on :meth:`open` and returned by every
    :meth:`read` call, so a session can capture from it repeatedly.
    Iterating yields it once.

    Args:
        path: Path to any image format OpenCV can decode (png, jpg, ...).
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._frame: Optional[Frame] = None
        self._iterated = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        if self._frame is not None:
            return
        if not self._path.exists():
            raise FileNotFoundError(f"Image file not found: {self._path}")

        image = cv2.imread(str(self._path), cv2.IMREAD_UNCHANGED)
        if image is None:
            raise CaptureError(f"Could not decode image: {self._path}")
        if image.dtype == np.uint16:
            # 16-bit PNG/TIFF: keep the high byte
            image = (image >> 8).astype(np.uint8)

        self._frame = Frame.from_bgr(image)
        self._iterated = False
        logger.info(
            "ImageFileSource opened: %s  %dx%d",
            self._path, self._frame.width, self._frame.height,
        )

    def close(self) -> None:
        if self._frame is not None:
            self._frame = None
            logger.info("ImageFileSource closed: %s", self._path)

    def read(self) -> Optional[Frame]:
        if self._frame is None:
            return None
        return self._frame.copy()

    def __next__(self) -> Frame:
        if self._iterated or self._frame is None:
            raise StopIteration
        self._iterated = True
        return self._frame.copy()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def path(self) -> Path:
        return self._path

    @property
    def resolution(self) -> tuple[int, int]:
        if self._frame is not None:
            return self._frame.size
        return (0, 0)

    @property
    def is_live(self) -> bool:
        return False

    @property
    def is_open(self) -> bool:
        return self._frame is not None
