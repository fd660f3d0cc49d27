"""Capture session: holds the user's choices and runs one capture.

The ratio, filter and camera selection are explicit state on a
:class:`CaptureSettings` value owned by the session; the pipeline
functions only ever see the values passed to them.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from pydantic import BaseModel, field_validator

from camsnap.core import (
    AspectRatio,
    CaptureError,
    CropRect,
    FacingMode,
    FilterKind,
    Frame,
    InvalidRatio,
    RatioLike,
    UnknownFilter,
)
from camsnap.pipeline import apply_filter, extract_region, plan_crop
from camsnap.sources import FrameSource


logger = logging.getLogger(__name__)


class CaptureSettings(BaseModel):
    """User selections for the next capture."""
    ratio: str = "4-5"
    filter: str = "none"
    facing_mode: FacingMode = FacingMode.USER
    # Capture is stored as the camera delivers it; only the live preview
    # is shown mirrored.
    mirror: bool = False

    model_config = {"validate_assignment": True}

    @field_validator("ratio", mode="before")
    @classmethod
    def validate_ratio(cls, v: Any) -> str:
        try:
            return AspectRatio.coerce(v).identifier
        except InvalidRatio as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("filter", mode="before")
    @classmethod
    def validate_filter(cls, v: Any) -> str:
        try:
            return FilterKind.parse(v).identifier
        except UnknownFilter as exc:
            raise ValueError(str(exc)) from exc

    @property
    def aspect_ratio(self) -> AspectRatio:
        return AspectRatio.parse(self.ratio)

    @property
    def filter_kind(self) -> FilterKind:
        return FilterKind.parse(self.filter)


@dataclass
class CaptureResult:
    """A finished capture, ready for export."""
    frame: Frame
    crop: CropRect
    settings: CaptureSettings
    source_size: Tuple[int, int]


class CaptureSession:
    """Drives captures from a :class:`FrameSource`.

    Args:
        source: Where frames come from.  Opened on first capture if needed.
        settings: Initial selections (defaults: 4:5, no filter, front camera).
    """

    def __init__(self, source: FrameSource, settings: Optional[CaptureSettings] = None):
        self.source = source
        self.settings = settings.model_copy() if settings else CaptureSettings()

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------

    def set_ratio(self, ratio: RatioLike) -> AspectRatio:
        """Select the crop ratio.  Raises :class:`InvalidRatio`."""
        aspect = AspectRatio.coerce(ratio)
        self.settings.ratio = aspect.identifier
        logger.info("Aspect ratio set to %s", aspect)
        return aspect

    def set_filter(self, filter: "FilterKind | str") -> FilterKind:
        """Select the color filter.  Raises :class:`UnknownFilter`."""
        kind = FilterKind.parse(filter)
        self.settings.filter = kind.identifier
        logger.info("Filter set to %s", kind.identifier)
        return kind

    def flip_camera(self) -> FacingMode:
        """Switch between the front and rear camera."""
        new_mode = self.settings.facing_mode.flipped()
        self.source.set_facing_mode(new_mode)
        self.settings.facing_mode = new_mode
        logger.info("Camera flipped to %s", new_mode.value)
        return new_mode

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def capture(self) -> CaptureResult:
        """Grab a frame, crop it to the ratio and stamp the filter.

        Raises:
            CaptureError: If the source produces no frame.
            InvalidFrame: If the source frame buffer is malformed.
        """
        if not self.source.is_open:
            self.source.open()

        frame = self.source.read()
        if frame is None:
            raise CaptureError("Frame source returned no frame")

        settings = self.settings.model_copy()
        rect = plan_crop(frame.width, frame.height, settings.aspect_ratio)
        region = extract_region(frame, rect, mirror=settings.mirror)
        photo = apply_filter(region, settings.filter_kind)

        logger.info(
            "Captured %dx%d -> %dx%d (ratio=%s filter=%s mirror=%s)",
            frame.width, frame.height, photo.width, photo.height,
            settings.aspect_ratio, settings.filter, settings.mirror,
        )
        return CaptureResult(
            frame=photo,
            crop=rect,
            settings=settings,
            source_size=frame.size,
        )

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "CaptureSession":
        self.source.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.source.close()
