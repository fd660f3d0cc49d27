"""Core data types for camsnap."""

from dataclasses import dataclass
from typing import ClassVar, Dict, Tuple, Union

import cv2
import numpy as np

from .errors import InvalidFrame, InvalidRatio


CHANNELS = 4  # R, G, B, A


# ============================================================================
# Raster Types
# ============================================================================

@dataclass
class Frame:
    """A single RGBA raster.

    Attributes:
        width: Frame width in pixels.
        height: Frame height in pixels.
        pixels: Flat uint8 buffer, row-major, 4 samples per pixel in
            R, G, B, A order.  Length must be ``width * height * 4``;
            this is checked by :meth:`validate` rather than on construction
            so callers can hand over raw buffers and get a typed error from
            the pipeline.
    """
    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        if isinstance(self.pixels, (bytes, bytearray, memoryview)):
            self.pixels = np.frombuffer(self.pixels, dtype=np.uint8)
        else:
            self.pixels = np.asarray(self.pixels, dtype=np.uint8)
        self.pixels = self.pixels.reshape(-1)

    @property
    def expected_length(self) -> int:
        return self.width * self.height * CHANNELS

    @property
    def size(self) -> Tuple[int, int]:
        """``(width, height)``."""
        return (self.width, self.height)

    def validate(self) -> None:
        """Raise :class:`InvalidFrame` unless the buffer matches the size."""
        if self.width <= 0 or self.height <= 0:
            raise InvalidFrame(
                f"Frame dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.pixels.size != self.expected_length:
            raise InvalidFrame(
                f"Pixel buffer has {self.pixels.size} samples, expected "
                f"{self.expected_length} for {self.width}x{self.height} RGBA"
            )

    def as_array(self) -> np.ndarray:
        """Return an ``(H, W, 4)`` view of the pixel buffer."""
        self.validate()
        return self.pixels.reshape(self.height, self.width, CHANNELS)

    def copy(self) -> "Frame":
        return Frame(width=self.width, height=self.height, pixels=self.pixels.copy())

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Frame":
        """Create a frame from an ``(H, W, 4)`` RGBA uint8 array."""
        array = np.asarray(array, dtype=np.uint8)
        if array.ndim != 3 or array.shape[2] != CHANNELS:
            raise InvalidFrame(f"Expected an (H, W, 4) array, got shape {array.shape}")
        h, w = array.shape[:2]
        return cls(width=w, height=h, pixels=np.ascontiguousarray(array).reshape(-1))

    @classmethod
    def from_bgr(cls, image: np.ndarray) -> "Frame":
        """Create a frame from an OpenCV image (gray, BGR or BGRA)."""
        if image.ndim == 2:
            rgba = cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
        elif image.shape[2] == 3:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
        elif image.shape[2] == 4:
            rgba = cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
        else:
            raise InvalidFrame(f"Unsupported image shape {image.shape}")
        return cls.from_array(rgba)

    def to_bgra(self) -> np.ndarray:
        """Return the frame as an OpenCV BGRA image."""
        return cv2.cvtColor(self.as_array(), cv2.COLOR_RGBA2BGRA)


# ============================================================================
# Geometry Types
# ============================================================================

@dataclass(frozen=True)
class AspectRatio:
    """Width:height ratio as a pair of positive integers."""
    numerator: int
    denominator: int

    PRESETS: ClassVar[Dict[str, "AspectRatio"]] = {}

    def __post_init__(self) -> None:
        if self.numerator <= 0 or self.denominator <= 0:
            raise InvalidRatio(
                f"Aspect ratio components must be positive, got "
                f"{self.numerator}:{self.denominator}"
            )

    @property
    def value(self) -> float:
        return self.numerator / self.denominator

    @property
    def identifier(self) -> str:
        """UI identifier, e.g. ``"4-5"``."""
        return f"{self.numerator}-{self.denominator}"

    def __str__(self) -> str:
        return f"{self.numerator}:{self.denominator}"

    @classmethod
    def parse(cls, text: str) -> "AspectRatio":
        """Parse an identifier such as ``"4-5"`` (``"4:5"`` also accepted)."""
        parts = text.strip().replace(":", "-").split("-")
        if len(parts) != 2:
            raise InvalidRatio(f"Malformed aspect ratio identifier: {text!r}")
        try:
            num, den = (int(p) for p in parts)
        except ValueError:
            raise InvalidRatio(f"Malformed aspect ratio identifier: {text!r}") from None
        return cls(num, den)

    @classmethod
    def coerce(cls, value: "RatioLike") -> "AspectRatio":
        """Accept an AspectRatio, a ``(num, den)`` pair or an identifier."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        try:
            num, den = value
        except (TypeError, ValueError):
            raise InvalidRatio(f"Cannot interpret {value!r} as an aspect ratio") from None
        return cls(int(num), int(den))


AspectRatio.PRESETS.update({
    "4-5": AspectRatio(4, 5),
    "1-1": AspectRatio(1, 1),
    "9-16": AspectRatio(9, 16),
})

RatioLike = Union[AspectRatio, Tuple[int, int], str]


@dataclass(frozen=True)
class CropRect:
    """Axis-aligned crop rectangle in source image coordinates."""
    x: int
    y: int
    width: int
    height: int

    @property
    def ratio(self) -> float:
        """Width / height of the rectangle itself."""
        return self.width / self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def slices(self) -> Tuple[slice, slice]:
        """``(rows, cols)`` slices for indexing an ``(H, W, C)`` array."""
        return (slice(self.y, self.y + self.height),
                slice(self.x, self.x + self.width))

    def contained_in(self, width: int, height: int) -> bool:
        return (
            self.x >= 0 and self.y >= 0
            and self.x + self.width <= width
            and self.y + self.height <= height
        )
