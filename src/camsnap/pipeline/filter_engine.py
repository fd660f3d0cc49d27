"""Per-pixel color filters.

Every filter is a chain of :class:`ColorStage` objects.  A stage is an
integer 3x3 matrix with a bias and a divisor, evaluated as::

    out = clip(M @ rgb + bias, 0, 255 * divisor) // divisor

Keeping the coefficients as integers (thousandths for the weights) makes
the truncation exact: grayscale of (100, 150, 200) is 140750 // 1000 = 140
with no float rounding in between.  Alpha is never touched.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from camsnap.core import FilterKind, Frame


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColorStage:
    """One affine color transform with saturating 8-bit output."""
    matrix: Tuple[Tuple[int, int, int], ...]
    bias: int = 0
    divisor: int = 1

    def apply(self, rgb: np.ndarray) -> np.ndarray:
        """Transform an ``(..., 3)`` uint8 array, returning uint8."""
        m = np.asarray(self.matrix, dtype=np.int64)
        acc = rgb.astype(np.int64) @ m.T + self.bias
        np.clip(acc, 0, 255 * self.divisor, out=acc)
        return (acc // self.divisor).astype(np.uint8)


def _weights(*rows: Tuple[float, float, float]) -> Tuple[Tuple[int, int, int], ...]:
    # Decimal weights -> integer thousandths
    return tuple(tuple(int(round(w * 1000)) for w in row) for row in rows)


_LUMA = (0.299, 0.587, 0.114)

_VINTAGE_TINT = (
    (0.90, 0.05, 0.05),
    (0.05, 0.80, 0.05),
    (0.05, 0.05, 0.70),
)

FILTER_STAGES: Dict[FilterKind, Tuple[ColorStage, ...]] = {
    FilterKind.NONE: (),
    FilterKind.GRAYSCALE: (
        ColorStage(_weights(_LUMA, _LUMA, _LUMA), divisor=1000),
    ),
    FilterKind.SEPIA: (
        ColorStage(
            _weights(
                (0.393, 0.769, 0.189),
                (0.349, 0.686, 0.168),
                (0.272, 0.534, 0.131),
            ),
            divisor=1000,
        ),
    ),
    FilterKind.VINTAGE: (
        # Warm tint with contrast 1.2 around 128 folded in, clipped once:
        # 1.2 * (tint - 128) + 128 == (6 * tint - 128) / 5
        ColorStage(
            tuple(tuple(6 * w for w in row) for row in _weights(*_VINTAGE_TINT)),
            bias=-128 * 1000,
            divisor=5 * 1000,
        ),
    ),
    FilterKind.INVERT: (
        ColorStage(((-1, 0, 0), (0, -1, 0), (0, 0, -1)), bias=255),
    ),
}


def mirror_frame(frame: Frame) -> Frame:
    """Return a horizontally mirrored copy of ``frame``."""
    array = frame.as_array()
    return Frame.from_array(array[:, ::-1].copy())


def apply_filter(frame: Frame, filter: "FilterKind | str", mirror: bool = False) -> Frame:
    """Apply a color filter (and optional mirror) to a frame.

    The input frame is left untouched; a new frame of the same size is
    returned.

    Args:
        frame: RGBA source frame.
        filter: A :class:`FilterKind` or its UI identifier.
        mirror: When ``True`` output column ``x`` comes from source column
            ``width - 1 - x``.

    Raises:
        InvalidFrame: If the pixel buffer does not match the frame size.
        UnknownFilter: If ``filter`` is a string that names no filter.
    """
    kind = FilterKind.parse(filter)
    source = frame.as_array()

    out = source[:, ::-1].copy() if mirror else source.copy()
    rgb = out[..., :3]
    for stage in FILTER_STAGES[kind]:
        rgb = stage.apply(rgb)
    out[..., :3] = rgb

    logger.debug(
        "Applied filter %s (mirror=%s) to %dx%d frame",
        kind.identifier, mirror, frame.width, frame.height,
    )
    return Frame.from_array(out)
