"""Center-aligned aspect-ratio crop planning.

Given a source size and a target ratio, :func:`plan_crop` returns the
largest rectangle of that ratio centered inside the source.  Fractional
sizes are truncated toward zero.  The arithmetic is done on integers
(``height * num // den``), so no float product such as ``1080 * 0.8`` can
land just below a whole number and lose a pixel.
"""

import logging

from camsnap.core import AspectRatio, CropRect, Frame, InvalidDimensions, RatioLike


logger = logging.getLogger(__name__)


def plan_crop(source_width: int, source_height: int, ratio: RatioLike) -> CropRect:
    """Compute the centered crop of ``ratio`` that best fills the source.

    Args:
        source_width: Source frame width in pixels (> 0).
        source_height: Source frame height in pixels (> 0).
        ratio: Target ratio as an :class:`AspectRatio`, a ``(num, den)``
            tuple or an identifier like ``"4-5"``.

    Returns:
        A :class:`CropRect` fully contained in the source, at least one
        pixel on each side.

    Raises:
        InvalidDimensions: If either source dimension is not positive.
        InvalidRatio: If either ratio component is not positive.
    """
    if source_width <= 0 or source_height <= 0:
        raise InvalidDimensions(
            f"Source dimensions must be positive, got {source_width}x{source_height}"
        )
    target = AspectRatio.coerce(ratio)
    num, den = target.numerator, target.denominator

    # source_w / source_h > num / den, cross-multiplied
    if source_width * den > source_height * num:
        # Source is wider: keep full height, trim the sides
        height = source_height
        width = max(1, source_height * num // den)
        x = (source_width - width) // 2
        y = 0
    else:
        # Source is taller (or equal): keep full width, trim top and bottom
        width = source_width
        height = max(1, source_width * den // num)
        x = 0
        y = (source_height - height) // 2

    # Shrink, never shift, so the rect stays inside the source
    x = min(max(x, 0), source_width)
    y = min(max(y, 0), source_height)
    width = max(0, min(width, source_width - x))
    height = max(0, min(height, source_height - y))

    rect = CropRect(x=x, y=y, width=width, height=height)
    logger.debug(
        "Crop %dx%d to %s -> x=%d y=%d %dx%d",
        source_width, source_height, target, rect.x, rect.y, rect.width, rect.height,
    )
    return rect


def extract_region(frame: Frame, rect: CropRect, mirror: bool = False) -> Frame:
    """Copy ``rect`` out of ``frame`` into a new frame.

    Args:
        frame: Source frame (not modified).
        rect: Region to copy; must lie inside the frame.
        mirror: Flip the copied region horizontally.

    Raises:
        InvalidFrame: If the frame buffer is malformed.
        InvalidDimensions: If the region is empty or outside the frame.
    """
    source = frame.as_array()
    if rect.width <= 0 or rect.height <= 0 or not rect.contained_in(frame.width, frame.height):
        raise InvalidDimensions(
            f"Crop {rect} does not fit inside a {frame.width}x{frame.height} frame"
        )
    rows, cols = rect.slices()
    region = source[rows, cols]
    if mirror:
        region = region[:, ::-1]
    return Frame.from_array(region.copy())
