"""Frame-transform pipeline: aspect crop planning and color filters.

Quick start::

    from camsnap.pipeline import plan_crop, extract_region, apply_filter

    rect = plan_crop(frame.width, frame.height, "4-5")
    photo = apply_filter(extract_region(frame, rect), "sepia", mirror=True)
"""

from camsnap.pipeline.crop_planner import plan_crop, extract_region
from camsnap.pipeline.filter_engine import (
    ColorStage,
    FILTER_STAGES,
    apply_filter,
    mirror_frame,
)

__all__ = [
    "plan_crop",
    "extract_region",
    "ColorStage",
    "FILTER_STAGES",
    "apply_filter",
    "mirror_frame",
]
