"""Frame source abstraction for camsnap.

Provides a common interface for feeding frames from webcams or still
image files into a :class:`~camsnap.session.CaptureSession`.

Quick start::

    from camsnap.sources import ImageFileSource

    with ImageFileSource("snapshot.png") as src:
        frame = src.read()
"""

from camsnap.sources.base import FrameSource
from camsnap.sources.webcam import WebcamSource
from camsnap.sources.image_file import ImageFileSource

__all__ = [
    "FrameSource",
    "WebcamSource",
    "ImageFileSource",
]
