"""Abstract base class for all camsnap frame sources."""

from abc import ABC, abstractmethod
from typing import Iterator, Optional

from camsnap.core import FacingMode, Frame


class FrameSource(ABC):
    """Uniform interface for providing RGBA frames to a capture session.

    Concrete implementations exist for webcams and still image files.
    All sources produce :class:`Frame` objects in RGBA order, converted
    from OpenCV's BGR at the source boundary.

    Usage::

        with WebcamSource(0) as src:
            frame = src.read()
    """

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @abstractmethod
    def open(self) -> None:
        """Open the underlying capture device / file."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying capture device / file."""

    @abstractmethod
    def read(self) -> Optional[Frame]:
        """Read the next frame.

        Returns:
            A :class:`Frame`, or ``None`` when the source is exhausted
            or on a transient read error.
        """

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def resolution(self) -> tuple[int, int]:
        """``(width, height)`` of the frames produced by this source."""

    @property
    @abstractmethod
    def is_live(self) -> bool:
        """``True`` for real-time sources (webcam)."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """``True`` when the source has been opened and not yet closed."""

    # ------------------------------------------------------------------
    # Camera selection
    # ------------------------------------------------------------------

    def set_facing_mode(self, facing_mode: FacingMode) -> None:
        """Switch to the camera for ``facing_mode``.

        Sources backed by a single device (or a file) ignore this.
        """

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "FrameSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Iterator protocol
    # ------------------------------------------------------------------

    def __iter__(self) -> Iterator[Frame]:
        return self

    def __next__(self) -> Frame:
        frame = self.read()
        if frame is None:
            raise StopIteration
        return frame
