"""Exception hierarchy for camsnap."""


class CamsnapError(Exception):
    """Base class for all camsnap errors."""


class InvalidDimensions(CamsnapError):
    """Source width/height (or a crop region) is not usable."""


class InvalidRatio(CamsnapError):
    """Aspect ratio has a non-positive component or cannot be parsed."""


class InvalidFrame(CamsnapError):
    """Pixel buffer length does not match ``width * height * 4``."""


class UnknownFilter(CamsnapError, ValueError):
    """Filter identifier is not one of the supported names."""


class CaptureError(CamsnapError):
    """A frame could not be obtained from a source."""


class ExportError(CamsnapError):
    """A frame could not be encoded or written."""
