"""Core enumerations for camsnap."""

from enum import Enum

from .errors import UnknownFilter


class FilterKind(Enum):
    """Color filters that can be stamped onto a captured frame.

    Values are the identifiers used by the UI layer.  ``INVERT`` keeps the
    historical ``"custom-js"`` name.
    """
    NONE = "none"
    GRAYSCALE = "grayscale"
    SEPIA = "sepia"
    VINTAGE = "vintage"
    INVERT = "custom-js"

    @classmethod
    def parse(cls, value: "str | FilterKind") -> "FilterKind":
        """Resolve a UI identifier (or an existing member) to a FilterKind.

        Only the exact identifiers are accepted (surrounding whitespace is
        ignored).  Member names such as ``"invert"`` or ``"NONE"`` are rejected.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            for member in cls:
                if member.value == key:
                    return member
        raise UnknownFilter(
            f"Unknown filter {value!r}; expected one of "
            f"{', '.join(m.value for m in cls)}"
        )

    @property
    def identifier(self) -> str:
        return self.value


class FacingMode(Enum):
    """Which physical camera feeds the preview."""
    USER = "user"                # front / selfie camera
    ENVIRONMENT = "environment"  # rear camera

    def flipped(self) -> "FacingMode":
        """Return the other camera."""
        if self is FacingMode.USER:
            return FacingMode.ENVIRONMENT
        return FacingMode.USER
