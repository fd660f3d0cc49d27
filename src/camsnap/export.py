"""Lossless PNG export of captured frames."""

import logging
from pathlib import Path
from typing import Optional

import cv2

from camsnap.core import ExportError, FilterKind, Frame


logger = logging.getLogger(__name__)

DEFAULT_FILENAME_TEMPLATE = "photo-filtered-{filter}.png"


def export_filename(
    filter: "FilterKind | str",
    template: str = DEFAULT_FILENAME_TEMPLATE,
) -> str:
    """Build the download name, e.g. ``photo-filtered-sepia.png``."""
    kind = FilterKind.parse(filter)
    return template.format(filter=kind.identifier)


def encode_png(frame: Frame) -> bytes:
    """Encode ``frame`` as PNG bytes (alpha kept)."""
    ok, buf = cv2.imencode(".png", frame.to_bgra())
    if not ok:
        raise ExportError(f"PNG encoding failed for {frame.width}x{frame.height} frame")
    return buf.tobytes()


def save_png(frame: Frame, path: str | Path) -> Path:
    """Write ``frame`` to ``path`` as PNG, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = encode_png(frame)
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise ExportError(f"Could not write {path}: {exc}") from exc
    logger.info("Saved %dx%d PNG to %s", frame.width, frame.height, path)
    return path


def export_capture(
    frame: Frame,
    filter: "FilterKind | str",
    directory: str | Path,
    template: Optional[str] = None,
) -> Path:
    """Save a captured frame under ``directory`` with its filter-based name."""
    name = export_filename(filter, template or DEFAULT_FILENAME_TEMPLATE)
    return save_png(frame, Path(directory) / name)
