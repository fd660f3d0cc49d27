"""Command-line capture: one frame in, one filtered PNG out."""

import argparse
import logging
from typing import List, Optional

from camsnap.core import AspectRatio, CamsnapError, FacingMode, FilterKind
from camsnap.export import export_capture
from camsnap.session import CaptureSession
from camsnap.sources import FrameSource, ImageFileSource, WebcamSource
from camsnap.utils.config import CamsnapConfig, load_config


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="camsnap",
        description="Capture a cropped, filtered still from a camera or image.",
    )
    parser.add_argument("--config", help="YAML config file (default: config/default.yaml)")

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--input", help="Read the frame from an image file instead of a camera")
    source.add_argument("--device", help="Camera device index or path")

    parser.add_argument(
        "--ratio",
        help=f"Aspect ratio identifier ({', '.join(AspectRatio.PRESETS)})",
    )
    parser.add_argument(
        "--filter",
        help=f"Filter identifier ({', '.join(k.identifier for k in FilterKind)})",
    )
    parser.add_argument(
        "--facing",
        choices=[m.value for m in FacingMode],
        help="Which camera to use (user = front)",
    )
    parser.add_argument(
        "--mirror",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Flip the photo horizontally (default: off)",
    )
    parser.add_argument("--output", help="Directory for the PNG")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def _overrides(args: argparse.Namespace) -> dict:
    overrides = {}
    if args.ratio is not None:
        overrides["capture.ratio"] = args.ratio
    if args.filter is not None:
        overrides["capture.filter"] = args.filter
    if args.facing is not None:
        overrides["capture.facing_mode"] = args.facing
    if args.mirror is not None:
        overrides["capture.mirror"] = args.mirror
    if args.output is not None:
        overrides["export.directory"] = args.output
    if args.device is not None:
        overrides["camera.device"] = int(args.device) if args.device.isdigit() else args.device
    if args.debug:
        overrides["debug_mode"] = True
    return overrides


def make_source(config: CamsnapConfig, input_path: Optional[str] = None) -> FrameSource:
    """Build the frame source selected by the config / CLI."""
    if input_path:
        return ImageFileSource(input_path)
    cam = config.camera
    return WebcamSource(
        device=cam.device,
        width=cam.width,
        height=cam.height,
        facing_mode=config.capture.facing_mode,
        devices=cam.devices,
    )


def run(argv: Optional[List[str]] = None) -> int:
    """Parse ``argv``, capture one frame and write it.  Returns an exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config, overrides=_overrides(args))
    except ValueError as exc:
        # pydantic ValidationError is a ValueError
        parser.error(str(exc))

    try:
        with CaptureSession(make_source(config, args.input), config.capture) as session:
            result = session.capture()
        path = export_capture(
            result.frame,
            result.settings.filter,
            config.export.directory,
            config.export.filename_template,
        )
    except (CamsnapError, FileNotFoundError) as exc:
        logger.error("Capture failed: %s", exc)
        return 2

    print(path)
    return 0
