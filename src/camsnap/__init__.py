"""camsnap - cropped, filtered still capture from a live camera feed.

The core is the frame-transform pipeline in :mod:`camsnap.pipeline`;
sources, session, export and CLI are thin layers around it.
"""

__version__ = "0.1.0"


def main() -> None:
    """Entry point for the camsnap command."""
    import sys

    from camsnap.cli import run

    sys.exit(run())
