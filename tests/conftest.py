"""Pytest configuration and shared fixtures for camsnap tests."""

import numpy as np
import pytest

from camsnap.core import Frame


def make_frame(width: int, height: int, seed: int = 0) -> Frame:
    """Deterministic pseudo-random RGBA frame."""
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=width * height * 4, dtype=np.uint8)
    return Frame(width=width, height=height, pixels=pixels)


@pytest.fixture
def frame_factory():
    return make_frame


@pytest.fixture
def small_frame() -> Frame:
    return make_frame(6, 4, seed=1)


@pytest.fixture
def color_sweep_frame() -> Frame:
    """Frame covering a 0..255 grid on every channel (step 17) with varied alpha."""
    levels = np.arange(0, 256, 17, dtype=np.uint8)  # 16 levels incl. 0 and 255
    r, g, b = np.meshgrid(levels, levels, levels, indexing="ij")
    a = (np.arange(r.size) % 256).astype(np.uint8)
    rgba = np.stack([r.ravel(), g.ravel(), b.ravel(), a], axis=-1)
    return Frame.from_array(rgba.reshape(64, 64, 4))


@pytest.fixture
def bgr_image() -> np.ndarray:
    """Small OpenCV-style BGR image with distinct columns."""
    image = np.zeros((8, 10, 3), dtype=np.uint8)
    for x in range(10):
        image[:, x] = (x * 20, 100, 255 - x * 20)  # B, G, R
    return image
