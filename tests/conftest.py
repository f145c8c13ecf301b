"""
Shared fixtures for the painter tests.
"""

import numpy as np
import pytest

from pixel_buffer import PixelBuffer

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)
RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)


@pytest.fixture
def gradient_buffer():
    """
    A 4x3 buffer where every pixel has a distinct color.

    Pixel (x, y) holds (10 * x, 10 * y, 7, 255).
    """
    pb = PixelBuffer(4, 3)
    for y in range(3):
        for x in range(4):
            pb.buffer[y, x] = (10 * x, 10 * y, 7, 255)
    return pb


def colored_pixels(pb, color):
    """Set of (x, y) pixels in `pb` holding exactly `color`."""
    match = np.all(pb.buffer == np.asarray(color, dtype=np.uint8), axis=2)
    ys, xs = np.nonzero(match)
    return set(zip(xs.tolist(), ys.tolist()))
