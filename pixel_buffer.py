from typing import Tuple

import numpy as np
from PIL import Image

Color = Tuple[int, int, int, int]

BACKGROUND: Color = (255, 255, 255, 255)


def validate_color(color) -> Color:
    """Returns `color` as an RGBA tuple, raising ValueError if it is not one."""
    try:
        channels = tuple(color)
    except TypeError:
        raise ValueError(f"color must be an RGBA sequence, got {color!r}") from None
    if len(channels) != 4:
        raise ValueError(f"color must have 4 channels, got {len(channels)}")
    for c in channels:
        if isinstance(c, bool) or not isinstance(c, (int, np.integer)) or not 0 <= c <= 255:
            raise ValueError(f"color channels must be integers in 0..255, got {color!r}")
    return tuple(int(c) for c in channels)


class PixelBuffer:
    """
    RGBA8 pixel storage, row-major with a top-left origin.

    `buffer` has shape (height, width, 4); its size never changes after
    construction. A differently sized canvas needs a new PixelBuffer.
    """

    def __init__(self, width: int, height: int, background: Color = BACKGROUND):
        if isinstance(width, bool) or isinstance(height, bool):
            raise ValueError("width and height must be integers")
        if int(width) != width or int(height) != height or width <= 0 or height <= 0:
            raise ValueError(f"invalid buffer dimensions: {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.background = validate_color(background)
        self.buffer = np.empty((self.height, self.width, 4), dtype=np.uint8)
        self.clear()

    @classmethod
    def from_array(cls, array) -> "PixelBuffer":
        """Builds a buffer from an (h, w, 4) uint8 array. The data is copied."""
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] != 4:
            raise ValueError(f"expected an (h, w, 4) array, got shape {array.shape}")
        pb = cls(array.shape[1], array.shape[0])
        pb.buffer[...] = array.astype(np.uint8, copy=False)
        return pb

    @property
    def data(self) -> np.ndarray:
        """Flat width*height*4 view of the pixel bytes."""
        return self.buffer.reshape(-1)

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} buffer")

    def get_color_at(self, x: int, y: int) -> Color:
        self._check_bounds(x, y)
        r, g, b, a = self.buffer[y, x]
        return int(r), int(g), int(b), int(a)

    def set_color_at(self, x: int, y: int, color: Color) -> None:
        self._check_bounds(x, y)
        self.buffer[y, x] = color

    def clear(self) -> None:
        """Resets every pixel to the background color."""
        self.buffer[...] = self.background

    def clone(self) -> "PixelBuffer":
        """Deep copy of the pixel data."""
        pb = PixelBuffer.__new__(PixelBuffer)
        pb.width = self.width
        pb.height = self.height
        pb.background = self.background
        pb.buffer = self.buffer.copy()
        return pb

    def restore(self, other: "PixelBuffer") -> None:
        """Overwrites this buffer's pixels with `other`'s, keeping the same storage."""
        if (other.width, other.height) != (self.width, self.height):
            raise ValueError(
                f"cannot restore {other.width}x{other.height} pixels into "
                f"{self.width}x{self.height} buffer"
            )
        np.copyto(self.buffer, other.buffer)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.buffer, 'RGBA')

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.buffer.shape == other.buffer.shape and np.array_equal(self.buffer, other.buffer)

    def __repr__(self):
        return f"PixelBuffer({self.width}, {self.height})"
