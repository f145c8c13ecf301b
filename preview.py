"""
Content-only tiling for texture previews.

Unlike TileAddressing.render_tiled there are no seam lines here: the content
is repeated edge to edge, optionally scaled and with each row of tiles
shifted sideways.
"""
import math

import numpy as np
from PIL import Image

from pixel_buffer import PixelBuffer


def resize_nearest(buffer: PixelBuffer, scale: float) -> np.ndarray:
    """Nearest-neighbour resize of the buffer to floor(size * scale)."""
    if scale <= 0:
        raise ValueError(f"scale must be positive, got {scale}")
    width = max(1, int(math.floor(buffer.width * scale)))
    height = max(1, int(math.floor(buffer.height * scale)))
    if (width, height) == (buffer.width, buffer.height):
        return buffer.buffer.copy()
    img = buffer.to_image().resize((width, height), Image.NEAREST)
    return np.asarray(img, dtype=np.uint8).copy()


def render_preview(buffer: PixelBuffer, width: int, height: int, offset: float = 0.0, scale: float = 1.0) -> np.ndarray:
    """
    Repeats the content over a (height, width) RGBA array.

    Each successive row of tiles starts `offset` tile widths further along,
    so offset 0.5 gives a brick pattern.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"invalid preview size: {width}x{height}")
    if not 0 <= offset <= 1:
        raise ValueError(f"offset must be within [0, 1], got {offset}")
    tile = resize_nearest(buffer, scale)
    th, tw = tile.shape[:2]
    out = np.empty((height, width, 4), dtype=np.uint8)

    # Start of the first tile in the current row, always in (-tw, 0].
    s = 0.0
    reps = width // tw + 2
    row = np.tile(tile, (1, reps, 1))
    for y in range(0, height, th):
        start = int(round(-s)) % tw
        rows = min(th, height - y)
        out[y:y + rows] = row[:rows, start:start + width]
        s += offset * tw
        if s > 0:
            s -= tw
    return out
