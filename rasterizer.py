"""
Stroke, flood fill and color pick operations.

Strokes go through whatever surface they are given, so drawing on a
TileAddressing wraps across tile edges and silently skips seam lines.
Flood fill always works on the bare content buffer and stops at its edges.
"""
import logging
import math
from collections import deque
from typing import Optional

import numpy as np

from pixel_buffer import Color, PixelBuffer
from tile_addressing import TileAddressing

logger = logging.getLogger(__name__)

DOT_EPSILON = 0.01


def capsule_mask(x0, y0, x1, y1, line_width, xs, ys):
    """Boolean mask of the grid points (xs, ys) covered by the capsule x0,y0 -> x1,y1."""
    w2 = line_width / 2
    w22 = w2 * w2
    # Line through both endpoints as a*x + b*y + c = 0.
    a = y0 - y1
    b = x1 - x0
    c = x0 * y1 - x1 * y0
    a2b2 = a * a + b * b
    if a2b2 == 0:
        px = np.full(xs.shape, float(x0))
        py = np.full(ys.shape, float(y0))
    else:
        px = (b * b * xs - a * b * ys - a * c) / a2b2
        py = (-a * b * xs + a * a * ys - b * c) / a2b2

    vx0 = px - x0
    vy0 = py - y0
    vx1 = px - x1
    vy1 = py - y1
    inside = vx0 * vx1 + vy0 * vy1 < 0
    before_start = ~inside & (vx0 * (x1 - x0) + vy0 * (y1 - y0) <= 0)

    dist2 = np.where(
        inside,
        (xs - px) ** 2 + (ys - py) ** 2,
        np.where(before_start, (xs - x0) ** 2 + (ys - y0) ** 2, (xs - x1) ** 2 + (ys - y1) ** 2),
    )
    return dist2 <= w22


def draw_line(surface, x0, y0, x1, y1, line_width, color: Color) -> int:
    """
    Fills every pixel within line_width / 2 of the segment x0,y0 -> x1,y1.

    `surface` is a TileAddressing or PixelBuffer. Returns the number of
    covered pixels, including any that landed on seam lines.
    """
    w2 = line_width / 2
    min_x = int(round(max(0, min(x0, x1) - w2 - 1)))
    min_y = int(round(max(0, min(y0, y1) - w2 - 1)))
    max_x = int(round(min(surface.width - 1, max(x0, x1) + w2 + 1)))
    max_y = int(round(min(surface.height - 1, max(y0, y1) + w2 + 1)))
    if min_x > max_x or min_y > max_y:
        return 0

    ys, xs = np.mgrid[min_y:max_y + 1, min_x:max_x + 1].astype(np.float64)
    mask = capsule_mask(x0, y0, x1, y1, line_width, xs, ys)
    rows, cols = np.nonzero(mask)
    for y, x in zip(rows.tolist(), cols.tolist()):
        surface.set_color_at(min_x + x, min_y + y, color)
    return len(rows)


def draw_dot(surface, x, y, line_width, color: Color) -> int:
    """A single dab at (x, y), drawn as a near zero-length segment."""
    return draw_line(surface, x, y, x + DOT_EPSILON, y, line_width, color)


def fill(buffer: PixelBuffer, x, y, color: Color) -> int:
    """
    4-connected flood fill of the region around (x, y) matching its color.

    The reference color is read once before any write. Returns the number of
    pixels whose value changed, so 0 when the fill color equals the reference.
    """
    width, height = buffer.width, buffer.height
    x = int(math.floor(x))
    y = int(math.floor(y))
    if not (0 <= x < width and 0 <= y < height):
        return 0

    pixels = buffer.buffer
    target = tuple(pixels[y, x].tolist())
    new_color = np.asarray(color, dtype=np.uint8)
    visited = np.zeros(width * height, dtype=bool)
    filled = 0

    q = deque([(x, y)])
    while q:
        px, py = q.popleft()
        i = px + py * width
        if visited[i]:
            continue
        if tuple(pixels[py, px].tolist()) != target:
            continue
        pixels[py, px] = new_color
        visited[i] = True
        filled += 1
        if px > 0:
            q.append((px - 1, py))
        if py > 0:
            q.append((px, py - 1))
        if px < width - 1:
            q.append((px + 1, py))
        if py < height - 1:
            q.append((px, py + 1))

    changed = 0 if tuple(color) == target else filled
    logger.debug("fill at (%d, %d): %d pixels changed", x, y, changed)
    return changed


def pick_color(addressing: TileAddressing, x: int, y: int) -> Optional[Color]:
    """Color under virtual (x, y); None for seam lines and points off the surface."""
    if not addressing.contains(x, y):
        return None
    return addressing.get_color_at(x, y)
