from typing import Optional, Tuple

import numpy as np

from pixel_buffer import Color, PixelBuffer, validate_color

GRID_COLOR: Color = (0, 0, 0, 255)


class TileAddressing:
    """
    Virtual drawing surface around a content buffer.

    The surface is laid out per axis as gutter | line | content | line | gutter.
    Gutter pixels wrap to the opposite edge of the content, so the content
    reads as a seamless repeating tile. Line pixels mark the tile seams and
    have no backing storage.
    """

    def __init__(self, content: PixelBuffer, line_width: int = 1, grid_color: Color = GRID_COLOR):
        if line_width < 1:
            raise ValueError(f"line_width must be at least 1, got {line_width}")
        self.content = content
        self.line_width = int(line_width)
        self.grid_color = validate_color(grid_color)
        self.horizontal_gutter = content.width // 2
        self.vertical_gutter = content.height // 2
        self.width = content.width + self.line_width * 2 + self.horizontal_gutter * 2
        self.height = content.height + self.line_width * 2 + self.vertical_gutter * 2

    @classmethod
    def for_scale(cls, content: PixelBuffer, scale_factor: float, grid_color: Color = GRID_COLOR) -> "TileAddressing":
        """Seam lines one surface pixel wide, i.e. round(scale_factor) device pixels."""
        return cls(content, max(1, int(round(scale_factor))), grid_color)

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    @staticmethod
    def _map_axis(v: int, gutter: int, line_width: int, size: int, total: int, axis: str) -> Optional[int]:
        line_start = gutter
        content_start = line_start + line_width
        content_end = content_start + size
        far_start = content_end + line_width
        if line_start <= v < content_start or content_end <= v < far_start:
            return None
        if 0 <= v < line_start:
            return v + (size - gutter)
        if content_start <= v < content_end:
            return v - content_start
        if far_start <= v < total:
            return v - far_start
        raise IndexError(f"{axis} is out of range: {v}")

    def to_content(self, x: int, y: int) -> Optional[Tuple[int, int]]:
        """Content coordinate shown at virtual (x, y), or None on a seam line."""
        cx = self._map_axis(x, self.horizontal_gutter, self.line_width, self.content.width, self.width, 'x')
        cy = self._map_axis(y, self.vertical_gutter, self.line_width, self.content.height, self.height, 'y')
        if cx is None or cy is None:
            return None
        return cx, cy

    def to_index(self, x: int, y: int) -> Optional[int]:
        """Byte offset into the content data for virtual (x, y), or None on a seam line."""
        point = self.to_content(x, y)
        if point is None:
            return None
        cx, cy = point
        return (cx + cy * self.content.width) * 4

    def get_color_at(self, x: int, y: int) -> Optional[Color]:
        i = self.to_index(x, y)
        if i is None:
            return None
        r, g, b, a = self.content.data[i:i + 4]
        return int(r), int(g), int(b), int(a)

    def set_color_at(self, x: int, y: int, color: Color) -> None:
        i = self.to_index(x, y)
        if i is None:
            return
        self.content.data[i:i + 4] = color

    def render_tiled(self, target: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Paints the tiled content plus seam lines into `target` and returns it.

        Tiles repeat every line_width + content size pixels, starting one
        content block before the origin so the wrapped edges show in the gutters.
        """
        if target is None:
            target = np.empty((self.height, self.width, 4), dtype=np.uint8)
        elif target.shape != (self.height, self.width, 4):
            raise ValueError(
                f"render target has shape {target.shape}, expected {(self.height, self.width, 4)}"
            )
        cw, ch = self.content.width, self.content.height
        src = self.content.buffer
        lw = self.line_width
        for ty in range(-(ch - self.vertical_gutter), self.height, lw + ch):
            y0, y1 = max(ty, 0), min(ty + ch, self.height)
            if y0 >= y1:
                continue
            for tx in range(-(cw - self.horizontal_gutter), self.width, lw + cw):
                x0, x1 = max(tx, 0), min(tx + cw, self.width)
                if x0 >= x1:
                    continue
                target[y0:y1, x0:x1] = src[y0 - ty:y1 - ty, x0 - tx:x1 - tx]

        hg, vg = self.horizontal_gutter, self.vertical_gutter
        target[vg:vg + lw, :] = self.grid_color
        target[vg + lw + ch:vg + 2 * lw + ch, :] = self.grid_color
        target[:, hg:hg + lw] = self.grid_color
        target[:, hg + lw + cw:hg + 2 * lw + cw] = self.grid_color
        return target
