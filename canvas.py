import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

import numpy as np

from config import EditorConfig
from history import HistoryManager
from pixel_buffer import Color, PixelBuffer, validate_color
from preview import render_preview
from rasterizer import draw_dot, draw_line, fill, pick_color
from render_scheduler import RenderScheduler
from tile_addressing import TileAddressing

logger = logging.getLogger(__name__)


class Tool(Enum):
    PEN = "pen"
    ERASER = "eraser"
    FILL = "fill"
    COLOR_PICKER = "color-picker"


@dataclass(frozen=True)
class ToolState:
    tool: Tool
    color: Color

    def __post_init__(self):
        object.__setattr__(self, 'tool', Tool(self.tool))
        object.__setattr__(self, 'color', validate_color(self.color))


class Canvas:
    """
    Editing session for one tileable texture.

    Owns the content buffer, the tiled addressing around it, the undo history
    and the repaint scheduler. Pointer coordinates are in surface units and
    are scaled by `config.scale_factor` into device pixels of the tiled view.
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        on_render: Optional[Callable[[np.ndarray], None]] = None,
        on_color_change: Optional[Callable[[Color], None]] = None,
        schedule=None,
    ):
        self.config = config or EditorConfig()
        width, height = self.config.content_size
        self.content = PixelBuffer(width, height, self.config.background)
        self.addressing = TileAddressing.for_scale(self.content, self.config.scale_factor, self.config.grid_color)
        self.history = HistoryManager(self.config.history_limit)
        self.history.begin_session(self.content)
        self.scheduler = RenderScheduler(self._paint, schedule)
        self.on_render = on_render
        self.on_color_change = on_color_change

        self.prev_x = -1.0
        self.prev_y = -1.0
        self.is_pointer_active = False
        self.is_pointer_moved = False
        logger.info(
            "editing session %dx%d content, %dx%d surface",
            width, height, self.addressing.width, self.addressing.height,
        )

    @property
    def width(self) -> int:
        return self.addressing.width

    @property
    def height(self) -> int:
        return self.addressing.height

    def _stroke_style(self, tool_state: ToolState):
        width = self.config.pen_width * self.config.scale_factor
        if tool_state.tool is Tool.PEN:
            return width, tool_state.color
        if tool_state.tool is Tool.ERASER:
            return width, self.config.eraser_color
        return None

    def _device_point(self, x, y):
        s = self.config.scale_factor
        return x * s, y * s

    def on_pointer_down(self, tool_state: ToolState, x, y) -> None:
        if tool_state.tool in (Tool.PEN, Tool.ERASER):
            self.prev_x = x
            self.prev_y = y
            self.is_pointer_active = True
            self.is_pointer_moved = False
        elif tool_state.tool is Tool.FILL:
            self._fill_at(x, y, tool_state.color)
        elif tool_state.tool is Tool.COLOR_PICKER:
            self._pick_at(x, y)

    def on_pointer_move(self, tool_state: ToolState, x, y) -> None:
        if not self.is_pointer_active:
            return
        style = self._stroke_style(tool_state)
        if style is None:
            return
        self.is_pointer_moved = True
        line_width, color = style
        dx0, dy0 = self._device_point(self.prev_x, self.prev_y)
        dx1, dy1 = self._device_point(x, y)
        draw_line(self.addressing, dx0, dy0, dx1, dy1, line_width, color)
        self.scheduler.request_frame()
        self.prev_x = x
        self.prev_y = y

    def on_pointer_up(self, tool_state: ToolState, x, y) -> None:
        if not self.is_pointer_active:
            return
        self.is_pointer_active = False
        style = self._stroke_style(tool_state)
        if not self.is_pointer_moved and style is not None:
            line_width, color = style
            dx, dy = self._device_point(self.prev_x, self.prev_y)
            draw_dot(self.addressing, dx, dy, line_width, color)
            self.scheduler.request_frame()
        self.is_pointer_moved = False
        self.history.commit()

    def _content_point(self, x, y):
        dx, dy = self._device_point(x, y)
        ix, iy = int(np.floor(dx)), int(np.floor(dy))
        if not self.addressing.contains(ix, iy):
            return None
        return self.addressing.to_content(ix, iy)

    def _fill_at(self, x, y, color: Color) -> None:
        point = self._content_point(x, y)
        if point is None:
            return
        if fill(self.content, point[0], point[1], color):
            self.history.commit()
            self.scheduler.request_frame()

    def _pick_at(self, x, y) -> None:
        dx, dy = self._device_point(x, y)
        color = pick_color(self.addressing, int(np.floor(dx)), int(np.floor(dy)))
        if color is not None and self.on_color_change is not None:
            self.on_color_change(color)

    def clear(self) -> None:
        self.content.clear()
        self.history.commit()
        self.scheduler.request_frame()
        logger.debug("canvas cleared")

    def undo(self) -> bool:
        changed = self.history.undo()
        if changed:
            self.scheduler.request_frame()
        return changed

    def redo(self) -> bool:
        changed = self.history.redo()
        if changed:
            self.scheduler.request_frame()
        return changed

    def snapshot_buffer(self) -> PixelBuffer:
        """Independent copy of the content, safe to hand to exporters and previews."""
        return self.content.clone()

    def render_tiled(self, target: Optional[np.ndarray] = None) -> np.ndarray:
        return self.addressing.render_tiled(target)

    def render_preview(self, width: int, height: int, offset: float = 0.0, scale: float = 1.0) -> np.ndarray:
        return render_preview(self.content, width, height, offset, scale)

    def _paint(self) -> None:
        if self.on_render is None:
            raise RuntimeError("no render target installed")
        self.on_render(self.render_tiled())

    def save_to_png(self, filename="drawing.png"):
        """Saves the canvas content (without gutters or seam lines) to a PNG file."""
        self.snapshot_buffer().to_image().save(filename)
        logger.info("saved canvas to %s", filename)
