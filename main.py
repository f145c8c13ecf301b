import logging
import sys
import time
from typing import Optional

import numpy as np
from asciimatics.screen import Screen
from asciimatics.event import KeyboardEvent, MouseEvent
from asciimatics.exceptions import ResizeScreenError
from asciimatics.scene import Scene
from asciimatics.effects import Effect

from canvas import Canvas, Tool, ToolState
from config import EditorConfig
from ui import UIFrame

logger = logging.getLogger(__name__)


# Simple 8-colour mapping from RGBA to nearest basic terminal colour index.
def _rgb_to_colour_index(r: int, g: int, b: int) -> int:
    # Threshold values chosen for basic distinction.
    if r > 200 and g > 200 and b > 200:
        return Screen.COLOUR_WHITE
    if r > 200 and g < 100 and b < 100:
        return Screen.COLOUR_RED
    if g > 200 and r < 100 and b < 100:
        return Screen.COLOUR_GREEN
    if b > 200 and r < 100 and g < 100:
        return Screen.COLOUR_BLUE
    if r > 200 and g > 200 and b < 100:
        return Screen.COLOUR_YELLOW
    if r > 200 and b > 200 and g < 100:
        return Screen.COLOUR_MAGENTA
    if g > 200 and b > 200 and r < 100:
        return Screen.COLOUR_CYAN
    return Screen.COLOUR_BLACK


def half_block_render(screen, raster: np.ndarray):
    """Renders an RGBA raster to the screen, two pixel rows per character cell."""
    height, width = raster.shape[:2]
    for y in range(0, min(height - 1, screen.height * 2), 2):
        row = y // 2
        for x in range(min(width, screen.width)):
            upper_pixel = raster[y, x]
            lower_pixel = raster[y + 1, x]

            fg = _rgb_to_colour_index(int(upper_pixel[0]), int(upper_pixel[1]), int(upper_pixel[2]))
            bg = _rgb_to_colour_index(int(lower_pixel[0]), int(lower_pixel[1]), int(lower_pixel[2]))

            # If both halves share the same colour, draw a full-block for crisper output.
            if fg == bg:
                screen.print_at('█', x, row, colour=fg, bg=bg)
            else:
                screen.print_at('▀', x, row, colour=fg, bg=bg)


class CanvasEffect(Effect):
    """Asciimatics Effect that shows the most recently painted tiled raster."""

    def __init__(self, screen: Screen):
        super().__init__(screen)
        self.raster: Optional[np.ndarray] = None

    def show(self, raster: np.ndarray):
        self.raster = raster

    def reset(self):
        # Nothing to reset between scene restarts.
        pass

    def stop_frame(self):
        # Run indefinitely; Scene duration is -1.
        return 0

    def _update(self, frame_no):
        if self.raster is not None:
            half_block_render(self._screen, self.raster)


def _content_size_for(surface: int, line_width: int = 1) -> int:
    # Surface = content + 2 * line + 2 * floor(content / 2), i.e. about twice the content.
    return max(1, (surface - 2 * line_width) // 2)


def main(screen):
    canvas_width = screen.width - screen.width // 4
    canvas_height = screen.height * 2  # Two pixel rows per character row
    config = EditorConfig(
        width=_content_size_for(canvas_width),
        height=_content_size_for(canvas_height),
        scale_factor=1,
        pen_width=1,
    )
    canvas_effect = CanvasEffect(screen)
    canvas = Canvas(config, on_render=canvas_effect.show)

    class AppState:
        def __init__(self):
            self.tool_state = ToolState(Tool.PEN, config.palette[0][1])
            self.drawing = False

        def set_color(self, color):
            self.tool_state = ToolState(self.tool_state.tool, color)

        def set_tool(self, tool):
            self.tool_state = ToolState(tool, self.tool_state.color)

    app_state = AppState()
    canvas.on_color_change = app_state.set_color

    def set_brush_size(size):
        canvas.config.pen_width = size

    ui = UIFrame(screen, canvas, app_state.set_color, app_state.set_tool, set_brush_size)
    screen.set_scenes([Scene([canvas_effect, ui], duration=-1)])
    canvas.scheduler.request_frame()

    while True:
        # Event handling ----------------------------------------------------
        event = screen.get_event()

        # Let the UI consume the event first (e.g., button clicks).
        event = ui.process_event(event)

        if isinstance(event, KeyboardEvent):
            if event.key_code in (ord('q'), ord('Q')):
                return
            elif event.key_code == Screen.ctrl("s"):
                canvas.save_to_png()
                ui.show_status("Saved drawing.png")
            elif event.key_code == Screen.ctrl("z"):
                canvas.undo()
            elif event.key_code == Screen.ctrl("y"):
                canvas.redo()
            elif event.key_code == Screen.ctrl("x"):
                canvas.clear()
        elif isinstance(event, MouseEvent):
            # The UI occupies the right-most quarter of the screen, starting at `canvas_width`.
            ui.has_focus = event.x >= canvas_width

            # Character cell to surface pixel; each cell holds two pixel rows.
            pixel_x = min(event.x, canvas.width - 1)
            pixel_y = min(event.y * 2, canvas.height - 1)

            if event.buttons == MouseEvent.LEFT_CLICK and not ui.has_focus:
                if not app_state.drawing:
                    app_state.drawing = True
                    canvas.on_pointer_down(app_state.tool_state, pixel_x, pixel_y)
                else:
                    canvas.on_pointer_move(app_state.tool_state, pixel_x, pixel_y)
            elif app_state.drawing:
                app_state.drawing = False
                canvas.on_pointer_up(app_state.tool_state, pixel_x, pixel_y)

        # ------------------------------------------------------------------
        # At most one repaint per frame, however many edits arrived.
        canvas.scheduler.tick()
        screen.draw_next_frame()

        # Cap the frame-rate to ~30 FPS to reduce flicker and CPU usage.
        time.sleep(1 / 30)


def run():
    logging.basicConfig(filename="painter.log", level=logging.INFO)
    while True:
        try:
            Screen.wrapper(main)
            sys.exit(0)
        except ResizeScreenError:
            logger.info("terminal resized, restarting")


if __name__ == "__main__":
    run()
