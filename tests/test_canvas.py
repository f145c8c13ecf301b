"""
Tests for the editing session: gestures, commands, rendering and export.

With a 10x10 canvas at scale 1 the surface is 22x22 and the content band is
[6, 16) on both axes, so surface point (6 + n, 6 + m) is content pixel (n, m).
"""

from unittest.mock import Mock

import numpy as np
import pytest
from PIL import Image

from canvas import Canvas, Tool, ToolState
from config import EditorConfig
from pixel_buffer import PixelBuffer

from conftest import BLACK, RED, WHITE, colored_pixels

PEN = ToolState(Tool.PEN, RED)
ERASER = ToolState(Tool.ERASER, RED)
FILL_BLACK = ToolState(Tool.FILL, BLACK)
PICKER = ToolState(Tool.COLOR_PICKER, RED)


@pytest.fixture
def frames():
    return []


@pytest.fixture
def canvas(frames):
    config = EditorConfig(width=10, height=10, scale_factor=1, pen_width=1)
    return Canvas(config, on_render=frames.append)


class TestToolState:

    def test_accepts_tool_names(self):
        assert ToolState("color-picker", (1, 2, 3, 4)).tool is Tool.COLOR_PICKER

    def test_rejects_bad_color(self):
        with pytest.raises(ValueError):
            ToolState(Tool.PEN, (300, 0, 0, 255))

    def test_rejects_unknown_tool(self):
        with pytest.raises(ValueError):
            ToolState("spray", RED)


class TestStrokes:

    def test_surface_size(self, canvas):
        assert (canvas.content.width, canvas.content.height) == (10, 10)
        assert (canvas.width, canvas.height) == (22, 22)

    def test_tap_draws_a_dot_and_commits(self, canvas):
        canvas.on_pointer_down(PEN, 8, 8)
        canvas.on_pointer_up(PEN, 8, 8)
        assert colored_pixels(canvas.content, RED) == {(2, 2)}
        assert canvas.history.can_undo
        assert canvas.scheduler.pending

    def test_drag_draws_a_line(self, canvas):
        canvas.on_pointer_down(PEN, 7, 8)
        canvas.on_pointer_move(PEN, 10, 8)
        canvas.on_pointer_move(PEN, 12, 8)
        canvas.on_pointer_up(PEN, 12, 8)
        assert colored_pixels(canvas.content, RED) == {(x, 2) for x in range(1, 7)}
        assert len(canvas.history.undo_stack) == 1

    def test_whole_stroke_undoes_at_once(self, canvas):
        canvas.on_pointer_down(PEN, 7, 8)
        canvas.on_pointer_move(PEN, 12, 8)
        canvas.on_pointer_move(PEN, 12, 12)
        canvas.on_pointer_up(PEN, 12, 12)
        assert canvas.undo() is True
        assert canvas.content == PixelBuffer(10, 10)
        assert canvas.redo() is True
        assert (6, 6) in colored_pixels(canvas.content, RED)

    def test_move_without_down_is_ignored(self, canvas):
        canvas.on_pointer_move(PEN, 8, 8)
        canvas.on_pointer_up(PEN, 8, 8)
        assert canvas.content == PixelBuffer(10, 10)
        assert not canvas.history.can_undo

    def test_eraser_paints_background(self, canvas):
        canvas.on_pointer_down(FILL_BLACK, 8, 8)
        canvas.on_pointer_down(ERASER, 8, 8)
        canvas.on_pointer_up(ERASER, 8, 8)
        assert colored_pixels(canvas.content, WHITE) == {(2, 2)}

    def test_stroke_in_gutter_wraps(self, canvas):
        # Surface x = 0 is the left gutter, showing content column 5.
        canvas.on_pointer_down(PEN, 0, 8)
        canvas.on_pointer_up(PEN, 0, 8)
        assert colored_pixels(canvas.content, RED) == {(5, 2)}


class TestFillAndPick:

    def test_fill_colors_the_region(self, canvas):
        canvas.on_pointer_down(FILL_BLACK, 8, 8)
        assert len(colored_pixels(canvas.content, BLACK)) == 100
        assert canvas.history.can_undo
        assert canvas.scheduler.pending

    def test_fill_from_gutter_maps_to_content(self, canvas):
        canvas.on_pointer_down(PEN, 8, 8)
        canvas.on_pointer_up(PEN, 8, 8)
        # Gutter point (2, 2) shows content pixel (7, 7), outside the red dot.
        canvas.on_pointer_down(FILL_BLACK, 2, 2)
        assert len(colored_pixels(canvas.content, BLACK)) == 99
        assert canvas.content.get_color_at(2, 2) == RED

    def test_fill_on_seam_is_a_no_op(self, canvas):
        canvas.on_pointer_down(FILL_BLACK, 5, 8)
        assert canvas.content == PixelBuffer(10, 10)
        assert not canvas.history.can_undo
        assert not canvas.scheduler.pending

    def test_fill_with_same_color_does_not_commit(self, canvas):
        canvas.on_pointer_down(ToolState(Tool.FILL, WHITE), 8, 8)
        assert not canvas.history.can_undo

    def test_pick_reports_color(self, canvas):
        on_color_change = Mock()
        canvas.on_color_change = on_color_change
        canvas.content.set_color_at(2, 2, (9, 8, 7, 255))
        canvas.on_pointer_down(PICKER, 8, 8)
        on_color_change.assert_called_once_with((9, 8, 7, 255))

    def test_pick_on_seam_reports_nothing(self, canvas):
        on_color_change = Mock()
        canvas.on_color_change = on_color_change
        canvas.on_pointer_down(PICKER, 5, 8)
        canvas.on_pointer_down(PICKER, 40, 8)
        on_color_change.assert_not_called()

    def test_scale_factor_maps_pointer_to_device_pixels(self):
        config = EditorConfig(width=5, height=5, scale_factor=2)
        canvas = Canvas(config)
        assert canvas.addressing.line_width == 2
        # Device seam columns are [5, 7): pointer 3 lands on 6.
        canvas.on_pointer_down(FILL_BLACK, 3, 3)
        assert not canvas.history.can_undo
        canvas.on_pointer_down(FILL_BLACK, 4, 4)
        assert len(colored_pixels(canvas.content, BLACK)) == 100


class TestCommands:

    def test_clear_commits(self, canvas):
        canvas.on_pointer_down(FILL_BLACK, 8, 8)
        canvas.clear()
        assert canvas.content == PixelBuffer(10, 10)
        assert canvas.undo() is True
        assert len(colored_pixels(canvas.content, BLACK)) == 100

    def test_undo_redo_on_empty_history(self, canvas):
        assert canvas.undo() is False
        assert canvas.redo() is False
        assert not canvas.scheduler.pending

    def test_snapshot_buffer_is_independent(self, canvas):
        snapshot = canvas.snapshot_buffer()
        snapshot.set_color_at(0, 0, RED)
        assert canvas.content.get_color_at(0, 0) == WHITE

    def test_save_to_png(self, canvas, tmp_path):
        canvas.on_pointer_down(FILL_BLACK, 8, 8)
        path = tmp_path / "tile.png"
        canvas.save_to_png(str(path))
        with Image.open(path) as img:
            assert img.size == (10, 10)
            assert img.convert('RGBA').getpixel((3, 3)) == BLACK


class TestRendering:

    def test_edits_in_one_frame_paint_once(self, canvas, frames):
        canvas.on_pointer_down(PEN, 7, 7)
        for x in range(8, 14):
            canvas.on_pointer_move(PEN, x, 7)
        canvas.on_pointer_up(PEN, 14, 7)
        assert canvas.scheduler.tick() is True
        assert canvas.scheduler.tick() is False
        assert len(frames) == 1

    def test_frame_shows_latest_tiled_state(self, canvas, frames):
        canvas.on_pointer_down(FILL_BLACK, 8, 8)
        canvas.scheduler.tick()
        raster = frames[-1]
        assert raster.shape == (22, 22, 4)
        assert tuple(raster[8, 8].tolist()) == BLACK
        assert tuple(raster[0, 0].tolist()) == BLACK
        assert np.array_equal(raster, canvas.render_tiled())

    def test_frame_without_render_target_fails(self):
        canvas = Canvas(EditorConfig(width=4, height=4, scale_factor=1))
        canvas.clear()
        with pytest.raises(RuntimeError):
            canvas.scheduler.tick()

    def test_preview_has_no_seams(self, canvas):
        canvas.content.set_color_at(0, 0, RED)
        out = canvas.render_preview(25, 25)
        assert out.shape == (25, 25, 4)
        assert colored_pixels(PixelBuffer.from_array(out), RED) == {
            (x, y) for x in (0, 10, 20) for y in (0, 10, 20)
        }
        assert len(colored_pixels(PixelBuffer.from_array(out), BLACK)) == 0
