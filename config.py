from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pixel_buffer import BACKGROUND, Color, validate_color
from tile_addressing import GRID_COLOR


@dataclass
class EditorConfig:
    # Surface size in pointer units; the content buffer is this times scale_factor.
    width: int = 150
    height: int = 150
    scale_factor: float = 2
    pen_width: float = 3
    background: Color = BACKGROUND
    eraser_color: Optional[Color] = None
    grid_color: Color = GRID_COLOR
    history_limit: Optional[int] = None
    palette: List[Tuple[str, Color]] = field(
        default_factory=lambda: [
            ("Black", (0, 0, 0, 255)),
            ("Red", (255, 0, 0, 255)),
            ("Green", (0, 255, 0, 255)),
            ("Blue", (0, 0, 255, 255)),
            ("Yellow", (255, 255, 0, 255)),
            ("Cyan", (0, 255, 255, 255)),
            ("Magenta", (255, 0, 255, 255)),
            ("White", (255, 255, 255, 255)),
        ]
    )

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"invalid canvas size: {self.width}x{self.height}")
        if self.scale_factor <= 0:
            raise ValueError(f"scale_factor must be positive, got {self.scale_factor}")
        if self.pen_width <= 0:
            raise ValueError(f"pen_width must be positive, got {self.pen_width}")
        if self.history_limit is not None and self.history_limit < 1:
            raise ValueError(f"history_limit must be positive, got {self.history_limit}")
        self.background = validate_color(self.background)
        self.grid_color = validate_color(self.grid_color)
        if self.eraser_color is None:
            self.eraser_color = self.background
        self.eraser_color = validate_color(self.eraser_color)
        self.palette = [(name, validate_color(color)) for name, color in self.palette]

    @property
    def content_size(self) -> Tuple[int, int]:
        return int(self.width * self.scale_factor), int(self.height * self.scale_factor)
