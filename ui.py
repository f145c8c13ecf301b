from asciimatics.widgets import Frame, Layout, Divider, Button, DropdownList, Label

from canvas import Tool


class ColorPalette:
    """
    One button per named palette colour.
    """
    def __init__(self, frame, palette, on_color_change):
        self.frame = frame
        self.on_color_change = on_color_change

        layout = Layout([1, 1])
        self.frame.add_layout(layout)
        for i, (name, color) in enumerate(palette):
            button = Button(name, on_click=lambda c=color: self.on_color_change(c))
            layout.add_widget(button, i % 2)


class ToolSelector:
    """
    Dropdown for the active tool.
    """
    def __init__(self, frame, on_tool_change):
        self.frame = frame
        self.on_tool_change = on_tool_change

        layout = Layout([1])
        self.frame.add_layout(layout)
        options = [(tool.value, tool) for tool in Tool]

        def _on_change():
            if self.on_tool_change:
                self.on_tool_change(self.dropdown.value)

        self.dropdown = DropdownList(options, label="Tool:", on_change=_on_change)
        layout.add_widget(self.dropdown)


class BrushSizeSelector:
    """
    Dropdown for the pen/eraser width (1-10).
    """

    def __init__(self, frame, initial, on_size_change):
        self.frame = frame
        self.on_size_change = on_size_change

        layout = Layout([1])
        self.frame.add_layout(layout)

        sizes = [(str(i), i) for i in range(1, 11)]

        def _on_change():
            if self.on_size_change:
                self.on_size_change(self.dropdown.value)

        self.dropdown = DropdownList(sizes, label="Brush Size:", on_change=_on_change)
        self.dropdown.value = int(initial) if 1 <= initial <= 10 else 1
        layout.add_widget(self.dropdown)


class UIFrame(Frame):
    """
    Side panel with palette, tool and brush selection and history commands.
    """
    def __init__(self, screen, canvas, on_color_change, on_tool_change, on_size_change):
        super(UIFrame, self).__init__(
            screen,
            screen.height,
            screen.width // 4,
            x=screen.width - screen.width // 4,
            y=0,
            has_border=True,
            name="UI"
        )
        # Set while the mouse is over the panel so canvas drawing is suppressed.
        self.has_focus: bool = False

        self.color_palette = ColorPalette(self, canvas.config.palette, on_color_change)
        layout = Layout([1])
        self.add_layout(layout)
        layout.add_widget(Divider())
        self.tool_selector = ToolSelector(self, on_tool_change)
        self.brush_selector = BrushSizeSelector(self, canvas.config.pen_width, on_size_change)

        commands = Layout([1, 1, 1])
        self.add_layout(commands)
        commands.add_widget(Button("Undo", on_click=canvas.undo), 0)
        commands.add_widget(Button("Redo", on_click=canvas.redo), 1)
        commands.add_widget(Button("Clear", on_click=canvas.clear), 2)

        status = Layout([1])
        self.add_layout(status)
        status.add_widget(Divider())
        self.status = Label("")
        status.add_widget(self.status)
        self.fix()

    def show_status(self, text):
        self.status.text = text
