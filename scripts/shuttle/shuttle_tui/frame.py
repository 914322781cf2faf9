"""Drawable surface handed to components during a draw pass."""

from __future__ import annotations

from dataclasses import dataclass

from rich.cells import cell_len
from rich.console import Console, RenderableType
from rich.control import Control
from rich.errors import ConsoleError, StyleError
from rich.segment import Segment, Segments

from shuttle_tui.errors import RenderError

BLANK = Segment(" ")


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def inner(self, horizontal: int = 0, vertical: int = 0) -> Rect:
        if self.width < 2 * horizontal or self.height < 2 * vertical:
            return Rect(self.x, self.y, 0, 0)
        return Rect(
            self.x + horizontal,
            self.y + vertical,
            self.width - 2 * horizontal,
            self.height - 2 * vertical,
        )

    def intersection(self, other: Rect) -> Rect:
        x = max(self.x, other.x)
        y = max(self.y, other.y)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        return Rect(x, y, max(0, right - x), max(0, bottom - y))

    def split_top(self, rows: int) -> tuple[Rect, Rect]:
        rows = max(0, min(rows, self.height))
        top = Rect(self.x, self.y, self.width, rows)
        return top, Rect(self.x, self.y + rows, self.width, self.height - rows)


class Frame:
    """Cell canvas covering the terminal area.

    Renderables are laid out by rich into their target rectangle and copied
    onto the canvas; later renders overwrite earlier ones, so draw order is
    stacking order.
    """

    def __init__(self, console: Console, area: Rect):
        self._console = console
        self._area = area
        self._cells = [[BLANK] * area.width for _ in range(area.height)]

    def size(self) -> Rect:
        return self._area

    def render(self, renderable: RenderableType, area: Rect) -> None:
        target = area.intersection(self._area)
        if target.area == 0:
            return
        options = self._console.options.update_dimensions(target.width, target.height)
        try:
            lines = self._console.render_lines(renderable, options, pad=True)
        except (ConsoleError, StyleError) as exc:
            raise RenderError(f"cannot render {type(renderable).__name__}: {exc}") from exc
        for offset, line in enumerate(lines[: target.height]):
            self._blit_line(line, target.x, target.y + offset, target.right)

    def clear(self, area: Rect) -> None:
        target = area.intersection(self._area)
        for y in range(target.y, target.bottom):
            row = self._cells[y - self._area.y]
            for x in range(target.x, target.right):
                row[x - self._area.x] = BLANK

    def _blit_line(self, line: list[Segment], x: int, y: int, right: int) -> None:
        row = self._cells[y - self._area.y]
        for segment in line:
            if segment.control:
                continue
            for ch in segment.text:
                width = cell_len(ch)
                if width == 0:
                    continue
                if x + width > right:
                    return
                row[x - self._area.x] = Segment(ch, segment.style)
                if width == 2:
                    row[x + 1 - self._area.x] = Segment("", segment.style)
                x += width

    def text_lines(self) -> list[str]:
        return ["".join(cell.text for cell in row) for row in self._cells]

    def flush(self) -> None:
        segments: list[Segment] = []
        for index, row in enumerate(self._cells):
            if index:
                segments.append(Segment.line())
            segments.extend(Segment.simplify(row))
        self._console.control(Control.home())
        self._console.print(Segments(segments), end="", soft_wrap=True, crop=False)
