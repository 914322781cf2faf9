"""Shared behaviour of the project and deployment list screens."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any

from rich.table import Table
from rich.text import Text

from shuttle_tui.action import Action, Refresh
from shuttle_tui.components import Component, empty_panel, panel_from_table
from shuttle_tui.components.actions import SelectFirst, SelectLast, SelectNext, SelectPrevious
from shuttle_tui.errors import ChannelError
from shuttle_tui.formatting import state_style
from shuttle_tui.frame import Frame, Rect
from shuttle_tui.layout import body_area, select_layout_mode
from shuttle_tui.logging_config import get_logger
from shuttle_tui.models import PanelData
from shuttle_tui.tab import Tab

logger = get_logger("components")

Collector = Callable[[Mapping[str, Any], Path], PanelData]

# Panel border, header row and table padding.
CHROME_ROWS = 3


class ServiceList(Component):
    """A selectable table of items fetched from the deployment service.

    Fetches run on a single worker thread. The worker announces completion
    with a ``loaded`` action; if that action arrives while the tab is hidden
    it never reaches ``update``, so the finished future is also checked on
    every later action.
    """

    tab: Tab
    key = ""
    title = ""
    loaded: type[Action]
    # (header, item key); narrow terminals only show the first two.
    columns: tuple[tuple[str, str], ...] = ()

    def __init__(self, collect: Collector):
        self.collect = collect
        self.data = PanelData(key=self.key, title=self.title, meta={"count": 0})
        self.selected = 0
        self._executor: ThreadPoolExecutor | None = None
        self._pending: Future | None = None

    def assigned_tab(self) -> Tab | None:
        return self.tab

    @property
    def loading(self) -> bool:
        return self._pending is not None

    def init(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"{self.key}-fetch")
        self.refresh()

    def teardown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    def refresh(self) -> None:
        if self._executor is None or self._pending is not None:
            return
        logger.debug("refreshing %s", self.key)
        self._pending = self._executor.submit(self._fetch)

    def _fetch(self) -> PanelData:
        settings = self.config.settings if self.config is not None else {}
        data_dir = self.config.data_dir if self.config is not None else Path.cwd()
        try:
            data = self.collect(settings, data_dir)
        except Exception as exc:
            logger.exception("collecting %s failed", self.key)
            data = PanelData.failed(self.key, self.title, f"collect failed: {exc}")
        try:
            self.send(self.loaded(data))
        except ChannelError:
            logger.debug("action bus closed before %s finished loading", self.key)
        return data

    def apply(self, data: PanelData) -> None:
        self.data = data
        count = len(data.items)
        self.selected = min(self.selected, count - 1) if count else 0

    def update(self, action: Action) -> Action | None:
        if isinstance(action, self.loaded):
            self.apply(action.data)
        if self._pending is not None and self._pending.done():
            pending, self._pending = self._pending, None
            self.apply(pending.result())

        if isinstance(action, Refresh):
            self.refresh()
        elif isinstance(action, SelectNext):
            if self.data.items:
                self.selected = min(self.selected + 1, len(self.data.items) - 1)
        elif isinstance(action, SelectPrevious):
            self.selected = max(self.selected - 1, 0)
        elif isinstance(action, SelectFirst):
            self.selected = 0
        elif isinstance(action, SelectLast):
            self.selected = max(len(self.data.items) - 1, 0)
        return None

    def visible_window(self, rows: int) -> range:
        count = len(self.data.items)
        rows = max(1, rows)
        start = max(0, self.selected - rows + 1)
        return range(start, min(count, start + rows))

    def table(self, width: int, rows: int) -> Table:
        columns = self.columns
        if select_layout_mode(width) == "narrow":
            columns = columns[:2]

        table = Table(box=None, expand=True)
        for header, _ in columns:
            table.add_column(header, overflow="ellipsis", no_wrap=True)
        for index in self.visible_window(rows):
            item = self.data.items[index]
            cells = []
            for _, key in columns:
                value = str(item.get(key, "-"))
                cells.append(Text(value, style=state_style(value)) if key == "state" else value)
            table.add_row(*cells, style="reverse" if index == self.selected else None)
        return table

    def panel_title(self) -> str:
        title = f"{self.title} ({self.data.meta.get('count', len(self.data.items))})"
        if self.loading:
            title += " loading…"
        return title

    def draw(self, frame: Frame, area: Rect) -> None:
        target = body_area(area)
        if not self.data.items:
            if self.data.errors:
                message = self.data.errors[0]
            else:
                message = "Loading…" if self.loading else f"No {self.key}"
            frame.render(empty_panel(self.panel_title(), message), target)
            return

        table = self.table(target.width, target.height - CHROME_ROWS)
        frame.render(panel_from_table(self.panel_title(), self.data.status, table), target)
