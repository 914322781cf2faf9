"""Terminal driver: raw mode, event generation and drawing.

The driver puts stdin into non-canonical mode with ``termios`` and renders
through a rich ``Console`` on the alternate screen. Events (keys, resizes,
tick and render timers, termination signals) are produced by asyncio
callbacks and tasks into a queue that ``next()`` awaits.
"""

from __future__ import annotations

import asyncio
import codecs
import os
import signal
import sys
from collections.abc import Callable
from dataclasses import dataclass

from rich.console import Console

from shuttle_tui.errors import IoError
from shuttle_tui.frame import Frame, Rect
from shuttle_tui.keys import KeyDecoder, KeyEvent
from shuttle_tui.logging_config import get_logger

try:
    import termios
except ImportError:  # Windows
    termios = None

logger = get_logger("terminal")

DEFAULT_TICK_RATE = 4.0
DEFAULT_FRAME_RATE = 30.0
ESC_SEQUENCE_TIMEOUT = 0.025


@dataclass(frozen=True)
class Event:
    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class Init(Event):
    pass


@dataclass(frozen=True)
class Quit(Event):
    pass


@dataclass(frozen=True)
class Error(Event):
    message: str = ""


@dataclass(frozen=True)
class Closed(Event):
    pass


@dataclass(frozen=True)
class Tick(Event):
    pass


@dataclass(frozen=True)
class Render(Event):
    pass


@dataclass(frozen=True)
class Key(Event):
    key: KeyEvent


@dataclass(frozen=True)
class Resize(Event):
    width: int
    height: int


class Terminal:
    def __init__(self, console: Console | None = None, input_fd: int | None = None):
        self.console = console or Console()
        self._fd = sys.stdin.fileno() if input_fd is None else input_fd
        self._tick_interval = 1.0 / DEFAULT_TICK_RATE
        self._frame_interval = 1.0 / DEFAULT_FRAME_RATE
        self._area = self._console_area()
        self._decoder = KeyDecoder()
        # Multi-byte characters may be split across reads.
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._events: asyncio.Queue[Event] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tasks: list[asyncio.Task] = []
        self._saved_mode: list | None = None
        self._flush_handle: asyncio.TimerHandle | None = None
        self._signals: list[int] = []
        self._reading = False
        self._screen = False

    def tick_rate(self, hz: float) -> None:
        if hz <= 0:
            raise ValueError(f"tick rate must be positive: {hz}")
        self._tick_interval = 1.0 / hz

    def frame_rate(self, hz: float) -> None:
        if hz <= 0:
            raise ValueError(f"frame rate must be positive: {hz}")
        self._frame_interval = 1.0 / hz

    def size(self) -> Rect:
        return self._area

    def _console_area(self) -> Rect:
        width, height = self.console.size
        return Rect(0, 0, width, height)

    # -- lifecycle ---------------------------------------------------------

    def enter(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._enable_raw_mode()
        try:
            self.console.set_alt_screen(True)
            self.console.show_cursor(False)
            self._screen = True
        except OSError as exc:
            self._restore_mode()
            raise IoError(f"failed to switch to the alternate screen: {exc}") from exc

        self._area = self._console_area()
        self._start()
        self._events.put_nowait(Init())
        logger.debug("terminal entered (%sx%s)", self._area.width, self._area.height)

    def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        self._tasks.clear()
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None
        if self._loop is not None:
            if self._reading:
                self._loop.remove_reader(self._fd)
                self._reading = False
            for signum in self._signals:
                self._loop.remove_signal_handler(signum)
            self._signals.clear()

    def exit(self) -> None:
        self.stop()
        if self._screen:
            try:
                self.console.show_cursor(True)
                self.console.set_alt_screen(False)
            except OSError as exc:
                raise IoError(f"failed to leave the alternate screen: {exc}") from exc
            finally:
                self._screen = False
        self._restore_mode()

    def suspend(self) -> None:
        """Give the terminal back to the shell until the process is continued."""
        if self._loop is not None and self._reading:
            self._loop.remove_reader(self._fd)
            self._reading = False
        if self._screen:
            self.console.show_cursor(True)
            self.console.set_alt_screen(False)
            self._screen = False
        self._restore_mode()
        if hasattr(signal, "SIGTSTP"):
            os.kill(os.getpid(), signal.SIGTSTP)

    def __enter__(self) -> Terminal:
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.exit()

    # -- raw mode ----------------------------------------------------------

    def _enable_raw_mode(self) -> None:
        if termios is None:
            raise IoError("raw terminal mode requires termios")
        try:
            self._saved_mode = termios.tcgetattr(self._fd)
            mode = termios.tcgetattr(self._fd)
            mode[0] &= ~(termios.IXON | termios.ICRNL)
            mode[3] &= ~(termios.ICANON | termios.ECHO | termios.ISIG | termios.IEXTEN)
            mode[6][termios.VMIN] = 0
            mode[6][termios.VTIME] = 0
            termios.tcsetattr(self._fd, termios.TCSADRAIN, mode)
        except (termios.error, OSError) as exc:
            self._saved_mode = None
            raise IoError(f"failed to enable raw mode: {exc}") from exc

    def _restore_mode(self) -> None:
        if self._saved_mode is None:
            return
        try:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_mode)
        except (termios.error, OSError) as exc:
            raise IoError(f"failed to restore terminal mode: {exc}") from exc
        finally:
            self._saved_mode = None

    # -- event generation --------------------------------------------------

    def _start(self) -> None:
        loop = self._loop
        loop.add_reader(self._fd, self._on_input)
        self._reading = True
        for signum, callback in (
            (getattr(signal, "SIGWINCH", None), self._on_resize),
            (signal.SIGTERM, self._on_terminate),
            (getattr(signal, "SIGHUP", None), self._on_terminate),
        ):
            if signum is None:
                continue
            loop.add_signal_handler(signum, callback)
            self._signals.append(signum)
        self._tasks = [
            loop.create_task(self._every(lambda: self._tick_interval, Tick)),
            loop.create_task(self._every(lambda: self._frame_interval, Render)),
        ]

    async def _every(self, interval: Callable[[], float], event: type[Event]) -> None:
        while True:
            await asyncio.sleep(interval())
            self._events.put_nowait(event())

    def _on_input(self) -> None:
        try:
            data = os.read(self._fd, 1024)
        except BlockingIOError:
            return
        except OSError as exc:
            self._events.put_nowait(Error(str(exc)))
            return
        if not data:
            self._loop.remove_reader(self._fd)
            self._reading = False
            self._events.put_nowait(Closed())
            return

        for key in self._decoder.feed(self._utf8.decode(data)):
            self._events.put_nowait(Key(key))
        if self._decoder.pending:
            if self._flush_handle is not None:
                self._flush_handle.cancel()
            self._flush_handle = self._loop.call_later(ESC_SEQUENCE_TIMEOUT, self._flush_input)

    def _flush_input(self) -> None:
        self._flush_handle = None
        for key in self._decoder.flush():
            self._events.put_nowait(Key(key))

    def _on_resize(self) -> None:
        width, height = self.console.size
        self._events.put_nowait(Resize(width, height))

    def _on_terminate(self) -> None:
        self._events.put_nowait(Quit())

    async def next(self) -> Event:
        return await self._events.get()

    # -- drawing -----------------------------------------------------------

    def resize(self, area: Rect) -> None:
        self._area = area

    def draw(self, callback: Callable[[Frame], None]) -> None:
        frame = Frame(self.console, self._area)
        try:
            callback(frame)
        finally:
            try:
                frame.flush()
            except OSError as exc:
                raise IoError(f"failed to flush frame: {exc}") from exc
