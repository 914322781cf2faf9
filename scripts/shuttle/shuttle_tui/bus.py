"""Unbounded multi-producer, single-consumer action channel."""

from __future__ import annotations

import queue
from collections.abc import Iterator

from shuttle_tui.action import Action
from shuttle_tui.errors import ChannelError


class ActionSender:
    """Producer handle handed to components; sending never blocks."""

    def __init__(self, bus: ActionBus):
        self._bus = bus

    def send(self, action: Action) -> None:
        self._bus.send(action)

    def clone(self) -> ActionSender:
        return ActionSender(self._bus)


class ActionBus:
    """FIFO of actions.

    Backed by ``queue.SimpleQueue`` so worker threads may send too. There is
    no capacity limit: a producer that never stops will grow memory.
    """

    def __init__(self):
        self._queue: queue.SimpleQueue[Action] = queue.SimpleQueue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def sender(self) -> ActionSender:
        return ActionSender(self)

    def send(self, action: Action) -> None:
        if self._closed:
            raise ChannelError(f"action bus closed, dropped {action}")
        self._queue.put_nowait(action)

    def try_recv(self) -> Action | None:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def drain(self) -> Iterator[Action]:
        """Yield queued actions until empty, including ones sent meanwhile."""
        while True:
            action = self.try_recv()
            if action is None:
                return
            yield action

    def close(self) -> None:
        self._closed = True

    def __len__(self) -> int:
        return self._queue.qsize()
