"""Thread-safe event funnel for feeding a single machine."""

import logging
import queue
from collections.abc import Hashable
from typing import Any

from .core.types import Event, TransitionRecord

logger = logging.getLogger(__name__)


class EventQueue:
    """Serialize events from many producers into one consumer.

    Producers (timer threads, I/O callbacks, interrupt adapters) call
    ``publish`` from any thread. A single consumer calls ``dispatch_next``
    or ``drain`` to deliver the queued events to a machine, in publish
    order, on the consumer's own thread. Timers are modelled by publishing
    synthetic events.
    """

    def __init__(self, maxsize: int = 256) -> None:
        self._queue: "queue.Queue[Event]" = queue.Queue(maxsize=maxsize)

    def publish(self, event: Event | Hashable, payload: Any = None) -> bool:
        """Queue an event. Returns False if the queue is full and it was dropped."""
        event = Event.of(event, payload)
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            logger.warning("Event queue full; dropping event %s", event)
            return False
        return True

    def get(self, timeout: float | None = None) -> Event:
        """Block until an event is available (raises queue.Empty on timeout)."""
        return self._queue.get(timeout=timeout)

    def dispatch_next(
        self, machine: Any, timeout: float | None = None
    ) -> TransitionRecord | None:
        """Deliver the next queued event to a machine.

        Waits up to ``timeout`` seconds (forever if None). Returns None when
        no event arrived in time.
        """
        try:
            event = self._queue.get(timeout=timeout)
        except queue.Empty:
            return None
        try:
            return machine.handle_event(event)
        finally:
            self._queue.task_done()

    def drain(self, machine: Any) -> list[TransitionRecord]:
        """Deliver every currently queued event to a machine, without blocking."""
        records = []
        while True:
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                return records
            try:
                records.append(machine.handle_event(event))
            finally:
                self._queue.task_done()

    def __len__(self) -> int:
        return self._queue.qsize()

    @property
    def empty(self) -> bool:
        """True when no events are pending."""
        return self._queue.empty()
