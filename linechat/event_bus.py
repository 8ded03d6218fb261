from __future__ import annotations

import asyncio
import logging
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from linechat.events import AppEvent

logger = logging.getLogger(__name__)


@dataclass
class EventBusMetrics:
    published: int = 0
    delivered: int = 0
    retried: int = 0
    dropped: int = 0
    handler_failures: int = 0


class EventBus:
    """Loop-bound publish/subscribe queue.

    Handlers run on the event loop that called ``start()``, one event at a
    time, so they never interleave with the connection's own callbacks.
    """

    def __init__(self, maxsize: int = 512, critical_handler_retries: int = 1):
        self._maxsize = maxsize
        self._critical_handler_retries = max(0, critical_handler_retries)
        self._pending: deque[AppEvent] = deque()
        self._handlers: dict[type[AppEvent], list[Callable[[Any], None]]] = defaultdict(
            list
        )
        self._wakeup: asyncio.Event | None = None
        self._worker: asyncio.Task[None] | None = None

        self.metrics = EventBusMetrics()

    def subscribe(
        self, event_type: type[AppEvent], handler: Callable[[Any], None]
    ) -> None:
        self._handlers[event_type].append(handler)

    def publish(self, event: AppEvent, *, critical: bool = False) -> bool:
        event.critical = event.critical or critical
        # Critical events are queued past the bound; only best-effort ones drop.
        if not event.critical and len(self._pending) >= self._maxsize:
            self.metrics.dropped += 1
            logger.warning(
                "Event queue full; dropped topic=%s source=%s",
                event.topic,
                event.source,
            )
            return False
        self._pending.append(event)
        self.metrics.published += 1
        if self._wakeup is not None:
            self._wakeup.set()
        return True

    def start(self) -> None:
        if self._worker is not None:
            return
        self._wakeup = asyncio.Event()
        self._worker = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        worker = self._worker
        if worker is None:
            return
        self._worker = None
        worker.cancel()
        try:
            await worker
        except asyncio.CancelledError:
            pass
        self._wakeup = None
        self.drain()

    async def _run(self) -> None:
        assert self._wakeup is not None
        while True:
            await self._wakeup.wait()
            self._wakeup.clear()
            self.drain()

    def drain(self) -> int:
        """Dispatch everything queued so far; returns the number of events handled."""
        count = 0
        while self._pending:
            self._dispatch(self._pending.popleft())
            count += 1
        return count

    def _dispatch(self, event: AppEvent) -> None:
        for event_type, handlers in list(self._handlers.items()):
            if not isinstance(event, event_type):
                continue
            for handler in list(handlers):
                self._dispatch_to_handler(event, handler)

    def _dispatch_to_handler(
        self, event: AppEvent, handler: Callable[[Any], None]
    ) -> None:
        max_attempts = 1 + (self._critical_handler_retries if event.critical else 0)
        for attempt in range(max_attempts):
            try:
                handler(event)
                self.metrics.delivered += 1
                return
            except Exception:
                self.metrics.handler_failures += 1
                if attempt + 1 < max_attempts:
                    event.retry_count += 1
                    self.metrics.retried += 1
                    continue
                logger.exception(
                    "Event handler failed topic=%s source=%s critical=%s retries=%s",
                    event.topic,
                    event.source,
                    event.critical,
                    event.retry_count,
                )

    @property
    def backlog(self) -> int:
        return len(self._pending)

    def snapshot_metrics(self) -> EventBusMetrics:
        return EventBusMetrics(
            published=self.metrics.published,
            delivered=self.metrics.delivered,
            retried=self.metrics.retried,
            dropped=self.metrics.dropped,
            handler_failures=self.metrics.handler_failures,
        )
