from __future__ import annotations

import asyncio
from typing import List

from dinkhook.bus.bus import EventBus
from dinkhook.dispatch import DispatchError, Dispatcher, Notification
from dinkhook.store import InMemoryNotificationStore
from dinkhook.utils.logger_util import get_logger

logger = get_logger(__name__)


class DispatchWorker:
    """Drains the bus inbox and dispatches each notification off the request path.

    Handler failures are recorded on the store and the notification is pushed
    to ``dead_letter``; the loop keeps running.
    """

    def __init__(self, bus: EventBus, dispatcher: Dispatcher, store: InMemoryNotificationStore, concurrency: int = 1):
        self.bus = bus
        self.dispatcher = dispatcher
        self.store = store
        self.concurrency = int(concurrency)
        self._tasks: List[asyncio.Task] = []
        self.processed = 0
        self.failed = 0

    @property
    def running(self) -> bool:
        return any(not t.done() for t in self._tasks)

    async def process(self, notification: Notification) -> None:
        try:
            result = await self.dispatcher.dispatch(notification)
        except DispatchError as exc:
            self.failed += 1
            self.store.set_status(notification.id, "failed", error=str(exc))
            await self.bus.publish("dead_letter", notification)
            return
        self.processed += 1
        self.store.set_status(notification.id, "handled" if result.handled else "unhandled")

    async def _loop(self, n: int):
        q = self.bus.subscribe("inbox")
        logger.debug("dispatch worker %s started", n)
        while True:
            notification = await q.get()
            try:
                await self.process(notification)
            except Exception:
                # keep draining; anything here is a bug outside the handlers
                logger.exception("dispatch worker %s crashed on %s", n, getattr(notification, "id", notification))
            finally:
                q.task_done()

    def start(self):
        if self.running:
            return
        self._tasks = [asyncio.create_task(self._loop(i)) for i in range(self.concurrency)]
        logger.info("started %s dispatch worker(s)", self.concurrency)

    async def stop(self):
        for t in self._tasks:
            t.cancel()
        for t in self._tasks:
            try:
                await t
            except asyncio.CancelledError:
                pass
        self._tasks = []

    async def drain(self):
        """Wait until every queued notification has been processed."""
        await self.bus.subscribe("inbox").join()
