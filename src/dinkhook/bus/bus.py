from __future__ import annotations

import asyncio
from typing import Any, Dict

from dinkhook.utils.logger_util import get_logger

logger = get_logger(__name__)


class Channel:
    """One bounded queue plus the counters reported by ``/stats``."""

    def __init__(self, maxsize: int = 100):
        self.q: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.maxsize = int(maxsize)
        self.dropped = 0
        self.published = 0

    @property
    def depth(self) -> int:
        return self.q.qsize()

    def offer(self, item: Any) -> bool:
        """Enqueue without waiting; a full queue counts as a drop."""
        try:
            self.q.put_nowait(item)
        except asyncio.QueueFull:
            self.dropped += 1
            return False
        self.published += 1
        return True

    async def publish(self, item: Any, block: bool = False, timeout: float | None = None) -> bool:
        if not block:
            return self.offer(item)
        try:
            await asyncio.wait_for(self.q.put(item), timeout=timeout)
        except asyncio.TimeoutError:
            self.dropped += 1
            return False
        self.published += 1
        return True


class EventBus:
    """Named bounded channels with basic metrics.

    ``inbox`` holds notifications waiting for dispatch, ``dead_letter`` holds
    the ones whose handlers failed. Queues are bounded to support backpressure.
    """

    DEFAULT_CHANNELS = ["inbox", "dead_letter"]

    def __init__(self, default_maxsize: int = 100):
        self.default_maxsize = int(default_maxsize)
        self.channels: Dict[str, Channel] = {name: Channel(maxsize=self.default_maxsize) for name in self.DEFAULT_CHANNELS}

    def register_channel(self, channel_name: str, maxsize: int | None = None) -> Channel:
        if maxsize is None:
            maxsize = self.default_maxsize
        ch = Channel(maxsize=int(maxsize))
        self.channels[channel_name] = ch
        return ch

    def channel(self, channel_name: str) -> Channel:
        ch = self.channels.get(channel_name)
        if ch is None:
            ch = self.register_channel(channel_name)
        return ch

    def subscribe(self, channel_name: str) -> asyncio.Queue:
        return self.channel(channel_name).q

    async def publish(self, channel_name: str, item: Any, block: bool = False, timeout: float | None = None) -> bool:
        ok = await self.channel(channel_name).publish(item, block=block, timeout=timeout)
        if not ok:
            logger.warning("channel %s full (maxsize=%s); dropped item", channel_name, self.channels[channel_name].maxsize)
        return ok

    def metrics(self) -> Dict[str, Dict[str, int]]:
        """Return simple per-channel metrics."""
        return {
            name: {"queue_depth": ch.depth, "dropped": ch.dropped, "published": ch.published, "maxsize": ch.maxsize}
            for name, ch in self.channels.items()
        }
