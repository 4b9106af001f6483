from .bus import Channel, EventBus
from .worker import DispatchWorker

__all__ = ["Channel", "EventBus", "DispatchWorker"]
