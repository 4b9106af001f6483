from __future__ import annotations

import inspect
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from dinkhook.intake import Attachment, Submission
from dinkhook.schemas.envelope import Envelope, WireModel
from dinkhook.schemas.extras import KNOWN_TYPES
from dinkhook.utils.logger_util import get_logger

logger = get_logger(__name__)

Handler = Callable[["Notification"], Any]


def handler_name(handler: Handler) -> str:
    return getattr(handler, "__name__", type(handler).__name__)


@dataclass
class Notification:
    """An accepted envelope as handed to handlers."""

    envelope: Envelope
    extra: Optional[WireModel] = None
    attachment: Optional[Attachment] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    received_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def type(self) -> str:
        return self.envelope.type

    @property
    def player_name(self) -> Optional[str]:
        return self.envelope.player_name

    @property
    def known(self) -> bool:
        return self.type in KNOWN_TYPES

    @classmethod
    def from_submission(cls, submission: Submission, notification_id: Optional[str] = None) -> "Notification":
        kwargs = {}
        if notification_id is not None:
            kwargs["id"] = notification_id
        return cls(envelope=submission.envelope, extra=submission.extra, attachment=submission.attachment, **kwargs)


@dataclass
class DispatchResult:
    type: str
    handled: bool
    results: List[Any] = field(default_factory=list)


class DispatchError(Exception):
    """A handler raised while processing a notification."""

    def __init__(self, notification: Notification, handler: Handler, cause: BaseException):
        name = handler_name(handler)
        super().__init__(f"{name} failed on {notification.type} {notification.id}: {cause}")
        self.notification = notification
        self.handler_name = name


def log_unhandled(notification: Notification) -> None:
    if notification.known:
        logger.info("no handler for %s from %s; ignoring", notification.type, notification.envelope.player)
    else:
        logger.warning("unrecognized notification type %r from %s; ignoring", notification.type, notification.envelope.player)


class Dispatcher:
    """Routes notifications to handlers keyed by their ``type`` tag.

    Several handlers may be registered per tag and run in registration order.
    Tags with no handler go to ``default_handler``, which by default only logs.
    """

    def __init__(self, default_handler: Handler = log_unhandled):
        self._handlers: Dict[str, List[Handler]] = {}
        self.default_handler = default_handler

    def register(self, event_type: str, handler: Handler) -> Handler:
        self._handlers.setdefault(event_type, []).append(handler)
        return handler

    def register_all(self, handler: Handler, event_types=KNOWN_TYPES) -> Handler:
        for t in sorted(event_types):
            self.register(t, handler)
        return handler

    def on(self, *event_types: str):
        """Decorator form of ``register``."""
        def deco(fn: Handler) -> Handler:
            for t in event_types:
                self.register(t, fn)
            return fn
        return deco

    def handlers_for(self, event_type: str) -> List[Handler]:
        return list(self._handlers.get(event_type, ()))

    @property
    def registered_types(self) -> List[str]:
        return sorted(t for t, hs in self._handlers.items() if hs)

    async def _call(self, handler: Handler, notification: Notification) -> Any:
        try:
            out = handler(notification)
            if inspect.isawaitable(out):
                out = await out
            return out
        except Exception as exc:
            logger.error("handler %s failed for %s %s", handler_name(handler), notification.type, notification.id, exc_info=True)
            raise DispatchError(notification, handler, exc) from exc

    async def dispatch(self, notification: Notification) -> DispatchResult:
        handlers = self.handlers_for(notification.type)
        if not handlers:
            await self._call(self.default_handler, notification)
            return DispatchResult(type=notification.type, handled=False)
        results = []
        for h in handlers:
            results.append(await self._call(h, notification))
        return DispatchResult(type=notification.type, handled=True, results=results)
