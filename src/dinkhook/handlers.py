from __future__ import annotations

from typing import Optional

from dinkhook.dispatch import Dispatcher, Notification
from dinkhook.store import InMemoryNotificationStore
from dinkhook.summary import summarize
from dinkhook.utils.logger_util import get_logger
from dinkhook.valuation import notification_value

logger = get_logger(__name__)


class SummaryHandler:
    """Logs a one-line summary of each notification and keeps it on the stored record."""

    def __init__(self, store: Optional[InMemoryNotificationStore] = None):
        self.store = store

    def __call__(self, notification: Notification) -> str:
        text = summarize(notification)
        value = notification_value(notification)
        if self.store is not None:
            self.store.set_summary(notification.id, text)
        if value is not None:
            logger.info("[%s] %s (value %s gp)", notification.type, text, f"{value:,}")
        else:
            logger.info("[%s] %s", notification.type, text)
        return text


def register_default_handlers(dispatcher: Dispatcher, store: Optional[InMemoryNotificationStore] = None) -> Dispatcher:
    dispatcher.register_all(SummaryHandler(store))
    return dispatcher
