"""Transient user-facing messages, in the same categories the web UI flashes."""
import logging
from collections import namedtuple
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Notification = namedtuple('Notification', ['message', 'category'])

_LEVELS = {
    'success': logging.INFO,
    'info': logging.INFO,
    'danger': logging.WARNING,
}


class Notifier:
    def __init__(self, on_notify: Optional[Callable[[Notification], None]] = None):
        self.on_notify = on_notify
        self._pending: List[Notification] = []

    def notify(self, message: str, category: str = 'info'):
        notification = Notification(message, category)
        logger.log(_LEVELS.get(category, logging.INFO), '[%s] %s', category, message)
        self._pending.append(notification)
        if self.on_notify is not None:
            self.on_notify(notification)

    def pop_all(self) -> List[Notification]:
        """Return and clear the messages not yet shown."""
        pending, self._pending = self._pending, []
        return pending
