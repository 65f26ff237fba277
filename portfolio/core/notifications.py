from pydantic import BaseModel
from typing import List
import logging

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"
INFO = "info"


class Notification(BaseModel):
    level: str
    message: str


class Notifier:
    """Collects the transient notifications produced while handling one request."""

    def __init__(self):
        self._items: List[Notification] = []

    def notify(self, level: str, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        self._items.append(notification)
        if level == ERROR:
            logger.warning(f"Notify [{level}]: {message}")
        else:
            logger.debug(f"Notify [{level}]: {message}")
        return notification

    def success(self, message: str) -> Notification:
        return self.notify(SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.notify(ERROR, message)

    def info(self, message: str) -> Notification:
        return self.notify(INFO, message)

    @property
    def items(self) -> List[Notification]:
        return list(self._items)

    def drain(self) -> List[Notification]:
        items, self._items = self._items, []
        return items
