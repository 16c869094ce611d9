"""
Plumbing shared by the list controller, detail editor and creation form.

Views do not redraw themselves. Every state change ends in `_refresh()`,
which calls the listeners registered with `subscribe()`; notices (the
transient success/error messages) go out through the `notify` callback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    level: str  # "success" or "error"
    text: str


Notify = Callable[[Notice], None]


def log_notice(notice: Notice) -> None:
    """Fallback notify: send notices to the log."""
    if notice.level == "error":
        logger.error(notice.text)
    else:
        logger.info(notice.text)


class View:
    """Base for stateful views: change listeners, notices and a liveness flag."""

    def __init__(self, notify: Optional[Notify] = None):
        self._notify_cb: Notify = notify or log_notice
        self._listeners: List[Callable[["View"], None]] = []
        self.alive = True

    def subscribe(self, listener: Callable[["View"], None]) -> Callable[[], None]:
        """Register a redraw callback; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Unmount: results of requests still in flight will be ignored."""
        self.alive = False
        self._listeners.clear()

    def _refresh(self) -> None:
        if not self.alive:
            return
        for listener in list(self._listeners):
            listener(self)

    def _success(self, text: str) -> None:
        self._notify_cb(Notice("success", text))

    def _error(self, text: str) -> None:
        self._notify_cb(Notice("error", text))
