from __future__ import annotations

import logging
from threading import RLock
from typing import Callable, List

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class ChangeNotifier:
    """Tells the presentation layer that the data set on disk has changed."""

    event_name = "external-data-update"

    def __init__(self) -> None:
        self._lock = RLock()
        self._listeners: List[Listener] = []
        self._revision = 0

    @property
    def revision(self) -> int:
        with self._lock:
            return self._revision

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def notify(self) -> None:
        with self._lock:
            self._revision += 1
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("Listener for %s failed", self.event_name)
