from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..models import Severity


@dataclass(frozen=True)
class Notification:
    severity: Severity
    text: str
    issued_at: float


class NotificationSlot:
    """Holds at most one live notification.

    A notification expires `window_s` seconds after it was issued. Posting a
    new one replaces the current one outright and restarts the window.
    """

    def __init__(self, window_s: float = 3.0, clock: Callable[[], float] = time.monotonic):
        self.window_s = float(window_s)
        self._clock = clock
        self._current: Optional[Notification] = None

    def post(self, severity: Severity, text: str) -> Notification:
        n = Notification(severity=Severity(severity), text=str(text), issued_at=self._clock())
        self._current = n
        return n

    def success(self, text: str) -> Notification:
        return self.post(Severity.SUCCESS, text)

    def error(self, text: str) -> Notification:
        return self.post(Severity.ERROR, text)

    @property
    def current(self) -> Optional[Notification]:
        n = self._current
        if n is None:
            return None
        if self._clock() - n.issued_at >= self.window_s:
            self._current = None
            return None
        return n

    def clear(self) -> None:
        self._current = None
