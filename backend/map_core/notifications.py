"""Toast channel: short-lived user notifications."""
import logging
import time
from dataclasses import dataclass
from typing import Callable

from map_core.constants import TOAST_DURATION_S, TOAST_FADE_S

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class Toast:
    message: str
    shown_at: float
    duration_s: float = TOAST_DURATION_S

    def expires_at(self) -> float:
        return self.shown_at + self.duration_s + TOAST_FADE_S

    def is_visible(self, now: float) -> bool:
        return now < self.expires_at()


class Notifier:
    """Keeps each toast only until its timer runs out."""

    def __init__(self, clock: Callable[[], float] = time.monotonic, duration_s: float = TOAST_DURATION_S) -> None:
        self._clock = clock
        self._duration_s = duration_s
        self._toasts: list[Toast] = []

    def notify(self, message: str) -> Toast:
        toast = Toast(message=message, shown_at=self._clock(), duration_s=self._duration_s)
        self._toasts.append(toast)
        LOG.info("toast: %s", message)
        return toast

    def visible(self) -> list[Toast]:
        """Toasts still on screen; expired ones are dropped."""
        now = self._clock()
        self._toasts = [t for t in self._toasts if t.is_visible(now)]
        return list(self._toasts)

    def clear(self) -> None:
        self._toasts.clear()
