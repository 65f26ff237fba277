"""
Hidden shortcut to the admin login page.

Clicking the footer copyright line three times, each click within two
seconds of the previous one, navigates to the login route. This only hides
the link; it is not an authentication factor.
"""

from collections import OrderedDict
from typing import Callable, Optional
import threading
import time

from portfolio.modules.auth.session_gate import LOGIN_ROUTE


class AdminRevealGesture:
    def __init__(
        self,
        clicks_required: int = 3,
        window_seconds: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.clicks_required = clicks_required
        self.window_seconds = window_seconds
        self.clock = clock
        self.count = 0
        self.last_click: Optional[float] = None

    def click(self, now: Optional[float] = None) -> Optional[str]:
        """Register a click; returns the login route when the gesture completes."""
        now = self.clock() if now is None else now
        if self.last_click is None or now - self.last_click > self.window_seconds:
            self.count = 1
        else:
            self.count += 1
        self.last_click = now
        if self.count >= self.clicks_required:
            self.count = 0
            return LOGIN_ROUTE
        return None


class RevealTracker:
    """One gesture per visitor, oldest visitors dropped once `max_visitors` is reached."""

    def __init__(
        self,
        clicks_required: int = 3,
        window_seconds: float = 2.0,
        max_visitors: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.clicks_required = clicks_required
        self.window_seconds = window_seconds
        self.max_visitors = max_visitors
        self.clock = clock
        self._gestures: "OrderedDict[str, AdminRevealGesture]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._gestures)

    def click(self, visitor_id: str, now: Optional[float] = None) -> Optional[str]:
        with self._lock:
            gesture = self._gestures.pop(visitor_id, None)
            if gesture is None:
                gesture = AdminRevealGesture(self.clicks_required, self.window_seconds, self.clock)
            self._gestures[visitor_id] = gesture
            while len(self._gestures) > self.max_visitors:
                self._gestures.popitem(last=False)
            return gesture.click(now)

    def count_for(self, visitor_id: str) -> int:
        with self._lock:
            gesture = self._gestures.get(visitor_id)
            return gesture.count if gesture else 0
