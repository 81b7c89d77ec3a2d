from __future__ import annotations

import threading
from collections import OrderedDict

MAX_TRACKED_VIEWS = 512


class RenderTracker:
    """Tracks the newest render request per logical view.

    ``begin`` hands out a token; ``publish`` reports whether that token is
    still the newest for its view, so a slow superseded render is dropped.
    Only tokens are kept, never render output. Views past
    ``max_views`` are evicted oldest-first.
    """

    def __init__(self, max_views: int = MAX_TRACKED_VIEWS):
        self._lock = threading.Lock()
        self._latest: OrderedDict[str, int] = OrderedDict()
        self.max_views = max_views

    def begin(self, view: str, token: int | None = None) -> int:
        """Register a request; without a client ``token`` the next one is issued."""
        with self._lock:
            current = self._latest.get(view, 0)
            if token is None:
                token = current + 1
            if token > current:
                self._latest[view] = token
            if view in self._latest:
                self._latest.move_to_end(view)
            while len(self._latest) > self.max_views:
                self._latest.popitem(last=False)
            return token

    def publish(self, view: str, token: int) -> bool:
        with self._lock:
            return self._latest.get(view) == token

    def __len__(self) -> int:
        with self._lock:
            return len(self._latest)
