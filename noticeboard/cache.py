"""
TTL cache for the normalized board.

Holds exactly one snapshot. A refresh replaces it wholesale; a failed
refresh leaves the previous snapshot in place so callers can still show
stale data.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from .models import Board

logger = logging.getLogger(__name__)


class BoardCache:
    """Serves the board, reloading it at most once per TTL window.

    Usage:
        cache = BoardCache(client.fetch_board, ttl_seconds=8)
        board = cache.get()
    """

    def __init__(
        self,
        loader: Callable[[], Board],
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._board: Board | None = None
        self._loaded_at: float | None = None
        self.hits = 0
        self.misses = 0

    @property
    def snapshot(self) -> Board | None:
        """The last board loaded successfully, however old."""
        return self._board

    def is_fresh(self) -> bool:
        if self._board is None or self._loaded_at is None:
            return False
        return (self._clock() - self._loaded_at) < self.ttl_seconds

    def get(self) -> Board:
        """Return the cached board, reloading it if the TTL has expired.

        Raises:
            Whatever the loader raises; the previous snapshot is kept.
        """
        with self._lock:
            cached = self._board
            if cached is not None and self.is_fresh():
                self.hits += 1
                return cached

            self.misses += 1
            board = self._loader()
            self._board = board
            self._loaded_at = self._clock()
            logger.debug("Board refreshed (%d courts)", len(board.courts))
            return board

    def invalidate(self) -> None:
        """Force the next get() to reload."""
        with self._lock:
            self._loaded_at = None
