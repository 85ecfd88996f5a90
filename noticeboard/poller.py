"""
Single-flow poll loop: fetch → evaluate → notify → wait → repeat.

Cycles never overlap. A cycle that fails is logged and the loop carries on
with the next one; the last good board stays available for display.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, Optional

from .models import Board, EvaluationResult, Matter
from .notifier import NotificationSink, deliver
from .proximity import DEFAULT_THRESHOLD, ProximityEngine, rehearsal_notifications

logger = logging.getLogger(__name__)


class PollLoop:
    """Polls the board on a fixed interval and alerts on tracked matters.

    Usage:
        loop = PollLoop(cache.get, ProximityEngine(), LogNotifier(), matters)
        loop.run()          # blocks until loop.stop() is called
    """

    def __init__(
        self,
        board_source: Callable[[], Board],
        engine: ProximityEngine,
        sink: NotificationSink,
        matters: Iterable[Matter] = (),
        threshold: int = DEFAULT_THRESHOLD,
        interval_seconds: float = 10.0,
        on_cycle: Optional[Callable[[Board, EvaluationResult], None]] = None,
    ):
        self._board_source = board_source
        self.engine = engine
        self.sink = sink
        self.matters: list[Matter] = list(matters)
        self.threshold = max(1, threshold)
        self.interval_seconds = interval_seconds
        self._on_cycle = on_cycle
        self._stop = threading.Event()
        self.last_board: Board | None = None
        self.last_result: EvaluationResult | None = None

    # ─── User Actions ────────────────────────────────────────────────

    def update_matters(self, matters: Iterable[Matter], threshold: int | None = None) -> None:
        """Replace the tracked list; previously fired alerts may fire again."""
        self.matters = list(matters)
        if threshold is not None:
            self.threshold = max(1, threshold)
        self.engine.reset()

    def clear_matters(self) -> None:
        self.matters = []

    # ─── Cycle ───────────────────────────────────────────────────────

    def run_once(self) -> EvaluationResult | None:
        """Run one fetch/evaluate/notify cycle. Returns None if the cycle failed."""
        try:
            board = self._board_source()
            result = self.engine.evaluate(self.matters, board, self.threshold)
        except Exception as e:
            logger.error("Poll cycle failed: %s", e)
            return None

        self.last_board = board
        self.last_result = result

        if result.due:
            sent = deliver(self.sink, result.due)
            logger.info("Delivered %d of %d alert(s)", sent, len(result.due))

        if self._on_cycle is not None:
            try:
                self._on_cycle(board, result)
            except Exception as e:
                logger.error("Cycle callback failed: %s", e)
        return result

    def run(self) -> None:
        """Poll until stop() is called."""
        self._stop.clear()
        logger.info("Polling every %.0fs for %d matter(s)", self.interval_seconds, len(self.matters))
        while not self._stop.is_set():
            self.run_once()
            self._stop.wait(self.interval_seconds)
        logger.info("Polling stopped")

    def stop(self) -> None:
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    # ─── Rehearsal ───────────────────────────────────────────────────

    def rehearse(self, spacing_seconds: float = 1.0) -> int:
        """Play TEST alerts along each matter's pre-alert window, spaced apart.

        Uses the last board, fetching one if none has been seen yet.
        Returns the number of alerts delivered.
        """
        board = self.last_board or self._board_source()
        self.last_board = board

        delivered = 0
        for idx, notification in enumerate(
            rehearsal_notifications(self.matters, board, self.threshold)
        ):
            if idx and self._stop.wait(spacing_seconds):
                break
            delivered += deliver(self.sink, [notification])
        return delivered
