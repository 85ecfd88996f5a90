"""
Proximity engine — decides how close each tracked matter is and when to alert.

For every matter (court, target item) the engine looks at the court's
current item and its declared sequence:

  ┌──────────────────────┐
  │ current item is None │──→ WAITING
  └──────────┬───────────┘
             │
  ┌──────────▼───────────┐
  │ current in pre-alert │──→ CONFIRMED(distance) + notification (once per key)
  │ window of the target │
  └──────────┬───────────┘
             │ no
  ┌──────────▼───────────┐
  │ both in sequence     │──→ APPROXIMATE(distance), no notification
  │ target not in seq    │──→ TARGET_NOT_LISTED
  │ otherwise            │──→ OUTSIDE_WINDOW
  └──────────────────────┘

Notifications are keyed by "<court>-<current item>" and fire at most once
per key until reset() is called (the user re-saves their tracked list).
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .models import (
    Board,
    CourtRecord,
    DueNotification,
    EvaluationResult,
    Matter,
    MatterStatus,
    StatusKind,
)

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 5


# ─── Pre-Alert Window ────────────────────────────────────────────────


def pre_alert_window(sequence: Sequence[int], target: int, n_before: int) -> list[int]:
    """Return the slice of the sequence that leads up to (and includes) the target.

    If the target is in the sequence at index i, this is
    sequence[max(0, i - n_before) : i + 1].

    Otherwise the window is synthesized as consecutive integers
    max(1, target - n_before) .. target. That fallback assumes the target
    sits near its numeric position in the queue; it is a best guess only.
    """
    if target in sequence:
        idx = list(sequence).index(target)
        return list(sequence[max(0, idx - n_before) : idx + 1])
    return list(range(max(1, target - n_before), target + 1))


def _index_or_none(sequence: Sequence[int], value: int) -> int | None:
    try:
        return list(sequence).index(value)
    except ValueError:
        return None


# ─── Notification Text ───────────────────────────────────────────────


def notification_text(
    court: str, item: int, target: int, record: CourtRecord | None, prefix: str = ""
) -> tuple[str, str]:
    """Build (title, body): 'Court 1: Item 13', 'Approaching 14 · SLP(C) 123/2024'."""
    detail = f" · {record.registration}" if record and record.registration else ""
    return f"{prefix}Court {court}: Item {item}", f"Approaching {target}{detail}"


def notification_key(court: str, current_item: int) -> str:
    return f"{court}-{current_item}"


# ─── Engine ──────────────────────────────────────────────────────────


class ProximityEngine:
    """Evaluates tracked matters against a board and remembers what has fired.

    Usage:
        engine = ProximityEngine()
        result = engine.evaluate(matters, board, threshold=5)
        for alert in result.due:
            sink.notify(alert.title, alert.body)

        engine.reset()   # user edited the tracked list
    """

    def __init__(self, fired: Iterable[str] | None = None):
        self._fired: set[str] = set(fired or ())

    @property
    def fired(self) -> frozenset[str]:
        """Notification keys that have fired since the last reset."""
        return frozenset(self._fired)

    def reset(self) -> None:
        """Forget every fired key so the next evaluation can alert again."""
        if self._fired:
            logger.info("Clearing %d fired notification key(s)", len(self._fired))
        self._fired.clear()

    def evaluate(
        self, matters: Iterable[Matter], board: Board, threshold: int = DEFAULT_THRESHOLD
    ) -> EvaluationResult:
        """Compute a status for every matter and collect newly due notifications.

        Args:
            matters: Tracked (court, item) pairs, in display order.
            board: The current board snapshot.
            threshold: Items before the target to include in the window (≥ 1).

        Returns:
            EvaluationResult; `due` holds only keys that had not fired yet.
        """
        threshold = max(1, threshold)
        result = EvaluationResult()

        for matter in matters:
            status, due = self._evaluate_one(matter, board, threshold)
            result.statuses.append(status)
            if due is not None:
                result.due.append(due)

        return result

    def _evaluate_one(
        self, matter: Matter, board: Board, threshold: int
    ) -> tuple[MatterStatus, DueNotification | None]:
        record = board.courts.get(matter.court)
        current = record.current if record else None
        sequence: tuple[int, ...] = record.sequence if record else ()

        if current is None:
            return MatterStatus(matter=matter, kind=StatusKind.WAITING), None

        window = pre_alert_window(sequence, matter.item, threshold)
        synthesized = matter.item not in sequence

        # ── Primary path: current item inside the pre-alert window ──
        if current in window:
            distance = len(window) - window.index(current) - 1
            status = MatterStatus(
                matter=matter,
                current_item=current,
                kind=StatusKind.CONFIRMED,
                distance=distance,
                window_synthesized=synthesized,
            )
            return status, self._claim(matter, current, record)

        # ── Fallback: recompute from the full sequence, never notify ──
        idx_target = _index_or_none(sequence, matter.item)
        idx_current = _index_or_none(sequence, current)

        if idx_target is not None and idx_current is not None:
            return (
                MatterStatus(
                    matter=matter,
                    current_item=current,
                    kind=StatusKind.APPROXIMATE,
                    distance=max(0, idx_target - idx_current),
                ),
                None,
            )
        if idx_target is None:
            kind = StatusKind.TARGET_NOT_LISTED
        else:
            kind = StatusKind.OUTSIDE_WINDOW
        return MatterStatus(matter=matter, current_item=current, kind=kind), None

    def _claim(
        self, matter: Matter, current: int, record: CourtRecord | None
    ) -> DueNotification | None:
        """Mark the (court, current) key as fired; None if it already was."""
        key = notification_key(matter.court, current)
        if key in self._fired:
            return None
        self._fired.add(key)

        title, body = notification_text(matter.court, current, matter.item, record)
        logger.debug("Notification due for %s (target %s)", key, matter.item)
        return DueNotification(
            key=key,
            court=matter.court,
            current_item=current,
            target_item=matter.item,
            title=title,
            body=body,
        )


# ─── Rehearsal ───────────────────────────────────────────────────────


def rehearsal_notifications(
    matters: Iterable[Matter], board: Board, threshold: int = DEFAULT_THRESHOLD
) -> list[tuple[str, str]]:
    """Walk each matter's pre-alert window and produce one TEST alert per item.

    Lets the user hear what the real alerts will look like without waiting for
    the court. The fired set is not involved.
    """
    threshold = max(1, threshold)
    rehearsal: list[tuple[str, str]] = []
    for matter in matters:
        record = board.courts.get(matter.court)
        sequence = record.sequence if record else ()
        for item in pre_alert_window(sequence, matter.item, threshold):
            rehearsal.append(
                notification_text(matter.court, item, matter.item, record, prefix="TEST • ")
            )
    return rehearsal
