"""
Map the upstream cause-list payload into a canonical Board.

Each upstream row becomes one CourtRecord:
  - court number → CourtId (21/22 are the robing chambers RC1/RC2)
  - HTML stripped from the court name
  - "item_no" coerced to an integer (None outside session)
  - "court_message" run through the sequence parser

The ticker is a single line summarising every court that has something to
say, in board order.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import ValidationError

from .exceptions import UpstreamFormatError
from .models import Board, CourtRecord, UpstreamPayload, UpstreamRow
from .sequence_parser import parse_sequence

logger = logging.getLogger(__name__)

# ─── Constants ───────────────────────────────────────────────────────

# Numeric court codes the feed uses for the two robing-chamber courts.
ROBING_CHAMBERS: dict[str, str] = {
    "21": "RC1",
    "22": "RC2",
}

TICKER_LABEL = "Sequence"
TICKER_SEPARATOR = "  |  "

_HTML_TAG = re.compile(r"<[^>]*>")
_LEADING_INT = re.compile(r"[+-]?\d+")


# ─── Field Helpers ───────────────────────────────────────────────────


def court_id_for(court_no: str) -> str:
    """Translate a raw court number into its CourtId ("21" → "RC1", "7" → "7")."""
    return ROBING_CHAMBERS.get(court_no, court_no)


def clean_court_name(raw: str | None) -> str:
    """Strip HTML tags from a court name: '<b>Court 1</b>' → 'Court 1'."""
    return _HTML_TAG.sub("", raw or "").strip()


def parse_current_item(value: object) -> int | None:
    """Coerce the feed's item number to an int, reading leading digits only.

    "12" → 12, " 7 " → 7, "12A" → 12, "" → None, "--" → None.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(str(value).strip())
    if not match:
        return None
    try:
        return int(match.group(0))
    except ValueError:
        # Digit run longer than the interpreter will convert
        return None


def board_order(court_id: str) -> tuple[int, int, str]:
    """Sort key for courts: numeric ids ascending, then named courts (RC1, RC2).

    Numeric ids compare by length then text, so no int conversion is needed.
    """
    if court_id == "0" or (
        court_id.isascii() and court_id.isdigit() and not court_id.startswith("0")
    ):
        return (0, len(court_id), court_id)
    return (1, 0, "")


# ─── Normalization ───────────────────────────────────────────────────


def normalize_row(row: UpstreamRow) -> CourtRecord | None:
    """Build the CourtRecord for one upstream row (None if it has no court number)."""
    if row.court_no is None or not row.court_no.strip():
        logger.warning("Skipping upstream row without a court number: %r", row)
        return None

    court_id = court_id_for(row.court_no.strip())
    return CourtRecord(
        court_id=court_id,
        name=clean_court_name(row.court_name),
        current=parse_current_item(row.item_no),
        status=row.item_status,
        sequence=tuple(parse_sequence(row.court_message)),
        sequence_text=row.court_message,
        registration=row.registration_number_display,
        petitioner=row.petitioner_name.strip(),
        respondent=row.respondent_name.strip(),
    )


def normalize(upstream: Mapping[str, Any] | UpstreamPayload | None) -> Board:
    """Normalize a raw upstream payload into a fresh Board.

    Args:
        upstream: Decoded JSON from the feed (never mutated).

    Returns:
        Board whose courts map is keyed by CourtId.

    Raises:
        UpstreamFormatError: If the payload does not match the feed shape.
    """
    payload = _validate_payload(upstream)

    rows: dict[str, CourtRecord] = {}
    for row in payload.listed_item_details:
        record = normalize_row(row)
        if record is not None:
            rows[record.court_id] = record

    # Stable sort keeps named courts in feed order after the numeric ones
    courts = {court_id: rows[court_id] for court_id in sorted(rows, key=board_order)}

    return Board(
        updated_at=payload.now or datetime.now(timezone.utc).isoformat(),
        ticker_text=build_ticker(payload, courts),
        courts=courts,
    )


def _validate_payload(
    upstream: Mapping[str, Any] | UpstreamPayload | None,
) -> UpstreamPayload:
    if isinstance(upstream, UpstreamPayload):
        return upstream
    if upstream is None:
        return UpstreamPayload()
    try:
        return UpstreamPayload.model_validate(upstream)
    except ValidationError as e:
        raise UpstreamFormatError(
            "Upstream payload does not match the cause-list feed contract",
            details={"errors": e.errors(include_url=False)},
        ) from e


# ─── Ticker ──────────────────────────────────────────────────────────


def build_ticker(payload: UpstreamPayload, courts: Mapping[str, CourtRecord]) -> str:
    """Join every court's message (or status) into one scrolling line.

    Example:
        "Sequence — 29 Aug @ 12:55  |  Court C1: 5 TO 15  |  Court C2: PASSED OVER"
    """
    timestamp = payload.now_2 or payload.now or ""
    parts = [f"{TICKER_LABEL} — {timestamp}"]
    for court_id, record in courts.items():
        text = (record.sequence_text or record.status).strip()
        if text:
            parts.append(f"Court C{court_id}: {text}")
    return TICKER_SEPARATOR.join(parts)
