"""
Pydantic models for the noticeboard — typed at every boundary.

Upstream rows are accepted leniently (the feed is operator-typed and
inconsistent), then normalized into frozen records. A Board is replaced
wholesale on every refresh; nothing here is ever patched in place.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel


# ─── Upstream Feed ──────────────────────────────────────────────────


def _as_text(value: Any) -> Optional[str]:
    """Coerce a JSON scalar to text the way the feed intends it (12.0 → "12")."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class UpstreamRow(BaseModel):
    """One court row as it arrives from the cause-list feed.

    Every field is optional: a missing or null value becomes an empty string,
    except the two numeric codes, which stay None so they can be told apart.
    """

    model_config = ConfigDict(extra="ignore")

    court_no: Optional[str] = None
    item_no: Optional[str] = None
    court_message: str = ""
    item_status: str = ""
    court_name: str = ""
    registration_number_display: str = ""
    petitioner_name: str = ""
    respondent_name: str = ""

    @field_validator("court_no", "item_no", mode="before")
    @classmethod
    def _coerce_code(cls, value: Any) -> Optional[str]:
        return _as_text(value)

    @field_validator(
        "court_message",
        "item_status",
        "court_name",
        "registration_number_display",
        "petitioner_name",
        "respondent_name",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _as_text(value) or ""


class UpstreamPayload(BaseModel):
    """Top-level feed payload: timestamps plus the list of court rows."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    now: Optional[str] = None
    now_2: Optional[str] = None
    listed_item_details: list[UpstreamRow] = Field(
        default_factory=list, alias="listedItemDetails"
    )

    @field_validator("now", "now_2", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Optional[str]:
        return _as_text(value) or None

    @field_validator("listed_item_details", mode="before")
    @classmethod
    def _null_rows_are_empty(cls, value: Any) -> Any:
        return [] if value is None else value


# ─── Board ──────────────────────────────────────────────────────────


class _BoardModel(BaseModel):
    """Board API models serialize with camelCase keys (courtId, sequenceText, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CourtRecord(_BoardModel):
    """Canonical state of one court for one poll cycle."""

    court_id: str
    name: str = ""
    current: Optional[int] = None  # Item being called right now; None outside session
    status: str = ""
    sequence: tuple[int, ...] = ()  # Unique, in first-seen order
    sequence_text: str = ""  # Raw court message the sequence was parsed from
    registration: str = ""
    petitioner: str = ""
    respondent: str = ""


class Board(_BoardModel):
    """A full snapshot of the noticeboard."""

    updated_at: str
    ticker_text: str = ""
    courts: dict[str, CourtRecord] = Field(default_factory=dict)


# ─── Tracked Matters ────────────────────────────────────────────────


class Matter(BaseModel):
    """A user's subscription to one item in one court."""

    model_config = ConfigDict(frozen=True)

    court: str
    item: int = Field(ge=0)

    def __str__(self) -> str:
        return f"C{self.court}/{self.item}"


# ─── Proximity Results ──────────────────────────────────────────────


class StatusKind(str, Enum):
    """How a matter's status was derived."""

    WAITING = "waiting"  # Court not in session (or absent from the board)
    CONFIRMED = "confirmed"  # Current item lies inside the pre-alert window
    APPROXIMATE = "approximate"  # Distance recomputed from the full sequence
    TARGET_NOT_LISTED = "target_not_listed"
    OUTSIDE_WINDOW = "outside_window"


class MatterStatus(BaseModel):
    """Per-matter outcome of one evaluation."""

    model_config = ConfigDict(frozen=True)

    matter: Matter
    current_item: Optional[int] = None
    kind: StatusKind
    distance: Optional[int] = None
    # True when the target was missing from the sequence and the window was
    # synthesized from consecutive item numbers.
    window_synthesized: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> str:
        """Human-readable status line."""
        if self.kind in (StatusKind.CONFIRMED, StatusKind.APPROXIMATE):
            return "Now" if self.distance == 0 else f"{self.distance} away"
        if self.kind == StatusKind.TARGET_NOT_LISTED:
            return "Target not in declared sequence"
        if self.kind == StatusKind.OUTSIDE_WINDOW:
            return "In session (outside window)"
        return "Waiting for session"


class DueNotification(BaseModel):
    """An alert the engine decided to fire for a (court, current item) pair."""

    model_config = ConfigDict(frozen=True)

    key: str  # "<court>-<current item>"
    court: str
    current_item: int
    target_item: int
    title: str
    body: str


class EvaluationResult(BaseModel):
    """Statuses for every tracked matter plus the notifications newly due."""

    statuses: list[MatterStatus] = Field(default_factory=list)
    due: list[DueNotification] = Field(default_factory=list)
